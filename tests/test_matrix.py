"""Tests for the Matrix value type and MatrixBuffer."""

import numpy as np
import pytest

from numerics_lab.data.matrix import Matrix, MatrixBuffer, MatrixElement
from numerics_lab.exceptions import (
    DimensionMismatchError,
    IndexOutOfRangeError,
    ShapeError,
)


class TestMatrixConstruction:
    """Tests for Matrix constructors."""

    def test_from_nested_lists(self) -> None:
        """Nested lists should give the matching shape and entries."""
        m = Matrix([[1, 2, 3], [4, 5, 6]])
        assert m.shape == (2, 3)
        assert m.get(1, 2) == 6.0

    def test_copies_input_array(self) -> None:
        """Mutating the source array must not change the matrix."""
        source = np.array([[1.0, 2.0], [3.0, 4.0]])
        m = Matrix(source)
        source[0, 0] = 100.0
        assert m.get(0, 0) == 1.0

    def test_copy_constructor(self) -> None:
        """Matrix(other) is an equal matrix with its own storage."""
        original = Matrix([[1.0, 2.0], [3.0, 4.0]])
        copy = Matrix(original)
        assert copy == original
        assert copy is not original
        assert not np.shares_memory(copy.to_array(), original.to_array())
        assert not np.shares_memory(copy._data, original._data)

    def test_zeros(self) -> None:
        """zeros() should have every entry 0."""
        m = Matrix.zeros(3, 2)
        assert m.shape == (3, 2)
        assert np.all(m.to_array() == 0.0)

    def test_identity(self) -> None:
        """identity() should match numpy's eye."""
        assert np.array_equal(Matrix.identity(4).to_array(), np.eye(4))

    def test_column_vector(self) -> None:
        """column_vector() should be n×1."""
        v = Matrix.column_vector([1.0, 2.0, 3.0])
        assert v.shape == (3, 1)
        assert v.column_to_list() == [1.0, 2.0, 3.0]

    @pytest.mark.parametrize(
        "values",
        [
            [1.0, 2.0],
            [[]],
            [[[1.0]]],
        ],
    )
    def test_rejects_bad_shapes(self, values) -> None:
        """Non-2-D or empty input should raise ShapeError."""
        with pytest.raises(ShapeError):
            Matrix(values)

    @pytest.mark.parametrize("rows,columns", [(0, 2), (2, 0), (-1, 1)])
    def test_zeros_rejects_non_positive_dimensions(self, rows, columns) -> None:
        """Dimensions must be at least 1."""
        with pytest.raises(ShapeError):
            Matrix.zeros(rows, columns)


class TestMatrixAccess:
    """Tests for element, row and column access."""

    @pytest.fixture
    def m(self) -> Matrix:
        return Matrix([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]])

    @pytest.mark.parametrize("row,column", [(-1, 0), (3, 0), (0, 2), (0, -1)])
    def test_get_out_of_range(self, m, row, column) -> None:
        """Out-of-range and negative indices should raise IndexOutOfRangeError."""
        with pytest.raises(IndexOutOfRangeError):
            m.get(row, column)

    def test_index_error_is_index_error(self, m) -> None:
        """IndexOutOfRangeError should also be a builtin IndexError."""
        with pytest.raises(IndexError):
            m.get(10, 10)

    def test_row_and_column(self, m) -> None:
        """row() and column() should return 1×n and n×1 matrices."""
        assert m.row(1).to_list() == [[3.0, 4.0]]
        assert m.column(1).column_to_list() == [2.0, 4.0, 6.0]

    def test_diagonal(self) -> None:
        """diagonal() should be a column of the main diagonal."""
        m = Matrix([[1.0, 2.0], [3.0, 4.0]])
        assert m.diagonal().column_to_list() == [1.0, 4.0]

    def test_backing_array_read_only(self, m) -> None:
        """to_array() returns a copy, so the matrix is unaffected."""
        array = m.to_array()
        array[0, 0] = -1.0
        assert m.get(0, 0) == 1.0

    def test_column_to_list_requires_vector(self, m) -> None:
        """column_to_list() on a wide matrix should raise ShapeError."""
        with pytest.raises(ShapeError):
            m.column_to_list()


class TestMatrixArithmetic:
    """Tests for pure arithmetic operations."""

    @pytest.fixture
    def a(self) -> Matrix:
        return Matrix([[1.0, 2.0], [3.0, 4.0]])

    @pytest.fixture
    def b(self) -> Matrix:
        return Matrix([[0.5, -1.0], [2.0, 0.0]])

    def test_add_and_subtract(self, a, b) -> None:
        """add/subtract should match numpy and leave operands unchanged."""
        assert np.allclose(a.add(b).to_array(), a.to_array() + b.to_array())
        assert np.allclose(a.subtract(b).to_array(), a.to_array() - b.to_array())
        assert a == Matrix([[1.0, 2.0], [3.0, 4.0]])

    def test_add_shape_mismatch(self, a) -> None:
        """Adding matrices of different shapes should raise ShapeError."""
        with pytest.raises(ShapeError):
            a.add(Matrix.zeros(3, 2))

    def test_multiply_left_and_right(self, a, b) -> None:
        """multiply_left(m) is m·self and multiply_right(m) is self·m."""
        assert np.allclose(a.multiply_left(b).to_array(), b.to_array() @ a.to_array())
        assert np.allclose(a.multiply_right(b).to_array(), a.to_array() @ b.to_array())

    def test_multiply_dimension_mismatch(self, a) -> None:
        """Inner dimension disagreement should raise DimensionMismatchError."""
        with pytest.raises(DimensionMismatchError):
            a.multiply_right(Matrix.zeros(3, 1))
        with pytest.raises(ShapeError):
            a.multiply_left(Matrix.zeros(1, 3))

    def test_transposed(self) -> None:
        """transposed() should swap the axes."""
        m = Matrix([[1.0, 2.0, 3.0]])
        assert m.transposed().shape == (3, 1)
        assert m.transposed().column_to_list() == [1.0, 2.0, 3.0]

    def test_vector_norm(self) -> None:
        """vector_norm() should be the Euclidean norm."""
        assert Matrix.column_vector([3.0, 4.0]).vector_norm() == 5.0

    def test_vector_norm_requires_column(self, a) -> None:
        """vector_norm() on a non-vector should raise ShapeError."""
        with pytest.raises(ShapeError):
            a.vector_norm()

    def test_operators_delegate(self, a, b) -> None:
        """+, -, @, unary - and scalar * should match the named operations."""
        assert a + b == a.add(b)
        assert a - b == a.subtract(b)
        assert a @ b == a.multiply_right(b)
        assert -a == a.negate()
        assert 2 * a == a.scaled(2.0)
        assert a * 0.5 == a.scaled(0.5)

    def test_operators_reject_wrong_types(self, a) -> None:
        """Operands of the wrong type should raise TypeError."""
        with pytest.raises(TypeError):
            a + 1.0  # noqa: B018
        with pytest.raises(TypeError):
            a @ [[1.0], [2.0]]  # noqa: B018
        with pytest.raises(TypeError):
            a * "x"  # noqa: B018
        with pytest.raises(TypeError):
            a.add(None)  # type: ignore[arg-type]


class TestMatrixComparison:
    """Tests for equality and symmetry checks."""

    def test_exact_equality(self) -> None:
        """Equal entries and shapes compare equal and hash alike."""
        a = Matrix([[1.0, 2.0]])
        b = Matrix([[1.0, 2.0]])
        assert a == b
        assert hash(a) == hash(b)

    def test_shape_mismatch_not_equal(self) -> None:
        """Different shapes are never equal."""
        assert Matrix([[1.0, 2.0]]) != Matrix([[1.0], [2.0]])
        assert not Matrix([[1.0, 2.0]]).equals_precision(Matrix([[1.0], [2.0]]))

    def test_equals_precision(self) -> None:
        """equals_precision should use an absolute tolerance (default 0.001)."""
        a = Matrix([[1.0, 2.0]])
        assert a.equals_precision(Matrix([[1.0005, 1.9995]]))
        assert not a.equals_precision(Matrix([[1.01, 2.0]]))
        assert a.equals_precision(Matrix([[1.01, 2.0]]), precision=0.1)

    def test_is_symmetric(self) -> None:
        """is_symmetric should respect the tolerance and require squareness."""
        assert Matrix([[2.0, 1.0], [1.0, 2.0]]).is_symmetric()
        assert not Matrix([[2.0, 1.0], [1.5, 2.0]]).is_symmetric()
        assert Matrix([[2.0, 1.0], [1.05, 2.0]]).is_symmetric(precision=0.1)
        assert not Matrix([[1.0, 2.0]]).is_symmetric()

    def test_max_asymmetry(self) -> None:
        """max_asymmetry should be the largest |A_ij - A_ji|."""
        m = Matrix([[0.0, 1.0, 2.0], [1.0, 0.0, 0.0], [5.0, 0.0, 0.0]])
        assert m.max_asymmetry() == 3.0


class TestMatrixBuffer:
    """Tests for in-place row and column operations."""

    @pytest.fixture
    def buffer(self) -> MatrixBuffer:
        return MatrixBuffer.from_array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])

    def test_from_matrix_is_deep_copy(self) -> None:
        """Mutating the buffer must not touch the source matrix."""
        m = Matrix([[1.0, 2.0], [3.0, 4.0]])
        buffer = MatrixBuffer.from_matrix(m)
        buffer.set(0, 0, 99.0)
        assert m.get(0, 0) == 1.0

    def test_freeze_is_snapshot(self, buffer) -> None:
        """A frozen snapshot should not follow later mutations."""
        frozen = buffer.freeze()
        buffer.set(0, 0, -1.0)
        assert frozen.get(0, 0) == 1.0

    def test_set_out_of_range(self, buffer) -> None:
        """set() should be bounds-checked."""
        with pytest.raises(IndexOutOfRangeError):
            buffer.set(2, 0, 1.0)

    def test_sum_rows(self, buffer) -> None:
        """sum_rows(dst, src, k) adds k times src to dst."""
        buffer.sum_rows(1, 0, -4.0)
        assert buffer.freeze().to_list() == [[1.0, 2.0, 3.0], [0.0, -3.0, -6.0]]

    def test_swap_rows(self, buffer) -> None:
        """swap_rows exchanges rows; swapping a row with itself is a no-op."""
        buffer.swap_rows(0, 0)
        assert buffer.get(0, 0) == 1.0
        buffer.swap_rows(0, 1)
        assert buffer.freeze().to_list() == [[4.0, 5.0, 6.0], [1.0, 2.0, 3.0]]

    def test_multiply_and_divide_row(self, buffer) -> None:
        """multiply_row and divide_row act on the whole row only."""
        buffer.multiply_row(0, 2.0)
        buffer.divide_row(1, 2.0)
        assert buffer.freeze().to_list() == [[2.0, 4.0, 6.0], [2.0, 2.5, 3.0]]

    def test_column_operations(self, buffer) -> None:
        """Column analogues should act on columns, not rows."""
        buffer.sum_columns(2, 0, -3.0)
        buffer.swap_columns(0, 1)
        buffer.multiply_column(0, 10.0)
        buffer.divide_column(1, 2.0)
        assert buffer.freeze().to_list() == [[20.0, 0.5, 0.0], [50.0, 2.0, -6.0]]

    def test_divide_by_zero_is_silent(self, buffer) -> None:
        """Division by zero should give IEEE inf/nan without raising."""
        buffer.set(0, 0, 0.0)
        buffer.divide_row(0, 0.0)
        row = buffer.freeze().row(0).to_array()[0]
        assert np.isnan(row[0])
        assert np.all(np.isinf(row[1:]))


class TestMatrixElement:
    """Tests for the MatrixElement record."""

    def test_immutable(self) -> None:
        """MatrixElement should be immutable."""
        element = MatrixElement(0, 1, 2.5)
        with pytest.raises(AttributeError):
            element.value = 3.0  # type: ignore[misc]

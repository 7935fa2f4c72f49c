"""Dense real matrix primitive.

Two types share one float64 ``numpy`` backing layout:

- ``Matrix``: immutable value type. Construction copies its input and marks
  the array read-only; every arithmetic operation returns a new instance.
- ``MatrixBuffer``: mutable working buffer with in-place row and column
  operations. Solvers build one from a ``Matrix`` (deep copy), mutate it and
  ``freeze()`` the result.

Element access is bounds-checked on both types.

References:
- Golub & Van Loan: "Matrix Computations" (4th ed.), Sections 1.1 and 3.2
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from numerics_lab.exceptions import (
    DimensionMismatchError,
    IndexOutOfRangeError,
    ShapeError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from numpy.typing import ArrayLike, NDArray


DEFAULT_EQUALITY_PRECISION: float = 0.001
"""Default tolerance for ``equals_precision``."""


@dataclass(frozen=True, slots=True)
class MatrixElement:
    """Single matrix entry with its coordinates."""

    row: int
    """Row index."""

    column: int
    """Column index."""

    value: float
    """Entry value (signed)."""


def _as_2d_array(values: ArrayLike | Matrix) -> NDArray[np.float64]:
    """Copy ``values`` into a fresh float64 2-D array and validate it."""
    if isinstance(values, Matrix):
        return values._data.copy()
    data = np.array(values, dtype=np.float64)
    if data.ndim != 2:
        raise ShapeError(
            f"Matrix values must be 2-D, got {data.ndim} dimension(s)",
            expected="2-D",
        )
    if data.shape[0] == 0 or data.shape[1] == 0:
        raise ShapeError(
            f"Matrix must have at least one row and one column, got {data.shape}",
            actual=(int(data.shape[0]), int(data.shape[1])),
        )
    return data


def _check_dimension(name: str, value: int) -> int:
    if int(value) != value or value < 1:
        raise ShapeError(f"{name} must be a positive integer, got {value}")
    return int(value)


def _check_index(index: int, size: int, axis: str, shape: tuple[int, int]) -> None:
    if not 0 <= index < size:
        raise IndexOutOfRangeError(
            f"{axis} index {index} out of range for matrix of shape {shape}",
            index=index,
            shape=shape,
        )


class Matrix:
    """Immutable dense matrix of float64 values.

    Example:
        >>> a = Matrix([[2.0, 1.0], [1.0, 2.0]])
        >>> x = Matrix.column_vector([1.0, 1.0])
        >>> (a @ x).column_to_list()
        [3.0, 3.0]
    """

    __slots__ = ("_data",)

    _data: NDArray[np.float64]

    def __init__(self, values: ArrayLike | Matrix) -> None:
        """Create a matrix from a nested sequence, 2-D array or Matrix (copied)."""
        data = _as_2d_array(values)
        data.flags.writeable = False
        self._data = data

    @classmethod
    def _wrap(cls, data: NDArray[np.float64]) -> Matrix:
        """Take ownership of a freshly computed array without copying."""
        matrix = cls.__new__(cls)
        data = np.ascontiguousarray(data, dtype=np.float64)
        data.flags.writeable = False
        matrix._data = data
        return matrix

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def zeros(cls, rows: int, columns: int) -> Matrix:
        """Return a rows × columns matrix of zeros."""
        rows = _check_dimension("rows", rows)
        columns = _check_dimension("columns", columns)
        return cls._wrap(np.zeros((rows, columns)))

    @classmethod
    def identity(cls, n: int) -> Matrix:
        """Return the n × n identity matrix."""
        n = _check_dimension("n", n)
        return cls._wrap(np.eye(n))

    @classmethod
    def column_vector(cls, values: Iterable[float]) -> Matrix:
        """Return an n × 1 matrix holding ``values``."""
        data = np.array(list(values), dtype=np.float64)
        if data.ndim != 1:
            raise ShapeError(f"Column vector values must be 1-D, got {data.ndim}-D")
        return cls(data.reshape(-1, 1))

    # ------------------------------------------------------------------
    # Shape and access
    # ------------------------------------------------------------------

    @property
    def rows(self) -> int:
        return int(self._data.shape[0])

    @property
    def columns(self) -> int:
        return int(self._data.shape[1])

    @property
    def shape(self) -> tuple[int, int]:
        return (self.rows, self.columns)

    @property
    def is_square(self) -> bool:
        return self.rows == self.columns

    def get(self, row: int, column: int) -> float:
        """Return the entry at (row, column)."""
        _check_index(row, self.rows, "Row", self.shape)
        _check_index(column, self.columns, "Column", self.shape)
        return float(self._data[row, column])

    def row(self, index: int) -> Matrix:
        """Return row ``index`` as a 1 × columns matrix."""
        _check_index(index, self.rows, "Row", self.shape)
        return Matrix._wrap(self._data[index : index + 1, :].copy())

    def column(self, index: int) -> Matrix:
        """Return column ``index`` as a rows × 1 column vector."""
        _check_index(index, self.columns, "Column", self.shape)
        return Matrix._wrap(self._data[:, index : index + 1].copy())

    def diagonal(self) -> Matrix:
        """Return the main diagonal as a column vector."""
        return Matrix._wrap(np.diagonal(self._data).reshape(-1, 1).copy())

    def to_array(self) -> NDArray[np.float64]:
        """Return a writable copy of the backing array."""
        return self._data.copy()

    def to_list(self) -> list[list[float]]:
        return self._data.tolist()

    def column_to_list(self) -> list[float]:
        """Return the entries of a single-column matrix as a flat list."""
        self._require_column_vector("column_to_list")
        return self._data[:, 0].tolist()

    # ------------------------------------------------------------------
    # Arithmetic (all pure)
    # ------------------------------------------------------------------

    def add(self, other: Matrix) -> Matrix:
        """Return self + other."""
        self._require_same_shape(other, "add")
        return Matrix._wrap(self._data + other._data)

    def subtract(self, other: Matrix) -> Matrix:
        """Return self - other."""
        self._require_same_shape(other, "subtract")
        return Matrix._wrap(self._data - other._data)

    def negate(self) -> Matrix:
        """Return -self."""
        return Matrix._wrap(-self._data)

    def scaled(self, factor: float) -> Matrix:
        """Return factor * self."""
        return Matrix._wrap(self._data * float(factor))

    def multiply_left(self, multiplier: Matrix) -> Matrix:
        """Return multiplier · self.

        Raises:
            DimensionMismatchError: If multiplier.columns != self.rows.
        """
        _require_matrix(multiplier, "multiply_left")
        if multiplier.columns != self.rows:
            raise DimensionMismatchError(
                f"Cannot multiply {multiplier.shape} by {self.shape}: "
                "left matrix columns must equal right matrix rows",
                expected=(multiplier.columns, self.columns),
                actual=self.shape,
            )
        return Matrix._wrap(multiplier._data @ self._data)

    def multiply_right(self, multiplier: Matrix) -> Matrix:
        """Return self · multiplier.

        Raises:
            DimensionMismatchError: If self.columns != multiplier.rows.
        """
        _require_matrix(multiplier, "multiply_right")
        if self.columns != multiplier.rows:
            raise DimensionMismatchError(
                f"Cannot multiply {self.shape} by {multiplier.shape}: "
                "left matrix columns must equal right matrix rows",
                expected=(self.columns, multiplier.columns),
                actual=multiplier.shape,
            )
        return Matrix._wrap(self._data @ multiplier._data)

    def transposed(self) -> Matrix:
        return Matrix._wrap(self._data.T.copy())

    def vector_norm(self) -> float:
        """Euclidean norm of a column vector.

        Raises:
            ShapeError: If the matrix has more than one column.
        """
        self._require_column_vector("vector_norm")
        return float(np.linalg.norm(self._data[:, 0]))

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def equals_precision(
        self, other: object, precision: float = DEFAULT_EQUALITY_PRECISION
    ) -> bool:
        """Element-wise comparison with absolute tolerance ``precision``.

        Returns False for shape mismatches and non-Matrix operands.
        """
        if not isinstance(other, Matrix) or self.shape != other.shape:
            return False
        return bool(np.all(np.abs(self._data - other._data) <= precision))

    def is_symmetric(self, precision: float = 0.0) -> bool:
        """True if square and |A_ij - A_ji| <= precision everywhere."""
        if not self.is_square:
            return False
        return bool(np.all(np.abs(self._data - self._data.T) <= precision))

    def max_asymmetry(self) -> float:
        """Largest |A_ij - A_ji| (square matrices only)."""
        if not self.is_square:
            raise ShapeError(
                f"Symmetry is only defined for square matrices, got {self.shape}",
                expected="square",
                actual=self.shape,
            )
        return float(np.max(np.abs(self._data - self._data.T)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix) or self.shape != other.shape:
            return False
        return bool(np.array_equal(self._data, other._data))

    def __hash__(self) -> int:
        return hash((self.shape, tuple(self._data.ravel().tolist())))

    # ------------------------------------------------------------------
    # Operators delegate to the named operations
    # ------------------------------------------------------------------

    def __add__(self, other: object) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: object) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.subtract(other)

    def __neg__(self) -> Matrix:
        return self.negate()

    def __matmul__(self, other: object) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.multiply_right(other)

    def __mul__(self, other: object) -> Matrix:
        if isinstance(other, bool) or not isinstance(other, numbers.Real):
            return NotImplemented
        return self.scaled(float(other))

    __rmul__ = __mul__

    def __repr__(self) -> str:
        return f"Matrix({self.to_list()!r})"

    def __str__(self) -> str:
        return "\n".join(" ".join(repr(v) for v in row) for row in self.to_list())

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_same_shape(self, other: Matrix, operation: str) -> None:
        _require_matrix(other, operation)
        if self.shape != other.shape:
            raise ShapeError(
                f"Cannot {operation} matrices of shapes {self.shape} and {other.shape}",
                expected=self.shape,
                actual=other.shape,
            )

    def _require_column_vector(self, operation: str) -> None:
        if self.columns != 1:
            raise ShapeError(
                f"{operation} is only defined for column vectors, got shape {self.shape}",
                expected=(self.rows, 1),
                actual=self.shape,
            )


def _require_matrix(value: object, operation: str) -> None:
    if not isinstance(value, Matrix):
        raise TypeError(
            f"{operation} expects a Matrix operand, got {type(value).__name__}"
        )


class MatrixBuffer:
    """Mutable working matrix for solver internals.

    Row and column operations act in place. Swapping an index with itself is
    a no-op; dividing by zero follows IEEE semantics (inf / nan) silently.
    """

    __slots__ = ("_data",)

    def __init__(self, rows: int, columns: int) -> None:
        rows = _check_dimension("rows", rows)
        columns = _check_dimension("columns", columns)
        self._data: NDArray[np.float64] = np.zeros((rows, columns))

    @classmethod
    def from_matrix(cls, matrix: Matrix) -> MatrixBuffer:
        """Deep copy of ``matrix``."""
        _require_matrix(matrix, "from_matrix")
        return cls.from_array(matrix._data)

    @classmethod
    def from_array(cls, values: ArrayLike) -> MatrixBuffer:
        """Deep copy of a nested sequence or 2-D array."""
        buffer = cls.__new__(cls)
        buffer._data = _as_2d_array(values)
        return buffer

    @property
    def rows(self) -> int:
        return int(self._data.shape[0])

    @property
    def columns(self) -> int:
        return int(self._data.shape[1])

    @property
    def shape(self) -> tuple[int, int]:
        return (self.rows, self.columns)

    @property
    def array(self) -> NDArray[np.float64]:
        """Writable view of the backing array (no copy)."""
        return self._data

    def get(self, row: int, column: int) -> float:
        self._check(row, column)
        return float(self._data[row, column])

    def set(self, row: int, column: int, value: float) -> None:
        self._check(row, column)
        self._data[row, column] = value

    def freeze(self) -> Matrix:
        """Return an immutable snapshot of the current contents."""
        return Matrix._wrap(self._data.copy())

    # Row operations

    def sum_rows(self, target: int, source: int, coefficient: float) -> None:
        """target row += coefficient * source row."""
        self._check_row(target)
        self._check_row(source)
        self._data[target, :] += coefficient * self._data[source, :]

    def swap_rows(self, first: int, second: int) -> None:
        self._check_row(first)
        self._check_row(second)
        if first == second:
            return
        self._data[[first, second], :] = self._data[[second, first], :]

    def multiply_row(self, row: int, coefficient: float) -> None:
        self._check_row(row)
        self._data[row, :] *= coefficient

    def divide_row(self, row: int, divisor: float) -> None:
        self._check_row(row)
        with np.errstate(divide="ignore", invalid="ignore"):
            self._data[row, :] /= divisor

    # Column operations

    def sum_columns(self, target: int, source: int, coefficient: float) -> None:
        """target column += coefficient * source column."""
        self._check_column(target)
        self._check_column(source)
        self._data[:, target] += coefficient * self._data[:, source]

    def swap_columns(self, first: int, second: int) -> None:
        self._check_column(first)
        self._check_column(second)
        if first == second:
            return
        self._data[:, [first, second]] = self._data[:, [second, first]]

    def multiply_column(self, column: int, coefficient: float) -> None:
        self._check_column(column)
        self._data[:, column] *= coefficient

    def divide_column(self, column: int, divisor: float) -> None:
        self._check_column(column)
        with np.errstate(divide="ignore", invalid="ignore"):
            self._data[:, column] /= divisor

    def __repr__(self) -> str:
        return f"MatrixBuffer({self._data.tolist()!r})"

    def _check(self, row: int, column: int) -> None:
        self._check_row(row)
        self._check_column(column)

    def _check_row(self, row: int) -> None:
        _check_index(row, self.rows, "Row", self.shape)

    def _check_column(self, column: int) -> None:
        _check_index(column, self.columns, "Column", self.shape)


__all__ = [
    "DEFAULT_EQUALITY_PRECISION",
    "Matrix",
    "MatrixBuffer",
    "MatrixElement",
]

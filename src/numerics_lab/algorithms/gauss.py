"""Direct solution of square linear systems by Gauss-Jordan elimination.

The coefficient matrix and right-hand side are joined into the augmented
matrix [A | b], which is reduced in two sweeps:

1. Downward: for each column make the pivot 1 (divide its row, or if the
   pivot is exactly zero add a multiple of a later row with a nonzero entry
   in that column), then eliminate the column from every row below.
2. Upward: the same, using rows above, eliminating upwards.

Only rows on the sweep's side are used to repair a zero pivot; no row swaps
are performed. A column without any usable row stays unresolved.

After reduction, a row with an all-zero coefficient block and a nonzero
right-hand entry proves the system inconsistent. Otherwise the right-hand
column is reported as the unique solution. Systems with infinitely many
solutions are not detected and come back as a UniqueSolution holding the
partially reduced values.

References:
- Golub & Van Loan: "Matrix Computations" (4th ed.), Section 3.2
"""

from __future__ import annotations

import logging

from numerics_lab.data.matrix import Matrix, MatrixBuffer
from numerics_lab.data.solutions import (
    LinearSystemSolution,
    NoSolution,
    UniqueSolution,
)
from numerics_lab.exceptions import ShapeError

logger = logging.getLogger(__name__)


def validate_linear_system(coefficients: Matrix, right_hand_side: Matrix) -> None:
    """Check that A is square and b is a matching column vector.

    Raises:
        ShapeError: On any dimension problem.
    """
    if not isinstance(coefficients, Matrix) or not isinstance(right_hand_side, Matrix):
        raise TypeError("Coefficients and right-hand side must be Matrix instances")

    if coefficients.rows != right_hand_side.rows:
        raise ShapeError(
            "Coefficient matrix and right-hand side must have the same number of rows, "
            f"got {coefficients.rows} and {right_hand_side.rows}",
            expected=(coefficients.rows, 1),
            actual=right_hand_side.shape,
        )
    if not coefficients.is_square:
        raise ShapeError(
            "Only systems with as many unknowns as equations are supported, "
            f"got coefficient matrix of shape {coefficients.shape}",
            expected=(coefficients.rows, coefficients.rows),
            actual=coefficients.shape,
        )
    if right_hand_side.columns != 1:
        raise ShapeError(
            f"Right-hand side must be a column vector, got shape {right_hand_side.shape}",
            expected=(right_hand_side.rows, 1),
            actual=right_hand_side.shape,
        )


def build_augmented_matrix(coefficients: Matrix, right_hand_side: Matrix) -> MatrixBuffer:
    """Return a fresh working buffer holding [A | b]."""
    validate_linear_system(coefficients, right_hand_side)
    n = coefficients.rows

    augmented = MatrixBuffer(n, n + 1)
    augmented.array[:, :n] = coefficients.to_array()
    augmented.array[:, n] = right_hand_side.to_array()[:, 0]
    return augmented


class LinearSystem:
    """Square linear system A·x = b solved by Gauss-Jordan elimination.

    The inputs are immutable Matrix values, so the system keeps them as-is;
    every ``solve()`` reduces a fresh augmented buffer.

    Example:
        >>> a = Matrix([[2.0, 1.0], [1.0, 3.0]])
        >>> b = Matrix.column_vector([3.0, 4.0])
        >>> LinearSystem(a, b).solve().vector.column_to_list()
        [1.0, 1.0]
    """

    __slots__ = ("_coefficients", "_right_hand_side", "_augmented", "_unresolved")

    def __init__(self, coefficients: Matrix, right_hand_side: Matrix) -> None:
        validate_linear_system(coefficients, right_hand_side)
        self._coefficients = coefficients
        self._right_hand_side = right_hand_side
        self._augmented: MatrixBuffer | None = None
        self._unresolved: set[int] = set()

    @property
    def size(self) -> int:
        """Number of unknowns."""
        return self._coefficients.rows

    @property
    def augmented_matrix(self) -> Matrix:
        """Augmented matrix: reduced form after ``solve()``, initial form before."""
        if self._augmented is None:
            return build_augmented_matrix(
                self._coefficients, self._right_hand_side
            ).freeze()
        return self._augmented.freeze()

    @property
    def unresolved_columns(self) -> tuple[int, ...]:
        """Columns left without a unit pivot by the last ``solve()``."""
        return tuple(sorted(self._unresolved))

    def solve(self) -> LinearSystemSolution:
        """Reduce the augmented matrix and classify the result.

        Returns:
            NoSolution if an inconsistent equation (0 = c, c != 0) remains,
            otherwise UniqueSolution with the right-hand column.
        """
        self._augmented = build_augmented_matrix(self._coefficients, self._right_hand_side)
        self._unresolved = set()

        self._triangularize_down()
        self._triangularize_up()

        if self._unresolved:
            logger.warning(
                "Gauss elimination left pivot column(s) %s unresolved; "
                "the system may be singular",
                self.unresolved_columns,
            )

        if self._contains_inconsistent_equation():
            logger.info("Gauss elimination found an inconsistent equation")
            return NoSolution()

        vector = Matrix(self._augmented.array[:, -1:])
        logger.debug("Gauss elimination solved %d×%d system", self.size, self.size)
        return UniqueSolution(vector=vector, iterations=0)

    # ------------------------------------------------------------------
    # Elimination sweeps
    # ------------------------------------------------------------------

    def _make_unit_pivot(self, pivot: int, *, downward: bool) -> bool:
        """Turn entry (pivot, pivot) into 1.

        Divides the pivot row when the entry is nonzero. Otherwise adds the
        nearest row on the sweep side whose entry in this column is nonzero,
        scaled by the reciprocal of that entry.

        Returns:
            True if the pivot is now nonzero.
        """
        augmented = self._augmented
        value = augmented.get(pivot, pivot)
        if value != 0.0:
            augmented.divide_row(pivot, value)
            return True

        candidates = range(pivot + 1, self.size) if downward else range(pivot - 1, -1, -1)
        for row in candidates:
            candidate = augmented.get(row, pivot)
            if candidate != 0.0:
                augmented.sum_rows(pivot, row, 1.0 / candidate)
                return True

        return False

    def _triangularize_column(self, column: int, *, downward: bool) -> None:
        if not self._make_unit_pivot(column, downward=downward):
            self._unresolved.add(column)
            return
        self._unresolved.discard(column)

        augmented = self._augmented
        rows = range(column + 1, self.size) if downward else range(column - 1, -1, -1)
        for row in rows:
            factor = augmented.get(row, column)
            if factor != 0.0:
                augmented.sum_rows(row, column, -factor)

    def _triangularize_down(self) -> None:
        for column in range(self.size):
            self._triangularize_column(column, downward=True)

    def _triangularize_up(self) -> None:
        for column in range(self.size - 1, -1, -1):
            self._triangularize_column(column, downward=False)

    def _contains_inconsistent_equation(self) -> bool:
        """True if some row reads 0 = c with c != 0."""
        data = self._augmented.array
        for row in data:
            if not row[:-1].any() and row[-1] != 0.0:
                return True
        return False


def solve_gauss(coefficients: Matrix, right_hand_side: Matrix) -> LinearSystemSolution:
    """Solve A·x = b by Gauss-Jordan elimination.

    Convenience wrapper around ``LinearSystem``; its signature matches the
    linear-solver callable accepted by ``NewtonSolver``.
    """
    return LinearSystem(coefficients, right_hand_side).solve()


__all__ = [
    "LinearSystem",
    "build_augmented_matrix",
    "solve_gauss",
    "validate_linear_system",
]

"""Eigenvalues and eigenvectors of symmetric matrices by Jacobi rotations.

Each iteration picks the off-diagonal entry A_pq of largest magnitude and
applies the plane rotation R(p, q, θ) that annihilates it:

    A ← Rᵗ·A·R,    V ← V·R

with V starting at the identity. The angle is

    θ = π/4                                 if |A_pp - A_qq| < threshold
    θ = ½·atan(2·A_pq / (A_pp - A_qq))      otherwise

Rotations preserve the spectrum, so once the off-diagonal norm
sqrt(Σ_{i<j} A_ij²) drops below the precision, the diagonal holds the
eigenvalues and the columns of V the matching eigenvectors.

References:
- Golub & Van Loan: "Matrix Computations" (4th ed.), Section 8.5
- Jacobi, C.G.J. (1846): "Über ein leichtes Verfahren..."
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from numerics_lab.data.defaults import (
    SolverKind,
    get_defaults,
    validate_max_iterations,
    validate_precision,
)
from numerics_lab.data.matrix import Matrix, MatrixBuffer, MatrixElement
from numerics_lab.data.solutions import EigenSolution
from numerics_lab.exceptions import ConvergenceError, NotSymmetricError, ShapeError

logger = logging.getLogger(__name__)

_DEFAULTS = get_defaults(SolverKind.JACOBI)
DEFAULT_PRECISION: float = float(_DEFAULTS.precision)
DEFAULT_MAX_ITERATIONS: int = int(_DEFAULTS.max_iterations)
DEFAULT_ANGLE_THRESHOLD: float = float(_DEFAULTS.rotation_angle_threshold)


@dataclass(frozen=True, slots=True)
class Rotation:
    """Plane rotation acting on coordinates p and q."""

    p: int
    """First rotated coordinate."""

    q: int
    """Second rotated coordinate."""

    angle: float
    """Rotation angle θ (radians)."""

    def matrix(self, n: int) -> Matrix:
        """n × n identity with the cos/sin block at (p, q)."""
        cosine = math.cos(self.angle)
        sine = math.sin(self.angle)

        rotation = MatrixBuffer.from_matrix(Matrix.identity(n))
        rotation.set(self.p, self.p, cosine)
        rotation.set(self.q, self.q, cosine)
        rotation.set(self.p, self.q, -sine)
        rotation.set(self.q, self.p, sine)
        return rotation.freeze()


def find_max_off_diagonal(matrix: Matrix) -> MatrixElement:
    """Largest-magnitude entry of the strict upper triangle.

    Rows are scanned in order and the first of several equal maxima wins.

    Raises:
        ShapeError: If the matrix is smaller than 2 × 2.
    """
    n = matrix.rows
    if n < 2:
        raise ShapeError(
            f"A {matrix.shape} matrix has no off-diagonal entries",
            expected="at least 2×2",
            actual=matrix.shape,
        )

    best = MatrixElement(0, 1, matrix.get(0, 1))
    for i in range(n):
        for j in range(i + 1, n):
            value = matrix.get(i, j)
            if abs(value) > abs(best.value):
                best = MatrixElement(i, j, value)
    return best


def off_diagonal_norm(matrix: Matrix) -> float:
    """sqrt of the sum of squares of the strict upper triangle."""
    upper = np.triu(matrix.to_array(), k=1)
    return float(np.sqrt(np.sum(upper * upper)))


def rotation_angle(
    matrix: Matrix,
    element: MatrixElement,
    threshold: float = DEFAULT_ANGLE_THRESHOLD,
) -> float:
    """Angle of the rotation that annihilates ``element``.

    With a zero ``threshold`` the π/4 branch is taken only for an exactly
    zero gap, so every rotation annihilates its entry exactly.
    """
    gap = matrix.get(element.row, element.row) - matrix.get(
        element.column, element.column
    )
    if gap == 0.0 or abs(gap) < threshold:
        return math.pi / 4
    return 0.5 * math.atan(2.0 * element.value / gap)


class SymmetricEigenSolver:
    """Jacobi rotation method for symmetric matrices.

    Example:
        >>> solver = SymmetricEigenSolver(Matrix([[2.0, 1.0], [1.0, 2.0]]))
        >>> sorted(round(v, 6) for v in solver.solve().eigenvalue_list())
        [1.0, 3.0]
    """

    __slots__ = (
        "_source",
        "_matrix",
        "_eigenvectors",
        "_max_iterations",
        "_angle_threshold",
        "_iterations",
    )

    def __init__(
        self,
        matrix: Matrix,
        *,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        angle_threshold: float = DEFAULT_ANGLE_THRESHOLD,
        symmetry_tolerance: float = 0.0,
    ) -> None:
        """Initialize the solver.

        Args:
            matrix: Symmetric input matrix (kept as an immutable value).
            max_iterations: Cap on the number of rotations.
            angle_threshold: Diagonal gap below which θ = π/4 is used.
            symmetry_tolerance: Allowed |A_ij - A_ji| (exact by default).

        Raises:
            ShapeError: If the matrix is not square.
            NotSymmetricError: If the matrix is not symmetric.
        """
        if not isinstance(matrix, Matrix):
            raise TypeError(f"Expected a Matrix, got {type(matrix).__name__}")
        if not matrix.is_square:
            raise ShapeError(
                f"Eigenvalues require a square matrix, got shape {matrix.shape}",
                expected="square",
                actual=matrix.shape,
            )
        if not matrix.is_symmetric(symmetry_tolerance):
            asymmetry = matrix.max_asymmetry()
            raise NotSymmetricError(
                f"Matrix must be symmetric (max |A_ij - A_ji| = {asymmetry:.3e})",
                max_asymmetry=asymmetry,
            )

        self._source = matrix
        self._max_iterations = validate_max_iterations(max_iterations)
        self._angle_threshold = float(angle_threshold)
        self._reset()

    def _reset(self) -> None:
        self._matrix = self._source
        self._eigenvectors = Matrix.identity(self._source.rows)
        self._iterations = 0

    @property
    def dimension(self) -> int:
        return self._source.rows

    @property
    def current_matrix(self) -> Matrix:
        """Working matrix after the rotations applied so far."""
        return self._matrix

    @property
    def iterations(self) -> int:
        return self._iterations

    def off_diagonal_norm(self) -> float:
        return off_diagonal_norm(self._matrix)

    def iterate(self) -> Rotation:
        """Apply one rotation to the working matrix and eigenvector matrix."""
        element = find_max_off_diagonal(self._matrix)
        rotation = Rotation(
            p=element.row,
            q=element.column,
            angle=rotation_angle(self._matrix, element, self._angle_threshold),
        )
        r = rotation.matrix(self.dimension)

        self._eigenvectors = self._eigenvectors.multiply_right(r)
        self._matrix = self._matrix.multiply_right(r).multiply_left(r.transposed())
        self._iterations += 1
        return rotation

    def solve(self, precision: float = DEFAULT_PRECISION) -> EigenSolution:
        """Rotate until the off-diagonal norm is at most ``precision``.

        Every call starts again from the input matrix.

        Raises:
            ConvergenceError: If the rotation cap is reached first.
        """
        precision = validate_precision(precision)
        self._reset()

        norm = self.off_diagonal_norm()
        while norm > precision:
            if self._iterations >= self._max_iterations:
                raise ConvergenceError(
                    f"Jacobi rotations did not converge within {self._max_iterations} "
                    f"iterations (off-diagonal norm {norm:.3e} > {precision})",
                    iterations=self._iterations,
                    final_change=norm,
                    reason="max_iterations",
                    threshold=precision,
                )
            rotation = self.iterate()
            norm = self.off_diagonal_norm()
            logger.debug(
                "Jacobi rotation %d at (%d, %d), θ=%.4f: off-diagonal norm=%.3e",
                self._iterations,
                rotation.p,
                rotation.q,
                rotation.angle,
                norm,
            )

        logger.info(
            "Jacobi rotations converged after %d rotation(s) (off-diagonal norm=%.3e)",
            self._iterations,
            norm,
        )

        return EigenSolution(
            eigenvectors=tuple(
                self._eigenvectors.column(i) for i in range(self.dimension)
            ),
            eigenvalues=self._matrix.diagonal(),
            last_iteration_matrix=self._matrix,
            iterations=self._iterations,
        )


def solve_eigen(
    matrix: Matrix,
    *,
    precision: float = DEFAULT_PRECISION,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    angle_threshold: float = DEFAULT_ANGLE_THRESHOLD,
    symmetry_tolerance: float = 0.0,
) -> EigenSolution:
    """Eigen-decomposition of a symmetric matrix by Jacobi rotations."""
    solver = SymmetricEigenSolver(
        matrix,
        max_iterations=max_iterations,
        angle_threshold=angle_threshold,
        symmetry_tolerance=symmetry_tolerance,
    )
    return solver.solve(precision)


__all__ = [
    "DEFAULT_ANGLE_THRESHOLD",
    "DEFAULT_MAX_ITERATIONS",
    "DEFAULT_PRECISION",
    "Rotation",
    "SymmetricEigenSolver",
    "find_max_off_diagonal",
    "off_diagonal_norm",
    "rotation_angle",
    "solve_eigen",
]

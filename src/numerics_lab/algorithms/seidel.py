"""Iterative solution of square linear systems by Gauss-Seidel iteration.

Gauss-Seidel converges for symmetric positive definite matrices, so the
system A·x = b is first replaced by its normal equations

    (AᵗA)·x = Aᵗb

which are SPD whenever A is nonsingular. Starting from x = 0, each sweep
updates the unknowns in order, reusing values already updated in the same
sweep:

    x_i ← (b_i - Σ_{j<i} A_ij·x_j(new) - Σ_{j>i} A_ij·x_j(old)) / A_ii

Iteration stops when ||x(new) - x(old)|| ≤ precision. The normal equations
square the condition number, so a loose precision leaves a correspondingly
larger error in x.

References:
- Golub & Van Loan: "Matrix Computations" (4th ed.), Section 11.2
- Saad: "Iterative Methods for Sparse Linear Systems" (2nd ed.), Section 4.1
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from numerics_lab.algorithms.gauss import validate_linear_system
from numerics_lab.data.defaults import (
    SolverKind,
    get_defaults,
    validate_max_iterations,
    validate_precision,
)
from numerics_lab.data.matrix import Matrix
from numerics_lab.data.solutions import UniqueSolution
from numerics_lab.exceptions import ConvergenceError

if TYPE_CHECKING:
    from numpy.typing import NDArray

logger = logging.getLogger(__name__)

_DEFAULTS = get_defaults(SolverKind.SEIDEL)
DEFAULT_PRECISION: float = float(_DEFAULTS.precision)
DEFAULT_MAX_ITERATIONS: int = int(_DEFAULTS.max_iterations)


class IterativeLinearSystem:
    """Square linear system A·x = b solved by Gauss-Seidel iteration.

    The normal equations are formed once at construction; the caller's
    matrices are never modified.

    Example:
        >>> a = Matrix([[4.0, 1.0], [1.0, 3.0]])
        >>> b = Matrix.column_vector([1.0, 2.0])
        >>> solution = IterativeLinearSystem(a, b).solve(precision=1e-10)
        >>> [round(v, 6) for v in solution.vector.column_to_list()]
        [0.090909, 0.636364]
    """

    __slots__ = ("_normal_matrix", "_normal_rhs", "_max_iterations", "_last_change")

    def __init__(
        self,
        coefficients: Matrix,
        right_hand_side: Matrix,
        *,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
    ) -> None:
        validate_linear_system(coefficients, right_hand_side)
        self._max_iterations = validate_max_iterations(max_iterations)

        # Both products use A as given
        transposed = coefficients.transposed()
        self._normal_matrix: NDArray[np.float64] = coefficients.multiply_left(
            transposed
        ).to_array()
        self._normal_rhs: NDArray[np.float64] = right_hand_side.multiply_left(
            transposed
        ).to_array()[:, 0]
        self._last_change = float("nan")

    @property
    def size(self) -> int:
        return int(self._normal_matrix.shape[0])

    @property
    def normal_matrix(self) -> Matrix:
        """AᵗA."""
        return Matrix(self._normal_matrix)

    @property
    def normal_right_hand_side(self) -> Matrix:
        """Aᵗb."""
        return Matrix(self._normal_rhs.reshape(-1, 1))

    @property
    def last_change(self) -> float:
        """||x(new) - x(old)|| of the final sweep of the last ``solve()``."""
        return self._last_change

    def sweep(self, x: NDArray[np.float64]) -> None:
        """Run one Gauss-Seidel sweep, updating ``x`` in place."""
        a = self._normal_matrix
        b = self._normal_rhs
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            for i in range(self.size):
                lower = a[i, :i] @ x[:i]
                upper = a[i, i + 1 :] @ x[i + 1 :]
                x[i] = (b[i] - lower - upper) / a[i, i]

    def solve(self, precision: float = DEFAULT_PRECISION) -> UniqueSolution:
        """Iterate until successive iterates differ by at most ``precision``.

        Args:
            precision: Threshold on ||x(new) - x(old)||.

        Returns:
            UniqueSolution with the final iterate and the number of sweeps.

        Raises:
            ConvergenceError: If the iterate stops being finite or the
                iteration cap is reached.
        """
        precision = validate_precision(precision)
        x = np.zeros(self.size)

        for iteration in range(1, self._max_iterations + 1):
            previous = x.copy()
            self.sweep(x)
            change = float(np.linalg.norm(x - previous))
            self._last_change = change

            if not np.isfinite(change):
                raise ConvergenceError(
                    f"Seidel iteration produced a non-finite iterate at sweep {iteration}",
                    iterations=iteration,
                    final_change=change,
                    reason="non_finite",
                    threshold=precision,
                )

            logger.debug("Seidel sweep %d: change=%.3e", iteration, change)

            if change <= precision:
                logger.info(
                    "Seidel iteration converged after %d sweep(s) (change=%.3e)",
                    iteration,
                    change,
                )
                return UniqueSolution(
                    vector=Matrix(x.reshape(-1, 1)), iterations=iteration
                )

        raise ConvergenceError(
            f"Seidel iteration did not converge within {self._max_iterations} sweeps "
            f"(last change {self._last_change:.3e} > {precision})",
            iterations=self._max_iterations,
            final_change=self._last_change,
            reason="max_iterations",
            threshold=precision,
        )


def solve_seidel(
    coefficients: Matrix,
    right_hand_side: Matrix,
    *,
    precision: float = DEFAULT_PRECISION,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> UniqueSolution:
    """Solve A·x = b by Gauss-Seidel iteration on the normal equations.

    Convenience wrapper around ``IterativeLinearSystem``; its signature
    matches the linear-solver callable accepted by ``NewtonSolver``.
    """
    system = IterativeLinearSystem(
        coefficients, right_hand_side, max_iterations=max_iterations
    )
    return system.solve(precision)


__all__ = [
    "DEFAULT_MAX_ITERATIONS",
    "DEFAULT_PRECISION",
    "IterativeLinearSystem",
    "solve_seidel",
]

"""Newton-Raphson iteration for square nonlinear systems F(x) = 0.

Each step linearizes F at the previous iterate with a central-difference
Jacobian and solves

    J(x_k)·δ = -F(x_k),    x_{k+1} = x_k + δ

with an injected linear solver (Gauss-Seidel by default). Iteration stops
once ||F(x_{k+1})|| ≤ precision.

This is a local method: the starting point must already lie close to a
root. No damping, line search or divergence detection is performed; a run
that wanders off ends in a ConvergenceError at the iteration cap.

References:
- Kelley: "Solving Nonlinear Equations with Newton's Method" (2003), Ch. 1-2
- Burden & Faires: "Numerical Analysis" (9th ed.), Section 10.2
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from functools import partial

from numerics_lab.algorithms.seidel import solve_seidel
from numerics_lab.data.defaults import (
    SolverKind,
    get_defaults,
    validate_max_iterations,
    validate_precision,
)
from numerics_lab.data.functions import (
    ScalarFunction,
    evaluate_all,
    numeric_jacobian,
)
from numerics_lab.data.matrix import Matrix
from numerics_lab.data.solutions import (
    LinearSystemSolution,
    NewtonSolution,
    UniqueSolution,
)
from numerics_lab.exceptions import (
    ConvergenceError,
    EmptyInputError,
    ShapeError,
    SingularSystemError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_DEFAULTS = get_defaults(SolverKind.NEWTON)
DEFAULT_PRECISION: float = float(_DEFAULTS.precision)
DEFAULT_MAX_ITERATIONS: int = int(_DEFAULTS.max_iterations)
DEFAULT_DERIVATIVE_STEP: float = float(_DEFAULTS.derivative_step)

DEFAULT_LINEAR_PRECISION: float = 1e-6
"""Seidel precision used for each Newton step."""

LinearSolver = Callable[[Matrix, Matrix], LinearSystemSolution]
"""Solves A·x = b for square A and column b."""


class NewtonSolver:
    """Newton-Raphson solver for n equations in n unknowns.

    Example:
        >>> f = ScalarFunction(lambda x: x[0] ** 2 - 4.0)
        >>> solver = NewtonSolver([f], Matrix.column_vector([2.5]))
        >>> result = solver.solve()
        >>> abs(result.root.get(0, 0) - 2.0) < 0.05
        True
    """

    __slots__ = (
        "_functions",
        "_starting_point",
        "_linear_solver",
        "_max_iterations",
        "_derivative_step",
        "_current",
        "_iterations",
    )

    def __init__(
        self,
        functions: Sequence[ScalarFunction],
        starting_point: Matrix,
        *,
        linear_solver: LinearSolver | None = None,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        derivative_step: float = DEFAULT_DERIVATIVE_STEP,
    ) -> None:
        """Initialize the solver.

        Args:
            functions: f_1..f_n, each a function of n coordinates.
            starting_point: n × 1 column vector near the wanted root.
            linear_solver: Callable solving J·δ = r; defaults to Seidel with
                DEFAULT_LINEAR_PRECISION.
            max_iterations: Cap on Newton steps.
            derivative_step: Central-difference step for the Jacobian.

        Raises:
            EmptyInputError: If ``functions`` is empty.
            ShapeError: If the starting point is not an n × 1 vector.
            ValidationError: If ``derivative_step`` is not positive.
        """
        functions = tuple(functions)
        if not functions:
            raise EmptyInputError("Newton solver needs at least one function")
        if not isinstance(starting_point, Matrix):
            raise TypeError(
                f"Starting point must be a Matrix, got {type(starting_point).__name__}"
            )
        n = len(functions)
        if starting_point.shape != (n, 1):
            raise ShapeError(
                f"Starting point must have shape ({n}, 1) for {n} function(s), "
                f"got {starting_point.shape}",
                expected=(n, 1),
                actual=starting_point.shape,
            )
        if not derivative_step > 0:
            raise ValidationError(
                f"Derivative step must be positive, got {derivative_step}"
            )

        self._functions = functions
        self._starting_point = starting_point
        self._linear_solver: LinearSolver = linear_solver or partial(
            solve_seidel, precision=DEFAULT_LINEAR_PRECISION
        )
        self._max_iterations = validate_max_iterations(max_iterations)
        self._derivative_step = float(derivative_step)
        self._current = starting_point
        self._iterations = 0

    @property
    def dimension(self) -> int:
        return len(self._functions)

    @property
    def current_point(self) -> Matrix:
        return self._current

    @property
    def iterations(self) -> int:
        return self._iterations

    def residual(self, point: Matrix | None = None) -> Matrix:
        """F(point) as a column vector (current iterate by default)."""
        return evaluate_all(self._functions, self._current if point is None else point)

    def jacobian(self, point: Matrix | None = None) -> Matrix:
        """Numeric Jacobian at ``point`` (current iterate by default)."""
        return numeric_jacobian(
            self._functions,
            self._current if point is None else point,
            self._derivative_step,
        )

    def iterate(self) -> Matrix:
        """Take one Newton step from the current iterate.

        Returns:
            The new iterate.

        Raises:
            SingularSystemError: If the linear solver reports no solution.
        """
        previous = self._current
        jacobian = self.jacobian(previous)
        right_hand_side = self.residual(previous).negate()

        solution = self._linear_solver(jacobian, right_hand_side)
        if not isinstance(solution, UniqueSolution):
            raise SingularSystemError(
                f"Newton step {self._iterations + 1}: linear system J·δ = -F "
                f"has no unique solution ({solution.solution_type.value})",
                iteration=self._iterations + 1,
            )

        self._current = previous.add(solution.vector)
        self._iterations += 1
        return self._current

    def solve(self, precision: float = DEFAULT_PRECISION) -> NewtonSolution:
        """Iterate until ||F(x)|| ≤ ``precision``.

        The starting point is tested first; every call restarts from it.

        Raises:
            ConvergenceError: If the cap is reached or F stops being finite.
            SingularSystemError: If a Newton step cannot be solved.
        """
        precision = validate_precision(precision)
        self._current = self._starting_point
        self._iterations = 0

        norm = self.residual().vector_norm()
        while True:
            if not math.isfinite(norm):
                raise ConvergenceError(
                    f"Newton iteration produced a non-finite residual at step "
                    f"{self._iterations}",
                    iterations=self._iterations,
                    final_change=norm,
                    reason="non_finite",
                    threshold=precision,
                )
            if norm <= precision:
                break
            if self._iterations >= self._max_iterations:
                raise ConvergenceError(
                    f"Newton iteration did not converge within {self._max_iterations} "
                    f"steps (||F|| = {norm:.3e} > {precision})",
                    iterations=self._iterations,
                    final_change=norm,
                    reason="max_iterations",
                    threshold=precision,
                )
            self.iterate()
            norm = self.residual().vector_norm()
            logger.debug("Newton step %d: ||F||=%.3e", self._iterations, norm)

        logger.info(
            "Newton iteration converged after %d step(s) (||F||=%.3e)",
            self._iterations,
            norm,
        )
        return NewtonSolution(
            root=self._current, residual_norm=norm, iterations=self._iterations
        )


def solve_newton(
    functions: Sequence[ScalarFunction],
    starting_point: Matrix,
    *,
    precision: float = DEFAULT_PRECISION,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    linear_solver: LinearSolver | None = None,
) -> NewtonSolution:
    """Solve F(x) = 0 by Newton-Raphson from ``starting_point``."""
    solver = NewtonSolver(
        functions,
        starting_point,
        linear_solver=linear_solver,
        max_iterations=max_iterations,
    )
    return solver.solve(precision)


__all__ = [
    "DEFAULT_LINEAR_PRECISION",
    "DEFAULT_MAX_ITERATIONS",
    "DEFAULT_PRECISION",
    "LinearSolver",
    "NewtonSolver",
    "solve_newton",
]

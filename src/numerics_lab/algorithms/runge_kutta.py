"""Fixed-step classical Runge-Kutta integration of first-order ODE systems.

The system dy_i/dt = f_i(y_1, ..., y_n, t) is advanced on the grid
t_k = t_0 + k·h with

    k1 = h·f(y, t)
    k2 = h·f(y + k1/2, t + h/2)
    k3 = h·f(y + k2/2, t + h/2)
    k4 = h·f(y + k3,   t + h)
    y ← y + (k1 + 2·k2 + 2·k3 + k4) / 6

Each f_i receives the argument vector (y_1, ..., y_n, t), the same layout as
one column of the trajectory matrix.

References:
- Hairer, Nørsett & Wanner: "Solving Ordinary Differential Equations I"
  (2nd ed.), Section II.1
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np

from numerics_lab.data.functions import ScalarFunction
from numerics_lab.data.matrix import Matrix
from numerics_lab.data.solutions import Trajectory
from numerics_lab.exceptions import EmptyInputError, ValidationError

if TYPE_CHECKING:
    from numpy.typing import NDArray

logger = logging.getLogger(__name__)

_STEP_COUNT_SLACK: float = 1e-9
"""Relative slack so that e.g. (1 - 0) / 0.1 counts as 10 steps, not 9."""


def count_steps(start_time: float, stop_time: float, step: float) -> int:
    """Number of whole steps of size ``step`` that fit in [start, stop]."""
    return int(math.floor((stop_time - start_time) / step * (1.0 + _STEP_COUNT_SLACK)))


class ODEIntegrator:
    """Classical RK4 integrator on a fixed grid.

    Example:
        >>> growth = ScalarFunction(lambda args: args[0])  # dy/dt = y
        >>> integrator = ODEIntegrator(
        ...     [growth], Matrix.column_vector([1.0]), 0.0, 1.0, 0.01
        ... )
        >>> round(integrator.solve().final_state.get(0, 0), 4)
        2.7183
    """

    __slots__ = ("_functions", "_initial_state", "_start_time", "_step", "_steps")

    def __init__(
        self,
        functions: Sequence[ScalarFunction],
        initial_state: Matrix,
        start_time: float,
        stop_time: float,
        step: float,
    ) -> None:
        """Initialize the integrator.

        Args:
            functions: f_1..f_n giving dy_i/dt.
            initial_state: n × 1 column vector y(start_time).
            start_time: Initial time.
            stop_time: Final time (must exceed ``start_time``).
            step: Positive integration step.

        Raises:
            EmptyInputError: If ``functions`` is empty.
            ValidationError: On an inverted interval, a non-positive step or a
                state that does not match the number of functions.
        """
        functions = tuple(functions)
        if not functions:
            raise EmptyInputError("ODE system needs at least one function")
        if not stop_time > start_time:
            raise ValidationError(
                f"stop_time must be greater than start_time, got "
                f"start={start_time}, stop={stop_time}"
            )
        if not math.isfinite(stop_time - start_time):
            raise ValidationError("Integration interval must be finite")
        if not step > 0:
            raise ValidationError(f"Step must be positive, got {step}")
        if not isinstance(initial_state, Matrix) or initial_state.shape != (
            len(functions),
            1,
        ):
            shape = getattr(initial_state, "shape", None)
            raise ValidationError(
                f"Initial state must be a ({len(functions)}, 1) column vector "
                f"matching the number of functions, got {shape}"
            )

        self._functions = functions
        self._initial_state = initial_state
        self._start_time = float(start_time)
        self._step = float(step)
        self._steps = count_steps(start_time, stop_time, step)

    @property
    def dimension(self) -> int:
        return len(self._functions)

    @property
    def steps(self) -> int:
        """Number of RK4 steps taken by ``solve()``."""
        return self._steps

    def derivatives(
        self, state: NDArray[np.float64], time: float
    ) -> NDArray[np.float64]:
        """f(y, t) as a 1-D array."""
        arguments = np.append(state, time)
        return np.array([f.evaluate(arguments) for f in self._functions])

    def step_once(
        self, state: NDArray[np.float64], time: float
    ) -> NDArray[np.float64]:
        """Advance ``state`` from ``time`` by one step."""
        h = self._step
        k1 = h * self.derivatives(state, time)
        k2 = h * self.derivatives(state + 0.5 * k1, time + 0.5 * h)
        k3 = h * self.derivatives(state + 0.5 * k2, time + 0.5 * h)
        k4 = h * self.derivatives(state + k3, time + h)
        return state + (k1 + 2.0 * k2 + 2.0 * k3 + k4) / 6.0

    def solve(self) -> Trajectory:
        """Integrate over the whole grid.

        Returns:
            Trajectory whose column 0 holds the initial state and start time
            and whose column k holds the state after k steps.
        """
        n = self.dimension
        trajectory = np.empty((n + 1, self._steps + 1))
        trajectory[:n, 0] = self._initial_state.to_array()[:, 0]
        trajectory[n, 0] = self._start_time

        for k in range(1, self._steps + 1):
            state = trajectory[:n, k - 1]
            time = trajectory[n, k - 1]
            trajectory[:n, k] = self.step_once(state, time)
            trajectory[n, k] = time + self._step

        logger.info(
            "Runge-Kutta integration finished: %d step(s) of %.3g up to t=%.6g",
            self._steps,
            self._step,
            trajectory[n, -1],
        )
        return Trajectory(matrix=Matrix(trajectory), step=self._step)


def integrate(
    functions: Sequence[ScalarFunction],
    initial_state: Matrix,
    start_time: float,
    stop_time: float,
    step: float,
) -> Trajectory:
    """Integrate dy/dt = f(y, t) with classical RK4 on a fixed grid."""
    return ODEIntegrator(functions, initial_state, start_time, stop_time, step).solve()


__all__ = [
    "ODEIntegrator",
    "count_steps",
    "integrate",
]

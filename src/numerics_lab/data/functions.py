"""Scalar functions of a coordinate vector with numeric differentiation.

A ``ScalarFunction`` wraps any callable mapping a 1-D float array to a
number. Partial derivatives use the central difference

    ∂f/∂x_i ≈ (f(x + h·e_i) - f(x - h·e_i)) / (2h)

so their accuracy is governed entirely by the step h.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

import numpy as np

from numerics_lab.data.defaults import SolverKind, get_default
from numerics_lab.data.matrix import Matrix
from numerics_lab.exceptions import (
    EmptyInputError,
    IndexOutOfRangeError,
    ShapeError,
    ValidationError,
)

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray

DEFAULT_DERIVATIVE_STEP: float = float(
    get_default(SolverKind.NEWTON, "derivative_step")
)
"""Default central-difference step."""

Expression = Callable[[np.ndarray], float]


def as_coordinates(point: Matrix | ArrayLike) -> NDArray[np.float64]:
    """Convert a column vector, sequence or 1-D array into a fresh 1-D array."""
    if isinstance(point, Matrix):
        return np.array(point.column_to_list(), dtype=np.float64)

    coordinates = np.array(point, dtype=np.float64)
    if coordinates.ndim == 2 and coordinates.shape[1] == 1:
        coordinates = coordinates[:, 0]
    if coordinates.ndim != 1:
        raise ShapeError(
            f"Coordinates must be a vector, got array of shape {coordinates.shape}"
        )
    return coordinates


class ScalarFunction:
    """Function ℝⁿ → ℝ with central-difference partial derivatives.

    Example:
        >>> f = ScalarFunction(lambda x: x[0] ** 2 + 3 * x[1], name="f")
        >>> f.evaluate([2.0, 1.0])
        7.0
        >>> round(f.evaluate_derivative([2.0, 1.0], 0), 6)
        4.0
    """

    __slots__ = ("_expression", "name")

    def __init__(self, expression: Expression, *, name: str | None = None) -> None:
        if not callable(expression):
            raise TypeError(
                f"ScalarFunction expects a callable, got {type(expression).__name__}"
            )
        self._expression = expression
        self.name = name

    def evaluate(self, point: Matrix | ArrayLike) -> float:
        """Value of the function at ``point``."""
        return float(self._expression(as_coordinates(point)))

    def __call__(self, point: Matrix | ArrayLike) -> float:
        return self.evaluate(point)

    def evaluate_derivative(
        self,
        point: Matrix | ArrayLike,
        index: int,
        step: float = DEFAULT_DERIVATIVE_STEP,
    ) -> float:
        """Partial derivative with respect to coordinate ``index``.

        Args:
            point: Coordinates where the derivative is taken.
            index: Index of the differentiation variable.
            step: Offset taken in both directions (must be positive).

        Raises:
            IndexOutOfRangeError: If ``index`` is not a valid coordinate.
            ValidationError: If ``step`` is not positive.
        """
        coordinates = as_coordinates(point)
        _check_step(step)
        if not 0 <= index < coordinates.size:
            raise IndexOutOfRangeError(
                f"Variable index {index} out of range for {coordinates.size} coordinates",
                index=index,
                shape=(coordinates.size,),
            )

        forward = coordinates.copy()
        backward = coordinates.copy()
        forward[index] += step
        backward[index] -= step

        return (
            float(self._expression(forward)) - float(self._expression(backward))
        ) / (2.0 * step)

    def gradient(
        self,
        point: Matrix | ArrayLike,
        step: float = DEFAULT_DERIVATIVE_STEP,
    ) -> Matrix:
        """All partial derivatives as a 1 × n row matrix."""
        coordinates = as_coordinates(point)
        return Matrix(
            [
                [
                    self.evaluate_derivative(coordinates, j, step)
                    for j in range(coordinates.size)
                ]
            ]
        )

    def __repr__(self) -> str:
        label = self.name or getattr(self._expression, "__name__", "<callable>")
        return f"ScalarFunction({label})"


def evaluate_all(
    functions: Sequence[ScalarFunction], point: Matrix | ArrayLike
) -> Matrix:
    """Column vector F(point) = (f_1(point), ..., f_m(point))."""
    _require_functions(functions)
    coordinates = as_coordinates(point)
    return Matrix.column_vector(f.evaluate(coordinates) for f in functions)


def numeric_jacobian(
    functions: Sequence[ScalarFunction],
    point: Matrix | ArrayLike,
    step: float = DEFAULT_DERIVATIVE_STEP,
) -> Matrix:
    """Jacobian J_ij = ∂f_i/∂x_j at ``point`` by central differences."""
    _require_functions(functions)
    coordinates = as_coordinates(point)
    return Matrix(
        [
            [f.evaluate_derivative(coordinates, j, step) for j in range(coordinates.size)]
            for f in functions
        ]
    )


def _require_functions(functions: Sequence[ScalarFunction]) -> None:
    if len(functions) == 0:
        raise EmptyInputError("Function sequence is empty")


def _check_step(step: float) -> None:
    if not step > 0:
        raise ValidationError(f"Derivative step must be positive, got {step}")


__all__ = [
    "DEFAULT_DERIVATIVE_STEP",
    "Expression",
    "ScalarFunction",
    "as_coordinates",
    "evaluate_all",
    "numeric_jacobian",
]

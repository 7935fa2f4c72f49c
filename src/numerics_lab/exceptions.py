"""Exception hierarchy for Numerics Lab.

All exceptions inherit from NumericsLabError so callers can catch any
library-specific failure in one place. Input problems are ValidationError
subclasses (and therefore also ValueError); failures during a computation
are NumericalError subclasses.

Exceptions carry diagnostic information as attributes.
"""

from __future__ import annotations


class NumericsLabError(Exception):
    """Base exception for all Numerics Lab errors."""


class ValidationError(NumericsLabError, ValueError):
    """Input validation failed.

    Raised for non-positive steps, an empty or inverted time interval,
    state/function-count mismatches and invalid solver settings.
    """


class ShapeError(ValidationError):
    """Matrix or vector dimensions are incorrect or inconsistent.

    Attributes:
        expected: Expected shape (or description), if known.
        actual: Actual shape, if known.
    """

    def __init__(
        self,
        message: str,
        expected: tuple[int, int] | str | None = None,
        actual: tuple[int, int] | None = None,
    ) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class DimensionMismatchError(ShapeError):
    """Inner dimensions of a matrix product disagree."""


class NotSymmetricError(ValidationError):
    """Matrix is not symmetric.

    Attributes:
        max_asymmetry: Largest |A_ij - A_ji| found.
    """

    def __init__(self, message: str, max_asymmetry: float | None = None) -> None:
        super().__init__(message)
        self.max_asymmetry = max_asymmetry


class EmptyInputError(ValidationError):
    """A sequence of functions was empty."""


class IndexOutOfRangeError(NumericsLabError, IndexError):
    """Element access outside the matrix (or vector) bounds.

    Attributes:
        index: The offending index.
        shape: Shape of the accessed object.
    """

    def __init__(
        self,
        message: str,
        index: tuple[int, ...] | int | None = None,
        shape: tuple[int, ...] | None = None,
    ) -> None:
        super().__init__(message)
        self.index = index
        self.shape = shape


class NumericalError(NumericsLabError):
    """Numerical computation failed."""


class ConvergenceError(NumericalError):
    """Iterative algorithm failed to converge.

    Raised when Seidel, Jacobi or Newton iterations exceed their iteration
    cap, or when an iterate stops being finite.

    Attributes:
        iterations: Number of iterations completed.
        final_change: Last measured change or norm.
        reason: 'max_iterations' or 'non_finite'.
        threshold: The precision that was not reached.
    """

    def __init__(
        self,
        message: str,
        iterations: int,
        final_change: float | None = None,
        reason: str | None = None,
        threshold: float | None = None,
    ) -> None:
        super().__init__(message)
        self.iterations = iterations
        self.final_change = final_change
        self.reason = reason
        self.threshold = threshold


class SingularSystemError(NumericalError):
    """A linear system that had to be solved has no solution.

    Attributes:
        iteration: Outer iteration at which the system was met, if any.
    """

    def __init__(self, message: str, iteration: int | None = None) -> None:
        super().__init__(message)
        self.iteration = iteration


__all__ = [
    "ConvergenceError",
    "DimensionMismatchError",
    "EmptyInputError",
    "IndexOutOfRangeError",
    "NotSymmetricError",
    "NumericalError",
    "NumericsLabError",
    "ShapeError",
    "SingularSystemError",
    "ValidationError",
]

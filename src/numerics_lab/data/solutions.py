"""Typed solution objects returned by the solvers.

Linear systems return one variant of ``LinearSystemSolution``:
``NoSolution``, ``UniqueSolution`` or ``InfiniteSolutions``. The last one is a
placeholder: infinite solution sets are not detected, so no solver produces
it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

import numpy as np

from numerics_lab.data.matrix import DEFAULT_EQUALITY_PRECISION, Matrix
from numerics_lab.exceptions import IndexOutOfRangeError, ShapeError

if TYPE_CHECKING:
    from numpy.typing import NDArray


class SolutionType(Enum):
    """Kind of solution set of a linear system."""

    NO_SOLUTION = "no_solution"
    UNIQUE_SOLUTION = "unique_solution"
    INFINITE_SOLUTIONS = "infinite_solutions"


class LinearSystemSolution:
    """Base class of the linear-system solution variants."""

    __slots__ = ()

    solution_type: SolutionType

    @property
    def has_solution(self) -> bool:
        return self.solution_type is not SolutionType.NO_SOLUTION

    def equals_precision(
        self, other: object, precision: float = DEFAULT_EQUALITY_PRECISION
    ) -> bool:
        """Same variant and, for unique solutions, vectors within ``precision``."""
        if not isinstance(other, LinearSystemSolution):
            return False
        return self.solution_type is other.solution_type


@dataclass(frozen=True, slots=True, eq=False)
class NoSolution(LinearSystemSolution):
    """The system is inconsistent."""

    solution_type = SolutionType.NO_SOLUTION

    def __eq__(self, other: object) -> bool:
        return isinstance(other, NoSolution)

    def __hash__(self) -> int:
        return hash(self.solution_type)

    def __str__(self) -> str:
        return "System has no solution"


@dataclass(frozen=True, slots=True, eq=False)
class UniqueSolution(LinearSystemSolution):
    """The system has exactly one solution vector."""

    solution_type = SolutionType.UNIQUE_SOLUTION

    vector: Matrix
    """Solution as an n × 1 column vector."""

    iterations: int = 0
    """Sweeps used by an iterative solver (0 for direct solves)."""

    def __post_init__(self) -> None:
        if self.vector.columns != 1:
            raise ShapeError(
                f"Solution must be a column vector, got shape {self.vector.shape}",
                expected=(self.vector.rows, 1),
                actual=self.vector.shape,
            )

    def equals_precision(
        self, other: object, precision: float = DEFAULT_EQUALITY_PRECISION
    ) -> bool:
        if not isinstance(other, UniqueSolution):
            return False
        return self.vector.equals_precision(other.vector, precision)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, UniqueSolution) and self.vector == other.vector

    def __hash__(self) -> int:
        return hash((self.solution_type, self.vector))

    def __str__(self) -> str:
        return f"System has a unique solution:\n{self.vector}"


@dataclass(frozen=True, slots=True, eq=False)
class InfiniteSolutions(LinearSystemSolution):
    """Placeholder variant for systems with infinitely many solutions."""

    solution_type = SolutionType.INFINITE_SOLUTIONS

    def __eq__(self, other: object) -> bool:
        return isinstance(other, InfiniteSolutions)

    def __hash__(self) -> int:
        return hash(self.solution_type)

    def __str__(self) -> str:
        return "System has infinitely many solutions"


@dataclass(frozen=True, slots=True)
class EigenSolution:
    """Eigenvalues and eigenvectors of a symmetric matrix."""

    eigenvectors: tuple[Matrix, ...]
    """Column eigenvectors; eigenvectors[i] belongs to eigenvalues[i]."""

    eigenvalues: Matrix
    """Eigenvalues as an n × 1 column vector."""

    last_iteration_matrix: Matrix
    """Final near-diagonal matrix, kept for diagnostics."""

    iterations: int = 0
    """Number of rotations applied."""

    @property
    def dimension(self) -> int:
        return self.eigenvalues.rows

    def eigenvalue_list(self) -> list[float]:
        return self.eigenvalues.column_to_list()

    def eigenvector_matrix(self) -> Matrix:
        """Eigenvectors stacked as columns of an n × n matrix."""
        return Matrix(np.hstack([v.to_array() for v in self.eigenvectors]))

    def pair(self, index: int) -> tuple[float, Matrix]:
        """(eigenvalue, eigenvector) number ``index``."""
        if not 0 <= index < self.dimension:
            raise IndexOutOfRangeError(
                f"Eigenpair index {index} out of range for dimension {self.dimension}",
                index=index,
                shape=(self.dimension,),
            )
        return self.eigenvalues.get(index, 0), self.eigenvectors[index]


@dataclass(frozen=True, slots=True)
class NewtonSolution:
    """Approximate root of a nonlinear system."""

    root: Matrix
    """Final iterate as an n × 1 column vector."""

    residual_norm: float
    """||F(root)||."""

    iterations: int
    """Newton steps taken (0 if the starting point already satisfied the criterion)."""


@dataclass(frozen=True, slots=True)
class Trajectory:
    """Fixed-step ODE trajectory.

    ``matrix`` has n + 1 rows and one column per grid point: rows 0..n-1 hold
    the state components, row n the time.
    """

    matrix: Matrix
    """(n + 1) × points trajectory matrix."""

    step: float
    """Integration step."""

    @property
    def dimension(self) -> int:
        """Number of state components."""
        return self.matrix.rows - 1

    @property
    def points(self) -> int:
        """Number of grid points (steps + 1)."""
        return self.matrix.columns

    @property
    def times(self) -> NDArray[np.float64]:
        return self.matrix.to_array()[-1, :]

    @property
    def states(self) -> NDArray[np.float64]:
        """State history as an n × points array."""
        return self.matrix.to_array()[:-1, :]

    @property
    def final_time(self) -> float:
        return self.matrix.get(self.dimension, self.points - 1)

    @property
    def final_state(self) -> Matrix:
        return Matrix(self.states[:, -1:])

    def component(self, index: int) -> NDArray[np.float64]:
        """History of state component ``index``."""
        if not 0 <= index < self.dimension:
            raise IndexOutOfRangeError(
                f"State index {index} out of range for dimension {self.dimension}",
                index=index,
                shape=(self.dimension,),
            )
        return self.states[index, :]


__all__ = [
    "EigenSolution",
    "InfiniteSolutions",
    "LinearSystemSolution",
    "NewtonSolution",
    "NoSolution",
    "SolutionType",
    "Trajectory",
    "UniqueSolution",
]

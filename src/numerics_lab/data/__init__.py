"""Data module: matrix primitive, scalar functions, solution types and defaults."""

from numerics_lab.data.defaults import (
    SolverDefaults,
    SolverKind,
    get_default,
    get_defaults,
    list_solvers,
)
from numerics_lab.data.functions import (
    ScalarFunction,
    evaluate_all,
    numeric_jacobian,
)
from numerics_lab.data.matrix import (
    DEFAULT_EQUALITY_PRECISION,
    Matrix,
    MatrixBuffer,
    MatrixElement,
)
from numerics_lab.data.solutions import (
    EigenSolution,
    InfiniteSolutions,
    LinearSystemSolution,
    NewtonSolution,
    NoSolution,
    SolutionType,
    Trajectory,
    UniqueSolution,
)

__all__ = [
    # Defaults
    "SolverDefaults",
    "SolverKind",
    "get_default",
    "get_defaults",
    "list_solvers",
    # Functions
    "ScalarFunction",
    "evaluate_all",
    "numeric_jacobian",
    # Matrix
    "DEFAULT_EQUALITY_PRECISION",
    "Matrix",
    "MatrixBuffer",
    "MatrixElement",
    # Solutions
    "EigenSolution",
    "InfiniteSolutions",
    "LinearSystemSolution",
    "NewtonSolution",
    "NoSolution",
    "SolutionType",
    "Trajectory",
    "UniqueSolution",
]

"""Numerics Lab: classical numerical methods on an immutable dense matrix type."""

__version__ = "0.1.0"

from numerics_lab.algorithms.gauss import LinearSystem, solve_gauss
from numerics_lab.algorithms.jacobi import SymmetricEigenSolver, solve_eigen
from numerics_lab.algorithms.newton import NewtonSolver, solve_newton
from numerics_lab.algorithms.runge_kutta import ODEIntegrator, integrate
from numerics_lab.algorithms.seidel import IterativeLinearSystem, solve_seidel
from numerics_lab.data.functions import ScalarFunction
from numerics_lab.data.matrix import Matrix, MatrixBuffer
from numerics_lab.data.solutions import (
    EigenSolution,
    NewtonSolution,
    NoSolution,
    SolutionType,
    Trajectory,
    UniqueSolution,
)
from numerics_lab.exceptions import (
    ConvergenceError,
    NumericsLabError,
    ShapeError,
    ValidationError,
)

__all__ = [
    "__version__",
    # Data types
    "Matrix",
    "MatrixBuffer",
    "ScalarFunction",
    # Solutions
    "EigenSolution",
    "NewtonSolution",
    "NoSolution",
    "SolutionType",
    "Trajectory",
    "UniqueSolution",
    # Solvers
    "IterativeLinearSystem",
    "LinearSystem",
    "NewtonSolver",
    "ODEIntegrator",
    "SymmetricEigenSolver",
    "integrate",
    "solve_eigen",
    "solve_gauss",
    "solve_newton",
    "solve_seidel",
    # Errors
    "ConvergenceError",
    "NumericsLabError",
    "ShapeError",
    "ValidationError",
]

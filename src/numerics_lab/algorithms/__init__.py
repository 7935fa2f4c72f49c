"""Numerical algorithms module.

This module contains implementations of:
- Gauss-Jordan elimination for square linear systems
- Gauss-Seidel iteration on the normal equations
- Jacobi rotations for symmetric eigenproblems
- Newton-Raphson for nonlinear systems
- Classical Runge-Kutta 4 for first-order ODE systems
- Random test systems with known solutions
"""

from numerics_lab.algorithms.gauss import (
    LinearSystem,
    build_augmented_matrix,
    solve_gauss,
)
from numerics_lab.algorithms.jacobi import (
    Rotation,
    SymmetricEigenSolver,
    find_max_off_diagonal,
    solve_eigen,
)
from numerics_lab.algorithms.newton import (
    LinearSolver,
    NewtonSolver,
    solve_newton,
)
from numerics_lab.algorithms.runge_kutta import (
    ODEIntegrator,
    integrate,
)
from numerics_lab.algorithms.seidel import (
    IterativeLinearSystem,
    solve_seidel,
)
from numerics_lab.algorithms.systems import (
    DEFAULT_SEED,
    KnownSolutionSystem,
    create_known_solution_system,
    random_integer_vector,
    random_symmetric_matrix,
)

__all__ = [
    # Direct linear solver
    "LinearSystem",
    "build_augmented_matrix",
    "solve_gauss",
    # Eigenvalues
    "Rotation",
    "SymmetricEigenSolver",
    "find_max_off_diagonal",
    "solve_eigen",
    # Nonlinear systems
    "LinearSolver",
    "NewtonSolver",
    "solve_newton",
    # ODEs
    "ODEIntegrator",
    "integrate",
    # Iterative linear solver
    "IterativeLinearSystem",
    "solve_seidel",
    # Test systems
    "DEFAULT_SEED",
    "KnownSolutionSystem",
    "create_known_solution_system",
    "random_integer_vector",
    "random_symmetric_matrix",
]

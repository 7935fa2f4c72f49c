"""
Solver Defaults - Single Source of Truth

This module defines the default stopping criteria and numeric parameters of
every solver: convergence precision, iteration caps, the finite-difference
step and the Jacobi rotation-angle threshold.

Solvers read their defaults from here and accept keyword overrides.

References:
    - Golub & Van Loan: "Matrix Computations" (4th ed.), Sections 8.5 and 11.2
    - Burden & Faires: "Numerical Analysis" (9th ed.), Sections 5.4 and 10.2
"""

from dataclasses import dataclass
from enum import Enum

from numerics_lab.exceptions import ValidationError


class SolverKind(Enum):
    """Solvers shipped with the library."""

    GAUSS = "gauss"
    SEIDEL = "seidel"
    JACOBI = "jacobi"
    NEWTON = "newton"
    RUNGE_KUTTA = "runge_kutta"


@dataclass(frozen=True, slots=True)
class SolverDefaults:
    """Default parameters for one solver.

    ``None`` means the parameter does not apply to that solver.
    """

    kind: SolverKind
    description: str
    precision: float | None = None
    max_iterations: int | None = None
    derivative_step: float | None = None
    rotation_angle_threshold: float | None = None

    @property
    def iterative(self) -> bool:
        """True if the solver runs a convergence loop."""
        return self.max_iterations is not None


# =============================================================================
# DEFAULTS TABLE
# =============================================================================
# precision: stopping threshold on the solver's own norm
#   seidel -> ||x_new - x_old||, jacobi -> off-diagonal norm,
#   newton -> ||F(x)||
# max_iterations: cap on every unbounded convergence loop

_SOLVER_DEFAULTS: dict[SolverKind, SolverDefaults] = {
    SolverKind.GAUSS: SolverDefaults(
        kind=SolverKind.GAUSS,
        description="Gauss-Jordan elimination on the augmented matrix",
    ),
    SolverKind.SEIDEL: SolverDefaults(
        kind=SolverKind.SEIDEL,
        description="Gauss-Seidel iteration on the normal equations",
        precision=0.1,
        max_iterations=10_000,
    ),
    SolverKind.JACOBI: SolverDefaults(
        kind=SolverKind.JACOBI,
        description="Jacobi rotations for symmetric eigenproblems",
        precision=0.1,
        max_iterations=10_000,
        rotation_angle_threshold=0.1,
    ),
    SolverKind.NEWTON: SolverDefaults(
        kind=SolverKind.NEWTON,
        description="Newton-Raphson for nonlinear systems",
        precision=0.1,
        max_iterations=100,
        derivative_step=0.01,
    ),
    SolverKind.RUNGE_KUTTA: SolverDefaults(
        kind=SolverKind.RUNGE_KUTTA,
        description="Classical fixed-step Runge-Kutta 4",
    ),
}

_PARAMETER_NAMES = (
    "precision",
    "max_iterations",
    "derivative_step",
    "rotation_angle_threshold",
)


# =============================================================================
# PUBLIC API
# =============================================================================


def get_defaults(kind: SolverKind | str) -> SolverDefaults:
    """
    Get the full defaults record for a solver.

    Args:
        kind: Solver kind (enum or string like 'seidel', 'Runge-Kutta')

    Returns:
        SolverDefaults for that solver

    Raises:
        ValueError: If the solver kind is unknown

    Example:
        >>> get_defaults("newton").max_iterations
        100
    """
    if isinstance(kind, str):
        kind = _parse_kind(kind)
    return _SOLVER_DEFAULTS[kind]


def get_default(kind: SolverKind | str, parameter: str) -> float | int:
    """
    Get a single default parameter for a solver.

    Args:
        kind: Solver kind
        parameter: One of 'precision', 'max_iterations', 'derivative_step',
            'rotation_angle_threshold'

    Returns:
        Parameter value

    Raises:
        ValueError: If the parameter is unknown or does not apply to the solver

    Example:
        >>> get_default("seidel", "precision")
        0.1
    """
    defaults = get_defaults(kind)
    if parameter not in _PARAMETER_NAMES:
        raise ValueError(
            f"Unknown parameter: {parameter}. Valid: {list(_PARAMETER_NAMES)}"
        )

    value = getattr(defaults, parameter)
    if value is None:
        raise ValueError(
            f"Parameter '{parameter}' does not apply to solver '{defaults.kind.value}'"
        )
    return value


def list_solvers() -> list[SolverKind]:
    """List all solver kinds in pipeline order."""
    return list(SolverKind)


def validate_precision(precision: float) -> float:
    """Check that a stopping precision is a positive finite number."""
    if not precision > 0 or precision == float("inf"):
        raise ValidationError(f"Precision must be positive and finite, got {precision}")
    return float(precision)


def validate_max_iterations(max_iterations: int) -> int:
    """Check that an iteration cap is at least one."""
    if int(max_iterations) != max_iterations or max_iterations < 1:
        raise ValidationError(
            f"max_iterations must be a positive integer, got {max_iterations}"
        )
    return int(max_iterations)


# =============================================================================
# INTERNAL HELPERS
# =============================================================================


def _parse_kind(name: str) -> SolverKind:
    """Parse a string into a SolverKind enum."""
    normalized = name.lower().replace("-", "_").replace(" ", "_")

    for kind in SolverKind:
        if kind.value == normalized:
            return kind

    valid = [k.value for k in SolverKind]
    raise ValueError(f"Unknown solver: '{name}'. Valid: {valid}")


__all__ = [
    "SolverDefaults",
    "SolverKind",
    "get_default",
    "get_defaults",
    "list_solvers",
    "validate_max_iterations",
    "validate_precision",
]

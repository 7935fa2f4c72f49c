"""Random test systems with known solutions.

This module builds reproducible linear systems T·y = T·x whose solution x is
known in advance, plus symmetric matrices for eigenvalue checks.

Key Features:
- Reproducible generation with seed control
- Integer-valued matrices and vectors (exact right-hand sides)
- Several conditioning profiles: general integer, diagonally dominant,
  orthogonally mixed diagonal

References:
- Golub & Van Loan: "Matrix Computations" (4th ed.), Section 2.6
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from numerics_lab.data.matrix import Matrix

if TYPE_CHECKING:
    from numpy.typing import NDArray


DEFAULT_SEED: int = 42
"""Default random seed for reproducible systems."""

DEFAULT_VALUE_RANGE: tuple[int, int] = (-100, 100)
"""Half-open range [low, high) for random integer entries."""

MAX_ATTEMPTS: int = 1000
"""Retries allowed when rejecting degenerate draws."""

SYSTEM_KINDS: tuple[str, ...] = ("integer", "dominant", "rotated")


def random_integer_vector(
    n: int,
    *,
    value_range: tuple[int, int] = DEFAULT_VALUE_RANGE,
    seed: int | None = None,
) -> Matrix:
    """Column vector of n nonzero integers drawn from ``value_range``.

    Example:
        >>> x = random_integer_vector(3, seed=42)
        >>> x.shape
        (3, 1)
    """
    rng = np.random.default_rng(seed)
    return Matrix(_nonzero_integers(rng, n, value_range).reshape(-1, 1))


def random_integer_matrix(
    n: int,
    *,
    value_range: tuple[int, int] = (-10, 10),
    seed: int | None = None,
) -> Matrix:
    """Nonsingular n×n matrix of integers.

    Draws are rejected until the determinant is nonzero. For integer
    matrices a nonzero determinant is at least 1 in magnitude.
    """
    rng = np.random.default_rng(seed)
    low, high = value_range

    for _ in range(MAX_ATTEMPTS):
        candidate = rng.integers(low, high, size=(n, n)).astype(np.float64)
        if abs(np.linalg.det(candidate)) >= 0.5:
            return Matrix(candidate)

    msg = f"Could not draw a nonsingular {n}×{n} integer matrix in {MAX_ATTEMPTS} attempts"
    raise RuntimeError(msg)


def random_diagonally_dominant_matrix(
    n: int,
    *,
    off_diagonal_range: tuple[int, int] = (-5, 6),
    margin_range: tuple[int, int] = (1, 11),
    seed: int | None = None,
) -> Matrix:
    """Strictly row-diagonally-dominant integer matrix.

    Each diagonal entry is the row's off-diagonal absolute sum plus a random
    margin, with a random sign. Such matrices are nonsingular and keep the
    normal equations well conditioned.
    """
    rng = np.random.default_rng(seed)
    low, high = off_diagonal_range

    matrix = rng.integers(low, high, size=(n, n)).astype(np.float64)
    np.fill_diagonal(matrix, 0.0)
    margins = rng.integers(margin_range[0], margin_range[1], size=n)
    signs = rng.choice([-1.0, 1.0], size=n)
    np.fill_diagonal(matrix, signs * (np.abs(matrix).sum(axis=1) + margins))
    return Matrix(matrix)


def random_rotated_diagonal_matrix(
    n: int,
    *,
    diagonal_range: tuple[int, int] = (1, 10),
    min_entry: float = 1e-3,
    seed: int | None = None,
) -> Matrix:
    """Nonsingular matrix Q₁·D·Q₂ᵗ with random orthogonal Q₁, Q₂.

    D is diagonal with nonzero integer entries of random sign, so the
    singular values are exactly |d_i|. Draws containing entries smaller than
    ``min_entry`` in magnitude are rejected, since widely spread magnitudes
    inflate rounding error.
    """
    rng = np.random.default_rng(seed)
    low, high = diagonal_range

    for _ in range(MAX_ATTEMPTS):
        magnitudes = rng.integers(low, high, size=n).astype(np.float64)
        diagonal = magnitudes * rng.choice([-1.0, 1.0], size=n)
        q1, _ = np.linalg.qr(rng.standard_normal((n, n)))
        q2, _ = np.linalg.qr(rng.standard_normal((n, n)))
        candidate = q1 @ np.diag(diagonal) @ q2.T
        if np.all(np.abs(candidate) >= min_entry):
            return Matrix(candidate)

    msg = f"Could not draw a {n}×{n} matrix without tiny entries in {MAX_ATTEMPTS} attempts"
    raise RuntimeError(msg)


def random_symmetric_matrix(
    n: int,
    *,
    value_range: tuple[int, int] = (-10, 10),
    seed: int | None = None,
) -> Matrix:
    """Symmetric integer matrix (upper triangle mirrored)."""
    rng = np.random.default_rng(seed)
    low, high = value_range
    upper = np.triu(rng.integers(low, high, size=(n, n)).astype(np.float64))
    return Matrix(upper + np.triu(upper, k=1).T)


def axis_rotation_matrix(axis: str, angle: float) -> Matrix:
    """3×3 rotation by ``angle`` radians about the x, y or z axis."""
    cosine, sine = np.cos(angle), np.sin(angle)
    rotations = {
        "x": [[1.0, 0.0, 0.0], [0.0, cosine, -sine], [0.0, sine, cosine]],
        "y": [[cosine, 0.0, sine], [0.0, 1.0, 0.0], [-sine, 0.0, cosine]],
        "z": [[cosine, -sine, 0.0], [sine, cosine, 0.0], [0.0, 0.0, 1.0]],
    }
    if axis.lower() not in rotations:
        msg = f"Unknown axis: {axis}. Valid: ['x', 'y', 'z']"
        raise ValueError(msg)
    return Matrix(rotations[axis.lower()])


@dataclass(frozen=True, slots=True)
class KnownSolutionSystem:
    """Linear system with its exact solution."""

    coefficients: Matrix
    """n×n nonsingular coefficient matrix T."""

    right_hand_side: Matrix
    """T·x."""

    solution: Matrix
    """The exact solution x (nonzero integers)."""

    kind: str
    """Generator used: 'integer', 'dominant' or 'rotated'."""

    seed: int
    """Random seed used for generation."""

    def error(self, candidate: Matrix) -> float:
        """||candidate - x||."""
        return candidate.subtract(self.solution).vector_norm()


def create_known_solution_system(
    n: int,
    *,
    kind: str = "dominant",
    seed: int = DEFAULT_SEED,
) -> KnownSolutionSystem:
    """Create T·y = T·x with a random nonsingular T and integer x.

    Args:
        n: System size.
        kind: "integer", "dominant" (diagonally dominant) or "rotated".
        seed: Random seed (default: 42 for reproducibility).

    Returns:
        KnownSolutionSystem with coefficients, right-hand side and solution.

    Example:
        >>> system = create_known_solution_system(4, seed=7)
        >>> system.right_hand_side.shape
        (4, 1)
    """
    if kind == "integer":
        coefficients = random_integer_matrix(n, seed=seed)
    elif kind == "dominant":
        coefficients = random_diagonally_dominant_matrix(n, seed=seed)
    elif kind == "rotated":
        coefficients = random_rotated_diagonal_matrix(n, seed=seed)
    else:
        msg = f"Unknown system kind: {kind}. Valid: {list(SYSTEM_KINDS)}"
        raise ValueError(msg)

    # Offset the seed so the solution is not drawn from the matrix's stream
    solution = random_integer_vector(n, seed=seed + 1)

    return KnownSolutionSystem(
        coefficients=coefficients,
        right_hand_side=solution.multiply_left(coefficients),
        solution=solution,
        kind=kind,
        seed=seed,
    )


def _nonzero_integers(
    rng: np.random.Generator, n: int, value_range: tuple[int, int]
) -> NDArray[np.float64]:
    low, high = value_range
    values = rng.integers(low, high, size=n)
    while np.any(values == 0):
        zeros = values == 0
        values[zeros] = rng.integers(low, high, size=int(zeros.sum()))
    return values.astype(np.float64)


__all__ = [
    "DEFAULT_SEED",
    "KnownSolutionSystem",
    "SYSTEM_KINDS",
    "axis_rotation_matrix",
    "create_known_solution_system",
    "random_diagonally_dominant_matrix",
    "random_integer_matrix",
    "random_integer_vector",
    "random_rotated_diagonal_matrix",
    "random_symmetric_matrix",
]

"""Tests for Gauss-Seidel iteration on the normal equations."""

import math

import numpy as np
import pytest

from numerics_lab.algorithms.seidel import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_PRECISION,
    IterativeLinearSystem,
    solve_seidel,
)
from numerics_lab.algorithms.systems import create_known_solution_system
from numerics_lab.data.matrix import Matrix
from numerics_lab.data.solutions import UniqueSolution
from numerics_lab.exceptions import ConvergenceError, ShapeError, ValidationError


@pytest.fixture
def dominant_system() -> tuple[Matrix, Matrix, Matrix]:
    """Strongly diagonally dominant 3×3 system with solution (3, -7, 5)."""
    a = Matrix([[10.0, 1.0, -1.0], [2.0, 10.0, 1.0], [1.0, -1.0, 10.0]])
    x = Matrix.column_vector([3.0, -7.0, 5.0])
    return a, x.multiply_left(a), x


class TestIterativeLinearSystem:
    """Tests for IterativeLinearSystem construction."""

    def test_defaults(self) -> None:
        """Defaults come from the solver table."""
        assert DEFAULT_PRECISION == 0.1
        assert DEFAULT_MAX_ITERATIONS == 10_000

    def test_normal_equations(self, dominant_system) -> None:
        """AᵗA and Aᵗb are formed from A as given."""
        a, b, _ = dominant_system
        system = IterativeLinearSystem(a, b)
        at = a.to_array().T
        assert np.allclose(system.normal_matrix.to_array(), at @ a.to_array())
        assert np.allclose(system.normal_right_hand_side.to_array(), at @ b.to_array())

    def test_last_change_before_solve(self, dominant_system) -> None:
        a, b, _ = dominant_system
        assert math.isnan(IterativeLinearSystem(a, b).last_change)

    def test_shape_validation(self) -> None:
        """Non-square A and mismatched b should raise ShapeError."""
        with pytest.raises(ShapeError):
            IterativeLinearSystem(Matrix.zeros(2, 3), Matrix.column_vector([1.0, 2.0]))
        with pytest.raises(ShapeError):
            IterativeLinearSystem(Matrix.identity(3), Matrix.column_vector([1.0, 2.0]))

    @pytest.mark.parametrize("max_iterations", [0, -1])
    def test_rejects_bad_cap(self, dominant_system, max_iterations) -> None:
        a, b, _ = dominant_system
        with pytest.raises(ValidationError):
            IterativeLinearSystem(a, b, max_iterations=max_iterations)


class TestSeidelSolve:
    """Tests for IterativeLinearSystem.solve."""

    def test_default_precision_recovers_solution(self, dominant_system) -> None:
        """With default precision the error stays within 0.1."""
        a, b, x = dominant_system
        solution = IterativeLinearSystem(a, b).solve()
        assert isinstance(solution, UniqueSolution)
        assert solution.iterations >= 1
        assert solution.vector.subtract(x).vector_norm() <= 0.1

    def test_tight_precision_matches_numpy(self) -> None:
        """A tight precision should agree with a direct solve."""
        a = Matrix([[4.0, 1.0], [1.0, 3.0]])
        b = Matrix.column_vector([1.0, 2.0])
        solution = solve_seidel(a, b, precision=1e-10)
        expected = np.linalg.solve(a.to_array(), b.to_array())
        assert np.allclose(solution.vector.to_array(), expected, atol=1e-8)

    def test_last_change_within_precision(self, dominant_system) -> None:
        """The final sweep's change should be at most the precision."""
        a, b, _ = dominant_system
        system = IterativeLinearSystem(a, b)
        system.solve(precision=1e-4)
        assert system.last_change <= 1e-4

    def test_idempotent(self, dominant_system) -> None:
        """Re-solving the same system gives an equal solution."""
        a, b, _ = dominant_system
        system = IterativeLinearSystem(a, b)
        first = system.solve(precision=1e-6)
        second = system.solve(precision=1e-6)
        assert first == second
        assert first.iterations == second.iterations

    def test_does_not_mutate_inputs(self, dominant_system) -> None:
        a, b, _ = dominant_system
        a_before, b_before = a.to_array(), b.to_array()
        solve_seidel(a, b)
        assert np.array_equal(a.to_array(), a_before)
        assert np.array_equal(b.to_array(), b_before)

    def test_iteration_cap(self, dominant_system) -> None:
        """Reaching the cap should raise ConvergenceError."""
        a, b, _ = dominant_system
        with pytest.raises(ConvergenceError) as exc_info:
            solve_seidel(a, b, precision=1e-12, max_iterations=1)
        assert exc_info.value.reason == "max_iterations"
        assert exc_info.value.iterations == 1
        assert exc_info.value.threshold == 1e-12

    def test_non_finite_iterate(self) -> None:
        """A zero column gives a zero normal diagonal and a non-finite iterate."""
        a = Matrix([[1.0, 0.0], [1.0, 0.0]])
        b = Matrix.column_vector([1.0, 1.0])
        with pytest.raises(ConvergenceError) as exc_info:
            solve_seidel(a, b)
        assert exc_info.value.reason == "non_finite"

    def test_rejects_bad_precision(self, dominant_system) -> None:
        a, b, _ = dominant_system
        with pytest.raises(ValidationError):
            IterativeLinearSystem(a, b).solve(precision=0.0)


class TestKnownSolutionRecovery:
    """Seidel should recover x from T·y = T·x."""

    @pytest.mark.parametrize("kind", ["dominant", "rotated"])
    @pytest.mark.parametrize("seed", range(5))
    def test_recovers_known_vector(self, kind, seed) -> None:
        """||y - x|| ≤ 0.1 for random nonsingular T and integer x."""
        system = create_known_solution_system(3, kind=kind, seed=seed)
        solution = solve_seidel(
            system.coefficients,
            system.right_hand_side,
            precision=1e-6,
            max_iterations=100_000,
        )
        assert system.error(solution.vector) <= 0.1

    @pytest.mark.parametrize("kind", ["integer", "dominant"])
    @pytest.mark.parametrize("seed", range(5))
    def test_default_precision_on_random_systems(self, kind, seed) -> None:
        """Default precision bounds the last change, not ||y - x||."""
        system = create_known_solution_system(3, kind=kind, seed=seed)
        seidel = IterativeLinearSystem(system.coefficients, system.right_hand_side)
        solution = seidel.solve()
        assert isinstance(solution, UniqueSolution)
        assert solution.iterations >= 1
        assert seidel.last_change <= DEFAULT_PRECISION
        assert math.isfinite(system.error(solution.vector))

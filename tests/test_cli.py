"""Tests for the command-line interface."""

import pytest
import typer
from rich.console import Console
from typer.testing import CliRunner

from numerics_lab import __version__, cli
from numerics_lab.cli import app, parse_matrix, parse_vector

runner = CliRunner()


@pytest.fixture(autouse=True)
def wide_console(monkeypatch) -> None:
    """Render tables wide enough that no cell is truncated."""
    monkeypatch.setattr(cli, "console", Console(width=200))


class TestParsing:
    """Tests for matrix and vector parsing."""

    def test_parse_matrix(self) -> None:
        assert parse_matrix("1,2;3,4").to_list() == [[1.0, 2.0], [3.0, 4.0]]

    def test_trailing_separator(self) -> None:
        assert parse_matrix(" 1, 2 ; 3, 4 ;").shape == (2, 2)

    def test_parse_vector_either_orientation(self) -> None:
        """Both "3;5" and "3,5" give a column vector."""
        assert parse_vector("3;5").shape == (2, 1)
        assert parse_vector("3,5").shape == (2, 1)

    @pytest.mark.parametrize("text", ["1,x", "", "1,2;3"])
    def test_malformed(self, text) -> None:
        with pytest.raises(typer.BadParameter):
            parse_matrix(text)

    def test_vector_rejects_matrix(self) -> None:
        with pytest.raises(typer.BadParameter):
            parse_vector("1,2;3,4")


class TestCommands:
    """Tests for the CLI commands."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_info(self) -> None:
        """info lists every solver with its defaults."""
        result = runner.invoke(app, ["info"])
        assert result.exit_code == 0
        for name in ["gauss", "seidel", "jacobi", "newton", "runge_kutta"]:
            assert name in result.output
        assert "10000" in result.output

    def test_linear_gauss(self) -> None:
        result = runner.invoke(app, ["linear", "2,1;1,3", "3;4"])
        assert result.exit_code == 0
        assert "Solution (gauss)" in result.output

    def test_linear_seidel(self) -> None:
        result = runner.invoke(
            app, ["linear", "2,1;1,3", "3;4", "--method", "seidel", "--precision", "1e-10"]
        )
        assert result.exit_code == 0
        assert "sweep(s)" in result.output

    def test_linear_no_solution(self) -> None:
        result = runner.invoke(app, ["linear", "1,0;0,0", "3;5"])
        assert result.exit_code == 0
        assert "no solution" in result.output

    def test_linear_shape_error(self) -> None:
        """Library errors exit with code 1."""
        result = runner.invoke(app, ["linear", "1,2;3,4", "1;2;3"])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_linear_unknown_method(self) -> None:
        result = runner.invoke(app, ["linear", "1,0;0,1", "1;1", "--method", "lu"])
        assert result.exit_code == 2

    def test_eigen(self) -> None:
        result = runner.invoke(app, ["eigen", "2,1;1,2"])
        assert result.exit_code == 0
        assert "Eigenpairs" in result.output
        assert "Rotations: 1" in result.output

    def test_eigen_not_symmetric(self) -> None:
        result = runner.invoke(app, ["eigen", "1,2;3,4"])
        assert result.exit_code == 1
        assert "symmetric" in result.output

    def test_check(self) -> None:
        """All seeded systems are recovered by both solvers."""
        result = runner.invoke(app, ["check", "--trials", "3", "--size", "3"])
        assert result.exit_code == 0
        assert "3/3" in result.output

    def test_check_unknown_kind(self) -> None:
        result = runner.invoke(app, ["check", "--kind", "hilbert"])
        assert result.exit_code == 2

    def test_log_level(self) -> None:
        result = runner.invoke(app, ["--log-level", "debug", "eigen", "2,1;1,2"])
        assert result.exit_code == 0

    def test_bad_log_level(self) -> None:
        result = runner.invoke(app, ["--log-level", "loud", "info"])
        assert result.exit_code == 2

"""
Command-line interface for Numerics Lab.

Usage:
    numerics-lab info            Show solver defaults
    numerics-lab linear A B      Solve a square linear system
    numerics-lab eigen A         Eigenvalues of a symmetric matrix
    numerics-lab check           Recover known solutions of random systems

Matrices are written row by row: rows separated by ';', entries by ','
(e.g. "2,1;1,3").
"""

import logging
from typing import Annotated, NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from numerics_lab import __version__
from numerics_lab.algorithms import (
    DEFAULT_SEED,
    create_known_solution_system,
    solve_eigen,
    solve_gauss,
    solve_seidel,
)
from numerics_lab.algorithms.jacobi import (
    DEFAULT_ANGLE_THRESHOLD,
    DEFAULT_PRECISION as JACOBI_PRECISION,
)
from numerics_lab.algorithms.seidel import DEFAULT_PRECISION as SEIDEL_PRECISION
from numerics_lab.algorithms.systems import SYSTEM_KINDS, KnownSolutionSystem
from numerics_lab.data import (
    LinearSystemSolution,
    Matrix,
    UniqueSolution,
    get_defaults,
    list_solvers,
)
from numerics_lab.exceptions import NumericsLabError

app = typer.Typer(
    name="numerics-lab",
    help="Classical numerical methods: linear systems, eigenvalues, roots and ODEs",
    add_completion=False,
)
console = Console()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
LINEAR_METHODS = ("gauss", "seidel")

CHECK_TOLERANCE: float = 0.1
"""Largest ||y - x|| accepted by the ``check`` command."""


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"numerics-lab version {__version__}")
        raise typer.Exit()


def parse_matrix(text: str) -> Matrix:
    """Parse "1,2;3,4" into a 2 × 2 Matrix.

    Raises:
        typer.BadParameter: On malformed text or ragged rows.
    """
    try:
        rows = [
            [float(entry) for entry in row.split(",")]
            for row in text.strip().strip(";").split(";")
        ]
    except ValueError as exc:
        raise typer.BadParameter(f"Cannot parse matrix '{text}': {exc}") from exc

    widths = {len(row) for row in rows}
    if len(widths) != 1:
        raise typer.BadParameter(
            f"Rows of '{text}' have different lengths: {sorted(widths)}"
        )
    return Matrix(rows)


def parse_vector(text: str) -> Matrix:
    """Parse "3;5" or "3,5" into a column vector."""
    matrix = parse_matrix(text)
    if matrix.rows == 1:
        return matrix.transposed()
    if matrix.columns != 1:
        raise typer.BadParameter(
            f"Right-hand side must be a vector, got shape {matrix.shape}"
        )
    return matrix


def _fail(exc: NumericsLabError) -> NoReturn:
    console.print(f"[bold red]Error:[/] {escape(str(exc))}")
    raise typer.Exit(code=1)


@app.callback()  # type: ignore[misc]
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    log_level: Annotated[
        str,
        typer.Option("--log-level", "-l", help=f"Logging level {list(LOG_LEVELS)}"),
    ] = "WARNING",
) -> None:
    """Numerics Lab - classical numerical methods."""
    level = log_level.upper()
    if level not in LOG_LEVELS:
        raise typer.BadParameter(
            f"Unknown log level: {log_level}. Valid: {list(LOG_LEVELS)}",
            param_hint="--log-level",
        )
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command()  # type: ignore[misc]
def info() -> None:
    """Display the default parameters of every solver."""
    table = Table(title="Solver Defaults")

    table.add_column("Solver", style="cyan", no_wrap=True)
    table.add_column("Precision", justify="right")
    table.add_column("Max iter", justify="right")
    table.add_column("Deriv. step", justify="right")
    table.add_column("Angle thr.", justify="right")
    table.add_column("Method")

    def show(value: float | int | None) -> str:
        return "-" if value is None else f"{value:g}"

    for kind in list_solvers():
        defaults = get_defaults(kind)
        table.add_row(
            kind.value,
            show(defaults.precision),
            show(defaults.max_iterations),
            show(defaults.derivative_step),
            show(defaults.rotation_angle_threshold),
            defaults.description,
            style="" if defaults.iterative else "dim",
        )

    console.print(table)


@app.command()  # type: ignore[misc]
def linear(
    matrix: Annotated[str, typer.Argument(help='Coefficient matrix, e.g. "2,1;1,3"')],
    rhs: Annotated[str, typer.Argument(help='Right-hand side, e.g. "3;4"')],
    method: Annotated[
        str,
        typer.Option("--method", "-m", help=f"Solver {list(LINEAR_METHODS)}"),
    ] = "gauss",
    precision: Annotated[
        float,
        typer.Option("--precision", "-p", help="Seidel stopping precision"),
    ] = SEIDEL_PRECISION,
) -> None:
    """Solve the square linear system A·x = b."""
    method = method.lower()
    if method not in LINEAR_METHODS:
        raise typer.BadParameter(
            f"Unknown method: {method}. Valid: {list(LINEAR_METHODS)}",
            param_hint="--method",
        )

    coefficients = parse_matrix(matrix)
    right_hand_side = parse_vector(rhs)

    try:
        if method == "gauss":
            solution = solve_gauss(coefficients, right_hand_side)
        else:
            solution = solve_seidel(coefficients, right_hand_side, precision=precision)
    except NumericsLabError as exc:
        _fail(exc)

    if not isinstance(solution, UniqueSolution):
        console.print(f"[yellow]{solution}[/]")
        return

    table = Table(title=f"Solution ({method})")
    table.add_column("i", justify="right", style="cyan")
    table.add_column("x_i", justify="right")
    for i, value in enumerate(solution.vector.column_to_list()):
        table.add_row(str(i), f"{value:.6g}")
    console.print(table)

    if solution.iterations:
        console.print(f"Converged after {solution.iterations} sweep(s)")


@app.command()  # type: ignore[misc]
def eigen(
    matrix: Annotated[str, typer.Argument(help='Symmetric matrix, e.g. "2,1;1,2"')],
    precision: Annotated[
        float,
        typer.Option("--precision", "-p", help="Off-diagonal norm threshold"),
    ] = JACOBI_PRECISION,
    angle_threshold: Annotated[
        float,
        typer.Option("--angle-threshold", help="Diagonal gap below which θ = π/4"),
    ] = DEFAULT_ANGLE_THRESHOLD,
) -> None:
    """Eigenvalues and eigenvectors of a symmetric matrix (Jacobi rotations)."""
    values = parse_matrix(matrix)

    try:
        solution = solve_eigen(
            values, precision=precision, angle_threshold=angle_threshold
        )
    except NumericsLabError as exc:
        _fail(exc)

    table = Table(title="Eigenpairs")
    table.add_column("λ", justify="right", style="cyan")
    table.add_column("Eigenvector")
    for i in range(solution.dimension):
        value, vector = solution.pair(i)
        components = ", ".join(f"{v:.4f}" for v in vector.column_to_list())
        table.add_row(f"{value:.6g}", escape(f"[{components}]"))
    console.print(table)
    console.print(f"Rotations: {solution.iterations}")


@app.command()  # type: ignore[misc]
def check(
    trials: Annotated[
        int,
        typer.Option("--trials", "-t", help="Number of random systems"),
    ] = 5,
    size: Annotated[
        int,
        typer.Option("--size", "-n", help="System dimension"),
    ] = 3,
    seed: Annotated[
        int,
        typer.Option("--seed", "-s", help="Seed of the first system"),
    ] = DEFAULT_SEED,
    kind: Annotated[
        str,
        typer.Option("--kind", "-k", help=f"Generator {list(SYSTEM_KINDS)}"),
    ] = "dominant",
    precision: Annotated[
        float,
        typer.Option("--precision", "-p", help="Seidel stopping precision"),
    ] = 1e-6,
) -> None:
    """Solve T·y = T·x for random T and integer x with both linear solvers."""
    if kind not in SYSTEM_KINDS:
        raise typer.BadParameter(
            f"Unknown system kind: {kind}. Valid: {list(SYSTEM_KINDS)}",
            param_hint="--kind",
        )

    table = Table(title=f"Known-Solution Check ({size}×{size}, {kind})")
    table.add_column("Seed", justify="right", style="cyan")
    table.add_column("Gauss ||y-x||", justify="right")
    table.add_column("Seidel ||y-x||", justify="right")
    table.add_column("Sweeps", justify="right")
    table.add_column("Status", justify="center")

    failures = 0
    for trial in range(trials):
        system = create_known_solution_system(size, kind=kind, seed=seed + trial)
        gauss_error = _known_solution_error(
            system, solve_gauss(system.coefficients, system.right_hand_side)
        )

        sweeps = "-"
        try:
            seidel = solve_seidel(
                system.coefficients, system.right_hand_side, precision=precision
            )
        except NumericsLabError:
            seidel_error = float("inf")
        else:
            seidel_error = _known_solution_error(system, seidel)
            sweeps = str(seidel.iterations)

        passed = max(gauss_error, seidel_error) <= CHECK_TOLERANCE
        failures += not passed
        table.add_row(
            str(system.seed),
            f"{gauss_error:.2e}",
            f"{seidel_error:.2e}",
            sweeps,
            "[green]✓[/]" if passed else "[red]✗[/]",
        )

    console.print(table)
    console.print(f"{trials - failures}/{trials} systems recovered within {CHECK_TOLERANCE}")
    if failures:
        raise typer.Exit(code=1)


def _known_solution_error(
    system: KnownSolutionSystem, solution: LinearSystemSolution
) -> float:
    if not isinstance(solution, UniqueSolution):
        return float("inf")
    return system.error(solution.vector)


if __name__ == "__main__":
    app()

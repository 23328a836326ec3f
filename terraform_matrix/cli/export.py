"""Export and coverage commands for the catalog."""

import typer
from rich.console import Console

from terraform_matrix.catalog import REQUIRED_SHAPES, all_suites, coverage_gaps
from terraform_matrix.matrix import save_suites

console = Console()


def export_command(
    output: str = typer.Argument(..., help="JSON file to write"),
):
    """Write the catalog as JSON suites, loadable with run --suites-file."""
    suites = all_suites()
    save_suites(suites, output)
    console.print(f"[green]Exported {len(suites)} suites to:[/green] {output}")


def coverage_command():
    """Check that every module has defaults, min, max and toggle-off cases."""
    gaps = coverage_gaps(all_suites())
    if not gaps:
        console.print(f"[green]All modules cover: {', '.join(REQUIRED_SHAPES)}[/green]")
        return

    for module, missing in gaps.items():
        console.print(f"[red]{module}[/red] is missing: {', '.join(missing)}")
    raise typer.Exit(code=1)

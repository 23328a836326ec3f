"""Command-line interface for tf-matrix."""

import typer

from terraform_matrix.cli.run import run_command
from terraform_matrix.cli.list import list_command, cases_command
from terraform_matrix.cli.export import export_command, coverage_command

app = typer.Typer(help="Terraform module matrix - validate modules across variable combinations")

# Register main commands
app.command(name="run")(run_command)
app.command(name="list")(list_command)
app.command(name="cases")(cases_command)
app.command(name="export")(export_command)
app.command(name="coverage")(coverage_command)


def main():
    """Main CLI entry point."""
    app()


__all__ = ["app", "main"]

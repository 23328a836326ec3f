"""Commands for browsing the built-in catalog."""

import json
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from terraform_matrix.catalog import all_suites, get_suite, suites_for_module

console = Console()


def list_command(
    module: Optional[str] = typer.Option(None, "--module", "-m", help="Only list suites for this module"),
):
    """List catalog suites with their case counts."""
    try:
        suites = suites_for_module(module) if module else all_suites()
    except KeyError as e:
        console.print(f"[red]Error:[/red] {e.args[0]}")
        raise typer.Exit(code=1)

    table = Table(title="Catalog Suites")
    table.add_column("Suite", style="cyan", no_wrap=True)
    table.add_column("Module", justify="left")
    table.add_column("Cases", justify="right", style="green")
    table.add_column("Labels", justify="left")

    for suite in suites:
        labels = sorted({label for case in suite for label in case.labels})
        table.add_row(suite.name, suite.module.name, str(len(suite)), ", ".join(labels))

    console.print(table)
    console.print(f"\n[bold]Total:[/bold] {sum(len(s) for s in suites)} cases in {len(suites)} suites")


def cases_command(
    suite_name: str = typer.Argument(..., help="Suite name, e.g. TestRdsModuleDatabaseEngines"),
):
    """Show the cases of one suite and the variables that set them apart."""
    suite = get_suite(suite_name)
    if suite is None:
        console.print(f"[red]Error:[/red] Suite not found: {suite_name}")
        raise typer.Exit(code=1)

    # Variables shared by every case are noise; show only what differs
    first = suite.cases[0].variables
    varying = sorted({
        key
        for case in suite
        for key in set(case.variables) | set(first)
        if case.variables.get(key) != first.get(key)
    })

    table = Table(title=f"{suite.name} ({suite.module.name})")
    table.add_column("Case", style="cyan", no_wrap=True)
    table.add_column("Expect", justify="left")
    table.add_column("Labels", justify="left")
    table.add_column("Variables", justify="left")

    for case in suite:
        shown = {k: case.variables[k] for k in varying if k in case.variables}
        if len(suite) == 1:
            shown = case.variables
        table.add_row(
            case.name,
            "valid" if case.expect_valid else "invalid",
            ", ".join(case.labels),
            json.dumps(shown, sort_keys=True),
        )

    console.print(table)

"""Run command: validate modules against their variable matrices."""

import logging
from typing import List, Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from terraform_matrix.catalog import all_suites
from terraform_matrix.logging import ConsoleLogger, FileLogger, LogLevel, MultiLogger
from terraform_matrix.matrix import load_suites
from terraform_matrix.reporting import build_report, write_report
from terraform_matrix.runner import CaseStatus, MatrixRunner, RunnerConfig, RunReport, select_cases
from terraform_matrix.runtime import VariableMode

console = Console()

STATUS_STYLES = {
    CaseStatus.PASSED: "green",
    CaseStatus.FAILED: "red",
    CaseStatus.ERROR: "bold red",
    CaseStatus.SKIPPED: "dim",
}


def run_command(
    module: Optional[str] = typer.Option(None, "--module", "-m", help="Only run suites for this module"),
    suite: Optional[str] = typer.Option(None, "--suite", "-s", help="Only run this suite"),
    case: Optional[str] = typer.Option(None, "--case", "-c", help="Only run cases with this name"),
    labels: Optional[List[str]] = typer.Option(
        None, "--label", "-l", help="Only run cases with this label (can be specified multiple times)",
    ),
    suites_file: Optional[str] = typer.Option(
        None, "--suites-file", "-f",
        help="JSON suites file or directory to run instead of the built-in catalog",
    ),
    modules_dir: Optional[str] = typer.Option(
        None, "--modules-dir", envvar="TF_MATRIX_MODULES_DIR", help="Directory holding the modules",
    ),
    parallel: Optional[int] = typer.Option(
        None, "--parallel", "-j", envvar="TF_MATRIX_PARALLEL", help="Cases to run at once (default: 4)",
    ),
    repeat: Optional[int] = typer.Option(
        None, "--repeat", envvar="TF_MATRIX_REPEAT",
        help="Run init + validate this many times per case and require the same outcome",
    ),
    mode: Optional[VariableMode] = typer.Option(
        None, "--mode", envvar="TF_MATRIX_MODE",
        help="Pass variables through a wrapper module or a tfvars file",
    ),
    deadline: Optional[float] = typer.Option(
        None, "--deadline", envvar="TF_MATRIX_DEADLINE_SECONDS", help="Overall run deadline in seconds",
    ),
    init_timeout: Optional[int] = typer.Option(
        None, "--init-timeout", envvar="TF_MATRIX_INIT_TIMEOUT", help="terraform init timeout in seconds",
    ),
    validate_timeout: Optional[int] = typer.Option(
        None, "--validate-timeout", envvar="TF_MATRIX_VALIDATE_TIMEOUT",
        help="terraform validate timeout in seconds",
    ),
    terraform_binary: Optional[str] = typer.Option(
        None, "--terraform", envvar="TF_MATRIX_TERRAFORM_BINARY", help="terraform executable",
    ),
    plugin_cache_dir: Optional[str] = typer.Option(
        None, "--plugin-cache-dir", envvar="TF_MATRIX_PLUGIN_CACHE_DIR",
        help="Shared provider plugin cache for all cases; terraform init then runs one case at a time",
    ),
    keep_workspaces: bool = typer.Option(
        False, "--keep-workspaces", envvar="TF_MATRIX_KEEP_WORKSPACES",
        help="Keep per-case scratch directories for inspection",
    ),
    use_docker: bool = typer.Option(
        False, "--docker/--no-docker", envvar="TF_MATRIX_USE_DOCKER",
        help="Run terraform in a container instead of on the host",
    ),
    terraform_image: Optional[str] = typer.Option(
        None, "--terraform-image", envvar="TF_MATRIX_TERRAFORM_IMAGE", help="Docker image for Terraform",
    ),
    report_path: Optional[str] = typer.Option(None, "--report", "-o", help="Write a JSON report here"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Write JSON-lines events here"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output"),
):
    """Run terraform init and validate for every selected case."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = RunnerConfig.from_env(
            parallel=parallel,
            repeat=repeat,
            mode=mode.value if mode else None,
            deadline_seconds=deadline,
            init_timeout=init_timeout,
            validate_timeout=validate_timeout,
            terraform_binary=terraform_binary,
            modules_dir=modules_dir,
            plugin_cache_dir=plugin_cache_dir,
            keep_workspaces=keep_workspaces or None,
            use_docker=use_docker or None,
            terraform_image=terraform_image,
        )
        config.validate()
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    try:
        suites = load_suites(suites_file) if suites_file else all_suites()
    except FileNotFoundError:
        console.print(f"[red]Error: Suites not found: {suites_file}[/red]")
        raise typer.Exit(code=1)
    except ValueError as e:
        console.print(f"[red]Error loading suites: {e}[/red]")
        raise typer.Exit(code=1)

    suites = select_cases(suites, module=module, suite=suite, case=case, labels=labels)
    if not suites:
        console.print("[red]No cases found matching the filters[/red]")
        raise typer.Exit(code=1)

    total = sum(len(s) for s in suites)
    rprint(f"[bold]Running {total} case(s) from {len(suites)} suite(s)[/bold]")
    rprint(f"[bold]Execution mode:[/bold] {'Docker' if config.use_docker else 'Local Terraform'}, "
           f"variables via {config.mode}")
    if config.parallel > 1:
        rprint(f"[bold]Parallelism:[/bold] {config.parallel} workers")

    event_logger = ConsoleLogger(min_level=LogLevel.DEBUG if verbose else LogLevel.INFO)
    if log_file:
        event_logger = MultiLogger(event_logger, FileLogger(log_file, min_level=LogLevel.DEBUG))

    runner = MatrixRunner(config, logger=event_logger)
    report = runner.run(suites)
    print_summary(report, verbose=verbose)

    if report_path:
        out = write_report(build_report(report, config), report_path)
        console.print(f"\n[green]Report saved to:[/green] {out}")

    if not report.passed:
        raise typer.Exit(code=1)


def print_summary(report: RunReport, verbose: bool = False) -> None:
    """Print the per-case table, failure diagnostics and totals."""
    table = Table(title="Matrix Results")
    table.add_column("Suite", style="cyan", no_wrap=True)
    table.add_column("Case", no_wrap=True)
    table.add_column("Status", justify="left")
    table.add_column("Attempts", justify="right")
    table.add_column("Time", justify="right")

    for result in report.results:
        style = STATUS_STYLES[result.status]
        table.add_row(
            result.suite,
            result.case,
            f"[{style}]{result.status.value}[/{style}]",
            str(result.attempts),
            f"{result.duration_seconds:.1f}s",
        )
    console.print(table)

    failures = report.failures()
    if failures:
        console.print("\n[bold red]Failures:[/bold red]")
        for result in failures:
            console.print(f"  [bold]{result.case_id}[/bold]: {result.error or result.status.value}")
            diagnostics = result.diagnostics()
            if verbose and diagnostics:
                console.print(diagnostics, markup=False, highlight=False)

    console.print("\n" + "=" * 60)
    console.print("[bold]MATRIX RESULTS[/bold]", justify="center")
    console.print("=" * 60)
    if report.terraform_version:
        console.print(f"Terraform: {report.terraform_version}")
    console.print(f"Total cases: {report.total}")
    console.print(f"[green]Passed:[/green] {report.count(CaseStatus.PASSED)}")
    console.print(f"[red]Failed:[/red] {report.count(CaseStatus.FAILED)}")
    console.print(f"[red]Errors:[/red] {report.count(CaseStatus.ERROR)}")
    console.print(f"Skipped: {report.count(CaseStatus.SKIPPED)}")

    rates = report.module_pass_rates()
    if rates:
        console.print("\n[bold]Module pass rates:[/bold]")
        for module, rate in rates.items():
            console.print(f"  {module}: {rate:.1%}")

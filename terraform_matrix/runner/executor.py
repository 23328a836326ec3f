"""Run matrix suites through terraform init and validate."""

import contextlib
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from terraform_matrix.logging import Logger, NullLogger
from terraform_matrix.matrix.schema import MatrixSuite, TestCase
from terraform_matrix.runner.config import RunnerConfig
from terraform_matrix.runner.results import (
    CaseResult,
    CaseStatus,
    RunReport,
    StepResult,
    SuiteReport,
)
from terraform_matrix.runtime import DockerTerraform, IsolatedWorkspace, TerraformRuntime

logger = logging.getLogger(__name__)

DEADLINE_MESSAGE = "run deadline exceeded"
FLAKY_MESSAGE = "validation outcome changed between attempts"

RuntimeFactory = Callable[[Path], TerraformRuntime]


class MatrixRunner:
    """
    Runs each case of a suite in its own workspace.

    Cases are independent: a failing or crashing case is recorded and its
    siblings keep running. With ``config.parallel > 1`` cases run on a thread
    pool; each worker has its own scratch clone of the module.
    """

    def __init__(
        self,
        config: Optional[RunnerConfig] = None,
        logger: Optional[Logger] = None,
        runtime_factory: Optional[RuntimeFactory] = None,
    ):
        self.config = config or RunnerConfig()
        self.config.validate()
        self.logger = logger or NullLogger()
        self.runtime_factory = runtime_factory or self._default_runtime
        self._deadline: Optional[float] = None
        # terraform does not support concurrent writes to a plugin cache
        self._init_lock = threading.Lock() if self.config.plugin_cache_dir else None

    def _default_runtime(self, working_dir: Path) -> TerraformRuntime:
        docker = None
        if self.config.use_docker:
            docker = DockerTerraform(image=self.config.terraform_image)
        return TerraformRuntime(
            str(working_dir),
            binary=self.config.terraform_binary,
            plugin_cache_dir=self.config.plugin_cache_dir,
            docker=docker,
        )

    # Deadline handling

    def _start_clock(self) -> None:
        if self.config.deadline_seconds is None:
            self._deadline = None
        else:
            self._deadline = time.monotonic() + self.config.deadline_seconds

    def remaining(self) -> Optional[float]:
        """Seconds left before the run deadline, or None without a deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def _step_timeout(self, step_timeout: float) -> Optional[float]:
        """Timeout for the next subprocess, or None when the deadline has passed."""
        remaining = self.remaining()
        if remaining is None:
            return step_timeout
        if remaining <= 0:
            return None
        return min(step_timeout, remaining)

    # Public API

    def run(self, suites: Iterable[MatrixSuite]) -> RunReport:
        """Run every suite and aggregate the results."""
        suites = list(suites)
        self._start_clock()
        start = time.monotonic()

        report = RunReport(terraform_version=self.terraform_version())
        total = sum(len(s) for s in suites)
        self.logger.info(
            "run.started",
            f"Running {total} case(s) from {len(suites)} suite(s)",
            {"suites": len(suites), "total": total, "parallel": self.config.parallel},
        )

        for suite in suites:
            report.suites.append(self._run_suite(suite))

        report.duration_seconds = time.monotonic() - start
        self.logger.info(
            "run.completed",
            f"{report.count(CaseStatus.PASSED)}/{report.total} passed "
            f"in {report.duration_seconds:.1f}s",
            {
                "total": report.total,
                "passed": report.count(CaseStatus.PASSED),
                "failed": report.count(CaseStatus.FAILED),
                "errors": report.count(CaseStatus.ERROR),
                "skipped": report.count(CaseStatus.SKIPPED),
                "duration": round(report.duration_seconds, 2),
            },
        )
        return report

    def run_suite(self, suite: MatrixSuite) -> SuiteReport:
        """Run a single suite with its own deadline clock."""
        self._start_clock()
        return self._run_suite(suite)

    def terraform_version(self) -> Optional[str]:
        """Version of the terraform the runner will use, if it can be found."""
        return self.runtime_factory(Path.cwd()).version()

    def _run_suite(self, suite: MatrixSuite) -> SuiteReport:
        report = SuiteReport(suite=suite.name, module=suite.module.name)
        self.logger.info(
            "suite.started",
            data={"suite": suite.name, "module": suite.module.name, "count": len(suite)},
        )

        if self.config.parallel > 1 and len(suite) > 1:
            with ThreadPoolExecutor(max_workers=self.config.parallel) as executor:
                futures = {
                    executor.submit(self.run_case, suite, case): case
                    for case in suite
                }
                for future in as_completed(futures):
                    report.results.append(future.result())
            # Completion order is arbitrary; report in table order
            order = {case.name: i for i, case in enumerate(suite)}
            report.results.sort(key=lambda r: order[r.case])
        else:
            for case in suite:
                report.results.append(self.run_case(suite, case))

        self.logger.info(
            "suite.completed",
            data={
                "suite": suite.name,
                "passed": report.count(CaseStatus.PASSED),
                "failed": report.count(CaseStatus.FAILED),
                "errors": report.count(CaseStatus.ERROR),
            },
        )
        return report

    def run_case(self, suite: MatrixSuite, case: TestCase) -> CaseResult:
        """
        Run one case: clone the module, then init and validate it.

        Never raises; unexpected exceptions become an ``error`` result.
        """
        result = CaseResult(
            suite=suite.name,
            case=case.name,
            module=suite.module.name,
            expect_valid=case.expect_valid,
        )

        if self.remaining() == 0:
            result.status = CaseStatus.SKIPPED
            result.error = DEADLINE_MESSAGE
            self.logger.warning("case.completed", f"{result.case_id}: {DEADLINE_MESSAGE}",
                                {"status": result.status.value})
            return result

        self.logger.info("case.started", result.case_id)

        try:
            module_dir = suite.module.resolve(self.config.modules_dir)
            workspace = IsolatedWorkspace(
                module_dir,
                case.variables,
                mode=self.config.mode,
                scratch_root=self.config.scratch_dir,
                keep=self.config.keep_workspaces,
            )
            with workspace:
                result.workspace = str(workspace.root)
                self.logger.debug("workspace.created", str(workspace.root), {"case": result.case_id})
                runtime = self.runtime_factory(workspace.terraform_dir)
                self._run_attempts(runtime, case, result)
            if not self.config.keep_workspaces:
                self.logger.debug("workspace.removed", result.workspace or "", {"case": result.case_id})
        except (FileNotFoundError, ValueError) as e:
            # Missing module directory or variables the workspace cannot write
            result.status = CaseStatus.ERROR
            result.error = str(e)
        except Exception as e:
            logger.exception(f"Unexpected error running {result.case_id}")
            result.status = CaseStatus.ERROR
            result.error = f"{type(e).__name__}: {e}"

        if result.status == CaseStatus.ERROR:
            self.logger.error("case.error", f"{result.case_id}: {result.error}",
                              {"status": result.status.value, "attempts": result.attempts})
        else:
            self.logger.info("case.completed", result.case_id,
                             {"status": result.status.value, "attempts": result.attempts})
        return result

    def _run_attempts(self, runtime: TerraformRuntime, case: TestCase, result: CaseResult) -> None:
        """Run init and validate ``config.repeat`` times in the same workspace."""
        outcomes: List[bool] = []
        for attempt in range(1, self.config.repeat + 1):
            result.attempts = attempt
            valid = self._run_once(runtime, result, attempt)
            if valid is None:
                return
            outcomes.append(valid)
            if valid != outcomes[0]:
                result.status = CaseStatus.ERROR
                result.error = FLAKY_MESSAGE
                return

        if outcomes[0] == case.expect_valid:
            result.status = CaseStatus.PASSED
        else:
            result.status = CaseStatus.FAILED
            if case.expect_valid:
                result.error = "configuration is invalid"
            else:
                result.error = "expected validation to fail, but it passed"

    def _run_once(self, runtime: TerraformRuntime, result: CaseResult, attempt: int) -> Optional[bool]:
        """
        One init + validate pass.

        Returns whether the configuration is valid, or None when the outcome
        could not be determined (``result`` then carries the error).
        """
        details = {"attempt": attempt}

        # The timeout is taken after the lock so waiting counts against the deadline
        with self._init_lock or contextlib.nullcontext():
            timeout = self._step_timeout(self.config.init_timeout)
            init = runtime.init(timeout=timeout) if timeout is not None else None
        if init is None:
            self._stop_at_deadline(result, ["init", "validate"], details)
            return None

        self.logger.debug("terraform.init", result.case_id,
                          {"status": init.returncode, "duration": round(init.duration_seconds, 2)})
        if init.returncode == -1:
            result.steps.append(StepResult(
                step="init",
                status=CaseStatus.ERROR,
                message=init.stderr,
                duration_seconds=init.duration_seconds,
                output=init.output,
                details=dict(details),
            ))
            _skip_steps(result, ["validate"], "Skipped because init did not run", details)
            result.status = CaseStatus.ERROR
            result.error = init.stderr
            return None
        if not init.success:
            # init parses the configuration, so a failure here is a verdict on it
            result.steps.append(StepResult(
                step="init",
                status=CaseStatus.FAILED,
                message=f"terraform init exited with code {init.returncode}",
                duration_seconds=init.duration_seconds,
                output=init.output,
                details=dict(details),
            ))
            _skip_steps(result, ["validate"], "Skipped due to init failure", details)
            return False

        result.steps.append(StepResult(
            step="init",
            status=CaseStatus.PASSED,
            message="Initialized",
            duration_seconds=init.duration_seconds,
            details=dict(details),
        ))

        timeout = self._step_timeout(self.config.validate_timeout)
        if timeout is None:
            self._stop_at_deadline(result, ["validate"], details)
            return None

        command, validation = runtime.validate(timeout=timeout)
        self.logger.debug("terraform.validate", result.case_id,
                          {"status": command.returncode, "duration": round(command.duration_seconds, 2)})
        if validation is None:
            message = command.stderr if command.returncode == -1 else "Unparsable validate output"
            result.steps.append(StepResult(
                step="validate",
                status=CaseStatus.ERROR,
                message=message,
                duration_seconds=command.duration_seconds,
                output=command.output,
                details=dict(details),
            ))
            result.status = CaseStatus.ERROR
            result.error = message
            return None

        step_details = dict(details)
        step_details.update({
            "error_count": validation.error_count,
            "warning_count": validation.warning_count,
        })
        if validation.valid:
            result.steps.append(StepResult(
                step="validate",
                status=CaseStatus.PASSED,
                message="Configuration is valid",
                duration_seconds=command.duration_seconds,
                details=step_details,
            ))
        else:
            result.steps.append(StepResult(
                step="validate",
                status=CaseStatus.FAILED,
                message="; ".join(validation.error_summaries()) or "Configuration is invalid",
                duration_seconds=command.duration_seconds,
                output=command.output,
                details=step_details,
            ))
        return validation.valid

    def _stop_at_deadline(self, result: CaseResult, steps: List[str], details: dict) -> None:
        _skip_steps(result, steps, DEADLINE_MESSAGE, details)
        result.status = CaseStatus.ERROR
        result.error = DEADLINE_MESSAGE


def _skip_steps(result: CaseResult, steps: List[str], message: str, details: dict) -> None:
    """Add SKIPPED results for remaining steps."""
    for step in steps:
        result.steps.append(StepResult(
            step=step,
            status=CaseStatus.SKIPPED,
            message=message,
            details=dict(details),
        ))


def select_cases(
    suites: Iterable[MatrixSuite],
    module: Optional[str] = None,
    suite: Optional[str] = None,
    case: Optional[str] = None,
    labels: Optional[List[str]] = None,
) -> List[MatrixSuite]:
    """
    Filter suites and their cases.

    Args:
        suites: Suites to filter
        module: Keep suites targeting this module name
        suite: Keep the suite with this name
        case: Keep cases with this name
        labels: Keep cases carrying any of these labels

    Returns:
        Suites that still have at least one case after filtering
    """
    selected = []
    for s in suites:
        if module and s.module.name != module:
            continue
        if suite and s.name != suite:
            continue

        cases = list(s.cases)
        if case:
            cases = [c for c in cases if c.name == case]
        if labels:
            cases = [c for c in cases if any(label in c.labels for label in labels)]
        if cases:
            selected.append(MatrixSuite(
                name=s.name,
                module=s.module,
                cases=cases,
                description=s.description,
            ))
    return selected

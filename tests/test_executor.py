"""Tests for MatrixRunner."""

import threading
import time
from pathlib import Path

import pytest

from terraform_matrix.logging import Logger
from terraform_matrix.matrix import MatrixBuilder, ModuleSpec
from terraform_matrix.runner import CaseStatus, MatrixRunner, RunnerConfig, select_cases
from terraform_matrix.runner.executor import DEADLINE_MESSAGE, FLAKY_MESSAGE


class RecordingLogger(Logger):
    def __init__(self):
        self.events = []

    def log(self, level, event, message="", data=None):
        self.events.append((level, event, message, data))

    def names(self):
        return [event for _, event, _, _ in self.events]


def make_runner(fake_factory, scratch_dir, logger=None, **config):
    config.setdefault("parallel", 1)
    return MatrixRunner(
        RunnerConfig(scratch_dir=str(scratch_dir), **config),
        logger=logger,
        runtime_factory=fake_factory,
    )


class TestRunCase:
    def test_valid_case_passes(self, fake_factory, scratch_dir, demo_suite):
        runner = make_runner(fake_factory, scratch_dir)
        result = runner.run_case(demo_suite, demo_suite.get_case("Valid"))

        assert result.status == CaseStatus.PASSED
        assert [s.step for s in result.steps] == ["init", "validate"]
        assert all(s.status == CaseStatus.PASSED for s in result.steps)
        assert result.attempts == 1
        assert result.error is None

    def test_workspace_removed_after_case(self, fake_factory, scratch_dir, demo_suite):
        runner = make_runner(fake_factory, scratch_dir)
        result = runner.run_case(demo_suite, demo_suite.get_case("Valid"))

        assert result.workspace is not None
        assert not Path(result.workspace).exists()
        assert list(scratch_dir.iterdir()) == []

    def test_keep_workspaces(self, fake_factory, scratch_dir, demo_suite):
        runner = make_runner(fake_factory, scratch_dir, keep_workspaces=True)
        result = runner.run_case(demo_suite, demo_suite.get_case("Valid"))

        assert Path(result.workspace, "main.tf.json").exists()

    def test_invalid_configuration_fails_with_diagnostics(self, fake_factory, scratch_dir, demo_suite):
        runner = make_runner(fake_factory, scratch_dir)
        result = runner.run_case(demo_suite, demo_suite.get_case("Broken"))

        assert result.status == CaseStatus.FAILED
        validate = result.steps[-1]
        assert validate.status == CaseStatus.FAILED
        assert "Unsupported argument" in validate.message
        assert validate.details["error_count"] == 1
        assert '"valid": false' in result.diagnostics()

    def test_expected_failure_passes(self, fake_factory, scratch_dir, demo_suite):
        runner = make_runner(fake_factory, scratch_dir)
        result = runner.run_case(demo_suite, demo_suite.get_case("ExpectedFailure"))

        assert result.status == CaseStatus.PASSED
        assert result.expect_valid is False

    def test_unexpected_success_fails(self, fake_factory, scratch_dir, demo_module):
        suite = (
            MatrixBuilder("TestDemo", demo_module, {"name": "demo"})
            .case("ShouldBreak", expect_valid=False)
            .build()
        )
        runner = make_runner(fake_factory, scratch_dir)
        result = runner.run_case(suite, suite.cases[0])

        assert result.status == CaseStatus.FAILED
        assert "expected validation to fail" in result.error

    def test_init_failure_skips_validate(self, fake_factory, scratch_dir, demo_suite):
        fake_factory.options = {"init_returncode": 1}
        runner = make_runner(fake_factory, scratch_dir)
        result = runner.run_case(demo_suite, demo_suite.get_case("Valid"))

        assert result.status == CaseStatus.FAILED
        assert [(s.step, s.status) for s in result.steps] == [
            ("init", CaseStatus.FAILED),
            ("validate", CaseStatus.SKIPPED),
        ]
        assert "provider packages" in result.diagnostics()
        assert fake_factory.created[-1].calls == [("init", 300)]

    def test_missing_binary_is_error(self, fake_factory, scratch_dir, demo_suite):
        fake_factory.options = {"init_returncode": -1}
        runner = make_runner(fake_factory, scratch_dir)
        result = runner.run_case(demo_suite, demo_suite.get_case("Valid"))

        assert result.status == CaseStatus.ERROR
        assert result.error == "Command not found: terraform"
        assert result.steps[-1].status == CaseStatus.SKIPPED

    def test_unparsable_validate_output_is_error(self, fake_factory, scratch_dir, demo_suite):
        fake_factory.options = {"validate_stdout": "panic: runtime error"}
        runner = make_runner(fake_factory, scratch_dir)
        result = runner.run_case(demo_suite, demo_suite.get_case("Valid"))

        assert result.status == CaseStatus.ERROR
        assert result.steps[-1].status == CaseStatus.ERROR
        assert "panic" in result.steps[-1].output

    def test_missing_module_is_error(self, fake_factory, scratch_dir, tmp_path):
        suite = (
            MatrixBuilder("TestMissing", ModuleSpec("missing", str(tmp_path / "nope")))
            .case("Anything", {"name": "x"})
            .build()
        )
        runner = make_runner(fake_factory, scratch_dir)
        result = runner.run_case(suite, suite.cases[0])

        assert result.status == CaseStatus.ERROR
        assert "Module directory not found" in result.error
        assert result.steps == []

    def test_unexpected_exception_is_recorded(self, scratch_dir, demo_suite):
        def exploding_factory(working_dir):
            raise RuntimeError("boom")

        runner = MatrixRunner(
            RunnerConfig(parallel=1, scratch_dir=str(scratch_dir)),
            runtime_factory=exploding_factory,
        )
        result = runner.run_case(demo_suite, demo_suite.get_case("Valid"))

        assert result.status == CaseStatus.ERROR
        assert result.error == "RuntimeError: boom"
        assert list(scratch_dir.iterdir()) == []

    def test_events_logged(self, fake_factory, scratch_dir, demo_suite):
        logger = RecordingLogger()
        runner = make_runner(fake_factory, scratch_dir, logger=logger)
        runner.run_case(demo_suite, demo_suite.get_case("Valid"))

        assert logger.names() == [
            "case.started",
            "workspace.created",
            "terraform.init",
            "terraform.validate",
            "workspace.removed",
            "case.completed",
        ]


class TestRepeat:
    def test_stable_outcome_passes(self, fake_factory, scratch_dir, demo_suite):
        runner = make_runner(fake_factory, scratch_dir, repeat=2)
        result = runner.run_case(demo_suite, demo_suite.get_case("Valid"))

        assert result.status == CaseStatus.PASSED
        assert result.attempts == 2
        assert [s.details["attempt"] for s in result.steps] == [1, 1, 2, 2]
        # Both attempts share one workspace
        assert len(fake_factory.created) == 1

    def test_changing_outcome_is_error(self, fake_factory, scratch_dir, demo_suite):
        fake_factory.options = {"outcomes": [True, True, False]}
        runner = make_runner(fake_factory, scratch_dir, repeat=3)
        result = runner.run_case(demo_suite, demo_suite.get_case("Valid"))

        assert result.status == CaseStatus.ERROR
        assert result.error == FLAKY_MESSAGE
        assert result.attempts == 3


class TestDeadline:
    def test_case_not_started_after_deadline_is_skipped(self, fake_factory, scratch_dir, demo_suite):
        runner = make_runner(fake_factory, scratch_dir, deadline_seconds=60)
        runner._deadline = time.monotonic() - 1
        result = runner.run_case(demo_suite, demo_suite.get_case("Valid"))

        assert result.status == CaseStatus.SKIPPED
        assert result.error == DEADLINE_MESSAGE
        assert fake_factory.created == []

    def test_step_timeout_capped_by_deadline(self, fake_factory, scratch_dir, demo_suite):
        runner = make_runner(fake_factory, scratch_dir, deadline_seconds=10)
        runner.run_suite(demo_suite)

        init_timeout = fake_factory.created[0].calls[0][1]
        assert 0 < init_timeout <= 10

    def test_no_deadline_uses_step_timeouts(self, fake_factory, scratch_dir, demo_suite):
        runner = make_runner(fake_factory, scratch_dir, init_timeout=45, validate_timeout=15)
        runner.run_case(demo_suite, demo_suite.get_case("Valid"))

        assert fake_factory.created[0].calls == [("init", 45), ("validate", 15)]

    def test_deadline_between_steps(self, scratch_dir, demo_suite, fake_factory):
        runner = make_runner(fake_factory, scratch_dir, deadline_seconds=60)
        runner._start_clock()

        def expiring_factory(working_dir):
            runtime = fake_factory(working_dir)
            original_init = runtime.init

            def init(timeout=300):
                runner._deadline = time.monotonic() - 1
                return original_init(timeout)

            runtime.init = init
            return runtime

        runner.runtime_factory = expiring_factory
        result = runner.run_case(demo_suite, demo_suite.get_case("Valid"))

        assert result.status == CaseStatus.ERROR
        assert result.error == DEADLINE_MESSAGE
        assert result.steps[-1].status == CaseStatus.SKIPPED


class TestRun:
    def test_one_failure_does_not_abort_siblings(self, fake_factory, scratch_dir, demo_suite):
        runner = make_runner(fake_factory, scratch_dir)
        report = runner.run([demo_suite])

        statuses = {r.case: r.status for r in report.results}
        assert statuses == {
            "Valid": CaseStatus.PASSED,
            "Broken": CaseStatus.FAILED,
            "ExpectedFailure": CaseStatus.PASSED,
        }
        assert report.terraform_version == "1.6.6"
        assert not report.passed

    def test_parallel_cases_use_separate_workspaces(self, fake_factory, scratch_dir, demo_module):
        suite = (
            MatrixBuilder("TestParallel", demo_module, {"name": "demo"})
            .sweep("size", range(8), name="Size_{value}")
            .build()
        )
        runner = make_runner(fake_factory, scratch_dir, parallel=4, keep_workspaces=True)
        report = runner.run_suite(suite)

        assert [r.case for r in report.results] == [f"Size_{i}" for i in range(8)]
        assert report.passed
        assert len({r.workspace for r in report.results}) == 8

    def test_run_emits_run_and_suite_events(self, fake_factory, scratch_dir, demo_suite):
        logger = RecordingLogger()
        runner = make_runner(fake_factory, scratch_dir, logger=logger)
        runner.run([demo_suite])

        names = logger.names()
        assert names[0] == "run.started"
        assert names[1] == "suite.started"
        assert names[-2] == "suite.completed"
        assert names[-1] == "run.completed"

    def test_tfvars_mode(self, fake_factory, scratch_dir, demo_suite):
        runner = make_runner(fake_factory, scratch_dir, mode="tfvars")
        report = runner.run_suite(demo_suite)

        assert [r.status for r in report.results] == [
            CaseStatus.PASSED, CaseStatus.FAILED, CaseStatus.PASSED,
        ]

    def test_shared_plugin_cache_serialises_init(self, fake_factory, scratch_dir, demo_module, tmp_path):
        running = []
        overlaps = []
        guard = threading.Lock()

        def factory(working_dir):
            runtime = fake_factory(working_dir)
            fake_init = runtime.init

            def init(timeout=300):
                with guard:
                    running.append(working_dir)
                    overlaps.append(len(running))
                time.sleep(0.02)
                with guard:
                    running.remove(working_dir)
                return fake_init(timeout)

            runtime.init = init
            return runtime

        suite = (
            MatrixBuilder("TestCache", demo_module, {"name": "demo"})
            .sweep("size", range(6), name="Size_{value}")
            .build()
        )
        runner = MatrixRunner(
            RunnerConfig(parallel=4, scratch_dir=str(scratch_dir), plugin_cache_dir=str(tmp_path / "cache")),
            runtime_factory=factory,
        )
        report = runner.run_suite(suite)

        assert report.passed
        assert len(overlaps) == 6
        assert max(overlaps) == 1

    def test_invalid_config_rejected(self, fake_factory):
        with pytest.raises(ValueError, match="parallel"):
            MatrixRunner(RunnerConfig(parallel=0), runtime_factory=fake_factory)


class TestSelectCases:
    @pytest.fixture
    def suites(self):
        vpc = ModuleSpec("vpc", "vpc")
        rds = ModuleSpec("rds", "rds")
        return [
            MatrixBuilder("TestVpc", vpc)
            .case("A", labels=["defaults"])
            .case("B", labels=["min"])
            .build(),
            MatrixBuilder("TestRds", rds)
            .case("A", labels=["max"])
            .build(),
        ]

    def test_no_filters(self, suites):
        assert [s.name for s in select_cases(suites)] == ["TestVpc", "TestRds"]

    def test_by_module(self, suites):
        assert [s.name for s in select_cases(suites, module="rds")] == ["TestRds"]

    def test_by_suite_and_case(self, suites):
        selected = select_cases(suites, suite="TestVpc", case="B")
        assert len(selected) == 1
        assert [c.name for c in selected[0].cases] == ["B"]

    def test_by_label_drops_empty_suites(self, suites):
        selected = select_cases(suites, labels=["min", "max"])
        assert [(s.name, [c.name for c in s.cases]) for s in selected] == [
            ("TestVpc", ["B"]),
            ("TestRds", ["A"]),
        ]

    def test_input_suites_untouched(self, suites):
        select_cases(suites, case="A")
        assert len(suites[0].cases) == 2

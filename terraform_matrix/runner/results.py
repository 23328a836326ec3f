"""Result dataclasses for matrix runs."""

from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field
from enum import Enum


class CaseStatus(str, Enum):
    """Outcome of a case or a single step."""
    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"
    SKIPPED = "skipped"


@dataclass
class StepResult:
    """Result of one terraform step (init or validate)."""
    step: str
    status: CaseStatus
    message: str = ""
    duration_seconds: float = 0.0
    output: str = ""
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        d = {
            "step": self.step,
            "status": self.status.value,
            "message": self.message,
            "duration_seconds": self.duration_seconds,
            "details": self.details,
        }
        if self.output:
            d["output"] = self.output
        return d


@dataclass
class CaseResult:
    """Result of running one case against one module."""
    suite: str
    case: str
    module: str
    status: CaseStatus = CaseStatus.SKIPPED
    expect_valid: bool = True
    steps: List[StepResult] = field(default_factory=list)
    attempts: int = 0
    error: Optional[str] = None
    workspace: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.status == CaseStatus.PASSED

    @property
    def duration_seconds(self) -> float:
        return sum(s.duration_seconds for s in self.steps)

    @property
    def case_id(self) -> str:
        return f"{self.suite}/{self.case}"

    def diagnostics(self) -> str:
        """Output of the first step that did not pass, for failure reports."""
        for step in self.steps:
            if step.status in (CaseStatus.FAILED, CaseStatus.ERROR) and step.output:
                return step.output
        return self.error or ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "suite": self.suite,
            "case": self.case,
            "module": self.module,
            "status": self.status.value,
            "expect_valid": self.expect_valid,
            "attempts": self.attempts,
            "duration_seconds": self.duration_seconds,
            "steps": [s.to_dict() for s in self.steps],
            "error": self.error,
            "workspace": self.workspace,
        }


@dataclass
class SuiteReport:
    """Results for all cases of one suite."""
    suite: str
    module: str
    results: List[CaseResult] = field(default_factory=list)

    def count(self, status: CaseStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def passed(self) -> bool:
        return bool(self.results) and all(r.passed for r in self.results)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "suite": self.suite,
            "module": self.module,
            "passed": self.passed,
            "counts": {status.value: self.count(status) for status in CaseStatus},
            "results": [r.to_dict() for r in self.results],
        }


@dataclass
class RunReport:
    """Aggregated results across suites."""
    suites: List[SuiteReport] = field(default_factory=list)
    terraform_version: Optional[str] = None
    duration_seconds: float = 0.0

    @property
    def results(self) -> List[CaseResult]:
        return [r for suite in self.suites for r in suite.results]

    def count(self, status: CaseStatus) -> int:
        return sum(suite.count(status) for suite in self.suites)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def passed(self) -> bool:
        """True when at least one case ran and every case passed."""
        return self.total > 0 and self.count(CaseStatus.PASSED) == self.total

    def failures(self) -> List[CaseResult]:
        return [r for r in self.results if not r.passed]

    def module_pass_rates(self) -> Dict[str, float]:
        """Pass rate per module."""
        per_module: Dict[str, List[bool]] = {}
        for result in self.results:
            per_module.setdefault(result.module, []).append(result.passed)
        return {
            module: sum(vals) / len(vals)
            for module, vals in per_module.items()
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "passed": self.passed,
            "terraform_version": self.terraform_version,
            "duration_seconds": self.duration_seconds,
            "counts": {status.value: self.count(status) for status in CaseStatus},
            "module_pass_rates": self.module_pass_rates(),
            "suites": [s.to_dict() for s in self.suites],
        }

"""JSON run report schema."""

from datetime import datetime, timezone
from typing import Optional, Dict, Any, List
from pydantic import BaseModel, Field, field_validator

STATUSES = ("passed", "failed", "error", "skipped")


class StepModel(BaseModel):
    """One terraform step of a case."""

    step: str = Field(..., description="Step name: init or validate")
    status: str = Field(..., description="Step status")
    message: str = Field("", description="Short human-readable outcome")
    duration_seconds: float = Field(0.0, description="Wall time of the subprocess")
    output: Optional[str] = Field(None, description="Diagnostic output from terraform")
    details: Dict[str, Any] = Field(default_factory=dict, description="Attempt number, diagnostic counts")

    @field_validator('status')
    @classmethod
    def validate_status(cls, v: str) -> str:
        if v not in STATUSES:
            raise ValueError(f"Unknown status '{v}', expected one of {', '.join(STATUSES)}")
        return v


class CaseModel(BaseModel):
    """Result of one case."""

    suite: str = Field(..., description="Suite the case belongs to")
    case: str = Field(..., description="Case name, unique inside the suite")
    module: str = Field(..., description="Module under test")
    status: str = Field(..., description="Case outcome")
    expect_valid: bool = Field(True, description="Expected validation outcome")
    attempts: int = Field(0, description="init + validate passes that ran")
    duration_seconds: float = Field(0.0, description="Sum of step durations")
    steps: List[StepModel] = Field(default_factory=list, description="Steps in execution order")
    error: Optional[str] = Field(None, description="Why the case did not pass")
    workspace: Optional[str] = Field(None, description="Scratch directory the case ran in")

    @field_validator('status')
    @classmethod
    def validate_status(cls, v: str) -> str:
        if v not in STATUSES:
            raise ValueError(f"Unknown status '{v}', expected one of {', '.join(STATUSES)}")
        return v


class SuiteModel(BaseModel):
    """Results of one suite."""

    suite: str = Field(..., description="Suite name")
    module: str = Field(..., description="Module under test")
    passed: bool = Field(..., description="Every case passed")
    counts: Dict[str, int] = Field(default_factory=dict, description="Cases per status")
    results: List[CaseModel] = Field(default_factory=list, description="Case results in table order")


class RunReportModel(BaseModel):
    """Report written by ``tf-matrix run --report``."""

    schema_version: str = Field(default="1.0", description="Report format version")
    created_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        description="UTC timestamp of report creation",
    )
    passed: bool = Field(..., description="At least one case ran and all passed")
    terraform_version: Optional[str] = Field(None, description="Terraform version used for the run")
    duration_seconds: float = Field(0.0, description="Wall time of the whole run")
    counts: Dict[str, int] = Field(default_factory=dict, description="Cases per status")
    module_pass_rates: Dict[str, float] = Field(default_factory=dict, description="Pass rate per module")
    suites: List[SuiteModel] = Field(default_factory=list, description="Per-suite results")
    config: Optional[Dict[str, Any]] = Field(None, description="Runner configuration")

    @field_validator('suites')
    @classmethod
    def validate_unique_suites(cls, v: List[SuiteModel]) -> List[SuiteModel]:
        """Validate that each suite appears once."""
        seen = set()
        for suite in v:
            if suite.suite in seen:
                raise ValueError(f"Duplicate suite in report: {suite.suite}")
            seen.add(suite.suite)
        return v

    def failures(self) -> List[CaseModel]:
        """Cases that did not pass."""
        return [case for suite in self.suites for case in suite.results if case.status != "passed"]

    def to_json_dict(self, exclude_none: bool = True) -> Dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return self.model_dump(exclude_none=exclude_none)

    class Config:
        extra = "allow"

"""JSON run reports."""

from .models import StepModel, CaseModel, SuiteModel, RunReportModel
from .writer import build_report, write_report, load_report

__all__ = [
    "StepModel",
    "CaseModel",
    "SuiteModel",
    "RunReportModel",
    "build_report",
    "write_report",
    "load_report",
]

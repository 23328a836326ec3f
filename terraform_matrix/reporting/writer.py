"""Build and persist run reports."""

import json
import logging
from pathlib import Path
from typing import Optional

from terraform_matrix.reporting.models import RunReportModel
from terraform_matrix.runner.config import RunnerConfig
from terraform_matrix.runner.results import RunReport

logger = logging.getLogger(__name__)


def build_report(report: RunReport, config: Optional[RunnerConfig] = None) -> RunReportModel:
    """Convert runner results into the report model."""
    data = report.to_dict()
    if config is not None:
        data["config"] = config.to_dict()
    return RunReportModel.model_validate(data)


def write_report(report: RunReportModel, path: str) -> Path:
    """Write a report as JSON, creating parent directories."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, "w") as f:
        json.dump(report.to_json_dict(), f, indent=2)
    logger.info(f"Wrote report to {out}")
    return out


def load_report(path: str) -> RunReportModel:
    """Read a report written by ``write_report``."""
    with open(path) as f:
        return RunReportModel.model_validate(json.load(f))

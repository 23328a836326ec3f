"""Matrix runner: configuration, execution and results."""

from .config import RunnerConfig
from .executor import MatrixRunner, select_cases
from .results import CaseStatus, StepResult, CaseResult, SuiteReport, RunReport

__all__ = [
    'RunnerConfig',
    'MatrixRunner',
    'select_cases',
    'CaseStatus',
    'StepResult',
    'CaseResult',
    'SuiteReport',
    'RunReport',
]

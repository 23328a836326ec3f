"""Variable-matrix definitions: schema, builder and JSON loading."""

from .schema import (
    ModuleSpec,
    TestCase,
    MatrixSuite,
    VariableSet,
    validate_suite,
)
from .builder import MatrixBuilder
from .loader import (
    SuiteLoader,
    load_suites,
    save_suites,
)

__all__ = [
    'ModuleSpec',
    'TestCase',
    'MatrixSuite',
    'VariableSet',
    'validate_suite',
    'MatrixBuilder',
    'SuiteLoader',
    'load_suites',
    'save_suites',
]

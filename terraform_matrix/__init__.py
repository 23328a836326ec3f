"""Terraform module matrix - validate Terraform modules across tables of input variables."""

__version__ = "0.1.0"

from . import matrix
from . import catalog
from . import runtime
from . import runner
from . import reporting

__all__ = [
    "matrix",
    "catalog",
    "runtime",
    "runner",
    "reporting",
]

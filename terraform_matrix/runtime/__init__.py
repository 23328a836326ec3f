"""Runtime module for Terraform invocation and workspace isolation."""

from .terraform import (
    CommandResult,
    ValidationResult,
    TerraformRuntime,
    DockerTerraform,
)
from .workspace import IsolatedWorkspace, VariableMode

__all__ = [
    'CommandResult',
    'ValidationResult',
    'TerraformRuntime',
    'DockerTerraform',
    'IsolatedWorkspace',
    'VariableMode',
]

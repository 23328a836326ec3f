"""Runner configuration."""

import os
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from terraform_matrix.runtime.workspace import VariableMode

ENV_PREFIX = "TF_MATRIX_"


@dataclass
class RunnerConfig:
    """Configuration for a matrix run."""
    parallel: int = 4
    repeat: int = 1
    mode: str = VariableMode.WRAPPER.value
    init_timeout: int = 300
    validate_timeout: int = 120
    deadline_seconds: Optional[float] = None  # None: no overall deadline
    terraform_binary: str = "terraform"
    modules_dir: str = "modules"
    plugin_cache_dir: Optional[str] = None
    scratch_dir: Optional[str] = None
    keep_workspaces: bool = False
    use_docker: bool = False
    terraform_image: str = "hashicorp/terraform:latest"

    def validate(self) -> None:
        """Raise ValueError for settings the runner cannot honour."""
        if self.parallel < 1:
            raise ValueError(f"parallel must be at least 1, got {self.parallel}")
        if self.repeat < 1:
            raise ValueError(f"repeat must be at least 1, got {self.repeat}")
        if self.mode not in {m.value for m in VariableMode}:
            raise ValueError(f"Unknown variable mode: {self.mode}")
        if self.init_timeout <= 0 or self.validate_timeout <= 0:
            raise ValueError("timeouts must be positive")
        if self.deadline_seconds is not None and self.deadline_seconds <= 0:
            raise ValueError("deadline_seconds must be positive")

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None, **overrides: Any) -> 'RunnerConfig':
        """
        Build a config from ``TF_MATRIX_*`` environment variables.

        ``TF_MATRIX_PARALLEL=8`` sets ``parallel``, ``TF_MATRIX_USE_DOCKER=true``
        sets ``use_docker`` and so on. Keyword overrides that are not None win
        over the environment.
        """
        environ = os.environ if environ is None else environ
        config = cls()
        for name, default in asdict(config).items():
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is not None:
                setattr(config, name, _coerce(name, raw, default))

        for name, value in overrides.items():
            if value is not None:
                setattr(config, name, value)
        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


_INT_FIELDS = {"parallel", "repeat", "init_timeout", "validate_timeout"}
_FLOAT_FIELDS = {"deadline_seconds"}
_BOOL_FIELDS = {"keep_workspaces", "use_docker"}


def _coerce(name: str, raw: str, default: Any) -> Any:
    try:
        if name in _INT_FIELDS:
            return int(raw)
        if name in _FLOAT_FIELDS:
            return float(raw)
    except ValueError as e:
        raise ValueError(f"{ENV_PREFIX}{name.upper()} must be a number, got {raw!r}") from e
    if name in _BOOL_FIELDS:
        return raw.strip().lower() in ("1", "true", "yes", "on")
    return raw

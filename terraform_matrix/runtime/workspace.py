"""Per-case scratch copies of a module."""

import json
import logging
import shutil
import tempfile
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from terraform_matrix.matrix.schema import VariableSet

logger = logging.getLogger(__name__)

WRAPPER_FILE = "main.tf.json"
TFVARS_FILE = "terraform.tfvars.json"
MODULE_LABEL = "under_test"
MODULE_SUBDIR = "module"

# Arguments Terraform reserves inside a module block
RESERVED_MODULE_ARGUMENTS = frozenset({
    "source", "version", "providers", "count", "for_each", "depends_on",
})

_IGNORE = shutil.ignore_patterns(
    ".terraform",
    "terraform.tfstate",
    "terraform.tfstate.*",
    "*.tfstate.backup",
    "crash.log",
    TFVARS_FILE,
)


class VariableMode(str, Enum):
    """How a variable set reaches the module."""
    WRAPPER = "wrapper"
    TFVARS = "tfvars"


class IsolatedWorkspace:
    """
    Clone a module into a fresh scratch directory and write a variable set.

    In wrapper mode the clone sits in ``module/`` under a generated root
    configuration that calls it with the variables as module arguments, so
    terraform validate checks names and types. In tfvars mode the variables
    are written to ``terraform.tfvars.json`` inside the clone.

    Usage:
        with IsolatedWorkspace(module_dir, variables) as ws:
            TerraformRuntime(ws.terraform_dir).init()
    """

    def __init__(
        self,
        module_dir: Union[str, Path],
        variables: VariableSet,
        mode: Union[VariableMode, str] = VariableMode.WRAPPER,
        scratch_root: Optional[str] = None,
        keep: bool = False,
        prefix: str = "tf-matrix-",
    ):
        self.module_dir = Path(module_dir)
        self.variables = variables
        self.mode = VariableMode(mode)
        self.scratch_root = scratch_root
        self.keep = keep
        self.prefix = prefix
        self.root: Optional[Path] = None

    @property
    def clone_dir(self) -> Path:
        self._require_created()
        if self.mode == VariableMode.WRAPPER:
            return self.root / MODULE_SUBDIR
        return self.root

    @property
    def terraform_dir(self) -> Path:
        """Directory terraform runs in."""
        self._require_created()
        return self.root

    def create(self) -> Path:
        """Copy the module and write the variables; returns the terraform directory."""
        if not self.module_dir.is_dir():
            raise FileNotFoundError(f"Module directory not found: {self.module_dir}")

        if self.mode == VariableMode.WRAPPER:
            reserved = RESERVED_MODULE_ARGUMENTS.intersection(self.variables)
            if reserved:
                raise ValueError(
                    f"Variables {', '.join(sorted(reserved))} clash with module block arguments; "
                    f"use tfvars mode for this module"
                )

        if self.scratch_root:
            Path(self.scratch_root).mkdir(parents=True, exist_ok=True)
        self.root = Path(tempfile.mkdtemp(prefix=self.prefix, dir=self.scratch_root))

        try:
            if self.mode == VariableMode.WRAPPER:
                self._create_wrapper()
            else:
                self._create_tfvars()
        except BaseException:
            self.cleanup()
            raise

        logger.debug(f"Created workspace {self.root} for {self.module_dir} ({self.mode.value})")
        return self.terraform_dir

    def cleanup(self) -> None:
        """Remove the scratch directory unless it is being kept."""
        if self.root is None or self.keep:
            return
        shutil.rmtree(self.root, ignore_errors=True)
        logger.debug(f"Removed workspace {self.root}")
        self.root = None

    def _create_wrapper(self) -> None:
        shutil.copytree(self.module_dir, self.root / MODULE_SUBDIR, ignore=_IGNORE)

        # A provider lock file only applies to the root configuration
        lock_file = self.module_dir / ".terraform.lock.hcl"
        if lock_file.exists():
            shutil.copy2(lock_file, self.root / ".terraform.lock.hcl")

        arguments = {"source": f"./{MODULE_SUBDIR}"}
        arguments.update(escape_templates(self.variables))
        config = {"module": {MODULE_LABEL: arguments}}
        _write_json(self.root / WRAPPER_FILE, config)

    def _create_tfvars(self) -> None:
        shutil.copytree(self.module_dir, self.root, ignore=_IGNORE, dirs_exist_ok=True)
        _write_json(self.root / TFVARS_FILE, self.variables)

    def _require_created(self) -> None:
        if self.root is None:
            raise RuntimeError("Workspace has not been created")

    def __enter__(self) -> "IsolatedWorkspace":
        self.create()
        return self

    def __exit__(self, *args) -> None:
        self.cleanup()


def escape_templates(value: Any) -> Any:
    """
    Make a value literal inside a JSON configuration file.

    Terraform reads strings and object keys in `.tf.json` arguments as
    templates, so `${` and `%{` sequences are doubled. Values in a tfvars
    file are already literal and need no escaping.
    """
    if isinstance(value, str):
        return value.replace("${", "$${").replace("%{", "%%{")
    if isinstance(value, dict):
        return {escape_templates(k): escape_templates(v) for k, v in value.items()}
    if isinstance(value, list):
        return [escape_templates(v) for v in value]
    return value


def _write_json(path: Path, data) -> None:
    with open(path, "w") as f:
        json.dump(data, f, indent=2)
        f.write("\n")

"""Shared fixtures for the matrix tests."""

import json
from pathlib import Path
from typing import List, Optional

import pytest

from terraform_matrix.matrix import MatrixBuilder, ModuleSpec
from terraform_matrix.runtime import CommandResult, ValidationResult


class FakeTerraform:
    """
    Stands in for TerraformRuntime.

    Validity is read from the generated wrapper: a case passing
    ``broken=True`` is reported invalid, anything else is valid.
    """

    def __init__(
        self,
        working_dir: Path,
        init_returncode: int = 0,
        validate_stdout: Optional[str] = None,
        outcomes: Optional[List[bool]] = None,
    ):
        self.working_dir = Path(working_dir)
        self.init_returncode = init_returncode
        self.validate_stdout = validate_stdout
        self.outcomes = list(outcomes) if outcomes else None
        self.calls = []

    def _variables(self) -> dict:
        wrapper = self.working_dir / "main.tf.json"
        if wrapper.exists():
            return json.loads(wrapper.read_text())["module"]["under_test"]
        tfvars = self.working_dir / "terraform.tfvars.json"
        return json.loads(tfvars.read_text())

    def init(self, timeout: float = 300) -> CommandResult:
        self.calls.append(("init", timeout))
        stderr = "Error: Failed to query available provider packages" if self.init_returncode else ""
        if self.init_returncode == -1:
            stderr = "Command not found: terraform"
        return CommandResult(self.init_returncode, "Terraform has been initialized!", stderr, 0.5)

    def validate(self, timeout: float = 120):
        self.calls.append(("validate", timeout))
        if self.validate_stdout is not None:
            return CommandResult(1, self.validate_stdout, "", 0.1), None

        if self.outcomes is not None:
            valid = self.outcomes.pop(0)
        else:
            valid = not self._variables().get("broken", False)

        payload = {"valid": valid, "error_count": 0 if valid else 1, "warning_count": 0, "diagnostics": []}
        if not valid:
            payload["diagnostics"].append({
                "severity": "error",
                "summary": "Unsupported argument",
                "detail": 'An argument named "broken" is not expected here.',
            })
        stdout = json.dumps(payload)
        return CommandResult(0 if valid else 1, stdout, "", 0.2), ValidationResult.from_json(stdout)

    def version(self, timeout: float = 30) -> Optional[str]:
        return "1.6.6"


@pytest.fixture
def module_dir(tmp_path: Path) -> Path:
    """A small module with the files terraform leaves behind after a run."""
    root = tmp_path / "modules" / "demo"
    root.mkdir(parents=True)
    (root / "main.tf").write_text('resource "null_resource" "this" {}\n')
    (root / "variables.tf").write_text('variable "name" {\n  type = string\n}\n')
    (root / ".terraform.lock.hcl").write_text("# lock\n")
    (root / "terraform.tfstate").write_text("{}")
    (root / ".terraform" / "providers").mkdir(parents=True)
    return root


@pytest.fixture
def demo_module(module_dir: Path) -> ModuleSpec:
    return ModuleSpec(name="demo", path=str(module_dir))


@pytest.fixture
def demo_suite(demo_module: ModuleSpec):
    return (
        MatrixBuilder("TestDemoModule", demo_module, {"name": "demo"})
        .case("Valid")
        .case("Broken", broken=True)
        .case("ExpectedFailure", broken=True, expect_valid=False)
        .build()
    )


@pytest.fixture
def fake_factory():
    """Factory for MatrixRunner(runtime_factory=...) that remembers every runtime it made."""

    class Factory:
        def __init__(self):
            self.created: List[FakeTerraform] = []
            self.options = {}

        def __call__(self, working_dir: Path) -> FakeTerraform:
            runtime = FakeTerraform(working_dir, **self.options)
            self.created.append(runtime)
            return runtime

    return Factory()


@pytest.fixture
def scratch_dir(tmp_path: Path) -> Path:
    path = tmp_path / "scratch"
    path.mkdir()
    return path

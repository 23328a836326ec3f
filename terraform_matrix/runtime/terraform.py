"""Terraform CLI invocation."""

import json
import logging
import os
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

# Keeps terraform non-interactive and quiet about upgrade checks
AUTOMATION_ENV = {
    "TF_IN_AUTOMATION": "1",
    "TF_INPUT": "0",
    "CHECKPOINT_DISABLE": "1",
}


@dataclass
class CommandResult:
    """Result of a subprocess command."""
    returncode: int
    stdout: str
    stderr: str
    duration_seconds: float

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Combined output; terraform writes diagnostics to both streams."""
        if self.stdout and self.stderr:
            return self.stdout + "\n" + self.stderr
        return self.stdout or self.stderr


@dataclass
class ValidationResult:
    """Parsed ``terraform validate -json`` output."""
    valid: bool
    error_count: int = 0
    warning_count: int = 0
    diagnostics: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_json(cls, text: str) -> 'ValidationResult':
        """Parse validate output; raises ValueError when it is not the expected JSON."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse validate output: {e}") from e

        if not isinstance(data, dict) or "valid" not in data:
            raise ValueError("validate output has no 'valid' field")

        return cls(
            valid=bool(data["valid"]),
            error_count=data.get("error_count", 0),
            warning_count=data.get("warning_count", 0),
            diagnostics=data.get("diagnostics", []),
        )

    def error_summaries(self) -> List[str]:
        """One line per error diagnostic."""
        lines = []
        for diag in self.diagnostics:
            if diag.get("severity") != "error":
                continue
            summary = diag.get("summary", "")
            detail = diag.get("detail", "")
            lines.append(f"{summary}: {detail}" if detail else summary)
        return lines


class DockerTerraform:
    """Runs terraform inside a container with the working directory mounted."""

    def __init__(
        self,
        image: str = "hashicorp/terraform:latest",
        docker_binary: str = "docker",
        mount_path: str = "/workspace",
    ):
        self.image = image
        self.docker_binary = docker_binary
        self.mount_path = mount_path

    def wrap(self, args: List[str], working_dir: Path, env: Dict[str, str]) -> List[str]:
        """
        Turn a local ``terraform ...`` command into a ``docker run`` command.

        The image's entrypoint is terraform, so the binary name is dropped.
        Only the automation variables and the plugin cache are forwarded.
        """
        cmd = [
            self.docker_binary, "run", "--rm",
            "-v", f"{working_dir}:{self.mount_path}",
            "-w", self.mount_path,
        ]
        for key in AUTOMATION_ENV:
            cmd.extend(["-e", f"{key}={env[key]}"])

        cache_dir = env.get("TF_PLUGIN_CACHE_DIR")
        if cache_dir:
            cmd.extend(["-v", f"{cache_dir}:/plugin-cache", "-e", "TF_PLUGIN_CACHE_DIR=/plugin-cache"])

        cmd.append(self.image)
        cmd.extend(args[1:])
        return cmd


class TerraformRuntime:
    """Runs terraform subcommands in one working directory."""

    def __init__(
        self,
        working_dir: str,
        binary: str = "terraform",
        plugin_cache_dir: Optional[str] = None,
        docker: Optional[DockerTerraform] = None,
    ):
        """
        Initialize Terraform runtime.

        Args:
            working_dir: Directory containing the root configuration
            binary: Terraform executable name or path
            plugin_cache_dir: Optional shared provider plugin cache
            docker: Run commands in a container instead of on the host
        """
        self.working_dir = Path(working_dir)
        self.binary = binary
        self.plugin_cache_dir = plugin_cache_dir
        self.docker = docker

    def init(self, timeout: float = 300) -> CommandResult:
        """Run terraform init."""
        return self.run_command([self.binary, "init", "-input=false", "-no-color"], timeout=timeout)

    def validate(self, timeout: float = 120) -> Tuple[CommandResult, Optional[ValidationResult]]:
        """
        Run terraform validate -json.

        Returns:
            The command result and the parsed validation result; the latter is
            None when the output could not be parsed (e.g. the binary is missing).
        """
        result = self.run_command([self.binary, "validate", "-json", "-no-color"], timeout=timeout)
        try:
            return result, ValidationResult.from_json(result.stdout)
        except ValueError as e:
            logger.debug(f"Unparsable validate output in {self.working_dir}: {e}")
            return result, None

    def version(self, timeout: float = 30) -> Optional[str]:
        """Return the terraform version string, or None if terraform is unavailable."""
        result = self.run_command([self.binary, "version", "-json"], timeout=timeout)
        if not result.success:
            return None
        try:
            return json.loads(result.stdout).get("terraform_version")
        except json.JSONDecodeError:
            return None

    def environment(self) -> Dict[str, str]:
        env = os.environ.copy()
        env.update(AUTOMATION_ENV)
        if self.plugin_cache_dir:
            Path(self.plugin_cache_dir).mkdir(parents=True, exist_ok=True)
            env["TF_PLUGIN_CACHE_DIR"] = str(self.plugin_cache_dir)
        return env

    def run_command(self, args: List[str], timeout: float = 300) -> CommandResult:
        """
        Run a command in the working directory.

        Missing binaries, missing directories and timeouts are reported as a
        result with returncode -1; they are not raised.
        """
        env = self.environment()
        if self.docker is not None:
            args = self.docker.wrap(args, self.working_dir, env)

        logger.debug(f"Running {' '.join(args)} in {self.working_dir}")
        start = time.monotonic()

        if not self.working_dir.is_dir():
            return CommandResult(
                returncode=-1,
                stdout="",
                stderr=f"Working directory not found: {self.working_dir}",
                duration_seconds=0.0,
            )

        try:
            result = subprocess.run(
                args,
                cwd=self.working_dir,
                capture_output=True,
                text=True,
                timeout=timeout,
                env=env,
            )
            return CommandResult(
                returncode=result.returncode,
                stdout=result.stdout,
                stderr=result.stderr,
                duration_seconds=time.monotonic() - start,
            )
        except subprocess.TimeoutExpired:
            return CommandResult(
                returncode=-1,
                stdout="",
                stderr=f"Command timed out after {timeout:.0f}s",
                duration_seconds=time.monotonic() - start,
            )
        except FileNotFoundError:
            return CommandResult(
                returncode=-1,
                stdout="",
                stderr=f"Command not found: {args[0]}",
                duration_seconds=time.monotonic() - start,
            )

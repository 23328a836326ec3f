"""Loading and saving suites as JSON."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional

from .schema import MatrixSuite, validate_suite

logger = logging.getLogger(__name__)


class SuiteLoader:
    """Load suites from a JSON file or a directory of JSON files."""

    def __init__(self, suites_path: str):
        """
        Initialize suite loader.

        Args:
            suites_path: JSON file (one suite or a list of suites) or a
                directory searched recursively for ``*.json``
        """
        self.suites_path = Path(suites_path)
        if not self.suites_path.exists():
            raise FileNotFoundError(f"Suites not found: {suites_path}")

    def load(self, validate: bool = True) -> List[MatrixSuite]:
        """Load all suites into memory."""
        return list(self.stream(validate=validate))

    def stream(self, validate: bool = True) -> Iterator[MatrixSuite]:
        """Yield suites one at a time in file order."""
        for path in self._files():
            logger.debug(f"Loading suites from {path}")
            for idx, suite_dict in enumerate(self._read(path)):
                if validate:
                    errors = validate_suite(suite_dict)
                    if errors:
                        raise ValueError(
                            f"Validation errors in {path} (suite {idx}):\n" +
                            "\n".join(f"  - {e}" for e in errors)
                        )

                try:
                    yield MatrixSuite.from_dict(suite_dict)
                except (KeyError, TypeError) as e:
                    raise ValueError(f"Error parsing suite {idx} in {path}: {e}") from e

    def get_by_name(self, name: str) -> Optional[MatrixSuite]:
        """Get a specific suite by name."""
        for suite in self.stream(validate=False):
            if suite.name == name:
                return suite
        return None

    def _files(self) -> List[Path]:
        if self.suites_path.is_file():
            return [self.suites_path]
        return sorted(self.suites_path.rglob("*.json"))

    def _read(self, path: Path) -> List[Dict[str, Any]]:
        with open(path, 'r') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in {path}: {e}") from e

        if isinstance(data, dict):
            return [data]
        if isinstance(data, list):
            return data
        raise ValueError(f"{path} must contain a suite object or a list of suites")


def save_suites(suites: Iterable[MatrixSuite], output_path: str) -> None:
    """
    Save suites to a single JSON file.

    Args:
        suites: Suites to write
        output_path: Destination file
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with open(output, 'w') as f:
        json.dump([s.to_dict() for s in suites], f, indent=2)
        f.write('\n')


def load_suites(path: str, validate: bool = True) -> List[MatrixSuite]:
    """
    Load suites from a JSON file or directory.

    Examples:
        >>> suites = load_suites('matrices/')
        >>> suites = load_suites('matrices/rds.json')
    """
    return SuiteLoader(path).load(validate=validate)

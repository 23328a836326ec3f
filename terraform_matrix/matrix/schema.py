"""Matrix schema definitions and validation."""

import copy
import json
from pathlib import Path
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field

VariableSet = Dict[str, Any]


@dataclass(frozen=True)
class ModuleSpec:
    """A Terraform module directory under test."""
    name: str
    path: str

    def resolve(self, modules_dir: Optional[str] = None) -> Path:
        """
        Resolve the module directory.

        Relative paths are taken against ``modules_dir`` when given, otherwise
        against the current directory. The directory is not required to exist;
        a missing module becomes an error result for each case that targets it.
        """
        path = Path(self.path)
        if not path.is_absolute() and modules_dir:
            path = Path(modules_dir) / path
        return path.resolve()

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "path": self.path}


@dataclass
class TestCase:
    """A named variable set and its expected validation outcome."""
    __test__ = False

    name: str
    variables: VariableSet
    expect_valid: bool = True
    description: str = ""
    labels: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_variables: Optional[VariableSet] = None) -> 'TestCase':
        """Create a case from a dictionary, merging ``overrides`` into ``base_variables``."""
        variables = copy.deepcopy(base_variables or {})
        variables.update(copy.deepcopy(data.get('variables', {})))
        variables.update(copy.deepcopy(data.get('overrides', {})))

        return cls(
            name=data['name'],
            variables=variables,
            expect_valid=data.get('expect_valid', True),
            description=data.get('description', ''),
            labels=list(data.get('labels', [])),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert case to dictionary."""
        return {
            'name': self.name,
            'variables': self.variables,
            'expect_valid': self.expect_valid,
            'description': self.description,
            'labels': self.labels,
        }


@dataclass
class MatrixSuite:
    """An ordered table of cases run against one module."""
    name: str
    module: ModuleSpec
    cases: List[TestCase]
    description: str = ""

    def __iter__(self):
        return iter(self.cases)

    def __len__(self) -> int:
        return len(self.cases)

    def get_case(self, name: str) -> Optional[TestCase]:
        for case in self.cases:
            if case.name == name:
                return case
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MatrixSuite':
        """Create suite from dictionary."""
        base = data.get('base_variables', {})
        return cls(
            name=data['name'],
            module=ModuleSpec(**data['module']),
            cases=[TestCase.from_dict(c, base) for c in data['cases']],
            description=data.get('description', ''),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert suite to dictionary with fully expanded cases."""
        return {
            'name': self.name,
            'module': self.module.to_dict(),
            'description': self.description,
            'cases': [c.to_dict() for c in self.cases],
        }


def validate_suite(suite: Dict[str, Any]) -> List[str]:
    """
    Validate a raw suite definition.

    Args:
        suite: Dictionary representation of a suite

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    for required in ('name', 'module', 'cases'):
        if required not in suite:
            errors.append(f"Missing required field: {required}")

    module = suite.get('module')
    if module is not None:
        if not isinstance(module, dict):
            errors.append("module must be a dictionary")
        else:
            for key in ('name', 'path'):
                if not module.get(key):
                    errors.append(f"module.{key} is required")

    base = suite.get('base_variables', {})
    if not isinstance(base, dict):
        errors.append("base_variables must be a dictionary")
    elif not _is_json_serialisable(base):
        errors.append("base_variables must be JSON-serialisable")

    cases = suite.get('cases')
    if cases is None:
        return errors
    if not isinstance(cases, list):
        errors.append("cases must be a list")
        return errors
    if not cases:
        errors.append("cases must not be empty")

    seen = set()
    for idx, case in enumerate(cases):
        if not isinstance(case, dict):
            errors.append(f"cases[{idx}] must be a dictionary")
            continue

        name = case.get('name')
        if not name:
            errors.append(f"cases[{idx}] is missing a name")
        elif name in seen:
            errors.append(f"Duplicate case name: {name}")
        else:
            seen.add(name)

        for key in ('variables', 'overrides'):
            if key not in case:
                continue
            if not isinstance(case[key], dict):
                errors.append(f"cases[{idx}].{key} must be a dictionary")
            elif not _is_json_serialisable(case[key]):
                errors.append(f"cases[{idx}].{key} must be JSON-serialisable")

        if 'expect_valid' in case and not isinstance(case['expect_valid'], bool):
            errors.append(f"cases[{idx}].expect_valid must be a boolean")

        if 'labels' in case and not isinstance(case['labels'], list):
            errors.append(f"cases[{idx}].labels must be a list")

    return errors


def _is_json_serialisable(value: Any) -> bool:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return False
    return True

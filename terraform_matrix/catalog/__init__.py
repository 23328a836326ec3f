"""Built-in suites for the modules shipped under ``modules/``."""

from typing import Dict, Iterable, List, Optional

from terraform_matrix.matrix import MatrixSuite
from terraform_matrix.catalog import vpc, ecs, rds, ec2_splunk, secrets_manager

# Every module's suites must include at least one case with each of these labels
REQUIRED_SHAPES = ("defaults", "min", "max", "toggle-off")

_PROVIDERS = {
    "vpc": vpc.suites,
    "ecs": ecs.suites,
    "rds": rds.suites,
    "ec2-splunk": ec2_splunk.suites,
    "secrets-manager": secrets_manager.suites,
}


def module_names() -> List[str]:
    """Names of the modules covered by the catalog."""
    return list(_PROVIDERS)


def suites_for_module(module: str) -> List[MatrixSuite]:
    """All suites for one module; raises KeyError for an unknown module."""
    if module not in _PROVIDERS:
        raise KeyError(f"Unknown module: {module} (known: {', '.join(_PROVIDERS)})")
    return _PROVIDERS[module]()


def all_suites() -> List[MatrixSuite]:
    """Every catalog suite, grouped by module in catalog order."""
    suites = []
    for provider in _PROVIDERS.values():
        suites.extend(provider())
    return suites


def get_suite(name: str) -> Optional[MatrixSuite]:
    """Look up a suite by name."""
    for suite in all_suites():
        if suite.name == name:
            return suite
    return None


def coverage_gaps(
    suites: Iterable[MatrixSuite],
    modules: Optional[Iterable[str]] = None,
) -> Dict[str, List[str]]:
    """
    Report modules missing one of the required case shapes.

    Args:
        suites: Suites to inspect
        modules: Modules expected to be covered; defaults to the catalog
            modules. A module without any suite misses every shape.

    Returns:
        Mapping of module name to the missing labels; modules with full
        coverage are omitted.
    """
    expected = module_names() if modules is None else modules
    seen: Dict[str, set] = {module: set() for module in expected}
    for suite in suites:
        labels = seen.setdefault(suite.module.name, set())
        for case in suite.cases:
            labels.update(case.labels)

    return {
        module: [shape for shape in REQUIRED_SHAPES if shape not in labels]
        for module, labels in seen.items()
        if any(shape not in labels for shape in REQUIRED_SHAPES)
    }


__all__ = [
    "REQUIRED_SHAPES",
    "module_names",
    "suites_for_module",
    "all_suites",
    "get_suite",
    "coverage_gaps",
]

"""Table-driven construction of matrix suites."""

import copy
import itertools
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from .schema import MatrixSuite, ModuleSpec, TestCase, VariableSet

CaseNamer = Union[str, Callable[..., str], None]


class MatrixBuilder:
    """
    Build a suite from a base variable set plus per-case overrides.

    Every case starts from a deep copy of ``base_variables``; overrides replace
    whole values (a list or map override is not merged into the base one).

    Example:
        >>> suite = (
        ...     MatrixBuilder("TestRdsModuleDatabaseEngines", ModuleSpec("rds", "rds"), base)
        ...     .case("MySQL8", db_engine="mysql", db_engine_version="8.0.35")
        ...     .sweep("db_instance_class", ["db.t3.micro", "db.r5.large"])
        ...     .build()
        ... )
    """

    def __init__(
        self,
        suite_name: str,
        module: ModuleSpec,
        base_variables: Optional[VariableSet] = None,
        description: str = "",
    ):
        self.suite_name = suite_name
        self.module = module
        self.base_variables = dict(base_variables or {})
        self.description = description
        self._cases: List[TestCase] = []

    def case(
        self,
        name: str,
        variables: Optional[VariableSet] = None,
        *,
        expect_valid: bool = True,
        labels: Optional[List[str]] = None,
        description: str = "",
        **overrides: Any,
    ) -> 'MatrixBuilder':
        """
        Add a single case.

        Overrides come from ``variables`` and keyword arguments, keywords last.
        A Terraform variable whose name clashes with a parameter here
        (``name``, ``labels``, ...) goes through ``variables``.
        """
        merged = dict(variables or {})
        merged.update(overrides)
        self._cases.append(TestCase(
            name=name,
            variables=self._merge(merged),
            expect_valid=expect_valid,
            description=description,
            labels=list(labels or []),
        ))
        return self

    def table(self, rows: Iterable[Dict[str, Any]], labels: Optional[List[str]] = None) -> 'MatrixBuilder':
        """
        Add one case per row.

        Each row holds a ``name`` key and the variable overrides for that case.
        ``expect_valid``, ``labels`` and ``description`` keys are taken as case
        attributes; ``labels`` here are added to every row.
        """
        for row in rows:
            row = dict(row)
            name = row.pop('name')
            expect_valid = row.pop('expect_valid', True)
            row_labels = list(labels or []) + list(row.pop('labels', []))
            description = row.pop('description', '')
            self.case(name, row, expect_valid=expect_valid, labels=row_labels, description=description)
        return self

    def sweep(
        self,
        variable: str,
        values: Iterable[Any],
        name: CaseNamer = None,
        labels: Optional[List[str]] = None,
    ) -> 'MatrixBuilder':
        """
        Add one case per value of a single variable.

        ``name`` is a format string over ``value`` (``"RecoveryWindow_{value}"``)
        or a callable taking ``value``; the default is ``str(value)``.
        """
        for value in values:
            self.case(_name_case(name, value=value), {variable: value}, labels=labels)
        return self

    def grid(
        self,
        axes: Dict[str, Iterable[Any]],
        name: CaseNamer = None,
        labels: Optional[List[str]] = None,
    ) -> 'MatrixBuilder':
        """
        Add the cartesian product of several variables.

        ``name`` is a format string over the axis names, e.g.
        ``"{create_splunk_secret}_{create_dockerhub_secret}"``, or a callable
        receiving the axis values as keyword arguments. The default joins the
        values with underscores.
        """
        keys = list(axes)
        for combination in itertools.product(*(list(axes[k]) for k in keys)):
            overrides = dict(zip(keys, combination))
            if name is None:
                case_name = "_".join(str(v) for v in combination)
            else:
                case_name = _name_case(name, **overrides)
            self.case(case_name, overrides, labels=labels)
        return self

    def build(self) -> MatrixSuite:
        """Return the suite; raises ValueError for an empty table or duplicate names."""
        if not self._cases:
            raise ValueError(f"Suite {self.suite_name} has no cases")

        seen = set()
        for case in self._cases:
            if case.name in seen:
                raise ValueError(f"Duplicate case name in {self.suite_name}: {case.name}")
            seen.add(case.name)

        return MatrixSuite(
            name=self.suite_name,
            module=self.module,
            cases=list(self._cases),
            description=self.description,
        )

    def _merge(self, overrides: Dict[str, Any]) -> VariableSet:
        variables = copy.deepcopy(self.base_variables)
        variables.update(copy.deepcopy(overrides))
        return variables


def _name_case(namer: CaseNamer, **values: Any) -> str:
    if namer is None:
        return str(values.get('value'))
    if callable(namer):
        return namer(**values)
    return namer.format(**values)

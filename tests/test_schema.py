"""Tests for suite schema validation and parsing."""

from terraform_matrix.matrix import MatrixSuite, ModuleSpec, TestCase, validate_suite


def make_suite_dict(**overrides):
    suite = {
        "name": "TestRdsModuleDatabaseEngines",
        "module": {"name": "rds", "path": "rds"},
        "base_variables": {"db_engine": "postgres", "db_port": 5432},
        "cases": [
            {"name": "PostgreSQL15"},
            {"name": "MySQL8", "overrides": {"db_engine": "mysql", "db_port": 3306}},
        ],
    }
    suite.update(overrides)
    return suite


class TestValidateSuite:
    def test_valid_suite(self):
        assert validate_suite(make_suite_dict()) == []

    def test_missing_fields(self):
        errors = validate_suite({"name": "TestEmpty"})
        assert "Missing required field: module" in errors
        assert "Missing required field: cases" in errors

    def test_module_needs_name_and_path(self):
        errors = validate_suite(make_suite_dict(module={"name": "rds"}))
        assert errors == ["module.path is required"]

    def test_empty_cases(self):
        assert validate_suite(make_suite_dict(cases=[])) == ["cases must not be empty"]

    def test_duplicate_case_names(self):
        errors = validate_suite(make_suite_dict(cases=[{"name": "A"}, {"name": "A"}]))
        assert errors == ["Duplicate case name: A"]

    def test_variables_must_be_mapping(self):
        errors = validate_suite(make_suite_dict(cases=[{"name": "A", "variables": ["x"]}]))
        assert errors == ["cases[0].variables must be a dictionary"]

    def test_values_must_be_json(self):
        errors = validate_suite(make_suite_dict(cases=[{"name": "A", "overrides": {"x": object()}}]))
        assert errors == ["cases[0].overrides must be JSON-serialisable"]

    def test_expect_valid_must_be_bool(self):
        errors = validate_suite(make_suite_dict(cases=[{"name": "A", "expect_valid": "no"}]))
        assert errors == ["cases[0].expect_valid must be a boolean"]

    def test_base_variables_must_be_mapping(self):
        errors = validate_suite(make_suite_dict(base_variables=[1, 2]))
        assert errors == ["base_variables must be a dictionary"]


class TestParsing:
    def test_overrides_merged_into_base(self):
        suite = MatrixSuite.from_dict(make_suite_dict())

        assert suite.module == ModuleSpec("rds", "rds")
        assert suite.get_case("PostgreSQL15").variables == {"db_engine": "postgres", "db_port": 5432}
        assert suite.get_case("MySQL8").variables == {"db_engine": "mysql", "db_port": 3306}

    def test_cases_do_not_share_base_values(self):
        data = make_suite_dict()
        data["base_variables"]["subnets"] = ["a"]
        suite = MatrixSuite.from_dict(data)

        suite.cases[0].variables["subnets"].append("b")

        assert suite.cases[1].variables["subnets"] == ["a"]
        assert data["base_variables"]["subnets"] == ["a"]

    def test_case_defaults(self):
        case = TestCase.from_dict({"name": "A", "variables": {"x": 1}})

        assert case.expect_valid is True
        assert case.labels == []
        assert case.description == ""

    def test_to_dict_is_fully_expanded(self):
        data = MatrixSuite.from_dict(make_suite_dict()).to_dict()

        assert "base_variables" not in data
        assert data["cases"][1]["variables"] == {"db_engine": "mysql", "db_port": 3306}
        assert validate_suite(data) == []

    def test_iteration(self):
        suite = MatrixSuite.from_dict(make_suite_dict())

        assert len(suite) == 2
        assert [c.name for c in suite] == ["PostgreSQL15", "MySQL8"]
        assert suite.get_case("Oracle") is None


class TestModuleSpec:
    def test_relative_path_resolved_against_modules_dir(self, tmp_path):
        spec = ModuleSpec("vpc", "vpc")
        assert spec.resolve(str(tmp_path)) == (tmp_path / "vpc").resolve()

    def test_absolute_path_kept(self, tmp_path):
        spec = ModuleSpec("vpc", str(tmp_path / "elsewhere"))
        assert spec.resolve("modules") == (tmp_path / "elsewhere").resolve()

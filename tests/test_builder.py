"""Tests for MatrixBuilder."""

import pytest

from terraform_matrix.matrix import MatrixBuilder, ModuleSpec

MODULE = ModuleSpec("secrets-manager", "secrets-manager")
BASE = {
    "project_name": "test-project",
    "create_kms_key": False,
    "kms_key_id": None,
    "application_secrets": {"API_KEY": "a"},
}


class TestAddCase:
    def test_overrides_replace_whole_values(self):
        suite = (
            MatrixBuilder("TestSecrets", MODULE, BASE)
            .case("Override", application_secrets={"JWT_SECRET": "j"})
            .build()
        )
        assert suite.cases[0].variables["application_secrets"] == {"JWT_SECRET": "j"}

    def test_base_not_mutated(self):
        base = dict(BASE)
        MatrixBuilder("TestSecrets", MODULE, base).case("A", create_kms_key=True).build()
        assert base == BASE

    def test_cases_do_not_share_nested_values(self):
        base = {"availability_zones": ["us-east-1a"], "tags": {"Team": "platform"}}
        suite = MatrixBuilder("TestVpc", MODULE, base).case("A").case("B").build()

        suite.cases[0].variables["availability_zones"].append("us-east-1z")
        suite.cases[0].variables["tags"]["Team"] = "other"

        assert suite.cases[1].variables == {"availability_zones": ["us-east-1a"], "tags": {"Team": "platform"}}
        assert base == {"availability_zones": ["us-east-1a"], "tags": {"Team": "platform"}}

    def test_override_values_copied(self):
        subnets = ["10.0.1.0/24"]
        suite = MatrixBuilder("TestVpc", MODULE).case("A", public_subnet_cidrs=subnets).build()
        subnets.append("10.0.2.0/24")
        assert suite.cases[0].variables["public_subnet_cidrs"] == ["10.0.1.0/24"]

    def test_variables_dict_then_keywords(self):
        suite = (
            MatrixBuilder("TestSecrets", MODULE)
            .case("A", {"create_kms_key": True, "kms_key_id": "x"}, kms_key_id=None)
            .build()
        )
        assert suite.cases[0].variables == {"create_kms_key": True, "kms_key_id": None}

    def test_case_attributes(self):
        suite = (
            MatrixBuilder("TestSecrets", MODULE, BASE)
            .case("A", expect_valid=False, labels=["min"], description="boundary")
            .build()
        )
        case = suite.cases[0]
        assert case.expect_valid is False
        assert case.labels == ["min"]
        assert case.description == "boundary"
        assert "labels" not in case.variables


class TestTable:
    def test_rows(self):
        suite = (
            MatrixBuilder("TestSecretsKMS", MODULE, BASE)
            .table([
                {"name": "CreateNewKMSKey", "create_kms_key": True},
                {"name": "UseDefaultEncryption", "labels": ["toggle-off"]},
                {"name": "Broken", "kms_key_id": "not-an-arn", "expect_valid": False},
            ], labels=["kms"])
            .build()
        )

        assert [c.name for c in suite] == ["CreateNewKMSKey", "UseDefaultEncryption", "Broken"]
        assert suite.cases[0].variables["create_kms_key"] is True
        assert suite.cases[1].labels == ["kms", "toggle-off"]
        assert suite.cases[2].expect_valid is False
        assert "name" not in suite.cases[0].variables

    def test_rows_not_mutated(self):
        rows = [{"name": "A", "create_kms_key": True}]
        MatrixBuilder("T", MODULE, BASE).table(rows).build()
        assert rows == [{"name": "A", "create_kms_key": True}]


class TestSweep:
    def test_format_string(self):
        suite = (
            MatrixBuilder("TestRecoveryWindow", MODULE, BASE)
            .sweep("recovery_window_in_days", [0, 7, 14, 30], name="RecoveryWindow_{value}")
            .build()
        )
        assert [c.name for c in suite] == [
            "RecoveryWindow_0", "RecoveryWindow_7", "RecoveryWindow_14", "RecoveryWindow_30",
        ]
        assert [c.variables["recovery_window_in_days"] for c in suite] == [0, 7, 14, 30]

    def test_default_name(self):
        suite = MatrixBuilder("T", MODULE, BASE).sweep("db_instance_class", ["db.t3.micro"]).build()
        assert suite.cases[0].name == "db.t3.micro"

    def test_callable_name(self):
        suite = (
            MatrixBuilder("T", MODULE, BASE)
            .sweep("data_volume_type", ["gp3"], name=lambda value: value.upper())
            .build()
        )
        assert suite.cases[0].name == "GP3"


class TestGrid:
    def test_cartesian_product(self):
        suite = (
            MatrixBuilder("TestSecretTypes", MODULE, BASE)
            .grid({"create_splunk_secret": [True, False], "create_dockerhub_secret": [True, False]})
            .build()
        )
        assert [c.name for c in suite] == ["True_True", "True_False", "False_True", "False_False"]
        assert suite.cases[1].variables["create_dockerhub_secret"] is False

    def test_format_name(self):
        suite = (
            MatrixBuilder("T", MODULE, BASE)
            .grid({"engine": ["mysql"], "port": [3306]}, name="{engine}_{port}")
            .build()
        )
        assert suite.cases[0].name == "mysql_3306"


class TestBuild:
    def test_empty(self):
        with pytest.raises(ValueError, match="no cases"):
            MatrixBuilder("TestEmpty", MODULE).build()

    def test_duplicate_names(self):
        builder = MatrixBuilder("TestDup", MODULE, BASE).case("A").sweep("x", ["A"])
        with pytest.raises(ValueError, match="Duplicate case name in TestDup: A"):
            builder.build()

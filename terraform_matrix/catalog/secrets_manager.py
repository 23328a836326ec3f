"""Suites for the secrets-manager module."""

from typing import List

from terraform_matrix.matrix import MatrixBuilder, MatrixSuite, ModuleSpec

MODULE = ModuleSpec(name="secrets-manager", path="secrets-manager")

EXISTING_KMS_KEY_ARN = "arn:aws:kms:us-east-1:123456789012:key/12345678-1234-1234-1234-123456789012"

BASE_VARIABLES = {
    "project_name": "test-project",
    "environment": "test",
    "kms_key_id": None,
    "create_kms_key": False,
    "recovery_window_in_days": 7,
    "db_username": "admin",
    "db_password": "SecurePassword123!",
    "db_host": "db.example.com",
    "db_port": 5432,
    "db_name": "testdb",
    "application_secrets": {},
    "create_splunk_secret": False,
    "splunk_admin_password": "",
    "splunk_hec_token": "",
    "create_dockerhub_secret": False,
    "dockerhub_username": "",
    "dockerhub_password": "",
    "tags": {},
}

# Credentials used whenever an optional secret is switched on
OPTIONAL_SECRET_VALUES = {
    "splunk_admin_password": "SplunkAdmin123!",
    "splunk_hec_token": "12345678-1234-1234-1234-123456789012",
    "dockerhub_username": "testuser",
    "dockerhub_password": "testpassword",
}

RECOVERY_WINDOWS = [0, 7, 14, 30]


def suites() -> List[MatrixSuite]:
    return [
        MatrixBuilder("TestSecretsManagerModuleVariablesValidation", MODULE, BASE_VARIABLES)
        .case(
            "FullConfiguration",
            OPTIONAL_SECRET_VALUES,
            create_kms_key=True,
            application_secrets={"API_KEY": "test-api-key", "SECRET_KEY": "test-secret-key"},
            create_splunk_secret=True,
            create_dockerhub_secret=True,
            tags={"Environment": "test"},
        )
        .build(),

        MatrixBuilder(
            "TestSecretsManagerModuleSecretTypes",
            MODULE,
            dict(BASE_VARIABLES, create_kms_key=True, **OPTIONAL_SECRET_VALUES),
        )
        .table([
            {"name": "AllSecrets", "create_splunk_secret": True, "create_dockerhub_secret": True},
            {"name": "OnlyDatabaseAndApp", "create_splunk_secret": False, "create_dockerhub_secret": False},
            {"name": "WithSplunk", "create_splunk_secret": True, "create_dockerhub_secret": False},
            {"name": "WithDockerhub", "create_splunk_secret": False, "create_dockerhub_secret": True},
        ])
        .build(),

        MatrixBuilder("TestSecretsManagerModuleKMSConfiguration", MODULE, BASE_VARIABLES)
        .table([
            {"name": "CreateNewKMSKey", "create_kms_key": True, "kms_key_id": None},
            {"name": "UseExistingKMSKey", "create_kms_key": False, "kms_key_id": EXISTING_KMS_KEY_ARN},
            {
                "name": "UseDefaultEncryption",
                "create_kms_key": False,
                "kms_key_id": None,
                "labels": ["toggle-off"],
            },
        ])
        .build(),

        MatrixBuilder("TestSecretsManagerModuleRecoveryWindow", MODULE, BASE_VARIABLES)
        .sweep("recovery_window_in_days", RECOVERY_WINDOWS, name="RecoveryWindow_{value}")
        .build(),

        MatrixBuilder("TestSecretsManagerModuleApplicationSecrets", MODULE, BASE_VARIABLES)
        .table([
            {"name": "NoAppSecrets", "application_secrets": {}},
            {"name": "SingleSecret", "application_secrets": {"API_KEY": "placeholder-api-key"}},
            {
                "name": "MultipleSecrets",
                "application_secrets": {
                    "API_KEY": "placeholder-api-key",
                    "SECRET_KEY": "placeholder-secret-key",
                    "ENCRYPTION_KEY": "placeholder-encryption-key",
                    "JWT_SECRET": "placeholder-jwt-secret",
                },
            },
        ])
        .build(),

        MatrixBuilder("TestSecretsManagerModuleDatabasePorts", MODULE, BASE_VARIABLES)
        .table([
            {"name": "PostgreSQLDefaultPort", "db_port": 5432},
            {"name": "MySQLDefaultPort", "db_port": 3306},
            {"name": "SQLServerDefaultPort", "db_port": 1433},
            {"name": "CustomPort", "db_port": 5433},
        ])
        .build(),

        MatrixBuilder("TestSecretsManagerModuleBoundaries", MODULE)
        .case(
            "RequiredOnly",
            {
                "project_name": "test-project",
                "environment": "test",
                "db_password": "SecurePassword123!",
            },
            labels=["defaults"],
        )
        .case(
            "ImmediateDeletion",
            BASE_VARIABLES,
            labels=["min"],
            recovery_window_in_days=0,
            db_port=1,
        )
        .case(
            "LongestRecoveryWindow",
            BASE_VARIABLES,
            labels=["max"],
            recovery_window_in_days=30,
            db_port=65535,
        )
        .case(
            "OptionalSecretsDisabled",
            BASE_VARIABLES,
            labels=["toggle-off"],
            create_kms_key=False,
            create_splunk_secret=False,
            create_dockerhub_secret=False,
        )
        .build(),
    ]

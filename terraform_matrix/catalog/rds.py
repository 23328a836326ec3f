"""Suites for the rds module."""

from typing import List

from terraform_matrix.matrix import MatrixBuilder, MatrixSuite, ModuleSpec

MODULE = ModuleSpec(name="rds", path="rds")

BASE_VARIABLES = {
    "project_name": "test-project",
    "environment": "test",
    "vpc_id": "vpc-12345678",
    "private_subnet_ids": ["subnet-priv1", "subnet-priv2"],
    "allowed_security_groups": ["sg-12345678"],
    "db_engine": "postgres",
    "db_engine_version": "15.4",
    "db_instance_class": "db.t3.micro",
    "db_parameter_group_family": "postgres15",
    "db_parameters": [],
    "db_allocated_storage": 20,
    "db_max_allocated_storage": 100,
    "db_name": "testdb",
    "db_username": "admin",
    "db_password": "SecurePassword123!",
    "db_port": 5432,
    "multi_az": False,
    "deletion_protection": False,
    "skip_final_snapshot": True,
    "backup_retention_period": 7,
    "enable_enhanced_monitoring": False,
    "tags": {},
}

INSTANCE_CLASSES = [
    "db.t3.micro",
    "db.t3.small",
    "db.t3.medium",
    "db.r5.large",
    "db.r5.xlarge",
]


def suites() -> List[MatrixSuite]:
    return [
        MatrixBuilder("TestRdsModuleVariablesValidation", MODULE, BASE_VARIABLES)
        .case("FullConfiguration", tags={"Environment": "test"})
        .build(),

        MatrixBuilder("TestRdsModuleDatabaseEngines", MODULE, BASE_VARIABLES)
        .table([
            {
                "name": "PostgreSQL15",
                "db_engine": "postgres",
                "db_engine_version": "15.4",
                "db_parameter_group_family": "postgres15",
            },
            {
                "name": "PostgreSQL14",
                "db_engine": "postgres",
                "db_engine_version": "14.9",
                "db_parameter_group_family": "postgres14",
            },
            {
                "name": "MySQL8",
                "db_engine": "mysql",
                "db_engine_version": "8.0.35",
                "db_parameter_group_family": "mysql8.0",
            },
        ])
        .build(),

        MatrixBuilder("TestRdsModuleInstanceClasses", MODULE, BASE_VARIABLES)
        .sweep("db_instance_class", INSTANCE_CLASSES)
        .build(),

        MatrixBuilder("TestRdsModuleProductionConfiguration", MODULE, BASE_VARIABLES)
        .case(
            "Production",
            project_name="production-app",
            environment="production",
            private_subnet_ids=["subnet-priv1", "subnet-priv2", "subnet-priv3"],
            allowed_security_groups=["sg-12345678", "sg-87654321"],
            db_instance_class="db.r5.large",
            db_allocated_storage=100,
            db_max_allocated_storage=500,
            db_name="productiondb",
            db_password="VerySecureProductionPassword123!",
            multi_az=True,
            deletion_protection=True,
            skip_final_snapshot=False,
            backup_retention_period=30,
            enable_enhanced_monitoring=True,
            tags={"Environment": "production", "Critical": "true"},
        )
        .build(),

        MatrixBuilder("TestRdsModuleStorageConfiguration", MODULE, BASE_VARIABLES)
        .table([
            {"name": "SmallStorage", "db_allocated_storage": 20, "db_max_allocated_storage": 50},
            {"name": "MediumStorage", "db_allocated_storage": 100, "db_max_allocated_storage": 500},
            {"name": "LargeStorage", "db_allocated_storage": 500, "db_max_allocated_storage": 1000},
        ])
        .build(),

        MatrixBuilder("TestRdsModuleBoundaries", MODULE)
        .case(
            "RequiredOnly",
            {
                "project_name": "test-project",
                "environment": "test",
                "vpc_id": "vpc-12345678",
                "private_subnet_ids": ["subnet-priv1", "subnet-priv2"],
                "db_password": "SecurePassword123!",
            },
            labels=["defaults"],
        )
        .case(
            "MinimumStorageNoBackups",
            BASE_VARIABLES,
            labels=["min"],
            db_allocated_storage=20,
            db_max_allocated_storage=0,
            backup_retention_period=0,
        )
        .case(
            "MaximumStorage",
            BASE_VARIABLES,
            labels=["max"],
            db_instance_class="db.r5.24xlarge",
            db_allocated_storage=65536,
            db_max_allocated_storage=65536,
            backup_retention_period=35,
        )
        .case(
            "ParameterOverrides",
            BASE_VARIABLES,
            db_parameters=[
                {"name": "log_min_duration_statement", "value": "500"},
                {"name": "rds.force_ssl", "value": "1", "apply_method": "pending-reboot"},
            ],
        )
        .case(
            "HighAvailabilityDisabled",
            BASE_VARIABLES,
            labels=["toggle-off"],
            multi_az=False,
            deletion_protection=False,
            enable_enhanced_monitoring=False,
        )
        .build(),
    ]

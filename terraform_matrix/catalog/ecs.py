"""Suites for the ecs module."""

from typing import List

from terraform_matrix.matrix import MatrixBuilder, MatrixSuite, ModuleSpec

MODULE = ModuleSpec(name="ecs", path="ecs")

BASE_VARIABLES = {
    "project_name": "test-project",
    "environment": "test",
    "aws_region": "us-east-1",
    "vpc_id": "vpc-12345678",
    "public_subnet_ids": ["subnet-pub1"],
    "private_subnet_ids": ["subnet-priv1"],
    "docker_image": "nginx:latest",
    "container_name": "app",
    "container_port": 80,
    "task_cpu": 256,
    "task_memory": 512,
    "desired_count": 1,
    "min_capacity": 1,
    "max_capacity": 2,
    "health_check_path": "/",
    "secrets_manager_arns": [],
    "enable_container_insights": False,
    "log_retention_days": 7,
    "tags": {},
}

DOCKER_IMAGES = [
    "nginx",
    "nginx:latest",
    "nginx:1.25.0",
    "myuser/myapp",
    "myuser/myapp:v1.0.0",
    "myuser/myapp:latest",
    "ghcr.io/owner/image:tag",
]


def suites() -> List[MatrixSuite]:
    return [
        MatrixBuilder("TestEcsModuleVariablesValidation", MODULE, BASE_VARIABLES)
        .case(
            "FullConfiguration",
            public_subnet_ids=["subnet-pub1", "subnet-pub2"],
            private_subnet_ids=["subnet-priv1", "subnet-priv2"],
            container_port=8080,
            desired_count=2,
            max_capacity=4,
            health_check_path="/health",
            secrets_manager_arns=["arn:aws:secretsmanager:us-east-1:123456789012:secret:test"],
            enable_container_insights=True,
            log_retention_days=30,
            tags={"Environment": "test"},
        )
        .build(),

        MatrixBuilder("TestEcsModuleContainerConfiguration", MODULE, BASE_VARIABLES)
        .table([
            {
                "name": "NginxDefault",
                "docker_image": "nginx:latest",
                "container_port": 80,
                "task_cpu": 256,
                "task_memory": 512,
            },
            {
                "name": "CustomAppHighMemory",
                "docker_image": "myuser/myapp:v1.0.0",
                "container_port": 8080,
                "task_cpu": 512,
                "task_memory": 1024,
            },
            {
                "name": "HeavyWorkload",
                "docker_image": "myuser/processor:latest",
                "container_port": 3000,
                "task_cpu": 1024,
                "task_memory": 2048,
            },
        ])
        .build(),

        MatrixBuilder(
            "TestEcsModuleAutoScalingConfiguration",
            MODULE,
            dict(
                BASE_VARIABLES,
                public_subnet_ids=["subnet-pub1", "subnet-pub2"],
                private_subnet_ids=["subnet-priv1", "subnet-priv2"],
                enable_container_insights=True,
                log_retention_days=14,
            ),
        )
        .table([
            {"name": "SmallScale", "desired_count": 1, "min_capacity": 1, "max_capacity": 2},
            {"name": "MediumScale", "desired_count": 3, "min_capacity": 2, "max_capacity": 6},
            {"name": "LargeScale", "desired_count": 5, "min_capacity": 3, "max_capacity": 10},
        ])
        .build(),

        MatrixBuilder("TestEcsModuleDockerImageFormats", MODULE, BASE_VARIABLES)
        .sweep("docker_image", DOCKER_IMAGES)
        .build(),

        MatrixBuilder("TestEcsModuleBoundaries", MODULE)
        .case(
            "RequiredOnly",
            {
                "project_name": "test-project",
                "environment": "test",
                "aws_region": "us-east-1",
                "vpc_id": "vpc-12345678",
                "public_subnet_ids": ["subnet-pub1"],
                "private_subnet_ids": ["subnet-priv1"],
                "docker_image": "nginx:latest",
            },
            labels=["defaults"],
        )
        .case(
            "SmallestTask",
            BASE_VARIABLES,
            labels=["min"],
            task_cpu=256,
            task_memory=512,
            desired_count=1,
            min_capacity=1,
            max_capacity=1,
            log_retention_days=1,
        )
        .case(
            "LargestTask",
            BASE_VARIABLES,
            labels=["max"],
            task_cpu=4096,
            task_memory=30720,
            desired_count=10,
            min_capacity=10,
            max_capacity=100,
            log_retention_days=3653,
        )
        .case("ContainerInsightsDisabled", BASE_VARIABLES, labels=["toggle-off"], enable_container_insights=False)
        .build(),
    ]

"""Suites for the ec2-splunk module."""

from typing import List

from terraform_matrix.matrix import MatrixBuilder, MatrixSuite, ModuleSpec

MODULE = ModuleSpec(name="ec2-splunk", path="ec2-splunk")

BASE_VARIABLES = {
    "project_name": "test-project",
    "environment": "test",
    "vpc_id": "vpc-12345678",
    "subnet_id": "subnet-12345678",
    "availability_zone": "us-east-1a",
    "ami_id": "ami-0c7217cdde317cfec",
    "instance_type": "t3.medium",
    "root_volume_size": 50,
    "data_volume_size": 100,
    "data_volume_type": "gp3",
    "kms_key_id": None,
    "splunk_admin_password": "SplunkAdmin123!",
    "splunk_hec_token": "12345678-1234-1234-1234-123456789012",
    "splunk_version": "9.1.1",
    "allowed_cidr": ["10.0.0.0/8"],
    "ssh_cidr": ["10.0.0.0/8"],
    "ssh_public_key": "ssh-rsa AAAAB3NzaC1yc2EAAAADAQABAAABAQtest",
    "associate_public_ip": False,
    "secrets_manager_arn": "",
    "tags": {},
}

VOLUME_TYPES = ["gp2", "gp3", "io1", "io2"]

SPLUNK_VERSIONS = ["9.0.0", "9.0.5", "9.1.0", "9.1.1", "9.2.0"]


def suites() -> List[MatrixSuite]:
    return [
        MatrixBuilder("TestEc2SplunkModuleVariablesValidation", MODULE, BASE_VARIABLES)
        .case(
            "FullConfiguration",
            ssh_public_key="ssh-rsa AAAAB3NzaC1yc2EAAAADAQABAAABAQ... test-key",
            associate_public_ip=True,
            tags={"Environment": "test"},
        )
        .build(),

        MatrixBuilder("TestEc2SplunkModuleInstanceTypes", MODULE, BASE_VARIABLES)
        .table([
            {"name": "SmallInstance", "instance_type": "t3.medium", "root_volume_size": 30, "data_volume_size": 50},
            {"name": "MediumInstance", "instance_type": "t3.large", "root_volume_size": 50, "data_volume_size": 100},
            {"name": "LargeInstance", "instance_type": "t3.xlarge", "root_volume_size": 100, "data_volume_size": 500},
            {"name": "ProductionInstance", "instance_type": "r5.large", "root_volume_size": 100,
             "data_volume_size": 1000},
        ])
        .build(),

        MatrixBuilder("TestEc2SplunkModuleVolumeTypes", MODULE, BASE_VARIABLES)
        .sweep("data_volume_type", VOLUME_TYPES)
        .build(),

        MatrixBuilder("TestEc2SplunkModuleNetworkConfiguration", MODULE, BASE_VARIABLES)
        .table([
            {
                "name": "PrivateOnly",
                "allowed_cidr": ["10.0.0.0/8"],
                "ssh_cidr": ["10.0.0.0/8"],
                "associate_public_ip": False,
            },
            {
                "name": "PublicAccess",
                "allowed_cidr": ["0.0.0.0/0"],
                "ssh_cidr": ["203.0.113.0/24"],
                "associate_public_ip": True,
            },
            {
                "name": "MultiCIDR",
                "allowed_cidr": ["10.0.0.0/8", "172.16.0.0/12", "192.168.0.0/16"],
                "ssh_cidr": ["10.0.0.0/8"],
                "associate_public_ip": False,
            },
        ])
        .build(),

        MatrixBuilder("TestEc2SplunkModuleSplunkVersions", MODULE, BASE_VARIABLES)
        .sweep("splunk_version", SPLUNK_VERSIONS, name="Splunk_{value}")
        .build(),

        MatrixBuilder("TestEc2SplunkModuleBoundaries", MODULE)
        .case(
            "RequiredOnly",
            {
                "project_name": "test-project",
                "environment": "test",
                "vpc_id": "vpc-12345678",
                "subnet_id": "subnet-12345678",
                "availability_zone": "us-east-1a",
                "ami_id": "ami-0c7217cdde317cfec",
                "splunk_admin_password": "SplunkAdmin123!",
                "ssh_public_key": "ssh-rsa AAAAB3NzaC1yc2EAAAADAQABAAABAQtest",
            },
            labels=["defaults"],
        )
        .case(
            "MinimumVolumes",
            BASE_VARIABLES,
            labels=["min"],
            instance_type="t3.medium",
            root_volume_size=30,
            data_volume_size=10,
        )
        .case(
            "MaximumVolumes",
            BASE_VARIABLES,
            labels=["max"],
            instance_type="r5.4xlarge",
            root_volume_size=16384,
            data_volume_size=16384,
            data_volume_type="io2",
        )
        .case(
            "ExistingKmsKeyAndSecret",
            BASE_VARIABLES,
            kms_key_id="arn:aws:kms:us-east-1:123456789012:key/12345678-1234-1234-1234-123456789012",
            secrets_manager_arn="arn:aws:secretsmanager:us-east-1:123456789012:secret:splunk",
        )
        .case(
            "PublicIpDisabled",
            BASE_VARIABLES,
            labels=["toggle-off"],
            associate_public_ip=False,
            kms_key_id=None,
            secrets_manager_arn="",
        )
        .build(),
    ]

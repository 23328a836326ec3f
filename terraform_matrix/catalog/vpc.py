"""Suites for the vpc module."""

from typing import List

from terraform_matrix.matrix import MatrixBuilder, MatrixSuite, ModuleSpec

MODULE = ModuleSpec(name="vpc", path="vpc")

BASE_VARIABLES = {
    "project_name": "test-project",
    "environment": "test",
    "vpc_cidr": "10.0.0.0/16",
    "public_subnet_cidrs": ["10.0.1.0/24"],
    "private_subnet_cidrs": ["10.0.10.0/24"],
    "availability_zones": ["us-east-1a"],
    "enable_nat_gateway": False,
    "tags": {},
}

# The CIDR table spreads its subnets over two zones
CIDR_BASE_VARIABLES = dict(BASE_VARIABLES, availability_zones=["us-east-1a", "us-east-1b"])


def suites() -> List[MatrixSuite]:
    return [
        MatrixBuilder("TestVpcModuleVariablesValidation", MODULE, BASE_VARIABLES)
        .case(
            "FullConfiguration",
            public_subnet_cidrs=["10.0.1.0/24", "10.0.2.0/24"],
            private_subnet_cidrs=["10.0.10.0/24", "10.0.11.0/24"],
            availability_zones=["us-east-1a", "us-east-1b"],
            enable_nat_gateway=True,
            tags={"Environment": "test", "ManagedBy": "terratest"},
        )
        .build(),

        # Every row is expected to validate; no invalid CIDR layout is asserted here.
        MatrixBuilder("TestVpcModuleCIDRValidation", MODULE, CIDR_BASE_VARIABLES)
        .table([
            {
                "name": "ValidStandardCIDR",
                "vpc_cidr": "10.0.0.0/16",
                "public_subnet_cidrs": ["10.0.1.0/24", "10.0.2.0/24"],
                "private_subnet_cidrs": ["10.0.10.0/24", "10.0.11.0/24"],
            },
            {
                "name": "ValidSmallCIDR",
                "vpc_cidr": "172.16.0.0/20",
                "public_subnet_cidrs": ["172.16.0.0/24", "172.16.1.0/24"],
                "private_subnet_cidrs": ["172.16.2.0/24", "172.16.3.0/24"],
            },
            {
                "name": "ValidSingleSubnet",
                "vpc_cidr": "192.168.0.0/16",
                "public_subnet_cidrs": ["192.168.1.0/24"],
                "private_subnet_cidrs": ["192.168.10.0/24"],
            },
        ], labels=["cidr"])
        .build(),

        MatrixBuilder("TestVpcModuleNATGatewayConfiguration", MODULE, BASE_VARIABLES)
        .case("NATGatewayEnabled", enable_nat_gateway=True)
        .case("NATGatewayDisabled", enable_nat_gateway=False, labels=["toggle-off"])
        .build(),

        MatrixBuilder("TestVpcModuleTagging", MODULE, BASE_VARIABLES)
        .case(
            "ProductionTags",
            project_name="my-app",
            environment="production",
            tags={
                "Environment": "production",
                "Team": "platform",
                "CostCenter": "engineering",
                "ManagedBy": "terraform",
            },
        )
        .build(),

        MatrixBuilder("TestVpcModuleBoundaries", MODULE)
        .case(
            "RequiredOnly",
            labels=["defaults"],
            project_name="test-project",
            environment="test",
            availability_zones=["us-east-1a", "us-east-1b"],
        )
        .case(
            "SmallestNetwork",
            labels=["min"],
            project_name="test-project",
            environment="test",
            vpc_cidr="10.0.0.0/24",
            public_subnet_cidrs=["10.0.0.0/28"],
            private_subnet_cidrs=["10.0.0.16/28"],
            availability_zones=["us-east-1a"],
            enable_nat_gateway=False,
        )
        .case(
            "LargestNetwork",
            labels=["max"],
            project_name="test-project",
            environment="test",
            vpc_cidr="10.0.0.0/16",
            public_subnet_cidrs=["10.0.0.0/20", "10.0.16.0/20", "10.0.32.0/20"],
            private_subnet_cidrs=["10.0.128.0/18", "10.0.192.0/19", "10.0.224.0/19"],
            availability_zones=["us-east-1a", "us-east-1b", "us-east-1c"],
            enable_nat_gateway=True,
        )
        .build(),
    ]

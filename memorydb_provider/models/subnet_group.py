# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""MemoryDB subnet group data models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_DESCRIPTION = "Managed externally"


class SubnetGroupConfig(BaseModel):
    """Desired configuration of a subnet group, as declared by the user."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name_prefix": "cache-",
                "description": "Subnets for the session cache",
                "subnet_ids": ["subnet-0a1b2c3d", "subnet-4e5f6a7b"],
                "tags": {"Environment": "production"},
            }
        }
    )

    name: str | None = Field(
        None, description="Subnet group name (conflicts with name_prefix)"
    )
    name_prefix: str | None = Field(
        None, description="Prefix of a generated name (conflicts with name)"
    )
    description: str = Field(
        DEFAULT_DESCRIPTION, description="Subnet group description"
    )
    subnet_ids: set[str] = Field(
        ..., description="VPC subnet ids; duplicates collapse"
    )
    tags: dict[str, str] = Field(
        default_factory=dict, description="User tags"
    )

    def wire_subnet_ids(self) -> list[str]:
        """Subnet ids flattened to a stable ordered list for the API."""
        return sorted(self.subnet_ids)


class RemoteSubnetGroup(BaseModel):
    """A subnet group as reported by the MemoryDB API."""

    arn: str = Field(..., description="Full ARN of the subnet group")
    name: str = Field(..., description="Subnet group name")
    description: str = Field("", description="Subnet group description")
    vpc_id: str | None = Field(None, description="VPC the subnets belong to")
    subnet_ids: list[str] = Field(
        default_factory=list,
        description="Subnet identifiers in the order returned by the API"
    )

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "RemoteSubnetGroup":
        """Build from a DescribeSubnetGroups / CreateSubnetGroup entry."""
        return cls(
            arn=data.get("ARN", ""),
            name=data.get("Name", ""),
            description=data.get("Description") or "",
            vpc_id=data.get("VpcId"),
            subnet_ids=[
                subnet["Identifier"]
                for subnet in data.get("Subnets", [])
                if subnet.get("Identifier")
            ],
        )


class SubnetGroupState(BaseModel):
    """Local state of a managed subnet group."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "cache-20261017093015123400000001",
                "name": "cache-20261017093015123400000001",
                "name_prefix": "cache-",
                "arn": "arn:aws:memorydb:us-east-1:123456789012:subnetgroup/cache-20261017093015123400000001",
                "description": "Subnets for the session cache",
                "subnet_ids": ["subnet-0a1b2c3d", "subnet-4e5f6a7b"],
                "vpc_id": "vpc-0123456789abcdef0",
                "tags": {"Environment": "production"},
                "tags_all": {"Environment": "production", "Owner": "platform"},
            }
        }
    )

    id: str = Field(..., description="Durable id (the resolved name)")
    name: str = Field(..., description="Subnet group name")
    name_prefix: str | None = Field(
        None, description="Prefix recovered from a generated name"
    )
    arn: str = Field(..., description="Full ARN of the subnet group")
    description: str = Field(DEFAULT_DESCRIPTION, description="Subnet group description")
    subnet_ids: set[str] = Field(default_factory=set, description="VPC subnet ids")
    vpc_id: str | None = Field(None, description="VPC the subnets belong to")
    tags: dict[str, str] = Field(
        default_factory=dict, description="User-visible tags (default tags removed)"
    )
    tags_all: dict[str, str] = Field(
        default_factory=dict, description="All tags, including default tags"
    )

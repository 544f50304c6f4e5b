"""Pytest configuration and shared fixtures."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from memorydb_provider.clients.memorydb_client import MemoryDBClient
from memorydb_provider.models import RemoteSubnetGroup, SubnetGroupConfig, SubnetGroupState


ARN_PREFIX = "arn:aws:memorydb:us-east-1:123456789012:subnetgroup/"


# =============================================================================
# Environment and Configuration Fixtures
# =============================================================================

@pytest.fixture
def test_env(monkeypatch):
    """Set up test environment variables (fake AWS credentials)."""
    test_vars = {
        "AWS_ACCESS_KEY_ID": "testing",
        "AWS_SECRET_ACCESS_KEY": "testing",
        "AWS_SECURITY_TOKEN": "testing",
        "AWS_SESSION_TOKEN": "testing",
        "AWS_DEFAULT_REGION": "us-east-1",
        "AWS_REGION": "us-east-1",
        "LOG_LEVEL": "DEBUG",
    }
    for key, value in test_vars.items():
        monkeypatch.setenv(key, value)
    return test_vars


# =============================================================================
# MemoryDB Mocks
# =============================================================================

def make_remote_group(
    name: str = "cache-group",
    subnet_ids: list[str] | None = None,
    description: str = "Managed externally",
    vpc_id: str = "vpc-0123456789abcdef0",
) -> RemoteSubnetGroup:
    """Build a RemoteSubnetGroup as the client would return it."""
    return RemoteSubnetGroup(
        arn=f"{ARN_PREFIX}{name}",
        name=name,
        description=description,
        vpc_id=vpc_id,
        subnet_ids=subnet_ids if subnet_ids is not None else ["subnet-b", "subnet-a"],
    )


def make_state(
    name: str = "cache-group",
    subnet_ids: set[str] | None = None,
    description: str = "Managed externally",
    tags: dict[str, str] | None = None,
    tags_all: dict[str, str] | None = None,
) -> SubnetGroupState:
    """Build a last-known local state."""
    return SubnetGroupState(
        id=name,
        name=name,
        arn=f"{ARN_PREFIX}{name}",
        description=description,
        subnet_ids=subnet_ids if subnet_ids is not None else {"subnet-a", "subnet-b"},
        vpc_id="vpc-0123456789abcdef0",
        tags=tags or {},
        tags_all=tags_all if tags_all is not None else dict(tags or {}),
    )


@pytest.fixture
def remote_group_factory():
    """Factory for RemoteSubnetGroup objects."""
    return make_remote_group


@pytest.fixture
def state_factory():
    """Factory for SubnetGroupState objects."""
    return make_state


@pytest.fixture
def mock_memorydb_client():
    """Create a mock MemoryDB client backed by a single remote subnet group."""
    client = MagicMock(spec=MemoryDBClient)
    client.region = "us-east-1"
    client.create_subnet_group = AsyncMock(return_value=make_remote_group())
    client.update_subnet_group = AsyncMock(return_value=None)
    client.delete_subnet_group = AsyncMock(return_value=None)
    client.find_subnet_group_by_name = AsyncMock(return_value=make_remote_group())
    client.list_tags = AsyncMock(return_value={})
    client.update_tags_for_resource = AsyncMock(return_value=None)
    return client


@pytest.fixture
def mock_boto_memorydb():
    """Create a mock boto3 MemoryDB client."""
    return MagicMock()


# =============================================================================
# Test Data Fixtures
# =============================================================================

@pytest.fixture
def sample_config():
    """Provide a sample desired configuration."""
    return SubnetGroupConfig(
        name="cache-group",
        subnet_ids=["subnet-a", "subnet-b"],
        tags={"Environment": "production"},
    )


@pytest.fixture
def sample_describe_response():
    """Provide a sample DescribeSubnetGroups response."""
    return {
        "SubnetGroups": [
            {
                "Name": "cache-group",
                "Description": "Managed externally",
                "VpcId": "vpc-0123456789abcdef0",
                "Subnets": [
                    {"Identifier": "subnet-b", "AvailabilityZone": {"Name": "us-east-1b"}},
                    {"Identifier": "subnet-a", "AvailabilityZone": {"Name": "us-east-1a"}},
                ],
                "ARN": f"{ARN_PREFIX}cache-group",
            }
        ]
    }


# =============================================================================
# Pytest Hooks
# =============================================================================

def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "property" in str(item.fspath):
            item.add_marker(pytest.mark.property)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)

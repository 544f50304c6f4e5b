"""Integration tests for the subnet group lifecycle against mocked AWS APIs.

These tests drive the reconciler through the real boto3 client, with moto
serving MemoryDB and EC2 in memory. Tests cover:
- create followed by read, with generated and explicit names
- default tag handling on read
- tombstone on read after delete, idempotent delete
- import of existing and missing subnet groups
"""

import re

import boto3
import pytest
from moto import mock_aws

from memorydb_provider.clients import MemoryDBClient
from memorydb_provider.models import SubnetGroupConfig
from memorydb_provider.services import ReadError, SubnetGroupReconciler
from memorydb_provider.utils.tag_policy import DefaultTagsConfig

REGION = "us-east-1"


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def aws(test_env):
    """Start moto for the duration of a test."""
    with mock_aws():
        yield


@pytest.fixture
def subnet_ids(aws):
    """Create a VPC with two subnets and return their ids."""
    ec2 = boto3.client("ec2", region_name=REGION)
    vpc_id = ec2.create_vpc(CidrBlock="10.0.0.0/16")["Vpc"]["VpcId"]
    ids = []
    for cidr, zone in (("10.0.1.0/24", "us-east-1a"), ("10.0.2.0/24", "us-east-1b")):
        subnet = ec2.create_subnet(VpcId=vpc_id, CidrBlock=cidr, AvailabilityZone=zone)
        ids.append(subnet["Subnet"]["SubnetId"])
    return ids


@pytest.fixture
def client(aws):
    """Create a MemoryDBClient against moto."""
    memorydb = MemoryDBClient(region=REGION)
    memorydb._min_call_interval = 0
    return memorydb


@pytest.fixture
def reconciler(client):
    """Create a reconciler with one default tag."""
    return SubnetGroupReconciler(
        client, default_tags=DefaultTagsConfig(tags={"Owner": "platform"})
    )


# =============================================================================
# Lifecycle
# =============================================================================


@pytest.mark.asyncio
async def test_create_and_read_back(reconciler, subnet_ids):
    """Create returns state read from the API with the full subnet set."""
    config = SubnetGroupConfig(
        name="cache-group",
        description="Session cache subnets",
        subnet_ids=list(reversed(subnet_ids)),
        tags={"Environment": "production"},
    )

    state = await reconciler.create(config)

    assert state.id == "cache-group"
    assert state.arn.startswith("arn:aws:memorydb:")
    assert state.description == "Session cache subnets"
    assert state.subnet_ids == set(subnet_ids)
    assert state.vpc_id
    assert state.name_prefix is None
    assert state.tags == {"Environment": "production"}
    assert state.tags_all == {"Environment": "production", "Owner": "platform"}


@pytest.mark.asyncio
async def test_create_with_name_prefix(reconciler, subnet_ids):
    """A generated name keeps its prefix across read."""
    config = SubnetGroupConfig(name_prefix="cache-", subnet_ids=subnet_ids)

    state = await reconciler.create(config)

    assert re.fullmatch(r"cache-[a-z0-9]{26}", state.name)
    refreshed = await reconciler.read(state.id)
    assert refreshed.name_prefix == "cache-"


@pytest.mark.asyncio
async def test_read_after_delete_is_tombstone(reconciler, subnet_ids):
    """Once deleted, read reports the subnet group as gone."""
    state = await reconciler.create(
        SubnetGroupConfig(name="cache-group", subnet_ids=subnet_ids)
    )

    await reconciler.delete(state.id)

    assert await reconciler.read(state.id) is None


@pytest.mark.asyncio
async def test_delete_twice_succeeds(reconciler, subnet_ids):
    """The second delete hits a missing subnet group and still succeeds."""
    state = await reconciler.create(
        SubnetGroupConfig(name="cache-group", subnet_ids=subnet_ids)
    )

    await reconciler.delete(state.id)
    await reconciler.delete(state.id)


@pytest.mark.asyncio
async def test_import_existing_and_missing(reconciler, client, subnet_ids):
    """Import adopts a subnet group created outside the reconciler."""
    await client.create_subnet_group("external-group", "made elsewhere", subnet_ids)

    state = await reconciler.import_state("external-group")

    assert state.description == "made elsewhere"
    assert state.subnet_ids == set(subnet_ids)

    with pytest.raises(ReadError):
        await reconciler.import_state("missing-group")

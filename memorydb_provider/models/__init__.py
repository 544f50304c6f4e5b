"""Data models for the MemoryDB subnet group provider."""

from .enums import LifecycleState
from .subnet_group import (
    DEFAULT_DESCRIPTION,
    RemoteSubnetGroup,
    SubnetGroupConfig,
    SubnetGroupState,
)
from .plan import SubnetGroupPlan

__all__ = [
    "LifecycleState",
    "DEFAULT_DESCRIPTION",
    "RemoteSubnetGroup",
    "SubnetGroupConfig",
    "SubnetGroupState",
    "SubnetGroupPlan",
]

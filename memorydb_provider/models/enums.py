"""Enumerations for the subnet group lifecycle."""

from enum import Enum


class LifecycleState(str, Enum):
    """Reconciliation states of a managed subnet group."""

    ABSENT = "absent"
    CREATING = "creating"
    PRESENT = "present"
    UPDATING = "updating"
    DELETING = "deleting"

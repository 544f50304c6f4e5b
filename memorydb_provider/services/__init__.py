"""Services for the MemoryDB subnet group provider."""

from .subnet_group_service import (
    CreateError,
    DeleteError,
    ReadError,
    SubnetGroupError,
    SubnetGroupReconciler,
    UpdateError,
)

__all__ = [
    "CreateError",
    "DeleteError",
    "ReadError",
    "SubnetGroupError",
    "SubnetGroupReconciler",
    "UpdateError",
]

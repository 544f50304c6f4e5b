"""MemoryDB client wrapper module."""

from .memorydb_client import MemoryDBClient, MemoryDBAPIError, SubnetGroupNotFoundError

__all__ = ["MemoryDBClient", "MemoryDBAPIError", "SubnetGroupNotFoundError"]

"""Utility modules for the MemoryDB subnet group provider."""

from .input_validation import SubnetGroupValidator, ValidationError
from .naming import extract_prefix, generate_name, resolve_name
from .tag_policy import DefaultTagsConfig, IgnoreTagsConfig

__all__ = [
    "SubnetGroupValidator",
    "ValidationError",
    "extract_prefix",
    "generate_name",
    "resolve_name",
    "DefaultTagsConfig",
    "IgnoreTagsConfig",
]

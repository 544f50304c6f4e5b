# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Input validation for subnet group configuration.

All checks are pure and run before any API call, so a rejected
configuration never produces a partial change on the remote side.
"""

import logging
import re
from typing import Any, Iterable, Optional

from .naming import UNIQUE_ID_SUFFIX_LENGTH

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Raised when input validation fails."""

    def __init__(self, field: str, message: str, value: Any = None):
        """
        Initialize validation error.

        Args:
            field: The field that failed validation
            message: Human-readable error message
            value: The invalid value (optional, for logging)
        """
        self.field = field
        self.message = message
        self.value = value
        super().__init__(f"Validation error for '{field}': {message}")


class SubnetGroupValidator:
    """
    Field-level validator for MemoryDB subnet group configuration.

    MemoryDB normalises names to lowercase, so names and prefixes are
    restricted to lowercase alphanumerics and hyphens.
    """

    MAX_NAME_LENGTH = 255
    MAX_NAME_PREFIX_LENGTH = MAX_NAME_LENGTH - UNIQUE_ID_SUFFIX_LENGTH

    NAME_PATTERN = re.compile(r"^[a-z0-9-]*[a-z0-9]$")
    NAME_PREFIX_PATTERN = re.compile(r"^[a-z0-9-]+$")
    DOUBLE_HYPHEN = re.compile(r"--")

    # Tag limits enforced by the MemoryDB tagging API
    MAX_TAGS = 50
    MAX_TAG_KEY_LENGTH = 128
    MAX_TAG_VALUE_LENGTH = 256
    RESERVED_TAG_PREFIX = "aws:"

    @classmethod
    def validate_name(cls, name: Any, field_name: str = "name") -> str:
        """
        Validate an explicit subnet group name.

        Raises:
            ValidationError: If the name is not a valid MemoryDB name
        """
        if not isinstance(name, str):
            raise ValidationError(
                field_name, f"Must be a string, got {type(name).__name__}", name
            )

        if not 1 <= len(name) <= cls.MAX_NAME_LENGTH:
            raise ValidationError(
                field_name,
                f"Length must be between 1 and {cls.MAX_NAME_LENGTH} characters, got {len(name)}",
                name,
            )

        if cls.DOUBLE_HYPHEN.search(name):
            raise ValidationError(
                field_name, "The name may not contain two consecutive hyphens.", name
            )

        if not cls.NAME_PATTERN.fullmatch(name):
            raise ValidationError(
                field_name,
                "Only lowercase alphanumeric characters and hyphens allowed. "
                "The name may not end with a hyphen.",
                name,
            )

        return name

    @classmethod
    def validate_name_prefix(cls, prefix: Any, field_name: str = "name_prefix") -> str:
        """
        Validate a name prefix.

        A trailing hyphen is allowed because a suffix is always appended.

        Raises:
            ValidationError: If the prefix is not valid
        """
        if not isinstance(prefix, str):
            raise ValidationError(
                field_name, f"Must be a string, got {type(prefix).__name__}", prefix
            )

        if not 1 <= len(prefix) <= cls.MAX_NAME_PREFIX_LENGTH:
            raise ValidationError(
                field_name,
                f"Length must be between 1 and {cls.MAX_NAME_PREFIX_LENGTH} characters, "
                f"got {len(prefix)}",
                prefix,
            )

        if cls.DOUBLE_HYPHEN.search(prefix):
            raise ValidationError(
                field_name, "The name may not contain two consecutive hyphens.", prefix
            )

        if not cls.NAME_PREFIX_PATTERN.fullmatch(prefix):
            raise ValidationError(
                field_name,
                "Only lowercase alphanumeric characters and hyphens allowed.",
                prefix,
            )

        return prefix

    @classmethod
    def validate_subnet_ids(
        cls, subnet_ids: Optional[Iterable[Any]], field_name: str = "subnet_ids"
    ) -> set[str]:
        """
        Validate the subnet id set.

        Duplicates collapse; at least one subnet is required.

        Returns:
            The subnet ids as a set
        """
        if subnet_ids is None:
            raise ValidationError(field_name, "Field is required")

        if isinstance(subnet_ids, str):
            raise ValidationError(field_name, "Must be a set of strings, got str", subnet_ids)

        result = set()
        for subnet_id in subnet_ids:
            if not isinstance(subnet_id, str):
                raise ValidationError(
                    field_name,
                    f"All items must be strings, got {type(subnet_id).__name__}",
                    subnet_id,
                )
            if not subnet_id.strip():
                raise ValidationError(field_name, "Subnet ids cannot be empty", subnet_id)
            result.add(subnet_id)

        if not result:
            raise ValidationError(field_name, "Attribute requires 1 item minimum")

        return result

    @classmethod
    def validate_tag_count(cls, tags: dict, field_name: str = "tags") -> None:
        """
        Check a tag set against the per-resource tag limit.

        Applied both to user tags and to the set sent to the API once
        default tags are merged in.
        """
        if len(tags) > cls.MAX_TAGS:
            raise ValidationError(
                field_name, f"Too many tags (max: {cls.MAX_TAGS})", len(tags)
            )

    @classmethod
    def validate_tags(cls, tags: Optional[dict], field_name: str = "tags") -> dict[str, str]:
        """Validate user tags against the MemoryDB tagging limits."""
        if not tags:
            return {}

        cls.validate_tag_count(tags, field_name)

        for key, value in tags.items():
            if not isinstance(key, str) or not 1 <= len(key) <= cls.MAX_TAG_KEY_LENGTH:
                raise ValidationError(
                    field_name,
                    f"Tag keys must be 1 to {cls.MAX_TAG_KEY_LENGTH} characters",
                    key,
                )
            if key.lower().startswith(cls.RESERVED_TAG_PREFIX):
                raise ValidationError(
                    field_name,
                    f"Tag keys may not start with the reserved prefix '{cls.RESERVED_TAG_PREFIX}'",
                    key,
                )
            if not isinstance(value, str) or len(value) > cls.MAX_TAG_VALUE_LENGTH:
                raise ValidationError(
                    field_name,
                    f"Tag value for '{key}' must be a string of at most "
                    f"{cls.MAX_TAG_VALUE_LENGTH} characters",
                    value,
                )

        return dict(tags)

    @classmethod
    def validate_config(cls, config: Any) -> None:
        """
        Validate a complete desired configuration.

        Args:
            config: A SubnetGroupConfig (or any object with the same attributes)

        Raises:
            ValidationError: On the first violated constraint
        """
        if config.name and config.name_prefix:
            raise ValidationError(
                "name",
                '"name": conflicts with name_prefix',
                config.name,
            )

        if config.name:
            cls.validate_name(config.name)
        if config.name_prefix:
            cls.validate_name_prefix(config.name_prefix)

        cls.validate_subnet_ids(config.subnet_ids)
        cls.validate_tags(config.tags)

        logger.debug(f"Configuration validated for subnet group: {config.name or config.name_prefix}")

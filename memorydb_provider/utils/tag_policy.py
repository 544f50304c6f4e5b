# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Default and ignored tag policy.

Default tags are merged into every managed resource's tag set and hidden
from the user-visible ``tags`` view; ignored tags are dropped from both
views so they never show up as drift.
"""

from pydantic import BaseModel, Field

AWS_TAG_PREFIX = "aws:"


def ignore_aws(tags: dict[str, str]) -> dict[str, str]:
    """Drop system tags (``aws:`` prefix), which cannot be managed by users."""
    return {k: v for k, v in tags.items() if not k.startswith(AWS_TAG_PREFIX)}


def tags_from_list(tag_list: list[dict[str, str]] | None) -> dict[str, str]:
    """
    Convert AWS tag list format to dictionary.

    Args:
        tag_list: List of tags in AWS format [{"Key": "...", "Value": "..."}]

    Returns:
        Dictionary of tag key-value pairs
    """
    if not tag_list:
        return {}

    result = {}
    for tag in tag_list:
        key = tag.get("Key", "")
        if key:
            result[key] = tag.get("Value", "")
    return result


def tags_to_list(tags: dict[str, str]) -> list[dict[str, str]]:
    """Convert a tag dictionary to the AWS wire format, ordered by key."""
    return [{"Key": key, "Value": tags[key]} for key in sorted(tags)]


def tags_diff(old: dict[str, str], new: dict[str, str]) -> tuple[list[str], dict[str, str]]:
    """
    Compute the changes needed to go from ``old`` to ``new``.

    Returns:
        (keys to remove, tags to add or overwrite)
    """
    removed = sorted(k for k in old if k not in new)
    updated = {k: v for k, v in new.items() if old.get(k) != v}
    return removed, updated


class DefaultTagsConfig(BaseModel):
    """Process-wide tags applied to every managed resource."""

    tags: dict[str, str] = Field(
        default_factory=dict,
        description="Default tags merged into each resource's tag set"
    )

    def merge_tags(self, tags: dict[str, str] | None) -> dict[str, str]:
        """Overlay user tags on top of the defaults; user values win."""
        merged = dict(self.tags)
        merged.update(tags or {})
        return merged

    def remove_default_config(self, tags: dict[str, str]) -> dict[str, str]:
        """Remove tags whose key and value both match a default tag."""
        return {k: v for k, v in tags.items() if self.tags.get(k) != v}


class IgnoreTagsConfig(BaseModel):
    """Tags that are never managed and never reported as drift."""

    keys: set[str] = Field(
        default_factory=set,
        description="Exact tag keys to ignore"
    )
    key_prefixes: set[str] = Field(
        default_factory=set,
        description="Tag key prefixes to ignore"
    )

    def ignore_config(self, tags: dict[str, str]) -> dict[str, str]:
        """Drop ignored keys and keys starting with an ignored prefix."""
        return {
            k: v
            for k, v in tags.items()
            if k not in self.keys and not any(k.startswith(p) for p in self.key_prefixes)
        }

# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Name generation for resources that accept a name or a name prefix.

Generated names are the prefix followed by a fixed-length unique suffix:
18 digits of UTC timestamp plus an 8-digit hexadecimal counter. The suffix
pattern is recognizable, so the prefix can be recovered from an actual name.
"""

import itertools
import re
from datetime import datetime, timezone
from typing import Optional

UNIQUE_ID_SUFFIX_LENGTH = 26

_TIMESTAMP_DIGITS = UNIQUE_ID_SUFFIX_LENGTH - 8

_SUFFIX_PATTERN = re.compile(r"^(.*)\d{%d}[0-9a-f]{8}$" % _TIMESTAMP_DIGITS)

# Monotonic within the process so two names generated in the same tick differ
_counter = itertools.count(1)


def _timestamp() -> str:
    """UTC timestamp rendered as 18 digits (down to 1/10000 of a second)."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y%m%d%H%M%S") + f"{now.microsecond // 100:04d}"


def unique_suffix() -> str:
    """Return a new 26-character lowercase alphanumeric suffix."""
    return f"{_timestamp()}{next(_counter) & 0xFFFFFFFF:08x}"


def generate_name(prefix: str = "") -> str:
    """
    Generate a unique name by appending a suffix to ``prefix``.

    Args:
        prefix: Name prefix (may be empty)

    Returns:
        ``prefix`` + 26-character unique suffix
    """
    return f"{prefix}{unique_suffix()}"


def resolve_name(name: Optional[str], name_prefix: Optional[str]) -> str:
    """
    Resolve the effective name of a resource.

    An explicit name wins; otherwise a name is generated from the prefix
    (or from the empty prefix when neither is set).
    """
    if name:
        return name
    return generate_name(name_prefix or "")


def extract_prefix(name: Optional[str]) -> Optional[str]:
    """
    Recover the prefix of a generated name.

    Returns:
        The prefix, or None when ``name`` does not end with a generated suffix
    """
    if not name:
        return None
    match = _SUFFIX_PATTERN.fullmatch(name)
    if match is None:
        return None
    return match.group(1)

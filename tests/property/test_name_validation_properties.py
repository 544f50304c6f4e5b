"""Property-based tests for subnet group name validation and generation.

Property: Name Acceptance
*For any* string, the name validator SHALL accept it iff its length is in
[1, 255], it contains no "--", it consists only of lowercase alphanumerics
and hyphens, and it does not end with a hyphen. The prefix validator SHALL
apply the same rules without the trailing-hyphen restriction, with a maximum
length leaving room for the generated suffix.
"""

import re

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from memorydb_provider.utils.input_validation import (
    SubnetGroupValidator,
    ValidationError,
)
from memorydb_provider.utils.naming import (
    UNIQUE_ID_SUFFIX_LENGTH,
    extract_prefix,
    generate_name,
)

# =============================================================================
# Strategies for generating test data
# =============================================================================

NAME_ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789-"

# Mostly-valid candidates: the validator's alphabet, any length around the limit
name_candidates = st.text(alphabet=NAME_ALPHABET, min_size=0, max_size=260)

# Arbitrary text, including uppercase, underscores and unicode
arbitrary_text = st.text(min_size=0, max_size=40)

# Valid prefixes: lowercase alphanumeric chunks joined by single hyphens
valid_prefix = st.lists(
    st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789", min_size=1, max_size=8),
    min_size=1,
    max_size=5,
).map(lambda parts: "-".join(parts) + "-")


def is_valid_name(name: str) -> bool:
    return (
        1 <= len(name) <= 255
        and "--" not in name
        and re.fullmatch(r"[a-z0-9-]*[a-z0-9]", name) is not None
    )


def is_valid_prefix(prefix: str) -> bool:
    return (
        1 <= len(prefix) <= 255 - UNIQUE_ID_SUFFIX_LENGTH
        and "--" not in prefix
        and re.fullmatch(r"[a-z0-9-]+", prefix) is not None
    )


def accepts(validate, value: str) -> bool:
    try:
        validate(value)
    except ValidationError:
        return False
    return True


# =============================================================================
# Properties
# =============================================================================


class TestNameAcceptance:
    """Name validator accepts exactly the valid names."""

    @given(name=st.one_of(name_candidates, arbitrary_text))
    @settings(max_examples=300)
    def test_name_accepted_iff_valid(self, name):
        assert accepts(SubnetGroupValidator.validate_name, name) == is_valid_name(name)

    @given(prefix=st.one_of(name_candidates, arbitrary_text))
    @settings(max_examples=300)
    def test_prefix_accepted_iff_valid(self, prefix):
        assert accepts(SubnetGroupValidator.validate_name_prefix, prefix) == is_valid_prefix(
            prefix
        )


class TestGeneratedNames:
    """Names generated from valid prefixes are valid names."""

    @given(prefix=valid_prefix)
    @settings(max_examples=100)
    def test_generated_name_is_valid(self, prefix):
        name = generate_name(prefix)

        assert is_valid_name(name)
        assert accepts(SubnetGroupValidator.validate_name, name)

    @given(prefix=valid_prefix)
    @settings(max_examples=100)
    def test_prefix_recovered(self, prefix):
        assert extract_prefix(generate_name(prefix)) == prefix

    @pytest.mark.parametrize("prefix", ["cache-", "q"])
    def test_generated_name_shape(self, prefix):
        name = generate_name(prefix)
        assert re.fullmatch(re.escape(prefix) + r"[a-z0-9]{26}", name)

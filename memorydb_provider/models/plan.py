"""Change plan data model."""

from pydantic import BaseModel, Field


class SubnetGroupPlan(BaseModel):
    """Difference between a desired configuration and the last-known state."""

    changed_fields: list[str] = Field(
        default_factory=list,
        description="Non-tag fields that differ (e.g. description, subnet_ids)"
    )
    tags_changed: bool = Field(False, description="Whether tags_all differs")
    tags_all: dict[str, str] = Field(
        default_factory=dict,
        description="Planned full tag set (default tags merged in)"
    )
    requires_replacement: bool = Field(
        False,
        description="Whether a changed field cannot be updated in place"
    )
    replacement_fields: list[str] = Field(
        default_factory=list,
        description="Fields forcing replacement (name, name_prefix)"
    )

    @property
    def has_changes(self) -> bool:
        """True when applying the plan would change anything."""
        return bool(self.changed_fields or self.tags_changed or self.requires_replacement)

# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Reconciliation of MemoryDB subnet groups.

The reconciler drives one subnet group through its lifecycle:

    absent -> creating -> present -> (updating -> present)* -> deleting -> absent

Every mutating operation either fully succeeds and is followed by a read
from the API, or raises and leaves the caller's state untouched so the
next reconciliation cycle can try again.
"""

import logging
from typing import Optional

from ..clients.memorydb_client import (
    MemoryDBAPIError,
    MemoryDBClient,
    SubnetGroupNotFoundError,
)
from ..models import (
    LifecycleState,
    SubnetGroupConfig,
    SubnetGroupPlan,
    SubnetGroupState,
)
from ..utils.correlation import get_operation_id_for_logging, operation_context
from ..utils.input_validation import SubnetGroupValidator, ValidationError
from ..utils.naming import extract_prefix, resolve_name
from ..utils.tag_policy import (
    DefaultTagsConfig,
    IgnoreTagsConfig,
    ignore_aws,
    tags_diff,
)

logger = logging.getLogger(__name__)


class SubnetGroupError(Exception):
    """Base class for reconciliation failures of a named subnet group."""

    def __init__(self, name: str, message: str):
        self.name = name
        super().__init__(message)


class CreateError(SubnetGroupError):
    """Raised when the subnet group could not be created."""

    pass


class ReadError(SubnetGroupError):
    """Raised when the subnet group could not be read."""

    pass


class UpdateError(SubnetGroupError):
    """
    Raised when one or more update sub-operations failed.

    Attributes:
        failures: Cause of each failed sub-operation, keyed by
            "subnet_group" or "tags"
    """

    def __init__(self, name: str, failures: dict[str, Exception]):
        self.failures = failures
        details = "; ".join(f"{op}: {err}" for op, err in failures.items())
        super().__init__(name, f"error updating MemoryDB Subnet Group ({name}): {details}")

    @property
    def sub_operations(self) -> list[str]:
        return list(self.failures)


class DeleteError(SubnetGroupError):
    """Raised when the subnet group could not be deleted."""

    pass


class SubnetGroupReconciler:
    """
    Create/read/update/delete lifecycle of a MemoryDB subnet group.

    The API client and the tag policies are injected; the reconciler keeps
    no state between invocations.
    """

    def __init__(
        self,
        client: MemoryDBClient,
        default_tags: Optional[DefaultTagsConfig] = None,
        ignore_tags: Optional[IgnoreTagsConfig] = None,
    ):
        """
        Initialize the reconciler.

        Args:
            client: MemoryDB API client
            default_tags: Tags merged into every subnet group
            ignore_tags: Tags never managed nor reported
        """
        self.client = client
        self.default_tags = default_tags or DefaultTagsConfig()
        self.ignore_tags = ignore_tags or IgnoreTagsConfig()

    def _transition(self, name: str, source: LifecycleState, target: LifecycleState) -> None:
        logger.info(
            f"MemoryDB Subnet Group ({name}): {source.value} -> {target.value}",
            extra=get_operation_id_for_logging(),
        )

    def _validate(self, config: SubnetGroupConfig) -> None:
        SubnetGroupValidator.validate_config(config)
        SubnetGroupValidator.validate_tag_count(
            ignore_aws(self.default_tags.merge_tags(config.tags))
        )

    def _planned_tags_all(self, config: SubnetGroupConfig) -> dict[str, str]:
        """Full tag set a configuration should produce on the remote side."""
        merged = ignore_aws(self.default_tags.merge_tags(config.tags))
        return self.ignore_tags.ignore_config(merged)

    async def create(self, config: SubnetGroupConfig) -> SubnetGroupState:
        """
        Create the subnet group and read it back.

        Args:
            config: Desired configuration

        Returns:
            Local state populated from the API

        Raises:
            ValidationError: If the configuration is invalid (no API call made)
            CreateError: If the create call fails
            ReadError: If the new subnet group cannot be read back
        """
        self._validate(config)
        name = resolve_name(config.name, config.name_prefix)

        with operation_context("create", name):
            self._transition(name, LifecycleState.ABSENT, LifecycleState.CREATING)

            try:
                await self.client.create_subnet_group(
                    name=name,
                    description=config.description,
                    subnet_ids=config.wire_subnet_ids(),
                    tags=ignore_aws(self.default_tags.merge_tags(config.tags)),
                )
            except MemoryDBAPIError as e:
                raise CreateError(
                    name, f"error creating MemoryDB Subnet Group ({name}): {e}"
                ) from e

            # The create response is not trusted; state comes from a fresh read
            state = await self.read(name, is_new_resource=True)
            self._transition(name, LifecycleState.CREATING, LifecycleState.PRESENT)
            return state

    async def read(
        self, name: str, is_new_resource: bool = False
    ) -> Optional[SubnetGroupState]:
        """
        Refresh local state from the API.

        Args:
            name: Durable id of the subnet group
            is_new_resource: True right after a create, when a missing
                subnet group means creation did not converge

        Returns:
            The refreshed state, or None when the subnet group no longer exists

        Raises:
            ReadError: On API failure, or when a new subnet group is missing
        """
        with operation_context("read", name):
            try:
                group = await self.client.find_subnet_group_by_name(name)
            except SubnetGroupNotFoundError as e:
                if is_new_resource:
                    raise ReadError(
                        name, f"error reading MemoryDB Subnet Group ({name}): {e}"
                    ) from e
                logger.warning(
                    f"MemoryDB Subnet Group ({name}) not found, removing from state",
                    extra=get_operation_id_for_logging(),
                )
                return None
            except MemoryDBAPIError as e:
                raise ReadError(
                    name, f"error reading MemoryDB Subnet Group ({name}): {e}"
                ) from e

            try:
                remote_tags = await self.client.list_tags(group.arn)
            except MemoryDBAPIError as e:
                raise ReadError(
                    name, f"error listing tags for MemoryDB Subnet Group ({name}): {e}"
                ) from e

            tags_all = self.ignore_tags.ignore_config(ignore_aws(remote_tags))

            return SubnetGroupState(
                id=group.name,
                name=group.name,
                name_prefix=extract_prefix(group.name),
                arn=group.arn,
                description=group.description,
                subnet_ids=set(group.subnet_ids),
                vpc_id=group.vpc_id,
                tags=self.default_tags.remove_default_config(tags_all),
                tags_all=tags_all,
            )

    def plan(self, state: SubnetGroupState, config: SubnetGroupConfig) -> SubnetGroupPlan:
        """
        Diff a desired configuration against the last-known state.

        ``name`` and ``name_prefix`` cannot be updated in place; an unset
        name keeps the name already assigned.
        """
        replacement_fields = []
        if config.name and config.name != state.name:
            replacement_fields.append("name")
        elif not config.name and config.name_prefix and config.name_prefix != state.name_prefix:
            replacement_fields.append("name_prefix")

        changed_fields = []
        if config.description != state.description:
            changed_fields.append("description")
        if set(config.subnet_ids) != set(state.subnet_ids):
            changed_fields.append("subnet_ids")

        tags_all = self._planned_tags_all(config)

        return SubnetGroupPlan(
            changed_fields=changed_fields,
            tags_changed=tags_all != state.tags_all,
            tags_all=tags_all,
            requires_replacement=bool(replacement_fields),
            replacement_fields=replacement_fields,
        )

    async def update(
        self, state: SubnetGroupState, config: SubnetGroupConfig
    ) -> Optional[SubnetGroupState]:
        """
        Bring the subnet group in line with ``config``.

        Non-tag changes and tag changes are applied independently; both are
        attempted even if the first fails.

        Args:
            state: Last-known local state (carries the durable id and ARN)
            config: Desired configuration

        Returns:
            State re-read from the API after the changes

        Raises:
            ValidationError: If the configuration is invalid or needs replacement
            UpdateError: If any sub-operation failed (state is not re-read)
        """
        self._validate(config)
        plan = self.plan(state, config)

        if plan.requires_replacement:
            field = plan.replacement_fields[0]
            raise ValidationError(
                field,
                "Cannot be changed in place; the subnet group must be replaced",
                getattr(config, field),
            )

        name = state.id

        with operation_context("update", name):
            self._transition(name, LifecycleState.PRESENT, LifecycleState.UPDATING)
            failures: dict[str, Exception] = {}

            if plan.changed_fields:
                try:
                    await self.client.update_subnet_group(
                        name=name,
                        description=config.description,
                        subnet_ids=config.wire_subnet_ids(),
                    )
                except MemoryDBAPIError as e:
                    logger.error(
                        f"Failed to update MemoryDB Subnet Group ({name}): {e}",
                        extra=get_operation_id_for_logging(),
                    )
                    failures["subnet_group"] = e

            if plan.tags_changed:
                removed, updated = tags_diff(state.tags_all, plan.tags_all)
                try:
                    await self.client.update_tags_for_resource(state.arn, removed, updated)
                except MemoryDBAPIError as e:
                    logger.error(
                        f"Failed to update tags of MemoryDB Subnet Group ({name}): {e}",
                        extra=get_operation_id_for_logging(),
                    )
                    failures["tags"] = e

            if failures:
                raise UpdateError(name, failures) from next(iter(failures.values()))

            refreshed = await self.read(name)
            if refreshed is None:
                self._transition(name, LifecycleState.UPDATING, LifecycleState.ABSENT)
            else:
                self._transition(name, LifecycleState.UPDATING, LifecycleState.PRESENT)
            return refreshed

    async def delete(self, name: str) -> None:
        """
        Delete the subnet group.

        A subnet group that is already gone counts as deleted.

        Raises:
            DeleteError: If the delete call fails for any other reason
        """
        with operation_context("delete", name):
            logger.debug(
                f"Deleting MemoryDB Subnet Group ({name})",
                extra=get_operation_id_for_logging(),
            )

            try:
                await self.client.delete_subnet_group(name)
            except SubnetGroupNotFoundError:
                logger.info(
                    f"MemoryDB Subnet Group ({name}) already absent",
                    extra=get_operation_id_for_logging(),
                )
                return
            except MemoryDBAPIError as e:
                raise DeleteError(
                    name, f"error deleting MemoryDB Subnet Group ({name}): {e}"
                ) from e

            self._transition(name, LifecycleState.PRESENT, LifecycleState.DELETING)
            self._transition(name, LifecycleState.DELETING, LifecycleState.ABSENT)

    async def import_state(self, name: str) -> SubnetGroupState:
        """
        Adopt an existing subnet group by name.

        Raises:
            ValidationError: If ``name`` is not a valid subnet group name
            ReadError: If the subnet group does not exist or cannot be read
        """
        SubnetGroupValidator.validate_name(name)

        state = await self.read(name)
        if state is None:
            raise ReadError(
                name, f"cannot import non-existent MemoryDB Subnet Group ({name})"
            )
        return state

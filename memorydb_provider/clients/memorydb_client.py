"""MemoryDB client wrapper with rate limiting and backoff."""

import asyncio
import logging
import time
from typing import Any, Callable

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..models import RemoteSubnetGroup
from ..utils.tag_policy import tags_from_list, tags_to_list

logger = logging.getLogger(__name__)

SUBNET_GROUP_NOT_FOUND = "SubnetGroupNotFoundFault"

THROTTLING_ERROR_CODES = {"Throttling", "ThrottlingException", "RequestLimitExceeded"}


class MemoryDBAPIError(Exception):
    """Raised when MemoryDB API calls fail."""

    def __init__(self, message: str, error_code: str = ""):
        self.error_code = error_code
        super().__init__(message)


class SubnetGroupNotFoundError(MemoryDBAPIError):
    """Raised when the requested subnet group does not exist."""

    def __init__(self, message: str, error_code: str = SUBNET_GROUP_NOT_FOUND):
        super().__init__(message, error_code)


class MemoryDBClient:
    """
    Wrapper around the boto3 MemoryDB client with rate limiting and
    exponential backoff.

    Uses the default credential chain - no hardcoded credentials.
    Blocking boto3 calls run in the default executor; cancelling the
    awaiting task abandons the call at the await point.
    """

    def __init__(
        self,
        region: str = "us-east-1",
        max_retries: int = 5,
        client: Any = None,
    ):
        """
        Initialize the MemoryDB client.

        Args:
            region: AWS region of the subnet groups
            max_retries: Attempts for throttled calls before giving up
            client: Pre-built boto3 MemoryDB client (built from region if None)
        """
        config = Config(
            region_name=region,
            retries={
                'max_attempts': 3,
                'mode': 'adaptive'
            }
        )

        self.region = region
        self.memorydb = client or boto3.client('memorydb', config=config)
        self.max_retries = max_retries

        # Rate limiting state
        self._last_call_time: float | None = None
        self._min_call_interval = 0.1  # 100ms between calls

    async def _rate_limit(self) -> None:
        """Space consecutive calls at least ``_min_call_interval`` apart."""
        if self._last_call_time is not None:
            elapsed = time.time() - self._last_call_time
            if elapsed < self._min_call_interval:
                await asyncio.sleep(self._min_call_interval - elapsed)

        self._last_call_time = time.time()

    async def _call_with_backoff(
        self,
        operation: str,
        func: Callable[..., Any],
        **kwargs
    ) -> Any:
        """
        Call the MemoryDB API with exponential backoff on throttling errors.

        Args:
            operation: API operation name, for error messages
            func: Boto3 client method to call
            **kwargs: Keyword arguments for the method

        Returns:
            Response from the API

        Raises:
            SubnetGroupNotFoundError: If the API reports the subnet group missing
            MemoryDBAPIError: If the API call fails after retries
        """
        await self._rate_limit()

        base_delay = 1.0

        for attempt in range(self.max_retries):
            try:
                loop = asyncio.get_event_loop()
                return await loop.run_in_executor(
                    None,
                    lambda: func(**kwargs)
                )

            except ClientError as e:
                error_code = e.response.get('Error', {}).get('Code', '')

                if error_code in THROTTLING_ERROR_CODES:
                    if attempt < self.max_retries - 1:
                        delay = base_delay * (2 ** attempt)
                        logger.debug(f"{operation} throttled, retrying in {delay:.1f}s")
                        await asyncio.sleep(delay)
                        continue

                if error_code == SUBNET_GROUP_NOT_FOUND:
                    raise SubnetGroupNotFoundError(
                        f"MemoryDB API error: {error_code} - {str(e)}"
                    ) from e

                raise MemoryDBAPIError(
                    f"MemoryDB API error: {error_code} - {str(e)}", error_code
                ) from e

            except BotoCoreError as e:
                raise MemoryDBAPIError(f"Boto3 error: {str(e)}") from e

        raise MemoryDBAPIError(f"Max retries exceeded for {operation}")

    async def create_subnet_group(
        self,
        name: str,
        description: str,
        subnet_ids: list[str],
        tags: dict[str, str] | None = None,
    ) -> RemoteSubnetGroup:
        """
        Create a subnet group.

        Args:
            name: Subnet group name
            description: Subnet group description
            subnet_ids: Ordered list of subnet ids
            tags: Full tag set to apply at creation

        Returns:
            The subnet group as returned by the create call
        """
        params: dict[str, Any] = {
            "SubnetGroupName": name,
            "Description": description,
            "SubnetIds": subnet_ids,
        }
        if tags:
            params["Tags"] = tags_to_list(tags)

        logger.debug(f"Creating MemoryDB Subnet Group: {params}")
        response = await self._call_with_backoff(
            "CreateSubnetGroup",
            self.memorydb.create_subnet_group,
            **params
        )
        return RemoteSubnetGroup.from_api(response.get("SubnetGroup", {}))

    async def update_subnet_group(
        self,
        name: str,
        description: str,
        subnet_ids: list[str],
    ) -> None:
        """Replace the description and the full subnet list of a subnet group."""
        params = {
            "SubnetGroupName": name,
            "Description": description,
            "SubnetIds": subnet_ids,
        }

        logger.debug(f"Updating MemoryDB Subnet Group: {params}")
        await self._call_with_backoff(
            "UpdateSubnetGroup",
            self.memorydb.update_subnet_group,
            **params
        )

    async def delete_subnet_group(self, name: str) -> None:
        """
        Delete a subnet group.

        Raises:
            SubnetGroupNotFoundError: If the subnet group does not exist
        """
        logger.debug(f"Deleting MemoryDB Subnet Group: ({name})")
        await self._call_with_backoff(
            "DeleteSubnetGroup",
            self.memorydb.delete_subnet_group,
            SubnetGroupName=name
        )

    async def describe_subnet_groups(self, name: str | None = None) -> list[dict[str, Any]]:
        """
        Describe subnet groups, optionally filtered by name.

        Follows NextToken pagination until all pages are read.

        Raises:
            SubnetGroupNotFoundError: If a name filter matches nothing
        """
        params: dict[str, Any] = {}
        if name:
            params["SubnetGroupName"] = name

        groups: list[dict[str, Any]] = []
        while True:
            response = await self._call_with_backoff(
                "DescribeSubnetGroups",
                self.memorydb.describe_subnet_groups,
                **params
            )
            groups.extend(response.get("SubnetGroups", []))

            next_token = response.get("NextToken")
            if not next_token:
                return groups
            params["NextToken"] = next_token

    async def find_subnet_group_by_name(self, name: str) -> RemoteSubnetGroup:
        """
        Look up a subnet group by exact name.

        An empty result and the API's not-found fault are both reported
        as SubnetGroupNotFoundError.
        """
        for group in await self.describe_subnet_groups(name):
            if group.get("Name") == name:
                return RemoteSubnetGroup.from_api(group)

        raise SubnetGroupNotFoundError(f"MemoryDB Subnet Group ({name}) not found")

    async def list_tags(self, arn: str) -> dict[str, str]:
        """Fetch the full tag set of a MemoryDB resource."""
        response = await self._call_with_backoff(
            "ListTags",
            self.memorydb.list_tags,
            ResourceArn=arn
        )
        return tags_from_list(response.get("TagList", []))

    async def update_tags_for_resource(
        self,
        arn: str,
        removed_keys: list[str],
        updated: dict[str, str],
    ) -> None:
        """
        Remove and add/overwrite tags on a MemoryDB resource.

        Args:
            arn: Resource ARN
            removed_keys: Tag keys to remove
            updated: Tags to add or overwrite
        """
        if removed_keys:
            logger.debug(f"Removing tags {removed_keys} from {arn}")
            await self._call_with_backoff(
                "UntagResource",
                self.memorydb.untag_resource,
                ResourceArn=arn,
                TagKeys=removed_keys
            )

        if updated:
            logger.debug(f"Updating tags {sorted(updated)} on {arn}")
            await self._call_with_backoff(
                "TagResource",
                self.memorydb.tag_resource,
                ResourceArn=arn,
                Tags=tags_to_list(updated)
            )

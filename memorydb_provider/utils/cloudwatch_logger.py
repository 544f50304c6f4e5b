"""CloudWatch logging configuration and utilities."""

import logging
import sys
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .correlation import get_operation_id

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(operation_id)s] %(message)s"

# Loggers of the AWS SDK stack; their records are never shipped to CloudWatch
SDK_LOGGERS = ("boto3", "botocore", "urllib3", "s3transfer")


class OperationIDFilter(logging.Filter):
    """Stamp the current operation ID on every record passing through."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "operation_id", None):
            record.operation_id = get_operation_id() or "-"
        return True


class SDKRecordFilter(logging.Filter):
    """Drop records emitted by the AWS SDK while it ships log events."""

    def filter(self, record: logging.LogRecord) -> bool:
        return not any(
            record.name == name or record.name.startswith(name + ".")
            for name in SDK_LOGGERS
        )


class CloudWatchHandler(logging.Handler):
    """Logging handler that ships provider logs to AWS CloudWatch."""

    def __init__(
        self,
        log_group: str,
        log_stream: str,
        region: str = "us-east-1",
    ):
        """
        Initialize CloudWatch logging handler.

        Args:
            log_group: CloudWatch log group name
            log_stream: CloudWatch log stream name
            region: AWS region for CloudWatch
        """
        super().__init__()
        self.log_group = log_group
        self.log_stream = log_stream
        self.region = region
        self._emitting = False
        self.client = boto3.client("logs", region_name=region)
        self._ensure_log_group_and_stream()
        self.addFilter(SDKRecordFilter())

    def _ensure_log_group_and_stream(self) -> None:
        """Create log group and stream if they don't exist."""
        try:
            self.client.create_log_group(logGroupName=self.log_group)
        except ClientError as e:
            if e.response["Error"]["Code"] != "ResourceAlreadyExistsException":
                raise

        try:
            self.client.create_log_stream(
                logGroupName=self.log_group,
                logStreamName=self.log_stream,
            )
        except ClientError as e:
            if e.response["Error"]["Code"] != "ResourceAlreadyExistsException":
                raise

    def emit(self, record: logging.LogRecord) -> None:
        """
        Emit a log record to CloudWatch.

        Args:
            record: The log record to emit
        """
        if self._emitting:
            return

        self._emitting = True
        try:
            self.client.put_log_events(
                logGroupName=self.log_group,
                logStreamName=self.log_stream,
                logEvents=[
                    {
                        "message": self.format(record),
                        "timestamp": int(record.created * 1000),
                    }
                ],
            )
        except Exception:
            # A logging handler must never raise into the caller
            self.handleError(record)
        finally:
            self._emitting = False


def configure_logging(
    log_level: str = "INFO",
    cloudwatch_enabled: bool = False,
    log_group: Optional[str] = None,
    log_stream: Optional[str] = None,
    region: str = "us-east-1",
) -> None:
    """
    Configure console logging and, if enabled, CloudWatch shipping.

    Args:
        log_level: Root log level name
        cloudwatch_enabled: Whether to attach a CloudWatch handler
        log_group: CloudWatch log group name (default: /memorydb/provider)
        log_stream: CloudWatch log stream name (default: reconciler)
        region: AWS region for CloudWatch

    Raises:
        ValueError: If ``log_level`` is not a known level name
    """
    logging.basicConfig(format=LOG_FORMAT)
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level.upper())
    for handler in root_logger.handlers:
        handler.addFilter(OperationIDFilter())

    if not cloudwatch_enabled:
        return

    log_group = log_group or "/memorydb/provider"
    log_stream = log_stream or "reconciler"

    try:
        handler = CloudWatchHandler(
            log_group=log_group,
            log_stream=log_stream,
            region=region,
        )
    except (ClientError, BotoCoreError) as e:
        print(f"Failed to configure CloudWatch logging: {e}", file=sys.stderr)
        return

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(OperationIDFilter())
    root_logger.addHandler(handler)

    logging.getLogger(__name__).info(
        f"CloudWatch logging configured: group={log_group}, stream={log_stream}"
    )

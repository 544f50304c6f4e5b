# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Operation ID generation and context management for log correlation.

Each reconciler operation (create, read, update, delete) runs under its own
operation ID so that every log line emitted while it runs, including the
nested read after a create or update, can be tied back to one invocation.
"""

import contextvars
import logging
import uuid
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)

# Context variable to store the operation ID of the running invocation
_operation_id_context: contextvars.ContextVar[str] = contextvars.ContextVar(
    "operation_id", default=""
)


def generate_operation_id() -> str:
    """
    Generate a unique operation ID using UUID4.

    Returns:
        A unique operation ID string in UUID4 format
    """
    return str(uuid.uuid4())


def set_operation_id(operation_id: str) -> None:
    """Set the operation ID in the current context."""
    _operation_id_context.set(operation_id)


def get_operation_id() -> str:
    """
    Get the operation ID from the current context.

    Returns:
        The operation ID if set, or an empty string if not set
    """
    return _operation_id_context.get()


@contextmanager
def operation_context(operation: str, resource_name: str = "") -> Iterator[str]:
    """
    Run a block under an operation ID.

    A nested block reuses the enclosing operation ID, so the read that
    follows a create is logged under the create's ID.

    Yields:
        The active operation ID
    """
    existing = get_operation_id()
    if existing:
        yield existing
        return

    operation_id = generate_operation_id()
    token = _operation_id_context.set(operation_id)
    logger.debug(
        f"Operation {operation} started for '{resource_name}' with ID: {operation_id}",
        extra={"operation_id": operation_id},
    )
    try:
        yield operation_id
    finally:
        _operation_id_context.reset(token)


def get_operation_id_for_logging() -> dict:
    """
    Get the operation ID as a dictionary for use in logging extra fields.

    Returns:
        Dictionary with operation_id key, or empty dict if not set
    """
    operation_id = get_operation_id()
    if operation_id:
        return {"operation_id": operation_id}
    return {}

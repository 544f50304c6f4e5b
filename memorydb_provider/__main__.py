"""
Run one reconciliation step from the command line.

Usage:
    python -m memorydb_provider create --config config.json
    python -m memorydb_provider read --name my-subnet-group
    python -m memorydb_provider plan --state state.json --config config.json
    python -m memorydb_provider update --state state.json --config config.json
    python -m memorydb_provider delete --name my-subnet-group
    python -m memorydb_provider import --name my-subnet-group

The resulting state is printed as JSON ("null" once the subnet group is gone).
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from .clients import MemoryDBClient
from .config import Settings, settings
from .models import SubnetGroupConfig, SubnetGroupState
from .services import SubnetGroupError, SubnetGroupReconciler
from .utils.cloudwatch_logger import configure_logging
from .utils.input_validation import ValidationError

logger = logging.getLogger(__name__)

COMMANDS = ("plan", "create", "read", "update", "delete", "import")


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="memorydb_provider",
        description="Reconcile a MemoryDB subnet group",
    )
    parser.add_argument("command", choices=COMMANDS, help="Lifecycle operation to run")
    parser.add_argument("--config", type=Path, help="Desired configuration (JSON file)")
    parser.add_argument("--state", type=Path, help="Last-known local state (JSON file)")
    parser.add_argument("--name", help="Subnet group name (durable id)")
    return parser


def build_reconciler(cfg: Settings) -> SubnetGroupReconciler:
    """Wire the client and tag policies from settings."""
    client = MemoryDBClient(region=cfg.aws_region, max_retries=cfg.max_retries)
    return SubnetGroupReconciler(
        client,
        default_tags=cfg.default_tags_config(),
        ignore_tags=cfg.ignore_tags_config(),
    )


def _load_config(path: Optional[Path]) -> SubnetGroupConfig:
    if path is None:
        raise ValidationError("config", "--config is required for this command")
    return SubnetGroupConfig.model_validate(json.loads(path.read_text(encoding="utf-8")))


def _load_state(path: Optional[Path]) -> SubnetGroupState:
    if path is None:
        raise ValidationError("state", "--state is required for this command")
    return SubnetGroupState.model_validate(json.loads(path.read_text(encoding="utf-8")))


def _resolve_name(args: argparse.Namespace) -> str:
    if args.name:
        return args.name
    return _load_state(args.state).id


async def run(args: argparse.Namespace, reconciler: SubnetGroupReconciler) -> Optional[str]:
    """
    Execute one command.

    Returns:
        JSON text to print, or None for commands without output
    """
    if args.command == "create":
        state = await reconciler.create(_load_config(args.config))
        return state.model_dump_json(indent=2)

    if args.command == "read":
        state = await reconciler.read(_resolve_name(args))
        return state.model_dump_json(indent=2) if state else "null"

    if args.command == "plan":
        plan = reconciler.plan(_load_state(args.state), _load_config(args.config))
        return plan.model_dump_json(indent=2)

    if args.command == "update":
        state = await reconciler.update(_load_state(args.state), _load_config(args.config))
        return state.model_dump_json(indent=2) if state else "null"

    if args.command == "delete":
        await reconciler.delete(_resolve_name(args))
        return "null"

    if args.command == "import":
        if not args.name:
            raise ValidationError("name", "--name is required for import")
        state = await reconciler.import_state(args.name)
        return state.model_dump_json(indent=2)

    raise ValidationError("command", f"Unknown command: {args.command}", args.command)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    try:
        cfg = settings()
        configure_logging(
            log_level=cfg.log_level,
            cloudwatch_enabled=cfg.cloudwatch_enabled,
            log_group=cfg.cloudwatch_log_group,
            log_stream=cfg.cloudwatch_log_stream,
            region=cfg.aws_region,
        )
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    try:
        output = asyncio.run(run(args, build_reconciler(cfg)))
    except (ValidationError, SubnetGroupError) as e:
        logger.error(str(e))
        print(str(e), file=sys.stderr)
        return 1
    except (PydanticValidationError, json.JSONDecodeError, OSError) as e:
        logger.error(f"Invalid input: {e}")
        print(f"Invalid input: {e}", file=sys.stderr)
        return 1

    if output is not None:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())

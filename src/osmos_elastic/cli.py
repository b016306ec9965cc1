"""CLI entry point for inspecting and maintaining a driver's index."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from osmos_elastic.config.settings import DriverSettings
    from osmos_elastic.drivers.elasticsearch.driver import DocumentStoreDriver


def _json_arg(value: str) -> dict[str, Any]:
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as e:
        raise argparse.ArgumentTypeError(f"invalid JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise argparse.ArgumentTypeError("expected a JSON object")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="osmos-elastic",
        description="osmos-elastic — Elasticsearch storage driver for ORM models",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--index",
        type=str,
        default=None,
        help="Target index (overrides config)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"osmos-elastic {_get_version()}",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("health", help="Report cluster health")

    create_index = commands.add_parser("create-index", help="Create the index for a bucket")
    create_index.add_argument("bucket")
    create_index.add_argument("--body", type=_json_arg, default=None, help="Index body as a JSON object")

    get = commands.add_parser("get", help="Fetch one record by identifier")
    get.add_argument("bucket")
    get.add_argument("id")
    get.add_argument("--primary-key", default="id", help="Field that receives the record identifier")

    find = commands.add_parser("find", help="Search a bucket")
    find.add_argument("bucket")
    find.add_argument("--query", type=_json_arg, default=None, help="Search body as a JSON object")
    find.add_argument("--start", type=int, default=None, help="Offset of the first record")
    find.add_argument("--limit", type=int, default=None, help="Page size")
    find.add_argument("--primary-key", default="id", help="Field that receives the record identifier")

    delete = commands.add_parser("delete", help="Delete one record by identifier")
    delete.add_argument("bucket")
    delete.add_argument("id")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    from osmos_elastic.config.settings import DriverSettings
    from osmos_elastic.observability.logging import setup_logging

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        settings = DriverSettings.from_yaml(config_path)
    else:
        settings = DriverSettings()

    # Apply CLI overrides
    if args.index:
        settings.store.index = args.index
    if args.log_level:
        settings.observability.log_level = args.log_level

    setup_logging(settings.observability)

    from osmos_elastic.drivers.base.exceptions import DriverError

    try:
        result = asyncio.run(_run(args, settings))
    except DriverError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if result is not None:
        print(json.dumps(result, indent=2, default=str))


async def _run(args: argparse.Namespace, settings: DriverSettings) -> Any:
    from osmos_elastic.drivers.elasticsearch.driver import DocumentStoreDriver

    driver = DocumentStoreDriver.from_settings(settings)
    await driver.initialize()
    try:
        return await _dispatch(driver, args)
    finally:
        await driver.shutdown()


async def _dispatch(driver: DocumentStoreDriver, args: argparse.Namespace) -> Any:
    from osmos_elastic.models.document import Model

    if args.command == "health":
        return (await driver.health_check()).model_dump()

    if args.command == "create-index":
        data = {"body": args.body} if args.body is not None else {}
        await driver.create_indices(Model(bucket=args.bucket), data)
        return {"index": driver.index, "type": args.bucket, "created": True}

    if args.command == "delete":
        await driver.delete(Model(bucket=args.bucket), args.id)
        return {"deleted": args.id}

    model = Model(bucket=args.bucket, primary_key=args.primary_key)

    if args.command == "get":
        return await driver.get(model, args.id)

    spec = args.query or {}
    if args.start is not None or args.limit is not None:
        start = args.start if args.start is not None else 0
        limit = args.limit if args.limit is not None else 10
        page = await driver.find_limit(model, spec, start, limit)
        return page.model_dump()
    return await driver.find(model, spec)


def _get_version() -> str:
    try:
        from osmos_elastic import __version__

        return __version__
    except ImportError:
        return "unknown"


if __name__ == "__main__":
    main()

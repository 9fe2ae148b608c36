"""CLI parser construction."""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version


def _package_version() -> str:
    try:
        return version("attendance-sync")
    except PackageNotFoundError:
        return "0.0.0"


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a JSON config file (environment variables override it; omit to use the environment only)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="attendance-sync")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Bootstrap the replica, then consume change events until stopped")
    _add_common_arguments(run_parser)

    bootstrap_parser = subparsers.add_parser("bootstrap", help="Run one full resync of every entity type and exit")
    _add_common_arguments(bootstrap_parser)

    consume_parser = subparsers.add_parser("consume", help="Consume change events until stopped, without bootstrap")
    _add_common_arguments(consume_parser)

    return parser


__all__ = ["build_parser"]

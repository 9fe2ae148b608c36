"""Command-line interface for attendance-sync."""

from __future__ import annotations

import asyncio as asyncio
import logging as logging

from attendance_sync import SyncService as SyncService
from attendance_sync import load_config as load_config
from attendance_sync.cli.app import main as main
from attendance_sync.cli.commands import bootstrap as bootstrap_command
from attendance_sync.cli.commands import run as run_command
from attendance_sync.cli.parser import build_parser as build_parser

_format_bootstrap_summary = bootstrap_command.format_bootstrap_summary
_format_consumer_summary = run_command.format_consumer_summary

_run_bootstrap = bootstrap_command.run_bootstrap
_run_service = run_command.run_service
_run_consume = run_command.run_consume


if __name__ == "__main__":
    raise SystemExit(main())

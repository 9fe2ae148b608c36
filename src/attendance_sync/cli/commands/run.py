"""Long-running service commands."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal

from attendance_sync import ConsumerStats

logger = logging.getLogger(__name__)


def install_stop_handlers(cancel: asyncio.Event) -> None:
    """Set *cancel* on SIGINT/SIGTERM so loops wind down cooperatively."""
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # Not available on Windows event loops; KeyboardInterrupt still applies there.
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, cancel.set)


def format_consumer_summary(stats: ConsumerStats) -> str:
    return (
        f"attendance-sync - consumer stopped: {stats.polled} received, "
        f"{stats.applied} applied, {stats.failed} failed, {stats.skipped} skipped"
    )


async def run_service(args: argparse.Namespace) -> ConsumerStats:
    import attendance_sync.cli as cli

    config = cli.load_config(args.config)
    cancel = asyncio.Event()
    install_stop_handlers(cancel)

    async with cli.SyncService.from_config(config) as service:
        bootstrap_result, stats = await service.run(cancel)

    if not bootstrap_result.ok:
        logger.warning("Bootstrap finished incomplete: %s", ", ".join(map(str, bootstrap_result.failed_types)))
    print(format_consumer_summary(stats))
    return stats


async def run_consume(args: argparse.Namespace) -> ConsumerStats:
    import attendance_sync.cli as cli

    config = cli.load_config(args.config)
    cancel = asyncio.Event()
    install_stop_handlers(cancel)

    async with cli.SyncService.from_config(config) as service:
        stats = await service.start(cancel)

    print(format_consumer_summary(stats))
    return stats


__all__ = ["format_consumer_summary", "install_stop_handlers", "run_consume", "run_service"]

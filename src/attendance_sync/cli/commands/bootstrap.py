"""Bootstrap command and summary formatting."""

from __future__ import annotations

import argparse

from attendance_sync import BootstrapResult, EntityType, SyncServiceConfig
from attendance_sync.cli.progress.rich import RichBootstrapProgress


def format_bootstrap_summary(result: BootstrapResult, config: SyncServiceConfig) -> str:
    status = "complete" if result.ok else "incomplete"
    lines = [
        "",
        f"attendance-sync - bootstrap {status}",
        "",
        f"  Members:   {config.members_graphql_url}",
        f"  Planning:  {config.planning_graphql_url}",
        "",
    ]
    for entity_type in EntityType:
        type_result = result.results.get(entity_type)
        label = f"{entity_type.topic.capitalize()}:"
        if type_result is None:
            lines.append(f"  {label:<12}not requested")
        elif type_result.error is not None:
            lines.append(f"  {label:<12}failed ({type_result.error})")
        elif type_result.cancelled:
            lines.append(f"  {label:<12}cancelled")
        else:
            lines.append(f"  {label:<12}{type_result.stored} stored")

    if not result.ok:
        lines.append("")
        lines.append("  The replica is partially populated; later change events or another bootstrap will repair it.")

    lines.append("")
    return "\n".join(lines)


async def run_bootstrap(args: argparse.Namespace) -> BootstrapResult:
    import attendance_sync.cli as cli

    config = cli.load_config(args.config)

    if not args.verbose:
        with RichBootstrapProgress() as progress:
            async with cli.SyncService.from_config(config, progress=progress) as service:
                result = await service.run_once()
    else:
        async with cli.SyncService.from_config(config) as service:
            result = await service.run_once()

    print(format_bootstrap_summary(result, config))
    return result


__all__ = ["format_bootstrap_summary", "run_bootstrap"]

"""CLI app entrypoint and error mapping."""

from __future__ import annotations

import sys

from attendance_sync import ConfigError, FetchError, StoreError, SyncServiceError


def _configure_logging(verbose: bool) -> None:
    import attendance_sync.cli as cli

    level = cli.logging.DEBUG if verbose else cli.logging.INFO
    cli.logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s %(message)s", stream=sys.stderr)
    if not verbose:
        # aiokafka and httpx are chatty at INFO.
        cli.logging.getLogger("aiokafka").setLevel(cli.logging.WARNING)
        cli.logging.getLogger("httpx").setLevel(cli.logging.WARNING)


def main(argv: list[str] | None = None) -> int:
    import attendance_sync.cli as cli

    parser = cli.build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    try:
        if args.command == "bootstrap":
            result = cli.asyncio.run(cli._run_bootstrap(args))
            return 0 if result.ok else 5
        if args.command == "run":
            cli.asyncio.run(cli._run_service(args))
        elif args.command == "consume":
            cli.asyncio.run(cli._run_consume(args))
        return 0
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 3
    except FetchError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 4
    except (StoreError, SyncServiceError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 5
    except KeyboardInterrupt:
        return 130
    except Exception as exc:  # pragma: no cover - defensive fallback
        print(f"error: {exc}", file=sys.stderr)
        return 1


__all__ = ["main"]

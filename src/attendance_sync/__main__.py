"""Module entrypoint for ``python -m attendance_sync``."""

from attendance_sync.cli import main

if __name__ == "__main__":
    raise SystemExit(main())

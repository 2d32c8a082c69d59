"""Module entry point: python -m office_days ..."""

from __future__ import annotations

from office_days.cli import main


if __name__ == "__main__":
    raise SystemExit(main())



"""``guildhall`` console script: run a seeded guild simulation and exit with its status."""
from __future__ import annotations

from typing import Sequence

from .presentation.cli.app import main as run_cli


def main(argv: Sequence[str] | None = None) -> int:
    return run_cli(argv)


if __name__ == "__main__":
    raise SystemExit(main())

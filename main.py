"""Main entry point for speak2sheet."""
from __future__ import annotations

import sys

from dotenv import load_dotenv

# Load .env before configuration is parsed so environment overrides apply
load_dotenv()

from app.startup import run_application  # noqa: E402


def main() -> None:
    sys.exit(run_application())


__all__ = ["main"]

if __name__ == "__main__":
    main()

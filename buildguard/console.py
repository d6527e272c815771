"""Operator-facing output with emoji severity markers.

Informational and success lines go to stdout, warnings and errors to stderr.
"""

from __future__ import annotations

import sys
from typing import Iterable


def info(message: str) -> None:
    print(message)


def success(message: str) -> None:
    print(f"✅ {message}")


def warning(message: str) -> None:
    print(f"⚠️  {message}", file=sys.stderr)


def error(message: str) -> None:
    print(f"❌ {message}", file=sys.stderr)


def error_block(lines: Iterable[str]) -> None:
    """Print pre-formatted diagnostic lines to stderr unchanged."""

    for line in lines:
        print(line, file=sys.stderr)

"""Fail the build early when react and react-dom are a known-bad pairing.

Reads ``package.json`` (and ``node_modules`` when present) from the project
root and exits non-zero on React 19 + ReactDOM 17. Other major mismatches only
produce a warning.
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from buildguard import console
from buildguard.errors import BuildGuardError, CompatibilityError
from buildguard.settings import Settings
from buildguard.versions import validate_versions

LOGGER = logging.getLogger(__name__)


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Validate React/ReactDOM version compatibility")
    parser.add_argument(
        "--project-root",
        type=Path,
        default=None,
        help="Front-end project root (defaults to BUILDGUARD_PROJECT_ROOT or the current directory)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    settings = Settings.from_env(args.project_root)
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(levelname)s: %(message)s",
    )

    try:
        validate_versions(settings.project_root)
    except CompatibilityError as exc:
        LOGGER.error({"event": "incompatible_versions", "reason": str(exc)})
        console.error_block(exc.lines)
        return 1
    except BuildGuardError as exc:
        LOGGER.error({"event": "validation_failed", "reason": str(exc)})
        console.error(f"React version validation failed: {exc}")
        return 1
    except Exception as exc:
        LOGGER.exception("React version validation crashed")
        console.error(f"React version validation failed: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""Serve the production build and check the root page for React runtime errors.

Starts ``npx serve`` (configurable through ``BUILDGUARD_SERVE_COMMAND``) over
the build directory, waits for it to come up, fetches ``/`` once and exits
non-zero if the React root is missing or a known error signature is present.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Optional, Sequence

from buildguard import console
from buildguard.errors import BuildGuardError, PreconditionError
from buildguard.ops.runtime import COMPATIBILITY_HINT, run_smoke_test
from buildguard.settings import Settings

LOGGER = logging.getLogger(__name__)


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Runtime smoke test for a React production build")
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
        asyncio.run(run_smoke_test(settings))
    except PreconditionError as exc:
        console.error(str(exc))
        return 1
    except BuildGuardError as exc:
        LOGGER.error({"event": "runtime_check_failed", "reason": str(exc)})
        console.error(f"Runtime test failed: {exc}")
        console.error_block(COMPATIBILITY_HINT)
        return 1
    except Exception as exc:
        LOGGER.exception("Runtime smoke test crashed")
        console.error(f"Test script failed: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""Environment-driven configuration for the build guards."""

from __future__ import annotations

import logging
import os
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT_BUILD_DIR = "build"
DEFAULT_PORT = 3001
DEFAULT_WARMUP_SEC = 2.0
DEFAULT_REQUEST_TIMEOUT_SEC = 5.0
DEFAULT_SERVE_COMMAND = "npx serve -s {build_dir} -p {port}"
DEFAULT_LOG_LEVEL = "WARNING"

# Nominal end-to-end budget for one smoke test run.
TIMEOUT_BUDGET_SEC = 10.0


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name, str(default))
    try:
        parsed = int(value)
    except ValueError:
        logger.warning({"event": "invalid_setting", "name": name, "value": value, "default": default})
        return default
    if parsed <= 0:
        logger.warning({"event": "invalid_setting", "name": name, "value": value, "default": default})
        return default
    return parsed


def _env_float(name: str, default: float, *, allow_zero: bool = True) -> float:
    value = os.getenv(name, str(default))
    try:
        parsed = float(value)
    except ValueError:
        logger.warning({"event": "invalid_setting", "name": name, "value": value, "default": default})
        return default
    if parsed < 0 or (parsed == 0 and not allow_zero):
        logger.warning({"event": "invalid_setting", "name": name, "value": value, "default": default})
        return default
    return parsed


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for one invocation."""

    project_root: Path
    build_dir: str = DEFAULT_BUILD_DIR
    port: int = DEFAULT_PORT
    warmup_seconds: float = DEFAULT_WARMUP_SEC
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT_SEC
    serve_command: str = DEFAULT_SERVE_COMMAND
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, project_root: Optional[Path] = None) -> "Settings":
        """Build settings from ``BUILDGUARD_*`` variables.

        An explicit ``project_root`` wins over ``BUILDGUARD_PROJECT_ROOT``.
        """

        root = project_root or Path(os.getenv("BUILDGUARD_PROJECT_ROOT") or Path.cwd())
        return cls(
            project_root=Path(root).resolve(),
            build_dir=os.getenv("BUILDGUARD_BUILD_DIR") or DEFAULT_BUILD_DIR,
            port=_env_int("BUILDGUARD_PORT", DEFAULT_PORT),
            warmup_seconds=_env_float("BUILDGUARD_WARMUP_SEC", DEFAULT_WARMUP_SEC),
            request_timeout=_env_float(
                "BUILDGUARD_REQUEST_TIMEOUT_SEC", DEFAULT_REQUEST_TIMEOUT_SEC, allow_zero=False
            ),
            serve_command=os.getenv("BUILDGUARD_SERVE_COMMAND") or DEFAULT_SERVE_COMMAND,
            log_level=(os.getenv("BUILDGUARD_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
        )

    @property
    def build_path(self) -> Path:
        return self.project_root / self.build_dir

    @property
    def base_url(self) -> str:
        return f"http://localhost:{self.port}"

    def server_command(self) -> List[str]:
        """Return the server argv with ``{build_dir}`` and ``{port}`` filled in."""

        return [
            part.format(build_dir=self.build_dir, port=self.port)
            for part in shlex.split(self.serve_command)
        ]

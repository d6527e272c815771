"""Exception hierarchy shared by the validator and the runtime smoke test."""

from __future__ import annotations

from typing import Sequence


class BuildGuardError(Exception):
    """Base class for every failure that should stop the build."""


class ConfigurationError(BuildGuardError):
    """The project manifest is missing, malformed or incomplete."""


class VersionParseError(BuildGuardError):
    """A declared version string contains no ``major.minor.patch`` triple."""


class CompatibilityError(BuildGuardError):
    """A known-bad React/ReactDOM pairing was detected."""

    def __init__(self, message: str, lines: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.lines = list(lines) or [message]


class PreconditionError(BuildGuardError):
    """The build output is not available."""


class ServerLaunchError(BuildGuardError):
    """The static file server could not be started."""


class TransportError(BuildGuardError):
    """The HTTP probe failed to connect or timed out."""


class ContentError(BuildGuardError):
    """The served page does not look like a healthy React app."""

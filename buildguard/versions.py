"""React / ReactDOM version compatibility validation."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from buildguard import console
from buildguard.errors import CompatibilityError, ConfigurationError, VersionParseError
from buildguard.manifest import (
    MANIFEST_FILENAME,
    REACT,
    REACT_DOM,
    installed_metadata_path,
    load_installed_package,
    load_manifest,
)

logger = logging.getLogger(__name__)

VERSION_PATTERN = re.compile(r"(\d+)\.(\d+)\.(\d+)")

# React 19 removed the internals ReactDOM 17 reads at render time.
INCOMPATIBLE_MAJORS = (19, 17)


@dataclass(frozen=True)
class VersionTriple:
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass
class VersionReport:
    """Outcome of a successful validation run."""

    react: VersionTriple
    react_dom: VersionTriple
    installed_react: Optional[str] = None
    installed_react_dom: Optional[str] = None
    warnings: List[str] = field(default_factory=list)


def parse_version(value: str) -> Optional[VersionTriple]:
    """Return the first ``major.minor.patch`` found in ``value``.

    Range prefixes such as ``^``, ``~`` or ``>=`` are ignored because the
    pattern is searched anywhere in the string.
    """

    match = VERSION_PATTERN.search(value)
    if not match:
        return None
    return VersionTriple(*(int(group) for group in match.groups()))


def is_known_incompatible(react: VersionTriple, react_dom: VersionTriple) -> bool:
    return (react.major, react_dom.major) == INCOMPATIBLE_MAJORS


def _critical_lines() -> List[str]:
    return [
        "❌ CRITICAL: React 19 + ReactDOM 17 detected!",
        "❌ This causes runtime error: \"Cannot read properties of undefined "
        "(reading 'ReactCurrentDispatcher')\"",
        "❌ React 19 internal APIs are incompatible with ReactDOM 17",
        "",
        "🔧 SOLUTION OPTIONS:",
        "   1. Upgrade react-dom to 19.x.x (recommended)",
        "   2. Downgrade react to 17.x.x",
        "",
        "🚨 BUILD FAILED: Fix React version compatibility before proceeding",
    ]


def _installed_lines() -> List[str]:
    return [
        "❌ RUNTIME ERROR DETECTED IN INSTALLED PACKAGES!",
        "❌ React 19 + ReactDOM 17 will cause ReactCurrentDispatcher error",
        "❌ This is the exact error condition reported at runtime",
    ]


def _check_installed(project_root: Path, report: VersionReport) -> None:
    """Repeat the 19/17 check against ``node_modules``.

    Missing metadata skips the check. Unreadable metadata is reported as a soft
    warning. A detected incompatibility is always raised.
    """

    react_path = installed_metadata_path(project_root, REACT)
    react_dom_path = installed_metadata_path(project_root, REACT_DOM)
    if not (react_path.exists() and react_dom_path.exists()):
        logger.info({"event": "installed_check_skipped", "reason": "metadata_missing"})
        return

    try:
        installed_react = load_installed_package(react_path).version
        installed_react_dom = load_installed_package(react_dom_path).version
    except (OSError, ValueError) as exc:
        logger.warning({"event": "installed_check_failed", "error": str(exc)})
        console.warning("Could not check installed versions in node_modules")
        return

    console.info(f"📦 Installed React: {installed_react}")
    console.info(f"📦 Installed ReactDOM: {installed_react_dom}")
    report.installed_react = installed_react
    report.installed_react_dom = installed_react_dom

    react = parse_version(installed_react)
    react_dom = parse_version(installed_react_dom)
    if react is None or react_dom is None:
        logger.warning(
            {
                "event": "installed_check_failed",
                "error": "unparseable installed version",
                "react": installed_react,
                "react_dom": installed_react_dom,
            }
        )
        console.warning("Could not check installed versions in node_modules")
        return

    if is_known_incompatible(react, react_dom):
        raise CompatibilityError(
            "React 19 + ReactDOM 17 detected in installed packages",
            _installed_lines(),
        )


def validate_versions(project_root: Path) -> VersionReport:
    """Validate the React/ReactDOM pairing declared in ``project_root``.

    Raises a :class:`~buildguard.errors.BuildGuardError` subclass on failure. A
    major version mismatch other than 19/17 only produces a warning.
    """

    console.info("🔍 Validating React version compatibility...")

    manifest = load_manifest(project_root / MANIFEST_FILENAME)
    declared_react = manifest.declared(REACT)
    declared_react_dom = manifest.declared(REACT_DOM)
    if not declared_react or not declared_react_dom:
        raise ConfigurationError("React or ReactDOM not found in dependencies")

    console.info(f"📦 React version: {declared_react}")
    console.info(f"📦 ReactDOM version: {declared_react_dom}")

    react = parse_version(declared_react)
    react_dom = parse_version(declared_react_dom)
    if react is None or react_dom is None:
        raise VersionParseError("Unable to parse React version numbers")

    if is_known_incompatible(react, react_dom):
        raise CompatibilityError(
            "React 19 + ReactDOM 17 detected", _critical_lines()
        )

    report = VersionReport(react=react, react_dom=react_dom)

    if react.major != react_dom.major:
        message = "WARNING: React major version mismatch detected"
        console.warning(message)
        console.error_block(
            [
                f"   React: v{react.major}.x.x, ReactDOM: v{react_dom.major}.x.x",
                "   This may cause compatibility issues",
            ]
        )
        report.warnings.append(
            f"React v{react.major} and ReactDOM v{react_dom.major} majors differ"
        )
        logger.warning(
            {"event": "major_mismatch", "react": str(react), "react_dom": str(react_dom)}
        )

    _check_installed(project_root, report)

    console.success("React version compatibility check passed")
    logger.info({"event": "versions_validated", "react": str(react), "react_dom": str(react_dom)})
    return report

"""Loading of ``package.json`` manifests and installed package metadata."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from buildguard.errors import ConfigurationError

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "package.json"
REACT = "react"
REACT_DOM = "react-dom"


class PackageManifest(BaseModel):
    """The parts of a project ``package.json`` the validator reads."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: Optional[str] = None
    dependencies: Dict[str, str] = Field(default_factory=dict)

    @field_validator("dependencies", mode="before")
    @classmethod
    def _ensure_mapping(cls, value: Any) -> Any:
        if value is None:
            return {}
        return value

    def declared(self, package: str) -> Optional[str]:
        """Return the declared version range for ``package`` if present."""

        value = self.dependencies.get(package)
        if value is None or not value.strip():
            return None
        return value


class InstalledPackage(BaseModel):
    """Metadata recorded by the package manager for an installed dependency."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: Optional[str] = None
    version: str


def _read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as fp:
        return json.load(fp)


def load_manifest(path: Path) -> PackageManifest:
    """Parse the project manifest, raising :class:`ConfigurationError` on any problem."""

    if not path.exists():
        raise ConfigurationError(f"Manifest not found: {path}")

    try:
        data = _read_json(path)
    except OSError as exc:
        raise ConfigurationError(f"Unable to read {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise ConfigurationError(f"Unable to decode {path} as UTF-8: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected a JSON object in {path}")

    try:
        manifest = PackageManifest.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Malformed dependencies in {path}: {exc}") from exc

    logger.debug({"event": "manifest_loaded", "path": str(path), "name": manifest.name})
    return manifest


def installed_metadata_path(project_root: Path, package: str) -> Path:
    return project_root / "node_modules" / package / MANIFEST_FILENAME


def load_installed_package(path: Path) -> InstalledPackage:
    """Read installed metadata.

    Raises ``OSError`` or ``ValueError`` (JSON and validation errors included);
    callers treat these as a skipped check.
    """

    data = _read_json(path)
    return InstalledPackage.model_validate(data)

import json
import sys
from pathlib import Path

import pytest

from buildguard.settings import Settings

INDEX_HTML = """<!doctype html>
<html lang="en">
  <head><meta charset="utf-8" /><title>App</title></head>
  <body>
    <noscript>You need to enable JavaScript to run this app.</noscript>
    <div id="root"></div>
    <script src="/static/js/main.js"></script>
  </body>
</html>
"""

# Stands in for ``npx serve``: prints a banner and stays up until signalled.
IDLE_SERVER = (
    f'"{sys.executable}" -c '
    "\"import sys, time; print('Serving {build_dir} on {port}', flush=True); time.sleep(60)\""
)


def write_json(path: Path, payload) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.fixture()
def make_project(tmp_path):
    """Create a throwaway front-end project with the given React versions."""

    def _make(react="18.2.0", react_dom="18.2.0", installed=None, build=False):
        dependencies = {}
        if react is not None:
            dependencies["react"] = react
        if react_dom is not None:
            dependencies["react-dom"] = react_dom
        write_json(tmp_path / "package.json", {"name": "web", "dependencies": dependencies})

        if installed is not None:
            installed_react, installed_react_dom = installed
            write_json(
                tmp_path / "node_modules" / "react" / "package.json",
                {"name": "react", "version": installed_react},
            )
            write_json(
                tmp_path / "node_modules" / "react-dom" / "package.json",
                {"name": "react-dom", "version": installed_react_dom},
            )

        if build:
            build_dir = tmp_path / "build"
            build_dir.mkdir(exist_ok=True)
            (build_dir / "index.html").write_text(INDEX_HTML, encoding="utf-8")
        return tmp_path

    return _make


@pytest.fixture()
def smoke_settings(tmp_path):
    """Settings that start a local idle process instead of ``npx serve``."""

    return Settings(
        project_root=tmp_path,
        port=3001,
        warmup_seconds=0.0,
        request_timeout=2.0,
        serve_command=IDLE_SERVER,
    )



@pytest.fixture()
def idle_server_env(monkeypatch):
    """Point the CLI at the idle stand-in server with no warm-up."""

    for name in ("BUILDGUARD_PROJECT_ROOT", "BUILDGUARD_BUILD_DIR", "BUILDGUARD_PORT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("BUILDGUARD_SERVE_COMMAND", IDLE_SERVER)
    monkeypatch.setenv("BUILDGUARD_WARMUP_SEC", "0")

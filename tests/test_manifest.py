import json

import pytest

from buildguard.errors import ConfigurationError
from buildguard.manifest import installed_metadata_path, load_installed_package, load_manifest


def test_manifest_exposes_declared_versions(tmp_path):
    path = tmp_path / "package.json"
    path.write_text(
        json.dumps(
            {
                "name": "web",
                "scripts": {"build": "react-scripts build"},
                "dependencies": {"react": "^18.2.0", "react-dom": "  "},
            }
        ),
        encoding="utf-8",
    )

    manifest = load_manifest(path)

    assert manifest.name == "web"
    assert manifest.declared("react") == "^18.2.0"
    assert manifest.declared("react-dom") is None
    assert manifest.declared("vue") is None


def test_null_dependencies_are_treated_as_empty(tmp_path):
    path = tmp_path / "package.json"
    path.write_text('{"dependencies": null}', encoding="utf-8")

    assert load_manifest(path).dependencies == {}


@pytest.mark.parametrize(
    "content, message",
    [
        ("[1, 2]", "Expected a JSON object"),
        ('{"dependencies": {"react": 18}}', "Malformed dependencies"),
        ('{"dependencies": ["react"]}', "Malformed dependencies"),
    ],
)
def test_unexpected_shapes_are_configuration_errors(tmp_path, content, message):
    path = tmp_path / "package.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigurationError, match=message):
        load_manifest(path)


def test_installed_metadata_requires_version(tmp_path):
    path = installed_metadata_path(tmp_path, "react")
    path.parent.mkdir(parents=True)
    path.write_text('{"name": "react"}', encoding="utf-8")

    assert path == tmp_path / "node_modules" / "react" / "package.json"
    with pytest.raises(ValueError):
        load_installed_package(path)

import pytest

import validate_react_versions


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    monkeypatch.delenv("BUILDGUARD_PROJECT_ROOT", raising=False)
    monkeypatch.delenv("BUILDGUARD_LOG_LEVEL", raising=False)
    yield


def test_react_19_with_dom_17_exits_with_critical_message(make_project, capsys):
    root = make_project(react="19.0.0", react_dom="17.0.2")

    exit_code = validate_react_versions.main(["--project-root", str(root)])

    captured = capsys.readouterr()
    assert exit_code == 1
    assert "❌ CRITICAL: React 19 + ReactDOM 17 detected!" in captured.err
    assert "🔧 SOLUTION OPTIONS:" in captured.err
    assert "🚨 BUILD FAILED" in captured.err


def test_matching_versions_exit_zero(make_project, capsys):
    root = make_project(react="18.2.0", react_dom="18.2.0")

    exit_code = validate_react_versions.main(["--project-root", str(root)])

    captured = capsys.readouterr()
    assert exit_code == 0
    assert "📦 React version: 18.2.0" in captured.out
    assert "✅ React version compatibility check passed" in captured.out


def test_major_mismatch_warns_but_exits_zero(make_project, capsys):
    root = make_project(react="18.2.0", react_dom="17.0.2")

    exit_code = validate_react_versions.main(["--project-root", str(root)])

    assert exit_code == 0
    assert "WARNING" in capsys.readouterr().err


def test_malformed_version_exits_one(make_project, capsys):
    root = make_project(react="workspace:*", react_dom="18.2.0")

    exit_code = validate_react_versions.main(["--project-root", str(root)])

    assert exit_code == 1
    assert (
        "❌ React version validation failed: Unable to parse React version numbers"
        in capsys.readouterr().err
    )


def test_missing_manifest_exits_one(tmp_path, capsys):
    exit_code = validate_react_versions.main(["--project-root", str(tmp_path)])

    assert exit_code == 1
    assert "React version validation failed" in capsys.readouterr().err


def test_project_root_from_environment(make_project, monkeypatch):
    root = make_project()
    monkeypatch.setenv("BUILDGUARD_PROJECT_ROOT", str(root))

    assert validate_react_versions.main([]) == 0


def test_repeated_runs_are_identical(make_project, capsys):
    root = make_project(react="19.0.0", react_dom="17.0.2")

    first = validate_react_versions.main(["--project-root", str(root)])
    first_output = capsys.readouterr()
    second = validate_react_versions.main(["--project-root", str(root)])
    second_output = capsys.readouterr()

    assert first == second == 1
    assert first_output == second_output


def test_undecodable_manifest_exits_one(tmp_path, capsys):
    (tmp_path / "package.json").write_bytes(b"\xff\xfe{}")

    exit_code = validate_react_versions.main(["--project-root", str(tmp_path)])

    assert exit_code == 1
    assert "❌ React version validation failed: Unable to decode" in capsys.readouterr().err


def test_unexpected_error_exits_one(make_project, monkeypatch, capsys):
    root = make_project()

    def crash(project_root):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(validate_react_versions, "validate_versions", crash)

    assert validate_react_versions.main(["--project-root", str(root)]) == 1
    assert "❌ React version validation failed: disk on fire" in capsys.readouterr().err

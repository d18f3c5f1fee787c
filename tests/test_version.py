"""Tests for the package version metadata."""

import importlib

import pytest
from packaging.version import Version

import reliability_buffer
from reliability_buffer import _version as version_module


def test_version_is_semver_patch():
    version = Version(reliability_buffer.__version__)

    assert len(version.release) == 3, (
        "reliability_buffer.__version__ must contain exactly three release components"
    )


def test_version_override_from_semantic_release(monkeypatch):
    monkeypatch.setenv("PYTHON_SEMANTIC_RELEASE_VERSION", "9.8.7")
    importlib.reload(version_module)
    reloaded = importlib.reload(reliability_buffer)

    assert reloaded.__version__ == "9.8.7"

    monkeypatch.setenv("PYTHON_SEMANTIC_RELEASE_VERSION", "invalid-version")
    with pytest.raises(RuntimeError):
        importlib.reload(version_module)

    monkeypatch.setenv("PYTHON_SEMANTIC_RELEASE_VERSION", "1.2")
    with pytest.raises(RuntimeError, match="MAJOR.MINOR.PATCH"):
        importlib.reload(version_module)

    monkeypatch.delenv("PYTHON_SEMANTIC_RELEASE_VERSION", raising=False)
    importlib.reload(version_module)
    importlib.reload(reliability_buffer)


def test_version_falls_back_to_changelog(tmp_path, monkeypatch):
    changelog = tmp_path / "CHANGELOG.md"
    changelog.write_text("# Changelog\n\n## v2.3.4\n\n## v2.3.3\n", encoding="utf-8")
    monkeypatch.setattr(version_module, "_CHANGELOG", changelog)

    assert version_module._version_from_sources() == "2.3.4"

    monkeypatch.setattr(version_module, "_CHANGELOG", tmp_path / "missing.md")
    with pytest.raises(RuntimeError, match="Unable to determine"):
        version_module._version_from_sources()

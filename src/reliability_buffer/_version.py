"""Utilities for retrieving and validating the package version."""

from __future__ import annotations

import os
import re
from importlib import metadata
from pathlib import Path

from packaging.version import InvalidVersion, Version


_PACKAGE_NAME = "reliability-buffer"
_OVERRIDE_ENV_VAR = "PYTHON_SEMANTIC_RELEASE_VERSION"


_CHANGELOG = Path(__file__).resolve().parents[2] / "CHANGELOG.md"
_CHANGELOG_HEADING = re.compile(r"^## v(?P<version>\d+\.\d+\.\d+)\b", re.MULTILINE)


def _version_from_sources() -> str:
    """Return the newest release heading of the source checkout's changelog.

    Used when the distribution metadata has not been generated yet.
    """

    if _CHANGELOG.is_file():
        match = _CHANGELOG_HEADING.search(_CHANGELOG.read_text(encoding="utf-8"))
        if match:
            return match.group("version")

    raise RuntimeError(
        "Unable to determine the 'reliability-buffer' version from package "
        "metadata or repository sources."
    )


def _load_version() -> str:
    """Return the validated package version.

    ``$PYTHON_SEMANTIC_RELEASE_VERSION`` wins over the installed metadata so
    release tooling can stamp a build.  The result must follow the
    ``MAJOR.MINOR.PATCH`` scheme.
    """

    raw_version = os.environ.get(_OVERRIDE_ENV_VAR)
    if not raw_version:
        try:
            raw_version = metadata.version(_PACKAGE_NAME)
        except metadata.PackageNotFoundError:
            raw_version = _version_from_sources()

    try:
        parsed = Version(raw_version)
    except InvalidVersion as exc:
        raise RuntimeError(
            "Invalid version string for 'reliability-buffer': "
            f"{raw_version!r}. Expected a semantic version."
        ) from exc

    if len(parsed.release) != 3:
        raise RuntimeError(
            "The 'reliability-buffer' version must follow the MAJOR.MINOR.PATCH "
            f"format. Found: {raw_version!r}."
        )

    return raw_version


__version__ = _load_version()

__all__ = ["__version__"]

"""Package version.

Installed copies report the version recorded in the package metadata.
A source tree run without installing falls back to BASE_VERSION plus the
commit count of its own git checkout, e.g. 1.0.23.
"""

from __future__ import annotations

import subprocess
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

BASE_VERSION = "1.0"

# src/hinged/_version.py -> repository root
_SOURCE_ROOT = Path(__file__).resolve().parents[2]


def _source_version() -> str:
    try:
        result = subprocess.run(
            ["git", "rev-list", "--count", "HEAD"],
            cwd=_SOURCE_ROOT,
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (subprocess.SubprocessError, OSError):
        return f"{BASE_VERSION}.0"

    count = result.stdout.strip()
    if result.returncode != 0 or not count.isdigit():
        return f"{BASE_VERSION}.0"
    return f"{BASE_VERSION}.{count}"


def get_version() -> str:
    """Get the version string, preferring installed metadata over git."""
    try:
        return version("hinged")
    except PackageNotFoundError:
        return _source_version()


__version__ = get_version()

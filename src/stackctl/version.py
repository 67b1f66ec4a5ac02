"""
Single source of version: the installed distribution metadata.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

DIST_NAME = "stackctl"


def get_version() -> str:
    """Return the installed stackctl version, or '0.0.0' when running from a bare checkout."""
    try:
        return version(DIST_NAME)
    except PackageNotFoundError:
        return "0.0.0"

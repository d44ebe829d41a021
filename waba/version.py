"""
waba/version.py
===============
Single source of truth for WABA-Core version information.

PEP 440 compliant versioning: MAJOR.MINOR.PATCH[-PRE]

Import this module for programmatic version access:
    from waba.version import __version__, VERSION_INFO
"""

from __future__ import annotations

from typing import NamedTuple


class VersionInfo(NamedTuple):
    """Structured version information."""
    major: int
    minor: int
    patch: int
    pre_release: str = ""

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre_release:
            return f"{base}-{self.pre_release}"
        return base


VERSION_INFO = VersionInfo(major=0, minor=3, patch=0)

__version__: str = str(VERSION_INFO)

# Minimum Python version required
PYTHON_REQUIRES = ">=3.9"

# Framework metadata
FRAMEWORK_NAME = "WABA-Core"
FRAMEWORK_DESCRIPTION = "Weighted Assumption-Based Argumentation evaluation engine"
AUTHOR = "WABA-Core Contributors"
LICENSE = "MIT"

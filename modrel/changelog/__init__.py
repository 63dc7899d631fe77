"""Changelog parsing."""

from .model import Release
from .parser import ChangelogError, parse_changelog, read_changelog
from .version import Version

__all__ = [
    "ChangelogError",
    "Release",
    "Version",
    "parse_changelog",
    "read_changelog",
]

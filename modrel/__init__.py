"""Changelog-driven release automation for multi-branch mod projects."""

__version__ = "0.1.0"

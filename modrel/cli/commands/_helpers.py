"""Shared helpers for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer

from modrel.changelog.model import Release
from modrel.changelog.parser import read_changelog
from modrel.core.errors import ErrorCode
from modrel.core.result import Err
from modrel.output.console import ConsoleProtocol, Style
from modrel.output.errors import print_stage_error, stage_error_exit_code
from modrel.registry.github import ReleaseRegistry
from modrel.release.filter import pending_releases


def exit_with_code(code: int) -> NoReturn:
    raise typer.Exit(code=code)


def load_releases(path: Path, console: ConsoleProtocol) -> dict[int, Release]:
    """Parse the changelog at ``path`` or exit with a user error."""
    result = read_changelog(path)
    if isinstance(result, Err):
        console.error(result.error.message)
        if result.error.hint:
            console.print(f"hint: {result.error.hint}", Style.DIM)
        exit_with_code(int(ErrorCode.USER_ERROR))
    return result.value


def print_release_line(release: Release, console: ConsoleProtocol) -> None:
    console.print(
        f"{release.major}.x  {release.version:<10} {release.platform:<10} "
        f"{release.branch}  (java {release.toolchain})"
    )


def load_pending(
    releases: dict[int, Release],
    *,
    registry: ReleaseRegistry,
    console: ConsoleProtocol,
) -> list[Release]:
    """Filter out published releases, or exit when the registry cannot be queried."""
    result = pending_releases(releases, registry=registry, console=console)
    if isinstance(result, Err):
        print_stage_error(result.error, console)
        exit_with_code(stage_error_exit_code(result.error))
    return result.value

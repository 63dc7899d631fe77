from __future__ import annotations

from pathlib import Path

import typer

from modrel.cli.commands._helpers import load_pending, load_releases, print_release_line
from modrel.cli.context import build_context, build_registry


def plan(
    path: Path | None = typer.Option(None, "--changelog", help="Changelog file to read"),
) -> None:
    """List the releases that are not published yet, in publishing order."""
    ctx = build_context()
    releases = load_releases(path or ctx.settings.changelog_path, ctx.console)

    ctx.console.header("Pending releases")
    pending = load_pending(releases, registry=build_registry(ctx.settings), console=ctx.console)
    if not pending:
        ctx.console.success("nothing to release")
        return

    for release in pending:
        print_release_line(release, ctx.console)

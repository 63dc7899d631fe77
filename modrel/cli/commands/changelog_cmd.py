from __future__ import annotations

from pathlib import Path

import typer

from modrel.cli.commands._helpers import load_releases, print_release_line
from modrel.cli.context import load_pipeline, project_root
from modrel.output.console import RichConsole, Style
from modrel.release.filter import order_newest_first


def changelog(
    path: Path | None = typer.Option(None, "--changelog", help="Changelog file to read"),
    notes: bool = typer.Option(False, "--notes", help="Also print each release's changelog"),
) -> None:
    """Show the release each changelog section would produce."""
    console = RichConsole()
    changelog_path = path or project_root() / load_pipeline(console).changelog

    releases = order_newest_first(load_releases(changelog_path, console))
    if not releases:
        console.warning(f"no releasable sections in {changelog_path}")
        return

    for release in releases:
        print_release_line(release, console)
        if notes:
            for line in release.changelog.splitlines():
                console.print(f"    {line}", Style.DIM)

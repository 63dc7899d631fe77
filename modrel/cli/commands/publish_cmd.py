from __future__ import annotations

from pathlib import Path

import typer

from modrel.cli.commands._helpers import exit_with_code, load_pending, load_releases
from modrel.cli.context import build_context, build_registry
from modrel.output.console import Style
from modrel.output.errors import stage_error_exit_code
from modrel.release.orchestrator import ReleaseOrchestrator


def publish(
    path: Path | None = typer.Option(None, "--changelog", help="Changelog file to read"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print actions without executing"),
    continue_on_error: bool = typer.Option(
        False,
        "--continue-on-error",
        help="Keep releasing the remaining branches after a failure",
    ),
) -> None:
    """Build, publish and create a release for every unpublished changelog section."""
    ctx = build_context()
    console = ctx.console
    registry = build_registry(ctx.settings)

    releases = load_releases(path or ctx.settings.changelog_path, console)
    pending = load_pending(releases, registry=registry, console=console)
    if not pending:
        console.success("nothing to release")
        return

    orchestrator = ReleaseOrchestrator(
        settings=ctx.settings,
        registry=registry,
        console=console,
        on_failure="continue" if continue_on_error else None,
    )
    report = orchestrator.run(pending, dry_run=dry_run)

    console.header("Summary")
    for done in report.published:
        console.success(f"{done.release.title}: {done.assets} asset(s)")
    for failure in report.failures:
        console.error(f"{failure.release.title}: {failure.error.kind}")
    for release in report.not_attempted:
        console.print(f"not attempted: {release.title}", Style.DIM)

    first = report.first_failure
    if first is not None:
        exit_with_code(stage_error_exit_code(first.error))

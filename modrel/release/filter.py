from __future__ import annotations

from collections.abc import Mapping

from modrel.changelog.model import Release
from modrel.changelog.version import Version
from modrel.core.result import Err, Ok, Result
from modrel.output.console import ConsoleProtocol, Style
from modrel.registry.github import ReleaseRegistry
from modrel.release.errors import PublishError

__all__ = ["pending_releases", "order_newest_first"]


def _sort_key(release: Release) -> tuple[int, Version]:
    return (release.major, release.parsed_version or Version(0, 0, 0))


def order_newest_first(releases: Mapping[int, Release]) -> list[Release]:
    """Releases by descending major (newest platform section first)."""
    return sorted(releases.values(), key=_sort_key, reverse=True)


def pending_releases(
    releases: Mapping[int, Release],
    *,
    registry: ReleaseRegistry,
    console: ConsoleProtocol,
) -> Result[list[Release], PublishError]:
    """Drop releases whose tag already exists on the registry.

    Reruns against an unchanged changelog therefore never recreate a published
    release. A failing lookup is fatal: guessing "not published" could
    publish twice.
    """
    pending: list[Release] = []
    for release in order_newest_first(releases):
        exists = registry.release_exists(release.version)
        if isinstance(exists, Err):
            return Err(
                PublishError(
                    kind="lookup_failed",
                    tag=release.version,
                    message=exists.error.message,
                    hint="Check GITHUB_TOKEN and GITHUB_REPOSITORY",
                )
            )

        if exists.value:
            console.print(
                f"skip {release.version} ({release.branch}): already published", Style.DIM
            )
            continue

        pending.append(release)

    return Ok(pending)

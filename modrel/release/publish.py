from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from modrel.changelog.model import Release
from modrel.core.result import Err, Ok, Result
from modrel.output.console import ConsoleProtocol, Style
from modrel.registry.github import ReleaseRegistry, RemoteRelease
from modrel.release.artifacts import content_type_for
from modrel.release.errors import PublishError

__all__ = ["create_release", "upload_artifacts"]


def create_release(
    *,
    release: Release,
    registry: ReleaseRegistry,
    console: ConsoleProtocol,
    dry_run: bool,
) -> Result[RemoteRelease, PublishError]:
    """Create the tagged release entry for ``release`` on its branch."""
    console.print(
        f"create release {release.title} (tag {release.version}, target {release.branch})"
    )
    if dry_run:
        return Ok(RemoteRelease(id=0, tag=release.version, upload_url="(dry-run)"))

    result = registry.create_release(
        tag=release.version,
        title=release.title,
        target=release.branch,
        body=release.changelog,
    )
    if isinstance(result, Err):
        return Err(
            PublishError(
                kind="create_failed",
                tag=release.version,
                message=result.error.message,
            )
        )
    return result


def upload_artifacts(
    *,
    remote: RemoteRelease,
    artifacts: Sequence[Path],
    workdir: Path,
    registry: ReleaseRegistry,
    console: ConsoleProtocol,
) -> Result[int, PublishError]:
    """Attach every artifact to ``remote``; stops at the first failed upload.

    Returns the number of uploaded files.
    """
    if not artifacts:
        console.warning(f"no artifacts found for {remote.tag}")

    uploaded = 0
    for path in artifacts:
        content_type = content_type_for(path)
        console.print(f"upload {_display(path, workdir)} ({content_type})", Style.DIM)
        result = registry.upload_asset(remote, path, content_type)
        if isinstance(result, Err):
            return Err(
                PublishError(
                    kind="upload_failed",
                    tag=remote.tag,
                    message=result.error.message,
                    hint=(
                        f"release {remote.tag} exists with {uploaded} of {len(artifacts)} "
                        "assets; upload the rest manually or delete the release and rerun"
                    ),
                )
            )
        uploaded += 1

    return Ok(uploaded)


def _display(path: Path, workdir: Path) -> str:
    try:
        return str(path.relative_to(workdir))
    except ValueError:
        return str(path)

from __future__ import annotations

from pathlib import Path

from modrel.core.result import Err, Ok, Result
from modrel.git.repository import Repository
from modrel.output.console import ConsoleProtocol, Style
from modrel.release.errors import WorkspaceError

__all__ = ["sync_workspace", "workspace_dir"]


def workspace_dir(scratch_root: Path, branch: str) -> Path:
    """Working copy location for ``branch``; reused across runs."""
    return scratch_root / branch


def sync_workspace(
    *,
    scratch_root: Path,
    branch: str,
    clone_url: str,
    console: ConsoleProtocol,
    dry_run: bool,
) -> Result[Path, WorkspaceError]:
    """Clone ``branch`` on first use, otherwise fetch and fast-forward it."""
    dest = workspace_dir(scratch_root, branch)
    repo = Repository(dest)

    if not repo.exists():
        if not repo.is_empty_dir():
            return Err(
                WorkspaceError(
                    kind="clone_failed",
                    branch=branch,
                    message=f"{dest} exists but is not a git working copy",
                    hint="Delete the directory and rerun",
                )
            )

        console.print(f"git clone {clone_url} --branch {branch} {dest}", Style.DIM)
        if dry_run:
            return Ok(dest)

        cloned = Repository.clone(clone_url, branch=branch, dest=dest)
        if isinstance(cloned, Err):
            return Err(
                WorkspaceError(
                    kind="clone_failed",
                    branch=branch,
                    message=f"failed to clone branch {branch}",
                    hint=cloned.error.message,
                )
            )
        return Ok(dest)

    console.print(f"git -C {dest} fetch origin", Style.DIM)
    console.print(f"git -C {dest} pull --ff-only", Style.DIM)
    if dry_run:
        return Ok(dest)

    fetched = repo.fetch()
    if isinstance(fetched, Err):
        return Err(
            WorkspaceError(
                kind="fetch_failed",
                branch=branch,
                message=f"failed to fetch branch {branch}",
                hint=fetched.error.message,
            )
        )

    pulled = repo.pull_ff()
    if isinstance(pulled, Err):
        return Err(
            WorkspaceError(
                kind="pull_failed",
                branch=branch,
                message=f"failed to fast-forward branch {branch}",
                hint=pulled.error.message,
            )
        )

    return Ok(dest)

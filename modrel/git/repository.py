"""Git working copy abstraction.

Only the operations the release workspace needs: clone a branch, fetch, and
fast-forward pull. Every call blocks until git exits and returns a Result.

Usage:
    repo = Repository(scratch_root / "release/1.20")
    if repo.exists():
        repo.fetch()
        repo.pull_ff()
    else:
        Repository.clone(url, branch="release/1.20", dest=repo.path)
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from modrel.core.result import Err, Ok, Result
from modrel.platform.process import ProcessError
from modrel.platform.process import run as run_process

__all__ = ["GitError", "Repository"]


@dataclass(frozen=True, slots=True)
class GitError:
    """A failed git command.

    Attributes:
        command: Git subcommand that failed (e.g. "pull --ff-only")
        message: Git's error output, or a fallback description
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


def _to_git_error(command: str, e: ProcessError) -> GitError:
    return GitError(
        command=command,
        message=e.stderr.strip() or e.stdout.strip() or f"git {command} failed",
        returncode=e.returncode,
    )


class Repository:
    """A local working copy at ``path``."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        """True if ``path`` holds a git working copy."""
        return (self.path / ".git").exists()

    def is_empty_dir(self) -> bool:
        """True if ``path`` is missing or an empty directory."""
        if not self.path.exists():
            return True
        return self.path.is_dir() and not any(self.path.iterdir())

    @classmethod
    def clone(cls, url: str, *, branch: str, dest: Path) -> Result[Repository, GitError]:
        """Clone the single ``branch`` of ``url`` into ``dest``."""
        dest.parent.mkdir(parents=True, exist_ok=True)
        result = run_process(
            ["git", "clone", url, "--branch", branch, str(dest)],
            cwd=dest.parent,
        )
        match result:
            case Err(e):
                return Err(_to_git_error("clone", e))
            case Ok(_):
                return Ok(cls(dest))

    def fetch(self, remote: str = "origin") -> Result[str, GitError]:
        result = self._run(["fetch", remote])
        match result:
            case Err(e):
                return Err(_to_git_error("fetch", e))
            case Ok(stdout):
                return Ok(stdout.strip())

    def pull_ff(self) -> Result[str, GitError]:
        """Pull with fast-forward only; diverged or dirty copies fail."""
        result = self._run(["pull", "--ff-only"])
        match result:
            case Err(e):
                return Err(_to_git_error("pull --ff-only", e))
            case Ok(stdout):
                return Ok(stdout.strip())

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path)

"""Failures of the per-release pipeline stages.

Every stage failure is fatal for the release being processed. Whether the rest
of the queue still runs is decided by the orchestrator's failure policy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True, slots=True)
class WorkspaceError:
    """The branch working copy could not be cloned or updated."""

    kind: Literal["clone_failed", "fetch_failed", "pull_failed"]
    branch: str
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class BuildError:
    kind: Literal["toolchain_missing", "build_failed", "daemon_stop_failed"]
    branch: str
    message: str
    hint: str | None = None
    returncode: int | None = None


@dataclass(frozen=True, slots=True)
class PublishError:
    """A registry lookup, release creation or asset upload failed.

    ``upload_failed`` leaves the release created earlier in the same run on the
    registry with some assets missing.
    """

    kind: Literal["lookup_failed", "create_failed", "upload_failed"]
    tag: str
    message: str
    hint: str | None = None


StageError = WorkspaceError | BuildError | PublishError

"""Error presentation and exit code mapping for release stage failures."""

from __future__ import annotations

from typing import TYPE_CHECKING

from modrel.core.errors import ErrorCode
from modrel.output.console import Style
from modrel.release.errors import BuildError, PublishError, StageError, WorkspaceError

if TYPE_CHECKING:
    from modrel.output.console import ConsoleProtocol

__all__ = ["print_stage_error", "stage_error_exit_code"]


def print_stage_error(error: StageError, console: ConsoleProtocol) -> None:
    match error:
        case WorkspaceError(kind=kind, branch=branch, message=message):
            console.error(f"{branch}: {message} ({kind})")
        case BuildError(kind=kind, branch=branch, message=message):
            console.error(f"{branch}: {message} ({kind})")
        case PublishError(kind=kind, tag=tag, message=message):
            console.error(f"{tag}: {message} ({kind})")
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def stage_error_exit_code(error: StageError) -> int:
    match error:
        case WorkspaceError():
            return int(ErrorCode.IO_ERROR)
        case BuildError(kind="toolchain_missing"):
            return int(ErrorCode.CONFIG_ERROR)
        case BuildError():
            return int(ErrorCode.BUILD_ERROR)
        case PublishError():
            return int(ErrorCode.NETWORK_ERROR)

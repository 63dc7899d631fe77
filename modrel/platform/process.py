"""Blocking subprocess execution returning results instead of raising.

This is the only module allowed to call ``subprocess`` directly. ``run``
captures output (git plumbing); ``run_silent`` lets the child write straight to
the terminal (gradle builds, where the log is the progress report).

Neither helper retries. ``timeout=None`` waits for as long as the child runs,
which is what the build and daemon-stop stages rely on.
"""

from __future__ import annotations

import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from modrel.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run", "run_silent"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that could not be started or exited non-zero.

    ``returncode`` is -1 when the process never ran (missing executable,
    timeout).
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"


def run(
    cmd: Sequence[str],
    cwd: Path,
    env: Mapping[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run ``cmd`` in ``cwd`` and return its stdout.

    Args:
        cmd: Command and arguments.
        cwd: Working directory.
        env: Full child environment (inherits the parent's when None).
        timeout: Seconds to wait, None for no limit.
    """
    try:
        proc = subprocess.run(
            list(cmd),
            cwd=str(cwd),
            env=None if env is None else dict(env),
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout=e.stdout if isinstance(e.stdout, str) else "",
                stderr=f"Command timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(proc.stdout)


def run_silent(
    cmd: Sequence[str],
    cwd: Path,
    env: Mapping[str, str] | None = None,
) -> Result[None, ProcessError]:
    """Run ``cmd`` with output streaming to the terminal; no timeout."""
    try:
        proc = subprocess.run(
            list(cmd),
            cwd=str(cwd),
            env=None if env is None else dict(env),
            check=False,
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout="",
                stderr="",
            )
        )

    return Ok(None)

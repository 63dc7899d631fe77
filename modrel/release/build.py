"""Build invocation for one release.

The environment handed to gradle is rebuilt from the startup snapshot for every
release, so a JAVA_HOME or MOD_VERSION exported for one branch can never reach
the next one. ``os.environ`` itself is never touched.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path

from modrel.changelog.model import Release
from modrel.core.config import Credentials, PipelineConfig
from modrel.core.result import Err, Ok, Result
from modrel.output.console import ConsoleProtocol, Style
from modrel.platform.process import run_silent
from modrel.release.errors import BuildError

__all__ = ["release_env", "run_build", "stop_daemon"]


def release_env(
    *,
    release: Release,
    base_env: Mapping[str, str],
    credentials: Credentials,
    pipeline: PipelineConfig,
) -> Result[dict[str, str], BuildError]:
    """Subprocess environment for ``release``.

    Resolves the JDK through ``<PREFIX>_<toolchain>_HOME`` (JAVA_17_HOME for a
    "java 17" section) and exports it as JAVA_HOME.
    """
    toolchain_var = pipeline.toolchain_var(release.toolchain)
    java_home = base_env.get(toolchain_var, "").strip()
    if not java_home:
        return Err(
            BuildError(
                kind="toolchain_missing",
                branch=release.branch,
                message=f"{toolchain_var} is not set (needed for java {release.toolchain})",
                hint=f"Export {toolchain_var} pointing at a JDK {release.toolchain}",
            )
        )

    env = dict(base_env)
    env.update(credentials.publishing_env())
    env[pipeline.version_var] = release.version
    env[pipeline.changelog_var] = release.changelog
    env[pipeline.toolchain_home_var] = java_home
    return Ok(env)


def run_build(
    *,
    workdir: Path,
    branch: str,
    command: Sequence[str],
    env: Mapping[str, str],
    console: ConsoleProtocol,
    dry_run: bool,
) -> Result[None, BuildError]:
    """Run the build and publish tasks; blocks until gradle exits."""
    console.print(" ".join(command), Style.DIM)
    if dry_run:
        return Ok(None)

    result = run_silent(command, cwd=workdir, env=env)
    if isinstance(result, Err):
        e = result.error
        return Err(
            BuildError(
                kind="build_failed",
                branch=branch,
                message=f"build failed for {branch} (exit {e.returncode})",
                hint=e.stderr.strip() or None,
                returncode=e.returncode,
            )
        )
    return Ok(None)


def stop_daemon(
    *,
    workdir: Path,
    branch: str,
    command: Sequence[str],
    env: Mapping[str, str],
    console: ConsoleProtocol,
    dry_run: bool,
) -> Result[None, BuildError]:
    """Stop the gradle daemon so the next release starts on its own JDK."""
    console.print(" ".join(command), Style.DIM)
    if dry_run:
        return Ok(None)

    result = run_silent(command, cwd=workdir, env=env)
    if isinstance(result, Err):
        e = result.error
        return Err(
            BuildError(
                kind="daemon_stop_failed",
                branch=branch,
                message=f"failed to stop the build daemon for {branch}",
                hint=e.stderr.strip() or None,
                returncode=e.returncode,
            )
        )
    return Ok(None)

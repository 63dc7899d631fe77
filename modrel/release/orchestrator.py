"""Sequential release pipeline.

For every pending release, strictly one at a time and newest major first:

1. sync the branch working copy (clone, or fetch + fast-forward pull)
2. build the release's subprocess environment (version, changelog,
   publishing credentials, JAVA_HOME for its toolchain)
3. run the gradle build/publish tasks
4. stop the gradle daemon (also when the build failed)
5. create the tagged release on the registry
6. upload the build outputs, minus ``-sources`` bundles

Working copies, the gradle daemon and JAVA_HOME are shared per branch, so
releases are never interleaved. Nothing is rolled back: releases completed
earlier in the run stay published, and a release whose uploads fail stays on
the registry with the assets it got.

With the ``halt`` failure policy the first failing stage ends the run; with
``continue`` the failure is recorded and the next release is attempted.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from modrel.changelog.model import Release
from modrel.core.config import FailurePolicy, Settings
from modrel.core.result import Err, Ok, Result
from modrel.output.console import ConsoleProtocol, Style
from modrel.output.errors import print_stage_error
from modrel.registry.github import ReleaseRegistry, RemoteRelease
from modrel.release.artifacts import discover_artifacts
from modrel.release.build import release_env, run_build, stop_daemon
from modrel.release.errors import StageError
from modrel.release.publish import create_release, upload_artifacts
from modrel.release.workspace import sync_workspace

__all__ = ["PublishedRelease", "ReleaseFailure", "ReleaseOrchestrator", "RunReport"]


@dataclass(frozen=True, slots=True)
class PublishedRelease:
    release: Release
    remote: RemoteRelease
    assets: int


@dataclass(frozen=True, slots=True)
class ReleaseFailure:
    release: Release
    error: StageError


@dataclass(frozen=True, slots=True)
class RunReport:
    """Outcome of a run.

    Attributes:
        published: Releases that went through every stage.
        failures: Releases whose pipeline stopped at a failing stage.
        not_attempted: Releases left in the queue after a halt.
    """

    published: tuple[PublishedRelease, ...] = ()
    failures: tuple[ReleaseFailure, ...] = ()
    not_attempted: tuple[Release, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def first_failure(self) -> ReleaseFailure | None:
        return self.failures[0] if self.failures else None


class ReleaseOrchestrator:
    """Drives the pipeline for a queue of pending releases."""

    def __init__(
        self,
        *,
        settings: Settings,
        registry: ReleaseRegistry,
        console: ConsoleProtocol,
        on_failure: FailurePolicy | None = None,
    ) -> None:
        self._settings = settings
        self._registry = registry
        self._console = console
        self._on_failure: FailurePolicy = on_failure or settings.pipeline.on_failure

    @property
    def on_failure(self) -> FailurePolicy:
        return self._on_failure

    def run(self, pending: Sequence[Release], *, dry_run: bool = False) -> RunReport:
        published: list[PublishedRelease] = []
        failures: list[ReleaseFailure] = []

        for index, release in enumerate(pending):
            result = self.release_one(release, dry_run=dry_run)
            match result:
                case Ok(done):
                    published.append(done)
                case Err(error):
                    failures.append(ReleaseFailure(release=release, error=error))
                    print_stage_error(error, self._console)
                    if self._on_failure == "halt":
                        remaining = pending[index + 1 :]
                        if remaining:
                            self._console.print(
                                f"halting: {len(remaining)} pending release(s) not attempted",
                                Style.WARNING,
                            )
                        return RunReport(
                            published=tuple(published),
                            failures=tuple(failures),
                            not_attempted=tuple(remaining),
                        )

        return RunReport(published=tuple(published), failures=tuple(failures))

    def release_one(
        self, release: Release, *, dry_run: bool = False
    ) -> Result[PublishedRelease, StageError]:
        settings = self._settings
        pipeline = settings.pipeline
        console = self._console

        console.header(f"Releasing {release.version} from branch {release.branch}")

        workdir = sync_workspace(
            scratch_root=settings.scratch_root,
            branch=release.branch,
            clone_url=settings.clone_url(),
            console=console,
            dry_run=dry_run,
        )
        if isinstance(workdir, Err):
            return workdir

        env = release_env(
            release=release,
            base_env=settings.base_env,
            credentials=settings.credentials,
            pipeline=pipeline,
        )
        if isinstance(env, Err):
            return env

        built = run_build(
            workdir=workdir.value,
            branch=release.branch,
            command=pipeline.build_command,
            env=env.value,
            console=console,
            dry_run=dry_run,
        )

        # Runs after a failed build too: no daemon may outlive its release.
        stopped = stop_daemon(
            workdir=workdir.value,
            branch=release.branch,
            command=pipeline.daemon_stop_command,
            env=env.value,
            console=console,
            dry_run=dry_run,
        )
        if isinstance(built, Err):
            if isinstance(stopped, Err):
                print_stage_error(stopped.error, console)
            return built
        if isinstance(stopped, Err):
            return stopped

        remote = create_release(
            release=release,
            registry=self._registry,
            console=console,
            dry_run=dry_run,
        )
        if isinstance(remote, Err):
            return remote

        if dry_run:
            # Nothing was built, so whatever sits in the output dirs is stale.
            console.print(
                f"upload build outputs from {', '.join(pipeline.artifact_dirs)} "
                f"(skipping *{pipeline.sources_marker}*)",
                Style.DIM,
            )
            console.success(f"{release.title} ready (dry-run)")
            return Ok(PublishedRelease(release=release, remote=remote.value, assets=0))

        artifacts = discover_artifacts(
            workdir.value,
            pipeline.artifact_dirs,
            sources_marker=pipeline.sources_marker,
        )
        uploaded = upload_artifacts(
            remote=remote.value,
            artifacts=artifacts,
            workdir=workdir.value,
            registry=self._registry,
            console=console,
        )
        if isinstance(uploaded, Err):
            return uploaded

        console.success(f"{release.title} released with {uploaded.value} asset(s)")
        return Ok(PublishedRelease(release=release, remote=remote.value, assets=uploaded.value))

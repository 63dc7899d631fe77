"""Typed startup configuration.

Two sources feed a run:

- the process environment, which must provide the credentials and repository
  identity (all of them, checked once before any work starts);
- an optional ``modrel.toml`` whose ``[release]`` table overrides the pipeline
  defaults (changelog path, scratch root, gradle commands, artifact globs...).

The validated ``Settings`` value is passed explicitly to the filter and the
orchestrator; nothing below this module reads ``os.environ`` on its own.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_str_list, get_table

__all__ = [
    "CREDENTIAL_VARS",
    "ConfigError",
    "Credentials",
    "FailurePolicy",
    "PipelineConfig",
    "Settings",
    "load_credentials",
    "load_pipeline_config",
    "load_pipeline_config_or_default",
    "load_settings",
]

FailurePolicy = Literal["halt", "continue"]

# Environment variable -> Credentials field.
CREDENTIAL_VARS: tuple[tuple[str, str], ...] = (
    ("GITHUB_TOKEN", "github_token"),
    ("GITHUB_REPOSITORY", "repository"),
    ("CURSEFORGE_API", "curseforge_api"),
    ("MODRINTH_TOKEN", "modrinth_token"),
    ("MAVEN_USERNAME", "maven_username"),
    ("MAVEN_PASSWORD", "maven_password"),
)

DEFAULT_CONFIG_FILE = "modrel.toml"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Configuration could not be loaded; always fatal before any work."""

    message: str
    path: Path | None = None
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class Credentials:
    """Secrets and identity required by a publishing run.

    Secret fields are excluded from ``repr`` so they never end up in output.
    """

    repository: str
    github_token: str = field(repr=False)
    curseforge_api: str = field(repr=False)
    modrinth_token: str = field(repr=False)
    maven_username: str
    maven_password: str = field(repr=False)

    def publishing_env(self) -> dict[str, str]:
        """Variables the gradle publish tasks read."""
        return {
            "CURSEFORGE_API": self.curseforge_api,
            "MODRINTH_TOKEN": self.modrinth_token,
            "MAVEN_USERNAME": self.maven_username,
            "MAVEN_PASSWORD": self.maven_password,
        }


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    """Pipeline knobs; the defaults reproduce the gradle multi-loader layout."""

    changelog: str = "CHANGELOG.txt"
    scratch_root: str = "build/__release"
    clone_url: str = "https://github.com/{repository}.git"
    build_command: tuple[str, ...] = ("./gradlew", "clean", "build", "publish", "publishMods")
    daemon_stop_command: tuple[str, ...] = ("./gradlew", "--stop")
    toolchain_env_prefix: str = "JAVA"
    toolchain_home_var: str = "JAVA_HOME"
    version_var: str = "MOD_VERSION"
    changelog_var: str = "CHANGELOG"
    artifact_dirs: tuple[str, ...] = (
        "platform/*/build/libs",
        "fabric/build/libs",
        "forge/build/libs",
    )
    sources_marker: str = "-sources"
    on_failure: FailurePolicy = "halt"

    def toolchain_var(self, toolchain: str) -> str:
        """Name of the variable holding the JDK for ``toolchain`` (e.g. JAVA_17_HOME)."""
        return f"{self.toolchain_env_prefix}_{toolchain}_HOME"

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Result[PipelineConfig, ConfigError]:
        """Build from a parsed TOML document (only the ``[release]`` table is read)."""
        table: StrDict = get_table(data, "release") or {}
        defaults = cls()

        lists: dict[str, tuple[str, ...]] = {}
        for key in ("build_command", "daemon_stop_command", "artifact_dirs"):
            if key not in table:
                continue
            items = get_str_list(table, key)
            if not items:
                return Err(ConfigError(f"release.{key} must be a non-empty list of strings"))
            lists[key] = items

        on_failure = table.get("on_failure", defaults.on_failure)
        if on_failure not in ("halt", "continue"):
            return Err(
                ConfigError(
                    f"release.on_failure must be 'halt' or 'continue', got {on_failure!r}"
                )
            )

        return Ok(
            cls(
                changelog=get_str(table, "changelog") or defaults.changelog,
                scratch_root=get_str(table, "scratch_root") or defaults.scratch_root,
                clone_url=get_str(table, "clone_url") or defaults.clone_url,
                build_command=lists.get("build_command", defaults.build_command),
                daemon_stop_command=lists.get(
                    "daemon_stop_command", defaults.daemon_stop_command
                ),
                toolchain_env_prefix=get_str(table, "toolchain_env_prefix")
                or defaults.toolchain_env_prefix,
                toolchain_home_var=get_str(table, "toolchain_home_var")
                or defaults.toolchain_home_var,
                version_var=get_str(table, "version_var") or defaults.version_var,
                changelog_var=get_str(table, "changelog_var") or defaults.changelog_var,
                artifact_dirs=lists.get("artifact_dirs", defaults.artifact_dirs),
                sources_marker=get_str(table, "sources_marker") or defaults.sources_marker,
                on_failure="continue" if on_failure == "continue" else "halt",
            )
        )


@dataclass(frozen=True, slots=True)
class Settings:
    """Everything a publishing run needs, validated once at startup.

    Attributes:
        credentials: Secrets and repository identity.
        pipeline: Pipeline knobs.
        root: Directory relative paths in ``pipeline`` are resolved against.
        base_env: Snapshot of the startup environment; per-release subprocess
            environments are derived from a fresh copy of it.
    """

    credentials: Credentials
    pipeline: PipelineConfig
    root: Path
    base_env: Mapping[str, str] = field(default_factory=dict, repr=False)

    @property
    def scratch_root(self) -> Path:
        return self.root / self.pipeline.scratch_root

    @property
    def changelog_path(self) -> Path:
        return self.root / self.pipeline.changelog

    def clone_url(self) -> str:
        return self.pipeline.clone_url.format(repository=self.credentials.repository)


def load_credentials(environ: Mapping[str, str]) -> Result[Credentials, ConfigError]:
    """Read every required credential; report all missing names at once."""
    values: dict[str, str] = {}
    missing: list[str] = []
    for var, attr in CREDENTIAL_VARS:
        value = environ.get(var, "").strip()
        if not value:
            missing.append(var)
            continue
        values[attr] = value

    if missing:
        return Err(
            ConfigError(
                f"missing required environment variables: {', '.join(missing)}",
                hint="Export them (or set them as CI secrets) before running",
            )
        )

    return Ok(Credentials(**values))


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("config root must be a TOML table", path=path))
    return Ok(data)


def load_pipeline_config(path: Path) -> Result[PipelineConfig, ConfigError]:
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    config = PipelineConfig.from_dict(result.value)
    if isinstance(config, Err):
        return Err(ConfigError(config.error.message, path=path))
    return config


def load_pipeline_config_or_default(path: Path) -> Result[PipelineConfig, ConfigError]:
    """Like load_pipeline_config, but a missing file means defaults."""
    if not path.exists():
        return Ok(PipelineConfig())
    return load_pipeline_config(path)


def load_settings(
    *,
    root: Path,
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Result[Settings, ConfigError]:
    """Validate credentials and pipeline config for a run rooted at ``root``.

    An explicit ``config_path`` must exist; otherwise ``<root>/modrel.toml`` is
    optional.
    """
    env = dict(os.environ if environ is None else environ)

    credentials = load_credentials(env)
    if isinstance(credentials, Err):
        return credentials

    if config_path is not None:
        pipeline = load_pipeline_config(config_path)
    else:
        pipeline = load_pipeline_config_or_default(root / DEFAULT_CONFIG_FILE)
    if isinstance(pipeline, Err):
        return pipeline

    return Ok(
        Settings(
            credentials=credentials.value,
            pipeline=pipeline.value,
            root=root,
            base_env=env,
        )
    )

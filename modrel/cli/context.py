from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

import typer

from modrel.core.config import (
    DEFAULT_CONFIG_FILE,
    ConfigError,
    PipelineConfig,
    Settings,
    load_pipeline_config,
    load_pipeline_config_or_default,
    load_settings,
)
from modrel.core.errors import ErrorCode
from modrel.core.result import Err
from modrel.output.console import ConsoleProtocol, RichConsole, Style
from modrel.registry.github import GitHubReleases
from modrel.registry.http import RealHttpClient

# Set by the --config global option.
CONFIG_ENV_VAR = "MODREL_CONFIG"


@dataclass(frozen=True, slots=True)
class CLIContext:
    settings: Settings
    console: ConsoleProtocol


def config_override() -> Path | None:
    value = os.environ.get(CONFIG_ENV_VAR)
    if not value:
        return None
    return Path(value)


def project_root() -> Path:
    """Directory the changelog and scratch paths are relative to.

    The directory holding an explicit --config file, else the current directory.
    """
    override = config_override()
    if override is not None:
        return override.parent
    return Path.cwd()


def _fail_config(error: ConfigError, console: ConsoleProtocol) -> NoReturn:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)
    raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))


def build_context() -> CLIContext:
    """Validate credentials and config; exits before any work when invalid."""
    console = RichConsole()
    result = load_settings(root=project_root(), config_path=config_override())
    if isinstance(result, Err):
        _fail_config(result.error, console)

    return CLIContext(settings=result.value, console=console)


def load_pipeline(console: ConsoleProtocol) -> PipelineConfig:
    """Pipeline config for commands that need no credentials."""
    override = config_override()
    if override is not None:
        result = load_pipeline_config(override)
    else:
        result = load_pipeline_config_or_default(project_root() / DEFAULT_CONFIG_FILE)
    if isinstance(result, Err):
        _fail_config(result.error, console)
    return result.value


def build_registry(settings: Settings) -> GitHubReleases:
    return GitHubReleases(
        http=RealHttpClient(token=settings.credentials.github_token),
        repository=settings.credentials.repository,
    )

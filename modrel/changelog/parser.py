"""Changelog to Release records.

The changelog is grouped into one section per platform branch, newest version
first inside each section:

    2.x - 1.20 - release/1.20 - java 17
    2.3.1 - - Fix crash
             - Improve performance
    2.3.0 - - Initial release

    1.x - legacy - legacy - java 8
    1.0.0 - old

Only the newest version of a section becomes a Release. Sections with major
``1`` are the legacy sentinel and never produce one. Lines that match none of
the recognized forms are skipped; parsing never fails.

Parsing is a fold: ``_step`` maps (state, line) to a new immutable state, and
the final state is always flushed so the last section is emitted whether or
not another header follows it.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, replace
from pathlib import Path

from modrel.changelog.model import Release
from modrel.changelog.version import Version
from modrel.core.result import Err, Ok, Result

__all__ = [
    "LEGACY_MAJOR",
    "ChangelogError",
    "parse_changelog",
    "read_changelog",
]

LEGACY_MAJOR = 1

_HEADER_RE = re.compile(r"^(\d+)[.]x\s+-\s+(.+)\s-\s(.+)\s-\sjava\s(.+)$")
_VERSION_RE = re.compile(r"^(\d+[.]\d+[.]\d+)\s+(-\s.+)$")
_CONTINUATION_RE = re.compile(r"^\s{9}(\s*-\s.+)$")


@dataclass(frozen=True, slots=True)
class ChangelogError:
    message: str
    path: Path
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class _State:
    """Parser state for the section being read.

    ``major`` is None before the first header. ``found`` is set once a second
    version line is seen; from then on the section is frozen.
    """

    major: int | None = None
    platform: str = ""
    branch: str = ""
    toolchain: str = ""
    skip: bool = False
    version: Version | None = None
    lines: tuple[str, ...] = ()
    found: bool = False


def _finalize(state: _State) -> Release | None:
    if state.major is None or state.skip or state.version is None:
        return None
    return Release(
        major=state.major,
        branch=state.branch,
        version=str(state.version),
        toolchain=state.toolchain,
        platform=state.platform,
        changelog="".join(f"{line}\n" for line in state.lines),
    )


def _open_section(match: re.Match[str]) -> _State:
    major = int(match.group(1))
    if major == LEGACY_MAJOR:
        return _State(major=major, skip=True)
    return _State(
        major=major,
        platform=match.group(2).strip(),
        branch=match.group(3).strip(),
        toolchain=match.group(4).strip(),
    )


def _step(state: _State, line: str) -> tuple[_State, Release | None]:
    """Consume one line; return the next state and any Release it closed."""
    line = line.rstrip("\r\n")
    if not line.strip():
        return state, None

    header = _HEADER_RE.match(line)
    if header is not None:
        return _open_section(header), _finalize(state)

    if state.major is None or state.skip or state.found:
        return state, None

    version_match = _VERSION_RE.match(line)
    if version_match is not None:
        parsed = Version.parse(version_match.group(1))
        if parsed is None:
            return state, None
        if state.version is not None:
            # Newest-first: whatever follows the seeded version is history.
            return replace(state, found=True), None
        return replace(state, version=parsed, lines=(*state.lines, version_match.group(2))), None

    continuation = _CONTINUATION_RE.match(line)
    if continuation is not None and state.version is not None:
        return replace(state, lines=(*state.lines, continuation.group(1))), None

    return state, None


def parse_changelog(lines: Iterable[str]) -> dict[int, Release]:
    """Parse changelog lines into one Release per non-legacy major.

    A major that appears in more than one section keeps the last one.
    """
    releases: dict[int, Release] = {}
    state = _State()
    for line in lines:
        state, closed = _step(state, line)
        if closed is not None:
            releases[closed.major] = closed

    last = _finalize(state)
    if last is not None:
        releases[last.major] = last
    return releases


def read_changelog(path: Path) -> Result[dict[int, Release], ChangelogError]:
    """Read and parse a UTF-8 changelog file."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(
            ChangelogError(
                f"changelog not found: {path}",
                path=path,
                hint="Pass --changelog or set release.changelog in modrel.toml",
            )
        )
    except (OSError, UnicodeDecodeError) as e:
        return Err(ChangelogError(f"failed to read changelog: {e}", path=path))

    return Ok(parse_changelog(text.splitlines()))

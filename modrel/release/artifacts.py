from __future__ import annotations

import mimetypes
from collections.abc import Sequence
from pathlib import Path

__all__ = ["DEFAULT_CONTENT_TYPE", "content_type_for", "discover_artifacts", "is_sources"]

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Not in every platform's mime database.
_KNOWN_TYPES = {
    ".jar": "application/java-archive",
}


def is_sources(path: Path, marker: str = "-sources") -> bool:
    """True for source bundles (``mod-2.3.1-sources.jar``)."""
    return path.stem.endswith(marker)


def discover_artifacts(
    workdir: Path,
    artifact_dirs: Sequence[str],
    *,
    sources_marker: str = "-sources",
) -> list[Path]:
    """Files to attach to a release, in a stable order.

    ``artifact_dirs`` are glob patterns relative to ``workdir`` naming build
    output directories (``platform/*/build/libs``). Missing directories are
    skipped; subdirectories are not descended into.
    """
    seen: set[Path] = set()
    out: list[Path] = []
    for pattern in artifact_dirs:
        for directory in sorted(workdir.glob(pattern)):
            if not directory.is_dir():
                continue
            for path in sorted(directory.iterdir()):
                if not path.is_file() or path in seen:
                    continue
                if is_sources(path, sources_marker):
                    continue
                seen.add(path)
                out.append(path)
    return out


def content_type_for(path: Path) -> str:
    known = _KNOWN_TYPES.get(path.suffix.lower())
    if known is not None:
        return known
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed or DEFAULT_CONTENT_TYPE

from __future__ import annotations

from dataclasses import dataclass

from modrel.changelog.version import Version


@dataclass(frozen=True, slots=True)
class Release:
    """One publishable version, taken from a single platform section.

    Attributes:
        major: Major number of the section header; identifies the release.
        branch: Git branch the section is built from.
        version: Version string, also used as the remote tag.
        toolchain: Java version the branch builds with (e.g. "17").
        platform: Platform label used in the release title (e.g. "1.20").
        changelog: Accumulated changelog lines, each ending with a newline.
    """

    major: int
    branch: str
    version: str
    toolchain: str
    platform: str
    changelog: str

    @property
    def title(self) -> str:
        return f"[{self.platform}] {self.version}"

    @property
    def parsed_version(self) -> Version | None:
        return Version.parse(self.version)

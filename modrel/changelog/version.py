from __future__ import annotations

import functools
import re
from dataclasses import dataclass

__all__ = ["Version"]

_VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)$")

# Minor and patch each occupy three decimal digits of the packed value.
_MAJOR_WEIGHT = 1_000_000
_MINOR_WEIGHT = 1_000


@functools.total_ordering
@dataclass(frozen=True, slots=True, eq=False)
class Version:
    """Three-component version ordered by its packed integer.

    ``Version(2, 3, 1) < Version(2, 3, 2) < Version(2, 4, 0) < Version(3, 0, 0)``.
    """

    major: int
    minor: int
    patch: int

    def __post_init__(self) -> None:
        if self.major < 0 or self.minor < 0 or self.patch < 0:
            raise ValueError(f"version components must be non-negative: {self}")

    @classmethod
    def parse(cls, text: str) -> Version | None:
        """Parse ``"major.minor.patch"``; None when it does not match."""
        m = _VERSION_RE.match(text.strip())
        if m is None:
            return None
        return cls(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    @property
    def packed(self) -> int:
        return self.major * _MAJOR_WEIGHT + self.minor * _MINOR_WEIGHT + self.patch

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.packed == other.packed

    def __lt__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.packed < other.packed

    def __hash__(self) -> int:
        return hash(self.packed)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

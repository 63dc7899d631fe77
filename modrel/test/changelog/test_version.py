"""Tests for modrel.changelog.version."""

from __future__ import annotations

import pytest

from modrel.changelog.version import Version


class TestOrdering:
    def test_patch_bump_is_greater(self) -> None:
        assert Version(2, 3, 1) < Version(2, 3, 2)

    def test_minor_bump_beats_max_patch(self) -> None:
        assert Version(2, 3, 999) < Version(2, 4, 0)

    def test_major_bump_beats_max_minor_and_patch(self) -> None:
        assert Version(2, 999, 999) < Version(3, 0, 0)

    def test_equal_versions(self) -> None:
        assert Version(1, 2, 3) == Version(1, 2, 3)
        assert Version(1, 2, 3) <= Version(1, 2, 3)
        assert not Version(1, 2, 3) < Version(1, 2, 3)

    def test_max_and_sorted(self) -> None:
        versions = [Version(2, 0, 1), Version(10, 0, 0), Version(2, 1, 0)]
        assert max(versions) == Version(10, 0, 0)
        assert sorted(versions) == [Version(2, 0, 1), Version(2, 1, 0), Version(10, 0, 0)]

    def test_packed(self) -> None:
        assert Version(2, 3, 1).packed == 2_003_001

    def test_hash_matches_equality(self) -> None:
        assert len({Version(1, 0, 0), Version(1, 0, 0), Version(1, 0, 1)}) == 2


class TestParse:
    def test_parse_valid(self) -> None:
        assert Version.parse("2.3.1") == Version(2, 3, 1)

    @pytest.mark.parametrize("text", ["2.3", "2.3.x", "v2.3.1", "", "2.3.1.4"])
    def test_parse_invalid(self, text: str) -> None:
        assert Version.parse(text) is None

    def test_str_is_canonical(self) -> None:
        assert str(Version.parse("02.3.10")) == "2.3.10"

    def test_negative_component_rejected(self) -> None:
        with pytest.raises(ValueError):
            Version(1, -1, 0)

    def test_frozen(self) -> None:
        v = Version(1, 0, 0)
        with pytest.raises(AttributeError):
            v.major = 2  # type: ignore[misc]

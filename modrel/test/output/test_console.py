"""Tests for modrel.output.console module."""

from __future__ import annotations

import pytest

from modrel.output.console import MockConsole, RichConsole, Style


class TestMockConsole:
    def test_records_styles(self) -> None:
        console = MockConsole()
        console.print("plain")
        console.success("done")
        console.error("broken")
        console.warning("careful")
        console.header("Section")

        assert console.messages == [
            "plain",
            "OK done",
            "error: broken",
            "warning: careful",
            "Section",
        ]
        assert console.has_error()
        assert console.count(Style.WARNING) == 1

    def test_find(self) -> None:
        console = MockConsole()
        console.print("upload fabric/build/libs/mod.jar")
        assert len(console.find("mod.jar")) == 1
        assert console.find("forge") == []


def test_rich_console_prefixes(capsys: pytest.CaptureFixture[str]) -> None:
    console = RichConsole()
    console.error("build failed [exit 1]")
    console.success("released")
    out = capsys.readouterr().out
    assert "error: build failed [exit 1]" in out
    assert "released" in out

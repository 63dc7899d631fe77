"""Tests for modrel.core.result module."""

import dataclasses

import pytest

from modrel.core.result import Err, Ok, Result


def test_ok_carries_value() -> None:
    assert Ok(42).value == 42
    assert repr(Ok("x")) == "Ok('x')"


def test_err_carries_error() -> None:
    assert Err("boom").error == "boom"
    assert repr(Err("boom")) == "Err('boom')"


def test_values_compare_by_content() -> None:
    assert Ok(1) == Ok(1)
    assert Ok(1) != Err(1)


def test_results_are_immutable() -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        Ok(1).value = 2  # type: ignore[misc]


def test_pattern_matching() -> None:
    def describe(result: Result[int, str]) -> str:
        match result:
            case Ok(value):
                return f"ok {value}"
            case Err(error):
                return f"err {error}"

    assert describe(Ok(3)) == "ok 3"
    assert describe(Err("x")) == "err x"

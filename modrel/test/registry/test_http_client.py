"""Tests for registry/http.py - HTTP client abstraction."""

from __future__ import annotations

import io
import json
import urllib.error
import urllib.request
from email.message import Message
from typing import Any

import pytest

from modrel.core.result import Err, Ok
from modrel.registry.http import HttpClient, HttpError, MockHttpClient, RealHttpClient


# =============================================================================
# HttpError tests
# =============================================================================


class TestHttpError:
    def test_str_with_status(self) -> None:
        error = HttpError(url="https://api.github.com/x", status=422, message="Validation Failed")
        assert str(error) == "HTTP 422: Validation Failed (https://api.github.com/x)"

    def test_str_without_status(self) -> None:
        error = HttpError(url="https://api.github.com", status=0, message="Connection refused")
        assert str(error) == "Connection refused (https://api.github.com)"


# =============================================================================
# MockHttpClient tests
# =============================================================================


class TestMockHttpClient:
    def test_is_http_client(self) -> None:
        assert isinstance(MockHttpClient(), HttpClient)

    def test_unregistered_url_is_404(self) -> None:
        result = MockHttpClient().get_json("https://api.github.com/nope")
        assert isinstance(result, Err)
        assert result.error.status == 404

    def test_records_calls(self) -> None:
        client = MockHttpClient()
        client.set_response("POST", "https://up", {"id": 9})
        assert client.post_bytes("https://up", b"jar", "application/java-archive") == Ok(
            {"id": 9}
        )
        call = client.calls[0]
        assert (call.method, call.data, call.content_type) == (
            "POST",
            b"jar",
            "application/java-archive",
        )


# =============================================================================
# RealHttpClient tests (urlopen patched)
# =============================================================================


class _FakeResponse:
    def __init__(self, body: bytes) -> None:
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> _FakeResponse:
        return self

    def __exit__(self, *args: object) -> None:
        return None


def _patch_urlopen(
    monkeypatch: pytest.MonkeyPatch, answer: bytes | Exception
) -> list[urllib.request.Request]:
    seen: list[urllib.request.Request] = []

    def fake_urlopen(req: urllib.request.Request, **_: Any) -> _FakeResponse:
        seen.append(req)
        if isinstance(answer, Exception):
            raise answer
        return _FakeResponse(answer)

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
    return seen


class TestRealHttpClient:
    def test_sends_github_headers(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen = _patch_urlopen(monkeypatch, b'{"id": 1}')
        client = RealHttpClient(token="ghp_x")

        assert client.get_json("https://api.github.com/repos/a/b") == Ok({"id": 1})

        req = seen[0]
        assert req.get_method() == "GET"
        assert req.get_header("Authorization") == "Bearer ghp_x"
        assert req.get_header("Accept") == "application/vnd.github+json"

    def test_no_token_no_authorization(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen = _patch_urlopen(monkeypatch, b"{}")
        RealHttpClient().get_json("https://api.github.com")
        assert seen[0].get_header("Authorization") is None

    def test_post_json_body(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen = _patch_urlopen(monkeypatch, b'{"id": 2}')
        RealHttpClient().post_json("https://api.github.com/r", {"tag_name": "2.3.1"})

        req = seen[0]
        assert req.get_method() == "POST"
        assert req.get_header("Content-type") == "application/json"
        assert isinstance(req.data, bytes)
        assert json.loads(req.data) == {"tag_name": "2.3.1"}

    def test_post_bytes_content_type(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen = _patch_urlopen(monkeypatch, b'{"id": 3}')
        RealHttpClient().post_bytes("https://uploads", b"PK\x03\x04", "application/java-archive")

        req = seen[0]
        assert req.data == b"PK\x03\x04"
        assert req.get_header("Content-type") == "application/java-archive"
        assert req.get_header("Content-length") == "4"

    def test_http_error_uses_json_message(self, monkeypatch: pytest.MonkeyPatch) -> None:
        url = "https://api.github.com/r"
        body = io.BytesIO(b'{"message": "Validation Failed"}')
        _patch_urlopen(
            monkeypatch, urllib.error.HTTPError(url, 422, "Unprocessable", Message(), body)
        )

        result = RealHttpClient().post_json(url, {})

        assert isinstance(result, Err)
        assert result.error.status == 422
        assert result.error.message == "Validation Failed"

    def test_network_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _patch_urlopen(monkeypatch, urllib.error.URLError("connection refused"))

        result = RealHttpClient().get_json("https://api.github.com")

        assert isinstance(result, Err)
        assert result.error.status == 0
        assert "connection refused" in result.error.message

    def test_invalid_json(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _patch_urlopen(monkeypatch, b"<html>")
        result = RealHttpClient().get_json("https://api.github.com")
        assert isinstance(result, Err)
        assert "JSON parse error" in result.error.message

"""HTTP client abstraction for the release registry.

This module provides:
- HttpClient: Protocol for the three request shapes the registry needs
- RealHttpClient: urllib implementation with token authentication
- MockHttpClient: canned responses and a call log for tests
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol, cast, runtime_checkable

from modrel.core.result import Err, Ok, Result
from modrel.core.structured import as_str_dict

__all__ = [
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
]


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP failure.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    def get_json(self, url: str) -> Result[dict[str, Any], HttpError]:
        """GET ``url`` and decode a JSON object."""
        ...

    def post_json(
        self, url: str, payload: Mapping[str, object]
    ) -> Result[dict[str, Any], HttpError]:
        """POST ``payload`` as JSON and decode the JSON object response."""
        ...

    def post_bytes(
        self, url: str, data: bytes, content_type: str
    ) -> Result[dict[str, Any], HttpError]:
        """POST raw ``data`` with the given Content-Type."""
        ...


class RealHttpClient:
    """urllib-based client.

    Requests block until the server answers; ``timeout=None`` (the default)
    waits indefinitely. Nothing is retried.
    """

    def __init__(
        self,
        *,
        token: str | None = None,
        timeout: float | None = None,
        user_agent: str = "modrel/0.1.0",
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._token = token
        self._ssl_context = ssl.create_default_context()

    def _headers(self, extra: Mapping[str, str] | None = None) -> dict[str, str]:
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        if extra:
            headers.update(extra)
        return headers

    def _request(
        self,
        url: str,
        *,
        method: str,
        data: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Result[bytes, HttpError]:
        try:
            req = urllib.request.Request(
                url,
                data=data,
                method=method,
                headers=self._headers(headers),
            )
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                return Ok(response.read())
        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=_http_error_message(e)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except ValueError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

    def _decode(self, url: str, raw: bytes) -> Result[dict[str, Any], HttpError]:
        try:
            data_obj: object = json.loads(raw.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(HttpError(url=url, status=0, message="Expected JSON object"))
        return Ok(cast(dict[str, Any], data))

    def get_json(self, url: str) -> Result[dict[str, Any], HttpError]:
        result = self._request(url, method="GET")
        if isinstance(result, Err):
            return result
        return self._decode(url, result.value)

    def post_json(
        self, url: str, payload: Mapping[str, object]
    ) -> Result[dict[str, Any], HttpError]:
        body = json.dumps(dict(payload)).encode("utf-8")
        result = self._request(
            url,
            method="POST",
            data=body,
            headers={"Content-Type": "application/json"},
        )
        if isinstance(result, Err):
            return result
        return self._decode(url, result.value)

    def post_bytes(
        self, url: str, data: bytes, content_type: str
    ) -> Result[dict[str, Any], HttpError]:
        result = self._request(
            url,
            method="POST",
            data=data,
            headers={"Content-Type": content_type, "Content-Length": str(len(data))},
        )
        if isinstance(result, Err):
            return result
        return self._decode(url, result.value)


def _http_error_message(e: urllib.error.HTTPError) -> str:
    # GitHub puts the useful part in the JSON body ("Validation Failed", ...).
    try:
        body = e.read().decode("utf-8", errors="replace")
    except OSError:
        body = ""
    data: object = None
    if body:
        try:
            data = json.loads(body)
        except json.JSONDecodeError:
            data = None
    table = as_str_dict(data)
    if table is not None and isinstance(table.get("message"), str):
        return cast(str, table["message"])
    return str(e.reason)


@dataclass(frozen=True, slots=True)
class MockCall:
    method: str
    url: str
    payload: Mapping[str, object] | None = None
    data: bytes | None = None
    content_type: str | None = None


class MockHttpClient:
    """Mock HTTP client for testing.

    Unregistered URLs answer 404, which is what the registry returns for an
    unknown release tag.

    Usage:
        client = MockHttpClient()
        client.set_response("GET", url, {"id": 1})
        client.set_response("POST", url, HttpError(url=url, status=422, message="exists"))
    """

    def __init__(self) -> None:
        self._responses: dict[tuple[str, str], dict[str, Any] | HttpError] = {}
        self.calls: list[MockCall] = []

    def set_response(self, method: str, url: str, response: dict[str, Any] | HttpError) -> None:
        self._responses[(method, url)] = response

    def _answer(self, method: str, url: str) -> Result[dict[str, Any], HttpError]:
        response = self._responses.get((method, url))
        if response is None:
            return Err(HttpError(url=url, status=404, message="Not Found (mock)"))
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def get_json(self, url: str) -> Result[dict[str, Any], HttpError]:
        self.calls.append(MockCall("GET", url))
        return self._answer("GET", url)

    def post_json(
        self, url: str, payload: Mapping[str, object]
    ) -> Result[dict[str, Any], HttpError]:
        self.calls.append(MockCall("POST", url, payload=dict(payload)))
        return self._answer("POST", url)

    def post_bytes(
        self, url: str, data: bytes, content_type: str
    ) -> Result[dict[str, Any], HttpError]:
        self.calls.append(MockCall("POST", url, data=data, content_type=content_type))
        return self._answer("POST", url)

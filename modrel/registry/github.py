"""GitHub Releases as the remote release registry.

Only three operations are used: look a release up by tag, create one, and
attach an asset to it. Lookups are never cached; every call goes to the API.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol
from urllib.parse import quote

from modrel.core.result import Err, Ok, Result
from modrel.core.structured import get_int, get_str
from modrel.registry.http import HttpClient, HttpError

__all__ = [
    "GITHUB_API_URL",
    "GitHubReleases",
    "RegistryError",
    "ReleaseRegistry",
    "RemoteRelease",
]

GITHUB_API_URL = "https://api.github.com"

# upload_url comes back as an RFC 6570 template: ".../assets{?name,label}".
_URI_TEMPLATE_RE = re.compile(r"\{[^}]*\}$")


@dataclass(frozen=True, slots=True)
class RegistryError:
    """A registry call failed.

    Attributes:
        operation: "lookup", "create" or "upload"
        message: What failed, including the HTTP status when there is one
        status: HTTP status code (0 for network errors)
    """

    operation: str
    message: str
    status: int = 0


@dataclass(frozen=True, slots=True)
class RemoteRelease:
    id: int
    tag: str
    upload_url: str
    html_url: str | None = None


class ReleaseRegistry(Protocol):
    def release_exists(self, tag: str) -> Result[bool, RegistryError]: ...

    def create_release(
        self,
        *,
        tag: str,
        title: str,
        target: str,
        body: str,
    ) -> Result[RemoteRelease, RegistryError]: ...

    def upload_asset(
        self,
        release: RemoteRelease,
        path: Path,
        content_type: str,
    ) -> Result[None, RegistryError]: ...


class GitHubReleases:
    """Releases of one GitHub repository (``owner/name``)."""

    def __init__(self, *, http: HttpClient, repository: str, api_url: str = GITHUB_API_URL) -> None:
        self._http = http
        self.repository = repository
        self._api_url = api_url.rstrip("/")

    @property
    def _releases_url(self) -> str:
        return f"{self._api_url}/repos/{self.repository}/releases"

    def release_exists(self, tag: str) -> Result[bool, RegistryError]:
        url = f"{self._releases_url}/tags/{quote(tag, safe='')}"
        result = self._http.get_json(url)
        match result:
            case Ok(_):
                return Ok(True)
            case Err(HttpError(status=404)):
                return Ok(False)
            case Err(e):
                return Err(
                    RegistryError("lookup", f"release lookup failed for {tag}: {e}", e.status)
                )

    def create_release(
        self,
        *,
        tag: str,
        title: str,
        target: str,
        body: str,
    ) -> Result[RemoteRelease, RegistryError]:
        payload: dict[str, object] = {
            "tag_name": tag,
            "target_commitish": target,
            "name": title,
            "body": body,
        }
        result = self._http.post_json(self._releases_url, payload)
        if isinstance(result, Err):
            e = result.error
            return Err(RegistryError("create", f"failed to create release {tag}: {e}", e.status))

        data = result.value
        release_id = get_int(data, "id")
        upload_url = get_str(data, "upload_url")
        if release_id is None or upload_url is None:
            return Err(RegistryError("create", f"unexpected create payload for release {tag}"))

        return Ok(
            RemoteRelease(
                id=release_id,
                tag=tag,
                upload_url=_URI_TEMPLATE_RE.sub("", upload_url),
                html_url=get_str(data, "html_url"),
            )
        )

    def upload_asset(
        self,
        release: RemoteRelease,
        path: Path,
        content_type: str,
    ) -> Result[None, RegistryError]:
        try:
            data = path.read_bytes()
        except OSError as e:
            return Err(RegistryError("upload", f"failed to read {path.name}: {e}"))

        url = f"{release.upload_url}?name={quote(path.name, safe='')}"
        result = self._http.post_bytes(url, data, content_type)
        if isinstance(result, Err):
            e = result.error
            message = f"failed to upload {path.name} to {release.tag}: {e}"
            return Err(RegistryError("upload", message, e.status))
        return Ok(None)

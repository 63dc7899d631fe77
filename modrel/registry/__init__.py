"""Remote release registry (GitHub Releases)."""

from .github import GitHubReleases, RegistryError, ReleaseRegistry, RemoteRelease
from .http import HttpClient, HttpError, MockHttpClient, RealHttpClient

__all__ = [
    "GitHubReleases",
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    "RegistryError",
    "ReleaseRegistry",
    "RemoteRelease",
]

"""File fetchers for NanoSite.

This module contains the TextFetcher implementations used to read index files
and markdown sources, either from a deployed site over HTTP or from a local
checkout of the site.

Key classes:
- FetchError: Raised when a file cannot be fetched.
- HttpTextFetcher: Fetches files relative to a base URL with httpx.
- FileTextFetcher: Reads files relative to a local directory.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import httpx


class FetchError(Exception):
    """Error fetching a site file.

    Attributes:
        path: Site-relative path that failed.
        message: Human-readable reason.
    """

    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


class HttpTextFetcher:
    """Fetches site files over HTTP.

    The fetcher owns its httpx client unless one is passed in; owned clients
    are closed by aclose() or by leaving the async context.

    Attributes:
        base_url: URL the site-relative paths are resolved against.
    """

    def __init__(self, base_url: str, client: httpx.AsyncClient | None = None):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(follow_redirects=True)
        self._owns_client = client is None

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def fetch_text(self, path: str) -> str:
        try:
            response = await self._client.get(self.url_for(path))
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FetchError(path, f"{type(exc).__name__}: {exc}") from exc
        if not response.is_success:
            raise FetchError(path, f"HTTP {response.status_code}")
        return response.text

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpTextFetcher:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


class FileTextFetcher:
    """Reads site files from a local directory.

    Reads run in a worker thread so a slow disk does not block the event loop.

    Attributes:
        root: Directory the site-relative paths are resolved against.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    async def fetch_text(self, path: str) -> str:
        target = self.root / path.lstrip("/")
        try:
            return await asyncio.to_thread(target.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError, ValueError) as exc:
            raise FetchError(path, f"{type(exc).__name__}: {exc}") from exc

    async def aclose(self) -> None:
        return None

    async def __aenter__(self) -> FileTextFetcher:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def fetcher_for(location: str) -> HttpTextFetcher | FileTextFetcher:
    """Create the fetcher for a site location.

    Args:
        location: ``http(s)://`` URL of a deployed site, or a local directory.

    Returns:
        HttpTextFetcher for URLs, FileTextFetcher otherwise.
    """
    if location.startswith(("http://", "https://")):
        return HttpTextFetcher(location)
    return FileTextFetcher(Path(location))

import asyncio

import pytest

from nanosite.fetchers import FetchError


class MemoryFetcher:
    """In-memory TextFetcher that records calls and concurrent fetches."""

    def __init__(self, files=None, steps=0):
        self.files = dict(files or {})
        self.steps = steps
        self.calls = []
        self.active = 0
        self.peak = 0

    async def fetch_text(self, path):
        self.calls.append(path)
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            for _ in range(self.steps):
                await asyncio.sleep(0)
            if path not in self.files:
                raise FetchError(path, "HTTP 404")
            return self.files[path]
        finally:
            self.active -= 1

    async def aclose(self):
        return None


@pytest.fixture
def make_fetcher():
    return MemoryFetcher

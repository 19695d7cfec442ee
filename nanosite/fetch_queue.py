"""Front matter fetch queue.

FrontMatterQueue turns markdown paths into FrontMatterRecords. It is created
once per session and shared by every index load, and it guarantees:

- at most ``concurrency`` fetches in flight, admitted in FIFO order;
- one fetch per path, with concurrent requests sharing the same future;
- a permanent, write-once cache of resolved records;
- no failures: unreachable, empty or unparsable files resolve to a
  ``location``-only record, so a requested future never holds an exception.

All state is touched from the event loop thread only.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque

from .config import DEFAULT_FETCH_CONCURRENCY
from .fetchers import FetchError
from .frontmatter import FrontMatterRecord, record_from_markdown
from .protocols import TextFetcher
from .utils import join_path

logger = logging.getLogger(__name__)


class FrontMatterQueue:
    """Bounded-concurrency, caching fetcher of markdown front matter.

    Attributes:
        fetcher: Fetcher used for the markdown files.
        concurrency: Maximum simultaneous fetches; ``None`` or ``<= 0`` is unbounded.
        content_root: Prefix joined to every path before fetching.
        fetch_count: Number of fetches started so far.
    """

    def __init__(
        self,
        fetcher: TextFetcher,
        concurrency: int | None = DEFAULT_FETCH_CONCURRENCY,
        content_root: str = "",
    ):
        self.fetcher = fetcher
        self.concurrency = concurrency
        self.content_root = content_root
        self.fetch_count = 0
        self._cache: dict[str, FrontMatterRecord] = {}
        self._in_flight: dict[str, asyncio.Future[FrontMatterRecord]] = {}
        self._waiting: deque[str] = deque()
        self._active = 0
        self._tasks: set[asyncio.Task] = set()

    @property
    def in_flight(self) -> int:
        """Number of fetches currently running."""
        return self._active

    @property
    def pending(self) -> int:
        """Number of requests waiting for a free slot."""
        return len(self._waiting)

    def cached(self, path: str) -> FrontMatterRecord | None:
        return self._cache.get(path)

    def is_cached(self, path: str) -> bool:
        return path in self._cache

    def request(self, path: str) -> asyncio.Future[FrontMatterRecord]:
        """Request the front matter record for a markdown path.

        Must be called from a running event loop.

        Args:
            path: Content path of the markdown file.

        Returns:
            Future resolving to the record. Cached paths get an already
            resolved future; paths in flight get the shared future.
        """
        loop = asyncio.get_running_loop()
        record = self._cache.get(path)
        if record is not None:
            done = loop.create_future()
            done.set_result(record)
            return done
        future = self._in_flight.get(path)
        if future is None:
            future = loop.create_future()
            self._in_flight[path] = future
            self._waiting.append(path)
            self._admit()
        return future

    def _has_capacity(self) -> bool:
        if self.concurrency is None or self.concurrency <= 0:
            return True
        return self._active < self.concurrency

    def _admit(self) -> None:
        loop = asyncio.get_running_loop()
        while self._waiting and self._has_capacity():
            path = self._waiting.popleft()
            self._active += 1
            task = loop.create_task(self._run(path))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _run(self, path: str) -> None:
        future = self._in_flight[path]
        try:
            record = self._cache.setdefault(path, await self._load(path))
            future.set_result(record)
        finally:
            if not future.done():
                future.cancel()
            del self._in_flight[path]
            self._active -= 1
            self._admit()

    async def _load(self, path: str) -> FrontMatterRecord:
        self.fetch_count += 1
        try:
            text = await self.fetcher.fetch_text(join_path(self.content_root, path))
        except FetchError as exc:
            logger.warning("Failed to load front matter from %s: %s", path, exc.message)
            return FrontMatterRecord(location=path)
        except Exception as exc:
            # Fetchers may fail outside FetchError, e.g. on a malformed path
            logger.warning(
                "Failed to load front matter from %s: %s: %s", path, type(exc).__name__, exc
            )
            return FrontMatterRecord(location=path)
        if not text.strip():
            logger.warning("Failed to load front matter from %s: empty file", path)
            return FrontMatterRecord(location=path)
        try:
            return record_from_markdown(path, text)
        except Exception as exc:
            logger.warning(
                "Failed to parse front matter of %s: %s: %s", path, type(exc).__name__, exc
            )
            return FrontMatterRecord(location=path)

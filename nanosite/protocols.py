"""Protocol definitions for NanoSite.

This module defines the interfaces (protocols) the resolver depends on, so the
fetch queue and the assembler can work against HTTP, the local filesystem or
in-memory fakes in tests.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .events import EnrichmentEvent


@runtime_checkable
class TextFetcher(Protocol):
    """Protocol for fetching the text of a static site file.

    Implementations raise FetchError for missing files, transport failures and
    non-success responses. They never return partial content.
    """

    @abstractmethod
    async def fetch_text(self, path: str) -> str:
        """Fetch a file as text.

        Args:
            path: Site-relative path of the file.

        Returns:
            Decoded file content.

        Raises:
            FetchError: If the file cannot be fetched.
        """
        ...


@runtime_checkable
class EnrichmentListener(Protocol):
    """Protocol for receivers of enrichment notifications."""

    @abstractmethod
    def __call__(self, event: EnrichmentEvent) -> None:
        """Handle a corrected result map.

        Args:
            event: Notification carrying the corrected entries and language.
        """
        ...

"""Enrichment notifications.

When the background enrichment of an index load settles, the assembler
publishes one EnrichmentEvent carrying the corrected result map. Renderers
subscribe to the channel to re-render the affected cards.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from .collections import EntryMap
from .protocols import EnrichmentListener

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnrichmentEvent:
    """Corrected result map of one load.

    Attributes:
        entries: The corrected result map.
        lang: Normalized language the entries were resolved for.
        base_name: Index the entries came from, e.g. ``index``.
    """

    entries: EntryMap
    lang: str
    base_name: str = ""


class EnrichmentChannel:
    """Callback registry for enrichment notifications."""

    def __init__(self) -> None:
        self._listeners: list[EnrichmentListener] = []

    def __len__(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: EnrichmentListener) -> Callable[[], None]:
        """Register a listener.

        Args:
            listener: Callable receiving each EnrichmentEvent.

        Returns:
            Function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: EnrichmentEvent) -> None:
        """Deliver an event to every listener.

        A failing listener is logged and does not stop delivery to the rest.
        """
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Enrichment listener %r failed", listener)

"""Content assembly for NanoSite.

ContentAssembler loads a content index (``index.yaml``, ``tabs.yaml``) and
turns it into the result map the rendering layer consumes, for one requested
language.

Load flow:
1. Fetch ``{base}.yaml`` / ``{base}.yml`` and classify it.
2. Unified indexes are transformed in a single synchronous pass.
3. Simplified indexes are returned immediately with whatever front matter is
   already cached. Missing front matter is fetched in the background; once
   every fetch of the load has settled the entries are rebuilt in place and an
   EnrichmentEvent is published.
4. Legacy indexes, and files that are missing or unrecognized, go through the
   per-language chain ``{base}.{lang}`` -> ``{base}.{default}`` -> ``{base}``.

Nothing here raises to the caller: missing files give an empty map and bad
items are skipped.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, NamedTuple

from .classify import METADATA_KEYS, ConfigFormat, classify, classify_tabs
from .collections import EntryMap
from .config import ConfigUnavailableError, config_candidates, fetch_config
from .entries import ContentEntry, TabEntry, build_entry
from .events import EnrichmentChannel, EnrichmentEvent
from .fetch_queue import FrontMatterQueue
from .frontmatter import FrontMatterRecord, clean_tags, clean_text
from .languages import (
    DEFAULT_LANG,
    KNOWN_LANGUAGES,
    content_languages,
    language_buckets,
    normalize_lang,
    pick_bucket,
)
from .protocols import TextFetcher
from .utils import join_path, slugify_tab

logger = logging.getLogger(__name__)


class InlinePick(NamedTuple):
    """Language bucket of a unified index item."""

    title: str | None
    location: str
    excerpt: str | None = None


@dataclass
class _PendingItem:
    """Simplified item awaiting enrichment, tracked under its current key."""

    slug: str
    key: str
    paths: list[str]


def pick_inline(value: Any) -> InlinePick | None:
    """Read a unified bucket: a bare location or a ``{title, location, excerpt}`` mapping."""
    if isinstance(value, str):
        location = value.strip()
        return InlinePick(None, location) if location else None
    if isinstance(value, Mapping):
        location = clean_text(value.get("location"))
        if location:
            return InlinePick(
                clean_text(value.get("title")), location, clean_text(value.get("excerpt"))
            )
    return None


def pick_paths(value: Any) -> list[str] | None:
    """Read a simplified bucket: one markdown path or a list of version paths."""
    if isinstance(value, str):
        candidates = [value]
    elif isinstance(value, list):
        candidates = [v for v in value if isinstance(v, str)]
    else:
        return None
    paths: list[str] = []
    for candidate in candidates:
        path = candidate.strip()
        if path and path not in paths:
            paths.append(path)
    return paths or None


def inline_entry(key: str, node: Mapping[str, Any], chosen: InlinePick) -> ContentEntry:
    """Build an entry from inline index data, with item-level metadata."""
    tag = node.get("tag") if node.get("tag") is not None else node.get("tags")
    record = FrontMatterRecord(
        location=chosen.location,
        image=clean_text(node.get("image")),
        tag=clean_tags(tag),
        date=clean_text(node.get("date")),
        excerpt=chosen.excerpt or clean_text(node.get("excerpt")),
    )
    return ContentEntry(
        title=chosen.title or key,
        location=record.location,
        image=record.image,
        tag=record.tag,
        date=record.date,
        excerpt=record.excerpt,
        versions=[record],
    )


def transform_unified(raw: Mapping[str, Any], lang: str, default_lang: str) -> EntryMap:
    """Resolve a unified index for one language.

    Args:
        raw: Parsed index.
        lang: Requested language.
        default_lang: Site default language.

    Returns:
        Result map keyed by resolved title.
    """
    entries: list[ContentEntry] = []
    languages: set[str] = set()
    for key, node in raw.items():
        if not isinstance(node, Mapping):
            continue
        buckets = language_buckets(node, METADATA_KEYS)
        languages |= content_languages(buckets)
        chosen = pick_bucket(buckets, lang, default_lang, pick_inline)
        if chosen is None:
            chosen = pick_inline({"location": node.get("location")})
        if chosen is None:
            logger.debug("Skipping index item %r: no usable language bucket", key)
            continue
        entries.append(inline_entry(str(key), node, chosen))
    return EntryMap(entries, languages)


def transform_legacy(raw: Mapping[str, Any]) -> EntryMap:
    """Resolve a single-language index of ``title: {location, ...}`` items."""
    entries: list[ContentEntry] = []
    for key, node in raw.items():
        chosen = pick_inline(node) if isinstance(node, Mapping) else None
        if chosen is None:
            logger.debug("Skipping legacy index item %r: no location", key)
            continue
        entries.append(inline_entry(str(key), node, chosen._replace(title=None)))
    return EntryMap(entries)


def transform_tabs(
    raw: Mapping[str, Any], lang: str, default_lang: str
) -> tuple[dict[str, TabEntry], set[str]]:
    """Resolve a tabs index for one language.

    Slugs come from the config key so they stay the same in every language.

    Returns:
        Tuple of (title to TabEntry, content languages seen).
    """
    tabs: dict[str, TabEntry] = {}
    languages: set[str] = set()
    for key, node in raw.items():
        if not isinstance(node, Mapping):
            continue
        buckets = language_buckets(node, {"location"})
        languages |= content_languages(buckets)
        chosen = pick_bucket(buckets, lang, default_lang, pick_inline)
        if chosen is None:
            chosen = pick_inline({"location": node.get("location")})
        if chosen is None:
            logger.debug("Skipping tab %r: no usable language bucket", key)
            continue
        title = chosen.title or str(key)
        tabs[title] = TabEntry(title=title, location=chosen.location, slug=slugify_tab(str(key)))
    return tabs, languages


def legacy_tabs(raw: Mapping[str, Any]) -> dict[str, TabEntry]:
    """Resolve a single-language tabs index of ``title: {location}`` items."""
    tabs: dict[str, TabEntry] = {}
    for key, node in raw.items():
        chosen = pick_inline(node) if isinstance(node, Mapping) else None
        if chosen is None:
            continue
        title = str(key)
        tabs[title] = TabEntry(title=title, location=chosen.location, slug=slugify_tab(title))
    return tabs


class ContentAssembler:
    """Loads content indexes and resolves them for one language.

    One assembler (and one FrontMatterQueue) is shared by every load of a
    session so front matter is fetched at most once.

    Attributes:
        queue: Front matter fetch queue.
        fetcher: Fetcher used for index files.
        lang: Normalized requested language.
        default_lang: Normalized site default language.
        channel: Channel enrichment notifications are published on.
    """

    def __init__(
        self,
        queue: FrontMatterQueue,
        fetcher: TextFetcher | None = None,
        lang: str | None = None,
        default_lang: str = DEFAULT_LANG,
        channel: EnrichmentChannel | None = None,
    ):
        self.queue = queue
        self.fetcher = fetcher or queue.fetcher
        self.default_lang = normalize_lang(default_lang) or DEFAULT_LANG
        self.lang = normalize_lang(lang) or self.default_lang
        self.channel = channel or EnrichmentChannel()
        self._languages: set[str] = set()
        self._tasks: set[asyncio.Task] = set()

    @property
    def available_languages(self) -> list[str]:
        """Content languages seen by every load so far, else the known languages."""
        if self._languages:
            return sorted(self._languages)
        return list(KNOWN_LANGUAGES)

    async def load(self, base_path: str, base_name: str) -> EntryMap:
        """Load a posts index.

        Args:
            base_path: Folder of the index, e.g. ``wwwroot``.
            base_name: Index name without extension, e.g. ``index``.

        Returns:
            The initial result map. For simplified indexes it may still be
            enriched in place afterwards; see settle() and the channel.
        """
        raw = await self._fetch_index(base_path, base_name)
        fmt = classify(raw) if raw else ConfigFormat.LEGACY_FLAT
        logger.debug("Index %s/%s classified as %s", base_path, base_name, fmt.value)
        if fmt is ConfigFormat.UNIFIED:
            entries = transform_unified(raw, self.lang, self.default_lang)
        elif fmt is ConfigFormat.SIMPLIFIED:
            entries = self._assemble_simplified(raw, base_name)
        else:
            entries = transform_legacy(await self._load_legacy(base_path, base_name))
        self._languages.update(entries.languages)
        return entries

    async def load_tabs(self, base_path: str, base_name: str) -> dict[str, TabEntry]:
        """Load a tabs index.

        Args:
            base_path: Folder of the index.
            base_name: Index name without extension, e.g. ``tabs``.

        Returns:
            Mapping of tab title to TabEntry; empty when nothing loads.
        """
        raw = await self._fetch_index(base_path, base_name)
        if raw and classify_tabs(raw) is ConfigFormat.UNIFIED:
            tabs, languages = transform_tabs(raw, self.lang, self.default_lang)
            self._languages.update(languages)
            return tabs
        return legacy_tabs(await self._load_legacy(base_path, base_name))

    async def settle(self) -> None:
        """Wait until every background enrichment started so far has published."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def _fetch_index(self, base_path: str, base_name: str) -> dict[str, Any] | None:
        try:
            return await fetch_config(
                self.fetcher, config_candidates(join_path(base_path, base_name))
            )
        except ConfigUnavailableError:
            return None

    async def _load_legacy(self, base_path: str, base_name: str) -> dict[str, Any]:
        stems: list[str] = []
        for stem in (f"{base_name}.{self.lang}", f"{base_name}.{self.default_lang}", base_name):
            if stem not in stems:
                stems.append(stem)
        for stem in stems:
            try:
                return await fetch_config(
                    self.fetcher, config_candidates(join_path(base_path, stem))
                )
            except ConfigUnavailableError:
                continue
        logger.warning("No index could be loaded for %s/%s", base_path, base_name)
        return {}

    def _assemble_simplified(self, raw: Mapping[str, Any], base_name: str) -> EntryMap:
        entries = EntryMap()
        languages: set[str] = set()
        items: list[_PendingItem] = []
        for key, node in raw.items():
            if not isinstance(node, Mapping):
                continue
            buckets = language_buckets(node, METADATA_KEYS)
            languages |= content_languages(buckets)
            paths = pick_bucket(buckets, self.lang, self.default_lang, pick_paths)
            if paths is None:
                logger.debug("Skipping index item %r: no markdown path", key)
                continue
            entry = build_entry(self._current_records(paths), str(key))
            if entry is None:
                continue
            entries.add(entry)
            items.append(_PendingItem(str(key), entry.title, paths))
        entries.languages = sorted(languages)

        uncached: list[str] = []
        for item in items:
            for path in item.paths:
                if not self.queue.is_cached(path) and path not in uncached:
                    uncached.append(path)
        if uncached:
            futures = [self.queue.request(path) for path in uncached]
            task = asyncio.get_running_loop().create_task(
                self._enrich(entries, items, futures, base_name)
            )
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        return entries

    def _current_records(self, paths: list[str]) -> list[FrontMatterRecord]:
        return [self.queue.cached(path) or FrontMatterRecord(location=path) for path in paths]

    async def _enrich(
        self,
        entries: EntryMap,
        items: list[_PendingItem],
        futures: list[asyncio.Future[FrontMatterRecord]],
        base_name: str,
    ) -> None:
        await asyncio.gather(*futures, return_exceptions=True)
        replacements: list[tuple[str, ContentEntry]] = []
        for item in items:
            entry = build_entry(self._current_records(item.paths), item.slug)
            if entry is None:
                continue
            replacements.append((item.key, entry))
            item.key = entry.title
        # Old titles may collide with new ones, so the batch is swapped at once
        entries.replace_all(replacements)
        logger.debug("Enriched %d entries of %s", len(items), base_name)
        self.channel.publish(EnrichmentEvent(entries, self.lang, base_name))

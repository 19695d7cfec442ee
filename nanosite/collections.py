from __future__ import annotations

from collections.abc import Iterable, Iterator, MutableMapping

from .entries import ContentEntry, parse_date


class EntryMap(MutableMapping[str, ContentEntry]):
    """Result map of title to ContentEntry, with listing helpers for renderers."""

    def __init__(self, entries: Iterable[ContentEntry] = (), languages: Iterable[str] = ()):
        self._entries: dict[str, ContentEntry] = {}
        for entry in entries:
            self._entries[entry.title] = entry
        # Content languages declared in the index this map was built from
        self.languages = sorted(set(languages))

    def __getitem__(self, key: str) -> ContentEntry:
        return self._entries[key]

    def __setitem__(self, key: str, entry: ContentEntry) -> None:
        self._entries[key] = entry

    def __delitem__(self, key: str) -> None:
        del self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, entry: ContentEntry) -> None:
        self._entries[entry.title] = entry

    def replace(self, old_key: str | None, entry: ContentEntry) -> None:
        """Swap one entry for its corrected version, rekeying when the title changed."""
        self.replace_all([(old_key, entry)])

    def replace_all(self, replacements: Iterable[tuple[str | None, ContentEntry]]) -> None:
        """Swap a batch of entries for their corrected versions in one step.

        Every old key is removed before any corrected entry is inserted, so a
        corrected title that equals another entry's old key cannot knock that
        entry out of the map. Nothing awaits in between, so event loop readers
        see either the whole old batch or the whole new one.

        Args:
            replacements: Pairs of (key the entry is stored under, corrected entry).
        """
        pairs = list(replacements)
        for old_key, _ in pairs:
            if old_key is not None:
                self._entries.pop(old_key, None)
        for _, entry in pairs:
            self._entries[entry.title] = entry

    def sorted(self, reverse: bool = True) -> list[ContentEntry]:
        """Entries by date, newest first by default; undated entries come last."""
        dated = [e for e in self._entries.values() if parse_date(e.date) is not None]
        undated = [e for e in self._entries.values() if parse_date(e.date) is None]
        dated.sort(key=lambda e: parse_date(e.date), reverse=reverse)
        return dated + undated

    def published(self) -> EntryMap:
        return EntryMap((e for e in self._entries.values() if not e.draft), self.languages)

    def drafts(self) -> EntryMap:
        return EntryMap((e for e in self._entries.values() if e.draft), self.languages)

    def with_tag(self, tag: str) -> EntryMap:
        return EntryMap((e for e in self._entries.values() if tag in e.tags), self.languages)

    def tags(self) -> dict[str, list[str]]:
        """Index of tag name to the titles carrying it."""
        index: dict[str, list[str]] = {}
        for entry in self._entries.values():
            for tag in entry.tags:
                index.setdefault(tag, []).append(entry.title)
        return index

    def to_dict(self) -> dict[str, dict]:
        return {title: entry.to_dict() for title, entry in self._entries.items()}

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"EntryMap({len(self._entries)} entries)"

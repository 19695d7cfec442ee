"""Content entries for NanoSite.

A ContentEntry is the unit the rendering layer consumes: one logical post in
the chosen language, with its metadata taken from the most recent version and
every version listed newest first.

Key classes:
- ContentEntry: Dataclass for a resolved post.
- TabEntry: Dataclass for a resolved navigation tab.

Key functions:
- parse_date: Parse front matter dates for ordering.
- build_entry: Merge the versions of a post into a ContentEntry.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any

from .frontmatter import FrontMatterRecord

DATE_FORMATS = ("%Y/%m/%d", "%Y/%m/%d %H:%M", "%Y.%m.%d", "%d %b %Y", "%b %d, %Y")


@dataclass
class ContentEntry:
    """Resolved post.

    Attributes:
        title: Display title, also the entry's key in the result map.
        location: Content path of the primary (most recent) version.
        image: Cover image path.
        tag: Tag or list of tags.
        date: Publication date of the primary version.
        excerpt: Excerpt text.
        version_label: Label of the primary version.
        ai: AI-generated content flag.
        draft: Unfinished post flag.
        author: Author name.
        versions: Every version, newest first.
    """

    title: str
    location: str
    image: str | None = None
    tag: str | list[str] | None = None
    date: str | None = None
    excerpt: str | None = None
    version_label: str | None = None
    ai: bool | None = None
    draft: bool | None = None
    author: str | None = None
    versions: list[FrontMatterRecord] = field(default_factory=list)

    @property
    def tags(self) -> list[str]:
        """Tags as a list, whether declared as a string or a list."""
        if not self.tag:
            return []
        if isinstance(self.tag, str):
            return [t.strip() for t in self.tag.split(",") if t.strip()]
        return list(self.tag)

    def to_dict(self) -> dict[str, Any]:
        """Plain dict without unset fields, for JSON output."""
        data = {k: v for k, v in dataclasses.asdict(self).items() if v is not None}
        data["versions"] = [
            {k: v for k, v in version.items() if v is not None}
            for version in data["versions"]
        ]
        return data


@dataclass
class TabEntry:
    """Resolved navigation tab.

    Attributes:
        title: Display title in the requested language.
        location: Content path of the tab's markdown.
        slug: Stable slug derived from the config key.
    """

    title: str
    location: str
    slug: str


def parse_date(value: Any) -> datetime | None:
    """Parse a front matter date.

    Naive values are taken as UTC so that dated and timestamped versions
    compare.

    Args:
        value: ISO date or datetime string, another common date spelling, or
            a date/datetime object.

    Returns:
        Timezone-aware datetime, or None when the value is not a date.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if not text:
            return None
        parsed = _parse_date_text(text)
        if parsed is None:
            return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_date_text(text: str) -> datetime | None:
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def sort_versions(records: Iterable[FrontMatterRecord]) -> list[FrontMatterRecord]:
    """Sort records newest first; undated records keep their order at the end."""

    def sort_key(record: FrontMatterRecord):
        parsed = parse_date(record.date)
        if parsed is None:
            return (1, 0.0)
        return (0, -parsed.timestamp())

    return sorted(records, key=sort_key)


def build_entry(records: Iterable[FrontMatterRecord], fallback_title: str) -> ContentEntry | None:
    """Merge the versions of one post into a ContentEntry.

    Args:
        records: Front matter records of every path declared for the post.
        fallback_title: Title used when the primary version declares none.

    Returns:
        Entry built from the most recent version, or None if no record has a
        location.
    """
    usable = [r for r in records if r.location and r.location.strip()]
    if not usable:
        return None
    ordered = sort_versions(usable)
    primary = ordered[0]
    return ContentEntry(
        title=primary.title or fallback_title,
        location=primary.location,
        image=primary.image,
        tag=primary.tag,
        date=primary.date,
        excerpt=primary.excerpt,
        version_label=primary.version_label,
        ai=primary.ai,
        draft=primary.draft,
        author=primary.author,
        versions=[dataclasses.replace(r, title=None) for r in ordered],
    )

"""Front matter parsing for NanoSite.

This module turns the text of a markdown file into a FrontMatterRecord, the
metadata the index needs about one post: image, tags, date, excerpt, version
label, flags and title.

Key functions:
- extract_frontmatter: Split a leading YAML block from the markdown body.
- resolve_image_path: Resolve a cover image against the markdown's folder.
- record_from_markdown: Project recognized front matter fields into a record.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

import yaml

from .utils import base_dir, is_truthy_flag

FRONTMATTER_RE = re.compile(r"^\s*---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|$)", re.DOTALL)
ABSOLUTE_IMAGE_RE = re.compile(r"^(https?:|data:)", re.IGNORECASE)

AI_FLAG_KEYS = ("ai", "aiGenerated", "llm")
DRAFT_FLAG_KEYS = ("draft", "wip", "unfinished", "inprogress")


@dataclass(frozen=True)
class FrontMatterRecord:
    """Metadata for one markdown file.

    Attributes:
        location: Content path of the markdown file.
        image: Cover image path, resolved against the file's folder.
        tag: Tag or list of tags.
        date: Publication date as written (ISO string for YAML dates).
        excerpt: Excerpt from the front matter.
        version_label: Label of this version of a post.
        ai: Whether the post declares AI-generated content.
        draft: Whether the post is marked unfinished.
        title: Title declared in the front matter.
        author: Author name.
    """

    location: str
    image: str | None = None
    tag: str | list[str] | None = None
    date: str | None = None
    excerpt: str | None = None
    version_label: str | None = None
    ai: bool | None = None
    draft: bool | None = None
    title: str | None = None
    author: str | None = None


def extract_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Extract YAML frontmatter from content.

    Args:
        text: Raw file content.

    Returns:
        Tuple of (frontmatter dict, remaining content). Missing or malformed
        blocks give an empty dict and the original text.
    """
    match = FRONTMATTER_RE.match(text)
    if not match:
        return {}, text
    try:
        data = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError:
        return {}, text
    if not isinstance(data, dict):
        return {}, text
    return data, text[match.end() :]


def resolve_image_path(image: Any, location: str) -> str | None:
    """Resolve a front matter image against the markdown file's folder.

    URLs, data URIs and absolute paths are returned as-is.

    Args:
        image: Raw ``image`` value.
        location: Content path of the markdown file.

    Returns:
        Resolved path, or None when no image is set.
    """
    value = clean_text(image)
    if not value:
        return None
    if ABSOLUTE_IMAGE_RE.match(value) or value.startswith("/"):
        return value
    return re.sub(r"/+", "/", base_dir(location) + value)


def record_from_markdown(location: str, text: str) -> FrontMatterRecord:
    """Build a FrontMatterRecord from markdown text.

    Args:
        location: Content path the text was fetched from.
        text: Raw markdown.

    Returns:
        Record with every recognized field that the front matter sets.
    """
    frontmatter, _ = extract_frontmatter(text)
    return FrontMatterRecord(
        location=location,
        image=resolve_image_path(frontmatter.get("image"), location),
        tag=clean_tags(frontmatter.get("tags") or frontmatter.get("tag")),
        date=clean_text(frontmatter.get("date")),
        excerpt=clean_text(frontmatter.get("excerpt")),
        version_label=clean_text(frontmatter.get("version")),
        ai=_flag(frontmatter, AI_FLAG_KEYS),
        draft=_flag(frontmatter, DRAFT_FLAG_KEYS),
        title=clean_text(frontmatter.get("title")),
        author=clean_text(frontmatter.get("author")),
    )


def _flag(frontmatter: dict[str, Any], keys: tuple[str, ...]) -> bool | None:
    present = [frontmatter[k] for k in keys if k in frontmatter]
    if not present:
        return None
    return any(is_truthy_flag(v) for v in present)


def clean_text(value: Any) -> str | None:
    """Stringify a scalar field; dates become ISO strings, blanks become None."""
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    text = str(value).strip()
    return text or None


def clean_tags(value: Any) -> str | list[str] | None:
    if not value:
        return None
    if isinstance(value, (list, tuple)):
        tags = [t for t in (clean_text(v) for v in value) if t]
        return tags or None
    return clean_text(value)

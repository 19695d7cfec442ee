"""Utility functions for NanoSite.

This module contains small helpers shared across the resolver: flag parsing,
slug generation and content path handling.

Key functions:
    is_truthy_flag: Interpret a front matter flag value as a boolean.
    slugify_tab: Convert a tab title or key to a stable URL slug.
    join_path: Join content path segments with forward slashes.
    base_dir: Directory part of a content path, including the trailing slash.
"""

from __future__ import annotations

import re
from typing import Any

TRUTHY_FLAGS = frozenset({"true", "1", "yes", "y", "on", "enabled"})

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def is_truthy_flag(value: Any) -> bool:
    """Interpret a flag value using the front matter truthy grammar.

    Booleans keep their value. Everything else is compared, as a string and
    case-insensitively, against ``true|1|yes|y|on|enabled``. Surrounding
    whitespace is significant.

    Args:
        value: Raw flag value from the front matter.

    Returns:
        True if the value spells one of the truthy tokens.

    Examples:
        >>> is_truthy_flag("Yes")
        True

        >>> is_truthy_flag("0")
        False
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).lower() in TRUTHY_FLAGS


def slugify_tab(text: str) -> str:
    """Convert a tab title to a stable slug.

    Non-latin titles have no ASCII slug; those get a ``t-`` prefixed base36
    hash so the slug stays the same across page loads.

    Args:
        text: Title or config key.

    Returns:
        URL-friendly slug.

    Examples:
        >>> slugify_tab("About Me")
        'about-me'
    """
    source = str(text or "").strip()
    slug = re.sub(r"\s+", "-", source.lower())
    slug = re.sub(r"[^a-z0-9\-]", "", slug)
    slug = re.sub(r"-+", "-", slug).strip("-")
    if slug:
        return slug
    return "t-" + _to_base36(abs(_string_hash(source)))


def _string_hash(text: str) -> int:
    """32-bit signed ``h * 31 + c`` hash over UTF-16 code units."""
    value = 0
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        value = ((value << 5) - value + unit) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return value


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def join_path(*parts: str) -> str:
    """Join content path segments with single forward slashes.

    Empty segments are dropped, so ``join_path("", "index.yaml")`` is just
    ``index.yaml``.

    Args:
        parts: Path segments.

    Returns:
        Joined path.
    """
    cleaned = [str(p).strip("/") for p in parts if p and str(p).strip("/")]
    joined = "/".join(cleaned)
    if parts and str(parts[0]).startswith("/"):
        return "/" + joined
    return joined


def base_dir(path: str) -> str:
    """Return the directory part of a content path, keeping the trailing slash.

    Args:
        path: Content path such as ``post/hello/main.md``.

    Returns:
        ``post/hello/`` for the example above, empty string for bare names.
    """
    index = path.rfind("/")
    return path[: index + 1] if index >= 0 else ""

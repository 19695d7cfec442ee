"""Language handling for NanoSite content.

This module maps the language labels found in content indexes (codes such as
``en`` or ``zh-TW``, and the historical endonym labels such as ``简体中文``)
to canonical lowercase codes, and implements the fallback chain every
resolution step uses to pick one language bucket of an item.

Fallback order, stopping at the first usable bucket:
1. requested language,
2. site default language,
3. ``en``,
4. the legacy ``default`` bucket,
5. the first bucket declared on the item.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

T = TypeVar("T")

DEFAULT_LANG = "en"
LEGACY_DEFAULT_BUCKET = "default"

# Item-level metadata shared across languages.
RESERVED_KEYS = frozenset({"tag", "tags", "image", "date", "excerpt"})

LANG_ALIASES = {
    "english": "en",
    "en": "en",
    "中文": "zh",
    "简体中文": "zh",
    "zh": "zh",
    "zh-cn": "zh",
    "zh-hans": "zh",
    "正體中文": "zh-tw",
    "繁體中文": "zh-tw",
    "正體中文（台灣）": "zh-tw",
    "zh-tw": "zh-tw",
    "zh-hant": "zh-tw",
    "繁體中文（香港）": "zh-hk",
    "zh-hk": "zh-hk",
    "日本語": "ja",
    "にほんご": "ja",
    "ja": "ja",
    "jp": "ja",
}

LANGUAGE_LABELS = {
    "en": "English",
    "zh": "简体中文",
    "zh-tw": "正體中文（台灣）",
    "zh-hk": "繁體中文（香港）",
    "ja": "日本語",
}

KNOWN_LANGUAGES = tuple(LANGUAGE_LABELS)

LANG_CODE_RE = re.compile(r"^[a-z]{2}(?:-[a-z]{2})?$", re.IGNORECASE)


def normalize_lang(label: Any) -> str:
    """Normalize a language label to a canonical code.

    Args:
        label: Language code or human-readable label. ``None`` is accepted.

    Returns:
        Canonical lowercase code for known labels and code-shaped input,
        otherwise the trimmed label unchanged.

    Examples:
        >>> normalize_lang("简体中文")
        'zh'

        >>> normalize_lang("zh-TW")
        'zh-tw'
    """
    raw = str(label if label is not None else "").strip()
    lower = raw.lower()
    if lower in LANG_ALIASES:
        return LANG_ALIASES[lower]
    if LANG_CODE_RE.match(raw):
        return lower
    return raw


def language_label(code: str) -> str:
    """Return the display name for a language code, or the code itself."""
    return LANGUAGE_LABELS.get(normalize_lang(code), code)


def fallback_chain(requested: Any, default_lang: Any = DEFAULT_LANG) -> list[str]:
    """Return the fixed part of the fallback chain, without duplicates.

    Args:
        requested: Requested language label.
        default_lang: Site default language label.

    Returns:
        Normalized codes in lookup order.
    """
    chain: list[str] = []
    for code in (
        normalize_lang(requested),
        normalize_lang(default_lang),
        DEFAULT_LANG,
        LEGACY_DEFAULT_BUCKET,
    ):
        if code and code not in chain:
            chain.append(code)
    return chain


def language_buckets(
    node: Mapping[str, Any], exclude: Iterable[str] = RESERVED_KEYS
) -> dict[str, Any]:
    """Collect the language buckets of an item keyed by normalized code.

    When two keys normalize to the same code the first declared one wins, and
    declaration order is preserved.

    Args:
        node: Item mapping from a content index.
        exclude: Keys that are not language buckets.

    Returns:
        Mapping of normalized code to bucket value.
    """
    skipped = set(exclude)
    buckets: dict[str, Any] = {}
    for key, value in node.items():
        if key in skipped:
            continue
        buckets.setdefault(normalize_lang(key), value)
    return buckets


def pick_bucket(
    buckets: Mapping[str, Any],
    requested: Any,
    default_lang: Any,
    accept: Callable[[Any], T | None],
) -> T | None:
    """Pick the first usable bucket following the fallback chain.

    Args:
        buckets: Result of language_buckets().
        requested: Requested language label.
        default_lang: Site default language label.
        accept: Converts a bucket value into a pick, or returns None when the
            value is not usable (so the chain moves on).

    Returns:
        The first accepted pick, or None when the item has no usable bucket.
    """
    for code in fallback_chain(requested, default_lang):
        if code in buckets:
            picked = accept(buckets[code])
            if picked is not None:
                return picked
    for value in buckets.values():
        picked = accept(value)
        if picked is not None:
            return picked
    return None


def content_languages(buckets: Iterable[str]) -> set[str]:
    """Language codes worth offering to readers (everything but ``default``)."""
    return {code for code in buckets if code and code != LEGACY_DEFAULT_BUCKET}

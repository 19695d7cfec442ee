"""Content index format detection.

Index files come in three shapes:

- Unified: each item embeds per-language ``{title, location, excerpt}`` blocks
  (optionally under a legacy ``default`` key).
- Simplified: each item maps languages to a markdown path, or a list of paths
  for versioned posts; metadata comes from the files' front matter.
- Legacy flat: single-language items carrying a bare ``location``.

classify() inspects items in order and the first decisive item decides the
format of the whole file.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Any

from .languages import LEGACY_DEFAULT_BUCKET, RESERVED_KEYS

# Keys that never hold a language bucket.
METADATA_KEYS = RESERVED_KEYS | {"location"}


class ConfigFormat(enum.Enum):
    """Shape of a parsed content index."""

    UNIFIED = "unified"
    SIMPLIFIED = "simplified"
    LEGACY_FLAT = "legacy-flat"


def is_path_value(value: Any) -> bool:
    """Check if a bucket value is a markdown path or a list of paths."""
    if isinstance(value, str):
        return True
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def classify_item(node: Any) -> ConfigFormat | None:
    """Classify a single index item.

    An item holding only shared metadata (``tag``, ``image``, ``date``...) is
    not decisive. Read literally, "every path key holds a path" is vacuously
    true for such an item and would make the file simplified. Here the next
    item decides instead, since an item with no paths says nothing about the
    file's shape.

    Args:
        node: Value of one top-level key of the index.

    Returns:
        The format the item implies, or None when it is not decisive.
    """
    if not isinstance(node, Mapping):
        return None
    path_keys = [k for k in node if k not in METADATA_KEYS]
    if path_keys and all(is_path_value(node[k]) for k in path_keys):
        return ConfigFormat.SIMPLIFIED
    if LEGACY_DEFAULT_BUCKET in node or path_keys:
        return ConfigFormat.UNIFIED
    if "location" in node:
        return ConfigFormat.LEGACY_FLAT
    return None


def classify(raw: Any) -> ConfigFormat:
    """Classify a parsed content index.

    Args:
        raw: Parsed YAML document.

    Returns:
        Format of the first decisive item, LEGACY_FLAT when none is decisive.
    """
    if not isinstance(raw, Mapping):
        return ConfigFormat.LEGACY_FLAT
    for node in raw.values():
        found = classify_item(node)
        if found is not None:
            return found
    return ConfigFormat.LEGACY_FLAT


def classify_tabs(raw: Any) -> ConfigFormat:
    """Classify a parsed tabs index.

    Tabs carry no shared metadata, so any key other than ``location`` marks a
    unified file.
    """
    if not isinstance(raw, Mapping):
        return ConfigFormat.LEGACY_FLAT
    for node in raw.values():
        if not isinstance(node, Mapping):
            continue
        if LEGACY_DEFAULT_BUCKET in node or any(k != "location" for k in node):
            return ConfigFormat.UNIFIED
    return ConfigFormat.LEGACY_FLAT

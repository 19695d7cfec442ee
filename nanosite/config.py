"""Configuration loading for NanoSite.

This module fetches and parses the YAML files a site is driven by: the
``site.yaml`` site configuration and the content indexes (``index.yaml``,
``tabs.yaml`` and their per-language siblings).

Key functions:
- fetch_config: Return the first candidate file that parses into a mapping.
- config_candidates: Extension fallbacks for a config file stem.
- load_site_config: Load site.yaml with defaults applied.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

import yaml

from .fetchers import FetchError
from .languages import DEFAULT_LANG, normalize_lang
from .protocols import TextFetcher

logger = logging.getLogger(__name__)

CONFIG_EXTENSIONS = (".yaml", ".yml")

DEFAULT_FETCH_CONCURRENCY = 4

DEFAULT_CONFIG = {
    "contentRoot": "wwwroot",
    "defaultLanguage": DEFAULT_LANG,
    "fetchConcurrency": DEFAULT_FETCH_CONCURRENCY,
}


class ConfigUnavailableError(Exception):
    """No candidate config file could be loaded.

    Attributes:
        candidates: Paths that were tried, in order.
    """

    def __init__(self, candidates: Iterable[str]):
        self.candidates = list(candidates)
        super().__init__(f"No loadable config among: {', '.join(self.candidates)}")


@dataclass
class SiteConfig:
    """Resolved site configuration.

    Attributes:
        content_root: Folder holding the indexes and markdown, relative to the site.
        default_language: Site default language code.
        fetch_concurrency: Limit on simultaneous front matter fetches.
        raw: The parsed site.yaml merged over the defaults.
    """

    content_root: str = DEFAULT_CONFIG["contentRoot"]
    default_language: str = DEFAULT_LANG
    fetch_concurrency: int | None = DEFAULT_FETCH_CONCURRENCY
    raw: dict[str, Any] = field(default_factory=dict)


def config_candidates(stem: str) -> list[str]:
    """Return the candidate file names for a config stem.

    Args:
        stem: Path without extension, e.g. ``wwwroot/index.en``.

    Returns:
        ``[stem.yaml, stem.yml]``.
    """
    return [f"{stem}{ext}" for ext in CONFIG_EXTENSIONS]


async def fetch_config(fetcher: TextFetcher, candidates: Iterable[str]) -> dict[str, Any]:
    """Fetch and parse the first loadable config file.

    Args:
        fetcher: Fetcher used to read the files.
        candidates: Paths to try, in order.

    Returns:
        Parsed mapping of the first candidate that loads.

    Raises:
        ConfigUnavailableError: If no candidate loads as a YAML mapping.
    """
    tried: list[str] = []
    for path in candidates:
        tried.append(path)
        try:
            text = await fetcher.fetch_text(path)
        except FetchError as exc:
            logger.debug("Config %s unavailable: %s", path, exc.message)
            continue
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            logger.warning("Config %s is not valid YAML: %s", path, exc)
            continue
        if isinstance(data, dict) and data:
            return data
        logger.debug("Config %s is empty or not a mapping", path)
    raise ConfigUnavailableError(tried)


async def load_site_config(fetcher: TextFetcher) -> SiteConfig:
    """Load site.yaml (or site.yml) from the site root.

    Missing or unreadable files give the defaults.

    Args:
        fetcher: Fetcher rooted at the site.

    Returns:
        SiteConfig with defaults applied.
    """
    loaded: dict[str, Any] = {}
    try:
        loaded = await fetch_config(fetcher, config_candidates("site"))
    except ConfigUnavailableError:
        logger.debug("No site config found; using defaults")
    content_root = _first(loaded, "contentRoot", "contentBase", "contentPath")
    default_language = _first(loaded, "defaultLanguage", "defaultLang")
    concurrency = _first(loaded, "fetchConcurrency")
    return SiteConfig(
        content_root=str(DEFAULT_CONFIG["contentRoot"] if content_root is None else content_root),
        default_language=normalize_lang(default_language or DEFAULT_LANG),
        fetch_concurrency=_concurrency(
            DEFAULT_FETCH_CONCURRENCY if concurrency is None else concurrency
        ),
        raw={**DEFAULT_CONFIG, **loaded},
    )


def _first(config: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if config.get(key) is not None:
            return config[key]
    return None


def _concurrency(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning("Invalid fetchConcurrency %r; using %d", value, DEFAULT_FETCH_CONCURRENCY)
        return DEFAULT_FETCH_CONCURRENCY

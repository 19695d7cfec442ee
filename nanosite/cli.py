"""Command-line interface for NanoSite.

This module defines the CLI commands using Click framework.
Every command takes a SITE argument: a local checkout of the site or the URL
of a deployed copy.

Commands:
- index: Resolve the posts index and list its entries.
- tabs: Resolve the tabs index.
- langs: List the content languages declared by the posts index.
"""

from __future__ import annotations

import asyncio
import json
import logging

import click

from . import __version__
from .assembler import ContentAssembler
from .collections import EntryMap
from .config import SiteConfig, load_site_config
from .entries import TabEntry
from .fetch_queue import FrontMatterQueue
from .fetchers import fetcher_for
from .languages import language_label


@click.group()
@click.version_option(version=__version__, prog_name="nanosite")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
def cli(verbose: bool):
    """NanoSite content resolver."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("site")
@click.option("--lang", default=None, help="Requested language (defaults to the site language)")
@click.option("--name", default="index", show_default=True, help="Index name without extension")
@click.option(
    "--concurrency",
    type=click.IntRange(min=0),
    default=None,
    help="Front matter fetch limit, 0 for unbounded (overrides site.yaml)",
)
@click.option("--tag", default=None, help="Only list entries with this tag")
@click.option("--no-drafts", is_flag=True, help="Hide draft entries")
@click.option("--json", "as_json", is_flag=True, help="Print the result map as JSON")
def index(
    site: str,
    lang: str | None,
    name: str,
    concurrency: int | None,
    tag: str | None,
    no_drafts: bool,
    as_json: bool,
):
    """Resolve the posts index and list its entries, newest first."""
    entries, _ = asyncio.run(_load_index(site, lang, name, concurrency))
    if tag:
        entries = entries.with_tag(tag)
    if no_drafts:
        entries = entries.published()
    if as_json:
        click.echo(json.dumps(entries.to_dict(), ensure_ascii=False, indent=2))
        return
    if not entries:
        click.echo("No entries found.")
        return
    for entry in entries.sorted():
        flags = "".join(
            marker for marker, on in ((" [draft]", entry.draft), (" [ai]", entry.ai)) if on
        )
        line = f"{entry.date or '-':<10}  {entry.title}{flags}  ({entry.location})"
        if len(entry.versions) > 1:
            line += f"  {len(entry.versions)} versions"
        click.echo(line)


@cli.command()
@click.argument("site")
@click.option("--lang", default=None, help="Requested language (defaults to the site language)")
@click.option("--name", default="tabs", show_default=True, help="Tabs index name without extension")
@click.option("--json", "as_json", is_flag=True, help="Print the tabs as JSON")
def tabs(site: str, lang: str | None, name: str, as_json: bool):
    """Resolve the tabs index."""
    resolved = asyncio.run(_load_tabs(site, lang, name))
    if as_json:
        payload = {title: {"location": t.location, "slug": t.slug} for title, t in resolved.items()}
        click.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        return
    if not resolved:
        click.echo("No tabs found.")
        return
    for title, tab in resolved.items():
        click.echo(f"{tab.slug:<20}  {title}  ({tab.location})")


@cli.command()
@click.argument("site")
@click.option("--name", default="index", show_default=True, help="Index name without extension")
def langs(site: str, name: str):
    """List the content languages declared by the posts index."""
    _, assembler = asyncio.run(_load_index(site, None, name, None))
    for code in assembler.available_languages:
        marker = " (default)" if code == assembler.default_lang else ""
        click.echo(f"{code:<6}  {language_label(code)}{marker}")


async def _load_index(
    site: str, lang: str | None, name: str, concurrency: int | None
) -> tuple[EntryMap, ContentAssembler]:
    """Resolve an index and wait for its enrichment to settle."""
    async with fetcher_for(site) as fetcher:
        site_config = await load_site_config(fetcher)
        assembler = _assembler(fetcher, site_config, lang, concurrency)
        entries = await assembler.load(site_config.content_root, name)
        await assembler.settle()
    return entries, assembler


async def _load_tabs(site: str, lang: str | None, name: str) -> dict[str, TabEntry]:
    async with fetcher_for(site) as fetcher:
        site_config = await load_site_config(fetcher)
        assembler = _assembler(fetcher, site_config, lang, None)
        return await assembler.load_tabs(site_config.content_root, name)


def _assembler(
    fetcher, site_config: SiteConfig, lang: str | None, concurrency: int | None
) -> ContentAssembler:
    queue = FrontMatterQueue(
        fetcher,
        concurrency=site_config.fetch_concurrency if concurrency is None else concurrency,
        content_root=site_config.content_root,
    )
    return ContentAssembler(
        queue, fetcher, lang=lang, default_lang=site_config.default_language
    )


def main():
    """Entry point for the CLI application."""
    cli()

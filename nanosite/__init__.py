"""NanoSite content resolver.

This package resolves the content indexes of a NanoSite static blog: it reads the
YAML index files, picks the right language variant of every post, enriches
entries from markdown front matter under a bounded-concurrency fetch queue and
republishes a corrected result set once enrichment settles.

The main entry point for library use is ContentAssembler; the CLI module
exposes the same pipeline on the command line.

Architecture:
- languages: language label normalization and the per-item fallback chain.
- classify: detection of the unified, simplified and legacy index formats.
- frontmatter / fetch_queue: front matter parsing and the cached fetch queue.
- entries / collections: entry building and the published result map.
- assembler / events: orchestration and the enrichment notification channel.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"

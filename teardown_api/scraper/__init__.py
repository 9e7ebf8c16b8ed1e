"""Teardown API scraper package."""
from __future__ import annotations

from collections.abc import Callable

from . import fetch, normalize, parser, storage, tables
from .parser import ApiDocument

__all__ = [
    "fetch",
    "normalize",
    "parser",
    "storage",
    "tables",
    "scrape_api",
]


def scrape_api(url: str, fetcher: Callable[[str], str] | None = None) -> ApiDocument:
    """Convenience wrapper: fetch the manual at ``url`` and parse it."""
    text = (fetcher or fetch.fetch_document)(url)
    return parser.parse_document(text)

"""Remote catalog of published releases.

The catalog scrapes anchor targets from a single index document (the
HashiCorp directory listing or the OpenTofu GitHub releases page). Each
iteration of a listing fetches and parses the index again; nothing is cached
between calls.
"""
from __future__ import annotations

import logging
import re
from html.parser import HTMLParser
from typing import Callable, Iterator, List, Optional

from common.http_client import fetch_text
from common.logging_utils import extra_context, is_debug_enabled, safe_url
from errors import ResolutionError
from products import Product
from .models import CatalogEntry
from .parser import try_parse_version

logger = logging.getLogger(__name__)

TextFetcher = Callable[[str], str]


class _AnchorCollector(HTMLParser):
    """Collects ``href`` values of every ``<a>`` element."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.hrefs: List[str] = []

    def handle_starttag(self, tag, attrs):
        if tag != "a":
            return
        for name, value in attrs:
            if name == "href" and value:
                self.hrefs.append(value)


def extract_hrefs(document: str) -> List[str]:
    collector = _AnchorCollector()
    collector.feed(document)
    collector.close()
    return collector.hrefs


def parse_index(document: str, product: Product) -> List[CatalogEntry]:
    """Parse version links out of an index page, newest first.

    Links that do not carry a parseable version are skipped silently.
    """
    seen = set()
    entries: List[CatalogEntry] = []
    for href in extract_hrefs(document):
        text = product.version_from_href(href)
        if text is None:
            continue
        version = try_parse_version(text)
        if version is None or version in seen:
            continue
        seen.add(version)
        entries.append(CatalogEntry(version=version, product=product.name))
    entries.sort(key=lambda e: e.version, reverse=True)
    return entries


class CatalogListing:
    """Lazy, restartable sequence of catalog entries.

    Nothing is fetched until iteration starts, and every new iteration
    fetches the index again.
    """

    def __init__(self, url: str, product: Product, fetch: TextFetcher):
        self.url = url
        self.product = product
        self._fetch = fetch

    def __iter__(self) -> Iterator[CatalogEntry]:
        document = self._fetch(self.url)
        entries = parse_index(document, self.product)
        if is_debug_enabled(logger):
            logger.debug(
                "Parsed remote index",
                extra=extra_context(
                    event="parse",
                    component="catalog",
                    action="list",
                    target=safe_url(self.url),
                    count=len(entries),
                ),
            )
        return iter(entries)


class RemoteCatalog:
    """Listing and matching of remotely available versions for one product."""

    def __init__(self, product: Product, remote: str, fetch: Optional[TextFetcher] = None):
        self.product = product
        self.remote = remote
        self._fetch = fetch or (lambda url: fetch_text(url, context="catalog"))

    @property
    def index_url(self) -> str:
        return self.product.index_location(self.remote)

    def list(self) -> CatalogListing:
        return CatalogListing(self.index_url, self.product, self._fetch)

    def matching(self, pattern: str) -> List[CatalogEntry]:
        """Entries whose version text matches ``pattern`` (``re.search``)."""
        try:
            regex = re.compile(pattern)
        except re.error as exc:
            raise ResolutionError(f"Invalid regex '{pattern}' for latest remote matching: {exc}") from exc
        return [entry for entry in self.list() if regex.search(str(entry.version))]

    def latest(self, pattern: str) -> Optional[CatalogEntry]:
        matches = self.matching(pattern)
        return matches[0] if matches else None

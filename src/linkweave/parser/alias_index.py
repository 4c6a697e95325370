"""Alias index for resolving wiki-style links.

Maps every string a document can be referred to by (URL, slug, title,
permalink, origin path, in their common variants) to that document.
Enables resolution of [[Title]], [[slug]], [[2024-01-15-slug]] and
[text](/permalink/) style references.
"""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Iterable, Iterator
from urllib.parse import unquote

from ..config import DATE_PREFIX_PATTERN
from ..models import DocumentRecord, LinkTarget

log = logging.getLogger(__name__)


def _chomp_slash(value: str) -> str:
    """Remove a single trailing slash."""
    return value[:-1] if value.endswith("/") else value


def _strip_date_prefix(slug: str) -> str | None:
    match = DATE_PREFIX_PATTERN.match(slug)
    return match.group("rest") if match else None


def alias_keys(doc: DocumentRecord) -> list[str]:
    """List every alias key for a document, in insertion order.

    Empty values are skipped; duplicates are kept (inserting them twice is
    harmless and keeps the order easy to reason about).
    """
    keys: list[str] = []

    url = doc.url or ""
    trimmed_url = _chomp_slash(url)
    keys += [url, trimmed_url, unquote(url), unquote(trimmed_url)]

    slug = doc.slug
    keys += [slug, slug.lower()]
    if doc.chronological:
        stripped = _strip_date_prefix(slug)
        if stripped:
            keys += [stripped, stripped.lower()]

    title = (doc.title or "").strip()
    if title:
        keys += [title, title.lower()]

    permalink = (doc.permalink or "").strip()
    if permalink:
        no_leading = permalink[1:] if permalink.startswith("/") else permalink
        keys += [permalink, _chomp_slash(permalink), no_leading, _chomp_slash(no_leading)]

    origin = (doc.origin_path or "").strip().replace("\\", "/")
    if origin:
        origin_no_ext = posixpath.splitext(origin)[0]
        origin_base = posixpath.basename(origin_no_ext)
        keys += [origin_no_ext, origin_no_ext.lower(), origin_base, origin_base.lower()]

    return [key for key in keys if key]


class AliasIndex:
    """Many-to-one mapping from alias keys to documents.

    Lookups are exact and case-sensitive; callers try case and decoding
    variants themselves. On key collision the document inserted last wins, so
    build from a corpus iterated in a fixed order.
    """

    def __init__(self) -> None:
        self._keys: dict[str, int] = {}
        self._documents: dict[int, DocumentRecord] = {}

    @classmethod
    def build(cls, documents: Iterable[DocumentRecord]) -> AliasIndex:
        """Build an index over documents, in iteration order."""
        index = cls()
        for doc in documents:
            index.add(doc)
        log.debug("Alias index: %d keys for %d documents", len(index._keys), len(index._documents))
        return index

    def add(self, doc: DocumentRecord) -> None:
        self._documents[doc.handle] = doc
        for key in alias_keys(doc):
            previous = self._keys.get(key)
            if previous is not None and previous != doc.handle:
                log.debug(
                    "Alias %r: %s replaces %s",
                    key,
                    doc.path,
                    self._documents[previous].path,
                )
            self._keys[key] = doc.handle

    def lookup(self, key: str) -> DocumentRecord | None:
        handle = self._keys.get(key)
        if handle is None:
            return None
        return self._documents[handle]

    def keys(self) -> Iterator[str]:
        return iter(self._keys)

    def link_table(self) -> dict[str, LinkTarget]:
        """Alias key to (url, title), for consumers that only render links."""
        return {
            key: LinkTarget(url=self._documents[handle].url, title=self._documents[handle].title)
            for key, handle in self._keys.items()
        }

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)

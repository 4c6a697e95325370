"""Forward link extraction and resolution.

Finds [[wikilink]] and [text](href) references in a document's source and
resolves them against the alias index. Code and math regions are removed
before scanning so their contents never count as references.
"""

from __future__ import annotations

import logging
import re
from typing import NamedTuple

from ..config import SKIP_HREF_PREFIXES
from ..models import DocumentRecord
from .alias_index import AliasIndex
from .markdown import strip_front_matter
from .regions import mask_regions

log = logging.getLogger(__name__)

# [[key]] or [[key|display]], single line
WIKILINK_PATTERN = re.compile(r"\[\[([^\]|\n]+?)(?:\|([^\]\n]+?))?\]\]")

# [text](href)
MARKDOWN_LINK_PATTERN = re.compile(r"\[[^\]]*\]\(([^)]+)\)")


class WikiLink(NamedTuple):
    """A [[key|display]] occurrence."""

    key: str
    display: str | None
    start: int
    end: int


def extract_wikilinks(text: str) -> list[WikiLink]:
    """Extract every [[wikilink]] from text, in source order."""
    links: list[WikiLink] = []
    for match in WIKILINK_PATTERN.finditer(text):
        display = match.group(2)
        links.append(
            WikiLink(
                key=match.group(1).strip(),
                display=display.strip() if display is not None else None,
                start=match.start(),
                end=match.end(),
            )
        )
    return links


def _clean_href(href: str) -> str:
    """Reduce an href to the part that names a document.

    Drops a link title ("/a/ "Title"), angle brackets, #fragment and ?query.
    """
    href = href.strip()
    if href.startswith("<") and ">" in href:
        href = href[1 : href.index(">")]
    else:
        href = href.split(maxsplit=1)[0] if href else ""
    for marker in ("#", "?"):
        idx = href.find(marker)
        if idx > 0:
            href = href[:idx]
    return href


def extract_hrefs(text: str) -> list[tuple[str, int]]:
    """Extract candidate corpus hrefs from standard Markdown links.

    External (http/https), same-page (#...) and mailto: links are skipped.

    Returns:
        List of (href, position) in source order.
    """
    hrefs: list[tuple[str, int]] = []
    for match in MARKDOWN_LINK_PATTERN.finditer(text):
        raw = match.group(1).strip()
        if not raw or raw.startswith(SKIP_HREF_PREFIXES):
            continue
        href = _clean_href(raw)
        if href:
            hrefs.append((href, match.start()))
    return hrefs


def resolve_wikilink_key(key: str, index: AliasIndex) -> DocumentRecord | None:
    """Resolve a wikilink key: exact, then lowercase, then lowercase basename.

    The basename fallback handles [[folder/note]] written against a note that
    is indexed only by its filename.
    """
    if not key:
        return None
    doc = index.lookup(key) or index.lookup(key.lower())
    if doc is None and "/" in key:
        doc = index.lookup(key.rsplit("/", 1)[-1].lower())
    return doc


def resolve_href(href: str, index: AliasIndex) -> DocumentRecord | None:
    """Resolve a standard link href: exact, then lowercase, then without trailing slash."""
    if not href:
        return None
    doc = index.lookup(href) or index.lookup(href.lower())
    if doc is None and href.endswith("/"):
        doc = index.lookup(href[:-1])
    return doc


def resolve_forward_links(doc: DocumentRecord, index: AliasIndex) -> list[int]:
    """Resolve a document's outgoing references.

    Args:
        doc: Document to scan.
        index: Finished alias index for the corpus.

    Returns:
        Handles of the distinct documents referenced, ordered by first
        occurrence in the source. Never contains ``doc`` itself.
    """
    if doc.raw_source is None:
        log.warning("No source for %s (%s); it contributes no links", doc.path, doc.url)
        return []

    text = mask_regions(strip_front_matter(doc.raw_source))

    found: list[tuple[int, int]] = []  # (position, handle)

    for link in extract_wikilinks(text):
        target = resolve_wikilink_key(link.key, index)
        if target is None:
            log.debug("%s: unresolved wikilink [[%s]]", doc.path, link.key)
            continue
        found.append((link.start, target.handle))

    for href, position in extract_hrefs(text):
        target = resolve_href(href, index)
        if target is not None:
            found.append((position, target.handle))

    found.sort(key=lambda item: item[0])

    targets: list[int] = []
    seen: set[int] = {doc.handle}
    for _position, handle in found:
        if handle not in seen:
            seen.add(handle)
            targets.append(handle)
    return targets

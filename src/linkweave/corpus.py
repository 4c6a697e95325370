"""Corpus arena and site directory loader.

A Corpus owns the documents of one build and hands out stable integer
handles; every derived map (forward links, backlinks, graph ids) is keyed by
handle. Iteration order is insertion order, which the loader fixes as: posts
sorted by relative path, then pages sorted by relative path.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from fnmatch import fnmatch
from pathlib import Path
from typing import Any
from urllib.parse import quote

from .config import DATE_PREFIX_PATTERN, DOCUMENT_EXTENSIONS, SiteConfig
from .models import DocumentRecord
from .parser import ParseError, parse_source

log = logging.getLogger(__name__)


class CorpusError(Exception):
    """Raised when the corpus directory cannot be enumerated."""

    pass


class Corpus:
    """Ordered collection of documents with stable integer handles."""

    def __init__(self, documents: Iterable[DocumentRecord] = ()) -> None:
        self._documents: list[DocumentRecord] = []
        for doc in documents:
            self.add(doc)

    def add(self, doc: DocumentRecord) -> DocumentRecord:
        """Append a document, assigning it the next handle."""
        doc.handle = len(self._documents)
        self._documents.append(doc)
        return doc

    def get(self, handle: int) -> DocumentRecord:
        return self._documents[handle]

    def find(self, path: str) -> DocumentRecord | None:
        """Find a document by its relative source path."""
        for doc in self._documents:
            if doc.path == path:
                return doc
        return None

    @property
    def documents(self) -> list[DocumentRecord]:
        return list(self._documents)

    def __iter__(self) -> Iterator[DocumentRecord]:
        return iter(self._documents)

    def __len__(self) -> int:
        return len(self._documents)


def _coerce_bool(value: Any) -> bool | None:
    """Read a yes/no front matter flag; anything else counts as undeclared."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "on"):
            return True
        if lowered in ("false", "no", "off"):
            return False
    return None


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _is_excluded(rel_path: str, config: SiteConfig) -> bool:
    return any(fnmatch(rel_path, pattern) for pattern in config.exclude)


def _is_hidden(rel_path: Path) -> bool:
    return any(part.startswith(("_", ".")) for part in rel_path.parts)


def _is_under(rel_path: Path, directory_parts: tuple[str, ...]) -> bool:
    return bool(directory_parts) and rel_path.parts[: len(directory_parts)] == directory_parts


def document_url(rel_path: str, chronological: bool, permalink: str | None, base_url: str = "") -> str:
    """Compute a document's canonical URL.

    - A declared permalink wins.
    - Posts named YYYY-MM-DD-slug.md map to /YYYY/MM/DD/slug.html.
    - index.md maps to its directory; other pages to /path/name.html.

    Paths built from filenames are percent-encoded ("My Note.md" becomes
    /My%20Note.html). Permalinks keep any escapes they already carry.
    """
    if permalink:
        path = permalink if permalink.startswith("/") else f"/{permalink}"
        return f"{base_url}{quote(path, safe='/%')}"

    name = rel_path.rsplit("/", 1)[-1]
    stem = name.rsplit(".", 1)[0]

    if chronological:
        match = DATE_PREFIX_PATTERN.match(stem)
        if match:
            path = f"/{match['year']}/{match['month']}/{match['day']}/{match['rest']}.html"
        else:
            path = f"/{stem}.html"
    else:
        directory = rel_path.rsplit("/", 1)[0] if "/" in rel_path else ""
        prefix = f"/{directory}" if directory else ""
        path = f"{prefix}/" if stem == "index" else f"{prefix}/{stem}.html"

    return f"{base_url}{quote(path, safe='/')}"


def load_document(corpus_root: Path, file_path: Path, chronological: bool, config: SiteConfig) -> DocumentRecord:
    """Load one document; unreadable files load with ``raw_source=None``."""
    rel_path = file_path.relative_to(corpus_root).as_posix()
    stem = file_path.stem

    raw_source: str | None
    metadata: dict[str, Any] = {}
    try:
        raw_source = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        log.warning("Could not read %s: %s", rel_path, e)
        raw_source = None

    if raw_source is not None:
        try:
            metadata, _body = parse_source(rel_path, raw_source)
        except ParseError as e:
            log.warning("%s; loading without metadata", e)

    title = _optional_str(metadata.get("title")) or stem
    permalink = _optional_str(metadata.get("permalink"))

    return DocumentRecord(
        path=rel_path,
        raw_source=raw_source,
        title=title,
        url=document_url(rel_path, chronological, permalink, config.base_url),
        permalink=permalink,
        origin_path=_optional_str(metadata.get(config.origin_field)),
        graph=_coerce_bool(metadata.get("graph")),
        chronological=chronological,
        metadata=metadata,
    )


def _markdown_files(directory: Path) -> list[Path]:
    return sorted(
        (p for p in directory.rglob("*") if p.is_file() and p.suffix.lower() in DOCUMENT_EXTENSIONS),
        key=lambda p: p.as_posix(),
    )


def load_corpus(corpus_root: Path, config: SiteConfig | None = None) -> Corpus:
    """Enumerate a site directory into a Corpus.

    Posts come from ``config.posts_dir``; pages are every other Markdown file
    outside directories starting with ``_`` or ``.``. Files matching an
    ``exclude`` glob are skipped.

    Args:
        corpus_root: Site source directory.
        config: Site configuration (defaults when omitted).

    Returns:
        The corpus, posts first, each group sorted by relative path.

    Raises:
        CorpusError: If corpus_root is not a readable directory.
    """
    config = config or SiteConfig()
    if not corpus_root.is_dir():
        raise CorpusError(f"Corpus root does not exist: {corpus_root}")

    corpus = Corpus()
    posts_dir = corpus_root / config.posts_dir

    try:
        post_files = _markdown_files(posts_dir) if posts_dir.is_dir() else []
        posts_parts = Path(config.posts_dir).parts
        page_files = [
            p
            for p in _markdown_files(corpus_root)
            if not _is_hidden(p.relative_to(corpus_root))
            and not _is_under(p.relative_to(corpus_root), posts_parts)
        ]
    except OSError as e:
        raise CorpusError(f"Failed to enumerate {corpus_root}: {e}") from e

    for chronological, files in ((True, post_files), (False, page_files)):
        for file_path in files:
            rel_path = file_path.relative_to(corpus_root).as_posix()
            if _is_excluded(rel_path, config):
                log.debug("Excluded %s", rel_path)
                continue
            corpus.add(load_document(corpus_root, file_path, chronological, config))

    log.info("Loaded %d documents from %s", len(corpus), corpus_root)
    return corpus

"""Shared test fixtures for the linkweave test suite.

Design:
- make_doc / make_corpus: in-memory DocumentRecords and Corpus
- site_root: isolated site directory in tmp_path, LINKWEAVE_CORPUS_ROOT set
- runner: CliRunner for command tests
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Generator

import pytest
from click.testing import CliRunner

from linkweave.corpus import Corpus
from linkweave.models import DocumentRecord


# ─────────────────────────────────────────────────────────────────────────────
# Helper Functions (for test code, not fixtures)
# ─────────────────────────────────────────────────────────────────────────────


def make_doc(
    path: str,
    source: str | None = "",
    title: str | None = None,
    url: str | None = None,
    **kwargs,
) -> DocumentRecord:
    """Build a DocumentRecord with sensible defaults.

    Title defaults to the filename stem, url to /<stem>.html, and documents
    under _posts/ are chronological.
    """
    stem = path.rsplit("/", 1)[-1].rsplit(".", 1)[0]
    kwargs.setdefault("chronological", path.startswith("_posts/"))
    return DocumentRecord(
        path=path,
        raw_source=source,
        title=title if title is not None else stem,
        url=url if url is not None else f"/{stem}.html",
        **kwargs,
    )


def write_doc(root: Path, rel_path: str, content: str, **front_matter) -> Path:
    """Write a Markdown file, with YAML front matter when keywords are given."""
    path = root / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    if front_matter:
        header = "".join(f"{key}: {value}\n" for key, value in front_matter.items())
        content = f"---\n{header}---\n\n{content}"
    path.write_text(content, encoding="utf-8")
    return path


# ─────────────────────────────────────────────────────────────────────────────
# Core Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def reset_package_logger() -> Generator[None, None, None]:
    """Undo configure_logging() after CLI tests so caplog keeps working."""
    yield
    logger = logging.getLogger("linkweave")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def make_corpus():
    """Factory: make_corpus(make_doc(...), make_doc(...)) -> Corpus."""

    def _make(*docs: DocumentRecord) -> Corpus:
        return Corpus(docs)

    return _make


@pytest.fixture
def runner() -> CliRunner:
    """CLI runner with isolated environment."""
    return CliRunner()


@pytest.fixture
def site_root(tmp_path: Path) -> Generator[Path, None, None]:
    """Isolated site directory with a small linked corpus.

    Creates:
    - _posts/2024-01-15-first-post.md  links [[Second Post]] and [[About]]
    - _posts/2024-02-01-second-post.md links back with [[first-post]]
    - about.md                         no links, graph: true
    - notes/private.md                 links [[first-post]], graph: false
    """
    root = tmp_path / "site"
    root.mkdir()

    write_doc(
        root,
        "_posts/2024-01-15-first-post.md",
        "See [[Second Post]] and [[About|the about page]].\n\n```\n[[Not A Link]]\n```\n",
        title="First Post",
    )
    write_doc(
        root,
        "_posts/2024-02-01-second-post.md",
        "Follows [[first-post]]. Inline math $a|b$ stays put.\n",
        title="Second Post",
    )
    write_doc(root, "about.md", "About this site.\n", title="About", graph="true")
    write_doc(root, "notes/private.md", "Refers to [[first-post]].\n", title="Private", graph="false")

    original = os.environ.get("LINKWEAVE_CORPUS_ROOT")
    os.environ["LINKWEAVE_CORPUS_ROOT"] = str(root)

    yield root

    if original is not None:
        os.environ["LINKWEAVE_CORPUS_ROOT"] = original
    else:
        os.environ.pop("LINKWEAVE_CORPUS_ROOT", None)

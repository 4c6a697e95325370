"""Build pipeline: link data for a corpus, then per-document rendering.

This module is the single entry point shared by the CLI and the publisher.
A failure in one document is logged and never stops the rest of the build.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .callouts import render_callouts
from .corpus import Corpus
from .graph import aggregate
from .models import BrokenLink, DocumentRecord, GraphData
from .parser import AliasIndex, resolve_forward_links, strip_front_matter
from .renderer import Renderer, default_renderer
from .rewriter import post_restore, pre_rewrite

log = logging.getLogger(__name__)


@dataclass
class LinkData:
    """Everything the link pass derived for one build."""

    index: AliasIndex
    forward: dict[int, list[int]]
    graph: GraphData
    failed: list[str] = field(default_factory=list)

    @property
    def link_count(self) -> int:
        return sum(len(targets) for targets in self.forward.values())


@dataclass
class RenderReport:
    """Outcome of rendering a corpus."""

    rendered: int = 0
    broken_links: list[BrokenLink] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


def build_link_data(corpus: Corpus) -> LinkData:
    """Index the corpus, resolve forward links, and attach backlinks and graph.

    Writes ``backlinks`` and ``graph_data`` onto every document. All
    documents share the same GraphData instance.
    """
    index = AliasIndex.build(corpus)

    forward: dict[int, list[int]] = {}
    failed: list[str] = []
    for doc in corpus:
        try:
            forward[doc.handle] = resolve_forward_links(doc, index)
        except Exception:
            log.exception("Link resolution failed for %s", doc.path)
            forward[doc.handle] = []
            failed.append(doc.path)

    backlinks, graph = aggregate(corpus, forward)

    for doc in corpus:
        doc.backlinks = backlinks.get(doc.handle, [])
        doc.graph_data = graph

    return LinkData(index=index, forward=forward, graph=graph, failed=failed)


def render_document(
    doc: DocumentRecord,
    index: AliasIndex,
    renderer: Renderer,
    broken: list[str] | None = None,
) -> str:
    """Render one document: rewrite, render, convert callouts, restore math.

    Sets ``doc.rendered_output`` and returns it.
    """
    body = strip_front_matter(doc.raw_source or "")
    result = pre_rewrite(body, index, broken)
    html = render_callouts(renderer(result.text))
    doc.rendered_output = post_restore(html, result.pending_math)
    return doc.rendered_output


def render_corpus(
    corpus: Corpus,
    link_data: LinkData,
    renderer: Renderer | None = None,
) -> RenderReport:
    """Render every document that has source text.

    Args:
        corpus: Documents, already processed by build_link_data.
        link_data: Result of build_link_data for this corpus.
        renderer: Markdown to HTML callable (markdown-it by default).

    Returns:
        RenderReport with counts, unresolved wikilinks and failures.
    """
    renderer = renderer or default_renderer()
    report = RenderReport()

    for doc in corpus:
        if doc.raw_source is None:
            continue
        broken: list[str] = []
        try:
            render_document(doc, link_data.index, renderer, broken)
        except Exception:
            log.exception("Rendering failed for %s", doc.path)
            report.failed.append(doc.path)
            continue
        report.rendered += 1
        report.broken_links.extend(BrokenLink(source=doc.path, target=key) for key in broken)

    if report.broken_links:
        log.info("%d unresolved wikilinks rendered as plain text", len(report.broken_links))
    return report

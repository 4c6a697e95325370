"""Backlinks and site link graph built from resolved forward links."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from .corpus import Corpus
from .models import BacklinkEntry, DocumentRecord, GraphData, GraphEdge, GraphNode

log = logging.getLogger(__name__)


def is_graph_included(doc: DocumentRecord) -> bool:
    """Decide whether a document becomes a graph node.

    An explicit ``graph: false`` always excludes. Posts are included by
    default. Anything else needs an explicit ``graph: true``.
    """
    if doc.graph is False:
        return False
    if doc.chronological:
        return True
    return doc.graph is True


def invert_links(corpus: Corpus, forward: Mapping[int, list[int]]) -> dict[int, list[int]]:
    """Invert forward links into backlinks, keyed by handle.

    Sources are visited in corpus order, so each backlink list is ordered by
    the corpus position of the referring document.
    """
    backlinks: dict[int, list[int]] = {}
    for doc in corpus:
        for target in forward.get(doc.handle, []):
            sources = backlinks.setdefault(target, [])
            if doc.handle not in sources:
                sources.append(doc.handle)
    return backlinks


def build_graph(
    corpus: Corpus,
    forward: Mapping[int, list[int]],
    backlinks: Mapping[int, list[int]] | None = None,
) -> GraphData:
    """Build the node/edge graph over graph-included documents.

    Node ids are dense and follow corpus order. Only references between two
    included documents become edges or count toward a node's weight.
    """
    if backlinks is None:
        backlinks = invert_links(corpus, forward)

    ids: dict[int, int] = {}
    for doc in corpus:
        if is_graph_included(doc):
            ids[doc.handle] = len(ids)

    nodes: list[GraphNode] = []
    for doc in corpus:
        node_id = ids.get(doc.handle)
        if node_id is None:
            continue
        outgoing = sum(1 for target in forward.get(doc.handle, []) if target in ids)
        incoming = sum(1 for source in backlinks.get(doc.handle, []) if source in ids)
        nodes.append(
            GraphNode(
                id=node_id,
                name=doc.title,
                url=doc.url,
                weight=max(1, outgoing + incoming),
            )
        )

    links: list[GraphEdge] = []
    for doc in corpus:
        source_id = ids.get(doc.handle)
        if source_id is None:
            continue
        for target in forward.get(doc.handle, []):
            target_id = ids.get(target)
            if target_id is not None:
                links.append(GraphEdge(source=source_id, target=target_id))

    return GraphData(nodes=nodes, links=links)


def aggregate(
    corpus: Corpus,
    forward: Mapping[int, list[int]],
) -> tuple[dict[int, list[BacklinkEntry]], GraphData]:
    """Compute backlinks for every document and the shared site graph.

    Args:
        corpus: The build's documents.
        forward: Resolved forward links per handle.

    Returns:
        Tuple of (backlink entries per handle, graph). Backlinks cover all
        documents, whether or not they are graph nodes.
    """
    backlink_handles = invert_links(corpus, forward)
    graph = build_graph(corpus, forward, backlink_handles)

    backlinks: dict[int, list[BacklinkEntry]] = {}
    for target, sources in backlink_handles.items():
        backlinks[target] = [
            BacklinkEntry(title=corpus.get(source).title, url=corpus.get(source).url)
            for source in sources
        ]

    log.info(
        "Graph: %d nodes, %d links (%d documents with backlinks)",
        len(graph.nodes),
        len(graph.links),
        len(backlinks),
    )
    return backlinks, graph

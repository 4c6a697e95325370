"""Tests for backlinks and the site link graph.

Coverage:
- src/linkweave/graph.py - inversion, inclusion policy, ids, weights, edges
"""

from __future__ import annotations

import pytest
from conftest import make_doc

from linkweave.graph import aggregate, build_graph, invert_links, is_graph_included


class TestGraphInclusion:
    @pytest.mark.parametrize(
        ("chronological", "graph", "expected"),
        [
            (True, None, True),
            (True, True, True),
            (True, False, False),
            (False, None, False),
            (False, True, True),
            (False, False, False),
        ],
    )
    def test_three_tier_policy(self, chronological, graph, expected):
        doc = make_doc("x.md", chronological=chronological, graph=graph)
        assert is_graph_included(doc) is expected


@pytest.fixture
def linked(make_corpus):
    """p1 -> p2, p1 -> page, p2 -> p1, hidden -> p1, page isolated otherwise.

    p1, p2: posts (graph nodes). page: opted in. hidden: opted out.
    """
    p1 = make_doc("_posts/2024-01-01-p1.md", title="P1")
    p2 = make_doc("_posts/2024-01-02-p2.md", title="P2")
    page = make_doc("page.md", title="Page", graph=True)
    hidden = make_doc("hidden.md", title="Hidden", graph=False)
    loner = make_doc("loner.md", title="Loner", graph=True)
    corpus = make_corpus(p1, p2, page, hidden, loner)
    forward = {0: [1, 2, 3], 1: [0], 2: [], 3: [0], 4: []}
    return corpus, forward


class TestInvertLinks:
    def test_backlinks_follow_corpus_order(self, linked):
        corpus, forward = linked
        backlinks = invert_links(corpus, forward)
        assert backlinks[0] == [1, 3]
        assert backlinks[1] == [0]
        assert backlinks[2] == [0]
        assert backlinks[3] == [0]
        assert 4 not in backlinks

    def test_duplicate_forward_entries_collapse(self, make_corpus):
        corpus = make_corpus(make_doc("a.md"), make_doc("b.md"))
        assert invert_links(corpus, {0: [1, 1]}) == {1: [0]}

    def test_symmetry(self, linked):
        corpus, forward = linked
        backlinks = invert_links(corpus, forward)
        for source, targets in forward.items():
            for target in targets:
                assert source in backlinks[target]
        for target, sources in backlinks.items():
            for source in sources:
                assert target in forward[source]


class TestBuildGraph:
    def test_dense_ids_skip_excluded(self, linked):
        corpus, forward = linked
        graph = build_graph(corpus, forward)
        assert [(n.id, n.name) for n in graph.nodes] == [(0, "P1"), (1, "P2"), (2, "Page"), (3, "Loner")]

    def test_edges_only_between_included(self, linked):
        corpus, forward = linked
        graph = build_graph(corpus, forward)
        assert [(e.source, e.target) for e in graph.links] == [(0, 1), (0, 2), (1, 0)]

    def test_weights_count_included_references_only(self, linked):
        corpus, forward = linked
        weights = {n.name: n.weight for n in build_graph(corpus, forward).nodes}
        # P1: out to P2 and Page, in from P2; the links to/from Hidden do not count
        assert weights == {"P1": 3, "P2": 2, "Page": 1, "Loner": 1}

    def test_weight_floor(self, make_corpus):
        corpus = make_corpus(make_doc("_posts/2024-01-01-alone.md"))
        graph = build_graph(corpus, {})
        assert graph.nodes[0].weight == 1


class TestAggregate:
    def test_backlinks_cover_excluded_documents(self, linked):
        corpus, forward = linked
        backlinks, _graph = aggregate(corpus, forward)
        assert [b.title for b in backlinks[3]] == ["P1"]
        assert [b.title for b in backlinks[0]] == ["P2", "Hidden"]

    def test_backlink_entries_carry_url(self, linked):
        corpus, forward = linked
        backlinks, _graph = aggregate(corpus, forward)
        assert backlinks[1][0].url == corpus.get(0).url

"""Tests for the embedding enumerator."""

from networkx.algorithms import isomorphism
import pytest

from fragmine import Embedding, Graph, contains, embed, extend, iter_embeddings
from fragmine.core.types import CHAIN, EXCLUDED, WILDCARD

from conftest import (
    AROMATIC,
    CARBON,
    NITROGEN,
    OXYGEN,
    SINGLE,
    assert_unmarked,
    build,
    ring,
)


def prepared(host: Graph, pattern: Graph):
    host.prepare()
    assert pattern.prepare_embed()
    return host, pattern


def assert_replays(embedding: Embedding, pattern: Graph) -> None:
    """Check that an embedding maps every pattern edge onto a host edge."""
    host = embedding.graph
    slots = [i for i, n in enumerate(pattern.nodes) if not n.is_chain()]
    image = {p: embedding.nodes[s] for s, p in enumerate(slots)}
    assert len(set(embedding.nodes)) == len(embedding.nodes)
    for p, h in image.items():
        if pattern.nodes[p].type != WILDCARD:
            assert host.nodes[h].type == pattern.nodes[p].type
    for j, pedge in enumerate(pattern.edges):
        hedge = host.edges[embedding.edges[j]]
        assert hedge.type == pedge.type
        ends = {hedge.src, hedge.dst}
        for p in (pedge.src, pedge.dst):
            if p in image:
                assert image[p] in ends


def monomorphisms(host: Graph, pattern: Graph) -> int:
    matcher = isomorphism.GraphMatcher(
        host.to_networkx(),
        pattern.to_networkx(),
        node_match=lambda a, b: a["type"] == b["type"],
        edge_match=lambda a, b: a["type"] == b["type"],
    )
    return sum(1 for _ in matcher.subgraph_monomorphisms_iter())


class TestEmbed:
    def test_single_aromatic_bond_in_benzene(self, benzene):
        pattern = build([CARBON, CARBON], [(0, 1, AROMATIC)])
        host, pattern = prepared(benzene, pattern)

        embs = embed(host, pattern)

        # each of the six bonds is found once per orientation
        assert len(embs) == 12
        assert len({e.edges for e in embs}) == 6
        for emb in embs:
            assert_replays(emb, pattern)
        assert_unmarked(host)
        assert_unmarked(pattern)

    @pytest.mark.parametrize(
        "pattern",
        [
            build([CARBON] * 3, [(0, 1, AROMATIC), (1, 2, AROMATIC)]),
            build([CARBON] * 4, [(0, 1, AROMATIC), (1, 2, AROMATIC), (1, 3, AROMATIC)]),
            ring(6, CARBON, AROMATIC),
        ],
        ids=["path", "star", "ring"],
    )
    def test_matches_networkx_monomorphisms(self, naphthalene, pattern):
        expected = monomorphisms(naphthalene, pattern)
        host, pattern = prepared(naphthalene, pattern)

        embs = embed(host, pattern)

        assert len(embs) == expected
        assert len(set(embs)) == len(embs)
        for emb in embs:
            assert_replays(emb, pattern)

    def test_six_ring_in_naphthalene(self, naphthalene):
        host, pattern = prepared(naphthalene, ring(6, CARBON, AROMATIC))

        # two rings, twelve automorphisms each
        assert len(embed(host, pattern)) == 24

    def test_no_match_on_type(self, ethanol):
        host, pattern = prepared(ethanol, build([CARBON, NITROGEN], [(0, 1, SINGLE)]))
        assert embed(host, pattern) == []
        assert not contains(host, pattern)

    def test_pattern_larger_than_host(self, bond, ethanol):
        host, pattern = prepared(bond, ethanol)
        assert embed(host, pattern) == []

    def test_empty_pattern(self, benzene):
        assert embed(benzene, Graph()) == []
        assert contains(benzene, Graph())

    def test_single_node_pattern(self, ethanol):
        pattern = build([OXYGEN], [])
        host, pattern = prepared(ethanol, pattern)

        embs = embed(host, pattern)
        assert [e.nodes for e in embs] == [(2,)]
        assert contains(host, pattern)
        assert not contains(host, build([NITROGEN], []))

    def test_wildcard_node(self, ethanol):
        pattern = Graph()
        pattern.add_node(CARBON)
        pattern.add_node_raw(WILDCARD)
        pattern.add_edge(0, 1, SINGLE)
        host, pattern = prepared(ethanol, pattern)

        embs = embed(host, pattern)
        assert len(embs) == 3
        for emb in embs:
            assert_replays(emb, pattern)

    def test_excluded_nodes_never_match(self, ethanol):
        ethanol.prepare()
        ethanol.nodes[2].mark = EXCLUDED
        ethanol.edges[1].mark = EXCLUDED
        pattern = build([CARBON, OXYGEN], [(0, 1, SINGLE)])
        assert pattern.prepare_embed()

        assert embed(ethanol, pattern) == []
        assert ethanol.nodes[2].mark == EXCLUDED

    def test_iter_embeddings_is_lazy(self, naphthalene):
        host, pattern = prepared(naphthalene, ring(6, CARBON, AROMATIC))
        it = iter_embeddings(host, pattern)

        first = next(it)
        assert_replays(first, pattern)

    def test_graph_shortcuts(self, benzene):
        pattern = build([CARBON, CARBON], [(0, 1, AROMATIC)])
        host, pattern = prepared(benzene, pattern)

        assert len(host.embed(pattern)) == 12
        assert host.contains(pattern)

    def test_embedding_hash_matches_pattern(self, ethanol):
        pattern = build([CARBON, OXYGEN], [(0, 1, SINGLE)])
        host, pattern = prepared(ethanol, pattern)

        (emb,) = embed(host, pattern)
        assert emb.hash_code() == pattern.hash_code()


class TestChains:
    @pytest.fixture
    def chain_pattern(self):
        pattern = Graph()
        pattern.add_node(NITROGEN)
        pattern.add_node_raw(CARBON | CHAIN)
        pattern.add_node(OXYGEN)
        pattern.add_edge(0, 1, SINGLE)
        pattern.add_edge(1, 2, SINGLE)
        return pattern

    @pytest.mark.parametrize("length", [1, 3, 5])
    def test_chain_matches_runs(self, chain_pattern, length):
        host = build(
            [NITROGEN] + [CARBON] * length + [OXYGEN],
            [(i, i + 1, SINGLE) for i in range(length + 1)],
        )
        host, pattern = prepared(host, chain_pattern)

        (emb,) = embed(host, pattern)

        assert emb.nodes == (0, length + 1)
        assert len(emb.edges) == 2
        sub = emb.to_graph()
        assert sub.node_count == length + 2
        assert sub.edge_count == length + 1
        assert_unmarked(host)

    def test_chain_needs_at_least_one_node(self, chain_pattern):
        host = build([NITROGEN, OXYGEN], [(0, 1, SINGLE)])
        host, pattern = prepared(host, chain_pattern)
        assert embed(host, pattern) == []

    def test_chain_stops_at_branch(self, chain_pattern):
        host = build(
            [NITROGEN, CARBON, CARBON, CARBON, OXYGEN],
            [(0, 1, SINGLE), (1, 2, SINGLE), (2, 3, SINGLE), (2, 4, SINGLE)],
        )
        host, pattern = prepared(host, chain_pattern)
        assert embed(host, pattern) == []

    def test_chain_in_carbon_ring_terminates(self):
        pattern = Graph()
        pattern.add_node(NITROGEN)
        pattern.add_node_raw(CARBON | CHAIN)
        pattern.add_node(NITROGEN)
        pattern.add_edge(0, 1, SINGLE)
        pattern.add_edge(1, 2, SINGLE)
        # N inside a five-ring: the carbon run leads back to the anchor
        host = build([NITROGEN] + [CARBON] * 4, [(i, (i + 1) % 5, SINGLE) for i in range(5)])
        host, pattern = prepared(host, pattern)

        assert embed(host, pattern) == []


class TestExtend:
    def test_extend_to_new_node(self, ethanol):
        ethanol.prepare()
        emb = Embedding(ethanol, (0, 1), (0,))

        (ext,) = extend(emb, 1, -1, SINGLE, OXYGEN)
        assert ext.nodes == (0, 1, 2)
        assert ext.edges == (0, 1)
        assert emb.edges == (0,)
        assert extend(emb, 0, -1, SINGLE, OXYGEN) == []

    def test_extend_closes_ring(self):
        host = ring(3)
        host.prepare()
        emb = Embedding(host, (0, 1, 2), (0, 1))

        (ext,) = emb.extend(2, 0, SINGLE, CARBON)
        assert ext.nodes == (0, 1, 2)
        assert ext.edges == (0, 1, 2)
        assert_unmarked(host)

    def test_common_prefix(self, ethanol):
        a = Embedding(ethanol, (0, 1, 2), (0, 1))
        b = Embedding(ethanol, (0, 1), (0,))
        c = Embedding(ethanol, (1, 0), (0,))

        assert a.common(b) == 1
        assert a.common(c) == -1

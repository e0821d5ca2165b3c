"""Pytest configuration and fixtures for fragmine tests."""

from typing import Sequence

import pytest

from fragmine import Graph

CARBON = 6
NITROGEN = 7
OXYGEN = 8

SINGLE = 0x01
AROMATIC = 0x07
DOUBLE = 0x0F


def build(node_types: Sequence[int], edges: Sequence[tuple]) -> Graph:
    """Create a graph from node types and ``(src, dst, type)`` triples."""
    graph = Graph()
    for t in node_types:
        graph.add_node(t)
    for src, dst, t in edges:
        graph.add_edge(src, dst, t)
    return graph


def ring(size: int, node_type: int = CARBON, edge_type: int = SINGLE) -> Graph:
    return build(
        [node_type] * size,
        [(i, (i + 1) % size, edge_type) for i in range(size)],
    )


def fan_of_triangles(count: int) -> Graph:
    """``count`` carbon triangles that all share node 0."""
    g = Graph()
    hub = g.add_node(CARBON)
    for _ in range(count):
        a, b = g.add_node(CARBON), g.add_node(CARBON)
        g.add_edge(hub, a, SINGLE)
        g.add_edge(a, b, SINGLE)
        g.add_edge(b, hub, SINGLE)
    return g


def assert_unmarked(graph: Graph) -> None:
    assert all(node.mark == -1 for node in graph.nodes)
    assert all(edge.mark == -1 for edge in graph.edges)


@pytest.fixture
def benzene() -> Graph:
    """c1ccccc1 with aromatic bonds."""
    return ring(6, CARBON, AROMATIC)


@pytest.fixture
def cyclohexane() -> Graph:
    """C1CCCCC1 with single bonds."""
    return ring(6, CARBON, SINGLE)


@pytest.fixture
def two_triangles() -> Graph:
    """Two carbon triangles joined by a single bridge edge."""
    return build(
        [CARBON] * 6,
        [
            (0, 1, SINGLE), (1, 2, SINGLE), (2, 0, SINGLE),
            (3, 4, SINGLE), (4, 5, SINGLE), (5, 3, SINGLE),
            (2, 3, SINGLE),
        ],
    )


@pytest.fixture
def bond() -> Graph:
    """Two carbons joined by one single bond."""
    return build([CARBON, CARBON], [(0, 1, SINGLE)])


@pytest.fixture
def ethanol() -> Graph:
    """C-C-O."""
    return build([CARBON, CARBON, OXYGEN], [(0, 1, SINGLE), (1, 2, SINGLE)])


@pytest.fixture
def naphthalene() -> Graph:
    """Two fused aromatic six-rings (10 carbons, 11 bonds)."""
    edges = [(i, i + 1, AROMATIC) for i in range(9)] + [(9, 0, AROMATIC), (4, 9, AROMATIC)]
    return build([CARBON] * 10, edges)

"""Overlap tests between embeddings and the overlap-graph support measure.

Two embeddings of the same pattern overlap if they share a host node. The
overlap is *harmful* if the shared part can be mapped onto itself by
combining one embedding with the inverse of the other, in a way that
leaves some node in the same connected component of the shared part.
Counting the maximum number of pairwise non-overlapping embeddings (a
maximum independent set of the overlap graph) gives an anti-monotone
support measure for mining a single large graph.
"""

from __future__ import annotations

from typing import Dict, List, Set

import networkx as nx

from ..core.embedding import Embedding
from ..utils.logging import get_logger

logger = get_logger(__name__)

__all__ = ["overlaps", "overlaps_harmfully", "OverlapGraph"]


def overlaps(e1: Embedding, e2: Embedding) -> bool:
    """Check whether two embeddings share at least one host node."""
    if e1.graph is not e2.graph:
        return False
    if any(a == b for a, b in zip(e1.nodes, e2.nodes)):
        return True
    return not set(e1.nodes).isdisjoint(e2.nodes)


def overlaps_harmfully(e1: Embedding, e2: Embedding) -> bool:
    """Check whether two embeddings of the same pattern overlap harmfully."""
    if e1.graph is not e2.graph:
        return False
    if any(a == b for a, b in zip(e1.nodes, e2.nodes)):
        return True
    shared = set(e1.edges).intersection(e2.edges)
    if not shared:
        return False
    host = e1.graph
    kept = [
        e1.edges[j]
        for j in range(len(e1.edges))
        if e1.edges[j] in shared and e2.edges[j] in shared
    ]
    # label the nodes of the kept subgraph with their slot in e1
    label: Dict[int, int] = {}
    slot = e1.slots()
    for e in kept:
        edge = host.edges[e]
        label[edge.src] = slot.get(edge.src, 0)
        label[edge.dst] = slot.get(edge.dst, 0)
    changed = True
    while changed:
        changed = False
        for e in kept:
            edge = host.edges[e]
            s, d = label[edge.src], label[edge.dst]
            if s < d:
                label[edge.dst] = s
                changed = True
            elif s > d:
                label[edge.src] = d
                changed = True
    for a, b in zip(e1.nodes, e2.nodes):
        k = label.get(b, -1)
        if k >= 0 and label.get(a, -1) == k:
            return True
    return False


class OverlapGraph:
    """Graph with one node per embedding and edges between overlapping ones.

    Parameters
    ----------
    harmful: bool, default False
        Connect only embeddings that overlap harmfully.
    """

    def __init__(self, harmful: bool = False) -> None:
        self.harmful = harmful
        self.embeddings: List[Embedding] = []
        self.graph = nx.Graph()

    def __len__(self) -> int:
        return len(self.embeddings)

    def clear(self) -> None:
        self.embeddings = []
        self.graph = nx.Graph()

    def add(self, embedding: Embedding) -> None:
        """Add an embedding and connect it to every overlapping one."""
        new = len(self.embeddings)
        self.graph.add_node(new)
        for i, other in enumerate(self.embeddings):
            if embedding.overlaps(other, self.harmful):
                self.graph.add_edge(i, new)
        self.embeddings.append(embedding)

    def mis_size(self, greedy: bool = False) -> int:
        """Size of a maximum independent set of the overlap graph.

        Isolated nodes and leaves are always selected first. The remaining
        components are solved exactly (as maximum cliques of their
        complements) or, with ``greedy=True``, by repeatedly selecting a
        node of minimum degree, which gives a lower bound.
        """
        n = len(self.embeddings)
        if n <= 1:
            return n
        rest = self.graph.copy()
        size = _select_safe(rest)
        for comp in nx.connected_components(rest):
            sub = rest.subgraph(comp).copy()
            if greedy:
                size += _greedy_mis(sub)
            else:
                _, weight = nx.max_weight_clique(nx.complement(sub), weight=None)
                size += weight
        logger.debug("MIS of %d embeddings: %d (greedy=%s)", n, size, greedy)
        return size


def _select_safe(graph: nx.Graph) -> int:
    """Select isolated nodes and leaves, removing them and their neighbours."""
    selected = 0
    queue: Set[int] = {v for v in graph if graph.degree(v) <= 1}
    while queue:
        v = queue.pop()
        if v not in graph or graph.degree(v) > 1:
            continue
        neighbours = list(graph.neighbors(v))
        graph.remove_node(v)
        selected += 1
        for u in neighbours:
            touched = list(graph.neighbors(u))
            graph.remove_node(u)
            queue.update(w for w in touched if graph.degree(w) <= 1)
    return selected


def _greedy_mis(graph: nx.Graph) -> int:
    selected = 0
    while graph.number_of_nodes() > 0:
        v = min(graph, key=graph.degree)
        graph.remove_nodes_from(list(graph.neighbors(v)) + [v])
        selected += 1
        selected += _select_safe(graph)
    return selected

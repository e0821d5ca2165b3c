"""Maximum common subgraph by branch-and-bound edit search.

The search looks for a mapping from the elements of the first graph to
the elements of the second graph that minimizes the number of deleted
nodes and edges on both sides (the edit cost). Two strategies are
registered: ``"edge"`` branches over the edges of the first graph, ``"node"``
over its nodes. Both abandon a branch as soon as the cost so far plus a
lower bound on the remaining cost cannot beat the best mapping found.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import List, Optional, Type

from .. import config
from ..core.graph import Graph
from ..registry import available_strategies
from .base import SearchStrategy, register

__all__ = [
    "MCSResult",
    "EdgeDrivenMCS",
    "NodeDrivenMCS",
    "max_common_subgraph",
    "get_mcs_strategy",
]


@dataclass
class MCSResult:
    """Outcome of a maximum common subgraph search.

    Parameters
    ----------
    cost: int
        Size (nodes + edges) of the smaller input graph minus the size of
        the common subgraph; 0 if one graph is contained in the other.
    edit_cost: int
        Number of nodes and edges of both graphs outside the mapping.
    node_map: List[int]
        For each node of the first graph its image in the second, or -1.
    edge_map: List[int]
        For each edge of the first graph its image in the second, or -1.
    graph: Graph
        The common subgraph, built from the mapped elements of the first
        graph.
    """

    cost: int
    edit_cost: int
    node_map: List[int] = field(default_factory=list)
    edge_map: List[int] = field(default_factory=list)
    graph: Optional[Graph] = None

    @property
    def size(self) -> int:
        """Number of nodes plus edges of the common subgraph."""
        return sum(1 for i in self.node_map if i >= 0) + sum(1 for i in self.edge_map if i >= 0)


class _MCSStrategy(SearchStrategy):
    """Shared state and bookkeeping of the two search strategies."""

    def run(self, g1: Graph, g2: Graph) -> MCSResult:  # type: ignore[override]
        self.g1, self.g2 = g1, g2
        self.nmap1 = [-1] * g1.node_count
        self.nmap2 = [-1] * g2.node_count
        self.emap1 = [-1] * g1.edge_count
        self.emap2 = [-1] * g2.edge_count
        self.best = sys.maxsize
        self.best_nodes: List[int] = [-1] * g1.node_count
        self.best_edges: List[int] = [-1] * g1.edge_count
        self.search()
        size = sum(1 for i in self.best_nodes if i >= 0) + sum(
            1 for i in self.best_edges if i >= 0
        )
        smaller = min(g1.node_count + g1.edge_count, g2.node_count + g2.edge_count)
        self.logger.debug(
            "MCS of %r and %r: %d common elements, edit cost %d", g1, g2, size, self.best
        )
        return MCSResult(
            cost=smaller - size,
            edit_cost=self.best,
            node_map=list(self.best_nodes),
            edge_map=list(self.best_edges),
            graph=self._subgraph(),
        )

    def search(self) -> None:
        raise NotImplementedError

    def record(self, cost: int) -> None:
        """Complete the cost of a full mapping and keep it if it is better."""
        if cost >= self.best:
            return
        cost += sum(1 for i in self.nmap2 if i < 0)
        cost += sum(1 for i in self.emap2 if i < 0)
        if cost >= self.best:
            return
        self.best = cost
        self.best_nodes = list(self.nmap1)
        self.best_edges = list(self.emap1)

    def map_nodes(self, n1: int, n2: int) -> None:
        self.nmap1[n1] = n2
        self.nmap2[n2] = n1

    def unmap_nodes(self, n1: int, n2: int) -> None:
        self.nmap1[n1] = -1
        self.nmap2[n2] = -1

    def map_edges(self, e1: int, e2: int) -> None:
        self.emap1[e1] = e2
        self.emap2[e2] = e1

    def unmap_edges(self, e1: int, e2: int) -> None:
        self.emap1[e1] = -1
        self.emap2[e2] = -1

    def _subgraph(self) -> Graph:
        g1 = self.g1
        sub = Graph(g1.node_types, g1.edge_types, g1.recoder)
        local = [-1] * g1.node_count
        for i, image in enumerate(self.best_nodes):
            if image >= 0:
                local[i] = sub.add_node_raw(g1.nodes[i].type)
        for i, image in enumerate(self.best_edges):
            if image >= 0:
                edge = g1.edges[i]
                sub.add_edge(local[edge.src], local[edge.dst], edge.type)
        return sub


@register
class EdgeDrivenMCS(_MCSStrategy):
    """Branch over the edges of the first graph."""

    name = "edge"

    def search(self) -> None:
        self._find(self.g1.edge_count, 0, self.g1.edge_count - self.g2.edge_count)

    def _match(self, n1: int, n2: int) -> bool:
        image = self.nmap1[n1]
        if image >= 0:
            return n2 == image
        return self.nmap2[n2] < 0 and self.g1.nodes[n1].type == self.g2.nodes[n2].type

    def _leaf(self, cost: int) -> None:
        g1, g2 = self.g1, self.g2
        paired = []
        for i, node in enumerate(g1.nodes):
            if self.nmap1[i] >= 0:
                continue
            for k, other in enumerate(g2.nodes):
                if self.nmap2[k] < 0 and other.type == node.type:
                    self.map_nodes(i, k)
                    paired.append((i, k))
                    break
            else:
                cost += 1
        self.record(cost)
        for i, k in paired:
            self.unmap_nodes(i, k)

    def _find(self, n: int, cost: int, lo: int) -> None:
        if cost + abs(lo) >= self.best:
            return
        if n <= 0:
            self._leaf(cost)
            return
        n -= 1
        g2 = self.g2
        e1 = self.g1.edges[n]
        for k, e2 in enumerate(g2.edges):
            if self.emap2[k] >= 0 or e2.type != e1.type:
                continue
            for s2, d2 in ((e2.src, e2.dst), (e2.dst, e2.src)):
                if not (self._match(e1.src, s2) and self._match(e1.dst, d2)):
                    continue
                self.map_edges(n, k)
                new_src = self.nmap1[e1.src] < 0
                if new_src:
                    self.map_nodes(e1.src, s2)
                new_dst = self.nmap1[e1.dst] < 0
                if new_dst:
                    self.map_nodes(e1.dst, d2)
                self._find(n, cost, lo)
                if new_src:
                    self.unmap_nodes(e1.src, s2)
                if new_dst:
                    self.unmap_nodes(e1.dst, d2)
                self.unmap_edges(n, k)
        self._find(n, cost + 1, lo - 1)


@register
class NodeDrivenMCS(_MCSStrategy):
    """Branch over the nodes of the first graph."""

    name = "node"

    def search(self) -> None:
        self._find(self.g1.node_count, 0, self.g1.node_count - self.g2.node_count)

    def _find(self, n: int, cost: int, lo: int) -> None:
        if cost + abs(lo) >= self.best:
            return
        if n <= 0:
            self.record(cost)
            return
        n -= 1
        g1, g2 = self.g1, self.g2
        n1 = g1.nodes[n]
        # nodes with a larger index have been processed already
        back = [e for e in n1.edges if g1.edges[e].other(n) > n]
        for i, n2 in enumerate(g2.nodes):
            if self.nmap2[i] >= 0 or n2.type != n1.type:
                continue
            self.map_nodes(n, i)
            mapped = []
            unmatched = 0
            for e in back:
                a2 = self.nmap1[g1.edges[e].other(n)]
                image = -1
                if a2 >= 0:
                    for f in n2.edges:
                        e2 = g2.edges[f]
                        if (
                            self.emap2[f] < 0
                            and e2.type == g1.edges[e].type
                            and e2.other(i) == a2
                        ):
                            image = f
                            break
                if image < 0:
                    unmatched += 1
                    continue
                self.map_edges(e, image)
                mapped.append((e, image))
            self._find(n, cost + unmatched, lo)
            for e, image in mapped:
                self.unmap_edges(e, image)
            self.unmap_nodes(n, i)
        self._find(n, cost + 1 + len(back), lo - 1)


def get_mcs_strategy(name: str) -> Type[SearchStrategy]:
    key = name.lower()
    try:
        return available_strategies[key]
    except KeyError:
        raise ValueError(
            f"Unknown MCS strategy '{name}'. "
            f"Available: {sorted(available_strategies.keys())}"
        )


def max_common_subgraph(
    g1: Graph,
    g2: Graph,
    by_node: bool = False,
    strategy: Optional[str] = None,
    verbose: bool = False,
) -> MCSResult:
    """Find a maximum common subgraph of two graphs.

    Parameters
    ----------
    g1, g2: Graph
        The graphs to compare; neither is modified.
    by_node: bool, default False
        Branch over nodes instead of edges.
    strategy: str, optional
        Name of a registered strategy; overrides ``by_node``. Defaults to
        ``config.MCS_STRATEGY`` (``"edge"``).
    verbose: bool, default False
        Log the search at DEBUG level.
    """
    if strategy is None:
        strategy = "node" if by_node else config.MCS_STRATEGY
    solver = get_mcs_strategy(strategy)(verbose=verbose)
    return solver.run(g1, g2)

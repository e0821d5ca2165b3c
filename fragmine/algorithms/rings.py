"""Ring and bridge detection.

Ring membership is stored per edge as a bit mask: every ring found gets a
bit that is not used by any edge touching the ring's nodes, so rings that
share a node can always be told apart. Only :data:`~fragmine.core.types.MAX_RINGS`
bits exist; if a ring cannot get one, the count returned by
:func:`mark_rings` is negated.

All search state is kept in local lists indexed by node and edge id; the
``mark`` fields of the graph are never touched.
"""

from __future__ import annotations

from typing import List

from .. import config
from ..core.graph import Graph
from ..core.types import BRIDGE, RING, RINGMASK
from ..errors import ParameterValidationError
from ..utils.logging import get_logger

logger = get_logger(__name__)

__all__ = ["mark_bridges", "mark_rings", "mark_pseudo_rings", "has_open_rings"]


def mark_bridges(graph: Graph) -> int:
    """Flag every bridge edge with ``BRIDGE`` and return their number.

    Uses the low-link depth-first search of Tarjan, run iteratively and
    restarted for every unvisited node, so disconnected graphs are fine.
    """
    for edge in graph.edges:
        edge.mark_bridge(False)
    n = graph.node_count
    disc = [-1] * n
    low = [0] * n
    clock = count = 0
    for root in range(n):
        if disc[root] >= 0:
            continue
        disc[root] = low[root] = clock
        clock += 1
        stack = [(root, -1, iter(graph.nodes[root].edges))]
        while stack:
            v, incoming, it = stack[-1]
            for e in it:
                if e == incoming:
                    continue
                w = graph.edges[e].other(v)
                if disc[w] < 0:
                    disc[w] = low[w] = clock
                    clock += 1
                    stack.append((w, e, iter(graph.nodes[w].edges)))
                    break
                if disc[w] < low[v]:
                    low[v] = disc[w]
            else:
                stack.pop()
                if not stack:
                    continue
                parent = stack[-1][0]
                if low[v] < low[parent]:
                    low[parent] = low[v]
                if low[v] > disc[parent]:
                    graph.edges[incoming].mark_bridge(True)
                    count += 1
    logger.debug("Marked %d bridges in %r", count, graph)
    return count


class _RingSearch:
    """Depth-first ring search over the edges that survive pruning."""

    def __init__(self, graph: Graph) -> None:
        self.graph = graph
        # 1: edge still active, 0: processed, -1: pruned away
        self.active = [0] * graph.edge_count
        # number of active incident edges per node
        self.live = [0] * graph.node_count
        self.visited = [False] * graph.node_count

    def activate(self, edges: List[int]) -> None:
        for e in edges:
            self.active[e] = 1
            edge = self.graph.edges[e]
            self.live[edge.src] += 1
            self.live[edge.dst] += 1

    def prune(self, node: int) -> None:
        """Remove the dead-end branch that ends at ``node``, if any."""
        graph, active, live = self.graph, self.active, self.live
        while live[node] == 1:
            live[node] = 0
            e = next(e for e in graph.nodes[node].edges if active[e] > 0)
            active[e] = -1
            node = graph.edges[e].other(node)
            live[node] -= 1

    def remove(self, e: int) -> None:
        edge = self.graph.edges[e]
        self.active[e] = 0
        self.live[edge.src] -= 1
        self.live[edge.dst] -= 1
        self.prune(edge.src)
        self.prune(edge.dst)

    def rings(self, node: int, e: int, term: int, used: int, lo: int, hi: int) -> int:
        """Find rings through edge ``e`` that lead back to ``term``.

        Returns the ring bits set on the path (or ``BRIDGE`` if a ring
        could not get a free bit).
        """
        graph = self.graph
        for f in graph.nodes[node].edges:
            used |= graph.edges[f].flags & RINGMASK
        lo -= 1
        hi -= 1
        edge = graph.edges[e]
        if node == term:
            if lo > 0:
                return 0
            free = ~used & RINGMASK
            if not free:
                return BRIDGE
            bit = free & -free
            edge.flags |= bit
            return bit
        if self.visited[node] or hi <= 0:
            return 0
        self.visited[node] = True
        found = 0
        for f in graph.nodes[node].edges:
            if self.active[f] <= 0 or f == e:
                continue
            found |= self.rings(graph.edges[f].other(node), f, term, used | found, lo, hi)
        self.visited[node] = False
        edge.flags |= found & RINGMASK
        return found


def _check_sizes(min_size: int, max_size: int) -> None:
    if min_size < 0 or max_size < 0:
        raise ParameterValidationError(
            f"Ring sizes must be non-negative, got [{min_size}, {max_size}]"
        )
    if max_size > config.RING_SIZE_LIMIT:
        raise ParameterValidationError(
            f"Maximum ring size {max_size} exceeds the limit {config.RING_SIZE_LIMIT}"
        )


def mark_rings(graph: Graph, min_size: int, max_size: int, typeflag: int = RING) -> int:
    """Mark all rings with ``min_size <= size <= max_size`` edges.

    Parameters
    ----------
    graph: Graph
        The graph to mark.
    min_size, max_size: int
        Ring size range (number of edges).
    typeflag: int, default RING
        Flag to set in the type of every edge that is part of a marked
        ring (and to clear elsewhere); 0 leaves the edge types alone.

    Returns
    -------
    int
        The number of marked rings, negated if some ring could not be
        marked because all ring bits were in use.
    """
    _check_sizes(min_size, max_size)
    for edge in graph.edges:
        edge.type &= ~typeflag
        edge.clear_rings()
    if typeflag:
        for node in graph.nodes:
            node.in_ring = False
    if max_size <= 0:
        return 0
    search = _RingSearch(graph)
    search.activate(list(range(graph.edge_count)))
    for node in range(graph.node_count):
        search.prune(node)
    count = 0
    failed = False
    for e in range(graph.edge_count - 1, -1, -1):
        if search.active[e] <= 0:
            continue
        edge = graph.edges[e]
        found = search.rings(edge.dst, e, edge.src, 0, min_size, max_size)
        failed |= (found & BRIDGE) != 0
        count += bin(found & RINGMASK).count("1")
        search.remove(e)
    if failed:
        logger.debug("Ran out of ring bits in %r", graph)
        count = -count
    if typeflag:
        _set_ring_flags(graph, typeflag)
    logger.debug("Marked %d rings of size %d..%d in %r", count, min_size, max_size, graph)
    return count


def _set_ring_flags(graph: Graph, typeflag: int) -> None:
    for edge in graph.edges:
        if edge.rings:
            edge.type |= typeflag
            graph.nodes[edge.src].in_ring = True
            graph.nodes[edge.dst].in_ring = True
        else:
            edge.type &= ~typeflag


def mark_pseudo_rings(graph: Graph, max_size: int) -> int:
    """Mark rings of up to ``max_size`` edges that consist of ring edges.

    Such pseudo-rings are smaller than the rings marked with
    :func:`mark_rings` (which must have been called before) and are made
    up of edges that already carry the ``RING`` flag. Returns the number
    of ring bits newly assigned.
    """
    _check_sizes(0, max_size)
    if max_size <= 0:
        return 0
    search = _RingSearch(graph)
    search.activate([e for e, edge in enumerate(graph.edges) if edge.is_in_ring()])
    count = 0
    for e in range(graph.edge_count - 1, -1, -1):
        if search.active[e] <= 0:
            continue
        edge = graph.edges[e]
        found = search.rings(edge.dst, e, edge.src, edge.rings, 0, max_size)
        count += bin(found & RINGMASK).count("1")
        search.remove(e)
    _set_ring_flags(graph, RING)
    return count


def has_open_rings(graph: Graph, min_size: int, max_size: int) -> bool:
    """Check for edges flagged ``RING`` that lie on no ring of this graph.

    Used on fragments: an edge that is part of a ring in the database
    graphs but not in the fragment belongs to a ring that is still open.
    """
    mark_rings(graph, min_size, max_size, 0)
    return any(edge.is_in_ring() and not edge.rings for edge in graph.edges)

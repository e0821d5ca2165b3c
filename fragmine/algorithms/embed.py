"""Enumerate the embeddings of a pattern graph into a host graph.

Both graphs must be prepared: the host with :meth:`Graph.prepare` and the
pattern with :meth:`Graph.prepare_embed`. The search walks the pattern's
edges in their (breadth-first) order. For every pattern edge one endpoint
is already mapped, so the candidates are the incident edges of its image,
which are sorted by edge type and neighbour type. That sort order lets the
scan skip smaller entries and stop at the first larger one.

A pattern node with the ``CHAIN`` flag stands for a run of one or more
host nodes of its base type, all of degree two, joined by edges of the
chain's edge type. The run is followed greedily until it reaches a node
that is already used, of another type or not of degree two.
"""

from __future__ import annotations

from typing import Iterator, List

from ..core.embedding import Embedding
from ..core.graph import Graph
from ..core.types import CHAIN, EXCLUDED, WILDCARD
from ..utils.logging import get_logger

logger = get_logger(__name__)

__all__ = ["iter_embeddings", "embed", "contains", "extend"]


class _Search:
    """Backtracking state for one embedding call."""

    def __init__(self, host: Graph, pattern: Graph) -> None:
        self.host = host
        self.pattern = pattern
        self.node_img = [-1] * pattern.node_count
        self.edge_img = [-1] * pattern.edge_count
        self.node_used = [False] * host.node_count
        self.edge_used = [False] * host.edge_count
        self.slot = [-1] * pattern.node_count
        self.slot_nodes: List[int] = []
        for i, node in enumerate(pattern.nodes):
            if not node.is_chain():
                self.slot[i] = len(self.slot_nodes)
                self.slot_nodes.append(i)

    # ------------------------------------------------------------------
    def run(self) -> Iterator[Embedding]:
        host, root = self.host, self.pattern.nodes[0]
        wildcard = root.type == WILDCARD
        for h, node in enumerate(host.nodes):
            if node.mark <= EXCLUDED:
                continue
            if not wildcard and node.type != root.type:
                continue
            if node.degree < root.degree:
                continue
            self._map_node(0, h)
            yield from self._edges(0)
            self._unmap_node(0, h)

    def _map_node(self, p: int, h: int) -> None:
        self.node_img[p] = h
        self.node_used[h] = True

    def _unmap_node(self, p: int, h: int) -> None:
        self.node_img[p] = -1
        self.node_used[h] = False

    def _emit(self) -> Embedding:
        nodes = [self.node_img[p] for p in self.slot_nodes]
        return Embedding(self.host, nodes, self.edge_img)

    def _free_node(self, h: int, p: int) -> bool:
        """Check whether host node ``h`` may become the image of ``p``."""
        node, pnode = self.host.nodes[h], self.pattern.nodes[p]
        if self.node_used[h] or node.mark <= EXCLUDED:
            return False
        if pnode.type != WILDCARD and node.type != pnode.type:
            return False
        return node.degree >= pnode.degree

    # ------------------------------------------------------------------
    def _edges(self, j: int) -> Iterator[Embedding]:
        pattern = self.pattern
        while j < pattern.edge_count and self.edge_img[j] >= 0:
            j += 1
        if j >= pattern.edge_count:
            yield self._emit()
            return
        pedge = pattern.edges[j]
        src, dst = pedge.src, pedge.dst
        if self.node_img[src] < 0 or (
            self.node_img[dst] >= 0 and self.slot[src] > self.slot[dst]
        ):
            src, dst = dst, src
        if pattern.nodes[dst].is_chain():
            yield from self._chain(j, src, dst)
        else:
            yield from self._edge(j, src, dst)

    def _candidates(self, hs: int, etype: int, ntype: int) -> Iterator[int]:
        """Yield unused incident edges of ``hs`` matching the given types."""
        host = self.host
        for e in host.nodes[hs].edges:
            edge = host.edges[e]
            if self.edge_used[e] or edge.mark <= EXCLUDED:
                continue
            if edge.type < etype:
                continue
            if edge.type > etype:
                break
            if ntype != WILDCARD:
                t = host.nodes[edge.other(hs)].type
                if t < ntype:
                    continue
                if t > ntype:
                    break
            yield e

    def _edge(self, j: int, src: int, dst: int) -> Iterator[Embedding]:
        host = self.host
        hs = self.node_img[src]
        mapped = self.node_img[dst]
        for e in self._candidates(hs, self.pattern.edges[j].type, self.pattern.nodes[dst].type):
            hd = host.edges[e].other(hs)
            if mapped >= 0:
                if hd != mapped:
                    continue
            elif not self._free_node(hd, dst):
                continue
            self.edge_img[j] = e
            self.edge_used[e] = True
            if mapped < 0:
                self._map_node(dst, hd)
            yield from self._edges(j + 1)
            if mapped < 0:
                self._unmap_node(dst, hd)
            self.edge_used[e] = False
            self.edge_img[j] = -1

    def _chain(self, j: int, src: int, chain: int) -> Iterator[Embedding]:
        host, pattern = self.host, self.pattern
        cnode = pattern.nodes[chain]
        if cnode.degree != 2:
            return
        ctype = cnode.type & ~CHAIN
        k = cnode.edges[0] if cnode.edges[1] == j else cnode.edges[1]
        far = pattern.edges[k].other(chain)
        ktype = pattern.edges[k].type
        etype = pattern.edges[j].type
        hs = self.node_img[src]
        for e in self._candidates(hs, etype, ctype):
            first = host.edges[e].other(hs)
            if not self._run_node(first, ctype):
                continue
            interior = [first]
            self.node_used[first] = True
            cur, prev = first, e
            while True:
                inc = host.nodes[cur].edges
                x = inc[0] if inc[1] == prev else inc[1]
                nxt = host.edges[x].other(cur)
                if (
                    host.edges[x].type == etype
                    and not self.edge_used[x]
                    and host.edges[x].mark > EXCLUDED
                    and self._run_node(nxt, ctype)
                ):
                    interior.append(nxt)
                    self.node_used[nxt] = True
                    cur, prev = nxt, x
                    continue
                break
            yield from self._close_chain(j, e, k, x, nxt, far, ktype)
            for h in interior:
                self.node_used[h] = False

    def _run_node(self, h: int, ctype: int) -> bool:
        node = self.host.nodes[h]
        return (
            not self.node_used[h]
            and node.mark > EXCLUDED
            and node.type == ctype
            and node.degree == 2
        )

    def _close_chain(
        self, j: int, first: int, k: int, x: int, end: int, far: int, ktype: int
    ) -> Iterator[Embedding]:
        """Map the chain edges ``j`` and ``k`` to the host edges ``first`` and ``x``."""
        host = self.host
        if self.edge_used[x] or host.edges[x].mark <= EXCLUDED:
            return
        if host.edges[x].type != ktype:
            return
        mapped = self.node_img[far]
        if mapped >= 0:
            if end != mapped:
                return
        elif not self._free_node(end, far):
            return
        self.edge_img[j], self.edge_img[k] = first, x
        self.edge_used[first] = self.edge_used[x] = True
        if mapped < 0:
            self._map_node(far, end)
        yield from self._edges(j + 1)
        if mapped < 0:
            self._unmap_node(far, end)
        self.edge_used[first] = self.edge_used[x] = False
        self.edge_img[j] = self.edge_img[k] = -1


def iter_embeddings(host: Graph, pattern: Graph) -> Iterator[Embedding]:
    """Yield all embeddings of ``pattern`` into ``host``."""
    if pattern.node_count <= 0:
        return
    if pattern.node_count == 1:
        ptype = pattern.nodes[0].type
        for h, node in enumerate(host.nodes):
            if node.mark <= EXCLUDED:
                continue
            if ptype == WILDCARD or node.type == ptype:
                yield Embedding(host, (h,))
        return
    if pattern.node_count > host.node_count or pattern.edge_count > host.edge_count:
        return
    yield from _Search(host, pattern).run()


def embed(host: Graph, pattern: Graph) -> List[Embedding]:
    """Return all embeddings of ``pattern`` into ``host`` as a list."""
    result = list(iter_embeddings(host, pattern))
    logger.debug("Found %d embeddings of %r in %r", len(result), pattern, host)
    return result


def contains(host: Graph, pattern: Graph) -> bool:
    """Check whether ``host`` contains ``pattern`` (an empty one always)."""
    if pattern.node_count <= 0:
        return True
    for _ in iter_embeddings(host, pattern):
        return True
    return False


def extend(
    embedding: Embedding, src: int, dst: int, edge_type: int, node_type: int
) -> List[Embedding]:
    """Extend an embedding by one edge in every possible way.

    Parameters
    ----------
    embedding: Embedding
        The embedding to extend.
    src: int
        Slot of the source node of the new edge.
    dst: int
        Slot of the destination node, or ``-1`` for a node that is not
        yet part of the embedding.
    edge_type, node_type: int
        Types of the new edge and its destination node.
    """
    host = embedding.graph
    slots = embedding.slots()
    used = set(embedding.edges)
    s = embedding.nodes[src]
    result = []
    for e in host.nodes[s].edges:
        edge = host.edges[e]
        if e in used or edge.mark <= EXCLUDED:
            continue
        if edge.type < edge_type:
            continue
        if edge.type > edge_type:
            break
        d = edge.other(s)
        t = host.nodes[d].type
        if t < node_type:
            continue
        if t > node_type:
            break
        if slots.get(d, -1) != dst or host.nodes[d].mark <= EXCLUDED:
            continue
        result.append(embedding.extended_by(e, d if dst < 0 else -1))
    return result

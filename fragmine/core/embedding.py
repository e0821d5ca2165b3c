"""Embeddings of a pattern graph into a host graph."""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from .graph import Graph, structure_hash


class Embedding:
    """One occurrence of a pattern in a host graph.

    Parameters
    ----------
    graph: Graph
        The host graph.
    nodes: Sequence[int]
        Host node ids, one per non-chain pattern node, in pattern order.
    edges: Sequence[int]
        Host edge ids, one per pattern edge, in pattern order.

    Embeddings are immutable; :meth:`extended_by` returns a new one.
    """

    __slots__ = ("graph", "nodes", "edges")

    def __init__(self, graph: Graph, nodes: Sequence[int], edges: Sequence[int] = ()) -> None:
        self.graph = graph
        self.nodes: Tuple[int, ...] = tuple(nodes)
        self.edges: Tuple[int, ...] = tuple(edges)

    def __len__(self) -> int:
        return len(self.nodes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Embedding):
            return NotImplemented
        return (
            self.graph is other.graph
            and self.nodes == other.nodes
            and self.edges == other.edges
        )

    def __hash__(self) -> int:
        return hash((id(self.graph), self.nodes, self.edges))

    def __repr__(self) -> str:
        return f"Embedding(nodes={list(self.nodes)}, edges={list(self.edges)})"

    def extended_by(self, edge: int, node: int = -1) -> "Embedding":
        """Return a copy with one more edge (and node, if ``node >= 0``)."""
        nodes = self.nodes + (node,) if node >= 0 else self.nodes
        return Embedding(self.graph, nodes, self.edges + (edge,))

    # ------------------------------------------------------------------
    # markers in the host graph
    # ------------------------------------------------------------------
    def mark(self, value: int = -1) -> None:
        """Set the host markers of the embedded nodes and edges."""
        for i in self.nodes:
            self.graph.nodes[i].mark = value
        for i in self.edges:
            self.graph.edges[i].mark = value

    def index(self) -> None:
        """Set the host markers of the embedded elements to their slots."""
        for slot, i in enumerate(self.nodes):
            self.graph.nodes[i].mark = slot
        for slot, i in enumerate(self.edges):
            self.graph.edges[i].mark = slot

    def slots(self) -> Dict[int, int]:
        """Map each embedded host node to its slot."""
        return {node: slot for slot, node in enumerate(self.nodes)}

    # ------------------------------------------------------------------
    # comparison
    # ------------------------------------------------------------------
    def common(self, other: "Embedding") -> int:
        """Length of the common edge prefix, -1 if the roots differ."""
        if self.nodes[0] != other.nodes[0]:
            return -1
        n = min(len(self.edges), len(other.edges))
        for i in range(n):
            if self.edges[i] != other.edges[i]:
                return i
        return n

    def overlaps(self, other: "Embedding", harmful: bool = False) -> bool:
        from ..algorithms.overlap import overlaps, overlaps_harmfully

        if harmful:
            return overlaps_harmfully(self, other)
        return overlaps(self, other)

    def extend(self, src: int, dst: int, edge_type: int, node_type: int) -> List["Embedding"]:
        from ..algorithms.embed import extend

        return extend(self, src, dst, edge_type, node_type)

    def hash_code(self) -> int:
        """Structural hash of the embedded subgraph.

        Equals :meth:`Graph.hash_code` of the pattern for embeddings of
        patterns without chain nodes.
        """
        host = self.graph
        edge_set = set(self.edges)
        count: Dict[int, int] = {}
        for e in self.edges:
            edge = host.edges[e]
            count[edge.src] = count.get(edge.src, 0) + 1
            count[edge.dst] = count.get(edge.dst, 0) + 1

        def node_items():
            for i in self.nodes:
                node = host.nodes[i]
                incident = []
                for e in node.edges:
                    if e not in edge_set:
                        continue
                    o = host.edges[e].other(i)
                    incident.append((host.edges[e].type, host.nodes[o].type, count[o]))
                yield (node.type, count.get(i, 0), incident)

        def edge_items():
            for e in self.edges:
                edge = host.edges[e]
                s, d = host.nodes[edge.src], host.nodes[edge.dst]
                yield (s.type, count[edge.src], d.type, count[edge.dst], edge.type)

        # every chain leaves two edge ends outside the node tuple
        total = sum(count.get(i, 0) for i in self.nodes)
        chains = len(self.edges) - total // 2
        return structure_hash(
            node_items(), edge_items(), len(self.nodes) + max(chains, 0), len(self.edges)
        )

    # ------------------------------------------------------------------
    # conversion
    # ------------------------------------------------------------------
    def to_graph(self) -> Graph:
        """Build a new graph from the embedded part of the host.

        Host nodes in the interior of an embedded chain are included,
        together with the host edges that join them.
        """
        host = self.graph
        sub = Graph(host.node_types, host.edge_types, host.recoder)
        local: Dict[int, int] = {}
        for i in self.nodes:
            local[i] = sub.add_node_raw(host.nodes[i].type)
        edges = list(self.edges)
        recorded = set(edges)
        for e in self.edges:
            edge = host.edges[e]
            for end in (edge.src, edge.dst):
                if end in local:
                    continue
                # walk the chain interior until the next recorded edge
                cur, prev = end, e
                while cur not in local:
                    local[cur] = sub.add_node_raw(host.nodes[cur].type)
                    nxt = [f for f in host.nodes[cur].edges if f != prev]
                    if not nxt or nxt[0] in recorded:
                        break
                    prev = nxt[0]
                    edges.append(prev)
                    recorded.add(prev)
                    cur = host.edges[prev].other(cur)
        for e in edges:
            edge = host.edges[e]
            sub.add_edge(local[edge.src], local[edge.dst], edge.type, flags=edge.flags)
        return sub

"""Attributed graph container used throughout *fragmine*.

A :class:`Graph` owns two parallel lists, ``nodes`` and ``edges``. Nodes
and edges are identified by their position in these lists:

- a :class:`Node` stores its integer ``type`` and the ids of its incident
  edges,
- an :class:`Edge` stores the ids of its two endpoints, its ``type`` and a
  ``flags`` word holding the bridge bit and the ring-membership bits.

Everything else (embeddings, maximum common subgraph maps) refers to graph
elements only by id. Both element kinds also carry a public ``mark``
field. Its baseline value is ``-1``; values ``<= -2`` flag an element as
excluded (see :meth:`Graph.trim`). The algorithms in
:mod:`fragmine.algorithms` keep their scratch state in local arrays and
never leave anything behind in ``mark``.

Example usage::

    >>> from fragmine.core.graph import Graph
    >>> g = Graph()
    >>> c = g.add_node(6)
    >>> o = g.add_node(8)
    >>> g.add_edge(c, o, 2)
    0
    >>> g.prepare_embed()
    True

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Any,
    Iterable,
    List,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from ..errors import GraphInputError, ParameterValidationError
from .recoder import Recoder
from .types import (
    BASEMASK,
    BRIDGE,
    CHAIN,
    EXCLUDED,
    FLAGMASK,
    RING,
    RINGMASK,
    UNMARKED,
    WILDCARD,
    TypeManager,
)

if TYPE_CHECKING:
    import networkx

    from .canonical import CanonicalForm
    from .embedding import Embedding

TypeLike = Union[int, str]

_U32 = 0xFFFFFFFF


@dataclass(eq=False)
class Node:
    """A node of an attributed graph.

    Parameters
    ----------
    type: int
        Type code including the flag bits (see :mod:`fragmine.core.types`).
    edges: List[int]
        Ids of the incident edges, in the graph's current order.
    mark: int
        Public marker, ``-1`` by default, ``<= -2`` for excluded nodes.
    in_ring: bool
        Whether the node is incident to a marked ring edge.
    orbit: int
        Orbit representative, maintained by a canonical form if any.
    """

    type: int
    edges: List[int] = field(default_factory=list)
    mark: int = UNMARKED
    in_ring: bool = False
    orbit: int = 0

    @property
    def degree(self) -> int:
        return len(self.edges)

    @property
    def base_type(self) -> int:
        return self.type & BASEMASK

    def is_special(self) -> bool:
        return (self.type & FLAGMASK) != 0

    def is_wildcard(self) -> bool:
        return (self.type & WILDCARD) != 0

    def is_chain(self) -> bool:
        return (self.type & CHAIN) != 0

    def mask_type(self, mask: int) -> None:
        self.type &= mask | FLAGMASK


@dataclass(eq=False)
class Edge:
    """An undirected edge between the nodes ``src`` and ``dst``."""

    src: int
    dst: int
    type: int
    mark: int = UNMARKED
    flags: int = 0

    def other(self, node: int) -> int:
        """Return the endpoint that is not ``node``."""
        return self.dst if self.src == node else self.src

    @property
    def base_type(self) -> int:
        return self.type & BASEMASK

    @property
    def rings(self) -> int:
        """The ring-membership bits of the edge."""
        return self.flags & RINGMASK

    def clear_rings(self) -> None:
        self.flags &= ~RINGMASK

    def is_bridge(self) -> bool:
        return (self.flags & BRIDGE) != 0

    def mark_bridge(self, bridge: bool) -> None:
        if bridge:
            self.flags |= BRIDGE
        else:
            self.flags &= ~BRIDGE

    def is_in_ring(self) -> bool:
        return (self.type & RING) != 0

    def mark_ring(self, ring: bool) -> None:
        if ring:
            self.type |= RING
        else:
            self.type &= ~RING

    def is_wildcard(self) -> bool:
        return (self.type & WILDCARD) != 0

    def mask_type(self, mask: int) -> None:
        self.type &= mask | FLAGMASK


def structure_hash(
    nodes: Iterable[Tuple[int, int, Sequence[Tuple[int, int, int]]]],
    edges: Iterable[Tuple[int, int, int, int, int]],
    node_count: int,
    edge_count: int,
) -> int:
    """Combine node/edge types and local degrees into a 31-bit hash.

    ``nodes`` yields ``(type, degree, incident)`` where ``incident`` lists
    ``(edge_type, neighbour_type, neighbour_degree)`` triples; ``edges``
    yields ``(src_type, src_degree, dst_type, dst_degree, edge_type)``.
    The value does not depend on the order of nodes or edges, so graphs
    that are equal up to renumbering always collide.
    """
    h = s = 0
    for ntype, degree, incident in nodes:
        t = (ntype + degree) & _U32
        for etype, otype, odegree in incident:
            u = ((otype & ~CHAIN) ^ odegree) & _U32
            t = (t + (ntype ^ ((u + etype) & _U32))) & _U32
        h ^= (t ^ (t << 9) ^ (t << 15)) & _U32
        s = (s + t) & _U32
    for stype, sdeg, dtype, ddeg, etype in edges:
        t = ((stype & ~CHAIN) ^ sdeg) & _U32
        u = ((dtype & ~CHAIN) ^ ddeg) & _U32
        t = (t + u + (t & u) + (t | u) + (t ^ u)) & _U32
        h ^= (t ^ (t << 11) ^ (t << 19)) & _U32
        t = (t + etype) & _U32
        s = (s + t) & _U32
        h ^= (t ^ (t << 7) ^ (t << 17)) & _U32
    h ^= node_count ^ edge_count
    s = (s + node_count + edge_count) & _U32
    h = (h ^ s ^ (s << 15)) & _U32
    if h & 0x80000000:
        h ^= _U32
    return h


class Graph:
    """An undirected attributed graph.

    Parameters
    ----------
    node_types: TypeManager, optional
        Maps node type names to codes; needed to add nodes by name.
    edge_types: TypeManager, optional
        Maps edge type names to codes; needed to add edges by name.
    recoder: Recoder, optional
        If set, node types passed to :meth:`add_node` are encoded with it.
    """

    def __init__(
        self,
        node_types: Optional[TypeManager] = None,
        edge_types: Optional[TypeManager] = None,
        recoder: Optional[Recoder] = None,
    ) -> None:
        self.nodes: List[Node] = []
        self.edges: List[Edge] = []
        self.node_types = node_types
        self.edge_types = edge_types
        self.recoder = recoder

    # ------------------------------------------------------------------
    # construction
    # ------------------------------------------------------------------
    def _resolve(self, value: TypeLike, manager: Optional[TypeManager], kind: str) -> int:
        if isinstance(value, str):
            if manager is None:
                raise GraphInputError(f"No {kind} type manager to resolve '{value}'")
            return manager.code(value)
        return int(value)

    def add_node_raw(self, type_: TypeLike) -> int:
        """Add a node without encoding its type; return its id."""
        self.nodes.append(Node(self._resolve(type_, self.node_types, "node")))
        return len(self.nodes) - 1

    def add_node(self, type_: TypeLike) -> int:
        """Add a node, encoding the type with the recoder if there is one."""
        code = self._resolve(type_, self.node_types, "node")
        if self.recoder is not None and not (code & FLAGMASK):
            code = self.recoder.encode(code)
        return self.add_node_raw(code)

    def add_edge(self, src: int, dst: int, type_: TypeLike, flags: int = 0) -> int:
        """Add an undirected edge between two existing nodes; return its id.

        Raises
        ------
        GraphInputError
            If either node id is unknown or ``src == dst``.
        """
        n = len(self.nodes)
        if not (0 <= src < n and 0 <= dst < n):
            raise GraphInputError(
                f"Both nodes must exist in the graph before adding an edge: {src}, {dst}"
            )
        if src == dst:
            raise GraphInputError("Self loops are not supported.")
        eid = len(self.edges)
        self.edges.append(Edge(src, dst, self._resolve(type_, self.edge_types, "edge"), flags=flags))
        self.nodes[src].edges.append(eid)
        self.nodes[dst].edges.append(eid)
        return eid

    def clear(self) -> None:
        """Remove all nodes and edges (and the recoder)."""
        self.nodes = []
        self.edges = []
        self.recoder = None

    def optimize(self) -> None:
        """Release over-allocated list storage after the graph is built."""
        for node in self.nodes:
            node.edges = node.edges[:]
        self.nodes = self.nodes[:]
        self.edges = self.edges[:]

    # ------------------------------------------------------------------
    # access
    # ------------------------------------------------------------------
    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    def number_of_nodes(self) -> int:
        return len(self.nodes)

    def number_of_edges(self) -> int:
        return len(self.edges)

    def node_type(self, index: int) -> int:
        """Type of a node, decoded with the recoder if necessary."""
        node = self.nodes[index]
        if node.is_special() or self.recoder is None:
            return node.type
        return self.recoder.decode(node.type)

    def node_type_raw(self, index: int) -> int:
        return self.nodes[index].type

    def edge_type(self, index: int) -> int:
        return self.edges[index].type

    def neighbour(self, edge: int, node: int) -> int:
        return self.edges[edge].other(node)

    def iter_edges(self) -> Iterable[Tuple[int, int, int]]:
        """Yield ``(src, dst, type)`` for every edge."""
        for edge in self.edges:
            yield (edge.src, edge.dst, edge.type)

    # ------------------------------------------------------------------
    # markers and types
    # ------------------------------------------------------------------
    def mark(self, value: int = UNMARKED) -> None:
        """Set all markers to ``value``, except those of excluded elements."""
        for node in self.nodes:
            if node.mark >= UNMARKED:
                node.mark = value
        for edge in self.edges:
            if edge.mark >= UNMARKED:
                edge.mark = value

    def index(self) -> None:
        """Set the marker of every non-excluded element to its id."""
        for i, node in enumerate(self.nodes):
            if node.mark >= UNMARKED:
                node.mark = i
        for i, edge in enumerate(self.edges):
            if edge.mark >= UNMARKED:
                edge.mark = i

    def encode(self, recoder: Recoder) -> None:
        for node in self.nodes:
            node.type = recoder.encode(node.type & BASEMASK) | (node.type & FLAGMASK)
        self.recoder = recoder

    def decode(self) -> None:
        if self.recoder is None:
            return
        for node in self.nodes:
            node.type = self.recoder.decode(node.type & BASEMASK) | (node.type & FLAGMASK)
        self.recoder = None

    def mask_types(self, masks: Sequence[int]) -> None:
        """Mask node and edge types.

        ``masks`` holds four masks: for nodes, for edges, for nodes that
        are incident to a ring edge, and for ring edges. Flag bits are
        never masked away.
        """
        if len(masks) != 4:
            raise ParameterValidationError("mask_types() expects four masks")
        for edge in self.edges:
            edge.mask_type(masks[3] if edge.is_in_ring() else masks[1])
        for node in self.nodes:
            ring = any(self.edges[e].is_in_ring() for e in node.edges)
            node.mask_type(masks[2] if ring else masks[0])

    def trim(self, remove: bool = False) -> bool:
        """Flag (and optionally delete) nodes whose type the recoder excludes.

        Excluded nodes and their incident edges get the marker
        ``EXCLUDED``; the embedding functions never match them. With
        ``remove=True`` they are deleted and the remaining elements are
        renumbered. Returns whether any node was excluded.
        """
        if self.recoder is None:
            return False
        excluded = 0
        for node in self.nodes:
            if node.is_special() or not self.recoder.is_excluded(node.type):
                continue
            node.mark = EXCLUDED
            excluded += 1
            for e in node.edges:
                self.edges[e].mark = EXCLUDED
        if excluded <= 0:
            return False
        if remove:
            self._rebuild(
                [i for i, n in enumerate(self.nodes) if n.mark > EXCLUDED],
                [i for i, e in enumerate(self.edges) if e.mark > EXCLUDED],
            )
        return True

    # ------------------------------------------------------------------
    # structure
    # ------------------------------------------------------------------
    def _rebuild(self, node_order: Sequence[int], edge_order: Sequence[int]) -> None:
        """Keep only the given elements, in the given order, and renumber."""
        node_id = [-1] * len(self.nodes)
        for new, old in enumerate(node_order):
            node_id[old] = new
        edge_id = [-1] * len(self.edges)
        for new, old in enumerate(edge_order):
            edge_id[old] = new
        nodes = [self.nodes[old] for old in node_order]
        edges = [self.edges[old] for old in edge_order]
        for edge in edges:
            edge.src = node_id[edge.src]
            edge.dst = node_id[edge.dst]
        for node in nodes:
            node.edges = [edge_id[e] for e in node.edges if edge_id[e] >= 0]
        self.nodes = nodes
        self.edges = edges

    def _components(self) -> Tuple[List[int], int]:
        comp = [-1] * len(self.nodes)
        count = 0
        for root in range(len(self.nodes)):
            if comp[root] >= 0:
                continue
            comp[root] = count
            stack = [root]
            while stack:
                v = stack.pop()
                for e in self.nodes[v].edges:
                    w = self.edges[e].other(v)
                    if comp[w] < 0:
                        comp[w] = count
                        stack.append(w)
            count += 1
        return comp, count

    def is_connected(self) -> bool:
        if len(self.nodes) <= 1:
            return True
        return self._components()[1] <= 1

    def split(self) -> List["Graph"]:
        """Split the graph into its connected components.

        Returns ``[self]`` if the graph has at most one component,
        otherwise one new graph per component (in order of the component's
        first node), sharing the type managers and the recoder.
        """
        if len(self.nodes) <= 1:
            return [self]
        comp, count = self._components()
        if count <= 1:
            return [self]
        parts = [self._empty_like() for _ in range(count)]
        local = [0] * len(self.nodes)
        for i, node in enumerate(self.nodes):
            part = parts[comp[i]]
            local[i] = part.add_node_raw(node.type)
            clone = part.nodes[local[i]]
            clone.mark, clone.in_ring, clone.orbit = node.mark, node.in_ring, node.orbit
        for edge in self.edges:
            part = parts[comp[edge.src]]
            eid = part.add_edge(local[edge.src], local[edge.dst], edge.type, flags=edge.flags)
            part.edges[eid].mark = edge.mark
        return parts

    def _empty_like(self) -> "Graph":
        return Graph(self.node_types, self.edge_types, self.recoder)

    def copy(self) -> "Graph":
        """Return an independent copy (markers and flags included)."""
        clone = self._empty_like()
        clone.nodes = [
            Node(n.type, list(n.edges), n.mark, n.in_ring, n.orbit) for n in self.nodes
        ]
        clone.edges = [Edge(e.src, e.dst, e.type, e.mark, e.flags) for e in self.edges]
        return clone

    def extended(self, src: int, dst: int, edge_type: int, node_type: int = 0) -> "Graph":
        """Return a copy of the graph extended by one edge.

        If ``dst`` equals the current node count a new node of type
        ``node_type`` is created as the destination.
        """
        clone = self.copy()
        if dst >= len(self.nodes):
            dst = clone.add_node_raw(node_type)
        clone.add_edge(src, dst, edge_type)
        return clone

    # ------------------------------------------------------------------
    # preparation for embedding
    # ------------------------------------------------------------------
    def _edge_key(self, node: int):
        edges, nodes = self.edges, self.nodes

        def key(e: int) -> Tuple[int, int, int]:
            edge = edges[e]
            return (edge.type, nodes[edge.other(node)].type, edge.mark)

        return key

    def prepare(self) -> None:
        """Reset the markers and sort the incident edges of every node.

        Afterwards each node's edge list is sorted ascending by edge type,
        then by the type of the node at the other end. The embedding
        functions rely on this order to stop scanning early.
        """
        self.mark(UNMARKED)
        for i, node in enumerate(self.nodes):
            node.edges.sort(key=self._edge_key(i))

    def prepare_embed(self) -> bool:
        """Prepare a graph for being embedded into other graphs.

        Sorts the incident edges and reorders nodes and edges into a
        breadth-first order starting at the first node of minimal type,
        so that every edge has an endpoint that precedes it. Returns
        False (and keeps the order) if the graph is not connected.
        """
        self.prepare()
        n = len(self.nodes)
        if n <= 0:
            return True
        root = 0
        for i in range(1, n):
            if self.nodes[i].type < self.nodes[root].type:
                root = i
        node_order = [root]
        node_seen = [False] * n
        node_seen[root] = True
        edge_order: List[int] = []
        edge_seen = [False] * len(self.edges)
        pos = 0
        while pos < len(node_order):
            v = node_order[pos]
            pos += 1
            for e in self.nodes[v].edges:
                if edge_seen[e]:
                    continue
                edge_seen[e] = True
                edge_order.append(e)
                w = self.edges[e].other(v)
                if not node_seen[w]:
                    node_seen[w] = True
                    node_order.append(w)
        if len(node_order) < n:
            return False
        self._rebuild(node_order, edge_order)
        return True

    # ------------------------------------------------------------------
    # comparison
    # ------------------------------------------------------------------
    def hash_code(self) -> int:
        """Structural hash over node/edge types and degrees."""
        nodes, edges = self.nodes, self.edges

        def node_items():
            for i, node in enumerate(nodes):
                if node.is_chain():
                    continue
                incident = []
                for e in node.edges:
                    other = nodes[edges[e].other(i)]
                    incident.append((edges[e].type, other.type, other.degree))
                yield (node.type, node.degree, incident)

        def edge_items():
            for edge in edges:
                s, d = nodes[edge.src], nodes[edge.dst]
                yield (s.type, s.degree, d.type, d.degree, edge.type)

        return structure_hash(node_items(), edge_items(), len(nodes), len(edges))

    def same_structure(self, other: "Graph") -> bool:
        """Check whether two graphs are isomorphic (respecting types).

        Compares the counts and hash codes first and only then runs an
        exact containment test. This graph is prepared in place; the other
        graph is left untouched.
        """
        if other is self:
            return True
        if len(self.nodes) != len(other.nodes) or len(self.edges) != len(other.edges):
            return False
        if self.hash_code() != other.hash_code():
            return False
        pattern = other.copy()
        if not pattern.prepare_embed():
            return False
        self.prepare()
        return self.contains(pattern)

    def equals_canonic(self, other: Optional["Graph"]) -> bool:
        """Compare the code words implied by the current element order.

        Equivalent to :meth:`same_structure` if both graphs were made
        canonic with the same canonical form, independent of its order
        rule.
        """
        if other is self:
            return True
        if other is None:
            return False
        if len(self.nodes) != len(other.nodes) or len(self.edges) != len(other.edges):
            return False
        if not self.nodes:
            return True
        if self.nodes[0].type != other.nodes[0].type:
            return False
        for e1, e2 in zip(self.edges, other.edges):
            if e1.type != e2.type:
                return False
            s1, d1 = sorted((e1.src, e1.dst))
            s2, d2 = sorted((e2.src, e2.dst))
            if (s1, d1) != (s2, d2):
                return False
            if self.nodes[s1].type != other.nodes[s2].type:
                return False
            if self.nodes[d1].type != other.nodes[d2].type:
                return False
        return True

    def make_canonic(self, cnf: "CanonicalForm") -> bool:
        """Reorder nodes and edges with a canonical form; return if changed."""
        before = self._type_multiset()
        changed = cnf.make_canonic(self)
        assert self._type_multiset() == before, "canonical form changed the graph"
        return changed

    def is_canonic(self, cnf: "CanonicalForm") -> bool:
        return cnf.is_canonic(self)

    def normalize(self, cnf: "CanonicalForm") -> None:
        """Make the graph canonic and sort incident edges by edge id too."""
        self.make_canonic(cnf)
        self.mark(UNMARKED)
        for i, node in enumerate(self.nodes):
            key = self._edge_key(i)
            node.edges.sort(key=lambda e: (key(e)[:2], e))

    def _type_multiset(self) -> Tuple[List[int], List[Tuple[int, int, int]]]:
        nodes = sorted(n.type for n in self.nodes)
        edges = sorted(
            (e.type, *sorted((self.nodes[e.src].type, self.nodes[e.dst].type)))
            for e in self.edges
        )
        return nodes, edges

    # ------------------------------------------------------------------
    # algorithm shortcuts
    # ------------------------------------------------------------------
    def embed(self, pattern: "Graph") -> List["Embedding"]:
        """Find all embeddings of ``pattern`` in this graph."""
        from ..algorithms.embed import embed

        return embed(self, pattern)

    def contains(self, pattern: "Graph") -> bool:
        from ..algorithms.embed import contains

        return contains(self, pattern)

    def mark_bridges(self) -> int:
        from ..algorithms.rings import mark_bridges

        return mark_bridges(self)

    def mark_rings(self, min_size: int, max_size: int, typeflag: int = RING) -> int:
        from ..algorithms.rings import mark_rings

        return mark_rings(self, min_size, max_size, typeflag)

    def mark_pseudo_rings(self, max_size: int) -> int:
        from ..algorithms.rings import mark_pseudo_rings

        return mark_pseudo_rings(self, max_size)

    def has_open_rings(self, min_size: int, max_size: int) -> bool:
        from ..algorithms.rings import has_open_rings

        return has_open_rings(self, min_size, max_size)

    # ------------------------------------------------------------------
    # conversion
    # ------------------------------------------------------------------
    def to_networkx(self) -> "networkx.Graph":
        """Convert this graph into a networkx.Graph.

        Nodes are the integer ids; ``type`` is stored as a node attribute,
        ``type`` and ``flags`` as edge attributes.
        """
        import networkx as nx

        G = nx.Graph()
        for i, node in enumerate(self.nodes):
            G.add_node(i, type=node.type)
        for edge in self.edges:
            G.add_edge(edge.src, edge.dst, type=edge.type, flags=edge.flags)
        return G

    @classmethod
    def from_networkx(
        cls,
        G: "networkx.Graph",
        node_attr: str = "type",
        edge_attr: str = "type",
        **kwargs: Any,
    ) -> "Graph":
        """Create a :class:`Graph` from a networkx graph.

        Node and edge types are read from the given attributes (missing
        attributes give type 0; string values need a type manager, passed
        through ``kwargs``). Nodes are numbered in networkx iteration order.
        """
        graph = cls(**kwargs)
        index = {}
        for n, attrs in G.nodes(data=True):
            index[n] = graph.add_node(attrs.get(node_attr, 0))
        for u, v, attrs in G.edges(data=True):
            graph.add_edge(index[u], index[v], attrs.get(edge_attr, 0))
        return graph

    def __repr__(self) -> str:
        return f"Graph(num_nodes={self.node_count}, num_edges={self.edge_count})"

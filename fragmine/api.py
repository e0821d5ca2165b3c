from __future__ import annotations

from typing import Iterable, List, Optional, Union

import networkx as nx

from . import config
from .algorithms.embed import contains, embed
from .algorithms.overlap import OverlapGraph
from .algorithms.rings import mark_bridges, mark_rings
from .core.embedding import Embedding
from .core.graph import Graph
from .errors import GraphInputError
from .utils.logging import get_logger

logger = get_logger(__name__)

GraphLike = Union[Graph, nx.Graph]
GraphSourceLike = Union[GraphLike, Iterable[GraphLike]]


def _as_graph(graph: GraphLike) -> Graph:
    if isinstance(graph, Graph):
        return graph
    if isinstance(graph, nx.Graph):
        return Graph.from_networkx(graph)
    raise TypeError(f"Cannot interpret {type(graph)} as a graph")


def _normalize_graph_source(source: GraphSourceLike) -> List[Graph]:
    # a single graph
    if isinstance(source, (Graph, nx.Graph)):
        return [_as_graph(source)]

    try:
        it = iter(source)  # type: ignore
    except TypeError:
        pass
    else:
        return [_as_graph(g) for g in it]

    raise TypeError(f"Cannot interpret {type(source)} as a graph source")


def _pattern(pattern: GraphLike) -> Graph:
    prepared = _as_graph(pattern).copy()
    if not prepared.prepare_embed():
        raise GraphInputError("The pattern graph must be connected")
    return prepared


def find_embeddings(host: GraphLike, pattern: GraphLike) -> List[Embedding]:
    """Return all embeddings of ``pattern`` into ``host``.

    The host is prepared in place (this only sorts incident edges); the
    pattern is prepared on a copy, so slot ``i`` of an embedding refers
    to the ``i``-th non-chain node of the pattern in breadth-first order.
    A networkx host is converted first; the embeddings then refer to the
    converted graph.
    """
    host = _as_graph(host)
    host.prepare()
    return embed(host, _pattern(pattern))


def count_support(graphs: GraphSourceLike, pattern: GraphLike) -> int:
    """Number of graphs in a database that contain ``pattern``."""
    prepared = _pattern(pattern)
    support = 0
    for graph in _normalize_graph_source(graphs):
        graph.prepare()
        if contains(graph, prepared):
            support += 1
    return support


def embedding_support(
    host: GraphLike, pattern: GraphLike, harmful: bool = False, greedy: bool = False
) -> int:
    """Single-graph support: the maximum number of non-overlapping embeddings.

    Parameters
    ----------
    harmful: bool, default False
        Only count harmful overlaps as conflicts.
    greedy: bool, default False
        Use the greedy lower bound instead of the exact independent set.
    """
    overlap = OverlapGraph(harmful=harmful)
    for embedding in find_embeddings(host, pattern):
        overlap.add(embedding)
    return overlap.mis_size(greedy=greedy)


def mark_database_rings(
    graphs: GraphSourceLike,
    min_size: Optional[int] = None,
    max_size: Optional[int] = None,
) -> int:
    """Mark rings in every graph; return the number of graphs with rings.

    Graphs in which not all rings could be told apart keep the rings that
    were marked, and a warning is logged for each of them.
    """
    lo = config.RING_MIN if min_size is None else min_size
    hi = config.RING_MAX if max_size is None else max_size
    with_rings = 0
    for index, graph in enumerate(_normalize_graph_source(graphs)):
        count = mark_rings(graph, lo, hi)
        if count < 0:
            logger.warning("Ring marking failed for graph %d (%r); keeping %d rings",
                           index, graph, -count)
        if count != 0:
            with_rings += 1
    return with_rings


def mark_database_bridges(graphs: GraphSourceLike) -> int:
    """Mark bridges in every graph; return the total number of bridges."""
    return sum(mark_bridges(graph) for graph in _normalize_graph_source(graphs))

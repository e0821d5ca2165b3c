from __future__ import annotations

__version__ = "0.1.0"

from .registry import available_strategies
from .errors import (
    FragmineError,
    GraphInputError,
    ParameterValidationError,
    BackendUnavailableError,
)
from .core import CanonicalForm, Edge, Embedding, Graph, Node, Recoder, TypeManager

# Import algorithms so the MCS strategies register themselves via @register
from .algorithms import (
    MCSResult,
    OverlapGraph,
    contains,
    embed,
    extend,
    get_mcs_strategy,
    has_open_rings,
    iter_embeddings,
    mark_bridges,
    mark_pseudo_rings,
    mark_rings,
    max_common_subgraph,
    overlaps,
    overlaps_harmfully,
)


def list_strategies():
    return sorted(available_strategies.keys())


__all__ = [
    "__version__",
    "FragmineError",
    "GraphInputError",
    "ParameterValidationError",
    "BackendUnavailableError",
    "CanonicalForm",
    "Edge",
    "Embedding",
    "Graph",
    "Node",
    "Recoder",
    "TypeManager",
    "MCSResult",
    "OverlapGraph",
    "contains",
    "embed",
    "extend",
    "get_mcs_strategy",
    "has_open_rings",
    "iter_embeddings",
    "list_strategies",
    "mark_bridges",
    "mark_pseudo_rings",
    "mark_rings",
    "max_common_subgraph",
    "overlaps",
    "overlaps_harmfully",
]

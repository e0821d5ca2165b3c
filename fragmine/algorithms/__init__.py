from .embed import contains, embed, extend, iter_embeddings
from .mcs import MCSResult, get_mcs_strategy, max_common_subgraph
from .overlap import OverlapGraph, overlaps, overlaps_harmfully
from .rings import has_open_rings, mark_bridges, mark_pseudo_rings, mark_rings

__all__ = [
    "iter_embeddings",
    "embed",
    "contains",
    "extend",
    "mark_bridges",
    "mark_rings",
    "mark_pseudo_rings",
    "has_open_rings",
    "overlaps",
    "overlaps_harmfully",
    "OverlapGraph",
    "MCSResult",
    "max_common_subgraph",
    "get_mcs_strategy",
]

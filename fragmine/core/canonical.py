"""Interface of a canonical form (code word scheme) for graphs.

The mining controller decides with a canonical form whether a fragment was
already generated elsewhere in the search tree. This package does not ship
a concrete order rule; :class:`Graph` only relies on the methods below.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .graph import Graph


@runtime_checkable
class CanonicalForm(Protocol):
    def is_canonic(self, graph: "Graph") -> bool:
        """Check whether the current node/edge order of ``graph`` is canonic."""
        ...

    def make_canonic(self, graph: "Graph") -> bool:
        """Reorder the nodes and edges of ``graph`` in place.

        Must return whether the order changed and must not alter the
        graph's nodes or edges otherwise.
        """
        ...

    def code_word(self, graph: "Graph") -> Any:
        """Return a comparable code word for the current order."""
        ...

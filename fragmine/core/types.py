"""Integer type codes for nodes and edges.

Node and edge types are plain integers. Only the lower 30 bits carry the
actual type (element, charge, bond kind, ...); the two top bits are flags:

* ``WILDCARD`` (bit 31) marks a type that matches anything,
* ``SPECIAL`` (bit 30) marks a *chain* node or an *in-ring* edge.

Names are mapped to codes by a :class:`TypeManager`, which plays the role
of the notation-specific type tables of a full mining system.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from ..errors import GraphInputError

BASEMASK = 0x3FFFFFFF
WILDCARD = 1 << 31
SPECIAL = 1 << 30
FLAGMASK = WILDCARD | SPECIAL

# node flag: a chain node stands for a run of equal degree-2 nodes
CHAIN = SPECIAL
# edge flag: the edge is part of a marked ring
RING = SPECIAL

# edge flag word: top bit is the bridge indicator, the rest ring bits
BRIDGE = 1 << 63
RINGMASK = BRIDGE - 1
MAX_RINGS = 63

# marker values shared by nodes and edges
UNMARKED = -1
EXCLUDED = -2


def base_type(code: int) -> int:
    """Return the type code with the flag bits removed."""
    return code & BASEMASK


def is_wildcard(code: int) -> bool:
    return (code & WILDCARD) != 0


def is_special(code: int) -> bool:
    return (code & SPECIAL) != 0


class TypeManager:
    """Bidirectional mapping between type names and integer codes.

    Parameters
    ----------
    names: Iterable[str], optional
        Names to register up front; they receive the codes 0, 1, ...
    fixed: bool, default False
        If True, :meth:`code` does not create codes for unknown names.
    """

    def __init__(self, names: Optional[Iterable[str]] = None, fixed: bool = False) -> None:
        self._codes: Dict[str, int] = {}
        self._names: List[str] = []
        for name in names or ():
            self.add(name)
        self.fixed = fixed

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._codes

    def add(self, name: str) -> int:
        """Register a name (if new) and return its code."""
        code = self._codes.get(name)
        if code is not None:
            return code
        if len(self._names) > BASEMASK:
            raise GraphInputError("Type code space exhausted")
        code = len(self._names)
        self._codes[name] = code
        self._names.append(name)
        return code

    def code(self, name: str) -> int:
        """Map a name to its code, registering it unless the manager is fixed."""
        code = self._codes.get(name)
        if code is not None:
            return code
        if self.fixed:
            raise GraphInputError(f"Unknown type name '{name}'")
        return self.add(name)

    def name(self, code: int) -> str:
        """Map a code (flags are ignored) back to its name."""
        if is_wildcard(code):
            return "*"
        base = code & BASEMASK
        if base >= len(self._names):
            return str(base)
        return self._names[base]

    def __repr__(self) -> str:
        return f"TypeManager(size={len(self)}, fixed={self.fixed})"

"""Frequency-based recoding of node types.

Embedding is fastest when the rarest node types are tried first, so the
mining front end maps raw node types to dense codes ranked by frequency.
A :class:`Recoder` collects the type statistics over a graph database,
can exclude infrequent types and, after :meth:`Recoder.sort`, assigns
code 0 to the least frequent type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

_MAXIMAL = 2**31 - 1


@dataclass
class RecoderEntry:
    """Statistics of one raw type."""

    type: int
    code: int
    frequency: int = 0
    support: int = 0
    last_graph: int = -1


class Recoder:
    """Map raw node types to dense codes ranked by frequency."""

    def __init__(self) -> None:
        self._entries: List[RecoderEntry] = []
        self._by_type: Dict[int, RecoderEntry] = {}
        self._graph = 0

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, type_: int) -> int:
        """Register a raw type (if new) and return its code."""
        entry = self._by_type.get(type_)
        if entry is None:
            entry = RecoderEntry(type=type_, code=len(self._entries))
            self._entries.append(entry)
            self._by_type[type_] = entry
        return entry.code

    def encode(self, type_: int) -> int:
        """Return the code of a raw type, or -1 if it is unknown."""
        entry = self._by_type.get(type_)
        return -1 if entry is None else entry.code

    def decode(self, code: int) -> int:
        """Return the raw type of a code; unknown codes are returned as is."""
        if code < 0 or code >= len(self._entries):
            return code
        return self._entries[code].type

    def count(self, code: int) -> None:
        """Count one occurrence of a code in the current graph."""
        entry = self._entries[code]
        entry.frequency += 1
        if entry.last_graph < self._graph:
            entry.last_graph = self._graph
            entry.support += 1

    def commit(self) -> None:
        """Finish counting the current graph."""
        self._graph += 1

    def frequency(self, code: int) -> int:
        return self._entries[code].frequency

    def support(self, code: int) -> int:
        return self._entries[code].support

    def trim_support(self, minimum: int) -> None:
        """Exclude all types occurring in fewer than ``minimum`` graphs."""
        for entry in self._entries:
            if entry.support < minimum:
                entry.support = entry.frequency = -1

    def trim_frequency(self, minimum: int) -> None:
        """Exclude all types occurring fewer than ``minimum`` times."""
        for entry in self._entries:
            if entry.frequency < minimum:
                entry.support = entry.frequency = -1

    def clear(self, code: int) -> None:
        entry = self._entries[code]
        entry.support = entry.frequency = 0

    def exclude(self, code: int) -> None:
        entry = self._entries[code]
        entry.support = entry.frequency = -1

    def is_excluded(self, code: int) -> bool:
        if code < 0 or code >= len(self._entries):
            return False
        return self._entries[code].support < 0

    def maximize(self, code: int) -> None:
        """Give a code maximal statistics (it then sorts last)."""
        entry = self._entries[code]
        entry.support = entry.frequency = _MAXIMAL

    def is_maximal(self, code: int) -> bool:
        return self._entries[code].support >= _MAXIMAL

    def sort(self) -> None:
        """Re-rank the codes by ascending frequency (stable)."""
        self._entries.sort(key=lambda e: e.frequency)
        for code, entry in enumerate(self._entries):
            entry.code = code

    def __repr__(self) -> str:
        return f"Recoder(size={len(self)})"

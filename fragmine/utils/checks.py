"""Environment checks for fragmine."""

from __future__ import annotations

import importlib.util


def is_module_available(name: str) -> bool:
    """Return True if a given module can be imported."""
    try:
        return importlib.util.find_spec(name) is not None
    except (ImportError, ValueError):
        return False

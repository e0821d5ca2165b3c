"""Package-wide defaults.

Every value can be overridden through an environment variable; the
functions and classes that use them also accept explicit keyword
arguments, which take precedence.
"""

from __future__ import annotations

import os


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


LOG_LEVEL = os.environ.get("FRAGMINE_LOG_LEVEL", "WARNING").upper()

# ring sizes (number of edges) used when no explicit range is given
RING_MIN = _env_int("FRAGMINE_RING_MIN", 5)
RING_MAX = _env_int("FRAGMINE_RING_MAX", 6)
# ring searches are bounded to keep the depth-first search shallow
RING_SIZE_LIMIT = 256

MCS_STRATEGY = os.environ.get("FRAGMINE_MCS_STRATEGY", "edge").lower()

from __future__ import annotations

from typing import Dict, Type, TYPE_CHECKING

if TYPE_CHECKING:
    from .algorithms.base import SearchStrategy

# filled by fragmine.algorithms.base.register
available_strategies: Dict[str, Type["SearchStrategy"]] = {}

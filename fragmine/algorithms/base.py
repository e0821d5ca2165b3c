# fragmine/algorithms/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..registry import available_strategies
from ..utils.logging import get_logger

__all__ = ["SearchStrategy", "register"]


class SearchStrategy(ABC):
    name: str = "base"

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose
        self.logger = get_logger(self.__class__.__name__)
        if self.verbose:
            self.logger.setLevel("DEBUG")

    @abstractmethod
    def run(self, *graphs: Any, **kwargs: Any) -> Any:
        raise NotImplementedError


def register(cls: type[SearchStrategy]) -> type[SearchStrategy]:
    if not issubclass(cls, SearchStrategy):
        raise TypeError("Only subclasses of SearchStrategy can be registered")

    name = getattr(cls, "name", None)
    if not isinstance(name, str):
        raise TypeError("Search strategy must define a string 'name' attribute")

    key = name.lower()
    if key in available_strategies:
        raise ValueError(f"Strategy '{name}' is already registered")

    available_strategies[key] = cls
    return cls

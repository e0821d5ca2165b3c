"""Logging helpers for fragmine."""

from __future__ import annotations

import logging

from .. import config

_ROOT = "fragmine"


def _configure_root() -> logging.Logger:
    root = logging.getLogger(_ROOT)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        root.addHandler(handler)
        root.setLevel(config.LOG_LEVEL)
    return root


def get_logger(name: str) -> logging.Logger:
    """Return a logger below the ``fragmine`` namespace."""
    _configure_root()
    if name == _ROOT or name.startswith(_ROOT + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT}.{name}")

"""Small helpers shared across fragmine."""

from .checks import is_module_available  # noqa: F401
from .logging import get_logger  # noqa: F401

__all__ = ["get_logger", "is_module_available"]

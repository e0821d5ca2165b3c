"""Exception hierarchy for fragmine.

Expected outcomes of the graph algorithms (a disconnected pattern, ring
bits running out, a pattern that does not embed) are reported through
return values. The exceptions below are reserved for misuse of the public
API and for missing optional backends.
"""

from __future__ import annotations


class FragmineError(Exception):
    """Base class for all fragmine errors."""


class GraphInputError(FragmineError, ValueError):
    """A graph or a graph-building call received invalid input."""


class ParameterValidationError(FragmineError, ValueError):
    """An algorithm parameter is outside its valid range."""


class BackendUnavailableError(FragmineError, RuntimeError):
    """An optional third-party backend is not installed."""

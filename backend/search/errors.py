"""
Search error taxonomy.

Validation problems are values (`FieldError` collected in a `ParseResult`),
never raised. Backend problems are raised inside the engine adapter and
converted to a typed outcome at the executor boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class FieldError:
    """One offending request field."""

    field: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"field": self.field, "message": self.message}


class SearchError(Exception):
    """Base class for search subsystem failures."""


class BackendUnavailable(SearchError):
    """The full-text engine is configured but cannot serve the request."""

    def __init__(self, reason: str, backend: str = "elasticsearch"):
        super().__init__(f"{backend} unavailable: {reason}")
        self.reason = reason
        self.backend = backend


class NotFound(SearchError):
    """A referenced artifact, image or tag does not exist."""

    def __init__(self, kind: str, identifier: Any):
        super().__init__(f"{kind} {identifier} not found")
        self.kind = kind
        self.identifier = identifier


class InternalSearchError(SearchError):
    """Anything unexpected inside the search pipeline."""

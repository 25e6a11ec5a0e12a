"""
Search package
==============

Faceted search core shared by the API and the browse client:

- FilterState and its URL codec (lenient) / API parser (strict)
- Query Compiler with engine and relational-fallback modes
- engine capability, Search Executor with image enrichment
- index maintenance for the full-text engine
"""

from .compiler import CompiledQuery, QueryMode, compile_query
from .errors import BackendUnavailable, FieldError, NotFound, SearchError
from .filter_state import Facet, FilterState, SortMode, normalize
from .params import ParseResult, parse_search_params
from .url_state import parse, serialize

__all__ = [
    "BackendUnavailable",
    "CompiledQuery",
    "Facet",
    "FieldError",
    "FilterState",
    "NotFound",
    "ParseResult",
    "QueryMode",
    "SearchError",
    "SortMode",
    "compile_query",
    "normalize",
    "parse",
    "parse_search_params",
    "serialize",
]

"""
Core preferred-id resolution logic.

This module contains the domain logic for the $preferred-id operation,
independent of any transport or storage backend.
"""

from .exceptions import AmbiguousMatchError, PreferredIdError, SearchProviderError
from .filters import FilterResult, filter_resources, select_outcome
from .mapper import map_identifier_kind
from .models import IdentifierEntry, IdentifierKind, NamedResource
from .protocols import RequestContext, ResourceDecoder, ResponseSink, SearchOptions, SearchProvider, SearchQuery
from .responses import PreferredIdResponse
from .service import IdentificationService

__all__ = [
    "AmbiguousMatchError",
    "FilterResult",
    "IdentificationService",
    "IdentifierEntry",
    "IdentifierKind",
    "NamedResource",
    "PreferredIdError",
    "PreferredIdResponse",
    "RequestContext",
    "ResourceDecoder",
    "ResponseSink",
    "SearchOptions",
    "SearchProvider",
    "SearchProviderError",
    "SearchQuery",
    "filter_resources",
    "map_identifier_kind",
    "select_outcome",
]

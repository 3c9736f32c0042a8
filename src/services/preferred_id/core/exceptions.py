"""
Preferred-Id Exception Hierarchy

All service-specific exceptions inherit from PreferredIdError.

Usage:
    from src.services.preferred_id.core.exceptions import SearchProviderError

    try:
        records = await provider.search(query, options)
    except SearchProviderError as e:
        logger.error(f"Search failed: {e}")
"""

from __future__ import annotations


class PreferredIdError(Exception):
    """
    Base exception for the preferred-id service.

    Attributes:
        message: Human-readable error description
        code: Optional machine-readable error code for programmatic handling
    """

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code
        super().__init__(message)

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class AmbiguousMatchError(PreferredIdError):
    """More than one NamingSystem carries the known id and the requested kind."""

    def __init__(self, known_id: str, requested_kind: str, count: int) -> None:
        super().__init__(
            f"$preferred-id operation found {count} NamingSystem resources with "
            f"Identifier=[{known_id}] and TargetType=[{requested_kind}]; "
            "expected exactly one.",
            code="AMBIGUOUS_MATCH",
        )
        self.known_id = known_id
        self.requested_kind = requested_kind
        self.count = count


class SearchProviderError(PreferredIdError):
    """The backing resource store could not be searched."""

    def __init__(self, backend: str, reason: str) -> None:
        super().__init__(
            f"Search against '{backend}' failed: {reason}",
            code="SEARCH_FAILED",
        )
        self.backend = backend
        self.reason = reason

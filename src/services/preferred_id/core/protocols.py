"""
Preferred-Id Protocols

Defines the narrow interfaces the identification service depends on:
the resource search provider, the resource decoder, the inbound request
context and the outbound response sink.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from .models import NamedResource


@dataclass(frozen=True)
class SearchQuery:
    """Search scope, already validated by the caller."""

    resource_type: str


@dataclass(frozen=True)
class SearchOptions:
    """Addressing context of the search (where, for which interaction, which model)."""

    server_base: str
    interaction: str
    information_model: str
    latest_only: bool = True

    @classmethod
    def latest(cls, server_base: str, interaction: str, information_model: str) -> SearchOptions:
        """Options for searching the current version of each resource."""
        return cls(
            server_base=server_base,
            interaction=interaction,
            information_model=information_model,
            latest_only=True,
        )


@runtime_checkable
class SearchProvider(Protocol):
    """
    Protocol for resource search.

    Returns raw resource records (FHIR JSON dictionaries). Failures propagate
    to the caller untouched.
    """

    async def search(
        self,
        query: SearchQuery,
        options: SearchOptions,
    ) -> Sequence[dict[str, Any]]:
        """
        Search for resources.

        Args:
            query: Resource type to search
            options: Server base, interaction and information model

        Returns:
            Matching resource records
        """
        ...


@runtime_checkable
class ResourceDecoder(Protocol):
    """Materializes a NamedResource from a raw record."""

    def decode(self, record: dict[str, Any]) -> NamedResource: ...


@runtime_checkable
class RequestContext(Protocol):
    """Inbound side of an operation call."""

    server_base: str
    interaction: str
    information_model: str

    def get_argument(self, name: str) -> str | None:
        """Return a path or query argument, or None when absent."""
        ...

    def mark_handled(self) -> None:
        """Signal that all arguments were validated and consumed."""
        ...


@runtime_checkable
class ResponseSink(Protocol):
    """Outbound side of an operation call."""

    def respond(self, status_code: int, payload: dict[str, Any], content_type: str) -> None: ...

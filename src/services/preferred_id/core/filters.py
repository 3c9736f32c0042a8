"""
NamingSystem filtering.

Two-stage narrowing of decoded resources: first by known identifier value,
then by presence of an identifier of the requested kind. Both stages keep
input order and never deduplicate.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .exceptions import AmbiguousMatchError
from .models import Found, IdentifierEntry, IdentifierKind, NamedResource, NotFound


def match_known_id(resources: Iterable[NamedResource], known_id: str) -> list[NamedResource]:
    """Keep resources having an identifier whose value equals ``known_id``."""
    return [resource for resource in resources if resource.has_value(known_id)]


def match_kind(resources: Iterable[NamedResource], kind: IdentifierKind) -> list[NamedResource]:
    """Keep resources having at least one identifier of ``kind``."""
    return [resource for resource in resources if resource.has_kind(kind)]


@dataclass(frozen=True)
class FilterResult:
    """Survivors of each stage; ``matches`` may be empty or hold several resources."""

    total: int
    by_known_id: list[NamedResource]
    matches: list[NamedResource]


def filter_resources(
    resources: Iterable[NamedResource],
    known_id: str,
    kind: IdentifierKind,
) -> FilterResult:
    """Apply both stages, keeping the intermediate result for diagnostics."""
    resources = list(resources)
    by_known_id = match_known_id(resources, known_id)
    return FilterResult(
        total=len(resources),
        by_known_id=by_known_id,
        matches=match_kind(by_known_id, kind),
    )


def preferred_entry(resource: NamedResource, kind: IdentifierKind) -> IdentifierEntry:
    """
    Pick the identifier of ``kind`` from a resource that has one.

    An entry flagged preferred wins; otherwise the first one in document order.
    """
    entries = resource.entries_of_kind(kind)
    if not entries:
        raise ValueError(f"NamingSystem {resource.resource_id} has no {kind.value} identifier")
    for entry in entries:
        if entry.preferred:
            return entry
    return entries[0]


def select_outcome(
    matches: list[NamedResource],
    known_id: str,
    kind: IdentifierKind,
) -> Found | NotFound:
    """
    Turn filtered resources into an outcome.

    Raises:
        AmbiguousMatchError: If more than one resource survived filtering
    """
    if not matches:
        return NotFound(known_id=known_id, requested_kind=kind)
    if len(matches) > 1:
        raise AmbiguousMatchError(known_id, kind.value, len(matches))

    resource = matches[0]
    return Found(entry=preferred_entry(resource, kind), resource_id=resource.resource_id)

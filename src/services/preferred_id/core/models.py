"""
Preferred-Id Resolution Models

Data classes for NamingSystem identifiers and resolution outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class IdentifierKind(str, Enum):
    """Kinds of unique identifiers a NamingSystem can carry."""

    URI = "uri"
    OID = "oid"
    UUID = "uuid"


@dataclass(frozen=True)
class IdentifierEntry:
    """A single (kind, value) identifier attached to a NamingSystem."""

    kind: IdentifierKind
    value: str
    preferred: bool = False


@dataclass(frozen=True)
class NamedResource:
    """
    Read-only snapshot of a NamingSystem resource.

    Identifier entries keep their document order and are not deduplicated.
    ``extra_values`` holds values of identifiers whose type is outside
    IdentifierKind (FHIR "other"); they can address the resource but are
    never returned.
    """

    resource_id: str | None
    identifiers: tuple[IdentifierEntry, ...] = ()
    name: str | None = None
    extra_values: tuple[str, ...] = ()

    def has_value(self, value: str) -> bool:
        """True when any identifier, of any type, carries exactly this value."""
        return value in self.extra_values or any(entry.value == value for entry in self.identifiers)

    def has_kind(self, kind: IdentifierKind) -> bool:
        """True when any identifier entry is of the given kind."""
        return any(entry.kind == kind for entry in self.identifiers)

    def entries_of_kind(self, kind: IdentifierKind) -> tuple[IdentifierEntry, ...]:
        return tuple(entry for entry in self.identifiers if entry.kind == kind)


@dataclass(frozen=True)
class ResolutionRequest:
    """Validated input of a $preferred-id call."""

    resource_type: str
    known_id: str
    requested_kind: IdentifierKind


@dataclass(frozen=True)
class Found:
    entry: IdentifierEntry
    resource_id: str | None = None


@dataclass(frozen=True)
class NotFound:
    known_id: str
    requested_kind: IdentifierKind


@dataclass(frozen=True)
class BadRequest:
    reason: str


ResolutionOutcome = Union[Found, NotFound, BadRequest]

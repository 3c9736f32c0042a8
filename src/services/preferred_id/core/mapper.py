"""
Identifier type mapping.

Turns the free-text ``type`` argument into an IdentifierKind.
"""

from __future__ import annotations

from .models import IdentifierKind

_KNOWN_TYPES: dict[str, IdentifierKind] = {
    "uuid": IdentifierKind.UUID,
    "oid": IdentifierKind.OID,
}


def map_identifier_kind(type_text: str | None) -> IdentifierKind:
    """
    Map a ``type`` argument to an IdentifierKind.

    Only the exact tokens "uuid" and "oid" are recognized. Everything else,
    including an absent value, "uri" and "url", falls back to URI, since
    callers use both spellings for URI identifiers.
    """
    if type_text is None:
        return IdentifierKind.URI
    return _KNOWN_TYPES.get(type_text, IdentifierKind.URI)

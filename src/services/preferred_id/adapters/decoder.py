"""
FHIR JSON decoder for NamingSystem resources.
"""

from __future__ import annotations

from typing import Any

from ..core.models import IdentifierEntry, IdentifierKind, NamedResource

_KINDS = {kind.value: kind for kind in IdentifierKind}


class FhirNamingSystemDecoder:
    """
    Decodes FHIR JSON NamingSystem records.

    ``uniqueId`` entries whose type is outside uri/oid/uuid (FHIR also allows
    "other") keep only their value, so they can still be looked up by.
    """

    def decode(self, record: dict[str, Any]) -> NamedResource:
        identifiers = []
        extra_values = []
        for unique_id in record.get("uniqueId", []):
            value = unique_id.get("value", "")
            kind = _KINDS.get(unique_id.get("type"))
            if kind is None:
                extra_values.append(value)
                continue
            identifiers.append(
                IdentifierEntry(
                    kind=kind,
                    value=value,
                    preferred=bool(unique_id.get("preferred", False)),
                )
            )

        return NamedResource(
            resource_id=record.get("id"),
            identifiers=tuple(identifiers),
            name=record.get("name"),
            extra_values=tuple(extra_values),
        )

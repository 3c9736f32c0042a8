"""
Response building for the $preferred-id operation.

Success is a FHIR Parameters resource with a single parameter; every other
outcome is an OperationOutcome with a single informational issue.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .models import IdentifierEntry, IdentifierKind

FHIR_JSON_CONTENT_TYPE = "application/fhir+json"
DIAGNOSTIC_SYSTEM = "http://hl7.org/fhir/dotnet-api-operation-outcome"
DIAGNOSTIC_CODE = "5000"
EXPECTED_RESOURCE_TYPE = "NamingSystem"

STATUS_OK = 200
STATUS_BAD_REQUEST = 400
STATUS_NOT_FOUND = 404
STATUS_INTERNAL_ERROR = 500


@dataclass(frozen=True)
class PreferredIdResponse:
    """A payload paired with its HTTP status code."""

    status_code: int
    payload: dict[str, Any]
    content_type: str = FHIR_JSON_CONTENT_TYPE

    @property
    def resource_type(self) -> str:
        return self.payload["resourceType"]


def build_parameters(entry: IdentifierEntry) -> dict[str, Any]:
    """Parameters resource carrying the resolved identifier."""
    return {
        "resourceType": "Parameters",
        "parameter": [
            {
                "name": entry.kind.value,
                "valueString": entry.value,
            }
        ],
    }


def build_operation_outcome(message: str) -> dict[str, Any]:
    """OperationOutcome with exactly one informational issue."""
    return {
        "resourceType": "OperationOutcome",
        "issue": [
            {
                "severity": "information",
                "code": "informational",
                "details": {
                    "coding": [
                        {
                            "system": DIAGNOSTIC_SYSTEM,
                            "code": DIAGNOSTIC_CODE,
                        }
                    ],
                    "text": message,
                },
            }
        ],
    }


def no_identifier_message() -> str:
    return "No id provided to the $preferred-id operation."


def wrong_resource_message(resource_type: str | None) -> str:
    return (
        f"Operation called with wrong resource. Expected [{EXPECTED_RESOURCE_TYPE}] "
        f"and got [{resource_type}] instead."
    )


def not_found_message(known_id: str, kind: IdentifierKind) -> str:
    return (
        f"$preferred-id operation found no {EXPECTED_RESOURCE_TYPE} resources with "
        f"Identifier=[{known_id}] and TargetType=[{kind.value}]"
    )


def success_response(entry: IdentifierEntry) -> PreferredIdResponse:
    return PreferredIdResponse(status_code=STATUS_OK, payload=build_parameters(entry))


def bad_request_response(message: str) -> PreferredIdResponse:
    return PreferredIdResponse(
        status_code=STATUS_BAD_REQUEST,
        payload=build_operation_outcome(message),
    )


def not_found_response(known_id: str, kind: IdentifierKind) -> PreferredIdResponse:
    return PreferredIdResponse(
        status_code=STATUS_NOT_FOUND,
        payload=build_operation_outcome(not_found_message(known_id, kind)),
    )


def internal_error_response(message: str) -> PreferredIdResponse:
    return PreferredIdResponse(
        status_code=STATUS_INTERNAL_ERROR,
        payload=build_operation_outcome(message),
    )

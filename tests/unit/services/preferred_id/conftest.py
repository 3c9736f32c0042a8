"""
Shared fixtures for preferred-id unit tests.
"""

from __future__ import annotations

from typing import Any

import pytest

from src.services.preferred_id.adapters.decoder import FhirNamingSystemDecoder
from src.services.preferred_id.adapters.memory import InMemorySearchProvider
from src.services.preferred_id.core.service import IdentificationService
from src.services.preferred_id.transports.http.context import HttpRequestContext


def naming_system(resource_id: str, *unique_ids: tuple[str, str]) -> dict[str, Any]:
    """Build a FHIR JSON NamingSystem with the given (type, value) uniqueIds."""
    return {
        "resourceType": "NamingSystem",
        "id": resource_id,
        "name": f"System{resource_id}",
        "status": "active",
        "kind": "identifier",
        "uniqueId": [{"type": t, "value": v} for t, v in unique_ids],
    }


def make_context(
    resource_type: str | None = "NamingSystem",
    **query: str,
) -> HttpRequestContext:
    return HttpRequestContext(
        resource_type=resource_type,
        query=query,
        server_base="http://localhost:8080/",
        information_model="Fhir4.0",
    )


@pytest.fixture
def oid_uri_record() -> dict[str, Any]:
    return naming_system(
        "1",
        ("oid", "1.234.5678.90"),
        ("uri", "http://test.uri.com"),
    )


@pytest.fixture
def provider(oid_uri_record: dict[str, Any]) -> InMemorySearchProvider:
    return InMemorySearchProvider([oid_uri_record])


@pytest.fixture
def service(provider: InMemorySearchProvider) -> IdentificationService:
    return IdentificationService(provider, FhirNamingSystemDecoder())


@pytest.fixture
def context_factory():
    """Factory for request contexts; pass query arguments as keywords."""
    return make_context


@pytest.fixture
def naming_system_factory():
    """Factory for FHIR JSON NamingSystem records."""
    return naming_system

"""Tests for the $preferred-id identification service."""

from __future__ import annotations

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.services.preferred_id.adapters.decoder import FhirNamingSystemDecoder
from src.services.preferred_id.adapters.memory import InMemorySearchProvider
from src.services.preferred_id.core.exceptions import AmbiguousMatchError, SearchProviderError
from src.services.preferred_id.core.models import BadRequest, Found, IdentifierKind, NotFound
from src.services.preferred_id.core.service import IdentificationService

SERVICE_LOGGER = "src.services.preferred_id.core.service"


def issues(payload: dict) -> list[dict]:
    assert payload["resourceType"] == "OperationOutcome"
    return payload["issue"]


class TestPreferredIdGet:
    """End-to-end scenarios through the service with an in-memory provider."""

    @pytest.mark.asyncio
    async def test_oid_resolves(self, service, context_factory) -> None:
        """Known OID with type=oid returns the OID."""
        response = await service.preferred_id_get(
            context_factory(id="1.234.5678.90", type="oid")
        )

        assert response.status_code == 200
        assert response.resource_type == "Parameters"
        assert response.payload["parameter"] == [
            {"name": "oid", "valueString": "1.234.5678.90"}
        ]

    @pytest.mark.asyncio
    async def test_oid_to_uri(self, service, context_factory) -> None:
        """Absent type defaults to URI."""
        response = await service.preferred_id_get(context_factory(id="1.234.5678.90"))

        assert response.status_code == 200
        assert response.payload["parameter"] == [
            {"name": "uri", "valueString": "http://test.uri.com"}
        ]

    @pytest.mark.asyncio
    async def test_unknown_id_is_not_found(self, service, context_factory) -> None:
        response = await service.preferred_id_get(context_factory(id="1234", type="url"))

        assert response.status_code == 404
        [issue] = issues(response.payload)
        assert issue["details"]["text"] == (
            "$preferred-id operation found no NamingSystem resources with "
            "Identifier=[1234] and TargetType=[uri]"
        )

    @pytest.mark.asyncio
    async def test_missing_kind_is_not_found(self, service, context_factory) -> None:
        """Known id matches but the NamingSystem has no UUID."""
        response = await service.preferred_id_get(
            context_factory(id="1.234.5678.90", type="uuid")
        )

        assert response.status_code == 404
        [issue] = issues(response.payload)
        assert "TargetType=[uuid]" in issue["details"]["text"]

    @pytest.mark.asyncio
    async def test_missing_id_is_bad_request(self, service, provider, context_factory) -> None:
        response = await service.preferred_id_get(context_factory(type="oid"))

        assert response.status_code == 400
        [issue] = issues(response.payload)
        assert issue["details"]["text"] == "No id provided to the $preferred-id operation."
        assert provider.call_count == 0

    @pytest.mark.asyncio
    async def test_empty_id_is_bad_request(self, service, provider, context_factory) -> None:
        response = await service.preferred_id_get(context_factory(id=""))

        assert response.status_code == 400
        assert provider.call_count == 0

    @pytest.mark.asyncio
    async def test_missing_id_checked_before_resource_type(
        self, service, provider, context_factory
    ) -> None:
        response = await service.preferred_id_get(context_factory("CodeSystem"))

        [issue] = issues(response.payload)
        assert issue["details"]["text"] == "No id provided to the $preferred-id operation."
        assert provider.call_count == 0

    @pytest.mark.asyncio
    async def test_wrong_resource_type_is_bad_request(
        self, service, provider, context_factory
    ) -> None:
        response = await service.preferred_id_get(
            context_factory("CodingSystem", id="1.234.5678.90", type="url")
        )

        assert response.status_code == 400
        [issue] = issues(response.payload)
        assert issue["details"]["text"] == (
            "Operation called with wrong resource. Expected [NamingSystem] "
            "and got [CodingSystem] instead."
        )
        assert provider.call_count == 0

    @pytest.mark.asyncio
    async def test_absent_resource_type_is_bad_request(
        self, service, provider, context_factory
    ) -> None:
        response = await service.preferred_id_get(context_factory(None, id="1.234.5678.90"))

        assert response.status_code == 400
        assert provider.call_count == 0

    @pytest.mark.parametrize(
        "query, resource_type",
        [
            ({"type": "oid"}, "NamingSystem"),
            ({"id": "1.234.5678.90"}, "CodeSystem"),
            ({"id": "1234", "type": "url"}, "NamingSystem"),
            ({"id": "1.234.5678.90", "type": "uuid"}, "NamingSystem"),
        ],
    )
    @pytest.mark.asyncio
    async def test_every_diagnostic_has_one_informational_issue(
        self, service, context_factory, query, resource_type
    ) -> None:
        response = await service.preferred_id_get(context_factory(resource_type, **query))

        [issue] = issues(response.payload)
        assert issue["severity"] == "information"
        coding = issue["details"]["coding"][0]
        assert coding["system"] == "http://hl7.org/fhir/dotnet-api-operation-outcome"
        assert coding["code"] == "5000"


class TestResolve:
    """Tests for the orchestration details."""

    @pytest.mark.asyncio
    async def test_outcomes(self, service, context_factory) -> None:
        assert isinstance(await service.resolve(context_factory(id="1.234.5678.90")), Found)
        assert isinstance(await service.resolve(context_factory(id="x")), NotFound)
        assert isinstance(await service.resolve(context_factory()), BadRequest)

    @pytest.mark.asyncio
    async def test_marks_arguments_handled_only_after_validation(
        self, service, context_factory
    ) -> None:
        rejected = context_factory("CodeSystem", id="1.234.5678.90")
        await service.resolve(rejected)
        assert rejected.handled is False

        accepted = context_factory(id="1.234.5678.90")
        await service.resolve(accepted)
        assert accepted.handled is True

    @pytest.mark.asyncio
    async def test_search_query_and_options(self, service, provider, context_factory) -> None:
        await service.resolve(context_factory(id="1.234.5678.90"))

        [(query, options)] = provider.calls
        assert query.resource_type == "NamingSystem"
        assert options.server_base == "http://localhost:8080/"
        assert options.interaction == "type_custom"
        assert options.information_model == "Fhir4.0"
        assert options.latest_only is True

    @pytest.mark.asyncio
    async def test_ambiguous_match_raises(self, naming_system_factory, context_factory) -> None:
        provider = InMemorySearchProvider(
            [
                naming_system_factory("1", ("oid", "1.2.3"), ("uri", "http://one")),
                naming_system_factory("2", ("oid", "1.2.3"), ("uri", "http://two")),
            ]
        )
        service = IdentificationService(provider, FhirNamingSystemDecoder())

        with pytest.raises(AmbiguousMatchError):
            await service.preferred_id_get(context_factory(id="1.2.3"))

    @pytest.mark.asyncio
    async def test_provider_failure_propagates(self, context_factory) -> None:
        provider = MagicMock()
        provider.search = AsyncMock(side_effect=SearchProviderError("postgres", "down"))
        service = IdentificationService(provider, FhirNamingSystemDecoder())

        with pytest.raises(SearchProviderError):
            await service.preferred_id_get(context_factory(id="1.2.3"))
        provider.search.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_sink_receives_response(self, service, context_factory) -> None:
        sink = MagicMock()
        response = await service.preferred_id_get(
            context_factory(id="1.234.5678.90", type="oid"), sink
        )

        sink.respond.assert_called_once_with(200, response.payload, "application/fhir+json")

    @pytest.mark.asyncio
    async def test_requested_kind_passed_through(self, naming_system_factory, context_factory) -> None:
        provider = InMemorySearchProvider(
            [naming_system_factory("1", ("uri", "http://x"), ("uuid", "urn:uuid:1"))]
        )
        service = IdentificationService(provider, FhirNamingSystemDecoder())

        outcome = await service.resolve(context_factory(id="http://x", type="uuid"))

        assert isinstance(outcome, Found)
        assert outcome.entry.kind is IdentifierKind.UUID
        assert outcome.entry.value == "urn:uuid:1"


class TestOtherIdentifiers:
    """NamingSystems can be addressed by identifiers of type "other"."""

    @pytest.mark.asyncio
    async def test_local_id_resolves_to_uri(self, naming_system_factory, context_factory) -> None:
        provider = InMemorySearchProvider(
            [naming_system_factory("7", ("other", "LOCAL-7"), ("uri", "http://x.example"))]
        )
        service = IdentificationService(provider, FhirNamingSystemDecoder())

        response = await service.preferred_id_get(context_factory(id="LOCAL-7", type="uri"))

        assert response.status_code == 200
        assert response.payload["parameter"] == [{"name": "uri", "valueString": "http://x.example"}]

    @pytest.mark.asyncio
    async def test_other_type_is_never_returned(self, naming_system_factory, context_factory) -> None:
        provider = InMemorySearchProvider([naming_system_factory("7", ("other", "LOCAL-7"))])
        service = IdentificationService(provider, FhirNamingSystemDecoder())

        response = await service.preferred_id_get(context_factory(id="LOCAL-7", type="other"))

        assert response.status_code == 404
        assert "TargetType=[uri]" in response.payload["issue"][0]["details"]["text"]


class TestLogging:
    """Internal log levels differ from the informational issue severity."""

    @pytest.mark.asyncio
    async def test_missing_id_logs_warning(self, service, context_factory, caplog) -> None:
        with caplog.at_level(logging.INFO, logger=SERVICE_LOGGER):
            await service.preferred_id_get(context_factory())

        assert [r.levelno for r in caplog.records] == [logging.WARNING]

    @pytest.mark.asyncio
    async def test_wrong_resource_logs_warning(self, service, context_factory, caplog) -> None:
        with caplog.at_level(logging.INFO, logger=SERVICE_LOGGER):
            await service.preferred_id_get(context_factory("Patient", id="1"))

        assert [r.levelno for r in caplog.records] == [logging.WARNING]
        assert "Patient" in caplog.records[0].getMessage()

    @pytest.mark.asyncio
    async def test_not_found_logs_stage_counts_at_info(
        self, service, context_factory, caplog
    ) -> None:
        with caplog.at_level(logging.INFO, logger=SERVICE_LOGGER):
            await service.preferred_id_get(context_factory(id="1.234.5678.90", type="uuid"))

        messages = [r.getMessage() for r in caplog.records]
        assert all(r.levelno == logging.INFO for r in caplog.records)
        assert messages[0] == "1 results found for NamingSystem"
        assert messages[1] == "1 filtered results found with Id=1.234.5678.90"
        assert messages[2].startswith("0 filtered results found")
        assert "without any match" in messages[3]

"""
Identification Service

Handles the $preferred-id operation: validates the call, searches for
NamingSystem resources, narrows them to the one carrying the known identifier
and returns its identifier of the requested kind.
"""

from __future__ import annotations

import logging

from .filters import filter_resources, select_outcome
from .mapper import map_identifier_kind
from .models import BadRequest, Found, NamedResource, ResolutionOutcome, ResolutionRequest
from .protocols import RequestContext, ResourceDecoder, ResponseSink, SearchOptions, SearchProvider, SearchQuery
from .responses import (
    EXPECTED_RESOURCE_TYPE,
    PreferredIdResponse,
    bad_request_response,
    no_identifier_message,
    not_found_response,
    success_response,
    wrong_resource_message,
)

logger = logging.getLogger(__name__)

OPERATION_NAME = "preferred-id"
RESOURCE_TYPE_ARGUMENT = "_type"
ID_ARGUMENT = "id"
TYPE_ARGUMENT = "type"


class IdentificationService:
    """
    Resolves the preferred identifier of a NamingSystem.

    Works even when only a known identifier is sent, by defaulting the target
    type to URI. Without a known identifier no NamingSystem can be singled out,
    so the call is rejected before the repository is touched.

    The service holds no per-request state and can be shared between
    concurrent requests.
    """

    def __init__(
        self,
        search_provider: SearchProvider,
        decoder: ResourceDecoder,
    ):
        self._search_provider = search_provider
        self._decoder = decoder

    async def preferred_id_get(
        self,
        context: RequestContext,
        sink: ResponseSink | None = None,
    ) -> PreferredIdResponse:
        """
        Handle a GET $preferred-id call.

        Args:
            context: Inbound arguments and addressing context
            sink: Optional sink that receives the status and payload

        Returns:
            The response that was (or would be) sent

        Raises:
            AmbiguousMatchError: If several NamingSystems match
            Exception: Whatever the search provider raises
        """
        outcome = await self.resolve(context)
        response = self._build_response(outcome)
        if sink is not None:
            sink.respond(response.status_code, response.payload, response.content_type)
        return response

    async def resolve(self, context: RequestContext) -> ResolutionOutcome:
        """Run validation, search and filtering, returning a single outcome."""
        requested_kind = map_identifier_kind(context.get_argument(TYPE_ARGUMENT))

        known_id = context.get_argument(ID_ARGUMENT)
        if not known_id:
            logger.warning("$preferred-id operation called without an identifier.")
            return BadRequest(reason=no_identifier_message())

        resource_type = context.get_argument(RESOURCE_TYPE_ARGUMENT)
        if resource_type != EXPECTED_RESOURCE_TYPE:
            logger.warning(
                f"$preferred-id operation called with the wrong resource=[{resource_type}] "
                f"when {EXPECTED_RESOURCE_TYPE} is expected."
            )
            return BadRequest(reason=wrong_resource_message(resource_type))

        context.mark_handled()

        request = ResolutionRequest(
            resource_type=resource_type,
            known_id=known_id,
            requested_kind=requested_kind,
        )
        options = SearchOptions.latest(
            context.server_base,
            context.interaction,
            context.information_model,
        )
        matches = await self._find_filtered_resources(request, options)

        outcome = select_outcome(matches, request.known_id, request.requested_kind)
        if not isinstance(outcome, Found):
            logger.info("$preferred-id operation returned without any match.")
        return outcome

    async def _find_filtered_resources(
        self,
        request: ResolutionRequest,
        options: SearchOptions,
    ) -> list[NamedResource]:
        records = await self._search_provider.search(
            SearchQuery(resource_type=request.resource_type),
            options,
        )

        resources = [self._decoder.decode(record) for record in records]
        result = filter_resources(resources, request.known_id, request.requested_kind)

        logger.info(f"{result.total} results found for {request.resource_type}")
        logger.info(f"{len(result.by_known_id)} filtered results found with Id={request.known_id}")
        logger.info(
            f"{len(result.matches)} filtered results found with Id={request.known_id} "
            f"and with an IdentifierType of {request.requested_kind.value}"
        )
        return result.matches

    def _build_response(self, outcome: ResolutionOutcome) -> PreferredIdResponse:
        if isinstance(outcome, Found):
            return success_response(outcome.entry)
        if isinstance(outcome, BadRequest):
            return bad_request_response(outcome.reason)
        return not_found_response(outcome.known_id, outcome.requested_kind)

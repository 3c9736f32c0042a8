"""
HTTP Client for the Preferred-Id Service

Calls the $preferred-id operation of a running service (or any FHIR server
exposing it) and returns the resolved identifier.
"""

from __future__ import annotations

import logging

import httpx

from .core.models import IdentifierEntry, IdentifierKind

logger = logging.getLogger(__name__)


class HttpPreferredIdClient:
    """
    Client for the $preferred-id operation.

    A 404 means no NamingSystem matched and yields None; any other error
    status raises ``httpx.HTTPStatusError``.
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Base URL of the service (e.g., "http://localhost:8085")
            timeout_seconds: Timeout for API calls
            transport: Optional httpx transport (used by tests)
        """
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers={"Accept": "application/fhir+json"},
                timeout=httpx.Timeout(self._timeout_seconds),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def preferred_id(
        self,
        known_id: str,
        kind: IdentifierKind = IdentifierKind.URI,
    ) -> IdentifierEntry | None:
        """
        Resolve the identifier of ``kind`` for the NamingSystem owning ``known_id``.

        Args:
            known_id: Any identifier value of the NamingSystem
            kind: Identifier type to return

        Returns:
            IdentifierEntry if found, None otherwise
        """
        client = await self._get_client()
        response = await client.get(
            "/NamingSystem/$preferred-id",
            params={"id": known_id, "type": kind.value},
        )

        if response.status_code == 404:
            logger.debug(f"No NamingSystem with id={known_id} and type={kind.value}")
            return None
        response.raise_for_status()

        parameter = response.json()["parameter"][0]
        return IdentifierEntry(kind=IdentifierKind(parameter["name"]), value=parameter["valueString"])

    async def health_check(self) -> bool:
        """Check if the service is alive."""
        try:
            client = await self._get_client()
            response = await client.get("/health")
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning(f"Health check failed: {e}")
            return False

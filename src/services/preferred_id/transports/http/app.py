"""
FastAPI HTTP Transport for the Preferred-Id Service

Provides REST endpoints:
- /health - Liveness check
- /ready - Readiness check (checks the search backend)
- /{resource_type}/$preferred-id - Resolve a NamingSystem's preferred identifier

NOTE: Do NOT add `from __future__ import annotations` to this file.
PEP 563 breaks FastAPI's runtime introspection for parameter sources.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from ...adapters.database import PostgresSearchProvider, create_db_pool
from ...adapters.decoder import FhirNamingSystemDecoder
from ...adapters.memory import InMemorySearchProvider
from ...config import PreferredIdServiceConfig
from ...core.exceptions import AmbiguousMatchError
from ...core.protocols import SearchProvider
from ...core.responses import internal_error_response
from ...core.service import OPERATION_NAME, IdentificationService
from .context import HttpRequestContext, HttpResponseSink

logger = logging.getLogger(__name__)


# Global state
_service: IdentificationService | None = None
_search_provider: Any = None
_config: PreferredIdServiceConfig | None = None


def get_service() -> IdentificationService:
    """Get the global identification service."""
    if _service is None:
        raise RuntimeError("Identification service not initialized")
    return _service


async def build_search_provider(config: PreferredIdServiceConfig) -> SearchProvider:
    """Create the search provider selected by the configuration."""
    if config.search_backend == "memory":
        if config.bundle_path:
            return InMemorySearchProvider.from_file(config.bundle_path)
        return InMemorySearchProvider()

    pool = await create_db_pool(
        config.postgres_url,
        min_size=config.postgres_pool_min,
        max_size=config.postgres_pool_max,
    )
    return PostgresSearchProvider(pool, table=config.postgres_table)


def create_app(
    config: PreferredIdServiceConfig | None = None,
    search_provider: SearchProvider | None = None,
) -> Any:
    """
    Create a FastAPI application for the preferred-id service.

    Args:
        config: Service configuration
        search_provider: Provider to use instead of the configured backend

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, HTTPException, Request
        from fastapi.responses import JSONResponse, Response
    except ImportError as e:
        raise ImportError(
            "FastAPI is required. Install with: pip install fastapi uvicorn"
        ) from e

    global _service, _search_provider, _config
    _config = config or PreferredIdServiceConfig()
    _search_provider = search_provider
    _service = None
    injected = search_provider is not None
    if injected:
        _service = IdentificationService(search_provider, FhirNamingSystemDecoder())

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler."""
        global _service, _search_provider

        logger.info(f"Starting preferred-id service: {_config.server_name}")

        if not injected:
            _search_provider = await build_search_provider(_config)
            _service = IdentificationService(_search_provider, FhirNamingSystemDecoder())

        logger.info(f"Preferred-id service initialized ({_config.search_backend} backend)")
        yield

        logger.info("Shutting down preferred-id service")
        if not injected and hasattr(_search_provider, "close"):
            await _search_provider.close()
        logger.info("Preferred-id service shut down")

    app = FastAPI(
        title="Preferred-Id Service",
        description="Resolves the preferred identifier of FHIR NamingSystem resources",
        version=_config.server_version,
        lifespan=lifespan,
    )

    @app.get("/health")
    async def liveness_check() -> JSONResponse:
        """Liveness check - just checks if process is alive."""
        return JSONResponse(
            content={"status": "alive"},
            status_code=200,
        )

    @app.get("/ready")
    async def readiness_check() -> JSONResponse:
        """Readiness check - checks the search backend."""
        checks: dict[str, Any] = {}
        all_ready = True

        if _search_provider is None:
            checks["search"] = {"connected": False, "error": "provider not initialized"}
            all_ready = False
        elif hasattr(_search_provider, "check_health"):
            health = await _search_provider.check_health()
            checks["search"] = health
            if not health.get("connected"):
                all_ready = False
        else:
            checks["search"] = {"connected": True}

        status = "ready" if all_ready else "not_ready"
        return JSONResponse(
            content={"status": status, "checks": checks},
            status_code=200 if all_ready else 503,
        )

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with service info."""
        return {
            "name": _config.server_name,
            "version": _config.server_version,
            "endpoints": {
                "health": "/health",
                "ready": "/ready",
                "preferred_id": f"/NamingSystem/${OPERATION_NAME}",
            },
        }

    @app.get("/{resource_type}/$preferred-id")
    async def preferred_id_endpoint(resource_type: str, request: Request) -> Response:
        """Return the identifier of the requested type for a known NamingSystem id."""
        service = get_service()
        context = HttpRequestContext.from_request(
            request,
            resource_type=resource_type,
            information_model=_config.information_model,
        )
        sink = HttpResponseSink(pretty=_config.pretty_json)

        try:
            await service.preferred_id_get(context, sink)
        except AmbiguousMatchError as e:
            logger.error(f"Ambiguous $preferred-id match: {e}")
            response = internal_error_response(e.message)
            sink.respond(response.status_code, response.payload, response.content_type)
        except Exception as e:
            logger.exception(f"Error resolving preferred id: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        return Response(
            content=sink.body(),
            status_code=sink.status_code,
            media_type=sink.content_type,
        )

    return app


async def run_http_server(config: PreferredIdServiceConfig | None = None) -> None:
    """
    Run the HTTP server.

    Args:
        config: Service configuration
    """
    try:
        import uvicorn
    except ImportError as e:
        raise ImportError(
            "Uvicorn is required. Install with: pip install uvicorn"
        ) from e

    _config = config or PreferredIdServiceConfig()
    app = create_app(_config)

    logger.info(f"Starting HTTP server on {_config.host}:{_config.port}")

    server_config = uvicorn.Config(
        app,
        host=_config.host,
        port=_config.port,
        log_level=_config.log_level.lower(),
    )
    server = uvicorn.Server(server_config)
    await server.serve()

"""Main entry point.

Loads the catalog once, then serves MCP over stdio or streamable HTTP.

Architecture (HTTP transport):
    Starlette App
      ├── /mcp      → FastMCP streamable HTTP endpoint
      ├── /health   → catalog status
      └── /metrics  → Prometheus metrics

Usage:
    # stdio (default)
    SYMBOLS_CATALOG_DIR=config/go python -m symbols_mcp_server.app

    # HTTP
    SYMBOLS_TRANSPORT=http SYMBOLS_PORT=3000 python -m symbols_mcp_server.app
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass
import logging
import sys

from fastmcp import FastMCP
from opentelemetry.trace import SpanKind
from pydantic import ValidationError
from starlette.applications import Starlette
from starlette.routing import Mount, Route

from .catalog.loader import LoadResult, load_catalog
from .config import Settings
from .errors import CatalogLoadError
from .observability import configure_logging, init_tracing, record_catalog
from .observability.tracing import create_span
from .resources import ResourceSpec, load_resources
from .runtime.health import build_health_endpoint, metrics_endpoint
from .runtime.signals import install_shutdown_signals
from .search.scoring import ScoringOptions
from .server import create_server
from .service_layer.catalog_service import CatalogService


logger = logging.getLogger(__name__)


@dataclass
class Application:
    """Everything built at startup, passed explicitly to the transports."""

    settings: Settings
    load_result: LoadResult
    service: CatalogService
    mcp: FastMCP


def build_application(settings: Settings) -> Application:
    """Load the catalog and wire the MCP server.

    Raises:
        CatalogLoadError: the catalog could not be built; nothing is served.
    """
    with create_span("catalog.load", kind=SpanKind.INTERNAL, attributes={"catalog.dir": settings.catalog_dir}):
        load_result = load_catalog(settings.resolved_catalog_dir(), settings.resolved_allowed_base_dir())
    record_catalog(load_result.catalog.counts(), load_result.files_processed)

    resources: list[ResourceSpec] = []
    resources_path = settings.resolved_resources_file()
    if resources_path is not None:
        resources = load_resources(resources_path)
        logger.info("Loaded %d resources from %s", len(resources), resources_path)

    service = CatalogService(
        load_result.catalog,
        scoring=ScoringOptions(
            match_all_tags=settings.match_all_tags,
            fuzzy_threshold=settings.fuzzy_threshold,
            min_term_length=settings.fuzzy_min_term_length,
        ),
        max_limit=settings.max_limit,
        command_timeout=settings.command_timeout_seconds,
    )
    mcp = create_server(service, settings, resources)
    return Application(settings=settings, load_result=load_result, service=service, mcp=mcp)


def create_http_app(application: Application) -> Starlette:
    """Create the Starlette app serving MCP plus health and metrics routes."""
    settings = application.settings
    # path="/" ensures MCP endpoint is at /mcp/ (not /mcp/mcp/)
    mcp_http_app = application.mcp.http_app(path="/")

    @asynccontextmanager
    async def lifespan(app: Starlette):
        async with mcp_http_app.lifespan(app):
            logger.info("Serving %d symbols over HTTP", len(application.service.catalog))
            yield
            logger.info("HTTP server shutting down")

    routes: list[Route | Mount] = [
        Route(
            "/health",
            endpoint=build_health_endpoint(
                application.service.catalog,
                name=settings.name,
                version=settings.version,
                files_processed=application.load_result.files_processed,
            ),
            methods=["GET"],
        ),
        Route("/metrics", endpoint=metrics_endpoint, methods=["GET"]),
        Mount("/mcp", app=mcp_http_app),
    ]
    return Starlette(
        debug=settings.log_level.lower() == "debug",
        routes=routes,
        lifespan=lifespan,
    )


def main() -> None:
    """Main entry point."""
    try:
        settings = Settings()
    except ValidationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        sys.exit(2)

    configure_logging(settings.log_level, json_output=settings.log_json)
    init_tracing(service_name=settings.name, resource_attributes={"service.version": settings.version})

    logger.info("Starting %s %s (transport=%s)", settings.name, settings.version, settings.transport)
    try:
        application = build_application(settings)
    except CatalogLoadError as exc:
        logger.error("Catalog load failed, refusing to start: %s", exc, extra={"path": exc.path})
        sys.exit(1)

    if settings.is_http():
        import uvicorn

        logger.info("Starting server on %s:%d", settings.host, settings.port)
        uvicorn.run(
            create_http_app(application),
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
            log_config=None,  # Don't let uvicorn override our logging config
        )
        return

    install_shutdown_signals()
    try:
        application.mcp.run(transport="stdio")
    except KeyboardInterrupt:
        logger.info("Shutdown signal received, exiting")


if __name__ == "__main__":
    main()

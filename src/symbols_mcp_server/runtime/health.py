"""Health and metrics endpoint factories."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.responses import JSONResponse, Response

from symbols_mcp_server.observability.metrics import get_metrics, get_metrics_content_type


if TYPE_CHECKING:
    from starlette.requests import Request

    from symbols_mcp_server.catalog.catalog import Catalog


def build_health_endpoint(catalog: Catalog, *, name: str, version: str, files_processed: int):
    """Return a coroutine function reporting catalog status."""

    async def health_check(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "status": "healthy",
                "name": name,
                "version": version,
                "catalog": {
                    "version": catalog.version.name if catalog.version else None,
                    "files_processed": files_processed,
                    "entities": catalog.counts(),
                },
            }
        )

    return health_check


async def metrics_endpoint(request: Request) -> Response:
    return Response(get_metrics(), media_type=get_metrics_content_type())

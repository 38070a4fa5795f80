"""Service layer - orchestrates catalog queries for the MCP tools."""

from symbols_mcp_server.service_layer.catalog_service import CatalogService


__all__ = ["CatalogService"]

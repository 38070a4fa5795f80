"""Catalog construction and the immutable catalog snapshot."""

from symbols_mcp_server.catalog.catalog import Catalog, CatalogBuilder
from symbols_mcp_server.catalog.loader import LoadResult, load_catalog, resolve_catalog_root


__all__ = ["Catalog", "CatalogBuilder", "LoadResult", "load_catalog", "resolve_catalog_root"]

"""Centralized configuration for symbols-mcp-server using Pydantic Settings."""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strictly typed configuration loaded from ``SYMBOLS_*`` environment variables.

    All values are validated at startup; an invalid value aborts the process
    before the catalog is loaded.
    """

    model_config = SettingsConfigDict(
        env_prefix="SYMBOLS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",  # Ignore extra env vars not defined in model
    )

    # Server identity
    name: str = Field(default="symbols-mcp-server", min_length=1, description="MCP server name")
    version: str = Field(default="2025.8.1", min_length=1, description="MCP server version")

    # Transport
    transport: Literal["stdio", "http"] = Field(default="stdio", description="MCP transport: stdio or http")
    host: str = Field(default="127.0.0.1", description="HTTP bind host")
    port: int = Field(default=3000, ge=0, le=65535, description="HTTP bind port")

    # Catalog
    catalog_dir: str = Field(default="config/go", description="Root directory of YAML definition files")
    allowed_base_dir: str = Field(
        default="config",
        description="Catalog roots must resolve inside this directory",
    )
    resources_file: str = Field(default="", description="Optional YAML file listing MCP resources")

    # Pagination
    default_limit: int = Field(default=25, ge=1, description="Default page size for tools")
    max_limit: int = Field(default=1000, ge=1, description="Largest accepted page size")

    # Search
    fuzzy_threshold: float = Field(default=0.8, ge=0.0, le=1.0, description="Minimum fuzzy word similarity")
    fuzzy_min_term_length: int = Field(default=3, ge=1, description="Shorter terms only match as substrings")
    match_all_tags: bool = Field(default=False, description="Score every matching tag instead of the first")

    # Timeouts
    http_timeout: float = Field(default=30.0, gt=0, description="Remote resource fetch timeout in seconds")
    command_timeout_seconds: float = Field(default=10.0, gt=0, description="Per-call command budget in seconds")

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    # Security
    mask_error_details: bool = Field(
        default=True, description="Hide internal error details from tool responses"
    )

    @field_validator("transport", mode="before")
    @classmethod
    def _normalize_transport(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip().lower()
            if value == "streamablehttp":
                return "http"
        return value

    @model_validator(mode="after")
    def _check_limits(self) -> "Settings":
        if self.default_limit > self.max_limit:
            raise ValueError("SYMBOLS_DEFAULT_LIMIT cannot exceed SYMBOLS_MAX_LIMIT")
        return self

    def resolved_catalog_dir(self, cwd: Path | None = None) -> Path:
        """Catalog directory resolved against ``cwd`` (defaults to the working directory)."""
        return ((cwd or Path.cwd()) / self.catalog_dir).resolve()

    def resolved_allowed_base_dir(self, cwd: Path | None = None) -> Path:
        return ((cwd or Path.cwd()) / self.allowed_base_dir).resolve()

    def resolved_resources_file(self, cwd: Path | None = None) -> Path | None:
        if not self.resources_file:
            return None
        return ((cwd or Path.cwd()) / self.resources_file).resolve()

    def is_http(self) -> bool:
        return self.transport == "http"

"""Static MCP resources: inline text, local files or remote URLs.

Resources are declared in a YAML list::

    - title: Getting Started
      type: remote            # inline | local | remote
      description: SDK quickstart guide
      mimeType: text/markdown
      content: https://example.com/quickstart.md
"""

from __future__ import annotations

import logging
from pathlib import Path
import re
from typing import Literal
from urllib.parse import quote

import anyio
import httpx
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
import yaml

from symbols_mcp_server.errors import CatalogIOError, ConfigValidationError, RemoteFetchError


logger = logging.getLogger(__name__)

DEFAULT_FETCH_TIMEOUT = 30.0


class ResourceSpec(BaseModel):
    """One resource declaration."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    title: str = Field(min_length=1)
    uri: str | None = None
    type: Literal["inline", "local", "remote"]
    description: str = Field(min_length=1)
    mime_type: str = Field(
        default="text/plain",
        min_length=1,
        validation_alias=AliasChoices("mime_type", "mimeType"),
    )
    content: str = Field(min_length=1, description="Inline text, a file path or a URL depending on type")
    base_dir: Path | None = Field(default=None, exclude=True)

    def get_uri(self) -> str:
        if self.uri:
            return self.uri if self.uri.startswith("resource://") else f"resource://{self.uri}"
        slug = re.sub(r"\s+", "-", self.title).lower()
        return f"resource://{quote(slug, safe='')}"

    def local_path(self) -> Path:
        path = Path(self.content)
        if not path.is_absolute() and self.base_dir is not None:
            path = self.base_dir / path
        return path


_RESOURCE_LIST = TypeAdapter(list[ResourceSpec])


def load_resources(path: Path) -> list[ResourceSpec]:
    """Parse a YAML resources file. Local paths resolve relative to its directory."""
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or []
    except OSError as exc:
        raise CatalogIOError(f"Failed to read {path}: {exc}", path=path) from exc
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"Invalid YAML in {path}: {exc}", path=path) from exc

    try:
        specs = _RESOURCE_LIST.validate_python(raw)
    except ValidationError as exc:
        raise ConfigValidationError(f"{path}: invalid resources: {exc}", path=path) from exc

    base_dir = path.parent
    return [spec.model_copy(update={"base_dir": base_dir}) for spec in specs]


async def fetch_remote(url: str, *, timeout: float = DEFAULT_FETCH_TIMEOUT, client: httpx.AsyncClient | None = None) -> str:
    """GET ``url`` and return the body text within ``timeout`` seconds.

    Raises:
        RemoteFetchError: non-success status, transport error or timeout.
    """
    owns_client = client is None
    http = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
    try:
        with anyio.fail_after(timeout):
            response = await http.get(url)
    except (httpx.HTTPError, TimeoutError) as exc:
        logger.error("Failed to fetch remote resource %s: %s", url, exc)
        raise RemoteFetchError(url) from exc
    finally:
        if owns_client:
            await http.aclose()

    if not response.is_success:
        logger.error("Failed to fetch remote resource %s: status=%d", url, response.status_code)
        raise RemoteFetchError(url, response.status_code)
    return response.text


async def read_resource(
    spec: ResourceSpec,
    *,
    timeout: float = DEFAULT_FETCH_TIMEOUT,
    client: httpx.AsyncClient | None = None,
) -> str:
    """Return the text content of ``spec``."""
    if spec.type == "inline":
        return spec.content
    if spec.type == "local":
        return await anyio.Path(spec.local_path()).read_text(encoding="utf-8")
    return await fetch_remote(spec.content, timeout=timeout, client=client)

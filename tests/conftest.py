"""Shared test fixtures and configuration."""

import os
from pathlib import Path
from textwrap import dedent

import pytest

from symbols_mcp_server.catalog.catalog import Catalog, CatalogBuilder
from symbols_mcp_server.config import Settings
from symbols_mcp_server.domain.model import CommandSymbol, FunctionSymbol, ModelSymbol


@pytest.fixture(autouse=True)
def clean_symbols_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer SYMBOLS_* variables out of Settings() in tests."""
    for key in list(os.environ):
        if key.upper().startswith("SYMBOLS_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def write_yaml():
    """Write dedented YAML text to ``path``, creating parent directories."""

    def _write(path: Path, text: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dedent(text), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def catalog_root(tmp_path: Path) -> Path:
    """Allowed base directory with an empty ``go`` catalog inside it."""
    root = tmp_path / "config" / "go"
    root.mkdir(parents=True)
    return root


@pytest.fixture
def sample_catalog() -> Catalog:
    builder = CatalogBuilder()
    builder.add(
        FunctionSymbol(
            id="CreateUser@iam.function",
            name="CreateUser",
            description="Create a new user account",
            tags=["user", "create"],
        )
    )
    builder.add(
        FunctionSymbol(
            id="DeleteUser@iam.function",
            name="DeleteUser",
            description="Remove a user account permanently",
            tags=["user", "delete"],
        )
    )
    builder.add(
        ModelSymbol(
            id="UserProfile@iam.model",
            name="UserProfile",
            description="Public profile of a user",
            tags=["user", "profile"],
            fields={"displayName": {"type": "string", "required": True}},
        )
    )
    builder.add(CommandSymbol(ns="demo", name="add", summary="Add two numbers", handler="add"))
    builder.add(CommandSymbol(ns="demo", name="about", summary="About", static_data={"message": "hi"}))
    return builder.build()


@pytest.fixture
def catalog_settings(catalog_root: Path, write_yaml) -> Settings:
    """Settings pointing at a small catalog with one resource."""
    write_yaml(catalog_root / "version.yaml", "version:\n  name: v9.9.9\n")
    write_yaml(
        catalog_root / "iam.yaml",
        """
        functions:
          - id: CreateUser@iam.function
            name: CreateUser
            description: Create a new user account
        commands:
          - ns: demo
            name: hello
            handler: hello
        """,
    )
    write_yaml(
        catalog_root.parent / "resources.yaml",
        "- {title: Intro, type: inline, description: Intro text, content: hello}\n",
    )
    return Settings(
        _env_file=None,
        catalog_dir=str(catalog_root),
        allowed_base_dir=str(catalog_root.parent),
        resources_file=str(catalog_root.parent / "resources.yaml"),
    )

"""Pydantic section models with code-baked defaults.

Sparse TOML contract: defaults live here, musegraph.toml only carries
overrides. A project with ``data/artists.json`` needs no config at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from musegraph.domain.types import StubPolicy


class DataConfig(BaseModel):
    """[data] section. File names are resolved against ``dir``.

    An empty string disables an optional document.
    """

    model_config = {"frozen": True}

    dir: str = "data"
    base_relations: str = "artists.json"
    work_credits: str = "song-credits.json"
    collections: str = "albums.json"


class BuildConfig(BaseModel):
    """[build] section."""

    model_config = {"frozen": True}

    stub_policy: StubPolicy = StubPolicy.AUTO_STUB


class QueryConfig(BaseModel):
    """[query] section."""

    model_config = {"frozen": True}

    search_limit: int = Field(default=10, ge=0)
    rank_top: int = Field(default=20, ge=1)
    normalize_centrality: bool = True


class McpConfig(BaseModel):
    """[mcp] section."""

    model_config = {"frozen": True}

    transport: str = "stdio"
    host: str = "127.0.0.1"
    port: int = 8000

"""Shared pytest fixtures and test helpers for musegraph tests."""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
import structlog
from click.testing import CliRunner

from musegraph.infrastructure.datasource import GraphDataSource, SourcePaths
from musegraph.infrastructure.graph import GraphBuilder, GraphStore
from musegraph.services.telemetry import disable_telemetry

# ---------------------------------------------------------------------------
# Sample catalogue
#
# Built graph (insertion order):
#   taylor-swift, jack-antonoff, aaron-dessner, lonely-artist,
#   song-anti-hero, song-willow, album-midnights, song-karma (stub)
#
# Communities: C1 = everything but lonely-artist, C2 = [lonely-artist]
# ---------------------------------------------------------------------------

ARTISTS: dict[str, Any] = {
    "nodes": [
        {"id": "taylor-swift", "name": "Taylor Swift", "genre": "pop"},
        {"id": "jack-antonoff", "name": "Jack Antonoff"},
        {"id": "aaron-dessner", "name": "Aaron Dessner"},
        {"id": "lonely-artist", "name": "Lonely Artist"},
    ],
    "edges": [
        {
            "source": "taylor-swift",
            "target": "jack-antonoff",
            "weight": 3,
            "relation": "collaborates",
        },
    ],
}

SONG_CREDITS: dict[str, Any] = {
    "songs": [
        {
            "id": "song-anti-hero",
            "title": "Anti-Hero",
            "artistIds": ["taylor-swift"],
            "year": 2022,
            "credits": {
                "writers": ["taylor-swift", "jack-antonoff"],
                "producers": ["jack-antonoff"],
            },
        },
        {
            "id": "song-willow",
            "title": "willow",
            "artistIds": ["taylor-swift"],
            "credits": {"producers": ["aaron-dessner"]},
        },
    ]
}

ALBUMS: dict[str, Any] = {
    "albums": [
        {
            "id": "album-midnights",
            "title": "Midnights",
            "artistIds": ["taylor-swift"],
            "year": 2022,
            "songIds": ["song-anti-hero", "song-karma"],
        }
    ]
}


def write_dataset(
    directory: Path,
    *,
    artists: Any = ARTISTS,
    song_credits: Any = SONG_CREDITS,
    albums: Any = ALBUMS,
) -> Path:
    """Write the three documents into *directory*. ``None`` skips a file."""
    directory.mkdir(parents=True, exist_ok=True)
    for name, doc in (
        ("artists.json", artists),
        ("song-credits.json", song_credits),
        ("albums.json", albums),
    ):
        path = directory / name
        if doc is None:
            path.unlink(missing_ok=True)
        elif isinstance(doc, str):
            path.write_text(doc, encoding="utf-8")
        else:
            path.write_text(json.dumps(doc), encoding="utf-8")
    return directory


def source_for(directory: Path, **kwargs: Any) -> GraphDataSource:
    """A GraphDataSource reading the default file names from *directory*."""
    paths = SourcePaths(
        base_relations=directory / "artists.json",
        work_credits=directory / "song-credits.json",
        collections=directory / "albums.json",
    )
    return GraphDataSource(paths, **kwargs)


def sample_docs() -> tuple[dict[str, Any], dict[str, Any], dict[str, Any]]:
    """Fresh deep copies of the sample documents, safe to mutate."""
    return copy.deepcopy(ARTISTS), copy.deepcopy(SONG_CREDITS), copy.deepcopy(ALBUMS)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_ambient_state() -> Generator[None]:
    """Undo logging and telemetry changes made by CLI invocations."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    muse = logging.getLogger("musegraph")
    muse_level = muse.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    muse.setLevel(muse_level)
    structlog.reset_defaults()
    disable_telemetry()


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment out of settings resolution."""
    monkeypatch.delenv("MUSEGRAPH_CONFIG", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Temporary ``data/`` directory holding the sample catalogue."""
    return write_dataset(tmp_path / "data")


@pytest.fixture
def source(data_dir: Path) -> GraphDataSource:
    """Initialized data source over the sample catalogue."""
    src = source_for(data_dir)
    src.initialize()
    return src


@pytest.fixture
def store() -> GraphStore:
    """GraphStore built in memory from the sample catalogue."""
    builder = GraphBuilder()
    builder.build(*sample_docs())
    return builder.store

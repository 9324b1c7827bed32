"""Tests for LifecycleService — health and reload."""

from __future__ import annotations

from pathlib import Path

from musegraph import __version__
from musegraph.infrastructure.datasource import GraphDataSource
from musegraph.services.lifecycle import LifecycleService
from musegraph.services.query import QueryService
from tests.conftest import ARTISTS, source_for, write_dataset


class TestHealth:
    def test_constant_payload(self, tmp_path: Path) -> None:
        # No data at all: health must not touch the graph.
        result = LifecycleService(source_for(tmp_path)).health()
        assert result.ok
        assert result.data == {"status": "OK", "service": "musegraph", "version": __version__}


class TestReload:
    def test_reload_reports_counts(self, source: GraphDataSource) -> None:
        result = LifecycleService(source).reload()
        assert result.ok
        assert result.op == "reload"
        assert result.data["node_count"] == 8
        assert result.data["community_count"] == 2
        assert len(result.data["phases"]) == 3

    def test_reload_picks_up_changes(self, data_dir: Path, source: GraphDataSource) -> None:
        before = QueryService(source)
        write_dataset(
            data_dir,
            artists={
                "nodes": [*ARTISTS["nodes"], {"id": "new-artist", "name": "New Artist"}],
                "edges": ARTISTS["edges"],
            },
        )
        assert LifecycleService(source).reload().data["node_count"] == 9
        # Services created before the reload keep their snapshot.
        assert before.node("new-artist").data["node"] is None
        assert QueryService(source).node("new-artist").data["node"] is not None

    def test_failed_reload(self, data_dir: Path, source: GraphDataSource) -> None:
        (data_dir / "artists.json").write_text("{broken", encoding="utf-8")
        result = LifecycleService(source).reload()
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "RELOAD_FAILED"
        assert source.store.node_count == 8

    def test_reload_surfaces_warnings(self, data_dir: Path, source: GraphDataSource) -> None:
        (data_dir / "albums.json").unlink()
        result = LifecycleService(source).reload()
        assert result.ok
        assert any("collections" in w for w in result.warnings)

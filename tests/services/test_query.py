"""Tests for QueryService — read-only queries over the published graph."""

from __future__ import annotations

from pathlib import Path

import pytest

from musegraph.domain.types import NodeKind
from musegraph.infrastructure.datasource import DataSourceError, GraphDataSource
from musegraph.services.query import QueryService
from tests.conftest import ARTISTS, source_for, write_dataset


@pytest.fixture
def svc(source: GraphDataSource) -> QueryService:
    return QueryService(source)


# ---------------------------------------------------------------------------
# node / neighbors
# ---------------------------------------------------------------------------


class TestNode:
    def test_found(self, svc: QueryService) -> None:
        result = svc.node("taylor-swift")
        assert result.ok
        assert result.op == "node"
        node = result.data["node"]
        assert node["name"] == "Taylor Swift"
        assert node["kind"] == "performer"
        assert node["community_id"] == "C1"
        assert node["degree"] == 4
        assert node["centrality"] == pytest.approx(4 / 7)
        assert node["attributes"] == {"genre": "pop"}

    def test_work_fields(self, svc: QueryService) -> None:
        node = svc.node("song-anti-hero").data["node"]
        assert node["kind"] == "work"
        assert node["year"] == 2022
        assert node["artist_ids"] == ["taylor-swift"]
        assert node["credits"]["producers"] == ["jack-antonoff"]

    def test_unknown_is_empty_not_error(self, svc: QueryService) -> None:
        result = svc.node("nobody")
        assert result.ok
        assert result.data == {"id": "nobody", "node": None}


class TestNeighbors:
    def test_insertion_order(self, svc: QueryService) -> None:
        result = svc.neighbors("taylor-swift")
        assert result.ok
        ids = [item["id"] for item in result.data["items"]]
        assert ids == ["jack-antonoff", "song-anti-hero", "song-willow", "album-midnights"]
        assert result.data["count"] == 4

    def test_kind_filter(self, svc: QueryService) -> None:
        result = svc.neighbors("taylor-swift", kinds={NodeKind.WORK})
        assert [item["id"] for item in result.data["items"]] == ["song-anti-hero", "song-willow"]

    def test_unknown_node(self, svc: QueryService) -> None:
        result = svc.neighbors("nobody")
        assert result.ok
        assert result.data["items"] == []

    def test_isolated_node(self, svc: QueryService) -> None:
        assert svc.neighbors("lonely-artist").data["count"] == 0


# ---------------------------------------------------------------------------
# shortest_path
# ---------------------------------------------------------------------------


class TestShortestPath:
    def test_found(self, svc: QueryService) -> None:
        result = svc.shortest_path("aaron-dessner", "song-karma")
        assert result.ok
        path = result.data["path"]
        assert path["length"] == 4
        assert [n["id"] for n in path["nodes"]][0] == "aaron-dessner"
        assert [n["id"] for n in path["nodes"]][-1] == "song-karma"

    def test_self(self, svc: QueryService) -> None:
        path = svc.shortest_path("taylor-swift", "taylor-swift").data["path"]
        assert path["length"] == 0
        assert len(path["nodes"]) == 1

    def test_no_path(self, svc: QueryService) -> None:
        result = svc.shortest_path("taylor-swift", "lonely-artist")
        assert result.ok
        assert result.data["path"] is None

    def test_unknown_endpoint(self, svc: QueryService) -> None:
        assert svc.shortest_path("taylor-swift", "nobody").data["path"] is None


# ---------------------------------------------------------------------------
# search
# ---------------------------------------------------------------------------


class TestSearch:
    def test_substring_case_insensitive(self, svc: QueryService) -> None:
        result = svc.search("tay")
        assert result.ok
        assert [item["id"] for item in result.data["items"]] == ["taylor-swift"]

    def test_blank_query_matches_nothing(self, svc: QueryService) -> None:
        assert svc.search("").data["count"] == 0
        assert svc.search("   ").data["count"] == 0

    def test_whitespace_is_part_of_the_query(self, svc: QueryService) -> None:
        assert svc.search("swift ").data["count"] == 0
        assert [i["id"] for i in svc.search("r s").data["items"]] == ["taylor-swift"]

    def test_store_order(self, svc: QueryService) -> None:
        ids = [item["id"] for item in svc.search("AN").data["items"]]
        assert ids == ["jack-antonoff", "song-anti-hero"]

    def test_limit(self, svc: QueryService) -> None:
        assert svc.search("an", limit=1).data["count"] == 1
        assert svc.search("an", limit=0).data["count"] == 2

    def test_kind_filter(self, svc: QueryService) -> None:
        result = svc.search("an", kinds={NodeKind.WORK})
        assert [item["id"] for item in result.data["items"]] == ["song-anti-hero"]

    def test_stub_searchable_by_id(self, svc: QueryService) -> None:
        result = svc.search("karma")
        assert [item["id"] for item in result.data["items"]] == ["song-karma"]
        assert result.data["items"][0]["stub"] is True


# ---------------------------------------------------------------------------
# community / communities
# ---------------------------------------------------------------------------


class TestCommunities:
    def test_community_of_node(self, svc: QueryService) -> None:
        community = svc.community("song-willow").data["community"]
        assert community["id"] == "C1"
        assert community["node_count"] == 7

    def test_singleton_community(self, svc: QueryService) -> None:
        community = svc.community("lonely-artist").data["community"]
        assert community["id"] == "C2"
        assert [n["id"] for n in community["nodes"]] == ["lonely-artist"]

    def test_unknown(self, svc: QueryService) -> None:
        result = svc.community("nobody")
        assert result.ok
        assert result.data["community"] is None

    def test_communities_partition(self, svc: QueryService) -> None:
        result = svc.communities()
        assert result.data["count"] == 2
        members = [n["id"] for c in result.data["communities"] for n in c["nodes"]]
        assert len(members) == 8
        assert len(set(members)) == 8

    def test_new_edge_merges_communities(self, tmp_path: Path) -> None:
        artists = {
            "nodes": ARTISTS["nodes"],
            "edges": [
                *ARTISTS["edges"],
                {"source": "lonely-artist", "target": "aaron-dessner"},
            ],
        }
        write_dataset(tmp_path, artists=artists)
        svc = QueryService(source_for(tmp_path))
        assert svc.communities().data["count"] == 1
        assert svc.community("lonely-artist").data["community"]["id"] == "C1"


# ---------------------------------------------------------------------------
# graph / centrality / stats
# ---------------------------------------------------------------------------


class TestGraph:
    def test_whole_graph(self, svc: QueryService) -> None:
        data = svc.graph().data
        assert data["node_count"] == 8
        assert data["edge_count"] == 8
        assert len(data["communities"]) == 2

    def test_kind_filter_drops_dangling_edges(self, svc: QueryService) -> None:
        data = svc.graph(kinds={NodeKind.PERFORMER}).data
        assert data["node_count"] == 4
        assert data["edges"] == [
            {
                "source": "taylor-swift",
                "target": "jack-antonoff",
                "weight": 3.0,
                "relation": "collaborates",
            }
        ]
        # Community labels stay partition-wide.
        assert [c["id"] for c in data["communities"]] == ["C1", "C2"]

    def test_filter_drops_empty_communities(self, svc: QueryService) -> None:
        data = svc.graph(kinds={NodeKind.COLLECTION}).data
        assert [c["id"] for c in data["communities"]] == ["C1"]


class TestCentrality:
    def test_ranked(self, svc: QueryService) -> None:
        result = svc.centrality(top=3)
        items = result.data["items"]
        assert result.data["normalized"] is True
        assert [i["id"] for i in items] == ["taylor-swift", "song-anti-hero", "album-midnights"]
        assert items[0]["score"] == pytest.approx(round(4 / 7, 6))

    def test_raw(self, svc: QueryService) -> None:
        items = svc.centrality(top=1, normalize=False).data["items"]
        assert items[0]["score"] == 4.0

    def test_kind_filter(self, svc: QueryService) -> None:
        items = svc.centrality(kinds={NodeKind.WORK}).data["items"]
        assert [i["id"] for i in items] == ["song-anti-hero", "song-willow", "song-karma"]


class TestStats:
    def test_counts(self, svc: QueryService) -> None:
        result = svc.stats()
        assert result.ok
        data = result.data
        assert data["node_count"] == 8
        assert data["edge_count"] == 8
        assert data["community_count"] == 2
        assert data["largest_community"] == 7
        assert data["stub_count"] == 1
        assert data["kinds"] == {"performer": 4, "work": 3, "collection": 1}
        assert [p["phase"] for p in data["phases"]] == [
            "base_relations",
            "work_credits",
            "collections",
        ]

    def test_warnings_surface(self, tmp_path: Path) -> None:
        write_dataset(tmp_path, albums=None)
        result = QueryService(source_for(tmp_path)).stats()
        assert result.ok
        assert len(result.warnings) == 1


class TestInitFailure:
    def test_missing_base_raises(self, tmp_path: Path) -> None:
        with pytest.raises(DataSourceError):
            QueryService(source_for(tmp_path))

"""Tests for the Node model and its upsert merge."""

from __future__ import annotations

from musegraph.domain.nodes import (
    CollectionExtra,
    Credits,
    Node,
    PerformerExtra,
    WorkExtra,
)
from musegraph.domain.types import NodeKind


class TestNode:
    def test_default_kind_is_performer(self) -> None:
        node = Node(id="a", name="A")
        assert node.kind is NodeKind.PERFORMER
        assert node.community_id is None
        assert node.stub is False

    def test_stub_for_uses_id_as_name(self) -> None:
        stub = Node.stub_for("ghost")
        assert stub.id == "ghost"
        assert stub.name == "ghost"
        assert stub.stub is True
        assert stub.kind is NodeKind.PERFORMER

    def test_stub_for_work(self) -> None:
        assert Node.stub_for("song-x", NodeKind.WORK).kind is NodeKind.WORK

    def test_extra_discriminated_from_dict(self) -> None:
        node = Node.model_validate(
            {"id": "w", "name": "W", "extra": {"kind": "work", "year": 1999}}
        )
        assert isinstance(node.extra, WorkExtra)
        assert node.extra.year == 1999


class TestMerge:
    def test_explicit_fields_win(self) -> None:
        original = Node(id="a", name="Old", extra=PerformerExtra(attributes={"genre": "pop"}))
        merged = original.merged_with(Node(id="a", name="New"))
        assert merged.name == "New"
        assert merged.extra.attributes == {"genre": "pop"}  # type: ignore[union-attr]

    def test_performer_attributes_merge(self) -> None:
        a = Node(id="a", name="A", extra=PerformerExtra(attributes={"genre": "pop", "x": 1}))
        b = Node(id="a", name="A", extra=PerformerExtra(attributes={"x": 2}))
        merged = a.merged_with(b)
        assert merged.extra.attributes == {"genre": "pop", "x": 2}  # type: ignore[union-attr]

    def test_same_kind_payload_merges_field_by_field(self) -> None:
        a = Node(id="w", name="W", extra=WorkExtra(year=2020, artist_ids=["x"]))
        b = Node(id="w", name="W", extra=WorkExtra(credits=Credits(writers=["y"])))
        merged = a.merged_with(b)
        assert isinstance(merged.extra, WorkExtra)
        assert merged.extra.year == 2020
        assert merged.extra.artist_ids == ["x"]
        assert merged.extra.credits.writers == ["y"]

    def test_kind_change_replaces_payload(self) -> None:
        stub = Node.stub_for("album-1")
        real = Node(id="album-1", name="Album", extra=CollectionExtra(work_ids=["w"]))
        merged = stub.merged_with(real)
        assert merged.kind is NodeKind.COLLECTION
        assert merged.name == "Album"

    def test_real_record_clears_stub_flag(self) -> None:
        merged = Node.stub_for("a").merged_with(Node(id="a", name="A"))
        assert merged.stub is False

    def test_stub_merge_keeps_real_node(self) -> None:
        merged = Node(id="a", name="A").merged_with(Node.stub_for("a"))
        assert merged.stub is False

    def test_with_community(self) -> None:
        node = Node(id="a", name="A").with_community("C3")
        assert node.community_id == "C3"


class TestCredits:
    def test_is_empty(self) -> None:
        assert Credits().is_empty()
        assert not Credits(producers=["p"]).is_empty()

"""Node model — a common field set plus a kind-discriminated payload.

Every node carries ``id``, ``name``, ``community_id`` and ``stub``.
Everything that depends on the kind lives in ``extra``:

- :class:`PerformerExtra`: free-form attributes from the base relations.
- :class:`WorkExtra`: release year, primary artists, role credits.
- :class:`CollectionExtra`: release year, artists, member work ids.

Merging (``Node.merged_with``) follows the upsert contract of the store:
fields explicitly set on the incoming record win, everything else is kept.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Self

from pydantic import BaseModel, Field

from musegraph.domain.types import NodeKind


class Credits(BaseModel):
    """Role credits on a work: named lists of performer ids."""

    model_config = {"frozen": True}

    writers: list[str] = Field(default_factory=list)
    producers: list[str] = Field(default_factory=list)
    performers: list[str] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.writers or self.producers or self.performers)


class _Extra(BaseModel):
    """Shared merge behaviour for kind payloads."""

    model_config = {"frozen": True}

    def merged_with(self, other: Self) -> Self:
        """Shallow merge: fields explicitly set on *other* win."""
        update = {name: getattr(other, name) for name in other.model_fields_set if name != "kind"}
        return self.model_copy(update=update)


class PerformerExtra(_Extra):
    kind: Literal[NodeKind.PERFORMER] = NodeKind.PERFORMER
    attributes: dict[str, Any] = Field(default_factory=dict)

    def merged_with(self, other: Self) -> Self:
        return self.model_copy(update={"attributes": {**self.attributes, **other.attributes}})


class WorkExtra(_Extra):
    kind: Literal[NodeKind.WORK] = NodeKind.WORK
    year: int | None = None
    artist_ids: list[str] = Field(default_factory=list)
    credits: Credits = Field(default_factory=Credits)


class CollectionExtra(_Extra):
    kind: Literal[NodeKind.COLLECTION] = NodeKind.COLLECTION
    year: int | None = None
    artist_ids: list[str] = Field(default_factory=list)
    work_ids: list[str] = Field(default_factory=list)


NodeExtra = Annotated[
    PerformerExtra | WorkExtra | CollectionExtra,
    Field(discriminator="kind"),
]

_EXTRA_BY_KIND: dict[NodeKind, type[_Extra]] = {
    NodeKind.PERFORMER: PerformerExtra,
    NodeKind.WORK: WorkExtra,
    NodeKind.COLLECTION: CollectionExtra,
}


class Node(BaseModel):
    """A single entity in the fused graph."""

    model_config = {"frozen": True}

    id: str
    name: str
    community_id: str | None = None
    stub: bool = False
    extra: NodeExtra = Field(default_factory=PerformerExtra)

    @property
    def kind(self) -> NodeKind:
        return self.extra.kind

    @classmethod
    def stub_for(cls, node_id: str, kind: NodeKind = NodeKind.PERFORMER) -> Node:
        """Minimal node for an id referenced before it was defined."""
        return cls(id=node_id, name=node_id, stub=True, extra=_EXTRA_BY_KIND[kind]())

    def merged_with(self, other: Node) -> Node:
        """Upsert *other* into this node.

        Matching kinds merge payloads field by field; a different kind on
        the incoming record replaces the payload outright. A node stays a
        stub only while every record merged into it was a stub.
        """
        update: dict[str, Any] = {
            name: getattr(other, name)
            for name in other.model_fields_set
            if name not in ("id", "extra", "stub")
        }
        if "extra" in other.model_fields_set:
            if other.kind == self.kind:
                update["extra"] = self.extra.merged_with(other.extra)  # type: ignore[arg-type]
            else:
                update["extra"] = other.extra
        update["stub"] = self.stub and other.stub
        return self.model_copy(update=update)

    def with_community(self, community_id: str | None) -> Node:
        return self.model_copy(update={"community_id": community_id})

"""Typed payload contracts for the service and adapter boundary.

Views are built from store records and dumped to plain dicts before they
leave the service layer, so CLI and MCP consumers see one stable shape.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict

from musegraph.domain.nodes import CollectionExtra, Node, PerformerExtra, WorkExtra
from musegraph.infrastructure.graph.store import Edge

T = TypeVar("T", bound=BaseModel)


def dump_validated(model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    return model_cls.model_validate(data).model_dump(mode="json")


class CreditsView(BaseModel):
    writers: list[str]
    producers: list[str]
    performers: list[str]


class NodeView(BaseModel):
    """A node as exposed to clients, with its structural scores."""

    model_config = ConfigDict(extra="forbid")

    id: str
    name: str
    kind: str
    community_id: str | None
    degree: int
    centrality: float
    stub: bool = False
    year: int | None = None
    artist_ids: list[str] | None = None
    credits: CreditsView | None = None
    work_ids: list[str] | None = None
    attributes: dict[str, Any] | None = None

    @classmethod
    def from_node(cls, node: Node, *, degree: int, centrality: float) -> NodeView:
        fields: dict[str, Any] = {
            "id": node.id,
            "name": node.name,
            "kind": node.kind.value,
            "community_id": node.community_id,
            "degree": degree,
            "centrality": centrality,
            "stub": node.stub,
        }
        extra = node.extra
        if isinstance(extra, PerformerExtra):
            fields["attributes"] = extra.attributes or None
        elif isinstance(extra, WorkExtra):
            fields.update(
                year=extra.year,
                artist_ids=extra.artist_ids,
                credits=CreditsView.model_validate(extra.credits.model_dump()),
            )
        elif isinstance(extra, CollectionExtra):
            fields.update(year=extra.year, artist_ids=extra.artist_ids, work_ids=extra.work_ids)
        return cls(**fields)


class EdgeView(BaseModel):
    source: str
    target: str
    weight: float
    relation: str

    @classmethod
    def from_edge(cls, edge: Edge) -> EdgeView:
        return cls(source=edge.source, target=edge.target, weight=edge.weight, relation=edge.relation)


class CommunityView(BaseModel):
    id: str
    nodes: list[NodeView]
    node_count: int


class PathView(BaseModel):
    nodes: list[NodeView]
    length: int


class GraphData(BaseModel):
    """Payload contract for ``QueryService.graph``."""

    nodes: list[NodeView]
    edges: list[EdgeView]
    communities: list[CommunityView]
    node_count: int
    edge_count: int


class RankedNode(NodeView):
    score: float


class StatsData(BaseModel):
    """Payload contract for ``QueryService.stats``."""

    node_count: int
    edge_count: int
    community_count: int
    largest_community: int
    stub_count: int
    kinds: dict[str, int]
    phases: list[dict[str, Any]]

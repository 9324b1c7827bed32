"""QueryService — read-only structural queries over the fused graph.

Wraps a single published GraphStore snapshot plus the algorithms in
:mod:`musegraph.infrastructure.graph.algorithms`. Nothing here mutates
the store, so any number of services may run concurrently.

Empty answers are not errors: an unknown id, a missing path, or a blank
search all come back as ``ok=True`` with a None or empty payload.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Collection
from functools import cached_property
from typing import TYPE_CHECKING, Any, TypeAlias

from musegraph.domain.types import NodeKind
from musegraph.infrastructure.graph import algorithms
from musegraph.services.base import BaseService
from musegraph.services.contracts import (
    CommunityView,
    EdgeView,
    GraphData,
    NodeView,
    PathView,
    RankedNode,
    StatsData,
    dump_validated,
)
from musegraph.services.result import ServiceResult
from musegraph.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from musegraph.domain.nodes import Node
    from musegraph.infrastructure.datasource import GraphDataSource

KindFilter: TypeAlias = Collection[NodeKind] | None


class QueryService(BaseService):
    """Answers graph, node, neighbors, path, search and community queries."""

    def __init__(self, source: GraphDataSource) -> None:
        super().__init__(source)
        self._store, self._report = source.snapshot()

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    @cached_property
    def _centrality(self) -> dict[str, float]:
        return algorithms.degree_centrality(self._store, normalize=True)

    def _view(self, node: Node) -> NodeView:
        return NodeView.from_node(
            node,
            degree=self._store.degree(node.id),
            centrality=self._centrality.get(node.id, 0.0),
        )

    def _views(self, node_ids: list[str], kinds: KindFilter = None) -> list[NodeView]:
        views: list[NodeView] = []
        for node_id in node_ids:
            node = self._store.get(node_id)
            if node is not None and _matches(node, kinds):
                views.append(self._view(node))
        return views

    @staticmethod
    def _dump(views: list[NodeView]) -> list[dict[str, Any]]:
        return [v.model_dump(mode="json") for v in views]

    # ------------------------------------------------------------------
    # graph — whole graph, optionally restricted to some kinds
    # ------------------------------------------------------------------

    @traced
    def graph(self, *, kinds: KindFilter = None) -> ServiceResult:
        """All surviving nodes, edges between them, and the partition restricted to them.

        Community ids keep their partition-wide labels; communities left
        empty by the filter are dropped.
        """
        store = self._store
        with trace_span("collect_nodes") as span:
            nodes = [self._view(n) for n in store.records() if _matches(n, kinds)]
            kept = {v.id for v in nodes}
            if span:
                span.record(nodes=len(nodes))

        with trace_span("collect_edges") as span:
            edges = [
                EdgeView.from_edge(e)
                for e in store.edges()
                if e.source in kept and e.target in kept
            ]
            if span:
                span.record(edges=len(edges))
        by_id = {v.id: v for v in nodes}
        communities: list[CommunityView] = []
        for position, component in enumerate(store.partition, start=1):
            members = [by_id[nid] for nid in component if nid in by_id]
            if members:
                communities.append(
                    CommunityView(id=f"C{position}", nodes=members, node_count=len(members))
                )

        payload = GraphData(
            nodes=nodes,
            edges=edges,
            communities=communities,
            node_count=len(nodes),
            edge_count=len(edges),
        )
        return ServiceResult(ok=True, op="graph", data=payload.model_dump(mode="json"))

    # ------------------------------------------------------------------
    # node / neighbors
    # ------------------------------------------------------------------

    @traced
    def node(self, node_id: str) -> ServiceResult:
        """Full record for *node_id*, or ``node: None`` if unknown."""
        node = self._store.get(node_id)
        view = None if node is None else self._view(node).model_dump(mode="json")
        return ServiceResult(ok=True, op="node", data={"id": node_id, "node": view})

    @traced
    def neighbors(self, node_id: str, *, kinds: KindFilter = None) -> ServiceResult:
        """Adjacent node records in adjacency insertion order."""
        items = self._dump(self._views(self._store.neighbors(node_id), kinds))
        return ServiceResult(
            ok=True,
            op="neighbors",
            data={"id": node_id, "count": len(items), "items": items},
        )

    # ------------------------------------------------------------------
    # shortest_path
    # ------------------------------------------------------------------

    @traced
    def shortest_path(self, source_id: str, target_id: str) -> ServiceResult:
        """Unweighted shortest path between two nodes, with its hop count."""
        with trace_span("bfs") as span:
            ids = algorithms.shortest_path(self._store, source_id, target_id)
            if span and ids is not None:
                span.record(hops=len(ids) - 1)

        path: dict[str, Any] | None = None
        if ids is not None:
            path = PathView(nodes=self._views(ids), length=len(ids) - 1).model_dump(mode="json")
        return ServiceResult(
            ok=True,
            op="shortest_path",
            data={"source_id": source_id, "target_id": target_id, "path": path},
        )

    # ------------------------------------------------------------------
    # search
    # ------------------------------------------------------------------

    @traced
    def search(
        self,
        query: str,
        *,
        kinds: KindFilter = None,
        limit: int | None = None,
    ) -> ServiceResult:
        """Case-insensitive substring match on node names, in store order.

        The query is matched verbatim, surrounding whitespace included; a
        blank query matches nothing. ``limit`` of None or <= 0 means
        no truncation.
        """
        needle = query.lower()
        matches: list[NodeView] = []
        if query.strip():
            for node in self._store.records():
                if needle in node.name.lower() and _matches(node, kinds):
                    matches.append(self._view(node))
                    if limit is not None and 0 < limit <= len(matches):
                        break

        items = self._dump(matches)
        return ServiceResult(
            ok=True,
            op="search",
            data={"query": query, "count": len(items), "items": items},
        )

    # ------------------------------------------------------------------
    # community / communities
    # ------------------------------------------------------------------

    def _community(self, position: int, component: list[str]) -> CommunityView:
        members = self._views(component)
        return CommunityView(id=f"C{position}", nodes=members, node_count=len(members))

    @traced
    def community(self, node_id: str) -> ServiceResult:
        """The community containing *node_id*, or ``community: None``."""
        label = self._store.community_of(node_id)
        community: dict[str, Any] | None = None
        if label is not None:
            position = int(label[1:])
            community = self._community(position, self._store.partition[position - 1]).model_dump(
                mode="json"
            )
        return ServiceResult(
            ok=True,
            op="community",
            data={"id": node_id, "community": community},
        )

    @traced
    def communities(self) -> ServiceResult:
        """Every community in partition order."""
        views = [
            self._community(position, component).model_dump(mode="json")
            for position, component in enumerate(self._store.partition, start=1)
        ]
        return ServiceResult(
            ok=True,
            op="communities",
            data={"count": len(views), "communities": views},
        )

    # ------------------------------------------------------------------
    # centrality — ranked degree centrality
    # ------------------------------------------------------------------

    @traced
    def centrality(
        self,
        *,
        top: int = 20,
        normalize: bool = True,
        kinds: KindFilter = None,
    ) -> ServiceResult:
        """Nodes ranked by degree centrality, ties kept in store order."""
        scores = algorithms.degree_centrality(self._store, normalize=normalize)
        candidates = [n for n in self._store.records() if _matches(n, kinds)]
        candidates.sort(key=lambda n: scores[n.id], reverse=True)

        items: list[dict[str, Any]] = []
        for node in candidates[: max(top, 0)]:
            view = self._view(node)
            ranked = RankedNode(**view.model_dump(), score=round(scores[node.id], 6))
            items.append(ranked.model_dump(mode="json"))
        return ServiceResult(
            ok=True,
            op="centrality",
            data={"normalized": normalize, "count": len(items), "items": items},
        )

    # ------------------------------------------------------------------
    # stats — build summary
    # ------------------------------------------------------------------

    @traced
    def stats(self) -> ServiceResult:
        """Counts by kind, partition shape, and the per-phase build report."""
        store = self._store
        records = store.records()
        kinds = Counter(n.kind.value for n in records)
        partition = store.partition
        data = dump_validated(
            StatsData,
            {
                "node_count": store.node_count,
                "edge_count": store.edge_count,
                "community_count": len(partition),
                "largest_community": max((len(c) for c in partition), default=0),
                "stub_count": sum(1 for n in records if n.stub),
                "kinds": {kind.value: kinds.get(kind.value, 0) for kind in NodeKind},
                "phases": self._report.to_dict()["phases"],
            },
        )
        return ServiceResult(ok=True, op="stats", data=data, warnings=list(self._report.warnings))


def _matches(node: Node, kinds: KindFilter) -> bool:
    return not kinds or node.kind in kinds

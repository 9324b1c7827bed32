"""GraphBuilder — fuses the three record sets into one GraphStore.

Phases run in a fixed order and each ends with a full partition rebuild:

1. Base relations: performers and the relations between them.
2. Work credits: one work node per song, one edge per credited performer.
3. Collections: one collection node per album, linked to its artists and
   member works.

Only the base relations are mandatory. ``build()`` treats a missing or
invalid optional document as a skipped phase and records a warning.

Recomputing every component after each phase costs O(V+E) per phase,
which is fine at catalogue scale. A union-find maintained in ``add_edge``
would make it incremental if that ever stops being true.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from typing import Any, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from musegraph.domain.nodes import CollectionExtra, Credits, Node, PerformerExtra, WorkExtra
from musegraph.domain.records import (
    BaseRelationsDoc,
    CollectionsDoc,
    WorkCreditsDoc,
    WorkRecord,
)
from musegraph.domain.types import NodeKind, Relation, StubPolicy
from musegraph.infrastructure.graph.algorithms import connected_components
from musegraph.infrastructure.graph.store import GraphStore, UnknownNodeError

log = structlog.get_logger(__name__)

M = TypeVar("M", bound=BaseModel)

# Checked in order; the first list containing the id decides the label.
ROLE_PRECEDENCE: tuple[tuple[str, Relation], ...] = (
    ("artist_ids", Relation.PERFORMS),
    ("writers", Relation.WRITES),
    ("producers", Relation.PRODUCES),
    ("performers", Relation.PERFORMS),
)


class IngestError(Exception):
    """A record set could not be ingested."""

    def __init__(self, phase: str, message: str) -> None:
        super().__init__(f"{phase}: {message}")
        self.phase = phase


class UnknownEndpointError(IngestError):
    """An edge referenced an undeclared id under the strict stub policy."""

    def __init__(self, phase: str, node_id: str) -> None:
        super().__init__(phase, f"unknown endpoint '{node_id}'")
        self.node_id = node_id


@dataclass
class PhaseReport:
    phase: str
    nodes_added: int = 0
    edges_added: int = 0
    stubs_created: int = 0
    skipped: bool = False


@dataclass
class BuildReport:
    """Summary of one complete build."""

    phases: list[PhaseReport] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    node_count: int = 0
    edge_count: int = 0
    community_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def credit_relation(node_id: str, work: WorkRecord) -> Relation:
    """Label for the edge between *work* and a credited *node_id*."""
    for attr, relation in ROLE_PRECEDENCE:
        source = work if attr == "artist_ids" else work.credits
        if node_id in getattr(source, attr):
            return relation
    return Relation.CREDITED


def credited_ids(work: WorkRecord) -> list[str]:
    """Union of every id credited on *work*, first-seen order, no repeats."""
    ordered = [
        *work.artist_ids,
        *work.credits.writers,
        *work.credits.producers,
        *work.credits.performers,
    ]
    return list(dict.fromkeys(ordered))


class GraphBuilder:
    """Mutates a GraphStore through its public API, one phase at a time."""

    def __init__(
        self,
        store: GraphStore | None = None,
        *,
        stub_policy: StubPolicy = StubPolicy.AUTO_STUB,
    ) -> None:
        self._store = store if store is not None else GraphStore()
        self._policy = StubPolicy(stub_policy)

    @property
    def store(self) -> GraphStore:
        return self._store

    # ------------------------------------------------------------------
    # Full build
    # ------------------------------------------------------------------

    def build(
        self,
        base: BaseRelationsDoc | Mapping[str, Any] | None,
        work_credits: WorkCreditsDoc | Mapping[str, Any] | None = None,
        collections: CollectionsDoc | Mapping[str, Any] | None = None,
    ) -> BuildReport:
        """Run all three phases and return a report.

        Raises IngestError if *base* is missing or invalid. The optional
        documents degrade to a skipped phase plus a warning.
        """
        if base is None:
            raise IngestError("base_relations", "document is required")

        report = BuildReport()
        report.phases.append(self.ingest_base_relations(base))

        optional = (
            ("work_credits", work_credits, self.ingest_work_credits),
            ("collections", collections, self.ingest_collections),
        )
        for phase, doc, ingest in optional:
            if doc is None:
                report.phases.append(PhaseReport(phase, skipped=True))
                continue
            try:
                report.phases.append(ingest(doc))
            except UnknownEndpointError:
                raise
            except IngestError as exc:
                log.warning("source.skipped", phase=phase, error=str(exc))
                report.warnings.append(f"Skipped {phase}: {exc}")
                report.phases.append(PhaseReport(phase, skipped=True))

        report.node_count = self._store.node_count
        report.edge_count = self._store.edge_count
        report.community_count = len(self._store.partition)
        log.info(
            "build.complete",
            nodes=report.node_count,
            edges=report.edge_count,
            communities=report.community_count,
        )
        return report

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def ingest_base_relations(self, doc: BaseRelationsDoc | Mapping[str, Any]) -> PhaseReport:
        """Performers and their pairwise relations."""
        phase = "base_relations"
        data = self._validate(BaseRelationsDoc, doc, phase)
        report, before = self._start(phase)

        for record in data.nodes:
            self._store.add_node(
                Node(id=record.id, name=record.name, extra=PerformerExtra(attributes=record.attributes))
            )
        for rel in data.edges:
            strict = self._policy is StubPolicy.STRICT
            if not strict:
                report.stubs_created += sum(1 for nid in {rel.source, rel.target} if nid not in self._store)
            try:
                self._store.add_edge(
                    rel.source,
                    rel.target,
                    rel.weight,
                    rel.relation or Relation.CONNECTED,
                    create_missing=not strict,
                )
            except UnknownNodeError as exc:
                raise UnknownEndpointError(phase, exc.node_id) from exc

        return self._finish(report, before)

    def ingest_work_credits(self, doc: WorkCreditsDoc | Mapping[str, Any]) -> PhaseReport:
        """Works plus one edge per credited performer, labelled by role precedence."""
        phase = "work_credits"
        data = self._validate(WorkCreditsDoc, doc, phase)
        report, before = self._start(phase)

        for work in data.songs:
            self._store.add_node(
                Node(
                    id=work.id,
                    name=work.title or work.id,
                    extra=WorkExtra(
                        year=work.year,
                        artist_ids=list(work.artist_ids),
                        credits=Credits.model_validate(work.credits.model_dump()),
                    ),
                )
            )
            for performer_id in credited_ids(work):
                self._require(performer_id, NodeKind.PERFORMER, phase, report)
                self._store.add_edge(work.id, performer_id, 1.0, credit_relation(performer_id, work))

        return self._finish(report, before)

    def ingest_collections(self, doc: CollectionsDoc | Mapping[str, Any]) -> PhaseReport:
        """Collections linked to their artists and member works."""
        phase = "collections"
        data = self._validate(CollectionsDoc, doc, phase)
        report, before = self._start(phase)

        for album in data.albums:
            self._store.add_node(
                Node(
                    id=album.id,
                    name=album.title or album.id,
                    extra=CollectionExtra(
                        year=album.year,
                        artist_ids=list(album.artist_ids),
                        work_ids=list(album.song_ids),
                    ),
                )
            )
            for artist_id in album.artist_ids:
                self._require(artist_id, NodeKind.PERFORMER, phase, report)
                self._store.add_edge(album.id, artist_id, 1.0, Relation.RELEASED_BY)
            for work_id in album.song_ids:
                self._require(work_id, NodeKind.WORK, phase, report)
                self._store.add_edge(album.id, work_id, 1.0, Relation.CONTAINS)

        return self._finish(report, before)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _validate(model: type[M], doc: M | Mapping[str, Any], phase: str) -> M:
        if isinstance(doc, model):
            return doc
        try:
            return model.model_validate(doc)
        except ValidationError as exc:
            raise IngestError(phase, f"invalid document ({exc.error_count()} errors)") from exc

    def _require(self, node_id: str, kind: NodeKind, phase: str, report: PhaseReport) -> None:
        """Make sure *node_id* exists, stubbing it as *kind* or failing per policy."""
        if node_id in self._store:
            return
        if self._policy is StubPolicy.STRICT:
            raise UnknownEndpointError(phase, node_id)
        self._store.ensure_node(node_id, kind)
        report.stubs_created += 1

    def _start(self, phase: str) -> tuple[PhaseReport, tuple[int, int]]:
        return PhaseReport(phase), (self._store.node_count, self._store.edge_count)

    def _finish(self, report: PhaseReport, before: tuple[int, int]) -> PhaseReport:
        report.nodes_added = self._store.node_count - before[0]
        report.edges_added = self._store.edge_count - before[1]
        self.recompute_communities()
        log.info(
            "build.phase",
            phase=report.phase,
            nodes_added=report.nodes_added,
            edges_added=report.edges_added,
            stubs_created=report.stubs_created,
        )
        return report

    def recompute_communities(self) -> list[list[str]]:
        """Rebuild the partition from scratch and relabel every node."""
        return self._store.assign_communities(connected_components(self._store))

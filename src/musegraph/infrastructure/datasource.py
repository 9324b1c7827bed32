"""GraphDataSource — loads the record sets and publishes the built graph.

The data source reads the three JSON documents, hands them to a
:class:`GraphBuilder`, and keeps the resulting store as the single
visible instance. ``reload()`` builds a fresh store off to the side and
publishes it with one reference assignment, so a reader that already
holds a store keeps a complete graph (old or new) and never sees a
partially rebuilt one.
"""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from musegraph.domain.types import StubPolicy
from musegraph.infrastructure.graph.builder import BuildReport, GraphBuilder, IngestError
from musegraph.infrastructure.graph.store import GraphStore

if TYPE_CHECKING:
    from musegraph.config.settings import MuseSettings

log = structlog.get_logger(__name__)


class DataSourceError(Exception):
    """The graph could not be initialised (fatal)."""


@dataclass(frozen=True)
class SourcePaths:
    """Locations of the three input documents. Optional ones may be None."""

    base_relations: Path
    work_credits: Path | None = None
    collections: Path | None = None


@dataclass(frozen=True)
class _Published:
    store: GraphStore
    report: BuildReport


class GraphDataSource:
    """Owns the published graph for the lifetime of a process."""

    def __init__(
        self,
        paths: SourcePaths,
        *,
        stub_policy: StubPolicy = StubPolicy.AUTO_STUB,
    ) -> None:
        self.paths = paths
        self.stub_policy = StubPolicy(stub_policy)
        self._published: _Published | None = None
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: MuseSettings) -> GraphDataSource:
        """Resolve document paths against the project root and data dir."""
        data_dir = settings.data_dir or settings.project_root / settings.data.dir

        def resolve(name: str | None) -> Path | None:
            return None if not name else data_dir / name

        base = resolve(settings.data.base_relations)
        if base is None:
            raise DataSourceError("No base relations document configured")
        paths = SourcePaths(
            base_relations=base,
            work_credits=resolve(settings.data.work_credits),
            collections=resolve(settings.data.collections),
        )
        return cls(paths, stub_policy=settings.build.stub_policy)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_initialized(self) -> bool:
        return self._published is not None

    def initialize(self) -> GraphStore:
        """Build the graph on first call; later calls return the same store."""
        published = self._published
        if published is not None:
            return published.store
        with self._lock:
            if self._published is None:
                self._published = self._build()
            return self._published.store

    def reload(self) -> tuple[GraphStore, BuildReport]:
        """Rebuild from disk and atomically replace the published store.

        Returns the store and report that were published together. On
        failure the previously published graph stays in place.
        """
        with self._lock:
            fresh = self._build()
            self._published = fresh
        log.info("graph.reloaded", nodes=fresh.store.node_count, edges=fresh.store.edge_count)
        return fresh.store, fresh.report

    def snapshot(self) -> tuple[GraphStore, BuildReport]:
        """The published store and the report it was built with, initialising if needed."""
        self.initialize()
        published = self._published
        assert published is not None
        return published.store, published.report

    @property
    def store(self) -> GraphStore:
        published = self._published
        if published is None:
            raise DataSourceError("Graph not initialized. Call initialize() first.")
        return published.store

    @property
    def report(self) -> BuildReport:
        published = self._published
        if published is None:
            raise DataSourceError("Graph not initialized. Call initialize() first.")
        return published.report

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _build(self) -> _Published:
        warnings: list[str] = []
        base = self._read_required(self.paths.base_relations)
        work_credits = self._read_optional(self.paths.work_credits, "work_credits", warnings)
        collections = self._read_optional(self.paths.collections, "collections", warnings)

        builder = GraphBuilder(stub_policy=self.stub_policy)
        try:
            report = builder.build(base, work_credits, collections)
        except IngestError as exc:
            log.error("graph.init_failed", error=str(exc))
            raise DataSourceError(str(exc)) from exc
        report.warnings[:0] = warnings
        return _Published(builder.store, report)

    @staticmethod
    def _read_required(path: Path) -> Any:
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise DataSourceError(f"Base relations not found: {path}") from exc
        except (OSError, json.JSONDecodeError) as exc:
            raise DataSourceError(f"Cannot read base relations {path}: {exc}") from exc

    @staticmethod
    def _read_optional(path: Path | None, phase: str, warnings: list[str]) -> Any:
        if path is None:
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            log.warning("source.skipped", phase=phase, path=str(path), error=str(exc))
            warnings.append(f"Skipped {phase}: cannot read {path.name} ({exc.__class__.__name__})")
            return None

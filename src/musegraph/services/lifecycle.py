"""LifecycleService — liveness and full graph rebuilds."""

from __future__ import annotations

from musegraph import __version__
from musegraph.infrastructure.datasource import DataSourceError
from musegraph.services.base import BaseService
from musegraph.services.result import ServiceResult
from musegraph.services.telemetry import trace_span, traced


class LifecycleService(BaseService):
    """Operations on the data source itself rather than on one graph."""

    def health(self) -> ServiceResult:
        """Constant liveness check. Never touches the graph."""
        return ServiceResult(
            ok=True,
            op="health",
            data={"status": "OK", "service": "musegraph", "version": __version__},
        )

    @traced
    def reload(self) -> ServiceResult:
        """Rebuild the graph from disk and publish it atomically.

        A failed rebuild leaves the previous graph published.
        """
        try:
            with trace_span("rebuild") as span:
                store, report = self._source.reload()
                if span:
                    span.record(nodes=store.node_count, edges=store.edge_count)
        except DataSourceError as exc:
            return ServiceResult.failure("reload", "RELOAD_FAILED", str(exc))

        return ServiceResult(
            ok=True,
            op="reload",
            data={
                "node_count": report.node_count,
                "edge_count": report.edge_count,
                "community_count": report.community_count,
                "phases": report.to_dict()["phases"],
            },
            warnings=list(report.warnings),
        )

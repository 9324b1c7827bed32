"""In-memory graph: arena-backed store, traversal algorithms, ingestion."""

from musegraph.infrastructure.graph.builder import BuildReport, GraphBuilder, IngestError
from musegraph.infrastructure.graph.store import Edge, GraphStore, UnknownNodeError

__all__ = [
    "BuildReport",
    "Edge",
    "GraphBuilder",
    "GraphStore",
    "IngestError",
    "UnknownNodeError",
]

"""MCP tool definitions — one tool per query operation, plus reload.

Each tool has an ``*_impl`` function that is testable without the mcp
package; ``register_tools()`` wraps them with FastMCP decorators.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from musegraph.domain.types import NodeKind, parse_kinds
from musegraph.services.result import ServiceResult

if TYPE_CHECKING:
    from musegraph.infrastructure.datasource import GraphDataSource


def _to_mcp_response(result: ServiceResult) -> dict[str, Any]:
    """Convert a ServiceResult to an MCP-friendly dict."""
    response: dict[str, Any] = {
        "ok": result.ok,
        "op": result.op,
        "data": result.data,
    }
    if result.warnings:
        response["warnings"] = result.warnings
    if result.error is not None:
        response["error"] = {
            "code": result.error.code,
            "message": result.error.message,
        }
    return response


def _kinds_or_error(op: str, kinds: list[str] | None) -> tuple[frozenset[NodeKind] | None, dict[str, Any] | None]:
    """Parse a kind filter; on bad input return an INVALID_KIND response instead."""
    try:
        return parse_kinds(kinds), None
    except ValueError:
        valid = ", ".join(k.value for k in NodeKind)
        failure = ServiceResult.failure(
            op, "INVALID_KIND", f"Unknown node kind in {kinds!r}; expected one of: {valid}"
        )
        return None, _to_mcp_response(failure)


def _query(source: GraphDataSource) -> Any:
    from musegraph.services.query import QueryService

    return QueryService(source)


# ---------------------------------------------------------------------------
# Query tools
# ---------------------------------------------------------------------------


def graph_impl(source: GraphDataSource, *, kinds: list[str] | None = None) -> dict[str, Any]:
    """Whole graph, optionally kind-filtered."""
    parsed, error = _kinds_or_error("graph", kinds)
    if error is not None:
        return error
    return _to_mcp_response(_query(source).graph(kinds=parsed))


def node_impl(source: GraphDataSource, node_id: str) -> dict[str, Any]:
    return _to_mcp_response(_query(source).node(node_id))


def neighbors_impl(
    source: GraphDataSource, node_id: str, *, kinds: list[str] | None = None
) -> dict[str, Any]:
    parsed, error = _kinds_or_error("neighbors", kinds)
    if error is not None:
        return error
    return _to_mcp_response(_query(source).neighbors(node_id, kinds=parsed))


def shortest_path_impl(source: GraphDataSource, source_id: str, target_id: str) -> dict[str, Any]:
    return _to_mcp_response(_query(source).shortest_path(source_id, target_id))


def search_impl(
    source: GraphDataSource,
    query: str,
    *,
    kinds: list[str] | None = None,
    limit: int | None = None,
) -> dict[str, Any]:
    parsed, error = _kinds_or_error("search", kinds)
    if error is not None:
        return error
    return _to_mcp_response(_query(source).search(query, kinds=parsed, limit=limit))


def community_impl(source: GraphDataSource, node_id: str) -> dict[str, Any]:
    return _to_mcp_response(_query(source).community(node_id))


def communities_impl(source: GraphDataSource) -> dict[str, Any]:
    return _to_mcp_response(_query(source).communities())


def centrality_impl(
    source: GraphDataSource, *, top: int = 20, normalize: bool = True
) -> dict[str, Any]:
    return _to_mcp_response(_query(source).centrality(top=top, normalize=normalize))


def stats_impl(source: GraphDataSource) -> dict[str, Any]:
    return _to_mcp_response(_query(source).stats())


# ---------------------------------------------------------------------------
# Lifecycle tools
# ---------------------------------------------------------------------------


def health_impl(source: GraphDataSource) -> dict[str, Any]:
    from musegraph.services.lifecycle import LifecycleService

    return _to_mcp_response(LifecycleService(source).health())


def reload_impl(source: GraphDataSource) -> dict[str, Any]:
    from musegraph.services.lifecycle import LifecycleService

    return _to_mcp_response(LifecycleService(source).reload())


# ---------------------------------------------------------------------------
# Registration — wraps _impl functions with FastMCP decorators
# ---------------------------------------------------------------------------


def register_tools(server: Any, source: GraphDataSource) -> None:
    """Register every musegraph tool on the FastMCP server."""

    @server.tool()  # type: ignore[untyped-decorator]
    def graph(kinds: list[str] | None = None) -> dict[str, Any]:
        """Return all nodes, edges and communities, optionally restricted to some kinds."""
        return graph_impl(source, kinds=kinds)

    @server.tool()  # type: ignore[untyped-decorator]
    def node(node_id: str) -> dict[str, Any]:
        """Get a single node record by id."""
        return node_impl(source, node_id)

    @server.tool()  # type: ignore[untyped-decorator]
    def neighbors(node_id: str, kinds: list[str] | None = None) -> dict[str, Any]:
        """List the nodes adjacent to a node."""
        return neighbors_impl(source, node_id, kinds=kinds)

    @server.tool()  # type: ignore[untyped-decorator]
    def shortest_path(source_id: str, target_id: str) -> dict[str, Any]:
        """Find the shortest chain of nodes between two nodes."""
        return shortest_path_impl(source, source_id, target_id)

    @server.tool()  # type: ignore[untyped-decorator]
    def search(
        query: str,
        kinds: list[str] | None = None,
        limit: int | None = None,
    ) -> dict[str, Any]:
        """Case-insensitive substring search on node names."""
        return search_impl(source, query, kinds=kinds, limit=limit)

    @server.tool()  # type: ignore[untyped-decorator]
    def community(node_id: str) -> dict[str, Any]:
        """Get the connected community that contains a node."""
        return community_impl(source, node_id)

    @server.tool()  # type: ignore[untyped-decorator]
    def communities() -> dict[str, Any]:
        """List every connected community."""
        return communities_impl(source)

    @server.tool()  # type: ignore[untyped-decorator]
    def centrality(top: int = 20, normalize: bool = True) -> dict[str, Any]:
        """Rank nodes by degree centrality."""
        return centrality_impl(source, top=top, normalize=normalize)

    @server.tool()  # type: ignore[untyped-decorator]
    def stats() -> dict[str, Any]:
        """Summarize the current build."""
        return stats_impl(source)

    @server.tool()  # type: ignore[untyped-decorator]
    def health() -> dict[str, Any]:
        """Liveness check."""
        return health_impl(source)

    @server.tool()  # type: ignore[untyped-decorator]
    def reload_graph() -> dict[str, Any]:
        """Rebuild the graph from disk and swap it in atomically."""
        return reload_impl(source)

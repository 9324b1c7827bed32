"""FastMCP server setup.

Optional extra, guarded behind try/except ImportError.
Transport: stdio by default, SSE or streamable HTTP optional.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from musegraph.config.settings import MuseSettings

mcp_available = False
_FastMCP: Any = None

try:
    from mcp.server.fastmcp import FastMCP as _FastMCP  # type: ignore[no-redef,import-not-found]

    mcp_available = True
except ImportError:
    pass

__all__ = ["create_server", "mcp_available"]


def create_server(
    *,
    settings: MuseSettings | None = None,
    host: str = "127.0.0.1",
    port: int = 8000,
) -> Any:
    """Create and configure the MCP server.

    Builds the graph up front so a broken base relations document fails
    at startup (``DataSourceError``) rather than on the first request.

    Raises RuntimeError if the mcp extra is not installed.
    """
    if not mcp_available or _FastMCP is None:
        msg = "MCP extra not installed. Install with: pip install musegraph[mcp]"
        raise RuntimeError(msg)

    from musegraph.config.settings import MuseSettings
    from musegraph.infrastructure.datasource import GraphDataSource
    from musegraph.mcp.tools import register_tools

    settings = settings or MuseSettings.from_cli()
    source = GraphDataSource.from_settings(settings)
    source.initialize()

    server = _FastMCP("musegraph", host=host, port=port)
    register_tools(server, source)
    return server

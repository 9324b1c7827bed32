"""serve — start the MCP server (requires the musegraph[mcp] extra)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from musegraph.commands._base import MuseCommand

if TYPE_CHECKING:
    from musegraph.commands._context import AppContext


@click.command(
    cls=MuseCommand,
    examples="""\
  # Start the MCP server (stdio transport, default)
  musegraph serve

  # Streamable HTTP on a custom host/port
  musegraph serve --transport streamable-http --host 0.0.0.0 --port 9000""",
)
@click.option(
    "--transport",
    default=None,
    type=click.Choice(["stdio", "sse", "streamable-http"]),
    help="MCP transport protocol (default from [mcp] transport).",
)
@click.option("--host", default=None, help="Bind address (HTTP transports only).")
@click.option("--port", default=None, type=int, help="Listen port (HTTP transports only).")
@click.pass_obj
def serve(app: AppContext, transport: str | None, host: str | None, port: int | None) -> None:
    """Serve graph queries over MCP."""
    from musegraph.mcp.server import create_server, mcp_available

    if not mcp_available:
        click.echo("MCP not installed. Install with: pip install musegraph[mcp]", err=True)
        raise SystemExit(1)

    from musegraph.infrastructure.datasource import DataSourceError
    from musegraph.services.result import ServiceResult

    cfg = app.settings.mcp
    try:
        server = create_server(
            settings=app.settings,
            host=host or cfg.host,
            port=port or cfg.port,
        )
    except DataSourceError as exc:
        app.emit(ServiceResult.failure("serve", "INIT_FAILED", str(exc)))
        return
    server.run(transport=transport or cfg.transport)

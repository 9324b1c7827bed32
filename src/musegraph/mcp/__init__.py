"""MCP adapter — exposes the query operations as FastMCP tools."""

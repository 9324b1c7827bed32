"""Infrastructure layer — graph store, algorithms, builder, data source.

This layer depends on stdlib, the domain layer, and third-party libs
(NetworkX, pydantic, structlog). It must never import from services,
commands, output, or mcp.
"""

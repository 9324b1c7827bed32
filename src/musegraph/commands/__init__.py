"""Subcommand modules for musegraph.

Provides register_commands(), which defers imports so ``musegraph --help``
stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the ``graph`` group and the standalone commands on the root group."""
    from musegraph.commands.graph import graph
    from musegraph.commands.health import health
    from musegraph.commands.serve import serve

    cli.add_command(graph)
    cli.add_command(health)
    cli.add_command(serve)

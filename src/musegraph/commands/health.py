"""health — liveness check."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from musegraph.commands._base import MuseCommand
from musegraph.services.lifecycle import LifecycleService

if TYPE_CHECKING:
    from musegraph.commands._context import AppContext


@click.command(cls=MuseCommand, examples="  musegraph health\n  musegraph --json health")
@click.pass_obj
def health(app: AppContext) -> None:
    """Report liveness without loading the graph."""
    app.emit(LifecycleService(app.source).health())

"""Command group: structural queries over the fused graph."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from musegraph.commands._base import KIND_CHOICE, MuseGroup
from musegraph.domain.types import parse_kinds

if TYPE_CHECKING:
    from musegraph.commands._context import AppContext

_GRAPH_EXAMPLES = """\
  musegraph graph overview --kind performer
  musegraph graph node taylor-swift
  musegraph graph neighbors taylor-swift --kind work
  musegraph graph path taylor-swift jack-antonoff
  musegraph graph search tay --limit 5
  musegraph graph community taylor-swift
  musegraph graph communities
  musegraph graph rank --top 10
  musegraph graph stats"""

_kind_option = click.option(
    "--kind",
    "kinds",
    multiple=True,
    type=KIND_CHOICE,
    help="Restrict to a node kind (repeatable).",
)


@click.group(cls=MuseGroup, examples=_GRAPH_EXAMPLES)
def graph() -> None:
    """Query the fused performer/work/collection graph."""


@graph.command(
    examples="""\
  musegraph graph overview
  musegraph --json graph overview --kind performer --kind collection"""
)
@_kind_option
@click.pass_obj
def overview(app: AppContext, kinds: tuple[str, ...]) -> None:
    """Whole graph: nodes, edges, and communities."""
    app.emit(app.query().graph(kinds=parse_kinds(kinds)))


@graph.command(
    examples="""\
  musegraph graph node taylor-swift
  musegraph --json graph node song-anti-hero"""
)
@click.argument("node_id")
@click.pass_obj
def node(app: AppContext, node_id: str) -> None:
    """Show one node's full record."""
    app.emit(app.query().node(node_id))


@graph.command(
    examples="""\
  musegraph graph neighbors taylor-swift
  musegraph graph neighbors album-1989 --kind work"""
)
@click.argument("node_id")
@_kind_option
@click.pass_obj
def neighbors(app: AppContext, node_id: str, kinds: tuple[str, ...]) -> None:
    """List the nodes adjacent to NODE_ID."""
    app.emit(app.query().neighbors(node_id, kinds=parse_kinds(kinds)))


@graph.command(
    examples="""\
  musegraph graph path taylor-swift jack-antonoff
  musegraph --json graph path song-a song-b"""
)
@click.argument("source_id")
@click.argument("target_id")
@click.pass_obj
def path(app: AppContext, source_id: str, target_id: str) -> None:
    """Find the shortest connection chain between two nodes."""
    app.emit(app.query().shortest_path(source_id, target_id))


@graph.command(
    examples="""\
  musegraph graph search tay
  musegraph graph search love --kind work --limit 0"""
)
@click.argument("query")
@_kind_option
@click.option("--limit", type=int, default=None, help="Max results (0 = unlimited).")
@click.pass_obj
def search(app: AppContext, query: str, kinds: tuple[str, ...], limit: int | None) -> None:
    """Case-insensitive substring search on node names."""
    if limit is None:
        limit = app.settings.query.search_limit
    app.emit(app.query().search(query, kinds=parse_kinds(kinds), limit=limit))


@graph.command(
    examples="""\
  musegraph graph community taylor-swift"""
)
@click.argument("node_id")
@click.pass_obj
def community(app: AppContext, node_id: str) -> None:
    """Show the connected community containing NODE_ID."""
    app.emit(app.query().community(node_id))


@graph.command(
    examples="""\
  musegraph graph communities
  musegraph -q graph communities"""
)
@click.pass_obj
def communities(app: AppContext) -> None:
    """List every connected community."""
    app.emit(app.query().communities())


@graph.command(
    examples="""\
  musegraph graph rank
  musegraph graph rank --top 5 --raw --kind performer"""
)
@click.option("--top", type=int, default=None, help="Max results.")
@click.option("--raw", is_flag=True, help="Report raw degree instead of normalized centrality.")
@_kind_option
@click.pass_obj
def rank(app: AppContext, top: int | None, raw: bool, kinds: tuple[str, ...]) -> None:
    """Rank nodes by degree centrality."""
    query_cfg = app.settings.query
    normalize = query_cfg.normalize_centrality and not raw
    app.emit(
        app.query().centrality(
            top=top if top is not None else query_cfg.rank_top,
            normalize=normalize,
            kinds=parse_kinds(kinds),
        )
    )


@graph.command(
    examples="""\
  musegraph graph stats
  musegraph --json graph stats"""
)
@click.pass_obj
def stats(app: AppContext) -> None:
    """Summarize the build: counts, communities, skipped sources."""
    app.emit(app.query().stats())

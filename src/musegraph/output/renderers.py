"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console backed by StringIO; the caller
extracts the text via ``get_output(console)``. Renderers are dispatched
by ``result.op``; unknown ops fall through to a key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from musegraph.output.console import create_console, get_output, style_for_kind
from musegraph.services.telemetry import SIZE_FIELDS

if TYPE_CHECKING:
    from rich.console import Console

    from musegraph.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
        if verbose:
            _render_meta(console, result)
    else:
        _render_error(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output for ``--quiet``: one id per line, or a status line."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    d = result.data
    rows: list[Any] = d.get("items") or d.get("communities") or d.get("nodes") or []
    if d.get("path"):
        rows = d["path"]["nodes"]
    elif d.get("node"):
        rows = [d["node"]]
    elif d.get("community"):
        rows = d["community"]["nodes"]
    ids = [str(row["id"]) for row in rows if isinstance(row, dict) and "id" in row]
    return "\n".join(ids) if ids else f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="mg.ok"), Text(f"  {result.op}", style="mg.op"))


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="mg.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="mg.id")
    elif key == "name":
        v = Text(str(value), style="mg.name")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _kind_text(kind: str) -> Text:
    return Text(kind, style=style_for_kind(kind))


def _node_table(items: list[dict[str, Any]], *, score_key: str | None = None) -> Table:
    """Build a table of node views."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="mg.id", no_wrap=True)
    table.add_column("Name", style="mg.name")
    table.add_column("Kind")
    table.add_column("Community", style="mg.community")
    table.add_column("Degree", justify="right")
    if score_key:
        table.add_column(score_key.title(), style="mg.score", justify="right")

    for item in items:
        row: list[Any] = [
            escape(str(item.get("id", ""))),
            escape(str(item.get("name", ""))),
            _kind_text(str(item.get("kind", ""))),
            str(item.get("community_id") or ""),
            str(item.get("degree", 0)),
        ]
        if score_key:
            row.append(f"{float(item.get(score_key, 0.0)):.4f}")
        table.add_row(*row)
    return table


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the telemetry span tree, if any."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_span(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_span(console: Console, span: dict[str, Any], indent: int) -> None:
    duration = span.get("duration_ms", 0.0)
    style = "bold red" if duration > 1000 else "yellow" if duration > 100 else "dim"
    line = f"{' ' * indent}[{style}]{duration:>8.2f}ms[/{style}]  {span.get('name', '?')}"
    notes = [f"{k}={span[k]}" for k in SIZE_FIELDS if k in span]
    if notes:
        line += f"  ({', '.join(notes)})"
    console.print(line)
    for child in span.get("children", []):
        _render_span(console, child, indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(Text("ERROR", style="mg.error"), Text(f"  {result.op}", style="mg.op"), " — ", msg)
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Query renderers ───────────────────────────────────────────────────


def _render_node(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    node = result.data.get("node")
    if node is None:
        console.print(f"No node with id [mg.id]{escape(str(result.data.get('id')))}[/mg.id].")
        return

    lines = [
        f"kind: {node['kind']}" + (" (stub)" if node.get("stub") else ""),
        f"community: {node.get('community_id') or '-'}",
        f"degree: {node['degree']}   centrality: {node['centrality']:.4f}",
    ]
    if node.get("year") is not None:
        lines.append(f"year: {node['year']}")
    if node.get("artist_ids"):
        lines.append(f"artists: {', '.join(node['artist_ids'])}")
    credits = node.get("credits") or {}
    for role in ("writers", "producers", "performers"):
        if credits.get(role):
            lines.append(f"{role}: {', '.join(credits[role])}")
    if node.get("work_ids"):
        lines.append(f"works ({len(node['work_ids'])}): {', '.join(node['work_ids'])}")
    for key, value in (node.get("attributes") or {}).items():
        lines.append(f"{key}: {value}")

    title = escape(f"{node['id']} — {node['name']}")
    console.print(
        Panel(escape("\n".join(lines)), title=title, border_style=style_for_kind(node["kind"]) or "dim", expand=False)
    )


def _render_node_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render neighbors or search results."""
    items = result.data.get("items", [])
    if not items:
        console.print("No matches." if result.op == "search" else "No neighbors.")
        return
    console.print(_node_table(items))
    console.print(f"\n{result.data.get('count', len(items))} nodes")


def _render_centrality(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    console.print(_node_table(items, score_key="score"))
    label = "normalized" if result.data.get("normalized") else "raw"
    console.print(f"\n{len(items)} nodes ({label} degree centrality)")


def _render_path(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    path = result.data.get("path")
    if not path:
        src, dst = result.data.get("source_id"), result.data.get("target_id")
        console.print(f"No path between [mg.id]{src}[/mg.id] and [mg.id]{dst}[/mg.id].")
        return
    chain = [f"[mg.id]{n['id']}[/mg.id] ({escape(n['name'])})" for n in path["nodes"]]
    console.print(" → ".join(chain))
    console.print(f"\nPath length: {path['length']}")


def _render_community_block(console: Console, community: dict[str, Any]) -> None:
    console.print(f"\n[bold]Community {community['id']}[/bold] ({community['node_count']} members)")
    for member in community["nodes"]:
        style = style_for_kind(member["kind"]) or "default"
        console.print(f"  [mg.id]{member['id']}[/mg.id]  [{style}]{escape(member['name'])}[/{style}]")


def _render_community(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    community = result.data.get("community")
    if community is None:
        console.print(f"No node with id [mg.id]{escape(str(result.data.get('id')))}[/mg.id].")
        return
    _render_community_block(console, community)


def _render_communities(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    communities = result.data.get("communities", [])
    console.print(f"[bold]{result.data.get('count', len(communities))} communities[/bold]")
    for community in communities:
        _render_community_block(console, community)


def _render_graph(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "nodes", d.get("node_count", 0))
    _field(console, "edges", d.get("edge_count", 0))
    _field(console, "communities", len(d.get("communities", [])))
    if verbose:
        console.print()
        console.print(_node_table(d.get("nodes", [])))


def _render_stats(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    for key in ("node_count", "edge_count", "community_count", "largest_community", "stub_count"):
        _field(console, key, d.get(key, 0))
    for kind, count in d.get("kinds", {}).items():
        _field(console, kind, count)

    phases = d.get("phases", [])
    if phases:
        table = Table(show_header=True, pad_edge=False, expand=False)
        for col in ("Phase", "Nodes", "Edges", "Stubs", "Skipped"):
            table.add_column(col)
        for p in phases:
            table.add_row(
                p["phase"],
                str(p["nodes_added"]),
                str(p["edges_added"]),
                str(p["stubs_created"]),
                "yes" if p["skipped"] else "",
            )
        console.print()
        console.print(table)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "graph": _render_graph,
    "node": _render_node,
    "neighbors": _render_node_list,
    "search": _render_node_list,
    "shortest_path": _render_path,
    "community": _render_community,
    "communities": _render_communities,
    "centrality": _render_centrality,
    "stats": _render_stats,
}

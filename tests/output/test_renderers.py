"""Tests for the Rich renderers."""

from __future__ import annotations

from musegraph.output.renderers import render_result
from musegraph.services.result import ServiceResult


def _node(node_id: str, name: str, kind: str = "performer", **extra: object) -> dict[str, object]:
    return {
        "id": node_id,
        "name": name,
        "kind": kind,
        "community_id": "C1",
        "degree": 1,
        "centrality": 0.25,
        "stub": False,
        **extra,
    }


class TestQueryRenderers:
    def test_node_panel(self) -> None:
        node = _node("album-1", "Folklore", "collection", year=2020, work_ids=["s1", "s2"])
        out = render_result(ServiceResult(ok=True, op="node", data={"id": "album-1", "node": node}))
        assert "album-1" in out
        assert "Folklore" in out
        assert "year: 2020" in out
        assert "works (2): s1, s2" in out

    def test_node_with_markup_in_name(self) -> None:
        node = _node("odd", "[bold]Odd[/bold]")
        out = render_result(ServiceResult(ok=True, op="node", data={"id": "odd", "node": node}))
        assert "[bold]Odd[/bold]" in out

    def test_missing_node(self) -> None:
        out = render_result(ServiceResult(ok=True, op="node", data={"id": "zz", "node": None}))
        assert "No node with id zz" in out

    def test_neighbors_table(self) -> None:
        items = [_node("a", "Alpha"), _node("b", "Beta", "work")]
        out = render_result(
            ServiceResult(ok=True, op="neighbors", data={"id": "x", "count": 2, "items": items})
        )
        assert "Alpha" in out
        assert "Beta" in out
        assert "2 nodes" in out

    def test_path_chain(self) -> None:
        path = {"nodes": [_node("a", "Alpha"), _node("b", "Beta")], "length": 1}
        out = render_result(
            ServiceResult(
                ok=True,
                op="shortest_path",
                data={"source_id": "a", "target_id": "b", "path": path},
            )
        )
        assert "a (Alpha) → b (Beta)" in out
        assert "Path length: 1" in out

    def test_centrality_scores(self) -> None:
        items = [{**_node("a", "Alpha"), "score": 0.5}]
        out = render_result(
            ServiceResult(
                ok=True, op="centrality", data={"normalized": False, "count": 1, "items": items}
            )
        )
        assert "0.5000" in out
        assert "raw degree centrality" in out


class TestErrorAndVerbose:
    def test_error(self) -> None:
        out = render_result(ServiceResult.failure("initialize", "INIT_FAILED", "no data", path="x"))
        assert "ERROR" in out
        assert "no data" in out
        assert "path: x" not in out

    def test_error_detail_when_verbose(self) -> None:
        result = ServiceResult.failure("initialize", "INIT_FAILED", "no data", path="x")
        assert "path: x" in render_result(result, verbose=True)

    def test_meta_spans(self) -> None:
        result = ServiceResult(
            ok=True,
            op="health",
            data={"status": "OK"},
            meta={"telemetry": {"name": "LifecycleService.health", "duration_ms": 1.5}},
        )
        out = render_result(result, verbose=True)
        assert "LifecycleService.health" in out
        assert "1.50ms" in out

    def test_generic_renders_nested_as_json(self) -> None:
        result = ServiceResult(ok=True, op="reload", data={"phases": [{"phase": "p"}]})
        out = render_result(result)
        assert 'phases: [{"phase":"p"}]' in out

"""Query timing with graph-size accounting.

A :class:`Span` measures one service call (or a section inside it) and
records how much of the graph the work touched: nodes visited, edges
considered, path hops, result matches. With ``--verbose`` the span tree
for each traced call lands in ``ServiceResult.meta["telemetry"]`` and is
logged as a ``query.timed`` event; otherwise tracing costs one ContextVar
lookup per call.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from musegraph.services.result import ServiceResult

log = structlog.get_logger(__name__)

_enabled: ContextVar[bool] = ContextVar("musegraph_telemetry", default=False)
_active: ContextVar[Span | None] = ContextVar("musegraph_active_span", default=None)

# Size counters reported by a span, in output order.
SIZE_FIELDS = ("nodes", "edges", "hops", "matches")


@dataclass
class Span:
    name: str
    children: list[Span] = field(default_factory=list)
    started: float = field(default_factory=time.perf_counter)
    elapsed_ms: float | None = None
    nodes: int | None = None
    edges: int | None = None
    hops: int | None = None
    matches: int | None = None

    def close(self) -> None:
        self.elapsed_ms = (time.perf_counter() - self.started) * 1000

    def record(
        self,
        *,
        nodes: int | None = None,
        edges: int | None = None,
        hops: int | None = None,
        matches: int | None = None,
    ) -> None:
        """Set whichever size counters are given; the rest keep their value."""
        for name, value in zip(SIZE_FIELDS, (nodes, edges, hops, matches), strict=True):
            if value is not None:
                setattr(self, name, value)

    def sizes(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in SIZE_FIELDS if getattr(self, name) is not None}

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "duration_ms": round(self.elapsed_ms or 0.0, 2)}
        out.update(self.sizes())
        if self.children:
            out["children"] = [child.to_dict() for child in self.children]
        return out


@contextmanager
def _open(name: str, parent: Span | None) -> Iterator[Span]:
    span = Span(name)
    if parent is not None:
        parent.children.append(span)
    token = _active.set(span)
    ok = False
    try:
        yield span
        ok = True
    finally:
        span.close()
        _active.reset(token)
        if parent is None:
            log.debug(
                "query.timed",
                query=span.name,
                duration_ms=round(span.elapsed_ms or 0.0, 2),
                ok=ok,
                **span.sizes(),
            )


@contextmanager
def trace_span(name: str) -> Iterator[Span | None]:
    """Time a section of the current traced call.

    Yields None when telemetry is off or no traced call is running, so
    callers guard size recording with ``if span:``.
    """
    parent = _active.get() if _enabled.get() else None
    if parent is None:
        yield None
        return
    with _open(name, parent) as span:
        yield span


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Time a service method and attach its span tree to the result.

    A result carrying a ``count`` is recorded as the span's matches
    unless the method recorded its own.
    """

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        with _open(func.__qualname__, None) as span:
            result = func(*args, **kwargs)
            if isinstance(result, ServiceResult) and span.matches is None:
                count = result.data.get("count")
                if isinstance(count, int):
                    span.record(matches=count)

        if isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": span.to_dict()}
            return result.model_copy(update={"meta": meta})  # type: ignore[return-value]
        return result

    return wrapper


def enable_telemetry() -> None:
    """Turn tracing on for the current context (``--verbose``)."""
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)

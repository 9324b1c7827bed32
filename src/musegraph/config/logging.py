"""structlog setup for the musegraph CLI and MCP server.

Everything goes to stderr so stdout carries only query results. Build and
reload events (``build.phase``, ``source.skipped``, ``graph.reloaded``)
and the per-query ``query.timed`` event share one pipeline, rendered for a
terminal or as JSON lines with ``--log-json``.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import structlog
from structlog.types import EventDict, Processor

# Libraries pulled in by ``musegraph serve`` that chatter at INFO.
_QUIET_LOGGERS = ("mcp", "httpx", "uvicorn", "anyio")

# Graph-size keys listed first in console output, in this order.
_SIZE_KEYS = ("phase", "nodes", "edges", "hops", "matches")


def _size_keys_first(_logger: object, _name: str, event_dict: EventDict) -> EventDict:
    sized = {key: event_dict.pop(key) for key in _SIZE_KEYS if key in event_dict}
    return {**sized, **event_dict}


def _pre_chain() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_json: bool) -> Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty(), sort_keys=False)


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    data_dir: Path | None = None,
) -> None:
    """Route structlog and stdlib logging to stderr.

    ``musegraph.*`` loggers emit DEBUG when *verbose*, WARNING otherwise.
    When *data_dir* is given it is bound to every event, so build warnings
    name the catalogue they came from.
    """
    pre_chain = _pre_chain()
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    final: list[Processor] = [structlog.stdlib.ProcessorFormatter.remove_processors_meta]
    if not log_json:
        final.append(_size_keys_first)
    final.append(_renderer(log_json))

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(foreign_pre_chain=pre_chain, processors=final)
    )
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger("musegraph").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.contextvars.clear_contextvars()
    if data_dir is not None:
        structlog.contextvars.bind_contextvars(data_dir=str(data_dir))

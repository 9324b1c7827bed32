"""BaseService — shared foundation for musegraph services.

Every service receives the :class:`GraphDataSource` at construction time.
Read-only services snapshot the published store once, so a single call
never straddles a reload.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from musegraph.infrastructure.datasource import GraphDataSource


class BaseService:
    """Base for service-layer classes.

    Usage::

        class QueryService(BaseService):
            def node(self, node_id: str) -> ServiceResult:
                ...
    """

    def __init__(self, source: GraphDataSource) -> None:
        self._source = source

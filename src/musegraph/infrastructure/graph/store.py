"""GraphStore — node arena plus symmetric adjacency.

Nodes live in an append-only arena indexed by stable integer handles;
``_index`` maps node ids to handles. Adjacency is a NetworkX ``Graph``
whose nodes are those handles, so algorithms traverse plain ints and
never hold references into the arena.

NetworkX keeps dict-of-dicts adjacency in insertion order and updates the
edge attribute dict in place on re-insertion. That gives the two ordering
guarantees callers depend on:

- ``nodes()`` and ``neighbors()`` follow first-insertion order.
- Re-adding an existing pair overwrites weight and relation (last write
  wins, weights never accumulate) without moving the pair in either
  endpoint's adjacency.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import networkx as nx

from musegraph.domain.nodes import Node
from musegraph.domain.types import NodeKind, Relation


class UnknownNodeError(KeyError):
    """Raised by ``add_edge(create_missing=False)`` for an undeclared endpoint."""

    def __init__(self, node_id: str) -> None:
        super().__init__(node_id)
        self.node_id = node_id

    def __str__(self) -> str:
        return f"Unknown node: {self.node_id}"


@dataclass(frozen=True)
class Edge:
    """An undirected, weighted, labelled connection."""

    source: str
    target: str
    weight: float = 1.0
    relation: str = Relation.CONNECTED.value


class GraphStore:
    """Owns every node record and the adjacency between them."""

    def __init__(self) -> None:
        self._arena: list[Node] = []
        self._index: dict[str, int] = {}
        self._graph: nx.Graph[int] = nx.Graph()
        self._partition: list[list[str]] = []

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def add_node(self, node: Node) -> Node:
        """Insert *node*, or merge it into the record already stored under its id."""
        handle = self._index.get(node.id)
        if handle is None:
            self._index[node.id] = len(self._arena)
            self._arena.append(node)
            self._graph.add_node(self._index[node.id])
            return node
        merged = self._arena[handle].merged_with(node)
        self._arena[handle] = merged
        return merged

    def ensure_node(self, node_id: str, kind: NodeKind = NodeKind.PERFORMER) -> bool:
        """Create a stub for *node_id* if it is absent. Returns True if one was made."""
        if node_id in self._index:
            return False
        self.add_node(Node.stub_for(node_id, kind))
        return True

    def get(self, node_id: str) -> Node | None:
        handle = self._index.get(node_id)
        return None if handle is None else self._arena[handle]

    def has(self, node_id: str) -> bool:
        return node_id in self._index

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    def __len__(self) -> int:
        return len(self._arena)

    def nodes(self) -> list[str]:
        """Node ids in first-insertion order."""
        return [node.id for node in self._arena]

    def records(self) -> list[Node]:
        """Node records in first-insertion order."""
        return list(self._arena)

    @property
    def node_count(self) -> int:
        return len(self._arena)

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def add_edge(
        self,
        a: str,
        b: str,
        weight: float = 1.0,
        relation: str = Relation.CONNECTED,
        *,
        create_missing: bool = True,
        stub_kind: NodeKind = NodeKind.PERFORMER,
    ) -> Edge:
        """Connect *a* and *b* symmetrically.

        Missing endpoints become stubs of *stub_kind*, unless
        *create_missing* is False, in which case ``UnknownNodeError`` is
        raised before anything is written.
        """
        if not create_missing:
            for node_id in (a, b):
                if node_id not in self._index:
                    raise UnknownNodeError(node_id)
        self.ensure_node(a, stub_kind)
        self.ensure_node(b, stub_kind)
        label = str(relation)
        self._graph.add_edge(self._index[a], self._index[b], weight=weight, relation=label)
        return Edge(a, b, weight, label)

    def edge(self, a: str, b: str) -> Edge | None:
        ha, hb = self._index.get(a), self._index.get(b)
        if ha is None or hb is None:
            return None
        data = self._graph.adj[ha].get(hb)
        if data is None:
            return None
        return Edge(a, b, data["weight"], data["relation"])

    def edges(self) -> list[Edge]:
        """Every undirected edge exactly once, oriented by first-seen endpoint."""
        return [
            Edge(self._arena[u].id, self._arena[v].id, data["weight"], data["relation"])
            for u, v, data in self._graph.edges(data=True)
        ]

    @property
    def edge_count(self) -> int:
        return self._graph.number_of_edges()

    def neighbors(self, node_id: str) -> list[str]:
        """Adjacent ids in the order the edges were first inserted."""
        handle = self._index.get(node_id)
        if handle is None:
            return []
        return [self._arena[h].id for h in self._graph.adj[handle]]

    def degree(self, node_id: str) -> int:
        """Number of adjacency entries (a self-loop counts once)."""
        handle = self._index.get(node_id)
        if handle is None:
            return 0
        return len(self._graph.adj[handle])

    # ------------------------------------------------------------------
    # Handle access for algorithms
    # ------------------------------------------------------------------

    @property
    def graph(self) -> nx.Graph[int]:
        """Read-only view of the handle-level adjacency."""
        return self._graph.copy(as_view=True)

    def handle(self, node_id: str) -> int | None:
        return self._index.get(node_id)

    def id_of(self, handle: int) -> str:
        return self._arena[handle].id

    # ------------------------------------------------------------------
    # Partition
    # ------------------------------------------------------------------

    def assign_communities(self, components: Iterable[Iterable[str]]) -> list[list[str]]:
        """Replace the partition and relabel every node ``C1``, ``C2``, …

        Nodes not covered by *components* lose their label.
        """
        partition = [list(component) for component in components]
        labels: dict[str, str] = {}
        for position, component in enumerate(partition, start=1):
            for node_id in component:
                labels[node_id] = f"C{position}"
        self._arena = [node.with_community(labels.get(node.id)) for node in self._arena]
        self._partition = partition
        return partition

    @property
    def partition(self) -> list[list[str]]:
        return [list(component) for component in self._partition]

    def community_of(self, node_id: str) -> str | None:
        node = self.get(node_id)
        return None if node is None else node.community_id

"""Traversal and scoring over a GraphStore.

All functions are read-only and O(V+E). Traversals expand neighbours in
each node's adjacency insertion order, so results are deterministic for a
fixed build order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import networkx as nx

if TYPE_CHECKING:
    from musegraph.infrastructure.graph.store import GraphStore


def shortest_path(store: GraphStore, source: str, target: str) -> list[str] | None:
    """Unweighted shortest path from *source* to *target*, inclusive.

    Returns None if either endpoint is unknown or the two are not
    connected. Among equal-length paths the first one discovered by
    breadth-first search wins.
    """
    src, dst = store.handle(source), store.handle(target)
    if src is None or dst is None:
        return None
    if src == dst:
        return [source]

    parent: dict[int, int] = {}
    for pred, child in nx.bfs_edges(store.graph, src):
        parent[child] = pred
        if child == dst:
            break
    else:
        return None

    path = [dst]
    while path[-1] != src:
        path.append(parent[path[-1]])
    path.reverse()
    return [store.id_of(h) for h in path]


def degree_centrality(store: GraphStore, *, normalize: bool = False) -> dict[str, float]:
    """Degree of every node, optionally scaled by ``1/(N-1)``.

    A single-node graph has nothing to normalise against; when
    *normalize* is set its only node scores 1.0, as NetworkX does.
    """
    n = store.node_count
    if normalize and n == 1:
        return {node_id: 1.0 for node_id in store.nodes()}
    scale = 1.0 / (n - 1) if normalize and n > 1 else 1.0
    return {node_id: store.degree(node_id) * scale for node_id in store.nodes()}


def connected_components(store: GraphStore) -> list[list[str]]:
    """Partition the node set into connected components.

    Iterative depth-first search seeded from each unvisited node in
    insertion order. Neighbours are marked visited when pushed, and a
    component lists its members in pop order.
    """
    adj = store.graph.adj
    visited: set[int] = set()
    components: list[list[str]] = []
    for start in adj:
        if start in visited:
            continue
        visited.add(start)
        stack = [start]
        members: list[str] = []
        while stack:
            handle = stack.pop()
            members.append(store.id_of(handle))
            for nbr in adj[handle]:
                if nbr not in visited:
                    visited.add(nbr)
                    stack.append(nbr)
        components.append(members)
    return components

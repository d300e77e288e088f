"""
Graph traversal: DFS, BFS, cycle detection, topological sort, 0-1 BFS.

Graphs are ``networkx`` graphs; the traversals themselves are written
out by hand so they can be read alongside the lesson text.  Where a
choice between neighbours arises they are visited in sorted order, so
outputs are deterministic for comparable node labels.
"""

import heapq
import logging
from collections import deque
from typing import Any, Dict, Hashable, Iterable, List, Optional, Union

import networkx as nx

from algolessons.models import Edge, ShortestPaths

logger = logging.getLogger(__name__)

WHITE, GREY, BLACK = 0, 1, 2


class CycleError(ValueError):
    """Raised when an operation needs a DAG but the graph has a cycle."""

    def __init__(self, cycle: List[Hashable]):
        self.cycle = cycle
        super().__init__(
            "graph contains a cycle: " + " -> ".join(str(n) for n in cycle)
        )


# =========================================================================
# Construction
# =========================================================================


def graph_from_edges(edges: Iterable[Union[Edge, Dict[str, Any]]]) -> nx.DiGraph:
    """Build a ``DiGraph`` from ``Edge`` models or dicts with the same keys."""
    G = nx.DiGraph()
    for raw in edges:
        e = raw if isinstance(raw, Edge) else Edge.model_validate(raw)
        G.add_edge(e.source, e.target, weight=e.weight)
    return G


def _ordered(nodes: Iterable[Hashable]) -> List[Hashable]:
    nodes = list(nodes)
    try:
        return sorted(nodes)
    except TypeError:
        # Mixed, non-comparable labels: keep insertion order.
        return nodes


def _require_node(graph: nx.Graph, source: Hashable) -> None:
    if source not in graph:
        raise KeyError(f"source node {source!r} is not in the graph")


# =========================================================================
# DFS / BFS
# =========================================================================


def dfs_order(graph: nx.Graph, source: Hashable) -> List[Hashable]:
    """Preorder of an iterative depth-first search from *source*."""
    _require_node(graph, source)
    order: List[Hashable] = []
    seen = set()
    stack = [source]
    while stack:
        u = stack.pop()
        if u in seen:
            continue
        seen.add(u)
        order.append(u)
        # Reversed so the smallest neighbour is popped first.
        for v in reversed(_ordered(graph.neighbors(u))):
            if v not in seen:
                stack.append(v)
    return order


def bfs_distances(graph: nx.Graph, source: Hashable) -> Dict[Hashable, int]:
    """Number of edges on a shortest path from *source* to every reachable node."""
    _require_node(graph, source)
    dist = {source: 0}
    queue = deque([source])
    while queue:
        u = queue.popleft()
        for v in _ordered(graph.neighbors(u)):
            if v not in dist:
                dist[v] = dist[u] + 1
                queue.append(v)
    return dist


# =========================================================================
# Cycle detection
# =========================================================================


def find_cycle(graph: nx.Graph) -> Optional[List[Hashable]]:
    """Return one cycle as ``[v0, v1, ..., v0]``, or ``None`` if acyclic.

    Three-colour DFS: a node is grey while it is on the DFS stack.  An
    edge into a grey node closes a cycle, which is recovered by walking
    parent links back from the current node.  For undirected graphs the
    edge straight back to the parent does not count.
    """
    directed = graph.is_directed()
    color = {u: WHITE for u in graph.nodes}
    parent: Dict[Hashable, Optional[Hashable]] = {}

    for start in _ordered(graph.nodes):
        if color[start] != WHITE:
            continue
        color[start] = GREY
        parent[start] = None
        stack = [(start, iter(_ordered(graph.neighbors(start))))]

        while stack:
            u, it = stack[-1]
            descended = False
            for v in it:
                if color[v] == GREY and (directed or v != parent[u] or v == u):
                    cycle = [u]
                    while cycle[-1] != v:
                        cycle.append(parent[cycle[-1]])
                    cycle.reverse()
                    cycle.append(v)
                    logger.debug("Cycle found: %s", cycle)
                    return cycle
                if color[v] == WHITE:
                    color[v] = GREY
                    parent[v] = u
                    stack.append((v, iter(_ordered(graph.neighbors(v)))))
                    descended = True
                    break
            if not descended:
                color[u] = BLACK
                stack.pop()

    return None


# =========================================================================
# Topological order
# =========================================================================


def topological_sort(graph: nx.DiGraph) -> List[Hashable]:
    """Kahn's algorithm, always emitting the smallest available node.

    Nodes are ranked once by ``_ordered``, so labels that cannot be
    compared fall back to insertion order instead of breaking the heap.

    Raises:
        ValueError: if *graph* is undirected.
        CycleError: if *graph* has a directed cycle.
    """
    if not graph.is_directed():
        raise ValueError("topological order is only defined for directed graphs")

    rank = {u: i for i, u in enumerate(_ordered(graph.nodes))}
    indegree = {u: graph.in_degree(u) for u in graph.nodes}
    ready = [(rank[u], u) for u, d in indegree.items() if d == 0]
    heapq.heapify(ready)

    order: List[Hashable] = []
    while ready:
        _, u = heapq.heappop(ready)
        order.append(u)
        for v in graph.successors(u):
            indegree[v] -= 1
            if indegree[v] == 0:
                heapq.heappush(ready, (rank[v], v))

    if len(order) < graph.number_of_nodes():
        raise CycleError(find_cycle(graph) or [])
    return order


def longest_path_length(graph: nx.DiGraph) -> int:
    """Edges on the longest path of a DAG: DP over the topological order."""
    depth = {u: 0 for u in graph.nodes}
    for u in topological_sort(graph):
        for v in graph.successors(u):
            depth[v] = max(depth[v], depth[u] + 1)
    return max(depth.values(), default=0)


# =========================================================================
# Validation & metrics
# =========================================================================


def is_dag(edges: Iterable[Union[Edge, Dict[str, Any]]]) -> bool:
    """Verify that edges form a DAG."""
    return find_cycle(graph_from_edges(edges)) is None


def compute_metrics(graph: nx.DiGraph, n_nodes: Optional[int] = None) -> Dict[str, Any]:
    """Compute graph summary metrics.

    Returns dict with: total_nodes, total_edges, avg_out_degree,
    max_depth, isolated_nodes_count, is_dag.  *n_nodes* counts nodes
    that may be absent from *graph* because they have no edges.
    """
    nodes_in_graph = graph.number_of_nodes()
    total_nodes = max(n_nodes or 0, nodes_in_graph)
    total_edges = graph.number_of_edges()

    isolated = sum(1 for u in graph.nodes if graph.degree(u) == 0)
    isolated += total_nodes - nodes_in_graph

    avg_out = total_edges / nodes_in_graph if nodes_in_graph > 0 else 0.0

    acyclic = find_cycle(graph) is None
    max_depth = longest_path_length(graph) if acyclic else 0

    return {
        "total_nodes": total_nodes,
        "total_edges": total_edges,
        "avg_out_degree": round(avg_out, 4),
        "max_depth": max_depth,
        "isolated_nodes_count": isolated,
        "is_dag": acyclic,
    }


# =========================================================================
# 0-1 BFS
# =========================================================================


def zero_one_bfs(
    graph: nx.Graph,
    source: Hashable,
    weight: str = "weight",
) -> ShortestPaths:
    """Single-source shortest paths when every edge weighs 0 or 1.

    A deque replaces Dijkstra's priority queue: relaxing a 0-edge pushes
    to the front, a 1-edge to the back, so nodes leave the deque in
    non-decreasing distance order.  Edges without the *weight* attribute
    count as 1.

    Raises:
        KeyError: if *source* is not in *graph*.
        ValueError: if an edge weight is neither 0 nor 1.
    """
    _require_node(graph, source)
    dist: Dict[Hashable, int] = {source: 0}
    pred: Dict[Hashable, Optional[Hashable]] = {source: None}
    dq = deque([source])
    relaxations = 0

    while dq:
        u = dq.popleft()
        for v in _ordered(graph.neighbors(u)):
            w = graph[u][v].get(weight, 1)
            if w not in (0, 1):
                raise ValueError(f"edge {u!r} -> {v!r} has weight {w!r}; 0-1 BFS needs 0 or 1")
            nd = dist[u] + w
            if v not in dist or nd < dist[v]:
                dist[v] = nd
                pred[v] = u
                relaxations += 1
                if w == 0:
                    dq.appendleft(v)
                else:
                    dq.append(v)

    logger.debug(
        "0-1 BFS from %r: %d nodes reached, %d relaxations.",
        source, len(dist), relaxations,
    )
    return ShortestPaths(source=source, distances=dist, predecessors=pred)

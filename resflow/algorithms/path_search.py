"""Augmenting-path search shared by the Ford-Fulkerson engines."""

from __future__ import annotations

from typing import Iterator, List, Optional, Set

from resflow.algorithms.base import push_or_raise
from resflow.graph.residual import Edge, ResidualGraph


def find_path(
    graph: ResidualGraph,
    start: int,
    threshold: Optional[float] = None,
    visited: Optional[Set[int]] = None,
) -> Optional[List[Edge]]:
    """
    Depth-first search for an augmenting path from ``start`` to the sink.

    The search keeps an explicit stack of edge iterators, one per vertex on
    the current path, so path length is not limited by the recursion limit.
    Edges are tried in adjacency insertion order and every vertex is entered
    at most once per search.

    Two admissibility modes are supported:

      - Plain (``threshold is None``): an edge qualifies when its residual
        capacity is positive. If ``start`` already is the sink, an empty
        path is returned.
      - Scaling: an edge qualifies when its residual capacity is at least
        ``threshold``. The sink is recognised while scanning edges, before
        the visited test, and ``start`` itself is never treated as the sink.

    Args:
        graph: Residual graph to search.
        start: Vertex index the path starts from.
        threshold: Minimum residual capacity for scaling mode, or None.
        visited: Set that receives the indices of entered vertices. Defaults
            to ``graph.visited``, which callers clear with
            ``graph.reset_visited()`` between searches.

    Returns:
        Edges from ``start`` to the sink in path order, or None if the sink
        cannot be reached.
    """
    if visited is None:
        visited = graph.visited
    sink = graph.sink_index
    vertices = graph.vertices

    visited.add(start)
    if threshold is None and start == sink:
        return []

    path: List[Edge] = []
    stack: List[Iterator[Edge]] = [iter(vertices[start].edges.values())]

    while stack:
        for edge in stack[-1]:
            dst = edge.dst
            if threshold is None:
                if edge.residual <= 0 or dst in visited:
                    continue
                visited.add(dst)
                path.append(edge)
                if dst == sink:
                    return path
            else:
                if edge.residual < threshold:
                    continue
                if dst == sink:
                    path.append(edge)
                    return path
                if dst in visited:
                    continue
                visited.add(dst)
                path.append(edge)
            stack.append(iter(vertices[dst].edges.values()))
            break
        else:
            # Dead end: drop this vertex and the edge that led to it.
            stack.pop()
            if path:
                path.pop()

    return None


def bottleneck(path: List[Edge]) -> float:
    """Return the smallest residual capacity along ``path``."""
    return min(edge.residual for edge in path)


def augment(graph: ResidualGraph, path: List[Edge], amount: float) -> None:
    """Push ``amount`` along every edge of ``path`` in path order.

    Raises:
        CapacityExceeded: If an edge on the path cannot take ``amount``.
    """
    for edge in path:
        push_or_raise(graph, edge, amount)

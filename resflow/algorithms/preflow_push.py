from __future__ import annotations

from collections import deque
from typing import Deque, Optional, Set

from resflow.algorithms.base import (
    FlowAlgorithm,
    FlowStats,
    MaxFlowEngine,
    push_or_raise,
)
from resflow.graph.residual import CAP_TOLERANCE, Edge, ResidualGraph, Vertex
from resflow.logging import get_logger

logger = get_logger(__name__)


class PreflowPushEngine(MaxFlowEngine):
    """Generic push-relabel with a FIFO worklist of active vertices.

    A vertex is active while its excess exceeds ``CAP_TOLERANCE`` and it is
    neither the source nor the sink. Heights never decrease and stay below ``2|V|``, so
    the number of relabels is finite; every push either saturates an edge or
    drains the pushing vertex.
    """

    name = "Preflow-Push"
    algorithm = FlowAlgorithm.PREFLOW_PUSH

    def run(self, graph: ResidualGraph) -> float:
        self.stats = FlowStats()
        worklist: Deque[int] = deque()
        queued: Set[int] = set()

        source = graph.source()
        source.height = graph.vertex_count()
        for edge in graph.out_edges(source.index):
            if edge.is_backward or edge.residual <= 0:
                continue
            push_or_raise(graph, edge, edge.residual, track_excess=True)
            self.stats.pushes += 1
            self._enqueue(graph, worklist, queued, edge.dst)

        while worklist:
            index = worklist.popleft()
            queued.discard(index)
            vertex = graph.vertices[index]

            edge = _admissible_edge(graph, vertex)
            if edge is None:
                vertex.height += 1
                self.stats.relabels += 1
                self._enqueue(graph, worklist, queued, index)
                continue

            push_or_raise(
                graph, edge, min(edge.residual, vertex.excess), track_excess=True
            )
            self.stats.pushes += 1
            self._enqueue(graph, worklist, queued, edge.src)
            self._enqueue(graph, worklist, queued, edge.dst)

        total = graph.flow_value()
        logger.debug(
            "%s: flow=%s after %d pushes, %d relabels",
            self.name,
            total,
            self.stats.pushes,
            self.stats.relabels,
        )
        return total

    @staticmethod
    def _enqueue(
        graph: ResidualGraph, worklist: Deque[int], queued: Set[int], index: int
    ) -> None:
        if index in queued or graph.is_terminal(index):
            return
        # Leftover excess at rounding level does not make a vertex active
        if graph.vertices[index].excess > CAP_TOLERANCE:
            queued.add(index)
            worklist.append(index)


def _admissible_edge(graph: ResidualGraph, vertex: Vertex) -> Optional[Edge]:
    """First out-edge with residual capacity leading to a lower vertex."""
    vertices = graph.vertices
    for edge in vertex.edges.values():
        if edge.residual > 0 and vertices[edge.dst].height < vertex.height:
            return edge
    return None

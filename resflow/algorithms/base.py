from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

import networkx as nx

from resflow.errors import CapacityExceeded
from resflow.graph.residual import Edge, NodeID, PushStatus, ResidualGraph


class FlowAlgorithm(IntEnum):
    """
    Max-flow strategies available over the residual graph.
    """

    #: Augment along any path found by unconstrained depth-first search.
    FORD_FULKERSON = 1
    #: Augment only along paths whose residual capacities reach a
    #: power-of-two threshold that halves between phases.
    SCALING_FORD_FULKERSON = 2
    #: Saturate source edges, then push excess downhill and relabel.
    PREFLOW_PUSH = 3


@dataclass
class FlowStats:
    """Work counters of the most recent engine run.

    Attributes:
        augmentations: Augmenting paths applied (augmenting-path engines).
        phases: Scaling phases run (scaling engine).
        pushes: Push operations performed, including source saturation
            (push-relabel engine).
        relabels: Height increments (push-relabel engine).
    """

    augmentations: int = 0
    phases: int = 0
    pushes: int = 0
    relabels: int = 0


def push_or_raise(
    graph: ResidualGraph, edge: Edge, amount: float, track_excess: bool = False
) -> None:
    """Push along ``edge`` and turn a rejected push into ``CapacityExceeded``."""
    if graph.push(edge, amount, track_excess) is PushStatus.CAPACITY_EXCEEDED:
        kind = "backward" if edge.is_backward else "forward"
        raise CapacityExceeded(
            f"Push of {amount} on {kind} edge "
            f"'{graph.vertices[edge.src].node_id}' -> '{graph.vertices[edge.dst].node_id}' "
            f"exceeds residual capacity {edge.residual}."
        )


class MaxFlowEngine(ABC):
    """Base class for max-flow engines.

    ``max_flow`` builds a fresh residual graph for every call and hands it to
    ``run``; callers holding their own residual graph call ``run`` directly
    and read final flows from it afterwards.
    """

    #: Human-readable algorithm name used in logs and reports.
    name: str = ""
    algorithm: FlowAlgorithm

    def __init__(self) -> None:
        self.stats = FlowStats()

    def max_flow(
        self,
        graph: nx.DiGraph,
        source: Optional[NodeID] = None,
        sink: Optional[NodeID] = None,
        capacity_attr: Optional[str] = None,
    ) -> float:
        """Compute the maximum flow value of ``graph``.

        Args:
            graph: Directed networkx graph with capacities on its arcs.
            source: Source node id (defaults to ``FLOW_CONFIG.source``).
            sink: Sink node id (defaults to ``FLOW_CONFIG.sink``).
            capacity_attr: Capacity attribute name (defaults to
                ``FLOW_CONFIG.capacity_attr``).

        Returns:
            The maximum flow value, 0.0 when source and sink are the same node.
        """
        residual = ResidualGraph.build(graph, source, sink, capacity_attr)
        if residual.source_id == residual.sink_id:
            self.stats = FlowStats()
            return 0.0
        return self.run(residual)

    @abstractmethod
    def run(self, graph: ResidualGraph) -> float:
        """Compute the maximum flow on a freshly built residual graph."""
        raise NotImplementedError

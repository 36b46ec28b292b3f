from __future__ import annotations

from collections import deque
from typing import Deque, Dict, Literal, Optional, Set, Type, Union, overload

import networkx as nx

from resflow.algorithms.base import FlowAlgorithm, MaxFlowEngine
from resflow.algorithms.ford_fulkerson import FordFulkersonEngine
from resflow.algorithms.preflow_push import PreflowPushEngine
from resflow.algorithms.scaling import ScalingFordFulkersonEngine
from resflow.algorithms.types import EdgeRef, FlowSummary
from resflow.graph.residual import CAP_TOLERANCE, NodeID, ResidualGraph
from resflow.logging import get_logger

logger = get_logger(__name__)

ENGINES: Dict[FlowAlgorithm, Type[MaxFlowEngine]] = {
    FlowAlgorithm.FORD_FULKERSON: FordFulkersonEngine,
    FlowAlgorithm.SCALING_FORD_FULKERSON: ScalingFordFulkersonEngine,
    FlowAlgorithm.PREFLOW_PUSH: PreflowPushEngine,
}


def get_engine(algorithm: Union[FlowAlgorithm, int, str]) -> MaxFlowEngine:
    """Return a new engine instance for ``algorithm``.

    Args:
        algorithm: A FlowAlgorithm member, its integer value, or its name
            (case-insensitive, e.g. ``"preflow_push"``).

    Raises:
        ValueError: If ``algorithm`` names no known strategy.
    """
    if isinstance(algorithm, str):
        try:
            algorithm = FlowAlgorithm[algorithm.upper().replace("-", "_")]
        except KeyError:
            raise ValueError(f"Unknown max-flow algorithm: {algorithm}") from None
    try:
        return ENGINES[FlowAlgorithm(algorithm)]()
    except (KeyError, ValueError):
        raise ValueError(f"Unknown max-flow algorithm: {algorithm}") from None


@overload
def calc_max_flow(
    graph: nx.DiGraph,
    src_node: NodeID,
    dst_node: NodeID,
    *,
    algorithm: FlowAlgorithm = FlowAlgorithm.PREFLOW_PUSH,
    return_summary: Literal[False] = False,
    return_graph: Literal[False] = False,
    capacity_attr: Optional[str] = None,
) -> float: ...


@overload
def calc_max_flow(
    graph: nx.DiGraph,
    src_node: NodeID,
    dst_node: NodeID,
    *,
    algorithm: FlowAlgorithm = FlowAlgorithm.PREFLOW_PUSH,
    return_summary: Literal[True],
    return_graph: Literal[False] = False,
    capacity_attr: Optional[str] = None,
) -> tuple[float, FlowSummary]: ...


@overload
def calc_max_flow(
    graph: nx.DiGraph,
    src_node: NodeID,
    dst_node: NodeID,
    *,
    algorithm: FlowAlgorithm = FlowAlgorithm.PREFLOW_PUSH,
    return_summary: Literal[False] = False,
    return_graph: Literal[True],
    capacity_attr: Optional[str] = None,
) -> tuple[float, ResidualGraph]: ...


@overload
def calc_max_flow(
    graph: nx.DiGraph,
    src_node: NodeID,
    dst_node: NodeID,
    *,
    algorithm: FlowAlgorithm = FlowAlgorithm.PREFLOW_PUSH,
    return_summary: Literal[True],
    return_graph: Literal[True],
    capacity_attr: Optional[str] = None,
) -> tuple[float, FlowSummary, ResidualGraph]: ...


def calc_max_flow(
    graph: nx.DiGraph,
    src_node: NodeID,
    dst_node: NodeID,
    *,
    algorithm: FlowAlgorithm = FlowAlgorithm.PREFLOW_PUSH,
    return_summary: bool = False,
    return_graph: bool = False,
    capacity_attr: Optional[str] = None,
) -> Union[float, tuple]:
    """Compute the maximum flow between two nodes of a directed graph.

    A fresh residual graph is built from ``graph`` on every call, so the
    input graph is never modified and repeated calls are independent.

    Args:
        graph: A ``networkx.DiGraph`` or ``networkx.MultiDiGraph`` with a
            capacity attribute on every arc.
        src_node: The source node.
        dst_node: The sink node.
        algorithm: Strategy to run. Defaults to ``FlowAlgorithm.PREFLOW_PUSH``.
        return_summary: If True, also return a FlowSummary.
        return_graph: If True, also return the final ResidualGraph.
        capacity_attr: Arc attribute with capacities. Defaults to
            ``FLOW_CONFIG.capacity_attr``.

    Returns:
        Union[float, tuple]:
            - If neither flag: float (total flow)
            - If return_summary only: tuple[float, FlowSummary]
            - If return_graph only: tuple[float, ResidualGraph]
            - If both flags: tuple[float, FlowSummary, ResidualGraph]

    Raises:
        MissingTerminal: If either node is not in ``graph``.
        InvalidCapacity: If an arc capacity is missing, negative or not finite.
        CapacityExceeded: If the engine attempts an infeasible push.

    Examples:
        >>> g = nx.DiGraph()
        >>> g.add_edge("A", "B", capacity=10.0)
        >>> g.add_edge("B", "C", capacity=5.0)
        >>> calc_max_flow(g, "A", "C")
        5.0
        >>> flow, summary = calc_max_flow(g, "A", "C", return_summary=True)
        >>> summary.min_cut
        [('B', 'C', None)]
    """
    residual = ResidualGraph.build(graph, src_node, dst_node, capacity_attr)

    # Degenerate case (s == t): conservation forces the only feasible flow
    # value to zero, so no engine is run.
    if src_node == dst_node:
        total = 0.0
    else:
        engine = get_engine(algorithm)
        total = engine.run(residual)
        logger.debug("calc_max_flow(%s -> %s) via %s: %s", src_node, dst_node, engine.name, total)

    if not (return_summary or return_graph):
        return total

    result: tuple = (total,)
    if return_summary:
        result += (build_summary(residual, total),)
    if return_graph:
        result += (residual,)
    return result


def build_summary(graph: ResidualGraph, total_flow: float) -> FlowSummary:
    """Collect per-arc flows, the residual reachable set and the min cut."""
    vertices = graph.vertices

    edge_flow: Dict[EdgeRef, float] = {}
    residual_cap: Dict[EdgeRef, float] = {}
    for edge in graph.forward_edges():
        ref = (vertices[edge.src].node_id, vertices[edge.dst].node_id, edge.key)
        edge_flow[ref] = edge.flow
        residual_cap[ref] = edge.residual

    # BFS from the source over edges that can still carry flow
    start = graph.source_index
    seen: Set[int] = {start}
    queue: Deque[int] = deque([start])
    while queue:
        index = queue.popleft()
        for edge in vertices[index].edges.values():
            if edge.residual > CAP_TOLERANCE and edge.dst not in seen:
                seen.add(edge.dst)
                queue.append(edge.dst)

    reachable = {vertices[i].node_id for i in seen}
    min_cut = [
        (vertices[e.src].node_id, vertices[e.dst].node_id, e.key)
        for e in graph.forward_edges()
        if e.src in seen and e.dst not in seen and e.capacity > 0
    ]

    return FlowSummary(
        total_flow=total_flow,
        edge_flow=edge_flow,
        residual_cap=residual_cap,
        reachable=reachable,
        min_cut=min_cut,
    )

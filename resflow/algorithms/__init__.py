"""Max-flow engines over the residual graph.

Three strategies share the `ResidualGraph` push operation: plain
Ford-Fulkerson, capacity-scaling Ford-Fulkerson and FIFO push-relabel.
`calc_max_flow` selects one by `FlowAlgorithm` and can return a
`FlowSummary` with per-arc flows and the minimum cut.
"""

from resflow.algorithms.base import FlowAlgorithm, FlowStats, MaxFlowEngine
from resflow.algorithms.ford_fulkerson import FordFulkersonEngine
from resflow.algorithms.max_flow import (
    ENGINES,
    build_summary,
    calc_max_flow,
    get_engine,
)
from resflow.algorithms.path_search import augment, bottleneck, find_path
from resflow.algorithms.preflow_push import PreflowPushEngine
from resflow.algorithms.scaling import ScalingFordFulkersonEngine
from resflow.algorithms.types import EdgeRef, FlowSummary

__all__ = [
    "ENGINES",
    "EdgeRef",
    "FlowAlgorithm",
    "FlowStats",
    "FlowSummary",
    "FordFulkersonEngine",
    "MaxFlowEngine",
    "PreflowPushEngine",
    "ScalingFordFulkersonEngine",
    "augment",
    "bottleneck",
    "build_summary",
    "calc_max_flow",
    "find_path",
    "get_engine",
]

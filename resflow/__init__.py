"""resflow: residual-graph maximum-flow engines.

resflow computes maximum flows on directed, capacitated networkx graphs with
three interchangeable strategies that share one residual-graph model.

Primary API:
    calc_max_flow() - Compute a max flow, optionally with a FlowSummary
    FordFulkersonEngine, ScalingFordFulkersonEngine, PreflowPushEngine
    ResidualGraph - Indexed residual network built once per run
    load_graph() - Read an edge-list or YAML graph file

Example:
    import networkx as nx
    from resflow import FlowAlgorithm, calc_max_flow

    g = nx.DiGraph()
    g.add_edge("s", "a", capacity=10)
    g.add_edge("a", "t", capacity=4)

    flow = calc_max_flow(g, "s", "t", algorithm=FlowAlgorithm.FORD_FULKERSON)
"""

from __future__ import annotations

from resflow import cli, logging
from resflow.algorithms import (
    FlowAlgorithm,
    FlowStats,
    FlowSummary,
    FordFulkersonEngine,
    MaxFlowEngine,
    PreflowPushEngine,
    ScalingFordFulkersonEngine,
    calc_max_flow,
    get_engine,
)
from resflow.config import FLOW_CONFIG, FlowConfig
from resflow.errors import (
    CapacityExceeded,
    EdgeOwnershipMismatch,
    FlowError,
    InvalidCapacity,
    MissingTerminal,
)
from resflow.graph import Edge, PushStatus, ResidualGraph, Vertex
from resflow.io import edgelist_to_graph, load_graph, yaml_to_graph

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Algorithms
    "calc_max_flow",
    "get_engine",
    "FlowAlgorithm",
    "FlowStats",
    "FlowSummary",
    "MaxFlowEngine",
    "FordFulkersonEngine",
    "ScalingFordFulkersonEngine",
    "PreflowPushEngine",
    # Residual model
    "ResidualGraph",
    "Vertex",
    "Edge",
    "PushStatus",
    # Errors
    "FlowError",
    "MissingTerminal",
    "InvalidCapacity",
    "CapacityExceeded",
    "EdgeOwnershipMismatch",
    # Configuration
    "FlowConfig",
    "FLOW_CONFIG",
    # I/O
    "load_graph",
    "edgelist_to_graph",
    "yaml_to_graph",
    # Utilities
    "cli",
    "logging",
]

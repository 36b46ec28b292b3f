"""Residual graph primitives.

This package provides the indexed `ResidualGraph` used by every max-flow
engine, together with its `Vertex` and `Edge` records and the `PushStatus`
returned by the shared push operation.
"""

from resflow.graph.residual import (
    CAP_TOLERANCE,
    Edge,
    NodeID,
    PushStatus,
    ResidualGraph,
    Vertex,
)

__all__ = [
    "CAP_TOLERANCE",
    "Edge",
    "NodeID",
    "PushStatus",
    "ResidualGraph",
    "Vertex",
]

"""Types and data structures for max-flow results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Hashable, List, Set, Tuple

# Edge identifier tuple: (source_node, destination_node, arc_key)
EdgeRef = Tuple[Hashable, Hashable, Any]


@dataclass(frozen=True)
class FlowSummary:
    """Summary of a max-flow computation.

    Attributes:
        total_flow: The maximum flow value achieved.
        edge_flow: Flow on each input arc, indexed by (src, dst, key). The key
            is None for arcs of a simple DiGraph.
        residual_cap: Remaining capacity on each input arc.
        reachable: Nodes reachable from the source along edges with positive
            residual capacity.
        min_cut: Saturated arcs leading from a reachable to an unreachable node.
    """

    total_flow: float
    edge_flow: Dict[EdgeRef, float]
    residual_cap: Dict[EdgeRef, float]
    reachable: Set[Hashable]
    min_cut: List[EdgeRef]

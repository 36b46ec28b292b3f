"""Residual graph shared by all max-flow engines.

Vertices and edges live in flat lists and refer to each other by integer
index. A forward edge mirrors one input arc; its backward partner is created
the first time the forward edge carries flow and retracted once all of that
flow is cancelled again. Retracted edges leave an empty slot that is reused
for the next backward edge.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Hashable, Iterator, List, Optional, Set

import networkx as nx

from resflow.config import FLOW_CONFIG
from resflow.errors import EdgeOwnershipMismatch, InvalidCapacity, MissingTerminal
from resflow.logging import get_logger

logger = get_logger(__name__)

NodeID = Hashable

#: Absolute slack accepted when a push is checked against remaining capacity.
CAP_TOLERANCE = 1e-9


class PushStatus(IntEnum):
    """Outcome of ``ResidualGraph.push``."""

    OK = 1
    CAPACITY_EXCEEDED = 2


@dataclass(slots=True)
class Edge:
    """A residual edge.

    Attributes:
        index: Slot of this edge in ``ResidualGraph.edges``.
        src: Index of the tail vertex.
        dst: Index of the head vertex.
        capacity: Arc capacity for a forward edge; cancellable flow for a
            backward edge.
        flow: Flow carried by a forward edge. Always 0 on backward edges.
        key: Arc key of the input multigraph, or None.
        forward: Index of the forward partner. Set only on backward edges.
        backward: Index of the backward partner while a forward edge has one.
    """

    index: int
    src: int
    dst: int
    capacity: float
    flow: float = 0.0
    key: Any = None
    forward: Optional[int] = None
    backward: Optional[int] = None

    @property
    def is_backward(self) -> bool:
        return self.forward is not None

    @property
    def residual(self) -> float:
        if self.forward is not None:
            return self.capacity
        return self.capacity - self.flow


@dataclass(slots=True)
class Vertex:
    """A residual vertex with its outgoing edges keyed by edge index."""

    node_id: NodeID
    index: int
    edges: Dict[int, Edge] = field(default_factory=dict)
    height: int = 0
    excess: float = 0.0

    def add_edge(self, edge: Edge) -> None:
        """Register an outgoing edge.

        Raises:
            EdgeOwnershipMismatch: If this vertex is not the edge's source.
        """
        if edge.src != self.index:
            raise EdgeOwnershipMismatch(
                f"Edge {edge.index} starts at vertex {edge.src}, "
                f"cannot register it on vertex {self.index} ('{self.node_id}')."
            )
        self.edges[edge.index] = edge

    def remove_edge(self, edge: Edge) -> None:
        self.edges.pop(edge.index, None)

    def outgoing_flow(self) -> float:
        return sum(e.flow for e in self.edges.values() if e.forward is None)

    def outgoing_capacity(self) -> float:
        return sum(e.capacity for e in self.edges.values() if e.forward is None)


class ResidualGraph:
    """Indexed residual network for a single max-flow run.

    Flows and backward edges are mutated in place, so a ResidualGraph must not
    be reused for a second algorithm run. Build a fresh one from the input
    graph instead.
    """

    def __init__(self, source: NodeID, sink: NodeID) -> None:
        self.vertices: List[Vertex] = []
        self.edges: List[Optional[Edge]] = []
        #: Scratch set for path search, cleared by ``reset_visited``.
        self.visited: Set[int] = set()
        self.source_id = source
        self.sink_id = sink
        self._index: Dict[NodeID, int] = {}
        self._free_slots: List[int] = []
        self._forward_count = 0

    @classmethod
    def build(
        cls,
        graph: nx.DiGraph,
        source: Optional[NodeID] = None,
        sink: Optional[NodeID] = None,
        capacity_attr: Optional[str] = None,
    ) -> ResidualGraph:
        """Create a residual graph from a directed networkx graph.

        One vertex is created per node and one forward edge per arc; parallel
        arcs of a MultiDiGraph stay separate edges. Self-loops are skipped.

        Args:
            graph: A ``networkx.DiGraph`` or ``networkx.MultiDiGraph``.
            source: Source node id. Defaults to ``FLOW_CONFIG.source``.
            sink: Sink node id. Defaults to ``FLOW_CONFIG.sink``.
            capacity_attr: Arc attribute holding the capacity. Defaults to
                ``FLOW_CONFIG.capacity_attr``.

        Returns:
            A new ResidualGraph with zero flow.

        Raises:
            MissingTerminal: If source or sink is not a node of ``graph``.
            InvalidCapacity: If an arc capacity is missing, negative or not finite.
            ValueError: If ``graph`` is undirected.
        """
        source = FLOW_CONFIG.source if source is None else source
        sink = FLOW_CONFIG.sink if sink is None else sink
        capacity_attr = capacity_attr or FLOW_CONFIG.capacity_attr

        if not graph.is_directed():
            raise ValueError("Residual graphs require a directed input graph.")
        if source not in graph:
            raise MissingTerminal(f"Source node '{source}' does not exist.")
        if sink not in graph:
            raise MissingTerminal(f"Sink node '{sink}' does not exist.")

        residual = cls(source, sink)
        for node in graph.nodes:
            residual.add_vertex(node)

        if graph.is_multigraph():
            arcs = graph.edges(keys=True, data=True)
        else:
            arcs = ((u, v, None, data) for u, v, data in graph.edges(data=True))

        for u, v, key, data in arcs:
            capacity = _arc_capacity(u, v, data, capacity_attr)
            if u == v:
                logger.debug("Skipping self-loop on node '%s'", u)
                continue
            residual.add_edge(u, v, capacity, key=key)

        logger.debug(
            "Built residual graph: %d vertices, %d edges",
            residual.vertex_count(),
            residual.edge_count(),
        )
        return residual

    #
    # Construction
    #
    def add_vertex(self, node_id: NodeID) -> Vertex:
        if node_id in self._index:
            raise ValueError(f"Vertex '{node_id}' already exists.")
        vertex = Vertex(node_id, len(self.vertices))
        self._index[node_id] = vertex.index
        self.vertices.append(vertex)
        return vertex

    def add_edge(
        self, u: NodeID, v: NodeID, capacity: float, key: Any = None
    ) -> Edge:
        """Add a forward edge from ``u`` to ``v``."""
        if capacity < 0:
            raise InvalidCapacity(
                f"Edge '{u}' -> '{v}' has negative capacity {capacity}."
            )
        src = self.vertex(u).index
        dst = self.vertex(v).index
        edge = self._new_edge(src, dst, float(capacity), key=key)
        self._forward_count += 1
        return edge

    def _new_edge(
        self,
        src: int,
        dst: int,
        capacity: float,
        key: Any = None,
        forward: Optional[int] = None,
    ) -> Edge:
        if self._free_slots:
            index = self._free_slots.pop()
        else:
            index = len(self.edges)
            self.edges.append(None)
        edge = Edge(index, src, dst, capacity, key=key, forward=forward)
        self.edges[index] = edge
        self.vertices[src].add_edge(edge)
        return edge

    def _retract(self, backward: Edge) -> None:
        self.edges[backward.forward].backward = None
        self.vertices[backward.src].remove_edge(backward)
        self.edges[backward.index] = None
        self._free_slots.append(backward.index)

    #
    # Lookup
    #
    def vertex(self, node_id: NodeID) -> Vertex:
        """Return the vertex for ``node_id``.

        Raises:
            ValueError: If the vertex does not exist.
        """
        index = self._index.get(node_id)
        if index is None:
            raise ValueError(f"Vertex '{node_id}' does not exist.")
        return self.vertices[index]

    def source(self) -> Vertex:
        index = self._index.get(self.source_id)
        if index is None:
            raise MissingTerminal(f"Source node '{self.source_id}' does not exist.")
        return self.vertices[index]

    def sink(self) -> Vertex:
        index = self._index.get(self.sink_id)
        if index is None:
            raise MissingTerminal(f"Sink node '{self.sink_id}' does not exist.")
        return self.vertices[index]

    @property
    def source_index(self) -> int:
        return self.source().index

    @property
    def sink_index(self) -> int:
        return self.sink().index

    def is_terminal(self, index: int) -> bool:
        node_id = self.vertices[index].node_id
        return node_id == self.source_id or node_id == self.sink_id

    def edge(self, index: int) -> Edge:
        edge = self.edges[index]
        if edge is None:
            raise ValueError(f"Edge {index} has been retracted.")
        return edge

    def out_edges(self, index: int) -> List[Edge]:
        return list(self.vertices[index].edges.values())

    def forward_edges(self) -> Iterator[Edge]:
        for edge in self.edges:
            if edge is not None and edge.forward is None:
                yield edge

    def vertex_count(self) -> int:
        return len(self.vertices)

    def edge_count(self) -> int:
        """Number of forward edges."""
        return self._forward_count

    def reset_visited(self) -> None:
        self.visited.clear()

    #
    # Flow
    #
    def push(self, edge: Edge, amount: float, track_excess: bool = False) -> PushStatus:
        """Send ``amount`` units of flow along a residual edge.

        On a forward edge the flow grows and the backward partner is created
        or resized to match it. On a backward edge the partner's flow shrinks
        and the backward edge is retracted once its capacity reaches zero.

        Args:
            edge: A live edge of this graph.
            amount: Non-negative amount to push. Zero is a no-op.
            track_excess: Move excess from ``edge.src`` to ``edge.dst``
                (push-relabel bookkeeping). The amount moved is the actual
                change of the forward flow, which differs from ``amount``
                when the push is snapped to saturation or retraction.

        Returns:
            ``PushStatus.OK``, or ``PushStatus.CAPACITY_EXCEEDED`` when the
            edge cannot take ``amount``. Nothing is mutated in the latter case.

        Raises:
            ValueError: If ``amount`` is negative.
        """
        if amount < 0:
            raise ValueError(f"Cannot push negative amount {amount}.")
        if amount == 0:
            return PushStatus.OK

        if edge.forward is not None:
            if amount > edge.capacity + CAP_TOLERANCE:
                return PushStatus.CAPACITY_EXCEEDED
            forward = self.edges[edge.forward]
            before = forward.flow
            if amount >= edge.capacity:
                forward.flow = 0.0
                edge.capacity = 0.0
                self._retract(edge)
            else:
                forward.flow -= amount
                edge.capacity = forward.flow
            moved = before - forward.flow
        else:
            residual = edge.capacity - edge.flow
            if amount > residual + CAP_TOLERANCE:
                return PushStatus.CAPACITY_EXCEEDED
            before = edge.flow
            if amount >= residual:
                edge.flow = edge.capacity
            else:
                edge.flow += amount
            moved = edge.flow - before
            if edge.backward is None:
                backward = self._new_edge(
                    edge.dst, edge.src, edge.flow, forward=edge.index
                )
                edge.backward = backward.index
            else:
                self.edges[edge.backward].capacity = edge.flow

        if track_excess:
            self.vertices[edge.src].excess -= moved
            self.vertices[edge.dst].excess += moved
        return PushStatus.OK

    def flow_value(self) -> float:
        """Net flow leaving the source along forward edges."""
        src = self.source_index
        outflow = self.vertices[src].outgoing_flow()
        inflow = sum(e.flow for e in self.forward_edges() if e.dst == src)
        return outflow - inflow

    def flow_balance(self) -> Dict[NodeID, float]:
        """Map every node id to inflow minus outflow over forward edges."""
        balance = {vertex.node_id: 0.0 for vertex in self.vertices}
        for edge in self.forward_edges():
            balance[self.vertices[edge.src].node_id] -= edge.flow
            balance[self.vertices[edge.dst].node_id] += edge.flow
        return balance


def _arc_capacity(u: NodeID, v: NodeID, data: Dict[str, Any], capacity_attr: str) -> float:
    value = data.get(capacity_attr)
    if value is None:
        raise InvalidCapacity(f"Edge '{u}' -> '{v}' has no '{capacity_attr}' attribute.")
    try:
        capacity = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidCapacity(
            f"Edge '{u}' -> '{v}' has non-numeric capacity {value!r}."
        ) from exc
    if not math.isfinite(capacity) or capacity < 0:
        raise InvalidCapacity(
            f"Edge '{u}' -> '{v}' capacity must be finite and non-negative, got {value!r}."
        )
    return capacity

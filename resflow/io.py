"""Loading flow networks from edge-list text files and YAML documents."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Union

import networkx as nx
import yaml

from resflow.config import FLOW_CONFIG
from resflow.logging import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]


def _parse_capacity(token: Any, where: str) -> float:
    try:
        return float(token)
    except (TypeError, ValueError):
        raise ValueError(f"{where}: capacity {token!r} is not a number.") from None


def edgelist_to_graph(
    lines: Iterable[str],
    graph: Optional[nx.MultiDiGraph] = None,
    capacity_attr: Optional[str] = None,
) -> nx.MultiDiGraph:
    """
    Builds or updates a MultiDiGraph from a whitespace-separated edge list.

    Each non-blank line that does not start with ``#`` holds either
    ``<from> <to> <capacity>`` for an arc or a single ``<node>`` token for an
    isolated vertex. Node ids are kept as strings. Repeated arcs between the
    same pair become parallel edges.

    Args:
        lines: An iterable of strings, one arc or node per line.
        graph: An existing MultiDiGraph to update; if None, a new graph is created.
        capacity_attr: Arc attribute to store capacities under. Defaults to
            ``FLOW_CONFIG.capacity_attr``.

    Returns:
        The updated (or newly created) MultiDiGraph.

    Raises:
        ValueError: If a line has two or more than three tokens, or a
            capacity that is not a number.
    """
    if graph is None:
        graph = nx.MultiDiGraph()
    capacity_attr = capacity_attr or FLOW_CONFIG.capacity_attr

    for lineno, line in enumerate(lines, start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        tokens = line.split()
        if len(tokens) == 1:
            graph.add_node(tokens[0])
            continue
        if len(tokens) != 3:
            raise ValueError(
                f"Line {lineno}: expected '<from> <to> <capacity>', got '{line}'."
            )
        src, dst, cap = tokens
        graph.add_edge(
            src, dst, **{capacity_attr: _parse_capacity(cap, f"Line {lineno}")}
        )

    return graph


def graph_to_edgelist(
    graph: nx.DiGraph, capacity_attr: Optional[str] = None
) -> List[str]:
    """
    Converts a directed graph into edge-list lines readable by ``edgelist_to_graph``.

    Isolated nodes are emitted as single-token lines so that they survive a
    round trip. Integral capacities are written without a decimal point.
    """
    capacity_attr = capacity_attr or FLOW_CONFIG.capacity_attr
    lines: List[str] = []
    for src, dst, data in graph.edges(data=True):
        cap = data[capacity_attr]
        if isinstance(cap, float) and cap.is_integer():
            cap = int(cap)
        lines.append(f"{src} {dst} {cap}")
    for node in graph.nodes:
        if graph.degree(node) == 0:
            lines.append(str(node))
    return lines


def yaml_to_graph(
    data: Dict[str, Any], capacity_attr: Optional[str] = None
) -> nx.MultiDiGraph:
    """
    Builds a MultiDiGraph from a parsed YAML mapping.

    Expected structure:
        ```yaml
        source: s          # optional, stored in graph.graph["source"]
        sink: t            # optional, stored in graph.graph["sink"]
        nodes: [s, a, t]   # optional, for isolated vertices
        edges:
          - [s, a, 10]
          - {source: a, target: t, capacity: 5}
        ```

    Raises:
        ValueError: If the document is not a mapping or an edge entry is malformed.
    """
    if not isinstance(data, dict):
        raise ValueError("Graph document must be a mapping with an 'edges' list.")
    capacity_attr = capacity_attr or FLOW_CONFIG.capacity_attr

    graph = nx.MultiDiGraph()
    for terminal in ("source", "sink"):
        if data.get(terminal) is not None:
            graph.graph[terminal] = data[terminal]

    for node in data.get("nodes") or []:
        graph.add_node(node)

    for i, entry in enumerate(data.get("edges") or []):
        where = f"Edge #{i}"
        if isinstance(entry, dict):
            try:
                src, dst = entry["source"], entry["target"]
            except KeyError as exc:
                raise ValueError(f"{where}: missing key {exc}.") from None
            cap = entry.get("capacity")
        elif isinstance(entry, (list, tuple)) and len(entry) == 3:
            src, dst, cap = entry
        else:
            raise ValueError(
                f"{where}: expected [from, to, capacity] or a mapping, got {entry!r}."
            )
        graph.add_edge(src, dst, **{capacity_attr: _parse_capacity(cap, where)})

    return graph


def load_graph(path: PathLike, capacity_attr: Optional[str] = None) -> nx.MultiDiGraph:
    """Load a graph file, choosing the parser by file suffix.

    ``.yaml`` and ``.yml`` files are parsed with ``yaml_to_graph``; any other
    file is read as an edge list.
    """
    path = Path(path)
    if path.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        graph = yaml_to_graph(data, capacity_attr)
    else:
        with path.open("r", encoding="utf-8") as fh:
            graph = edgelist_to_graph(fh, capacity_attr=capacity_attr)

    logger.debug(
        "Loaded %s: %d nodes, %d edges",
        path,
        graph.number_of_nodes(),
        graph.number_of_edges(),
    )
    return graph


def iter_graph_files(
    root: PathLike, suffixes: Optional[Sequence[str]] = None
) -> Iterator[Path]:
    """Yield graph files under ``root``.

    A file path yields itself regardless of suffix. A directory is walked
    recursively in sorted order, yielding files whose suffix is in
    ``suffixes`` (default ``FLOW_CONFIG.graph_suffixes``).

    Raises:
        FileNotFoundError: If ``root`` does not exist.
    """
    root = Path(root)
    if not root.exists():
        raise FileNotFoundError(f"Path not found: {root}")
    if root.is_file():
        yield root
        return

    wanted = {s.lower() for s in (suffixes or FLOW_CONFIG.graph_suffixes)}
    for path in sorted(root.rglob("*")):
        if path.is_file() and path.suffix.lower() in wanted:
            yield path

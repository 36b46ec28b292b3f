"""Command-line interface for resflow."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from time import perf_counter
from typing import Any, Dict, List, Optional

import yaml

from resflow.algorithms.base import FlowAlgorithm
from resflow.algorithms.max_flow import get_engine
from resflow.config import FLOW_CONFIG
from resflow.errors import FlowError
from resflow.io import iter_graph_files, load_graph
from resflow.logging import enable_debug_logging, get_logger, set_global_log_level

logger = get_logger(__name__)

ALGORITHM_CHOICES: Dict[str, FlowAlgorithm] = {
    alg.name.lower().replace("_", "-"): alg for alg in FlowAlgorithm
}


def _format_table(
    headers: List[str],
    rows: List[List[str]],
    min_width: int = 8,
) -> str:
    """Format data as a simple ASCII table.

    Args:
        headers: Column headers
        rows: Data rows
        min_width: Minimum column width

    Returns:
        Formatted table string
    """
    if not rows:
        return ""

    all_data = [headers] + rows
    col_widths = []
    for col_idx in range(len(headers)):
        max_width = max(len(str(row[col_idx])) for row in all_data)
        col_widths.append(max(max_width, min_width))

    def format_row(row_data: List[str]) -> str:
        return "   " + " | ".join(
            f"{str(item):<{col_widths[i]}}" for i, item in enumerate(row_data)
        )

    lines = [format_row(headers)]
    lines.append("   " + "-+-".join("-" * width for width in col_widths))
    for row in rows:
        lines.append(format_row(row))
    return "\n".join(lines)


def _format_flow(value: float) -> str:
    """Return a flow value with up to six decimals and no trailing zeros.

    Examples:
        7.0 -> "7"; 2.5 -> "2.5"; 1234.5 -> "1,234.5".
    """
    s = f"{value:,.6f}"
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    return s


def _format_duration(seconds: float) -> str:
    """Return a concise human-readable duration string.

    Examples:
        0.123 -> "123.0 ms"; 1.234 -> "1.23 s"; 75.2 -> "1m 15.2s".
    """
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f} ms"
    if seconds < 60.0:
        return f"{seconds:.2f} s"
    minutes = int(seconds // 60)
    rem = seconds - minutes * 60
    return f"{minutes}m {rem:.1f}s"


def _run_file(
    path: Path,
    algorithms: List[FlowAlgorithm],
    source: Optional[str],
    sink: Optional[str],
) -> Dict[str, Any]:
    """Run each algorithm on one graph file, print a report and return results."""
    graph = load_graph(path)
    src = source if source is not None else graph.graph.get("source", FLOW_CONFIG.source)
    dst = sink if sink is not None else graph.graph.get("sink", FLOW_CONFIG.sink)

    print(path)
    print(f"Vertices: {graph.number_of_nodes()}")
    print(f"Edges: {graph.number_of_edges()}")

    rows: List[List[str]] = []
    runs: Dict[str, Dict[str, Any]] = {}
    for algorithm in algorithms:
        engine = get_engine(algorithm)
        logger.debug("Executing %s on %s", engine.name, path)
        start = perf_counter()
        flow = engine.max_flow(graph, src, dst)
        elapsed = perf_counter() - start

        stats = engine.stats
        work = (
            f"{stats.pushes} pushes, {stats.relabels} relabels"
            if algorithm == FlowAlgorithm.PREFLOW_PUSH
            else f"{stats.augmentations} augmentations"
        )
        rows.append([engine.name, _format_flow(flow), _format_duration(elapsed), work])
        runs[engine.name] = {
            "max_flow": flow,
            "seconds": elapsed,
            "augmentations": stats.augmentations,
            "phases": stats.phases,
            "pushes": stats.pushes,
            "relabels": stats.relabels,
        }

    print(_format_table(["Algorithm", "Max flow", "Time", "Work"], rows))
    print()

    values = [run["max_flow"] for run in runs.values()]
    if any(not FLOW_CONFIG.values_agree(values[0], v) for v in values[1:]):
        logger.warning("Engines disagree on %s: %s", path, values)

    return {
        "source": src,
        "sink": dst,
        "vertices": graph.number_of_nodes(),
        "edges": graph.number_of_edges(),
        "runs": runs,
    }


def _run(
    path: Path,
    algorithms: List[FlowAlgorithm],
    source: Optional[str] = None,
    sink: Optional[str] = None,
    results_path: Optional[Path] = None,
) -> int:
    """Process a graph file or a directory of graph files.

    Returns:
        Number of files that failed to load or compute.
    """
    try:
        files = list(iter_graph_files(path))
    except FileNotFoundError as exc:
        logger.error("%s", exc)
        return 1

    if not files:
        logger.warning("No graph files found under %s", path)

    results: Dict[str, Any] = {}
    failures = 0
    for file_path in files:
        try:
            results[str(file_path)] = _run_file(file_path, algorithms, source, sink)
        except (FlowError, ValueError, OSError, yaml.YAMLError) as exc:
            failures += 1
            logger.error("Failed to process %s: %s", file_path, exc)

    logger.info(
        "Processed %d graph file(s), %d failed", len(files), failures
    )

    if results_path is not None:
        results_path.parent.mkdir(parents=True, exist_ok=True)
        results_path.write_text(json.dumps(results, indent=2, default=str))
        logger.info("Results written to %s", results_path)

    return failures


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``resflow`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="resflow",
        description="Compute maximum flows with residual-graph algorithms.",
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{run}",
        help="Available commands",
    )

    run_parser = subparsers.add_parser(
        "run", help="Run max-flow algorithms on a graph file or directory"
    )
    run_parser.add_argument(
        "path", type=Path, help="Graph file, or directory searched recursively"
    )
    run_parser.add_argument(
        "--algorithm",
        "-a",
        nargs="+",
        choices=sorted(ALGORITHM_CHOICES),
        default=None,
        help="Algorithms to run (default: all)",
    )
    run_parser.add_argument(
        "--source", default=None, help="Source node id (default: from file or 's')"
    )
    run_parser.add_argument(
        "--sink", default=None, help="Sink node id (default: from file or 't')"
    )
    run_parser.add_argument(
        "--results",
        "-r",
        type=Path,
        default=None,
        help="Export results to a JSON file",
    )

    effective_args = sys.argv[1:] if argv is None else argv

    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    if args.verbose:
        enable_debug_logging()
        logger.debug("Debug logging enabled")
    elif args.quiet:
        set_global_log_level(logging.WARNING)
    else:
        set_global_log_level(logging.INFO)

    if args.command == "run":
        names = args.algorithm or list(ALGORITHM_CHOICES)
        algorithms = [ALGORITHM_CHOICES[name] for name in names]
        failures = _run(
            args.path,
            algorithms,
            source=args.source,
            sink=args.sink,
            results_path=args.results,
        )
        if failures:
            raise SystemExit(1)


if __name__ == "__main__":
    main()

"""Benchmark the max-flow engines on random directed graphs.

Builds seeded random graphs with networkx, runs every engine on each graph and
reports per-engine timings together with the work counters each engine keeps.

Run examples:

  python -m dev.bench_max_flow --nodes 200 --edges 1000

  python -m dev.bench_max_flow --nodes 50 --edges 400 --repeat 20 --max-cap 1000

Notes:
- Terminals are the lowest and highest node ids of each graph.
- Every result is cross-checked against ``networkx.maximum_flow_value``.
"""

from __future__ import annotations

import argparse
import random
import statistics
import time

import networkx as nx

from resflow.algorithms.base import FlowAlgorithm
from resflow.algorithms.max_flow import get_engine
from resflow.config import FLOW_CONFIG


def _random_graph(nodes: int, edges: int, seed: int, max_cap: int) -> nx.DiGraph:
    """Return a seeded random digraph with integer capacities in [1, max_cap]."""
    graph = nx.gnm_random_graph(nodes, edges, seed=seed, directed=True)
    rng = random.Random(seed)
    for _, _, data in graph.edges(data=True):
        data["capacity"] = rng.randint(1, max_cap)
    return graph


def _bench(graphs: list[nx.DiGraph], algorithm: FlowAlgorithm) -> dict:
    times_ms: list[float] = []
    mismatches = 0
    work = 0
    for graph in graphs:
        s, t = 0, graph.number_of_nodes() - 1
        engine = get_engine(algorithm)
        t0 = time.perf_counter()
        flow = engine.max_flow(graph, s, t)
        t1 = time.perf_counter()
        times_ms.append(1000.0 * (t1 - t0))

        expected = nx.maximum_flow_value(graph, s, t)
        if not FLOW_CONFIG.values_agree(flow, expected):
            mismatches += 1
        stats = engine.stats
        work += stats.pushes + stats.relabels + stats.augmentations

    return {
        "runs": len(times_ms),
        "min_ms": min(times_ms) if times_ms else 0.0,
        "mean_ms": statistics.mean(times_ms) if times_ms else 0.0,
        "median_ms": statistics.median(times_ms) if times_ms else 0.0,
        "max_ms": max(times_ms) if times_ms else 0.0,
        "work": work,
        "mismatches": mismatches,
    }


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code (0 on success, 1 if any engine disagreed with networkx).
    """
    parser = argparse.ArgumentParser(
        description="Benchmark max-flow engines on random graphs"
    )
    parser.add_argument("--nodes", type=int, default=100, help="Nodes per graph")
    parser.add_argument("--edges", type=int, default=500, help="Edges per graph")
    parser.add_argument("--repeat", type=int, default=5, help="Graphs to generate")
    parser.add_argument("--seed", type=int, default=0, help="Base random seed")
    parser.add_argument(
        "--max-cap", type=int, default=100, help="Largest integer capacity"
    )
    parser.add_argument(
        "--skip",
        type=str,
        default="",
        help="Comma-separated algorithms to skip, e.g. ford_fulkerson",
    )

    args = parser.parse_args(argv)
    skip = {s.strip().upper() for s in args.skip.split(",") if s.strip()}

    graphs = [
        _random_graph(args.nodes, args.edges, args.seed + i, args.max_cap)
        for i in range(args.repeat)
    ]
    print(f"graphs: {len(graphs)} x nodes={args.nodes}, edges={args.edges}")

    failed = False
    for algorithm in FlowAlgorithm:
        if algorithm.name in skip:
            continue
        res = _bench(graphs, algorithm)
        failed = failed or res["mismatches"] > 0
        print(
            f"[{algorithm.name.lower():<22}] runs={res['runs']} "
            f"min/mean/med/max={res['min_ms']:.2f}/{res['mean_ms']:.2f}/"
            f"{res['median_ms']:.2f}/{res['max_ms']:.2f} ms "
            f"work={res['work']} mismatches={res['mismatches']}"
        )

    return 1 if failed else 0


if __name__ == "__main__":  # pragma: no cover - manual utility
    raise SystemExit(main())

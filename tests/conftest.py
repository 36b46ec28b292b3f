"""Shared sample graphs for the test suite.

All graphs use ``s`` and ``t`` as terminals unless noted otherwise. Arc
insertion order matters: it fixes the order in which depth-first search
explores edges, so the expected augmentation counts below depend on it.
"""

from __future__ import annotations

import random

import networkx as nx
import pytest


@pytest.fixture
def single_edge():
    #  s ──[7]──► t
    g = nx.DiGraph()
    g.add_edge("s", "t", capacity=7)
    return g


@pytest.fixture
def disconnected():
    #  s ──[3]──► a     b ──[4]──► t
    g = nx.DiGraph()
    g.add_edge("s", "a", capacity=3)
    g.add_edge("b", "t", capacity=4)
    return g


@pytest.fixture
def diamond():
    # Max flow 15: both {s} and {s, a, b} are minimum cuts.
    #
    #        [10]      [5]
    #   ┌────────►a─────────┐
    #   │         │         ▼
    #   s         │[15]     t
    #   │         ▼         ▲
    #   └────────►b─────────┘
    #        [5]       [10]
    g = nx.DiGraph()
    g.add_edge("s", "a", capacity=10)
    g.add_edge("s", "b", capacity=5)
    g.add_edge("a", "t", capacity=5)
    g.add_edge("b", "t", capacity=10)
    g.add_edge("a", "b", capacity=15)
    return g


@pytest.fixture
def parallel_paths():
    #   s ──[1]──► a ──[1]──► t
    #   s ──[100]─► b ─[100]─► t
    g = nx.DiGraph()
    g.add_edge("s", "a", capacity=1)
    g.add_edge("a", "t", capacity=1)
    g.add_edge("s", "b", capacity=100)
    g.add_edge("b", "t", capacity=100)
    return g


@pytest.fixture
def zigzag():
    # Depth-first search first routes through the [1] cross edge and later
    # has to cancel it through its backward edge.
    #
    #        [100]      [100]
    #   ┌────────►a──────────┐
    #   │         │          ▼
    #   s         │[1]       t
    #   │         ▼          ▲
    #   └────────►b──────────┘
    #        [100]      [100]
    g = nx.DiGraph()
    g.add_edge("s", "a", capacity=100)
    g.add_edge("s", "b", capacity=100)
    g.add_edge("a", "b", capacity=1)
    g.add_edge("a", "t", capacity=100)
    g.add_edge("b", "t", capacity=100)
    return g


@pytest.fixture
def clrs():
    # Classic textbook network with max flow 23.
    g = nx.DiGraph()
    g.add_edge("s", "v1", capacity=16)
    g.add_edge("s", "v2", capacity=13)
    g.add_edge("v1", "v3", capacity=12)
    g.add_edge("v2", "v1", capacity=4)
    g.add_edge("v2", "v4", capacity=14)
    g.add_edge("v3", "v2", capacity=9)
    g.add_edge("v3", "t", capacity=20)
    g.add_edge("v4", "v3", capacity=7)
    g.add_edge("v4", "t", capacity=4)
    return g


@pytest.fixture
def multi_line():
    # Parallel arcs between B and C, with terminals A and C.
    #
    #     [5]      [1,3,7]
    #  A◄───────►B◄───────►C
    g = nx.MultiDiGraph()
    g.add_edge("A", "B", capacity=5)
    g.add_edge("B", "A", capacity=5)
    g.add_edge("B", "C", capacity=1)
    g.add_edge("C", "B", capacity=1)
    g.add_edge("B", "C", capacity=3)
    g.add_edge("C", "B", capacity=3)
    g.add_edge("B", "C", capacity=7)
    g.add_edge("C", "B", capacity=7)
    return g


@pytest.fixture
def back_to_source():
    # An arc leads back into the source.
    #   s ──[5]──► a ──[3]──► t
    #   ▲          │
    #   └───[5]────┘
    g = nx.DiGraph()
    g.add_edge("s", "a", capacity=5)
    g.add_edge("a", "s", capacity=5)
    g.add_edge("a", "t", capacity=3)
    return g


def make_random_graph(n: int, m: int, seed: int, max_cap: int = 20) -> nx.DiGraph:
    """Random directed graph on nodes 0..n-1 with integral capacities."""
    rng = random.Random(seed)
    g = nx.gnm_random_graph(n, m, seed=seed, directed=True)
    for u, v in g.edges:
        g[u][v]["capacity"] = rng.randint(0, max_cap)
    return g


def make_fractional_graph(
    n: int, m: int, seed: int, max_cap: float = 10.0
) -> nx.DiGraph:
    """Random directed graph with capacities rounded to three decimals."""
    rng = random.Random(seed)
    g = nx.gnm_random_graph(n, m, seed=seed, directed=True)
    for u, v in g.edges:
        g[u][v]["capacity"] = round(rng.uniform(0, max_cap), 3)
    return g


@pytest.fixture
def random_graphs():
    return [make_random_graph(12, 40, seed) for seed in range(10)] + [
        make_random_graph(30, 150, seed, max_cap=1000) for seed in range(10, 15)
    ]


@pytest.fixture
def fractional_graphs():
    return [make_fractional_graph(15, 60, seed) for seed in range(40)]

import pytest
from pytest import approx

from resflow.algorithms.base import FlowAlgorithm
from resflow.algorithms.ford_fulkerson import FordFulkersonEngine
from resflow.algorithms.max_flow import calc_max_flow, get_engine
from resflow.algorithms.preflow_push import PreflowPushEngine
from resflow.algorithms.scaling import ScalingFordFulkersonEngine
from resflow.algorithms.types import FlowSummary
from resflow.errors import InvalidCapacity, MissingTerminal
from resflow.graph.residual import ResidualGraph

ALL_ALGORITHMS = list(FlowAlgorithm)


class TestGetEngine:
    @pytest.mark.parametrize(
        "algorithm,expected",
        [
            (FlowAlgorithm.FORD_FULKERSON, FordFulkersonEngine),
            (2, ScalingFordFulkersonEngine),
            ("preflow-push", PreflowPushEngine),
            ("Scaling_Ford_Fulkerson", ScalingFordFulkersonEngine),
        ],
    )
    def test_lookup(self, algorithm, expected):
        assert isinstance(get_engine(algorithm), expected)

    def test_new_instance_each_time(self):
        assert get_engine(FlowAlgorithm.PREFLOW_PUSH) is not get_engine(
            FlowAlgorithm.PREFLOW_PUSH
        )

    @pytest.mark.parametrize("algorithm", ["dinic", 99])
    def test_unknown(self, algorithm):
        with pytest.raises(ValueError, match="Unknown max-flow algorithm"):
            get_engine(algorithm)


class TestCalcMaxFlow:
    @pytest.mark.parametrize("algorithm", ALL_ALGORITHMS)
    def test_scenarios(
        self, algorithm, single_edge, disconnected, diamond, parallel_paths
    ):
        assert calc_max_flow(single_edge, "s", "t", algorithm=algorithm) == 7
        assert calc_max_flow(disconnected, "s", "t", algorithm=algorithm) == 0
        assert calc_max_flow(diamond, "s", "t", algorithm=algorithm) == 15
        assert calc_max_flow(parallel_paths, "s", "t", algorithm=algorithm) == 101

    def test_default_algorithm(self, clrs):
        assert calc_max_flow(clrs, "s", "t") == 23

    def test_input_graph_untouched(self, diamond):
        before = {(u, v): dict(d) for u, v, d in diamond.edges(data=True)}
        calc_max_flow(diamond, "s", "t")
        calc_max_flow(diamond, "s", "t")
        assert {(u, v): dict(d) for u, v, d in diamond.edges(data=True)} == before

    @pytest.mark.parametrize("algorithm", ALL_ALGORITHMS)
    def test_source_equals_sink(self, algorithm, diamond):
        assert calc_max_flow(diamond, "a", "a", algorithm=algorithm) == 0.0

    def test_source_equals_sink_with_graph(self, diamond):
        flow, graph = calc_max_flow(diamond, "a", "a", return_graph=True)
        assert flow == 0.0
        assert all(e.flow == 0 for e in graph.forward_edges())

    def test_missing_terminal(self, diamond):
        with pytest.raises(MissingTerminal):
            calc_max_flow(diamond, "s", "missing")

    def test_invalid_capacity(self, diamond):
        g = diamond.copy()
        g["a"]["b"]["capacity"] = -3
        with pytest.raises(InvalidCapacity):
            calc_max_flow(g, "s", "t")


class TestFlowSummary:
    @pytest.mark.parametrize("algorithm", ALL_ALGORITHMS)
    def test_diamond_summary(self, algorithm, diamond):
        flow, summary = calc_max_flow(
            diamond, "s", "t", algorithm=algorithm, return_summary=True
        )
        assert isinstance(summary, FlowSummary)
        assert summary.total_flow == flow == 15
        assert summary.reachable == {"s"}
        assert summary.min_cut == [("s", "a", None), ("s", "b", None)]
        assert sum(summary.edge_flow[("s", x, None)] for x in "ab") == 15
        assert summary.residual_cap[("s", "a", None)] == 0

    @pytest.mark.parametrize("algorithm", ALL_ALGORITHMS)
    def test_clrs_min_cut(self, algorithm, clrs):
        flow, summary = calc_max_flow(
            clrs, "s", "t", algorithm=algorithm, return_summary=True
        )
        assert flow == 23
        assert summary.reachable == {"s", "v1", "v2", "v4"}
        assert set(summary.min_cut) == {
            ("v1", "v3", None),
            ("v4", "v3", None),
            ("v4", "t", None),
        }
        assert sum(clrs[u][v]["capacity"] for u, v, _ in summary.min_cut) == flow

    def test_multigraph_keys(self, multi_line):
        flow, summary = calc_max_flow(multi_line, "A", "C", return_summary=True)
        assert flow == 5
        assert summary.min_cut == [("A", "B", 0)]
        b_to_c = [ref for ref in summary.edge_flow if ref[:2] == ("B", "C")]
        assert sorted(ref[2] for ref in b_to_c) == [0, 1, 2]
        assert sum(summary.edge_flow[ref] for ref in b_to_c) == 5

    def test_summary_and_graph(self, zigzag):
        flow, summary, graph = calc_max_flow(
            zigzag,
            "s",
            "t",
            algorithm=FlowAlgorithm.FORD_FULKERSON,
            return_summary=True,
            return_graph=True,
        )
        assert isinstance(graph, ResidualGraph)
        assert graph.flow_value() == approx(flow)
        assert summary.edge_flow[("a", "b", None)] == 0

    def test_disconnected_summary(self, disconnected):
        flow, summary = calc_max_flow(disconnected, "s", "t", return_summary=True)
        assert flow == 0
        assert summary.reachable == {"s", "a"}
        assert summary.min_cut == []

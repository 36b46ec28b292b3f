from __future__ import annotations

from resflow.algorithms.base import FlowAlgorithm, FlowStats, MaxFlowEngine
from resflow.algorithms.path_search import augment, bottleneck, find_path
from resflow.graph.residual import ResidualGraph
from resflow.logging import get_logger

logger = get_logger(__name__)


class FordFulkersonEngine(MaxFlowEngine):
    """Max flow by repeated augmentation along any depth-first path.

    No shortest-path rule is applied, so the number of augmentations depends
    on capacity magnitudes. Terminates for rational capacities.
    """

    name = "Ford-Fulkerson"
    algorithm = FlowAlgorithm.FORD_FULKERSON

    def run(self, graph: ResidualGraph) -> float:
        self.stats = FlowStats()
        source = graph.source_index

        while True:
            graph.reset_visited()
            path = find_path(graph, source)
            # An empty path means source and sink coincide.
            if not path:
                break
            augment(graph, path, bottleneck(path))
            self.stats.augmentations += 1

        total = graph.flow_value()
        logger.debug(
            "%s: flow=%s after %d augmentations",
            self.name,
            total,
            self.stats.augmentations,
        )
        return total

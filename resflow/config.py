"""Configuration classes for resflow components."""

from dataclasses import dataclass, field
from typing import Hashable, Tuple


@dataclass
class FlowConfig:
    """Defaults shared by graph construction, engines and the CLI."""

    # Terminal node identifiers used when a caller does not name them
    source: Hashable = "s"
    sink: Hashable = "t"

    # Edge attribute holding the arc capacity on input graphs
    capacity_attr: str = "capacity"

    # Relative tolerance when comparing flow values from different engines
    agreement_tolerance: float = 1e-9

    # File suffixes picked up when walking a directory of graphs
    graph_suffixes: Tuple[str, ...] = field(
        default_factory=lambda: (".txt", ".yaml", ".yml")
    )

    def values_agree(self, first: float, second: float) -> bool:
        """Return True if two flow values are equal within the tolerance."""
        scale = max(1.0, abs(first), abs(second))
        return abs(first - second) <= self.agreement_tolerance * scale


# Global configuration instance
FLOW_CONFIG = FlowConfig()

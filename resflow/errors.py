"""Exception types raised by residual graph construction and flow engines."""

from __future__ import annotations


class FlowError(Exception):
    """Base class for all resflow errors."""


class MissingTerminal(FlowError, ValueError):
    """The input graph lacks the requested source or sink node."""


class InvalidCapacity(FlowError, ValueError):
    """An input arc has a missing, negative or non-finite capacity."""


class CapacityExceeded(FlowError):
    """A push would overfill a forward edge or over-cancel a backward edge."""


class EdgeOwnershipMismatch(FlowError):
    """An edge was registered on a vertex that is not its source."""

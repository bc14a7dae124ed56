"""Exceptions raised by the traversal and flow simulation engine."""


class AnalyzerError(Exception):
    """Base class for engine errors."""


class BlockingError(AnalyzerError):
    """Policy denies the traffic at a node.

    Raised by node implementations from ``next_hops`` to distinguish
    "traffic is denied" from "the lookup failed".
    """

    def __init__(self, node_id: str, reason: str):
        super().__init__(reason)
        self.node_id = node_id
        self.reason = reason

    def __str__(self) -> str:
        return self.reason


class TraversalCancelled(AnalyzerError):
    """The caller cancelled the traversal; never means "blocked"."""


class SimulationError(AnalyzerError):
    """One leg of a bidirectional flow simulation failed."""

"""Reachability traversal and flow simulation engine."""

from .all_paths import (
    check_reachability_all_paths,
    check_reachability_all_paths_with_resolver,
    traverse_all_paths,
)
from .api import check_reachability_default
from .context import TraversalContext
from .errors import AnalyzerError, BlockingError, SimulationError, TraversalCancelled
from .flowsim import FlowSimulator
from .models import (
    AllPathsResult,
    BlockedResult,
    ComponentHop,
    FlowResult,
    FlowStep,
    HopAction,
    PathResult,
    PathTrace,
    ReachabilityResult,
    SuccessResult,
)
from .nodes import Capability, IPTarget, NetworkInterfaceNode, Node
from .resolver import DestinationResolver, SimpleResolver
from .traverser import (
    check_reachability,
    check_reachability_with_resolver,
    traverse_path,
    traverse_path_with_trace,
)

__all__ = [
    "AllPathsResult",
    "AnalyzerError",
    "BlockedResult",
    "BlockingError",
    "Capability",
    "ComponentHop",
    "DestinationResolver",
    "FlowResult",
    "FlowSimulator",
    "FlowStep",
    "HopAction",
    "IPTarget",
    "NetworkInterfaceNode",
    "Node",
    "PathResult",
    "PathTrace",
    "ReachabilityResult",
    "SimpleResolver",
    "SimulationError",
    "SuccessResult",
    "TraversalCancelled",
    "TraversalContext",
    "check_reachability",
    "check_reachability_all_paths",
    "check_reachability_all_paths_with_resolver",
    "check_reachability_default",
    "check_reachability_with_resolver",
    "traverse_all_paths",
    "traverse_path",
    "traverse_path_with_trace",
]

"""Single-path depth-first traversal and the bidirectional reachability check.

The search stops at the first viable path. A visited set shared by the
whole traversal (not per path) keeps it finite on cyclic topologies.
"""

import threading
from typing import Any, Optional

from ..core.logging import get_logger
from ..models import RoutingTarget
from .addressing import is_external_destination, is_private_ip
from .context import TraversalContext
from .errors import BlockingError, TraversalCancelled
from .lineage import infer_hop_action, infer_link
from .models import (
    ALL_PATHS_BLOCKED,
    NO_ROUTE,
    BlockedResult,
    ComponentHop,
    HopAction,
    HopLink,
    PathResult,
    PathTrace,
    ReachabilityResult,
    SuccessResult,
)
from .nodes import Node, is_filter_node, is_terminal_node
from .resolver import DestinationResolver, SimpleResolver

log = get_logger("traverser")


def target_matches(hop_target: RoutingTarget, destination: RoutingTarget) -> bool:
    """Component-wise match; empty destination fields are wildcards.

    An all-empty destination never matches.
    """
    if destination.is_empty():
        return False
    if destination.ip and hop_target.ip != destination.ip:
        return False
    if destination.port and hop_target.port != destination.port:
        return False
    if destination.protocol and hop_target.protocol != destination.protocol:
        return False
    return True


def is_destination_reached(
    hops: list[Node], destination: RoutingTarget, destination_id: str
) -> bool:
    for hop in hops:
        if hop.node_id == destination_id:
            return True
        if target_matches(hop.routing_target(), destination):
            return True
    return False


def filter_visited(hops: list[Node], ctx: TraversalContext) -> list[Node]:
    return [hop for hop in hops if not ctx.is_visited(hop)]


def query_next_hops(
    node: Node, target: RoutingTarget, ctx: TraversalContext
) -> tuple[Optional[list[Node]], str]:
    """Ask a node for its next hops, folding failures into a block reason.

    Returns (hops, "") on success or (None, reason) when the node failed.
    Cancellation is never folded.
    """
    try:
        return list(node.next_hops(target, ctx)), ""
    except TraversalCancelled:
        raise
    except BlockingError as e:
        log.debug("%s blocked: %s", node.node_id, e.reason)
        return None, e.reason
    except Exception as e:
        log.warning("Next-hop lookup failed at %s (%s): %s", node.node_id, node.kind, e)
        return None, str(e) or type(e).__name__


def dead_end_verdict(
    node: Node, destination: RoutingTarget
) -> Optional[tuple[str, Optional[HopAction]]]:
    """(detail, hop action) when a dead end still counts as success, else None.

    Terminal nodes succeed only toward external addresses; filter nodes
    always succeed.
    """
    if is_terminal_node(node) and is_external_destination(destination.ip):
        return "external destination via terminal", HopAction.TERMINAL
    if is_filter_node(node):
        return "filter passed", None
    return None


def traverse_path(
    current: Node,
    destination: RoutingTarget,
    destination_id: str,
    ctx: TraversalContext,
) -> PathResult:
    """First viable path from current toward the destination."""
    ctx.raise_if_cancelled()
    ctx.mark_visited(current)

    next_hops, error = query_next_hops(current, destination, ctx)
    if next_hops is None:
        return BlockedResult(current, error)

    hops = filter_visited(next_hops, ctx)

    if is_destination_reached(hops, destination, destination_id):
        log.debug("Destination %s reached from %s", destination_id, current.node_id)
        return SuccessResult()

    if not hops:
        if dead_end_verdict(current, destination):
            return SuccessResult()
        return BlockedResult(current, NO_ROUTE)

    last_blocked: Optional[PathResult] = None
    for hop in hops:
        result = traverse_path(hop, destination, destination_id, ctx)
        if not result.is_blocked():
            return result
        last_blocked = result

    if last_blocked is not None:
        return last_blocked
    return BlockedResult(current, ALL_PATHS_BLOCKED)


def traverse_path_with_trace(
    current: Node,
    destination: RoutingTarget,
    destination_id: str,
    ctx: TraversalContext,
    trace: PathTrace,
    link: Optional[HopLink] = None,
) -> PathResult:
    """traverse_path that also records the explored path into trace.

    On success trace holds the winning path; when every branch blocks it
    holds the path of the last blocked branch.
    """
    ctx.raise_if_cancelled()
    ctx.mark_visited(current)

    hop = ComponentHop.from_node(current, link, infer_hop_action(current.kind))
    trace.add_hop(hop)

    next_hops, error = query_next_hops(current, destination, ctx)
    if next_hops is None:
        trace.mark_blocked(error)
        return BlockedResult(current, error)

    hops = filter_visited(next_hops, ctx)

    if is_destination_reached(hops, destination, destination_id):
        trace.mark_success("destination reached", HopAction.TERMINAL)
        return SuccessResult()

    if not hops:
        verdict = dead_end_verdict(current, destination)
        if verdict:
            trace.mark_success(*verdict)
            return SuccessResult()
        trace.mark_blocked(NO_ROUTE)
        return BlockedResult(current, NO_ROUTE)

    last_blocked: Optional[PathResult] = None
    last_branch: Optional[PathTrace] = None
    for next_hop in hops:
        branch = trace.clone()
        result = traverse_path_with_trace(
            next_hop,
            destination,
            destination_id,
            ctx,
            branch,
            infer_link(current, next_hop),
        )
        if not result.is_blocked():
            _adopt(trace, branch)
            return result
        last_blocked, last_branch = result, branch

    if last_blocked is not None:
        _adopt(trace, last_branch)
        return last_blocked

    trace.mark_blocked(ALL_PATHS_BLOCKED)
    return BlockedResult(current, ALL_PATHS_BLOCKED)


def _adopt(trace: PathTrace, branch: PathTrace) -> None:
    trace.hops = branch.hops
    trace.success = branch.success
    trace.blocked_at = branch.blocked_at


def leg_targets(source: Node, destination: Node) -> tuple[RoutingTarget, RoutingTarget]:
    """Annotated (outbound, inbound) targets for a bidirectional check."""
    source_ip = source.routing_target().ip
    dest_target = destination.routing_target().for_leg(
        "outbound", is_private_ip(source_ip)
    )
    source_target = source.routing_target().for_leg(
        "inbound", is_private_ip(dest_target.ip)
    )
    return dest_target, source_target


def default_resolver(
    account_context: Any, resolver: Optional[DestinationResolver]
) -> Optional[DestinationResolver]:
    if resolver is None and account_context is not None:
        return SimpleResolver(account_context)
    return resolver


def check_reachability_with_resolver(
    source: Node,
    destination: Node,
    account_context: Any,
    resolver: Optional[DestinationResolver] = None,
    cancel_event: Optional[threading.Event] = None,
) -> ReachabilityResult:
    """Bidirectional single-path check; overall success needs both legs.

    Policy blocks come back inside the result. Only cancellation escapes.
    """
    resolver = default_resolver(account_context, resolver)
    dest_target, source_target = leg_targets(source, destination)

    log.debug("Checking %s -> %s", source.node_id, destination.node_id)
    forward_ctx = TraversalContext(account_context, resolver, cancel_event)
    forward_trace = PathTrace()
    forward = traverse_path_with_trace(
        source, dest_target, destination.node_id, forward_ctx, forward_trace
    )

    log.debug("Checking %s -> %s", destination.node_id, source.node_id)
    return_ctx = TraversalContext(account_context, resolver, cancel_event)
    return_trace = PathTrace()
    reverse = traverse_path_with_trace(
        destination, source_target, source.node_id, return_ctx, return_trace
    )

    return ReachabilityResult.combine(forward, reverse, forward_trace, return_trace)


def check_reachability(
    source: Node,
    destination: Node,
    account_context: Any,
    cancel_event: Optional[threading.Event] = None,
) -> ReachabilityResult:
    return check_reachability_with_resolver(
        source, destination, account_context, None, cancel_event
    )

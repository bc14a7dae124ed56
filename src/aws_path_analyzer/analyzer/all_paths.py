"""Exhaustive depth-first enumeration of every simple path.

Unlike the single-path search, cycles are cut per path: each branch
carries its own lineage (the node ids on that path), so two sibling
branches may both pass through a shared downstream node while no single
path ever revisits one of its ancestors.
"""

import threading
from typing import Any, Optional

from ..core.logging import get_logger
from ..models import RoutingTarget
from .context import TraversalContext
from .lineage import infer_hop_action, infer_link
from .models import (
    ALL_PATHS_BLOCKED,
    NO_ROUTE,
    AllPathsResult,
    ComponentHop,
    HopAction,
    HopLink,
    PathTrace,
)
from .nodes import Node
from .resolver import DestinationResolver
from .traverser import (
    dead_end_verdict,
    default_resolver,
    is_destination_reached,
    leg_targets,
    query_next_hops,
)

log = get_logger("all_paths")


def traverse_all_paths(
    current: Node,
    destination: RoutingTarget,
    destination_id: str,
    ctx: TraversalContext,
    resolver: Optional[DestinationResolver] = None,
    lineage: tuple[str, ...] = (),
) -> list[PathTrace]:
    """One PathTrace per simple path discovered from current."""
    if resolver is not None and ctx.resolver is None:
        ctx.resolver = resolver
    return _walk(current, destination, destination_id, ctx, PathTrace(), None, lineage)


def _walk(
    current: Node,
    destination: RoutingTarget,
    destination_id: str,
    ctx: TraversalContext,
    trace: PathTrace,
    link: Optional[HopLink],
    lineage: tuple[str, ...],
) -> list[PathTrace]:
    ctx.raise_if_cancelled()
    lineage = lineage + (current.node_id,)

    trace = trace.clone()
    trace.add_hop(ComponentHop.from_node(current, link, infer_hop_action(current.kind)))

    next_hops, error = query_next_hops(current, destination, ctx)
    if next_hops is None:
        return [trace.mark_blocked(error)]

    hops = [hop for hop in next_hops if hop.node_id not in lineage]

    if is_destination_reached(hops, destination, destination_id):
        return [trace.mark_success("destination reached", HopAction.TERMINAL)]

    if not hops:
        verdict = dead_end_verdict(current, destination)
        if verdict:
            return [trace.mark_success(*verdict)]
        return [trace.mark_blocked(NO_ROUTE)]

    paths: list[PathTrace] = []
    for hop in hops:
        paths.extend(
            _walk(
                hop,
                destination,
                destination_id,
                ctx,
                trace,
                infer_link(current, hop),
                lineage,
            )
        )

    if not paths:
        return [trace.mark_blocked(ALL_PATHS_BLOCKED)]
    return paths


def check_reachability_all_paths_with_resolver(
    source: Node,
    destination: Node,
    account_context: Any,
    resolver: Optional[DestinationResolver] = None,
    cancel_event: Optional[threading.Event] = None,
) -> AllPathsResult:
    """Enumerate every forward and return path between two nodes."""
    resolver = default_resolver(account_context, resolver)
    dest_target, source_target = leg_targets(source, destination)

    forward_ctx = TraversalContext(account_context, resolver, cancel_event)
    forward = traverse_all_paths(
        source, dest_target, destination.node_id, forward_ctx, resolver
    )

    return_ctx = TraversalContext(account_context, resolver, cancel_event)
    reverse = traverse_all_paths(
        destination, source_target, source.node_id, return_ctx, resolver
    )

    result = AllPathsResult.from_traces(forward, reverse)
    log.debug(
        "%s <-> %s: %d/%d forward, %d/%d return paths succeed",
        source.node_id,
        destination.node_id,
        result.successful_forward_paths,
        len(forward),
        result.successful_return_paths,
        len(reverse),
    )
    return result


def check_reachability_all_paths(
    source: Node,
    destination: Node,
    account_context: Any,
    cancel_event: Optional[threading.Event] = None,
) -> AllPathsResult:
    return check_reachability_all_paths_with_resolver(
        source, destination, account_context, None, cancel_event
    )

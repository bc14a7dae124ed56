"""Breadth-first flow simulation with per-hop timing and rule detail.

Unlike the reachability searches this walk keeps one visited set for the
whole simulation, so re-convergent paths collapse into a single trace, and
any dead end reached mid-walk ends the simulation successfully.
"""

import threading
import time
from collections import deque
from typing import Any, Callable, Optional

from ..core.config import get_flow_cache_ttl
from ..core.logging import get_logger
from ..models import TrafficSpec
from .context import TraversalContext
from .errors import BlockingError, SimulationError, TraversalCancelled
from .flow_cache import FlowCache
from .models import NO_ROUTE, FlowResult, FlowStep
from .nodes import Node, is_rule_evaluator

log = get_logger("flowsim")


class FlowSimulator:
    """Simulates traffic hop by hop and memoises results for a TTL.

    Safe to share between threads: only the result cache is shared and it
    is lock-protected. Two concurrent misses on the same key both run the
    walk and the later write wins.
    """

    def __init__(
        self,
        ttl: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl if ttl is not None else get_flow_cache_ttl()
        self._cache: FlowCache[FlowResult] = FlowCache(self.ttl, clock=clock)

    @staticmethod
    def cache_key(source: Node, destination: Node, traffic: TrafficSpec) -> str:
        return (
            f"{source.node_id}->{destination.node_id}:"
            f"{traffic.destination_ip}:{traffic.port}:{traffic.protocol}"
        )

    def simulate_flow(
        self,
        source: Node,
        destination: Node,
        traffic: TrafficSpec,
        account_context: Any = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> FlowResult:
        """Walk from source toward destination recording every step.

        Returns the cached result object itself when one is live. Policy
        blocks come back as an unsuccessful result.

        Raises:
            TraversalCancelled: cancel_event was set during the walk
            Exception: any non-blocking failure from a node's next-hop query
        """
        key = self.cache_key(source, destination, traffic)
        cached = self._cache.get(key)
        if cached is not None:
            log.debug("Flow cache hit: %s", key)
            return cached

        result = self._walk(source, destination, traffic, account_context, cancel_event)
        self._cache.put(key, result)
        return result

    def _walk(
        self,
        source: Node,
        destination: Node,
        traffic: TrafficSpec,
        account_context: Any,
        cancel_event: Optional[threading.Event],
    ) -> FlowResult:
        result = FlowResult(traffic=traffic)
        ctx = TraversalContext(account_context, cancel_event=cancel_event)
        target = traffic.destination_target()
        queue: deque[Node] = deque([source])
        step_num = 0

        while queue:
            ctx.raise_if_cancelled()

            current = queue.popleft()
            if ctx.is_visited(current):
                continue
            ctx.mark_visited(current)

            step_num += 1
            step = FlowStep(
                step_number=step_num,
                component_id=current.node_id,
                component_type=current.kind,
                action="traverse",
            )
            started = time.perf_counter()

            if is_rule_evaluator(current):
                evaluation = current.evaluate(target, "outbound")
                step.rule_checks = list(evaluation.evaluations)
                if not evaluation.allowed:
                    step.action = "blocked"
                    step.details = evaluation.reason
                    step.latency = time.perf_counter() - started
                    result.add_step(step)
                    result.mark_blocked(step, evaluation.reason)
                    log.debug("Flow denied at %s: %s", current.node_id, evaluation.reason)
                    return result

            try:
                next_hops = list(current.next_hops(target, ctx))
            except BlockingError as e:
                step.latency = time.perf_counter() - started
                step.action = "blocked"
                step.details = e.reason
                result.add_step(step)
                result.mark_blocked(step, e.reason)
                log.debug("Flow blocked at %s: %s", current.node_id, e.reason)
                return result
            step.latency = time.perf_counter() - started

            step.action = "forward"
            if next_hops:
                step.details = f"forwarding to {len(next_hops)} next hop(s)"
            else:
                step.details = "terminal component"
            result.add_step(step)

            for hop in next_hops:
                if hop.node_id == destination.node_id:
                    result.add_step(
                        FlowStep(
                            step_number=step_num + 1,
                            component_id=hop.node_id,
                            component_type=hop.kind,
                            action="destination_reached",
                            details="traffic delivered to destination",
                        )
                    )
                    result.mark_success()
                    return result
                queue.append(hop)

            if not next_hops:
                result.mark_success()
                return result

        result.mark_blocked(
            FlowStep(
                step_number=step_num + 1,
                component_id="",
                component_type="",
                action="blocked",
                details=NO_ROUTE,
            ),
            NO_ROUTE,
        )
        return result

    def simulate_bidirectional(
        self,
        source: Node,
        destination: Node,
        traffic: TrafficSpec,
        account_context: Any = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> tuple[FlowResult, FlowResult]:
        """Forward flow, then the return flow with source/destination IPs swapped."""
        try:
            forward = self.simulate_flow(
                source, destination, traffic, account_context, cancel_event
            )
        except TraversalCancelled:
            raise
        except Exception as e:
            raise SimulationError(f"forward simulation failed: {e}") from e

        try:
            reverse = self.simulate_flow(
                destination, source, traffic.reversed(), account_context, cancel_event
            )
        except TraversalCancelled:
            raise
        except Exception as e:
            raise SimulationError(f"reverse simulation failed: {e}") from e

        return forward, reverse

    def clear_cache(self) -> None:
        self._cache.clear()

    @property
    def cached_results(self) -> int:
        return len(self._cache)

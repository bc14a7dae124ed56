"""Result models produced by the traversal engine."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Literal, Optional, Union

from ..models import RuleEvaluation, TrafficSpec

if TYPE_CHECKING:
    from .nodes import Node

NO_ROUTE = "no route to destination"
ALL_PATHS_BLOCKED = "all paths blocked"


class HopAction(str, Enum):
    ALLOWED = "allowed"
    BLOCKED = "blocked"
    ROUTED = "routed"
    FORWARDED = "forwarded"
    RESOLVED = "resolved"
    TERMINAL = "terminal"
    ENTERED = "entered"


# Path results


@dataclass(frozen=True)
class SuccessResult:
    """Traffic reaches the destination on this leg."""

    def is_blocked(self) -> bool:
        return False

    @property
    def blocking_reason(self) -> str:
        return ""


@dataclass(frozen=True)
class BlockedResult:
    """Traffic stops at exactly one node."""

    node: "Node"
    reason: str

    def is_blocked(self) -> bool:
        return True

    @property
    def blocking_reason(self) -> str:
        return f"Blocked at {self.node.node_id}: {self.reason}"


PathResult = Union[SuccessResult, BlockedResult]


def path_result_to_dict(result: PathResult) -> dict:
    if result.is_blocked():
        return {
            "blocked": True,
            "node_id": result.node.node_id,
            "node_type": result.node.kind,
            "reason": result.reason,
        }
    return {"blocked": False}


# Path traces


@dataclass(frozen=True)
class HopLink:
    """The edge that led to a hop."""

    source_id: str = ""
    source_type: str = ""
    relationship: str = ""


@dataclass
class ComponentHop:
    """One node on a recorded path."""

    component_id: str
    component_type: str
    account_id: str = ""
    source_id: str = ""
    source_type: str = ""
    relationship: str = ""
    action: HopAction = HopAction.ENTERED
    details: str = ""

    @classmethod
    def from_node(
        cls, node: "Node", link: Optional[HopLink], action: HopAction
    ) -> "ComponentHop":
        link = link or HopLink()
        return cls(
            component_id=node.node_id,
            component_type=node.kind,
            account_id=node.owner_scope,
            source_id=link.source_id,
            source_type=link.source_type,
            relationship=link.relationship,
            action=action,
        )

    def __str__(self):
        via = f" <-{self.relationship}- {self.source_id}" if self.source_id else ""
        return f"[{self.component_type}] {self.component_id} ({self.action.value}){via}"

    def to_dict(self) -> dict:
        return {
            "component_id": self.component_id,
            "component_type": self.component_type,
            "account_id": self.account_id,
            "source_id": self.source_id,
            "source_type": self.source_type,
            "relationship": self.relationship,
            "action": self.action.value,
            "details": self.details,
        }


@dataclass
class PathTrace:
    """Ordered hops of one candidate path and its verdict."""

    hops: list[ComponentHop] = field(default_factory=list)
    success: bool = False
    blocked_at: Optional[ComponentHop] = None

    def add_hop(self, hop: ComponentHop) -> "PathTrace":
        self.hops.append(hop)
        return self

    @property
    def last_hop(self) -> Optional[ComponentHop]:
        return self.hops[-1] if self.hops else None

    @property
    def depth(self) -> int:
        return len(self.hops)

    def clone(self) -> "PathTrace":
        """Independent copy; hops are copied so branches never share edits."""
        hops = [replace(h) for h in self.hops]
        blocked_at = None
        if self.blocked_at is not None:
            idx = next(
                (i for i, h in enumerate(self.hops) if h is self.blocked_at), None
            )
            blocked_at = hops[idx] if idx is not None else replace(self.blocked_at)
        return PathTrace(hops=hops, success=self.success, blocked_at=blocked_at)

    def mark_blocked(self, reason: str) -> "PathTrace":
        last = self.last_hop
        if last is not None:
            last.action = HopAction.BLOCKED
            last.details = reason
            self.blocked_at = last
        self.success = False
        return self

    def mark_success(self, details: str = "", action: Optional[HopAction] = None):
        last = self.last_hop
        if last is not None:
            if action is not None:
                last.action = action
            if details:
                last.details = details
        self.success = True
        self.blocked_at = None
        return self

    @property
    def blocking_reason(self) -> str:
        if self.success or self.blocked_at is None:
            return ""
        hop = self.blocked_at
        return f"Blocked at {hop.component_type} {hop.component_id}: {hop.details}"

    def node_ids(self) -> list[str]:
        return [h.component_id for h in self.hops]

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "hops": [h.to_dict() for h in self.hops],
            "blocked_at": self.blocked_at.component_id if self.blocked_at else None,
            "blocking_reason": self.blocking_reason,
        }


# Bidirectional results


@dataclass(frozen=True)
class ReachabilityResult:
    """Single-path verdict for both directions, AND-combined."""

    source_to_destination: PathResult
    destination_to_source: PathResult
    overall_success: bool
    forward_path: Optional[PathTrace] = None
    return_path: Optional[PathTrace] = None

    @classmethod
    def combine(
        cls,
        forward: PathResult,
        reverse: PathResult,
        forward_path: Optional[PathTrace] = None,
        return_path: Optional[PathTrace] = None,
    ) -> "ReachabilityResult":
        return cls(
            source_to_destination=forward,
            destination_to_source=reverse,
            overall_success=not forward.is_blocked() and not reverse.is_blocked(),
            forward_path=forward_path,
            return_path=return_path,
        )

    def summary(self) -> str:
        status = "REACHABLE" if self.overall_success else "UNREACHABLE"
        lines = [f"Result: {status}"]
        for label, leg, trace in (
            ("Forward", self.source_to_destination, self.forward_path),
            ("Return", self.destination_to_source, self.return_path),
        ):
            verdict = leg.blocking_reason if leg.is_blocked() else "ok"
            lines.append(f"{label}: {verdict}")
            if trace:
                for hop in trace.hops:
                    lines.append(f"  {hop}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "overall_success": self.overall_success,
            "source_to_destination": path_result_to_dict(self.source_to_destination),
            "destination_to_source": path_result_to_dict(self.destination_to_source),
            "forward_path": self.forward_path.to_dict() if self.forward_path else None,
            "return_path": self.return_path.to_dict() if self.return_path else None,
        }


@dataclass
class AllPathsResult:
    """Every simple path found in each direction."""

    forward_paths: list[PathTrace] = field(default_factory=list)
    return_paths: list[PathTrace] = field(default_factory=list)
    successful_forward_paths: int = 0
    successful_return_paths: int = 0
    has_reachable_path: bool = False

    @classmethod
    def from_traces(
        cls, forward: list[PathTrace], reverse: list[PathTrace]
    ) -> "AllPathsResult":
        ok_forward = sum(1 for p in forward if p.success)
        ok_return = sum(1 for p in reverse if p.success)
        return cls(
            forward_paths=forward,
            return_paths=reverse,
            successful_forward_paths=ok_forward,
            successful_return_paths=ok_return,
            has_reachable_path=ok_forward > 0 and ok_return > 0,
        )

    def successful_paths(self) -> list[PathTrace]:
        return [p for p in self.forward_paths if p.success]

    def blocked_paths(self) -> list[PathTrace]:
        return [p for p in self.forward_paths if not p.success]

    def successful_returns(self) -> list[PathTrace]:
        return [p for p in self.return_paths if p.success]

    def blocked_returns(self) -> list[PathTrace]:
        return [p for p in self.return_paths if not p.success]

    def to_dict(self) -> dict:
        return {
            "has_reachable_path": self.has_reachable_path,
            "successful_forward_paths": self.successful_forward_paths,
            "successful_return_paths": self.successful_return_paths,
            "forward_paths": [p.to_dict() for p in self.forward_paths],
            "return_paths": [p.to_dict() for p in self.return_paths],
        }


# Flow simulation

FlowAction = Literal["traverse", "forward", "blocked", "destination_reached"]


@dataclass
class FlowStep:
    """One hop of a simulated flow."""

    step_number: int
    component_id: str
    component_type: str
    action: FlowAction = "traverse"
    details: str = ""
    latency: float = 0.0  # seconds
    rule_checks: list[RuleEvaluation] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "step": self.step_number,
            "component_id": self.component_id,
            "component_type": self.component_type,
            "action": self.action,
            "details": self.details,
            "latency_ms": round(self.latency * 1000, 3),
            "rule_checks": [r.to_dict() for r in self.rule_checks],
        }


@dataclass(eq=False)
class FlowResult:
    """Step-by-step trace of one simulated flow.

    Only the owning simulation call mutates it; once returned it may be
    shared from the simulator cache and must be treated as read-only.
    """

    traffic: TrafficSpec
    steps: list[FlowStep] = field(default_factory=list)
    success: bool = False
    blocked_at: Optional[FlowStep] = None
    failure_reason: str = ""
    total_latency: float = 0.0

    def add_step(self, step: FlowStep) -> None:
        self.steps.append(step)
        self.total_latency += step.latency

    def mark_blocked(self, step: FlowStep, reason: str) -> None:
        self.success = False
        self.blocked_at = step
        self.failure_reason = reason

    def mark_success(self) -> None:
        self.success = True

    def path(self) -> list[str]:
        return [s.component_id for s in self.steps]

    def component_types(self) -> list[str]:
        return [s.component_type for s in self.steps]

    def find_step(self, component_id: str) -> Optional[FlowStep]:
        return next((s for s in self.steps if s.component_id == component_id), None)

    @property
    def blocking_component(self) -> str:
        return self.blocked_at.component_id if self.blocked_at else ""

    def has_rule_evaluations(self) -> bool:
        return any(s.rule_checks for s in self.steps)

    def to_dict(self) -> dict:
        return {
            "traffic": self.traffic.model_dump(),
            "success": self.success,
            "blocked_at": self.blocking_component or None,
            "failure_reason": self.failure_reason,
            "total_latency_ms": round(self.total_latency * 1000, 3),
            "steps": [s.to_dict() for s in self.steps],
        }

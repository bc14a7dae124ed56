"""Node abstraction for the topology graph.

A node is one network element (security group, subnet, route table,
gateway, instance, ...). Concrete implementations know how to compute
their own next hops; the engine only walks them. Optional behaviours are
declared through ``capabilities()`` rather than discovered by type checks.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING

from ..models import EvaluationResult, RoutingTarget

if TYPE_CHECKING:
    from .context import TraversalContext


class Capability(str, Enum):
    RULE_EVALUATOR = "rule_evaluator"
    TERMINAL = "terminal"
    FILTER = "filter"


class Node(ABC):
    """One vertex in the topology graph."""

    @property
    @abstractmethod
    def node_id(self) -> str:
        """Identifier, unique and stable within one traversal."""

    @property
    @abstractmethod
    def owner_scope(self) -> str:
        """Account that owns this element."""

    @property
    @abstractmethod
    def kind(self) -> str:
        """Human-readable type tag, e.g. 'SecurityGroup'."""

    @abstractmethod
    def routing_target(self) -> RoutingTarget:
        """This node's own address/port/protocol identity."""

    @abstractmethod
    def next_hops(
        self, target: RoutingTarget, ctx: "TraversalContext"
    ) -> list["Node"]:
        """Nodes reachable from here toward target.

        Raises:
            BlockingError: policy at this node denies the traffic
        """

    def capabilities(self) -> frozenset[Capability]:
        return frozenset()

    def evaluate(self, target: RoutingTarget, direction: str) -> EvaluationResult:
        raise NotImplementedError(f"{self.kind} does not evaluate rules")

    def is_terminal(self) -> bool:
        return Capability.TERMINAL in self.capabilities()

    def is_filter(self) -> bool:
        return Capability.FILTER in self.capabilities()

    def __repr__(self) -> str:
        return f"<{self.kind} {self.node_id}>"


def is_rule_evaluator(node: Node) -> bool:
    return Capability.RULE_EVALUATOR in node.capabilities()


def is_terminal_node(node: Node) -> bool:
    return Capability.TERMINAL in node.capabilities() and node.is_terminal()


def is_filter_node(node: Node) -> bool:
    return Capability.FILTER in node.capabilities() and node.is_filter()


class IPTarget(Node):
    """A bare address outside the modelled topology (e.g. 8.8.8.8:443)."""

    def __init__(self, ip: str, port: int = 0, account_id: str = ""):
        self.ip = ip
        self.port = port
        self.account_id = account_id

    @property
    def node_id(self) -> str:
        return f"{self.account_id}:ip:{self.ip}:{self.port}"

    @property
    def owner_scope(self) -> str:
        return self.account_id

    @property
    def kind(self) -> str:
        return "IPTarget"

    def routing_target(self) -> RoutingTarget:
        return RoutingTarget(ip=self.ip, port=self.port)

    def next_hops(self, target, ctx) -> list[Node]:
        return []

    def capabilities(self) -> frozenset[Capability]:
        return frozenset({Capability.TERMINAL})


class NetworkInterfaceNode(Node):
    """An ENI located by address; used as a resolved destination."""

    def __init__(
        self,
        eni_id: str,
        account_id: str,
        private_ip: str = "",
        vpc_id: str = "",
        subnet_id: str = "",
        region: str = "",
    ):
        self.eni_id = eni_id
        self.account_id = account_id
        self.private_ip = private_ip
        self.vpc_id = vpc_id
        self.subnet_id = subnet_id
        self.region = region

    @property
    def node_id(self) -> str:
        return f"{self.account_id}:{self.eni_id}"

    @property
    def owner_scope(self) -> str:
        return self.account_id

    @property
    def kind(self) -> str:
        return "NetworkInterface"

    def routing_target(self) -> RoutingTarget:
        return RoutingTarget(ip=self.private_ip)

    def next_hops(self, target, ctx) -> list[Node]:
        # Expanding an ENI into its SGs and subnet is the job of a
        # topology-aware node implementation.
        return []

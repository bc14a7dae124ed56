"""Hop action and edge relationship inference for path traces."""

from .models import HopAction, HopLink
from .nodes import Node

COMPUTE_KINDS = {
    "EC2Instance",
    "RDSInstance",
    "LambdaFunction",
    "EKSPod",
    "ElastiCacheCluster",
}
LOAD_BALANCER_KINDS = {"ALB", "NLB", "CLB", "GWLB"}
ENDPOINT_KINDS = {"VPCEndpoint", "GWLBEndpoint"}

ROUTE_TARGET_KINDS = {
    "InternetGateway",
    "NATGateway",
    "TransitGatewayAttachment",
    "VPCEndpoint",
    "VPCPeering",
    "VirtualPrivateGateway",
    "LocalGateway",
    "CarrierGateway",
}
RESOLVED_KINDS = {"EC2Instance", "RDSInstance", "IPTarget", "NetworkInterface"}

HOP_ACTIONS = {
    "SecurityGroup": HopAction.ALLOWED,
    "NACL": HopAction.ALLOWED,
    "RouteTable": HopAction.ROUTED,
    "TransitGateway": HopAction.ROUTED,
    "ALB": HopAction.FORWARDED,
    "NLB": HopAction.FORWARDED,
    "CLB": HopAction.FORWARDED,
    "GWLB": HopAction.FORWARDED,
    "TargetGroup": HopAction.FORWARDED,
    "VPCLink": HopAction.FORWARDED,
    "InternetGateway": HopAction.TERMINAL,
    "NATGateway": HopAction.TERMINAL,
    "VPNConnection": HopAction.TERMINAL,
    "DirectConnectGateway": HopAction.TERMINAL,
    "IPTarget": HopAction.TERMINAL,
    "LocalGateway": HopAction.TERMINAL,
    "CarrierGateway": HopAction.TERMINAL,
}


def infer_hop_action(kind: str) -> HopAction:
    """Default action recorded for a node of this kind when it is entered."""
    return HOP_ACTIONS.get(kind, HopAction.ENTERED)


def infer_relationship(source_kind: str, target_kind: str) -> str:
    """Name the edge between two node kinds, 'leads-to' when unknown."""
    if source_kind in COMPUTE_KINDS:
        if target_kind == "SecurityGroup":
            return "attached-to"
        if target_kind == "Subnet":
            return "located-in"
    elif source_kind == "Subnet":
        if target_kind in ("NACL", "RouteTable"):
            return "associated-with"
    elif source_kind == "RouteTable":
        if target_kind in ROUTE_TARGET_KINDS:
            return "routes-via"
        if target_kind in RESOLVED_KINDS:
            return "resolved-to"
    elif source_kind in LOAD_BALANCER_KINDS:
        if target_kind == "TargetGroup":
            return "forwards-to"
        if target_kind == "SecurityGroup":
            return "attached-to"
    elif source_kind == "TargetGroup":
        return "targets"
    elif source_kind == "TransitGatewayAttachment":
        if target_kind == "TransitGateway":
            return "connects-to"
    elif source_kind == "TransitGateway":
        return "routes-via"
    elif source_kind == "VPCPeering":
        if target_kind == "RouteTable":
            return "peers-to"
    elif source_kind in ENDPOINT_KINDS:
        if target_kind == "SecurityGroup":
            return "attached-to"
        if target_kind == "Subnet":
            return "located-in"
        if target_kind == "APIGateway":
            return "exposes"
    elif source_kind == "APIGateway":
        if target_kind in ("VPCLink", "VPCEndpoint"):
            return "integrates-via"
    elif source_kind == "VPCLink":
        if target_kind in ("NLB", "ALB"):
            return "targets"
        if target_kind == "SecurityGroup":
            return "attached-to"
        if target_kind == "Subnet":
            return "located-in"
    elif source_kind == "VirtualPrivateGateway":
        if target_kind == "VPNConnection":
            return "connects-via"
    elif source_kind == "DirectConnectOnPrem":
        if target_kind == "DirectConnectGateway":
            return "connects-via"
    elif source_kind == "SecurityGroup":
        return "chains-to"
    elif source_kind == "NACL":
        if target_kind == "RouteTable":
            return "precedes"
    return "leads-to"


def infer_link(source: Node, target: Node) -> HopLink:
    """Edge record for stepping from source to target."""
    return HopLink(
        source_id=source.node_id,
        source_type=source.kind,
        relationship=infer_relationship(source.kind, target.kind),
    )

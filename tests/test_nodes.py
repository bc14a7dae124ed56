"""Tests for node capabilities and leaf nodes."""

import pytest

from conftest import FakeNode
from aws_path_analyzer.analyzer.nodes import (
    Capability,
    IPTarget,
    NetworkInterfaceNode,
    is_filter_node,
    is_rule_evaluator,
    is_terminal_node,
)
from aws_path_analyzer.models import RoutingTarget


class TestCapabilities:
    def test_plain_node_has_none(self):
        node = FakeNode("n")
        assert not is_rule_evaluator(node)
        assert not is_terminal_node(node)
        assert not is_filter_node(node)

    def test_declared_capabilities(self):
        node = FakeNode("n", capabilities={Capability.TERMINAL, Capability.FILTER})
        assert is_terminal_node(node)
        assert is_filter_node(node)

    def test_evaluate_not_supported_by_default(self):
        with pytest.raises(NotImplementedError):
            IPTarget("1.1.1.1").evaluate(RoutingTarget(), "outbound")


class TestIPTarget:
    def test_identity(self):
        node = IPTarget("8.8.8.8", 443, account_id="123")
        assert node.node_id == "123:ip:8.8.8.8:443"
        assert node.kind == "IPTarget"
        assert node.owner_scope == "123"
        assert node.routing_target() == RoutingTarget(ip="8.8.8.8", port=443)
        assert node.next_hops(RoutingTarget(), None) == []
        assert is_terminal_node(node)


class TestNetworkInterfaceNode:
    def test_identity(self):
        node = NetworkInterfaceNode("eni-1", "123", private_ip="10.0.0.5", vpc_id="vpc-1")
        assert node.node_id == "123:eni-1"
        assert node.kind == "NetworkInterface"
        assert node.routing_target().ip == "10.0.0.5"
        assert repr(node) == "<NetworkInterface 123:eni-1>"

"""Tests for result rendering - Binary pass/fail."""

import json

import pytest
from io import StringIO
from rich.console import Console

from conftest import FakeNode, blocking
from aws_path_analyzer.analyzer.all_paths import check_reachability_all_paths
from aws_path_analyzer.analyzer.flowsim import FlowSimulator
from aws_path_analyzer.analyzer.traverser import check_reachability
from aws_path_analyzer.core.renderer import ResultRenderer
from aws_path_analyzer.models import RoutingTarget, TrafficSpec


@pytest.fixture
def renderer():
    """Create renderer with captured output."""
    output = StringIO()
    console = Console(file=output, force_terminal=False, width=160)
    r = ResultRenderer(console=console)
    r._output = output
    return r


@pytest.fixture
def pair():
    source = FakeNode("S", "EC2Instance", RoutingTarget(ip="10.0.0.1"))
    dest = FakeNode("D", "EC2Instance", RoutingTarget(ip="10.0.1.1"))
    sg = FakeNode("sg-1", "SecurityGroup", hops=[dest])
    back = FakeNode("sg-2", "SecurityGroup", error=blocking("sg-2", "denied by security group"))
    source.hops = [sg]
    dest.hops = [back]
    return source, dest


class TestRenderFormat:
    """Binary tests for format rendering."""

    def test_json_format_returns_true(self, renderer):
        """BINARY: JSON format must return True."""
        assert renderer.render({"id": "eni-123"}, fmt="json") is True

    def test_yaml_format_returns_true(self, renderer):
        """BINARY: YAML format must return True."""
        assert renderer.render({"id": "eni-123"}, fmt="yaml") is True
        assert "id: eni-123" in renderer._output.getvalue()

    def test_table_format_returns_false(self, renderer):
        """BINARY: Table format must return False."""
        assert renderer.render({"id": "eni-123"}, fmt="table") is False


class TestReachabilityRendering:
    def test_panel_and_trees(self, renderer, pair, account_context):
        source, dest = pair
        renderer.reachability(check_reachability(source, dest, account_context))
        output = renderer._output.getvalue()
        assert "UNREACHABLE" in output
        assert "Blocked at sg-2: denied by security group" in output
        assert "Forward path" in output
        assert "attached-to" in output

    def test_json(self, renderer, pair, account_context):
        source, dest = pair
        renderer.reachability(check_reachability(source, dest, account_context), fmt="json")
        data = json.loads(renderer._output.getvalue())
        assert data["overall_success"] is False
        assert data["destination_to_source"]["node_id"] == "sg-2"


class TestAllPathsRendering:
    def test_counts(self, renderer, pair, account_context):
        source, dest = pair
        renderer.all_paths(check_reachability_all_paths(source, dest, account_context))
        output = renderer._output.getvalue()
        assert "1/1 paths succeed" in output
        assert "0/1 paths succeed" in output
        assert "Forward #1" in output


class TestFlowRendering:
    def test_step_table(self, renderer):
        dest = FakeNode("D", "EC2Instance")
        source = FakeNode("S", "EC2Instance", hops=[dest])
        traffic = TrafficSpec(source_ip="10.0.0.1", destination_ip="10.0.1.1", port=443)
        renderer.flow(FlowSimulator(ttl=60).simulate_flow(source, dest, traffic))
        output = renderer._output.getvalue()
        assert "10.0.0.1 -> 10.0.1.1:443/tcp" in output
        assert "destination_reached" in output
        assert "Delivered" in output

    def test_blocked_flow(self, renderer):
        source = FakeNode("S", error=blocking("S", "denied"))
        renderer.flow(FlowSimulator(ttl=60).simulate_flow(source, FakeNode("D"), TrafficSpec()))
        assert "Blocked at S:" in renderer._output.getvalue()

"""Tests for destination resolution"""

from unittest.mock import MagicMock

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws

from aws_path_analyzer.analyzer.nodes import NetworkInterfaceNode
from aws_path_analyzer.analyzer.resolver import SimpleResolver
from aws_path_analyzer.core.account import AccountContext


def eni(eni_id="eni-123", ip="10.0.0.1"):
    return {
        "NetworkInterfaceId": eni_id,
        "PrivateIpAddress": ip,
        "VpcId": "vpc-1",
        "SubnetId": "subnet-1",
        "OwnerId": "111111111111",
    }


class TestSimpleResolver:
    @pytest.fixture
    def ec2(self):
        return MagicMock()

    @pytest.fixture
    def resolver(self, ec2):
        account_context = MagicMock()
        account_context.client.return_value = ec2
        return SimpleResolver(account_context, regions=["us-east-1"])

    def test_resolve_private_ip_found(self, resolver, ec2):
        ec2.describe_network_interfaces.side_effect = [{"NetworkInterfaces": [eni()]}]
        node = resolver.resolve_by_ip("111111111111", "", "10.0.0.1")
        assert isinstance(node, NetworkInterfaceNode)
        assert node.node_id == "111111111111:eni-123"
        assert node.region == "us-east-1"

    def test_resolve_public_ip_found(self, resolver, ec2):
        ec2.describe_network_interfaces.side_effect = [
            {"NetworkInterfaces": []},
            {"NetworkInterfaces": [eni("eni-456")]},
        ]
        node = resolver.resolve_by_ip("111111111111", "", "1.2.3.4")
        assert node.eni_id == "eni-456"
        filters = ec2.describe_network_interfaces.call_args_list[1].kwargs["Filters"]
        assert filters == [{"Name": "association.public-ip", "Values": ["1.2.3.4"]}]

    def test_vpc_filter_added(self, resolver, ec2):
        ec2.describe_network_interfaces.return_value = {"NetworkInterfaces": [eni()]}
        resolver.resolve_by_ip("111111111111", "vpc-1", "10.0.0.1")
        filters = ec2.describe_network_interfaces.call_args.kwargs["Filters"]
        assert {"Name": "vpc-id", "Values": ["vpc-1"]} in filters

    def test_not_found(self, resolver, ec2):
        ec2.describe_network_interfaces.return_value = {"NetworkInterfaces": []}
        assert resolver.resolve_by_ip("111111111111", "", "10.0.0.1") is None

    def test_empty_ip(self, resolver, ec2):
        assert resolver.resolve_by_ip("111111111111", "", "") is None
        ec2.describe_network_interfaces.assert_not_called()

    def test_memoised(self, resolver, ec2):
        """BINARY: A second lookup for the same IP makes no API call."""
        ec2.describe_network_interfaces.return_value = {"NetworkInterfaces": [eni()]}
        first = resolver.resolve_by_ip("111111111111", "", "10.0.0.1")
        second = resolver.resolve_by_ip("111111111111", "", "10.0.0.1")
        assert first is second
        assert ec2.describe_network_interfaces.call_count == 1
        assert resolver.resolve_by_id(first.node_id) is first

    def test_client_error_is_a_miss(self, resolver, ec2):
        ec2.describe_network_interfaces.side_effect = ClientError(
            {"Error": {"Code": "UnauthorizedOperation", "Message": "no"}},
            "DescribeNetworkInterfaces",
        )
        assert resolver.resolve_by_ip("111111111111", "", "10.0.0.1") is None

    def test_resolve_by_id(self, resolver, ec2):
        ec2.describe_network_interfaces.return_value = {"NetworkInterfaces": [eni("eni-9")]}
        node = resolver.resolve_by_id("111111111111:eni-9")
        assert node.eni_id == "eni-9"
        ec2.describe_network_interfaces.assert_called_with(NetworkInterfaceIds=["eni-9"])

    def test_resolve_by_id_ignores_non_eni(self, resolver, ec2):
        assert resolver.resolve_by_id("111111111111:sg-1") is None
        ec2.describe_network_interfaces.assert_not_called()

    def test_region_fan_out(self):
        hit, miss = MagicMock(), MagicMock()
        miss.describe_network_interfaces.return_value = {"NetworkInterfaces": []}
        hit.describe_network_interfaces.return_value = {"NetworkInterfaces": [eni()]}
        account_context = MagicMock()
        account_context.client.side_effect = lambda scope, service, region: (
            hit if region == "eu-west-1" else miss
        )
        resolver = SimpleResolver(account_context, regions=["us-east-1", "eu-west-1"])
        node = resolver.resolve_by_ip("111111111111", "", "10.0.0.1")
        assert node.region == "eu-west-1"

    def test_regions_from_account_context(self):
        account_context = MagicMock()
        account_context.regions = ["ap-south-1"]
        assert SimpleResolver(account_context).regions == ["ap-south-1"]


@mock_aws
def test_resolve_against_moto(monkeypatch):
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    ec2 = boto3.client("ec2", region_name="us-east-1")
    vpc = ec2.create_vpc(CidrBlock="10.0.0.0/16")["Vpc"]
    subnet = ec2.create_subnet(VpcId=vpc["VpcId"], CidrBlock="10.0.1.0/24")["Subnet"]
    created = ec2.create_network_interface(
        SubnetId=subnet["SubnetId"], PrivateIpAddress="10.0.1.50"
    )["NetworkInterface"]

    ctx = AccountContext(session=boto3.Session(region_name="us-east-1"))
    node = SimpleResolver(ctx).resolve_by_ip("", vpc["VpcId"], "10.0.1.50")

    assert node is not None
    assert node.eni_id == created["NetworkInterfaceId"]
    assert node.vpc_id == vpc["VpcId"]
    assert node.routing_target().ip == "10.0.1.50"

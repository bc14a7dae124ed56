"""Destination resolution: turn an IP or node id into a traversable Node."""

import concurrent.futures
import threading
from abc import ABC, abstractmethod
from typing import Any, Optional

from botocore.exceptions import ClientError

from ..core.logging import get_logger
from .nodes import NetworkInterfaceNode, Node

log = get_logger("resolver")


class DestinationResolver(ABC):
    """Lets nodes find the component that owns an address."""

    @abstractmethod
    def resolve_by_ip(self, account_id: str, vpc_id: str, ip: str) -> Optional[Node]:
        ...

    @abstractmethod
    def resolve_by_id(self, node_id: str) -> Optional[Node]:
        ...


class SimpleResolver(DestinationResolver):
    """ENI lookup across regions, memoised by IP and by node id.

    An ENI is searched by private IP first, then by associated public IP,
    in every region in parallel; the first region to answer wins.
    """

    def __init__(self, account_context: Any, regions: Optional[list[str]] = None):
        self.account_context = account_context
        self.regions = regions or list(getattr(account_context, "regions", None) or [])
        self._lock = threading.Lock()
        self._by_ip: dict[tuple[str, str, str], Node] = {}
        self._by_id: dict[str, Node] = {}

    def resolve_by_ip(self, account_id: str, vpc_id: str, ip: str) -> Optional[Node]:
        if not ip:
            return None

        key = (account_id, vpc_id, ip)
        with self._lock:
            if key in self._by_ip:
                return self._by_ip[key]

        filters = [
            [{"Name": "private-ip-address", "Values": [ip]}],
            [{"Name": "association.public-ip", "Values": [ip]}],
        ]
        if vpc_id:
            for f in filters:
                f.append({"Name": "vpc-id", "Values": [vpc_id]})

        node = self._search(account_id, lambda ec2: self._by_filters(ec2, filters))
        if node is None:
            log.debug("No ENI found for %s in account %s", ip, account_id or "<default>")
            return None

        self._remember(node, key)
        return node

    def resolve_by_id(self, node_id: str) -> Optional[Node]:
        with self._lock:
            if node_id in self._by_id:
                return self._by_id[node_id]

        account_id, _, eni_id = node_id.rpartition(":")
        if not eni_id.startswith("eni-"):
            return None

        def lookup(ec2):
            resp = ec2.describe_network_interfaces(NetworkInterfaceIds=[eni_id])
            return resp.get("NetworkInterfaces", [])

        node = self._search(account_id, lookup)
        if node is not None:
            self._remember(node)
        return node

    def _remember(self, node: Node, ip_key: Optional[tuple[str, str, str]] = None):
        with self._lock:
            self._by_id[node.node_id] = node
            if ip_key is not None:
                self._by_ip[ip_key] = node

    @staticmethod
    def _by_filters(ec2, filters: list[list[dict]]) -> list[dict]:
        for f in filters:
            resp = ec2.describe_network_interfaces(Filters=f)
            if resp.get("NetworkInterfaces"):
                return resp["NetworkInterfaces"]
        return []

    def _check_region(self, account_id: str, region: str, lookup) -> Optional[Node]:
        try:
            ec2 = self.account_context.client(account_id, "ec2", region)
            interfaces = lookup(ec2)
        except ClientError as e:
            log.warning("ENI lookup failed in %s: %s", region, e)
            return None
        if not interfaces:
            return None
        return self._to_node(interfaces[0], account_id, region)

    def _search(self, account_id: str, lookup) -> Optional[Node]:
        regions = self.regions or [None]
        with concurrent.futures.ThreadPoolExecutor(max_workers=len(regions)) as executor:
            future_to_region = {
                executor.submit(self._check_region, account_id, r, lookup): r
                for r in regions
            }
            for future in concurrent.futures.as_completed(future_to_region):
                node = future.result()
                if node is not None:
                    for f in future_to_region:
                        f.cancel()
                    return node
        return None

    @staticmethod
    def _to_node(eni: dict, account_id: str, region: Optional[str]) -> NetworkInterfaceNode:
        return NetworkInterfaceNode(
            eni_id=eni["NetworkInterfaceId"],
            account_id=account_id or eni.get("OwnerId", ""),
            private_ip=eni.get("PrivateIpAddress", ""),
            vpc_id=eni.get("VpcId", ""),
            subnet_id=eni.get("SubnetId", ""),
            region=region or "",
        )

"""Base Pydantic models describing traffic and routing targets."""

from typing import Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator

Direction = Literal["", "inbound", "outbound"]

# IANA protocol numbers as they appear in SG/NACL rules
PROTOCOL_ALIASES = {"6": "tcp", "17": "udp", "1": "icmp", "58": "icmpv6", "-1": "all"}


def normalize_protocol(value: str) -> str:
    """Lower-case a protocol name and map numeric forms to names."""
    value = (value or "").strip().lower()
    return PROTOCOL_ALIASES.get(value, value)


class RoutingTarget(BaseModel):
    """Address/port/protocol identity of a node or of a traversal destination.

    ``direction`` and ``source_is_private`` are annotations set by the
    traversal for each leg, not intrinsic properties of a node.
    """

    model_config = ConfigDict(frozen=True)

    ip: str = Field("", description="IPv4/IPv6 address, empty for wildcard")
    port: int = Field(0, ge=0, le=65535, description="0 for wildcard")
    protocol: str = Field("", description="tcp, udp, icmp, all; empty for wildcard")
    direction: Direction = ""
    source_is_private: bool = False

    @field_validator("protocol")
    @classmethod
    def validate_protocol(cls, v: str) -> str:
        return normalize_protocol(v)

    def is_empty(self) -> bool:
        """True when no ip, port or protocol is set."""
        return not self.ip and not self.port and not self.protocol

    def for_leg(self, direction: Direction, source_is_private: bool) -> "RoutingTarget":
        """Copy annotated for one direction of a bidirectional check."""
        return self.model_copy(
            update={"direction": direction, "source_is_private": source_is_private}
        )


class TrafficSpec(BaseModel):
    """Traffic under test for a flow simulation."""

    model_config = ConfigDict(frozen=True)

    source_ip: str = ""
    destination_ip: str = ""
    port: int = Field(0, ge=0, le=65535)
    protocol: str = "tcp"

    @field_validator("protocol")
    @classmethod
    def validate_protocol(cls, v: str) -> str:
        return normalize_protocol(v)

    def destination_target(self) -> RoutingTarget:
        return RoutingTarget(
            ip=self.destination_ip, port=self.port, protocol=self.protocol
        )

    def reversed(self) -> "TrafficSpec":
        """Return-leg traffic: addresses swapped, port and protocol kept."""
        return TrafficSpec(
            source_ip=self.destination_ip,
            destination_ip=self.source_ip,
            port=self.port,
            protocol=self.protocol,
        )

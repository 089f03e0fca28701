"""
Security group data model.

These dataclasses describe what the caller wants (``SecurityGroupSpec``
wrapped in a ``SecurityGroupResource``), what already exists remotely
(``SecurityGroupInfo``) and what an operation produced
(``SecurityGroupStatus``). They are plain values: the manager reads them
during a single call and never keeps them.

Ingress rules mirror the EC2 ``IpPermission`` shape, with one list per
source kind, so that malformed rules can be expressed and rejected by
:func:`sg_lifecycle.networking.permissions.translate`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple


@dataclass(frozen=True)
class IPRange:
    """An IPv4 CIDR source."""

    cidr_ip: str
    description: Optional[str] = None


@dataclass(frozen=True)
class IPv6Range:
    """An IPv6 CIDR source."""

    cidr_ipv6: str
    description: Optional[str] = None


@dataclass(frozen=True)
class GroupPair:
    """A peer security group source."""

    group_id: str
    description: Optional[str] = None


@dataclass(frozen=True)
class IngressRule:
    """
    One desired ingress rule.

    Attributes:
        ip_protocol: Protocol name or number ("tcp", "udp", "icmp", "-1")
        from_port: Start of the port range, None when the protocol has none
        to_port: End of the port range, None when the protocol has none
        ip_ranges: IPv4 sources
        ipv6_ranges: IPv6 sources
        group_pairs: Peer security group sources

    Exactly one of the three source tuples may be non-empty, and it must
    hold exactly one entry.
    """

    ip_protocol: str
    from_port: Optional[int] = None
    to_port: Optional[int] = None
    ip_ranges: Tuple[IPRange, ...] = ()
    ipv6_ranges: Tuple[IPv6Range, ...] = ()
    group_pairs: Tuple[GroupPair, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IngressRule:
        """
        Build a rule from the EC2 ``IpPermission`` dictionary shape.

        Example
        -------
        >>> IngressRule.from_dict({
        ...     "IpProtocol": "tcp", "FromPort": 443, "ToPort": 443,
        ...     "IpRanges": [{"CidrIp": "0.0.0.0/0"}],
        ... })
        """
        return cls(
            ip_protocol=str(data["IpProtocol"]),
            from_port=data.get("FromPort"),
            to_port=data.get("ToPort"),
            ip_ranges=tuple(
                IPRange(r["CidrIp"], r.get("Description"))
                for r in data.get("IpRanges", [])
            ),
            ipv6_ranges=tuple(
                IPv6Range(r["CidrIpv6"], r.get("Description"))
                for r in data.get("Ipv6Ranges", [])
            ),
            group_pairs=tuple(
                GroupPair(p["GroupId"], p.get("Description"))
                for p in data.get("UserIdGroupPairs", [])
            ),
        )


@dataclass(frozen=True)
class SecurityGroupSpec:
    """Desired state of a security group."""

    group_name: str
    description: str
    tags: Mapping[str, str] = field(default_factory=dict)
    ingress: Tuple[IngressRule, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SecurityGroupSpec:
        """Build a spec from ``groupName``/``description``/``tags``/``ingress`` keys."""
        return cls(
            group_name=data["groupName"],
            description=data.get("description", ""),
            tags=dict(data.get("tags", {})),
            ingress=tuple(
                IngressRule.from_dict(rule) for rule in data.get("ingress", [])
            ),
        )


@dataclass(frozen=True)
class SecurityGroupResource:
    """
    A desired security group together with its tracking identity.

    Attributes:
        stack_id: Identity of the stack that owns the resource
        resource_id: Identity of the resource within its stack
        spec: The desired security group state
    """

    stack_id: str
    resource_id: str
    spec: SecurityGroupSpec

    @property
    def id(self) -> str:
        return f"{self.stack_id}/{self.resource_id}"


@dataclass(frozen=True)
class SecurityGroupInfo:
    """An existing security group as discovered remotely."""

    security_group_id: str
    tags: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SecurityGroupStatus:
    """Outcome of a create or update: the remote group id."""

    group_id: str

    def to_dict(self) -> Dict[str, str]:
        return {"groupID": self.group_id}

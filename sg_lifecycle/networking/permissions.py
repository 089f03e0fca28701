"""
Ingress Permission Translation
==============================

Turns desired :class:`~sg_lifecycle.model.IngressRule` values into
normalized :class:`NetworkPermission` values consumed by ingress
reconcilers.

Every permission has exactly one traffic source, modelled as one of
three target types:

- :class:`CIDRTarget` - an IPv4 CIDR block
- :class:`CIDRv6Target` - an IPv6 CIDR block
- :class:`GroupIDTarget` - a peer security group

:meth:`PermissionTarget.from_rule` is the only place a target is chosen
from a rule, and it rejects rules that do not carry exactly one source.

Example
-------
>>> rule = IngressRule("tcp", 443, 443, ip_ranges=(IPRange("0.0.0.0/0"),))
>>> permission = translate(rule)
>>> permission.target
CIDRTarget(cidr='0.0.0.0/0')
>>> permission.to_sdk()["IpRanges"]
[{'CidrIp': '0.0.0.0/0'}]
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from sg_lifecycle.core.exceptions import InvalidIngressRuleError
from sg_lifecycle.model.security_group import IngressRule

LABEL_KEY_RAW_DESCRIPTION = "RawDescription"


def labels_for_raw_description(description: Optional[str]) -> Dict[str, str]:
    """
    Derive permission labels from a rule's free-text description.

    The description is kept verbatim under ``RawDescription``; ingress
    reconcilers write it back as the rule description.
    """
    return {LABEL_KEY_RAW_DESCRIPTION: description or ""}


@dataclass(frozen=True)
class CIDRTarget:
    cidr: str
    kind = "CIDR"

    @property
    def value(self) -> str:
        return self.cidr

    def to_sdk(self) -> Dict[str, Any]:
        return {"IpRanges": [{"CidrIp": self.cidr}]}


@dataclass(frozen=True)
class CIDRv6Target:
    cidr_ipv6: str
    kind = "CIDRv6"

    @property
    def value(self) -> str:
        return self.cidr_ipv6

    def to_sdk(self) -> Dict[str, Any]:
        return {"Ipv6Ranges": [{"CidrIpv6": self.cidr_ipv6}]}


@dataclass(frozen=True)
class GroupIDTarget:
    group_id: str
    kind = "GroupID"

    @property
    def value(self) -> str:
        return self.group_id

    def to_sdk(self) -> Dict[str, Any]:
        return {"UserIdGroupPairs": [{"GroupId": self.group_id}]}


Target = Union[CIDRTarget, CIDRv6Target, GroupIDTarget]


class PermissionTarget:
    """Factory choosing the single traffic source of an ingress rule."""

    @staticmethod
    def from_rule(rule: IngressRule) -> Tuple[Target, Dict[str, str]]:
        """
        Pick the rule's source and the labels derived from it.

        Returns
        -------
        tuple
            ``(target, labels)``.

        Raises
        ------
        InvalidIngressRuleError
            Unless exactly one source list is populated with exactly one entry.
        """
        counts = {
            "ip_ranges": len(rule.ip_ranges),
            "ipv6_ranges": len(rule.ipv6_ranges),
            "group_pairs": len(rule.group_pairs),
        }
        populated = [kind for kind, count in counts.items() if count]
        if len(populated) != 1 or counts[populated[0]] != 1:
            raise InvalidIngressRuleError("invalid ipPermission", details=counts)

        if rule.ip_ranges:
            ip_range = rule.ip_ranges[0]
            return CIDRTarget(ip_range.cidr_ip), labels_for_raw_description(
                ip_range.description
            )
        if rule.ipv6_ranges:
            ipv6_range = rule.ipv6_ranges[0]
            return CIDRv6Target(ipv6_range.cidr_ipv6), labels_for_raw_description(
                ipv6_range.description
            )
        pair = rule.group_pairs[0]
        return GroupIDTarget(pair.group_id), labels_for_raw_description(
            pair.description
        )


@dataclass(frozen=True)
class NetworkPermission:
    """
    A normalized ingress permission.

    Attributes:
        ip_protocol: Protocol name or number
        from_port: Start of the port range, if any
        to_port: End of the port range, if any
        target: The single traffic source
        labels: Labels derived from the source description
    """

    ip_protocol: str
    from_port: Optional[int]
    to_port: Optional[int]
    target: Target
    labels: Mapping[str, str] = field(default_factory=dict)

    def to_sdk(self) -> Dict[str, Any]:
        """Render as an EC2 ``IpPermission`` dictionary for boto3."""
        permission: Dict[str, Any] = {"IpProtocol": self.ip_protocol}
        if self.from_port is not None:
            permission["FromPort"] = self.from_port
        if self.to_port is not None:
            permission["ToPort"] = self.to_port
        permission.update(self.target.to_sdk())
        return permission


def translate(rule: IngressRule) -> NetworkPermission:
    """
    Translate one ingress rule into a :class:`NetworkPermission`.

    Raises
    ------
    InvalidIngressRuleError
        If the rule does not carry exactly one traffic source.
    """
    target, labels = PermissionTarget.from_rule(rule)
    return NetworkPermission(
        ip_protocol=rule.ip_protocol,
        from_port=rule.from_port,
        to_port=rule.to_port,
        target=target,
        labels=labels,
    )


def translate_all(rules: Iterable[IngressRule]) -> List[NetworkPermission]:
    """
    Translate rules in order, failing on the first invalid one.

    Nothing is returned when any rule is invalid; the raised error
    records the offending rule's index under ``rule_index``.
    """
    permissions = []
    for index, rule in enumerate(rules):
        try:
            permissions.append(translate(rule))
        except InvalidIngressRuleError as e:
            e.details["rule_index"] = index
            raise
    return permissions

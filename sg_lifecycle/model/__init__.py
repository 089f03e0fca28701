"""
Data model for desired and observed security groups.
"""

from sg_lifecycle.model.security_group import (
    GroupPair,
    IngressRule,
    IPRange,
    IPv6Range,
    SecurityGroupInfo,
    SecurityGroupResource,
    SecurityGroupSpec,
    SecurityGroupStatus,
)

__all__ = [
    "GroupPair",
    "IngressRule",
    "IPRange",
    "IPv6Range",
    "SecurityGroupInfo",
    "SecurityGroupResource",
    "SecurityGroupSpec",
    "SecurityGroupStatus",
]

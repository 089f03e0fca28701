"""
Tests for ingress permission translation.
"""

import pytest

from sg_lifecycle.core.exceptions import InvalidIngressRuleError
from sg_lifecycle.model.security_group import (
    GroupPair,
    IngressRule,
    IPRange,
    IPv6Range,
)
from sg_lifecycle.networking.permissions import (
    LABEL_KEY_RAW_DESCRIPTION,
    CIDRTarget,
    CIDRv6Target,
    GroupIDTarget,
    PermissionTarget,
    labels_for_raw_description,
    translate,
    translate_all,
)


class TestPermissionTarget:
    """Tests for choosing the single source of a rule."""

    def test_ipv4_range(self):
        """Test a single IPv4 range becomes a CIDR target."""
        rule = IngressRule("tcp", 80, 80, ip_ranges=(IPRange("10.0.0.0/8"),))
        target, _ = PermissionTarget.from_rule(rule)
        assert target == CIDRTarget("10.0.0.0/8")
        assert target.kind == "CIDR"

    def test_ipv6_range(self):
        """Test a single IPv6 range becomes a CIDRv6 target."""
        rule = IngressRule("tcp", 80, 80, ipv6_ranges=(IPv6Range("::/0"),))
        target, _ = PermissionTarget.from_rule(rule)
        assert target == CIDRv6Target("::/0")
        assert target.value == "::/0"

    def test_group_pair(self):
        """Test a single peer group becomes a group target."""
        rule = IngressRule("tcp", 80, 80, group_pairs=(GroupPair("sg-peer"),))
        target, _ = PermissionTarget.from_rule(rule)
        assert target == GroupIDTarget("sg-peer")

    def test_no_source_rejected(self):
        """Test a rule without any source is invalid."""
        with pytest.raises(InvalidIngressRuleError):
            PermissionTarget.from_rule(IngressRule("tcp", 80, 80))

    def test_two_source_kinds_rejected(self):
        """Test a rule naming both a CIDR and a peer group is invalid."""
        rule = IngressRule(
            "tcp",
            80,
            80,
            ip_ranges=(IPRange("10.0.0.0/8"),),
            group_pairs=(GroupPair("sg-peer"),),
        )
        with pytest.raises(InvalidIngressRuleError) as exc_info:
            PermissionTarget.from_rule(rule)

        assert exc_info.value.details["ip_ranges"] == 1
        assert exc_info.value.details["group_pairs"] == 1

    def test_two_entries_of_one_kind_rejected(self):
        """Test that only singleton source lists are accepted."""
        rule = IngressRule(
            "tcp",
            80,
            80,
            ip_ranges=(IPRange("10.0.0.0/8"), IPRange("192.168.0.0/16")),
        )
        with pytest.raises(InvalidIngressRuleError):
            PermissionTarget.from_rule(rule)


class TestTranslate:
    """Tests for single-rule translation."""

    @pytest.mark.parametrize(
        "rule, expected_target",
        [
            (
                IngressRule("tcp", 443, 443, ip_ranges=(IPRange("0.0.0.0/0"),)),
                CIDRTarget("0.0.0.0/0"),
            ),
            (
                IngressRule("udp", 53, 53, ipv6_ranges=(IPv6Range("2001:db8::/32"),)),
                CIDRv6Target("2001:db8::/32"),
            ),
            (
                IngressRule("-1", group_pairs=(GroupPair("sg-peer"),)),
                GroupIDTarget("sg-peer"),
            ),
        ],
    )
    def test_values_carried_unchanged(self, rule, expected_target):
        """Test protocol, ports and source value come through as given."""
        permission = translate(rule)

        assert permission.ip_protocol == rule.ip_protocol
        assert permission.from_port == rule.from_port
        assert permission.to_port == rule.to_port
        assert permission.target == expected_target

    def test_labels_from_description(self):
        """Test the source description becomes the raw description label."""
        rule = IngressRule(
            "tcp", 22, 22, group_pairs=(GroupPair("sg-bastion", "from bastion"),)
        )
        permission = translate(rule)
        assert permission.labels == {LABEL_KEY_RAW_DESCRIPTION: "from bastion"}

    def test_labels_without_description(self):
        """Test a missing description gives an empty raw description."""
        assert labels_for_raw_description(None) == {LABEL_KEY_RAW_DESCRIPTION: ""}

    def test_to_sdk_cidr(self):
        """Test rendering a CIDR permission for boto3."""
        rule = IngressRule("tcp", 443, 443, ip_ranges=(IPRange("0.0.0.0/0"),))
        assert translate(rule).to_sdk() == {
            "IpProtocol": "tcp",
            "FromPort": 443,
            "ToPort": 443,
            "IpRanges": [{"CidrIp": "0.0.0.0/0"}],
        }

    def test_to_sdk_omits_missing_ports(self):
        """Test all-traffic rules render without ports."""
        rule = IngressRule("-1", group_pairs=(GroupPair("sg-peer"),))
        assert translate(rule).to_sdk() == {
            "IpProtocol": "-1",
            "UserIdGroupPairs": [{"GroupId": "sg-peer"}],
        }

    def test_from_sdk_dict(self):
        """Test rules built from the EC2 IpPermission shape translate."""
        rule = IngressRule.from_dict(
            {
                "IpProtocol": "tcp",
                "FromPort": 8080,
                "ToPort": 8090,
                "Ipv6Ranges": [{"CidrIpv6": "::/0", "Description": "api"}],
            }
        )
        permission = translate(rule)
        assert permission.target == CIDRv6Target("::/0")
        assert permission.labels[LABEL_KEY_RAW_DESCRIPTION] == "api"


class TestTranslateAll:
    """Tests for translating a whole rule set."""

    def test_preserves_order(self):
        """Test permissions come back in rule order."""
        rules = [
            IngressRule("tcp", 80, 80, ip_ranges=(IPRange("10.0.0.0/8"),)),
            IngressRule("tcp", 443, 443, ipv6_ranges=(IPv6Range("::/0"),)),
            IngressRule("tcp", 22, 22, group_pairs=(GroupPair("sg-peer"),)),
        ]
        permissions = translate_all(rules)

        assert [p.from_port for p in permissions] == [80, 443, 22]

    def test_empty(self):
        """Test an empty rule set translates to no permissions."""
        assert translate_all([]) == []

    def test_invalid_rule_aborts_everything(self):
        """Test one invalid rule fails the whole set and names its index."""
        rules = [
            IngressRule("tcp", 80, 80, ip_ranges=(IPRange("10.0.0.0/8"),)),
            IngressRule("tcp", 443, 443),
            IngressRule("tcp", 22, 22, group_pairs=(GroupPair("sg-peer"),)),
        ]
        with pytest.raises(InvalidIngressRuleError) as exc_info:
            translate_all(rules)

        assert exc_info.value.details["rule_index"] == 1

"""
Resource tracking tags.

Every security group the controller manages carries tracking tags naming
the cluster, stack and resource that own it, so later reconciliation
passes can recognise it. A tracking provider merges those tags into the
user's tags and names the legacy keys tag reconciliation must leave
alone.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Mapping, Optional, Protocol

DEFAULT_CLUSTER_TAG_KEY = "elbv2.k8s.aws/cluster"
DEFAULT_TAG_PREFIX = "ingress.k8s.aws"

# Tag keys written by earlier controller generations
LEGACY_TAG_KEYS = frozenset(
    {
        "kubernetes.io/cluster-name",
        "kubernetes.io/namespace",
        "kubernetes.io/ingress-name",
        "kubernetes.io/service-name",
    }
)


class TrackingProvider(Protocol):
    def resource_tags(
        self,
        stack_id: str,
        resource_id: str,
        user_tags: Optional[Mapping[str, str]] = None,
    ) -> Dict[str, str]:
        ...

    def legacy_tag_keys(self) -> FrozenSet[str]:
        ...


class DefaultTrackingProvider:
    """
    Tracking tags keyed under a cluster tag and a tag prefix.

    Parameters
    ----------
    cluster_name : str
        Value of the cluster tag.
    tag_prefix : str, default="ingress.k8s.aws"
        Prefix of the ``stack`` and ``resource`` tracking keys.
    cluster_tag_key : str, default="elbv2.k8s.aws/cluster"
        Key of the cluster tag.

    Example
    -------
    >>> provider = DefaultTrackingProvider("prod")
    >>> provider.resource_tags("ns/web", "sg", {"team": "web"})
    {'team': 'web', 'elbv2.k8s.aws/cluster': 'prod', 'ingress.k8s.aws/stack': 'ns/web', 'ingress.k8s.aws/resource': 'sg'}
    """

    def __init__(
        self,
        cluster_name: str,
        tag_prefix: str = DEFAULT_TAG_PREFIX,
        cluster_tag_key: str = DEFAULT_CLUSTER_TAG_KEY,
        legacy_keys: FrozenSet[str] = LEGACY_TAG_KEYS,
    ) -> None:
        self.cluster_name = cluster_name
        self.tag_prefix = tag_prefix
        self.cluster_tag_key = cluster_tag_key
        self._legacy_keys = frozenset(legacy_keys)

    def _prefixed(self, key: str) -> str:
        return f"{self.tag_prefix}/{key}"

    def stack_tags(self, stack_id: str) -> Dict[str, str]:
        return {
            self.cluster_tag_key: self.cluster_name,
            self._prefixed("stack"): stack_id,
        }

    def resource_tags(
        self,
        stack_id: str,
        resource_id: str,
        user_tags: Optional[Mapping[str, str]] = None,
    ) -> Dict[str, str]:
        """User tags overlaid with tracking tags; tracking keys win."""
        tags = dict(user_tags or {})
        tags.update(self.stack_tags(stack_id))
        tags[self._prefixed("resource")] = resource_id
        return tags

    def legacy_tag_keys(self) -> FrozenSet[str]:
        return self._legacy_keys

"""
Collaborator interfaces used by the security group manager.

The manager never diffs ingress rules or tags itself. It hands the full
desired state to these collaborators and lets them decide which
authorize/revoke or tag/untag calls to make.
"""

from __future__ import annotations

from typing import AbstractSet, List, Mapping, Optional, Protocol

from sg_lifecycle.networking.permissions import NetworkPermission


class IngressReconciler(Protocol):
    """Converges a security group's ingress rules to ``permissions``."""

    def reconcile_ingress(
        self,
        security_group_id: str,
        permissions: List[NetworkPermission],
    ) -> None:
        ...


class TagReconciler(Protocol):
    """
    Converges a resource's tags to ``desired_tags``.

    Keys in ``ignored_keys`` are never added or removed. When
    ``current_tags`` is None the reconciler looks them up itself.
    """

    def reconcile_tags(
        self,
        resource_id: str,
        desired_tags: Mapping[str, str],
        current_tags: Optional[Mapping[str, str]] = None,
        ignored_keys: AbstractSet[str] = frozenset(),
    ) -> None:
        ...

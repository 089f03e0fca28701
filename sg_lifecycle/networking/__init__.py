"""
Networking Primitives
=====================

Normalized ingress permissions and the reconciler interfaces that
consume them.

Example
-------
>>> from sg_lifecycle.networking import translate_all
>>> permissions = translate_all(spec.ingress)
"""

from sg_lifecycle.networking.interfaces import IngressReconciler, TagReconciler
from sg_lifecycle.networking.permissions import (
    CIDRTarget,
    CIDRv6Target,
    GroupIDTarget,
    NetworkPermission,
    PermissionTarget,
    labels_for_raw_description,
    translate,
    translate_all,
)

__all__ = [
    "CIDRTarget",
    "CIDRv6Target",
    "GroupIDTarget",
    "IngressReconciler",
    "NetworkPermission",
    "PermissionTarget",
    "TagReconciler",
    "labels_for_raw_description",
    "translate",
    "translate_all",
]

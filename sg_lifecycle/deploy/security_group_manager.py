"""
Security Group Manager
======================

Carries out create, update and delete of a security group once the
desired state is known.

- **Create** translates the ingress rules, creates the group with its
  merged tracking and user tags, then hands the permissions to the
  ingress reconciler.
- **Update** translates the ingress rules, reconciles tags against the
  existing group (leaving legacy keys alone) and reconciles ingress.
- **Delete** keeps calling DeleteSecurityGroup while EC2 answers
  ``DependencyViolation``, every ``deletion_poll_interval`` seconds, until
  it succeeds, fails otherwise, ``deletion_timeout`` passes, or the caller
  cancels.

No rollback is attempted: a group whose ingress reconciliation failed
after creation stays created, and the next Create for the same name and
VPC picks it up again.

Example
-------
>>> manager = SecurityGroupManager(
...     EC2SecurityGroupClient(AWSClient(region="us-east-1")),
...     vpc_id="vpc-0abc",
...     tracking_provider=DefaultTrackingProvider("prod"),
...     tag_reconciler=tag_reconciler,
...     ingress_reconciler=ingress_reconciler,
... )
>>> status = manager.create(resource)
>>> manager.delete(SecurityGroupInfo(status.group_id))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from sg_lifecycle.core.cancellation import CancelToken
from sg_lifecycle.core.exceptions import (
    CollaboratorNotConfiguredError,
    DeletionTimeoutError,
    TransientDependencyError,
)
from sg_lifecycle.core.logging import kv
from sg_lifecycle.core.retry import Clock, RetryPolicy, RetryState
from sg_lifecycle.deploy.ec2_client import SecurityGroupClient
from sg_lifecycle.deploy.tracking import TrackingProvider
from sg_lifecycle.model.security_group import (
    SecurityGroupInfo,
    SecurityGroupResource,
    SecurityGroupStatus,
)
from sg_lifecycle.networking.interfaces import IngressReconciler, TagReconciler
from sg_lifecycle.networking.permissions import translate_all

logger = logging.getLogger(__name__)

DEFAULT_DELETION_POLL_INTERVAL = 2.0
DEFAULT_DELETION_TIMEOUT = 120.0


class DeletionState(Enum):
    """States of a security group deletion."""

    REQUESTING = "requesting"
    BLOCKED = "blocked"
    DELETED = "deleted"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


_DELETION_STATES = {
    RetryState.ATTEMPTING: DeletionState.REQUESTING,
    RetryState.WAITING: DeletionState.BLOCKED,
    RetryState.SUCCEEDED: DeletionState.DELETED,
    RetryState.FAILED: DeletionState.FAILED,
    RetryState.TIMED_OUT: DeletionState.TIMED_OUT,
    RetryState.CANCELLED: DeletionState.CANCELLED,
}


@dataclass
class DeletionResult:
    """
    Result of a successful security group deletion.

    Attributes:
        security_group_id: The deleted group
        attempts: DeleteSecurityGroup calls made
        elapsed: Seconds spent, including waits
        states: Deletion states entered, in order
    """

    security_group_id: str
    attempts: int
    elapsed: float
    states: List[DeletionState] = field(default_factory=list)


def is_transient_dependency_error(err: BaseException) -> bool:
    """True when ``err`` means the group is still referenced elsewhere."""
    return isinstance(err, TransientDependencyError)


class SecurityGroupManager:
    """
    Create / update / delete orchestration for one VPC's security groups.

    Parameters
    ----------
    ec2_client : SecurityGroupClient
        Provider client issuing create and delete calls.
    vpc_id : str
        VPC new groups are created in.
    tracking_provider : TrackingProvider, optional
        Supplies tracking tags and legacy tag keys. Needed by create/update.
    tag_reconciler : TagReconciler, optional
        Converges tags on update.
    ingress_reconciler : IngressReconciler, optional
        Converges ingress rules on create/update.
    deletion_poll_interval : float, default=2.0
        Seconds between delete attempts while the group is still referenced.
    deletion_timeout : float, default=120.0
        Seconds after the first delete attempt before giving up.
    clock : Clock, optional
        Time source for the deletion loop.

    Notes
    -----
    The manager holds no per-resource state and may be shared across
    threads working on different groups. Operations on the same group
    must be serialized by the caller.
    """

    def __init__(
        self,
        ec2_client: SecurityGroupClient,
        vpc_id: str,
        *,
        tracking_provider: Optional[TrackingProvider] = None,
        tag_reconciler: Optional[TagReconciler] = None,
        ingress_reconciler: Optional[IngressReconciler] = None,
        deletion_poll_interval: float = DEFAULT_DELETION_POLL_INTERVAL,
        deletion_timeout: float = DEFAULT_DELETION_TIMEOUT,
        clock: Optional[Clock] = None,
    ) -> None:
        self.ec2_client = ec2_client
        self.vpc_id = vpc_id
        self.tracking_provider = tracking_provider
        self.tag_reconciler = tag_reconciler
        self.ingress_reconciler = ingress_reconciler
        self.deletion_policy = RetryPolicy(
            interval=deletion_poll_interval,
            timeout=deletion_timeout,
            is_retryable=is_transient_dependency_error,
            clock=clock,
        )

    def _require(self, name: str, operation: str):
        collaborator = getattr(self, name)
        if collaborator is None:
            raise CollaboratorNotConfiguredError(
                f"{operation} requires a {name}",
                details={"collaborator": name},
            )
        return collaborator

    def _desired_tags(self, resource: SecurityGroupResource) -> dict:
        tracking_provider = self._require("tracking_provider", "tagging")
        return tracking_provider.resource_tags(
            resource.stack_id, resource.resource_id, resource.spec.tags
        )

    def create(
        self,
        resource: SecurityGroupResource,
        cancel_token: Optional[CancelToken] = None,
    ) -> SecurityGroupStatus:
        """
        Create the security group and establish its ingress rules.

        Raises
        ------
        InvalidIngressRuleError
            If any ingress rule is malformed; nothing is created.
        ProviderError
            If EC2 or a reconciler fails.
        OperationCancelledError
            If ``cancel_token`` is cancelled before a remote call.
        """
        token = cancel_token or CancelToken()
        ingress_reconciler = self._require("ingress_reconciler", "create")
        sg_tags = self._desired_tags(resource)
        permissions = translate_all(resource.spec.ingress)

        token.raise_if_cancelled("CreateSecurityGroup")
        logger.info("creating securityGroup %s", kv(resourceID=resource.id))
        sg_id = self.ec2_client.create_security_group(
            group_name=resource.spec.group_name,
            description=resource.spec.description,
            vpc_id=self.vpc_id,
            tags=sg_tags,
        )
        logger.info(
            "created securityGroup %s",
            kv(resourceID=resource.id, securityGroupID=sg_id),
        )

        token.raise_if_cancelled("ReconcileIngress")
        ingress_reconciler.reconcile_ingress(sg_id, permissions)
        return SecurityGroupStatus(group_id=sg_id)

    def update(
        self,
        resource: SecurityGroupResource,
        sdk_sg: SecurityGroupInfo,
        cancel_token: Optional[CancelToken] = None,
    ) -> SecurityGroupStatus:
        """
        Converge tags and ingress rules of an existing security group.

        Never calls CreateSecurityGroup.
        """
        token = cancel_token or CancelToken()
        tag_reconciler = self._require("tag_reconciler", "update")
        ingress_reconciler = self._require("ingress_reconciler", "update")
        permissions = translate_all(resource.spec.ingress)

        token.raise_if_cancelled("ReconcileTags")
        tag_reconciler.reconcile_tags(
            sdk_sg.security_group_id,
            self._desired_tags(resource),
            current_tags=sdk_sg.tags,
            ignored_keys=self.tracking_provider.legacy_tag_keys(),
        )

        token.raise_if_cancelled("ReconcileIngress")
        ingress_reconciler.reconcile_ingress(sdk_sg.security_group_id, permissions)
        return SecurityGroupStatus(group_id=sdk_sg.security_group_id)

    def delete(
        self,
        sdk_sg: SecurityGroupInfo,
        cancel_token: Optional[CancelToken] = None,
    ) -> DeletionResult:
        """
        Delete the security group, waiting out ``DependencyViolation``.

        Returns
        -------
        DeletionResult
            Attempt count, elapsed time and the states the deletion went through.

        Raises
        ------
        DeletionTimeoutError
            If the group is still referenced when the deadline passes.
        OperationCancelledError
            If ``cancel_token`` is cancelled, even past the deadline.
        ProviderError
            For any other failure, without retrying.
        """
        sg_id = sdk_sg.security_group_id
        states: List[DeletionState] = []

        logger.info("deleting securityGroup %s", kv(securityGroupID=sg_id))
        try:
            outcome = self.deletion_policy.run(
                lambda: self.ec2_client.delete_security_group(sg_id),
                cancel_token=cancel_token,
                on_transition=lambda state: states.append(_DELETION_STATES[state]),
                description=f"securityGroup {sg_id} deletion",
            )
        except DeletionTimeoutError:
            logger.warning(
                "securityGroup still referenced at deadline %s",
                kv(securityGroupID=sg_id),
            )
            raise

        logger.info(
            "deleted securityGroup %s",
            kv(securityGroupID=sg_id, attempts=outcome.attempts),
        )
        return DeletionResult(
            security_group_id=sg_id,
            attempts=outcome.attempts,
            elapsed=outcome.elapsed,
            states=states,
        )

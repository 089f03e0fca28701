"""
Security Group Deployment
=========================

Provider client, tracking tags and the manager that drives security
group create / update / delete.

Classes
-------
SecurityGroupManager
    Create / update / delete orchestration.
EC2SecurityGroupClient
    CreateSecurityGroup / DeleteSecurityGroup over boto3.
DefaultTrackingProvider
    Cluster / stack / resource tracking tags.
DeletionResult
    Attempt bookkeeping of a finished deletion.

Example
-------
>>> from sg_lifecycle.core import AWSClient
>>> from sg_lifecycle.deploy import EC2SecurityGroupClient, SecurityGroupManager
>>>
>>> client = EC2SecurityGroupClient(AWSClient(region="us-east-1"))
>>> manager = SecurityGroupManager(client, vpc_id="vpc-0abc")
>>> manager.delete(SecurityGroupInfo("sg-0123"))
"""

from sg_lifecycle.deploy.ec2_client import (
    EC2SecurityGroupClient,
    SecurityGroupClient,
    convert_tags_to_sdk_tags,
)
from sg_lifecycle.deploy.security_group_manager import (
    DEFAULT_DELETION_POLL_INTERVAL,
    DEFAULT_DELETION_TIMEOUT,
    DeletionResult,
    DeletionState,
    SecurityGroupManager,
)
from sg_lifecycle.deploy.tracking import (
    LEGACY_TAG_KEYS,
    DefaultTrackingProvider,
    TrackingProvider,
)

__all__ = [
    "DEFAULT_DELETION_POLL_INTERVAL",
    "DEFAULT_DELETION_TIMEOUT",
    "DefaultTrackingProvider",
    "DeletionResult",
    "DeletionState",
    "EC2SecurityGroupClient",
    "LEGACY_TAG_KEYS",
    "SecurityGroupClient",
    "SecurityGroupManager",
    "TrackingProvider",
    "convert_tags_to_sdk_tags",
]

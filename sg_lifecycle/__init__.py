"""
sg-lifecycle: Security Group Lifecycle Management
=================================================

Converges an EC2 security group to a desired name, description, tag set
and list of ingress rules, and deletes it safely when it is no longer
wanted, waiting out the window in which EC2 still reports it as in use.

Modules
-------
core
    AWS client, cancellation, retry policy and exceptions
model
    Desired and observed security group data
networking
    Ingress permission translation and reconciler interfaces
deploy
    Provider client, tracking tags and the security group manager

Example
-------
>>> from sg_lifecycle import SecurityGroupManager, SecurityGroupInfo
>>> from sg_lifecycle.core import AWSClient
>>> from sg_lifecycle.deploy import EC2SecurityGroupClient
>>>
>>> client = EC2SecurityGroupClient(AWSClient(region="us-east-1"))
>>> manager = SecurityGroupManager(client, vpc_id="vpc-0abc")
>>> result = manager.delete(SecurityGroupInfo("sg-0123"))
>>> print(f"Deleted after {result.attempts} attempts")

Notes
-----
Requires AWS credentials configured via environment variables, the AWS
credentials file, or an IAM role.
"""

__version__ = "0.1.0"
__license__ = "MIT"

# Public API
from sg_lifecycle.core.cancellation import CancelToken
from sg_lifecycle.core.exceptions import SGLifecycleError
from sg_lifecycle.deploy.security_group_manager import (
    DeletionResult,
    SecurityGroupManager,
)
from sg_lifecycle.model.security_group import (
    IngressRule,
    SecurityGroupInfo,
    SecurityGroupResource,
    SecurityGroupSpec,
    SecurityGroupStatus,
)
from sg_lifecycle.networking.permissions import NetworkPermission, translate_all

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Core classes
    "CancelToken",
    "DeletionResult",
    "IngressRule",
    "NetworkPermission",
    "SecurityGroupInfo",
    "SecurityGroupManager",
    "SecurityGroupResource",
    "SecurityGroupSpec",
    "SecurityGroupStatus",
    "SGLifecycleError",
    "translate_all",
]

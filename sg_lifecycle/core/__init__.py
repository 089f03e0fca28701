"""
Core Infrastructure Components
==============================

Foundational pieces shared by the rest of sg-lifecycle:

- :class:`AWSClient` - boto3 session and client factory
- :class:`CancelToken` - cooperative cancellation
- :class:`RetryPolicy` - bounded retries with an injectable clock
- Exception hierarchy for error handling

Exceptions
----------
SGLifecycleError
    Base exception for all sg-lifecycle errors.
AWSClientError
    Session or client construction failed.
InvalidIngressRuleError
    An ingress rule does not name exactly one source.
ProviderError
    EC2 or a reconciler failed.
TransientDependencyError
    The group is still referenced; deletion may succeed later.
DeletionTimeoutError
    The group was still referenced at the deletion deadline.
OperationCancelledError
    The caller cancelled the operation.

See Also
--------
sg_lifecycle.deploy : Security group manager.
"""

from sg_lifecycle.core.aws_client import AWSClient
from sg_lifecycle.core.cancellation import CancelToken
from sg_lifecycle.core.exceptions import (
    AWSClientError,
    CollaboratorNotConfiguredError,
    CredentialsError,
    DeletionTimeoutError,
    InvalidIngressRuleError,
    OperationCancelledError,
    ProviderError,
    RegionError,
    SGLifecycleError,
    TransientDependencyError,
)
from sg_lifecycle.core.retry import (
    Clock,
    RetryOutcome,
    RetryPolicy,
    RetryState,
    SystemClock,
)

__all__ = [
    # Client
    "AWSClient",
    # Cancellation and retries
    "CancelToken",
    "Clock",
    "RetryOutcome",
    "RetryPolicy",
    "RetryState",
    "SystemClock",
    # Exceptions - Base
    "SGLifecycleError",
    # Exceptions - AWS Client
    "AWSClientError",
    "CredentialsError",
    "RegionError",
    # Exceptions - Validation
    "InvalidIngressRuleError",
    # Exceptions - Provider
    "ProviderError",
    "TransientDependencyError",
    # Exceptions - Orchestration
    "CollaboratorNotConfiguredError",
    "DeletionTimeoutError",
    "OperationCancelledError",
]

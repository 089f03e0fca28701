"""
Custom Exceptions for sg-lifecycle
==================================

This module defines the hierarchy of exceptions raised while converging
security groups, so callers can tell fatal input problems apart from
remote failures, deadlines and cancellation.

Exception Hierarchy
-------------------
::

    SGLifecycleError (base)
    ├── AWSClientError
    │   ├── CredentialsError
    │   └── RegionError
    ├── InvalidIngressRuleError
    ├── ProviderError
    │   └── TransientDependencyError
    ├── CollaboratorNotConfiguredError
    ├── DeletionTimeoutError
    └── OperationCancelledError

Example
-------
>>> from sg_lifecycle.core.exceptions import (
...     DeletionTimeoutError,
...     OperationCancelledError,
... )
>>>
>>> try:
...     manager.delete(info, cancel_token=token)
... except OperationCancelledError:
...     print("Deletion cancelled")
... except DeletionTimeoutError as e:
...     print(f"Still referenced after {e.details['attempts']} attempts")
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class SGLifecycleError(Exception):
    """
    Base exception for all sg-lifecycle errors.

    Parameters
    ----------
    message : str
        Human-readable error message.
    details : dict, optional
        Additional context about the error.

    Attributes
    ----------
    message : str
        The error message.
    details : dict
        Additional error details.

    Example
    -------
    >>> raise SGLifecycleError("Something went wrong", details={"code": 500})
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for serialization.

        Returns
        -------
        dict
            Dictionary representation of the error.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


# =============================================================================
# AWS Client Exceptions
# =============================================================================


class AWSClientError(SGLifecycleError):
    """
    Base exception for AWS session and client construction errors.

    Parameters
    ----------
    message : str
        Human-readable error message.
    service : str, optional
        The AWS service that caused the error.
    region : str, optional
        The AWS region where the error occurred.
    details : dict, optional
        Additional context about the error.
    """

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        region: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.service = service
        self.region = region
        full_details = details or {}
        if service:
            full_details["service"] = service
        if region:
            full_details["region"] = region
        super().__init__(message, full_details)


class CredentialsError(AWSClientError):
    """Raised when AWS credentials are invalid, missing, or expired."""

    pass


class RegionError(AWSClientError):
    """Raised when the configured AWS region is invalid or missing."""

    pass


# =============================================================================
# Validation Exceptions
# =============================================================================


class InvalidIngressRuleError(SGLifecycleError):
    """
    Raised when an ingress rule does not name exactly one traffic source.

    A rule must carry exactly one of: a single IPv4 range, a single IPv6
    range, or a single peer security group. Anything else is rejected
    before any remote call is made.

    Example
    -------
    >>> raise InvalidIngressRuleError(
    ...     "invalid ipPermission",
    ...     details={"rule_index": 2, "ip_ranges": 0, "ipv6_ranges": 0}
    ... )
    """

    pass


# =============================================================================
# Provider Exceptions
# =============================================================================


class ProviderError(SGLifecycleError):
    """
    Raised when the remote provider rejects or fails a request.

    Parameters
    ----------
    message : str
        Human-readable error message.
    operation : str, optional
        The provider API operation that failed.
    error_code : str, optional
        Provider error code (e.g. ``InvalidGroup.NotFound``).
    resource_id : str, optional
        The security group the request targeted.
    details : dict, optional
        Additional context about the error.
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        error_code: Optional[str] = None,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.operation = operation
        self.error_code = error_code
        self.resource_id = resource_id
        full_details = details or {}
        if operation:
            full_details["operation"] = operation
        if error_code:
            full_details["error_code"] = error_code
        if resource_id:
            full_details["resource_id"] = resource_id
        super().__init__(message, full_details)


class TransientDependencyError(ProviderError):
    """
    Raised when a security group cannot be deleted yet because another
    resource still references it.

    Example
    -------
    >>> raise TransientDependencyError(
    ...     "resource sg-123456 has a dependent object",
    ...     operation="DeleteSecurityGroup",
    ...     error_code="DependencyViolation",
    ...     resource_id="sg-123456"
    ... )
    """

    pass


# =============================================================================
# Orchestration Exceptions
# =============================================================================


class CollaboratorNotConfiguredError(SGLifecycleError):
    """Raised when an operation needs a collaborator the manager was built without."""

    pass


class DeletionTimeoutError(SGLifecycleError):
    """
    Raised when a security group is still referenced once the deletion
    deadline has passed. The group may still exist remotely.

    Example
    -------
    >>> raise DeletionTimeoutError(
    ...     "timed out waiting for securityGroup sg-123456 deletion",
    ...     details={"attempts": 61, "elapsed_seconds": 120.0}
    ... )
    """

    pass


class OperationCancelledError(SGLifecycleError):
    """Raised when the caller cancels an operation through its cancel token."""

    pass

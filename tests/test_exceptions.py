"""
Tests for the exception hierarchy.
"""

from sg_lifecycle.core.exceptions import (
    DeletionTimeoutError,
    OperationCancelledError,
    ProviderError,
    SGLifecycleError,
    TransientDependencyError,
)


def test_to_dict():
    err = ProviderError(
        "still referenced",
        operation="DeleteSecurityGroup",
        error_code="DependencyViolation",
        resource_id="sg-123",
    )
    data = err.to_dict()

    assert data["error_type"] == "ProviderError"
    assert data["message"] == "still referenced"
    assert data["details"]["error_code"] == "DependencyViolation"
    assert data["details"]["resource_id"] == "sg-123"


def test_transient_is_provider_error():
    assert issubclass(TransientDependencyError, ProviderError)


def test_timeout_and_cancellation_are_distinct():
    """Test callers can tell a timeout from a cancellation."""
    assert issubclass(DeletionTimeoutError, SGLifecycleError)
    assert issubclass(OperationCancelledError, SGLifecycleError)
    assert not issubclass(DeletionTimeoutError, OperationCancelledError)
    assert not issubclass(OperationCancelledError, DeletionTimeoutError)

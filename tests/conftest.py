"""
Pytest configuration and shared fixtures for testing.
"""

import boto3
import pytest
from moto import mock_aws

from sg_lifecycle.core.aws_client import AWSClient
from sg_lifecycle.core.exceptions import TransientDependencyError
from sg_lifecycle.deploy.ec2_client import EC2SecurityGroupClient
from sg_lifecycle.deploy.security_group_manager import SecurityGroupManager
from sg_lifecycle.deploy.tracking import DefaultTrackingProvider
from sg_lifecycle.model.security_group import (
    IngressRule,
    IPRange,
    SecurityGroupResource,
    SecurityGroupSpec,
)


# =============================================================================
# Test doubles
# =============================================================================


class FakeClock:
    """Clock whose sleeps advance time instantly."""

    def __init__(self, start=1000.0):
        self.now = start
        self.sleeps = []
        self.cancel_at = None

    def monotonic(self):
        return self.now

    def sleep(self, seconds, cancel_token):
        self.sleeps.append(seconds)
        if self.cancel_at is not None and self.now + seconds >= self.cancel_at:
            self.now = max(self.now, self.cancel_at)
            cancel_token.cancel("cancelled by test")
            return True
        self.now += seconds
        return cancel_token.cancelled

    def elapsed_since(self, start=1000.0):
        return self.now - start


def dependency_violation(group_id="sg-0123456789abcdef0"):
    return TransientDependencyError(
        f"resource {group_id} has a dependent object",
        operation="DeleteSecurityGroup",
        error_code="DependencyViolation",
        resource_id=group_id,
    )


class FakeSecurityGroupClient:
    """
    Records create/delete calls.

    ``delete_outcomes`` is consumed one entry per delete call: None means
    success, an exception instance is raised. Once exhausted,
    ``default_delete_error`` is raised when set.
    """

    def __init__(self, group_id="sg-0123456789abcdef0", clock=None):
        self.group_id = group_id
        self.clock = clock
        self.create_calls = []
        self.delete_calls = []
        self.delete_times = []
        self.delete_outcomes = []
        self.default_delete_error = None

    def create_security_group(self, group_name, description, vpc_id, tags):
        self.create_calls.append(
            {
                "group_name": group_name,
                "description": description,
                "vpc_id": vpc_id,
                "tags": dict(tags),
            }
        )
        return self.group_id

    def delete_security_group(self, group_id):
        self.delete_calls.append(group_id)
        if self.clock is not None:
            self.delete_times.append(self.clock.monotonic())
        if self.delete_outcomes:
            outcome = self.delete_outcomes.pop(0)
            if outcome is not None:
                raise outcome
            return
        if self.default_delete_error is not None:
            raise self.default_delete_error


class RecordingIngressReconciler:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def reconcile_ingress(self, security_group_id, permissions):
        self.calls.append((security_group_id, list(permissions)))
        if self.error is not None:
            raise self.error


class RecordingTagReconciler:
    def __init__(self):
        self.calls = []

    def reconcile_tags(
        self, resource_id, desired_tags, current_tags=None, ignored_keys=frozenset()
    ):
        self.calls.append(
            {
                "resource_id": resource_id,
                "desired_tags": dict(desired_tags),
                "current_tags": current_tags,
                "ignored_keys": ignored_keys,
            }
        )


# =============================================================================
# AWS fixtures
# =============================================================================


@pytest.fixture
def aws_credentials(monkeypatch):
    """Mock AWS credentials for moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def mock_aws_environment(aws_credentials):
    """Create a mocked AWS environment."""
    with mock_aws():
        yield


@pytest.fixture
def aws_client(mock_aws_environment):
    """Create an AWSClient instance for testing."""
    return AWSClient(region="us-east-1")


@pytest.fixture
def ec2_client(mock_aws_environment):
    """Create a boto3 EC2 client for setting up test resources."""
    return boto3.client("ec2", region_name="us-east-1")


@pytest.fixture
def vpc(ec2_client):
    """Create a VPC for testing."""
    response = ec2_client.create_vpc(CidrBlock="10.0.0.0/16")
    return response["Vpc"]["VpcId"]


@pytest.fixture
def security_group(ec2_client, vpc):
    """Create a security group for testing."""
    response = ec2_client.create_security_group(
        GroupName="test-sg",
        Description="Test security group",
        VpcId=vpc,
    )
    return response["GroupId"]


@pytest.fixture
def sg_provider_client(aws_client):
    """EC2SecurityGroupClient backed by moto."""
    return EC2SecurityGroupClient(aws_client)


# =============================================================================
# Manager fixtures
# =============================================================================


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def fake_sg_client(fake_clock):
    return FakeSecurityGroupClient(clock=fake_clock)


@pytest.fixture
def ingress_reconciler():
    return RecordingIngressReconciler()


@pytest.fixture
def tag_reconciler():
    return RecordingTagReconciler()


@pytest.fixture
def tracking_provider():
    return DefaultTrackingProvider("test-cluster")


@pytest.fixture
def manager(
    fake_sg_client, tracking_provider, tag_reconciler, ingress_reconciler, fake_clock
):
    """Manager wired to test doubles, 2s poll interval and 2m deadline."""
    return SecurityGroupManager(
        fake_sg_client,
        vpc_id="vpc-0abc",
        tracking_provider=tracking_provider,
        tag_reconciler=tag_reconciler,
        ingress_reconciler=ingress_reconciler,
        deletion_poll_interval=2.0,
        deletion_timeout=120.0,
        clock=fake_clock,
    )


@pytest.fixture
def https_resource():
    """Desired security group allowing HTTPS from anywhere."""
    spec = SecurityGroupSpec(
        group_name="web-sg",
        description="web frontend",
        tags={"team": "web"},
        ingress=(
            IngressRule(
                "tcp", 443, 443, ip_ranges=(IPRange("0.0.0.0/0", "https"),)
            ),
        ),
    )
    return SecurityGroupResource(stack_id="default/web", resource_id="sg", spec=spec)


@pytest.fixture
def make_dependency_violation():
    """Factory for the error EC2 returns while a group is still referenced."""
    return dependency_violation

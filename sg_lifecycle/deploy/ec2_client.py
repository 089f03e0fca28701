"""
EC2 security group provider client.

Issues the CreateSecurityGroup / DeleteSecurityGroup calls the manager
needs and translates botocore failures into :mod:`sg_lifecycle`
exceptions. ``DependencyViolation`` becomes
:class:`~sg_lifecycle.core.exceptions.TransientDependencyError` so the
manager's deletion loop can wait it out; every other failure becomes a
:class:`~sg_lifecycle.core.exceptions.ProviderError`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Protocol

from botocore.exceptions import BotoCoreError, ClientError

from sg_lifecycle.core.aws_client import AWSClient
from sg_lifecycle.core.exceptions import ProviderError, TransientDependencyError

logger = logging.getLogger(__name__)

RESOURCE_TYPE_SECURITY_GROUP = "security-group"


class SecurityGroupClient(Protocol):
    def create_security_group(
        self,
        group_name: str,
        description: str,
        vpc_id: str,
        tags: Mapping[str, str],
    ) -> str:
        ...

    def delete_security_group(self, group_id: str) -> None:
        ...


def convert_tags_to_sdk_tags(tags: Mapping[str, str]) -> List[Dict[str, str]]:
    """Convert a tag mapping to the EC2 ``[{"Key": ..., "Value": ...}]`` form, sorted by key."""
    return [{"Key": key, "Value": tags[key]} for key in sorted(tags)]


class EC2SecurityGroupClient:
    """
    Security group operations over boto3.

    Parameters
    ----------
    aws_client : AWSClient
        Provides the (lazily created) EC2 client.

    Notes
    -----
    Creation is idempotent on group name and VPC: if a group with the same
    name already exists in the VPC, its id is returned instead of failing,
    so an outer loop can safely retry a create whose ingress step failed.
    """

    # Friendlier messages for common EC2 error codes
    ERROR_MESSAGES = {
        "DependencyViolation": "Security group is still in use by another resource",
        "InvalidGroup.NotFound": "Security group no longer exists",
        "InvalidGroup.InUse": "Security group is referenced by another security group",
        "UnauthorizedOperation": "Insufficient permissions to manage security groups",
        "InvalidVpcID.NotFound": "VPC does not exist",
    }

    TRANSIENT_ERROR_CODES = frozenset({"DependencyViolation"})

    def __init__(self, aws_client: AWSClient) -> None:
        self.aws_client = aws_client
        self._ec2_client = None

    @property
    def ec2_client(self) -> Any:
        """Lazy load EC2 client."""
        if self._ec2_client is None:
            self._ec2_client = self.aws_client.get_ec2_client()
        return self._ec2_client

    def _provider_error(
        self,
        err: Exception,
        operation: str,
        resource_id: Optional[str] = None,
    ) -> ProviderError:
        if not isinstance(err, ClientError):
            return ProviderError(
                f"{operation} failed: {err}",
                operation=operation,
                resource_id=resource_id,
            )

        error = err.response.get("Error", {})
        error_code = error.get("Code", "Unknown")
        message = self.ERROR_MESSAGES.get(error_code, error.get("Message", str(err)))
        error_class = (
            TransientDependencyError
            if error_code in self.TRANSIENT_ERROR_CODES
            else ProviderError
        )
        return error_class(
            message,
            operation=operation,
            error_code=error_code,
            resource_id=resource_id,
        )

    def create_security_group(
        self,
        group_name: str,
        description: str,
        vpc_id: str,
        tags: Mapping[str, str],
    ) -> str:
        """
        Create a security group with ``tags`` attached at creation time.

        Returns
        -------
        str
            The security group id (new, or existing with the same name).

        Raises
        ------
        ProviderError
            If EC2 rejects the request.
        """
        request: Dict[str, Any] = {
            "GroupName": group_name,
            "Description": description,
            "VpcId": vpc_id,
        }
        if tags:
            request["TagSpecifications"] = [
                {
                    "ResourceType": RESOURCE_TYPE_SECURITY_GROUP,
                    "Tags": convert_tags_to_sdk_tags(tags),
                }
            ]

        try:
            response = self.ec2_client.create_security_group(**request)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "InvalidGroup.Duplicate":
                existing = self.find_security_group(group_name, vpc_id)
                if existing is not None:
                    logger.info(
                        "securityGroup %s already exists in %s as %s",
                        group_name,
                        vpc_id,
                        existing,
                    )
                    return existing
            raise self._provider_error(e, "CreateSecurityGroup") from e
        except BotoCoreError as e:
            raise self._provider_error(e, "CreateSecurityGroup") from e

        return response["GroupId"]

    def find_security_group(self, group_name: str, vpc_id: str) -> Optional[str]:
        """Return the id of the group named ``group_name`` in ``vpc_id``, if any."""
        try:
            response = self.ec2_client.describe_security_groups(
                Filters=[
                    {"Name": "group-name", "Values": [group_name]},
                    {"Name": "vpc-id", "Values": [vpc_id]},
                ]
            )
        except (ClientError, BotoCoreError) as e:
            raise self._provider_error(e, "DescribeSecurityGroups") from e

        groups = response.get("SecurityGroups", [])
        if not groups:
            return None
        return groups[0]["GroupId"]

    def delete_security_group(self, group_id: str) -> None:
        """
        Delete a security group.

        Raises
        ------
        TransientDependencyError
            If another resource still references the group.
        ProviderError
            For any other failure, including a group that no longer exists.
        """
        try:
            self.ec2_client.delete_security_group(GroupId=group_id)
        except (ClientError, BotoCoreError) as e:
            raise self._provider_error(e, "DeleteSecurityGroup", group_id) from e

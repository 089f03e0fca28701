"""
AWS Client Module
=================

Thin wrapper around boto3 that owns the session and the EC2 client used
to manage security groups.

Transport concerns (credential resolution, request signing, throttling
retries) stay with boto3/botocore; this wrapper only configures them and
turns session construction failures into :mod:`sg_lifecycle` exceptions.

Example
-------
>>> from sg_lifecycle.core.aws_client import AWSClient
>>>
>>> client = AWSClient(region="us-east-1", profile="production")
>>> ec2 = client.get_ec2_client()

See Also
--------
sg_lifecycle.deploy.ec2_client : Security group operations on top of this.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import (
    ClientError,
    NoCredentialsError,
    NoRegionError,
    ProfileNotFound,
)

from sg_lifecycle.core.exceptions import (
    AWSClientError,
    CredentialsError,
    RegionError,
)

logger = logging.getLogger(__name__)


class AWSClient:
    """
    Lazily builds and caches a boto3 session and its service clients.

    Parameters
    ----------
    region : str, default="us-east-1"
        AWS region to connect to.
    profile : str, optional
        AWS profile name from ~/.aws/credentials.
    max_retries : int, default=3
        Maximum attempts botocore makes for throttled or failed calls.
    timeout : int, default=30
        Connect and read timeout in seconds.

    Examples
    --------
    >>> client = AWSClient(region="eu-west-1")
    >>> ec2 = client.get_ec2_client()
    >>> client.validate_credentials()
    True

    Raises
    ------
    CredentialsError
        If AWS credentials are not found or the profile does not exist.
    RegionError
        If the region is missing.
    """

    def __init__(
        self,
        region: str = "us-east-1",
        profile: Optional[str] = None,
        max_retries: int = 3,
        timeout: int = 30,
    ) -> None:
        self.region = region
        self.profile = profile
        self.max_retries = max_retries
        self.timeout = timeout

        self._session: Optional[boto3.Session] = None
        self._clients: dict[str, Any] = {}
        self._config = Config(
            retries={
                "max_attempts": self.max_retries,
                "mode": "adaptive",
            },
            connect_timeout=self.timeout,
            read_timeout=self.timeout,
        )

        logger.debug(
            "Initialized AWSClient region=%s profile=%s", region, profile
        )

    @property
    def session(self) -> boto3.Session:
        """The boto3 session, created on first access."""
        if self._session is None:
            self._session = self._create_session()
        return self._session

    def _create_session(self) -> boto3.Session:
        try:
            session_kwargs = {"region_name": self.region}
            if self.profile:
                session_kwargs["profile_name"] = self.profile
            return boto3.Session(**session_kwargs)

        except ProfileNotFound as e:
            raise CredentialsError(
                f"AWS profile '{self.profile}' not found",
                details={
                    "profile": self.profile,
                    "hint": "Check ~/.aws/credentials for available profiles",
                },
            ) from e
        except NoRegionError as e:
            raise RegionError(
                f"Invalid or missing region: {self.region}",
                region=self.region,
            ) from e

    def _get_client(self, service_name: str) -> Any:
        if service_name in self._clients:
            return self._clients[service_name]

        try:
            client = self.session.client(service_name, config=self._config)
        except NoCredentialsError as e:
            raise CredentialsError(
                "AWS credentials not found",
                details={
                    "hint": (
                        "Configure credentials using 'aws configure' or set "
                        "AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY"
                    ),
                },
            ) from e
        except NoRegionError as e:
            raise RegionError(
                f"Invalid or missing region: {self.region}",
                service=service_name,
                region=self.region,
            ) from e

        self._clients[service_name] = client
        logger.debug("Created %s client for %s", service_name, self.region)
        return client

    def get_ec2_client(self) -> Any:
        """
        Get the EC2 client.

        Returns
        -------
        EC2.Client
            Boto3 EC2 client.
        """
        return self._get_client("ec2")

    def validate_credentials(self) -> bool:
        """
        Validate AWS credentials by calling STS GetCallerIdentity.

        Returns
        -------
        bool
            True if credentials are valid.

        Raises
        ------
        CredentialsError
            If credentials are invalid, expired, or missing.
        """
        try:
            identity = self._get_client("sts").get_caller_identity()
        except NoCredentialsError as e:
            raise CredentialsError(
                "AWS credentials not found",
                details={"profile": self.profile},
            ) from e
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            raise CredentialsError(
                f"Failed to validate credentials: {error_code}",
                details={"error_code": error_code},
            ) from e

        logger.info("Credentials validated for account %s", identity["Account"])
        return True

    def __repr__(self) -> str:
        return (
            f"AWSClient(region='{self.region}', "
            f"profile={self.profile!r}, "
            f"max_retries={self.max_retries})"
        )


__all__ = ["AWSClient", "AWSClientError"]

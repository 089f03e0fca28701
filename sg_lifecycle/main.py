"""
sg-lifecycle CLI

Command-line entry point for validating security group specs and
deleting security groups with the dependency-aware retry loop.
"""

import json
import signal
import sys
from typing import Optional

import click
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from .core.aws_client import AWSClient
from .core.cancellation import CancelToken
from .core.exceptions import (
    AWSClientError,
    DeletionTimeoutError,
    InvalidIngressRuleError,
    OperationCancelledError,
    SGLifecycleError,
)
from .core.logging import setup_logging
from .deploy.ec2_client import EC2SecurityGroupClient
from .deploy.security_group_manager import (
    DEFAULT_DELETION_POLL_INTERVAL,
    DEFAULT_DELETION_TIMEOUT,
    SecurityGroupManager,
)
from .model.security_group import SecurityGroupInfo, SecurityGroupSpec
from .networking.permissions import LABEL_KEY_RAW_DESCRIPTION, translate_all


console = Console()


@click.group()
@click.version_option(version="0.1.0", prog_name="sg-lifecycle")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging level (default: WARNING)",
)
@click.option(
    "--log-file",
    default=None,
    help="Also write logs to this file",
)
def cli(log_level: str, log_file: Optional[str]):
    """
    sg-lifecycle: EC2 Security Group Lifecycle

    Validates desired security group specs and deletes security groups,
    waiting while EC2 still reports them as in use.
    """
    setup_logging(level=log_level, log_file=log_file)


def _port_range(permission) -> str:
    if permission.from_port is None and permission.to_port is None:
        return "all"
    return f"{permission.from_port}-{permission.to_port}"


@cli.command("validate")
@click.argument("spec_file", type=click.File("r"))
def validate_spec(spec_file):
    """
    Validate a security group spec and show its ingress permissions.

    SPEC_FILE is a JSON document with groupName, description, tags and
    ingress (a list of EC2 IpPermission objects).

    Examples:

        sg-lifecycle validate web-sg.json
    """
    try:
        spec = SecurityGroupSpec.from_dict(json.load(spec_file))
        permissions = translate_all(spec.ingress)
    except InvalidIngressRuleError as e:
        console.print(f"\n[red bold]Invalid ingress rule:[/red bold] {e}")
        sys.exit(1)
    except (ValueError, KeyError, TypeError) as e:
        console.print(f"\n[red bold]Invalid spec:[/red bold] {e}")
        sys.exit(1)

    table = Table(title=f"Ingress permissions for {spec.group_name}")
    table.add_column("Protocol", style="cyan")
    table.add_column("Ports")
    table.add_column("Source type")
    table.add_column("Source", style="green")
    table.add_column("Description", style="dim")
    for permission in permissions:
        table.add_row(
            permission.ip_protocol,
            _port_range(permission),
            permission.target.kind,
            permission.target.value,
            permission.labels.get(LABEL_KEY_RAW_DESCRIPTION, ""),
        )

    console.print(table)
    console.print(
        f"\n[green bold]Spec is valid:[/green bold] "
        f"{len(permissions)} ingress permission(s)"
    )


@cli.command("delete")
@click.argument("security_group_id")
@click.option(
    "--region",
    "-r",
    default="us-east-1",
    help="AWS region of the security group (default: us-east-1)",
)
@click.option(
    "--profile",
    "-p",
    default=None,
    help="AWS profile name from ~/.aws/credentials",
)
@click.option(
    "--poll-interval",
    default=DEFAULT_DELETION_POLL_INTERVAL,
    type=click.FloatRange(min=0.1),
    show_default=True,
    help="Seconds between attempts while the group is still in use",
)
@click.option(
    "--timeout",
    default=DEFAULT_DELETION_TIMEOUT,
    type=click.FloatRange(min=0),
    show_default=True,
    help="Seconds to keep retrying before giving up",
)
@click.option(
    "--yes",
    "-y",
    is_flag=True,
    help="Skip confirmation prompt",
)
def delete_security_group(
    security_group_id: str,
    region: str,
    profile: Optional[str],
    poll_interval: float,
    timeout: float,
    yes: bool,
):
    """
    Delete a security group, retrying while it is still referenced.

    Examples:

        sg-lifecycle delete sg-0123456789abcdef0 --region eu-west-1

        sg-lifecycle delete sg-0123456789abcdef0 --timeout 300 --yes
    """
    aws_client = AWSClient(region=region, profile=profile)
    try:
        aws_client.validate_credentials()
    except AWSClientError as e:
        console.print(f"\n[red bold]Authentication Error:[/red bold] {e}")
        sys.exit(1)

    if not yes and not Confirm.ask(
        f"Delete security group [bold]{security_group_id}[/bold] in {region}?",
        console=console,
    ):
        console.print("[yellow]Aborted.[/yellow]")
        return

    manager = SecurityGroupManager(
        EC2SecurityGroupClient(aws_client),
        vpc_id="",
        deletion_poll_interval=poll_interval,
        deletion_timeout=timeout,
    )

    token = CancelToken()
    previous_handler = signal.signal(
        signal.SIGINT, lambda signum, frame: token.cancel("interrupted by user")
    )
    try:
        with console.status(f"Deleting {security_group_id}..."):
            result = manager.delete(
                SecurityGroupInfo(security_group_id), cancel_token=token
            )
    except OperationCancelledError:
        console.print("\n[yellow]Deletion cancelled by user.[/yellow]")
        sys.exit(130)
    except DeletionTimeoutError as e:
        console.print(
            f"\n[red bold]Timed out:[/red bold] {security_group_id} is still in use "
            f"after {e.details.get('attempts')} attempts"
        )
        sys.exit(1)
    except SGLifecycleError as e:
        console.print(f"\n[red bold]Error:[/red bold] {e}")
        sys.exit(1)
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    console.print(
        f"\n[green bold]Deleted[/green bold] {result.security_group_id} "
        f"after {result.attempts} attempt(s) in {result.elapsed:.1f}s"
    )


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()

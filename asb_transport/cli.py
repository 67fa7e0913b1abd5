"""
asb-transport Command-Line Interface

Provisions the Azure Service Bus entities the transport needs for an
endpoint or a standalone queue.

Author: asb-transport Contributors
Date: 2026-10-18
"""

import sys
import asyncio
from typing import Any, Awaitable, Callable, Optional, TypeVar

import click
from pydantic import ValidationError

from asb_transport import __version__
from asb_transport.core.config import LogFormat, LoggingConfig, LogLevel, resolve_connection_string
from asb_transport.core.logging_config import setup_logging
from asb_transport.provisioning.constants import CONNECTION_STRING_ENV_VAR, DEFAULT_SIZE_IN_GB
from asb_transport.provisioning.exceptions import ProvisionError
from asb_transport.provisioning.management import AzureManagementClient, ManagementClient
from asb_transport.provisioning.options import ProvisioningOptions
from asb_transport.provisioning.orchestrator import ProvisioningOrchestrator

T = TypeVar("T")


connection_string_option = click.option(
    "--connection-string",
    "-c",
    help=f"Overrides environment variable '{CONNECTION_STRING_ENV_VAR}'",
)

size_option = click.option(
    "--size",
    "-s",
    type=click.IntRange(min=1),
    help=f"Queue size in GB (defaults to {DEFAULT_SIZE_IN_GB})",
)

partitioned_option = click.option(
    "--partitioned",
    "-p",
    is_flag=True,
    help="Enable partitioning",
)


def _require_subcommand(ctx: click.Context) -> None:
    """Print usage and fail when a group is invoked on its own."""
    if ctx.invoked_subcommand is None:
        click.echo("Specify a subcommand")
        click.echo(ctx.get_help())
        ctx.exit(1)


def _validated(build: Callable[[], T]) -> T:
    """Run a model builder, reporting validation failures as usage errors."""
    try:
        return build()
    except ValidationError as e:
        raise click.UsageError(
            "; ".join(error["msg"] for error in e.errors())
        ) from e


def _build_options(**values: Any) -> ProvisioningOptions:
    """Validate CLI values into ProvisioningOptions, dropping unset overrides."""
    return _validated(
        lambda: ProvisioningOptions(**{k: v for k, v in values.items() if v is not None})
    )


def _run(
    ctx: click.Context,
    connection_string: Optional[str],
    operation: Callable[[ProvisioningOrchestrator], Awaitable[Any]],
) -> Any:
    """Open a management client, run ``operation`` against it, and close it."""
    client_factory: Callable[[Optional[str]], ManagementClient] = ctx.obj.get(
        "client_factory", AzureManagementClient
    )

    async def runner():
        async with client_factory(resolve_connection_string(connection_string)) as client:
            return await operation(ProvisioningOrchestrator(client))

    try:
        return asyncio.run(runner())
    except ProvisionError as e:
        click.echo(f"[ERROR] {e.message}", err=True)
        sys.exit(1)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="asb-transport")
@click.option(
    "--log-level",
    default=LogLevel.WARNING.value,
    type=click.Choice([level.value for level in LogLevel], case_sensitive=False),
    help="Logging level",
    show_default=True,
)
@click.option(
    "--log-format",
    default=LogFormat.TEXT.value,
    type=click.Choice([fmt.value for fmt in LogFormat], case_sensitive=False),
    help="Log output format",
    show_default=True,
)
@click.pass_context
def cli(ctx, log_level: str, log_format: str):
    """
    asb-transport - Azure Service Bus transport tooling

    Creates the queues, topics and subscriptions an endpoint needs.
    """
    ctx.ensure_object(dict)
    logging_config = LoggingConfig(level=log_level.upper(), format=log_format.lower())
    setup_logging(logging_config.level, logging_config.format)
    _require_subcommand(ctx)


@cli.group(invoke_without_command=True)
@click.pass_context
def endpoint(ctx):
    """Manage endpoint infrastructure."""
    _require_subcommand(ctx)


@endpoint.command("create")
@click.argument("name")
@connection_string_option
@size_option
@partitioned_option
@click.option(
    "--topic",
    "-t",
    help="Topic name (defaults to 'bundle-1')",
)
@click.option(
    "--subscription",
    "-b",
    help="Subscription name (defaults to endpoint name)",
)
@click.pass_context
def endpoint_create(
    ctx,
    name: str,
    connection_string: Optional[str],
    size: Optional[int],
    partitioned: bool,
    topic: Optional[str],
    subscription: Optional[str],
):
    """
    Creates required infrastructure for an endpoint.

    Examples:
        asb-transport endpoint create orders
        asb-transport endpoint create orders -s 10 -p -t sales -b orders-sub
    """
    options = _build_options(
        size_in_gb=size,
        partitioned=partitioned,
        topic_name=topic,
        subscription_name=subscription,
    )
    _validated(lambda: options.queue_spec(name))
    _validated(lambda: options.subscription_spec(name))

    report = _run(
        ctx,
        connection_string,
        lambda orchestrator: orchestrator.create_endpoint_topology(name, options),
    )

    for note in report.notes:
        click.echo(note)
    click.echo(f"Endpoint '{name}' is ready.")


@cli.group(invoke_without_command=True)
@click.pass_context
def queue(ctx):
    """Manage transport queues."""
    _require_subcommand(ctx)


@queue.command("create")
@click.argument("name")
@connection_string_option
@size_option
@partitioned_option
@click.pass_context
def queue_create(ctx, name: str, connection_string: Optional[str], size: Optional[int], partitioned: bool):
    """Creates a queue with the settings required by the transport."""
    options = _build_options(size_in_gb=size, partitioned=partitioned)
    spec = _validated(lambda: options.queue_spec(name))

    step = _run(ctx, connection_string, lambda orchestrator: orchestrator.create_queue(spec))

    if step.note:
        click.echo(step.note)
    click.echo(
        f"Queue name '{name}', size '{options.size_in_gb}GB', "
        f"partitioned '{options.partitioned}' created"
    )


@queue.command("delete")
@click.argument("name")
@connection_string_option
@click.pass_context
def queue_delete(ctx, name: str, connection_string: Optional[str]):
    """Deletes a queue."""
    _run(ctx, connection_string, lambda orchestrator: orchestrator.delete_queue(name))

    click.echo(f"Queue name '{name}' deleted")


def main():
    """Main entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()

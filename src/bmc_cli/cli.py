"""CLI interface for BMC power and virtual media management."""

import functools
import logging
import sys
from contextlib import ExitStack, contextmanager
from typing import Iterator, Optional

import click

from . import __version__
from .bmc import BMCClient, create_client
from .config import (
    DEFAULT_CONFIG_FILE,
    VENDOR_LABELS,
    Config,
    describe_config,
    generate_sample_config,
    load_config,
    validate_config,
)
from .errors import BMCError
from .models import PowerState
from .output import format_system_info, format_virtual_media
from .tunnel import SSHTunnel


class BMCContext:
    """Holds global flags and builds clients from the loaded configuration."""

    def __init__(
        self,
        config_path: Optional[str] = None,
        verbose: bool = False,
        output_format: str = "text",
        no_tunnel: bool = False,
    ) -> None:
        self.config_path = config_path
        self.verbose = verbose
        self.output_format = output_format
        self.no_tunnel = no_tunnel
        self._config: Optional[Config] = None

    @property
    def config(self) -> Config:
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    def echo(self, message: str) -> None:
        """Progress message on stderr."""
        click.echo(message, err=True)

    @contextmanager
    def connect(self) -> Iterator[BMCClient]:
        """
        Yield a client for the configured BMC.

        Opens an SSH tunnel first when a jumphost is configured.
        """
        config = self.config
        validate_config(config)
        settings = config.active
        jumphost = config.jumphost

        with ExitStack() as stack:
            client_config = settings.client_config()
            if jumphost.host and not self.no_tunnel:
                tunnel = SSHTunnel(jumphost, settings)
                client_config = stack.enter_context(tunnel)
                self.echo(f"SSH tunnel: localhost:{client_config.port} -> {tunnel.route}")
            elif jumphost.host:
                self.echo("Warning: --no-tunnel specified, ignoring jumphost")

            client = stack.enter_context(create_client(config.bmc_type, client_config))
            if self.verbose:
                label = VENDOR_LABELS[client.bmc_type]
                self.echo(f"Connected to {label} at {settings.host}:{settings.port}")
            yield client


pass_context = click.make_pass_decorator(BMCContext, ensure=True)


def handle_errors(func):
    """Print BMC and validation errors and exit non-zero."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (BMCError, ValueError) as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
    return wrapper


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    envvar="BMC_CONFIG",
    help=f"Config file (default is ./{DEFAULT_CONFIG_FILE})",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    help="Output format",
)
@click.option(
    "--no-tunnel",
    is_flag=True,
    help="Disable SSH tunnel even if a jumphost is configured",
)
@click.version_option(version=__version__, prog_name="bmc-cli")
@click.pass_context
def cli(ctx, config_path, verbose, output_format, no_tunnel):
    """Manage HPE iLO and Dell iDRAC BMCs via the Redfish API.

    Power servers on and off, check their status, and mount or unmount
    virtual media. Configuration comes from a YAML file and environment
    variables.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = BMCContext(
        config_path=config_path,
        verbose=verbose,
        output_format=output_format.lower(),
        no_tunnel=no_tunnel,
    )


@cli.group()
def power():
    """Power management commands (on, off, status)."""


@power.command("on")
@pass_context
@handle_errors
def power_on(bctx):
    """Power on the server."""
    with bctx.connect() as client:
        bctx.echo("Powering on server...")
        client.set_power_state(PowerState.ON)
    click.echo("Server power on command sent successfully")


@power.command("off")
@pass_context
@handle_errors
def power_off(bctx):
    """Force the server to power off."""
    with bctx.connect() as client:
        bctx.echo("Powering off server...")
        client.set_power_state(PowerState.FORCE_OFF)
    click.echo("Server power off command sent successfully")


@power.command("status")
@pass_context
@handle_errors
def power_status(bctx):
    """Show the current power state and health of the server."""
    with bctx.connect() as client:
        bctx.echo("Checking server status...")
        info = client.get_system_info()
    click.echo(format_system_info(info, format=bctx.output_format))


@click.group()
def virtual_media():
    """Virtual media management commands (mount/unmount ISO images)."""


@virtual_media.command("mount")
@click.argument("image_url")
@pass_context
@handle_errors
def mount(bctx, image_url):
    """Mount an ISO image as virtual media.

    The image URL must be reachable from the BMC, typically over HTTP(S).

    Example:

      bmc-cli virtualmedia mount http://192.168.1.100/images/ubuntu-20.04.iso
    """
    with bctx.connect() as client:
        bctx.echo(f"Mounting virtual media: {image_url}")
        client.mount_virtual_media(image_url)
    click.echo("Virtual media mounted successfully")


@virtual_media.command("unmount")
@pass_context
@handle_errors
def unmount(bctx):
    """Unmount all virtual media from the server."""
    with bctx.connect() as client:
        bctx.echo("Unmounting virtual media...")
        client.unmount_virtual_media()
    click.echo("Virtual media unmounted successfully")


@virtual_media.command("list")
@pass_context
@handle_errors
def list_media(bctx):
    """List virtual media slots and their status."""
    with bctx.connect() as client:
        bctx.echo("Retrieving virtual media information...")
        slots = client.get_virtual_media()
    click.echo(format_virtual_media(slots, format=bctx.output_format))


cli.add_command(virtual_media, name="virtualmedia")
cli.add_command(virtual_media, name="vm")


@cli.group("config")
def config_group():
    """Configuration management commands."""


@config_group.command("generate")
@click.option(
    "--path",
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    type=click.Path(dir_okay=False),
    help="Where to write the sample file",
)
@handle_errors
def config_generate(path):
    """Generate a sample configuration file."""
    written = generate_sample_config(path)
    click.echo(f"Sample configuration file created at {written}")
    click.echo("Please edit the file with your BMC credentials and settings.")


@config_group.command("show")
@pass_context
@handle_errors
def config_show(bctx):
    """Show the current configuration (passwords hidden)."""
    click.echo("Current Configuration:")
    click.echo("=====================")
    for line in describe_config(bctx.config):
        click.echo(line)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()

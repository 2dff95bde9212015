"""CLI entry point for nodeconf.

Invoked as::

    nodeconf [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m nodeconf.cli.main

Commands
--------
validate    Load and validate a configuration document
show        Print the effective (defaulted) cluster values
fmt         Re-emit a document in canonical form
version     Show version information
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table

if TYPE_CHECKING:
    from nodeconf.config.nodes import Config

console = Console()
err_console = Console(stderr=True)


def _load_or_exit(path: str) -> "Config":
    """Load a configuration document, printing errors and exiting on failure."""
    from nodeconf import loads
    from nodeconf.config import DocumentError, EndpointParseError

    try:
        source = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {path}")
        sys.exit(1)
    except OSError as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {path}: {exc}")
        sys.exit(1)

    try:
        return loads(source)
    except DocumentError as exc:
        err_console.print(f"[red]Invalid document[/red] {path}: {exc}")
        sys.exit(1)
    except EndpointParseError as exc:
        err_console.print(f"[red]Invalid endpoint[/red] in {path}: {exc}")
        sys.exit(1)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="nodeconf")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Node and cluster configuration validator."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from nodeconf import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]nodeconf[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# validate command
# ---------------------------------------------------------------------------


@cli.command(name="validate")
@click.argument("file", type=click.Path(exists=False))
@click.option(
    "--mode",
    type=click.Choice(["cloud", "container", "metal"], case_sensitive=False),
    default="metal",
    show_default=True,
    envvar="NODECONF_MODE",
    help="Runtime mode the document will be applied in",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    envvar="NODECONF_STRICT",
    help="Treat warnings as errors",
)
@click.option(
    "--local/--on-node",
    default=True,
    show_default=True,
    help="Skip checks that inspect this host (use --on-node when running on the target machine)",
)
def validate_command(file: str, mode: str, strict: bool, local: bool) -> None:
    """Load and validate a configuration document.

    FILE is the path to the YAML document to validate.
    """
    from nodeconf.runtime import Mode
    from nodeconf.validator import Validator

    config = _load_or_exit(file)
    runtime_mode = Mode.parse(mode)

    warnings, error = Validator(local=local, strict=strict).validate(config, runtime_mode)

    for warning in warnings:
        err_console.print(f"[yellow]Warning:[/yellow] {warning}", soft_wrap=True)

    if error is not None:
        err_console.print(f"[red]{file} is invalid for {runtime_mode} mode[/red]")
        # The aggregated text is shown verbatim, without markup parsing.
        err_console.print(str(error), markup=False, highlight=False, soft_wrap=True, end="")
        sys.exit(1)

    console.print(f"[green]OK[/green] {file} is valid for {runtime_mode} mode", soft_wrap=True)


# ---------------------------------------------------------------------------
# show command
# ---------------------------------------------------------------------------


@cli.command(name="show")
@click.argument("file", type=click.Path(exists=False))
def show_command(file: str) -> None:
    """Print the effective cluster settings of a document.

    FILE is the path to the YAML document.  Unset values are shown with
    their defaults filled in.
    """
    config = _load_or_exit(file)
    cluster = config.cluster_config
    if cluster is None:
        err_console.print(f"[red]Error:[/red] {file} has no cluster section")
        sys.exit(1)

    token = cluster.token
    table = Table(title=f"Effective settings: {file}", show_header=False)
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    table.add_row("Machine type", config.machine_config.type if config.machine_config else "")
    table.add_row("Kubernetes version", cluster.version)
    table.add_row("Endpoint", str(cluster.endpoint) if cluster.endpoint is not None else "")
    table.add_row("API server port", str(cluster.local_api_server_port))
    table.add_row("CNI", cluster.cni)
    table.add_row("Pod CIDR", cluster.pod_cidr)
    table.add_row("Service CIDR", cluster.service_cidr)
    table.add_row("DNS domain", cluster.dns_domain)
    table.add_row("Cert SANs", ", ".join(cluster.cert_sans))
    table.add_row("Etcd image", cluster.etcd.image)
    table.add_row("Token ID", token.id)
    console.print(table)


# ---------------------------------------------------------------------------
# fmt command
# ---------------------------------------------------------------------------


@cli.command(name="fmt")
@click.argument("file", type=click.Path(exists=False))
@click.option("--in-place", is_flag=True, default=False, help="Rewrite the file in place")
def fmt_command(file: str, in_place: bool) -> None:
    """Re-emit a document in canonical form.

    FILE is the path to the YAML document.  Without --in-place the result
    is printed to stdout.
    """
    from nodeconf import dump

    config = _load_or_exit(file)
    formatted = dump(config)

    if in_place:
        Path(file).write_text(formatted, encoding="utf-8")
        console.print(f"[green]Formatted[/green] {file}")
    else:
        console.print(Syntax(formatted, "yaml"))


if __name__ == "__main__":
    cli()

"""skectl CLI: log in to clusters and manage kubeconfig contexts.

Commands:
    login            Log in to a server and store the token
    use-context      Switch the current context
    current-context  Print the current context
    get-contexts     List contexts in the kubeconfig
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import NoReturn

import click

from skectl import __version__
from skectl.config import DEFAULT_AUTH_PATH, DEFAULT_TIMEOUT, LoginOptions
from skectl.errors import SkectlError
from skectl.flows import current_context, list_contexts, login, use_context

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

_KUBECONFIG_HELP = "Path to the kubeconfig file (default: $KUBECONFIG or ~/.kube/config)"


def _fail(exc: Exception) -> NoReturn:
    click.echo(f"Error: {exc}", err=True)
    sys.exit(1)


# --- Root group ---


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """skectl: log in to clusters and switch kubeconfig contexts."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


# --- login command ---


@cli.command("login")
@click.argument("server")
@click.option("--username", "-u", default=None, help="Username for authentication")
@click.option("--password", "-p", default=None, help="Password for authentication")
@click.option(
    "--token", "-t", default=None,
    help="Store this bearer token instead of authenticating",
)
@click.option(
    "--insecure-skip-tls-verify", is_flag=True,
    help="Skip TLS certificate verification",
)
@click.option(
    "--auth-path", default=DEFAULT_AUTH_PATH, show_default=True,
    help="Path of the authentication endpoint",
)
@click.option(
    "--timeout", default=DEFAULT_TIMEOUT, type=float, show_default=True,
    help="Request timeout in seconds",
)
@click.option("--kubeconfig", default=None, help=_KUBECONFIG_HELP)
def login_cmd(
    server: str,
    username: str | None,
    password: str | None,
    token: str | None,
    insecure_skip_tls_verify: bool,
    auth_path: str,
    timeout: float,
    kubeconfig: str | None,
) -> None:
    """Log in to SERVER and make it the current context.

    Prompts for the username and password when they are not given.

    \b
    Examples:
      skectl login https://api.example.com:6443 -u admin
      skectl login https://api.example.com:6443 -u admin -p secret
      skectl login https://api.example.com:6443 --token sha256~abc
    """
    options = LoginOptions(
        server=server,
        username=username,
        password=password,
        token=token,
        insecure_skip_tls_verify=insecure_skip_tls_verify,
        auth_path=auth_path,
        timeout=timeout,
        kubeconfig=Path(kubeconfig) if kubeconfig else None,
    )
    try:
        result = login(options)
    except SkectlError as e:
        _fail(e)

    if result.username:
        click.echo(f"Successfully logged in as {result.username} to {result.server}")
    else:
        click.echo(f"Successfully logged in to {result.server}")
    click.echo(f'Using context "{result.context}".')


# --- context commands ---


@cli.command("use-context")
@click.argument("name")
@click.option("--kubeconfig", default=None, help=_KUBECONFIG_HELP)
def use_context_cmd(name: str, kubeconfig: str | None) -> None:
    """Switch the current context to NAME."""
    try:
        use_context(name, kubeconfig)
    except SkectlError as e:
        _fail(e)
    click.echo(f'Switched to context "{name}".')


@cli.command("current-context")
@click.option("--kubeconfig", default=None, help=_KUBECONFIG_HELP)
def current_context_cmd(kubeconfig: str | None) -> None:
    """Print the current context."""
    try:
        name = current_context(kubeconfig)
    except SkectlError as e:
        _fail(e)
    click.echo(name)


@cli.command("get-contexts")
@click.option("--kubeconfig", default=None, help=_KUBECONFIG_HELP)
@click.option("--json-output", is_flag=True, help="Output as JSON")
def get_contexts_cmd(kubeconfig: str | None, json_output: bool) -> None:
    """List contexts; the current one is marked with *."""
    try:
        contexts = list_contexts(kubeconfig)
    except SkectlError as e:
        _fail(e)

    if json_output:
        click.echo(json.dumps([asdict(c) for c in contexts], indent=2))
        return

    if not contexts:
        click.echo("No contexts found.")
        return

    for info in contexts:
        marker = click.style("*", fg="green", bold=True) if info.current else " "
        click.echo(f"{marker} {info.name:<40} server={info.server}  user={info.user}")

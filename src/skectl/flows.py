"""Command flows that tie the authenticator, prompts, and kubeconfig together.

``login``:       prompt → authenticate → upsert entry → save
``use_context``: load → validate name → set current → save

Each flow loads the kubeconfig before doing anything interactive or
networked and saves only after every step has succeeded, so a failure
leaves the file on disk exactly as it was.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from skectl.auth.authenticator import AuthConfig, Authenticator, normalize_server
from skectl.config import LoginOptions, resolve_kubeconfig_path
from skectl.errors import EmptyCredentialsError, SkectlError
from skectl.kubeconfig.store import (
    load_or_empty,
    save_kubeconfig,
    switch_context,
    upsert_login_entry,
)
from skectl.models import ClusterConfigFile
from skectl.terminal.input import LineReader, SecureLineReader

logger = logging.getLogger(__name__)

USERNAME_PROMPT = "Username: "
PASSWORD_PROMPT = "Password: "


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a successful login."""

    server: str
    context: str
    username: str | None
    kubeconfig_path: Path


@dataclass(frozen=True)
class ContextInfo:
    """One row of ``get-contexts`` output."""

    name: str
    cluster: str
    server: str
    user: str
    current: bool


def login(
    options: LoginOptions,
    *,
    line_reader: LineReader | None = None,
    secure_reader: SecureLineReader | None = None,
    authenticator_factory: Callable[[AuthConfig], Authenticator] = Authenticator,
) -> LoginResult:
    """Obtain a token for ``options.server`` and store it as the current context.

    With ``options.token`` set, the token is stored as-is and the server
    is never contacted. Otherwise any missing username or password is
    prompted for.
    """
    path = resolve_kubeconfig_path(options.kubeconfig)
    config = load_or_empty(path)

    if options.token:
        server = normalize_server(options.server)
        token = options.token
        username = options.username
        logger.debug("Storing supplied token for %s", server)
    else:
        authenticator = authenticator_factory(AuthConfig(
            server=options.server,
            auth_path=options.auth_path,
            timeout=options.timeout,
            insecure_skip_verify=options.insecure_skip_tls_verify,
        ))
        server = authenticator.server
        username, password = _collect_credentials(
            options,
            line_reader or LineReader(),
            secure_reader or SecureLineReader(),
        )
        token = authenticator.authenticate(username, password)

    upsert_login_entry(config, server, token, options.insecure_skip_tls_verify)
    save_kubeconfig(config, path)
    logger.info("Logged in to %s, kubeconfig %s", server, path)

    return LoginResult(
        server=server,
        context=server,
        username=username,
        kubeconfig_path=path,
    )


def _collect_credentials(
    options: LoginOptions,
    line_reader: LineReader,
    secure_reader: SecureLineReader,
) -> tuple[str, str]:
    username = options.username
    if not username:
        username = line_reader.read_line(USERNAME_PROMPT)
        if not username:
            raise EmptyCredentialsError("username cannot be empty")

    password = options.password
    if not password:
        password = secure_reader.read_masked(PASSWORD_PROMPT)
        if not password:
            raise EmptyCredentialsError("password cannot be empty")

    return username, password


def use_context(name: str, kubeconfig: str | Path | None = None) -> Path:
    """Switch the current context to *name* and save. Returns the kubeconfig path."""
    path = resolve_kubeconfig_path(kubeconfig)
    config = load_or_empty(path)
    switch_context(config, name)
    save_kubeconfig(config, path)
    logger.info("Switched to context %s in %s", name, path)
    return path


def current_context(kubeconfig: str | Path | None = None) -> str:
    """Return the current context name.

    Raises:
        SkectlError: If no current context is set.
    """
    config = load_or_empty(resolve_kubeconfig_path(kubeconfig))
    if not config.current_context:
        raise SkectlError("current-context is not set")
    return config.current_context


def list_contexts(kubeconfig: str | Path | None = None) -> list[ContextInfo]:
    """Return every context, sorted by name."""
    config = load_or_empty(resolve_kubeconfig_path(kubeconfig))
    return [_context_info(config, name) for name in sorted(config.contexts)]


def _context_info(config: ClusterConfigFile, name: str) -> ContextInfo:
    ctx = config.contexts[name]
    cluster = config.clusters.get(ctx.cluster)
    return ContextInfo(
        name=name,
        cluster=ctx.cluster,
        server=cluster.server if cluster else "",
        user=ctx.user,
        current=name == config.current_context,
    )

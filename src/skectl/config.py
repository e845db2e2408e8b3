"""Per-invocation settings and kubeconfig path resolution.

The kubeconfig path is resolved in this order:

1. An explicit path (the ``--kubeconfig`` option).
2. The first entry of the ``KUBECONFIG`` environment variable.
3. ``~/.kube/config`` under the user's home directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from skectl.errors import ConfigurationError

KUBECONFIG_ENV = "KUBECONFIG"
DEFAULT_KUBECONFIG_SUBPATH = Path(".kube") / "config"

DEFAULT_AUTH_PATH = "/auth"
DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class LoginOptions:
    """Everything a single ``login`` invocation needs.

    Built fresh by the CLI for each command; ``None`` for ``username`` or
    ``password`` means "prompt for it".
    """

    server: str
    username: str | None = None
    password: str | None = None
    token: str | None = None
    insecure_skip_tls_verify: bool = False
    auth_path: str = DEFAULT_AUTH_PATH
    timeout: float = DEFAULT_TIMEOUT
    kubeconfig: Path | None = None


def resolve_kubeconfig_path(explicit: str | Path | None = None) -> Path:
    """Return the kubeconfig path to read and write.

    Raises:
        ConfigurationError: If no override is set and the home directory
            cannot be determined.
    """
    if explicit:
        return Path(explicit).expanduser()

    env_value = os.environ.get(KUBECONFIG_ENV, "")
    for entry in env_value.split(os.pathsep):
        if entry.strip():
            return Path(entry.strip()).expanduser()

    try:
        home = Path.home()
    except RuntimeError as exc:
        raise ConfigurationError(f"failed to get home directory: {exc}") from exc
    return home / DEFAULT_KUBECONFIG_SUBPATH

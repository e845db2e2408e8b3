"""Load, mutate, and save the kubeconfig file.

The file is read once at the start of a command, changed in memory, and
written back with an atomic replace at the end. There is no file
locking: two commands writing the same kubeconfig at once race, and the
last writer wins.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from skectl.errors import (
    ContextNotFoundError,
    KubeconfigIOError,
    KubeconfigNotFoundError,
    KubeconfigParseError,
)
from skectl.models import (
    ClusterConfigFile,
    ClusterRecord,
    ContextRecord,
    CredentialRecord,
    KubeconfigDocument,
)

logger = logging.getLogger(__name__)

FILE_MODE = 0o600
DIR_MODE = 0o755

_LIST_SECTIONS = ("clusters", "users", "contexts")


def load_kubeconfig(path: str | Path) -> ClusterConfigFile:
    """Read and parse the kubeconfig at *path*.

    An empty file loads as an empty config.

    Raises:
        KubeconfigNotFoundError: If *path* does not exist.
        KubeconfigIOError: If the file cannot be read.
        KubeconfigParseError: If the file is not a valid kubeconfig.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise KubeconfigNotFoundError(f"kubeconfig not found: {path}") from exc
    except OSError as exc:
        raise KubeconfigIOError(f"failed to read kubeconfig {path}: {exc}") from exc

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise KubeconfigParseError(f"failed to parse kubeconfig {path}: {exc}") from exc

    config = _parse_document(data, path)
    logger.debug(
        "Loaded %s: %d cluster(s), %d user(s), %d context(s)",
        path, len(config.clusters), len(config.credentials), len(config.contexts),
    )
    for problem in config.dangling_references():
        logger.warning("kubeconfig %s: %s", path, problem)
    return config


def load_or_empty(path: str | Path) -> ClusterConfigFile:
    """Like :func:`load_kubeconfig`, but a missing file yields an empty config."""
    try:
        return load_kubeconfig(path)
    except KubeconfigNotFoundError:
        logger.debug("No kubeconfig at %s, starting empty", path)
        return ClusterConfigFile()


def _parse_document(data: Any, path: Path) -> ClusterConfigFile:
    if data is None:
        return ClusterConfigFile()
    if not isinstance(data, dict):
        raise KubeconfigParseError(
            f"failed to parse kubeconfig {path}: expected a YAML mapping, "
            f"got {type(data).__name__}",
        )

    # kubectl writes ``null`` for empty sections.
    cleaned = {
        key: value for key, value in data.items()
        if not (value is None and key in (*_LIST_SECTIONS, "preferences", "current-context"))
    }
    try:
        doc = KubeconfigDocument.model_validate(cleaned)
    except ValidationError as exc:
        raise KubeconfigParseError(f"failed to parse kubeconfig {path}: {exc}") from exc
    return ClusterConfigFile.from_document(doc)


def save_kubeconfig(config: ClusterConfigFile, path: str | Path) -> None:
    """Write *config* to *path*, creating parent directories as needed.

    A symlinked *path* is followed so the link target is updated and the
    link itself is kept. The content goes to a private (0600) sibling
    temporary file which then replaces the target, so a failed write
    leaves the existing file untouched.

    Raises:
        KubeconfigIOError: If the directory or file cannot be written.
    """
    path = Path(path).resolve()
    tmp_path = path.with_name(f".{path.name}.tmp")
    text = yaml.safe_dump(
        config.to_document(), default_flow_style=False, sort_keys=False,
    )

    try:
        path.parent.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
    except OSError as exc:
        raise KubeconfigIOError(
            f"failed to create kubeconfig directory {path.parent}: {exc}",
        ) from exc

    try:
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            # a stale temp file keeps its old mode; O_CREAT only applies to new files
            os.fchmod(fh.fileno(), FILE_MODE)
            fh.write(text)
        tmp_path.replace(path)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise KubeconfigIOError(f"failed to write kubeconfig {path}: {exc}") from exc

    logger.debug("Wrote kubeconfig %s", path)


def switch_context(config: ClusterConfigFile, name: str) -> None:
    """Make *name* the current context.

    Raises:
        ContextNotFoundError: If *name* is not a known context; *config*
            is left unchanged.
    """
    if name not in config.contexts:
        raise ContextNotFoundError(name)
    config.current_context = name


def upsert_login_entry(
    config: ClusterConfigFile,
    server: str,
    token: str,
    insecure_skip_tls_verify: bool = False,
) -> None:
    """Insert or overwrite the cluster, user, and context for *server*.

    All three entries are keyed by *server*, and it becomes the current
    context. Entries for other servers are not touched. Unknown fields on
    an existing cluster or user entry (a CA bundle, say) are kept.
    """
    cluster = config.clusters.get(server) or ClusterRecord()
    config.clusters[server] = cluster.model_copy(
        update={"server": server, "insecure_skip_tls_verify": insecure_skip_tls_verify},
    )

    credential = config.credentials.get(server) or CredentialRecord()
    config.credentials[server] = credential.model_copy(update={"token": token})

    context = config.contexts.get(server)
    if context is None:
        config.contexts[server] = ContextRecord(cluster=server, user=server)
    else:
        config.contexts[server] = context.model_copy(
            update={"cluster": server, "user": server},
        )

    config.current_context = server

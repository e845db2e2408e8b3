"""Core data models for skectl.

Defines the schemas for:
- Kubeconfig records (clusters, users, contexts) and the file itself
- The authentication wire payloads (request and response bodies)

Kubeconfig records allow unknown fields so that data written by other
tools (certificate authorities, namespaces, extensions) survives a
load/save cycle untouched.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# --- Kubeconfig records ---


class ClusterRecord(BaseModel):
    """Connection metadata for one cluster endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    server: str = ""
    insecure_skip_tls_verify: bool = Field(
        default=False, alias="insecure-skip-tls-verify",
    )


class CredentialRecord(BaseModel):
    """A stored bearer token (a kubeconfig ``user`` entry)."""

    model_config = ConfigDict(extra="allow")

    token: str = ""


class ContextRecord(BaseModel):
    """A named pairing of a cluster and a credential."""

    model_config = ConfigDict(extra="allow")

    cluster: str
    user: str


# --- On-disk named-list entries ---


class NamedCluster(BaseModel):
    name: str
    cluster: ClusterRecord = Field(default_factory=ClusterRecord)


class NamedCredential(BaseModel):
    name: str
    user: CredentialRecord = Field(default_factory=CredentialRecord)


class NamedContext(BaseModel):
    name: str
    context: ContextRecord


class KubeconfigDocument(BaseModel):
    """The kubeconfig file exactly as laid out on disk (named lists)."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    api_version: str = Field(default="v1", alias="apiVersion")
    kind: str = "Config"
    preferences: dict[str, Any] = Field(default_factory=dict)
    clusters: list[NamedCluster] = Field(default_factory=list)
    users: list[NamedCredential] = Field(default_factory=list)
    contexts: list[NamedContext] = Field(default_factory=list)
    current_context: str = Field(default="", alias="current-context")


# --- In-memory kubeconfig ---


class ClusterConfigFile(BaseModel):
    """The kubeconfig held in memory, with every section keyed by name.

    Invariant kept by every mutating operation: ``current_context`` is
    empty or a key of ``contexts``, and each context's ``cluster`` and
    ``user`` are keys of ``clusters`` and ``credentials``.
    """

    clusters: dict[str, ClusterRecord] = Field(default_factory=dict)
    credentials: dict[str, CredentialRecord] = Field(default_factory=dict)
    contexts: dict[str, ContextRecord] = Field(default_factory=dict)
    current_context: str = ""
    preferences: dict[str, Any] = Field(default_factory=dict)
    extra_fields: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_document(cls, doc: KubeconfigDocument) -> ClusterConfigFile:
        extra = dict(doc.model_extra or {})
        # Later duplicates win, matching how kubectl merges named lists.
        return cls(
            clusters={c.name: c.cluster for c in doc.clusters},
            credentials={u.name: u.user for u in doc.users},
            contexts={c.name: c.context for c in doc.contexts},
            current_context=doc.current_context,
            preferences=doc.preferences,
            extra_fields=extra,
        )

    def to_document(self) -> dict[str, Any]:
        """Render the kubeconfig layout as plain data ready for YAML."""
        data: dict[str, Any] = {
            "apiVersion": "v1",
            "kind": "Config",
            "preferences": self.preferences,
            "clusters": [
                {"name": name, "cluster": _dump_record(record)}
                for name, record in self.clusters.items()
            ],
            "users": [
                {"name": name, "user": _dump_record(record)}
                for name, record in self.credentials.items()
            ],
            "contexts": [
                {"name": name, "context": _dump_record(record)}
                for name, record in self.contexts.items()
            ],
            "current-context": self.current_context,
        }
        for key, value in self.extra_fields.items():
            data.setdefault(key, value)
        return data

    def dangling_references(self) -> list[str]:
        """Describe every cross-reference that points at a missing entry."""
        problems: list[str] = []
        if self.current_context and self.current_context not in self.contexts:
            problems.append(
                f"current-context {self.current_context!r} has no context entry",
            )
        for name, ctx in self.contexts.items():
            if ctx.cluster not in self.clusters:
                problems.append(f"context {name!r} references missing cluster {ctx.cluster!r}")
            if ctx.user not in self.credentials:
                problems.append(f"context {name!r} references missing user {ctx.user!r}")
        return problems


def _dump_record(record: BaseModel) -> dict[str, Any]:
    return record.model_dump(mode="json", by_alias=True, exclude_defaults=True)


# --- Auth wire payloads ---


class Credentials(BaseModel):
    """Request body sent to the authentication endpoint."""

    username: str
    password: str


class AuthResult(BaseModel):
    """Response body returned by the authentication endpoint."""

    model_config = ConfigDict(extra="ignore")

    token: str | None = None
    error: str | None = None

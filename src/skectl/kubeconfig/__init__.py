"""Persisted multi-cluster configuration (kubeconfig) store."""

from skectl.kubeconfig.store import (
    load_kubeconfig,
    load_or_empty,
    save_kubeconfig,
    switch_context,
    upsert_login_entry,
)

__all__ = [
    "load_kubeconfig",
    "load_or_empty",
    "save_kubeconfig",
    "switch_context",
    "upsert_login_entry",
]

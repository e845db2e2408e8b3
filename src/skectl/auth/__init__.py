"""Token authentication against a cluster's HTTP auth endpoint."""

from skectl.auth.authenticator import (
    AuthConfig,
    Authenticator,
    normalize_auth_path,
    normalize_server,
)

__all__ = [
    "AuthConfig",
    "Authenticator",
    "normalize_auth_path",
    "normalize_server",
]

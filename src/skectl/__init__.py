"""skectl: log in to cluster endpoints and manage kubeconfig contexts."""

__version__ = "0.1.0"

from skectl.auth.authenticator import AuthConfig, Authenticator
from skectl.config import LoginOptions, resolve_kubeconfig_path
from skectl.errors import (
    AuthFailedError,
    ConfigurationError,
    ContextNotFoundError,
    EmptyCredentialsError,
    EmptyTokenError,
    InputInterruptedError,
    InputReadError,
    InvalidServerError,
    KubeconfigIOError,
    KubeconfigNotFoundError,
    KubeconfigParseError,
    NetworkError,
    ParseError,
    ResponseParseError,
    SkectlError,
)
from skectl.flows import LoginResult, login, use_context
from skectl.models import (
    ClusterConfigFile,
    ClusterRecord,
    ContextRecord,
    CredentialRecord,
)
from skectl.terminal.input import LineReader, SecureLineReader

__all__ = [
    "AuthConfig",
    "AuthFailedError",
    "Authenticator",
    "ClusterConfigFile",
    "ClusterRecord",
    "ConfigurationError",
    "ContextNotFoundError",
    "ContextRecord",
    "CredentialRecord",
    "EmptyCredentialsError",
    "EmptyTokenError",
    "InputInterruptedError",
    "InputReadError",
    "InvalidServerError",
    "KubeconfigIOError",
    "KubeconfigNotFoundError",
    "KubeconfigParseError",
    "LineReader",
    "LoginOptions",
    "LoginResult",
    "NetworkError",
    "ParseError",
    "ResponseParseError",
    "SecureLineReader",
    "SkectlError",
    "__version__",
    "login",
    "resolve_kubeconfig_path",
    "use_context",
]

"""Exception hierarchy for skectl.

Every failure that reaches the command boundary is a :class:`SkectlError`
subclass. Lower-level exceptions (``urllib``, ``yaml``, ``OSError``) are
re-raised as one of these with ``raise ... from exc`` so the cause chain
is kept.

Hierarchy
---------
SkectlError
├── InvalidServerError
├── EmptyCredentialsError
├── NetworkError
├── AuthFailedError
├── EmptyTokenError
├── ParseError
│   ├── ResponseParseError
│   └── KubeconfigParseError
├── ContextNotFoundError
├── InputInterruptedError
├── InputReadError
├── KubeconfigIOError
│   └── KubeconfigNotFoundError
└── ConfigurationError
"""

from __future__ import annotations


class SkectlError(Exception):
    """Base exception for all skectl errors."""


# --- Authentication ---


class InvalidServerError(SkectlError):
    """Raised when the server URL is missing or cannot be parsed."""


class EmptyCredentialsError(SkectlError):
    """Raised when a username or password is empty."""

    def __init__(self, message: str = "username and password are required") -> None:
        super().__init__(message)


class NetworkError(SkectlError):
    """Raised on transport failures, including timeouts."""


class AuthFailedError(SkectlError):
    """Raised when the server answers with a non-200 status."""

    def __init__(self, message: str, *, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class EmptyTokenError(SkectlError):
    """Raised when a 200 response carries a blank token."""

    def __init__(self, message: str = "received empty token from server") -> None:
        super().__init__(message)


# --- Parsing ---


class ParseError(SkectlError):
    """Raised when structured data cannot be decoded."""


class ResponseParseError(ParseError):
    """Raised when an authentication response body is not valid."""


class KubeconfigParseError(ParseError):
    """Raised when an existing kubeconfig file is malformed."""


# --- Contexts ---


class ContextNotFoundError(SkectlError):
    """Raised when a context name is not present in the kubeconfig."""

    def __init__(self, name: str) -> None:
        super().__init__(f"context {name!r} does not exist")
        self.name = name


# --- Terminal input ---


class InputInterruptedError(SkectlError):
    """Raised when the user presses Ctrl+C during secure input."""

    def __init__(self, message: str = "interrupted by user") -> None:
        super().__init__(message)


class InputReadError(SkectlError):
    """Raised when the input source fails or ends before a line is read."""


# --- Filesystem / configuration ---


class KubeconfigIOError(SkectlError):
    """Raised when the kubeconfig cannot be read, written, or its directory created."""


class KubeconfigNotFoundError(KubeconfigIOError):
    """Raised when the kubeconfig file does not exist."""


class ConfigurationError(SkectlError):
    """Raised when the local environment cannot supply required settings."""

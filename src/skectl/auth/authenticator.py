"""Exchange a username/password pair for a bearer token over HTTP.

Sends a single JSON ``POST {server}{auth_path}`` and expects
``{"token": "..."}`` back. There is no retry: a transport failure or
timeout surfaces immediately as :class:`NetworkError`.

Uses stdlib ``urllib.request``, no extra dependencies required.
"""

from __future__ import annotations

import http.client
import json
import logging
import ssl
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from http import HTTPStatus

from pydantic import ValidationError

from skectl.config import DEFAULT_AUTH_PATH, DEFAULT_TIMEOUT
from skectl.errors import (
    AuthFailedError,
    EmptyCredentialsError,
    EmptyTokenError,
    InvalidServerError,
    NetworkError,
    ResponseParseError,
)
from skectl.models import AuthResult, Credentials

logger = logging.getLogger(__name__)

DEFAULT_SCHEME = "https"
_SUPPORTED_SCHEMES = ("http", "https")


@dataclass
class AuthConfig:
    """Settings for an :class:`Authenticator`."""

    server: str
    auth_path: str = DEFAULT_AUTH_PATH
    timeout: float = DEFAULT_TIMEOUT
    insecure_skip_verify: bool = False


def normalize_server(server: str) -> str:
    """Return *server* with an explicit scheme and no trailing slash.

    Raises:
        InvalidServerError: If *server* is empty or not a usable URL.
    """
    server = (server or "").strip()
    if not server:
        raise InvalidServerError("server URL is required")

    if "://" not in server:
        server = f"{DEFAULT_SCHEME}://{server}"

    try:
        parts = urllib.parse.urlsplit(server)
        parts.port  # noqa: B018 - raises ValueError on a malformed port
    except ValueError as exc:
        raise InvalidServerError(f"invalid server URL {server!r}: {exc}") from exc

    if parts.scheme.lower() not in _SUPPORTED_SCHEMES:
        raise InvalidServerError(
            f"invalid server URL {server!r}: unsupported scheme {parts.scheme!r}",
        )
    if not parts.hostname:
        raise InvalidServerError(f"invalid server URL {server!r}: missing host")

    return urllib.parse.urlunsplit(parts).rstrip("/")


def normalize_auth_path(auth_path: str) -> str:
    """Return *auth_path* with exactly one leading slash."""
    auth_path = (auth_path or "").strip().lstrip("/")
    if not auth_path:
        return DEFAULT_AUTH_PATH
    return "/" + auth_path


class Authenticator:
    """HTTP authenticator bound to one normalized server.

    Usage::

        authenticator = Authenticator(AuthConfig(server="api.example.com:6443"))
        token = authenticator.authenticate("admin", "secret")
    """

    def __init__(self, config: AuthConfig) -> None:
        self._server = normalize_server(config.server)
        self._auth_path = normalize_auth_path(config.auth_path)
        self._timeout = config.timeout
        self._insecure = config.insecure_skip_verify
        self._ssl_context = _build_ssl_context(config.insecure_skip_verify)

    @property
    def server(self) -> str:
        return self._server

    @property
    def auth_url(self) -> str:
        return self._server + self._auth_path

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def insecure_skip_verify(self) -> bool:
        return self._insecure

    def authenticate(self, username: str, password: str) -> str:
        """POST the credentials and return the issued token.

        Raises:
            EmptyCredentialsError: Either field is empty (no request is sent).
            NetworkError: The request could not be completed.
            AuthFailedError: The server answered with a non-200 status.
            ResponseParseError: A 200 response body is not a valid auth result.
            EmptyTokenError: A 200 response carried a blank token.
        """
        if not username or not password:
            raise EmptyCredentialsError

        body = Credentials(username=username, password=password).model_dump_json()
        req = urllib.request.Request(
            self.auth_url,
            data=body.encode("utf-8"),
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            method="POST",
        )

        logger.debug("POST %s (user=%s)", self.auth_url, username)
        status, raw = self._send(req)
        logger.debug("Auth response from %s: HTTP %d", self.auth_url, status)

        try:
            result = _decode_result(raw)
        except ResponseParseError as exc:
            if status != HTTPStatus.OK:
                raise AuthFailedError(
                    f"authentication failed with status code {status}",
                    status_code=status,
                ) from exc
            raise

        if status != HTTPStatus.OK:
            if result.error:
                raise AuthFailedError(
                    f"authentication failed: {result.error}", status_code=status,
                )
            raise AuthFailedError(
                f"authentication failed with status code {status}",
                status_code=status,
            )

        if not result.token:
            raise EmptyTokenError

        return result.token

    def _send(self, req: urllib.request.Request) -> tuple[int, bytes]:
        """Send *req* once and return ``(status, body)``.

        The body is always read to the end and the response closed, for
        error statuses as well as successes.
        """
        try:
            with urllib.request.urlopen(  # noqa: S310
                req, timeout=self._timeout, context=self._ssl_context,
            ) as resp:
                return resp.status, resp.read()
        except urllib.error.HTTPError as exc:
            try:
                return exc.code, exc.read()
            except (OSError, http.client.HTTPException) as read_exc:
                raise NetworkError(
                    f"failed to read response from {self.auth_url}: {read_exc}",
                ) from read_exc
            finally:
                exc.close()
        except urllib.error.URLError as exc:
            raise NetworkError(
                f"failed to send request to {self.auth_url}: {exc.reason}",
            ) from exc
        except (TimeoutError, OSError, http.client.HTTPException) as exc:
            raise NetworkError(
                f"failed to send request to {self.auth_url}: {exc}",
            ) from exc


def _build_ssl_context(insecure_skip_verify: bool) -> ssl.SSLContext:
    context = ssl.create_default_context()
    if insecure_skip_verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def _decode_result(raw: bytes) -> AuthResult:
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ResponseParseError(f"failed to decode response: {exc}") from exc

    if not isinstance(data, dict):
        raise ResponseParseError(
            f"failed to decode response: expected a JSON object, got {type(data).__name__}",
        )
    try:
        return AuthResult.model_validate(data)
    except ValidationError as exc:
        raise ResponseParseError(f"failed to decode response: {exc}") from exc

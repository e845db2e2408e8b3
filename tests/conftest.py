"""Shared fixtures: a local stub auth endpoint and an isolated kubeconfig."""

from __future__ import annotations

import json
import threading
from collections.abc import Generator
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any

import pytest


@dataclass
class StubAuthServer:
    """Configurable canned response plus a log of received requests."""

    url: str = ""
    status: int = 200
    body: Any = field(default_factory=lambda: {"token": "tok-123"})
    requests: list[dict[str, Any]] = field(default_factory=list)
    content_length: int | None = None


def _make_handler(stub: StubAuthServer) -> type[BaseHTTPRequestHandler]:
    class Handler(BaseHTTPRequestHandler):
        def do_POST(self) -> None:  # noqa: N802
            length = int(self.headers.get("Content-Length", "0"))
            raw = self.rfile.read(length)
            stub.requests.append({
                "path": self.path,
                "content_type": self.headers.get("Content-Type"),
                "accept": self.headers.get("Accept"),
                "body": json.loads(raw.decode("utf-8")) if raw else None,
            })
            payload = stub.body if isinstance(stub.body, bytes) else json.dumps(stub.body).encode()
            self.send_response(stub.status)
            self.send_header("Content-Type", "application/json")
            length_header = stub.content_length if stub.content_length is not None else len(payload)
            self.send_header("Content-Length", str(length_header))
            self.end_headers()
            self.wfile.write(payload)

        def log_message(self, format: str, *args: Any) -> None:  # noqa: A002
            pass

    return Handler


@pytest.fixture()
def auth_server() -> Generator[StubAuthServer, None, None]:
    """Run a stub auth endpoint on a free localhost port for one test."""
    stub = StubAuthServer()
    server = ThreadingHTTPServer(("127.0.0.1", 0), _make_handler(stub))
    host, port = server.server_address[:2]
    stub.url = f"http://{host}:{port}"
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield stub
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)


@pytest.fixture()
def kubeconfig_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point KUBECONFIG at a not-yet-existing file under tmp_path."""
    path = tmp_path / ".kube" / "config"
    monkeypatch.setenv("KUBECONFIG", str(path))
    return path

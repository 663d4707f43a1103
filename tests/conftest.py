"""Shared pytest fixtures and configuration for the termux-am test suite.

Guidelines
----------
* Core tests drive the protocol through ``ScriptedConnection``, an
  in-memory fake — no sockets.
* End-to-end tests talk to ``FakeAmServer``, a one-shot Unix socket peer
  running in a thread under a short temporary directory.
* Tests must not depend on a real Termux installation or on the
  caller's environment variables.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from collections.abc import Callable, Iterator

import pytest

from fakes import FakeAmServer

_ENV_VARS = (
    "TERMUX_AM_SOCKET",
    "TERMUX_AM_TIMEOUT",
    "TERMUX_AM_LOG_LEVEL",
    "TERMUX_APP__AM_SOCKET_SERVER_ENABLED",
    "PREFIX",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def short_tmp() -> Iterator[str]:
    """A temporary directory with a path short enough for ``sun_path``."""
    path = tempfile.mkdtemp(prefix="am-", dir="/tmp" if os.path.isdir("/tmp") else None)
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def am_server(short_tmp: str) -> Iterator[Callable[[bytes], FakeAmServer]]:
    """Factory starting a ``FakeAmServer`` that replies with the given bytes."""
    servers: list[FakeAmServer] = []

    def _start(reply: bytes) -> FakeAmServer:
        server = FakeAmServer(os.path.join(short_tmp, f"sock{len(servers)}"), reply)
        servers.append(server)
        return server

    yield _start
    for server in servers:
        server.close()

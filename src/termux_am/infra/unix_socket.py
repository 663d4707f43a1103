"""Unix stream socket implementation of the connection protocols.

This module is the **only** place in the codebase that touches the
:mod:`socket` module.  Every ``OSError`` is caught here and re-raised as
:class:`~termux_am.exceptions.ConnectionError` (before the connection
is up) or :class:`~termux_am.exceptions.TransportError` (after).
"""

from __future__ import annotations

import logging
import socket

from termux_am.config import validate_socket_path
from termux_am.exceptions import ConnectionError, TransportError, append_server_hint

logger = logging.getLogger(__name__)

# Report a vanished peer as EPIPE instead of raising SIGPIPE.
_SEND_FLAGS: int = getattr(socket, "MSG_NOSIGNAL", 0)


class UnixSocketConnection:
    """Concrete :class:`~termux_am.core.protocols.Connection` over ``AF_UNIX``.

    Usable as a context manager; :meth:`close` is idempotent.
    """

    def __init__(self, sock: socket.socket) -> None:
        self._sock: socket.socket = sock
        self._closed: bool = False

    def __enter__(self) -> UnixSocketConnection:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def send_all(self, data: bytes) -> None:
        """Write all of *data*, looping over partial sends.

        Raises
        ------
        TransportError
            On any socket error or timeout.
        """
        view = memoryview(data)
        total = 0
        try:
            while total < len(view):
                total += self._sock.send(view[total:], _SEND_FLAGS)
        except socket.timeout as exc:
            raise TransportError(
                "Socket write timed out.",
                hint="Increase --timeout or check that the am server is responsive.",
            ) from exc
        except OSError as exc:
            raise TransportError(f"Socket write error: {exc}") from exc

    def shutdown_write(self) -> None:
        try:
            self._sock.shutdown(socket.SHUT_WR)
        except OSError as exc:
            raise TransportError(f"Socket shutdown error: {exc}") from exc

    def recv(self, size: int) -> bytes:
        """Read at most *size* bytes; ``b""`` means the peer closed.

        Raises
        ------
        TransportError
            On any socket error or timeout.
        """
        try:
            return self._sock.recv(size)
        except socket.timeout as exc:
            raise TransportError(
                "Socket read timed out.",
                hint="Increase --timeout or check that the am server is responsive.",
            ) from exc
        except OSError as exc:
            raise TransportError(f"Socket read error: {exc}") from exc

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._sock.close()


class UnixSocketConnector:
    """Concrete :class:`~termux_am.core.protocols.Connector`.

    Parameters
    ----------
    timeout:
        Optional per-operation timeout in seconds applied to the connect
        and to every later send/recv.  ``None`` (default) blocks forever.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._timeout: float | None = timeout

    def connect(self, endpoint: str) -> UnixSocketConnection:
        """Connect once to the socket at *endpoint*.

        Raises
        ------
        ConfigurationError
            If *endpoint* is not a valid socket path.
        ConnectionError
            If the socket cannot be created or the connect fails.
        """
        validate_socket_path(endpoint)

        try:
            sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        except OSError as exc:
            raise ConnectionError(f"Could not create socket: {exc}") from exc

        sock.settimeout(self._timeout)
        try:
            sock.connect(endpoint)
        except OSError as exc:
            sock.close()
            logger.debug("Connect to %s failed: %s", endpoint, exc)
            raise ConnectionError(
                f"Could not connect to socket: {exc}",
                hint=append_server_hint(f"Socket path: {endpoint}"),
            ) from exc

        logger.debug("Connected to %s", endpoint)
        return UnixSocketConnection(sock)

"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete socket
implementations — so every phase of an exchange can be driven by an
in-memory fake in tests.
"""

from __future__ import annotations

from typing import Protocol


class Connection(Protocol):
    """A connected, half-closable byte stream.

    Implementations must map every transport failure to
    :class:`~termux_am.exceptions.TransportError`.
    """

    def send_all(self, data: bytes) -> None:
        """Write all of *data*, re-driving partial writes."""
        ...  # pragma: no cover

    def shutdown_write(self) -> None:
        """Close the write direction, leaving the read direction open."""
        ...  # pragma: no cover

    def recv(self, size: int) -> bytes:
        """Read at most *size* bytes; ``b""`` signals end-of-stream."""
        ...  # pragma: no cover

    def close(self) -> None:
        """Release the connection.  Must be safe to call twice."""
        ...  # pragma: no cover


class Connector(Protocol):
    """Contract for opening a :class:`Connection` to an endpoint."""

    def connect(self, endpoint: str) -> Connection:
        """Open a stream connection to the socket at *endpoint*.

        Raises
        ------
        ConfigurationError
            When *endpoint* is not a usable socket path.
        ConnectionError
            When the socket cannot be created or the connect fails.
        """
        ...  # pragma: no cover

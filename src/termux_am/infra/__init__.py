"""Infrastructure layer — operating-system integration.

This layer owns the Unix socket.  Every raw ``OSError`` must be caught
here and re-raised as a :class:`~termux_am.exceptions.TermuxAmError`
subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
"""

from termux_am.infra.unix_socket import UnixSocketConnection, UnixSocketConnector

__all__: list[str] = [
    "UnixSocketConnection",
    "UnixSocketConnector",
]

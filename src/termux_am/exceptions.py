"""Custom exception hierarchy for termux-am.

All exceptions that cross layer boundaries must inherit from
:class:`TermuxAmError`.  Raw ``OSError`` / ``socket.timeout`` instances
must NEVER propagate beyond the infrastructure layer — they must be
caught and re-raised as a typed subclass defined here.

Hierarchy
---------
TermuxAmError
├── ConnectionError
│   └── ConfigurationError
├── TransportError
├── ProtocolViolation
│   └── ChunkTooLong
├── InvalidExitCode
└── ExitCodeOutOfRange
"""

from __future__ import annotations


class TermuxAmError(Exception):
    """Base exception for all termux-am errors.

    Every fatal condition of an exchange maps to a subclass of this
    exception so that the CLI error boundary can render a clean message
    and pick the local failure status.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Endpoint / connection ---------------------------------------------------

class ConnectionError(TermuxAmError):
    """Raised when the socket cannot be created or connected."""


class ConfigurationError(ConnectionError):
    """Raised when the endpoint or another setting is malformed.

    Detected before any socket is created.
    """


# --- Established connection --------------------------------------------------

class TransportError(TermuxAmError):
    """Raised when a send or receive fails after the connection is up."""


# --- Reply decoding ----------------------------------------------------------

class ProtocolViolation(TermuxAmError):
    """Raised when the reply does not follow the expected framing."""


class ChunkTooLong(ProtocolViolation):
    """Raised when a bounded chunk fills up without NUL or end-of-stream."""


class InvalidExitCode(TermuxAmError):
    """Raised when the exit-code segment is empty or not all decimal digits."""


class ExitCodeOutOfRange(TermuxAmError):
    """Raised when the exit code parses but lies outside ``0..255``."""


def append_server_hint(hint: str) -> str:
    """Append am socket server guidance to an existing hint text.

    The suggestion is appended only once and preserves the original
    hint content verbatim.
    """
    marker = "Make sure the am socket server is enabled:"
    if marker in hint:
        return hint
    return "\n".join(
        (
            hint,
            marker,
            "    set 'run-termux-am-socket-server=true' in ~/.termux/termux.properties",
        )
    )

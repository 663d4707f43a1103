"""Domain models for termux-am.

All models are **frozen** dataclasses or enums — immutable value objects
with no behaviour beyond data access.  They carry zero I/O and must
remain pure across the entire lifecycle.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


EXIT_CODE_CAPACITY: int = 9
"""Usable bytes of the exit-code chunk (the terminator slot is extra)."""

OUTPUT_CHUNK_CAPACITY: int = 4095
"""Usable bytes of one stdout/stderr chunk."""

MAX_EXIT_CODE: int = 255


# ---------------------------------------------------------------------------
# Chunk framing
# ---------------------------------------------------------------------------

class ChunkEnd(enum.Enum):
    """How a chunk was terminated."""

    DELIMITER = "delimiter"
    """A NUL byte was read; it is consumed and not part of the data."""

    EOF = "eof"
    """The peer closed its write side."""

    FULL = "full"
    """Capacity was reached before any terminator."""


@dataclass(frozen=True, slots=True)
class Chunk:
    """One bounded read unit of a reply segment."""

    data: bytes
    end: ChunkEnd

    @property
    def more(self) -> bool:
        """``True`` while the stream may still carry data after this chunk."""
        return self.end is not ChunkEnd.EOF

    @property
    def ends_segment(self) -> bool:
        return self.end is not ChunkEnd.FULL


# ---------------------------------------------------------------------------
# Exchange
# ---------------------------------------------------------------------------

class ClientState(enum.Enum):
    """Lifecycle of a single request/response exchange."""

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    SENT = "sent"
    READING_EXIT_CODE = "reading-exit-code"
    READING_STDOUT = "reading-stdout"
    READING_STDERR = "reading-stderr"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class Reply:
    """Decoded reply of the am socket server."""

    exit_code: int
    """Peer-provided exit code in ``0..255``."""

    stdout: str | None = None
    """Collected stdout text, or ``None`` when it was streamed to a sink."""

    stderr: str | None = None
    """Collected stderr text, or ``None`` when it was streamed to a sink."""

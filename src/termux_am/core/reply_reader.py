"""Reply decoding — chunk framing and the three reply phases.

The server answers with three segments in fixed order::

    <exit code> NUL <stdout> NUL <stderr> <close>

Each segment ends at the first NUL byte or at end-of-stream.  Segments
are consumed as bounded chunks: the exit-code chunk holds at most
:data:`~termux_am.core.models.EXIT_CODE_CAPACITY` bytes and overflowing
it is a framing violation, while output chunks of
:data:`~termux_am.core.models.OUTPUT_CHUNK_CAPACITY` bytes are only a
buffering unit and the segment simply continues in the next chunk.

:class:`ChunkReader` reads from the connection in blocks and scans for
NUL internally, yielding the same chunk boundaries as a reader that
pulls one byte per ``recv``.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Callable, Iterator
from typing import BinaryIO

from termux_am.core.models import (
    EXIT_CODE_CAPACITY,
    MAX_EXIT_CODE,
    OUTPUT_CHUNK_CAPACITY,
    Chunk,
    ChunkEnd,
    ClientState,
    Reply,
)
from termux_am.core.protocols import Connection
from termux_am.exceptions import ChunkTooLong, ExitCodeOutOfRange, InvalidExitCode

logger = logging.getLogger(__name__)

DEFAULT_READ_SIZE: int = 4096

_NUL = b"\0"


class ChunkReader:
    """Split the byte stream of a :class:`Connection` into chunks.

    Parameters
    ----------
    connection:
        Source of reply bytes.  Only :meth:`Connection.recv` is used.
    read_size:
        Maximum number of bytes requested per ``recv`` call.
    """

    def __init__(self, connection: Connection, *, read_size: int = DEFAULT_READ_SIZE) -> None:
        if read_size < 1:
            raise ValueError("read_size must be >= 1")
        self._connection: Connection = connection
        self._read_size: int = read_size
        self._buffer = bytearray()
        self._eof: bool = False

    @property
    def eof(self) -> bool:
        """``True`` once the peer has closed its write side."""
        return self._eof

    def recv_chunk(self, capacity: int) -> Chunk:
        """Return the next chunk of at most *capacity* bytes.

        The chunk ends at a NUL byte (consumed, not returned), at
        end-of-stream, or when *capacity* bytes are buffered and the next
        byte is not a NUL (a ``FULL`` chunk).
        """
        if capacity < 1:
            raise ValueError("capacity must be >= 1")

        scanned = 0
        while True:
            # A NUL right after a full chunk still terminates it.
            limit = min(len(self._buffer), capacity + 1)
            index = self._buffer.find(_NUL, scanned, limit)
            if index != -1:
                return self._take(index, ChunkEnd.DELIMITER, skip=1)
            scanned = limit

            if len(self._buffer) > capacity:
                return self._take(capacity, ChunkEnd.FULL)

            if self._eof:
                return self._take(len(self._buffer), ChunkEnd.EOF)

            received = self._connection.recv(self._read_size)
            if received:
                self._buffer += received
            else:
                logger.debug("Peer closed the reply stream")
                self._eof = True

    def iter_segment(self, capacity: int = OUTPUT_CHUNK_CAPACITY) -> Iterator[bytes]:
        """Yield the non-empty chunks of one segment until it ends."""
        while True:
            chunk = self.recv_chunk(capacity)
            if chunk.data:
                yield chunk.data
            if chunk.ends_segment:
                return

    def _take(self, size: int, end: ChunkEnd, *, skip: int = 0) -> Chunk:
        data = bytes(self._buffer[:size])
        del self._buffer[: size + skip]
        return Chunk(data=data, end=end)


# ---------------------------------------------------------------------------
# Exit code
# ---------------------------------------------------------------------------

def parse_exit_code(raw: bytes) -> int:
    """Validate the exit-code segment and return its value.

    Raises
    ------
    InvalidExitCode
        If *raw* is empty or contains anything but ASCII digits.
    ExitCodeOutOfRange
        If the value is greater than 255.
    """
    text = raw.decode("ascii", errors="replace")
    # bytes.isdigit() only accepts ASCII 0-9.
    if not raw or not raw.isdigit():
        raise InvalidExitCode(
            f'Exit code "{text}" is not a valid number between 0-255',
        )
    value = int(raw)
    if value > MAX_EXIT_CODE:
        raise ExitCodeOutOfRange(
            f'Exit code "{text}" is not a valid exit code between 0-255',
        )
    return value


def read_exit_code(reader: ChunkReader) -> int:
    """Read and validate the exit-code segment."""
    chunk = reader.recv_chunk(EXIT_CODE_CAPACITY)
    if chunk.end is ChunkEnd.FULL:
        text = chunk.data.decode("ascii", errors="replace")
        raise ChunkTooLong(
            f'Exit code "{text}" is too long. It must be valid number between 0-255',
        )
    return parse_exit_code(chunk.data)


def copy_segment(reader: ChunkReader, sink: BinaryIO) -> int:
    """Stream one output segment into *sink*, flushing per chunk.

    Returns the number of bytes written.
    """
    total = 0
    for data in reader.iter_segment(OUTPUT_CHUNK_CAPACITY):
        sink.write(data)
        sink.flush()
        total += len(data)
    return total


# ---------------------------------------------------------------------------
# Full reply
# ---------------------------------------------------------------------------

def read_reply(
    source: Connection | ChunkReader,
    *,
    stdout: BinaryIO | None = None,
    stderr: BinaryIO | None = None,
    on_phase: Callable[[ClientState], None] | None = None,
) -> Reply:
    """Read exit code, stdout and stderr from *source*, in that order.

    Parameters
    ----------
    source:
        The connection to read from, or a :class:`ChunkReader` already
        wrapping it.
    stdout, stderr:
        Binary sinks that receive each output chunk as it arrives.  When
        a sink is ``None`` the segment is collected and returned decoded
        in the :class:`Reply`.
    on_phase:
        Optional callback invoked with the reading state before each
        phase starts.

    Raises
    ------
    ChunkTooLong, InvalidExitCode, ExitCodeOutOfRange
        When the exit-code segment is malformed.  No output phase is
        read in that case.
    TransportError
        When the connection fails while reading.
    """
    reader = source if isinstance(source, ChunkReader) else ChunkReader(source)
    notify = on_phase or (lambda _state: None)

    notify(ClientState.READING_EXIT_CODE)
    exit_code = read_exit_code(reader)
    logger.debug("Received exit code %d", exit_code)

    notify(ClientState.READING_STDOUT)
    stdout_text = _read_output(reader, stdout, "stdout")

    notify(ClientState.READING_STDERR)
    stderr_text = _read_output(reader, stderr, "stderr")

    return Reply(exit_code=exit_code, stdout=stdout_text, stderr=stderr_text)


def _read_output(reader: ChunkReader, sink: BinaryIO | None, name: str) -> str | None:
    if sink is not None:
        written = copy_segment(reader, sink)
        logger.debug("Streamed %d bytes of %s", written, name)
        return None
    buffer = io.BytesIO()
    copy_segment(reader, buffer)
    logger.debug("Collected %d bytes of %s", buffer.tell(), name)
    return buffer.getvalue().decode("utf-8", errors="replace")

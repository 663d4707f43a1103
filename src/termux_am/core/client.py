"""Core protocol client — drives one request/response exchange.

The client depends on a :class:`~termux_am.core.protocols.Connector`
injected at construction time, keeping the core free of socket imports.
One call to :meth:`AmClient.run` performs the whole exchange::

    connect -> send command -> half-close -> exit code -> stdout -> stderr

Guarantees
----------
* The connection is closed on every exit path.
* Only :class:`~termux_am.exceptions.TermuxAmError` subclasses escape.
* No retries: the first failure ends the exchange.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import BinaryIO

from termux_am.core.encoder import encode_command
from termux_am.core.models import ClientState, Reply
from termux_am.core.protocols import Connection, Connector
from termux_am.core.reply_reader import read_reply
from termux_am.exceptions import TermuxAmError, TransportError

logger = logging.getLogger(__name__)


def send_command(connection: Connection, payload: bytes) -> None:
    """Write *payload* and half-close the write side.

    The half-close is the only end-of-command marker the server gets.
    """
    connection.send_all(payload)
    connection.shutdown_write()


class AmClient:
    """Single-use client for the am socket server.

    Parameters
    ----------
    connector:
        Any object satisfying the :class:`Connector` protocol.
    endpoint:
        Filesystem path of the server socket.
    """

    def __init__(self, connector: Connector, endpoint: str) -> None:
        self._connector: Connector = connector
        self._endpoint: str = endpoint
        self._state: ClientState = ClientState.DISCONNECTED

    @property
    def state(self) -> ClientState:
        return self._state

    @property
    def endpoint(self) -> str:
        return self._endpoint

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(
        self,
        args: Sequence[str],
        *,
        stdout: BinaryIO | None = None,
        stderr: BinaryIO | None = None,
    ) -> Reply:
        """Encode *args*, send them and return the decoded reply.

        See :meth:`execute` for the sink semantics and errors.
        """
        return self.execute(encode_command(tuple(args)), stdout=stdout, stderr=stderr)

    def execute(
        self,
        payload: bytes,
        *,
        stdout: BinaryIO | None = None,
        stderr: BinaryIO | None = None,
    ) -> Reply:
        """Send an already encoded *payload* and return the decoded reply.

        Output segments are streamed to *stdout* / *stderr* when given,
        otherwise collected into the returned :class:`Reply`.

        Raises
        ------
        ConfigurationError
            When the endpoint path is unusable.
        ConnectionError
            When connecting fails.
        TransportError
            When sending or receiving fails.
        ChunkTooLong, InvalidExitCode, ExitCodeOutOfRange
            When the reply's exit-code segment is malformed.
        """
        if self._state is not ClientState.DISCONNECTED:
            raise RuntimeError(f"AmClient is single-use (state: {self._state.value})")

        try:
            connection = self._connector.connect(self._endpoint)
        except TermuxAmError:
            self._transition(ClientState.FAILED)
            raise
        self._transition(ClientState.CONNECTED)

        try:
            send_command(connection, payload)
            self._transition(ClientState.SENT)
            logger.debug("Sent %d byte command to %s", len(payload), self._endpoint)
            reply = read_reply(
                connection,
                stdout=stdout,
                stderr=stderr,
                on_phase=self._transition,
            )
        except TermuxAmError:
            self._transition(ClientState.FAILED)
            raise
        except OSError as exc:
            # Sink write failures (e.g. a closed stdout pipe).
            self._transition(ClientState.FAILED)
            raise TransportError(f"Could not write reply output: {exc}") from exc
        finally:
            connection.close()

        self._transition(ClientState.DONE)
        return reply

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _transition(self, state: ClientState) -> None:
        logger.debug("Client state %s -> %s", self._state.value, state.value)
        self._state = state

"""Core layer — command encoding, reply decoding and the exchange itself.

Rules
-----
* No ``print()`` calls.
* No direct socket use; I/O goes through the ``protocols`` contracts.
* No imports from ``cli`` or ``infra``.
"""

from termux_am.core.client import AmClient, send_command
from termux_am.core.encoder import encode_command, quote_argument
from termux_am.core.models import Chunk, ChunkEnd, ClientState, Reply
from termux_am.core.protocols import Connection, Connector
from termux_am.core.reply_reader import ChunkReader, read_reply

__all__: list[str] = [
    "AmClient",
    "Chunk",
    "ChunkEnd",
    "ChunkReader",
    "ClientState",
    "Connection",
    "Connector",
    "Reply",
    "encode_command",
    "quote_argument",
    "read_reply",
    "send_command",
]

"""Command encoder — turns an argument vector into the wire command.

The am socket server splits the received command with its own small
tokenizer.  The quoting applied here is exactly what that tokenizer
expects and nothing more:

* ``"`` becomes ``\\"`` and ``'`` becomes ``\\'``.
* Backslashes are passed through untouched.
* A token containing whitespace is wrapped in double quotes.
* Every token is followed by a single space, the last one included.

This is not a general shell quoter; do not extend it without checking
the server's tokenizer grammar.

Guarantees
----------
* Pure transformation — no I/O, no errors.
"""

from __future__ import annotations

import os
from collections.abc import Sequence

# C ``isspace`` in the "C" locale.
_WHITESPACE = frozenset(" \t\n\v\f\r")

_ESCAPES: dict[str, str] = {
    '"': '\\"',
    "'": "\\'",
}


def quote_argument(arg: str) -> str:
    """Return *arg* escaped and, if it holds whitespace, double-quoted."""
    whitespace = False
    processed: list[str] = []
    for char in arg:
        if char in _WHITESPACE:
            whitespace = True
        processed.append(_ESCAPES.get(char, char))
    token = "".join(processed)
    if whitespace:
        return f'"{token}"'
    return token


def encode_command(args: Sequence[str]) -> bytes:
    """Encode *args* into the command buffer sent to the server.

    Arguments are converted with :func:`os.fsencode` so that values which
    reached ``sys.argv`` as undecodable bytes are sent back unchanged.

    >>> encode_command(["start", "-n", "a b"])
    b'start -n "a b" '
    """
    return b"".join(os.fsencode(quote_argument(arg)) + b" " for arg in args)

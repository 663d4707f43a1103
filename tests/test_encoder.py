"""Tests for the command encoder (core/encoder.py).

Coverage:
* Plain tokens pass through with a trailing space each.
* Whitespace triggers double-quote wrapping, and only whitespace does.
* Quote escaping; backslashes are left alone.
* Empty argument vector.
"""

from __future__ import annotations

import os

import pytest

from termux_am.core.encoder import encode_command, quote_argument


# ---------------------------------------------------------------------------
# quote_argument
# ---------------------------------------------------------------------------

class TestQuoteArgument:
    def test_plain_token_unchanged(self) -> None:
        assert quote_argument("start") == "start"

    @pytest.mark.parametrize(
        "raw",
        ["hello world", "tab\there", "line\nbreak", "\r", "v\vf\f", " "],
    )
    def test_whitespace_wraps_in_double_quotes(self, raw: str) -> None:
        quoted = quote_argument(raw)
        assert quoted == f'"{raw}"'

    def test_wrapping_happens_exactly_once(self) -> None:
        quoted = quote_argument("a b c d")
        assert quoted.startswith('"') and quoted.endswith('"')
        assert quoted.count('"') == 2

    def test_double_quote_is_escaped(self) -> None:
        assert quote_argument('say"hi"') == 'say\\"hi\\"'

    def test_single_quote_is_escaped(self) -> None:
        assert quote_argument("it's") == "it\\'s"

    def test_escaped_quotes_inside_wrapped_token(self) -> None:
        assert quote_argument('a "b"') == '"a \\"b\\""'

    def test_backslash_passes_through(self) -> None:
        assert quote_argument("C:\\path\\x") == "C:\\path\\x"

    def test_backslash_before_quote_not_doubled(self) -> None:
        assert quote_argument('\\"') == '\\\\"'

    def test_empty_token(self) -> None:
        assert quote_argument("") == ""

    def test_non_ascii_whitespace_does_not_wrap(self) -> None:
        # Only the C-locale isspace set counts.
        assert quote_argument("a\u00a0b") == "a\u00a0b"


# ---------------------------------------------------------------------------
# encode_command
# ---------------------------------------------------------------------------

class TestEncodeCommand:
    def test_empty_argv_is_empty_buffer(self) -> None:
        assert encode_command([]) == b""

    def test_every_token_gets_trailing_space(self) -> None:
        assert encode_command(["start", "-n", "pkg/.Act"]) == b"start -n pkg/.Act "

    def test_echo_hello_world(self) -> None:
        assert encode_command(["echo", "hello world"]) == b'echo "hello world" '

    def test_split_round_trip_for_plain_tokens(self) -> None:
        args = ["broadcast", "-a", "com.termux.RUN", "--es", "key", "value"]
        encoded = encode_command(args)
        assert encoded.decode().split(" ")[:-1] == args

    def test_empty_argument_still_emits_separator(self) -> None:
        assert encode_command(["a", "", "b"]) == b"a  b "

    def test_utf8_arguments(self) -> None:
        assert encode_command(["ünï"]) == "ünï ".encode()

    def test_surrogateescaped_argument_round_trips_bytes(self) -> None:
        raw = os.fsdecode(b"\xff\xfe")
        assert encode_command([raw]) == os.fsencode(raw) + b" "

    def test_accepts_tuple(self) -> None:
        assert encode_command(("x",)) == b"x "

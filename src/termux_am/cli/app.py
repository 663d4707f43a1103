"""CLI application entry point for termux-am.

This module is the **sole error boundary** for the entire application.
It catches :class:`~termux_am.exceptions.TermuxAmError`,
``KeyboardInterrupt`` and any unexpected ``Exception``, renders a
diagnostic on stderr and returns a well-defined exit code.

Architecture notes
------------------
* No protocol logic lives here — encoding and the exchange are delegated
  to the core layer, the socket to the infrastructure layer.
* Options are only recognised before the first am argument; everything
  from there on is forwarded to the server verbatim.
* This module is the only place that translates between the domain world
  and the OS process exit code.  On success that is the server's own
  exit code.
"""

from __future__ import annotations

import argparse
import sys
from typing import BinaryIO, TextIO

from termux_am.cli import exit_codes
from termux_am.cli.console import console, escape_markup
from termux_am.cli.logging_setup import configure_logging
from termux_am.config import TIMEOUT_ENV, ClientConfig, server_enabled_status
from termux_am.exceptions import TermuxAmError
from termux_am.version import __version__

_DESCRIPTION = """\
Send a command to the Termux app's am socket server.

termux-am forwards AM_ARGS to the activity manager running inside the
Termux app, prints the output it sends back and exits with its exit code.
Example: termux-am start -n com.termux/.app.TermuxActivity
"""


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    The epilog reports the server-enablement variable, so it is built
    per call from the current environment.
    """
    parser = argparse.ArgumentParser(
        prog="termux-am",
        description=_DESCRIPTION,
        epilog=server_enabled_status(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--am-help",
        action="store_true",
        help="Show the am server's own help text.",
    )
    parser.add_argument(
        "--socket",
        metavar="PATH",
        default=None,
        help="Path of the am server socket (default: $PREFIX/../am-socket).",
    )
    parser.add_argument(
        "--timeout",
        metavar="SECONDS",
        default=None,
        help=f"I/O timeout in seconds (default: ${TIMEOUT_ENV}, else none).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log protocol details to stderr.",
    )
    parser.add_argument(
        "am_args",
        nargs=argparse.REMAINDER,
        metavar="AM_ARGS",
        help="Command and arguments for am.",
    )
    return parser


def _drop_option_terminator(argv: list[str], am_args: list[str]) -> list[str]:
    """Remove a leading ``--`` that ended option parsing.

    ``REMAINDER`` keeps the terminator when it is the first token after
    the options.  A ``--`` that follows the first am argument belongs to
    the command and is kept.
    """
    if not am_args or am_args[0] != "--":
        return am_args
    start = len(argv) - len(am_args)
    # Already consumed by argparse; this one is a real argument.
    if start > 0 and argv[start - 1] == "--":
        return am_args
    return am_args[1:]


def _binary_stream(stream: TextIO) -> BinaryIO:
    """Return the byte layer of a text stream, flushing pending text first."""
    stream.flush()
    return stream.buffer


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_command(args: argparse.Namespace) -> int:
    """Run one exchange with the am server and return its exit code.

    Flow:
    1. Resolve and validate configuration.
    2. Encode the arguments (an empty command for ``--am-help``).
    3. Send, half-close and stream the reply to stdout/stderr.
    """
    from termux_am.core.client import AmClient
    from termux_am.infra.unix_socket import UnixSocketConnector

    config = ClientConfig.from_env(
        socket_path=args.socket,
        timeout=args.timeout,
        verbose=args.verbose,
    )
    configure_logging(config.log_level)

    client = AmClient(UnixSocketConnector(timeout=config.timeout), config.socket_path)
    stdout = _binary_stream(sys.stdout)
    stderr = _binary_stream(sys.stderr)
    if args.am_help:
        reply = client.execute(b"", stdout=stdout, stderr=stderr)
    else:
        reply = client.run(args.am_args, stdout=stdout, stderr=stderr)
    return reply.exit_code


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the termux-am CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = _build_parser()
    if not argv:
        parser.print_help()
        return exit_codes.GENERAL_ERROR

    args = parser.parse_args(argv)
    args.am_args = _drop_option_terminator(argv, args.am_args)
    return _handle_command(args)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except TermuxAmError as exc:
        console.error(str(exc), exc.hint)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape_markup(str(exc))}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)

"""Allow ``python -m termux_am`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m termux_am`` behaves identically to the ``termux-am``
console script.
"""

from __future__ import annotations

from termux_am.cli.app import cli

if __name__ == "__main__":
    cli()

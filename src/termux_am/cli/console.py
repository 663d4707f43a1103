"""CLI console helpers with optional Rich support.

This module avoids module-level imports of Rich so that bootstrap paths
(``--help``, ``--version``) and the error boundary keep working even
when Rich is not installed.  All diagnostics go to stderr; stdout is
reserved for the am server's output.
"""

from __future__ import annotations

import re
import sys
from typing import Any

# Escaped brackets (``\[``) are literal text, not tags.
_MARKUP_TAG = re.compile(r"(?<!\\)\[/?[a-z ]+\]")


def get_rich_console() -> Any | None:
    """Create a Rich console targeting stderr, or ``None`` without Rich."""
    try:
        from rich.console import Console
    except ModuleNotFoundError:
        return None
    return Console(stderr=True, highlight=False, soft_wrap=True)


def escape_markup(text: str) -> str:
    """Escape *text* so it prints literally, with or without Rich."""
    try:
        from rich.markup import escape
    except ModuleNotFoundError:
        return text.replace("[", "\\[")
    return escape(text)


class _ConsoleProxy:
    """Minimal ``print``-compatible proxy with Rich fallback."""

    def print(self, *objects: object) -> None:
        """Render with Rich when available, else plain stderr print."""
        rich_console = get_rich_console()
        if rich_console is None:
            print(*(_strip_markup(obj) for obj in objects), file=sys.stderr)
            return
        rich_console.print(*objects)

    def error(self, message: str, hint: str | None = None) -> None:
        """Render an error message and optional hint."""
        self.print(f"[bold red]Error:[/bold red] {escape_markup(message)}")
        if hint:
            self.print(f"[yellow]Hint:[/yellow] {escape_markup(hint)}")


def _strip_markup(obj: object) -> object:
    if not isinstance(obj, str):
        return obj
    return _MARKUP_TAG.sub("", obj).replace("\\[", "[")


console = _ConsoleProxy()

"""Exit-code constants used by the CLI layer.

On success the process exits with the code the am server sent back
(``0``-``255``).  The constants below are the statuses termux-am picks
itself when no server exit code is available.
"""

from __future__ import annotations

SUCCESS: int = 0
"""Local command (``--help``, ``--version``) completed without error."""

GENERAL_ERROR: int = 1
"""A known TermuxAmError was caught, or no arguments were given."""

UNEXPECTED_ERROR: int = 2
"""An unhandled exception escaped all known error boundaries."""

KEYBOARD_INTERRUPT: int = 130
"""User pressed Ctrl+C.  Follows POSIX convention (128 + SIGINT=2)."""

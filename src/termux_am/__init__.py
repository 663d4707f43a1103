"""termux-am — send ``am`` commands to the Termux app over its local socket.

The client encodes an argument vector, writes it to the am socket server
and decodes the exit code, stdout and stderr it sends back.
"""

from termux_am.version import __version__

__all__: list[str] = ["__version__"]

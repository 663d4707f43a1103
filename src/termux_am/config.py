"""Runtime configuration for the termux-am client.

Settings come from explicit arguments first, then the environment, then
built-in defaults.  Validation happens here, before any socket exists,
so that a bad endpoint is reported as a configuration problem rather
than a failed connect.
"""

from __future__ import annotations

import math
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass

from termux_am.exceptions import ConfigurationError

DEFAULT_PREFIX: str = "/data/data/com.termux/files/usr"
SOCKET_SUFFIX: str = "/../am-socket"

SOCKET_PATH_ENV: str = "TERMUX_AM_SOCKET"
PREFIX_ENV: str = "PREFIX"
TIMEOUT_ENV: str = "TERMUX_AM_TIMEOUT"
LOG_LEVEL_ENV: str = "TERMUX_AM_LOG_LEVEL"
SERVER_ENABLED_ENV: str = "TERMUX_APP__AM_SOCKET_SERVER_ENABLED"

DEFAULT_LOG_LEVEL: str = "WARNING"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def sun_path_size(platform: str | None = None) -> int:
    """Return the size of ``sockaddr_un.sun_path`` for *platform*."""
    platform = platform or sys.platform
    if platform == "darwin" or "bsd" in platform:
        return 104
    return 108


def resolve_socket_path(
    explicit: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Pick the server socket path.

    Order: *explicit*, ``$TERMUX_AM_SOCKET``, ``$PREFIX/../am-socket``,
    then the stock Termux prefix.  Empty environment values are skipped,
    but an explicit empty path is returned as is.  The path is not
    normalised.
    """
    env = os.environ if environ is None else environ
    if explicit is not None:
        return explicit
    from_env = env.get(SOCKET_PATH_ENV)
    if from_env:
        return from_env
    prefix = env.get(PREFIX_ENV) or DEFAULT_PREFIX
    return prefix + SOCKET_SUFFIX


def validate_socket_path(path: str, *, platform: str | None = None) -> str:
    """Return *path* if it fits in a Unix socket address.

    Raises
    ------
    ConfigurationError
        If *path* is empty, contains a NUL byte or is too long.
    """
    if not path:
        raise ConfigurationError("Socket path is empty.")
    if "\0" in path:
        raise ConfigurationError(f"Socket path {path!r} contains a NUL byte.")
    limit = sun_path_size(platform)
    # The kernel needs room for the terminating NUL.
    if len(os.fsencode(path)) >= limit:
        raise ConfigurationError(
            f'Socket path "{path}" too long',
            hint=f"Unix socket paths must be shorter than {limit} bytes.",
        )
    return path


def parse_timeout(value: str | float | None) -> float | None:
    """Parse an I/O timeout in seconds; ``None`` or ``""`` means no timeout.

    Raises
    ------
    ConfigurationError
        If *value* is not a finite positive number.
    """
    if value is None or value == "":
        return None
    try:
        seconds = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid timeout {value!r}.") from exc
    if not math.isfinite(seconds) or seconds <= 0:
        raise ConfigurationError(
            f"Invalid timeout {value!r}.",
            hint="The timeout must be a positive number of seconds.",
        )
    return seconds


def parse_log_level(value: str | None) -> str:
    """Normalise a log level name, defaulting to ``WARNING``."""
    if not value:
        return DEFAULT_LOG_LEVEL
    level = value.strip().upper()
    if level not in _LOG_LEVELS:
        raise ConfigurationError(
            f"Invalid log level {value!r}.",
            hint=f"Use one of: {', '.join(_LOG_LEVELS)}.",
        )
    return level


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Validated settings for one client run."""

    socket_path: str
    """Filesystem path of the am server socket."""

    timeout: float | None = None
    """Per-operation I/O timeout in seconds; ``None`` blocks forever."""

    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        socket_path: str | None = None,
        timeout: str | float | None = None,
        verbose: bool = False,
    ) -> ClientConfig:
        """Build a config from explicit overrides and *environ*.

        Raises
        ------
        ConfigurationError
            If any resolved value is invalid.
        """
        env = os.environ if environ is None else environ
        path = validate_socket_path(resolve_socket_path(socket_path, env))
        raw_timeout = timeout if timeout is not None else env.get(TIMEOUT_ENV)
        log_level = "DEBUG" if verbose else parse_log_level(env.get(LOG_LEVEL_ENV))
        return cls(
            socket_path=path,
            timeout=parse_timeout(raw_timeout),
            log_level=log_level,
        )


def server_enabled_status(environ: Mapping[str, str] | None = None) -> str:
    """Return the help-text line describing the server-enablement variable."""
    env = os.environ if environ is None else environ
    value = env.get(SERVER_ENABLED_ENV)
    if value is None:
        return f"{SERVER_ENABLED_ENV} undefined"
    return f"{SERVER_ENABLED_ENV}={value}"

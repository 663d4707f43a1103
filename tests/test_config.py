"""Tests for runtime configuration (config.py).

Coverage:
* Socket path resolution order.
* Socket path validation against the ``sun_path`` limit.
* Timeout and log-level parsing.
* Server-enablement help line.
"""

from __future__ import annotations

import pytest

from termux_am.config import (
    DEFAULT_PREFIX,
    ClientConfig,
    parse_log_level,
    parse_timeout,
    resolve_socket_path,
    server_enabled_status,
    sun_path_size,
    validate_socket_path,
)
from termux_am.exceptions import ConfigurationError, ConnectionError


# ---------------------------------------------------------------------------
# resolve_socket_path
# ---------------------------------------------------------------------------

class TestResolveSocketPath:
    def test_default_prefix(self) -> None:
        assert resolve_socket_path(None, {}) == f"{DEFAULT_PREFIX}/../am-socket"

    def test_prefix_env(self) -> None:
        assert resolve_socket_path(None, {"PREFIX": "/opt/usr"}) == "/opt/usr/../am-socket"

    def test_explicit_env_beats_prefix(self) -> None:
        env = {"PREFIX": "/opt/usr", "TERMUX_AM_SOCKET": "/run/am.sock"}
        assert resolve_socket_path(None, env) == "/run/am.sock"

    def test_argument_beats_everything(self) -> None:
        env = {"PREFIX": "/opt/usr", "TERMUX_AM_SOCKET": "/run/am.sock"}
        assert resolve_socket_path("/cli/sock", env) == "/cli/sock"

    def test_empty_env_values_are_ignored(self) -> None:
        env = {"PREFIX": "", "TERMUX_AM_SOCKET": ""}
        assert resolve_socket_path(None, env) == f"{DEFAULT_PREFIX}/../am-socket"

    def test_explicit_empty_path_is_kept(self) -> None:
        env = {"TERMUX_AM_SOCKET": "/run/am.sock"}
        assert resolve_socket_path("", env) == ""


# ---------------------------------------------------------------------------
# validate_socket_path
# ---------------------------------------------------------------------------

class TestValidateSocketPath:
    def test_accepts_default_path(self) -> None:
        path = f"{DEFAULT_PREFIX}/../am-socket"
        assert validate_socket_path(path) == path

    @pytest.mark.parametrize(("platform", "limit"), [("linux", 108), ("darwin", 104), ("freebsd14", 104)])
    def test_limit_per_platform(self, platform: str, limit: int) -> None:
        assert sun_path_size(platform) == limit
        validate_socket_path("/" + "a" * (limit - 2), platform=platform)
        with pytest.raises(ConfigurationError, match="too long"):
            validate_socket_path("/" + "a" * (limit - 1), platform=platform)

    def test_length_counts_encoded_bytes(self) -> None:
        # 54 two-byte characters = 108 bytes.
        with pytest.raises(ConfigurationError):
            validate_socket_path("é" * 54, platform="linux")

    def test_empty_path(self) -> None:
        with pytest.raises(ConfigurationError, match="empty"):
            validate_socket_path("")

    def test_nul_in_path(self) -> None:
        with pytest.raises(ConfigurationError, match="NUL"):
            validate_socket_path("/tmp/a\0b")

    def test_configuration_error_is_connection_error(self) -> None:
        assert issubclass(ConfigurationError, ConnectionError)


# ---------------------------------------------------------------------------
# Timeout / log level
# ---------------------------------------------------------------------------

class TestParseTimeout:
    @pytest.mark.parametrize("value", [None, ""])
    def test_no_timeout(self, value: str | None) -> None:
        assert parse_timeout(value) is None

    @pytest.mark.parametrize(("value", "expected"), [("1.5", 1.5), ("10", 10.0), (3, 3.0)])
    def test_valid(self, value: str | float, expected: float) -> None:
        assert parse_timeout(value) == expected

    @pytest.mark.parametrize("value", ["abc", "0", "-1", "inf", "nan"])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(ConfigurationError, match="Invalid timeout"):
            parse_timeout(value)


class TestParseLogLevel:
    def test_default(self) -> None:
        assert parse_log_level(None) == "WARNING"

    def test_normalises_case(self) -> None:
        assert parse_log_level(" debug ") == "DEBUG"

    def test_rejects_unknown(self) -> None:
        with pytest.raises(ConfigurationError, match="log level"):
            parse_log_level("loud")


# ---------------------------------------------------------------------------
# ClientConfig
# ---------------------------------------------------------------------------

class TestClientConfig:
    def test_from_empty_env(self) -> None:
        config = ClientConfig.from_env({})
        assert config.socket_path == f"{DEFAULT_PREFIX}/../am-socket"
        assert config.timeout is None
        assert config.log_level == "WARNING"

    def test_from_env_values(self) -> None:
        env = {
            "TERMUX_AM_SOCKET": "/run/am.sock",
            "TERMUX_AM_TIMEOUT": "4",
            "TERMUX_AM_LOG_LEVEL": "info",
        }
        config = ClientConfig.from_env(env)
        assert config == ClientConfig(socket_path="/run/am.sock", timeout=4.0, log_level="INFO")

    def test_overrides_win(self) -> None:
        env = {"TERMUX_AM_TIMEOUT": "4", "TERMUX_AM_LOG_LEVEL": "error"}
        config = ClientConfig.from_env(env, socket_path="/s", timeout="0.5", verbose=True)
        assert config.socket_path == "/s"
        assert config.timeout == 0.5
        assert config.log_level == "DEBUG"

    def test_too_long_path_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            ClientConfig.from_env({"TERMUX_AM_SOCKET": "/" + "x" * 200})

    def test_explicit_empty_socket_rejected(self) -> None:
        env = {"TERMUX_AM_SOCKET": "/run/am.sock"}
        with pytest.raises(ConfigurationError, match="empty"):
            ClientConfig.from_env(env, socket_path="")

    def test_is_frozen(self) -> None:
        config = ClientConfig(socket_path="/s")
        with pytest.raises(AttributeError):
            config.timeout = 1.0  # type: ignore[misc]


class TestServerEnabledStatus:
    def test_defined(self) -> None:
        env = {"TERMUX_APP__AM_SOCKET_SERVER_ENABLED": "true"}
        assert server_enabled_status(env) == "TERMUX_APP__AM_SOCKET_SERVER_ENABLED=true"

    def test_undefined(self) -> None:
        assert server_enabled_status({}) == "TERMUX_APP__AM_SOCKET_SERVER_ENABLED undefined"

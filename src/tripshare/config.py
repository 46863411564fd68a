"""Server configuration for tripshare."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from tripshare.exceptions import TripShareConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env_key: str, value: str, cast: type[int] | type[float]) -> int | float:
    try:
        return cast(value)
    except ValueError as exc:
        raise TripShareConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class TripShareConfig:
    """Server configuration.

    Parameters
    ----------
    host : str
        Interface the HTTP server binds to.
    port : int
        TCP port the HTTP server listens on.
    api_prefix : str
        Path prefix for the REST routes (e.g. ``"/api"``). Empty mounts
        them at the root.
    ws_path : str
        Path of the realtime WebSocket endpoint.
    seed_demo : bool
        Insert the ``demo1234`` sample trip at startup.
    chat_history_limit : int
        Maximum chat messages kept per trip; older ones are evicted first.
    chat_text_limit : int
        Maximum characters kept from a single chat message.
    join_code_length : int
        Length of generated join codes.
    join_code_attempts : int
        How many fresh codes to try before giving up on a collision.
    realtime_errors : bool
        Send an ``error`` event back to a connection whose realtime event
        referenced an unknown trip. When off such events are dropped silently.
    ws_heartbeat : float
        WebSocket ping interval in seconds. ``0`` disables pings.
    """

    host: str = "0.0.0.0"
    port: int = 3000
    api_prefix: str = ""
    ws_path: str = "/ws"
    seed_demo: bool = True
    chat_history_limit: int = 500
    chat_text_limit: int = 1000
    join_code_length: int = 6
    join_code_attempts: int = 32
    realtime_errors: bool = False
    ws_heartbeat: float = 30.0

    def __post_init__(self) -> None:
        if not 0 < self.port < 65536:
            raise TripShareConfigError(f"port must be between 1 and 65535, got {self.port}")
        if self.api_prefix and (not self.api_prefix.startswith("/") or self.api_prefix.endswith("/")):
            raise TripShareConfigError(f"api_prefix must start and not end with '/', got {self.api_prefix!r}")
        if not self.ws_path.startswith("/"):
            raise TripShareConfigError(f"ws_path must start with '/', got {self.ws_path!r}")
        if self.chat_history_limit < 1:
            raise TripShareConfigError("chat_history_limit must be positive")
        if self.chat_text_limit < 1:
            raise TripShareConfigError("chat_text_limit must be positive")
        if self.join_code_length < 4:
            raise TripShareConfigError("join_code_length must be at least 4")
        if self.join_code_attempts < 1:
            raise TripShareConfigError("join_code_attempts must be positive")
        if self.ws_heartbeat < 0:
            raise TripShareConfigError("ws_heartbeat must not be negative")

    @classmethod
    def from_env(cls, **overrides: Any) -> TripShareConfig:
        """Create configuration from environment variables.

        Reads optional ``TRIPSHARE_*`` variables. ``PORT`` is honoured
        when ``TRIPSHARE_PORT`` is unset. Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        TripShareConfig
            Populated configuration.

        Raises
        ------
        TripShareConfigError
            If a variable holds an unusable value.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "TRIPSHARE_HOST": "host",
            "TRIPSHARE_API_PREFIX": "api_prefix",
            "TRIPSHARE_WS_PATH": "ws_path",
        }
        _ENV_INT_MAP = {
            "TRIPSHARE_CHAT_HISTORY_LIMIT": "chat_history_limit",
            "TRIPSHARE_CHAT_TEXT_LIMIT": "chat_text_limit",
            "TRIPSHARE_JOIN_CODE_LENGTH": "join_code_length",
            "TRIPSHARE_JOIN_CODE_ATTEMPTS": "join_code_attempts",
        }

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        for env_key, field_name in _ENV_INT_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = _env_number(env_key, val, int)

        port_key = "TRIPSHARE_PORT" if "TRIPSHARE_PORT" in env else "PORT"
        port_env = env.get(port_key)
        if port_env is not None and "port" not in overrides:
            config_kwargs["port"] = _env_number(port_key, port_env, int)

        heartbeat_env = env.get("TRIPSHARE_WS_HEARTBEAT")
        if heartbeat_env is not None and "ws_heartbeat" not in overrides:
            config_kwargs["ws_heartbeat"] = _env_number("TRIPSHARE_WS_HEARTBEAT", heartbeat_env, float)

        if "seed_demo" not in overrides:
            config_kwargs["seed_demo"] = _env_bool(env.get("TRIPSHARE_SEED_DEMO"), True)

        if "realtime_errors" not in overrides:
            config_kwargs["realtime_errors"] = _env_bool(env.get("TRIPSHARE_REALTIME_ERRORS"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)

#!/usr/bin/env python3
# src/base_mcp_server/config.py
"""
Server configuration and defaults.

Values are plain data consumed by the server context; nothing here touches
sessions or the network. ``ServerConfig.from_env`` layers environment
variables over the defaults.
"""

import logging
import os
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from .constants import (
    DEFAULT_ALLOWED_HOSTS,
    DEFAULT_HOST,
    DEFAULT_IDLE_TIMEOUT,
    DEFAULT_PORT,
    DEFAULT_SERVER_NAME,
    DEFAULT_SERVER_VERSION,
    DEFAULT_SWEEP_INTERVAL,
    ENV_MCP_ALLOWED_HOSTS,
    ENV_MCP_AUTO_CREATE_SESSIONS,
    ENV_MCP_DNS_REBINDING_PROTECTION,
    ENV_MCP_HANDLER_TIMEOUT,
    ENV_MCP_HOST,
    ENV_MCP_LOG_LEVEL,
    ENV_MCP_SERVER_NAME,
    ENV_MCP_SERVER_VERSION,
    ENV_MCP_SESSION_IDLE_TIMEOUT,
    ENV_MCP_SESSION_SWEEP_INTERVAL,
    ENV_PORT,
)

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("1", "true", "yes", "on")


def default_session_id() -> str:
    """Generate a random session id."""
    return str(uuid.uuid4())


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}; using {default}")
        return default


def _env_float(name: str, default: float | None) -> float | None:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}; using {default}")
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in _TRUE_VALUES


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class ServerConfig:
    """Configuration for an MCP server process."""

    name: str = DEFAULT_SERVER_NAME
    version: str = DEFAULT_SERVER_VERSION
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    # DNS rebinding protection is off by default for backwards compatibility
    enable_dns_rebinding_protection: bool = False
    allowed_hosts: list[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_HOSTS))
    session_id_generator: Callable[[], str] = default_session_id
    idle_timeout: float = DEFAULT_IDLE_TIMEOUT
    sweep_interval: float = DEFAULT_SWEEP_INTERVAL
    auto_create_sessions: bool = False
    handler_timeout: float | None = None
    log_level: str = "info"
    instructions: str | None = None

    def __post_init__(self) -> None:
        if self.idle_timeout <= 0:
            raise ValueError(f"idle_timeout must be positive, got {self.idle_timeout}")
        if self.sweep_interval <= 0:
            raise ValueError(f"sweep_interval must be positive, got {self.sweep_interval}")
        if self.handler_timeout is not None and self.handler_timeout <= 0:
            raise ValueError(f"handler_timeout must be positive, got {self.handler_timeout}")

    @classmethod
    def from_env(cls, **overrides: Any) -> "ServerConfig":
        """Build a config from environment variables; keyword overrides win."""
        values: dict[str, Any] = {
            "name": os.environ.get(ENV_MCP_SERVER_NAME, DEFAULT_SERVER_NAME),
            "version": os.environ.get(ENV_MCP_SERVER_VERSION, DEFAULT_SERVER_VERSION),
            "host": os.environ.get(ENV_MCP_HOST, DEFAULT_HOST),
            "port": _env_int(ENV_PORT, DEFAULT_PORT),
            "enable_dns_rebinding_protection": _env_bool(ENV_MCP_DNS_REBINDING_PROTECTION, False),
            "allowed_hosts": _env_list(ENV_MCP_ALLOWED_HOSTS, list(DEFAULT_ALLOWED_HOSTS)),
            "idle_timeout": _env_float(ENV_MCP_SESSION_IDLE_TIMEOUT, DEFAULT_IDLE_TIMEOUT),
            "sweep_interval": _env_float(ENV_MCP_SESSION_SWEEP_INTERVAL, DEFAULT_SWEEP_INTERVAL),
            "auto_create_sessions": _env_bool(ENV_MCP_AUTO_CREATE_SESSIONS, False),
            "handler_timeout": _env_float(ENV_MCP_HANDLER_TIMEOUT, None),
            "log_level": os.environ.get(ENV_MCP_LOG_LEVEL, "info").lower(),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)

    def http_transport_config(self) -> dict[str, Any]:
        """Subset of the config consumed by the HTTP transport."""
        return {
            "enable_dns_rebinding_protection": self.enable_dns_rebinding_protection,
            "allowed_hosts": list(self.allowed_hosts),
            "session_id_generator": self.session_id_generator,
        }

#!/usr/bin/env python3
"""
Top-level constants shared across the base_mcp_server package.
"""

from enum import IntEnum

# ---------------------------------------------------------------------------
# JSON-RPC
# ---------------------------------------------------------------------------
JSONRPC_VERSION = "2.0"
JSONRPC_KEY = "jsonrpc"

# JSON-RPC message keys
KEY_METHOD = "method"
KEY_PARAMS = "params"
KEY_ID = "id"
KEY_RESULT = "result"
KEY_ERROR = "error"


class JsonRpcError(IntEnum):
    """JSON-RPC 2.0 error codes, plus the server-defined range used by MCP."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603

    # Server-defined (-32000 to -32099)
    SESSION_NOT_FOUND = -32001
    NOT_INITIALIZED = -32002


# ---------------------------------------------------------------------------
# MCP protocol
# ---------------------------------------------------------------------------
MCP_PROTOCOL_VERSION_2025_06 = "2025-06-18"
MCP_PROTOCOL_VERSION_2025_03 = "2025-03-26"
MCP_PROTOCOL_VERSION_2024_11 = "2024-11-05"

# Newest first; the first entry is offered when a client asks for something unknown
MCP_SUPPORTED_PROTOCOL_VERSIONS = (
    MCP_PROTOCOL_VERSION_2025_06,
    MCP_PROTOCOL_VERSION_2025_03,
    MCP_PROTOCOL_VERSION_2024_11,
)


# MCP method names
class McpMethod:
    INITIALIZE = "initialize"
    INITIALIZED = "notifications/initialized"
    PING = "ping"
    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"
    RESOURCES_LIST = "resources/list"
    RESOURCES_READ = "resources/read"
    RESOURCES_TEMPLATES_LIST = "resources/templates/list"
    NOTIFICATIONS_CANCELLED = "notifications/cancelled"


# MCP initialize parameter keys
KEY_CLIENT_INFO = "clientInfo"
KEY_PROTOCOL_VERSION = "protocolVersion"
KEY_SERVER_INFO = "serverInfo"
KEY_CAPABILITIES = "capabilities"
KEY_INSTRUCTIONS = "instructions"


# ---------------------------------------------------------------------------
# Content types
# ---------------------------------------------------------------------------
CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_PLAIN = "text/plain"


# ---------------------------------------------------------------------------
# Common HTTP headers
# ---------------------------------------------------------------------------
HEADER_MCP_SESSION_ID = "Mcp-Session-Id"
HEADER_MCP_PROTOCOL_VERSION = "MCP-Protocol-Version"


# ---------------------------------------------------------------------------
# Environment variables
# ---------------------------------------------------------------------------
ENV_MCP_LOG_LEVEL = "MCP_LOG_LEVEL"
ENV_MCP_SERVER_NAME = "MCP_SERVER_NAME"
ENV_MCP_SERVER_VERSION = "MCP_SERVER_VERSION"
ENV_MCP_HOST = "MCP_HOST"
ENV_PORT = "PORT"
ENV_MCP_ALLOWED_HOSTS = "MCP_ALLOWED_HOSTS"
ENV_MCP_DNS_REBINDING_PROTECTION = "MCP_DNS_REBINDING_PROTECTION"
ENV_MCP_SESSION_IDLE_TIMEOUT = "MCP_SESSION_IDLE_TIMEOUT"
ENV_MCP_SESSION_SWEEP_INTERVAL = "MCP_SESSION_SWEEP_INTERVAL"
ENV_MCP_AUTO_CREATE_SESSIONS = "MCP_AUTO_CREATE_SESSIONS"
ENV_MCP_HANDLER_TIMEOUT = "MCP_HANDLER_TIMEOUT"


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


# ---------------------------------------------------------------------------
# Server identity and network defaults
# ---------------------------------------------------------------------------
DEFAULT_SERVER_NAME = "mcp-server"
DEFAULT_SERVER_VERSION = "1.0.0"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000
DEFAULT_ALLOWED_HOSTS = ("127.0.0.1",)


# ---------------------------------------------------------------------------
# Session lifecycle defaults (seconds)
# ---------------------------------------------------------------------------
DEFAULT_IDLE_TIMEOUT = 1800.0
DEFAULT_SWEEP_INTERVAL = 60.0
SWEEP_LOCK_TIMEOUT = 1.0


# ---------------------------------------------------------------------------
# Request validation limits
# ---------------------------------------------------------------------------
MAX_REQUEST_BODY_BYTES = 10 * 1024 * 1024  # 10 MB
MAX_ARGUMENT_KEYS = 100

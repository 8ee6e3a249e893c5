#!/usr/bin/env python3
"""
Endpoint constants - re-exports shared constants from the top-level module
and defines endpoint-specific values (HTTP status codes, headers, paths).
"""

from enum import IntEnum

# ---------------------------------------------------------------------------
# Re-export from top-level constants (single source of truth)
# ---------------------------------------------------------------------------
from ..constants import (  # noqa: F401
    CONTENT_TYPE_JSON,
    HEADER_MCP_SESSION_ID,
    JsonRpcError,
)


# ---------------------------------------------------------------------------
# HTTP status codes (endpoint-specific)
# ---------------------------------------------------------------------------
class HttpStatus(IntEnum):
    OK = 200
    ACCEPTED = 202
    BAD_REQUEST = 400
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    REQUEST_ENTITY_TOO_LARGE = 413


# ---------------------------------------------------------------------------
# Header names (endpoint-specific extras)
# ---------------------------------------------------------------------------
HEADER_CACHE_CONTROL = "Cache-Control"
HEADER_ALLOW = "Allow"
HEADER_CONTENT_LENGTH = "content-length"


# ---------------------------------------------------------------------------
# Header values
# ---------------------------------------------------------------------------
CACHE_NO_CACHE = "no-cache"
CACHE_NO_STORE = "no-cache, no-store, must-revalidate"

HEADERS_NOCACHE: dict[str, str] = {
    HEADER_CACHE_CONTROL: CACHE_NO_CACHE,
}


# ---------------------------------------------------------------------------
# HTTP methods
# ---------------------------------------------------------------------------
METHOD_GET = "GET"
METHOD_POST = "POST"
METHOD_DELETE = "DELETE"
METHOD_OPTIONS = "OPTIONS"


# ---------------------------------------------------------------------------
# Error messages
# ---------------------------------------------------------------------------
ERROR_METHOD_NOT_ALLOWED = "Method not allowed"
ERROR_BODY_TOO_LARGE = "Request body too large"
ERROR_STREAMING_UNSUPPORTED = "Method not allowed: this server does not open a stream on GET"


# ---------------------------------------------------------------------------
# Status strings
# ---------------------------------------------------------------------------
STATUS_CLOSED = "closed"


# ---------------------------------------------------------------------------
# URL paths
# ---------------------------------------------------------------------------
PATH_MCP = "/mcp"
PATH_HEALTH = "/health"

"""
Structured error types for the MCP session server.

Every per-request failure is an ``MCPError`` subclass carrying its JSON-RPC
code, so the dispatcher can turn any of them into an error response without
inspecting the concrete type.
"""

from difflib import get_close_matches
from typing import Any

from .constants import JsonRpcError


class MCPError(Exception):
    """Base error with a JSON-RPC code and optional structured data."""

    code: int = JsonRpcError.INTERNAL_ERROR

    def __init__(self, message: str, code: int | None = None, data: Any = None):
        if code is not None:
            self.code = code
        self.message = message
        self.data = data
        super().__init__(message)

    def to_error_object(self) -> dict[str, Any]:
        """Build the ``error`` member of a JSON-RPC response."""
        error: dict[str, Any] = {"code": int(self.code), "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error


class ParseError(MCPError):
    """Message body is not valid JSON."""

    code = JsonRpcError.PARSE_ERROR


class InvalidRequestError(MCPError):
    """Well-formed JSON that is not a valid JSON-RPC request."""

    code = JsonRpcError.INVALID_REQUEST


class MethodNotFoundError(MCPError):
    code = JsonRpcError.METHOD_NOT_FOUND

    def __init__(self, method: Any):
        self.method = method
        super().__init__(f"Method not found: {method}")


class InvalidParamsError(MCPError):
    """Request parameters failed validation; ``field`` names the culprit when known."""

    code = JsonRpcError.INVALID_PARAMS

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message, data={"field": field} if field is not None else None)


class NotInitializedError(MCPError):
    code = JsonRpcError.NOT_INITIALIZED

    def __init__(self, method: str):
        self.method = method
        super().__init__(f"Session not initialized: '{method}' requires a completed initialize handshake")


class SessionNotFoundError(MCPError):
    """Unknown, expired, or closed session id."""

    code = JsonRpcError.SESSION_NOT_FOUND

    def __init__(self, session_id: str | None):
        self.session_id = session_id
        super().__init__("Session not found")


class MissingSessionError(MCPError):
    """A non-initialize request arrived without a session id."""

    code = JsonRpcError.INVALID_REQUEST

    def __init__(self) -> None:
        super().__init__("Bad Request: No valid session ID provided")


class DuplicateCapabilityError(MCPError):
    """Registration conflict. Raised at startup, never per request."""

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"Duplicate {kind}: '{identifier}' is already registered")


class CapabilityNotFoundError(MCPError):
    """Registry lookup miss. Surfaces to clients as invalid params."""

    code = JsonRpcError.INVALID_PARAMS

    def __init__(self, kind: str, identifier: str, message: str | None = None):
        self.kind = kind
        self.identifier = identifier
        super().__init__(message or f"Unknown {kind}: {identifier}")


class HandlerError(MCPError):
    """A tool or resource implementation failed. Only the message is kept."""

    code = JsonRpcError.INTERNAL_ERROR


def suggest_tool_name(tool_name: str, available_tools: list[str]) -> str | None:
    """Find the closest matching tool name using fuzzy matching.

    Args:
        tool_name: The unknown tool name.
        available_tools: List of registered tool names.

    Returns:
        The closest match, or None if no good match found.
    """
    matches = get_close_matches(tool_name, available_tools, n=1, cutoff=0.6)
    return matches[0] if matches else None


def format_unknown_tool_error(tool_name: str, available_tools: list[str]) -> str:
    """Create an error message for an unknown tool with suggestions.

    Args:
        tool_name: The requested tool name.
        available_tools: List of registered tool names.

    Returns:
        Error message string, potentially with a suggestion.
    """
    suggestion = suggest_tool_name(tool_name, available_tools)
    if suggestion:
        return f"Unknown tool: '{tool_name}'. Did you mean '{suggestion}'?"
    if available_tools:
        names = ", ".join(sorted(available_tools)[:10])
        suffix = "..." if len(available_tools) > 10 else ""
        return f"Unknown tool: '{tool_name}'. Available tools: {names}{suffix}"
    return f"Unknown tool: '{tool_name}'. No tools are registered."

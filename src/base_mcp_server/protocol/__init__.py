#!/usr/bin/env python3
# src/base_mcp_server/protocol/__init__.py
"""
MCP protocol package.

Re-exports the per-session dispatcher, the session manager and the JSON-RPC
envelope helpers.
"""

from .dispatcher import DispatcherState, ProtocolDispatcher, negotiate_protocol_version
from .messages import (
    error_from_exception,
    error_response,
    is_notification,
    parse_message,
    request_id,
    success_response,
    validate_envelope,
)
from .session_manager import Session, SessionManager, SessionState

__all__ = [
    "DispatcherState",
    "ProtocolDispatcher",
    "negotiate_protocol_version",
    "Session",
    "SessionManager",
    "SessionState",
    "error_from_exception",
    "error_response",
    "is_notification",
    "parse_message",
    "request_id",
    "success_response",
    "validate_envelope",
]

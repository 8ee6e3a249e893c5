#!/usr/bin/env python3
# src/base_mcp_server/protocol/messages.py
"""
JSON-RPC 2.0 envelope parsing, validation and response construction.
"""

from typing import Any

import orjson

from ..constants import JSONRPC_KEY, JSONRPC_VERSION, KEY_ERROR, KEY_ID, KEY_METHOD, KEY_PARAMS, KEY_RESULT
from ..errors import InvalidRequestError, MCPError, ParseError


def parse_message(body: bytes | str) -> dict[str, Any]:
    """Decode a request body into a single JSON-RPC message object.

    Raises:
        ParseError: empty body or malformed JSON.
        InvalidRequestError: valid JSON that isn't one object (batches included).
    """
    if not body or not body.strip():
        raise ParseError("Parse error: Empty body")

    try:
        message = orjson.loads(body)
    except orjson.JSONDecodeError as e:
        raise ParseError(f"Parse error: {e}") from e

    if isinstance(message, list):
        raise InvalidRequestError("Invalid Request: batch requests are not supported")
    if not isinstance(message, dict):
        raise InvalidRequestError("Invalid Request: message must be a JSON object")
    return message


def validate_envelope(message: dict[str, Any]) -> None:
    """Check the JSON-RPC envelope fields.

    Raises:
        InvalidRequestError: naming the first problem found.
    """
    if message.get(JSONRPC_KEY) != JSONRPC_VERSION:
        raise InvalidRequestError(f"Invalid Request: '{JSONRPC_KEY}' must be \"{JSONRPC_VERSION}\"")

    method = message.get(KEY_METHOD)
    if not isinstance(method, str) or not method:
        raise InvalidRequestError(f"Invalid Request: '{KEY_METHOD}' must be a non-empty string")

    if KEY_ID in message:
        msg_id = message[KEY_ID]
        if isinstance(msg_id, bool) or not (msg_id is None or isinstance(msg_id, (str, int))):
            raise InvalidRequestError(f"Invalid Request: '{KEY_ID}' must be a string, integer or null")

    if KEY_PARAMS in message and not isinstance(message[KEY_PARAMS], (dict, list)):
        raise InvalidRequestError(f"Invalid Request: '{KEY_PARAMS}' must be an object or array")


def request_id(message: Any) -> Any:
    """Best-effort id for an error reply; None when absent or unusable."""
    if not isinstance(message, dict):
        return None
    msg_id = message.get(KEY_ID)
    if isinstance(msg_id, bool) or not isinstance(msg_id, (str, int)):
        return None
    return msg_id


def is_notification(message: dict[str, Any]) -> bool:
    """A message without an ``id`` member never gets a response."""
    return KEY_ID not in message


def success_response(msg_id: Any, result: Any) -> dict[str, Any]:
    return {JSONRPC_KEY: JSONRPC_VERSION, KEY_ID: msg_id, KEY_RESULT: result}


def error_response(msg_id: Any, code: int, message: str, data: Any = None) -> dict[str, Any]:
    error: dict[str, Any] = {"code": int(code), "message": message}
    if data is not None:
        error["data"] = data
    return {JSONRPC_KEY: JSONRPC_VERSION, KEY_ID: msg_id, KEY_ERROR: error}


def error_from_exception(msg_id: Any, exc: MCPError) -> dict[str, Any]:
    """Error response carrying ``exc``'s code, message and data."""
    return {JSONRPC_KEY: JSONRPC_VERSION, KEY_ID: msg_id, KEY_ERROR: exc.to_error_object()}


__all__ = [
    "error_from_exception",
    "error_response",
    "is_notification",
    "parse_message",
    "request_id",
    "success_response",
    "validate_envelope",
]

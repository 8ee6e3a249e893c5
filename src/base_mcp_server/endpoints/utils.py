#!/usr/bin/env python3
"""
Endpoint utilities - orjson responses and JSON-RPC error mapping
"""

from typing import Any

import orjson
from starlette.responses import Response

from ..errors import InvalidRequestError, MCPError, MissingSessionError, ParseError, SessionNotFoundError
from ..protocol.messages import error_response
from .constants import (
    CONTENT_TYPE_JSON,
    ERROR_METHOD_NOT_ALLOWED,
    HEADER_ALLOW,
    HEADERS_NOCACHE,
    HttpStatus,
)


def json_response(
    data: dict[str, Any] | list[Any],
    status_code: int = HttpStatus.OK,
    headers: dict[str, str] | None = None,
) -> Response:
    """orjson-serialized JSON response with no-cache headers."""
    merged = dict(HEADERS_NOCACHE)
    if headers:
        merged.update(headers)
    return Response(orjson.dumps(data), status_code=status_code, media_type=CONTENT_TYPE_JSON, headers=merged)


def empty_response(status_code: int) -> Response:
    """Bodyless response; notifications never get a JSON-RPC reply."""
    return Response(b"", status_code=status_code, headers=HEADERS_NOCACHE)


def accepted_response() -> Response:
    """Empty 202 for notifications."""
    return empty_response(HttpStatus.ACCEPTED)


def http_status_for(error: MCPError) -> int:
    """HTTP status for an error raised before a message reached its session."""
    if isinstance(error, SessionNotFoundError):
        return HttpStatus.NOT_FOUND
    if isinstance(error, (ParseError, InvalidRequestError, MissingSessionError)):
        return HttpStatus.BAD_REQUEST
    return HttpStatus.OK


def jsonrpc_error_response(
    code: int, message: str, status_code: int, msg_id: Any = None, data: Any = None
) -> Response:
    """JSON-RPC error body with an explicit HTTP status."""
    return json_response(error_response(msg_id, code, message, data), status_code=status_code)


def method_not_allowed_response(allowed_methods: list[str], message: str = ERROR_METHOD_NOT_ALLOWED) -> Response:
    """405 response with an Allow header."""
    return json_response(
        {"error": message, "code": HttpStatus.METHOD_NOT_ALLOWED},
        status_code=HttpStatus.METHOD_NOT_ALLOWED,
        headers={HEADER_ALLOW: ", ".join(allowed_methods)},
    )

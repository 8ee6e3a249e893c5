#!/usr/bin/env python3
"""
endpoints/mcp.py - MCP Protocol Endpoint

Streamable-HTTP-style framing of the session layer on a single path:

    POST   /mcp  one JSON-RPC message; the session id travels in Mcp-Session-Id
    DELETE /mcp  close the session named in Mcp-Session-Id
    GET    /mcp  405, no server-initiated stream is offered
"""

import logging
from typing import TYPE_CHECKING

from starlette.requests import Request
from starlette.responses import Response

from ..constants import MAX_REQUEST_BODY_BYTES
from ..errors import MissingSessionError, SessionNotFoundError
from ..protocol.messages import error_from_exception
from .constants import (
    ERROR_BODY_TOO_LARGE,
    ERROR_STREAMING_UNSUPPORTED,
    HEADER_CONTENT_LENGTH,
    HEADER_MCP_SESSION_ID,
    METHOD_DELETE,
    METHOD_POST,
    STATUS_CLOSED,
    HttpStatus,
    JsonRpcError,
)
from .utils import (
    accepted_response,
    empty_response,
    http_status_for,
    json_response,
    jsonrpc_error_response,
    method_not_allowed_response,
)

if TYPE_CHECKING:
    from ..core import MCPServer

logger = logging.getLogger(__name__)


class MCPEndpoint:
    """HTTP framing for ``MCPServer.handle_message`` and session close."""

    def __init__(self, server: "MCPServer", max_body_bytes: int | None = None):
        self.server = server
        self.max_body_bytes = max_body_bytes or MAX_REQUEST_BODY_BYTES

    async def handle_request(self, request: Request) -> Response:
        """Main entry point for /mcp."""
        if request.method == METHOD_POST:
            return await self._handle_post(request)
        if request.method == METHOD_DELETE:
            return self._handle_delete(request)
        return method_not_allowed_response([METHOD_POST, METHOD_DELETE], ERROR_STREAMING_UNSUPPORTED)

    @staticmethod
    def _session_id(request: Request) -> str | None:
        return request.headers.get(HEADER_MCP_SESSION_ID) or None

    def _too_large(self) -> Response:
        return jsonrpc_error_response(
            JsonRpcError.INVALID_REQUEST, ERROR_BODY_TOO_LARGE, HttpStatus.REQUEST_ENTITY_TOO_LARGE
        )

    async def _handle_post(self, request: Request) -> Response:
        declared = request.headers.get(HEADER_CONTENT_LENGTH)
        if declared is not None and declared.isdigit() and int(declared) > self.max_body_bytes:
            return self._too_large()

        body = await request.body()
        if len(body) > self.max_body_bytes:
            return self._too_large()

        outcome = await self.server.handle_message(body, self._session_id(request))

        if outcome.error is not None:
            status = http_status_for(outcome.error)
            if outcome.response is None:
                return empty_response(status)
            return json_response(outcome.response, status_code=status)
        if outcome.response is None:
            return accepted_response()

        headers = {HEADER_MCP_SESSION_ID: outcome.session_id} if outcome.session_id else None
        return json_response(outcome.response, headers=headers)

    def _handle_delete(self, request: Request) -> Response:
        session_id = self._session_id(request)
        if session_id is None:
            error = MissingSessionError()
            return json_response(error_from_exception(None, error), status_code=HttpStatus.BAD_REQUEST)

        try:
            self.server.close_session(session_id)
        except SessionNotFoundError as e:
            return json_response(error_from_exception(None, e), status_code=HttpStatus.NOT_FOUND)

        logger.debug(f"Session {session_id[:8]}... closed by client")
        return json_response({"status": STATUS_CLOSED})


__all__ = ["MCPEndpoint"]

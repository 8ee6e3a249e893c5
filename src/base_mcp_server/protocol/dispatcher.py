#!/usr/bin/env python3
# src/base_mcp_server/protocol/dispatcher.py
"""
Per-session protocol dispatcher.

Each session owns one ``ProtocolDispatcher``. It runs the handshake state
machine (UNINITIALIZED -> ACTIVE -> CLOSED), routes methods to the registries
and the execution pipeline, and turns every per-request failure into a
JSON-RPC error response.
"""

import asyncio
import logging
from enum import Enum
from typing import Any

from pydantic import ValidationError

from ..constants import (
    KEY_CAPABILITIES,
    KEY_CLIENT_INFO,
    KEY_ID,
    KEY_INSTRUCTIONS,
    KEY_METHOD,
    KEY_PARAMS,
    KEY_PROTOCOL_VERSION,
    KEY_SERVER_INFO,
    MCP_SUPPORTED_PROTOCOL_VERSIONS,
    JsonRpcError,
    McpMethod,
)
from ..errors import (
    InvalidParamsError,
    InvalidRequestError,
    MCPError,
    MethodNotFoundError,
    NotInitializedError,
    SessionNotFoundError,
)
from ..pipeline import ExecutionPipeline
from ..registry import ResourceRegistry, ToolRegistry
from ..types.base import ClientInfo, ServerInfo
from ..types.capabilities import create_server_capabilities
from .messages import error_from_exception, error_response, is_notification, success_response

logger = logging.getLogger(__name__)


class DispatcherState(Enum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    CLOSED = "closed"


def negotiate_protocol_version(requested: str) -> str:
    """Echo a supported version; otherwise offer the newest one we speak."""
    if requested in MCP_SUPPORTED_PROTOCOL_VERSIONS:
        return requested
    return MCP_SUPPORTED_PROTOCOL_VERSIONS[0]


class ProtocolDispatcher:
    """Handshake state machine and method router for one session."""

    def __init__(
        self,
        server_info: ServerInfo,
        tools: ToolRegistry,
        resources: ResourceRegistry,
        pipeline: ExecutionPipeline,
        instructions: str | None = None,
        session_id: str | None = None,
    ):
        self.server_info = server_info
        self.tools = tools
        self.resources = resources
        self.pipeline = pipeline
        self.instructions = instructions
        self.session_id = session_id

        self.state = DispatcherState.UNINITIALIZED
        self.protocol_version: str | None = None
        self.client_info = ClientInfo()
        self.capabilities: dict[str, bool] = {"tools": False, "resources": False}

    @property
    def _log_id(self) -> str:
        return f"{self.session_id[:8]}..." if self.session_id else "-"

    async def handle(self, message: dict[str, Any]) -> dict[str, Any] | None:
        """Dispatch one validated envelope; notifications return None.

        Raises:
            SessionNotFoundError: if the dispatcher has been closed.
        """
        if self.state is DispatcherState.CLOSED:
            raise SessionNotFoundError(self.session_id)

        method = message[KEY_METHOD]
        params = message.get(KEY_PARAMS)

        if is_notification(message):
            self._handle_notification(method, params)
            return None

        msg_id = message[KEY_ID]
        logger.debug(f"[{self._log_id}] Handling {method} (ID: {msg_id})")

        try:
            result = await self._route(method, self._params_object(params))
        except asyncio.CancelledError:
            raise  # Never swallow cancellation
        except MCPError as e:
            logger.debug(f"[{self._log_id}] {method} failed with {e.code}: {e.message}")
            return error_from_exception(msg_id, e)
        except Exception as e:
            logger.error(f"Error handling request {method}: {e}", exc_info=True)
            return error_response(msg_id, JsonRpcError.INTERNAL_ERROR, "Internal server error")

        return success_response(msg_id, result)

    def close(self) -> None:
        self.state = DispatcherState.CLOSED

    # ================================================================
    # Routing
    # ================================================================

    @staticmethod
    def _params_object(params: Any) -> dict[str, Any]:
        if params is None:
            return {}
        if not isinstance(params, dict):
            raise InvalidParamsError("params must be an object")
        return params

    async def _route(self, method: str, params: dict[str, Any]) -> dict[str, Any]:
        if method == McpMethod.INITIALIZE:
            return self._handle_initialize(params)
        if method == McpMethod.PING:
            return {}

        if self.state is not DispatcherState.ACTIVE:
            raise NotInitializedError(method)

        if method == McpMethod.TOOLS_LIST:
            tools = self.tools.list()
            logger.debug(f"Returning {len(tools)} tools")
            return {"tools": tools}
        elif method == McpMethod.TOOLS_CALL:
            return await self._handle_tools_call(params)
        elif method == McpMethod.RESOURCES_LIST:
            resources = self.resources.list()
            logger.debug(f"Returning {len(resources)} resources")
            return {"resources": resources}
        elif method == McpMethod.RESOURCES_TEMPLATES_LIST:
            return {"resourceTemplates": self.resources.list_templates()}
        elif method == McpMethod.RESOURCES_READ:
            return await self._handle_resources_read(params)
        else:
            raise MethodNotFoundError(method)

    def _handle_notification(self, method: str, params: Any) -> None:
        if method == McpMethod.INITIALIZED:
            logger.debug(f"[{self._log_id}] Initialized notification received")
        elif method == McpMethod.NOTIFICATIONS_CANCELLED:
            # Handlers run to completion; the cancellation is only recorded
            request = params.get("requestId") if isinstance(params, dict) else None
            logger.debug(f"[{self._log_id}] Cancellation requested for {request}; ignored")
        else:
            logger.debug(f"[{self._log_id}] Ignoring notification {method}")

    def _handle_initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        if self.state is not DispatcherState.UNINITIALIZED:
            raise InvalidRequestError("Session already initialized")

        requested = params.get(KEY_PROTOCOL_VERSION)
        if not isinstance(requested, str) or not requested:
            raise InvalidParamsError(f"Missing or invalid '{KEY_PROTOCOL_VERSION}'", field=KEY_PROTOCOL_VERSION)

        try:
            self.client_info = ClientInfo.model_validate(params.get(KEY_CLIENT_INFO) or {})
        except ValidationError as e:
            reason = e.errors()[0]["msg"]
            raise InvalidParamsError(f"Invalid '{KEY_CLIENT_INFO}': {reason}", field=KEY_CLIENT_INFO) from e

        self.protocol_version = negotiate_protocol_version(requested)
        self.capabilities = {"tools": len(self.tools) > 0, "resources": len(self.resources) > 0}

        capabilities = create_server_capabilities(**self.capabilities)
        result: dict[str, Any] = {
            KEY_PROTOCOL_VERSION: self.protocol_version,
            KEY_CAPABILITIES: capabilities.model_dump(exclude_none=True),
            KEY_SERVER_INFO: self.server_info.model_dump(exclude_none=True),
        }
        if self.instructions:
            result[KEY_INSTRUCTIONS] = self.instructions

        self.state = DispatcherState.ACTIVE
        logger.debug(
            f"Initialized session {self._log_id} for {self.client_info.name} "
            f"(requested {requested}, negotiated {self.protocol_version})"
        )
        return result

    async def _handle_tools_call(self, params: dict[str, Any]) -> dict[str, Any]:
        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise InvalidParamsError("Missing tool name", field="name")

        descriptor = self.tools.resolve(name)
        outcome = await self.pipeline.invoke_tool(descriptor, params.get("arguments"))
        return outcome.unwrap()

    async def _handle_resources_read(self, params: dict[str, Any]) -> dict[str, Any]:
        uri = params.get("uri")
        if not isinstance(uri, str) or not uri:
            raise InvalidParamsError("Missing resource uri", field="uri")

        match = self.resources.resolve(uri)
        outcome = await self.pipeline.invoke_resource(match, uri)
        logger.debug(f"Read resource {uri}")
        return outcome.unwrap()


__all__ = ["DispatcherState", "ProtocolDispatcher", "negotiate_protocol_version"]

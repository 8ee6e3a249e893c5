#!/usr/bin/env python3
# src/base_mcp_server/core.py
"""
Core - The MCPServer context object

One ``MCPServer`` owns everything with process lifetime: the tool and resource
registries, the execution pipeline and the session manager. Transports hold a
reference to it instead of reaching for module-level state.

Usage:
    server = MCPServer(ServerConfig(name="demo"))

    @server.tool("hello")
    def hello(name: str) -> str:
        return f"Hello, {name}!"

    @server.resource("notes://{note_id}")
    def note(note_id: str) -> str:
        return notes[note_id]

    server.run()
"""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .config import ServerConfig
from .constants import CONTENT_TYPE_PLAIN, KEY_METHOD, JsonRpcError
from .errors import MCPError
from .pipeline import ExecutionPipeline
from .protocol.dispatcher import ProtocolDispatcher
from .protocol.messages import (
    error_from_exception,
    error_response,
    is_notification,
    parse_message,
    request_id,
    validate_envelope,
)
from .protocol.session_manager import SessionManager
from .registry import ResourceRegistry, ToolRegistry
from .types.base import ServerInfo
from .types.capabilities import create_server_capabilities
from .types.handlers import ResourceDescriptor, ToolDescriptor

logger = logging.getLogger(__name__)


@dataclass
class DispatchOutcome:
    """Result of ``MCPServer.handle_message``.

    ``error`` is set when the message was rejected before reaching a session
    (bad envelope, missing or unknown session); ``response`` then holds the
    matching JSON-RPC error, or None for a rejected notification.
    ``session_id`` is set only for a newly created session.
    """

    response: dict[str, Any] | None
    session_id: str | None = None
    error: MCPError | None = None


class MCPServer:
    """Session-oriented MCP server context."""

    def __init__(self, config: ServerConfig | None = None):
        self.config = config or ServerConfig()
        self.server_info = ServerInfo(name=self.config.name, version=self.config.version)

        self.tools = ToolRegistry()
        self.resources = ResourceRegistry()
        self.pipeline = ExecutionPipeline()
        self.session_manager = SessionManager(self.config, self._create_dispatcher)

        logger.debug(f"Initialized MCP server: {self.config.name} v{self.config.version}")

    def _create_dispatcher(self, session_id: str) -> ProtocolDispatcher:
        return ProtocolDispatcher(
            server_info=self.server_info,
            tools=self.tools,
            resources=self.resources,
            pipeline=self.pipeline,
            instructions=self.config.instructions,
            session_id=session_id,
        )

    # ============================================================================
    # Registration
    # ============================================================================

    def register_tool(self, handler: Any) -> ToolDescriptor:
        """Register a tool handler object (or a prebuilt ``ToolDescriptor``).

        Raises:
            DuplicateCapabilityError: a tool with the same name exists.
        """
        descriptor = handler if isinstance(handler, ToolDescriptor) else ToolDescriptor.from_handler(handler)
        return self.tools.register(descriptor)

    def register_resource(self, handler: Any) -> ResourceDescriptor:
        """Register a resource handler object (or a prebuilt ``ResourceDescriptor``).

        Raises:
            DuplicateCapabilityError: the URI template or name is taken.
        """
        descriptor = (
            handler if isinstance(handler, ResourceDescriptor) else ResourceDescriptor.from_handler(handler)
        )
        return self.resources.register(descriptor)

    def tool(
        self,
        name: str | Callable[..., Any] | None = None,
        description: str | None = None,
        title: str | None = None,
        input_schema: dict[str, Any] | None = None,
    ) -> Any:
        """
        Tool decorator.

        Usage:
            @server.tool
            def hello(name: str) -> str: ...

            @server.tool("add", description="Add two numbers")
            def add(a: float, b: float) -> float: ...
        """

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            descriptor = ToolDescriptor.from_function(
                func, name=tool_name, description=description, title=title, input_schema=input_schema
            )
            self.tools.register(descriptor)
            func._mcp_tool = descriptor  # type: ignore[attr-defined]
            return func

        # Handle both @server.tool and @server.tool() usage
        if callable(name):
            tool_name = None
            return decorator(name)
        tool_name = name
        return decorator

    def resource(
        self,
        uri_template: str,
        name: str | None = None,
        description: str | None = None,
        mime_type: str = CONTENT_TYPE_PLAIN,
        title: str | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """
        Resource decorator. Placeholders in the template become keyword arguments.

        Usage:
            @server.resource("greeting://{name}")
            def greeting(name: str) -> str: ...
        """

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            descriptor = ResourceDescriptor.from_function(
                uri_template, func, name=name, description=description, mime_type=mime_type, title=title
            )
            self.resources.register(descriptor)
            func._mcp_resource = descriptor  # type: ignore[attr-defined]
            return func

        return decorator

    def capabilities(self) -> dict[str, Any]:
        """Capabilities advertised on ``initialize``, derived from what is registered."""
        capabilities = create_server_capabilities(tools=len(self.tools) > 0, resources=len(self.resources) > 0)
        return capabilities.model_dump(exclude_none=True)

    # ============================================================================
    # Message Handling
    # ============================================================================

    async def handle_message(self, body: bytes | str, session_id: str | None = None) -> DispatchOutcome:
        """Parse one raw message and dispatch it to its session. Never raises ``MCPError``."""
        message: Any = None
        notification = False
        try:
            message = parse_message(body)
            validate_envelope(message)
            notification = is_notification(message)
            dispatch = self.session_manager.dispatch(message, session_id)
            if self.config.handler_timeout is None:
                response, new_session_id = await dispatch
            else:
                response, new_session_id = await asyncio.wait_for(dispatch, self.config.handler_timeout)
        except MCPError as e:
            logger.debug(f"Rejected message: {e.message}")
            if notification:
                return DispatchOutcome(None, error=e)
            return DispatchOutcome(error_from_exception(request_id(message), e), error=e)
        except asyncio.TimeoutError:
            method = message.get(KEY_METHOD)
            logger.warning(f"Request {method} timed out after {self.config.handler_timeout}s")
            if notification:
                return DispatchOutcome(None)
            return DispatchOutcome(
                error_response(
                    request_id(message),
                    JsonRpcError.INTERNAL_ERROR,
                    f"Request timed out after {self.config.handler_timeout}s",
                )
            )

        return DispatchOutcome(response, session_id=new_session_id)

    def close_session(self, session_id: str) -> None:
        """Close a session. Raises ``SessionNotFoundError`` if it isn't live."""
        self.session_manager.close(session_id)

    def status(self) -> dict[str, Any]:
        """Read-only health snapshot."""
        return {
            "status": "healthy",
            "server": self.server_info.name,
            "version": self.server_info.version,
            "sessions": self.session_manager.session_count,
            "timestamp": time.time(),
        }

    def info(self) -> dict[str, Any]:
        return {
            "server": self.server_info.model_dump(exclude_none=True),
            "capabilities": self.capabilities(),
            "tools": self.tools.names(),
            "resources": [descriptor.uri_template for descriptor in self.resources],
        }

    # ============================================================================
    # Server Management
    # ============================================================================

    def create_app(self) -> Any:
        """Build the Starlette application serving this server."""
        from .app import create_app

        return create_app(self)

    async def start(self) -> None:
        self.session_manager.start_sweeper()
        logger.info(
            f"MCP server {self.server_info.name} v{self.server_info.version} started "
            f"({len(self.tools)} tools, {len(self.resources)} resources)"
        )

    async def shutdown(self) -> None:
        """Stop the sweeper and close every session."""
        await self.session_manager.shutdown()
        logger.info(f"MCP server {self.server_info.name} stopped")

    def run(self, host: str | None = None, port: int | None = None, log_level: str | None = None) -> None:
        """Serve over HTTP with uvicorn until interrupted."""
        import uvicorn

        final_host = host or self.config.host
        final_port = port or self.config.port
        logger.info(f"Serving MCP on http://{final_host}:{final_port}/mcp")
        uvicorn.run(
            self.create_app(),
            host=final_host,
            port=final_port,
            log_level=log_level or self.config.log_level,
        )


__all__ = ["DispatchOutcome", "MCPServer"]

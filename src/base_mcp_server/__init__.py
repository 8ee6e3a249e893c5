#!/usr/bin/env python3
"""
base_mcp_server - A session-oriented MCP server

Tools and resources are registered on an explicit server context:

    from base_mcp_server import MCPServer, ServerConfig

    server = MCPServer(ServerConfig(name="my-server"))

    @server.tool
    def hello(name: str) -> str:
        return f"Hello, {name}!"

    @server.resource("greeting://{name}")
    def greeting(name: str) -> str:
        return f"Hello, {name}!"

    if __name__ == "__main__":
        server.run(port=3000)
"""

from .config import ServerConfig
from .core import DispatchOutcome, MCPServer
from .errors import (
    CapabilityNotFoundError,
    DuplicateCapabilityError,
    HandlerError,
    InvalidParamsError,
    InvalidRequestError,
    MCPError,
    MethodNotFoundError,
    MissingSessionError,
    NotInitializedError,
    ParseError,
    SessionNotFoundError,
)
from .pipeline import ExecutionPipeline, ExecutionResult
from .registry import ResourceMatch, ResourceRegistry, ToolRegistry
from .types import ResourceDescriptor, ToolDescriptor, ToolParameter
from .uri_template import UriTemplate

__version__ = "1.0.0"
__all__ = [
    "MCPServer",
    "ServerConfig",
    "DispatchOutcome",
    # Registries
    "ToolRegistry",
    "ResourceRegistry",
    "ResourceMatch",
    "ToolDescriptor",
    "ResourceDescriptor",
    "ToolParameter",
    "UriTemplate",
    # Execution
    "ExecutionPipeline",
    "ExecutionResult",
    # Errors
    "MCPError",
    "ParseError",
    "InvalidRequestError",
    "MethodNotFoundError",
    "InvalidParamsError",
    "NotInitializedError",
    "SessionNotFoundError",
    "MissingSessionError",
    "DuplicateCapabilityError",
    "CapabilityNotFoundError",
    "HandlerError",
]

#!/usr/bin/env python3
# src/base_mcp_server/types/__init__.py
"""
Types package - protocol value types, parameter schemas and capability descriptors.
"""

from .base import (
    ClientInfo,
    MCPModel,
    ResourcesCapability,
    ServerCapabilities,
    ServerInfo,
    TextContent,
    TextResourceContents,
    ToolsCapability,
    content_to_dict,
    create_text_content,
)
from .capabilities import create_server_capabilities
from .content import format_content, format_content_as_text, format_resource_result, format_tool_result
from .handlers import ResourceCapability, ResourceDescriptor, ToolCapability, ToolDescriptor
from .parameters import (
    JSON_TYPES,
    ToolParameter,
    build_input_schema,
    extract_parameters_from_function,
    normalize_input_schema,
    validate_arguments,
)

__all__ = [
    # Wire models
    "MCPModel",
    "ServerInfo",
    "ClientInfo",
    "ServerCapabilities",
    "ToolsCapability",
    "ResourcesCapability",
    "TextContent",
    "TextResourceContents",
    "content_to_dict",
    "create_text_content",
    "create_server_capabilities",
    # Content formatting
    "format_content",
    "format_content_as_text",
    "format_tool_result",
    "format_resource_result",
    # Capabilities
    "ToolCapability",
    "ResourceCapability",
    "ToolDescriptor",
    "ResourceDescriptor",
    # Parameters
    "JSON_TYPES",
    "ToolParameter",
    "build_input_schema",
    "extract_parameters_from_function",
    "normalize_input_schema",
    "validate_arguments",
]

#!/usr/bin/env python3
# src/base_mcp_server/types/capabilities.py
"""
Capabilities - Server capability creation

The advertised capability set is derived from what is actually registered:
a capability appears only when its registry is non-empty.
"""

from .base import ResourcesCapability, ServerCapabilities, ToolsCapability


def create_server_capabilities(tools: bool = True, resources: bool = True) -> ServerCapabilities:
    """Create server capabilities with presence flags for tools and resources."""
    capabilities = {}

    if tools:
        capabilities["tools"] = ToolsCapability(listChanged=False)
    if resources:
        capabilities["resources"] = ResourcesCapability(listChanged=False, subscribe=False)

    return ServerCapabilities(**capabilities)


__all__ = ["create_server_capabilities"]

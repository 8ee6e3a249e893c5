#!/usr/bin/env python3
# src/base_mcp_server/types/base.py
"""
Base - Pydantic models for the MCP wire types the server emits or reads

Only the shapes this server touches are modelled; outgoing ones are serialized
with ``model_dump(exclude_none=True)`` so optional members stay off the wire.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict


class MCPModel(BaseModel):
    """Common base: tolerate unknown fields so newer clients don't break parsing."""

    model_config = ConfigDict(extra="allow")


class ServerInfo(MCPModel):
    name: str
    version: str
    title: str | None = None


class ClientInfo(MCPModel):
    name: str = "unknown"
    version: str | None = None


class ToolsCapability(MCPModel):
    listChanged: bool = False


class ResourcesCapability(MCPModel):
    subscribe: bool = False
    listChanged: bool = False


class ServerCapabilities(MCPModel):
    tools: ToolsCapability | None = None
    resources: ResourcesCapability | None = None


class TextContent(MCPModel):
    type: Literal["text"] = "text"
    text: str


class TextResourceContents(MCPModel):
    uri: str
    mimeType: str | None = None
    text: str


def create_text_content(text: str) -> TextContent:
    """Create a text content block."""
    return TextContent(text=text)


def content_to_dict(content: BaseModel) -> dict:
    """Serialize a content model to its wire dict."""
    return content.model_dump(exclude_none=True)


__all__ = [
    "MCPModel",
    "ServerInfo",
    "ClientInfo",
    "ToolsCapability",
    "ResourcesCapability",
    "ServerCapabilities",
    "TextContent",
    "TextResourceContents",
    "create_text_content",
    "content_to_dict",
]

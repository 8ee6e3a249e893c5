#!/usr/bin/env python3
# src/base_mcp_server/types/content.py
"""
Content - Result envelope formatting with orjson

Handlers return arbitrary Python values; these helpers wrap them into the
protocol's content arrays without interpreting the payload.
"""

from typing import Any

import orjson
from pydantic import BaseModel

from .base import TextContent, TextResourceContents, content_to_dict, create_text_content


def format_content_as_text(content: Any) -> str:
    """Format any content as plain text."""
    if isinstance(content, str):
        return content
    elif isinstance(content, BaseModel):
        return orjson.dumps(content.model_dump(), option=orjson.OPT_INDENT_2).decode()
    elif isinstance(content, dict | list):
        return orjson.dumps(content, option=orjson.OPT_INDENT_2).decode()
    else:
        return str(content)


def format_content(content: Any) -> list[dict[str, Any]]:
    """Format a tool result as a list of MCP content blocks."""
    if isinstance(content, TextContent):
        return [content_to_dict(content)]
    elif isinstance(content, list):
        items = []
        for item in content:
            items.extend(format_content(item))
        return items
    return [content_to_dict(create_text_content(format_content_as_text(content)))]


def format_tool_result(result: Any) -> dict[str, Any]:
    """Wrap a tool handler's return value into ``{"content": [...]}``.

    A dict that already carries a ``content`` list is passed through as-is.
    """
    if isinstance(result, dict) and isinstance(result.get("content"), list):
        return result
    return {"content": format_content(result)}


def format_resource_result(result: Any, uri: str, mime_type: str | None) -> dict[str, Any]:
    """Wrap a resource handler's return value into ``{"contents": [...]}``.

    A dict that already carries a ``contents`` list is passed through as-is.
    """
    if isinstance(result, dict) and isinstance(result.get("contents"), list):
        return result
    contents = TextResourceContents(uri=uri, mimeType=mime_type, text=format_content_as_text(result))
    return {"contents": [content_to_dict(contents)]}


__all__ = [
    "format_content",
    "format_content_as_text",
    "format_tool_result",
    "format_resource_result",
]

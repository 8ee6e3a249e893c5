#!/usr/bin/env python3
# src/base_mcp_server/demo.py
"""
Demo capabilities: an ``add`` tool and a ``greeting://{name}`` resource.

Both are plain classes satisfying the capability contracts, which makes them a
template for writing handlers outside the decorator API.
"""

from typing import TYPE_CHECKING, Any

from .constants import CONTENT_TYPE_PLAIN

if TYPE_CHECKING:
    from .core import MCPServer


def format_number(value: float) -> str:
    """Render integral values without a trailing ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class AddTool:
    name = "add"
    title = "Addition Tool"
    description = "Add two numbers"
    input_schema = {
        "a": {"type": "number", "description": "First number"},
        "b": {"type": "number", "description": "Second number"},
    }

    def execute(self, params: dict[str, Any]) -> str:
        return format_number(params["a"] + params["b"])


class GreetingResource:
    name = "greeting"
    title = "Greeting Resource"
    description = "Dynamic greeting generator"
    uri_template = "greeting://{name}"
    mime_type = CONTENT_TYPE_PLAIN

    def read(self, uri: str, params: dict[str, str]) -> str:
        return f"Hello, {params['name']}!"


def register_demo_capabilities(server: "MCPServer") -> None:
    """Register the demo tool and resource on ``server``."""
    server.register_tool(AddTool())
    server.register_resource(GreetingResource())

#!/usr/bin/env python3
"""Tests for the demo tool and resource."""

import pytest

from base_mcp_server import MCPServer
from base_mcp_server.demo import AddTool, GreetingResource, format_number, register_demo_capabilities
from base_mcp_server.pipeline import ExecutionPipeline
from base_mcp_server.types.handlers import ResourceCapability, ToolCapability


class TestFormatNumber:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(8.0, "8"), (2.5, "2.5"), (-3.0, "-3"), (7, "7"), (0.1 + 0.2, "0.30000000000000004")],
    )
    def test_format(self, value, expected):
        assert format_number(value) == expected


class TestDemoHandlers:
    def test_satisfy_capability_contracts(self):
        assert isinstance(AddTool(), ToolCapability)
        assert isinstance(GreetingResource(), ResourceCapability)

    def test_add(self):
        assert AddTool().execute({"a": 5.0, "b": 3.0}) == "8"
        assert AddTool().execute({"a": 1, "b": 1.5}) == "2.5"

    def test_greeting(self):
        assert GreetingResource().read("greeting://Alice", {"name": "Alice"}) == "Hello, Alice!"

    def test_registration(self):
        server = MCPServer()
        register_demo_capabilities(server)

        assert server.tools.names() == ["add"]
        (resource,) = server.resources.list()
        assert resource["uriTemplate"] == "greeting://{name}"
        assert resource["mimeType"] == "text/plain"

    @pytest.mark.asyncio
    async def test_add_coerces_string_arguments(self):
        server = MCPServer()
        register_demo_capabilities(server)

        result = await ExecutionPipeline().invoke_tool(server.tools.resolve("add"), {"a": "5", "b": "3"})

        assert result.value == {"content": [{"type": "text", "text": "8"}]}

    @pytest.mark.asyncio
    async def test_add_rejects_non_numeric(self):
        server = MCPServer()
        register_demo_capabilities(server)

        result = await ExecutionPipeline().invoke_tool(server.tools.resolve("add"), {"a": "five", "b": "3"})

        assert result.error.code == -32602
        assert result.error.field == "a"

#!/usr/bin/env python3
"""
Tests for the MCPServer context: registration, decorators, message handling
and lifecycle.
"""

import asyncio

import orjson
import pytest

from base_mcp_server import MCPServer, ServerConfig
from base_mcp_server.errors import DuplicateCapabilityError, MissingSessionError, ParseError, SessionNotFoundError
from base_mcp_server.types.handlers import ResourceDescriptor, ToolDescriptor


def _init_body(msg_id=1):
    return orjson.dumps(
        {
            "jsonrpc": "2.0",
            "id": msg_id,
            "method": "initialize",
            "params": {"protocolVersion": "2025-06-18", "capabilities": {}},
        }
    )


def _body(method, params=None, msg_id=2):
    message = {"jsonrpc": "2.0", "id": msg_id, "method": method}
    if params is not None:
        message["params"] = params
    return orjson.dumps(message)


class DictTool:
    """Handler object using camelCase attribute names."""

    name = "lookup"
    title = None
    description = "Look a key up"
    inputSchema = {"key": {"type": "string"}}

    def execute(self, params):
        return {"key": params["key"]}


class TestRegistration:
    """Decorators and handler-object registration."""

    def test_bare_tool_decorator(self):
        server = MCPServer()

        @server.tool
        def hello(name: str) -> str:
            """Say hello."""
            return f"Hello, {name}!"

        assert isinstance(hello._mcp_tool, ToolDescriptor)
        assert hello("x") == "Hello, x!"
        (entry,) = server.tools.list()
        assert entry["name"] == "hello"
        assert entry["description"] == "Say hello."
        assert entry["inputSchema"]["required"] == ["name"]

    def test_named_tool_decorator(self):
        server = MCPServer()

        @server.tool("sum", description="Add two numbers", title="Sum")
        def add(a: float, b: float) -> float:
            return a + b

        (entry,) = server.tools.list()
        assert entry["name"] == "sum"
        assert entry["title"] == "Sum"
        assert entry["description"] == "Add two numbers"

    def test_resource_decorator(self):
        server = MCPServer()

        @server.resource("notes://{note_id}", mime_type="application/json")
        def note(note_id: str) -> dict:
            return {"id": note_id}

        assert isinstance(note._mcp_resource, ResourceDescriptor)
        match = server.resources.resolve("notes://42")
        assert match.params == {"note_id": "42"}
        assert match.descriptor.mime_type == "application/json"

    def test_duplicate_tool_rejected(self):
        server = MCPServer()
        server.register_tool(DictTool())

        with pytest.raises(DuplicateCapabilityError):
            server.register_tool(DictTool())

    def test_capabilities_follow_registrations(self):
        server = MCPServer()
        assert server.capabilities() == {}

        server.register_tool(DictTool())
        assert server.capabilities() == {"tools": {"listChanged": False}}

    def test_info(self):
        server = MCPServer(ServerConfig(name="info-server"))
        server.register_tool(DictTool())

        info = server.info()

        assert info["server"]["name"] == "info-server"
        assert info["tools"] == ["lookup"]
        assert info["resources"] == []


class TestHandleMessage:
    """Raw-body entry point shared by every transport."""

    @pytest.mark.asyncio
    async def test_initialize_returns_new_session(self):
        server = MCPServer()

        outcome = await server.handle_message(_init_body())

        assert outcome.error is None
        assert outcome.session_id is not None
        assert outcome.response["result"]["protocolVersion"] == "2025-06-18"

    @pytest.mark.asyncio
    async def test_parse_error_outcome(self):
        outcome = await MCPServer().handle_message(b"{oops")

        assert isinstance(outcome.error, ParseError)
        assert outcome.response["error"]["code"] == -32700
        assert outcome.response["id"] is None

    @pytest.mark.asyncio
    async def test_unknown_session_keeps_request_id(self):
        outcome = await MCPServer().handle_message(_body("tools/list", msg_id="abc"), "missing")

        assert isinstance(outcome.error, SessionNotFoundError)
        assert outcome.response["id"] == "abc"

    @pytest.mark.asyncio
    async def test_rejected_notification_has_no_response(self):
        body = orjson.dumps({"jsonrpc": "2.0", "method": "notifications/initialized"})

        outcome = await MCPServer().handle_message(body)

        assert outcome.response is None
        assert isinstance(outcome.error, MissingSessionError)

    @pytest.mark.asyncio
    async def test_handler_object_tool_call(self):
        server = MCPServer()
        server.register_tool(DictTool())
        session_id = (await server.handle_message(_init_body())).session_id

        outcome = await server.handle_message(
            _body("tools/call", {"name": "lookup", "arguments": {"key": "k"}}), session_id
        )

        text = outcome.response["result"]["content"][0]["text"]
        assert orjson.loads(text) == {"key": "k"}

    @pytest.mark.asyncio
    async def test_handler_timeout(self):
        server = MCPServer(ServerConfig(handler_timeout=0.05))

        @server.tool
        async def sleepy() -> str:
            await asyncio.sleep(5)
            return "late"

        session_id = (await server.handle_message(_init_body())).session_id
        outcome = await server.handle_message(_body("tools/call", {"name": "sleepy"}, msg_id=7), session_id)

        assert outcome.error is None
        assert outcome.response == {
            "jsonrpc": "2.0",
            "id": 7,
            "error": {"code": -32603, "message": "Request timed out after 0.05s"},
        }

        # The session stays usable after a timed-out request
        ping = await server.handle_message(_body("ping", msg_id=8), session_id)
        assert ping.response["result"] == {}

    @pytest.mark.asyncio
    async def test_close_session(self):
        server = MCPServer()
        session_id = (await server.handle_message(_init_body())).session_id

        server.close_session(session_id)

        with pytest.raises(SessionNotFoundError):
            server.close_session(session_id)


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_start_and_shutdown(self):
        server = MCPServer()
        await server.handle_message(_init_body())

        await server.start()
        assert server.session_manager._sweeper is not None
        await server.shutdown()

        assert server.session_manager._sweeper is None
        assert server.session_manager.session_count == 0

    def test_status(self):
        server = MCPServer(ServerConfig(name="status-server", version="2.0.0"))

        status = server.status()

        assert status["status"] == "healthy"
        assert status["server"] == "status-server"
        assert status["version"] == "2.0.0"
        assert status["sessions"] == 0
        assert "timestamp" in status

    def test_run_uses_config(self, monkeypatch):
        calls = {}

        def fake_run(app, **kwargs):
            calls["app"] = app
            calls.update(kwargs)

        monkeypatch.setattr("uvicorn.run", fake_run)
        server = MCPServer(ServerConfig(host="0.0.0.0", port=9123, log_level="warning"))

        server.run()

        assert calls["host"] == "0.0.0.0"
        assert calls["port"] == 9123
        assert calls["log_level"] == "warning"
        assert calls["app"] is not None

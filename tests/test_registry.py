#!/usr/bin/env python3
"""Tests for the tool and resource registries."""

import pytest

from base_mcp_server.constants import JsonRpcError
from base_mcp_server.errors import CapabilityNotFoundError, DuplicateCapabilityError
from base_mcp_server.registry import ResourceRegistry, ToolRegistry
from base_mcp_server.types.handlers import ResourceDescriptor, ToolDescriptor

# ============================================================================
# Helpers
# ============================================================================


def _tool(name, result="ok"):
    def handler() -> str:
        return result

    return ToolDescriptor.from_function(handler, name=name, description=f"{name} tool")


def _resource(uri_template, name=None):
    def handler(**params) -> str:
        return "content"

    return ResourceDescriptor.from_function(uri_template, handler, name=name or uri_template)


class CamelCaseTool:
    name = "camel"
    title = "Camel Tool"
    description = "Uses camelCase attributes"
    inputSchema = {"x": {"type": "integer"}}

    def execute(self, params):
        return params["x"]


class CamelCaseResource:
    name = "camel-resource"
    title = None
    description = "Uses camelCase attributes"
    uriTemplate = "camel://{id}"
    mimeType = "application/json"

    def read(self, uri, params):
        return {"id": params["id"]}


# ============================================================================
# Tool Registry
# ============================================================================


class TestToolRegistry:
    def test_register_and_resolve(self):
        registry = ToolRegistry()
        descriptor = registry.register(_tool("add"))
        assert registry.resolve("add") is descriptor
        assert "add" in registry
        assert len(registry) == 1

    def test_duplicate_name_fails_and_first_stays(self):
        registry = ToolRegistry()
        first = registry.register(_tool("add", result="first"))

        with pytest.raises(DuplicateCapabilityError, match="add"):
            registry.register(_tool("add", result="second"))

        assert registry.resolve("add") is first
        assert len(registry) == 1

    def test_list_preserves_registration_order(self):
        registry = ToolRegistry()
        for name in ("zeta", "alpha", "mid"):
            registry.register(_tool(name))

        assert [entry["name"] for entry in registry.list()] == ["zeta", "alpha", "mid"]
        assert registry.names() == ["zeta", "alpha", "mid"]

    def test_list_entry_shape(self):
        registry = ToolRegistry()
        registry.register(ToolDescriptor.from_handler(CamelCaseTool()))

        (entry,) = registry.list()
        assert entry == {
            "name": "camel",
            "title": "Camel Tool",
            "description": "Uses camelCase attributes",
            "inputSchema": {"type": "object", "properties": {"x": {"type": "integer"}}, "required": ["x"]},
        }

    def test_list_entries_are_copies(self):
        registry = ToolRegistry()
        registry.register(_tool("add"))
        registry.list()[0]["name"] = "mutated"
        assert registry.list()[0]["name"] == "add"

    def test_list_schemas_are_copies(self):
        registry = ToolRegistry()
        registry.register(ToolDescriptor.from_handler(CamelCaseTool()))

        registry.list()[0]["inputSchema"]["properties"]["y"] = {"type": "string"}

        assert registry.list()[0]["inputSchema"]["properties"] == {"x": {"type": "integer"}}

    def test_unknown_tool_suggests_close_match(self):
        registry = ToolRegistry()
        registry.register(_tool("add"))

        with pytest.raises(CapabilityNotFoundError) as exc_info:
            registry.resolve("ad")

        assert exc_info.value.code == JsonRpcError.INVALID_PARAMS
        assert "Did you mean 'add'" in exc_info.value.message

    def test_unknown_tool_with_empty_registry(self):
        with pytest.raises(CapabilityNotFoundError, match="No tools are registered"):
            ToolRegistry().resolve("anything")


# ============================================================================
# Resource Registry
# ============================================================================


class TestResourceRegistry:
    def test_resolve_extracts_params(self):
        registry = ResourceRegistry()
        descriptor = registry.register(_resource("greeting://{name}", name="greeting"))

        match = registry.resolve("greeting://Alice")
        assert match.descriptor is descriptor
        assert match.params == {"name": "Alice"}

    def test_empty_required_placeholder_not_found(self):
        registry = ResourceRegistry()
        registry.register(_resource("greeting://{name}", name="greeting"))

        with pytest.raises(CapabilityNotFoundError, match="Unknown resource: greeting://"):
            registry.resolve("greeting://")

    def test_first_matching_template_wins(self):
        registry = ResourceRegistry()
        first = registry.register(_resource("items://{a}", name="first"))
        registry.register(_resource("items://{b}", name="second"))

        match = registry.resolve("items://x")
        assert match.descriptor is first
        assert match.params == {"a": "x"}

    def test_duplicate_template_rejected(self):
        registry = ResourceRegistry()
        registry.register(_resource("greeting://{name}", name="one"))
        with pytest.raises(DuplicateCapabilityError):
            registry.register(_resource("greeting://{name}", name="two"))

    def test_duplicate_name_rejected(self):
        registry = ResourceRegistry()
        registry.register(_resource("a://{x}", name="same"))
        with pytest.raises(DuplicateCapabilityError, match="same"):
            registry.register(_resource("b://{x}", name="same"))
        assert len(registry) == 1

    def test_fixed_uri_listing_carries_uri(self):
        registry = ResourceRegistry()
        registry.register(_resource("config://settings", name="settings"))
        registry.register(_resource("greeting://{name}", name="greeting"))

        fixed, templated = registry.list()
        assert fixed["uri"] == "config://settings"
        assert fixed["uriTemplate"] == "config://settings"
        assert "uri" not in templated
        assert templated["uriTemplate"] == "greeting://{name}"
        assert templated["mimeType"] == "text/plain"

    def test_list_templates_only_parameterized(self):
        registry = ResourceRegistry()
        registry.register(_resource("config://settings", name="settings"))
        registry.register(_resource("greeting://{name}", name="greeting"))

        assert [entry["name"] for entry in registry.list_templates()] == ["greeting"]

    def test_camel_case_handler(self):
        registry = ResourceRegistry()
        registry.register(ResourceDescriptor.from_handler(CamelCaseResource()))

        match = registry.resolve("camel://7")
        assert match.descriptor.mime_type == "application/json"
        assert match.params == {"id": "7"}
        assert "title" not in registry.list()[0]

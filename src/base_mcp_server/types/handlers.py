#!/usr/bin/env python3
# src/base_mcp_server/types/handlers.py
"""
Handlers - Capability contracts and the descriptors the registries store

Tool and resource authors supply duck-typed objects (or plain functions via the
server decorators). Descriptors capture their public metadata once, at
registration, and expose a uniform call surface to the execution pipeline.
"""

import copy
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from ..constants import CONTENT_TYPE_PLAIN
from ..uri_template import UriTemplate
from .parameters import (
    ToolParameter,
    build_input_schema,
    extract_parameters_from_function,
    normalize_input_schema,
)

_MISSING = object()


# ============================================================================
# Capability Contracts
# ============================================================================


@runtime_checkable
class ToolCapability(Protocol):
    """What a tool implementation must expose. ``execute`` may be sync or async."""

    name: str
    title: str | None
    description: str
    input_schema: Mapping[str, Any]

    def execute(self, params: dict[str, Any]) -> Any: ...


@runtime_checkable
class ResourceCapability(Protocol):
    """What a resource implementation must expose. ``read`` may be sync or async."""

    name: str
    title: str | None
    description: str
    uri_template: str
    mime_type: str

    def read(self, uri: str, params: dict[str, str]) -> Any: ...


def _attr(obj: Any, *names: str, default: Any = _MISSING) -> Any:
    """Read the first attribute present among ``names`` (snake_case, then camelCase)."""
    for name in names:
        value = getattr(obj, name, _MISSING)
        if value is not _MISSING:
            return value
    if default is _MISSING:
        raise TypeError(f"{type(obj).__name__} has no attribute '{names[0]}'")
    return default


# ============================================================================
# Tool Descriptor
# ============================================================================


@dataclass
class ToolDescriptor:
    """Registered tool: metadata plus the callable that runs it."""

    name: str
    description: str
    parameters: dict[str, ToolParameter]
    execute: Callable[[dict[str, Any]], Any] = field(repr=False)
    title: str | None = None
    _cached_mcp_format: dict[str, Any] | None = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.name or not isinstance(self.name, str):
            raise ValueError("Tool name must be a non-empty string")

    @classmethod
    def from_handler(cls, handler: Any) -> "ToolDescriptor":
        """Build a descriptor from an object satisfying ``ToolCapability``."""
        execute = _attr(handler, "execute")
        if not callable(execute):
            raise TypeError(f"{type(handler).__name__}.execute is not callable")

        return cls(
            name=_attr(handler, "name"),
            title=_attr(handler, "title", default=None),
            description=_attr(handler, "description", default="") or "",
            parameters=normalize_input_schema(_attr(handler, "input_schema", "inputSchema", default=None)),
            execute=execute,
        )

    @classmethod
    def from_function(
        cls,
        func: Callable[..., Any],
        name: str | None = None,
        description: str | None = None,
        title: str | None = None,
        input_schema: Mapping[str, Any] | None = None,
    ) -> "ToolDescriptor":
        """Build a descriptor from a plain function; its signature is the schema."""
        tool_name = name or func.__name__
        parameters = (
            normalize_input_schema(input_schema)
            if input_schema is not None
            else extract_parameters_from_function(func)
        )

        def execute(params: dict[str, Any]) -> Any:
            return func(**params)

        return cls(
            name=tool_name,
            title=title,
            description=description or (func.__doc__ or "").strip() or f"Execute {tool_name}",
            parameters=parameters,
            execute=execute,
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return build_input_schema(self.parameters)

    def to_mcp_format(self) -> dict[str, Any]:
        """Public metadata in ``tools/list`` shape."""
        if self._cached_mcp_format is None:
            entry: dict[str, Any] = {"name": self.name}
            if self.title:
                entry["title"] = self.title
            entry["description"] = self.description
            entry["inputSchema"] = self.input_schema
            self._cached_mcp_format = entry
        return copy.deepcopy(self._cached_mcp_format)  # Callers must not reach the cached schema


# ============================================================================
# Resource Descriptor
# ============================================================================


@dataclass
class ResourceDescriptor:
    """Registered resource: metadata, compiled URI template and reader."""

    name: str
    description: str
    template: UriTemplate
    read: Callable[[str, dict[str, str]], Any] = field(repr=False)
    mime_type: str = CONTENT_TYPE_PLAIN
    title: str | None = None

    @classmethod
    def from_handler(cls, handler: Any) -> "ResourceDescriptor":
        """Build a descriptor from an object satisfying ``ResourceCapability``."""
        read = _attr(handler, "read")
        if not callable(read):
            raise TypeError(f"{type(handler).__name__}.read is not callable")

        return cls(
            name=_attr(handler, "name"),
            title=_attr(handler, "title", default=None),
            description=_attr(handler, "description", default="") or "",
            template=UriTemplate.parse(_attr(handler, "uri_template", "uriTemplate")),
            mime_type=_attr(handler, "mime_type", "mimeType", default=CONTENT_TYPE_PLAIN) or CONTENT_TYPE_PLAIN,
            read=read,
        )

    @classmethod
    def from_function(
        cls,
        uri_template: str,
        func: Callable[..., Any],
        name: str | None = None,
        description: str | None = None,
        mime_type: str = CONTENT_TYPE_PLAIN,
        title: str | None = None,
    ) -> "ResourceDescriptor":
        """Build a descriptor from a function taking the template's placeholders as keywords."""
        template = UriTemplate.parse(uri_template)

        def read(uri: str, params: dict[str, str]) -> Any:
            return func(**params)

        return cls(
            name=name or func.__name__.replace("_", " ").title(),
            title=title,
            description=description or (func.__doc__ or "").strip() or f"Resource: {uri_template}",
            template=template,
            mime_type=mime_type,
            read=read,
        )

    @property
    def uri_template(self) -> str:
        return self.template.template

    def to_template_format(self) -> dict[str, Any]:
        """Public metadata in ``resources/templates/list`` shape."""
        entry: dict[str, Any] = {"name": self.name}
        if self.title:
            entry["title"] = self.title
        entry["description"] = self.description
        entry["uriTemplate"] = self.uri_template
        entry["mimeType"] = self.mime_type
        return entry

    def to_mcp_format(self) -> dict[str, Any]:
        """Public metadata in ``resources/list`` shape; fixed URIs also carry ``uri``."""
        entry = self.to_template_format()
        if self.template.is_fixed:
            entry["uri"] = self.uri_template
        return entry


__all__ = [
    "ResourceCapability",
    "ResourceDescriptor",
    "ToolCapability",
    "ToolDescriptor",
]

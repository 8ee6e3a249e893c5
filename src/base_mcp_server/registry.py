#!/usr/bin/env python3
# src/base_mcp_server/registry.py
"""
Capability registries.

One registry holds tools keyed by name, the other resources keyed by their
URI template. Both preserve insertion order so listings are stable, and both
refuse to overwrite an existing entry.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .errors import CapabilityNotFoundError, DuplicateCapabilityError, format_unknown_tool_error
from .types.handlers import ResourceDescriptor, ToolDescriptor

logger = logging.getLogger(__name__)

D = TypeVar("D", ToolDescriptor, ResourceDescriptor)


class CapabilityRegistry(Generic[D]):
    """Insertion-ordered, uniqueness-enforcing map of identifier to descriptor."""

    kind = "capability"

    def __init__(self) -> None:
        self._entries: dict[str, D] = {}

    def _key(self, descriptor: D) -> str:
        raise NotImplementedError

    def register(self, descriptor: D) -> D:
        """Add ``descriptor``; the first registration under an identifier wins.

        Raises:
            DuplicateCapabilityError: if the identifier is already registered.
        """
        key = self._key(descriptor)
        if key in self._entries:
            raise DuplicateCapabilityError(self.kind, key)
        self._entries[key] = descriptor
        logger.debug(f"Registered {self.kind}: {key}")
        return descriptor

    def resolve(self, identifier: str) -> D:
        try:
            return self._entries[identifier]
        except KeyError:
            raise CapabilityNotFoundError(self.kind, identifier) from None

    def names(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._entries

    def __iter__(self) -> Iterator[D]:
        return iter(list(self._entries.values()))

    def list(self) -> "list[dict[str, Any]]":
        """Public metadata of every entry, in registration order."""
        return [descriptor.to_mcp_format() for descriptor in self._entries.values()]


# ============================================================================
# Tools
# ============================================================================


class ToolRegistry(CapabilityRegistry[ToolDescriptor]):
    kind = "tool"

    def _key(self, descriptor: ToolDescriptor) -> str:
        return descriptor.name

    def resolve(self, identifier: str) -> ToolDescriptor:
        """Look up a tool by exact name.

        Raises:
            CapabilityNotFoundError: with a did-you-mean hint when a close name exists.
        """
        descriptor = self._entries.get(identifier)
        if descriptor is None:
            raise CapabilityNotFoundError(
                self.kind, identifier, format_unknown_tool_error(identifier, self.names())
            )
        return descriptor


# ============================================================================
# Resources
# ============================================================================


@dataclass(frozen=True)
class ResourceMatch:
    """A resolved resource plus the placeholder values captured from the URI."""

    descriptor: ResourceDescriptor
    params: dict[str, str]


class ResourceRegistry(CapabilityRegistry[ResourceDescriptor]):
    kind = "resource"

    def _key(self, descriptor: ResourceDescriptor) -> str:
        return descriptor.uri_template

    def register(self, descriptor: ResourceDescriptor) -> ResourceDescriptor:
        if any(existing.name == descriptor.name for existing in self._entries.values()):
            raise DuplicateCapabilityError("resource name", descriptor.name)
        return super().register(descriptor)

    def resolve(self, identifier: str) -> ResourceMatch:  # type: ignore[override]
        """Match a concrete URI against templates in registration order; first match wins.

        Raises:
            CapabilityNotFoundError: if no template matches the URI.
        """
        for descriptor in self._entries.values():
            params = descriptor.template.match(identifier)
            if params is not None:
                return ResourceMatch(descriptor=descriptor, params=params)
        raise CapabilityNotFoundError(self.kind, identifier, f"Unknown resource: {identifier}")

    def list_templates(self) -> list[dict[str, Any]]:
        """Metadata of the parameterized entries, in ``resources/templates/list`` shape."""
        return [d.to_template_format() for d in self._entries.values() if not d.template.is_fixed]


__all__ = [
    "CapabilityRegistry",
    "ResourceMatch",
    "ResourceRegistry",
    "ToolRegistry",
]

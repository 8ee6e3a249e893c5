#!/usr/bin/env python3
# src/base_mcp_server/pipeline.py
"""
Execution pipeline - validate, invoke, normalize.

Handler failures never propagate as exceptions past this module: every
invocation returns an ``ExecutionResult`` holding either the protocol-shaped
payload or an ``MCPError``.
"""

import asyncio
import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import orjson

from .constants import MAX_ARGUMENT_KEYS
from .errors import HandlerError, InvalidParamsError, MCPError
from .registry import ResourceMatch
from .types.content import format_resource_result, format_tool_result
from .types.handlers import ToolDescriptor
from .types.parameters import validate_arguments

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of one invocation: exactly one of ``value`` and ``error`` is set."""

    value: Any = None
    error: MCPError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any) -> "ExecutionResult":
        return cls(value=value)

    @classmethod
    def failure(cls, error: MCPError) -> "ExecutionResult":
        return cls(error=error)

    def unwrap(self) -> Any:
        """Return the value, or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value


class ExecutionPipeline:
    """Stateless invoker shared by every session."""

    async def invoke_tool(self, descriptor: ToolDescriptor, raw_arguments: Any) -> ExecutionResult:
        """Validate ``raw_arguments`` and run the tool.

        Returns a ``{"content": [...]}`` payload on success.
        """
        if isinstance(raw_arguments, dict) and len(raw_arguments) > MAX_ARGUMENT_KEYS:
            return ExecutionResult.failure(
                InvalidParamsError(f"Too many argument keys ({len(raw_arguments)}, max {MAX_ARGUMENT_KEYS})")
            )

        try:
            arguments = validate_arguments(descriptor.parameters, raw_arguments)
        except InvalidParamsError as e:
            logger.debug(f"Rejected arguments for tool '{descriptor.name}': {e.message}")
            return ExecutionResult.failure(e)

        return await self._run(
            f"tool '{descriptor.name}'",
            lambda: descriptor.execute(arguments),
            format_tool_result,
        )

    async def invoke_resource(self, match: ResourceMatch, uri: str) -> ExecutionResult:
        """Read the resource at ``uri``. Returns a ``{"contents": [...]}`` payload on success."""
        descriptor = match.descriptor
        return await self._run(
            f"resource '{uri}'",
            lambda: descriptor.read(uri, dict(match.params)),
            lambda value: format_resource_result(value, uri, descriptor.mime_type),
        )

    async def _run(
        self,
        label: str,
        call: Callable[[], Any],
        wrap: Callable[[Any], dict[str, Any]],
    ) -> ExecutionResult:
        try:
            value = call()
            if inspect.isawaitable(value):
                value = await value
            payload = wrap(value)
            # Passed-through envelopes may still hold values the transport cannot encode
            orjson.dumps(payload)
        except asyncio.CancelledError:
            raise  # Never swallow cancellation
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.debug(f"Handler for {label} failed: {type(e).__name__}: {message}", exc_info=True)
            return ExecutionResult.failure(HandlerError(message))

        logger.debug(f"Executed {label}")
        return ExecutionResult.success(payload)


__all__ = ["ExecutionPipeline", "ExecutionResult"]

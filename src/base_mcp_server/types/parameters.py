#!/usr/bin/env python3
# src/base_mcp_server/types/parameters.py
"""
Parameters - Tool parameter definitions, JSON Schema generation and argument coercion

A tool's input schema is a mapping of field name to constraint. Constraints are
``ToolParameter`` instances; JSON-Schema-like dict fragments and Python type
annotations are normalized into them at registration time.
"""

import inspect
import typing
from collections.abc import Mapping
from dataclasses import dataclass
from types import UnionType
from typing import Any, Union

import orjson

from ..errors import InvalidParamsError

_TYPE_MAP: dict[Any, str] = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
    list: "array",
    dict: "object",
}

JSON_TYPES = ("string", "integer", "number", "boolean", "array", "object")

_TRUE_STRINGS = ("true", "1", "yes", "on", "t", "y")
_FALSE_STRINGS = ("false", "0", "no", "off", "f", "n")


# ============================================================================
# Tool Parameter
# ============================================================================


@dataclass
class ToolParameter:
    """A single field constraint in a tool's input schema."""

    name: str
    type: str = "string"
    description: str | None = None
    required: bool = True
    default: Any = None
    enum: list[Any] | None = None
    items_type: str | None = None  # For array types: the type of items in the array

    def __post_init__(self) -> None:
        if self.type not in JSON_TYPES:
            raise ValueError(f"Parameter '{self.name}': unsupported type '{self.type}'")

    @classmethod
    def from_schema(cls, name: str, schema: Mapping[str, Any]) -> "ToolParameter":
        """Create a parameter from a JSON-Schema-like fragment.

        ``required`` defaults to True unless the fragment says otherwise or
        carries a ``default``; ``optional: true`` is accepted as a shorthand.
        """
        if "required" in schema:
            required = bool(schema["required"])
        elif schema.get("optional"):
            required = False
        else:
            required = "default" not in schema

        items = schema.get("items")
        return cls(
            name=name,
            type=schema.get("type", "string"),
            description=schema.get("description"),
            required=required,
            default=schema.get("default"),
            enum=list(schema["enum"]) if schema.get("enum") is not None else None,
            items_type=items.get("type") if isinstance(items, Mapping) else None,
        )

    @classmethod
    def from_annotation(cls, name: str, annotation: Any, default: Any = inspect.Parameter.empty) -> "ToolParameter":
        """Create parameter from a function annotation."""
        param_type = "string"
        enum_values = None
        items_type = None

        if annotation in _TYPE_MAP:
            param_type = _TYPE_MAP[annotation]
        else:
            origin = typing.get_origin(annotation)
            args = typing.get_args(annotation)

            # Handle both typing.Union and types.UnionType (X | Y syntax)
            if origin is Union or origin is UnionType:
                non_none_args = tuple(arg for arg in args if arg is not type(None))
                if len(non_none_args) == 1:
                    inner = cls.from_annotation(name, non_none_args[0])
                    param_type = inner.type
                    items_type = inner.items_type
                    enum_values = inner.enum
                elif all(arg in (int, float) for arg in non_none_args):
                    param_type = "number"
                elif len({_TYPE_MAP.get(arg) for arg in non_none_args}) == 1:
                    param_type = _TYPE_MAP.get(non_none_args[0], "string")
            elif origin is typing.Literal:
                param_type = "string"
                enum_values = list(args)
            elif origin is list:
                param_type = "array"
                if args:
                    items_type = _TYPE_MAP.get(args[0], "string")
            elif origin is dict:
                param_type = "object"

        required = default is inspect.Parameter.empty
        return cls(
            name=name,
            type=param_type,
            required=required,
            default=None if required else default,
            enum=enum_values,
            items_type=items_type,
        )

    def to_json_schema(self) -> dict[str, Any]:
        """Convert to a JSON Schema property."""
        schema: dict[str, Any] = {"type": self.type}
        if self.type == "array" and self.items_type:
            schema["items"] = {"type": self.items_type}
        if self.description:
            schema["description"] = self.description
        if self.enum:
            schema["enum"] = list(self.enum)
        if self.default is not None:
            schema["default"] = self.default
        return schema

    def coerce(self, value: Any) -> Any:
        """Convert a raw argument to this parameter's type.

        Raises:
            ValueError: if the value cannot be represented as the declared type
                or is not one of the allowed ``enum`` values.
        """
        converted = self._convert_type(value)
        if self.enum is not None and converted not in self.enum:
            raise ValueError(f"must be one of {self.enum}")
        return converted

    def _convert_type(self, value: Any) -> Any:
        if self.type == "integer":
            if isinstance(value, bool):
                raise ValueError("expected integer, got boolean")
            if isinstance(value, int):
                return value
            if isinstance(value, float):
                if value.is_integer():
                    return int(value)
                raise ValueError(f"cannot convert float {value} to integer without precision loss")
            if isinstance(value, str):
                try:
                    return int(value)
                except ValueError:
                    float_val = float(value)
                    if float_val.is_integer():
                        return int(float_val)
                    raise ValueError(f"cannot convert string '{value}' to integer without precision loss") from None
            raise ValueError(f"expected integer, got {type(value).__name__}")

        if self.type == "number":
            if isinstance(value, bool):
                raise ValueError("expected number, got boolean")
            if isinstance(value, (int, float)):
                return value
            if isinstance(value, str):
                try:
                    return float(value)
                except ValueError:
                    raise ValueError(f"cannot convert string '{value}' to number") from None
            raise ValueError(f"expected number, got {type(value).__name__}")

        if self.type == "boolean":
            if isinstance(value, bool):
                return value
            if isinstance(value, str):
                lower_val = value.strip().lower()
                if lower_val in _TRUE_STRINGS:
                    return True
                if lower_val in _FALSE_STRINGS:
                    return False
                raise ValueError(f"cannot convert string '{value}' to boolean")
            if isinstance(value, (int, float)):
                return bool(value)
            raise ValueError(f"expected boolean, got {type(value).__name__}")

        if self.type == "string":
            if isinstance(value, str):
                return value
            if isinstance(value, (dict, list)):
                raise ValueError(f"expected string, got {type(value).__name__}")
            return str(value)

        if self.type == "array":
            if isinstance(value, list):
                return value
            if isinstance(value, (tuple, set)):
                return list(value)
            if isinstance(value, str):
                try:
                    parsed = orjson.loads(value)
                except orjson.JSONDecodeError:
                    raise ValueError(f"cannot convert string '{value}' to array") from None
                if isinstance(parsed, list):
                    return parsed
                raise ValueError(f"string '{value}' does not represent an array")
            raise ValueError(f"cannot convert {type(value).__name__} to array")

        # object
        if isinstance(value, dict):
            return value
        if isinstance(value, str):
            try:
                parsed = orjson.loads(value)
            except orjson.JSONDecodeError:
                raise ValueError(f"cannot convert string '{value}' to object") from None
            if isinstance(parsed, dict):
                return parsed
            raise ValueError(f"string '{value}' does not represent an object")
        raise ValueError(f"cannot convert {type(value).__name__} to object")


# ============================================================================
# Schema Utilities
# ============================================================================


def normalize_input_schema(schema: Any) -> dict[str, ToolParameter]:
    """Normalize a declared input schema into ``{field: ToolParameter}``.

    Accepts a mapping of field to ``ToolParameter``/dict fragment/Python type,
    or a full JSON Schema object with ``properties`` and ``required``.
    """
    if schema is None:
        return {}
    if not isinstance(schema, Mapping):
        raise TypeError(f"input schema must be a mapping, got {type(schema).__name__}")

    # Full JSON Schema object form
    if schema.get("type") == "object" and isinstance(schema.get("properties"), Mapping):
        required_fields = set(schema.get("required") or [])
        parameters = {}
        for name, fragment in schema["properties"].items():
            param = ToolParameter.from_schema(name, {**fragment, "required": name in required_fields})
            parameters[name] = param
        return parameters

    parameters = {}
    for name, constraint in schema.items():
        if isinstance(constraint, ToolParameter):
            parameters[name] = constraint
        elif isinstance(constraint, Mapping):
            parameters[name] = ToolParameter.from_schema(name, constraint)
        elif isinstance(constraint, str):
            parameters[name] = ToolParameter(name=name, type=constraint)
        else:
            parameters[name] = ToolParameter.from_annotation(name, constraint)
    return parameters


def build_input_schema(parameters: Mapping[str, ToolParameter]) -> dict[str, Any]:
    """Build the wire JSON Schema for a tool's input."""
    properties = {}
    required = []

    for name, param in parameters.items():
        properties[name] = param.to_json_schema()
        if param.required:
            required.append(name)

    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def extract_parameters_from_function(func: Any) -> dict[str, ToolParameter]:
    """Extract parameters from a function signature."""
    sig = inspect.signature(func)
    parameters = {}

    for param_name, param in sig.parameters.items():
        if param_name == "self":
            continue
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue

        parameters[param_name] = ToolParameter.from_annotation(
            name=param_name,
            annotation=param.annotation if param.annotation != inspect.Parameter.empty else str,
            default=param.default,
        )

    return parameters


def validate_arguments(parameters: Mapping[str, ToolParameter], arguments: Any) -> dict[str, Any]:
    """Validate and coerce raw call arguments against a tool's parameters.

    Unknown fields are dropped. Optional fields that are absent get their
    default when one is declared.

    Raises:
        InvalidParamsError: naming the first offending field.
    """
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise InvalidParamsError(f"arguments must be an object, got {type(arguments).__name__}")

    validated: dict[str, Any] = {}
    for name, param in parameters.items():
        value = arguments.get(name)

        if value is None:
            if param.required:
                raise InvalidParamsError(f"Missing required argument '{name}'", field=name)
            if param.default is not None:
                validated[name] = param.default
            continue

        try:
            validated[name] = param.coerce(value)
        except (ValueError, TypeError) as e:
            raise InvalidParamsError(f"Invalid argument '{name}': {e}", field=name) from e

    return validated


__all__ = [
    "JSON_TYPES",
    "ToolParameter",
    "build_input_schema",
    "extract_parameters_from_function",
    "normalize_input_schema",
    "validate_arguments",
]

# =============================================================================
# core/validation.py  -  Schema-Driven Input Validation
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Checks a tool call's parameters against the tool's JSON Schema from
#   core/catalog.py before anything is executed.  A failed check raises
#   ValidationError, so no obsidian process is ever started for bad input.
#
# ONE GENERIC INTERPRETER, NO PER-TOOL CODE:
#   The schemas are data.  validate_input() walks them the same way for
#   every tool, in a fixed order, and stops at the first failure:
#     1. the tool must exist
#     2. required parameters must be present (and non-blank if strings)
#     3. present parameters must have the declared type / enum value
#   Parameters the schema doesn't declare are allowed through, which lets
#   the dispatcher add implementation flags such as "silent".
# =============================================================================

from types import MappingProxyType
from typing import Any, Mapping, Optional

from core.catalog import get_tool
from core.errors import ErrorKind, ValidationError
from core.models import PropertySchema, ToolSchema


# Parsed schemas, keyed by tool name.  Filled lazily; parsing the same
# catalog entry twice gives an equal ToolSchema, so a race only repeats work.
_schema_cache: dict[str, ToolSchema] = {}


def _parse_schema(input_schema: Mapping[str, Any]) -> ToolSchema:
    properties = {}
    for key, prop in (input_schema.get("properties") or {}).items():
        enum = prop.get("enum")
        properties[key] = PropertySchema(
            type=prop.get("type"),
            enum=tuple(enum) if enum is not None else None,
        )
    return ToolSchema(
        required=tuple(dict.fromkeys(input_schema.get("required") or ())),
        properties=MappingProxyType(properties),
    )


def get_schema(tool_name: str) -> Optional[ToolSchema]:
    """Return the parsed schema for a tool, or None for an unknown tool."""
    cached = _schema_cache.get(tool_name)
    if cached is not None:
        return cached

    tool = get_tool(tool_name)
    if tool is None:
        return None

    schema = _parse_schema(tool["inputSchema"])
    _schema_cache[tool_name] = schema
    return schema


def clear_schema_cache() -> None:
    _schema_cache.clear()


def _type_name(value: Any) -> str:
    """Name a runtime value the way JSON Schema names types."""
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def validate_input(tool_name: str, params: Mapping[str, Any]) -> None:
    """Validate tool input against its declared schema.

    Args:
        tool_name: Name of the tool being called.
        params: The caller's parameters.  None values count as absent.

    Raises:
        ValidationError: On the first failed check (see module header for
            the order).  `kind` tells which check failed.
    """
    schema = get_schema(tool_name)
    if schema is None:
        raise ValidationError(tool_name, f'Unknown tool "{tool_name}"', ErrorKind.UNKNOWN_TOOL)

    # --- Required fields first: they win over type/enum problems ---
    for field in schema.required:
        value = params.get(field)
        if value is None:
            raise ValidationError(
                tool_name,
                f'Missing required parameter "{field}"',
                ErrorKind.MISSING_REQUIRED,
            )
        if isinstance(value, str) and not value.strip():
            raise ValidationError(
                tool_name,
                f'Required parameter "{field}" must not be empty',
                ErrorKind.EMPTY_REQUIRED,
            )

    # --- Type and enum checks for declared, provided fields ---
    for key, value in params.items():
        if value is None:
            continue

        prop = schema.properties.get(key)
        if prop is None:
            continue

        actual = _type_name(value)
        if prop.type in ("string", "number", "boolean") and actual != prop.type:
            raise ValidationError(
                tool_name,
                f'Parameter "{key}" must be a {prop.type}, got {actual}',
                ErrorKind.TYPE_MISMATCH,
                expected=prop.type,
                actual=actual,
            )

        if prop.enum is not None and isinstance(value, str) and value not in prop.enum:
            raise ValidationError(
                tool_name,
                f'Parameter "{key}" must be one of [{", ".join(prop.enum)}], got "{value}"',
                ErrorKind.INVALID_ENUM,
                allowed=prop.enum,
                value=value,
            )

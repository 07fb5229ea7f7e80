"""Argument parsing for MCP tool calls.

Every helper raises ``ValueError`` with a message naming the offending
field; ``dispatch_tool`` reports those as validation errors.
"""

from __future__ import annotations

from typing import Any

WRITE_MODES = ("rewrite", "append")

_MISSING = object()


def truncate_text(text: str | None, *, limit: int) -> str:
    """Cap tool output at ``limit`` characters, noting how much was cut."""
    if not text:
        return ""
    overflow = len(text) - limit
    if overflow <= 0:
        return text
    return f"{text[:limit]}\n\n... ({overflow} more chars cut, {len(text)} total)"


def _lookup(arguments: dict[str, Any], key: str, default: Any = _MISSING) -> Any:
    value = arguments.get(key)
    if value is None and default is not _MISSING:
        return default
    return value


def _is_int(value: Any) -> bool:
    # bool is an int subclass; JSON true/false must not pass as a number
    return isinstance(value, int) and not isinstance(value, bool)


def require_str(arguments: dict[str, Any], key: str) -> str:
    """Non-blank string field (paths, patterns)."""
    value = require_text(arguments, key)
    if not value.strip():
        raise ValueError(f"missing required field: {key}")
    return value


def require_text(arguments: dict[str, Any], key: str) -> str:
    """String field that may be empty (file content, replacement text)."""
    value = _lookup(arguments, key)
    if not isinstance(value, str):
        raise ValueError(f"missing required field: {key}")
    return value


def optional_str(arguments: dict[str, Any], key: str) -> str | None:
    value = _lookup(arguments, key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"field '{key}' must be a string")
    return value


def read_optional_bool(arguments: dict[str, Any], key: str) -> bool | None:
    value = _lookup(arguments, key)
    if value is not None and not isinstance(value, bool):
        raise ValueError(f"field '{key}' must be a boolean")
    return value


def read_bool(arguments: dict[str, Any], key: str, default: bool = False) -> bool:
    value = read_optional_bool(arguments, key)
    return default if value is None else value


def read_optional_int(
    arguments: dict[str, Any],
    key: str,
    *,
    min_value: int | None = None,
    max_value: int | None = None,
) -> int | None:
    """Integer field checked against inclusive bounds; None when absent."""
    value = _lookup(arguments, key)
    if value is None:
        return None
    if not _is_int(value):
        raise ValueError(f"field '{key}' must be an integer")
    if min_value is not None and value < min_value:
        raise ValueError(f"field '{key}' must be >= {min_value}")
    if max_value is not None and value > max_value:
        raise ValueError(f"field '{key}' must be <= {max_value}")
    return value


def read_int(
    arguments: dict[str, Any],
    key: str,
    default: int,
    *,
    min_value: int | None = None,
    max_value: int | None = None,
) -> int:
    value = read_optional_int(arguments, key, min_value=min_value, max_value=max_value)
    return default if value is None else value


def read_write_mode(arguments: dict[str, Any], key: str = "mode") -> str:
    value = _lookup(arguments, key, default="rewrite")
    if value not in WRITE_MODES:
        raise ValueError(f"field '{key}' must be one of: {', '.join(WRITE_MODES)}")
    return value


def require_str_list(arguments: dict[str, Any], key: str) -> list[str]:
    """Non-empty list of non-blank strings."""
    value = _lookup(arguments, key)
    if (
        not isinstance(value, list)
        or not value
        or not all(isinstance(item, str) and item.strip() for item in value)
    ):
        raise ValueError(f"field '{key}' must be a non-empty array of strings")
    return list(value)

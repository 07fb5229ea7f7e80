"""MCP tool definitions for the remote commander."""

from __future__ import annotations

from typing import Any

from mcp.types import Tool


def _path_schema(description: str) -> dict[str, Any]:
    return {"type": "string", "description": description}


def get_tool_definitions() -> list[Tool]:
    """Return the tools exposed by the server."""
    return [
        Tool(
            name="read_file",
            description=(
                "Read a file from the remote server. Paths are resolved under the "
                "configured base path. URL reading is not supported."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "path": _path_schema("File path to read"),
                    "is_url": {
                        "type": "boolean",
                        "description": "Treat path as a URL (not supported)",
                        "default": False,
                    },
                    "offset": {
                        "type": "integer",
                        "description": "Line offset to start reading from",
                        "default": 0,
                    },
                    "length": {
                        "type": "integer",
                        "description": "Maximum number of lines to read",
                        "default": 1000,
                    },
                },
                "required": ["path"],
            },
        ),
        Tool(
            name="read_multiple_files",
            description=(
                "Read several files in order. A failing file is reported inline and "
                "does not stop the others."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "paths": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "File paths to read",
                    },
                },
                "required": ["paths"],
            },
        ),
        Tool(
            name="write_file",
            description="Write content to a file, replacing it or appending to it.",
            inputSchema={
                "type": "object",
                "properties": {
                    "path": _path_schema("File path to write"),
                    "content": {"type": "string", "description": "Content to write"},
                    "mode": {
                        "type": "string",
                        "enum": ["rewrite", "append"],
                        "default": "rewrite",
                    },
                },
                "required": ["path", "content"],
            },
        ),
        Tool(
            name="create_directory",
            description="Create a directory (and missing parents) on the remote server.",
            inputSchema={
                "type": "object",
                "properties": {"path": _path_schema("Directory path to create")},
                "required": ["path"],
            },
        ),
        Tool(
            name="list_directory",
            description="List a directory. Entries are prefixed with [FILE] or [DIR].",
            inputSchema={
                "type": "object",
                "properties": {"path": _path_schema("Directory path to list")},
                "required": ["path"],
            },
        ),
        Tool(
            name="move_file",
            description="Move or rename a file. Not yet supported by the remote server.",
            inputSchema={
                "type": "object",
                "properties": {
                    "source": _path_schema("Source path"),
                    "destination": _path_schema("Destination path"),
                },
                "required": ["source", "destination"],
            },
        ),
        Tool(
            name="search_files",
            description="Find files whose names match a pattern.",
            inputSchema={
                "type": "object",
                "properties": {
                    "path": _path_schema("Directory to search from"),
                    "pattern": {"type": "string", "description": "Name pattern"},
                    "timeout_ms": {
                        "type": "integer",
                        "description": "Server-side search timeout in milliseconds",
                        "default": 30000,
                    },
                },
                "required": ["path", "pattern"],
            },
        ),
        Tool(
            name="search_code",
            description="Search file contents for a text or regex pattern.",
            inputSchema={
                "type": "object",
                "properties": {
                    "path": _path_schema("Directory to search from"),
                    "pattern": {"type": "string", "description": "Text or regex"},
                    "context_lines": {"type": "integer"},
                    "file_pattern": {"type": "string"},
                    "ignore_case": {"type": "boolean"},
                    "include_hidden": {"type": "boolean"},
                    "max_results": {"type": "integer"},
                    "timeout_ms": {"type": "integer"},
                },
                "required": ["path", "pattern"],
            },
        ),
        Tool(
            name="get_file_info",
            description="Get metadata (size, timestamps, type) for a file or directory.",
            inputSchema={
                "type": "object",
                "properties": {"path": _path_schema("Path to inspect")},
                "required": ["path"],
            },
        ),
        Tool(
            name="edit_block",
            description=(
                "Replace old_string with new_string in a file. Fails unless the "
                "number of replacements matches expected_replacements."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "file_path": _path_schema("File to edit"),
                    "old_string": {"type": "string"},
                    "new_string": {"type": "string"},
                    "expected_replacements": {"type": "integer", "default": 1},
                },
                "required": ["file_path", "old_string", "new_string"],
            },
        ),
    ]

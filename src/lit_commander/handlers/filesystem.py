"""Filesystem tool handlers (read / write / list / search / edit)."""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.types import TextContent

from lit_commander import filesystem as fs
from lit_commander.http_client import CommanderClient
from lit_commander.validators import (
    optional_str,
    read_bool,
    read_int,
    read_optional_bool,
    read_optional_int,
    read_write_mode,
    require_str,
    require_str_list,
    require_text,
    truncate_text,
)

logger = logging.getLogger("lit_commander")


def _text(text: str) -> list[TextContent]:
    return [TextContent(type="text", text=text)]


def _limit(client: CommanderClient) -> int:
    return client.config.max_tool_text_chars


def _format_json(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, indent=2, default=str)


async def handle_read_file(
    client: CommanderClient, arguments: dict[str, Any]
) -> list[TextContent]:
    """Read a file from the remote server."""
    path = require_str(arguments, "path")
    is_url = read_bool(arguments, "is_url")
    offset = read_int(arguments, "offset", 0, min_value=0)
    length = read_int(arguments, "length", 1000, min_value=1)

    result = await fs.read_file(client, path, is_url=is_url, offset=offset, length=length)
    content = truncate_text(result.content, limit=_limit(client))

    return _text(f"**File: {path}**\n\n```\n{content}\n```")


async def handle_read_multiple_files(
    client: CommanderClient, arguments: dict[str, Any]
) -> list[TextContent]:
    """Read several files; failures are listed inline."""
    paths = require_str_list(arguments, "paths")

    results = await fs.read_multiple_files(client, paths)

    sections = []
    for result in results:
        if result.error is not None:
            sections.append(f"**File: {result.path}**\n\nError: {result.error}")
        else:
            sections.append(f"**File: {result.path}**\n\n```\n{result.content}\n```")

    failed = sum(1 for r in results if r.error is not None)
    if failed:
        logger.info("read_multiple_files total=%d failed=%d", len(results), failed)

    return _text(truncate_text("\n\n---\n\n".join(sections), limit=_limit(client)))


async def handle_write_file(
    client: CommanderClient, arguments: dict[str, Any]
) -> list[TextContent]:
    """Write or append content to a file."""
    path = require_str(arguments, "path")
    content = require_text(arguments, "content")
    mode = read_write_mode(arguments)

    await fs.write_file(client, path, content, mode)

    verb = "appended to" if mode == "append" else "written"
    return _text(f"File `{path}` {verb} successfully ({len(content)} chars).")


async def handle_create_directory(
    client: CommanderClient, arguments: dict[str, Any]
) -> list[TextContent]:
    """Create a directory."""
    path = require_str(arguments, "path")

    await fs.create_directory(client, path)

    return _text(f"Directory `{path}` created successfully.")


async def handle_list_directory(
    client: CommanderClient, arguments: dict[str, Any]
) -> list[TextContent]:
    """List a directory."""
    path = require_str(arguments, "path")

    entries = await fs.list_directory(client, path)

    if not entries:
        return _text(f"Directory `{path}` is empty.")
    return _text(truncate_text("\n".join(entries), limit=_limit(client)))


async def handle_move_file(
    client: CommanderClient, arguments: dict[str, Any]
) -> list[TextContent]:
    """Move or rename a file."""
    source = require_str(arguments, "source")
    destination = require_str(arguments, "destination")

    await fs.move_file(client, source, destination)

    return _text(f"Moved `{source}` to `{destination}`.")


async def handle_search_files(
    client: CommanderClient, arguments: dict[str, Any]
) -> list[TextContent]:
    """Find files by name pattern."""
    path = require_str(arguments, "path")
    pattern = require_str(arguments, "pattern")
    timeout_ms = read_int(arguments, "timeout_ms", 30000, min_value=1)

    matches = await fs.search_files(client, path, pattern, timeout_ms)

    if not matches:
        return _text(f"No files matching `{pattern}` under `{path}`.")
    return _text(truncate_text(_format_json(matches), limit=_limit(client)))


async def handle_search_code(
    client: CommanderClient, arguments: dict[str, Any]
) -> list[TextContent]:
    """Search file contents."""
    path = require_str(arguments, "path")
    pattern = require_str(arguments, "pattern")

    results = await fs.search_code(
        client,
        path,
        pattern,
        context_lines=read_optional_int(arguments, "context_lines", min_value=0),
        file_pattern=optional_str(arguments, "file_pattern"),
        ignore_case=read_optional_bool(arguments, "ignore_case"),
        include_hidden=read_optional_bool(arguments, "include_hidden"),
        max_results=read_optional_int(arguments, "max_results", min_value=1),
        timeout_ms=read_optional_int(arguments, "timeout_ms", min_value=1),
    )

    if not results:
        return _text(f"No matches for `{pattern}` under `{path}`.")
    return _text(truncate_text(_format_json(results), limit=_limit(client)))


async def handle_get_file_info(
    client: CommanderClient, arguments: dict[str, Any]
) -> list[TextContent]:
    """Get file metadata."""
    path = require_str(arguments, "path")

    info = await fs.get_file_info(client, path)

    return _text(truncate_text(_format_json(info), limit=_limit(client)))


async def handle_edit_block(
    client: CommanderClient, arguments: dict[str, Any]
) -> list[TextContent]:
    """Replace a block of text in a file."""
    file_path = require_str(arguments, "file_path")
    old_string = require_text(arguments, "old_string")
    new_string = require_text(arguments, "new_string")
    expected = read_int(arguments, "expected_replacements", 1, min_value=1)

    result = await fs.edit_block(client, file_path, old_string, new_string, expected)

    logger.info("block_edited file_path=%s expected=%d", file_path, expected)

    summary = f"Edited `{file_path}`."
    if result:
        summary = f"{summary}\n\n{_format_json(result)}"
    return _text(truncate_text(summary, limit=_limit(client)))

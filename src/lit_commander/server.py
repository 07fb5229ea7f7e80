"""lit-commander MCP server.

Exposes the remote filesystem operations as MCP tools over stdio. stdout
carries the protocol, so all logging goes to stderr.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any

import structlog
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from lit_commander.config import get_settings
from lit_commander.errors import CommanderError
from lit_commander.handlers import TOOL_HANDLERS
from lit_commander.http_client import CommanderClient
from lit_commander.tool_defs import get_tool_definitions
from lit_commander.validators import truncate_text

logger = logging.getLogger("lit_commander")


def configure_logging(level: str = "INFO") -> None:
    """Route stdlib logging and structlog to stderr."""
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logging.basicConfig(
        stream=sys.stderr,
        level=numeric_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _format_commander_error(error: CommanderError) -> str:
    suffix = ""
    if error.details:
        serialized = json.dumps(error.details, ensure_ascii=False, default=str)
        suffix = f"\n\ndetails: {truncate_text(serialized, limit=1000)}"
    return f"**API Error:** [{error.code}] {error.message}{suffix}"


async def dispatch_tool(
    client: CommanderClient, name: str, arguments: dict[str, Any] | None
) -> list[TextContent]:
    """Run a tool handler and render any error as text."""
    handler = TOOL_HANDLERS.get(name)
    if handler is None:
        return [TextContent(type="text", text=f"Unknown tool: {name}")]

    try:
        return await handler(client, arguments or {})

    except ValueError as e:
        return [TextContent(type="text", text=f"**Validation Error:** {e!s}")]
    except NotImplementedError as e:
        return [TextContent(type="text", text=f"**Not Implemented:** {e!s}")]
    except CommanderError as e:
        logger.warning("commander_error tool=%s code=%s message=%s", name, e.code, e.message)
        return [TextContent(type="text", text=_format_commander_error(e))]
    except Exception as e:
        logger.exception("unexpected_error tool=%s", name)
        return [TextContent(type="text", text=f"**Error:** {e!s}")]


def build_server(client: CommanderClient) -> Server:
    """Create an MCP server bound to ``client``."""
    server = Server("lit-commander")

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List available tools."""
        return get_tool_definitions()

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle tool calls by dispatching to the appropriate handler."""
        return await dispatch_tool(client, name, arguments)

    return server


async def run_server():
    """Run the MCP server."""
    settings = get_settings()
    configure_logging(settings.log_level)

    client = CommanderClient(get_settings)
    await client.init()

    server = build_server(client)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def main():
    """Main entry point."""
    try:
        asyncio.run(run_server())
    except KeyboardInterrupt:
        pass
    except Exception as e:
        print(f"Server error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

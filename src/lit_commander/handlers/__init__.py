"""Tool handler modules for the lit-commander MCP server."""

from lit_commander.handlers.filesystem import (
    handle_create_directory,
    handle_edit_block,
    handle_get_file_info,
    handle_list_directory,
    handle_move_file,
    handle_read_file,
    handle_read_multiple_files,
    handle_search_code,
    handle_search_files,
    handle_write_file,
)

__all__ = [
    "handle_create_directory",
    "handle_edit_block",
    "handle_get_file_info",
    "handle_list_directory",
    "handle_move_file",
    "handle_read_file",
    "handle_read_multiple_files",
    "handle_search_code",
    "handle_search_files",
    "handle_write_file",
]

# Handler dispatch table: tool name -> handler function
TOOL_HANDLERS = {
    "read_file": handle_read_file,
    "read_multiple_files": handle_read_multiple_files,
    "write_file": handle_write_file,
    "create_directory": handle_create_directory,
    "list_directory": handle_list_directory,
    "move_file": handle_move_file,
    "search_files": handle_search_files,
    "search_code": handle_search_code,
    "get_file_info": handle_get_file_info,
    "edit_block": handle_edit_block,
}

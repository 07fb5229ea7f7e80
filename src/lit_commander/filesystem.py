"""Filesystem operations backed by the remote commander API.

Each function takes the ``CommanderClient`` explicitly, initializes it on
first use, and turns a failed envelope into ``RemoteOperationError``.
"""

from __future__ import annotations

from typing import Any, Literal

import structlog

from lit_commander.errors import RemoteOperationError
from lit_commander.http_client import CommanderClient
from lit_commander.types import (
    ApiResponse,
    CodeSearchRequest,
    CreateDirectoryRequest,
    DirectoryListRequest,
    EditBlockRequest,
    FileReadRequest,
    FileResult,
    FileSearchRequest,
    FileWriteRequest,
    GetFileInfoRequest,
    MultiFileResult,
)

logger = structlog.get_logger()


def _unwrap(response: ApiResponse[Any], fallback: str) -> Any:
    if not response.success:
        raise RemoteOperationError(response.error or fallback)
    return response.data


async def read_file_from_url(url: str, timeout_ms: int = 30000) -> FileResult:
    """Read a file from a URL. Not supported by the remote commander."""
    raise NotImplementedError(
        "URL reading not implemented in remote commander. Please use local paths only."
    )


async def read_file_from_disk(
    client: CommanderClient,
    file_path: str,
    offset: int = 0,
    length: int = 1000,
) -> FileResult:
    """Read a file from the remote server."""
    await client.ensure_initialized()

    response = await client.read_file(
        FileReadRequest(path=file_path, offset=offset, length=length)
    )
    content = _unwrap(response, "Failed to read file")

    return FileResult(content=content or "", mime_type="text/plain", is_image=False)


async def read_file(
    client: CommanderClient,
    path: str,
    *,
    is_url: bool = False,
    offset: int = 0,
    length: int = 1000,
) -> FileResult:
    """Read a file; URLs are routed to ``read_file_from_url``."""
    if is_url:
        return await read_file_from_url(path)

    return await read_file_from_disk(client, path, offset, length)


async def read_file_internal(
    client: CommanderClient,
    file_path: str,
    offset: int = 0,
    length: int = 1000,
) -> str:
    """Read a file and return only its content."""
    result = await read_file(client, file_path, offset=offset, length=length)
    return result.content


async def write_file(
    client: CommanderClient,
    path: str,
    content: str,
    mode: Literal["rewrite", "append"] = "rewrite",
) -> None:
    """Write or append to a file."""
    await client.ensure_initialized()

    response = await client.write_file(FileWriteRequest(path=path, content=content, mode=mode))
    _unwrap(response, "Failed to write file")


async def read_multiple_files(
    client: CommanderClient,
    paths: list[str],
) -> list[MultiFileResult]:
    """Read several files one after another.

    A failing path is reported in its own result and does not stop the batch.
    Configuration and authentication errors are raised before any read.
    """
    await client.ensure_initialized()

    results: list[MultiFileResult] = []
    # TODO: issue the reads concurrently once the server tolerates parallel requests
    for file_path in paths:
        try:
            file_result = await read_file(client, file_path)
        except Exception as e:
            logger.warning("read_multiple_files.item_failed", path=file_path, error=str(e))
            results.append(MultiFileResult(path=file_path, error=str(e) or type(e).__name__))
            continue

        results.append(
            MultiFileResult(
                path=file_path,
                content=file_result.content,
                mime_type=file_result.mime_type,
                is_image=file_result.is_image,
            )
        )

    return results


async def create_directory(client: CommanderClient, path: str) -> None:
    """Create a directory."""
    await client.ensure_initialized()

    response = await client.create_directory(CreateDirectoryRequest(path=path))
    _unwrap(response, "Failed to create directory")


async def list_directory(client: CommanderClient, path: str) -> list[str]:
    """List a directory as ``[TYPE] name`` strings."""
    await client.ensure_initialized()

    response = await client.list_directory(DirectoryListRequest(path=path))
    return _unwrap(response, "Failed to list directory") or []


async def move_file(client: CommanderClient, source: str, destination: str) -> None:
    """Move or rename a file. The server has no move endpoint yet."""
    raise NotImplementedError("Move file not yet implemented in remote commander")


async def search_files(
    client: CommanderClient,
    path: str,
    pattern: str,
    timeout_ms: int = 30000,
) -> list[str]:
    """Find files whose names match ``pattern``."""
    await client.ensure_initialized()

    response = await client.search_files(
        FileSearchRequest(path=path, pattern=pattern, timeout_ms=timeout_ms)
    )
    return _unwrap(response, "Failed to search files") or []


async def get_file_info(client: CommanderClient, path: str) -> Any:
    """Get file metadata as returned by the server."""
    await client.ensure_initialized()

    response = await client.get_file_info(GetFileInfoRequest(path=path))
    return _unwrap(response, "Failed to get file info")


async def search_code(
    client: CommanderClient,
    path: str,
    pattern: str,
    *,
    context_lines: int | None = None,
    file_pattern: str | None = None,
    ignore_case: bool | None = None,
    include_hidden: bool | None = None,
    max_results: int | None = None,
    timeout_ms: int | None = None,
) -> Any:
    """Search file contents under ``path``.

    Args:
        client: Commander client
        path: Directory to search
        pattern: Text or regex to look for
        context_lines: Lines of context around each match
        file_pattern: Restrict the search to matching file names
        ignore_case: Case-insensitive matching
        include_hidden: Include hidden files
        max_results: Upper bound on matches
        timeout_ms: Server-side search timeout

    Returns:
        The server's search results, unmodified
    """
    await client.ensure_initialized()

    response = await client.search_code(
        CodeSearchRequest(
            path=path,
            pattern=pattern,
            context_lines=context_lines,
            file_pattern=file_pattern,
            ignore_case=ignore_case,
            include_hidden=include_hidden,
            max_results=max_results,
            timeout_ms=timeout_ms,
        )
    )
    return _unwrap(response, "Failed to search code")


async def edit_block(
    client: CommanderClient,
    file_path: str,
    old_string: str,
    new_string: str,
    expected_replacements: int = 1,
) -> Any:
    """Replace ``old_string`` with ``new_string`` in a file."""
    await client.ensure_initialized()

    response = await client.edit_block(
        EditBlockRequest(
            file_path=file_path,
            old_string=old_string,
            new_string=new_string,
            expected_replacements=expected_replacements,
        )
    )
    return _unwrap(response, "Failed to edit block")

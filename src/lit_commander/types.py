"""Request records, response envelope and result types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


@dataclass
class ApiResponse(Generic[T]):
    """Outcome of a single remote call. ``data`` is ignored when not successful."""

    success: bool
    data: T | None = None
    error: str | None = None


@dataclass
class FileResult:
    """Result of reading a single file."""

    content: str
    mime_type: str = "text/plain"
    is_image: bool = False


@dataclass
class MultiFileResult:
    """Per-path result of a batch read; exactly one of content/error is set."""

    path: str
    content: str | None = None
    mime_type: str | None = None
    is_image: bool | None = None
    error: str | None = None


# Request records (wire field names are kept as the server expects them)


class _CommanderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class FileReadRequest(_CommanderRequest):
    path: str
    offset: int | None = None
    length: int | None = None
    is_url: bool | None = Field(default=None, alias="isUrl")


class FileWriteRequest(_CommanderRequest):
    path: str
    content: str
    mode: Literal["rewrite", "append"] = "rewrite"


class DirectoryListRequest(_CommanderRequest):
    path: str


class FileSearchRequest(_CommanderRequest):
    path: str
    pattern: str
    timeout_ms: int | None = Field(default=None, alias="timeoutMs")


class CodeSearchRequest(_CommanderRequest):
    path: str
    pattern: str
    context_lines: int | None = Field(default=None, alias="contextLines")
    file_pattern: str | None = Field(default=None, alias="filePattern")
    ignore_case: bool | None = Field(default=None, alias="ignoreCase")
    include_hidden: bool | None = Field(default=None, alias="includeHidden")
    max_results: int | None = Field(default=None, alias="maxResults")
    timeout_ms: int | None = Field(default=None, alias="timeoutMs")


class CreateDirectoryRequest(_CommanderRequest):
    path: str


class GetFileInfoRequest(_CommanderRequest):
    path: str


class EditBlockRequest(_CommanderRequest):
    file_path: str
    old_string: str
    new_string: str
    expected_replacements: int | None = None


# Response schema


class ServerPayload(BaseModel):
    """lit-server's own ``{success, data, error}`` wrapper around a payload."""

    model_config = ConfigDict(extra="allow")

    success: bool = True
    data: Any = None
    error: str | None = None

    @classmethod
    def unwrap(cls, body: Any) -> Any:
        """Return the payload carried by a response body.

        A JSON object with a ``data`` key is the server's wrapper and yields its
        ``data``; any other body is the payload itself.
        """
        if isinstance(body, dict) and "data" in body:
            return cls.model_validate(body).data
        return body


class DirectoryEntry(BaseModel):
    """A structured list_directory entry."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    name: str
    type: str | None = None

    def render(self) -> str:
        return f"[{(self.type or 'file').upper()}] {self.name}"

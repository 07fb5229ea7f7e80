"""lit-commander: remote filesystem operations over the lit-server commander API."""

from lit_commander.config import CommanderSettings, get_settings
from lit_commander.errors import (
    AuthenticationError,
    CommanderError,
    ConfigurationError,
    NotInitializedError,
    RemoteOperationError,
)
from lit_commander.http_client import CommanderClient
from lit_commander.types import ApiResponse, FileResult, MultiFileResult

__all__ = [
    "ApiResponse",
    "AuthenticationError",
    "CommanderClient",
    "CommanderError",
    "CommanderSettings",
    "ConfigurationError",
    "FileResult",
    "MultiFileResult",
    "NotInitializedError",
    "RemoteOperationError",
    "get_settings",
]

"""Error types raised by the commander client and façade.

The transport layer never raises for network or HTTP failures; it reports them
through ``ApiResponse``. Everything below is raised by initialization,
authentication, or by the façade when it unwraps a failed envelope.
"""

from __future__ import annotations

from typing import Any


class CommanderError(Exception):
    """Base error for lit-commander."""

    code: str = "commander_error"

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(CommanderError):
    """server_url or base_path missing from configuration."""

    code = "configuration_error"


class AuthenticationError(CommanderError):
    """Token acquisition from the identity provider failed."""

    code = "authentication_error"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details)
        self.status_code = status_code


class NotInitializedError(CommanderError):
    """Client used before init()."""

    code = "not_initialized"


class RemoteOperationError(CommanderError):
    """A remote operation returned a failure envelope."""

    code = "remote_operation_failed"

"""lit-server commander client.

Pure HTTP client: one POST per filesystem operation to
``<server_url>/api/commander/<endpoint>``, with optional Keycloak
password-grant authentication.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from lit_commander.config import DEFAULT_AUTH_URL, CommanderSettings, get_settings
from lit_commander.errors import (
    AuthenticationError,
    ConfigurationError,
    NotInitializedError,
)
from lit_commander.types import (
    ApiResponse,
    CodeSearchRequest,
    CreateDirectoryRequest,
    DirectoryEntry,
    DirectoryListRequest,
    EditBlockRequest,
    FileReadRequest,
    FileSearchRequest,
    FileWriteRequest,
    GetFileInfoRequest,
    ServerPayload,
)

logger = structlog.get_logger()

ConfigProvider = Callable[[], CommanderSettings]


class CommanderClient:
    """HTTP client for the lit-server commander API.

    Lifecycle is construct -> ``init()`` (or ``ensure_initialized()``) -> use.
    Concurrent first-time initialization is not guarded.
    """

    def __init__(
        self,
        config_provider: ConfigProvider = get_settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config_provider = config_provider
        self._transport = transport
        self._config: CommanderSettings | None = None
        self._log = logger.bind(client="commander")

    @property
    def initialized(self) -> bool:
        return self._config is not None

    @property
    def config(self) -> CommanderSettings:
        if self._config is None:
            raise NotInitializedError("HTTP client not initialized")
        return self._config

    async def init(self) -> None:
        """Load configuration and authenticate if only credentials are present.

        Raises:
            ConfigurationError: If server_url or base_path is missing
            AuthenticationError: If authentication is attempted and fails
        """
        settings = self._config_provider()

        if not settings.server_url or not settings.base_path:
            raise ConfigurationError(
                "HTTP client configuration incomplete. "
                "Please set server_url and base_path in config."
            )

        # Private copy: authenticate() writes the token back into it
        self._config = settings.model_copy()
        self._log = logger.bind(client="commander", server_url=settings.server_url)

        if not self._config.auth_token and self._config.username and self._config.password:
            try:
                await self.authenticate()
            except AuthenticationError:
                self._config = None
                raise

        self._log.info(
            "commander.initialized",
            base_path=self._config.base_path,
            token_present=bool(self._config.auth_token),
        )

    async def ensure_initialized(self) -> None:
        """Initialize on first use only."""
        if not self.initialized:
            await self.init()

    def _client(self, timeout: float | None) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=timeout)

    async def authenticate(self) -> None:
        """Obtain a bearer token via the OAuth2 password grant.

        Raises:
            NotInitializedError: If no configuration is loaded
            AuthenticationError: If credentials are missing or the token request fails
        """
        config = self.config
        if not config.username or not config.password:
            raise AuthenticationError("Username and password required for authentication")

        auth_url = (config.auth_url or DEFAULT_AUTH_URL).rstrip("/")
        token_url = f"{auth_url}/realms/{config.auth_realm}/protocol/openid-connect/token"
        form = {
            "grant_type": "password",
            "client_id": config.auth_client_id,
            "username": config.username,
            "password": config.password,
        }

        try:
            async with self._client(config.request_timeout) as client:
                response = await client.post(token_url, data=form)
        except httpx.HTTPError as e:
            self._log.error("commander.auth.failed", token_url=token_url, error=str(e))
            raise AuthenticationError(f"Authentication failed: {e}") from e

        if not response.is_success:
            self._log.error(
                "commander.auth.failed",
                token_url=token_url,
                status=response.status_code,
                body=response.text,
            )
            raise AuthenticationError(
                "Authentication failed: Keycloak authentication failed: "
                f"{response.status_code} {response.reason_phrase} - {response.text}",
                status_code=response.status_code,
            )

        try:
            token = response.json()["access_token"]
        except (ValueError, KeyError, TypeError) as e:
            raise AuthenticationError(
                "Authentication failed: token response has no access_token",
                status_code=response.status_code,
            ) from e

        if not isinstance(token, str) or not token:
            raise AuthenticationError(
                "Authentication failed: token response has no access_token",
                status_code=response.status_code,
            )

        config.auth_token = token
        self._log.info("commander.auth.success", token_length=len(token))

    def validate_path(self, request_path: str) -> str:
        """Prefix ``request_path`` with base_path unless it already starts with it.

        This only rewrites the path; ``..`` segments and symlinks are not checked.
        """
        base_path = self.config.base_path
        if not request_path.startswith(base_path):
            separator = "" if request_path.startswith("/") else "/"
            return f"{base_path}{separator}{request_path}"
        return request_path

    async def _make_request(self, endpoint: str, payload: dict[str, Any]) -> ApiResponse[Any]:
        """POST to a commander endpoint. Failures come back in the envelope."""
        config = self.config
        url = f"{config.server_url.rstrip('/')}/api/commander/{endpoint}"

        self._log.debug(
            "commander.request",
            endpoint=endpoint,
            token_present=bool(config.auth_token),
        )

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {config.auth_token}",
        }

        try:
            async with self._client(config.request_timeout) as client:
                response = await client.post(url, json=payload, headers=headers)

                if not response.is_success:
                    self._log.warning(
                        "commander.request_failed",
                        endpoint=endpoint,
                        status=response.status_code,
                    )
                    return ApiResponse(
                        success=False,
                        error=f"HTTP {response.status_code}: {response.reason_phrase}",
                    )

                return ApiResponse(success=True, data=response.json())

        # ValueError covers both malformed JSON and bodies that are not UTF-8
        except (httpx.HTTPError, ValueError) as e:
            self._log.warning("commander.network_error", endpoint=endpoint, error=str(e))
            return ApiResponse(success=False, error=f"Network error: {e}")

    # Operations

    async def read_file(self, request: FileReadRequest) -> ApiResponse[str]:
        """Read file content."""
        request = request.model_copy(update={"path": self.validate_path(request.path)})
        response = await self._make_request("read_file", request.to_payload())
        if not response.success:
            return response

        try:
            content = ServerPayload.unwrap(response.data)
        except ValidationError as e:
            return ApiResponse(success=False, error=f"Invalid read_file payload: {e}")

        if content is None:
            content = ""
        elif not isinstance(content, str):
            content = json.dumps(content)
        return ApiResponse(success=True, data=content)

    async def write_file(self, request: FileWriteRequest) -> ApiResponse[Any]:
        """Write or append file content."""
        request = request.model_copy(update={"path": self.validate_path(request.path)})
        return await self._make_request("write_file", request.to_payload())

    async def list_directory(self, request: DirectoryListRequest) -> ApiResponse[list[str]]:
        """List directory contents as display strings."""
        request = request.model_copy(update={"path": self.validate_path(request.path)})
        response = await self._make_request("list_directory", request.to_payload())
        if not response.success:
            return response

        try:
            entries = ServerPayload.unwrap(response.data)
            if entries is None:
                entries = []
            if not isinstance(entries, list):
                return ApiResponse(
                    success=False,
                    error=f"Unexpected list_directory payload: {type(entries).__name__}",
                )
            names = [_render_entry(entry) for entry in entries]
        except ValidationError as e:
            return ApiResponse(success=False, error=f"Invalid list_directory payload: {e}")

        return ApiResponse(success=True, data=names)

    async def search_files(self, request: FileSearchRequest) -> ApiResponse[list[str]]:
        """Search for files by name pattern."""
        request = request.model_copy(update={"path": self.validate_path(request.path)})
        return await self._make_request("search_files", request.to_payload())

    async def search_code(self, request: CodeSearchRequest) -> ApiResponse[Any]:
        """Search file contents."""
        request = request.model_copy(update={"path": self.validate_path(request.path)})
        return await self._make_request("search_code", request.to_payload())

    async def create_directory(self, request: CreateDirectoryRequest) -> ApiResponse[Any]:
        """Create a directory."""
        request = request.model_copy(update={"path": self.validate_path(request.path)})
        return await self._make_request("create_directory", request.to_payload())

    async def get_file_info(self, request: GetFileInfoRequest) -> ApiResponse[Any]:
        """Get file metadata."""
        request = request.model_copy(update={"path": self.validate_path(request.path)})
        return await self._make_request("get_file_info", request.to_payload())

    async def edit_block(self, request: EditBlockRequest) -> ApiResponse[Any]:
        """Replace a block of text in a file."""
        request = request.model_copy(
            update={"file_path": self.validate_path(request.file_path)}
        )
        return await self._make_request("edit_block", request.to_payload())


def _render_entry(entry: Any) -> str:
    if isinstance(entry, str):
        return entry
    if isinstance(entry, dict) and entry.get("name"):
        return DirectoryEntry.model_validate(entry).render()
    return str(entry)

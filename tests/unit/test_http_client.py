"""Unit tests for CommanderClient.

Covers initialization, Keycloak authentication, path normalization, envelope
classification and per-endpoint response reshaping, using httpx MockTransport.
"""

from __future__ import annotations

import httpx
import pytest

from lit_commander.errors import (
    AuthenticationError,
    ConfigurationError,
    NotInitializedError,
)
from lit_commander.http_client import CommanderClient
from lit_commander.types import (
    ApiResponse,
    CodeSearchRequest,
    DirectoryListRequest,
    EditBlockRequest,
    FileReadRequest,
    FileSearchRequest,
    FileWriteRequest,
)
from tests.fakes import FakeLitServer, make_settings


def client_for(lit_server: FakeLitServer, **overrides) -> CommanderClient:
    return CommanderClient(lambda: make_settings(**overrides), transport=lit_server.transport)


class TestInit:
    @pytest.mark.parametrize(
        "overrides",
        [
            {"server_url": None},
            {"base_path": None},
            {"server_url": "", "base_path": ""},
            {"server_url": None, "username": "alice", "password": "pw"},
        ],
    )
    async def test_incomplete_configuration_fails(self, lit_server, overrides):
        client = client_for(lit_server, **overrides)

        with pytest.raises(ConfigurationError, match="server_url and base_path"):
            await client.init()

        assert client.initialized is False
        assert lit_server.token_requests == []

    async def test_init_with_token_skips_authentication(self, lit_server):
        client = client_for(lit_server, username="alice", password="pw")

        await client.init()

        assert client.initialized is True
        assert client.config.auth_token == "static-token"
        assert lit_server.token_requests == []

    async def test_init_without_token_authenticates_once(self, lit_server):
        client = client_for(lit_server, auth_token="", username="alice", password="pw")

        await client.ensure_initialized()
        await client.ensure_initialized()

        assert len(lit_server.token_requests) == 1
        assert client.config.auth_token == "kc-token"

    async def test_init_without_credentials_leaves_token_empty(self, lit_server):
        client = client_for(lit_server, auth_token="")

        await client.init()

        assert client.config.auth_token == ""
        assert lit_server.token_requests == []

    async def test_provider_settings_are_not_mutated(self, lit_server):
        settings = make_settings(auth_token="", username="alice", password="pw")
        client = CommanderClient(lambda: settings, transport=lit_server.transport)

        await client.init()

        assert client.config.auth_token == "kc-token"
        assert settings.auth_token == ""


class TestAuthenticate:
    async def test_password_grant_form(self, lit_server):
        client = client_for(lit_server, auth_token="", username="alice", password="s3cret")

        await client.init()

        form = lit_server.token_requests[0]
        assert form["grant_type"] == ["password"]
        assert form["client_id"] == ["lit-app"]
        assert form["username"] == ["alice"]
        assert form["password"] == ["s3cret"]

    async def test_token_url(self):
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json={"access_token": "t"})

        client = CommanderClient(
            lambda: make_settings(
                auth_url="http://kc.example:9090/", auth_token="", username="u", password="p"
            ),
            transport=httpx.MockTransport(handler),
        )
        await client.init()

        assert str(captured[0].url) == (
            "http://kc.example:9090/realms/LIT/protocol/openid-connect/token"
        )
        assert captured[0].headers["content-type"] == "application/x-www-form-urlencoded"

    async def test_rejected_credentials(self, lit_server):
        lit_server.token_status = 401
        client = client_for(lit_server, auth_token="", username="alice", password="bad")

        with pytest.raises(AuthenticationError) as exc_info:
            await client.init()

        assert exc_info.value.status_code == 401
        assert "401 Unauthorized - invalid_grant" in exc_info.value.message
        assert client.initialized is False

    async def test_null_access_token_is_rejected(self):
        lit_server = FakeLitServer(access_token=None)
        client = client_for(lit_server, auth_token="", username="alice", password="pw")

        with pytest.raises(AuthenticationError, match="no access_token"):
            await client.init()

        assert client.initialized is False
        assert lit_server.requests == []

    async def test_network_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("no route to host", request=request)

        client = CommanderClient(
            lambda: make_settings(auth_token="", username="u", password="p"),
            transport=httpx.MockTransport(handler),
        )

        with pytest.raises(AuthenticationError, match="no route to host"):
            await client.init()

    async def test_requires_credentials(self, client):
        await client.init()

        with pytest.raises(AuthenticationError, match="Username and password required"):
            await client.authenticate()

    async def test_requires_init(self, client):
        with pytest.raises(NotInitializedError):
            await client.authenticate()


class TestValidatePath:
    async def test_prefixes_absolute_path(self, client):
        await client.init()
        assert client.validate_path("/foo") == "/base/foo"

    async def test_prefixes_relative_path_with_separator(self, client):
        await client.init()
        assert client.validate_path("foo/bar.txt") == "/base/foo/bar.txt"

    async def test_already_prefixed_is_unchanged(self, client):
        await client.init()
        assert client.validate_path("/base/foo") == "/base/foo"
        assert client.validate_path(client.validate_path("/foo")) == "/base/foo"

    async def test_traversal_is_not_rejected(self, client):
        await client.init()
        assert client.validate_path("/../etc/passwd") == "/base/../etc/passwd"

    def test_requires_init(self, client):
        with pytest.raises(NotInitializedError):
            client.validate_path("/foo")


class TestMakeRequest:
    async def test_success_envelope(self, client, lit_server):
        lit_server.on("get_file_info", {"size": 42})
        await client.init()

        response = await client._make_request("get_file_info", {"path": "/base/a"})

        assert response == ApiResponse(success=True, data={"size": 42})

    async def test_http_error_envelope(self, client, lit_server):
        await client.init()

        response = await client._make_request("get_file_info", {"path": "/base/a"})

        assert response == ApiResponse(success=False, error="HTTP 404: Not Found")

    async def test_network_error_envelope(self, client, lit_server):
        lit_server.fail_network("get_file_info", "Connection refused")
        await client.init()

        response = await client._make_request("get_file_info", {"path": "/base/a"})

        assert response == ApiResponse(success=False, error="Network error: Connection refused")

    async def test_invalid_json_is_reported_not_raised(self, client, lit_server):
        lit_server.on_raw("get_file_info", lambda request: httpx.Response(200, text="<html>"))
        await client.init()

        response = await client._make_request("get_file_info", {"path": "/base/a"})

        assert response.success is False
        assert response.error.startswith("Network error: ")

    async def test_undecodable_body_is_reported_not_raised(self, client, lit_server):
        lit_server.on_raw(
            "get_file_info", lambda request: httpx.Response(200, content=b"\x80\x81garbage")
        )
        await client.init()

        response = await client._make_request("get_file_info", {"path": "/base/a"})

        assert response.success is False
        assert response.error.startswith("Network error: ")

    async def test_url_and_headers(self, client, lit_server):
        lit_server.on("write_file", {"ok": True})
        await client.init()

        await client._make_request("write_file", {"path": "/base/a", "content": "x"})

        request = lit_server.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "http://lit.test/api/commander/write_file"
        assert request.headers["authorization"] == "Bearer static-token"
        assert request.headers["content-type"] == "application/json"

    async def test_uses_token_from_authentication(self, lit_server):
        lit_server.on("get_file_info", {})
        client = client_for(lit_server, auth_token="", username="alice", password="pw")
        await client.init()

        await client._make_request("get_file_info", {"path": "/base"})

        assert lit_server.requests[0].headers["authorization"] == "Bearer kc-token"

    async def test_requires_init(self, client):
        with pytest.raises(NotInitializedError):
            await client._make_request("read_file", {"path": "/base/a"})


class TestReadFile:
    async def test_unwraps_server_envelope(self, client, lit_server):
        lit_server.on("read_file", {"success": True, "data": "hello\n"})
        await client.init()

        response = await client.read_file(FileReadRequest(path="/a.txt", offset=0, length=10))

        assert response == ApiResponse(success=True, data="hello\n")
        assert lit_server.bodies("read_file") == [
            {"path": "/base/a.txt", "offset": 0, "length": 10}
        ]

    async def test_flat_string_body(self, client, lit_server):
        lit_server.on("read_file", "plain content")
        await client.init()

        response = await client.read_file(FileReadRequest(path="/a.txt"))

        assert response.data == "plain content"

    async def test_empty_payload_is_empty_string(self, client, lit_server):
        lit_server.on("read_file", {"success": True, "data": None})
        await client.init()

        response = await client.read_file(FileReadRequest(path="/a.txt"))

        assert response == ApiResponse(success=True, data="")

    async def test_structured_payload_is_serialized(self, client, lit_server):
        lit_server.on("read_file", {"data": {"lines": ["a", "b"]}})
        await client.init()

        response = await client.read_file(FileReadRequest(path="/a.txt"))

        assert response.data == '{"lines": ["a", "b"]}'

    async def test_failure_passes_through(self, client, lit_server):
        lit_server.on("read_file", {"detail": "boom"}, status_code=500)
        await client.init()

        response = await client.read_file(FileReadRequest(path="/a.txt"))

        assert response == ApiResponse(success=False, error="HTTP 500: Internal Server Error")


class TestListDirectory:
    async def test_entries_are_rendered(self, client, lit_server):
        lit_server.on(
            "list_directory",
            {
                "success": True,
                "data": [
                    {"name": "a.txt", "type": "file"},
                    {"name": "sub", "type": "dir"},
                    "raw",
                ],
            },
        )
        await client.init()

        response = await client.list_directory(DirectoryListRequest(path="/"))

        assert response.data == ["[FILE] a.txt", "[DIR] sub", "raw"]
        assert lit_server.bodies("list_directory") == [{"path": "/base/"}]

    async def test_missing_type_defaults_to_file(self, client, lit_server):
        lit_server.on("list_directory", [{"name": "notes"}, {"name": "x", "type": ""}])
        await client.init()

        response = await client.list_directory(DirectoryListRequest(path="/"))

        assert response.data == ["[FILE] notes", "[FILE] x"]

    async def test_unnamed_entry_is_stringified(self, client, lit_server):
        lit_server.on("list_directory", [42, {"size": 1}])
        await client.init()

        response = await client.list_directory(DirectoryListRequest(path="/"))

        assert response.data == ["42", "{'size': 1}"]

    async def test_null_payload_is_empty(self, client, lit_server):
        lit_server.on("list_directory", {"data": None})
        await client.init()

        response = await client.list_directory(DirectoryListRequest(path="/"))

        assert response == ApiResponse(success=True, data=[])

    async def test_non_list_payload_is_failure(self, client, lit_server):
        lit_server.on("list_directory", {"data": {"name": "a"}})
        await client.init()

        response = await client.list_directory(DirectoryListRequest(path="/"))

        assert response.success is False
        assert response.error == "Unexpected list_directory payload: dict"


class TestRequestPayloads:
    async def test_write_file(self, client, lit_server):
        lit_server.on("write_file", {"success": True})
        await client.init()

        await client.write_file(FileWriteRequest(path="notes.txt", content="hi", mode="append"))

        assert lit_server.bodies("write_file") == [
            {"path": "/base/notes.txt", "content": "hi", "mode": "append"}
        ]

    async def test_search_files_uses_camel_case(self, client, lit_server):
        lit_server.on("search_files", ["/base/a.py"])
        await client.init()

        response = await client.search_files(
            FileSearchRequest(path="/src", pattern="*.py", timeout_ms=500)
        )

        assert response.data == ["/base/a.py"]
        assert lit_server.bodies("search_files") == [
            {"path": "/base/src", "pattern": "*.py", "timeoutMs": 500}
        ]

    async def test_search_code_omits_unset_options(self, client, lit_server):
        lit_server.on("search_code", {"matches": []})
        await client.init()

        await client.search_code(
            CodeSearchRequest(path="/", pattern="TODO", ignore_case=True, max_results=5)
        )

        assert lit_server.bodies("search_code") == [
            {"path": "/base/", "pattern": "TODO", "ignoreCase": True, "maxResults": 5}
        ]

    async def test_edit_block_normalizes_file_path(self, client, lit_server):
        lit_server.on("edit_block", {"replacements": 1})
        await client.init()

        await client.edit_block(
            EditBlockRequest(
                file_path="/a.py", old_string="x", new_string="y", expected_replacements=1
            )
        )

        assert lit_server.bodies("edit_block") == [
            {
                "file_path": "/base/a.py",
                "old_string": "x",
                "new_string": "y",
                "expected_replacements": 1,
            }
        ]

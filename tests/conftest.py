"""Test configuration and fixtures."""

from __future__ import annotations

import os

import pytest

from lit_commander.http_client import CommanderClient
from tests.fakes import FakeLitServer, make_settings


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    """Keep developer LIT_COMMANDER_* variables and config files out of tests."""
    for key in list(os.environ):
        if key.startswith("LIT_COMMANDER_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


@pytest.fixture
def lit_server() -> FakeLitServer:
    return FakeLitServer()


@pytest.fixture
def client(lit_server: FakeLitServer) -> CommanderClient:
    return CommanderClient(lambda: make_settings(), transport=lit_server.transport)

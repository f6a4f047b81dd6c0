"""
Tests for the command line client.
Runs commands through asyncclick's CliRunner against httpx.MockTransport.
"""

# pylint: disable=redefined-outer-name

import json
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest
from asyncclick.testing import CliRunner

from shoutbox.client.api import ShoutboxAPI
from shoutbox.client.cli import command
from shoutbox.client.storage import USERNAME_KEY, LocalStorage

RECORD = {
    "id": 3,
    "username": "alice",
    "content": "hi",
    "created_at": "2024-05-01T12:00:00Z",
    "updated_at": "2024-05-01T12:00:00Z",
}


def handler(request: httpx.Request) -> httpx.Response:
    if request.method == "GET":
        return httpx.Response(200, json={"success": True, "data": [RECORD]})

    body = json.loads(request.content)
    if not body["username"]:
        return httpx.Response(
            422, json={"success": False, "errors": {"username": "The username field is required."}}
        )
    return httpx.Response(201, json={"success": True, "data": {**RECORD, **body, "id": 4}})


@pytest.fixture
def mock_api():
    """Every ShoutboxAPI built by the CLI talks to the mock transport."""

    def make_api(base_url, timeout=5.0):
        return ShoutboxAPI(base_url, timeout=timeout, transport=httpx.MockTransport(handler))

    with patch("shoutbox.client.cli.ShoutboxAPI", make_api):
        yield


@pytest.fixture
def env(tmp_path):
    return {
        "SHOUTBOX_API_URL": "http://shoutbox.test/api",
        "SHOUTBOX_STORAGE_PATH": str(tmp_path / "storage.json"),
        "SHOUTBOX_APP_KEY": "",
        "SHOUTBOX_HOST": "",
        "SHOUTBOX_REFRESH_INTERVAL": "10",
    }


# pylint: disable=unused-argument


@pytest.mark.asyncio
async def test_list(mock_api, env):
    result = await CliRunner().invoke(command, ["list"], env=env)

    assert result.exit_code == 0
    assert "alice: hi" in result.output


@pytest.mark.asyncio
async def test_post(mock_api, env):
    result = await CliRunner().invoke(command, ["post", "bob", "hello there"], env=env)

    assert result.exit_code == 0
    assert "Sent #4" in result.output
    assert LocalStorage(Path(env["SHOUTBOX_STORAGE_PATH"])).get(USERNAME_KEY) == "bob"


@pytest.mark.asyncio
async def test_post_validation_error(mock_api, env):
    result = await CliRunner().invoke(command, ["post", "", "hello"], env=env)

    assert result.exit_code == 1
    assert "username: The username field is required." in result.output


@pytest.mark.asyncio
async def test_post_requires_both_arguments(mock_api, env):
    result = await CliRunner().invoke(command, ["post", "only-content"], env=env)

    assert result.exit_code == 2


@pytest.mark.asyncio
async def test_watch(mock_api, env):
    result = await CliRunner().invoke(command, ["watch", "--duration", "0.05"], env=env)

    assert result.exit_code == 0
    assert "alice: hi" in result.output

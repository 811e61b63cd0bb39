import asyncio
import io
import json
import types

import httpx
import pytest

from mcpbridge.client import McpStreamClient
from mcpbridge.config import Config
from mcpbridge.jsonrpc import INTERNAL_ERROR
from mcpbridge.main import main, main_loop

REQUEST_1 = '{"jsonrpc":"2.0","id":1,"method":"tools/list"}'
REQUEST_2 = '{"jsonrpc":"2.0","id":2,"method":"tools/list"}'


def _stream(data: bytes) -> asyncio.StreamReader:
    reader = asyncio.StreamReader()
    reader.feed_data(data)
    reader.feed_eof()
    return reader


def _client(handler) -> McpStreamClient:
    config = Config(mcp_server_url="http://gateway.test/mcp")
    return McpStreamClient(config, transport=httpx.MockTransport(handler))


def _echo(request: httpx.Request) -> httpx.Response:
    return httpx.Response(
        200, headers={"content-type": "application/json"}, content=request.content
    )


@pytest.mark.asyncio
async def test_main_loop_round_trips_every_line():
    client = _client(_echo)
    out = io.BytesIO()
    data = f"{REQUEST_1}\n{REQUEST_2}\n".encode()
    await asyncio.wait_for(main_loop(2, client, _stream(data), out), 5)
    lines = out.getvalue().decode().splitlines()
    assert sorted(lines) == sorted([REQUEST_1, REQUEST_2])
    await client.aclose()


@pytest.mark.asyncio
async def test_main_loop_output_ends_with_newline():
    client = _client(_echo)
    out = io.BytesIO()
    await asyncio.wait_for(main_loop(1, client, _stream(REQUEST_1.encode()), out), 5)
    assert out.getvalue() == (REQUEST_1 + "\n").encode()
    await client.aclose()


@pytest.mark.asyncio
async def test_main_loop_without_workers_writes_nothing():
    client = _client(_echo)
    out = io.BytesIO()
    await asyncio.wait_for(main_loop(0, client, _stream(REQUEST_1.encode() + b"\n"), out), 5)
    assert out.getvalue() == b""
    await client.aclose()


@pytest.mark.asyncio
async def test_main_loop_turns_gateway_errors_into_replies():
    client = _client(lambda request: httpx.Response(500, content=b"error"))
    out = io.BytesIO()
    data = f"{REQUEST_1}\n{REQUEST_2}\n".encode()
    await asyncio.wait_for(main_loop(3, client, _stream(data), out), 5)
    replies = [json.loads(line) for line in out.getvalue().decode().splitlines()]
    assert sorted(reply["id"] for reply in replies) == [1, 2]
    assert all(reply["error"]["code"] == INTERNAL_ERROR for reply in replies)
    await client.aclose()


def test_main_requires_url():
    with pytest.raises(SystemExit):
        main([])


def test_main_reports_unreachable_gateway(monkeypatch):
    stdin = types.SimpleNamespace(buffer=io.BytesIO((REQUEST_1 + "\n").encode()))
    stdout = types.SimpleNamespace(buffer=io.BytesIO())
    monkeypatch.setattr("sys.stdin", stdin)
    monkeypatch.setattr("sys.stdout", stdout)

    status = main(["--url", "http://127.0.0.1:1/mcp", "--timeout", "5"])

    assert status == 0
    reply = json.loads(stdout.buffer.getvalue().decode())
    assert reply["id"] == 1
    assert reply["error"]["code"] == INTERNAL_ERROR
    assert reply["error"]["message"].startswith("Request failed")
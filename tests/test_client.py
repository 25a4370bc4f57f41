import json

import httpx
import pytest

from dockwire.client import DockerClient, DockerError, DockerResponseServerError
from dockwire.read import JsonDataError
from dockwire.uri import ClientType, ClientVersion, encode_filters

V = ClientVersion(1, 41)


def _client(handler, client_type=ClientType.HTTP, socket="localhost:2375"):
    return DockerClient(socket, client_type, V, httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_request_json_sends_path_and_query():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[{"Name": "bridge"}])

    filters = encode_filters({"label": ["maintainer=some_maintainer"]})
    async with _client(handler) as client:
        result = await client.request_json("GET", "/networks", {"filters": filters})
    assert result == [{"Name": "bridge"}]
    assert seen[0].method == "GET"
    assert seen[0].url.path == "/networks"
    assert seen[0].url.params["filters"] == filters


@pytest.mark.asyncio
async def test_json_body_and_headers():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(201, json={"Id": "abc"})

    body = {"Name": "certs", "CheckDuplicate": True}
    async with _client(handler) as client:
        result = await client.request_json(
            "POST", "/networks/create", body=body, headers={"X-Registry-Auth": "token"}
        )
    assert result == {"Id": "abc"}
    assert json.loads(seen[0].content) == body
    assert seen[0].headers["content-type"] == "application/json"
    assert seen[0].headers["x-registry-auth"] == "token"


@pytest.mark.asyncio
async def test_server_error_carries_status_and_message():
    def handler(request):
        return httpx.Response(404, json={"message": "no such secret"})

    async with _client(handler) as client:
        with pytest.raises(DockerResponseServerError) as info:
            await client.request_json("GET", "/secrets/missing")
    assert info.value.status_code == 404
    assert info.value.message == "no such secret"


@pytest.mark.asyncio
async def test_request_text():
    async with _client(lambda request: httpx.Response(200, text="OK")) as client:
        assert await client.request_text("GET", "/_ping") == "OK"


@pytest.mark.asyncio
async def test_request_unit():
    seen = []

    def handler(request):
        seen.append(request.method)
        return httpx.Response(204)

    async with _client(handler) as client:
        result = await client.request_unit("DELETE", "/volumes/v1")
    assert result is None
    assert seen == ["DELETE"]


@pytest.mark.asyncio
async def test_request_json_invalid_body():
    async with _client(lambda request: httpx.Response(200, content=b"{nope")) as client:
        with pytest.raises(JsonDataError):
            await client.request_json("GET", "/info")


@pytest.mark.asyncio
async def test_stream_json_yields_documents():
    def handler(request):
        return httpx.Response(200, content=b'{"a":1}\n{"b":2}\n')

    async with _client(handler) as client:
        items = [item async for item in client.stream_json("GET", "/events")]
    assert items == [{"a": 1}, {"b": 2}]


@pytest.mark.asyncio
async def test_stream_json_error_status():
    def handler(request):
        return httpx.Response(500, json={"message": "broken"})

    async with _client(handler) as client:
        with pytest.raises(DockerResponseServerError) as info:
            async for _ in client.stream_json("GET", "/events"):
                pass
    assert info.value.message == "broken"


@pytest.mark.asyncio
async def test_unix_socket_requests_go_to_localhost():
    seen = []

    def handler(request):
        seen.append(request.url)
        return httpx.Response(200, text="OK")

    client = _client(handler, ClientType.UNIX, "unix:///var/run/docker.sock")
    async with client:
        await client.request_text("GET", "/_ping")
    assert client.socket == "/var/run/docker.sock"
    assert seen[0].scheme == "http"
    assert seen[0].host == "localhost"
    assert seen[0].path == "/_ping"


def test_named_pipe_requires_transport():
    with pytest.raises(DockerError):
        DockerClient("//./pipe/docker_engine", ClientType.NAMED_PIPE, V, None)
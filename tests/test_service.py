import base64
import json

import httpx
import pytest

from dockwire.client import API_DEFAULT_VERSION, DockerClient, DockerResponseServerError
from dockwire.service import (
    InspectServiceOptions,
    ListServicesOptions,
    Services,
    UpdateServiceOptions,
    registry_auth_header,
)
from dockwire.uri import ClientType


def _services(handler):
    calls = []

    def wrapped(request):
        calls.append(request)
        return handler(request)

    client = DockerClient(
        "localhost:2375", ClientType.HTTP, transport=httpx.MockTransport(wrapped)
    )
    return Services(client), calls


def _path(suffix):
    return f"/v{API_DEFAULT_VERSION}{suffix}"


def _decode_auth(value):
    return json.loads(base64.urlsafe_b64decode(value))


SPEC = {
    "Name": "integration_test_create_service",
    "TaskTemplate": {"ContainerSpec": {"Image": "localhost:5000/fussybeaver/uhttpd"}},
}


def test_update_options_defaults():
    assert UpdateServiceOptions(version=1234).to_query() == {
        "version": 1234,
        "registryAuthFrom": "spec",
        "rollback": "",
    }


def test_update_options_rollback_and_previous_spec():
    query = UpdateServiceOptions(version=5, registry_auth_from=True, rollback=True).to_query()
    assert query["registryAuthFrom"] == "previous-spec"
    assert query["rollback"] == "previous"


def test_inspect_options_use_camel_case():
    assert InspectServiceOptions(insert_defaults=True).to_query() == {"insertDefaults": True}


def test_list_options_encode_filters():
    options = ListServicesOptions(filters={"mode": ["global"]})
    assert json.loads(options.to_query()["filters"]) == {"mode": ["global"]}


def test_registry_auth_header_empty_credentials():
    assert registry_auth_header(None) == "e30="


def test_registry_auth_header_round_trip_drops_unset_fields():
    password = "password"
    header = registry_auth_header({"username": "bollard", "password": password, "email": None})
    assert _decode_auth(header) == {"username": "bollard", "password": password}


@pytest.mark.asyncio
async def test_create_sends_spec_and_auth_header():
    services, calls = _services(lambda request: httpx.Response(201, json={"ID": "svc1"}))
    result = await services.create(SPEC)
    assert result == {"ID": "svc1"}
    request = calls[0]
    assert request.method == "POST"
    assert request.url.path == _path("/services/create")
    assert request.headers["content-type"] == "application/json"
    assert _decode_auth(request.headers["x-registry-auth"]) == {}
    assert json.loads(request.content) == SPEC


@pytest.mark.asyncio
async def test_list_returns_services():
    body = [{"Spec": {"Name": "integration_test_list_services"}}]
    services, calls = _services(lambda request: httpx.Response(200, json=body))
    result = await services.list(ListServicesOptions(filters={"mode": ["global"]}))
    assert result[0]["Spec"]["Name"] == "integration_test_list_services"
    assert calls[0].url.path == _path("/services")
    assert json.loads(calls[0].url.params["filters"]) == {"mode": ["global"]}


@pytest.mark.asyncio
async def test_inspect_with_options():
    body = {"Version": {"Index": 12}}
    services, calls = _services(lambda request: httpx.Response(200, json=body))
    result = await services.inspect("my-service", InspectServiceOptions(insert_defaults=True))
    assert result["Version"]["Index"] == 12
    assert calls[0].url.path == _path("/services/my-service")
    assert calls[0].url.params["insertDefaults"] == "true"


@pytest.mark.asyncio
async def test_delete_service():
    services, calls = _services(lambda request: httpx.Response(200))
    assert await services.delete("integration_test_create_service") is None
    assert calls[0].method == "DELETE"
    assert calls[0].url.path == _path("/services/integration_test_create_service")


@pytest.mark.asyncio
async def test_update_sends_query_body_and_credentials():
    services, calls = _services(lambda request: httpx.Response(200, json={"Warnings": []}))
    spec = dict(SPEC, Mode={"Replicated": {"Replicas": 0}})
    options = UpdateServiceOptions(version=12, rollback=True)
    result = await services.update("my-service", spec, options, {"username": "bollard"})
    assert result == {"Warnings": []}
    request = calls[0]
    assert request.url.path == _path("/services/my-service/update")
    assert request.url.params["version"] == "12"
    assert request.url.params["rollback"] == "previous"
    assert request.url.params["registryAuthFrom"] == "spec"
    assert _decode_auth(request.headers["x-registry-auth"]) == {"username": "bollard"}
    assert json.loads(request.content) == spec


@pytest.mark.asyncio
async def test_error_status_raises():
    services, _ = _services(
        lambda request: httpx.Response(409, json={"message": "update out of sequence"})
    )
    with pytest.raises(DockerResponseServerError) as info:
        await services.update("my-service", SPEC, UpdateServiceOptions(version=1))
    assert info.value.status_code == 409
    assert info.value.message == "update out of sequence"
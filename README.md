# dockwire

An asynchronous Python client for the Docker Engine API, built on `httpx`.

It covers:

- **Networks** (`dockwire.network.Networks`): create, inspect, list, connect, disconnect, remove and prune.
- **Volumes** (`dockwire.volume.Volumes`): create, inspect, list, remove and prune.
- **Secrets** (`dockwire.secret.Secrets`): create, inspect, list, update and delete swarm secrets.
- **Services** (`dockwire.service.Services`): create, inspect, list, update (including rollback) and delete swarm services.
- **System** (`dockwire.system.System`): version, info, ping, disk usage and the live event stream.

It also provides the stream decoders used on the wire (`dockwire.read`):
the multiplexed stdin/stdout/stderr log framing and newline-delimited JSON.

## Installation

```
pip install dockwire
```

## Connecting

`dockwire.client.DockerClient` holds the socket address, the connection kind
(`dockwire.uri.ClientType`) and the API version to speak
(`dockwire.uri.ClientVersion`, 1.41 by default). It is an async context
manager; leaving the block closes the underlying connections.

```python
from dockwire.client import DockerClient
from dockwire.uri import ClientType, ClientVersion

# Unix socket (the default kind); a leading "unix://" is accepted.
local = DockerClient("/var/run/docker.sock")

# Plain TCP; a leading "tcp://" is accepted.
remote = DockerClient("localhost:2375", ClientType.HTTP, ClientVersion(1, 41))
```

A custom `httpx.AsyncBaseTransport` can be passed as `transport`. Named pipe
connections have no built-in transport and need one passed explicitly.

## Usage

Every API group is a small object wrapping a `DockerClient`. Apart from
`System.version`, which returns a `dockwire.system.Version` dataclass, the
methods return the engine's JSON as plain Python dicts and lists.

```python
from dockwire.client import DockerClient
from dockwire.network import Networks, CreateNetworkOptions, ListNetworksOptions
from dockwire.system import System


async def show():
    async with DockerClient("/var/run/docker.sock") as client:
        system = System(client)
        print(await system.ping())           # "OK"
        version = await system.version()
        print(version.os, version.api_version)

        networks = Networks(client)
        created = await networks.create(CreateNetworkOptions(name="certs", driver="bridge"))
        found = await networks.list(
            ListNetworksOptions(filters={"label": ["maintainer=some_maintainer"]})
        )
        print(created["Id"], len(found))
```

Volumes, secrets and services follow the same pattern:

```python
from dockwire.volume import Volumes, CreateVolumeOptions, RemoveVolumeOptions
from dockwire.service import Services, UpdateServiceOptions


async def tidy(client):
    volumes = Volumes(client)
    await volumes.create(CreateVolumeOptions(name="scratch"))
    await volumes.remove("scratch", RemoveVolumeOptions(force=True))

    services = Services(client)
    current = await services.inspect("my-service", None)
    index = current["Version"]["Index"]
    await services.update(
        "my-service", {}, UpdateServiceOptions(version=index, rollback=True), None
    )
```

`Services.create` and `Services.update` send registry credentials in the
`X-Registry-Auth` header; `dockwire.service.registry_auth_header` builds that
value (missing credentials encode as an empty JSON object).

### Errors

- `dockwire.client.DockerResponseServerError` is raised when the engine
  answers with an error status; it carries `status_code` and the engine's
  `message`.
- `dockwire.client.DockerError` (its base class) is also raised when the
  connection itself fails.
- `dockwire.read.JsonDataError`, a `ValueError`, is raised when a response
  body is not valid JSON.

### Events

`System.events` yields decoded event messages as they arrive:

```python
from dockwire.system import System, EventsOptions


async def watch(client):
    async for event in System(client).events(EventsOptions(filters={"type": ["container"]})):
        print(event)
```

`since` and `until` accept strings, numbers or `datetime` values; naive
datetimes are taken as UTC.

### Decoding raw streams

The decoders work on bytes you feed them and hand back one item at a time,
or `None` when more data is needed.

```python
from dockwire.read import NewlineLogOutputDecoder, JsonLineDecoder

logs = NewlineLogOutputDecoder(is_tcp=False)
logs.feed(b"\x01\x00\x00\x00\x00\x00\x00\x06hello\n")
print(logs.decode())     # LogOutput(kind=LogKind.STDOUT, message=b'hello\n')

lines = JsonLineDecoder()
lines.feed(b'{"status": "Extracting"}\n{')
print(lines.decode())    # {'status': 'Extracting'}
print(lines.decode())    # None, waiting for the rest of the object
```

`dockwire.read.iter_decoded` drives a decoder over an async iterable of
chunks, and `dockwire.read.StreamReader` offers a file-like async `read()`
over one.

## What it does not do

- It has no container, image or exec endpoints; only networks, volumes,
  secrets, services and system calls are available.
- It has no typed models for responses other than `Version`: results are
  plain JSON values.
- It has no command-line tool.
- It cannot open Windows named pipes by itself.

## Running the tests

```
pip install -e ".[test]"
pytest
```
"""Network API: user-defined networks that containers can be attached to."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from .client import DockerClient
from .uri import encode_filters


@dataclass
class CreateNetworkOptions:
    """Network configuration used when creating a network."""

    name: str = ""
    check_duplicate: bool = False
    driver: str = ""
    internal: bool = False
    attachable: bool = False
    ingress: bool = False
    ipam: Mapping[str, Any] = field(default_factory=dict)
    enable_ipv6: bool = False
    options: Mapping[str, str] = field(default_factory=dict)
    labels: Mapping[str, str] = field(default_factory=dict)

    def to_body(self) -> dict[str, Any]:
        """Request body in the engine's field naming."""
        return {
            "Name": self.name,
            "CheckDuplicate": self.check_duplicate,
            "Driver": self.driver,
            "Internal": self.internal,
            "Attachable": self.attachable,
            "Ingress": self.ingress,
            "IPAM": dict(self.ipam),
            "EnableIPv6": self.enable_ipv6,
            "Options": dict(self.options),
            "Labels": dict(self.labels),
        }


@dataclass
class InspectNetworkOptions:
    """Query parameters for inspecting a network."""

    verbose: bool = False
    scope: str = ""

    def to_query(self) -> dict[str, Any]:
        """Query parameters for the request."""
        return {"verbose": self.verbose, "scope": self.scope}


@dataclass
class ListNetworksOptions:
    """Filters applied when listing networks."""

    filters: Mapping[str, Sequence[str]] = field(default_factory=dict)

    def to_query(self) -> dict[str, Any]:
        """Query parameters for the request."""
        return {"filters": encode_filters(self.filters)}


@dataclass
class ConnectNetworkOptions:
    """Connects a container to a network."""

    container: str = ""
    endpoint_config: Mapping[str, Any] = field(default_factory=dict)

    def to_body(self) -> dict[str, Any]:
        """Request body in the engine's field naming."""
        return {"Container": self.container, "EndpointConfig": dict(self.endpoint_config)}


@dataclass
class DisconnectNetworkOptions:
    """Disconnects a container from a network."""

    container: str = ""
    force: bool = False

    def to_body(self) -> dict[str, Any]:
        """Request body in the engine's field naming."""
        return {"Container": self.container, "Force": self.force}


@dataclass
class PruneNetworksOptions:
    """Filters applied when pruning unused networks."""

    filters: Mapping[str, Sequence[str]] = field(default_factory=dict)

    def to_query(self) -> dict[str, Any]:
        """Query parameters for the request."""
        return {"filters": encode_filters(self.filters)}


class Networks:
    """Network endpoints of the engine API."""

    def __init__(self, client: DockerClient) -> None:
        self.client = client

    async def create(self, config: CreateNetworkOptions) -> Any:
        """Create a network and return the engine's create response."""
        return await self.client.request_json("POST", "/networks/create", body=config.to_body())

    async def remove(self, network_name: str) -> None:
        """Remove a network."""
        await self.client.request_unit("DELETE", f"/networks/{network_name}")

    async def inspect(
        self, network_name: str, options: InspectNetworkOptions | None = None
    ) -> Any:
        """Return details of a network."""
        query = options.to_query() if options is not None else None
        return await self.client.request_json("GET", f"/networks/{network_name}", query=query)

    async def list(self, options: ListNetworksOptions | None = None) -> Any:
        """Return the networks known to the engine."""
        query = options.to_query() if options is not None else None
        return await self.client.request_json("GET", "/networks", query=query)

    async def connect(self, network_name: str, config: ConnectNetworkOptions) -> None:
        """Connect a container to a network."""
        await self.client.request_unit(
            "POST", f"/networks/{network_name}/connect", body=config.to_body()
        )

    async def disconnect(self, network_name: str, config: DisconnectNetworkOptions) -> None:
        """Disconnect a container from a network."""
        await self.client.request_unit(
            "POST", f"/networks/{network_name}/disconnect", body=config.to_body()
        )

    async def prune(self, options: PruneNetworksOptions | None = None) -> Any:
        """Delete unused networks and return the prune report."""
        query = options.to_query() if options is not None else None
        return await self.client.request_json("POST", "/networks/prune", query=query)
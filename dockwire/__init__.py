"""Asynchronous client for the Docker Engine API: networks, volumes, secrets, services and system."""

__version__ = "0.1.0"

__all__ = ["client", "network", "read", "secret", "service", "system", "uri", "volume"]
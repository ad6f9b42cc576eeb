"""Server connection resolution: merges redfish_server blocks with provider-level settings."""

import logging
from dataclasses import dataclass
from typing import List, Sequence, Union
from urllib.parse import urlparse, urlunparse

from redfish_provider.models import RedfishServer

logger = logging.getLogger(__name__)


@dataclass
class ServerConnection:
    """Resolved connection details for one BMC"""
    endpoint: str
    username: str
    password: str
    verify_ssl: bool


def _first_server(servers: Sequence[Union[RedfishServer, dict]]) -> RedfishServer:
    if not servers:
        raise ValueError("No provider block was found")
    server = servers[0]
    if isinstance(server, dict):
        server = RedfishServer(**server)
    return server


def normalize_endpoint(endpoint: str) -> str:
    """Lower-case the scheme and host and drop trailing slashes."""
    endpoint = endpoint.strip()
    addr = urlparse(endpoint)
    if not addr.scheme or not addr.netloc:
        return endpoint.rstrip('/')
    return urlunparse(addr._replace(
        scheme=addr.scheme.lower(),
        netloc=addr.netloc.lower(),
        path=addr.path.rstrip('/'),
    ))


def endpoint_key(servers: Sequence[Union[RedfishServer, dict]]) -> str:
    """
    Return the key used to serialize operations against a server.

    This is the normalized endpoint of the first redfish_server block, so every
    resource pointing at the same BMC shares one lock however the URL is spelled.
    """
    return normalize_endpoint(_first_server(servers).endpoint)



def resolve_server_connection(settings, servers: List[Union[RedfishServer, dict]]) -> ServerConnection:
    """
    Resolve credentials for the first redfish_server block.

    Resource-level user, password and ssl_insecure take precedence over the
    provider-level settings.

    Args:
        settings: Provider Settings
        servers: redfish_server blocks of the resource

    Returns:
        ServerConnection

    Raises:
        ValueError: If no block was given or no username/password can be resolved
    """
    server = _first_server(servers)

    if server.user:
        username = server.user
        logger.debug("Using redfish user from resource")
    elif settings.user:
        username = settings.user
        logger.debug("Using redfish user from provider")
    else:
        raise ValueError(
            "Either provide username at provider level or resource level. Please check your configuration"
        )

    if server.password:
        password = server.password
        logger.debug("Using redfish password from resource")
    elif settings.password:
        password = settings.password
        logger.debug("Using redfish password from provider")
    else:
        raise ValueError(
            "Either provide password at provider level or resource level. Please check your configuration"
        )

    ssl_insecure = server.ssl_insecure if server.ssl_insecure is not None else settings.ssl_insecure

    return ServerConnection(
        endpoint=server.endpoint,
        username=username,
        password=password,
        verify_ssl=not ssl_insecure,
    )

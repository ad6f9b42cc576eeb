"""BMC reachability checks used after disruptive changes (network reconfiguration, resets)."""

import logging
import socket
import threading
import time
from typing import Callable, Optional, Tuple
from urllib.parse import urlparse

from redfish_provider.redfish.errors import OperationCancelledError, ServerUnreachableError

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {
    'https': 443,
    'http': 80,
}


def parse_endpoint(endpoint: str) -> Tuple[str, int]:
    """
    Split a BMC endpoint URL into host and TCP port.

    The port defaults to the scheme's well-known port.

    Raises:
        ValueError: If the endpoint has no hostname or an unknown scheme without a port
    """
    addr = urlparse(endpoint)
    if not addr.hostname:
        raise ValueError(f"Endpoint {endpoint!r} has no hostname")

    port = addr.port or DEFAULT_PORTS.get(addr.scheme.lower())
    if port is None:
        raise ValueError(f"Cannot determine port for endpoint {endpoint!r}")
    return addr.hostname, port


def probe_port(host: str, port: int, timeout: int = 5):
    """
    Open and close a TCP connection to host:port.

    Raises:
        OSError: If the connection cannot be established
    """
    with socket.create_connection((host, port), timeout=timeout):
        pass


def check_server_status(
    endpoint: str,
    interval: int,
    timeout: int,
    grace_period: int = 30,
    cancel_event: Optional[threading.Event] = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic
) -> bool:
    """
    Wait for a BMC to accept TCP connections again after a disruptive action.

    Waits grace_period seconds for the action to take effect, then probes the
    endpoint every interval seconds until a connection succeeds or timeout
    seconds have passed since probing started.

    Args:
        endpoint: BMC endpoint URL
        interval: Seconds between connection attempts
        timeout: Maximum time to keep probing, in seconds
        grace_period: Initial wait before the first probe
        cancel_event: Optional event that aborts the wait when set

    Returns:
        bool: True once the BMC is reachable

    Raises:
        ServerUnreachableError: If the BMC did not answer in time (last
            connection error chained)
        OperationCancelledError: If cancel_event is set while waiting
    """
    host, port = parse_endpoint(endpoint)

    def pause(seconds):
        if cancel_event is not None:
            if cancel_event.wait(seconds):
                raise OperationCancelledError(f"Cancelled while waiting for {endpoint}")
        else:
            sleep(seconds)

    # Initial sleep until the BMC restart is triggered
    pause(grace_period)

    last_error = None
    start = clock()
    while clock() - start < timeout:
        logger.debug(f"Checking server status of {endpoint}...")
        pause(interval)
        try:
            probe_port(host, port, timeout=interval or 5)
            logger.info(f"{endpoint} is reachable")
            return True
        except OSError as e:
            last_error = e
            logger.debug(f"{endpoint} unreachable: {e}")

    raise ServerUnreachableError(endpoint, timeout) from last_error

"""
Redfish Provider

Owns the state shared by every resource and data source in one process:
settings, the endpoint lock registry and the HTTP session manager. Resources
receive the provider explicitly instead of reaching for module globals.
"""

import logging
import threading
from contextlib import contextmanager
from typing import List, Optional

from redfish_provider.config import Settings, settings as default_settings
from redfish_provider.credentials import endpoint_key, resolve_server_connection
from redfish_provider.endpoint_locks import EndpointLockRegistry
from redfish_provider.power import PowerOperator
from redfish_provider.redfish.adapter import RedfishAdapter
from redfish_provider.redfish.service import RedfishService
from redfish_provider.session_manager import SessionManager

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


class RedfishProvider:
    """Process-level context handed to resources and data sources"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        registry: Optional[EndpointLockRegistry] = None,
        session_manager: Optional[SessionManager] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.settings = settings or default_settings
        self.registry = registry or EndpointLockRegistry()
        self.session_manager = session_manager or SessionManager(verify_ssl=not self.settings.ssl_insecure)
        self.logger = logger or logging.getLogger("redfish_provider")

    def log(self, message: str, level: str = "INFO"):
        """
        Log a message at a named level

        Args:
            message: Log message
            level: Log level (INFO, WARN, ERROR, DEBUG)
        """
        self.logger.log(LOG_LEVELS.get(level.upper(), logging.INFO), message)

    def connect(self, servers: List) -> RedfishService:
        """
        Open a Redfish service for a resource's redfish_server blocks.

        Raises:
            ValueError: If credentials cannot be resolved
            RedfishError: If the service root cannot be fetched
        """
        connection = resolve_server_connection(self.settings, servers)
        adapter = RedfishAdapter(
            self.session_manager,
            connection.endpoint,
            connection.username,
            connection.password,
            verify_ssl=connection.verify_ssl,
            logger=self.logger,
            timeout=(self.settings.request_connect_timeout, self.settings.request_read_timeout)
        )
        service = RedfishService.connect(adapter)
        self.log(f"Connection with the redfish endpoint {connection.endpoint} was successful", "DEBUG")
        return service

    @contextmanager
    def lock_endpoint(self, servers: List, cancel_event: Optional[threading.Event] = None):
        """Serialize a read-modify-write sequence against the resource's BMC."""
        key = endpoint_key(servers)
        self.log(f"Waiting for lock on {key}", "DEBUG")
        with self.registry.locked(key, cancel_event=cancel_event):
            self.log(f"Acquired lock on {key}", "DEBUG")
            try:
                yield
            finally:
                self.log(f"Released lock on {key}", "DEBUG")

    def power_operator(self, service: RedfishService, cancel_event: Optional[threading.Event] = None) -> PowerOperator:
        return PowerOperator(service, logger=self.logger, cancel_event=cancel_event)

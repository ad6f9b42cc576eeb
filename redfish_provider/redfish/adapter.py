"""
Redfish Adapter

Wraps Redfish API calls with session reuse, logging, and error handling.

All calls to a BMC's Redfish API go through this adapter to ensure:
- One pooled requests.Session per endpoint
- Basic authentication and JSON handling
- Consistent error handling with Redfish error mapping
"""

import logging
from typing import Any, Dict, Optional, Tuple
import time
import requests
from .errors import RedfishError, map_redfish_error
from redfish_provider.utils import _safe_json_parse


class RedfishAdapter:
    """
    Adapter bound to a single BMC endpoint and set of credentials.

    Provides a unified request method that wraps every Redfish call with
    session reuse, logging and error mapping.
    """

    def __init__(
        self,
        session_manager,
        endpoint: str,
        username: str,
        password: str,
        verify_ssl: bool = False,
        logger: Optional[logging.Logger] = None,
        timeout: Tuple[int, int] = (5, 30)
    ):
        """
        Initialize the adapter.

        Args:
            session_manager: SessionManager providing per-endpoint sessions
            endpoint: BMC endpoint URL (e.g. https://10.0.0.5)
            username: BMC username
            password: BMC password
            verify_ssl: Whether to verify SSL certificates (default False for self-signed)
            logger: Logger instance for operation logging
            timeout: Default tuple of (connect_timeout, read_timeout)
        """
        self.session_manager = session_manager
        self.endpoint = endpoint.rstrip('/')
        self.username = username
        self.password = password
        self.verify_ssl = verify_ssl
        self.logger = logger or logging.getLogger(__name__)
        self.timeout = timeout

    def make_request(
        self,
        method: str,
        path: str,
        payload: Optional[Dict] = None,
        operation_name: str = None,
        timeout: Tuple[int, int] = None
    ) -> Dict[str, Any]:
        """
        Unified request method for all Redfish API calls.

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE)
            path: Redfish path (e.g., /redfish/v1/Systems/1)
            payload: Optional JSON payload for POST/PATCH
            operation_name: Human-readable operation name for logging
            timeout: Tuple of (connect_timeout, read_timeout)

        Returns:
            dict: Response JSON data (empty for 204 responses)

        Raises:
            RedfishError: On transport or HTTP errors, with Redfish error mapping
        """
        url = f"{self.endpoint}{path}"
        operation_name = operation_name or f"{method} {path}"
        session = self.session_manager.get_session(self.endpoint, verify_ssl=self.verify_ssl)

        request_kwargs = {
            'auth': (self.username, self.password),
            'timeout': timeout or self.timeout,
            'headers': {'Content-Type': 'application/json'}
        }
        if payload is not None:
            request_kwargs['json'] = payload

        start_time = time.time()
        response = None

        try:
            response = session.request(method.upper(), url, **request_kwargs)
            response_time_ms = int((time.time() - start_time) * 1000)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            response_time_ms = int((time.time() - start_time) * 1000)
            status_code = response.status_code if response is not None else None

            self.logger.warning(
                f"{operation_name} on {self.endpoint} failed after {response_time_ms}ms: {e}"
            )

            if response is not None:
                error_info = map_redfish_error(_safe_json_parse(response))
                raise RedfishError(
                    message=f"{operation_name} failed: {error_info['message']}",
                    error_code=error_info['code'],
                    status_code=status_code
                ) from e

            raise RedfishError(
                message=f"{operation_name} failed: {e}",
                error_code=None,
                status_code=status_code
            ) from e

        self.logger.debug(
            f"{operation_name} on {self.endpoint}: HTTP {response.status_code} in {response_time_ms}ms"
        )
        return _safe_json_parse(response)

    def get(self, path: str, operation_name: str = None) -> Dict[str, Any]:
        return self.make_request('GET', path, operation_name=operation_name)

    def patch(self, path: str, payload: Dict, operation_name: str = None) -> Dict[str, Any]:
        return self.make_request('PATCH', path, payload=payload, operation_name=operation_name)

    def post(self, path: str, payload: Dict, operation_name: str = None) -> Dict[str, Any]:
        return self.make_request('POST', path, payload=payload, operation_name=operation_name)

"""
Session Manager

Provides:
- Per-endpoint requests.Session management
- SSL verification settings per session
- Session cleanup

Does NOT serialize requests; operation-level serialization belongs to
EndpointLockRegistry, which is held for a whole read-modify-write sequence.
"""

import threading
import requests
from typing import Dict


class SessionManager:
    """
    Manages per-endpoint requests.Session objects.

    Sessions are keyed by endpoint and SSL mode so a resource that skips
    verification never shares a connection pool with one that verifies.
    """

    def __init__(self, verify_ssl: bool = False):
        """
        Initialize the session manager.

        Args:
            verify_ssl: Default for sessions created without an explicit setting
        """
        self.sessions: Dict[str, requests.Session] = {}
        self.session_lock = threading.Lock()  # Guards the sessions dict
        self.verify_ssl = verify_ssl

        if not verify_ssl:
            import urllib3
            urllib3.disable_warnings()

    def _cache_key(self, endpoint: str, verify_ssl: bool) -> str:
        return f"{endpoint}:{'verified' if verify_ssl else 'insecure'}"

    def get_session(self, endpoint: str, verify_ssl: bool = None) -> requests.Session:
        """
        Get or create a requests.Session for an endpoint.

        Args:
            endpoint: BMC endpoint URL (e.g. https://10.0.0.5)
            verify_ssl: Override the manager default for this session

        Returns:
            Configured requests.Session object
        """
        if verify_ssl is None:
            verify_ssl = self.verify_ssl
        cache_key = self._cache_key(endpoint, verify_ssl)

        with self.session_lock:
            if cache_key not in self.sessions:
                if not verify_ssl:
                    import urllib3
                    urllib3.disable_warnings()
                session = requests.Session()
                session.verify = verify_ssl
                session.headers.update({'Accept': 'application/json'})
                self.sessions[cache_key] = session

            return self.sessions[cache_key]

    def close_session(self, endpoint: str, verify_ssl: bool = None):
        """
        Close and cleanup session for an endpoint.

        Args:
            endpoint: BMC endpoint URL
            verify_ssl: SSL mode the session was created with
        """
        if verify_ssl is None:
            verify_ssl = self.verify_ssl
        cache_key = self._cache_key(endpoint, verify_ssl)

        with self.session_lock:
            session = self.sessions.pop(cache_key, None)
        if session is not None:
            session.close()

    def close_all_sessions(self):
        """Close all active sessions."""
        with self.session_lock:
            sessions = list(self.sessions.values())
            self.sessions.clear()
        for session in sessions:
            session.close()

"""
Endpoint Lock Registry

Serializes mutating operations against the same BMC endpoint.

Provides:
- One threading.Lock per endpoint key, created lazily and kept for the
  lifetime of the registry
- Thread-safe get-or-create for first-time keys
- Cancellable acquisition via threading.Event

Redfish BMCs frequently reject or corrupt state under concurrent writes, so
every resource that reads then writes remote state holds the endpoint lock
for the whole sequence, including any power cycle needed to apply it.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Optional

from redfish_provider.redfish.errors import OperationCancelledError

# How often a cancellable acquire re-checks its cancel event
CANCEL_CHECK_INTERVAL = 0.5


class EndpointLockRegistry:
    """
    Maps endpoint keys (normally the configured BMC endpoint) to exclusive locks.

    The registry is an explicit object: the provider constructs one and passes
    it to everything that mutates remote state. Entries are never removed; the
    key space is bounded by the number of BMCs addressed by one process.
    """

    def __init__(self):
        self.locks: Dict[str, threading.Lock] = {}  # Per-endpoint locks
        self.lock_lock = threading.Lock()  # Lock for creating per-endpoint locks

    def _get_lock(self, key: str) -> threading.Lock:
        """
        Get or create the lock for an endpoint (thread-safe).

        Args:
            key: Endpoint key

        Returns:
            threading.Lock for this endpoint
        """
        with self.lock_lock:
            if key not in self.locks:
                self.locks[key] = threading.Lock()
            return self.locks[key]

    def acquire(self, key: str, cancel_event: Optional[threading.Event] = None) -> threading.Lock:
        """
        Block until the lock for an endpoint is free and take it.

        There is no timeout. When a cancel_event is given the wait re-checks it
        every CANCEL_CHECK_INTERVAL seconds and gives up once it is set.

        Args:
            key: Endpoint key
            cancel_event: Optional event signalling the operation was cancelled

        Returns:
            The held lock

        Raises:
            OperationCancelledError: If cancel_event is set before the lock is taken
        """
        lock = self._get_lock(key)

        if cancel_event is None:
            lock.acquire()
            return lock

        while not cancel_event.is_set():
            if lock.acquire(timeout=CANCEL_CHECK_INTERVAL):
                return lock

        raise OperationCancelledError(f"Cancelled while waiting for lock on {key}")

    def release(self, key: str):
        """
        Release a lock previously taken with acquire().

        Releasing a lock that is not held raises RuntimeError from
        threading.Lock; callers should use locked() instead of pairing
        acquire/release by hand.
        """
        self.locks[key].release()

    @contextmanager
    def locked(self, key: str, cancel_event: Optional[threading.Event] = None):
        """Hold the endpoint lock for the duration of a with-block."""
        lock = self.acquire(key, cancel_event=cancel_event)
        try:
            yield lock
        finally:
            lock.release()

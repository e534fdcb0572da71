"""Per-client key-value storage for wizard progress and the last quote.

Stands in for the browser's localStorage: values are JSON strings keyed by a
client id (the ``X-Client-Id`` header) and a storage key. There is no TTL and
nothing is cleared automatically; the only bound is the number of distinct
clients held, oldest-used evicted first.
"""

import json
import logging
import threading
from typing import Any

from cachetools import LRUCache

logger = logging.getLogger(__name__)

VEHICLE_SELECTION_KEY = "vehicleSelection"
LAST_QUOTE_KEY = "lastQuote"
WIZARD_STEP_KEY = "vehicleFinderStep"


class ClientStorage:
    """Thread-safe JSON key-value store, one namespace per client."""

    def __init__(self, max_clients: int = 10_000) -> None:
        self._clients: LRUCache[str, dict[str, str]] = LRUCache(maxsize=max_clients)
        self._lock = threading.Lock()

    def get_item(self, client_id: str, key: str) -> Any | None:
        """Return the decoded value, or None when missing or unreadable."""
        with self._lock:
            raw = self._clients.get(client_id, {}).get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding unreadable %s for client %s", key, client_id)
            return None

    def set_item(self, client_id: str, key: str, value: Any) -> None:
        raw = json.dumps(value, default=str)
        with self._lock:
            namespace = self._clients.get(client_id)
            if namespace is None:
                namespace = {}
                self._clients[client_id] = namespace
            namespace[key] = raw
        logger.debug("Client storage set: client=%s key=%s", client_id, key)

    def remove_item(self, client_id: str, key: str) -> None:
        with self._lock:
            namespace = self._clients.get(client_id)
            if namespace is not None:
                namespace.pop(key, None)


class ClientScope:
    """A ClientStorage bound to one client id."""

    def __init__(self, storage: ClientStorage, client_id: str) -> None:
        self.storage = storage
        self.client_id = client_id

    def get(self, key: str) -> Any | None:
        return self.storage.get_item(self.client_id, key)

    def set(self, key: str, value: Any) -> None:
        self.storage.set_item(self.client_id, key, value)

    def remove(self, key: str) -> None:
        self.storage.remove_item(self.client_id, key)


# Singleton
client_storage = ClientStorage()

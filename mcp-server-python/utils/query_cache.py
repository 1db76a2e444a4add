"""
Per-query result cache for backend read models.

Entries are keyed by query identity (a tuple such as
``("admin-license-request", "42", "new")``). Mutations never write into the
cache; after a successful mutation the caller invalidates the affected query
and the next ``fetch`` reloads it from the backend.
"""

import logging
import threading
from collections import Counter
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

logger = logging.getLogger(__name__)

QueryKey = Tuple[Hashable, ...]

DETAIL_QUERY = "admin-license-request"
DASHBOARD_QUERY = "dashboard"
MY_REQUEST_QUERY = "license-request"
FLOW_LOG_QUERY = "flow-logs"
LICENSE_TYPES_QUERY = "license-types"


def detail_query_key(request_id, license_type) -> QueryKey:
    """Query key for one license request's detail read model."""
    type_value = getattr(license_type, "value", license_type)
    return (DETAIL_QUERY, str(request_id), type_value)


def my_request_query_key(request_id) -> QueryKey:
    """Query key for a citizen's view of their own request."""
    return (MY_REQUEST_QUERY, str(request_id))


def flow_log_query_key(request_id) -> QueryKey:
    """Query key for one request's status history."""
    return (FLOW_LOG_QUERY, str(request_id))


def license_types_query_key() -> QueryKey:
    """Query key for the backend's list of license types."""
    return (LICENSE_TYPES_QUERY,)


def dashboard_query_key(panel: str) -> QueryKey:
    """Query key for one dashboard panel."""
    return (DASHBOARD_QUERY, panel)


class QueryCache:
    """In-memory cache of query results with explicit invalidation."""

    def __init__(self):
        self._entries: Dict[QueryKey, Any] = {}
        self._load_counts: Counter = Counter()
        self._invalidation_counts: Counter = Counter()
        self._lock = threading.Lock()

    def fetch(self, key: QueryKey, loader: Callable[[], Any]) -> Any:
        """
        Return the cached value for ``key``, loading it on a miss.

        Exceptions raised by ``loader`` propagate and nothing is cached.
        """
        with self._lock:
            if key in self._entries:
                return self._entries[key]

        value = loader()

        with self._lock:
            self._entries[key] = value
            self._load_counts[key] += 1
        logger.debug(f"Loaded query {key}")
        return value

    def peek(self, key: QueryKey, default: Optional[Any] = None) -> Any:
        """Return the cached value without loading."""
        with self._lock:
            return self._entries.get(key, default)

    def invalidate(self, key: QueryKey) -> bool:
        """
        Drop the cached value for ``key``.

        Returns:
            True if an entry was dropped
        """
        with self._lock:
            self._invalidation_counts[key] += 1
            dropped = key in self._entries
            self._entries.pop(key, None)
        logger.debug(f"Invalidated query {key}")
        return dropped

    def invalidate_prefix(self, prefix: QueryKey) -> int:
        """Invalidate every key starting with ``prefix``; returns the number dropped."""
        with self._lock:
            keys = [key for key in self._entries if key[: len(prefix)] == prefix]
        for key in keys:
            self.invalidate(key)
        return len(keys)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def load_count(self, key: QueryKey) -> int:
        """Number of times ``key`` was loaded from the backend."""
        with self._lock:
            return self._load_counts[key]

    def invalidation_count(self, key: QueryKey) -> int:
        """Number of times ``key`` was invalidated."""
        with self._lock:
            return self._invalidation_counts[key]

"""
Realtime Database Abstract Base Class

Defines the interface contract for the realtime record tree. Both the
in-memory implementation (development) and the SQL implementation
(staging/production) expose the same handful of operations the pages use:

    push(collection, value)  -> generated key
    set(path, value)         -> overwrite a record or a single field
    remove(path)             -> delete a record or a single field
    get(collection)          -> full collection snapshot value
    listen(collection)       -> stream of full snapshots

Paths are '/'-separated: "orders", "orders/{key}", "orders/{key}/status".

Author: Spice Heritage Engineering
Version: 1.0.0
"""

import random
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, AsyncIterator, Optional


PUSH_CHARS = "-0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ_abcdefghijklmnopqrstuvwxyz"


class RealtimeDatabaseError(Exception):
    """Raised when the backing store rejects or fails an operation."""


@dataclass(frozen=True)
class TreePath:
    """A parsed tree path: collection, optional key, optional field."""
    collection: str
    key: Optional[str] = None
    field: Optional[str] = None

    def __str__(self) -> str:
        return "/".join(p for p in (self.collection, self.key, self.field) if p)


def parse_path(path: str) -> TreePath:
    """
    Split a tree path into its parts.

    Raises:
        ValueError: empty segments or more than three levels
    """
    segments = path.strip("/").split("/")
    if not segments or any(not s for s in segments):
        raise ValueError(f"Invalid tree path: {path!r}")
    if len(segments) > 3:
        raise ValueError(f"Tree path too deep (max collection/key/field): {path!r}")
    return TreePath(*segments)


class PushIdGenerator:
    """
    Chronological 20-character keys.

    The first 8 characters encode the millisecond timestamp, the last 12 are
    random. Keys generated within the same millisecond increment the random
    part so they still sort in creation order.
    """

    def __init__(self):
        self._last_ms = 0
        self._last_rand = [0] * 12
        self._lock = threading.Lock()

    def __call__(self, now_ms: Optional[int] = None) -> str:
        with self._lock:
            now = int(time.time() * 1000) if now_ms is None else now_ms
            duplicate = now == self._last_ms
            self._last_ms = now

            ts_chars = []
            for _ in range(8):
                ts_chars.append(PUSH_CHARS[now % 64])
                now //= 64
            key = "".join(reversed(ts_chars))

            if not duplicate:
                self._last_rand = [random.randrange(64) for _ in range(12)]
            else:
                i = 11
                while i >= 0 and self._last_rand[i] == 63:
                    self._last_rand[i] = 0
                    i -= 1
                if i >= 0:
                    self._last_rand[i] += 1

            return key + "".join(PUSH_CHARS[n] for n in self._last_rand)


generate_push_id = PushIdGenerator()


@dataclass
class Snapshot:
    """
    Full point-in-time copy of one collection.

    Attributes:
        collection: Collection name the snapshot belongs to
        value: {key: record} in key order, or None when the collection is empty
    """
    collection: str
    value: Optional[dict[str, dict[str, Any]]]

    def exists(self) -> bool:
        return bool(self.value)

    def records(self) -> list[dict[str, Any]]:
        """Decode to a list of records with their key under `id`."""
        if not self.value:
            return []
        return [{**record, "id": key} for key, record in self.value.items()]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"collection": self.collection, "records": self.records()}


class BaseRealtimeDatabase(ABC):
    """
    Abstract base class for realtime tree backends.

    Example:
        >>> db = get_realtime_db()
        >>> key = await db.push("inquiries", {"name": "Alice", "status": "unread"})
        >>> await db.set(f"inquiries/{key}/status", "read")
        >>> async for snapshot in db.listen("inquiries"):
        ...     print(snapshot.records())
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the backend name (e.g. "memory", "sql")."""
        pass

    @abstractmethod
    async def push(self, collection: str, value: dict[str, Any]) -> str:
        """Append a record under a new generated key and return the key."""
        pass

    @abstractmethod
    async def set(self, path: str, value: Any) -> None:
        """
        Overwrite the node at `path`.

        `collection/key` replaces the whole record, `collection/key/field`
        replaces one field (creating the record if it does not exist).
        """
        pass

    @abstractmethod
    async def remove(self, path: str) -> None:
        """Delete the node at `path`. Removing a missing node is a no-op."""
        pass

    @abstractmethod
    async def get(self, collection: str) -> Optional[dict[str, dict[str, Any]]]:
        """Return the full collection as {key: record}, or None when empty."""
        pass

    @abstractmethod
    def listen(self, collection: str) -> AsyncIterator[Snapshot]:
        """
        Subscribe to a collection.

        Yields the current snapshot immediately, then a full snapshot after
        every change. Closing the iterator unsubscribes.
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Verify connectivity to the backend."""
        pass

    async def close(self) -> None:
        """Release connections held by the backend."""
        return None

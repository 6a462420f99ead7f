"""
In-Memory Realtime Database

Process-local implementation of the realtime tree used in development mode
(ENV_MODE=development) and in tests:
    - Runs the site with no database or Redis
    - Delivers full snapshots to listeners through asyncio queues
    - Optionally simulates backend failures to exercise error toasts

Author: Spice Heritage Engineering
Version: 1.0.0
"""

import asyncio
import copy
import logging
import random
from collections import defaultdict
from typing import Any, AsyncIterator, Optional

from app.services.realtime.base import (
    BaseRealtimeDatabase,
    RealtimeDatabaseError,
    Snapshot,
    generate_push_id,
    parse_path,
)

logger = logging.getLogger(__name__)


class MockRealtimeDatabase(BaseRealtimeDatabase):
    """
    In-memory realtime tree.

    Attributes:
        failure_rate: Probability that a write raises RealtimeDatabaseError
        latency: Seconds to sleep before each operation

    Example:
        >>> db = MockRealtimeDatabase()
        >>> key = await db.push("menu", {"name": "Garlic Naan"})
        >>> (await db.get("menu"))[key]["name"]
        'Garlic Naan'
    """

    def __init__(self, failure_rate: float = 0.0, latency: float = 0.0):
        self.failure_rate = failure_rate
        self.latency = latency
        self._tree: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)
        self._listeners: dict[str, set[asyncio.Queue]] = defaultdict(set)

        logger.info(
            f"MockRealtimeDatabase initialized "
            f"(failure_rate={failure_rate:.0%}, latency={latency}s)"
        )

    @property
    def provider_name(self) -> str:
        return "memory"

    async def _simulate(self) -> None:
        if self.latency:
            await asyncio.sleep(self.latency)
        if random.random() < self.failure_rate:
            raise RealtimeDatabaseError("Simulated backend failure")

    def _snapshot(self, collection: str) -> Snapshot:
        nodes = self._tree.get(collection)
        return Snapshot(collection=collection, value=copy.deepcopy(nodes) if nodes else None)

    def _notify(self, collection: str) -> None:
        listeners = self._listeners.get(collection)
        if not listeners:
            return
        for queue in listeners:
            queue.put_nowait(self._snapshot(collection))
        logger.debug(f"Notified {len(listeners)} listener(s) on '{collection}'")

    async def push(self, collection: str, value: dict[str, Any]) -> str:
        path = parse_path(collection)
        if path.key:
            raise ValueError(f"push() expects a collection path, got {collection!r}")
        await self._simulate()

        key = generate_push_id()
        self._tree[path.collection][key] = copy.deepcopy(value)
        logger.info(f"Pushed {path.collection}/{key}")
        self._notify(path.collection)
        return key

    async def set(self, path: str, value: Any) -> None:
        tree_path = parse_path(path)
        if not tree_path.key:
            raise ValueError(f"set() needs at least collection/key, got {path!r}")
        await self._simulate()

        nodes = self._tree[tree_path.collection]
        if tree_path.field:
            nodes.setdefault(tree_path.key, {})[tree_path.field] = copy.deepcopy(value)
        else:
            if not isinstance(value, dict):
                raise ValueError("A record must be a JSON object")
            nodes[tree_path.key] = copy.deepcopy(value)

        logger.info(f"Set {tree_path}")
        self._notify(tree_path.collection)

    async def remove(self, path: str) -> None:
        tree_path = parse_path(path)
        await self._simulate()

        nodes = self._tree.get(tree_path.collection)
        if nodes is None:
            return
        if tree_path.key is None:
            self._tree.pop(tree_path.collection, None)
        elif tree_path.field is None:
            if nodes.pop(tree_path.key, None) is None:
                return
        else:
            record = nodes.get(tree_path.key)
            if record is None or record.pop(tree_path.field, None) is None:
                return
            if not record:
                nodes.pop(tree_path.key)

        logger.info(f"Removed {tree_path}")
        self._notify(tree_path.collection)

    async def get(self, collection: str) -> Optional[dict[str, dict[str, Any]]]:
        await self._simulate()
        return self._snapshot(parse_path(collection).collection).value

    async def listen(self, collection: str) -> AsyncIterator[Snapshot]:
        name = parse_path(collection).collection
        queue: asyncio.Queue = asyncio.Queue()
        self._listeners[name].add(queue)
        logger.debug(f"Listener attached to '{name}'")
        try:
            yield self._snapshot(name)
            while True:
                yield await queue.get()
        finally:
            self._listeners[name].discard(queue)
            logger.debug(f"Listener detached from '{name}'")

    def listener_count(self, collection: str) -> int:
        return len(self._listeners.get(collection, ()))

    async def health_check(self) -> bool:
        """Mock always returns healthy."""
        return True

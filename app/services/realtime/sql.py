"""
SQL Realtime Database Implementation

Production implementation of the realtime tree:
    - Records persisted in Postgres through the SQLAlchemy async engine
      (one `realtime_records` row per collection/key)
    - Change notifications fanned out over Redis pub/sub, one channel per
      collection, so every worker process pushes fresh snapshots to its
      own listeners

Used when ENV_MODE=production or ENV_MODE=staging.

Requirements:
    - DATABASE_URL pointing at a reachable Postgres
    - REDIS_URL pointing at a reachable Redis

Author: Spice Heritage Engineering
Version: 1.0.0
"""

import logging
from typing import Any, AsyncIterator, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError
from sqlalchemy import delete, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import get_settings
from app.database import get_sessionmaker
from app.models import RealtimeRecord
from app.services.realtime.base import (
    BaseRealtimeDatabase,
    RealtimeDatabaseError,
    Snapshot,
    generate_push_id,
    parse_path,
)

logger = logging.getLogger(__name__)


class SqlRealtimeDatabase(BaseRealtimeDatabase):
    """
    Postgres + Redis realtime tree.

    Writes are single-statement transactions with no conflict detection:
    concurrent writers to the same record simply overwrite each other.

    Example:
        >>> db = SqlRealtimeDatabase()
        >>> key = await db.push("orders", {"customerName": "Asha", "status": "pending"})
        >>> await db.set(f"orders/{key}/status", "confirmed")
    """

    def __init__(
        self,
        redis_client: Optional[aioredis.Redis] = None,
        sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None,
    ):
        settings = get_settings()

        self._sessionmaker = sessionmaker or get_sessionmaker()
        self._redis = redis_client or aioredis.from_url(settings.redis_url)
        self._channel_prefix = settings.realtime_channel_prefix

        logger.info(
            f"SqlRealtimeDatabase initialized "
            f"(channels={self._channel_prefix}:<collection>)"
        )

    @property
    def provider_name(self) -> str:
        return "sql"

    def _channel(self, collection: str) -> str:
        return f"{self._channel_prefix}:{collection}"

    async def _publish(self, collection: str, key: str) -> None:
        try:
            await self._redis.publish(self._channel(collection), key)
        except RedisError as e:
            # Write already committed; listeners just miss this update
            logger.error(f"Change notification for {collection}/{key} failed: {e}")

    async def _load_row(self, session, collection: str, key: str) -> Optional[RealtimeRecord]:
        result = await session.execute(
            select(RealtimeRecord).where(
                RealtimeRecord.collection == collection,
                RealtimeRecord.key == key,
            )
        )
        return result.scalar_one_or_none()

    async def push(self, collection: str, value: dict[str, Any]) -> str:
        path = parse_path(collection)
        if path.key:
            raise ValueError(f"push() expects a collection path, got {collection!r}")

        key = generate_push_id()
        try:
            async with self._sessionmaker() as session:
                session.add(RealtimeRecord(collection=path.collection, key=key, data=dict(value)))
                await session.commit()
        except SQLAlchemyError as e:
            logger.exception(f"Push to '{path.collection}' failed")
            raise RealtimeDatabaseError(str(e)) from e

        logger.info(f"Pushed {path.collection}/{key}")
        await self._publish(path.collection, key)
        return key

    async def set(self, path: str, value: Any) -> None:
        tree_path = parse_path(path)
        if not tree_path.key:
            raise ValueError(f"set() needs at least collection/key, got {path!r}")
        if tree_path.field is None and not isinstance(value, dict):
            raise ValueError("A record must be a JSON object")

        try:
            async with self._sessionmaker() as session:
                row = await self._load_row(session, tree_path.collection, tree_path.key)
                if tree_path.field:
                    data = dict(row.data) if row else {}
                    data[tree_path.field] = value
                else:
                    data = dict(value)

                if row is None:
                    session.add(RealtimeRecord(
                        collection=tree_path.collection, key=tree_path.key, data=data,
                    ))
                else:
                    # Reassign so the JSON column is flagged dirty
                    row.data = data
                await session.commit()
        except SQLAlchemyError as e:
            logger.exception(f"Set {tree_path} failed")
            raise RealtimeDatabaseError(str(e)) from e

        logger.info(f"Set {tree_path}")
        await self._publish(tree_path.collection, tree_path.key)

    async def remove(self, path: str) -> None:
        tree_path = parse_path(path)

        try:
            async with self._sessionmaker() as session:
                if tree_path.key is None:
                    await session.execute(
                        delete(RealtimeRecord).where(RealtimeRecord.collection == tree_path.collection)
                    )
                elif tree_path.field is None:
                    await session.execute(
                        delete(RealtimeRecord).where(
                            RealtimeRecord.collection == tree_path.collection,
                            RealtimeRecord.key == tree_path.key,
                        )
                    )
                else:
                    row = await self._load_row(session, tree_path.collection, tree_path.key)
                    if row is None or tree_path.field not in row.data:
                        return
                    data = dict(row.data)
                    data.pop(tree_path.field)
                    if data:
                        row.data = data
                    else:
                        await session.delete(row)
                await session.commit()
        except SQLAlchemyError as e:
            logger.exception(f"Remove {tree_path} failed")
            raise RealtimeDatabaseError(str(e)) from e

        logger.info(f"Removed {tree_path}")
        await self._publish(tree_path.collection, tree_path.key or "*")

    async def get(self, collection: str) -> Optional[dict[str, dict[str, Any]]]:
        name = parse_path(collection).collection
        try:
            async with self._sessionmaker() as session:
                result = await session.execute(
                    select(RealtimeRecord.key, RealtimeRecord.data)
                    .where(RealtimeRecord.collection == name)
                )
                rows = result.all()
        except SQLAlchemyError as e:
            logger.exception(f"Read of '{name}' failed")
            raise RealtimeDatabaseError(str(e)) from e

        if not rows:
            return None
        # Push IDs sort chronologically by code point, independent of DB collation
        return {key: data for key, data in sorted(rows, key=lambda row: row[0])}

    async def listen(self, collection: str) -> AsyncIterator[Snapshot]:
        name = parse_path(collection).collection
        pubsub = self._redis.pubsub()
        # Subscribe before the first read so no change slips in between
        await pubsub.subscribe(self._channel(name))
        logger.debug(f"Listener attached to '{name}'")
        try:
            yield Snapshot(collection=name, value=await self.get(name))
            async for message in pubsub.listen():
                if message.get("type") != "message":
                    continue
                yield Snapshot(collection=name, value=await self.get(name))
        finally:
            await pubsub.unsubscribe(self._channel(name))
            await pubsub.aclose()
            logger.debug(f"Listener detached from '{name}'")

    async def health_check(self) -> bool:
        """Check both Postgres and Redis."""
        try:
            async with self._sessionmaker() as session:
                await session.execute(text("SELECT 1"))
            await self._redis.ping()
            return True
        except (SQLAlchemyError, RedisError, OSError) as e:
            logger.error(f"Realtime database health check failed: {e}")
            return False

    async def close(self) -> None:
        await self._redis.aclose()

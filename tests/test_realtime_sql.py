import asyncio

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.database import Base
from app.services.realtime import SqlRealtimeDatabase


class FakePubSub:
    def __init__(self, redis):
        self.redis = redis
        self.queue = asyncio.Queue()
        self.channels = set()
        self.closed = False

    async def subscribe(self, channel):
        self.channels.add(channel)
        self.redis.subscribers.append(self)
        await self.queue.put({"type": "subscribe", "channel": channel, "data": 1})

    async def unsubscribe(self, channel):
        self.channels.discard(channel)
        self.redis.subscribers.remove(self)

    async def listen(self):
        while True:
            yield await self.queue.get()

    async def aclose(self):
        self.closed = True


class FakeRedis:
    def __init__(self):
        self.published = []
        self.subscribers = []

    async def publish(self, channel, message):
        self.published.append((channel, message))
        for pubsub in self.subscribers:
            if channel in pubsub.channels:
                await pubsub.queue.put({"type": "message", "channel": channel, "data": message})

    def pubsub(self):
        return FakePubSub(self)

    async def ping(self):
        return True

    async def aclose(self):
        pass


@pytest.fixture()
def redis():
    return FakeRedis()


@pytest.fixture()
def run_tree(tmp_path, redis):
    """Run a coroutine against a fresh SQLite-backed tree."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'tree.db'}"

    def run(scenario):
        async def main():
            engine = create_async_engine(url)
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            sessionmaker = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
            try:
                return await scenario(SqlRealtimeDatabase(redis_client=redis, sessionmaker=sessionmaker))
            finally:
                await engine.dispose()

        return asyncio.run(main())

    return run


def test_push_stores_record_and_publishes(run_tree, redis):
    async def scenario(db):
        key = await db.push("orders", {"customerName": "Asha", "status": "pending"})
        return key, await db.get("orders")

    key, value = run_tree(scenario)
    assert value == {key: {"customerName": "Asha", "status": "pending"}}
    assert redis.published == [("realtime:orders", key)]


def test_set_field_and_whole_record(run_tree, redis):
    async def scenario(db):
        key = await db.push("reservations", {"name": "Ravi", "status": "pending"})
        await db.set(f"reservations/{key}/status", "confirmed")
        after_field = (await db.get("reservations"))[key]
        await db.set(f"reservations/{key}", {"name": "Ravi Kumar", "guests": 4})
        after_record = (await db.get("reservations"))[key]
        return key, after_field, after_record

    key, after_field, after_record = run_tree(scenario)
    assert after_field == {"name": "Ravi", "status": "confirmed"}
    assert after_record == {"name": "Ravi Kumar", "guests": 4}
    assert redis.published == [("realtime:reservations", key)] * 3


def test_set_field_creates_missing_record(run_tree):
    async def scenario(db):
        await db.set("menu/dish1/isAvailable", False)
        return await db.get("menu")

    assert run_tree(scenario) == {"dish1": {"isAvailable": False}}


def test_set_rejects_non_object_record(run_tree):
    async def scenario(db):
        with pytest.raises(ValueError):
            await db.set("menu/dish1", "not a record")
        return await db.get("menu")

    assert run_tree(scenario) is None


def test_remove_field_then_record(run_tree, redis):
    async def scenario(db):
        key = await db.push("inquiries", {"name": "Alice", "status": "unread"})
        await db.remove(f"inquiries/{key}/status")
        after_field = await db.get("inquiries")
        await db.remove(f"inquiries/{key}")
        return key, after_field, await db.get("inquiries")

    key, after_field, after_record = run_tree(scenario)
    assert after_field == {key: {"name": "Alice"}}
    assert after_record is None
    assert [channel for channel, _ in redis.published] == ["realtime:inquiries"] * 3


def test_removing_last_field_drops_record(run_tree):
    async def scenario(db):
        await db.set("gallery/img1", {"url": "/media/gallery/1_a.png"})
        await db.remove("gallery/img1/url")
        return await db.get("gallery")

    assert run_tree(scenario) is None


def test_remove_missing_field_is_a_noop(run_tree, redis):
    async def scenario(db):
        await db.set("menu/dish1", {"name": "Dal Makhani"})
        await db.remove("menu/dish1/image")
        return await db.get("menu")

    assert run_tree(scenario) == {"dish1": {"name": "Dal Makhani"}}
    assert len(redis.published) == 1


def test_get_orders_by_key(run_tree):
    async def scenario(db):
        await db.set("orders/-Nb", {"n": 2})
        await db.set("orders/-Na", {"n": 1})
        await db.set("orders/-NZ", {"n": 0})
        first = await db.push("orders", {"n": 3})
        second = await db.push("orders", {"n": 4})
        return first, second, await db.get("orders")

    first, second, value = run_tree(scenario)
    assert list(value) == ["-NZ", "-Na", "-Nb", first, second]


def test_collections_are_separate(run_tree):
    async def scenario(db):
        await db.push("orders", {"n": 1})
        return await db.get("menu")

    assert run_tree(scenario) is None


def test_listen_emits_snapshot_after_each_change(run_tree, redis):
    async def scenario(db):
        stream = db.listen("orders")
        initial = await stream.__anext__()
        key = await db.push("orders", {"status": "pending"})
        after_push = await stream.__anext__()
        await db.set(f"orders/{key}/status", "ready")
        after_set = await stream.__anext__()
        pubsub = redis.subscribers[0]
        await stream.aclose()
        return key, initial, after_push, after_set, pubsub

    key, initial, after_push, after_set, pubsub = run_tree(scenario)
    assert initial.collection == "orders"
    assert initial.value is None
    assert after_push.value == {key: {"status": "pending"}}
    assert after_set.value == {key: {"status": "ready"}}
    assert pubsub.closed
    assert redis.subscribers == []


def test_listener_ignores_other_collections(run_tree, redis):
    async def scenario(db):
        stream = db.listen("menu")
        await stream.__anext__()
        await db.push("orders", {"n": 1})
        await db.set("menu/dish1", {"name": "Garlic Naan"})
        snapshot = await stream.__anext__()
        await stream.aclose()
        return snapshot

    assert run_tree(scenario).value == {"dish1": {"name": "Garlic Naan"}}


def test_health_check(run_tree):
    async def scenario(db):
        return await db.health_check()

    assert run_tree(scenario) is True

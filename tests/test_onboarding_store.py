"""
Tests for onboarding session storage backends.
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from app.models.auth import UserRole
from app.models.onboarding import OnboardingSession
from app.services.onboarding_store import (
    InMemoryOnboardingStore, OnboardingStore, RedisOnboardingStore, build_onboarding_store,
)


@pytest.fixture
def session() -> OnboardingSession:
    return OnboardingSession(email="new@x.com", name="New User", role=UserRole.CLIPPER)


class TestInMemoryOnboardingStore:

    @pytest.mark.asyncio
    async def test_put_get_delete(self, session):
        store = InMemoryOnboardingStore(ttl_seconds=60)

        await store.put("tok", session)
        stored = await store.get("tok")

        assert stored.email == "new@x.com"
        assert stored.expires_at is not None
        assert len(store) == 1

        await store.delete("tok")
        assert await store.get("tok") is None
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_expired_session_is_dropped_on_read(self, session):
        store = InMemoryOnboardingStore(ttl_seconds=60)
        past = datetime.now(timezone.utc) - timedelta(seconds=1)

        await store.put("tok", session.model_copy(update={"expires_at": past}))

        assert await store.get("tok") is None
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_abandoned_sessions_are_evicted_without_being_read(self, session):
        store = InMemoryOnboardingStore(ttl_seconds=3600)
        past = datetime.now(timezone.utc) - timedelta(seconds=1)
        for i in range(1000):
            await store.put(f"abandoned-{i}", session.model_copy(update={"expires_at": past}))

        await store.put("fresh", session)

        assert len(store) == 1
        assert (await store.get("fresh")).email == "new@x.com"

    @pytest.mark.asyncio
    async def test_zero_ttl_store_does_not_grow(self, session):
        store = InMemoryOnboardingStore(ttl_seconds=0)
        for i in range(1000):
            await store.put(f"tok-{i}", session)

        assert store.purge_expired() <= 1
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_delete_unknown_token_is_a_no_op(self):
        store = InMemoryOnboardingStore()

        await store.delete("missing")

        assert len(store) == 0


class TestRedisOnboardingStore:

    @pytest.fixture
    def redis_client(self) -> AsyncMock:
        return AsyncMock()

    @pytest.mark.asyncio
    async def test_put_writes_json_with_ttl(self, redis_client, session):
        store = RedisOnboardingStore(client=redis_client, ttl_seconds=900)

        await store.put("tok", session)

        key, ttl, payload = redis_client.setex.await_args.args
        assert key == "onboarding:tok"
        assert ttl == 900
        assert OnboardingSession.model_validate_json(payload).email == "new@x.com"

    @pytest.mark.asyncio
    async def test_get_parses_stored_json(self, redis_client, session):
        redis_client.get.return_value = session.model_dump_json()
        store = RedisOnboardingStore(client=redis_client)

        stored = await store.get("tok")

        redis_client.get.assert_awaited_once_with("onboarding:tok")
        assert stored.role == UserRole.CLIPPER

    @pytest.mark.asyncio
    async def test_get_missing_key(self, redis_client):
        redis_client.get.return_value = None
        store = RedisOnboardingStore(client=redis_client)

        assert await store.get("tok") is None

    @pytest.mark.asyncio
    async def test_delete(self, redis_client):
        store = RedisOnboardingStore(client=redis_client)

        await store.delete("tok")

        redis_client.delete.assert_awaited_once_with("onboarding:tok")


class TestOnboardingStoreInterface:

    def test_backend_missing_a_method_cannot_be_instantiated(self):
        class WriteOnlyStore(OnboardingStore):
            async def put(self, token, session):
                pass

        with pytest.raises(TypeError):
            WriteOnlyStore()


class TestBuildOnboardingStore:

    def test_memory_backend(self):
        assert isinstance(build_onboarding_store("memory"), InMemoryOnboardingStore)

    def test_redis_backend(self):
        assert isinstance(build_onboarding_store("redis"), RedisOnboardingStore)

    def test_unknown_backend_falls_back_to_memory(self):
        assert isinstance(build_onboarding_store("dynamo"), InMemoryOnboardingStore)

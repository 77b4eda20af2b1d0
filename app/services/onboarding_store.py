"""
Onboarding session storage, keyed by an opaque onboarding token.

The in-memory store is process local and only works for a single instance;
the Redis store is shared, so any instance can complete an onboarding that
another one started.
"""
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone, timedelta
from typing import Dict, Optional

import redis.asyncio as redis

from app.core.config import settings
from app.models.onboarding import OnboardingSession

logger = logging.getLogger(__name__)


class OnboardingStore(ABC):
    """Interface for onboarding session storage"""

    def __init__(self, ttl_seconds: Optional[int] = None):
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.ONBOARDING_TOKEN_TTL_SECONDS

    def expiry(self) -> datetime:
        return datetime.now(timezone.utc) + timedelta(seconds=self.ttl_seconds)

    @abstractmethod
    async def put(self, token: str, session: OnboardingSession) -> None:
        ...

    @abstractmethod
    async def get(self, token: str) -> Optional[OnboardingSession]:
        ...

    @abstractmethod
    async def delete(self, token: str) -> None:
        ...


class InMemoryOnboardingStore(OnboardingStore):
    """Expiring dict; expired entries are swept on every write and dropped on read"""

    def __init__(self, ttl_seconds: Optional[int] = None):
        super().__init__(ttl_seconds)
        self._sessions: Dict[str, OnboardingSession] = {}

    @staticmethod
    def _expired(session: OnboardingSession, now: datetime) -> bool:
        return session.expires_at is not None and session.expires_at <= now

    def purge_expired(self) -> int:
        now = datetime.now(timezone.utc)
        expired = [token for token, session in self._sessions.items() if self._expired(session, now)]
        for token in expired:
            del self._sessions[token]
        if expired:
            logger.debug(f"Evicted {len(expired)} expired onboarding session(s)")
        return len(expired)

    async def put(self, token: str, session: OnboardingSession) -> None:
        if session.expires_at is None:
            session = session.model_copy(update={"expires_at": self.expiry()})
        self.purge_expired()
        self._sessions[token] = session

    async def get(self, token: str) -> Optional[OnboardingSession]:
        session = self._sessions.get(token)
        if session is None:
            return None
        if self._expired(session, datetime.now(timezone.utc)):
            self._sessions.pop(token, None)
            return None
        return session

    async def delete(self, token: str) -> None:
        self._sessions.pop(token, None)

    def __len__(self) -> int:
        return len(self._sessions)


class RedisOnboardingStore(OnboardingStore):
    """Sessions as JSON under ``onboarding:<token>`` with a Redis TTL"""

    key_prefix = "onboarding:"

    def __init__(self, client: Optional[redis.Redis] = None, redis_url: Optional[str] = None,
                 ttl_seconds: Optional[int] = None):
        super().__init__(ttl_seconds)
        self.redis_client = client or redis.from_url(redis_url or settings.REDIS_URL, decode_responses=True)

    def _key(self, token: str) -> str:
        return f"{self.key_prefix}{token}"

    async def put(self, token: str, session: OnboardingSession) -> None:
        if session.expires_at is None:
            session = session.model_copy(update={"expires_at": self.expiry()})
        await self.redis_client.setex(self._key(token), self.ttl_seconds, session.model_dump_json())

    async def get(self, token: str) -> Optional[OnboardingSession]:
        raw = await self.redis_client.get(self._key(token))
        if not raw:
            return None
        return OnboardingSession.model_validate_json(raw)

    async def delete(self, token: str) -> None:
        await self.redis_client.delete(self._key(token))


def build_onboarding_store(backend: Optional[str] = None) -> OnboardingStore:
    backend = (backend or settings.ONBOARDING_STORE_BACKEND).lower()
    if backend == "redis":
        logger.info(f"Onboarding sessions stored in Redis at {settings.REDIS_URL}")
        return RedisOnboardingStore()
    if backend != "memory":
        logger.warning(f"WARNING: Unknown onboarding store backend '{backend}', using memory")
    return InMemoryOnboardingStore()

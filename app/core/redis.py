import redis.asyncio as redis
from app.core.config import settings

class TokenSessionStore:
    """Live bearer-token sessions, keyed by the raw token."""

    def __init__(self, url: str = settings.REDIS_URL):
        self.redis = redis.from_url(url, encoding="utf-8", decode_responses=True)

    @staticmethod
    def _key(token: str) -> str:
        return f"session:{token}"

    async def lookup(self, token: str) -> str | None:
        return await self.redis.get(self._key(token))

    async def close(self):
        await self.redis.aclose()

session_store = TokenSessionStore()

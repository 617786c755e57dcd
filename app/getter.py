"""
app/getter.py — Cache-aside orchestration of retrieval, caching and limiting.

Decision flow for get_advices_for(topic):
  1. Cache hit  → return the cached list as is.
  2. Cache miss → retrieve from upstream, store, return what was stored.

Concurrent misses on one topic are not coalesced: each one calls the
upstream and writes the cache, the last write wins.
"""
import logging
from typing import Protocol

from app.cache import AdviceCache
from app.limiter import AdviceLimiter
from app.retrieval import AdviceRetriever

logger = logging.getLogger(__name__)


class AdviceGetter(Protocol):
    async def get_advices_limited_for(self, topic: str, amount: int) -> list[str]: ...

    async def get_advices_for(self, topic: str) -> list[str]: ...


class CachedAdviceGetter:
    def __init__(self, cache: AdviceCache, retriever: AdviceRetriever, limiter: AdviceLimiter):
        self._cache = cache
        self._retriever = retriever
        self._limiter = limiter

    async def get_advices_limited_for(self, topic: str, amount: int) -> list[str]:
        advices = await self.get_advices_for(topic)
        return self._limiter.limit_slice_to(advices, amount)

    async def get_advices_for(self, topic: str) -> list[str]:
        try:
            cached = self._cache.get(topic)
        except Exception as exc:
            logger.debug("Cache read for %r treated as miss: %s", topic, exc)
            cached = None
        if cached is not None:
            logger.debug("Cache hit for %r (%d advices)", topic, len(cached))
            return cached

        logger.debug("Cache miss for %r", topic)
        advices = await self._retriever.retrieve_for_topic(topic)
        return self._cache.put(topic, advices)

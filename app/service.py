"""
app/service.py — The GiveMeAdvice RPC method and the wiring behind it.
"""
import logging

import httpx

from app.cache import InMemoryAdviceCache, TTLStore
from app.config import settings
from app.errors import InvalidArgumentError
from app.getter import AdviceGetter, CachedAdviceGetter
from app.limiter import SimpleAdviceLimiter
from app.retrieval import SimpleAdviceMapping, SimpleAdviceRetriever
from app.schemas import AdviceArgs, AdviceReply
from app.upstream import RESTAdviceQuery

logger = logging.getLogger(__name__)


class AdviceService:
    def __init__(self, getter: AdviceGetter):
        self._getter = getter

    async def give_me_advice(self, args: AdviceArgs) -> AdviceReply:
        """
        amount absent  → every advice for the topic
        amount >= 0    → at most `amount` advices
        amount < 0     → InvalidArgumentError, nothing else is touched
        """
        if args.amount is None:
            advices = await self._getter.get_advices_for(args.topic)
        elif args.amount >= 0:
            advices = await self._getter.get_advices_limited_for(args.topic, args.amount)
        else:
            raise InvalidArgumentError("Cannot accept an amount that is less than 0")

        return AdviceReply(advice_list=advices)


def build_service(client: httpx.AsyncClient, store: TTLStore) -> AdviceService:
    """Assemble the production object graph around a shared client and store."""
    query = RESTAdviceQuery(client, settings.upstream_base_url)
    retriever = SimpleAdviceRetriever(query, SimpleAdviceMapping())
    cache = InMemoryAdviceCache(store, settings.cache_ttl_seconds)
    getter = CachedAdviceGetter(cache, retriever, SimpleAdviceLimiter())
    logger.info(
        "Advice service ready (upstream=%s, ttl=%ss).",
        settings.upstream_base_url, settings.cache_ttl_seconds,
    )
    return AdviceService(getter)

"""
app/retrieval.py — Turns an upstream search into a flat list of advice text.

"Nothing found for this topic" is a normal outcome here: it is logged and
returned as an empty list so the caller can cache it like any other result.
"""
import logging
from typing import Protocol

from app.schemas import QueryResult, SlipError
from app.upstream import AdviceQuery

logger = logging.getLogger(__name__)


class AdviceMapping(Protocol):
    def map(self, result: QueryResult) -> list[str]: ...


class SimpleAdviceMapping:
    def map(self, result: QueryResult) -> list[str]:
        return [slip.advice for slip in result.slips]


class AdviceRetriever(Protocol):
    async def retrieve_for_topic(self, topic: str) -> list[str]: ...


class SimpleAdviceRetriever:
    def __init__(self, query: AdviceQuery, mapping: AdviceMapping):
        self._query = query
        self._mapping = mapping

    async def retrieve_for_topic(self, topic: str) -> list[str]:
        """
        Return every advice text the upstream holds for `topic`.
        UpstreamError from the query propagates unchanged.
        """
        outcome = await self._query.get_by_topic(topic)

        if isinstance(outcome, SlipError):
            logger.warning("Unable to find anything for %r (%s)", topic, outcome.message.text)
            return []

        return self._mapping.map(outcome)

"""
app/upstream.py — HTTP query against the Advice Slip search endpoint.

The upstream answers both outcomes with a JSON object and does not signal
"not found" through the status code, so the body alone decides:

  1. Parse the body as JSON.
  2. Error shape with a non-empty message.text  → SlipError.
  3. Otherwise validate as the success shape    → QueryResult.
  4. Anything else                              → UpstreamError.
"""
import json
import logging
from typing import Protocol, Union
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from app.errors import UpstreamError
from app.schemas import QueryResult, SlipError

logger = logging.getLogger(__name__)

_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}

QueryOutcome = Union[QueryResult, SlipError]


class AdviceQuery(Protocol):
    async def get_by_topic(self, topic: str) -> QueryOutcome: ...


class RESTAdviceQuery:
    """Issues one GET per call through a shared httpx.AsyncClient; never retries."""

    def __init__(self, client: httpx.AsyncClient, base_url: str):
        self._client = client
        self._base_url = base_url.rstrip("/")

    def build_url(self, topic: str) -> str:
        return f"{self._base_url}/advice/search/{quote(topic, safe='')}"

    async def get_by_topic(self, topic: str) -> QueryOutcome:
        logger.info("HTTP call for querying %r", topic)
        try:
            url = self.build_url(topic)
        except UnicodeError as exc:
            raise UpstreamError(f"Cannot build request URL for {topic!r}: {exc}") from exc

        try:
            resp = await self._client.get(url, headers=_HEADERS)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Request to {url} failed: {exc}") from exc

        return parse_body(resp.content)


def parse_body(body: bytes) -> QueryOutcome:
    try:
        payload = json.loads(body)
    except ValueError as exc:
        raise UpstreamError(f"Upstream body is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise UpstreamError(f"Unexpected upstream body type: {type(payload).__name__}")

    try:
        error = SlipError.model_validate(payload)
    except ValidationError:
        error = None
    if error is not None and error.message.text:
        return error

    try:
        return QueryResult.model_validate(payload)
    except ValidationError as exc:
        raise UpstreamError(f"Upstream body matches no known shape: {exc}") from exc

"""
app/schemas.py — Wire shapes for the upstream API and the RPC method.

Upstream (api.adviceslip.com /advice/search/<topic>):
  not found  → {"message": {"type": "error", "text": "..."}}
  found      → {"total_results": "3", "query": "...", "slips": [{id, advice, date}, …]}

RPC (AdviceService.GiveMeAdvice):
  params     → {"topic": "...", "amount": 2}      (amount optional / null)
  result     → {"adviceList": ["...", …]}
"""
from typing import Optional, Union

from pydantic import BaseModel, Field, StrictInt, ValidationInfo, field_validator


# ── Upstream payloads ────────────────────────────────────────────────────────

class UpstreamModel(BaseModel):
    """Treats JSON null in any upstream field as that field's default."""

    @field_validator("*", mode="before")
    @classmethod
    def null_as_default(cls, v, info: ValidationInfo):
        if v is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return v


class Slip(UpstreamModel):
    id: int = 0
    advice: str = ""
    date: str = ""


class Message(UpstreamModel):
    type: str = ""
    text: str = ""


class SlipError(UpstreamModel):
    message: Message = Field(default_factory=Message)


class QueryResult(UpstreamModel):
    # Upstream sends the count as a string; tolerate a plain number too.
    total_results: Optional[Union[str, int]] = None
    query: str = ""
    slips: list[Slip] = Field(default_factory=list)


# ── RPC arguments / reply ────────────────────────────────────────────────────

class AdviceArgs(BaseModel):
    topic: str = Field(..., min_length=1)
    amount: Optional[StrictInt] = None


class AdviceReply(BaseModel):
    advice_list: list[str] = Field(default_factory=list, alias="adviceList")

    class Config:
        populate_by_name = True

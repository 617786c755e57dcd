"""
app/errors.py — Exceptions surfaced to RPC callers.

NotFound is deliberately absent: an upstream "no advice" answer becomes an
empty list in the retriever, never an exception.
"""


class AdviceError(Exception):
    """Base class for every error the RPC layer reports as a method failure."""


class InvalidArgumentError(AdviceError):
    """Caller supplied arguments the service refuses (e.g. a negative amount)."""


class UpstreamError(AdviceError):
    """The Advice Slip request could not be built, sent, read or parsed."""


class CacheError(AdviceError):
    """A value could not be serialized or written to the cache storage."""

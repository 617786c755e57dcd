"""
app/limiter.py — Trims an advice list to a maximum length.
"""
from typing import Protocol


class AdviceLimiter(Protocol):
    def limit_slice_to(self, advices: list[str], amount: int) -> list[str]: ...


class SimpleAdviceLimiter:
    def limit_slice_to(self, advices: list[str], amount: int) -> list[str]:
        """
        Return a new list holding the first `amount` advices.

        A negative amount means "no limit": the whole list comes back. The RPC
        façade rejects negatives before they get here, so only direct callers
        see this branch.
        """
        if amount < 0:
            return list(advices)
        return advices[:amount]

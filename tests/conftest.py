import pytest

from app.cache import InMemoryAdviceCache, TTLStore


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return TTLStore(clock=clock)


@pytest.fixture
def cache(store):
    return InMemoryAdviceCache(store, ttl_seconds=300)

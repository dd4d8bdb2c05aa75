"""
Fixtures partilhadas: KV em memória, relógio controlável e upstreams falsos
via httpx.MockTransport.
"""
import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from football_proxy.cache import MemoryResponseCache
from football_proxy.config import FantasySettings, FootballSettings


class FakeKV:
    """Dublê assíncrono com a mesma interface do KVAdapter."""

    backend = "fake"

    def __init__(self):
        self.data: Dict[str, str] = {}
        self.writes = 0

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str, ex: Optional[int] = None):
        self.writes += 1
        self.data[key] = value
        return True

    async def ping(self) -> bool:
        return True


class BrokenKV(FakeKV):
    async def get(self, key: str) -> Optional[str]:
        raise ConnectionError("kv down")

    async def set(self, key: str, value: str, ex: Optional[int] = None):
        raise ConnectionError("kv down")


class Clock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class Upstream:
    """Upstream falso que regista os pedidos recebidos."""

    def __init__(self, handler: Optional[Callable[[httpx.Request], Any]] = None):
        self.requests: List[httpx.Request] = []
        self._handler = handler or (lambda request: httpx.Response(200, json=FIXTURES_PAYLOAD))

    def __call__(self, request: httpx.Request):
        self.requests.append(request)
        return self._handler(request)

    @property
    def calls(self) -> int:
        return len(self.requests)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


FIXTURES_PAYLOAD = {
    "get": "fixtures",
    "results": 2,
    "response": [
        {"fixture": {"id": 1}, "goals": {"home": 2, "away": 1}},
        {"fixture": {"id": 2}, "goals": {"home": 0, "away": 3}},
    ],
}

EVENTS_PAYLOAD = {
    "get": "fixtures/events",
    "results": 3,
    "response": [{"type": "Goal"}, {"type": "Card"}, {"type": "Goal"}],
}


@pytest.fixture
def kv() -> FakeKV:
    return FakeKV()


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def memory_cache(clock: Clock) -> MemoryResponseCache:
    return MemoryResponseCache(clock=clock)


@pytest.fixture
def upstream() -> Upstream:
    return Upstream()


@pytest.fixture
def football_settings() -> FootballSettings:
    return FootballSettings(api_key="test-key", base_url="https://football.test")


@pytest.fixture
def logged_settings() -> FootballSettings:
    return FootballSettings(
        api_key="test-key",
        base_url="https://football.test",
        match_mode="prefix",
        logs_enabled=True,
    )


@pytest.fixture
def fantasy_settings() -> FantasySettings:
    return FantasySettings(base_url="https://fpl.test", timeout=0.2)


def stored_logs(kv: FakeKV, key: str = "api_logs") -> list:
    raw = kv.data.get(key)
    return json.loads(raw) if raw else []

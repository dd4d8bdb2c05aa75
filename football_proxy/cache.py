# football_proxy/cache.py
import json
import time
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from football_proxy.config import KVAdapter

logger = logging.getLogger("football_proxy.cache")


@dataclass(frozen=True)
class CachedResponse:
    body: bytes
    status: int = 200
    headers: Dict[str, str] = field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps({
            "body": self.body.decode("utf-8"),
            "status": self.status,
            "headers": self.headers,
        })

    @classmethod
    def from_json(cls, raw: str) -> "CachedResponse":
        d = json.loads(raw)
        return cls(body=d["body"].encode("utf-8"), status=int(d["status"]), headers=dict(d["headers"]))


class MemoryResponseCache:
    """Cache TTL em memória do processo (usada quando não há Redis)."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries: Dict[str, Tuple[float, CachedResponse]] = {}
        self._clock = clock

    async def get(self, key: str) -> Optional[CachedResponse]:
        hit = self._entries.get(key)
        if hit is None:
            return None
        expires_at, value = hit
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def put(self, key: str, value: CachedResponse, ttl: int) -> None:
        now = self._clock()
        # limpa expiradas; as chaves são URLs escolhidos pelo cliente
        for k in [k for k, (expires_at, _) in self._entries.items() if expires_at <= now]:
            del self._entries[k]
        self._entries[key] = (now + ttl, value)

    def __len__(self) -> int:
        return len(self._entries)


class RedisResponseCache:
    """Cache partilhada sobre o KV; a expiração fica a cargo do Redis (EX)."""

    def __init__(self, kv: KVAdapter, prefix: str = "proxy-cache:"):
        self.kv = kv
        self.prefix = prefix

    async def get(self, key: str) -> Optional[CachedResponse]:
        try:
            raw = await self.kv.get(self.prefix + key)
        except Exception as e:
            logger.warning(f"Redis GET falhou para {key}: {e}")
            return None
        if not raw:
            return None
        try:
            return CachedResponse.from_json(raw)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Entrada de cache inválida para {key}: {e}")
            return None

    async def put(self, key: str, value: CachedResponse, ttl: int) -> None:
        await self.kv.set(self.prefix + key, value.to_json(), ex=ttl)

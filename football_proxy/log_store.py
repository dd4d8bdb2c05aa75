# football_proxy/log_store.py
"""
Registo circular de chamadas ao proxy, guardado como uma lista JSON numa
única chave do KV (mais recente primeiro, limitado a `capacity` entradas).

A escrita é ler-tudo / escrever-tudo e NÃO é atómica: dois pedidos em
simultâneo podem ler a mesma base e um deles perde o registo do outro.
"""
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from football_proxy.config import KVAdapter
from football_proxy.errors import Misconfigured

logger = logging.getLogger("football_proxy.logs")

NOT_CONFIGURED = Misconfigured(
    "Defina UPSTASH_REDIS_REST_URL/UPSTASH_REDIS_REST_TOKEN ou REDIS_URL para ativar os logs."
).payload()


class LogType(str, Enum):
    API_CALL = "API_CALL"
    CACHE_HIT = "CACHE_HIT"
    BLOCKED = "BLOCKED"
    ERROR = "ERROR"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class LogRecord:
    type: LogType
    endpoint: str
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    timestamp: str = ""

    @classmethod
    def create(cls, type: LogType, endpoint: str, data: Optional[Dict[str, Any]] = None,
               error: Optional[str] = None) -> "LogRecord":
        return cls(type=type, endpoint=endpoint, data=data, error=error, timestamp=_now_iso())

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "timestamp": self.timestamp,
            "type": self.type.value,
            "endpoint": self.endpoint,
        }
        if self.data is not None:
            out["data"] = dict(self.data)
        if self.error is not None:
            out["error"] = self.error
        return out


class LogStore:
    def __init__(self, kv: Optional[KVAdapter], key: str = "api_logs", capacity: int = 100):
        self.kv = kv
        self.key = key
        self.capacity = capacity

    @property
    def configured(self) -> bool:
        return self.kv is not None

    async def _load(self) -> List[Dict[str, Any]]:
        raw = await self.kv.get(self.key)
        if not raw:
            return []
        try:
            logs = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"⚠️ Conteúdo inválido em {self.key} — a recomeçar lista vazia.")
            return []
        return logs if isinstance(logs, list) else []

    async def append(self, record: LogRecord) -> None:
        if not self.configured:
            return
        logs = await self._load()
        logs.insert(0, record.to_dict())
        if len(logs) > self.capacity:
            logs = logs[: self.capacity]
        await self.kv.set(self.key, json.dumps(logs))

    async def read(self) -> Dict[str, Any]:
        if not self.configured:
            return dict(NOT_CONFIGURED)
        logs = await self._load()
        return {"count": len(logs), "logs": logs}

    async def clear(self) -> Dict[str, Any]:
        if not self.configured:
            return dict(NOT_CONFIGURED)
        await self.kv.set(self.key, json.dumps([]))
        logger.info(f"🧹 Logs limpos ({self.key}).")
        return {"success": True, "message": "Logs cleared"}

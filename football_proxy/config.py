# football_proxy/config.py
import os
import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def setup_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # httpx regista cada pedido em INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _csv(raw: Optional[str], default: Tuple[str, ...]) -> Tuple[str, ...]:
    if not raw:
        return default
    items = tuple(p.strip() for p in raw.split(",") if p.strip())
    return items or default


# ============================================================
# ⚽ API-Football (proxies A e B)
# ============================================================
FOOTBALL_ALLOWED = ("fixtures", "fixtures/events")


@dataclass(frozen=True)
class FootballSettings:
    """
    Configuração imutável dos proxies API-Football.

    `match_mode` decide como o allow-list é aplicado ("exact" ou "prefix");
    `logs_enabled` ativa o registo de chamadas no KV.
    """

    api_key: str = ""
    base_url: str = "https://v3.football.api-sports.io"
    cache_ttl: int = 60
    allowed_endpoints: Tuple[str, ...] = FOOTBALL_ALLOWED
    match_mode: str = "exact"
    logs_enabled: bool = False
    logs_key: str = "api_logs"
    logs_capacity: int = 100
    auth_header: str = "x-apisports-key"

    @classmethod
    def from_env(cls, *, logged: bool = False) -> "FootballSettings":
        load_dotenv()
        api_key = os.getenv("API_FOOTBALL_KEY", "")
        if not api_key:
            logger.warning("⚠️ API_FOOTBALL_KEY não definida — pedidos ao upstream vão falhar a autenticação.")
        return cls(
            api_key=api_key,
            base_url=os.getenv("API_FOOTBALL_BASE", cls.base_url).rstrip("/"),
            cache_ttl=int(os.getenv("FOOTBALL_CACHE_TTL", str(cls.cache_ttl))),
            allowed_endpoints=_csv(os.getenv("FOOTBALL_ALLOWED_ENDPOINTS"), FOOTBALL_ALLOWED),
            match_mode="prefix" if logged else "exact",
            logs_enabled=logged,
            logs_key=os.getenv("LOGS_KEY", cls.logs_key),
            logs_capacity=int(os.getenv("LOGS_CAPACITY", str(cls.logs_capacity))),
        )


# ============================================================
# 🏆 Fantasy Premier League (proxy C)
# ============================================================
FPL_ALLOWED = (
    "/api/bootstrap-static/",
    "/api/entry/",
    "/api/leagues-classic/",
    "/api/event/",
    "/api/fixtures/",
)


@dataclass(frozen=True)
class FantasySettings:
    base_url: str = "https://fantasy.premierleague.com"
    timeout: float = 15.0
    cache_max_age: int = 30
    user_agent: str = "FPL-League-Tracker/1.0"
    allowed_paths: Tuple[str, ...] = FPL_ALLOWED

    @classmethod
    def from_env(cls) -> "FantasySettings":
        load_dotenv()
        return cls(
            base_url=os.getenv("FPL_BASE", cls.base_url).rstrip("/"),
            timeout=float(os.getenv("FPL_TIMEOUT", str(cls.timeout))),
            cache_max_age=int(os.getenv("FPL_CACHE_MAX_AGE", str(cls.cache_max_age))),
            user_agent=os.getenv("FPL_USER_AGENT", cls.user_agent),
        )


# ============================================================
# 🗄️ Backend KV (Upstash REST preferido, Redis socket como fallback)
# ============================================================
class KVAdapter:
    """Interface assíncrona mínima comum ao Upstash e ao redis-py."""

    def __init__(self, client: Any, backend: str):
        self._c = client
        self.backend = backend

    async def get(self, key: str) -> Optional[str]:
        v = await self._c.get(key)
        if isinstance(v, bytes):
            return v.decode("utf-8")
        return v

    async def set(self, key: str, value: str, ex: Optional[int] = None):
        return await self._c.set(key, value, ex=ex)

    async def ping(self) -> bool:
        await self._c.set("healthz_test", "ok", ex=5)
        return (await self.get("healthz_test")) == "ok"


def build_kv_client() -> Optional[KVAdapter]:
    load_dotenv()
    rest_url = os.getenv("UPSTASH_REDIS_REST_URL") or os.getenv("UPSTASH_REDIS_URL")
    rest_token = os.getenv("UPSTASH_REDIS_REST_TOKEN") or os.getenv("UPSTASH_REDIS_TOKEN")
    socket_url = os.getenv("REDIS_URL", "")

    if rest_url and rest_token:
        try:
            from upstash_redis.asyncio import Redis as UpstashRedis

            logger.info("✅ Ligação HTTP com Upstash Redis (REST) configurada.")
            return KVAdapter(UpstashRedis(url=rest_url, token=rest_token), "rest")
        except Exception as e:
            logger.error(f"❌ Falha a inicializar Upstash REST: {e}")

    if socket_url.startswith(("redis://", "rediss://")):
        try:
            import redis.asyncio as redis_py

            logger.info("✅ Ligação Redis por socket configurada.")
            return KVAdapter(redis_py.Redis.from_url(socket_url, decode_responses=True), "socket")
        except Exception as e:
            logger.warning(f"⚠️ Falha a inicializar Redis socket: {e}")

    logger.warning("⚠️ Redis não configurado — defina UPSTASH_REDIS_REST_URL e UPSTASH_REDIS_REST_TOKEN (recomendado).")
    return None

# football_proxy/proxy.py
import json
import logging
from typing import Any, Dict, Optional

import httpx
from fastapi import BackgroundTasks
from fastapi.responses import JSONResponse, Response

from football_proxy.allowlist import is_allowed
from football_proxy.cache import CachedResponse
from football_proxy.config import FootballSettings
from football_proxy.errors import BadRequest, Forbidden, ProxyError
from football_proxy.log_store import LogRecord, LogStore, LogType
from football_proxy.summary import summarize
from football_proxy.upstream import fetch_football

logger = logging.getLogger("football_proxy")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def preflight() -> Response:
    return Response(status_code=200, headers=dict(CORS_HEADERS))


def error_response(exc: ProxyError) -> JSONResponse:
    return JSONResponse(exc.payload(), status_code=exc.status_code, headers=dict(CORS_HEADERS))


class CachingProxy:
    """
    Encaminhador API-Football com cache por URL completo.

    Com `settings.logs_enabled`, cada desfecho (BLOCKED, CACHE_HIT, API_CALL,
    ERROR) é registado no LogStore em background, depois da resposta sair.
    """

    def __init__(
        self,
        settings: FootballSettings,
        cache,
        log_store: Optional[LogStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self.cache = cache
        self.log_store = log_store
        self.transport = transport

    # -------------------- background --------------------
    def _log(self, background: BackgroundTasks, record: LogRecord) -> None:
        if self.settings.logs_enabled and self.log_store is not None:
            background.add_task(self._append_log, record)

    async def _append_log(self, record: LogRecord) -> None:
        try:
            await self.log_store.append(record)
        except Exception as e:
            logger.warning(f"⚠️ Falha a gravar log ({record.type.value}): {e}")

    async def _store(self, key: str, entry: CachedResponse) -> None:
        try:
            await self.cache.put(key, entry, self.settings.cache_ttl)
        except Exception as e:
            logger.warning(f"⚠️ Falha a gravar cache para {key}: {e}")

    # -------------------- fluxo principal --------------------
    async def handle(self, cache_key: str, endpoint: Optional[str], background: BackgroundTasks) -> Response:
        if not endpoint:
            return error_response(BadRequest(error="Missing endpoint parameter"))

        if not is_allowed(endpoint, self.settings.allowed_endpoints, self.settings.match_mode):
            logger.info(f"⛔ Endpoint bloqueado: {endpoint}")
            self._log(background, LogRecord.create(LogType.BLOCKED, endpoint))
            return error_response(Forbidden(error="Endpoint not allowed"))

        cached = await self.cache.get(cache_key)
        if cached is not None:
            logger.info(f"Cache HIT for: {endpoint}")
            self._log(background, LogRecord.create(LogType.CACHE_HIT, endpoint))
            headers = dict(cached.headers)
            headers["X-Cache"] = "HIT"
            return Response(content=cached.body, status_code=cached.status, headers=headers)

        logger.info(f"Cache MISS for: {endpoint}")
        try:
            data = await fetch_football(self.settings, endpoint, transport=self.transport)
        except ProxyError as e:
            logger.error(f"❌ API-Football error: {e}")
            self._log(background, LogRecord.create(LogType.ERROR, endpoint, error=str(e)))
            return error_response(ProxyError(error="Failed to fetch from API-Football", status_code=500))

        # corpo serializado uma vez; resposta e entrada de cache partem do mesmo buffer
        body = json.dumps(data).encode("utf-8")
        headers: Dict[str, str] = {
            "Content-Type": "application/json",
            **CORS_HEADERS,
            "Cache-Control": f"public, max-age={self.settings.cache_ttl}",
            "X-Cache": "MISS",
        }
        background.add_task(self._store, cache_key, CachedResponse(body=body, status=200, headers=dict(headers)))
        if self.settings.logs_enabled:
            self._log(background, LogRecord.create(LogType.API_CALL, endpoint, data=summarize(data, endpoint)))
        return Response(content=body, status_code=200, headers=headers)

    # -------------------- ações de logs --------------------
    async def logs(self) -> Dict[str, Any]:
        store = self.log_store or LogStore(None)
        return await store.read()

    async def clear_logs(self) -> Dict[str, Any]:
        store = self.log_store or LogStore(None)
        return await store.clear()

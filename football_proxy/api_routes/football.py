# football_proxy/api_routes/football.py
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Query, Request
from fastapi.responses import JSONResponse

from football_proxy.proxy import CORS_HEADERS, CachingProxy, preflight

router = APIRouter(tags=["football"])


@router.api_route("/", methods=["GET", "OPTIONS"])
async def football_proxy(
    request: Request,
    background_tasks: BackgroundTasks,
    endpoint: Optional[str] = Query(default=None),
    action: Optional[str] = Query(default=None),
):
    """
    Proxy API-Football: `GET /?endpoint=fixtures?date=2025-01-01`.

    Na variante com logs, `?action=logs` e `?action=clear-logs` têm
    precedência sobre o endpoint e não passam pela cache.
    """
    if request.method == "OPTIONS":
        return preflight()

    proxy: CachingProxy = request.app.state.proxy

    if proxy.settings.logs_enabled and action == "logs":
        return JSONResponse(await proxy.logs(), headers=dict(CORS_HEADERS))
    if proxy.settings.logs_enabled and action == "clear-logs":
        return JSONResponse(await proxy.clear_logs(), headers=dict(CORS_HEADERS))

    return await proxy.handle(str(request.url), endpoint, background_tasks)

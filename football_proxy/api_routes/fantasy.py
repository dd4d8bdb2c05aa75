# football_proxy/api_routes/fantasy.py
import logging
from typing import Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import Response

from football_proxy.allowlist import is_allowed
from football_proxy.config import FantasySettings
from football_proxy.errors import BadRequest, Forbidden, UpstreamError
from football_proxy.proxy import preflight
from football_proxy.upstream import fetch_with_timeout

router = APIRouter(tags=["fantasy"])
log = logging.getLogger("football_proxy.fantasy")


@router.api_route("/", methods=["GET", "OPTIONS"])
async def fantasy_proxy(request: Request, path: Optional[str] = Query(default=None)):
    """
    Encaminha `?path=/api/...` para o FPL. Sem cache própria: o
    Cache-Control devolvido fica para o CDN à frente.
    """
    if request.method == "OPTIONS":
        return preflight()

    settings: FantasySettings = request.app.state.settings

    if not path:
        raise BadRequest(error="Missing path parameter")
    if not is_allowed(path, settings.allowed_paths, mode="prefix"):
        raise Forbidden(error="Path not allowed")

    try:
        data = await fetch_with_timeout(settings, path, transport=request.app.state.transport)
    except UpstreamError as e:
        log.error(f"FPL API Error: {e}")
        raise UpstreamError(str(e), error="Failed to fetch from FPL API") from e

    return Response(
        content=data,
        status_code=200,
        headers={
            "Content-Type": "application/json",
            "Cache-Control": f"public, max-age={settings.cache_max_age}",
            "Access-Control-Allow-Origin": "*",
        },
    )

# football_proxy/api_routes/health.py
import datetime
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter(tags=["system"])
logger = logging.getLogger("football_proxy.health")


@router.api_route("/healthz", methods=["GET", "HEAD"])
async def healthz(request: Request):
    status = {"status": "ok", "proxy": request.app.state.proxy_name}

    kv = request.app.state.kv
    if kv is None:
        status["kv"] = "missing"
    else:
        status["kv_backend"] = kv.backend
        try:
            status["kv"] = "ok" if await kv.ping() else "warning"
        except Exception as err:
            logger.warning(f"KV check failed: {err}")
            status["kv"] = "error"

    status["time"] = datetime.datetime.now(datetime.timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
    return JSONResponse(status)

# football_proxy/upstream.py
import asyncio
import logging
from typing import Any, Optional

import httpx

from football_proxy.config import FantasySettings, FootballSettings
from football_proxy.errors import UpstreamError

logger = logging.getLogger("football_proxy.upstream")


async def fetch_football(
    settings: FootballSettings,
    endpoint: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Any:
    """
    GET <base>/<endpoint> com a chave API-Football injetada.
    Sem timeout (espera o que o fornecedor demorar). Devolve o JSON.
    """
    url = f"{settings.base_url}/{endpoint.lstrip('/')}"
    headers = {settings.auth_header: settings.api_key}

    try:
        async with httpx.AsyncClient(timeout=None, transport=transport) as client:
            response = await client.get(url, headers=headers)
    except httpx.HTTPError as e:
        raise UpstreamError(str(e) or type(e).__name__) from e

    if not response.is_success:
        raise UpstreamError(f"HTTP {response.status_code}")
    try:
        return response.json()
    except ValueError as e:
        raise UpstreamError(f"Invalid JSON: {e}") from e


async def fetch_with_timeout(
    settings: FantasySettings,
    path: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """GET único ao FPL, limitado a `settings.timeout` segundos no total."""
    url = f"{settings.base_url}{path}"

    async def _get() -> httpx.Response:
        async with httpx.AsyncClient(timeout=settings.timeout, transport=transport) as client:
            return await client.get(url, headers={"User-Agent": settings.user_agent})

    try:
        # wait_for cancela o pedido (e fecha a ligação) ao expirar
        response = await asyncio.wait_for(_get(), timeout=settings.timeout)
    except (asyncio.TimeoutError, httpx.TimeoutException) as e:
        raise UpstreamError("Request timeout") from e
    except httpx.HTTPError as e:
        raise UpstreamError(str(e) or type(e).__name__) from e

    if not 200 <= response.status_code < 300:
        raise UpstreamError(f"HTTP {response.status_code}")
    return response.text

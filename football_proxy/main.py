# ============================================================
# football_proxy/main.py
# ============================================================
import logging
from typing import Optional

import httpx
import requests
import typer
from fastapi import FastAPI, Request

from football_proxy import __version__
from football_proxy.api_routes import fantasy as fantasy_routes
from football_proxy.api_routes import football as football_routes
from football_proxy.api_routes import health as health_routes
from football_proxy.cache import MemoryResponseCache, RedisResponseCache
from football_proxy.config import FantasySettings, FootballSettings, KVAdapter, build_kv_client, setup_logging
from football_proxy.errors import ProxyError
from football_proxy.log_store import LogStore
from football_proxy.proxy import CachingProxy, error_response

logger = logging.getLogger(__name__)

_NO_KV = object()


# ============================================================
# 🌍 FASTAPI APPS
# ============================================================
async def _proxy_error_handler(request: Request, exc: ProxyError):
    return error_response(exc)


def _base_app(title: str, name: str, kv: Optional[KVAdapter], transport) -> FastAPI:
    app = FastAPI(title=title, version=__version__)
    app.state.proxy_name = name
    app.state.kv = kv
    app.state.transport = transport
    app.add_exception_handler(ProxyError, _proxy_error_handler)
    app.include_router(health_routes.router)
    return app


def create_football_app(
    settings: Optional[FootballSettings] = None,
    *,
    logged: bool = False,
    cache=None,
    kv=_NO_KV,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Proxy A (logged=False) ou proxy B (logged=True).

    Sem `kv` explícito, o backend é descoberto pelo ambiente; sem `cache`,
    usa Redis quando existe e memória do processo caso contrário.
    """
    settings = settings or FootballSettings.from_env(logged=logged)
    if kv is _NO_KV:
        kv = build_kv_client()
    if cache is None:
        cache = RedisResponseCache(kv) if kv is not None else MemoryResponseCache()

    log_store = LogStore(kv, key=settings.logs_key, capacity=settings.logs_capacity) if settings.logs_enabled else None
    name = "football-logged" if settings.logs_enabled else "football"

    app = _base_app("API-Football Proxy", name, kv, transport)
    app.state.settings = settings
    app.state.proxy = CachingProxy(settings, cache, log_store=log_store, transport=transport)
    app.include_router(football_routes.router)
    logger.info(f"✅ Proxy {name} pronto (TTL={settings.cache_ttl}s, allow-list={list(settings.allowed_endpoints)})")
    return app


def create_logged_football_app(settings: Optional[FootballSettings] = None, **kwargs) -> FastAPI:
    return create_football_app(settings or FootballSettings.from_env(logged=True), logged=True, **kwargs)


def create_fantasy_app(
    settings: Optional[FantasySettings] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    settings = settings or FantasySettings.from_env()
    app = _base_app("FPL Proxy", "fantasy", None, transport)
    app.state.settings = settings
    app.include_router(fantasy_routes.router)
    logger.info(f"✅ Proxy fantasy pronto (timeout={settings.timeout}s)")
    return app


FACTORIES = {
    "football": "football_proxy.main:create_football_app",
    "football-logged": "football_proxy.main:create_logged_football_app",
    "fantasy": "football_proxy.main:create_fantasy_app",
}


# ============================================================
# 🎯 CLI (Typer)
# ============================================================
cli = typer.Typer(help="Football / FPL proxy CLI")


def version_callback(value: bool):
    if value:
        typer.echo(f"football-proxy v{__version__}")
        raise typer.Exit()


@cli.callback()
def main(
    version: bool = typer.Option(
        None, "--version", callback=version_callback, is_eager=True, help="Mostra a versão do CLI"
    )
):
    setup_logging()


@cli.command()
def serve(
    proxy: str = typer.Argument("football", help="football | football-logged | fantasy"),
    host: str = typer.Option("0.0.0.0", help="Interface de escuta"),
    port: int = typer.Option(8000, envvar="PORT", help="Porta"),
):
    """Arranca um dos proxies com uvicorn."""
    if proxy not in FACTORIES:
        typer.echo(f"Proxy desconhecido: {proxy} (use {', '.join(FACTORIES)})", err=True)
        raise typer.Exit(code=2)

    import uvicorn

    logger.info(f"🚀 Iniciando proxy {proxy} na porta {port}…")
    uvicorn.run(FACTORIES[proxy], host=host, port=port, factory=True)


def _action(url: str, action: str) -> dict:
    r = requests.get(url, params={"action": action}, timeout=15)
    r.raise_for_status()
    return r.json()


@cli.command()
def logs(
    url: str = typer.Argument(..., help="URL base do proxy com logs"),
    limit: int = typer.Option(20, help="Nº máximo de registos a mostrar"),
):
    """Mostra os registos mais recentes de um proxy com logs."""
    data = _action(url, "logs")
    if "logs" not in data:
        typer.echo(f"⚠️ {data.get('error')}: {data.get('message', '')}")
        raise typer.Exit(code=1)

    typer.echo(f"{data['count']} registos")
    for rec in data["logs"][:limit]:
        line = f"{rec['timestamp']}  {rec['type']:<9}  {rec['endpoint']}"
        if rec.get("data"):
            d = rec["data"]
            line += f"  results={d.get('results')} goals={d.get('goals')}"
        if rec.get("error"):
            line += f"  error={rec['error']}"
        typer.echo(line)


@cli.command("clear-logs")
def clear_logs(url: str = typer.Argument(..., help="URL base do proxy com logs")):
    """Apaga os registos guardados."""
    data = _action(url, "clear-logs")
    typer.echo(data.get("message") or data.get("error"))


if __name__ == "__main__":
    cli()

# football_proxy/allowlist.py
from typing import Iterable


def endpoint_base(endpoint: str) -> str:
    """'/fixtures?live=all' -> 'fixtures'"""
    return endpoint.split("?", 1)[0].strip("/")


def is_allowed(endpoint: str, allowed: Iterable[str], mode: str = "exact") -> bool:
    """
    Decide se um endpoint/path pode ser encaminhado.

    - mode="exact": a base (sem query nem barras) tem de ser igual a uma entrada.
    - mode="prefix": o path (sem query) tem de começar por uma entrada.
      Entradas com barra inicial (paths FPL) comparam com o path em bruto.
    """
    if not endpoint:
        return False
    if mode == "exact":
        base = endpoint_base(endpoint)
        return any(base == a.strip("/") for a in allowed)
    if mode == "prefix":
        path = endpoint.split("?", 1)[0]
        for a in allowed:
            if a.startswith("/"):
                if path.startswith(a):
                    return True
            elif path.lstrip("/").startswith(a):
                return True
        return False
    raise ValueError(f"modo de allow-list desconhecido: {mode}")

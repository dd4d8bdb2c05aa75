# football_proxy/errors.py
from typing import Any, Dict, Optional


class ProxyError(Exception):
    """Erro que termina o pedido com um corpo JSON `{error[, message]}`."""

    status_code = 500
    error = "Internal error"

    def __init__(self, message: Optional[str] = None, *, error: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message or error or self.error)
        self.message = message
        if error is not None:
            self.error = error
        if status_code is not None:
            self.status_code = status_code

    def payload(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.error}
        if self.message:
            body["message"] = self.message
        return body


class BadRequest(ProxyError):
    status_code = 400
    error = "Bad request"


class Forbidden(ProxyError):
    status_code = 403
    error = "Forbidden"


class UpstreamError(ProxyError):
    """Falha de rede, status não-2xx, timeout ou JSON inválido do upstream."""

    status_code = 502
    error = "Upstream failure"


class Misconfigured(ProxyError):
    # degrada com 200 e corpo explicativo
    status_code = 200
    error = "KV namespace not configured"

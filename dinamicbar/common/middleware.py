"""
Middlewares HTTP comunes a toda la API
"""
import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from dinamicbar.core.config import settings

logger = logging.getLogger(__name__)


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """
    Registra método, ruta, estado y duración de cada petición y expone
    la duración en la cabecera X-Process-Time (milisegundos).
    """

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        response.headers["X-Process-Time"] = f"{elapsed_ms:.1f}"
        logger.debug(
            f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)"
        )
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Cabeceras de seguridad básicas. HSTS solo se envía en producción,
    donde la API se sirve detrás de HTTPS.
    """

    BASE_HEADERS = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Referrer-Policy": "strict-origin-when-cross-origin",
    }

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        for name, value in self.BASE_HEADERS.items():
            response.headers.setdefault(name, value)

        if settings.ENVIRONMENT == "production":
            response.headers["Strict-Transport-Security"] = "max-age=31536000"

        return response

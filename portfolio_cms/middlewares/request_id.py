"""Middleware Starlette propageant l'identifiant de requête.

L'identifiant (en-tête `X-Request-ID`, généré s'il est absent) est lié au contexte structlog
pour toute la durée de la requête, puis renvoyé dans la réponse. Les enveloppes d'erreur le
reprennent comme `trace_id`.
"""

from collections.abc import Callable
from uuid import uuid4

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attache un identifiant de requête aux logs et à la réponse."""

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID") -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request, call_next: Callable):
        request_id = request.headers.get(self.header_name) or uuid4().hex
        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")
        response.headers[self.header_name] = request_id
        return response

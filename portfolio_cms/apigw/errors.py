"""Gestion standardisée des erreurs API avec enveloppes d'erreur.

Toutes les erreurs sortent sous la forme `{code, message, trace_id, details?}`. Les erreurs
du magasin de contenu (`StoreError`) sont traduites en statut HTTP selon leur `kind`.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from portfolio_cms.domain.errors import ConflictError, StoreError, ValidationError

log = logging.getLogger(__name__)


class ErrorCodes:
    """Codes d'erreur exposés par l'API."""

    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    CONFLICT = "CONFLICT"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


_STATUS_CODES = {
    400: ErrorCodes.BAD_REQUEST,
    401: ErrorCodes.UNAUTHORIZED,
    403: ErrorCodes.FORBIDDEN,
    404: ErrorCodes.NOT_FOUND,
    405: ErrorCodes.METHOD_NOT_ALLOWED,
    409: ErrorCodes.CONFLICT,
    422: ErrorCodes.VALIDATION_ERROR,
    500: ErrorCodes.INTERNAL_ERROR,
    503: ErrorCodes.SERVICE_UNAVAILABLE,
}

# kind d'erreur du magasin -> statut HTTP
_KIND_STATUS = {
    "unavailable": 503,
    "unauthorized": 401,
    "not_found": 404,
    "conflict": 409,
    "validation": 422,
    "error": 500,
}


class APIError(HTTPException):
    """Erreur API portant l'enveloppe standard."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=message)
        self.code = code
        self.message = message
        self.details = details


def extract_trace_id(request: Request) -> str | None:
    """Identifiant de trace: en-tête X-Trace-ID, sinon X-Request-ID."""
    return request.headers.get("X-Trace-ID") or request.headers.get("X-Request-ID")


def create_error_response(
    status_code: int,
    code: str,
    message: str,
    trace_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    """Construit la réponse JSON d'erreur standard."""
    content: dict[str, Any] = {"code": code, "message": message, "trace_id": trace_id}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    trace_id = extract_trace_id(request)
    log.warning(
        "API error occurred",
        extra={"code": exc.code, "status_code": exc.status_code, "trace_id": trace_id},
    )
    return create_error_response(exc.status_code, exc.code, exc.message, trace_id, exc.details)


def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _STATUS_CODES.get(exc.status_code, "HTTP_ERROR")
    return create_error_response(
        exc.status_code, code, str(exc.detail), extract_trace_id(request)
    )


def handle_store_error(request: Request, exc: StoreError) -> JSONResponse:
    """Traduit une erreur du magasin de contenu en réponse HTTP."""
    status_code = _KIND_STATUS.get(exc.kind, 500)
    code = exc.code.upper() if isinstance(exc, ConflictError) else _STATUS_CODES[status_code]
    details = dict(exc.details) if exc.details else None
    if isinstance(exc, ValidationError) and exc.missing:
        details = {"missing": exc.missing}
    log.warning(
        "Store error occurred",
        extra={"kind": exc.kind, "error_message": exc.message, "status_code": status_code},
    )
    return create_error_response(
        status_code, code, exc.message, extract_trace_id(request), details
    )


def handle_generic_exception(request: Request, exc: Exception) -> JSONResponse:
    log.error(
        "Unexpected error occurred",
        extra={"exception_type": type(exc).__name__, "trace_id": extract_trace_id(request)},
        exc_info=True,
    )
    return create_error_response(
        500,
        ErrorCodes.INTERNAL_ERROR,
        "An unexpected error occurred",
        extract_trace_id(request),
    )


def install_error_handlers(app: FastAPI) -> None:
    """Enregistre les gestionnaires d'erreurs sur l'application."""
    app.add_exception_handler(APIError, handle_api_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(StoreError, handle_store_error)
    app.add_exception_handler(Exception, handle_generic_exception)


def unauthorized(message: str) -> APIError:
    """Create a 401 Unauthorized error."""
    return APIError(401, ErrorCodes.UNAUTHORIZED, message)


def bad_request(message: str, details: dict[str, Any] | None = None) -> APIError:
    """Create a 400 Bad Request error."""
    return APIError(400, ErrorCodes.BAD_REQUEST, message, details)

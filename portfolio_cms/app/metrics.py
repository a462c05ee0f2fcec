"""
Métriques Prometheus pour l'application.

Ce module définit les métriques HTTP, les compteurs du magasin de contenu et la jauge de la
file d'attente de synchronisation côté client.
"""

import re
import time

from fastapi import APIRouter
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

metrics_router = APIRouter(tags=["metrics"])

REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "route", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "Latency of HTTP requests", ["route"]
)

# Magasin de contenu
CONTENT_WRITES = Counter(
    "content_writes_total",
    "Content documents written",
    ["section", "status"],
)
CONTENT_PUBLISH = Counter(
    "content_publish_total",
    "Draft promotions to published",
    ["section"],
)
CONTENT_STORE_ERRORS = Counter(
    "content_store_errors_total",
    "Content store operation failures",
    ["operation", "kind"],
)

# Synchronisation (client)
SYNC_PENDING_QUEUE_SIZE = Gauge(
    "sync_pending_queue_size",
    "Pending write operations waiting for connectivity",
)
SYNC_STATUS_TRANSITIONS = Counter(
    "sync_status_transitions_total",
    "Connection status transitions of the sync controller",
    ["status"],
)

_ITEM_ID = re.compile(r"^/(projects|interests)/(zh|en)/[^/]+$")


def normalize_route(path: str) -> str:
    """Réduit la cardinalité des labels (identifiants d'éléments remplacés par {id})."""
    match = _ITEM_ID.match(path)
    if match:
        return f"/{match.group(1)}/{match.group(2)}/{{id}}"
    return path


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Compte les requêtes et mesure leur latence par route normalisée."""

    async def dispatch(self, request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        route = normalize_route(request.url.path)
        REQUEST_LATENCY.labels(route=route).observe(time.perf_counter() - start)
        REQUEST_COUNT.labels(
            method=request.method, route=route, status=str(response.status_code)
        ).inc()
        return response


@metrics_router.get("/metrics")
def metrics() -> Response:
    """Expose les métriques au format Prometheus."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

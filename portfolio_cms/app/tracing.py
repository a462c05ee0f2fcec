"""Tracing OpenTelemetry optionnel.

Rien n'est configuré tant que `OTLP_ENDPOINT` est vide; sinon les spans sont exportés en OTLP
(gRPC) sous le nom de service `APP_NAME`.
"""

from __future__ import annotations

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from portfolio_cms.core.settings import Settings


def setup_tracing(settings: Settings) -> bool:
    """Installe le provider de traces si un endpoint OTLP est configuré."""
    if not settings.OTLP_ENDPOINT:
        return False

    provider = TracerProvider(resource=Resource.create({"service.name": settings.APP_NAME}))
    provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.OTLP_ENDPOINT, insecure=True))
    )
    trace.set_tracer_provider(provider)
    return True


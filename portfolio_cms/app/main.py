"""
Application principale FastAPI du CMS de portfolio.

Responsabilités du module:
- Initialiser le logging structuré et le tracing optionnel
- Ajouter les middlewares (request id, métriques, timing, CORS)
- Installer les gestionnaires d'erreurs standardisés
- Monter les routers (santé, auth, publication, médias, contenu, métriques)
- Amorcer le contenu par défaut au démarrage si `SEED_DEFAULTS` est actif
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from portfolio_cms.api.routes_auth import router as auth_router
from portfolio_cms.api.routes_content import publish_router
from portfolio_cms.api.routes_content import router as content_router
from portfolio_cms.api.routes_health import router as health_router
from portfolio_cms.api.routes_media import router as media_router
from portfolio_cms.apigw.errors import install_error_handlers
from portfolio_cms.app.metrics import PrometheusMiddleware, metrics_router
from portfolio_cms.app.tracing import setup_tracing
from portfolio_cms.core.container import container
from portfolio_cms.core.logging import setup_logging
from portfolio_cms.infra.seeding import seed_defaults
from portfolio_cms.middlewares.request_id import RequestIDMiddleware
from portfolio_cms.middlewares.timing import TimingMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    if container.settings.SEED_DEFAULTS:
        seed_defaults(container.content_store)
    yield


def create_app() -> FastAPI:
    """
    Construit et retourne l'application FastAPI prête à l'usage.

    Les routes de publication sont montées avant les routes de contenu pour que
    `/publish/...` ne soit jamais interprété comme une section.
    """
    setup_logging()
    settings = container.settings
    setup_tracing(settings)
    app = FastAPI(title=settings.APP_NAME, debug=settings.APP_DEBUG, lifespan=lifespan)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(TimingMiddleware)
    if settings.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(o).rstrip("/") for o in settings.CORS_ORIGINS],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    install_error_handlers(app)
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(publish_router)
    app.include_router(media_router)
    app.include_router(content_router)
    app.include_router(metrics_router)
    app.mount(
        settings.MEDIA_BASE_URL,
        StaticFiles(directory=settings.MEDIA_ROOT, check_dir=False),
        name="media-files",
    )
    return app


app = create_app()

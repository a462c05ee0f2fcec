"""
Endpoint de santé utilisé par la sonde de joignabilité du contrôleur de synchronisation.
"""

from fastapi import APIRouter

from portfolio_cms.api.schemas import HealthResponse
from portfolio_cms.core.container import container
from portfolio_cms.domain.content import utc_now_iso

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health():
    """Vérifie la disponibilité de l'API et du magasin de contenu."""
    return HealthResponse(
        status="OK",
        timestamp=utc_now_iso(),
        storage=container.content_store.backend_name,
        storage_ok=container.content_store.ping(),
    )

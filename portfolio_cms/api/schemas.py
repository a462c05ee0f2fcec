# Schémas Pydantic exposés par l'API (réponses).

from typing import Any

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Réponse simple d'une écriture.

    Champs:
    - message: str (texte lisible)
    - version: int | None (compteur de version après écriture)
    - updatedAt: str | None (horodatage ISO attribué par le serveur)
    """

    message: str
    version: int | None = None
    updatedAt: str | None = None


class UploadResponse(BaseModel):
    """Métadonnées d'un fichier téléversé."""

    fileName: str
    url: str
    size: int
    type: str


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    storage: str
    storage_ok: bool


def item_response(section: str, item: dict[str, Any], message: str) -> dict[str, Any]:
    """Corps `{project|interest: item, message}` des routes d'éléments."""
    return {section.rstrip("s"): item, "message": message}

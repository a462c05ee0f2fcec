"""
Validation des champs requis par section.

La validation bloque une sauvegarde localement, avant tout appel réseau. Une chaîne vide
ou composée d'espaces compte comme absente.
"""

from __future__ import annotations

from typing import Any

from portfolio_cms.domain.content import ContentDocument
from portfolio_cms.domain.errors import ValidationError

# Champs requis sur le document lui-même
REQUIRED_FIELDS: dict[str, tuple[str, ...]] = {
    "home": ("name",),
    "profile": ("bio",),
    "contact": ("email",),
}

# Champs requis sur chaque élément: section -> (clé du tableau, champs)
REQUIRED_ITEM_FIELDS: dict[str, tuple[str | None, tuple[str, ...]]] = {
    "projects": (None, ("title",)),
    "interests": (None, ("title",)),
    "education": ("education", ("institution",)),
    "experience": ("experience", ("title",)),
}


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def missing_fields(fields: dict[str, Any], required: tuple[str, ...]) -> list[str]:
    """Liste des champs requis absents ou vides."""
    return [name for name in required if _is_blank(fields.get(name))]


def validate_document(section: str, document: ContentDocument) -> None:
    """Lève ValidationError si un champ requis manque pour la section."""
    missing: list[str] = []
    if isinstance(document, dict) and section in REQUIRED_FIELDS:
        missing.extend(missing_fields(document, REQUIRED_FIELDS[section]))

    if section in REQUIRED_ITEM_FIELDS:
        array_key, required = REQUIRED_ITEM_FIELDS[section]
        items: Any = document
        if array_key is not None:
            items = document.get(array_key, []) if isinstance(document, dict) else []
        for index, item in enumerate(items if isinstance(items, list) else []):
            if not isinstance(item, dict):
                missing.append(f"[{index}]")
                continue
            missing.extend(f"[{index}].{name}" for name in missing_fields(item, required))

    if missing:
        raise ValidationError(f"{section}: required fields missing", missing)

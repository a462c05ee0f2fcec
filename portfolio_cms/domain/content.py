"""
Modèle de domaine du contenu versionné (brouillon / publié).

Ce module définit les sections reconnues, les langues, les statuts, la clé composite
`ContentKey` et l'entité `VersionedContent` (un enregistrement à deux champs par couple
section/langue), ainsi que les règles d'horodatage appliquées aux documents.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from portfolio_cms.domain.errors import ValidationError

# Un document de contenu est une valeur JSON arbitraire (objet ou tableau)
ContentDocument = dict[str, Any] | list[Any]


class Language(str, Enum):
    """Langues du portfolio."""

    ZH = "zh"
    EN = "en"


class Status(str, Enum):
    """Statut d'un emplacement de contenu."""

    DRAFT = "draft"
    PUBLISHED = "published"


SECTIONS: tuple[str, ...] = (
    "home",
    "profile",
    "education",
    "experience",
    "contact",
    "projects",
    "interests",
    "theme",
    "settings/site",
)
# Sections dont le document est un tableau d'éléments identifiés (suppression unitaire)
ITEM_SECTIONS = frozenset({"projects", "interests"})
# Sections indépendantes de la langue
GLOBAL_SECTIONS = frozenset({"theme", "settings/site"})
SECTION_ALIASES = {"about": "profile", "settings": "settings/site"}
NEUTRAL_LANGUAGE = "*"


def utc_now_iso() -> str:
    """Horodatage ISO-8601 UTC attribué par le serveur."""
    return datetime.now(UTC).isoformat()


def normalize_section(section: str) -> str:
    """Valide et normalise un nom de section (alias inclus)."""
    name = SECTION_ALIASES.get(section.strip("/"), section.strip("/"))
    if name not in SECTIONS:
        raise ValidationError(f"unknown section: {section}")
    return name


def normalize_language(section: str, language: str | Language | None) -> str:
    """Langue de stockage: neutre pour les sections globales, sinon zh/en."""
    if section in GLOBAL_SECTIONS:
        return NEUTRAL_LANGUAGE
    if language is None:
        raise ValidationError(f"language required for section {section}")
    try:
        return Language(language).value
    except ValueError as err:
        raise ValidationError(f"unsupported language: {language}") from err


@dataclass(frozen=True)
class ContentKey:
    """Adresse d'un emplacement: (section, langue, statut)."""

    section: str
    language: str
    status: Status

    @classmethod
    def of(cls, section: str, language: str | Language | None, status: str | Status) -> ContentKey:
        """Construit une clé normalisée, lève ValidationError si invalide."""
        name = normalize_section(section)
        try:
            st = Status(status)
        except ValueError as err:
            raise ValidationError(f"unsupported status: {status}") from err
        return cls(section=name, language=normalize_language(name, language), status=st)

    @property
    def slot(self) -> tuple[str, str]:
        """Couple (section, langue) identifiant l'entité versionnée."""
        return self.section, self.language

    def __str__(self) -> str:
        return f"{self.section}_{self.language}_{self.status.value}"


@dataclass
class VersionedContent:
    """
    Contenu versionné d'un couple (section, langue).

    Attributs
    - draft / published: documents ou None si absents.
    - version: compteur incrémenté à chaque écriture (contrôle optimiste optionnel).
    - updated_at / published_at: horodatages ISO attribués par le serveur.
    """

    section: str
    language: str
    draft: ContentDocument | None = None
    published: ContentDocument | None = None
    version: int = 0
    updated_at: str | None = None
    published_at: str | None = None

    @property
    def has_draft(self) -> bool:
        return self.draft is not None

    @property
    def has_published(self) -> bool:
        return self.published is not None

    def to_dict(self) -> dict[str, Any]:
        """Forme exposée par l'API (`?drafts=true`)."""
        return {
            "draft": self.draft,
            "published": self.published,
            "hasDraft": self.has_draft,
            "hasPublished": self.has_published,
            "version": self.version,
            "updatedAt": self.updated_at,
            "publishedAt": self.published_at,
        }


def stamp(document: ContentDocument, status: Status, now: str) -> ContentDocument:
    """Applique statut et `updatedAt` aux documents objets; les tableaux restent intacts."""
    if isinstance(document, dict):
        return {**document, "status": status.value, "updatedAt": now}
    return list(document)


def as_published(document: ContentDocument) -> ContentDocument:
    """Réécrit le statut en `published` sans toucher aux horodatages."""
    if isinstance(document, dict):
        return {**document, "status": Status.PUBLISHED.value}
    return list(document)


def extract_document(section: str, body: dict[str, Any] | list[Any]) -> ContentDocument:
    """Extrait le document d'un corps de requête `{...document, status}`.

    Pour les sections à éléments, le tableau peut être fourni sous la clé de la section
    (`{"projects": [...]}`) ou sous `items`.
    """
    if isinstance(body, list):
        return list(body)
    doc = {k: v for k, v in body.items() if k not in ("status", "expectedVersion")}
    if section in ITEM_SECTIONS:
        for field in (section, "items"):
            if isinstance(doc.get(field), list):
                return list(doc[field])
        raise ValidationError(f"{section} document must be an array of items", [section])
    return doc


def same_item_id(item: Any, item_id: str | int) -> bool:
    """Compare les identifiants d'éléments sous forme de chaînes (1 == "1")."""
    return isinstance(item, dict) and str(item.get("id")) == str(item_id)

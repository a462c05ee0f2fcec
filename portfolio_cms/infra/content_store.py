# ============================================================
# Module : portfolio_cms/infra/content_store.py
# Objet  : Magasin de contenu versionné (brouillon / publié).
# Contexte : dernier écrivain gagnant; contrôle optimiste seulement si
#            `expected_version` est fourni.
# ============================================================

from __future__ import annotations

import copy
from collections.abc import Callable
from typing import Any

import structlog

from portfolio_cms.app.metrics import CONTENT_PUBLISH, CONTENT_STORE_ERRORS, CONTENT_WRITES
from portfolio_cms.domain.content import (
    ITEM_SECTIONS,
    ContentDocument,
    ContentKey,
    Status,
    VersionedContent,
    as_published,
    normalize_language,
    normalize_section,
    same_item_id,
    stamp,
    utc_now_iso,
)
from portfolio_cms.domain.defaults import default_content
from portfolio_cms.domain.errors import (
    ConflictError,
    NotFoundError,
    StoreError,
    ValidationError,
)


class ContentStore:
    """Opérations Write / Read / Publish / DeleteItem sur un dépôt de `VersionedContent`.

    Le dépôt fournit `get(section, language)`, `save(entry)`, `list_all()` et `ping()`.
    """

    def __init__(self, repo, clock: Callable[[], str] = utc_now_iso) -> None:
        self.repo = repo
        self._clock = clock
        self._log = structlog.get_logger(__name__).bind(
            component="content_store", backend=getattr(repo, "name", "unknown")
        )

    @property
    def backend_name(self) -> str:
        return getattr(self.repo, "name", "unknown")

    def _load(self, section: str, language: str, operation: str) -> VersionedContent | None:
        try:
            return self.repo.get(section, language)
        except StoreError as err:
            CONTENT_STORE_ERRORS.labels(operation=operation, kind=err.kind).inc()
            raise

    def _persist(self, entry: VersionedContent, operation: str) -> VersionedContent:
        try:
            return self.repo.save(entry)
        except StoreError as err:
            CONTENT_STORE_ERRORS.labels(operation=operation, kind=err.kind).inc()
            self._log.warning(
                "content_store_write_failed",
                section=entry.section,
                language=entry.language,
                error=err.message,
            )
            raise

    def write(
        self,
        key: ContentKey,
        document: ContentDocument,
        expected_version: int | None = None,
    ) -> VersionedContent:
        """Écrase l'emplacement désigné par `key`.

        Une écriture `published` recopie le même document dans le brouillon, de sorte que
        `draft == published` juste après.
        """
        section, language = key.slot
        entry = self._load(section, language, "write") or VersionedContent(section, language)
        if expected_version is not None and expected_version != entry.version:
            CONTENT_STORE_ERRORS.labels(operation="write", kind="conflict").inc()
            raise ConflictError(
                "content was modified by another writer",
                code="version_conflict",
                details={"expected": expected_version, "current": entry.version},
            )

        now = self._clock()
        stored = stamp(document, key.status, now)
        if key.status is Status.PUBLISHED:
            entry.published = stored
            entry.draft = copy.deepcopy(stored)
            entry.published_at = now
        else:
            entry.draft = stored
        entry.version += 1
        entry.updated_at = now
        self._persist(entry, "write")

        CONTENT_WRITES.labels(section=section, status=key.status.value).inc()
        self._log.info("content_written", key=str(key), version=entry.version)
        return entry

    def read(
        self, section: str, language: str | None, include_drafts: bool = False
    ) -> ContentDocument | VersionedContent:
        """Lit le contenu publié (ou les deux versions si `include_drafts`).

        L'absence n'est jamais une erreur: le contenu par défaut de la section est renvoyé.
        """
        name = normalize_section(section)
        lang = normalize_language(name, language)
        entry = self._load(name, lang, "read")
        if include_drafts:
            return entry or VersionedContent(name, lang)
        if entry is None or entry.published is None:
            return default_content(name, lang)
        return entry.published

    def publish(self, section: str, language: str | None) -> VersionedContent:
        """Promeut le brouillon courant en version publiée (NotFoundError sans brouillon)."""
        name = normalize_section(section)
        lang = normalize_language(name, language)
        entry = self._load(name, lang, "publish")
        if entry is None or entry.draft is None:
            CONTENT_STORE_ERRORS.labels(operation="publish", kind="not_found").inc()
            raise NotFoundError(f"no draft to publish for {name}/{lang}")

        doc = as_published(entry.draft)
        entry.published = doc
        entry.draft = copy.deepcopy(doc)
        entry.published_at = self._clock()
        entry.version += 1
        self._persist(entry, "publish")

        CONTENT_PUBLISH.labels(section=name).inc()
        self._log.info("content_published", section=name, language=lang)
        return entry

    def delete_item(self, section: str, language: str, item_id: str | int) -> bool:
        """Retire l'élément `item_id` des tableaux brouillon et publié, indépendamment.

        Retourne True si au moins un tableau a été modifié; un identifiant absent est un no-op.
        """
        name = normalize_section(section)
        if name not in ITEM_SECTIONS:
            raise ValidationError(f"section {name} does not support item deletion")
        lang = normalize_language(name, language)
        entry = self._load(name, lang, "delete_item")
        if entry is None:
            return False

        removed = False
        for attr in ("draft", "published"):
            items = getattr(entry, attr)
            if not isinstance(items, list):
                continue
            kept = [it for it in items if not same_item_id(it, item_id)]
            if len(kept) != len(items):
                setattr(entry, attr, kept)
                removed = True

        if removed:
            entry.version += 1
            entry.updated_at = self._clock()
            self._persist(entry, "delete_item")
            self._log.info(
                "content_item_deleted", section=name, language=lang, item_id=str(item_id)
            )
        return removed

    def upsert_item(
        self,
        section: str,
        language: str,
        item_id: str | int,
        fields: dict[str, Any],
        status: str | Status = Status.DRAFT,
    ) -> dict[str, Any]:
        """Crée ou met à jour un élément du tableau brouillon (et publié si demandé)."""
        key = ContentKey.of(section, language, status)
        if key.section not in ITEM_SECTIONS:
            raise ValidationError(f"section {key.section} does not support item updates")
        entry = self._load(*key.slot, "upsert_item") or VersionedContent(*key.slot)
        patch = {k: v for k, v in fields.items() if k not in ("status", "id")}

        def _apply(items: Any) -> tuple[list[Any], dict[str, Any]]:
            current = list(items) if isinstance(items, list) else []
            for index, it in enumerate(current):
                if same_item_id(it, item_id):
                    merged = {**it, **patch}
                    current[index] = merged
                    return current, merged
            created = {"id": item_id, **patch}
            current.append(created)
            return current, created

        base_draft = entry.draft if entry.draft is not None else entry.published
        entry.draft, item = _apply(base_draft)
        if key.status is Status.PUBLISHED:
            entry.published, item = _apply(entry.published)
            entry.published_at = self._clock()
        entry.version += 1
        entry.updated_at = self._clock()
        self._persist(entry, "upsert_item")

        CONTENT_WRITES.labels(section=key.section, status=key.status.value).inc()
        return copy.deepcopy(item)

    def ping(self) -> bool:
        """Indique si la persistance répond."""
        try:
            return bool(self.repo.ping())
        except StoreError:
            return False

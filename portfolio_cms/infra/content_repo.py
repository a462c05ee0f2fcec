# ============================================================
# Module : portfolio_cms/infra/content_repo.py
# Objet  : Persistance des contenus versionnés (SQL ou mémoire).
# Notes  : une ligne par (section, langue) avec colonnes draft/published.
# ============================================================

from __future__ import annotations

import copy

from sqlalchemy import select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError

from portfolio_cms.domain.content import VersionedContent
from portfolio_cms.domain.errors import StoreUnavailableError
from portfolio_cms.infra.db import get_session_factory, session_scope
from portfolio_cms.infra.models import Base, ContentEntryORM


def _to_domain(row: ContentEntryORM) -> VersionedContent:
    return VersionedContent(
        section=row.section,
        language=row.language,
        draft=copy.deepcopy(row.draft),
        published=copy.deepcopy(row.published),
        version=row.version or 0,
        updated_at=row.updated_at,
        published_at=row.published_at,
    )


class InMemoryContentRepository:
    """
    Dépôt de contenus en mémoire (utilisé pour dev/tests).

    Les entités sont copiées en entrée et en sortie:
    un appelant ne peut pas muter l'état stocké.
    """

    name = "memory"

    def __init__(self) -> None:
        self._db: dict[tuple[str, str], VersionedContent] = {}

    def get(self, section: str, language: str) -> VersionedContent | None:
        found = self._db.get((section, language))
        return copy.deepcopy(found) if found else None

    def save(self, entry: VersionedContent) -> VersionedContent:
        self._db[(entry.section, entry.language)] = copy.deepcopy(entry)
        return entry

    def list_all(self) -> list[VersionedContent]:
        return [copy.deepcopy(v) for v in self._db.values()]

    def ping(self) -> bool:
        return True


class SqlContentRepository:
    """Dépôt de contenus adossé à SQLAlchemy (table `content_entries`)."""

    name = "sql"

    def __init__(self, engine: Engine, create_schema: bool = True) -> None:
        """Construit le dépôt; crée le schéma si demandé (sinon via Alembic)."""
        self._engine = engine
        self._sessions = get_session_factory(engine)
        if create_schema:
            Base.metadata.create_all(engine)

    def get(self, section: str, language: str) -> VersionedContent | None:
        """Retourne l'entité du couple (section, langue), ou None si absente."""
        stmt = select(ContentEntryORM).where(
            ContentEntryORM.section == section, ContentEntryORM.language == language
        )
        try:
            with session_scope(self._sessions) as session:
                row = session.execute(stmt).scalars().first()
                return _to_domain(row) if row else None
        except OperationalError as err:
            raise StoreUnavailableError("content database unreachable") from err

    def save(self, entry: VersionedContent) -> VersionedContent:
        """Insère ou remplace la ligne (dernier écrivain gagnant)."""
        stmt = select(ContentEntryORM).where(
            ContentEntryORM.section == entry.section,
            ContentEntryORM.language == entry.language,
        )
        try:
            with session_scope(self._sessions) as session:
                row = session.execute(stmt).scalars().first()
                if row is None:
                    row = ContentEntryORM(section=entry.section, language=entry.language)
                    session.add(row)
                row.draft = copy.deepcopy(entry.draft)
                row.published = copy.deepcopy(entry.published)
                row.version = entry.version
                row.updated_at = entry.updated_at
                row.published_at = entry.published_at
        except OperationalError as err:
            raise StoreUnavailableError("content database unreachable") from err
        return entry

    def list_all(self) -> list[VersionedContent]:
        """Retourne toutes les entités stockées."""
        try:
            with session_scope(self._sessions) as session:
                rows = session.execute(select(ContentEntryORM)).scalars().all()
                return [_to_domain(r) for r in rows]
        except OperationalError as err:
            raise StoreUnavailableError("content database unreachable") from err

    def ping(self) -> bool:
        """Vérifie la joignabilité de la base (SELECT 1)."""
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except OperationalError:
            return False

"""SQLAlchemy models for the content store (one row per section/language)."""

from __future__ import annotations

from sqlalchemy import (
    JSON,
    Column,
    Integer,
    MetaData,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Classe de base pour tous les modèles SQLAlchemy."""

    metadata = MetaData()


class ContentEntryORM(Base):
    """Contenu versionné: documents brouillon et publié d'un couple section/langue.

    Les horodatages sont conservés en texte ISO-8601 (UTC) pour un aller-retour exact.
    """

    __tablename__ = "content_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    section = Column(String(64), nullable=False)
    language = Column(String(8), nullable=False)
    draft = Column(JSON(none_as_null=True), nullable=True)
    published = Column(JSON(none_as_null=True), nullable=True)
    version = Column(Integer, nullable=False, default=0)
    updated_at = Column(String(40), nullable=True)
    published_at = Column(String(40), nullable=True)

    __table_args__ = (
        UniqueConstraint("section", "language", name="uq_content_section_language"),
    )

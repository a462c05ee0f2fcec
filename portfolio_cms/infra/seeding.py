# ============================================================
# Module : portfolio_cms/infra/seeding.py
# Objet  : Amorçage du magasin de contenu depuis les valeurs par défaut.
# ============================================================

from __future__ import annotations

from collections.abc import Iterable

import structlog

from portfolio_cms.domain.content import (
    GLOBAL_SECTIONS,
    NEUTRAL_LANGUAGE,
    SECTIONS,
    ContentKey,
    Language,
)
from portfolio_cms.domain.defaults import default_content

log = structlog.get_logger(__name__).bind(component="seeding")


def seed_defaults(
    store, force: bool = False, languages: Iterable[str] | None = None
) -> list[str]:
    """Publie le contenu par défaut de chaque emplacement sans version publiée.

    Avec `force=True`, les documents existants sont écrasés. Retourne les clés écrites.
    """
    langs = list(languages) if languages else [lang.value for lang in Language]
    written: list[str] = []
    for section in SECTIONS:
        targets = [NEUTRAL_LANGUAGE] if section in GLOBAL_SECTIONS else langs
        for lang in targets:
            current = store.read(section, lang, include_drafts=True)
            if current.has_published and not force:
                continue
            key = ContentKey.of(section, lang, "published")
            store.write(key, default_content(section, key.language))
            written.append(str(key))
    log.info("content_seeded", count=len(written), force=force)
    return written

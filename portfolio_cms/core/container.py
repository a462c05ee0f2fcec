"""
Conteneur d'injection de dépendances.

Instancie les composants centraux (settings, magasin de contenu, dépôt utilisateurs,
stockage des médias) et expose un singleton `container` utilisé par les routes.
"""

import uuid

import structlog

from portfolio_cms.core.settings import Settings, get_settings
from portfolio_cms.domain.auth import hash_password
from portfolio_cms.infra.content_repo import InMemoryContentRepository, SqlContentRepository
from portfolio_cms.infra.content_store import ContentStore
from portfolio_cms.infra.db import get_engine
from portfolio_cms.infra.media_store import MediaStore
from portfolio_cms.infra.repositories import InMemoryUserRepo, RedisUserRepo

log = structlog.get_logger(__name__).bind(component="container")


class Container:
    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.content_store = ContentStore(self._build_content_repo())
        self.storage_backend = self.content_store.backend_name
        self.user_repo = self._build_user_repo()
        self.media_store = MediaStore(
            root=self.settings.MEDIA_ROOT,
            base_url=self.settings.MEDIA_BASE_URL,
            max_bytes=self.settings.MEDIA_MAX_BYTES,
        )
        self._seed_admin()

    def _build_content_repo(self):
        if self.settings.CONTENT_BACKEND == "memory":
            return InMemoryContentRepository()
        return SqlContentRepository(get_engine(self.settings.DATABASE_URL))

    def _build_user_repo(self):
        if not self.settings.REDIS_URL:
            if self.settings.REQUIRE_REDIS:
                raise RuntimeError("Redis required but REDIS_URL not set")
            return InMemoryUserRepo()
        try:
            return RedisUserRepo(self.settings.REDIS_URL)
        except Exception as err:
            if self.settings.REQUIRE_REDIS:
                raise RuntimeError("Redis required but unavailable") from err
            log.warning("redis_unavailable_user_repo_fallback", error=str(err))
            return InMemoryUserRepo()

    def _seed_admin(self) -> None:
        """Crée le compte administrateur configuré s'il n'existe pas encore."""
        email, password = self.settings.ADMIN_EMAIL, self.settings.ADMIN_PASSWORD
        if not email or not password or self.user_repo.get_by_email(email):
            return
        self.user_repo.save(
            {
                "id": uuid.uuid4().hex,
                "email": email,
                "name": "admin",
                "password_hash": hash_password(password),
            }
        )
        log.info("admin_seeded", email=email)


container = Container()

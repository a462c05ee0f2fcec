"""Définition et chargement des paramètres de configuration applicative.

Objectif du module
------------------
- Centraliser les paramètres (env/.env) via Pydantic Settings
- Résoudre le fichier `.env` à utiliser selon la stratégie: ENV_FILE > .env.{APP_ENV} > .env
- Exposer les paramètres du contrôleur de synchronisation (autosave, timeouts, file d'attente)
"""

import os
from pathlib import Path

from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

_cwd = Path.cwd()
_env_file_from_env = os.getenv("ENV_FILE")
if _env_file_from_env:
    _ENV_FILE_PATH = _env_file_from_env
else:
    _app_env = os.getenv("APP_ENV", "dev")
    _candidate_specific = _cwd / f".env.{_app_env}"
    _candidate_default = _cwd / ".env"
    if _candidate_specific.exists():
        _ENV_FILE_PATH = _candidate_specific
    else:
        _ENV_FILE_PATH = _candidate_default


class Settings(BaseSettings):
    """Modèle de configuration chargé depuis l'environnement et .env."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE_PATH,
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
    )
    APP_NAME: str = "portfolio-cms"
    APP_ENV: str = "dev"
    APP_DEBUG: bool = True
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8000

    CORS_ORIGINS: list[AnyHttpUrl] | list[str] = []
    DATABASE_URL: str | None = None
    REDIS_URL: str | None = None
    REQUIRE_REDIS: bool = False
    CONTENT_BACKEND: str = "sql"  # "sql" | "memory"
    SEED_DEFAULTS: bool = False

    # JWT/Auth
    JWT_SECRET: str = "dev-secret-change-me"
    JWT_ALG: str = "HS256"
    JWT_EXPIRES_MIN: int = 60 * 12
    ADMIN_EMAIL: str | None = None
    ADMIN_PASSWORD: str | None = None

    # Plateforme hébergée (valeurs opaques)
    BACKEND_PROJECT_ID: str | None = None
    PUBLIC_ANON_KEY: str = "public-anon-key"
    SERVICE_ROLE_KEY: str | None = None
    CMS_BASE_URL: str | None = None

    # Médias
    MEDIA_ROOT: str = "media"
    MEDIA_BASE_URL: str = "/media/files"
    MEDIA_MAX_BYTES: int = 10 * 1024 * 1024

    OTLP_ENDPOINT: str | None = None

    # Contrôleur de synchronisation (côté client)
    SYNC_AUTOSAVE_INTERVAL_S: float = 30.0
    SYNC_REQUEST_TIMEOUT_S: float = 10.0
    SYNC_PROBE_TIMEOUT_S: float = 10.0
    SYNC_HEALTH_CHECK_INTERVAL_S: float = 300.0
    SYNC_QUEUE_MAX: int = 100

    def resolve_base_url(self) -> str:
        """Retourne l'URL de base de l'API de contenu.

        `CMS_BASE_URL` est prioritaire; sinon l'URL est dérivée de l'identifiant de projet.
        """
        if self.CMS_BASE_URL:
            return self.CMS_BASE_URL.rstrip("/")
        if self.BACKEND_PROJECT_ID:
            return f"https://{self.BACKEND_PROJECT_ID}.supabase.co/functions/v1/portfolio-cms"
        return f"http://localhost:{self.APP_PORT}"


def get_settings() -> Settings:
    """Construit et retourne la configuration de l'application."""
    return Settings()

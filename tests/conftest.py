"""Configuration de test pour pytest.

Ajoute la racine du projet au sys.path, force le backend de contenu en mémoire et fournit un
conteneur isolé (magasin, comptes, médias) pour chaque test.
"""

import os
import sys

import pytest

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

os.environ.setdefault("CONTENT_BACKEND", "memory")
os.environ.setdefault("APP_ENV", "test")

from portfolio_cms.core.container import container  # noqa: E402
from portfolio_cms.infra.content_repo import InMemoryContentRepository  # noqa: E402
from portfolio_cms.infra.content_store import ContentStore  # noqa: E402
from portfolio_cms.infra.media_store import MediaStore  # noqa: E402
from portfolio_cms.infra.repositories import InMemoryUserRepo  # noqa: E402

TEST_MEDIA_MAX_BYTES = 1024


class FakeClock:
    """Horloge déterministe: chaque appel avance d'une seconde."""

    def __init__(self):
        self.tick = 0

    def __call__(self) -> str:
        self.tick += 1
        return f"2026-01-01T00:00:{self.tick:02d}+00:00"


@pytest.fixture
def store():
    return ContentStore(InMemoryContentRepository(), clock=FakeClock())


@pytest.fixture(autouse=True)
def isolated_container(tmp_path, monkeypatch):
    """Remplace les dépendances du conteneur global par des instances neuves."""
    monkeypatch.setattr(container, "content_store", ContentStore(InMemoryContentRepository()))
    monkeypatch.setattr(container, "user_repo", InMemoryUserRepo())
    monkeypatch.setattr(
        container,
        "media_store",
        MediaStore(tmp_path / "media", "/media/files", TEST_MEDIA_MAX_BYTES),
    )
    return container


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from portfolio_cms.app.main import app

    return TestClient(app)


@pytest.fixture
def auth_headers(client):
    creds = {"email": "admin@example.com", "password": "s3cret-pass", "name": "Admin"}
    client.post("/auth/signup", json=creds)
    r = client.post(
        "/auth/signin", json={"email": creds["email"], "password": creds["password"]}
    )
    return {"Authorization": f"Bearer {r.json()['session']['access_token']}"}

"""Tests de l'amorçage du contenu par défaut."""

from fastapi.testclient import TestClient

from portfolio_cms.domain.content import ContentKey
from portfolio_cms.infra.seeding import seed_defaults


def test_seed_fills_only_missing_published(store):
    store.write(ContentKey.of("home", "en", "published"), {"name": "Mine"})
    written = seed_defaults(store)
    assert "home_en_published" not in written
    assert "home_zh_published" in written
    assert "theme_*_published" in written
    # 7 sections x 2 langues + 2 sections globales, moins la section existante
    assert len(written) == 7 * 2 + 2 - 1
    assert store.read("home", "en")["name"] == "Mine"
    assert store.read("contact", "zh")["status"] == "published"


def test_seed_force_and_language_filter(store):
    store.write(ContentKey.of("home", "en", "published"), {"name": "Mine"})
    written = seed_defaults(store, force=True, languages=["en"])
    assert "home_en_published" in written
    assert not any(key.endswith("_zh_published") for key in written)
    assert store.read("home", "en")["name"] == "Your Name"


def test_startup_seeding_when_enabled(isolated_container, monkeypatch):
    from portfolio_cms.app.main import app

    monkeypatch.setattr(isolated_container.settings, "SEED_DEFAULTS", True)
    with TestClient(app) as client:
        body = client.get("/home/zh", params={"drafts": "true"}).json()
    assert body["hasPublished"] is True

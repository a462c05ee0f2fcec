"""Tests du dépôt SQLAlchemy (SQLite en mémoire)."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from portfolio_cms.domain.content import ContentKey, VersionedContent
from portfolio_cms.domain.errors import StoreUnavailableError
from portfolio_cms.infra.content_repo import SqlContentRepository
from portfolio_cms.infra.content_store import ContentStore
from portfolio_cms.infra.db import get_engine


@pytest.fixture
def repo():
    return SqlContentRepository(get_engine("sqlite+pysqlite:///:memory:"))


def test_save_and_get_round_trip(repo):
    entry = VersionedContent(
        "home", "en", draft={"name": "a", "tags": ["x"]}, version=3, updated_at="t1"
    )
    repo.save(entry)
    got = repo.get("home", "en")
    assert got == entry
    assert repo.get("home", "zh") is None


def test_save_replaces_existing_row(repo):
    repo.save(VersionedContent("projects", "en", draft=[{"id": 1}], version=1))
    repo.save(VersionedContent("projects", "en", draft=[], published=[{"id": 2}], version=2))
    rows = repo.list_all()
    assert len(rows) == 1
    assert rows[0].draft == []
    assert rows[0].published == [{"id": 2}]


def test_store_over_sql_backend(repo):
    store = ContentStore(repo)
    store.write(ContentKey.of("contact", "zh", "published"), {"email": "a@b.c"})
    vc = store.read("contact", "zh", include_drafts=True)
    assert vc.draft == vc.published
    assert store.backend_name == "sql"
    assert store.ping() is True


def test_operational_error_maps_to_unavailable(repo):
    err = OperationalError("SELECT 1", {}, Exception("db down"))
    with patch("portfolio_cms.infra.content_repo.session_scope", side_effect=err):
        with pytest.raises(StoreUnavailableError):
            repo.get("home", "en")

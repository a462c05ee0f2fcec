"""Tests des routes de contenu, d'éléments et de publication."""

from portfolio_cms.core.container import container
from portfolio_cms.core.http_constants import (
    HTTP_CONFLICT,
    HTTP_NOT_FOUND,
    HTTP_OK,
    HTTP_UNPROCESSABLE,
)


def test_public_read_falls_back_to_defaults(client):
    r = client.get("/home/zh")
    assert r.status_code == HTTP_OK
    assert r.json()["name"] == "您的姓名"


def test_draft_save_then_publish_flow(client, auth_headers):
    r = client.post("/home/en", json={"name": "Ada", "status": "draft"}, headers=auth_headers)
    assert r.status_code == HTTP_OK
    assert r.json()["version"] == 1

    # le public voit encore les défauts
    assert client.get("/home/en").json()["name"] == "Your Name"

    r = client.get("/home/en", params={"drafts": "true"})
    body = r.json()
    assert body["hasDraft"] is True and body["hasPublished"] is False
    assert body["draft"]["name"] == "Ada"

    r = client.post("/publish/home/en", headers=auth_headers)
    assert r.status_code == HTTP_OK
    assert client.get("/home/en").json()["name"] == "Ada"
    body = client.get("/home/en", params={"drafts": "true"}).json()
    assert body["draft"] == body["published"]
    assert body["publishedAt"] is not None


def test_publish_without_draft_is_404(client, auth_headers):
    r = client.post("/publish/contact/zh", headers=auth_headers)
    assert r.status_code == HTTP_NOT_FOUND
    assert r.json()["code"] == "NOT_FOUND"


def test_publish_global_section_without_language(client, auth_headers):
    client.post("/settings/site", json={"siteTitle": "Mine"}, headers=auth_headers)
    r = client.post("/publish/settings/site", headers=auth_headers)
    assert r.status_code == HTTP_OK
    assert client.get("/settings/site/en").json()["siteTitle"] == "Mine"

    client.post("/theme/zh", json={"primary": "#111"}, headers=auth_headers)
    assert client.post("/publish/theme", headers=auth_headers).status_code == HTTP_OK
    assert client.get("/theme").json()["primary"] == "#111"


def test_projects_array_body_and_item_routes(client, auth_headers):
    projects = [{"id": 1, "title": "One"}, {"id": 2, "title": "Two"}]
    r = client.post(
        "/projects/en", json={"projects": projects, "status": "published"}, headers=auth_headers
    )
    assert r.status_code == HTTP_OK
    assert client.get("/projects/en").json() == projects

    r = client.put(
        "/projects/en/2", json={"title": "Deux", "status": "published"}, headers=auth_headers
    )
    assert r.status_code == HTTP_OK
    assert r.json()["project"] == {"id": 2, "title": "Deux"}

    r = client.delete("/projects/en/1", headers=auth_headers)
    assert r.status_code == HTTP_OK
    body = client.get("/projects/en", params={"drafts": "true"}).json()
    assert body["draft"] == [{"id": 2, "title": "Deux"}]
    assert body["published"] == [{"id": 2, "title": "Deux"}]


def test_delete_unknown_interest_is_a_noop(client, auth_headers):
    client.post(
        "/interests/zh", json={"items": [{"id": "a", "title": "x"}]}, headers=auth_headers
    )
    r = client.delete("/interests/zh/zzz", headers=auth_headers)
    assert r.status_code == HTTP_OK
    assert client.get("/interests/zh", params={"drafts": "true"}).json()["draft"] == [
        {"id": "a", "title": "x"}
    ]


def test_item_section_requires_an_array(client, auth_headers):
    r = client.post("/projects/en", json={"title": "not a list"}, headers=auth_headers)
    assert r.status_code == HTTP_UNPROCESSABLE
    assert r.json()["code"] == "VALIDATION_ERROR"


def test_unsupported_language_is_rejected(client, auth_headers):
    r = client.post("/home/fr", json={"name": "x"}, headers=auth_headers)
    assert r.status_code == HTTP_UNPROCESSABLE


def test_expected_version_conflict_returns_409(client, auth_headers):
    client.post("/contact/en", json={"email": "a@b.c"}, headers=auth_headers)
    r = client.post(
        "/contact/en", json={"email": "b@b.c", "expectedVersion": 0}, headers=auth_headers
    )
    assert r.status_code == HTTP_CONFLICT
    assert r.json()["code"] == "VERSION_CONFLICT"
    stored = container.content_store.read("contact", "en", include_drafts=True)
    assert stored.draft["email"] == "a@b.c"
    assert "expectedVersion" not in stored.draft

"""Tests pour l'inscription, la connexion et la protection des écritures."""

from portfolio_cms.core.container import container
from portfolio_cms.core.http_constants import HTTP_CONFLICT, HTTP_OK, HTTP_UNAUTHORIZED
from portfolio_cms.domain.auth import create_access_token, decode_token

CREDS = {"email": "editor@example.com", "password": "pw-123456", "name": "Editor"}


def test_signup_then_signin_returns_session(client):
    r = client.post("/auth/signup", json=CREDS)
    assert r.status_code == HTTP_OK
    assert r.json()["user"]["email"] == CREDS["email"]
    assert "password_hash" not in r.json()["user"]

    r = client.post("/auth/signin", json={"email": CREDS["email"], "password": CREDS["password"]})
    assert r.status_code == HTTP_OK
    session = r.json()["session"]
    assert session["token_type"] == "bearer"
    assert session["expires_in"] == container.settings.JWT_EXPIRES_MIN * 60
    data = decode_token(
        session["access_token"], container.settings.JWT_SECRET, container.settings.JWT_ALG
    )
    assert data is not None and data.email == CREDS["email"]


def test_signup_conflict_does_not_create_duplicate(client):
    client.post("/auth/signup", json=CREDS)
    r = client.post("/auth/signup", json={**CREDS, "email": CREDS["email"].upper()})
    assert r.status_code == HTTP_CONFLICT
    body = r.json()
    assert body["user_exists"] is True
    assert body["code"] == "email_exists"
    assert container.user_repo.list_emails() == [CREDS["email"]]


def test_signin_with_bad_password_is_unauthorized(client):
    client.post("/auth/signup", json=CREDS)
    r = client.post("/auth/signin", json={"email": CREDS["email"], "password": "wrong"})
    assert r.status_code == HTTP_UNAUTHORIZED
    assert r.json()["message"] == "invalid_credentials"


def test_write_without_token_is_unauthorized(client):
    r = client.post("/home/en", json={"name": "x"})
    assert r.status_code == HTTP_UNAUTHORIZED
    assert r.json()["code"] == "UNAUTHORIZED"


def test_anon_key_cannot_write_but_can_read(client):
    headers = {"Authorization": f"Bearer {container.settings.PUBLIC_ANON_KEY}"}
    r = client.post("/home/en", json={"name": "x"}, headers=headers)
    assert r.status_code == HTTP_UNAUTHORIZED
    assert r.json()["message"] == "anonymous_key_is_read_only"
    assert client.get("/home/en", headers=headers).status_code == HTTP_OK


def test_invalid_and_orphan_tokens_are_rejected(client):
    r = client.post("/home/en", json={"name": "x"}, headers={"Authorization": "Bearer junk"})
    assert r.json()["message"] == "invalid_token"

    token = create_access_token(
        secret=container.settings.JWT_SECRET,
        alg=container.settings.JWT_ALG,
        expires_min=5,
        payload={"sub": "ghost", "email": "ghost@example.com"},
    )
    r = client.post(
        "/home/en", json={"name": "x"}, headers={"Authorization": f"Bearer {token}"}
    )
    assert r.status_code == HTTP_UNAUTHORIZED
    assert r.json()["message"] == "user_not_found"


def test_expired_token_is_rejected():
    token = create_access_token("s", "HS256", -1, {"sub": "1", "email": "a@example.com"})
    assert decode_token(token, "s", "HS256") is None

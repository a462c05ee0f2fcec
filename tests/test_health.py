"""Tests pour l'endpoint de santé de l'application."""

from portfolio_cms.core.http_constants import HTTP_OK


def test_health(client):
    """Teste que l'endpoint de santé retourne un statut OK et le backend de stockage."""
    r = client.get("/health")
    assert r.status_code == HTTP_OK
    body = r.json()
    assert body["status"] == "OK"
    assert body["storage"] == "memory"
    assert body["storage_ok"] is True
    assert body["timestamp"]


def test_health_carries_request_id_and_timing(client):
    r = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert r.headers["X-Request-ID"] == "req-123"
    assert int(r.headers["X-Process-Time-ms"]) >= 0


def test_unknown_route_uses_error_envelope(client):
    r = client.get("/nope/at/all/here")
    assert r.status_code == 404
    body = r.json()
    assert body["code"] == "NOT_FOUND"
    assert "trace_id" in body

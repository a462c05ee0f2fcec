"""Tests du client HTTP de contenu (httpx.MockTransport)."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from portfolio_cms.domain.errors import (
    ConflictError,
    NotFoundError,
    StoreError,
    StoreUnavailableError,
    UnauthorizedError,
    ValidationError,
)
from portfolio_cms.sync.client import ContentStoreClient

BASE = "https://demo.example.com/functions/v1/portfolio-cms"


def _client(handler) -> ContentStoreClient:
    return ContentStoreClient(BASE, "anon", transport=httpx.MockTransport(handler))


def test_read_uses_anon_key_and_drafts_flag():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"name": "Ada"})

    async def scenario():
        c = _client(handler)
        data = await c.read("home", "zh", include_drafts=True)
        await c.aclose()
        return data

    assert asyncio.run(scenario()) == {"name": "Ada"}
    assert seen[0].url.path == "/functions/v1/portfolio-cms/home/zh"
    assert seen[0].url.params["drafts"] == "true"
    assert seen[0].headers["Authorization"] == "Bearer anon"


def test_write_body_shapes_and_global_paths():
    bodies: dict[str, dict] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        bodies[request.url.path.rsplit("portfolio-cms", 1)[1]] = json.loads(request.content)
        return httpx.Response(200, json={"message": "ok"})

    async def scenario():
        c = _client(handler)
        await c.write("home", "en", {"name": "Ada"}, "published", expected_version=3)
        await c.write("projects", "en", [{"id": 1}])
        await c.write("theme", "en", {"primary": "#000"})
        await c.aclose()

    asyncio.run(scenario())
    assert bodies["/home/en"] == {"name": "Ada", "status": "published", "expectedVersion": 3}
    assert bodies["/projects/en"] == {"projects": [{"id": 1}], "status": "draft"}
    assert bodies["/theme"] == {"primary": "#000", "status": "draft"}


@pytest.mark.parametrize(
    "status,expected",
    [
        (401, UnauthorizedError),
        (403, UnauthorizedError),
        (404, NotFoundError),
        (409, ConflictError),
        (422, ValidationError),
        (400, ValidationError),
        (502, StoreUnavailableError),
        (503, StoreUnavailableError),
        (504, StoreUnavailableError),
        (500, StoreError),
    ],
)
def test_status_codes_map_to_domain_errors(status, expected):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"code": "X", "message": "boom"})

    async def scenario():
        c = _client(handler)
        try:
            await c.publish("home", "en")
        finally:
            await c.aclose()

    with pytest.raises(expected) as exc:
        asyncio.run(scenario())
    assert type(exc.value) is expected
    assert exc.value.message == "boom"


@pytest.mark.parametrize(
    "error", [httpx.ConnectError("refused"), httpx.ReadTimeout("slow")]
)
def test_network_failures_are_unavailable(error):
    def handler(request: httpx.Request) -> httpx.Response:
        raise error

    async def scenario():
        c = _client(handler)
        try:
            await c.health(timeout=0.1)
        finally:
            await c.aclose()

    with pytest.raises(StoreUnavailableError) as exc:
        asyncio.run(scenario())
    assert exc.value.retryable is True


def test_signup_conflict_falls_back_to_signin():
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        if request.url.path.endswith("/auth/signup"):
            return httpx.Response(
                409,
                json={"error": "exists", "code": "email_exists", "user_exists": True},
            )
        return httpx.Response(
            200,
            json={"session": {"access_token": "tok", "token_type": "bearer"}, "user": {}},
        )

    async def scenario():
        c = _client(handler)
        await c.signup_or_signin("a@example.com", "pw")
        token = c.token
        headers = c._headers()
        await c.aclose()
        return token, headers

    token, headers = asyncio.run(scenario())
    assert token == "tok"
    assert headers["Authorization"] == "Bearer tok"
    assert [p.rsplit("/", 1)[1] for p in calls] == ["signup", "signin"]


def test_other_conflicts_are_not_swallowed():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, json={"code": "VERSION_CONFLICT", "message": "stale"})

    async def scenario():
        c = _client(handler)
        try:
            await c.signup_or_signin("a@example.com", "pw")
        finally:
            await c.aclose()

    with pytest.raises(ConflictError) as exc:
        asyncio.run(scenario())
    assert exc.value.code == "version_conflict"


def test_malformed_success_body_is_a_store_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, content=b"<html>proxy</html>", headers={"content-type": "text/html"}
        )

    async def scenario():
        c = _client(handler)
        try:
            await c.read("home", "zh")
        finally:
            await c.aclose()

    with pytest.raises(StoreError) as exc:
        asyncio.run(scenario())
    assert type(exc.value) is StoreError
    assert exc.value.retryable is False


def test_decoding_failure_is_a_store_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.DecodingError("corrupt gzip stream", request=request)

    async def scenario():
        c = _client(handler)
        try:
            await c.read("home", "zh")
        finally:
            await c.aclose()

    with pytest.raises(StoreError) as exc:
        asyncio.run(scenario())
    assert type(exc.value) is StoreError


def test_upload_sends_multipart_file_with_token():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "fileName": "a.png",
                "url": "/media/files/a.png",
                "size": 5,
                "type": "image/png",
            },
        )

    async def scenario():
        c = _client(handler)
        c.token = "tok"
        data = await c.upload("a.png", b"hello", "image/png")
        await c.aclose()
        return data

    data = asyncio.run(scenario())
    assert data["url"] == "/media/files/a.png"
    request = seen[0]
    assert request.method == "POST"
    assert request.url.path.endswith("/upload")
    assert request.headers["content-type"].startswith("multipart/form-data")
    assert request.headers["Authorization"] == "Bearer tok"
    assert b'filename="a.png"' in request.content
    assert b"hello" in request.content

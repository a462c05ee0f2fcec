"""
Client HTTP asynchrone de l'API de contenu (httpx).

Traduit les échecs réseau et les statuts HTTP en erreurs structurées du domaine:
- délai dépassé, erreur de transport, 502/503/504 -> StoreUnavailableError
- 401/403 -> UnauthorizedError
- 404 -> NotFoundError
- 409 -> ConflictError (code renvoyé par le serveur, en minuscules)
- 400/422 -> ValidationError
- autre statut >= 400 -> StoreError
- corps 2xx illisible (JSON invalide, encodage corrompu) -> StoreError
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from portfolio_cms.core.http_constants import (
    HTTP_BAD_REQUEST,
    HTTP_CONFLICT,
    HTTP_FORBIDDEN,
    HTTP_NOT_FOUND,
    HTTP_TRANSIENT_STATUSES,
    HTTP_UNAUTHORIZED,
    HTTP_UNPROCESSABLE,
)
from portfolio_cms.core.settings import Settings
from portfolio_cms.domain.content import (
    GLOBAL_SECTIONS,
    ITEM_SECTIONS,
    ContentDocument,
    normalize_section,
)
from portfolio_cms.domain.errors import (
    ConflictError,
    NotFoundError,
    StoreError,
    StoreUnavailableError,
    UnauthorizedError,
    ValidationError,
)

log = structlog.get_logger(__name__).bind(component="content_client")


def _payload(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def error_from_response(response: httpx.Response) -> StoreError:
    """Construit l'erreur du domaine correspondant à une réponse HTTP en échec."""
    status = response.status_code
    body = _payload(response)
    message = str(body.get("message") or body.get("error") or response.text or status)
    details = body.get("details") if isinstance(body.get("details"), dict) else {}

    if status in HTTP_TRANSIENT_STATUSES:
        return StoreUnavailableError(message, {"status": status})
    if status in (HTTP_UNAUTHORIZED, HTTP_FORBIDDEN):
        return UnauthorizedError(message, {"status": status})
    if status == HTTP_NOT_FOUND:
        return NotFoundError(message, {"status": status})
    if status == HTTP_CONFLICT:
        code = str(body.get("code") or "conflict").lower()
        return ConflictError(message, code=code, details=body)
    if status in (HTTP_BAD_REQUEST, HTTP_UNPROCESSABLE):
        return ValidationError(message, details.get("missing"))
    return StoreError(message, {"status": status})


class ContentStoreClient:
    """Accès distant au magasin de contenu.

    L'en-tête `Authorization` porte le jeton de session s'il existe, sinon la clé anonyme
    publique (lecture seule).
    """

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self.token: str | None = None
        self._client = httpx.AsyncClient(
            base_url=self.base_url, timeout=timeout, transport=transport
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None
    ) -> ContentStoreClient:
        return cls(
            base_url=settings.resolve_base_url(),
            anon_key=settings.PUBLIC_ANON_KEY,
            timeout=settings.SYNC_REQUEST_TIMEOUT_S,
            transport=transport,
        )

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token or self.anon_key}"}

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, str] | None = None,
        files: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> Any:
        kwargs: dict[str, Any] = {"headers": self._headers(), "params": params}
        if json is not None:
            kwargs["json"] = json
        if files is not None:
            kwargs["files"] = files
        if timeout is not None:
            kwargs["timeout"] = timeout
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as err:
            log.warning("content_request_timeout", method=method, path=path)
            raise StoreUnavailableError(f"request timed out: {method} {path}") from err
        except httpx.TransportError as err:
            log.warning("content_request_unreachable", method=method, path=path, error=str(err))
            raise StoreUnavailableError(f"content store unreachable: {err}") from err
        except httpx.DecodingError as err:
            log.warning("content_response_undecodable", method=method, path=path, error=str(err))
            raise StoreError(f"undecodable response: {method} {path}") from err

        if response.status_code >= HTTP_BAD_REQUEST:
            error = error_from_response(response)
            log.info(
                "content_request_failed",
                method=method,
                path=path,
                status=response.status_code,
                kind=error.kind,
            )
            raise error
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as err:
            # page HTML d'un proxy ou d'un portail captif renvoyée en 200
            log.warning(
                "content_response_not_json",
                method=method,
                path=path,
                content_type=response.headers.get("content-type"),
            )
            raise StoreError(
                f"malformed response body: {method} {path}", {"status": response.status_code}
            ) from err

    @staticmethod
    def _path(section: str, language: str | None) -> str:
        name = normalize_section(section)
        if name in GLOBAL_SECTIONS or language is None:
            return f"/{name}"
        return f"/{name}/{language}"

    async def read(
        self, section: str, language: str | None, include_drafts: bool = False
    ) -> Any:
        params = {"drafts": "true"} if include_drafts else None
        return await self._request("GET", self._path(section, language), params=params)

    async def write(
        self,
        section: str,
        language: str | None,
        document: ContentDocument,
        status: str = "draft",
        expected_version: int | None = None,
    ) -> dict[str, Any]:
        name = normalize_section(section)
        if isinstance(document, list):
            # les sections à éléments voyagent sous leur propre clé
            key = name if name in ITEM_SECTIONS else "items"
            body: dict[str, Any] = {key: document, "status": status}
        else:
            body = {**document, "status": status}
        if expected_version is not None:
            body["expectedVersion"] = expected_version
        return await self._request("POST", self._path(name, language), json=body)

    async def publish(self, section: str, language: str | None = None) -> dict[str, Any]:
        return await self._request("POST", "/publish" + self._path(section, language))

    async def delete_item(
        self, section: str, language: str, item_id: str | int
    ) -> dict[str, Any]:
        path = f"{self._path(section, language)}/{item_id}"
        return await self._request("DELETE", path)

    async def upload(
        self, filename: str, content: bytes, content_type: str = "application/octet-stream"
    ) -> dict[str, Any]:
        files = {"file": (filename, content, content_type)}
        return await self._request("POST", "/upload", files=files)

    async def health(self, timeout: float | None = None) -> dict[str, Any]:
        return await self._request("GET", "/health", timeout=timeout)

    async def signup(self, email: str, password: str, name: str | None = None) -> dict[str, Any]:
        body = {"email": email, "password": password, "name": name}
        return await self._request("POST", "/auth/signup", json=body)

    async def signin(self, email: str, password: str) -> dict[str, Any]:
        """Ouvre une session; le jeton est ensuite utilisé pour les écritures."""
        data = await self._request(
            "POST", "/auth/signin", json={"email": email, "password": password}
        )
        self.token = data["session"]["access_token"]
        return data

    async def signup_or_signin(
        self, email: str, password: str, name: str | None = None
    ) -> dict[str, Any]:
        """Inscrit l'utilisateur puis ouvre la session; un email existant bascule en connexion."""
        try:
            await self.signup(email, password, name)
        except ConflictError as err:
            if err.code != "email_exists":
                raise
            log.info("signup_email_exists_fallback_signin", email=email)
        return await self.signin(email, password)

    async def aclose(self) -> None:
        await self._client.aclose()

"""
Routes de contenu du CMS: lecture, écriture, publication et éléments de liste.

Chaque section reçoit ses propres routes explicites (`/{section}/{lang}`; les sections
globales sont aussi exposées sans langue). Les lectures sont publiques, les écritures
exigent un jeton bearer.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends

from portfolio_cms.api.routes_auth import get_current_user
from portfolio_cms.api.schemas import MessageResponse, item_response
from portfolio_cms.core.container import container
from portfolio_cms.domain.content import (
    GLOBAL_SECTIONS,
    ITEM_SECTIONS,
    SECTIONS,
    ContentKey,
    Status,
    VersionedContent,
    extract_document,
)
from portfolio_cms.domain.errors import ValidationError

router = APIRouter(tags=["content"])
publish_router = APIRouter(prefix="/publish", tags=["publish"])


def _expected_version(body: dict[str, Any]) -> int | None:
    value = body.get("expectedVersion")
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("expectedVersion must be an integer", ["expectedVersion"])
    return value


def _read(section: str, lang: str | None, drafts: bool):
    result = container.content_store.read(section, lang, include_drafts=drafts)
    if isinstance(result, VersionedContent):
        return result.to_dict()
    return result


def _write(section: str, lang: str | None, body: Any) -> MessageResponse:
    if not isinstance(body, (dict, list)):
        raise ValidationError("body must be a JSON object or array")
    status, expected = Status.DRAFT.value, None
    if isinstance(body, dict):
        status = body.get("status", Status.DRAFT.value)
        expected = _expected_version(body)
    key = ContentKey.of(section, lang, status)
    document = extract_document(key.section, body)
    entry = container.content_store.write(key, document, expected_version=expected)
    label = "published" if key.status is Status.PUBLISHED else "saved as draft"
    return MessageResponse(
        message=f"{key.section} {label} successfully",
        version=entry.version,
        updatedAt=entry.updated_at,
    )


def _register_section(section: str) -> None:
    name = section.replace("/", "_")

    def read_section(lang: str, drafts: bool = False):
        return _read(section, lang, drafts)

    def write_section(
        lang: str, body: Any = Body(...), _user: dict = Depends(get_current_user)
    ) -> MessageResponse:
        return _write(section, lang, body)

    read_section.__name__ = f"read_{name}"
    write_section.__name__ = f"write_{name}"
    path = f"/{section}/{{lang}}"
    router.add_api_route(path, read_section, methods=["GET"])
    router.add_api_route(path, write_section, methods=["POST"], response_model=MessageResponse)

    if section not in GLOBAL_SECTIONS:
        return

    # sections globales: la langue est facultative
    def read_global(drafts: bool = False):
        return _read(section, None, drafts)

    def write_global(
        body: Any = Body(...), _user: dict = Depends(get_current_user)
    ) -> MessageResponse:
        return _write(section, None, body)

    read_global.__name__ = f"read_{name}_global"
    write_global.__name__ = f"write_{name}_global"
    router.add_api_route(f"/{section}", read_global, methods=["GET"])
    router.add_api_route(
        f"/{section}", write_global, methods=["POST"], response_model=MessageResponse
    )


def _make_item_routes(section: str) -> None:
    path = f"/{section}/{{lang}}/{{item_id}}"

    def upsert_item(
        lang: str,
        item_id: str,
        body: dict[str, Any] = Body(...),
        _user: dict = Depends(get_current_user),
    ):
        status = body.get("status", Status.DRAFT.value)
        item = container.content_store.upsert_item(section, lang, item_id, body, status)
        return item_response(section, item, f"{section} item {item_id} updated successfully")

    def delete_item(lang: str, item_id: str, _user: dict = Depends(get_current_user)):
        removed = container.content_store.delete_item(section, lang, item_id)
        message = f"{section} item {item_id} deleted successfully"
        if not removed:
            message = f"{section} item {item_id} not found, nothing deleted"
        return {"message": message}

    upsert_item.__name__ = f"upsert_{section}_item"
    delete_item.__name__ = f"delete_{section}_item"
    router.add_api_route(path, upsert_item, methods=["PUT"])
    router.add_api_route(path, delete_item, methods=["DELETE"])


for _section in SECTIONS:
    _register_section(_section)
for _section in sorted(ITEM_SECTIONS):
    _make_item_routes(_section)


@publish_router.post("/settings/site", response_model=MessageResponse)
def publish_site_settings(_user: dict = Depends(get_current_user)):
    return _publish("settings/site", None)


@publish_router.post("/{section}/{lang}", response_model=MessageResponse)
def publish_section_language(
    section: str, lang: str, _user: dict = Depends(get_current_user)
):
    """Publie le brouillon d'une section; 404 si aucun brouillon n'existe."""
    return _publish(section, lang)


@publish_router.post("/{section}", response_model=MessageResponse)
def publish_global_section(section: str, _user: dict = Depends(get_current_user)):
    return _publish(section, None)


def _publish(section: str, lang: str | None) -> MessageResponse:
    entry = container.content_store.publish(section, lang)
    return MessageResponse(
        message=f"{entry.section} published successfully",
        version=entry.version,
        updatedAt=entry.updated_at,
    )

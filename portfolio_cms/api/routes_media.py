"""
Routes de téléversement et de liste des médias (authentifiées).
"""

from fastapi import APIRouter, Depends, File, UploadFile

from portfolio_cms.api.routes_auth import get_current_user
from portfolio_cms.api.schemas import UploadResponse
from portfolio_cms.apigw.errors import bad_request
from portfolio_cms.core.container import container
from portfolio_cms.domain.errors import ValidationError

router = APIRouter(tags=["media"])


@router.post("/upload", response_model=UploadResponse)
async def upload(file: UploadFile = File(...), _user: dict = Depends(get_current_user)):
    """Stocke le fichier; 400 si vide ou plus gros que `MEDIA_MAX_BYTES`."""
    content = await file.read()
    try:
        record = container.media_store.save(
            file.filename or "file", content, file.content_type
        )
    except ValidationError as err:
        raise bad_request(err.message, {"missing": err.missing}) from err
    return UploadResponse(
        fileName=record.fileName, url=record.url, size=record.size, type=record.type
    )


@router.get("/media")
def list_media(_user: dict = Depends(get_current_user)):
    return container.media_store.list()

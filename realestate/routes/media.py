"""
Generic media endpoints. `type` selects the folder: "3d" -> models/, anything else -> images/.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from realestate.auth import require_admin
from realestate.dependencies import get_media_service
from realestate.media import MediaService, folder_for_type
from realestate.routes.common import not_found, read_upload
from realestate.schemas import MediaExistsResponse, MediaUploadResponse

router = APIRouter(prefix="/media", tags=["media"])


def _path(media: MediaService, media_type: str, file_name: str) -> str:
    try:
        return media.media_path(media_type, file_name)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.post(
    "/upload/{media_type}",
    response_model=MediaUploadResponse,
    dependencies=[Depends(require_admin)],
)
async def upload_media(
    media_type: str,
    file: UploadFile = File(...),
    media: MediaService = Depends(get_media_service),
):
    upload = await read_upload(file)
    if upload.is_empty:
        raise HTTPException(status_code=400, detail="Empty file")
    url = media.upload_file(upload, folder_for_type(media_type))
    return MediaUploadResponse(url=url, type=media_type)


@router.delete("/{media_type}/{file_name}", dependencies=[Depends(require_admin)])
def delete_media(
    media_type: str, file_name: str, media: MediaService = Depends(get_media_service)
):
    media.delete_file(_path(media, media_type, file_name))
    return {"status": "ok"}


@router.get("/url/{media_type}/{file_name}", response_model=MediaUploadResponse)
def media_url(
    media_type: str, file_name: str, media: MediaService = Depends(get_media_service)
):
    url = media.get_signed_url(_path(media, media_type, file_name))
    if url is None:
        raise not_found("File", file_name)
    return MediaUploadResponse(url=url, type=media_type)


@router.get("/exists/{media_type}/{file_name}", response_model=MediaExistsResponse)
def media_exists(
    media_type: str, file_name: str, media: MediaService = Depends(get_media_service)
):
    return MediaExistsResponse(exists=media.file_exists(_path(media, media_type, file_name)))

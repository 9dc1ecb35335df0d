"""
Floor endpoints: floor records, hotspots and the per-floor image folder.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import JSONResponse

from realestate.auth import require_admin
from realestate.dependencies import get_floor_service, get_media_service
from realestate.errors import EntityNotFoundError
from realestate.media import FloorImageInfo, MediaService
from realestate.models import Floor, Hotspot, from_fields
from realestate.routes.common import not_found, parse_json_part, read_upload
from realestate.schemas import (
    CreatedResponse,
    FloorImageInfoResponse,
    FloorPayload,
    FloorResponse,
    HotspotUpdateRequest,
    ImageActionResponse,
    ImageUploadResponse,
    MultipleImageUploadResponse,
    UploadedImage,
)
from realestate.services import FloorService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/floors", tags=["floors"])


def _to_response(floor: Floor) -> FloorResponse:
    return FloorResponse.model_validate(floor)


def _to_entity(payload: FloorPayload) -> Floor:
    return from_fields(Floor, payload.model_dump())


def _image_info(info: Optional[FloorImageInfo]) -> Optional[FloorImageInfoResponse]:
    return FloorImageInfoResponse.model_validate(info) if info is not None else None


@router.get("", response_model=List[FloorResponse])
def list_floors(service: FloorService = Depends(get_floor_service)):
    return [_to_response(f) for f in service.get_all_floors()]


@router.get("/{floor_id}", response_model=FloorResponse)
def get_floor(floor_id: str, service: FloorService = Depends(get_floor_service)):
    floor = service.get_floor(floor_id)
    if floor is None:
        raise not_found("Floor", floor_id)
    return _to_response(floor)


@router.post("", response_model=CreatedResponse, dependencies=[Depends(require_admin)])
async def create_floor(
    floor: str = Form(...),
    model: Optional[UploadFile] = File(None),
    service: FloorService = Depends(get_floor_service),
):
    payload = parse_json_part(FloorPayload, floor, "floor")
    floor_id = service.create_floor(_to_entity(payload), await read_upload(model))
    return CreatedResponse(id=floor_id)


@router.put("/{floor_id}", dependencies=[Depends(require_admin)])
async def update_floor(
    floor_id: str,
    floor: str = Form(...),
    model: Optional[UploadFile] = File(None),
    service: FloorService = Depends(get_floor_service),
):
    payload = parse_json_part(FloorPayload, floor, "floor")
    try:
        service.update_floor(floor_id, _to_entity(payload), await read_upload(model))
    except EntityNotFoundError as exc:
        raise not_found("Floor", floor_id) from exc
    return {"status": "ok"}


@router.post("/simple", response_model=FloorResponse, dependencies=[Depends(require_admin)])
def create_floor_simple(
    payload: FloorPayload, service: FloorService = Depends(get_floor_service)
):
    floor_id = service.create_floor(_to_entity(payload))
    return _to_response(service.get_floor(floor_id))


@router.put(
    "/{floor_id}/simple",
    response_model=FloorResponse,
    dependencies=[Depends(require_admin)],
)
def update_floor_simple(
    floor_id: str,
    payload: FloorPayload,
    service: FloorService = Depends(get_floor_service),
):
    try:
        service.update_floor(floor_id, _to_entity(payload))
    except EntityNotFoundError as exc:
        raise not_found("Floor", floor_id) from exc
    return _to_response(service.get_floor(floor_id))


@router.put(
    "/{floor_id}/hotspots",
    response_model=FloorResponse,
    dependencies=[Depends(require_admin)],
)
def update_hotspots(
    floor_id: str,
    payload: HotspotUpdateRequest,
    service: FloorService = Depends(get_floor_service),
):
    top_view = None
    if payload.top_view_hotspots is not None:
        top_view = [from_fields(Hotspot, h.model_dump()) for h in payload.top_view_hotspots]
    angles = None
    if payload.angle_hotspots is not None:
        angles = {
            angle: [from_fields(Hotspot, h.model_dump()) for h in hotspots]
            for angle, hotspots in payload.angle_hotspots.items()
        }
    try:
        floor = service.update_hotspots(floor_id, top_view, angles)
    except EntityNotFoundError as exc:
        raise not_found("Floor", floor_id) from exc
    return _to_response(floor)


@router.delete("/{floor_id}", dependencies=[Depends(require_admin)])
def delete_floor(floor_id: str, service: FloorService = Depends(get_floor_service)):
    service.delete_floor(floor_id)
    return {"status": "ok"}


# Floor images under floors/{floor_id}/


@router.get("/{floor_id}/images", response_model=List[str])
def list_floor_images(floor_id: str, media: MediaService = Depends(get_media_service)):
    return media.list_floor_images(floor_id)


@router.post(
    "/{floor_id}/images", response_model=List[str], dependencies=[Depends(require_admin)]
)
async def upload_floor_images(
    floor_id: str,
    files: List[UploadFile] = File(...),
    media: MediaService = Depends(get_media_service),
):
    urls = []
    for file in files:
        upload = await read_upload(file)
        try:
            urls.append(media.upload_floor_image(floor_id, upload))
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
    return urls


@router.get("/{floor_id}/images/details", response_model=List[FloorImageInfoResponse])
def list_floor_image_details(
    floor_id: str, media: MediaService = Depends(get_media_service)
):
    return [_image_info(info) for info in media.list_floor_image_details(floor_id)]


@router.post(
    "/{floor_id}/images/upload",
    response_model=ImageUploadResponse,
    dependencies=[Depends(require_admin)],
)
async def upload_floor_image(
    floor_id: str,
    file: UploadFile = File(...),
    file_name: Optional[str] = Form(None, alias="fileName"),
    media: MediaService = Depends(get_media_service),
):
    upload = await read_upload(file)
    try:
        download_url = media.upload_floor_image(floor_id, upload, file_name)
        info = media.get_floor_image_info(floor_id, file_name or upload.filename)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ImageUploadResponse(
        success=True, download_url=download_url, image_info=_image_info(info)
    )


@router.post(
    "/{floor_id}/images/upload-multiple",
    response_model=MultipleImageUploadResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(require_admin)],
)
async def upload_multiple_floor_images(
    floor_id: str,
    files: List[UploadFile] = File(...),
    media: MediaService = Depends(get_media_service),
):
    uploaded: List[UploadedImage] = []
    errors: List[str] = []
    for file in files:
        upload = await read_upload(file)
        try:
            download_url = media.upload_floor_image(floor_id, upload)
            info = media.get_floor_image_info(floor_id, upload.filename)
        except Exception as exc:
            # One bad file does not abort the batch.
            logger.warning("Failed to upload %s for floor %s: %s", upload.filename, floor_id, exc)
            errors.append(f"Failed to upload {upload.filename}: {exc}")
            continue
        uploaded.append(
            UploadedImage(
                file_name=upload.filename,
                download_url=download_url,
                image_info=_image_info(info),
            )
        )
    return MultipleImageUploadResponse(
        success=not errors,
        uploaded_images=uploaded,
        uploaded_count=len(uploaded),
        total_count=len(files),
        errors=errors or None,
    )


@router.get("/{floor_id}/images/{file_name}/info", response_model=FloorImageInfoResponse)
def get_floor_image_info(
    floor_id: str, file_name: str, media: MediaService = Depends(get_media_service)
):
    try:
        info = media.get_floor_image_info(floor_id, file_name)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if info is None:
        raise not_found("Image", file_name)
    return _image_info(info)


@router.delete(
    "/{floor_id}/images/{file_name}",
    response_model=ImageActionResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(require_admin)],
)
def delete_floor_image(
    floor_id: str, file_name: str, media: MediaService = Depends(get_media_service)
):
    try:
        deleted = media.delete_floor_image(floor_id, file_name)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if not deleted:
        body = ImageActionResponse(success=False, message="Failed to delete image")
        return JSONResponse(status_code=400, content=body.model_dump(by_alias=True, exclude_none=True))
    return ImageActionResponse(success=True, message="Image deleted successfully")


@router.put(
    "/{floor_id}/images/{file_name}/rename",
    response_model=ImageActionResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(require_admin)],
)
def rename_floor_image(
    floor_id: str,
    file_name: str,
    new_file_name: str = Query(..., alias="newFileName"),
    media: MediaService = Depends(get_media_service),
):
    try:
        renamed = media.rename_floor_image(floor_id, file_name, new_file_name)
        info = media.get_floor_image_info(floor_id, new_file_name) if renamed else None
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if not renamed:
        body = ImageActionResponse(success=False, message="Failed to rename image")
        return JSONResponse(status_code=400, content=body.model_dump(by_alias=True, exclude_none=True))
    return ImageActionResponse(
        success=True, message="Image renamed successfully", image_info=_image_info(info)
    )

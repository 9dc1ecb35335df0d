"""
Apartment endpoints, including the apartment picture gallery.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile

from realestate.auth import require_admin
from realestate.dependencies import get_apartment_service, get_picture_service
from realestate.errors import EntityNotFoundError
from realestate.models import Apartment, ApartmentStatus, from_fields
from realestate.routes.common import not_found, parse_json_part, read_upload
from realestate.schemas import (
    ApartmentPayload,
    ApartmentResponse,
    CreatedResponse,
    PictureOrderRequest,
    PictureResponse,
    PictureUploadResponse,
)
from realestate.services import ApartmentService, PictureService

router = APIRouter(prefix="/apartments", tags=["apartments"])


def _to_response(apartment: Apartment) -> ApartmentResponse:
    return ApartmentResponse.model_validate(apartment)


def _to_entity(payload: ApartmentPayload) -> Apartment:
    return from_fields(Apartment, payload.model_dump())


@router.get("", response_model=List[ApartmentResponse])
def list_apartments(service: ApartmentService = Depends(get_apartment_service)):
    return [_to_response(a) for a in service.get_all_apartments()]


@router.get("/price", response_model=List[ApartmentResponse])
def apartments_by_price(
    min_price: Decimal = Query(..., alias="minPrice", ge=0),
    max_price: Decimal = Query(..., alias="maxPrice", ge=0),
    service: ApartmentService = Depends(get_apartment_service),
):
    if min_price > max_price:
        raise HTTPException(status_code=400, detail="minPrice must not exceed maxPrice")
    return [_to_response(a) for a in service.get_apartments_by_price_range(min_price, max_price)]


@router.get("/status/{status}", response_model=List[ApartmentResponse])
def apartments_by_status(
    status: ApartmentStatus, service: ApartmentService = Depends(get_apartment_service)
):
    return [_to_response(a) for a in service.get_apartments_by_status(status)]


@router.get("/floor/{floor_id}", response_model=List[ApartmentResponse])
def apartments_by_floor(
    floor_id: str, service: ApartmentService = Depends(get_apartment_service)
):
    return [_to_response(a) for a in service.get_apartments_by_floor_id(floor_id)]


@router.get("/type/{apartment_type}", response_model=List[ApartmentResponse])
def apartments_by_type(
    apartment_type: str, service: ApartmentService = Depends(get_apartment_service)
):
    return [_to_response(a) for a in service.get_apartments_by_type(apartment_type)]


@router.get("/{apartment_id}", response_model=ApartmentResponse)
def get_apartment(
    apartment_id: str, service: ApartmentService = Depends(get_apartment_service)
):
    apartment = service.get_apartment(apartment_id)
    if apartment is None:
        raise not_found("Apartment", apartment_id)
    return _to_response(apartment)


@router.post("", response_model=CreatedResponse, dependencies=[Depends(require_admin)])
async def create_apartment(
    apartment: str = Form(...),
    model: Optional[UploadFile] = File(None),
    service: ApartmentService = Depends(get_apartment_service),
):
    payload = parse_json_part(ApartmentPayload, apartment, "apartment")
    apartment_id = service.create_apartment(_to_entity(payload), await read_upload(model))
    return CreatedResponse(id=apartment_id)


@router.put("/{apartment_id}", dependencies=[Depends(require_admin)])
async def update_apartment(
    apartment_id: str,
    apartment: str = Form(...),
    model: Optional[UploadFile] = File(None),
    service: ApartmentService = Depends(get_apartment_service),
):
    payload = parse_json_part(ApartmentPayload, apartment, "apartment")
    try:
        service.update_apartment(apartment_id, _to_entity(payload), await read_upload(model))
    except EntityNotFoundError as exc:
        raise not_found("Apartment", apartment_id) from exc
    return {"status": "ok"}


@router.post(
    "/simple", response_model=ApartmentResponse, dependencies=[Depends(require_admin)]
)
def create_apartment_simple(
    payload: ApartmentPayload, service: ApartmentService = Depends(get_apartment_service)
):
    apartment_id = service.create_apartment(_to_entity(payload))
    return _to_response(service.get_apartment(apartment_id))


@router.put(
    "/{apartment_id}/simple",
    response_model=ApartmentResponse,
    dependencies=[Depends(require_admin)],
)
def update_apartment_simple(
    apartment_id: str,
    payload: ApartmentPayload,
    service: ApartmentService = Depends(get_apartment_service),
):
    try:
        service.update_apartment(apartment_id, _to_entity(payload))
    except EntityNotFoundError as exc:
        raise not_found("Apartment", apartment_id) from exc
    return _to_response(service.get_apartment(apartment_id))


@router.delete("/{apartment_id}", dependencies=[Depends(require_admin)])
def delete_apartment(
    apartment_id: str,
    service: ApartmentService = Depends(get_apartment_service),
    pictures: PictureService = Depends(get_picture_service),
):
    if service.get_apartment(apartment_id) is None:
        raise not_found("Apartment", apartment_id)
    pictures.delete_all_pictures_for_apartment(apartment_id)
    service.delete_apartment(apartment_id)
    return {"status": "ok"}


# Pictures


@router.get("/{apartment_id}/pictures", response_model=List[PictureResponse])
def list_pictures(
    apartment_id: str, pictures: PictureService = Depends(get_picture_service)
):
    return [
        PictureResponse.model_validate(p)
        for p in pictures.get_pictures_by_apartment(apartment_id)
    ]


@router.post(
    "/{apartment_id}/pictures",
    response_model=PictureUploadResponse,
    dependencies=[Depends(require_admin)],
)
async def upload_pictures(
    apartment_id: str,
    files: List[UploadFile] = File(...),
    picture_type: Optional[str] = Form(None, alias="type"),
    service: ApartmentService = Depends(get_apartment_service),
    pictures: PictureService = Depends(get_picture_service),
):
    if service.get_apartment(apartment_id) is None:
        raise not_found("Apartment", apartment_id)
    uploads = [await read_upload(file) for file in files]
    ids = pictures.upload_pictures(
        apartment_id, [u for u in uploads if not u.is_empty], picture_type=picture_type
    )
    return PictureUploadResponse(ids=ids)


@router.put("/{apartment_id}/pictures/order", dependencies=[Depends(require_admin)])
def reorder_pictures(
    apartment_id: str,
    payload: PictureOrderRequest,
    pictures: PictureService = Depends(get_picture_service),
):
    pictures.reorder_pictures(apartment_id, payload.picture_ids)
    return {"status": "ok"}


@router.delete(
    "/{apartment_id}/pictures/{picture_id}", dependencies=[Depends(require_admin)]
)
def delete_picture(
    apartment_id: str,
    picture_id: str,
    pictures: PictureService = Depends(get_picture_service),
):
    picture = pictures.get_picture(picture_id)
    if picture is None or picture.apartment_id != apartment_id:
        raise not_found("Picture", picture_id)
    pictures.delete_picture(picture_id)
    return {"status": "ok"}

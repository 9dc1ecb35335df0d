"""
Buyer endpoints. Creating a buyer is public (contact form); everything else is admin-only.
"""

from __future__ import annotations

from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from realestate.auth import require_admin
from realestate.dependencies import get_buyer_service
from realestate.errors import EntityNotFoundError
from realestate.models import Buyer, BuyerStatus, from_fields
from realestate.routes.common import not_found
from realestate.schemas import BuyerPayload, BuyerResponse, CreatedResponse
from realestate.services import BuyerService

router = APIRouter(prefix="/buyers", tags=["buyers"])

admin_only = [Depends(require_admin)]


def _to_response(buyer: Buyer) -> BuyerResponse:
    return BuyerResponse.model_validate(buyer)


def _to_entity(payload: BuyerPayload) -> Buyer:
    return from_fields(Buyer, payload.model_dump())


@router.post("", response_model=CreatedResponse)
def create_buyer(payload: BuyerPayload, service: BuyerService = Depends(get_buyer_service)):
    return CreatedResponse(id=service.create_buyer(_to_entity(payload)))


@router.get("", response_model=List[BuyerResponse], dependencies=admin_only)
def list_buyers(service: BuyerService = Depends(get_buyer_service)):
    return [_to_response(b) for b in service.get_all_buyers()]


@router.get("/date-range", response_model=List[BuyerResponse], dependencies=admin_only)
def buyers_by_date_range(
    start_date: datetime = Query(..., alias="startDate"),
    end_date: datetime = Query(..., alias="endDate"),
    service: BuyerService = Depends(get_buyer_service),
):
    try:
        buyers = service.get_buyers_by_date_range(start_date, end_date)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="startDate must not be after endDate") from exc
    return [_to_response(b) for b in buyers]


@router.get("/status/{status}", response_model=List[BuyerResponse], dependencies=admin_only)
def buyers_by_status(status: BuyerStatus, service: BuyerService = Depends(get_buyer_service)):
    return [_to_response(b) for b in service.get_buyers_by_status(status)]


@router.get(
    "/apartment/{apartment_id}", response_model=List[BuyerResponse], dependencies=admin_only
)
def buyers_by_apartment(
    apartment_id: str, service: BuyerService = Depends(get_buyer_service)
):
    return [_to_response(b) for b in service.get_buyers_by_apartment(apartment_id)]


@router.get("/{buyer_id}", response_model=BuyerResponse, dependencies=admin_only)
def get_buyer(buyer_id: str, service: BuyerService = Depends(get_buyer_service)):
    buyer = service.get_buyer(buyer_id)
    if buyer is None:
        raise not_found("Buyer", buyer_id)
    return _to_response(buyer)


@router.put("/{buyer_id}", dependencies=admin_only)
def update_buyer(
    buyer_id: str,
    payload: BuyerPayload,
    service: BuyerService = Depends(get_buyer_service),
):
    try:
        service.update_buyer(buyer_id, _to_entity(payload))
    except EntityNotFoundError as exc:
        raise not_found("Buyer", buyer_id) from exc
    return {"status": "ok"}


@router.delete("/{buyer_id}", dependencies=admin_only)
def delete_buyer(buyer_id: str, service: BuyerService = Depends(get_buyer_service)):
    service.delete_buyer(buyer_id)
    return {"status": "ok"}

"""
Pydantic schemas for the real-estate REST API. JSON field names are camelCase.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from realestate.models import ApartmentStatus, BuyerStatus

# Decimal stays exact in the model but is written to JSON as a number.
Price = Annotated[
    Decimal, Field(ge=0), PlainSerializer(float, return_type=float, when_used="json")
]
Percent = Annotated[float, Field(ge=0, le=100)]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class HotspotSchema(CamelModel):
    apartment_id: Optional[str] = None
    x: Percent
    y: Percent
    width: Optional[Percent] = None
    height: Optional[Percent] = None
    id: Optional[str] = None
    label: Optional[str] = None


class FloorPayload(CamelModel):
    name: Optional[str] = None
    level: Optional[int] = None
    floor_number: Optional[int] = None
    building_id: Optional[str] = None
    area: Optional[float] = None
    description: Optional[str] = None
    total_apartments: Optional[int] = None
    floor_plan_url: Optional[str] = None
    # to_camel would produce "model3DUrl"
    model3d_url: Optional[str] = Field(default=None, alias="model3dUrl")
    image_urls: Optional[List[str]] = None
    apartment_ids: Optional[List[str]] = None
    top_view_hotspots: Optional[List[HotspotSchema]] = None
    angle_hotspots: Optional[Dict[str, List[HotspotSchema]]] = None


class FloorResponse(FloorPayload):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class HotspotUpdateRequest(CamelModel):
    top_view_hotspots: Optional[List[HotspotSchema]] = None
    angle_hotspots: Optional[Dict[str, List[HotspotSchema]]] = None


class ApartmentPayload(CamelModel):
    floor_id: Optional[str] = None
    lot_number: Optional[str] = None
    type: Optional[str] = None
    area: Optional[float] = None
    price: Optional[Price] = None
    status: Optional[ApartmentStatus] = None
    description: Optional[str] = None
    media_urls: Optional[List[str]] = None
    model3d_url: Optional[str] = Field(default=None, alias="model3dUrl")


class ApartmentResponse(ApartmentPayload):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BuyerPayload(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    status: Optional[BuyerStatus] = None
    interested_apartment_ids: Optional[List[str]] = None
    budget: Optional[float] = None
    notes: Optional[str] = None
    contact_date: Optional[datetime] = None


class BuyerResponse(BuyerPayload):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserPayload(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None
    enabled: Optional[bool] = None


class UserResponse(CamelModel):
    """Never carries the password hash."""

    id: str
    email: Optional[str] = None
    role: Optional[str] = None
    enabled: Optional[bool] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PictureResponse(CamelModel):
    id: str
    apartment_id: Optional[str] = None
    url: Optional[str] = None
    type: Optional[str] = None
    order: Optional[int] = None
    created_at: Optional[datetime] = None


class PictureOrderRequest(CamelModel):
    picture_ids: List[str]


class PictureUploadResponse(CamelModel):
    ids: List[str]


class LoginRequest(CamelModel):
    email: str
    password: str


class RegisterRequest(CamelModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)
    # Accepted for compatibility; self-registration always creates ROLE_USER.
    role: Optional[str] = None


class TokenResponse(CamelModel):
    token: str


class RegisterResponse(CamelModel):
    token: str
    user_id: str


class CreatedResponse(CamelModel):
    id: str


class MediaUploadResponse(CamelModel):
    url: str
    type: str


class MediaExistsResponse(CamelModel):
    exists: bool


class FloorImageInfoResponse(CamelModel):
    name: str
    full_path: str
    download_url: str
    size: int
    content_type: Optional[str] = None
    upload_date: datetime
    is_image: bool


class ImageUploadResponse(CamelModel):
    success: bool
    download_url: str
    image_info: Optional[FloorImageInfoResponse] = None


class UploadedImage(CamelModel):
    file_name: str
    download_url: str
    image_info: Optional[FloorImageInfoResponse] = None


class MultipleImageUploadResponse(CamelModel):
    success: bool
    uploaded_images: List[UploadedImage]
    uploaded_count: int
    total_count: int
    errors: Optional[List[str]] = None


class ImageActionResponse(CamelModel):
    success: bool
    message: str
    image_info: Optional[FloorImageInfoResponse] = None

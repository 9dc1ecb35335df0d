"""
Entity dataclasses and their translation to and from stored documents.

Every field defaults to None so that a partially filled entity can be passed
to a repository update as a patch: only non-None fields are written.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, is_dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum, StrEnum
from typing import Any, Dict, List, Optional, Type, TypeVar

from dacite import Config, from_dict

T = TypeVar("T")


class ApartmentStatus(StrEnum):
    AVAILABLE = "AVAILABLE"
    RESERVED = "RESERVED"
    SOLD = "SOLD"
    UNDER_CONSTRUCTION = "UNDER_CONSTRUCTION"


class BuyerStatus(StrEnum):
    INTERESTED = "INTERESTED"
    NEGOTIATING = "NEGOTIATING"
    PURCHASED = "PURCHASED"
    CANCELLED = "CANCELLED"


class UserRole(StrEnum):
    ADMIN = "ROLE_ADMIN"
    USER = "ROLE_USER"

    @classmethod
    def parse(cls, value: Optional[str]) -> "UserRole":
        """Accepts both "ADMIN" and "ROLE_ADMIN" spellings; defaults to USER."""
        if not value:
            return cls.USER
        normalized = value.strip().upper()
        if not normalized.startswith("ROLE_"):
            normalized = f"ROLE_{normalized}"
        return cls(normalized)


@dataclass
class Hotspot:
    """Clickable region on a floor plan image, positioned in percent (0-100)."""

    apartment_id: Optional[str] = None
    x: Optional[float] = None
    y: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    id: Optional[str] = None
    label: Optional[str] = None


@dataclass
class Floor:
    id: Optional[str] = None
    name: Optional[str] = None
    level: Optional[int] = None
    floor_number: Optional[int] = None
    building_id: Optional[str] = None
    area: Optional[float] = None
    description: Optional[str] = None
    total_apartments: Optional[int] = None
    floor_plan_url: Optional[str] = None
    model3d_url: Optional[str] = None
    image_urls: Optional[List[str]] = None
    # Denormalized apartment ids; not kept in sync with the apartments collection.
    apartment_ids: Optional[List[str]] = None
    top_view_hotspots: Optional[List[Hotspot]] = None
    # Keyed by view-angle label (e.g. the image number "1", "2").
    angle_hotspots: Optional[Dict[str, List[Hotspot]]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Apartment:
    id: Optional[str] = None
    floor_id: Optional[str] = None
    lot_number: Optional[str] = None
    type: Optional[str] = None
    area: Optional[float] = None
    price: Optional[Decimal] = None
    status: Optional[ApartmentStatus] = None
    description: Optional[str] = None
    media_urls: Optional[List[str]] = None
    model3d_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Buyer:
    id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    status: Optional[BuyerStatus] = None
    interested_apartment_ids: Optional[List[str]] = None
    budget: Optional[float] = None
    notes: Optional[str] = None
    contact_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class User:
    id: Optional[str] = None
    email: Optional[str] = None
    # bcrypt hash once persisted
    password: Optional[str] = None
    role: Optional[str] = None
    enabled: Optional[bool] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Picture:
    id: Optional[str] = None
    apartment_id: Optional[str] = None
    url: Optional[str] = None
    type: Optional[str] = None
    order: Optional[int] = None
    created_at: Optional[datetime] = None


def snake_to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _to_decimal(value: Any) -> Any:
    if value is None or isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _dacite_config(camel_case: bool) -> Config:
    return Config(
        check_types=False,
        cast=[Enum],
        type_hooks={Decimal: _to_decimal},
        convert_key=snake_to_camel if camel_case else (lambda key: key),
    )


def encode_value(value: Any) -> Any:
    """Converts a Python value into something a document store accepts."""
    if is_dataclass(value) and not isinstance(value, type):
        return to_document(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [encode_value(item) for item in value]
    if isinstance(value, dict):
        # Mapping keys are data (e.g. angle labels), not field names.
        return {key: encode_value(item) for key, item in value.items()}
    return value


def to_document(entity: Any, *, skip_none: bool = False) -> dict:
    """Dataclass -> camelCase document fields."""
    document = {}
    for field in fields(entity):
        value = getattr(entity, field.name)
        if skip_none and value is None:
            continue
        document[snake_to_camel(field.name)] = encode_value(value)
    return document


def from_document(entity_class: Type[T], data: dict) -> T:
    """camelCase document fields -> dataclass; unknown fields are ignored."""
    return from_dict(data_class=entity_class, data=data, config=_dacite_config(True))


def from_fields(entity_class: Type[T], data: dict) -> T:
    """snake_case mapping (e.g. a pydantic dump) -> dataclass."""
    return from_dict(data_class=entity_class, data=data, config=_dacite_config(False))

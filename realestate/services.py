"""
Domain services for floors, apartments, buyers and pictures.

Services stamp timestamps, orchestrate blob uploads/deletions through the
MediaService and delegate persistence to the repositories. Multi-step
operations are not transactional.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional

from realestate.errors import EntityNotFoundError
from realestate.media import MediaService, UploadedFile
from realestate.models import (
    Apartment,
    ApartmentStatus,
    Buyer,
    BuyerStatus,
    Floor,
    Hotspot,
    Picture,
)
from realestate.repository import (
    ApartmentRepository,
    BuyerRepository,
    FloorRepository,
    PictureRepository,
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def _has_content(file: Optional[UploadedFile]) -> bool:
    return file is not None and not file.is_empty


class FloorService:
    def __init__(self, repository: FloorRepository, media: MediaService):
        self.repository = repository
        self.media = media

    def get_all_floors(self) -> List[Floor]:
        return self.repository.find_all()

    def get_floor(self, floor_id: str) -> Optional[Floor]:
        return self.repository.find_by_id(floor_id)

    def create_floor(self, floor: Floor, model_file: Optional[UploadedFile] = None) -> str:
        floor.created_at = _now()
        floor.updated_at = _now()
        if _has_content(model_file):
            floor.model3d_url = self.media.upload_asset(model_file)
        return self.repository.save(floor)

    def update_floor(
        self, floor_id: str, floor: Floor, model_file: Optional[UploadedFile] = None
    ) -> None:
        floor.id = floor_id
        floor.updated_at = _now()
        if _has_content(model_file):
            existing = self.repository.find_by_id(floor_id)
            if existing is None:
                raise EntityNotFoundError("Floor", floor_id)
            if existing.model3d_url:
                self.media.delete_by_url_quietly(existing.model3d_url)
            floor.model3d_url = self.media.upload_asset(model_file)
        self.repository.update(floor_id, floor)

    def delete_floor(self, floor_id: str) -> None:
        floor = self.repository.find_by_id(floor_id)
        if floor is not None and floor.model3d_url:
            self.media.delete_by_url_quietly(floor.model3d_url)
        self.repository.delete(floor_id)

    def update_hotspots(
        self,
        floor_id: str,
        top_view: Optional[List[Hotspot]],
        angle_hotspots: Optional[Dict[str, List[Hotspot]]],
    ) -> Floor:
        """Replaces whichever hotspot collection is supplied; the other is kept."""
        floor = self.repository.find_by_id(floor_id)
        if floor is None:
            raise EntityNotFoundError("Floor", floor_id)
        patch = Floor(updated_at=_now())
        if top_view is not None:
            patch.top_view_hotspots = top_view
        if angle_hotspots is not None:
            patch.angle_hotspots = angle_hotspots
        self.repository.update(floor_id, patch)
        return self.repository.find_by_id(floor_id)


class ApartmentService:
    def __init__(self, repository: ApartmentRepository, media: MediaService):
        self.repository = repository
        self.media = media

    def get_all_apartments(self) -> List[Apartment]:
        return self.repository.find_all()

    def get_apartment(self, apartment_id: str) -> Optional[Apartment]:
        return self.repository.find_by_id(apartment_id)

    def create_apartment(
        self, apartment: Apartment, model_file: Optional[UploadedFile] = None
    ) -> str:
        apartment.created_at = _now()
        apartment.updated_at = _now()
        if _has_content(model_file):
            apartment.model3d_url = self.media.upload_asset(model_file)
        return self.repository.save(apartment)

    def update_apartment(
        self,
        apartment_id: str,
        apartment: Apartment,
        model_file: Optional[UploadedFile] = None,
    ) -> None:
        apartment.id = apartment_id
        apartment.updated_at = _now()
        if _has_content(model_file):
            existing = self.repository.find_by_id(apartment_id)
            if existing is None:
                raise EntityNotFoundError("Apartment", apartment_id)
            if existing.model3d_url:
                self.media.delete_by_url_quietly(existing.model3d_url)
            apartment.model3d_url = self.media.upload_asset(model_file)
        self.repository.update(apartment_id, apartment)

    def delete_apartment(self, apartment_id: str) -> None:
        apartment = self.repository.find_by_id(apartment_id)
        if apartment is not None and apartment.model3d_url:
            self.media.delete_by_url_quietly(apartment.model3d_url)
        self.repository.delete(apartment_id)

    def get_apartments_by_status(self, status: ApartmentStatus) -> List[Apartment]:
        return self.repository.find_by_field("status", status)

    def get_apartments_by_floor_id(self, floor_id: str) -> List[Apartment]:
        return self.repository.find_by_field("floor_id", floor_id)

    def get_apartments_by_type(self, apartment_type: str) -> List[Apartment]:
        return self.repository.find_by_field("type", apartment_type)

    def get_apartments_by_price_range(
        self, min_price: Decimal, max_price: Decimal
    ) -> List[Apartment]:
        # Filtered in memory: the store only offers equality queries.
        return [
            apartment
            for apartment in self.repository.find_all()
            if apartment.price is not None and min_price <= apartment.price <= max_price
        ]


class BuyerService:
    def __init__(self, repository: BuyerRepository):
        self.repository = repository

    def create_buyer(self, buyer: Buyer) -> str:
        buyer.created_at = _now()
        buyer.updated_at = _now()
        return self.repository.save(buyer)

    def get_buyer(self, buyer_id: str) -> Optional[Buyer]:
        return self.repository.find_by_id(buyer_id)

    def get_all_buyers(self) -> List[Buyer]:
        return self.repository.find_all()

    def get_buyers_by_status(self, status: BuyerStatus) -> List[Buyer]:
        return self.repository.find_by_field("status", status)

    def get_buyers_by_apartment(self, apartment_id: str) -> List[Buyer]:
        return [
            buyer
            for buyer in self.repository.find_all()
            if apartment_id in (buyer.interested_apartment_ids or [])
        ]

    def update_buyer(self, buyer_id: str, buyer: Buyer) -> None:
        buyer.updated_at = _now()
        self.repository.update(buyer_id, buyer)

    def delete_buyer(self, buyer_id: str) -> None:
        self.repository.delete(buyer_id)

    def get_buyers_by_date_range(self, start: datetime, end: datetime) -> List[Buyer]:
        """Buyers created within [start, end], compared at second granularity."""
        start_ts = int(_as_utc(start).timestamp())
        end_ts = int(_as_utc(end).timestamp())
        if start_ts > end_ts:
            raise ValueError("start must not be after end")
        return [
            buyer
            for buyer in self.repository.find_all()
            if buyer.created_at is not None
            and start_ts <= int(_as_utc(buyer.created_at).timestamp()) <= end_ts
        ]


class PictureService:
    def __init__(self, repository: PictureRepository, media: MediaService):
        self.repository = repository
        self.media = media

    def get_all_pictures(self) -> List[Picture]:
        return self.repository.find_all()

    def get_picture(self, picture_id: str) -> Optional[Picture]:
        return self.repository.find_by_id(picture_id)

    def get_pictures_by_apartment(self, apartment_id: str) -> List[Picture]:
        pictures = self.repository.find_by_field("apartment_id", apartment_id)
        return sorted(pictures, key=lambda picture: picture.order or 0)

    def create_picture(self, picture: Picture, file: UploadedFile) -> str:
        picture.url = self.media.upload_asset(file)
        picture.created_at = _now()
        return self.repository.save(picture)

    def upload_pictures(
        self,
        apartment_id: str,
        files: List[UploadedFile],
        picture_type: Optional[str] = None,
    ) -> List[str]:
        """Appends the files after the apartment's current highest order."""
        existing = self.repository.find_by_field("apartment_id", apartment_id)
        next_order = max((p.order for p in existing if p.order is not None), default=-1) + 1
        picture_ids = []
        for file in files:
            picture = Picture(
                apartment_id=apartment_id,
                url=self.media.upload_asset(file),
                type=picture_type,
                order=next_order,
                created_at=_now(),
            )
            picture_ids.append(self.repository.save(picture))
            next_order += 1
        return picture_ids

    def reorder_pictures(self, apartment_id: str, picture_ids: List[str]) -> None:
        """Assigns order 0..n-1 following `picture_ids`; one write per picture."""
        owned = {p.id for p in self.repository.find_by_field("apartment_id", apartment_id)}
        order = 0
        for picture_id in picture_ids:
            if picture_id not in owned:
                continue
            self.repository.update(picture_id, Picture(order=order))
            order += 1

    def update_picture_order(self, picture_ids: List[str]) -> None:
        order = 0
        for picture_id in picture_ids:
            if self.repository.find_by_id(picture_id) is None:
                continue
            self.repository.update(picture_id, Picture(order=order))
            order += 1

    def delete_picture(self, picture_id: str) -> None:
        picture = self.repository.find_by_id(picture_id)
        if picture is not None and picture.url:
            self.media.delete_by_url_quietly(picture.url)
        self.repository.delete(picture_id)

    def delete_all_pictures_for_apartment(self, apartment_id: str) -> None:
        for picture in self.repository.find_by_field("apartment_id", apartment_id):
            if picture.url:
                self.media.delete_by_url_quietly(picture.url)
            self.repository.delete(picture.id)

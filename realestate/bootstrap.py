"""
Startup bootstrap: make sure the collections exist and seed demo data once.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Optional

from realestate.config import Settings, get_settings
from realestate.constants import INITIALIZATION_DOC_ID, REQUIRED_COLLECTIONS
from realestate.db import DocumentStore
from realestate.media import MediaService
from realestate.models import (
    Apartment,
    ApartmentStatus,
    Buyer,
    BuyerStatus,
    Floor,
    User,
    UserRole,
)
from realestate.repository import (
    ApartmentRepository,
    BuyerRepository,
    FloorRepository,
    UserRepository,
)
from realestate.services import ApartmentService, BuyerService, FloorService
from realestate.users import UserService

logger = logging.getLogger(__name__)


def ensure_collections(store: DocumentStore, names: Iterable[str] = REQUIRED_COLLECTIONS) -> None:
    for name in names:
        if store.collection_exists(name):
            logger.info("Collection '%s' exists", name)
            continue
        try:
            store.set(
                name,
                INITIALIZATION_DOC_ID,
                {"initialized": True, "timestamp": datetime.now(timezone.utc)},
            )
            store.delete(name, INITIALIZATION_DOC_ID)
            logger.info("Created collection: %s", name)
        except Exception as exc:
            logger.error("Error creating collection %s: %s", name, exc)


def seed_initial_data(
    store: DocumentStore, media: MediaService, settings: Optional[Settings] = None
) -> bool:
    """
    Creates the admin account plus demo floors, apartments and a buyer.

    Guarded only by the admin account being absent; returns False when skipped.
    """
    settings = settings or get_settings()
    users = UserService(UserRepository(store))
    if users.load_by_email(settings.admin_email) is not None:
        logger.info("Admin user %s already exists, skipping seed", settings.admin_email)
        return False

    admin_id = users.create_user(
        User(
            email=settings.admin_email,
            password=settings.admin_password,
            role=UserRole.ADMIN.value,
            enabled=True,
        )
    )
    logger.info("Created admin user with ID: %s", admin_id)

    floors = FloorService(FloorRepository(store), media)
    first_floor_id = floors.create_floor(
        Floor(name="First Floor", floor_number=1, description="Ground level floor with garden access")
    )
    ground_floor_id = floors.create_floor(
        Floor(name="Ground Floor", floor_number=0, description="Ground floor with main entrance and lobby")
    )
    second_floor_id = floors.create_floor(
        Floor(name="Second Floor", floor_number=2, description="Second floor with premium apartments")
    )
    logger.info("Created floors: %s, %s, %s", ground_floor_id, first_floor_id, second_floor_id)

    apartments = ApartmentService(ApartmentRepository(store), media)
    seed_apartments = [
        (ground_floor_id, "G01", "1 Bedroom", 65.0, "180000", ApartmentStatus.AVAILABLE,
         "Cozy ground floor apartment with garden access"),
        (ground_floor_id, "G02", "2 Bedroom", 85.0, "220000", ApartmentStatus.RESERVED,
         "Spacious ground floor apartment with patio"),
        (first_floor_id, "101", "2 Bedroom", 85.5, "250000", ApartmentStatus.AVAILABLE,
         "Spacious 2-bedroom apartment with garden view"),
        (first_floor_id, "102", "3 Bedroom", 120.0, "350000", ApartmentStatus.AVAILABLE,
         "Luxury 3-bedroom apartment with balcony"),
        (second_floor_id, "201", "3 Bedroom", 130.0, "380000", ApartmentStatus.SOLD,
         "Premium 3-bedroom apartment with city view"),
    ]
    apartment_ids = []
    for floor_id, lot, apartment_type, area, price, status, description in seed_apartments:
        apartment_id = apartments.create_apartment(
            Apartment(
                floor_id=floor_id,
                lot_number=lot,
                type=apartment_type,
                area=area,
                price=Decimal(price),
                status=status,
                description=description,
            )
        )
        apartment_ids.append(apartment_id)
        logger.info("Created apartment %s with ID: %s", lot, apartment_id)

    buyers = BuyerService(BuyerRepository(store))
    buyers.create_buyer(
        Buyer(
            name="John Doe",
            email="john.doe@example.com",
            phone="+1234567890",
            status=BuyerStatus.INTERESTED,
            # Apartment 101
            interested_apartment_ids=[apartment_ids[2]],
            budget=500000.0,
            notes="Interested in 2-bedroom apartments",
            contact_date=datetime.now(timezone.utc),
        )
    )
    logger.info("Created buyer: John Doe")
    return True


def run_bootstrap(
    store: DocumentStore, media: MediaService, settings: Optional[Settings] = None
) -> None:
    ensure_collections(store)
    seed_initial_data(store, media, settings)

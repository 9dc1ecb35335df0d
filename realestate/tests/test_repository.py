import unittest
from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

from realestate.db import InMemoryDocumentStore
from realestate.errors import EntityNotFoundError, RepositoryError
from realestate.models import (
    Apartment,
    ApartmentStatus,
    Buyer,
    BuyerStatus,
    Floor,
    Hotspot,
    User,
)
from realestate.repository import (
    ApartmentRepository,
    BuyerRepository,
    FloorRepository,
    UserRepository,
)


class EntityRepositoryTests(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryDocumentStore()
        self.apartments = ApartmentRepository(self.store)

    def test_save_assigns_id_and_timestamps(self):
        apartment_id = self.apartments.save(
            Apartment(lot_number="101", price=Decimal("250000.50"), status=ApartmentStatus.AVAILABLE)
        )
        stored = self.store.collections["apartments"][apartment_id]
        self.assertEqual(stored["id"], apartment_id)
        self.assertEqual(stored["lotNumber"], "101")
        self.assertEqual(stored["price"], "250000.50")
        self.assertEqual(stored["status"], "AVAILABLE")
        self.assertIsInstance(stored["createdAt"], datetime)
        self.assertIsInstance(stored["updatedAt"], datetime)

        apartment = self.apartments.find_by_id(apartment_id)
        self.assertEqual(apartment.id, apartment_id)
        self.assertEqual(apartment.price, Decimal("250000.50"))
        self.assertIs(apartment.status, ApartmentStatus.AVAILABLE)

    def test_find_by_id_returns_saved_fields(self):
        buyer = Buyer(
            name="Ann",
            email="ann@example.com",
            phone="+100",
            status=BuyerStatus.INTERESTED,
            interested_apartment_ids=["a1", "a2"],
            budget=400000.0,
            notes="Prefers high floors",
            contact_date=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        )
        buyers = BuyerRepository(self.store)
        buyer_id = buyers.save(buyer)

        loaded = buyers.find_by_id(buyer_id)
        self.assertEqual(replace(loaded, id=None, created_at=None, updated_at=None), buyer)

    def test_update_merges_non_null_fields(self):
        apartment_id = self.apartments.save(
            Apartment(lot_number="101", type="2 Bedroom", status=ApartmentStatus.AVAILABLE)
        )
        created_at = self.store.collections["apartments"][apartment_id]["createdAt"]

        self.apartments.update(apartment_id, Apartment(id="other", status=ApartmentStatus.SOLD))

        apartment = self.apartments.find_by_id(apartment_id)
        self.assertEqual(apartment.id, apartment_id)
        self.assertEqual(apartment.lot_number, "101")
        self.assertEqual(apartment.type, "2 Bedroom")
        self.assertIs(apartment.status, ApartmentStatus.SOLD)
        self.assertEqual(apartment.created_at, created_at)

    def test_update_missing_raises_not_found(self):
        with self.assertRaises(EntityNotFoundError):
            self.apartments.update("missing", Apartment(type="Studio"))
        self.assertNotIn("missing", self.store.collections.get("apartments", {}))

    def test_find_by_id_missing_returns_none(self):
        self.assertIsNone(self.apartments.find_by_id("missing"))

    def test_find_by_field_translates_name_and_enum(self):
        self.apartments.save(Apartment(floor_id="f1", status=ApartmentStatus.SOLD))
        self.apartments.save(Apartment(floor_id="f1", status=ApartmentStatus.AVAILABLE))
        self.apartments.save(Apartment(floor_id="f2", status=ApartmentStatus.SOLD))

        self.assertEqual(len(self.apartments.find_by_field("floor_id", "f1")), 2)
        sold = self.apartments.find_by_field("status", ApartmentStatus.SOLD)
        self.assertEqual(len(sold), 2)
        self.assertTrue(all(a.status is ApartmentStatus.SOLD for a in sold))

    def test_delete_removes_document(self):
        apartment_id = self.apartments.save(Apartment(lot_number="101"))
        self.apartments.delete(apartment_id)
        self.assertIsNone(self.apartments.find_by_id(apartment_id))
        self.assertEqual(self.apartments.find_all(), [])

    def test_store_failure_is_wrapped(self):
        store = MagicMock()
        store.list.side_effect = RuntimeError("backend unavailable")
        repository = ApartmentRepository(store)
        with self.assertRaises(RepositoryError):
            repository.find_all()


class FloorDocumentTests(unittest.TestCase):
    def test_nested_hotspots_round_trip(self):
        store = InMemoryDocumentStore()
        floors = FloorRepository(store)
        floor_id = floors.save(
            Floor(
                name="Ground Floor",
                model3d_url="https://example.com/model.glb",
                top_view_hotspots=[Hotspot(apartment_id="a1", x=10.0, y=20.0)],
                angle_hotspots={"1": [Hotspot(apartment_id="a2", x=5.0, y=6.0, label="G01")]},
            )
        )
        stored = store.collections["floors"][floor_id]
        self.assertEqual(stored["model3dUrl"], "https://example.com/model.glb")
        self.assertEqual(stored["topViewHotspots"][0]["apartmentId"], "a1")
        self.assertIn("1", stored["angleHotspots"])

        floor = floors.find_by_id(floor_id)
        self.assertEqual(floor.top_view_hotspots[0], Hotspot(apartment_id="a1", x=10.0, y=20.0))
        self.assertEqual(floor.angle_hotspots["1"][0].label, "G01")


class UserRepositoryTests(unittest.TestCase):
    def test_find_by_email(self):
        users = UserRepository(InMemoryDocumentStore())
        users.save(User(email="a@example.com", role="ROLE_USER", enabled=True))
        self.assertEqual(users.find_by_email("a@example.com").role, "ROLE_USER")
        self.assertIsNone(users.find_by_email("b@example.com"))


if __name__ == "__main__":
    unittest.main()

import unittest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import patch

from realestate.db import InMemoryDocumentStore
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
from realestate.services import (
    ApartmentService,
    BuyerService,
    FloorService,
    PictureService,
)
from realestate.storage import InMemoryStorageClient


def _model(name="model.glb", content=b"glb-bytes"):
    return UploadedFile(filename=name, content=content, content_type="model/gltf-binary")


class ApartmentServiceTests(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryDocumentStore()
        self.storage = InMemoryStorageClient()
        self.media = MediaService(self.storage)
        self.service = ApartmentService(ApartmentRepository(self.store), self.media)

    def test_create_without_model_leaves_url_empty(self):
        apartment_id = self.service.create_apartment(Apartment(lot_number="101"))
        apartment = self.service.get_apartment(apartment_id)
        self.assertIsNone(apartment.model3d_url)
        self.assertEqual(self.storage.stored_objects, {})

    def test_empty_model_file_is_ignored(self):
        apartment_id = self.service.create_apartment(
            Apartment(lot_number="101"), _model(content=b"")
        )
        self.assertIsNone(self.service.get_apartment(apartment_id).model3d_url)
        self.assertEqual(self.storage.stored_objects, {})

    def test_create_with_model_stores_public_url(self):
        apartment_id = self.service.create_apartment(Apartment(lot_number="101"), _model())
        url = self.service.get_apartment(apartment_id).model3d_url
        self.assertTrue(url.startswith("https://storage.googleapis.com/in-memory-bucket/"))
        self.assertTrue(url.endswith("_model.glb"))
        self.assertEqual(len(self.storage.stored_objects), 1)

    def test_update_with_model_replaces_previous_blob(self):
        apartment_id = self.service.create_apartment(Apartment(lot_number="101"), _model("old.glb"))
        old_path = self.media.path_from_url(self.service.get_apartment(apartment_id).model3d_url)

        self.service.update_apartment(apartment_id, Apartment(type="Loft"), _model("new.glb"))

        apartment = self.service.get_apartment(apartment_id)
        self.assertEqual(apartment.type, "Loft")
        self.assertEqual(apartment.lot_number, "101")
        self.assertTrue(apartment.model3d_url.endswith("_new.glb"))
        self.assertNotIn(old_path, self.storage.stored_objects)
        self.assertEqual(len(self.storage.stored_objects), 1)

    def test_update_missing_apartment_raises(self):
        with self.assertRaises(EntityNotFoundError):
            self.service.update_apartment("missing", Apartment(type="Loft"))

    def test_delete_removes_model_blob(self):
        apartment_id = self.service.create_apartment(Apartment(lot_number="101"), _model())
        self.service.delete_apartment(apartment_id)
        self.assertIsNone(self.service.get_apartment(apartment_id))
        self.assertEqual(self.storage.stored_objects, {})

    def test_delete_succeeds_when_blob_already_gone(self):
        apartment_id = self.service.create_apartment(Apartment(lot_number="101"), _model())
        self.storage.reset()
        with self.assertLogs("realestate.media", level="INFO"):
            self.service.delete_apartment(apartment_id)
        self.assertIsNone(self.service.get_apartment(apartment_id))

    def test_delete_succeeds_when_storage_fails(self):
        apartment_id = self.service.create_apartment(Apartment(lot_number="101"), _model())
        with patch.object(self.storage, "delete", side_effect=RuntimeError("boom")):
            with self.assertLogs("realestate.media", level="WARNING"):
                self.service.delete_apartment(apartment_id)
        self.assertIsNone(self.service.get_apartment(apartment_id))

    def test_price_range_is_inclusive(self):
        for lot, price in (("A", "100000"), ("B", "150000"), ("C", "200000"), ("D", "250000")):
            self.service.create_apartment(Apartment(lot_number=lot, price=Decimal(price)))
        self.service.create_apartment(Apartment(lot_number="E"))

        found = self.service.get_apartments_by_price_range(Decimal("150000"), Decimal("200000"))
        self.assertEqual(sorted(a.lot_number for a in found), ["B", "C"])

    def test_queries_by_status_floor_and_type(self):
        self.service.create_apartment(
            Apartment(floor_id="f1", type="Studio", status=ApartmentStatus.AVAILABLE)
        )
        self.service.create_apartment(
            Apartment(floor_id="f2", type="Studio", status=ApartmentStatus.SOLD)
        )
        self.assertEqual(len(self.service.get_apartments_by_status(ApartmentStatus.SOLD)), 1)
        self.assertEqual(len(self.service.get_apartments_by_floor_id("f1")), 1)
        self.assertEqual(len(self.service.get_apartments_by_type("Studio")), 2)
        self.assertEqual(self.service.get_apartments_by_type("Loft"), [])


class FloorServiceTests(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryDocumentStore()
        self.storage = InMemoryStorageClient()
        self.service = FloorService(FloorRepository(self.store), MediaService(self.storage))

    def test_update_hotspots_replaces_only_supplied_collection(self):
        floor_id = self.service.create_floor(
            Floor(
                name="Ground Floor",
                top_view_hotspots=[Hotspot(apartment_id="a1", x=1.0, y=2.0)],
                angle_hotspots={"1": [Hotspot(apartment_id="a1", x=3.0, y=4.0)]},
            )
        )

        floor = self.service.update_hotspots(
            floor_id, [Hotspot(apartment_id="a2", x=50.0, y=60.0)], None
        )

        self.assertEqual([h.apartment_id for h in floor.top_view_hotspots], ["a2"])
        self.assertEqual(floor.angle_hotspots["1"][0].x, 3.0)
        self.assertEqual(floor.name, "Ground Floor")

    def test_update_hotspots_unknown_floor(self):
        with self.assertRaises(EntityNotFoundError):
            self.service.update_hotspots("missing", [], None)

    def test_delete_floor_removes_model(self):
        floor_id = self.service.create_floor(Floor(name="Roof"), _model())
        self.service.delete_floor(floor_id)
        self.assertEqual(self.service.get_all_floors(), [])
        self.assertEqual(self.storage.stored_objects, {})


class BuyerServiceTests(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryDocumentStore()
        self.service = BuyerService(BuyerRepository(self.store))

    def test_buyers_by_apartment_membership(self):
        self.service.create_buyer(Buyer(name="Ann", interested_apartment_ids=["a1", "a2"]))
        self.service.create_buyer(Buyer(name="Bob", interested_apartment_ids=["a2"]))
        self.service.create_buyer(Buyer(name="Cid"))

        self.assertEqual([b.name for b in self.service.get_buyers_by_apartment("a1")], ["Ann"])
        self.assertEqual(len(self.service.get_buyers_by_apartment("a2")), 2)
        self.assertEqual(self.service.get_buyers_by_apartment("a3"), [])

    def test_buyers_by_status(self):
        self.service.create_buyer(Buyer(name="Ann", status=BuyerStatus.INTERESTED))
        self.service.create_buyer(Buyer(name="Bob", status=BuyerStatus.PURCHASED))
        found = self.service.get_buyers_by_status(BuyerStatus.PURCHASED)
        self.assertEqual([b.name for b in found], ["Bob"])

    def test_date_range_is_inclusive(self):
        buyer_id = self.service.create_buyer(Buyer(name="Ann"))
        created_at = self.service.get_buyer(buyer_id).created_at.replace(microsecond=0)

        self.assertEqual(len(self.service.get_buyers_by_date_range(created_at, created_at)), 1)
        later = created_at + timedelta(seconds=1)
        self.assertEqual(self.service.get_buyers_by_date_range(later, later + timedelta(days=1)), [])

    def test_date_range_treats_naive_as_utc(self):
        self.service.create_buyer(Buyer(name="Ann"))
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        found = self.service.get_buyers_by_date_range(now - timedelta(hours=1), now + timedelta(hours=1))
        self.assertEqual(len(found), 1)

    def test_date_range_rejects_reversed_bounds(self):
        start = datetime(2024, 1, 2, tzinfo=timezone.utc)
        with self.assertRaises(ValueError):
            self.service.get_buyers_by_date_range(start, datetime(2024, 1, 1))

    def test_update_missing_buyer_raises(self):
        with self.assertRaises(EntityNotFoundError):
            self.service.update_buyer("missing", Buyer(name="Ann"))


class PictureServiceTests(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryDocumentStore()
        self.storage = InMemoryStorageClient()
        self.service = PictureService(PictureRepository(self.store), MediaService(self.storage))

    def _upload(self, apartment_id, *names):
        files = [UploadedFile(filename=n, content=b"img", content_type="image/png") for n in names]
        return self.service.upload_pictures(apartment_id, files, picture_type="INTERIOR")

    def test_upload_appends_after_highest_order(self):
        first = self._upload("a1", "1.png", "2.png")
        second = self._upload("a1", "3.png")

        pictures = self.service.get_pictures_by_apartment("a1")
        self.assertEqual([p.id for p in pictures], first + second)
        self.assertEqual([p.order for p in pictures], [0, 1, 2])
        self.assertTrue(all(p.type == "INTERIOR" for p in pictures))

    def test_reorder_skips_unknown_ids(self):
        ids = self._upload("a1", "1.png", "2.png", "3.png")
        other = self._upload("a2", "x.png")

        self.service.reorder_pictures("a1", [ids[2], "missing", other[0], ids[0], ids[1]])

        pictures = self.service.get_pictures_by_apartment("a1")
        self.assertEqual([p.id for p in pictures], [ids[2], ids[0], ids[1]])
        self.assertEqual([p.order for p in pictures], [0, 1, 2])
        self.assertEqual(self.service.get_picture(other[0]).order, 0)

    def test_update_picture_order(self):
        ids = self._upload("a1", "1.png", "2.png")
        self.service.update_picture_order([ids[1], "missing", ids[0]])
        self.assertEqual(self.service.get_picture(ids[1]).order, 0)
        self.assertEqual(self.service.get_picture(ids[0]).order, 1)

    def test_create_and_delete_picture(self):
        picture_id = self.service.create_picture(
            Picture(apartment_id="a1", type="MAIN", order=0),
            UploadedFile(filename="main.png", content=b"img"),
        )
        self.assertEqual(len(self.storage.stored_objects), 1)
        self.service.delete_picture(picture_id)
        self.assertIsNone(self.service.get_picture(picture_id))
        self.assertEqual(self.storage.stored_objects, {})

    def test_delete_all_pictures_for_apartment(self):
        self._upload("a1", "1.png", "2.png")
        kept = self._upload("a2", "3.png")
        self.service.delete_all_pictures_for_apartment("a1")
        self.assertEqual(self.service.get_pictures_by_apartment("a1"), [])
        self.assertEqual([p.id for p in self.service.get_all_pictures()], kept)
        self.assertEqual(len(self.storage.stored_objects), 1)


if __name__ == "__main__":
    unittest.main()

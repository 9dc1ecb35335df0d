import unittest
from unittest.mock import patch

from realestate.media import (
    MediaService,
    UploadedFile,
    folder_for_type,
    generate_unique_filename,
)
from realestate.storage import InMemoryStorageClient


def _image(name, content=b"png-bytes"):
    return UploadedFile(filename=name, content=content, content_type="image/png")


class MediaHelperTests(unittest.TestCase):
    def test_folder_for_type(self):
        self.assertEqual(folder_for_type("3d"), "models")
        self.assertEqual(folder_for_type("image"), "images")
        self.assertEqual(folder_for_type("video"), "images")

    def test_unique_filename_keeps_extension(self):
        first = generate_unique_filename("photo.JPG")
        second = generate_unique_filename("photo.JPG")
        self.assertTrue(first.endswith(".JPG"))
        self.assertNotEqual(first, second)
        self.assertNotIn("photo", first)


class GenericMediaTests(unittest.TestCase):
    def setUp(self):
        self.storage = InMemoryStorageClient()
        self.media = MediaService(self.storage)

    def test_upload_returns_signed_url_with_expiry(self):
        url = self.media.upload_file(_image("a.png"), "images")
        (path,) = self.storage.stored_objects
        self.assertTrue(path.startswith("images/"))
        self.assertTrue(path.endswith(".png"))
        self.assertIn("expires=604800", url)

    def test_signed_url_and_exists(self):
        self.storage.upload_bytes("models/house.glb", b"glb", None)
        path = self.media.media_path("3d", "house.glb")
        self.assertEqual(path, "models/house.glb")
        self.assertTrue(self.media.file_exists(path))
        self.assertIsNotNone(self.media.get_signed_url(path))
        self.assertIsNone(self.media.get_signed_url("models/missing.glb"))
        self.assertFalse(self.media.file_exists("models/missing.glb"))

    def test_media_path_rejects_traversal(self):
        with self.assertRaises(ValueError):
            self.media.media_path("image", "../secret.png")

    def test_path_from_url(self):
        url = self.media.upload_asset(_image("my photo.png"))
        path = self.media.path_from_url(url)
        self.assertIn(path, self.storage.stored_objects)
        self.assertTrue(self.media.delete_by_url(url))
        self.assertFalse(self.media.delete_by_url(url))


class FloorImageTests(unittest.TestCase):
    def setUp(self):
        self.storage = InMemoryStorageClient()
        self.media = MediaService(self.storage)

    def test_listing_filters_extensions_and_sorts(self):
        for name in ("b.png", "a.jpg", "c.gif", "notes.txt", "d.WEBP"):
            self.media.upload_floor_image("f1", _image(name))
        self.media.upload_floor_image("f2", _image("other.png"))

        urls = self.media.list_floor_images("f1")
        self.assertEqual(len(urls), 3)
        self.assertIn("floors/f1/a.jpg", urls[0])
        self.assertIn("floors/f1/b.png", urls[1])
        self.assertIn("floors/f1/d.WEBP", urls[2])

        details = self.media.list_floor_image_details("f1")
        self.assertEqual([d.name for d in details], ["a.jpg", "b.png", "c.gif", "d.WEBP"])
        self.assertTrue(all(d.is_image for d in details))
        self.assertEqual(details[0].full_path, "floors/f1/a.jpg")
        self.assertEqual(details[0].size, len(b"png-bytes"))

    def test_upload_with_custom_name(self):
        url = self.media.upload_floor_image("f1", _image("raw.png"), "angle-1.png")
        self.assertTrue(url.endswith("/floors/f1/angle-1.png"))
        info = self.media.get_floor_image_info("f1", "angle-1.png")
        self.assertEqual(info.content_type, "image/png")
        self.assertIsNone(self.media.get_floor_image_info("f1", "raw.png"))

    def test_delete_floor_image(self):
        self.media.upload_floor_image("f1", _image("a.png"))
        self.assertTrue(self.media.delete_floor_image("f1", "a.png"))
        self.assertFalse(self.media.delete_floor_image("f1", "a.png"))

    def test_rename_moves_object(self):
        self.media.upload_floor_image("f1", _image("old.png"))
        self.assertTrue(self.media.rename_floor_image("f1", "old.png", "new.png"))
        self.assertEqual(list(self.storage.stored_objects), ["floors/f1/new.png"])

    def test_rename_missing_source_writes_nothing(self):
        with patch.object(self.storage, "copy") as copy, patch.object(
            self.storage, "upload_bytes"
        ) as upload:
            self.assertFalse(self.media.rename_floor_image("f1", "missing.png", "new.png"))
        copy.assert_not_called()
        upload.assert_not_called()
        self.assertEqual(self.storage.stored_objects, {})

    def test_invalid_file_names(self):
        for bad in ("../x.png", "a/b.png", "a\\b.png", ""):
            with self.assertRaises(ValueError):
                self.media.get_floor_image_info("f1", bad)
        with self.assertRaises(ValueError):
            self.media.upload_floor_image("f1", _image("x.png"), "../x.png")
        self.assertEqual(self.storage.stored_objects, {})


if __name__ == "__main__":
    unittest.main()

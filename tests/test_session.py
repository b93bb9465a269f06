from __future__ import annotations

import unittest

import numpy as np

from autocropper.controllers.session_store import SessionStore
from autocropper.models.image_model import ImageData
from autocropper.models.session_model import (
    BatchResult,
    Configuration,
    Session,
    UploadContext,
    is_valid_padding_text,
)
from autocropper.services.bounds_service import find_visible_bounds
from autocropper.services.errors import InvalidPaddingInput


def make_session(file_name: str = "batch.zip") -> Session:
    pixels = np.full((2, 2, 4), 255, dtype=np.uint8)
    image = ImageData(name="a.png", width=2, height=2, pixels=pixels, bounds=find_visible_bounds(pixels))
    return Session(upload=UploadContext(file_name, True), original=(image,))


class PaddingValidationTests(unittest.TestCase):
    def test_valid_texts(self) -> None:
        for text in ("0", "7", "0012", "128"):
            with self.subTest(text=text):
                self.assertTrue(is_valid_padding_text(text))

    def test_invalid_texts(self) -> None:
        for text in ("", " 1", "1 ", "-1", "1.5", "abc", "1\n", "٣"):
            with self.subTest(text=text):
                self.assertFalse(is_valid_padding_text(text))

    def test_configuration_from_text(self) -> None:
        self.assertEqual(Configuration.from_text("0012").padding, 12)
        with self.assertRaises(InvalidPaddingInput):
            Configuration.from_text("x")
        with self.assertRaises(InvalidPaddingInput):
            Configuration(padding=-1)


class ImageDataTests(unittest.TestCase):
    def test_pixels_are_frozen_copy(self) -> None:
        pixels = np.zeros((1, 2, 4), dtype=np.uint8)
        image = ImageData(name="a.png", width=2, height=1, pixels=pixels, bounds=find_visible_bounds(pixels))
        pixels[0, 0, 3] = 255
        self.assertEqual(int(image.pixels[0, 0, 3]), 0)
        with self.assertRaises(ValueError):
            image.pixels[0, 0, 0] = 1

    def test_shape_mismatch_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            ImageData(name="a.png", width=3, height=1, pixels=np.zeros((1, 2, 4), dtype=np.uint8),
                      bounds=find_visible_bounds(np.zeros((1, 2, 4), dtype=np.uint8)))


class SessionStoreTests(unittest.TestCase):
    def test_stale_upload_is_discarded(self) -> None:
        store = SessionStore()
        first = store.begin_upload()
        second = store.begin_upload()
        self.assertFalse(store.publish_upload(first, make_session("old.zip")))
        self.assertIsNone(store.session)
        self.assertTrue(store.publish_upload(second, make_session("new.zip")))
        self.assertEqual(store.session.upload.file_name, "new.zip")

    def test_crop_published_for_current_session(self) -> None:
        store = SessionStore()
        store.publish_upload(store.begin_upload(), make_session())
        token = store.begin_crop()
        result = BatchResult(images=store.session.original)
        self.assertTrue(store.publish_crop(token, result))
        self.assertEqual(len(store.session.cropped), 1)

    def test_new_upload_cancels_in_flight_crop(self) -> None:
        store = SessionStore()
        store.publish_upload(store.begin_upload(), make_session("old.zip"))
        crop_token = store.begin_crop()
        upload_token = store.begin_upload()
        self.assertFalse(store.publish_crop(crop_token, BatchResult(images=store.session.original)))
        self.assertIsNone(store.session.cropped)
        self.assertTrue(store.publish_upload(upload_token, make_session("new.zip")))
        self.assertIsNone(store.session.cropped)

    def test_padding_change_clears_cropped_batch(self) -> None:
        store = SessionStore()
        store.publish_upload(store.begin_upload(), make_session())
        token = store.begin_crop()
        store.publish_crop(token, BatchResult(images=store.session.original))
        store.invalidate_cropped()
        self.assertIsNone(store.session.cropped)
        self.assertFalse(store.is_current(token))
        self.assertEqual(len(store.session.original), 1)


if __name__ == "__main__":
    unittest.main()

from __future__ import annotations

import io
import struct
import tempfile
import unittest
import zipfile
from pathlib import Path

from PIL import Image

from autocropper.models.image_model import CropBounds
from autocropper.services.errors import CodecFailure, UnsupportedFileType
from autocropper.services.upload_service import UploadService


def png_bytes(width: int, height: int, visible_box=None) -> bytes:
    img = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    if visible_box is not None:
        img.paste((255, 255, 255, 255), visible_box)
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def zip_bytes(entries, compression=zipfile.ZIP_DEFLATED) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=compression) as zf:
        for name, payload in entries:
            zf.writestr(name, payload)
    return buffer.getvalue()


def _local_headers(data: bytearray, name: str):
    """Смещения локальных заголовков записей с данным именем."""
    encoded = name.encode("utf-8")
    pos = data.find(b"PK\x03\x04")
    while pos != -1:
        name_len = struct.unpack_from("<H", data, pos + 26)[0]
        if bytes(data[pos + 30:pos + 30 + name_len]) == encoded:
            yield pos
        pos = data.find(b"PK\x03\x04", pos + 4)


def corrupt_stored_entry(data: bytes, name: str) -> bytes:
    """Портит последний байт несжатой записи, так что CRC-32 перестаёт совпадать."""
    buf = bytearray(data)
    for pos in _local_headers(buf, name):
        size, name_len, extra_len = struct.unpack_from("<IHH", buf, pos + 22)
        buf[pos + 30 + name_len + extra_len + size - 1] ^= 0xFF
    return bytes(buf)


def mark_encrypted(data: bytes, name: str) -> bytes:
    """Выставляет бит шифрования записи в локальном и центральном заголовках."""
    buf = bytearray(data)
    for pos in _local_headers(buf, name):
        buf[pos + 6] |= 0x01
    encoded = name.encode("utf-8")
    pos = buf.find(b"PK\x01\x02")
    while pos != -1:
        name_len = struct.unpack_from("<H", buf, pos + 28)[0]
        if bytes(buf[pos + 46:pos + 46 + name_len]) == encoded:
            buf[pos + 8] |= 0x01
        pos = buf.find(b"PK\x01\x02", pos + 4)
    return bytes(buf)


class ClassifyTests(unittest.TestCase):
    def test_routes_by_name(self) -> None:
        service = UploadService()
        self.assertTrue(service.classify("batch.ZIP").is_archive)
        self.assertFalse(service.classify("photo.png").is_archive)

    def test_unknown_type_is_rejected(self) -> None:
        with self.assertRaises(UnsupportedFileType):
            UploadService().classify("notes.txt")
        with self.assertRaises(UnsupportedFileType):
            UploadService().classify(".hidden.png")


class LoadUploadTests(unittest.TestCase):
    def test_single_image(self) -> None:
        session = UploadService().load_upload("photo.png", png_bytes(6, 5, (2, 1, 4, 3)))
        self.assertFalse(session.upload.is_archive)
        self.assertEqual(len(session.original), 1)
        image = session.original[0]
        self.assertEqual(image.name, "photo.png")
        self.assertEqual(image.bounds, CropBounds(min_x=2, max_x=3, min_y=1, max_y=2))
        self.assertIsNone(session.cropped)

    def test_archive_entries_are_filtered_and_sorted(self) -> None:
        data = zip_bytes([
            ("z.png", png_bytes(2, 2, (0, 0, 1, 1))),
            ("folder/", b""),
            ("folder/.hidden.png", png_bytes(2, 2)),
            ("readme.txt", b"hello"),
            ("folder/a.PNG", png_bytes(3, 3, (1, 1, 2, 2))),
            ("broken.png", b"garbage"),
        ])
        session = UploadService().load_upload("batch.zip", data)
        self.assertTrue(session.upload.is_archive)
        self.assertEqual([im.name for im in session.original], ["folder/a.PNG", "z.png"])
        self.assertEqual([f.name for f in session.load_failures], ["broken.png"])

    def test_corrupt_non_image_entry_is_never_read(self) -> None:
        data = zip_bytes(
            [("good.png", png_bytes(2, 2, (0, 0, 1, 1))), ("notes.txt", b"some notes")],
            compression=zipfile.ZIP_STORED,
        )
        session = UploadService().load_upload("batch.zip", corrupt_stored_entry(data, "notes.txt"))
        self.assertEqual([im.name for im in session.original], ["good.png"])
        self.assertEqual(session.load_failures, ())

    def test_corrupt_image_entry_fails_alone(self) -> None:
        data = zip_bytes(
            [("good.png", png_bytes(2, 2, (0, 0, 1, 1))), ("bad.png", png_bytes(3, 3, (0, 0, 3, 3)))],
            compression=zipfile.ZIP_STORED,
        )
        session = UploadService().load_upload("batch.zip", corrupt_stored_entry(data, "bad.png"))
        self.assertEqual([im.name for im in session.original], ["good.png"])
        self.assertEqual([f.name for f in session.load_failures], ["bad.png"])
        self.assertIsInstance(session.load_failures[0].error, CodecFailure)

    def test_encrypted_entries(self) -> None:
        data = zip_bytes([
            ("good.png", png_bytes(2, 2, (0, 0, 1, 1))),
            ("secret.bin", b"payload"),
            ("secret.png", png_bytes(2, 2, (0, 0, 2, 2))),
        ])
        data = mark_encrypted(mark_encrypted(data, "secret.bin"), "secret.png")
        session = UploadService().load_upload("batch.zip", data)
        self.assertEqual([im.name for im in session.original], ["good.png"])
        self.assertEqual([f.name for f in session.load_failures], ["secret.png"])
        self.assertIsInstance(session.load_failures[0].error, CodecFailure)

    def test_corrupt_archive_raises_codec_failure(self) -> None:
        with self.assertRaises(CodecFailure):
            UploadService().load_upload("batch.zip", b"PK not really")

    def test_load_path_reads_file(self) -> None:
        with tempfile.TemporaryDirectory(prefix="autocropper_") as td:
            path = Path(td) / "icon.png"
            path.write_bytes(png_bytes(4, 4, (0, 0, 4, 4)))
            session = UploadService().load_path(path)
        self.assertEqual(session.upload.file_name, "icon.png")
        self.assertEqual(session.original[0].size, (4, 4))


if __name__ == "__main__":
    unittest.main()

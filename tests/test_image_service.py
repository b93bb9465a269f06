from __future__ import annotations

import io
import unittest

from PIL import Image

from autocropper.models.image_model import CropBounds
from autocropper.services.errors import CodecFailure
from autocropper.services.image_service import ImageService, mime_type_for


class DecodeTests(unittest.TestCase):
    def test_opaque_jpeg_bounds_cover_whole_image(self) -> None:
        buffer = io.BytesIO()
        Image.new("RGB", (7, 3), (200, 10, 10)).save(buffer, format="JPEG")
        image = ImageService().decode("shot.jpg", buffer.getvalue())
        self.assertEqual(image.size, (7, 3))
        self.assertEqual(image.pixels.shape, (3, 7, 4))
        self.assertEqual(image.bounds, CropBounds(0, 6, 0, 2))

    def test_svg_is_reported_as_codec_failure(self) -> None:
        svg = b'<svg xmlns="http://www.w3.org/2000/svg" width="4" height="4"><rect width="4" height="4"/></svg>'
        with self.assertRaises(CodecFailure) as ctx:
            ImageService().decode("logo.svg", svg)
        self.assertEqual(ctx.exception.name, "logo.svg")


class EncodeTests(unittest.TestCase):
    def test_unknown_extension_falls_back_to_png(self) -> None:
        buffer = io.BytesIO()
        Image.new("RGBA", (2, 2), (0, 0, 0, 255)).save(buffer, format="PNG")
        service = ImageService()
        image = service.decode("logo.png", buffer.getvalue())
        data = service.encode(image, "svg")
        with Image.open(io.BytesIO(data)) as img:
            self.assertEqual(img.format, "PNG")

    def test_mime_type(self) -> None:
        self.assertEqual(mime_type_for("PNG"), "image/png")
        self.assertEqual(mime_type_for("jpg"), "image/jpg")


if __name__ == "__main__":
    unittest.main()

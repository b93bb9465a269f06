"""Декодирование и кодирование изображений (Pillow) и упаковка в `ImageData`.

Принципы:
- SRP: класс отвечает только за преобразование байтов <-> RGBA-буфер.
- OCP: новые источники (путь, поток) добавляются отдельными методами.
"""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Dict

import numpy as np
from PIL import Image, UnidentifiedImageError

from autocropper.models.image_model import ImageData
from autocropper.services.bounds_service import find_visible_bounds
from autocropper.services.errors import CodecFailure
from autocropper.services.name_service import dotless_extension

logger = logging.getLogger(__name__)

# dotless extension -> формат Pillow; остальные (например, svg) кодируются в PNG
_PIL_FORMATS: Dict[str, str] = {
    "png": "PNG",
    "jpg": "JPEG",
    "jpeg": "JPEG",
}


def mime_type_for(extension: str) -> str:
    return "image/" + extension.lower()


class ImageService:
    def decode(self, name: str, data: bytes) -> ImageData:
        """Декодирует байты изображения в `ImageData` с вычисленными границами.

        Args:
            name: Имя файла или записи архива (сохраняется в модели).
            data: Содержимое файла.

        Returns:
            `ImageData` с RGBA-буфером (height, width, 4) и границами видимых пикселей.

        Raises:
            CodecFailure: если байты не распознаны как изображение.
        """
        try:
            with Image.open(io.BytesIO(data)) as pil_image:
                rgba = pil_image.convert("RGBA")
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
            raise CodecFailure(name, str(exc)) from exc

        pixels = np.asarray(rgba, dtype=np.uint8).copy()
        pixels.setflags(write=False)
        height, width = pixels.shape[:2]
        bounds = find_visible_bounds(pixels)
        logger.debug("Decoded %s (%dx%d), bounds=%s", name, width, height, bounds.as_tuple())
        return ImageData(name=name, width=width, height=height, pixels=pixels, bounds=bounds)

    def load_image(self, file_path: str | Path) -> ImageData:
        """Загружает изображение с диска.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
            CodecFailure: если файл не распознан как изображение.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")
        return self.decode(path.name, path.read_bytes())

    def encode(self, image: ImageData, extension: str) -> bytes:
        """Кодирует RGBA-буфер в формат, определяемый расширением без точки.

        JPEG не хранит альфу: прозрачные пиксели сводятся на чёрный фон,
        как это делает кодировщик canvas.
        """
        pil_format = _PIL_FORMATS.get(extension.lower(), "PNG")
        pil_image = Image.fromarray(np.ascontiguousarray(image.pixels))
        if pil_format == "JPEG":
            background = Image.new("RGBA", pil_image.size, (0, 0, 0, 255))
            pil_image = Image.alpha_composite(background, pil_image).convert("RGB")

        buffer = io.BytesIO()
        try:
            pil_image.save(buffer, format=pil_format)
        except (OSError, ValueError) as exc:
            raise CodecFailure(image.name, str(exc)) from exc
        return buffer.getvalue()

    def encode_for_name(self, image: ImageData) -> bytes:
        """Кодирует изображение в формат по расширению его собственного имени."""
        return self.encode(image, dotless_extension(image.name))

from __future__ import annotations

import logging

import numpy as np

from autocropper.models.image_model import CropBounds, ImageData
from autocropper.services.errors import InvalidBoundsError

logger = logging.getLogger(__name__)


def compose(image: ImageData, bounds: CropBounds, padding: int) -> ImageData:
    """
    Обрезка по границам с добавлением прозрачного отступа `padding` с каждой стороны.

    Новый буфер заполняется нулями (полная прозрачность), затем прямоугольник
    `bounds` копируется побайтно со сдвигом (padding, padding). Исходное
    изображение не изменяется; имя переносится без изменений.

    Raises:
        InvalidBoundsError: если границы пустые или выходят за пределы изображения.
        ValueError: если padding отрицательный.
    """
    if padding < 0:
        raise ValueError(f"Отступ не может быть отрицательным: {padding}")
    if bounds.is_empty or not bounds.fits_within(image.width, image.height):
        raise InvalidBoundsError(image.name, bounds)

    min_x, max_x = int(bounds.min_x), int(bounds.max_x)
    min_y, max_y = int(bounds.min_y), int(bounds.max_y)
    unpadded_w = max_x - min_x + 1
    unpadded_h = max_y - min_y + 1
    padded_w = unpadded_w + 2 * padding
    padded_h = unpadded_h + 2 * padding

    out = np.zeros((padded_h, padded_w, 4), dtype=np.uint8)
    out[padding:padding + unpadded_h, padding:padding + unpadded_w] = image.pixels[min_y:max_y + 1, min_x:max_x + 1]
    out.setflags(write=False)

    logger.debug(
        "Composed %s: %dx%d -> %dx%d (padding=%d)",
        image.name, image.width, image.height, padded_w, padded_h, padding,
    )
    return ImageData(
        name=image.name,
        width=padded_w,
        height=padded_h,
        pixels=out,
        bounds=CropBounds(
            min_x=padding,
            max_x=padding + unpadded_w - 1,
            min_y=padding,
            max_y=padding + unpadded_h - 1,
        ),
    )

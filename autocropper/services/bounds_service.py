from __future__ import annotations

import logging

import numpy as np

from autocropper.models.image_model import CropBounds, ImageData

logger = logging.getLogger(__name__)


def find_visible_bounds(pixels: np.ndarray) -> CropBounds:
    """
    Поиск прямоугольника видимых пикселей по альфа-каналу.
    Видимый пиксель: альфа != 0 (без порога, любое значение 1..255).
    Полный просмотр буфера (height, width, 4); для полностью прозрачного
    изображения возвращает пустые границы `CropBounds.empty()`.
    """
    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise ValueError(f"Ожидался буфер RGBA (h, w, 4), получен {pixels.shape}")

    visible = pixels[:, :, 3] != 0
    # Проекции маски на оси: есть ли видимый пиксель в столбце / строке
    cols = np.flatnonzero(visible.any(axis=0))
    rows = np.flatnonzero(visible.any(axis=1))
    if cols.size == 0 or rows.size == 0:
        logger.debug("No visible pixels in %dx%d buffer", pixels.shape[1], pixels.shape[0])
        return CropBounds.empty()

    return CropBounds(
        min_x=int(cols[0]),
        max_x=int(cols[-1]),
        min_y=int(rows[0]),
        max_y=int(rows[-1]),
    )


def detect_bounds(image: ImageData) -> CropBounds:
    """Повторное определение границ для уже декодированного изображения."""
    return find_visible_bounds(image.pixels)

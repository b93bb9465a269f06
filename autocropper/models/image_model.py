"""Модели данных для изображений и границ обрезки.

Принципы:
- SRP: только структура данных, без логики обработки.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости; пиксельные
  буферы помечаются только для чтения.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

Coordinate = Union[int, float]


@dataclass(frozen=True)
class CropBounds:
    """Включительный прямоугольник видимых пикселей изображения.

    Fields:
        min_x, max_x: Крайние столбцы с видимыми пикселями.
        min_y, max_y: Крайние строки с видимыми пикселями.

    Для полностью прозрачного изображения границы «пустые»:
    min = +inf, max = -inf (см. `CropBounds.empty()`).
    """
    min_x: Coordinate
    max_x: Coordinate
    min_y: Coordinate
    max_y: Coordinate

    @classmethod
    def empty(cls) -> "CropBounds":
        return cls(min_x=math.inf, max_x=-math.inf, min_y=math.inf, max_y=-math.inf)

    @property
    def is_empty(self) -> bool:
        return not (self.min_x <= self.max_x and self.min_y <= self.max_y)

    @property
    def width(self) -> int:
        """Ширина прямоугольника без отступов, px (0 для пустых границ)."""
        if self.is_empty:
            return 0
        return int(self.max_x - self.min_x + 1)

    @property
    def height(self) -> int:
        """Высота прямоугольника без отступов, px (0 для пустых границ)."""
        if self.is_empty:
            return 0
        return int(self.max_y - self.min_y + 1)

    def as_tuple(self) -> Tuple[Coordinate, Coordinate, Coordinate, Coordinate]:
        return (self.min_x, self.max_x, self.min_y, self.max_y)

    def fits_within(self, width: int, height: int) -> bool:
        """Проверяет, что непустые границы лежат внутри изображения width x height."""
        if self.is_empty:
            return False
        return 0 <= self.min_x and self.max_x <= width - 1 and 0 <= self.min_y and self.max_y <= height - 1


@dataclass(frozen=True, eq=False)
class ImageData:
    """Неизменяемая модель декодированного изображения.

    Fields:
        name: Имя файла или путь записи внутри архива.
        width: Ширина, px.
        height: Высота, px.
        pixels: Буфер RGBA формы (height, width, 4), uint8, только для чтения.
        bounds: Границы видимых пикселей.
    """
    name: str
    width: int
    height: int
    pixels: np.ndarray
    bounds: CropBounds

    def __post_init__(self) -> None:
        expected = (self.height, self.width, 4)
        if self.pixels.shape != expected:
            raise ValueError(f"Буфер пикселей {self.pixels.shape} не соответствует размеру {expected}")
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"Ожидался буфер uint8, получен {self.pixels.dtype}")
        if self.pixels.flags.writeable:
            # Freeze a private copy so the caller's array stays untouched.
            frozen = self.pixels.copy()
            frozen.setflags(write=False)
            object.__setattr__(self, "pixels", frozen)

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def has_visible_pixels(self) -> bool:
        return not self.bounds.is_empty

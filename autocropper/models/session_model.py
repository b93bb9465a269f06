"""Модели состояния сессии: загрузка, параметры, результаты пакетной обработки."""
from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from autocropper.models.image_model import ImageData
from autocropper.services.errors import InvalidPaddingInput

_PADDING_PATTERN = re.compile(r"[0-9]+")

Batch = Tuple[ImageData, ...]


def is_valid_padding_text(text: str) -> bool:
    """Одна или более десятичных цифр; пустая строка недопустима."""
    return _PADDING_PATTERN.fullmatch(text) is not None


@dataclass(frozen=True)
class Configuration:
    """Параметры обрезки, проверенные один раз до запуска пакета."""
    padding: int = 0

    def __post_init__(self) -> None:
        if self.padding < 0:
            raise InvalidPaddingInput(str(self.padding))

    @classmethod
    def from_text(cls, text: str) -> "Configuration":
        if not is_valid_padding_text(text):
            raise InvalidPaddingInput(text)
        return cls(padding=int(text, 10))


@dataclass(frozen=True)
class UploadContext:
    file_name: str
    is_archive: bool


@dataclass(frozen=True)
class ItemFailure:
    """Ошибка обработки одного элемента пакета."""
    name: str
    error: Exception

    @property
    def message(self) -> str:
        return f"{self.name}: {self.error}"


@dataclass(frozen=True)
class BatchResult:
    """Результат пакетной операции с частичным успехом.

    `images` и `failures` сохраняют порядок входных элементов.
    """
    images: Batch = ()
    failures: Tuple[ItemFailure, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass(frozen=True)
class Session:
    """Снимок состояния одной загрузки. Заменяется целиком при новой загрузке."""
    upload: UploadContext
    original: Batch
    cropped: Optional[Batch] = None
    load_failures: Tuple[ItemFailure, ...] = field(default_factory=tuple)
    crop_failures: Tuple[ItemFailure, ...] = field(default_factory=tuple)

    def with_cropped(self, result: BatchResult) -> "Session":
        return replace(self, cropped=result.images, crop_failures=result.failures)

    def without_cropped(self) -> "Session":
        return replace(self, cropped=None, crop_failures=())

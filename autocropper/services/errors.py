"""Исключения конвейера автообрезки."""
from __future__ import annotations


class AutocropperError(Exception):
    """Базовый класс ошибок приложения."""


class UnsupportedFileType(AutocropperError):
    def __init__(self, file_name: str) -> None:
        super().__init__(f"Неподдерживаемый тип файла: {file_name}")
        self.file_name = file_name


class InvalidBoundsError(AutocropperError):
    """Обрезка запрошена для изображения без видимых пикселей (или с границами вне изображения)."""

    def __init__(self, name: str, bounds: object) -> None:
        super().__init__(f"Некорректные границы обрезки для {name}: {bounds}")
        self.name = name
        self.bounds = bounds


class CodecFailure(AutocropperError):
    """Не удалось декодировать или закодировать изображение/архив."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Ошибка кодека для {name}: {reason}")
        self.name = name
        self.reason = reason


class InvalidPaddingInput(AutocropperError):
    def __init__(self, text: str) -> None:
        super().__init__(f"Отступ должен быть целым неотрицательным числом, получено: {text!r}")
        self.text = text

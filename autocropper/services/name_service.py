"""Классификация имён файлов: архив, изображение или ни то ни другое."""
from __future__ import annotations

import re
from typing import Iterable, List, Tuple

ARCHIVE_EXTENSION = ".zip"
IMAGE_EXTENSIONS: Tuple[str, ...] = (".png", ".jpg", ".jpeg", ".svg")
ACCEPTED_EXTENSIONS: Tuple[str, ...] = (ARCHIVE_EXTENSION,) + IMAGE_EXTENSIONS

_SEGMENT_SEPARATORS = re.compile(r"[/\\]")


def _is_hidden_or_empty(lower_name: str) -> bool:
    """Пустое имя или последний сегмент пути, начинающийся с «.»."""
    if lower_name == "":
        return True
    last_segment = _SEGMENT_SEPARATORS.split(lower_name)[-1]
    return last_segment == "" or last_segment.startswith(".")


def is_archive_name(name: str) -> bool:
    lower_name = name.lower()
    if _is_hidden_or_empty(lower_name):
        return False
    return lower_name.endswith(ARCHIVE_EXTENSION)


def is_image_name(name: str) -> bool:
    lower_name = name.lower()
    if _is_hidden_or_empty(lower_name):
        return False
    return lower_name.endswith(IMAGE_EXTENSIONS)


def dotless_extension(name: str) -> str:
    """Расширение без точки в нижнем регистре; "" если точки нет.

    >>> dotless_extension("a/b.Tar.PNG")
    'png'
    """
    lower_name = name.lower()
    if "." not in lower_name:
        return ""
    return lower_name.rsplit(".", 1)[-1]


def is_directory_entry(name: str) -> bool:
    return name.endswith("/") or name.endswith("\\")


def filter_image_names(names: Iterable[str]) -> List[str]:
    """Оставляет только имена записей архива, являющихся изображениями.

    Каталоги и скрытые записи отбрасываются всегда, независимо от расширения.
    """
    return [name for name in names if not is_directory_entry(name) and is_image_name(name)]

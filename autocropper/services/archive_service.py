"""Чтение и запись zip-архивов (стандартный `zipfile`)."""
from __future__ import annotations

import io
import logging
import zipfile
import zlib
from typing import Iterable, List, Tuple

from autocropper.services.errors import CodecFailure

logger = logging.getLogger(__name__)

Entry = Tuple[str, bytes]

# Ошибки распаковки отдельной записи: повреждённые данные, шифрование, неизвестный метод сжатия
_ENTRY_ERRORS = (
    zipfile.BadZipFile,
    zipfile.LargeZipFile,
    RuntimeError,
    NotImplementedError,
    zlib.error,
    EOFError,
    OSError,
)


class ArchiveService:
    def list_names(self, data: bytes, archive_name: str = "<archive>") -> List[str]:
        """Возвращает имена всех записей архива (каталоги включительно), не распаковывая их.

        Raises:
            CodecFailure: если данные не являются zip-архивом.
        """
        try:
            with zipfile.ZipFile(io.BytesIO(data), "r") as zf:
                names = [info.filename for info in zf.infolist()]
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError) as exc:
            raise CodecFailure(archive_name, str(exc)) from exc
        logger.info("Listed %d entries in %s", len(names), archive_name)
        return names

    def read_entry(self, data: bytes, name: str) -> bytes:
        """Распаковывает одну запись.

        Каждый вызов открывает архив заново, поэтому записи можно читать из
        разных потоков независимо.

        Raises:
            CodecFailure: если запись повреждена, зашифрована или сжата неизвестным методом.
        """
        try:
            with zipfile.ZipFile(io.BytesIO(data), "r") as zf:
                return zf.read(name)
        except (KeyError, *_ENTRY_ERRORS) as exc:
            raise CodecFailure(name, str(exc)) from exc

    def build(self, entries: Iterable[Entry]) -> bytes:
        """Собирает zip-архив; имена записей сохраняются байт в байт."""
        buffer = io.BytesIO()
        count = 0
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for name, payload in entries:
                zf.writestr(name, payload)
                count += 1
        logger.info("Built archive with %d entries", count)
        return buffer.getvalue()

"""Упаковка результата: одно изображение или zip-архив, и имя выходного файла."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Sequence

from autocropper.models.image_model import ImageData
from autocropper.models.session_model import UploadContext
from autocropper.services.archive_service import ArchiveService
from autocropper.services.image_service import ImageService, mime_type_for
from autocropper.services.name_service import dotless_extension

logger = logging.getLogger(__name__)

ARCHIVE_MIME_TYPE = "application/zip"

_FINAL_EXTENSION = re.compile(r"\.[^.]+$")
_ZIP_SUFFIX = re.compile(r"\.zip$", re.IGNORECASE)


@dataclass(frozen=True)
class OutputArtifact:
    file_name: str
    mime_type: str
    data: bytes


def output_file_name(upload: UploadContext) -> str:
    """Имя файла для сохранения.

    photo.PNG -> photo.cropped.png; batch.ZIP -> batch.cropped.zip.
    """
    if upload.is_archive:
        return _ZIP_SUFFIX.sub(".cropped.zip", upload.file_name)
    extension = dotless_extension(upload.file_name)
    return _FINAL_EXTENSION.sub(".cropped." + extension, upload.file_name)


class OutputPackager:
    def __init__(
        self,
        image_service: Optional[ImageService] = None,
        archive_service: Optional[ArchiveService] = None,
    ) -> None:
        self._image_service = image_service or ImageService()
        self._archive_service = archive_service or ArchiveService()

    def package(self, upload: UploadContext, cropped: Sequence[ImageData]) -> OutputArtifact:
        """Кодирует обрезанный пакет для сохранения.

        Загруженное изображение -> одно изображение в формате исходного расширения.
        Загруженный архив -> zip, где каждая запись названа исходным именем записи
        без переименования и дедупликации.

        Raises:
            ValueError: если пакет пуст.
            CodecFailure: если кодирование не удалось.
        """
        if not cropped:
            raise ValueError("Нет обрезанных изображений для сохранения")

        file_name = output_file_name(upload)
        if not upload.is_archive:
            extension = dotless_extension(upload.file_name)
            data = self._image_service.encode(cropped[0], extension)
            logger.info("Packaged single image %s (%d bytes)", file_name, len(data))
            return OutputArtifact(file_name=file_name, mime_type=mime_type_for(extension), data=data)

        entries = [(image.name, self._image_service.encode_for_name(image)) for image in cropped]
        data = self._archive_service.build(entries)
        logger.info("Packaged %d images into %s (%d bytes)", len(entries), file_name, len(data))
        return OutputArtifact(file_name=file_name, mime_type=ARCHIVE_MIME_TYPE, data=data)

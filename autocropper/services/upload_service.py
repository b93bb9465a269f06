"""Маршрутизация загрузки: архив или одиночное изображение -> новая сессия."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from autocropper.models.image_model import ImageData
from autocropper.models.session_model import Session, UploadContext
from autocropper.services.archive_service import ArchiveService
from autocropper.services.batch_service import BatchProcessor
from autocropper.services.errors import UnsupportedFileType
from autocropper.services.image_service import ImageService
from autocropper.services.name_service import filter_image_names, is_archive_name, is_image_name

logger = logging.getLogger(__name__)


class UploadService:
    def __init__(
        self,
        image_service: Optional[ImageService] = None,
        archive_service: Optional[ArchiveService] = None,
        batch_processor: Optional[BatchProcessor] = None,
    ) -> None:
        self._image_service = image_service or ImageService()
        self._archive_service = archive_service or ArchiveService()
        self._batch_processor = batch_processor or BatchProcessor()

    def classify(self, file_name: str) -> UploadContext:
        """Определяет тип загрузки по имени.

        Raises:
            UnsupportedFileType: если имя не является ни архивом, ни изображением.
        """
        if is_archive_name(file_name):
            return UploadContext(file_name=file_name, is_archive=True)
        if is_image_name(file_name):
            return UploadContext(file_name=file_name, is_archive=False)
        raise UnsupportedFileType(file_name)

    def load_upload(self, file_name: str, data: bytes) -> Session:
        """Строит новую сессию из загруженного файла.

        Записи архива фильтруются (каталоги, скрытые, не-изображения), декодируются
        независимо и сортируются по имени. Ошибки декодирования отдельных записей
        попадают в `Session.load_failures`.

        Raises:
            UnsupportedFileType: если тип файла не распознан.
            CodecFailure: если сам архив не читается.
        """
        upload = self.classify(file_name)
        if upload.is_archive:
            all_names = self._archive_service.list_names(data, archive_name=file_name)
            names = filter_image_names(all_names)
            logger.info("%s: %d of %d entries are images", file_name, len(names), len(all_names))

            def load(name: str) -> ImageData:
                return self._image_service.decode(name, self._archive_service.read_entry(data, name))
        else:
            names = [file_name]

            def load(name: str) -> ImageData:
                return self._image_service.decode(name, data)

        result = self._batch_processor.detect_batch(names, load)
        return Session(upload=upload, original=result.images, load_failures=result.failures)

    def load_path(self, file_path: str | Path) -> Session:
        path = Path(file_path)
        # Validate the name before touching the file.
        self.classify(path.name)
        return self.load_upload(path.name, path.read_bytes())

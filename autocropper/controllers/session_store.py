"""Хранилище текущей сессии с отбрасыванием устаревших результатов.

Каждая фоновая задача получает токен (номер поколения). Новая загрузка или
смена отступа увеличивает поколение; результат со старым токеном не
публикуется, поэтому частичная работа по прежней загрузке не видна.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from autocropper.models.session_model import BatchResult, Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JobToken:
    upload_generation: int
    crop_generation: int


class SessionStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._session: Optional[Session] = None
        self._upload_generation = 0
        self._crop_generation = 0

    @property
    def session(self) -> Optional[Session]:
        return self._session

    def begin_upload(self) -> JobToken:
        """Начинает новую загрузку: все задачи прежней загрузки становятся устаревшими."""
        with self._lock:
            self._upload_generation += 1
            self._crop_generation += 1
            return self._token()

    def publish_upload(self, token: JobToken, session: Session) -> bool:
        with self._lock:
            if token.upload_generation != self._upload_generation:
                logger.info("Discarding stale upload result for %s", session.upload.file_name)
                return False
            self._session = session
            return True

    def begin_crop(self) -> JobToken:
        with self._lock:
            self._crop_generation += 1
            return self._token()

    def publish_crop(self, token: JobToken, result: BatchResult) -> bool:
        with self._lock:
            if self._session is None or token != self._token():
                logger.info("Discarding stale crop result (%d images)", len(result.images))
                return False
            self._session = self._session.with_cropped(result)
            return True

    def invalidate_cropped(self) -> None:
        """Сбрасывает обрезанный пакет и отменяет незавершённую обрезку."""
        with self._lock:
            self._crop_generation += 1
            if self._session is not None and self._session.cropped is not None:
                self._session = self._session.without_cropped()

    def current_token(self) -> JobToken:
        with self._lock:
            return self._token()

    def is_current(self, token: JobToken) -> bool:
        with self._lock:
            return token == self._token()

    def _token(self) -> JobToken:
        return JobToken(upload_generation=self._upload_generation, crop_generation=self._crop_generation)

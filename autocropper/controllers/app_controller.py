"""Контроллер приложения: оркестрация UI и сервисов.

SOLID:
- SRP: класс управляет связями между UI и сервисами (без логики обработки изображений).
- DIP: зависит от сервисов как от абстрактных ролей; конкретные реализации инкапсулированы.
Clean Code:
- Обработчики компактны; тяжёлая логика вынесена в сервисы и выполняется в фоне.
"""
from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass, field
from pathlib import Path
from tkinter import filedialog, messagebox, TclError
from typing import Any, Callable, Optional, Tuple

import customtkinter as ctk

from autocropper.controllers.session_store import JobToken, SessionStore
from autocropper.models.session_model import BatchResult, Configuration, Session, is_valid_padding_text
from autocropper.services.batch_service import BatchProcessor
from autocropper.services.errors import AutocropperError, InvalidPaddingInput, UnsupportedFileType
from autocropper.services.name_service import ACCEPTED_EXTENSIONS
from autocropper.services.package_service import OutputArtifact, OutputPackager
from autocropper.services.upload_service import UploadService
from autocropper.ui.bottom_bar import BottomBar
from autocropper.ui.preview_list import PreviewList
from autocropper.ui.sidebar import Sidebar

logger = logging.getLogger(__name__)

POLL_INTERVAL_MS = 50

# (token, on_done, result, error)
_Completion = Tuple[JobToken, Callable[[JobToken, Any], None], Any, Optional[BaseException]]


@dataclass
class AppController:
    """Связывает элементы UI с прикладной логикой.

    Ответственности:
    - Инициализация и бинд событий (UI -> контроллер).
    - Загрузка файла через `UploadService` в фоновом потоке.
    - Обрезка пакета через `BatchProcessor` и сохранение через `OutputPackager`.
    - Отбрасывание устаревших результатов через `SessionStore`.
    """
    sidebar: Sidebar
    originals: PreviewList
    cropped: PreviewList
    bottom: BottomBar
    window: ctk.CTk

    _upload_service: UploadService = field(default_factory=UploadService)
    _batch_processor: BatchProcessor = field(default_factory=BatchProcessor)
    _packager: OutputPackager = field(default_factory=OutputPackager)
    _store: SessionStore = field(default_factory=SessionStore)
    _completions: "queue.Queue[_Completion]" = field(default_factory=queue.Queue)
    _busy_jobs: int = 0

    def bind_events(self) -> None:
        """Регистрирует обработчики событий между UI-компонентами.

        Сохраняет слабую связность: компоненты UI ничего не знают друг о друге,
        общаются через контроллер.
        """
        self.sidebar.on_open_file = self._handle_open_file
        self.sidebar.on_padding_change = self._handle_padding_change
        self.sidebar.on_crop = self._handle_crop
        self.sidebar.on_download = self._handle_download
        self._refresh()
        self.window.after(POLL_INTERVAL_MS, self._poll_completions)

    # ---- Handlers ----
    def _handle_open_file(self) -> None:
        patterns = " ".join(f"*{ext}" for ext in ACCEPTED_EXTENSIONS)
        try:
            file_path = filedialog.askopenfilename(
                title="Выберите изображение или zip-архив",
                filetypes=(
                    ("Изображения и архивы", patterns),
                    ("All files", "*.*"),
                ),
            )
        except TclError:
            # Silent fail if dialog cannot open
            return

        if not file_path:
            return

        path = Path(file_path)
        try:
            self._upload_service.classify(path.name)
        except UnsupportedFileType as exc:
            messagebox.showwarning("Неверный тип файла", str(exc))
            return

        try:
            data = path.read_bytes()
        except OSError as exc:
            messagebox.showerror("Ошибка чтения", str(exc))
            return

        token = self._store.begin_upload()
        logger.info("Loading %s (%d bytes)", path.name, len(data))
        self._run_in_background(
            token,
            lambda: self._upload_service.load_upload(path.name, data),
            self._on_upload_loaded,
            f"Загрузка {path.name}…",
        )

    def _handle_padding_change(self, _text: str) -> None:
        # any padding edit invalidates the cropped batch
        self._store.invalidate_cropped()
        self._refresh()

    def _handle_crop(self) -> None:
        session = self._store.session
        if session is None or not session.original:
            return
        try:
            config = Configuration.from_text(self.sidebar.get_padding_text())
        except InvalidPaddingInput as exc:
            self.bottom.set_message(str(exc))
            return

        token = self._store.begin_crop()
        images = session.original
        self._run_in_background(
            token,
            lambda: self._batch_processor.process_batch(images, config.padding),
            self._on_cropped,
            f"Обрезка {len(images)} изображений (отступ {config.padding})…",
        )

    def _handle_download(self) -> None:
        session = self._store.session
        if session is None or not session.cropped:
            return
        token = self._store.current_token()
        cropped = session.cropped
        upload = session.upload
        self._run_in_background(
            token,
            lambda: self._packager.package(upload, cropped),
            self._on_packaged,
            "Кодирование результата…",
        )

    # ---- Completions (UI thread) ----
    def _on_upload_loaded(self, token: JobToken, session: Session) -> None:
        if not self._store.publish_upload(token, session):
            return
        message = f"Загружено изображений: {len(session.original)}."
        if session.load_failures:
            message += " Не прочитано: " + "; ".join(f.message for f in session.load_failures)
        self.bottom.set_message(message)

    def _on_cropped(self, token: JobToken, result: BatchResult) -> None:
        if not self._store.publish_crop(token, result):
            return
        message = f"Обрезано изображений: {len(result.images)}."
        if result.failures:
            message += " Пропущено: " + "; ".join(f.message for f in result.failures)
        self.bottom.set_message(message)

    def _on_packaged(self, token: JobToken, artifact: OutputArtifact) -> None:
        if not self._store.is_current(token):
            return
        extension = Path(artifact.file_name).suffix
        try:
            target = filedialog.asksaveasfilename(
                title="Сохранить результат",
                initialfile=artifact.file_name,
                defaultextension=extension,
            )
        except TclError:
            return
        if not target:
            return
        try:
            Path(target).write_bytes(artifact.data)
        except OSError as exc:
            messagebox.showerror("Ошибка сохранения", str(exc))
            return
        logger.info("Saved %s (%s, %d bytes)", target, artifact.mime_type, len(artifact.data))
        self.bottom.set_message(f"Сохранено: {target}")

    # ---- Helpers ----
    def _run_in_background(
        self,
        token: JobToken,
        job: Callable[[], Any],
        on_done: Callable[[JobToken, Any], None],
        message: str,
    ) -> None:
        """Выполняет задачу в потоке; результат доставляется в UI-поток через очередь."""
        def worker() -> None:
            try:
                result = job()
            except Exception as exc:  # delivered to the UI thread below
                self._completions.put((token, on_done, None, exc))
                return
            self._completions.put((token, on_done, result, None))

        self._busy_jobs += 1
        self.bottom.set_busy(True, message)
        self._refresh()
        threading.Thread(target=worker, daemon=True).start()

    def _poll_completions(self) -> None:
        while True:
            try:
                token, on_done, result, error = self._completions.get_nowait()
            except queue.Empty:
                break
            self._busy_jobs -= 1
            if error is None:
                on_done(token, result)
            elif not self._store.is_current(token):
                logger.info("Discarding failure of a stale job: %s", error)
            elif isinstance(error, AutocropperError):
                logger.warning("Job failed: %s", error)
                self.bottom.set_message(str(error))
            else:
                logger.exception("Unexpected job failure", exc_info=error)
                messagebox.showerror("Ошибка", str(error))
            self.bottom.set_busy(self._busy_jobs > 0)
            self._refresh()
        self.window.after(POLL_INTERVAL_MS, self._poll_completions)

    def _refresh(self) -> None:
        """Синхронизирует превью и доступность кнопок с текущей сессией."""
        session = self._store.session
        self.sidebar.set_session_info(session)
        if session is None:
            self.originals.set_images((), placeholder="Загрузите изображение или zip-архив.")
            self.cropped.set_images((), placeholder="")
        else:
            self.originals.set_images(session.original, placeholder="Нет изображений.")
            self.cropped.set_images(session.cropped or (), placeholder="Нажмите «Обрезать».")
        can_crop = (
            session is not None
            and len(session.original) > 0
            and is_valid_padding_text(self.sidebar.get_padding_text())
        )
        can_download = session is not None and bool(session.cropped)
        self.sidebar.set_actions_state(can_crop=can_crop, can_download=can_download, busy=self._busy_jobs > 0)

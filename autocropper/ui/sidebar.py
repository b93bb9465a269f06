"""Боковая панель: шаги загрузки, выбора отступа, обрезки и сохранения.

Принципы:
- SRP: управляет только UI параметров, не содержит алгоритмов.
- ISP: выдаёт параметры через компактные методы `get_*`, события через `on_*`.
"""
from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk

from autocropper.models.session_model import Session, is_valid_padding_text

_INVALID_BORDER = "#D9534F"


class Sidebar(ctk.CTkFrame):
    """Панель с четырьмя шагами: загрузка, отступ, обрезка, сохранение."""
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, width=280, **kwargs)

        self.grid_columnconfigure(0, weight=1)

        # Callbacks
        self.on_open_file: Optional[Callable[[], None]] = None
        self.on_padding_change: Optional[Callable[[str], None]] = None
        self.on_crop: Optional[Callable[[], None]] = None
        self.on_download: Optional[Callable[[], None]] = None

        # Step 1
        self._step1_title = ctk.CTkLabel(self, text="Шаг 1: загрузка", font=ctk.CTkFont(size=16, weight="bold"))
        self._step1_title.grid(row=0, column=0, padx=8, pady=(8, 4), sticky="w")

        self._open_btn = ctk.CTkButton(self, text="Открыть изображение или zip…", command=self._emit_open_file)
        self._open_btn.grid(row=1, column=0, padx=8, pady=(0, 4), sticky="ew")

        self._hint = ctk.CTkLabel(
            self,
            text="Файлы, имена которых начинаются с «.», игнорируются.",
            wraplength=250,
            anchor="w",
            justify="left",
        )
        self._hint.grid(row=2, column=0, padx=8, pady=(0, 4), sticky="ew")

        self._file_val = ctk.StringVar(value="—")
        self._count_val = ctk.StringVar(value="—")
        self._info_file = ctk.CTkLabel(self, textvariable=self._file_val, wraplength=250, anchor="w", justify="left")
        self._info_count = ctk.CTkLabel(self, textvariable=self._count_val, wraplength=250, anchor="w", justify="left")
        self._info_file.grid(row=3, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_count.grid(row=4, column=0, padx=8, pady=(0, 10), sticky="ew")

        # Step 2
        self._step2_title = ctk.CTkLabel(self, text="Шаг 2: прозрачный отступ", font=ctk.CTkFont(size=16, weight="bold"))
        self._step2_title.grid(row=5, column=0, padx=8, pady=(8, 4), sticky="w")

        self._padding_val = ctk.StringVar(value="0")
        self._padding_entry = ctk.CTkEntry(self, textvariable=self._padding_val, width=100)
        self._padding_entry.grid(row=6, column=0, padx=8, pady=(0, 10), sticky="w")
        self._default_border = self._padding_entry.cget("border_color")
        self._padding_val.trace_add("write", self._on_padding_write)

        # Step 3
        self._step3_title = ctk.CTkLabel(self, text="Шаг 3: обрезка", font=ctk.CTkFont(size=16, weight="bold"))
        self._step3_title.grid(row=7, column=0, padx=8, pady=(8, 4), sticky="w")
        self._crop_btn = ctk.CTkButton(self, text="Обрезать", command=self._emit_crop, state="disabled")
        self._crop_btn.grid(row=8, column=0, padx=8, pady=(0, 10), sticky="ew")

        # Step 4
        self._step4_title = ctk.CTkLabel(self, text="Шаг 4: сохранение", font=ctk.CTkFont(size=16, weight="bold"))
        self._step4_title.grid(row=9, column=0, padx=8, pady=(8, 4), sticky="w")
        self._download_btn = ctk.CTkButton(self, text="Сохранить…", command=self._emit_download, state="disabled")
        self._download_btn.grid(row=10, column=0, padx=8, pady=(0, 10), sticky="ew")

        # filler
        self.grid_rowconfigure(99, weight=1)

    # ---- Public API ----
    def get_padding_text(self) -> str:
        return self._padding_val.get()

    def set_session_info(self, session: Optional[Session]) -> None:
        """Отображает имя загрузки и число изображений (с ошибками, если были)."""
        if session is None:
            self._file_val.set("—")
            self._count_val.set("—")
            return
        kind = "архив" if session.upload.is_archive else "изображение"
        self._file_val.set(f"{session.upload.file_name} ({kind})")
        text = f"Изображений: {len(session.original)}"
        if session.load_failures:
            text += f", не прочитано: {len(session.load_failures)}"
        self._count_val.set(text)

    def set_actions_state(self, can_crop: bool, can_download: bool, busy: bool = False) -> None:
        self._crop_btn.configure(state="normal" if can_crop and not busy else "disabled")
        self._download_btn.configure(state="normal" if can_download and not busy else "disabled")

    # ---- Events ----
    def _emit_open_file(self) -> None:
        if self.on_open_file:
            self.on_open_file()

    def _emit_crop(self) -> None:
        if self.on_crop:
            self.on_crop()

    def _emit_download(self) -> None:
        if self.on_download:
            self.on_download()

    def _on_padding_write(self, *_args: object) -> None:
        text = self._padding_val.get()
        border = self._default_border if is_valid_padding_text(text) else _INVALID_BORDER
        self._padding_entry.configure(border_color=border)
        if self.on_padding_change:
            self.on_padding_change(text)

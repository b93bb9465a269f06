"""Список превью: нумерованные строки «n. имя (Ш x В)» с миниатюрами.

Принципы:
- SRP: отвечает только за представление пакета изображений.
- Исходные буферы не изменяются; миниатюры строятся из копий.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

import customtkinter as ctk
import numpy as np
from PIL import Image

from autocropper.models.image_model import ImageData

THUMBNAIL_SIZE = (160, 160)


def format_caption(index: int, image: ImageData) -> str:
    return f"{index + 1}. {image.name} ({image.width}x{image.height})"


def _make_thumbnail(image: ImageData) -> Optional[Image.Image]:
    if image.width == 0 or image.height == 0:
        return None
    pil_image = Image.fromarray(np.ascontiguousarray(image.pixels))
    pil_image.thumbnail(THUMBNAIL_SIZE, Image.Resampling.LANCZOS)
    return pil_image


class PreviewList(ctk.CTkFrame):
    """Заголовок, флажок «Скрыть» и прокручиваемый список превью."""
    def __init__(self, master: ctk.CTk, title: str, **kwargs) -> None:
        super().__init__(master, **kwargs)
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._title_text = title
        self._images: Sequence[ImageData] = ()
        self._placeholder_text = ""
        # CTkImage references must outlive the labels that show them
        self._thumbnails: List[ctk.CTkImage] = []
        self._rows: List[ctk.CTkFrame] = []

        self._title = ctk.CTkLabel(self, text=title, font=ctk.CTkFont(size=16, weight="bold"), anchor="w")
        self._title.grid(row=0, column=0, padx=8, pady=(8, 4), sticky="w")

        self._hidden = ctk.BooleanVar(value=False)
        self._hide_check = ctk.CTkCheckBox(self, text="Скрыть", variable=self._hidden, command=self._on_hide_toggle)
        self._hide_check.grid(row=0, column=1, padx=8, pady=(8, 4), sticky="e")

        self._body = ctk.CTkScrollableFrame(self)
        self._body.grid(row=1, column=0, columnspan=2, padx=8, pady=(0, 8), sticky="nsew")
        self._body.grid_columnconfigure(0, weight=1)

        self._placeholder = ctk.CTkLabel(self._body, text="", anchor="w", justify="left")
        self._render()

    # ---- Public API ----
    def set_images(self, images: Sequence[ImageData], placeholder: str = "") -> None:
        """Показывает пакет изображений (пустой пакет -> текст-заглушка)."""
        images = tuple(images)
        if images == self._images and placeholder == self._placeholder_text:
            return
        self._images = images
        self._placeholder_text = placeholder
        count = f" ({len(self._images)})" if self._images else ""
        self._title.configure(text=f"{self._title_text}{count}")
        self._render()

    def is_hidden(self) -> bool:
        return bool(self._hidden.get())

    # ---- Internals ----
    def _on_hide_toggle(self) -> None:
        self._render()

    def _clear_rows(self) -> None:
        for row in self._rows:
            row.destroy()
        self._rows = []
        self._thumbnails = []
        self._placeholder.grid_remove()

    def _render(self) -> None:
        self._clear_rows()
        if self.is_hidden():
            self._placeholder.configure(text="Скрыто.")
            self._placeholder.grid(row=0, column=0, padx=6, pady=6, sticky="w")
            return
        if not self._images:
            self._placeholder.configure(text=self._placeholder_text)
            self._placeholder.grid(row=0, column=0, padx=6, pady=6, sticky="w")
            return

        for index, image in enumerate(self._images):
            row = ctk.CTkFrame(self._body)
            row.grid(row=index, column=0, padx=4, pady=4, sticky="ew")
            row.grid_columnconfigure(0, weight=1)

            caption = ctk.CTkLabel(row, text=format_caption(index, image), anchor="w", justify="left", wraplength=360)
            caption.grid(row=0, column=0, padx=6, pady=(4, 2), sticky="w")

            thumb = _make_thumbnail(image)
            if thumb is not None:
                ctk_image = ctk.CTkImage(light_image=thumb, dark_image=thumb, size=thumb.size)
                self._thumbnails.append(ctk_image)
                ctk.CTkLabel(row, text="", image=ctk_image).grid(row=1, column=0, padx=6, pady=(0, 6), sticky="w")
            self._rows.append(row)

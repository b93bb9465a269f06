from __future__ import annotations

import customtkinter as ctk


class BottomBar(ctk.CTkFrame):
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, height=40, **kwargs)

        # layout
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(1, weight=1)  # message stretches

        self._state_value = ctk.StringVar(value="Готово")
        self._state_label = ctk.CTkLabel(self, textvariable=self._state_value, width=110, anchor="w")
        self._state_label.grid(row=0, column=0, padx=(10, 6), pady=6, sticky="w")

        self._message_value = ctk.StringVar(value="Загрузите изображение или zip-архив.")
        self._message_label = ctk.CTkLabel(self, textvariable=self._message_value, anchor="w", justify="left")
        self._message_label.grid(row=0, column=1, padx=6, pady=6, sticky="ew")

        self._progress = ctk.CTkProgressBar(self, mode="indeterminate", width=120)
        self._toggle_progress(visible=False)

    # public API (sync from controller)
    def set_message(self, message: str) -> None:
        self._message_value.set(message)

    def set_busy(self, busy: bool, message: str = "") -> None:
        self._state_value.set("Обработка…" if busy else "Готово")
        if message:
            self._message_value.set(message)
        self._toggle_progress(visible=busy)

    # helpers
    def _toggle_progress(self, visible: bool) -> None:
        if visible:
            self._progress.grid(row=0, column=2, padx=(6, 10), pady=6, sticky="e")
            self._progress.start()
        else:
            self._progress.stop()
            self._progress.grid_remove()

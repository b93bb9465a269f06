import customtkinter as ctk

from autocropper.controllers.app_controller import AppController
from autocropper.ui.bottom_bar import BottomBar
from autocropper.ui.preview_list import PreviewList
from autocropper.ui.sidebar import Sidebar


class AutocropperApp(ctk.CTk):
    def __init__(self) -> None:
        super().__init__()
        ctk.set_appearance_mode("system")
        ctk.set_default_color_theme("blue")

        self.title("Autocropper")
        self.minsize(900, 600)

        # root layout: sidebar, originals, cropped; status bar below
        self.grid_columnconfigure(1, weight=1)
        self.grid_columnconfigure(2, weight=1)
        self.grid_rowconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=0)

        self._sidebar = Sidebar(self)
        self._sidebar.grid(row=0, column=0, sticky="ns", padx=(12, 6), pady=(12, 6))

        self._originals = PreviewList(self, title="Исходные файлы")
        self._originals.grid(row=0, column=1, sticky="nsew", padx=6, pady=(12, 6))

        self._cropped = PreviewList(self, title="Обрезанные файлы")
        self._cropped.grid(row=0, column=2, sticky="nsew", padx=(6, 12), pady=(12, 6))

        self._bottom = BottomBar(self)
        self._bottom.grid(row=1, column=0, columnspan=3, sticky="ew", padx=12, pady=(0, 12))

        self._controller = AppController(
            sidebar=self._sidebar,
            originals=self._originals,
            cropped=self._cropped,
            bottom=self._bottom,
            window=self,
        )
        self._controller.bind_events()

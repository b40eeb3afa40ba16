"""Боковая панель: открытие файла, информация об изображении, результаты распознавания.

Принципы:
- SRP: управляет только UI, не содержит алгоритмов.
- ISP: события наружу через `on_*`, данные внутрь через компактные `set_*`.
"""
from __future__ import annotations

from typing import Callable, Optional, Tuple

import customtkinter as ctk

from shapefinder.models.image_model import ImageData
from shapefinder.models.shape_model import DetectedShape
from shapefinder.services.render_service import RenderService


class Sidebar(ctk.CTkFrame):
    """Панель с блоками: файл, информация, фигура под курсором, результаты."""
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, width=300, **kwargs)

        self.grid_columnconfigure(0, weight=1)

        # Callbacks
        self.on_open_file: Optional[Callable[[], None]] = None
        self.on_overlay_toggle: Optional[Callable[[bool], None]] = None
        self.on_fit_view: Optional[Callable[[], None]] = None

        self._title = ctk.CTkLabel(self, text="Инструменты", font=ctk.CTkFont(size=16, weight="bold"))
        self._title.grid(row=0, column=0, padx=8, pady=(8, 4), sticky="w")

        self._open_btn = ctk.CTkButton(self, text="Открыть изображение…", command=self._emit_open_file)
        self._open_btn.grid(row=1, column=0, padx=8, pady=(0, 12), sticky="ew")

        # Info section
        self._info_title = ctk.CTkLabel(self, text="Информация", font=ctk.CTkFont(size=16, weight="bold"))
        self._info_title.grid(row=2, column=0, padx=8, pady=(8, 4), sticky="w")

        self._path_val = ctk.StringVar(value="—")
        self._size_val = ctk.StringVar(value="—")
        self._dims_val = ctk.StringVar(value="—")

        self._info_path = ctk.CTkLabel(self, textvariable=self._path_val, wraplength=270, anchor="w", justify="left")
        self._info_size = ctk.CTkLabel(self, textvariable=self._size_val, anchor="w", justify="left")
        self._info_dims = ctk.CTkLabel(self, textvariable=self._dims_val, anchor="w", justify="left")

        self._info_path.grid(row=3, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_size.grid(row=4, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_dims.grid(row=5, column=0, padx=8, pady=(0, 10), sticky="ew")

        # Hover section
        self._hover_title = ctk.CTkLabel(self, text="Под курсором", font=ctk.CTkFont(size=16, weight="bold"))
        self._hover_title.grid(row=6, column=0, padx=8, pady=(8, 4), sticky="w")

        self._hover_xy_val = ctk.StringVar(value="—")
        self._hover_shape_val = ctk.StringVar(value="—")
        self._hover_xy = ctk.CTkLabel(self, textvariable=self._hover_xy_val, anchor="w", justify="left")
        self._hover_shape = ctk.CTkLabel(self, textvariable=self._hover_shape_val, anchor="w", justify="left")
        self._hover_xy.grid(row=7, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._hover_shape.grid(row=8, column=0, padx=8, pady=(0, 10), sticky="ew")

        # Results section
        self._results_title = ctk.CTkLabel(self, text="Распознавание", font=ctk.CTkFont(size=16, weight="bold"))
        self._results_title.grid(row=9, column=0, padx=8, pady=(8, 4), sticky="w")

        self._overlay_var = ctk.BooleanVar(value=True)
        self._overlay_switch = ctk.CTkSwitch(
            self, text="Показывать разметку", variable=self._overlay_var, command=self._emit_overlay_toggle
        )
        self._overlay_switch.grid(row=10, column=0, padx=8, pady=(0, 6), sticky="w")

        self._fit_btn = ctk.CTkButton(self, text="Вписать в окно", command=self._emit_fit_view)
        self._fit_btn.grid(row=11, column=0, padx=8, pady=(0, 6), sticky="ew")

        self._results_box = ctk.CTkTextbox(self, wrap="word", height=240)
        self._results_box.grid(row=12, column=0, padx=8, pady=(0, 8), sticky="nsew")
        self._results_box.configure(state="disabled")
        self.grid_rowconfigure(12, weight=1)

    # ---- Public API ----
    def set_image_info(self, image_data: ImageData) -> None:
        """Отображает метаданные загруженного изображения."""
        self._path_val.set(str(image_data.path))
        self._size_val.set(self._format_size(image_data.size_bytes))
        self._dims_val.set(f"{image_data.width} × {image_data.height} px, {image_data.source_mode}")

    def update_hover(self, point: Optional[Tuple[int, int]], shape: Optional[DetectedShape]) -> None:
        """Показывает координаты курсора и фигуру, в рамку которой он попал."""
        self._hover_xy_val.set("—" if point is None else f"({point[0]}, {point[1]})")
        if shape is None:
            self._hover_shape_val.set("—")
        else:
            self._hover_shape_val.set(f"{RenderService.label(shape.shape_type, shape.confidence)}, {shape.area} px²")

    def set_results_text(self, text: str) -> None:
        """Заменяет текст в блоке результатов."""
        self._results_box.configure(state="normal")
        self._results_box.delete("1.0", "end")
        self._results_box.insert("1.0", text)
        self._results_box.configure(state="disabled")

    def overlay_enabled(self) -> bool:
        return bool(self._overlay_var.get())

    # ---- Events ----
    def _emit_open_file(self) -> None:
        if self.on_open_file:
            self.on_open_file()

    def _emit_overlay_toggle(self) -> None:
        if self.on_overlay_toggle:
            self.on_overlay_toggle(self.overlay_enabled())

    def _emit_fit_view(self) -> None:
        if self.on_fit_view:
            self.on_fit_view()

    # ---- Helpers ----
    @staticmethod
    def _format_size(size_bytes: int) -> str:
        value = float(size_bytes)
        for unit in ("Б", "КБ", "МБ"):
            if value < 1024:
                return f"{value:.0f} {unit}" if unit == "Б" else f"{value:.1f} {unit}"
            value /= 1024
        return f"{value:.1f} ГБ"

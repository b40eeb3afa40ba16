"""Виджет просмотра: исходное изображение или изображение с разметкой фигур.

Принципы:
- SRP: только вывод на канву и события мыши; геометрия вида в `ViewTransform`.
- Наружу сообщает, какая фигура находится под курсором.
"""
from __future__ import annotations

from typing import Callable, Optional, Sequence, Tuple

import customtkinter as ctk
import tkinter as tk
from PIL import Image, ImageTk

from shapefinder.models.shape_model import DetectedShape
from shapefinder.ui.view_transform import ViewTransform, shape_at

HoverCallback = Callable[[Optional[Tuple[int, int]], Optional[DetectedShape]], None]


class ImageViewer(ctk.CTkFrame):
    """Канва с подгонкой под окно, масштабом колесом мыши и перетаскиванием."""
    def __init__(self, master: ctk.CTk | tk.Misc, **kwargs) -> None:
        super().__init__(master, **kwargs)
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)

        dark = ctk.get_appearance_mode().lower() == "dark"
        self._canvas = tk.Canvas(self, highlightthickness=0, bg="#1f1f1f" if dark else "#f2f2f2")
        self._canvas.grid(row=0, column=0, sticky="nsew")

        self._source: Optional[Image.Image] = None
        self._annotated: Optional[Image.Image] = None
        self._shapes: Tuple[DetectedShape, ...] = ()
        self._annotations_visible = True
        self._view: Optional[ViewTransform] = None
        self._photo: Optional[ImageTk.PhotoImage] = None
        self._drag_from: Optional[Tuple[int, int]] = None

        self.on_hover: Optional[HoverCallback] = None

        for sequence, handler in (
            ("<Configure>", lambda _e: self._redraw()),
            ("<Motion>", self._handle_motion),
            ("<Leave>", lambda _e: self._emit_hover(None, None)),
            ("<MouseWheel>", self._handle_wheel),
            ("<Button-4>", self._handle_wheel),
            ("<Button-5>", self._handle_wheel),
            ("<ButtonPress-1>", self._handle_drag_start),
            ("<B1-Motion>", self._handle_drag),
            ("<ButtonRelease-1>", self._handle_drag_end),
        ):
            self._canvas.bind(sequence, handler)

    # ---- Public API ----
    def show_detection(self, source: Image.Image, annotated: Image.Image, shapes: Sequence[DetectedShape]) -> None:
        """Показывает новое изображение с результатами; масштаб подгоняется под окно."""
        self._source = source
        self._annotated = annotated
        self._shapes = tuple(shapes)
        self._view = None
        self._redraw()

    def set_annotations_visible(self, visible: bool) -> None:
        self._annotations_visible = visible
        self._redraw()

    def fit_to_window(self) -> None:
        self._view = None
        self._redraw()

    # ---- Drawing ----
    def _canvas_size(self) -> Tuple[int, int]:
        return int(self._canvas.winfo_width()), int(self._canvas.winfo_height())

    def _redraw(self) -> None:
        self._canvas.delete("all")
        if self._source is None:
            return
        if self._view is None:
            self._view = ViewTransform.fit(self._source.size, self._canvas_size())

        shown = self._annotated if self._annotations_visible and self._annotated is not None else self._source
        # NEAREST keeps one-pixel box outlines sharp when zoomed
        resized = shown.resize(self._view.scaled_size(shown.size), Image.Resampling.NEAREST)
        self._photo = ImageTk.PhotoImage(resized)
        self._canvas.create_image(*self._view.offset, image=self._photo, anchor="nw")

    # ---- Mouse ----
    def _emit_hover(self, point: Optional[Tuple[int, int]], shape: Optional[DetectedShape]) -> None:
        if self.on_hover:
            self.on_hover(point, shape)

    def _handle_motion(self, event: tk.Event) -> None:
        if self._source is None or self._view is None:
            return
        point = self._view.to_image(event.x, event.y, self._source.size)
        self._emit_hover(point, shape_at(self._shapes, *point) if point else None)

    def _handle_wheel(self, event: tk.Event) -> None:
        if self._view is None:
            return
        # X11 reports the wheel as buttons 4 (up) and 5 (down)
        num = getattr(event, "num", None)
        if num in (4, 5):
            steps = 1 if num == 4 else -1
        elif event.delta:
            steps = 1 if event.delta > 0 else -1
        else:
            return
        self._view = self._view.zoom_at(event.x, event.y, steps)
        self._redraw()

    def _handle_drag_start(self, event: tk.Event) -> None:
        self._drag_from = (event.x, event.y)

    def _handle_drag(self, event: tk.Event) -> None:
        if self._drag_from is None or self._view is None:
            return
        sx, sy = self._drag_from
        self._view = self._view.panned(event.x - sx, event.y - sy)
        self._drag_from = (event.x, event.y)
        self._redraw()

    def _handle_drag_end(self, _event: tk.Event) -> None:
        self._drag_from = None

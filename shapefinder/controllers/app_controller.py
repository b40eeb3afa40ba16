"""Контроллер приложения: связывает UI с рабочим объектом распознавания.

SOLID:
- SRP: класс управляет связями между UI и ядром (без логики обработки изображений).
- DIP: с ядром общается только сообщениями `ImageRequested` / `DetectionCompleted` / `DetectionFailed`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from tkinter import filedialog, TclError
from typing import Optional, Tuple

import customtkinter as ctk

from shapefinder.controllers.detection_worker import DetectionWorker
from shapefinder.controllers.messages import DetectionCompleted, DetectionFailed, ImageRequested, Reply
from shapefinder.models.shape_model import DetectedShape
from shapefinder.services.render_service import RenderService
from shapefinder.ui.image_viewer import ImageViewer
from shapefinder.ui.sidebar import Sidebar

logger = logging.getLogger(__name__)


@dataclass
class AppController:
    """Связывает элементы UI с прикладной логикой.

    Ответственности:
    - Инициализация и бинд событий (UI -> контроллер).
    - Отправка запросов рабочему объекту и разбор его ответов.
    - Отрисовка разметки через `RenderService`.
    """
    viewer: ImageViewer
    sidebar: Sidebar
    window: ctk.CTk

    _worker: DetectionWorker = field(default_factory=DetectionWorker)
    _renderer: RenderService = field(default_factory=RenderService)

    def bind_events(self) -> None:
        """Регистрирует обработчики событий между UI-компонентами.

        Компоненты UI ничего не знают друг о друге, общаются через контроллер.
        """
        self.sidebar.on_open_file = self._handle_open_file
        self.sidebar.on_overlay_toggle = self._handle_overlay_toggle
        self.sidebar.on_fit_view = self.viewer.fit_to_window
        self.viewer.on_hover = self._handle_hover

    # ---- Handlers ----
    def _handle_open_file(self) -> None:
        try:
            file_path = filedialog.askopenfilename(
                title="Выберите изображение",
                filetypes=(
                    ("Images", "*.png *.jpg *.jpeg *.bmp *.gif *.tiff *.webp"),
                    ("All files", "*.*"),
                ),
            )
        except TclError:
            # Silent fail if dialog cannot open
            return

        if not file_path:
            return
        self.request(Path(file_path))

    def _handle_overlay_toggle(self, visible: bool) -> None:
        self.viewer.set_annotations_visible(visible)

    def _handle_hover(self, point: Optional[Tuple[int, int]], shape: Optional[DetectedShape]) -> None:
        self.sidebar.update_hover(point, shape)

    # ---- Messaging ----
    def request(self, path: Path) -> None:
        """Отправляет запрос на распознавание и разбирает ответы."""
        self.sidebar.set_results_text("Обработка…")
        self._worker.submit(ImageRequested(path=path))
        # отдаём управление Tk, чтобы текст успел отрисоваться
        self.window.after(1, self._pump)

    def _pump(self) -> None:
        self._worker.process_pending()
        for reply in self._worker.drain_replies():
            self._on_reply(reply)

    def _on_reply(self, reply: Reply) -> None:
        if isinstance(reply, DetectionFailed):
            self.sidebar.set_results_text(f"Ошибка: {reply.reason}")
            return
        if isinstance(reply, DetectionCompleted):
            image = reply.image
            overlay = self._renderer.draw_overlay(image.pil_image, reply.result)
            self.viewer.set_annotations_visible(self.sidebar.overlay_enabled())
            self.viewer.show_detection(image.pil_image, overlay, reply.result.shapes)
            self.sidebar.set_image_info(image)
            self.sidebar.set_results_text(self._renderer.describe(reply.result))
            logger.info("Displayed %d shape(s) for %s", len(reply.result.shapes), image.path)

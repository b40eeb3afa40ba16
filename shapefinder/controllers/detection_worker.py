"""Рабочий объект: принимает запросы на обработку и отвечает результатами.

Не зависит от Tk, поэтому используется и из GUI, и из тестов.
"""
from __future__ import annotations

import logging
import queue
from typing import List, Optional

from shapefinder.controllers.messages import (
    DetectionCompleted,
    DetectionFailed,
    ImageRequested,
    Reply,
)
from shapefinder.services.detection_service import DetectionService
from shapefinder.services.image_service import ImageService

logger = logging.getLogger(__name__)


class DetectionWorker:
    """Очередь входящих `ImageRequested` и исходящих ответов.

    Ответственности:
    - Загрузка изображения через `ImageService`.
    - Распознавание через `DetectionService`.
    - Превращение ошибок загрузки в `DetectionFailed` вместо исключений.
    """
    def __init__(self,
                 detection_service: Optional[DetectionService] = None,
                 image_service: Optional[ImageService] = None) -> None:
        self._detection = detection_service or DetectionService()
        self._images = image_service or ImageService()
        self.inbox: "queue.Queue[ImageRequested]" = queue.Queue()
        self.outbox: "queue.Queue[Reply]" = queue.Queue()

    def submit(self, message: ImageRequested) -> None:
        self.inbox.put(message)

    def process_pending(self) -> int:
        """Обрабатывает все накопленные запросы; возвращает их число."""
        handled = 0
        while True:
            try:
                message = self.inbox.get_nowait()
            except queue.Empty:
                return handled
            self.outbox.put(self.handle(message))
            handled += 1

    def handle(self, message: ImageRequested) -> Reply:
        try:
            image = self._images.load_image(message.path)
        except (FileNotFoundError, ValueError) as exc:
            logger.warning("Could not load %s: %s", message.path, exc)
            return DetectionFailed(path=message.path, reason=str(exc))
        result = self._detection.detect_shapes(image.rgba)
        return DetectionCompleted(image=image, result=result)

    def drain_replies(self) -> List[Reply]:
        replies: List[Reply] = []
        while True:
            try:
                replies.append(self.outbox.get_nowait())
            except queue.Empty:
                return replies

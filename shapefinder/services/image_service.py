"""Получение изображений для детектора: с диска или из объекта Pillow.

Принципы:
- SRP: только чтение и приведение к RGBA, распознавание живёт в `DetectionService`.
- Ошибки чтения превращаются во встроенные исключения с понятным текстом.
"""
from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from shapefinder.models.image_model import ImageData, RgbaImage

logger = logging.getLogger(__name__)


class ImageService:
    def load_image(self, file_path: str | Path) -> ImageData:
        """Читает файл и возвращает изображение в RGBA вместе с буфером детектора.

        Args:
            file_path: Путь к файлу изображения (любой формат, известный Pillow).

        Returns:
            `ImageData`: путь, размер файла, изображение Pillow и `RgbaImage`.

        Raises:
            FileNotFoundError: путь не существует или указывает не на файл.
            ValueError: Pillow не смог распознать содержимое как изображение.
        """
        path = Path(file_path)
        if not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")

        try:
            with Image.open(path) as opened:
                source_mode = opened.mode
                rgba = opened.convert("RGBA")
        except UnidentifiedImageError as exc:
            raise ValueError(f"Не удалось прочитать изображение: {path}") from exc

        logger.debug("Loaded %s (%s, %dx%d)", path.name, source_mode, *rgba.size)
        return ImageData(
            path=path,
            size_bytes=path.stat().st_size,
            pil_image=rgba,
            source_mode=source_mode,
            rgba=self.from_pil(rgba),
        )

    def from_pil(self, image: Image.Image) -> RgbaImage:
        """Плоский RGBA-буфер (построчно) из изображения Pillow любого режима."""
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        width, height = image.size
        return RgbaImage(width=width, height=height, data=np.asarray(image, dtype=np.uint8).reshape(-1))

"""Изображения на входе детектора.

`RgbaImage` проверяет буфер один раз при создании; дальше конвейер ему доверяет.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image


@dataclass(frozen=True)
class RgbaImage:
    """Входной буфер детектора: RGBA, построчно, 4 канала на пиксель.

    Fields:
        width: Ширина, px.
        height: Высота, px.
        data: Плоский `uint8`-буфер длиной width * height * 4 (только чтение).
    """
    width: int
    height: int
    data: np.ndarray

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Некорректные размеры изображения: {self.width}x{self.height}")
        raw = np.asarray(self.data).ravel()
        expected = self.width * self.height * 4
        if raw.size != expected:
            raise ValueError(f"Длина буфера {raw.size} не равна {expected} (width*height*4)")
        if raw.dtype != np.uint8:
            if raw.size and (raw.min() < 0 or raw.max() > 255):
                raise ValueError("Значения каналов должны лежать в диапазоне [0, 255]")
            raw = raw.astype(np.uint8)
        else:
            raw = raw.copy()
        raw.setflags(write=False)
        object.__setattr__(self, "data", raw)

    def channels(self) -> np.ndarray:
        """Возвращает представление буфера формы (height, width, 4)."""
        return self.data.reshape(self.height, self.width, 4)


@dataclass(frozen=True)
class ImageData:
    """Загруженный файл: исходник для показа и буфер для распознавания.

    Fields:
        path: Откуда прочитан файл.
        size_bytes: Размер файла на диске.
        pil_image: Изображение Pillow, уже приведённое к RGBA.
        source_mode: Режим Pillow до приведения ("RGB", "L", "P", ...).
        rgba: Тот же кадр в виде `RgbaImage`.
    """
    path: Path
    size_bytes: int
    pil_image: Image.Image
    source_mode: str
    rgba: RgbaImage

    @property
    def width(self) -> int:
        return self.rgba.width

    @property
    def height(self) -> int:
        return self.rgba.height

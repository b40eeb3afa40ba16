"""Геометрия просмотра: масштаб и сдвиг изображения на канве, попадание курсора в фигуру.

Без зависимостей от Tk, поэтому проверяется обычными тестами.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Sequence, Tuple

from shapefinder.models.shape_model import DetectedShape

MIN_SCALE = 0.1
MAX_SCALE = 4.0
ZOOM_STEP = 1.1


def _clamp_scale(scale: float) -> float:
    return max(MIN_SCALE, min(MAX_SCALE, scale))


@dataclass(frozen=True)
class ViewTransform:
    """Отображение пикселей изображения в координаты канвы.

    Fields:
        scale: Масштаб (пикселей канвы на пиксель изображения).
        offset: Положение левого верхнего угла изображения на канве.
    """
    scale: float = 1.0
    offset: Tuple[int, int] = (0, 0)

    @classmethod
    def fit(cls, image_size: Tuple[int, int], canvas_size: Tuple[int, int]) -> "ViewTransform":
        """Вписывает изображение в канву целиком и центрирует его."""
        img_w, img_h = image_size
        canvas_w, canvas_h = max(1, canvas_size[0]), max(1, canvas_size[1])
        scale = _clamp_scale(min(canvas_w / img_w, canvas_h / img_h))
        scaled_w, scaled_h = cls(scale).scaled_size(image_size)
        x = (canvas_w - scaled_w) // 2 if scaled_w <= canvas_w else 0
        y = (canvas_h - scaled_h) // 2 if scaled_h <= canvas_h else 0
        return cls(scale=scale, offset=(x, y))

    def scaled_size(self, image_size: Tuple[int, int]) -> Tuple[int, int]:
        return max(1, int(image_size[0] * self.scale)), max(1, int(image_size[1] * self.scale))

    def zoom_at(self, cx: int, cy: int, steps: int) -> "ViewTransform":
        """Меняет масштаб на ZOOM_STEP**steps, точка под курсором остаётся на месте."""
        new_scale = _clamp_scale(self.scale * ZOOM_STEP ** steps)
        if abs(new_scale - self.scale) < 1e-6:
            return self
        ox, oy = self.offset
        ix = (cx - ox) / self.scale
        iy = (cy - oy) / self.scale
        return ViewTransform(scale=new_scale, offset=(int(round(cx - ix * new_scale)), int(round(cy - iy * new_scale))))

    def panned(self, dx: int, dy: int) -> "ViewTransform":
        return replace(self, offset=(self.offset[0] + dx, self.offset[1] + dy))

    def to_image(self, cx: int, cy: int, image_size: Tuple[int, int]) -> Optional[Tuple[int, int]]:
        """Пиксель изображения под точкой канвы или None, если точка вне изображения."""
        ox, oy = self.offset
        if cx < ox or cy < oy:
            return None
        x = int((cx - ox) / self.scale)
        y = int((cy - oy) / self.scale)
        if x >= image_size[0] or y >= image_size[1]:
            return None
        return x, y


def shape_at(shapes: Sequence[DetectedShape], x: int, y: int) -> Optional[DetectedShape]:
    """Фигура, в рамку которой попадает точка; при вложенных рамках — наименьшая по площади."""
    hits = []
    for shape in shapes:
        x1, y1, x2, y2 = shape.bounding_box.as_xyxy()
        if x1 <= x < x2 and y1 <= y < y2:
            hits.append(shape)
    if not hits:
        return None
    return min(hits, key=lambda s: s.bounding_box.width * s.bounding_box.height)

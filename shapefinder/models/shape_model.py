"""Модели промежуточных и итоговых структур конвейера распознавания фигур.

Все структуры неизменяемые: каждый этап создаёт новый объект и не трогает вход.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Tuple

import numpy as np

ShapeType = Literal["circle", "triangle", "rectangle", "pentagon", "star"]
SHAPE_TYPES: Tuple[str, ...] = ("circle", "triangle", "rectangle", "pentagon", "star")

Point = Tuple[int, int]
# Упорядоченная замкнутая последовательность точек границы (x, y)
Contour = Tuple[Point, ...]
Polygon = Tuple[Point, ...]


@dataclass(frozen=True)
class BoundingBox:
    x: int
    y: int
    width: int
    height: int

    def as_xyxy(self) -> Tuple[int, int, int, int]:
        """Границы в виде (x1, y1, x2, y2), правая и нижняя не включаются."""
        return self.x, self.y, self.x + self.width, self.y + self.height


@dataclass(frozen=True)
class Centroid:
    x: float
    y: float


@dataclass(frozen=True)
class Component:
    """4-связная область маски: уникальные плоские индексы пикселей.

    Fields:
        pixels: Индексы `y * width + x` в порядке обхода заливкой.
        width: Ширина исходного изображения, px.
        height: Высота исходного изображения, px.
    """
    pixels: Tuple[int, ...]
    width: int
    height: int

    @property
    def area(self) -> int:
        return len(self.pixels)

    def coordinates(self) -> Tuple[np.ndarray, np.ndarray]:
        """Возвращает массивы (xs, ys) координат пикселей."""
        idx = np.fromiter(self.pixels, dtype=np.int64, count=len(self.pixels))
        return idx % self.width, idx // self.width


@dataclass(frozen=True)
class GeometricFeatures:
    """Скалярные признаки компоненты.

    Fields:
        area: Площадь в пикселях.
        perimeter: Длина замкнутого контура.
        bounding_box: Габаритный прямоугольник по пикселям.
        circularity: 4π·area / perimeter².
        vertex_count: Число вершин упрощённого многоугольника без повторов.
        concavity_count: Число смен знака векторного произведения.
        centroid: Средняя координата пикселей.
    """
    area: int
    perimeter: float
    bounding_box: BoundingBox
    circularity: float
    vertex_count: int
    concavity_count: int
    centroid: Centroid


@dataclass(frozen=True)
class DetectedShape:
    shape_type: ShapeType
    confidence: float
    bounding_box: BoundingBox
    centroid: Centroid
    area: int


@dataclass(frozen=True)
class DetectionResult:
    """Итог обработки одного изображения.

    Fields:
        shapes: Фигуры в порядке обнаружения компонент.
        processing_time_ms: Время обработки, мс.
        image_width: Ширина, px.
        image_height: Высота, px.
    """
    shapes: Tuple[DetectedShape, ...]
    processing_time_ms: float
    image_width: int
    image_height: int

"""Общие фикстуры: синтетические изображения с тёмными фигурами на белом фоне."""
import logging
import math
from typing import List, Tuple

import pytest
from PIL import Image, ImageDraw

from shapefinder.models.image_model import RgbaImage
from shapefinder.services.detection_service import DetectionService
from shapefinder.services.image_service import ImageService

logging.getLogger("PIL").setLevel(logging.WARNING)

BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)


def blank_canvas(width: int = 200, height: int = 200) -> Image.Image:
    return Image.new("RGBA", (width, height), WHITE)


def draw_disk(canvas: Image.Image, cx: int, cy: int, radius: int) -> Image.Image:
    ImageDraw.Draw(canvas).ellipse((cx - radius, cy - radius, cx + radius, cy + radius), fill=BLACK)
    return canvas


def triangle_points(cx: int, cy: int, side: int) -> List[Tuple[int, int]]:
    """Равносторонний треугольник вершиной вверх с центром (cx, cy)."""
    h = side * math.sqrt(3) / 2
    return [
        (cx, int(round(cy - 2 * h / 3))),
        (int(round(cx + side / 2)), int(round(cy + h / 3))),
        (int(round(cx - side / 2)), int(round(cy + h / 3))),
    ]


def star_points(cx: int, cy: int, outer: int, inner: int) -> List[Tuple[int, int]]:
    """Пятиконечная звезда с верхним лучом."""
    points = []
    for k in range(10):
        angle = math.radians(-90 + 36 * k)
        r = outer if k % 2 == 0 else inner
        points.append((int(round(cx + r * math.cos(angle))), int(round(cy + r * math.sin(angle)))))
    return points


def draw_polygon(canvas: Image.Image, points: List[Tuple[int, int]]) -> Image.Image:
    ImageDraw.Draw(canvas).polygon(points, fill=BLACK)
    return canvas


def to_rgba(canvas: Image.Image) -> RgbaImage:
    return ImageService().from_pil(canvas)


@pytest.fixture
def detector() -> DetectionService:
    return DetectionService()


@pytest.fixture
def disk_canvas() -> Image.Image:
    return draw_disk(blank_canvas(), 100, 100, 40)


@pytest.fixture
def triangle_canvas() -> Image.Image:
    return draw_polygon(blank_canvas(), triangle_points(100, 110, 120))


@pytest.fixture
def rectangle_canvas() -> Image.Image:
    canvas = blank_canvas()
    ImageDraw.Draw(canvas).rectangle((25, 75, 174, 124), fill=BLACK)
    return canvas


@pytest.fixture
def star_canvas() -> Image.Image:
    return draw_polygon(blank_canvas(), star_points(100, 100, 80, 32))

"""Геометрические признаки компоненты: площадь, периметр, габариты, округлость, вогнутость."""
from __future__ import annotations

import math
from typing import Optional, Sequence

from shapefinder.models.shape_model import (
    BoundingBox,
    Centroid,
    Component,
    Contour,
    GeometricFeatures,
    Point,
    Polygon,
)
from shapefinder.services.polygon_service import PolygonService


class GeometryService:
    def __init__(self, polygon_service: PolygonService | None = None) -> None:
        self._polygons = polygon_service or PolygonService()

    def extract(self, component: Component, contour: Contour, polygon: Polygon,
                perimeter: Optional[float] = None) -> GeometricFeatures:
        """Собирает признаки по пикселям компоненты, её контуру и упрощённому многоугольнику.

        Args:
            perimeter: Уже посчитанная длина контура; если не передана, считается здесь.

        Нулевой периметр заменяется на 1, чтобы округлость оставалась определённой.
        """
        if perimeter is None:
            perimeter = self._polygons.perimeter(contour)
        perimeter = perimeter or 1.0
        area = component.area
        unique = PolygonService.dedupe_cyclic(polygon)
        return GeometricFeatures(
            area=area,
            perimeter=perimeter,
            bounding_box=self.bounding_box(component),
            circularity=circularity(area, perimeter),
            vertex_count=len(unique),
            concavity_count=concavity_count(unique),
            centroid=self.centroid(component),
        )

    def bounding_box(self, component: Component) -> BoundingBox:
        xs, ys = component.coordinates()
        min_x, max_x = int(xs.min()), int(xs.max())
        min_y, max_y = int(ys.min()), int(ys.max())
        return BoundingBox(x=min_x, y=min_y, width=max_x - min_x + 1, height=max_y - min_y + 1)

    def centroid(self, component: Component) -> Centroid:
        xs, ys = component.coordinates()
        return Centroid(x=float(xs.sum()) / component.area, y=float(ys.sum()) / component.area)


def circularity(area: float, perimeter: float) -> float:
    """4π·area / perimeter²; для нулевого периметра подставляется 1."""
    perimeter = perimeter or 1.0
    return 4.0 * math.pi * area / (perimeter * perimeter)


def cross(a: Point, b: Point, c: Point) -> float:
    return (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])


def concavity_count(polygon: Sequence[Point]) -> int:
    """
    Число смен направления поворота вдоль многоугольника.

    По циклическим тройкам вершин считается знак векторного произведения;
    смена знака относительно первого ненулевого увеличивает счётчик.
    """
    n = len(polygon)
    sign = 0
    count = 0
    for i in range(n):
        s = _sign(cross(polygon[i], polygon[(i + 1) % n], polygon[(i + 2) % n]))
        if s == 0:
            continue
        if sign == 0:
            sign = s
        elif s != sign:
            count += 1
    return count


def interior_angle(a: Point, b: Point, c: Point) -> float:
    """Угол abc в градусах (косинус ограничен [-1, 1]); 0 для вырожденных сторон."""
    ux, uy = a[0] - b[0], a[1] - b[1]
    vx, vy = c[0] - b[0], c[1] - b[1]
    lu = math.hypot(ux, uy)
    lv = math.hypot(vx, vy)
    if lu * lv == 0:
        return 0.0
    cos = (ux * vx + uy * vy) / (lu * lv)
    return math.degrees(math.acos(max(-1.0, min(1.0, cos))))


def _sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0

"""Классификация фигуры по числу вершин и признакам (фиксированное дерево правил).

Порядок ветвей и пороги неизменны: "rectangle" служит запасным классом для
неоднозначных четырёхугольников, "star" — для многовершинных многоугольников.
"""
from __future__ import annotations

from typing import Sequence, Tuple

from shapefinder.models.shape_model import GeometricFeatures, Point, ShapeType
from shapefinder.services.geometry_service import interior_angle
from shapefinder.services.polygon_service import PolygonService

CIRCULARITY_CIRCLE = 0.70
ASPECT_TOLERANCE = 0.4
RIGHT_ANGLE_TOLERANCE_DEG = 25.0


class ClassifierService:
    def classify(self, features: GeometricFeatures, polygon: Sequence[Point]) -> Tuple[ShapeType, float]:
        """
        Возвращает (тип, уверенность) для компоненты.

        Сначала проверяется круг по округлости и пропорциям габаритов,
        затем решение принимается по числу вершин многоугольника без повторов.
        """
        shape_type, confidence = self._decide(features, PolygonService.dedupe_cyclic(polygon))
        return shape_type, max(0.0, min(1.0, confidence))

    def _decide(self, features: GeometricFeatures, poly: Sequence[Point]) -> Tuple[ShapeType, float]:
        c = features.circularity
        box = features.bounding_box
        aspect = abs(box.width - box.height) / max(box.width, box.height)
        if c > CIRCULARITY_CIRCLE and aspect < ASPECT_TOLERANCE:
            return "circle", min(0.99, 0.5 + (c - 0.7) * 2.5)

        n = len(poly)
        if n <= 3:
            return "triangle", 0.8
        if n == 4:
            right = self.count_right_angles(poly)
            if right >= 2:
                return "rectangle", 0.6 + (right / 4) * 0.4
            return "rectangle", 0.5
        if n == 5:
            return "pentagon", 0.75
        if n <= 8:
            if features.concavity_count >= 2:
                return "star", 0.75
            if c > 0.45:
                return "circle", min(0.9, 0.5 + (c - 0.45) * 1.2)
            return "star", 0.5
        if c > 0.5:
            return "circle", min(0.95, 0.5 + (c - 0.5))
        return "star", 0.55

    @staticmethod
    def count_right_angles(quad: Sequence[Point]) -> int:
        """Сколько углов четырёхугольника отличаются от 90° меньше чем на допуск."""
        right = 0
        for i in range(4):
            angle = interior_angle(quad[(i + 3) % 4], quad[i], quad[(i + 1) % 4])
            if abs(angle - 90.0) < RIGHT_ANGLE_TOLERANCE_DEG:
                right += 1
        return right

"""Упрощение контура до многоугольника (Ramer–Douglas–Peucker) и длина контура."""
from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np

from shapefinder.models.shape_model import Point, Polygon


class PolygonService:
    def __init__(self, epsilon_ratio: float = 0.02, epsilon_floor: float = 1.0) -> None:
        self._epsilon_ratio = epsilon_ratio
        self._epsilon_floor = epsilon_floor

    def perimeter(self, contour: Sequence[Point]) -> float:
        """Сумма евклидовых расстояний между циклически соседними точками."""
        if len(contour) < 2:
            return 0.0
        pts = np.asarray(contour, dtype=np.float64)
        deltas = pts - np.roll(pts, -1, axis=0)
        return float(np.hypot(deltas[:, 0], deltas[:, 1]).sum())

    def epsilon_for(self, perimeter: float) -> float:
        """Допуск, пропорциональный периметру: max(floor, ratio * perimeter)."""
        return max(self._epsilon_floor, perimeter * self._epsilon_ratio)

    def simplify(self, points: Sequence[Point], epsilon: float) -> Polygon:
        """
        Ramer–Douglas–Peucker с явным стеком отрезков вместо рекурсии.

        Для отрезка [start, end] ищется точка с максимальным расстоянием до отрезка
        (при равенстве — первая). Если расстояние больше `epsilon`, точка остаётся,
        и обе половины уходят в стек; иначе отрезок схлопывается до концов.
        """
        n = len(points)
        if n < 3:
            return tuple(points)
        pts = np.asarray(points, dtype=np.float64)
        keep = np.zeros(n, dtype=bool)
        keep[0] = keep[-1] = True

        stack: List[Tuple[int, int]] = [(0, n - 1)]
        while stack:
            start, end = stack.pop()
            if end - start < 2:
                continue
            dist = _segment_distances(pts[start + 1:end], pts[start], pts[end])
            local = int(np.argmax(dist))
            if dist[local] > epsilon:
                index = start + 1 + local
                keep[index] = True
                stack.append((index, end))
                stack.append((start, index))

        return tuple(p for p, k in zip(points, keep) if k)

    @staticmethod
    def dedupe_cyclic(polygon: Sequence[Point]) -> Polygon:
        """Убирает вершины, совпадающие с циклически предыдущей."""
        n = len(polygon)
        return tuple(p for i, p in enumerate(polygon) if p != polygon[(i - 1) % n])


def _segment_distances(pts: np.ndarray, a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Расстояния от точек до отрезка ab (до ближайшего конца, если проекция вне отрезка)."""
    seg = b - a
    len_sq = float(seg @ seg)
    rel = pts - a
    if len_sq == 0:
        return np.hypot(rel[:, 0], rel[:, 1])
    t = np.clip(rel @ seg / len_sq, 0.0, 1.0)
    proj = a + t[:, None] * seg
    diff = pts - proj
    return np.hypot(diff[:, 0], diff[:, 1])


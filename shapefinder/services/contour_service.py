"""Обход внешней границы компоненты (Moore-neighbor) как конечный автомат.

Состояние автомата — текущая точка и последнее принятое направление.
Переход: поиск соседа, начиная с направления (last + 5) mod 8, по кругу;
первый сосед из компоненты становится новой точкой и новым направлением.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, List, Optional, Tuple

from shapefinder.models.shape_model import Component, Contour, Point

# left, up-left, up, up-right, right, down-right, down, down-left
DIRECTIONS: Tuple[Point, ...] = (
    (-1, 0),
    (-1, -1),
    (0, -1),
    (1, -1),
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
)
INITIAL_DIRECTION = 6  # down
SEARCH_OFFSET = 5


@dataclass(frozen=True)
class TraceState:
    point: Point
    direction: int


class ContourTracer:
    """Трассировщик контура по множеству плоских индексов пикселей.

    Args:
        pixels: Индексы `y * width + x` пикселей компоненты.
        width: Ширина изображения, px.
        height: Высота изображения, px.
        step_limit: Предел шагов; по его исчерпании возвращается частичный контур.
    """
    def __init__(self, pixels: AbstractSet[int], width: int, height: int, step_limit: int = 100_000) -> None:
        self._pixels = pixels
        self._width = width
        self._height = height
        self._step_limit = step_limit

    @classmethod
    def for_component(cls, component: Component, step_limit: int = 100_000) -> "ContourTracer":
        return cls(frozenset(component.pixels), component.width, component.height, step_limit)

    def contains(self, x: int, y: int) -> bool:
        if x < 0 or x >= self._width or y < 0 or y >= self._height:
            return False
        return y * self._width + x in self._pixels

    def start_state(self) -> TraceState:
        """Стартовая точка — наименьшая строка, затем наименьший столбец."""
        start = min(self._pixels, key=lambda p: divmod(p, self._width))
        y, x = divmod(start, self._width)
        return TraceState(point=(x, y), direction=INITIAL_DIRECTION)

    def step(self, state: TraceState) -> Optional[TraceState]:
        """Один переход автомата; None, если у точки нет соседей из компоненты."""
        x, y = state.point
        first = (state.direction + SEARCH_OFFSET) % 8
        for k in range(8):
            direction = (first + k) % 8
            dx, dy = DIRECTIONS[direction]
            if self.contains(x + dx, y + dy):
                return TraceState(point=(x + dx, y + dy), direction=direction)
        return None

    def trace(self) -> Contour:
        """
        Обходит границу от стартовой точки до возврата в неё.

        Остановка: возврат в старт при уже собранных >1 точках, отсутствие соседа
        (одиночный пиксель) или исчерпание `step_limit` — тогда контур частичный.
        Подряд идущие одинаковые точки схлопываются.
        """
        if not self._pixels:
            return ()
        state = self.start_state()
        start = state.point
        points: List[Point] = [start]
        steps = 0
        while steps < self._step_limit:
            steps += 1
            nxt = self.step(state)
            if nxt is None:
                break
            state = nxt
            points.append(state.point)
            if state.point == start and len(points) > 1:
                break
        return _collapse_repeats(points)


def _collapse_repeats(points: List[Point]) -> Contour:
    out: List[Point] = []
    for p in points:
        if not out or out[-1] != p:
            out.append(p)
    return tuple(out)

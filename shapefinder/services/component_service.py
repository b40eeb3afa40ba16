"""Разметка 4-связных компонент бинарной маски и отсев мелких."""
from __future__ import annotations

import logging
from typing import List, Sequence

import numpy as np

from shapefinder.models.shape_model import Component

logger = logging.getLogger(__name__)


class ComponentService:
    def label(self, mask: np.ndarray) -> List[Component]:
        """
        Обходит маску построчно; каждый неразмеченный пиксель переднего плана
        начинает новую компоненту, которая заливается по 4-соседям.

        Заливка итеративная (явный стек), поэтому глубина рекурсии не ограничивает
        размер области. Каждый пиксель получает метку один раз.
        """
        height, width = mask.shape
        flat = mask.ravel()
        labels = np.zeros(flat.size, dtype=np.int32)
        components: List[Component] = []
        current = 0

        for start in np.flatnonzero(flat):
            start = int(start)
            if labels[start]:
                continue
            current += 1
            labels[start] = current
            pixels = [start]
            stack = [start]
            while stack:
                p = stack.pop()
                py, px = divmod(p, width)
                # right, left, down, up
                if px + 1 < width:
                    self._visit(p + 1, flat, labels, current, stack, pixels)
                if px - 1 >= 0:
                    self._visit(p - 1, flat, labels, current, stack, pixels)
                if py + 1 < height:
                    self._visit(p + width, flat, labels, current, stack, pixels)
                if py - 1 >= 0:
                    self._visit(p - width, flat, labels, current, stack, pixels)
            components.append(Component(pixels=tuple(pixels), width=width, height=height))

        logger.debug("Labeled %d components", len(components))
        return components

    @staticmethod
    def _visit(ni: int, flat: np.ndarray, labels: np.ndarray, current: int,
               stack: List[int], pixels: List[int]) -> None:
        if flat[ni] == 1 and labels[ni] == 0:
            labels[ni] = current
            stack.append(ni)
            pixels.append(ni)

    def filter_small(self, components: Sequence[Component], min_area: int) -> List[Component]:
        """Оставляет компоненты площадью не меньше `min_area`, порядок сохраняется."""
        kept = [c for c in components if c.area >= min_area]
        if len(kept) != len(components):
            logger.debug("Dropped %d components below %d px", len(components) - len(kept), min_area)
        return kept

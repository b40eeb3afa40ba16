"""Параметры конвейера распознавания.

Значения по умолчанию рассчитаны на тёмные фигуры на светлом фоне.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Polarity = Literal["dark", "bright"]


@dataclass(frozen=True)
class DetectionConfig:
    """Неизменяемый набор настроек детектора.

    Fields:
        blur_radius: Радиус усредняющего фильтра (окно 2r+1).
        fallback_threshold: Порог, если Отсу не нашёл разделения.
        noise_max_count: Пиксель стирается, если в окне 3x3 не больше стольких точек переднего плана.
        min_area_floor: Нижняя граница минимальной площади компоненты, px.
        min_area_ratio: Минимальная площадь как доля площади изображения.
        trace_step_limit: Предел шагов обхода контура.
        rdp_epsilon_ratio: Допуск RDP как доля периметра.
        rdp_epsilon_floor: Минимальный допуск RDP, px.
        min_contour_points: Компоненты с более коротким контуром пропускаются.
        polarity: "dark" — фигуры темнее фона, "bright" — светлее.
    """
    blur_radius: int = 1
    fallback_threshold: int = 128
    noise_max_count: int = 2
    min_area_floor: int = 20
    min_area_ratio: float = 0.0005
    trace_step_limit: int = 100_000
    rdp_epsilon_ratio: float = 0.02
    rdp_epsilon_floor: float = 1.0
    min_contour_points: int = 6
    polarity: Polarity = "dark"

    def __post_init__(self) -> None:
        if self.blur_radius < 0:
            raise ValueError(f"blur_radius должен быть >= 0, получено {self.blur_radius}")
        if not 0 <= self.fallback_threshold <= 255:
            raise ValueError(f"fallback_threshold вне диапазона [0, 255]: {self.fallback_threshold}")
        if self.noise_max_count < 0 or self.noise_max_count > 9:
            raise ValueError(f"noise_max_count вне диапазона [0, 9]: {self.noise_max_count}")
        if self.min_area_floor < 0 or self.min_area_ratio < 0:
            raise ValueError("Минимальная площадь не может быть отрицательной")
        if self.trace_step_limit <= 0:
            raise ValueError(f"trace_step_limit должен быть > 0, получено {self.trace_step_limit}")
        if self.rdp_epsilon_ratio < 0 or self.rdp_epsilon_floor < 0:
            raise ValueError("Допуск RDP не может быть отрицательным")
        if self.polarity not in ("dark", "bright"):
            raise ValueError(f"Неизвестная полярность: {self.polarity!r}")

    def min_component_area(self, width: int, height: int) -> int:
        """Минимальная площадь компоненты: max(floor, round(ratio * W * H)), округление вверх от .5."""
        return max(self.min_area_floor, int(self.min_area_ratio * width * height + 0.5))

"""Предобработка: яркость, сглаживание, порог Отсу, бинаризация, очистка шума.

Все методы чистые: принимают массивы numpy и возвращают новые, вход не меняется.
"""
from __future__ import annotations

import logging

import numpy as np

from shapefinder.models.detection_config import Polarity
from shapefinder.models.image_model import RgbaImage

logger = logging.getLogger(__name__)


class PreprocessService:
    def __init__(self, fallback_threshold: int = 128, noise_max_count: int = 2) -> None:
        self._fallback_threshold = fallback_threshold
        self._noise_max_count = noise_max_count

    # ---------- 1) Яркость ----------
    def to_luminance(self, image: RgbaImage) -> np.ndarray:
        """
        Яркость floor(0.299 R + 0.587 G + 0.114 B), массив uint8 формы (height, width).
        """
        rgba = image.channels().astype(np.float64)
        lum = 0.299 * rgba[..., 0] + 0.587 * rgba[..., 1] + 0.114 * rgba[..., 2]
        return np.floor(lum).astype(np.uint8)

    # ---------- Вспомогательные функции ----------
    def _window_sum(self, arr: np.ndarray, radius: int) -> np.ndarray:
        """
        Сумма по окну (2r+1)x(2r+1) с центром в каждом пикселе.
        Клетки за границей считаются нулями (через интегральное изображение).
        """
        k = 2 * radius + 1
        p = np.pad(arr.astype(np.int64), radius, mode="constant")
        integral = np.pad(p.cumsum(axis=0).cumsum(axis=1), ((1, 0), (1, 0)), mode="constant")
        return integral[k:, k:] - integral[:-k, k:] - integral[k:, :-k] + integral[:-k, :-k]

    # ---------- 2) Усредняющий фильтр ----------
    def box_blur(self, field: np.ndarray, radius: int = 1) -> np.ndarray:
        """
        Среднее по окну (2r+1)x(2r+1) с округлением вниз.
        У краёв усредняются только существующие пиксели (без паддинга/отражения).
        """
        if radius <= 0:
            return field.copy()
        sums = self._window_sum(field, radius)
        counts = self._window_sum(np.ones_like(field, dtype=np.int64), radius)
        return (sums // counts).astype(np.uint8)

    # ---------- 3) Порог Отсу ----------
    def otsu_threshold(self, field: np.ndarray) -> int:
        """
        Глобальный порог Отсу по гистограмме из 256 корзин.

        Для каждого t: wB — число пикселей <= t, wF — остальные,
        межклассовая дисперсия wB * wF * (mB - mF)^2. Берётся первый t
        со строго максимальной дисперсией. Если разделения нет
        (однородное изображение) или победил t = 0, возвращается запасной порог.
        """
        hist = np.bincount(field.ravel(), minlength=256).astype(np.float64)
        levels = np.arange(256, dtype=np.float64)
        total = float(field.size)

        w_b = np.cumsum(hist)
        w_f = total - w_b
        sum_b = np.cumsum(hist * levels)
        sum_all = sum_b[-1]

        valid = (w_b > 0) & (w_f > 0)
        # избегаем деления на ноль
        with np.errstate(divide="ignore", invalid="ignore"):
            m_b = np.where(valid, sum_b / w_b, 0.0)
            m_f = np.where(valid, (sum_all - sum_b) / w_f, 0.0)
        between = np.where(valid, w_b * w_f * (m_b - m_f) ** 2, 0.0)

        best = int(np.argmax(between))
        if between[best] <= 0 or best == 0:
            logger.debug("Otsu found no split, falling back to %d", self._fallback_threshold)
            return self._fallback_threshold
        return best

    # ---------- 4) Бинарная маска ----------
    def binarize(self, field: np.ndarray, threshold: int, polarity: Polarity = "dark") -> np.ndarray:
        """
        Маска {0, 1}: при полярности "dark" передний план — пиксели темнее порога,
        при "bright" — светлее порога.
        """
        if polarity == "bright":
            mask = field > threshold
        else:
            mask = field < threshold
        return mask.astype(np.uint8)

    # ---------- 5) Очистка одиночных пикселей ----------
    def clean_small_noise(self, mask: np.ndarray) -> np.ndarray:
        """
        Стирает внутренние пиксели переднего плана, у которых в полном окне 3x3
        (включая сам пиксель) не больше `noise_max_count` единиц.
        Граничные строки и столбцы не трогаются. Возвращает новый буфер.
        """
        out = mask.copy()
        if mask.shape[0] < 3 or mask.shape[1] < 3:
            return out
        counts = self._window_sum(mask, 1)
        sparse = (mask == 1) & (counts <= self._noise_max_count)
        sparse[0, :] = False
        sparse[-1, :] = False
        sparse[:, 0] = False
        sparse[:, -1] = False
        out[sparse] = 0
        return out

"""Модели для сравнения результатов распознавания с эталонной разметкой."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from shapefinder.models.shape_model import SHAPE_TYPES, BoundingBox


@dataclass(frozen=True)
class GroundTruthShape:
    shape_type: str
    bounding_box: BoundingBox

    def __post_init__(self) -> None:
        if self.shape_type not in SHAPE_TYPES:
            raise ValueError(f"Неизвестный тип фигуры: {self.shape_type!r}")
        if self.bounding_box.width <= 0 or self.bounding_box.height <= 0:
            raise ValueError(f"Пустая рамка: {self.bounding_box}")


@dataclass(frozen=True)
class GroundTruthImage:
    path: Path
    shapes: Tuple[GroundTruthShape, ...]


@dataclass(frozen=True)
class ImageScore:
    """Оценка одного изображения.

    Fields:
        name: Имя изображения.
        true_positives: Совпавшие пары детекция/эталон.
        false_positives: Лишние детекции.
        false_negatives: Пропущенные эталонные фигуры.
        mean_iou: Средний IoU по совпавшим парам (0, если совпадений нет).
        processing_time_ms: Время распознавания, мс.
    """
    name: str
    true_positives: int
    false_positives: int
    false_negatives: int
    mean_iou: float
    processing_time_ms: float

    @property
    def precision(self) -> float:
        return _ratio(self.true_positives, self.true_positives + self.false_positives)

    @property
    def recall(self) -> float:
        return _ratio(self.true_positives, self.true_positives + self.false_negatives)

    @property
    def f1(self) -> float:
        return _f1(self.precision, self.recall)


@dataclass(frozen=True)
class EvaluationReport:
    images: Tuple[ImageScore, ...]
    true_positives: int
    false_positives: int
    false_negatives: int
    mean_iou: float
    mean_processing_time_ms: float

    @property
    def precision(self) -> float:
        return _ratio(self.true_positives, self.true_positives + self.false_positives)

    @property
    def recall(self) -> float:
        return _ratio(self.true_positives, self.true_positives + self.false_negatives)

    @property
    def f1(self) -> float:
        return _f1(self.precision, self.recall)


def _ratio(num: int, denom: int) -> float:
    # нет ни детекций, ни эталона: идеальный результат
    return 1.0 if denom == 0 else num / denom


def _f1(precision: float, recall: float) -> float:
    if precision + recall == 0:
        return 0.0
    return 2 * precision * recall / (precision + recall)

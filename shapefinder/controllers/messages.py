"""Сообщения между интерфейсом и ядром распознавания.

Интерфейс и рабочий объект обмениваются только этими неизменяемыми
сообщениями; общего изменяемого состояния у них нет.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union

from shapefinder.models.image_model import ImageData
from shapefinder.models.shape_model import DetectionResult


@dataclass(frozen=True)
class ImageRequested:
    path: Path


@dataclass(frozen=True)
class DetectionCompleted:
    image: ImageData
    result: DetectionResult


@dataclass(frozen=True)
class DetectionFailed:
    path: Path
    reason: str


Reply = Union[DetectionCompleted, DetectionFailed]

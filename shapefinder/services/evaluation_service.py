"""Оценка качества распознавания относительно эталонной разметки.

Сопоставление жадное: пары одного типа сортируются по убыванию IoU,
каждая детекция и каждая эталонная фигура участвуют не более чем в одной паре.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Sequence, Tuple

from shapefinder.models.evaluation_model import (
    EvaluationReport,
    GroundTruthImage,
    GroundTruthShape,
    ImageScore,
)
from shapefinder.models.shape_model import BoundingBox, DetectionResult

logger = logging.getLogger(__name__)


def iou(a: BoundingBox, b: BoundingBox) -> float:
    """Intersection over Union двух рамок; 0 при нулевом объединении."""
    ax1, ay1, ax2, ay2 = a.as_xyxy()
    bx1, by1, bx2, by2 = b.as_xyxy()
    inter_w = max(0, min(ax2, bx2) - max(ax1, bx1))
    inter_h = max(0, min(ay2, by2) - max(ay1, by1))
    inter = inter_w * inter_h
    union = a.width * a.height + b.width * b.height - inter
    if union <= 0:
        return 0.0
    return inter / union


class EvaluationService:
    def __init__(self, iou_threshold: float = 0.5) -> None:
        if not 0.0 <= iou_threshold <= 1.0:
            raise ValueError(f"Порог IoU вне диапазона [0, 1]: {iou_threshold}")
        self.iou_threshold = iou_threshold

    def load_manifest(self, manifest_path: str | Path) -> List[GroundTruthImage]:
        """Читает JSON-манифест с эталонной разметкой.

        Формат: {"images": [{"file": "a.png", "shapes": [{"type": "circle", "bbox": [x, y, w, h]}]}]}.
        Пути к файлам считаются относительно манифеста.

        Raises:
            FileNotFoundError: если манифест не найден.
            ValueError: если JSON некорректен или не соответствует формату.
        """
        path = Path(manifest_path)
        if not path.is_file():
            raise FileNotFoundError(f"Манифест не найден: {path}")
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValueError(f"Некорректный JSON в манифесте: {path}") from exc

        try:
            entries = payload["images"]
            images = [
                GroundTruthImage(
                    path=path.parent / entry["file"],
                    shapes=tuple(
                        GroundTruthShape(shape_type=s["type"], bounding_box=BoundingBox(*(int(v) for v in s["bbox"])))
                        for s in entry.get("shapes", [])
                    ),
                )
                for entry in entries
            ]
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Манифест не соответствует формату: {path}") from exc
        logger.debug("Loaded %d ground-truth images from %s", len(images), path)
        return images

    def match(self, result: DetectionResult, truth: Sequence[GroundTruthShape]) -> List[Tuple[int, int, float]]:
        """Возвращает пары (индекс детекции, индекс эталона, IoU)."""
        candidates: List[Tuple[float, int, int]] = []
        for di, shape in enumerate(result.shapes):
            for ti, gt in enumerate(truth):
                if shape.shape_type != gt.shape_type:
                    continue
                overlap = iou(shape.bounding_box, gt.bounding_box)
                if overlap >= self.iou_threshold:
                    candidates.append((overlap, di, ti))
        # по убыванию IoU, при равенстве по индексам
        candidates.sort(key=lambda c: (-c[0], c[1], c[2]))

        used_d, used_t = set(), set()
        pairs: List[Tuple[int, int, float]] = []
        for overlap, di, ti in candidates:
            if di in used_d or ti in used_t:
                continue
            used_d.add(di)
            used_t.add(ti)
            pairs.append((di, ti, overlap))
        return pairs

    def score_image(self, name: str, result: DetectionResult, truth: Sequence[GroundTruthShape]) -> ImageScore:
        pairs = self.match(result, truth)
        tp = len(pairs)
        mean_iou = sum(p[2] for p in pairs) / tp if tp else 0.0
        return ImageScore(
            name=name,
            true_positives=tp,
            false_positives=len(result.shapes) - tp,
            false_negatives=len(truth) - tp,
            mean_iou=mean_iou,
            processing_time_ms=result.processing_time_ms,
        )

    def aggregate(self, scores: Sequence[ImageScore]) -> EvaluationReport:
        """Суммирует оценки по изображениям (микро-усреднение)."""
        tp = sum(s.true_positives for s in scores)
        matched_iou = sum(s.mean_iou * s.true_positives for s in scores)
        return EvaluationReport(
            images=tuple(scores),
            true_positives=tp,
            false_positives=sum(s.false_positives for s in scores),
            false_negatives=sum(s.false_negatives for s in scores),
            mean_iou=matched_iou / tp if tp else 0.0,
            mean_processing_time_ms=(
                sum(s.processing_time_ms for s in scores) / len(scores) if scores else 0.0
            ),
        )

    def format_report(self, report: EvaluationReport) -> str:
        lines = []
        for s in report.images:
            lines.append(
                f"{s.name}: P={s.precision:.2f} R={s.recall:.2f} F1={s.f1:.2f} "
                f"IoU={s.mean_iou:.2f} ({s.processing_time_ms:.1f} ms)"
            )
        lines.append(
            f"TOTAL: P={report.precision:.3f} R={report.recall:.3f} F1={report.f1:.3f} "
            f"IoU={report.mean_iou:.3f} avg {report.mean_processing_time_ms:.1f} ms over {len(report.images)} image(s)"
        )
        return "\n".join(lines)

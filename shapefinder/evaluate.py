"""Пакетная оценка распознавания по манифесту с эталонной разметкой.

Пример:
    shapefinder-evaluate test-images/manifest.json --iou 0.5
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from shapefinder.logging_config import setup_logging
from shapefinder.models.evaluation_model import EvaluationReport, ImageScore
from shapefinder.services.detection_service import DetectionService
from shapefinder.services.evaluation_service import EvaluationService
from shapefinder.services.image_service import ImageService

logger = logging.getLogger(__name__)


def run_evaluation(manifest: str, iou_threshold: float = 0.5,
                   detector: Optional[DetectionService] = None) -> EvaluationReport:
    """Распознаёт каждое изображение манифеста по очереди и собирает отчёт."""
    evaluator = EvaluationService(iou_threshold=iou_threshold)
    images = ImageService()
    detector = detector or DetectionService()

    scores: List[ImageScore] = []
    for entry in evaluator.load_manifest(manifest):
        image = images.load_image(entry.path)
        result = detector.detect_shapes(image.rgba)
        score = evaluator.score_image(entry.path.name, result, entry.shapes)
        logger.debug("%s: tp=%d fp=%d fn=%d", score.name, score.true_positives,
                     score.false_positives, score.false_negatives)
        scores.append(score)
    return evaluator.aggregate(scores)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Evaluate shape detection against ground truth")
    parser.add_argument("manifest", help="JSON manifest with images and expected shapes")
    parser.add_argument("--iou", type=float, default=0.5, help="IoU needed to count a match (default: 0.5)")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    try:
        report = run_evaluation(args.manifest, iou_threshold=args.iou)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Evaluation failed: %s", exc)
        return 1

    print(EvaluationService(iou_threshold=args.iou).format_report(report))
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Конвейер распознавания фигур: от RGBA-буфера до `DetectionResult`.

Принципы:
- SRP: сервис только связывает этапы; алгоритмы живут в отдельных сервисах.
- Чистые функции: никакого общего изменяемого состояния между вызовами.
"""
from __future__ import annotations

import logging
import time
from typing import List, Optional

from shapefinder.models.detection_config import DetectionConfig
from shapefinder.models.image_model import RgbaImage
from shapefinder.models.shape_model import Component, DetectedShape, DetectionResult
from shapefinder.services.classifier_service import ClassifierService
from shapefinder.services.component_service import ComponentService
from shapefinder.services.contour_service import ContourTracer
from shapefinder.services.geometry_service import GeometryService
from shapefinder.services.polygon_service import PolygonService
from shapefinder.services.preprocess_service import PreprocessService

logger = logging.getLogger(__name__)


class DetectionService:
    def __init__(self, config: Optional[DetectionConfig] = None) -> None:
        self.config = config or DetectionConfig()
        self._preprocess = PreprocessService(
            fallback_threshold=self.config.fallback_threshold,
            noise_max_count=self.config.noise_max_count,
        )
        self._components = ComponentService()
        self._polygons = PolygonService(
            epsilon_ratio=self.config.rdp_epsilon_ratio,
            epsilon_floor=self.config.rdp_epsilon_floor,
        )
        self._geometry = GeometryService(self._polygons)
        self._classifier = ClassifierService()

    def detect_shapes(self, image: RgbaImage) -> DetectionResult:
        """Находит и классифицирует фигуры на изображении.

        Args:
            image: RGBA-буфер с размерами.

        Returns:
            `DetectionResult` с фигурами в порядке обнаружения компонент.
            Пустой список фигур означает «фигур не найдено», а не ошибку.
        """
        started = time.perf_counter()
        cfg = self.config

        gray = self._preprocess.to_luminance(image)
        blurred = self._preprocess.box_blur(gray, cfg.blur_radius)
        threshold = self._preprocess.otsu_threshold(blurred)
        mask = self._preprocess.binarize(blurred, threshold, cfg.polarity)
        cleaned = self._preprocess.clean_small_noise(mask)
        logger.debug("Threshold %d, %d foreground pixels after cleanup", threshold, int(cleaned.sum()))

        components = self._components.label(cleaned)
        min_area = cfg.min_component_area(image.width, image.height)
        survivors = self._components.filter_small(components, min_area)

        shapes: List[DetectedShape] = []
        for component in survivors:
            shape = self.analyze_component(component)
            if shape is not None:
                shapes.append(shape)

        elapsed_ms = (time.perf_counter() - started) * 1000.0
        logger.info(
            "Detected %d shape(s) in %dx%d image in %.1f ms",
            len(shapes), image.width, image.height, elapsed_ms,
        )
        return DetectionResult(
            shapes=tuple(shapes),
            processing_time_ms=elapsed_ms,
            image_width=image.width,
            image_height=image.height,
        )

    def analyze_component(self, component: Component) -> Optional[DetectedShape]:
        """Контур -> многоугольник -> признаки -> класс для одной компоненты.

        Возвращает None, если контур слишком короткий для классификации.
        """
        contour = ContourTracer.for_component(component, self.config.trace_step_limit).trace()
        if len(contour) < self.config.min_contour_points:
            logger.debug("Skipping component of %d px: contour has %d points", component.area, len(contour))
            return None

        perimeter = self._polygons.perimeter(contour) or 1.0
        polygon = self._polygons.simplify(contour, self._polygons.epsilon_for(perimeter))
        features = self._geometry.extract(component, contour, polygon, perimeter)
        shape_type, confidence = self._classifier.classify(features, polygon)
        return DetectedShape(
            shape_type=shape_type,
            confidence=confidence,
            bounding_box=features.bounding_box,
            centroid=features.centroid,
            area=features.area,
        )

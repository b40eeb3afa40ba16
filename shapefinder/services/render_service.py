"""Отрисовка результатов распознавания поверх изображения и текстовая сводка.

Только представление: ничего из этого модуля не влияет на распознавание.
"""
from __future__ import annotations

from typing import List

from PIL import Image, ImageDraw

from shapefinder.models.shape_model import DetectionResult

BOX_COLOR = (255, 0, 0, 255)
FILL_COLOR = (255, 0, 0, 38)


class RenderService:
    def draw_overlay(self, image: Image.Image, result: DetectionResult) -> Image.Image:
        """
        Возвращает копию изображения с рамками, центрами и подписями фигур.
        Толщина линии зависит от размера изображения: max(1, round(min(w, h) / 200)).
        """
        base = image.convert("RGBA")
        layer = Image.new("RGBA", base.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)
        line_width = max(1, int(round(min(base.size) / 200)))

        for shape in result.shapes:
            x1, y1, x2, y2 = shape.bounding_box.as_xyxy()
            draw.rectangle((x1, y1, x2 - 1, y2 - 1), outline=BOX_COLOR, width=line_width)
            draw.rectangle((x1, y1, x1 + 3, y1 + 3), fill=FILL_COLOR)
            cx, cy = shape.centroid.x, shape.centroid.y
            draw.ellipse((cx - 3, cy - 3, cx + 3, cy + 3), fill=FILL_COLOR)
            draw.text((x1, max(0, y1 - 12)), self.label(shape.shape_type, shape.confidence), fill=BOX_COLOR)

        return Image.alpha_composite(base, layer)

    @staticmethod
    def label(shape_type: str, confidence: float) -> str:
        return f"{shape_type} {confidence * 100:.0f}%"

    def describe(self, result: DetectionResult) -> str:
        """Текстовая сводка: время обработки, число фигур и параметры каждой."""
        lines: List[str] = [
            f"Processing time: {result.processing_time_ms:.2f} ms",
            f"Shapes found: {len(result.shapes)}",
        ]
        if not result.shapes:
            lines.append("No shapes detected.")
            return "\n".join(lines)

        for shape in result.shapes:
            lines.append(
                f"{shape.shape_type.capitalize()}: confidence {shape.confidence * 100:.1f}%, "
                f"center ({shape.centroid.x:.1f}, {shape.centroid.y:.1f}), area {shape.area} px²"
            )
        return "\n".join(lines)

import math

import pytest

from shapefinder.models.shape_model import BoundingBox, Centroid, Component, GeometricFeatures
from shapefinder.services.classifier_service import ClassifierService
from shapefinder.services.geometry_service import (
    GeometryService,
    circularity,
    concavity_count,
    interior_angle,
)

SQUARE_BOX = BoundingBox(x=0, y=0, width=50, height=50)
WIDE_BOX = BoundingBox(x=0, y=0, width=100, height=40)


def features(circ, box=SQUARE_BOX, concavity=0, vertices=0):
    return GeometricFeatures(
        area=1000,
        perimeter=100.0,
        bounding_box=box,
        circularity=circ,
        vertex_count=vertices,
        concavity_count=concavity,
        centroid=Centroid(x=0.0, y=0.0),
    )


def ngon(n, radius=50):
    return [
        (int(round(radius * math.cos(2 * math.pi * k / n))), int(round(radius * math.sin(2 * math.pi * k / n))))
        for k in range(n)
    ]


@pytest.fixture
def classifier() -> ClassifierService:
    return ClassifierService()


class TestCircleGate:
    def test_round_compact_shape_is_circle(self, classifier):
        shape_type, conf = classifier.classify(features(0.8), ngon(4))

        assert shape_type == "circle"
        assert conf == pytest.approx(0.75)

    def test_confidence_capped(self, classifier):
        assert classifier.classify(features(1.2), ngon(12)) == ("circle", 0.99)

    def test_elongated_shape_skips_circle_gate(self, classifier):
        quad = [(0, 0), (100, 0), (100, 40), (0, 40)]

        assert classifier.classify(features(0.9, box=WIDE_BOX), quad)[0] == "rectangle"


class TestByVertexCount:
    def test_triangle(self, classifier):
        assert classifier.classify(features(0.6), ngon(3)) == ("triangle", 0.8)

    def test_two_vertices_counted_as_triangle(self, classifier):
        assert classifier.classify(features(0.1, box=WIDE_BOX), [(0, 0), (9, 0)]) == ("triangle", 0.8)

    def test_repeated_vertices_are_ignored(self, classifier):
        polygon = [(0, 0), (0, 0), (10, 0), (5, 8), (0, 0)]

        assert classifier.classify(features(0.6), polygon)[0] == "triangle"

    def test_axis_aligned_rectangle(self, classifier):
        quad = [(0, 0), (10, 0), (10, 5), (0, 5)]

        assert classifier.classify(features(0.6), quad) == ("rectangle", pytest.approx(1.0))

    def test_quad_with_two_right_angles(self, classifier):
        quad = [(0, 0), (10, 0), (10, 10), (0, 4)]

        assert ClassifierService.count_right_angles(quad) == 2
        assert classifier.classify(features(0.6), quad) == ("rectangle", pytest.approx(0.8))

    def test_slanted_parallelogram_is_low_confidence_rectangle(self, classifier):
        quad = [(0, 0), (10, 0), (15, 10), (5, 10)]

        assert classifier.classify(features(0.6), quad) == ("rectangle", 0.5)

    def test_pentagon(self, classifier):
        assert classifier.classify(features(0.6), ngon(5)) == ("pentagon", 0.75)

    def test_mid_polygon_with_concavities_is_star(self, classifier):
        assert classifier.classify(features(0.6, concavity=2), ngon(7)) == ("star", 0.75)

    def test_mid_polygon_round_enough_is_circle(self, classifier):
        shape_type, conf = classifier.classify(features(0.6), ngon(7))

        assert shape_type == "circle"
        assert conf == pytest.approx(0.68)

    def test_mid_polygon_thin_is_star(self, classifier):
        assert classifier.classify(features(0.4), ngon(8)) == ("star", 0.5)

    def test_many_vertices_round_is_circle(self, classifier):
        shape_type, conf = classifier.classify(features(0.6), ngon(12))

        assert shape_type == "circle"
        assert conf == pytest.approx(0.6)

    def test_many_vertices_thin_is_star(self, classifier):
        assert classifier.classify(features(0.3), ngon(12)) == ("star", 0.55)


class TestGeometry:
    def test_circularity_of_ideal_circle(self):
        assert circularity(math.pi, 2 * math.pi) == pytest.approx(1.0)

    def test_circularity_with_zero_perimeter(self):
        assert circularity(0, 0) == 0.0
        assert circularity(1, 0) == pytest.approx(4 * math.pi)

    def test_convex_polygon_has_no_concavities(self):
        assert concavity_count([(0, 0), (10, 0), (10, 10), (0, 10)]) == 0

    def test_notched_polygon(self):
        assert concavity_count([(0, 0), (10, 0), (10, 10), (5, 5), (0, 10)]) == 1

    def test_collinear_triples_are_skipped(self):
        assert concavity_count([(0, 0), (5, 0), (10, 0), (10, 10), (0, 10)]) == 0

    def test_interior_angle(self):
        assert interior_angle((1, 0), (0, 0), (0, 1)) == pytest.approx(90.0)
        assert interior_angle((1, 0), (0, 0), (-1, 0)) == pytest.approx(180.0)
        assert interior_angle((0, 0), (0, 0), (0, 1)) == 0.0

    def test_extract_from_block(self):
        pixels = tuple(y * 5 + x for y in range(1, 4) for x in range(1, 4))
        component = Component(pixels=pixels, width=5, height=5)
        contour = ((1, 1), (2, 1), (3, 1), (3, 2), (3, 3), (2, 3), (1, 3), (1, 2))
        polygon = ((1, 1), (3, 1), (3, 3), (1, 3))

        feats = GeometryService().extract(component, contour, polygon)

        assert feats.area == 9
        assert feats.perimeter == pytest.approx(8.0)
        assert feats.bounding_box == BoundingBox(x=1, y=1, width=3, height=3)
        assert feats.centroid == Centroid(x=2.0, y=2.0)
        assert feats.circularity == pytest.approx(4 * math.pi * 9 / 64)
        assert feats.vertex_count == 4
        assert feats.concavity_count == 0

    def test_extract_single_pixel_uses_unit_perimeter(self):
        component = Component(pixels=(7,), width=5, height=5)

        feats = GeometryService().extract(component, ((2, 1),), ((2, 1),))

        assert feats.perimeter == 1.0
        assert feats.circularity == pytest.approx(4 * math.pi)

    def test_extract_reuses_given_perimeter(self):
        pixels = tuple(y * 5 + x for y in range(1, 4) for x in range(1, 4))
        component = Component(pixels=pixels, width=5, height=5)
        contour = ((1, 1), (3, 1), (3, 3), (1, 3))

        feats = GeometryService().extract(component, contour, contour, perimeter=12.0)

        assert feats.perimeter == 12.0
        assert feats.circularity == pytest.approx(4 * math.pi * 9 / 144)

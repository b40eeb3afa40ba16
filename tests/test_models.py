import dataclasses

import numpy as np
import pytest

from shapefinder.models.detection_config import DetectionConfig
from shapefinder.models.evaluation_model import GroundTruthShape, ImageScore
from shapefinder.models.image_model import RgbaImage
from shapefinder.models.shape_model import BoundingBox


class TestRgbaImage:
    def test_channels_view(self):
        image = RgbaImage(width=2, height=1, data=np.arange(8, dtype=np.uint8))

        assert image.channels().shape == (1, 2, 4)
        assert image.channels()[0, 1].tolist() == [4, 5, 6, 7]

    def test_buffer_is_copied_and_read_only(self):
        source = np.zeros(16, dtype=np.uint8)
        image = RgbaImage(width=2, height=2, data=source)
        source[0] = 99

        assert image.data[0] == 0
        with pytest.raises(ValueError):
            image.data[0] = 1

    def test_accepts_plain_int_lists(self):
        image = RgbaImage(width=1, height=1, data=[1, 2, 3, 255])

        assert image.data.dtype == np.uint8

    @pytest.mark.parametrize("width, height, size", [(0, 2, 0), (2, -1, 8), (2, 2, 15)])
    def test_rejects_bad_shape(self, width, height, size):
        with pytest.raises(ValueError):
            RgbaImage(width=width, height=height, data=np.zeros(size, dtype=np.uint8))

    def test_rejects_out_of_range_values(self):
        with pytest.raises(ValueError):
            RgbaImage(width=1, height=1, data=[0, 0, 300, 255])


class TestDetectionConfig:
    @pytest.mark.parametrize("width, height, expected", [(200, 200, 20), (300, 300, 45), (1000, 1000, 500)])
    def test_min_component_area(self, width, height, expected):
        assert DetectionConfig().min_component_area(width, height) == expected

    def test_min_area_rounds_half_up(self):
        config = DetectionConfig(min_area_floor=0, min_area_ratio=0.5)

        assert config.min_component_area(3, 3) == 5

    @pytest.mark.parametrize("kwargs", [
        {"blur_radius": -1},
        {"fallback_threshold": 256},
        {"noise_max_count": 10},
        {"min_area_ratio": -0.1},
        {"trace_step_limit": 0},
        {"rdp_epsilon_floor": -1.0},
        {"polarity": "grey"},
    ])
    def test_rejects_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            DetectionConfig(**kwargs)

    def test_is_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DetectionConfig().blur_radius = 3


class TestEvaluationModels:
    def test_ground_truth_validates_type_and_box(self):
        with pytest.raises(ValueError):
            GroundTruthShape(shape_type="hexagon", bounding_box=BoundingBox(0, 0, 5, 5))
        with pytest.raises(ValueError):
            GroundTruthShape(shape_type="circle", bounding_box=BoundingBox(0, 0, 0, 5))

    def test_score_ratios(self):
        score = ImageScore("a.png", true_positives=2, false_positives=2, false_negatives=0,
                           mean_iou=0.8, processing_time_ms=3.0)

        assert score.precision == pytest.approx(0.5)
        assert score.recall == pytest.approx(1.0)
        assert score.f1 == pytest.approx(2 / 3)

    def test_empty_image_scores_perfect(self):
        score = ImageScore("blank.png", 0, 0, 0, 0.0, 1.0)

        assert (score.precision, score.recall, score.f1) == (1.0, 1.0, 1.0)

    def test_no_matches_gives_zero_f1(self):
        assert ImageScore("x.png", 0, 1, 1, 0.0, 1.0).f1 == 0.0

import json

import pytest

from conftest import blank_canvas, draw_disk
from shapefinder import evaluate
from shapefinder.models.evaluation_model import GroundTruthShape
from shapefinder.models.shape_model import BoundingBox, Centroid, DetectedShape, DetectionResult
from shapefinder.services.evaluation_service import EvaluationService, iou


def _shape(shape_type, x, y, w=10, h=10):
    return DetectedShape(shape_type=shape_type, confidence=0.9, bounding_box=BoundingBox(x, y, w, h),
                         centroid=Centroid(x + w / 2, y + h / 2), area=w * h)


def _result(*shapes, ms=2.0):
    return DetectionResult(shapes=tuple(shapes), processing_time_ms=ms, image_width=200, image_height=200)


def _truth(shape_type, x, y, w=10, h=10):
    return GroundTruthShape(shape_type=shape_type, bounding_box=BoundingBox(x, y, w, h))


class TestIou:
    def test_identical(self):
        assert iou(BoundingBox(3, 4, 10, 20), BoundingBox(3, 4, 10, 20)) == pytest.approx(1.0)

    def test_half_shift(self):
        assert iou(BoundingBox(0, 0, 10, 10), BoundingBox(5, 0, 10, 10)) == pytest.approx(1 / 3)

    def test_disjoint(self):
        assert iou(BoundingBox(0, 0, 10, 10), BoundingBox(10, 0, 10, 10)) == 0.0


class TestMatching:
    def test_type_must_agree(self):
        result = _result(_shape("circle", 0, 0), _shape("circle", 100, 100))
        truth = [_truth("circle", 0, 0), _truth("triangle", 100, 100)]

        score = EvaluationService().score_image("a.png", result, truth)

        assert (score.true_positives, score.false_positives, score.false_negatives) == (1, 1, 1)
        assert score.mean_iou == pytest.approx(1.0)

    def test_best_overlap_wins(self):
        result = _result(_shape("star", 0, 0), _shape("star", 1, 0))

        pairs = EvaluationService().match(result, [_truth("star", 1, 0)])

        assert pairs == [(1, 0, pytest.approx(1.0))]

    def test_threshold(self):
        result = _result(_shape("circle", 5, 0))
        truth = [_truth("circle", 0, 0)]

        assert EvaluationService(iou_threshold=0.5).match(result, truth) == []
        assert len(EvaluationService(iou_threshold=0.3).match(result, truth)) == 1

    def test_invalid_threshold(self):
        with pytest.raises(ValueError):
            EvaluationService(iou_threshold=1.5)


def test_aggregate_micro_averages():
    evaluator = EvaluationService()
    first = evaluator.score_image("a.png", _result(_shape("circle", 0, 0), ms=2.0), [_truth("circle", 0, 0)])
    second = evaluator.score_image("b.png", _result(ms=4.0), [_truth("star", 0, 0)])

    report = evaluator.aggregate([first, second])

    assert (report.true_positives, report.false_positives, report.false_negatives) == (1, 0, 1)
    assert report.precision == pytest.approx(1.0)
    assert report.recall == pytest.approx(0.5)
    assert report.mean_iou == pytest.approx(1.0)
    assert report.mean_processing_time_ms == pytest.approx(3.0)
    assert evaluator.format_report(report).splitlines()[-1].startswith("TOTAL: P=1.000 R=0.500")


class TestManifest:
    def test_load(self, tmp_path):
        manifest = tmp_path / "manifest.json"
        manifest.write_text(json.dumps({"images": [
            {"file": "one.png", "shapes": [{"type": "circle", "bbox": [1, 2, 30, 40]}]},
            {"file": "blank.png"},
        ]}))

        images = EvaluationService().load_manifest(manifest)

        assert [img.path for img in images] == [tmp_path / "one.png", tmp_path / "blank.png"]
        assert images[0].shapes == (_truth("circle", 1, 2, 30, 40),)
        assert images[1].shapes == ()

    def test_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            EvaluationService().load_manifest(tmp_path / "none.json")

    @pytest.mark.parametrize("content", ["{not json", '{"files": []}', '{"images": [{"shapes": []}]}'])
    def test_malformed(self, tmp_path, content):
        manifest = tmp_path / "manifest.json"
        manifest.write_text(content)

        with pytest.raises(ValueError):
            EvaluationService().load_manifest(manifest)

    def test_unknown_shape_type(self, tmp_path):
        manifest = tmp_path / "manifest.json"
        manifest.write_text(json.dumps({"images": [
            {"file": "x.png", "shapes": [{"type": "hexagon", "bbox": [0, 0, 5, 5]}]},
        ]}))

        with pytest.raises(ValueError):
            EvaluationService().load_manifest(manifest)


class TestCommandLine:
    @pytest.fixture(autouse=True)
    def _keep_logging(self, monkeypatch):
        monkeypatch.setattr(evaluate, "setup_logging", lambda level: None)

    def test_reports_totals(self, tmp_path, capsys):
        draw_disk(blank_canvas(), 100, 100, 40).save(tmp_path / "disk.png")
        (tmp_path / "manifest.json").write_text(json.dumps({"images": [
            {"file": "disk.png", "shapes": [{"type": "circle", "bbox": [60, 60, 81, 81]}]},
        ]}))

        code = evaluate.main([str(tmp_path / "manifest.json")])

        out = capsys.readouterr().out
        assert code == 0
        assert out.splitlines()[0].startswith("disk.png: P=1.00 R=1.00")
        assert "TOTAL: P=1.000 R=1.000" in out

    def test_missing_manifest_fails(self, tmp_path, capsys):
        assert evaluate.main([str(tmp_path / "missing.json")]) == 1
        assert capsys.readouterr().out == ""

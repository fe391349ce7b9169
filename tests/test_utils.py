"""Tests for annotation and result-file helpers."""

from __future__ import annotations

import json
from pathlib import Path

import cv2
import numpy as np
import pytest

from detection import Detection, PipelineResult
from geometry import BoundingBox, compute_letterbox
from utils import (
    draw_detections,
    get_annotated_path,
    get_result_path,
    save_image,
    save_result_json,
)


@pytest.fixture
def detections():
    return [
        Detection(2, 0.95, BoundingBox(10, 20, 40, 80)),
        Detection(11, 0.8, BoundingBox(60, 0, 120, 30)),
    ]


class TestPaths:

    def test_annotated_path(self):
        assert get_annotated_path(Path("out"), Path("in/meter.jpg")) == Path("out/meter_annotated.png")

    def test_result_path(self):
        assert get_result_path(Path("out"), Path("in/meter.jpg")) == Path("out/meter.json")


class TestDrawDetections:

    def test_draws_on_copy(self, detections):
        image = np.zeros((100, 150, 3), dtype=np.uint8)
        annotated = draw_detections(image, detections)

        assert np.all(image == 0)
        assert annotated.shape == image.shape
        # box outline uses the overlay color
        assert tuple(annotated[50, 10]) == (0, 255, 0)

    def test_no_detections_is_unchanged_copy(self):
        image = np.full((20, 20, 3), 7, dtype=np.uint8)
        annotated = draw_detections(image, [])
        assert annotated is not image
        assert np.array_equal(annotated, image)


class TestSaving:

    def test_save_image_writes_bgr(self, tmp_path):
        image = np.zeros((10, 10, 3), dtype=np.uint8)
        image[..., 0] = 255  # red in RGB
        path = tmp_path / "nested" / "out.png"
        save_image(image, path)

        loaded = cv2.imread(str(path))
        assert loaded.shape == (10, 10, 3)
        assert np.all(loaded[..., 2] == 255)
        assert np.all(loaded[..., 0] == 0)

    def test_save_image_bad_extension_raises(self, tmp_path):
        with pytest.raises((OSError, cv2.error)):
            save_image(np.zeros((4, 4, 3), dtype=np.uint8), tmp_path / "out.unknownext")

    def test_save_result_json(self, tmp_path, detections):
        result = PipelineResult(
            detections=detections,
            reading="1",
            letterbox=compute_letterbox(150, 100, 640),
            candidate_count=3,
            source_dimensions=(150, 100),
        )
        path = tmp_path / "out" / "meter.json"
        save_result_json(result, path)

        data = json.loads(path.read_text())
        assert data["reading"] == "1"
        assert data["candidate_count"] == 3
        assert data["source_dimensions"] == {"width": 150, "height": 100}
        assert data["detections"][1]["label"] == "kwh"
        assert data["detections"][0]["box"] == [10, 20, 40, 80]

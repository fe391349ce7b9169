"""Tests for class-aware non-maximum suppression."""

from __future__ import annotations

import numpy as np
import pytest

from detection import Detection, suppress
from geometry import BoundingBox, box_iou


def det(class_id, confidence, left, top, right, bottom) -> Detection:
    return Detection(class_id, confidence, BoundingBox(left, top, right, bottom))


def _random_detections(seed: int, count: int = 30) -> list[Detection]:
    rng = np.random.default_rng(seed)
    detections = []
    for _ in range(count):
        left, top = rng.uniform(0, 200, 2)
        w, h = rng.uniform(5, 60, 2)
        detections.append(det(
            int(rng.integers(0, 3)),
            float(rng.choice([0.6, 0.7, 0.8, 0.9])),
            float(left), float(top), float(left + w), float(top + h),
        ))
    return detections


class TestSuppress:

    def test_empty(self):
        assert suppress([], 0.45) == []

    def test_same_class_overlap_keeps_most_confident(self):
        low = det(3, 0.6, 0, 0, 10, 10)
        high = det(3, 0.9, 1, 0, 11, 10)
        assert suppress([low, high], 0.45) == [high]

    def test_different_classes_never_suppress(self):
        digit = det(3, 0.9, 0, 0, 10, 10)
        unit = det(11, 0.8, 0, 0, 10, 10)
        kept = suppress([digit, unit], 0.45)
        assert kept == [digit, unit]

    def test_overlap_at_threshold_is_kept(self):
        a = det(1, 0.9, 0, 0, 10, 10)
        b = det(1, 0.8, 5, 0, 15, 10)  # IoU = 1/3
        assert len(suppress([a, b], 1 / 3)) == 2
        assert len(suppress([a, b], 0.3)) == 1

    def test_disjoint_same_class_both_kept(self):
        a = det(7, 0.9, 0, 0, 10, 10)
        b = det(7, 0.8, 50, 0, 60, 10)
        assert suppress([b, a], 0.45) == [a, b]

    def test_output_sorted_by_descending_confidence(self):
        detections = [
            det(1, 0.6, 0, 0, 10, 10),
            det(2, 0.9, 20, 0, 30, 10),
            det(3, 0.75, 40, 0, 50, 10),
        ]
        kept = suppress(detections, 0.45)
        assert [d.confidence for d in kept] == [0.9, 0.75, 0.6]

    def test_equal_confidence_keeps_input_order(self):
        first = det(4, 0.8, 0, 0, 10, 10)
        second = det(4, 0.8, 1, 0, 11, 10)
        assert suppress([first, second], 0.45) == [first]
        assert suppress([second, first], 0.45) == [second]

    def test_suppressed_candidate_does_not_suppress(self):
        # b is removed by a; c overlaps b only, so c survives
        a = det(1, 0.9, 0, 0, 10, 10)
        b = det(1, 0.8, 4, 0, 14, 10)
        c = det(1, 0.7, 9, 0, 19, 10)
        assert suppress([a, b, c], 0.3) == [a, c]

    def test_returns_original_instances(self):
        detections = [det(1, 0.9, 0, 0, 10, 10), det(2, 0.8, 0, 0, 10, 10)]
        kept = suppress(detections, 0.45)
        assert all(any(k is d for d in detections) for k in kept)

    def test_does_not_mutate_input(self):
        detections = [det(1, 0.6, 0, 0, 10, 10), det(1, 0.9, 1, 0, 11, 10)]
        snapshot = list(detections)
        suppress(detections, 0.45)
        assert detections == snapshot

    @pytest.mark.parametrize("seed", range(10))
    def test_idempotent(self, seed):
        once = suppress(_random_detections(seed), 0.45)
        assert suppress(once, 0.45) == once

    @pytest.mark.parametrize("seed", range(10))
    def test_kept_same_class_pairs_do_not_overlap(self, seed):
        kept = suppress(_random_detections(seed), 0.45)
        for i, a in enumerate(kept):
            for b in kept[i + 1:]:
                if a.class_id == b.class_id:
                    assert box_iou(a.box, b.box) <= 0.45

    @pytest.mark.parametrize("seed", range(10))
    def test_subset_of_input(self, seed):
        detections = _random_detections(seed)
        kept = suppress(detections, 0.45)
        assert all(any(k is d for d in detections) for k in kept)
        assert len(kept) <= len(detections)

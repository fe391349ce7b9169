"""Pytest configuration and shared helpers.

Slow tests (loading a real detection model) are skipped unless --slow is passed.
Run the full suite:   pytest --slow
Run fast tests only:  pytest          (default)
"""
from __future__ import annotations

import numpy as np
import pytest

from config import INPUT_SIZE, NUM_ANCHORS, NUM_CLASSES


def pytest_addoption(parser):
    parser.addoption(
        "--slow",
        action="store_true",
        default=False,
        help="Run slow tests that load a real detection model",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--slow"):
        return  # run everything
    skip_slow = pytest.mark.skip(reason="slow test skipped, pass --slow to include")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


def make_raw_output(
    anchors: list[tuple[float, float, float, float, int, float]],
    num_classes: int = NUM_CLASSES,
    num_anchors: int = NUM_ANCHORS,
) -> np.ndarray:
    """Build a (4 + C, A) raw output with the given anchors filled in.

    Each anchor is (cx, cy, w, h, class_id, score) with box values normalised
    to the input size. Remaining anchors have all-zero scores.
    """
    raw = np.zeros((4 + num_classes, num_anchors), dtype=np.float32)
    for index, (cx, cy, w, h, class_id, score) in enumerate(anchors):
        raw[:4, index] = (cx, cy, w, h)
        raw[4 + class_id, index] = score
    return raw


def model_box(left: float, top: float, right: float, bottom: float, size: int = INPUT_SIZE):
    """Convert a model-pixel corner box into normalised (cx, cy, w, h)."""
    return (
        (left + right) / 2 / size,
        (top + bottom) / 2 / size,
        (right - left) / size,
        (bottom - top) / size,
    )


class FakeModel:
    """Inference stand-in returning a fixed (1, 4 + C, A) output."""

    def __init__(self, raw: np.ndarray):
        self.raw = raw
        self.calls: list[np.ndarray] = []

    def __call__(self, tensor: np.ndarray) -> np.ndarray:
        self.calls.append(tensor)
        return self.raw[np.newaxis, ...]

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return None


@pytest.fixture
def empty_raw() -> np.ndarray:
    return make_raw_output([])

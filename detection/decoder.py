"""
Raw output tensor decoding.

Turns the (4 + num_classes, num_anchors) YOLO output into candidate
detections: one best class per anchor, confidence-thresholded, converted from
normalised centre form to corner form in pixel space.
"""

from __future__ import annotations

import logging

import numpy as np

from config import BOX_ROWS
from errors import ShapeMismatchError
from geometry import BoundingBox

from .types import Detection, DetectionConfig

logger = logging.getLogger(__name__)


def validate_output_shape(raw: np.ndarray, config: DetectionConfig) -> None:
    """Check a raw output tensor against the configured shape.

    Raises:
        ShapeMismatchError: If `raw` is not a 2D array of config.output_shape.
    """
    if not isinstance(raw, np.ndarray):
        raise ShapeMismatchError(f"Expected numpy.ndarray, got {type(raw).__name__}")
    expected = config.output_shape
    if raw.ndim != 2 or raw.shape != expected:
        raise ShapeMismatchError(
            f"Raw output shape {raw.shape} does not match expected {expected} "
            f"(4 box rows + {config.num_classes} classes, {config.num_anchors} anchors)"
        )


def decode_output(
    raw: np.ndarray,
    config: DetectionConfig,
    width: float | None = None,
    height: float | None = None,
) -> list[Detection]:
    """Decode a raw output tensor into candidate detections.

    For each anchor the highest class score wins; on ties the lowest class index
    wins. Anchors whose best score is not strictly above the score threshold are
    discarded. An empty list is a valid result.

    Args:
        raw: Output tensor of shape config.output_shape.
        config: Detection configuration.
        width: Pixel width the boxes are expressed in (default: input size).
        height: Pixel height the boxes are expressed in (default: input size).

    Returns:
        Detections in ascending anchor order, not yet suppressed.

    Raises:
        ShapeMismatchError: If the tensor shape does not match the configuration.
    """
    validate_output_shape(raw, config)

    if width is None:
        width = config.input_size
    if height is None:
        height = config.input_size

    scores = raw[BOX_ROWS:]
    # argmax returns the first maximal index, so earlier classes win ties
    class_ids = np.argmax(scores, axis=0)
    best_scores = scores[class_ids, np.arange(scores.shape[1])]
    kept = np.nonzero(best_scores > config.score_threshold)[0]

    detections: list[Detection] = []
    for anchor in kept:
        cx, cy, w, h = (float(v) for v in raw[:BOX_ROWS, anchor])
        detections.append(Detection(
            class_id=int(class_ids[anchor]),
            confidence=float(best_scores[anchor]),
            box=BoundingBox(
                left=(cx - w / 2) * width,
                top=(cy - h / 2) * height,
                right=(cx + w / 2) * width,
                bottom=(cy + h / 2) * height,
            ),
        ))

    logger.debug(
        "Decoded %d candidates from %d anchors (threshold %.2f)",
        len(detections), config.num_anchors, config.score_threshold,
    )
    return detections

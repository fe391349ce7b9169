"""
Meter reading assembly.

Functions for turning suppressed detections into the reading string.
"""

from __future__ import annotations

import logging
from typing import Sequence

from config import CLASS_NAMES, READING_CLASS_RANGE

from .types import Detection

logger = logging.getLogger(__name__)


def is_reading_class(class_id: int, reading_class_range: tuple[int, int] = READING_CLASS_RANGE) -> bool:
    """Check if a class contributes a character to the reading."""
    first, last = reading_class_range
    return first <= class_id <= last


def reading_detections(
    detections: Sequence[Detection],
    reading_class_range: tuple[int, int] = READING_CLASS_RANGE,
) -> list[Detection]:
    """Return the reading-class detections ordered left to right.

    The sort is stable, so detections sharing a left edge keep their input order.
    """
    digits = [det for det in detections if is_reading_class(det.class_id, reading_class_range)]
    return sorted(digits, key=lambda det: det.box.left)


def assemble_reading(
    detections: Sequence[Detection],
    reading_class_range: tuple[int, int] = READING_CLASS_RANGE,
    class_names: Sequence[str] = CLASS_NAMES,
) -> str:
    """Concatenate reading-class labels in left-to-right order.

    Args:
        detections: Suppressed detections (any single coordinate space).
        reading_class_range: Inclusive class id range that forms the reading.
        class_names: Labels indexed by class id.

    Returns:
        The reading, or an empty string when nothing was read.
    """
    ordered = reading_detections(detections, reading_class_range)
    reading = "".join(class_names[det.class_id] for det in ordered)
    logger.debug("Extracted meter reading %r from %d characters", reading, len(ordered))
    return reading

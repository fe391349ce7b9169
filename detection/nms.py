"""
Class-aware non-maximum suppression.

Greedy suppression of same-class duplicates. Detections of different classes
never suppress each other, so a digit overlapping the unit label survives.
"""

from __future__ import annotations

from typing import Sequence

from geometry import box_iou

from .types import Detection


def suppress(detections: Sequence[Detection], iou_threshold: float) -> list[Detection]:
    """Filter overlapping same-class detections, keeping the most confident.

    Candidates are visited in descending confidence order (stable, so equal
    confidences keep their input order). Each accepted candidate suppresses
    every later unsuppressed candidate of the same class whose IoU with it is
    above `iou_threshold`.

    Args:
        detections: Candidate detections, typically from the decoder.
        iou_threshold: Overlap above which a same-class candidate is dropped.

    Returns:
        Kept detections (the original instances) in descending confidence order.
    """
    ordered = sorted(detections, key=lambda det: det.confidence, reverse=True)
    suppressed = [False] * len(ordered)
    kept: list[Detection] = []

    for i, current in enumerate(ordered):
        if suppressed[i]:
            continue
        kept.append(current)

        for j in range(i + 1, len(ordered)):
            if suppressed[j]:
                continue
            other = ordered[j]
            if other.class_id != current.class_id:
                continue
            if box_iou(current.box, other.box) > iou_threshold:
                suppressed[j] = True

    return kept

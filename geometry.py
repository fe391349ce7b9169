"""Shared geometry utilities for axis-aligned boxes and the letterbox transform.

Boxes carry no coordinate-space tag of their own. Decoder output and NMS work in
model-input pixels; pipeline results are in source-image pixels. Crossing
between the two only happens through `map_box_to_source` / `map_box_to_model`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from errors import DegenerateGeometryError


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives.

    Used for every pixel rounding in the letterbox so the canvas paste and the
    box mappings can never disagree by one pixel.
    """
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box as (left, top, right, bottom)."""

    left: float
    top: float
    right: float
    bottom: float

    @classmethod
    def from_center(cls, cx: float, cy: float, w: float, h: float) -> BoundingBox:
        return cls(cx - w / 2, cy - h / 2, cx + w / 2, cy + h / 2)

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def area(self) -> float:
        """Area, or 0.0 for degenerate and inverted boxes."""
        if self.is_degenerate:
            return 0.0
        return self.width * self.height

    @property
    def is_degenerate(self) -> bool:
        # NaN coordinates count as degenerate
        return not (self.width > 0 and self.height > 0)

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.left, self.top, self.right, self.bottom)


@dataclass(frozen=True)
class Letterbox:
    """Aspect-preserving resize-and-pad of a source image into a square canvas.

    Attributes:
        scale: target_size / max(source_width, source_height).
        offset_x: Left padding in model pixels (whole pixels).
        offset_y: Top padding in model pixels (whole pixels).
        scaled_width: Width of the resized image inside the canvas.
        scaled_height: Height of the resized image inside the canvas.
        source_width: Width of the source image.
        source_height: Height of the source image.
        target_size: Side of the square canvas.
    """

    scale: float
    offset_x: float
    offset_y: float
    scaled_width: int
    scaled_height: int
    source_width: int
    source_height: int
    target_size: int


def compute_letterbox(source_width: int, source_height: int, target_size: int) -> Letterbox:
    """Compute the letterbox that fits a source image into a target square.

    Raises:
        ValueError: If any dimension is not positive.
    """
    if source_width <= 0 or source_height <= 0:
        raise ValueError(
            f"Source dimensions must be positive, got {source_width}x{source_height}"
        )
    if target_size <= 0:
        raise ValueError(f"target_size must be positive, got {target_size}")

    scale = target_size / max(source_width, source_height)
    scaled_width = min(target_size, max(1, round_half_up(source_width * scale)))
    scaled_height = min(target_size, max(1, round_half_up(source_height * scale)))
    offset_x = round_half_up((target_size - scaled_width) / 2)
    offset_y = round_half_up((target_size - scaled_height) / 2)

    return Letterbox(
        scale=scale,
        offset_x=float(offset_x),
        offset_y=float(offset_y),
        scaled_width=scaled_width,
        scaled_height=scaled_height,
        source_width=source_width,
        source_height=source_height,
        target_size=target_size,
    )


def _clip(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def map_box_to_source(box: BoundingBox, letterbox: Letterbox) -> BoundingBox:
    """Map a model-space box back into source-image space.

    Padding is removed, the scale is undone and the result is clipped to the
    source image. Boxes partly in the padding are clipped, never extrapolated.

    Raises:
        DegenerateGeometryError: If the clipped box has no width or height.
    """
    width = letterbox.source_width
    height = letterbox.source_height
    mapped = BoundingBox(
        left=_clip((box.left - letterbox.offset_x) / letterbox.scale, 0.0, width),
        top=_clip((box.top - letterbox.offset_y) / letterbox.scale, 0.0, height),
        right=_clip((box.right - letterbox.offset_x) / letterbox.scale, 0.0, width),
        bottom=_clip((box.bottom - letterbox.offset_y) / letterbox.scale, 0.0, height),
    )
    if mapped.is_degenerate:
        raise DegenerateGeometryError(
            f"Box {box.as_tuple()} collapses to {mapped.as_tuple()} in source space"
        )
    return mapped


def map_box_to_model(box: BoundingBox, letterbox: Letterbox) -> BoundingBox:
    """Map a source-image box into model-input space (forward transform)."""
    return BoundingBox(
        left=box.left * letterbox.scale + letterbox.offset_x,
        top=box.top * letterbox.scale + letterbox.offset_y,
        right=box.right * letterbox.scale + letterbox.offset_x,
        bottom=box.bottom * letterbox.scale + letterbox.offset_y,
    )


def box_iou(box_a: BoundingBox, box_b: BoundingBox) -> float:
    """Compute intersection-over-union between two boxes.

    Returns exactly 0.0 when the boxes do not overlap; no division is done.
    """
    inter_left = max(box_a.left, box_b.left)
    inter_top = max(box_a.top, box_b.top)
    inter_right = min(box_a.right, box_b.right)
    inter_bottom = min(box_a.bottom, box_b.bottom)

    if inter_left >= inter_right or inter_top >= inter_bottom:
        return 0.0

    inter_area = (inter_right - inter_left) * (inter_bottom - inter_top)
    union = box_a.area + box_b.area - inter_area
    if union <= 0:
        return 0.0
    return inter_area / union

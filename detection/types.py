"""
Type definitions for the detection module.

This module defines the core data structures used throughout the detection pipeline.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Protocol

import numpy as np

from config import (
    BOX_ROWS,
    CLASS_NAMES,
    INPUT_SIZE,
    IOU_THRESHOLD,
    MAX_INPUT_SIZE,
    MIN_INPUT_SIZE,
    NUM_ANCHORS,
    NUM_CLASSES,
    READING_CLASS_RANGE,
    SCORE_THRESHOLD,
)
from errors import ConfigurationError
from geometry import BoundingBox, Letterbox


class InferenceFn(Protocol):
    """Injected model call: (1, 3, S, S) float32 input -> (1, 4 + C, A) output."""

    def __call__(self, tensor: np.ndarray) -> np.ndarray:
        ...


@dataclass(frozen=True)
class Detection:
    """A single detected meter character.

    Attributes:
        class_id: Index into the configured class names.
        confidence: Best class score for the anchor, in [0, 1].
        box: Bounding box; the coordinate space is tracked by the caller.
    """

    class_id: int
    confidence: float
    box: BoundingBox

    def with_box(self, box: BoundingBox) -> Detection:
        """Return a new Detection with the same class and confidence."""
        return dataclasses.replace(self, box=box)

    def to_dict(self, class_names: tuple[str, ...] = CLASS_NAMES) -> dict:
        """Convert to a JSON-friendly dict (label included for readability)."""
        return {
            "class_id": self.class_id,
            "label": class_names[self.class_id],
            "confidence": self.confidence,
            "box": list(self.box.as_tuple()),
        }

    @classmethod
    def from_dict(cls, d: dict) -> Detection:
        return cls(
            class_id=int(d["class_id"]),
            confidence=float(d["confidence"]),
            box=BoundingBox(*d["box"]),
        )


@dataclass(frozen=True)
class DetectionConfig:
    """Immutable configuration for decoding, suppression and reading assembly.

    Validated at construction; invalid values raise ConfigurationError rather
    than being clamped.

    Attributes:
        input_size: Side of the square model input in pixels.
        num_classes: Number of class score rows in the raw output.
        num_anchors: Number of anchor columns in the raw output.
        score_threshold: Anchors must score strictly above this to be kept.
        iou_threshold: Same-class overlap above this is suppressed.
        class_names: Ordered labels, one per class.
        reading_class_range: Inclusive (first, last) class ids that form the reading.
    """

    input_size: int = INPUT_SIZE
    num_classes: int = NUM_CLASSES
    num_anchors: int = NUM_ANCHORS
    score_threshold: float = SCORE_THRESHOLD
    iou_threshold: float = IOU_THRESHOLD
    class_names: tuple[str, ...] = CLASS_NAMES
    reading_class_range: tuple[int, int] = READING_CLASS_RANGE

    def __post_init__(self) -> None:
        # Lists are accepted for convenience but stored as tuples
        for name in ("class_names", "reading_class_range"):
            value = getattr(self, name)
            try:
                object.__setattr__(self, name, tuple(value))
            except TypeError:
                raise ConfigurationError(
                    f"{name} must be a sequence, got {type(value).__name__}"
                ) from None
        self.validate()

    def validate(self) -> None:
        """Validate configuration parameters.

        Raises:
            ConfigurationError: If any parameter is invalid.
        """
        if not MIN_INPUT_SIZE <= self.input_size <= MAX_INPUT_SIZE:
            raise ConfigurationError(
                f"input_size must be within [{MIN_INPUT_SIZE}, {MAX_INPUT_SIZE}], "
                f"got {self.input_size}"
            )
        if self.num_classes <= 0:
            raise ConfigurationError(f"num_classes must be positive, got {self.num_classes}")
        if self.num_anchors <= 0:
            raise ConfigurationError(f"num_anchors must be positive, got {self.num_anchors}")
        if len(self.class_names) != self.num_classes:
            raise ConfigurationError(
                f"class_names has {len(self.class_names)} entries, "
                f"expected num_classes={self.num_classes}"
            )
        for name, value in (
            ("score_threshold", self.score_threshold),
            ("iou_threshold", self.iou_threshold),
        ):
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be within [0, 1], got {value}")

        if len(self.reading_class_range) != 2:
            raise ConfigurationError(
                f"reading_class_range must be a (first, last) pair, got {self.reading_class_range}"
            )
        first, last = self.reading_class_range
        if not 0 <= first <= last < self.num_classes:
            raise ConfigurationError(
                f"reading_class_range {self.reading_class_range} is outside "
                f"[0, {self.num_classes - 1}] or not ascending"
            )

    @property
    def output_shape(self) -> tuple[int, int]:
        """Expected (rows, anchors) shape of the raw output tensor."""
        return (BOX_ROWS + self.num_classes, self.num_anchors)

    def with_overrides(self, **overrides: Any) -> DetectionConfig:
        """Return a new validated config with some fields replaced.

        None values are ignored so CLI flags can be passed straight through.
        """
        changes = {key: value for key, value in overrides.items() if value is not None}
        return dataclasses.replace(self, **changes)


@dataclass
class PipelineResult:
    """Complete result from one run of the detection pipeline.

    Attributes:
        detections: Suppressed detections in source-image coordinates.
        reading: Assembled meter reading; empty when nothing was read.
        letterbox: Transform used between source and model space.
        model_detections: Suppressed detections in model-input coordinates.
        candidate_count: Number of anchors that passed the score threshold.
        source_dimensions: (width, height) of the source image.
    """

    detections: list[Detection]
    reading: str
    letterbox: Letterbox
    model_detections: list[Detection] = field(default_factory=list)
    candidate_count: int = 0
    source_dimensions: tuple[int, int] = (0, 0)

    @property
    def has_reading(self) -> bool:
        return bool(self.reading)

    def to_dict(self, class_names: tuple[str, ...] = CLASS_NAMES) -> dict:
        """Convert to a JSON-friendly dict."""
        width, height = self.source_dimensions
        return {
            "reading": self.reading,
            "detections": [det.to_dict(class_names) for det in self.detections],
            "candidate_count": self.candidate_count,
            "source_dimensions": {"width": width, "height": height},
        }

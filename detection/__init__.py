"""
Meter reading detection module.

This module turns the raw output of a YOLO-style digit detector into a meter
reading. It follows the same design philosophy as the preprocessing module:
pure functions, early validation, and clear separation of concerns.

Key components:
- types: Core data structures (Detection, DetectionConfig, PipelineResult)
- decoder: Raw tensor decoding with confidence threshold
- nms: Class-aware non-maximum suppression
- reading: Left-to-right reading assembly
- detector: Main detection orchestration

The main entry point is `run_detection()` which returns a `PipelineResult`
with detections in source-image coordinates and the assembled reading.
"""

from errors import (
    MeterReadingError,
    ConfigurationError,
    ShapeMismatchError,
    InferenceError,
    InferenceUnavailableError,
    DegenerateGeometryError,
)

from .types import Detection, DetectionConfig, PipelineResult, InferenceFn
from .decoder import decode_output, validate_output_shape
from .nms import suppress
from .reading import assemble_reading, reading_detections, is_reading_class
from .detector import run_detection, run_inference, map_detections_to_source

__all__ = [
    "Detection",
    "DetectionConfig",
    "PipelineResult",
    "InferenceFn",
    "decode_output",
    "validate_output_shape",
    "suppress",
    "assemble_reading",
    "reading_detections",
    "is_reading_class",
    "run_detection",
    "run_inference",
    "map_detections_to_source",
    "MeterReadingError",
    "ConfigurationError",
    "ShapeMismatchError",
    "InferenceError",
    "InferenceUnavailableError",
    "DegenerateGeometryError",
]

"""
Main meter reading detection orchestration.

This module ties together all detection components: preprocessing, inference,
decoding, suppression, coordinate mapping and reading assembly.
"""

from __future__ import annotations

import logging

import numpy as np

from errors import (
    DegenerateGeometryError,
    InferenceError,
    InferenceUnavailableError,
    ShapeMismatchError,
)
from geometry import Letterbox, map_box_to_source
from preprocessing import PreprocessConfig, run_pipeline

from .decoder import decode_output
from .nms import suppress
from .reading import assemble_reading
from .types import Detection, DetectionConfig, InferenceFn, PipelineResult

logger = logging.getLogger(__name__)


def run_inference(model: InferenceFn | None, tensor: np.ndarray) -> np.ndarray:
    """Invoke the injected model and strip the batch axis from its output.

    Raises:
        InferenceUnavailableError: If no model is supplied.
        InferenceError: If the model call fails.
        ShapeMismatchError: If the model does not return an array.
    """
    if model is None:
        raise InferenceUnavailableError("No model loaded")

    try:
        output = model(tensor)
    except InferenceError:
        raise
    except Exception as exc:
        raise InferenceError(f"Inference failed: {exc}") from exc

    if not isinstance(output, np.ndarray):
        raise ShapeMismatchError(
            f"Model returned {type(output).__name__}, expected numpy.ndarray"
        )
    if output.ndim == 3 and output.shape[0] == 1:
        output = output[0]
    return output


def map_detections_to_source(
    detections: list[Detection],
    letterbox: Letterbox,
) -> list[Detection]:
    """Map model-space detections into source-image space.

    Detections whose box collapses after clipping are dropped.
    """
    mapped: list[Detection] = []
    for det in detections:
        try:
            box = map_box_to_source(det.box, letterbox)
        except DegenerateGeometryError as exc:
            logger.debug("Dropping detection of class %d: %s", det.class_id, exc)
            continue
        mapped.append(det.with_box(box))
    return mapped


def run_detection(
    image: np.ndarray,
    model: InferenceFn | None,
    config: DetectionConfig | None = None,
) -> PipelineResult:
    """Detect meter characters in an image and assemble the reading.

    The model is an explicit argument so concurrent calls on different threads
    never share a mutable model handle; nothing outside the returned result is
    modified.

    Args:
        image: RGB image (H, W, 3) uint8, already cropped to any ROI.
        model: Inference callable, (1, 3, S, S) -> (1, 4 + C, A).
        config: Detection configuration. If None, uses default settings.

    Returns:
        PipelineResult with image-space detections and the reading.

    Raises:
        InferenceUnavailableError: If no model is available.
        InferenceError: If the model call fails.
        ShapeMismatchError: If the model output does not match the configuration.
    """
    if config is None:
        config = DetectionConfig()

    if model is None:
        raise InferenceUnavailableError("No model loaded")

    preprocess_result = run_pipeline(image, PreprocessConfig(input_size=config.input_size))
    letterbox = preprocess_result.letterbox

    raw = run_inference(model, preprocess_result.tensor)

    candidates = decode_output(raw, config)
    model_detections = suppress(candidates, config.iou_threshold)
    detections = map_detections_to_source(model_detections, letterbox)
    reading = assemble_reading(detections, config.reading_class_range, config.class_names)

    logger.debug(
        "Kept %d of %d candidates, reading %r",
        len(detections), len(candidates), reading,
    )

    return PipelineResult(
        detections=detections,
        reading=reading,
        letterbox=letterbox,
        model_detections=model_detections,
        candidate_count=len(candidates),
        source_dimensions=preprocess_result.original_dimensions,
    )

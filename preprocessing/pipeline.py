"""
Preprocessing pipeline that applies all steps in order.

The pipeline is the entry point for preparing images for the model:
RGB normalization -> letterbox -> model input tensor.

This module provides two APIs:
1. run_pipeline() - Function API that builds and runs the standard pipeline
2. Pipeline class - Class-based API for composable step sequences
"""

import numpy as np

from .config import PreprocessConfig, PreprocessResult
from .normalization import _validate_image, to_model_input
from .steps import LetterboxStep, Pipeline, PreprocessStep, RgbStep


def build_pipeline(config: PreprocessConfig) -> Pipeline:
    """Build the standard preprocessing Pipeline from a PreprocessConfig.

    1. RgbStep - Normalize to 3-channel RGB
    2. LetterboxStep - Resize and pad to input_size x input_size
    """
    steps: list[PreprocessStep] = [
        RgbStep(),
        LetterboxStep(target_size=config.input_size, pad_value=config.pad_value),
    ]
    return Pipeline(steps=steps)


def run_pipeline(
    img: np.ndarray,
    config: PreprocessConfig | None = None,
) -> PreprocessResult:
    """Prepare an image for the model.

    All operations are pure and non-mutating. Every buffer is allocated for
    this call only, so concurrent calls never share memory.

    Args:
        img: Input image as numpy array, RGB (H, W, 3) uint8 expected;
             grayscale and RGBA are normalized.
        config: Preprocessing configuration. If None, uses default settings.

    Returns:
        PreprocessResult with the letterboxed image, model tensor and letterbox.

    Raises:
        ValueError: If configuration is invalid or image cannot be processed.
        TypeError: If inputs are of wrong type.

    Examples:
        >>> img = np.zeros((600, 800, 3), dtype=np.uint8)
        >>> result = run_pipeline(img)
        >>> result.tensor.shape
        (1, 3, 640, 640)
        >>> result.letterbox.offset_y
        80.0
    """
    if config is None:
        config = PreprocessConfig()

    config.validate()
    _validate_image(img)

    pipeline_result = build_pipeline(config).run(img)
    processed = pipeline_result.final

    return PreprocessResult(
        original=pipeline_result.original,
        processed=processed,
        tensor=to_model_input(processed),
        letterbox=pipeline_result.letterbox,
        config=config,
    )

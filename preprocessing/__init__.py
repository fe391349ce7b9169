"""
Image preprocessing module for meter reading detection.

This module provides pure, deterministic functions for preparing images for
the detection model. All functions follow the pattern: input -> output with
no mutation of the original arrays.

Key components:
- config: PreprocessConfig dataclass and PreprocessResult
- pipeline: run_pipeline() function that applies preprocessing steps in order
- steps: Class-based preprocessing steps with common PreprocessStep interface
- normalization: RGB conversion, ROI crop, letterbox canvas, model tensor
"""

from .config import PreprocessConfig, PreprocessResult
from .pipeline import run_pipeline, build_pipeline
from .normalization import (
    load_image,
    to_rgb,
    crop_to_roi,
    letterbox_image,
    to_model_input,
)
from .steps import (
    PreprocessStep,
    RgbStep,
    LetterboxStep,
    Pipeline,
    PipelineStepResults,
    StepResult,
)

__all__ = [
    # Config and results
    "PreprocessConfig",
    "PreprocessResult",
    # Function API
    "run_pipeline",
    "build_pipeline",
    "load_image",
    "to_rgb",
    "crop_to_roi",
    "letterbox_image",
    "to_model_input",
    # Class-based API
    "PreprocessStep",
    "RgbStep",
    "LetterboxStep",
    "Pipeline",
    "PipelineStepResults",
    "StepResult",
]

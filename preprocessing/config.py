"""
Configuration for the preprocessing pipeline.

All preprocessing steps are parameterized through PreprocessConfig to ensure
reproducibility.
"""

from dataclasses import dataclass

import numpy as np

from config import (
    INPUT_SIZE,
    LETTERBOX_PAD_VALUE,
    MIN_INPUT_SIZE,
    MAX_INPUT_SIZE,
)
from geometry import BoundingBox, Letterbox, map_box_to_source


@dataclass(frozen=True)
class PreprocessConfig:
    """Configuration for all preprocessing steps.

    Attributes:
        input_size: Side of the square model input the image is letterboxed into.
        pad_value: Gray level (0-255) used for the letterbox padding.
    """

    input_size: int = INPUT_SIZE
    pad_value: int = LETTERBOX_PAD_VALUE

    def validate(self) -> None:
        """Validate configuration parameters.

        Raises:
            ValueError: If any parameter is invalid.
        """
        if self.input_size <= 0:
            raise ValueError(f"input_size must be positive, got {self.input_size}")
        if self.input_size < MIN_INPUT_SIZE:
            raise ValueError(
                f"input_size={self.input_size} is too small. Minimum is {MIN_INPUT_SIZE}."
            )
        if self.input_size > MAX_INPUT_SIZE:
            raise ValueError(
                f"input_size={self.input_size} is very large. Maximum is {MAX_INPUT_SIZE}."
            )
        if not 0 <= self.pad_value <= 255:
            raise ValueError(f"pad_value must be within [0, 255], got {self.pad_value}")


@dataclass
class PreprocessResult:
    """Result of the preprocessing pipeline.

    Attributes:
        original: Original input image, copied so the caller's array is untouched.
        processed: Letterboxed RGB image (input_size x input_size x 3, uint8).
        tensor: Model input built from `processed`, shape (1, 3, S, S), float32 in [0, 1].
        letterbox: Transform between source and model coordinates.
        config: The configuration used for preprocessing.
    """

    original: np.ndarray
    processed: np.ndarray
    tensor: np.ndarray
    letterbox: Letterbox
    config: PreprocessConfig

    def map_box_to_original(self, box: BoundingBox) -> BoundingBox:
        """Map a model-space box back to the original image."""
        return map_box_to_source(box, self.letterbox)

    @property
    def original_dimensions(self) -> tuple[int, int]:
        """Get (width, height) of the original image."""
        h, w = self.original.shape[:2]
        return w, h

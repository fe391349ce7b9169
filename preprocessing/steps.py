"""
Preprocessing step classes with a common interface.

Each step is a dataclass that implements the PreprocessStep interface.
Steps are pure: they take an input and return a new output without mutating
the original array.

Usage:
    from preprocessing.steps import RgbStep, LetterboxStep, Pipeline

    pipeline = Pipeline(steps=[
        RgbStep(),
        LetterboxStep(target_size=640),
    ])
    result = pipeline.run(image)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from config import LETTERBOX_PAD_VALUE
from geometry import Letterbox, compute_letterbox

from .normalization import letterbox_image, to_rgb


class PreprocessStep(ABC):
    """Base class for preprocessing steps.

    Steps can optionally produce metadata (like the letterbox transform) that
    needs to be preserved for later coordinate mapping.
    """

    @abstractmethod
    def apply(self, img: np.ndarray) -> np.ndarray:
        """Apply this preprocessing step to an image.

        Must be pure: never mutates the input image.
        """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for logging and debugging."""

    def get_metadata(self) -> dict[str, Any]:
        """Return any metadata produced by the last `apply` call."""
        return {}


@dataclass(frozen=True)
class RgbStep(PreprocessStep):
    """Normalize grayscale and RGBA inputs to RGB uint8."""

    def apply(self, img: np.ndarray) -> np.ndarray:
        return to_rgb(img)

    @property
    def name(self) -> str:
        return "rgb"


@dataclass
class LetterboxStep(PreprocessStep):
    """Resize and pad an image into a square canvas, preserving aspect ratio.

    The letterbox transform is kept as metadata so boxes can be mapped back to
    the source image.

    Attributes:
        target_size: Side of the square canvas in pixels.
        pad_value: Gray level used for the padding.
    """

    target_size: int
    pad_value: int = LETTERBOX_PAD_VALUE
    _letterbox: Letterbox | None = field(default=None, init=False, repr=False)

    def apply(self, img: np.ndarray) -> np.ndarray:
        height, width = img.shape[:2]
        letterbox = compute_letterbox(width, height, self.target_size)
        self._letterbox = letterbox
        return letterbox_image(img, letterbox, self.pad_value)

    @property
    def name(self) -> str:
        return f"letterbox({self.target_size})"

    def get_metadata(self) -> dict[str, Any]:
        if self._letterbox is None:
            return {}
        return {"letterbox": self._letterbox}


@dataclass
class StepResult:
    """Result of applying a single preprocessing step."""

    name: str
    image: np.ndarray
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class PipelineStepResults:
    """Results from running a preprocessing pipeline.

    Attributes:
        original: The original input image.
        steps: List of StepResult for each step in order.
    """

    original: np.ndarray
    steps: list[StepResult] = field(default_factory=list)

    @property
    def final(self) -> np.ndarray:
        """Get the final processed image."""
        if not self.steps:
            return self.original
        return self.steps[-1].image

    def get_intermediate(self, step_name: str) -> np.ndarray | None:
        for step in self.steps:
            if step.name == step_name:
                return step.image
        return None

    def get_metadata(self, key: str) -> Any | None:
        """Get a metadata value from the first step that produced it."""
        for step in self.steps:
            if key in step.metadata:
                return step.metadata[key]
        return None

    @property
    def letterbox(self) -> Letterbox | None:
        return self.get_metadata("letterbox")


@dataclass
class Pipeline:
    """A sequence of preprocessing steps to apply to images.

    The pipeline runs each step in order, passing the output of one step
    as the input to the next. All intermediate results are preserved.
    """

    steps: list[PreprocessStep]

    def run(self, img: np.ndarray) -> PipelineStepResults:
        result = PipelineStepResults(original=img.copy())
        current = result.original

        for step in self.steps:
            output = step.apply(current)
            result.steps.append(
                StepResult(name=step.name, image=output, metadata=step.get_metadata())
            )
            current = output

        return result

"""Shared utility functions for visual artifacts and result files."""

import json
from pathlib import Path
from typing import Sequence

import cv2
import numpy as np

from config import (
    CLASS_NAMES,
    OVERLAY_BOX_COLOR,
    OVERLAY_BOX_THICKNESS,
    OVERLAY_TEXT_SCALE,
    OVERLAY_TEXT_THICKNESS,
    OVERLAY_LABEL_BACKGROUND,
    OVERLAY_LABEL_ALPHA,
)
from detection import Detection, PipelineResult


def get_annotated_path(output_dir: Path, image_path: Path) -> Path:
    """Get the annotated image path for a given source image."""
    return output_dir / f"{image_path.stem}_annotated.png"


def get_result_path(output_dir: Path, image_path: Path) -> Path:
    """Get the JSON result path for a given source image."""
    return output_dir / f"{image_path.stem}.json"


def draw_detections(
    image: np.ndarray,
    detections: Sequence[Detection],
    class_names: Sequence[str] = CLASS_NAMES,
) -> np.ndarray:
    """Draw detection boxes and labels on a copy of an RGB image.

    Each box gets a "<label> (<confidence>)" tag on a translucent dark
    background just above its top-left corner.

    Args:
        image: RGB image the detection boxes are expressed in.
        detections: Detections to draw.
        class_names: Labels indexed by class id.

    Returns:
        New annotated RGB image; the input is not modified.
    """
    annotated = image.copy()
    font = cv2.FONT_HERSHEY_SIMPLEX
    img_height, img_width = annotated.shape[:2]

    for det in detections:
        left, top, right, bottom = (int(round(v)) for v in det.box.as_tuple())
        cv2.rectangle(
            annotated, (left, top), (right, bottom),
            OVERLAY_BOX_COLOR, OVERLAY_BOX_THICKNESS,
        )

        label = f"{class_names[det.class_id]} ({det.confidence:.2f})"
        (text_width, text_height), baseline = cv2.getTextSize(
            label, font, OVERLAY_TEXT_SCALE, OVERLAY_TEXT_THICKNESS
        )

        # Keep the label inside the image when the box touches the top edge
        label_bottom = max(top, text_height + baseline)
        label_top = label_bottom - text_height - baseline
        label_right = min(img_width, left + text_width)
        label_left = max(0, label_right - text_width)

        region = annotated[label_top:label_bottom, label_left:label_right]
        if region.size:
            background = np.empty_like(region)
            background[:] = OVERLAY_LABEL_BACKGROUND
            annotated[label_top:label_bottom, label_left:label_right] = cv2.addWeighted(
                region, 1 - OVERLAY_LABEL_ALPHA, background, OVERLAY_LABEL_ALPHA, 0
            )

        cv2.putText(
            annotated, label,
            (label_left, min(img_height - 1, label_bottom - baseline)),
            font, OVERLAY_TEXT_SCALE, OVERLAY_BOX_COLOR, OVERLAY_TEXT_THICKNESS,
        )

    return annotated


def save_image(image: np.ndarray, output_path: Path) -> None:
    """Save an RGB or grayscale image, creating parent directories.

    Raises:
        OSError: If OpenCV cannot write the file.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if image.ndim == 3 and image.shape[2] == 3:
        image = cv2.cvtColor(image, cv2.COLOR_RGB2BGR)
    if not cv2.imwrite(str(output_path), image):
        raise OSError(f"Failed to write image: {output_path}")


def save_result_json(
    result: PipelineResult,
    output_path: Path,
    class_names: Sequence[str] = CLASS_NAMES,
) -> None:
    """Write a pipeline result as JSON."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(result.to_dict(tuple(class_names)), f, indent=2)

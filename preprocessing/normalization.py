"""
Image normalization functions for preprocessing.

All functions are pure: they take an input and return a new output without
mutating the original array. This ensures predictable behavior and makes
testing straightforward.
"""

import io

import cv2
import numpy as np
from PIL import Image

from config import LETTERBOX_PAD_VALUE
from geometry import Letterbox


def _validate_image(img: np.ndarray) -> None:
    if not isinstance(img, np.ndarray):
        raise TypeError(f"Expected numpy.ndarray, got {type(img).__name__}")

    if img.ndim < 2 or img.ndim > 3:
        raise ValueError(
            f"Image must be 2D or 3D array, got {img.ndim}D array with shape {img.shape}"
        )

    if img.size == 0:
        raise ValueError("Image array is empty")


def load_image(image_data: bytes) -> np.ndarray:
    """Decode encoded image bytes into an RGB uint8 array."""
    image = Image.open(io.BytesIO(image_data))
    if image.mode != "RGB":
        image = image.convert("RGB")
    return np.array(image)


def to_rgb(img: np.ndarray) -> np.ndarray:
    """Convert an image to 3-channel RGB uint8.

    Pure function: returns a new array without modifying the input.

    Args:
        img: Input image. Can be:
             - Grayscale (2D or 1 channel): replicated into three channels
             - RGB (3 channels): returned as a copy
             - RGBA (4 channels): alpha channel is dropped

    Returns:
        RGB image with shape (H, W, 3) and dtype uint8.

    Raises:
        ValueError: If input is not a valid image array.
        TypeError: If img is not a numpy array.

    Examples:
        >>> gray = np.zeros((100, 200), dtype=np.uint8)
        >>> to_rgb(gray).shape
        (100, 200, 3)
    """
    _validate_image(img)

    if img.ndim == 2:
        result = cv2.cvtColor(img, cv2.COLOR_GRAY2RGB)
    else:
        channels = img.shape[2]
        if channels == 1:
            result = cv2.cvtColor(img[:, :, 0], cv2.COLOR_GRAY2RGB)
        elif channels == 3:
            result = img.copy()
        elif channels == 4:
            result = np.ascontiguousarray(img[:, :, :3])
        else:
            raise ValueError(
                f"Unsupported number of channels: {channels}. "
                "Expected 1, 3 (RGB), or 4 (RGBA)."
            )

    if result.dtype != np.uint8:
        result = np.clip(result, 0, 255).astype(np.uint8)

    return result


def crop_to_roi(img: np.ndarray, roi: tuple[int, int, int, int]) -> np.ndarray:
    """Crop an image to a region of interest.

    The ROI is clipped to the image bounds. Detections made on the crop are in
    the crop's own coordinate space.

    Args:
        img: Input image (2D or 3D).
        roi: Region as (x, y, w, h) in image pixels.

    Returns:
        Cropped copy of the image.

    Raises:
        ValueError: If the ROI does not intersect the image.
    """
    _validate_image(img)

    x, y, w, h = roi
    img_height, img_width = img.shape[:2]
    x1 = max(0, x)
    y1 = max(0, y)
    x2 = min(img_width, x + w)
    y2 = min(img_height, y + h)

    if x2 <= x1 or y2 <= y1:
        raise ValueError(
            f"ROI {roi} does not intersect image of size {img_width}x{img_height}"
        )

    return img[y1:y2, x1:x2].copy()


def letterbox_image(
    img: np.ndarray,
    letterbox: Letterbox,
    pad_value: int = LETTERBOX_PAD_VALUE,
) -> np.ndarray:
    """Resize an image into the letterbox canvas.

    The image is resized to (scaled_width, scaled_height) and pasted at the
    letterbox offsets on a canvas filled with `pad_value`.

    Args:
        img: RGB image whose size matches the letterbox source dimensions.
        letterbox: Transform from `geometry.compute_letterbox`.
        pad_value: Gray level for the padding.

    Returns:
        New (target_size, target_size, channels) uint8 array.
    """
    _validate_image(img)

    img_height, img_width = img.shape[:2]
    if (img_width, img_height) != (letterbox.source_width, letterbox.source_height):
        raise ValueError(
            f"Image size {img_width}x{img_height} does not match letterbox source "
            f"{letterbox.source_width}x{letterbox.source_height}"
        )

    resized = cv2.resize(
        img,
        (letterbox.scaled_width, letterbox.scaled_height),
        interpolation=cv2.INTER_LINEAR,
    )
    if resized.ndim == 2:
        resized = resized[:, :, np.newaxis]

    size = letterbox.target_size
    canvas = np.full((size, size, resized.shape[2]), pad_value, dtype=np.uint8)
    x0 = int(letterbox.offset_x)
    y0 = int(letterbox.offset_y)
    canvas[y0:y0 + letterbox.scaled_height, x0:x0 + letterbox.scaled_width] = resized
    return canvas


def to_model_input(img: np.ndarray) -> np.ndarray:
    """Build the (1, 3, H, W) float32 model input from an RGB image.

    Pixel values are scaled to [0, 1]; channel order stays RGB.
    """
    _validate_image(img)
    if img.ndim != 3 or img.shape[2] != 3:
        raise ValueError(f"Expected RGB image with 3 channels, got shape {img.shape}")

    height, width = img.shape[:2]
    return cv2.dnn.blobFromImage(
        img,
        scalefactor=1.0 / 255.0,
        size=(width, height),
        mean=(0, 0, 0),
        swapRB=False,
        crop=False,
    )

"""
Inference backends for the detection model.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import cv2
import numpy as np

import config
from errors import InferenceError, InferenceUnavailableError
from .catalog import ModelInfo

logger = logging.getLogger(__name__)


@dataclass
class OpenCVDnnModel:
    """ONNX detection model run through OpenCV DNN.

    Callable as an `InferenceFn`. One instance should not be shared between
    threads; create one per worker instead.
    """

    model_path: str
    info: ModelInfo | None = None
    _net: cv2.dnn.Net | None = field(default=None, init=False, repr=False)

    def load(self) -> OpenCVDnnModel:
        """Load the network from disk.

        Raises:
            InferenceUnavailableError: If the file is missing or cannot be parsed.
        """
        path = Path(self.model_path)
        if not path.exists():
            raise InferenceUnavailableError(f"Missing model file: {path}")
        try:
            self._net = cv2.dnn.readNetFromONNX(str(path))
        except cv2.error as exc:
            raise InferenceUnavailableError(f"Failed to load model {path}: {exc}") from exc
        logger.info("Loaded model %s", path.name)
        return self

    @property
    def is_loaded(self) -> bool:
        return self._net is not None

    def __call__(self, tensor: np.ndarray) -> np.ndarray:
        if self._net is None:
            raise InferenceUnavailableError("Model is not loaded")
        try:
            self._net.setInput(tensor)
            output = self._net.forward()
        except cv2.error as exc:
            raise InferenceError(f"OpenCV DNN forward failed: {exc}") from exc
        return np.asarray(output, dtype=np.float32)

    def close(self) -> None:
        """Release the network; later calls raise InferenceUnavailableError."""
        self._net = None

    def __enter__(self) -> OpenCVDnnModel:
        if self._net is None:
            self.load()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def load_model(info: ModelInfo, models_dir: Path | None = None) -> OpenCVDnnModel:
    """Instantiate and load the model described by `info`."""
    if models_dir is None:
        models_dir = config.MODELS_DIR
    model = OpenCVDnnModel(model_path=str(Path(models_dir) / info.file_name), info=info)
    return model.load()

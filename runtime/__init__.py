"""
Model runtime collaborators: model catalog and inference backends.

The detection core only depends on the `InferenceFn` call signature; this
package supplies a concrete implementation backed by OpenCV DNN.
"""

from .catalog import ModelInfo, ModelManifest, load_catalog, load_manifest, find_model
from .backends import OpenCVDnnModel, load_model

__all__ = [
    "ModelInfo",
    "ModelManifest",
    "load_catalog",
    "load_manifest",
    "find_model",
    "OpenCVDnnModel",
    "load_model",
]

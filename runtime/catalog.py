"""
Model catalog: metadata for the detection models available on disk.

Metadata comes from a `models.json` manifest next to the model files. No
meaning is inferred from file names; a model file without a manifest entry
is listed under its stem with default metadata.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

import config

logger = logging.getLogger(__name__)


class ModelEntry(BaseModel):
    """Manifest shape for a single model."""
    file_name: str
    display_name: str
    description: str = ""
    version: str = config.DEFAULT_MODEL_VERSION


class ModelManifest(BaseModel):
    """Manifest shape for `models.json`."""
    models: list[ModelEntry] = Field(default_factory=list)


@dataclass(frozen=True)
class ModelInfo:
    """Model metadata shown to users and used to load a model."""

    file_name: str
    display_name: str
    description: str = ""
    version: str = config.DEFAULT_MODEL_VERSION

    def to_dict(self) -> dict[str, str]:
        return {
            "file_name": self.file_name,
            "display_name": self.display_name,
            "description": self.description,
            "version": self.version,
        }


def load_manifest(path: Path) -> ModelManifest:
    """Load and validate a model manifest.

    Raises:
        ValueError: If the file is not valid JSON or does not match the schema.
    """
    try:
        data = json.loads(path.read_text())
        return ModelManifest.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ValueError(f"Invalid model manifest {path}: {exc}") from exc


def load_catalog(models_dir: Path | None = None) -> list[ModelInfo]:
    """List the models available in a directory.

    Manifest entries come first, in manifest order. Model files on disk that
    the manifest does not mention follow in name order.

    Args:
        models_dir: Directory holding model files (default: config.MODELS_DIR).

    Returns:
        ModelInfo for every available model; empty if the directory is missing.
    """
    if models_dir is None:
        models_dir = config.MODELS_DIR
    models_dir = Path(models_dir)

    if not models_dir.is_dir():
        logger.debug("Models directory %s does not exist", models_dir)
        return []

    catalog: list[ModelInfo] = []
    manifest_path = models_dir / config.MODEL_MANIFEST_NAME
    if manifest_path.exists():
        manifest = load_manifest(manifest_path)
        for entry in manifest.models:
            if not (models_dir / entry.file_name).exists():
                logger.warning("Manifest lists missing model file: %s", entry.file_name)
                continue
            catalog.append(ModelInfo(**entry.model_dump()))

    listed = {info.file_name for info in catalog}
    for path in sorted(models_dir.iterdir()):
        if path.suffix.lower() not in config.MODEL_SUFFIXES or path.name in listed:
            continue
        catalog.append(ModelInfo(file_name=path.name, display_name=path.stem))

    logger.debug("Found %d models in %s", len(catalog), models_dir)
    return catalog


def find_model(catalog: list[ModelInfo], name: str | None = None) -> ModelInfo:
    """Pick a model by file name or display name, or the first one if name is None.

    Raises:
        ValueError: If the catalog is empty or no model matches.
    """
    if not catalog:
        raise ValueError("No models available")
    if name is None:
        return catalog[0]
    for info in catalog:
        if name in (info.file_name, info.display_name):
            return info
    available = ", ".join(info.file_name for info in catalog)
    raise ValueError(f"Unknown model {name!r}. Available: {available}")

"""Read command CLI parsing and control flow."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

import numpy as np
from tqdm import tqdm

import config
from detection import DetectionConfig, MeterReadingError, PipelineResult, run_detection
from preprocessing import crop_to_roi, load_image
from runtime import OpenCVDnnModel, find_model, load_catalog, load_model
from utils import (
    draw_detections,
    get_annotated_path,
    get_result_path,
    save_image,
    save_result_json,
)

logger = logging.getLogger(__name__)


def parse_roi(value: str) -> tuple[int, int, int, int]:
    """Parse an "x,y,w,h" ROI argument."""
    parts = value.split(",")
    if len(parts) != 4:
        raise argparse.ArgumentTypeError(f"ROI must be x,y,w,h, got {value!r}")
    try:
        x, y, w, h = (int(part) for part in parts)
    except ValueError:
        raise argparse.ArgumentTypeError(f"ROI values must be integers, got {value!r}") from None
    if w <= 0 or h <= 0:
        raise argparse.ArgumentTypeError(f"ROI width and height must be positive, got {value!r}")
    return x, y, w, h


def add_read_subparser(subparsers: argparse._SubParsersAction) -> None:
    read_parser = subparsers.add_parser(
        "read",
        help="Read meter values from an image file or directory",
    )
    read_parser.add_argument(
        "source",
        help="Image file or directory of images",
    )
    model_group = read_parser.add_mutually_exclusive_group()
    model_group.add_argument(
        "--model",
        help="Model file name or display name from the catalog (default: first)",
    )
    model_group.add_argument(
        "--model-path",
        help="Path to an ONNX model file, bypassing the catalog",
    )
    read_parser.add_argument(
        "--models-dir",
        type=Path,
        default=config.MODELS_DIR,
        help="Directory holding models and models.json",
    )
    read_parser.add_argument(
        "--roi",
        type=parse_roi,
        help="Region of interest x,y,w,h applied before detection",
    )
    read_parser.add_argument(
        "--score-threshold",
        type=float,
        help=f"Minimum class score (default: {config.SCORE_THRESHOLD})",
    )
    read_parser.add_argument(
        "--iou-threshold",
        type=float,
        help=f"Same-class NMS IoU threshold (default: {config.IOU_THRESHOLD})",
    )
    read_parser.add_argument(
        "--annotate",
        type=Path,
        metavar="DIR",
        help="Save annotated images and JSON results to DIR",
    )
    read_parser.add_argument(
        "--json",
        action="store_true",
        help="Print one JSON result per image to stdout",
    )
    read_parser.set_defaults(_cmd=cmd_read)


def iter_image_paths(source: Path) -> list[Path]:
    """Return the image files to read from a file or directory."""
    if source.is_file():
        return [source]
    if source.is_dir():
        return sorted(
            path for path in source.iterdir()
            if path.is_file() and path.suffix.lower() in config.IMAGE_SUFFIXES
        )
    raise ValueError(f"Source not found: {source}")


def open_model(args: argparse.Namespace) -> OpenCVDnnModel:
    """Load the model selected on the command line."""
    if args.model_path:
        return OpenCVDnnModel(model_path=args.model_path).load()
    catalog = load_catalog(args.models_dir)
    info = find_model(catalog, args.model)
    logger.info("Using model %s (v%s)", info.display_name, info.version)
    return load_model(info, args.models_dir)


def read_image_file(
    image_path: Path,
    model: OpenCVDnnModel,
    detection_config: DetectionConfig,
    roi: tuple[int, int, int, int] | None = None,
) -> tuple[PipelineResult, np.ndarray]:
    """Load, crop and run detection on one image file."""
    image = load_image(image_path.read_bytes())
    if roi is not None:
        image = crop_to_roi(image, roi)
    return run_detection(image, model, detection_config), image


def cmd_read(args: argparse.Namespace) -> int:
    try:
        image_paths = iter_image_paths(Path(args.source))
        detection_config = DetectionConfig().with_overrides(
            score_threshold=args.score_threshold,
            iou_threshold=args.iou_threshold,
        )
        model = open_model(args)
    except (ValueError, MeterReadingError) as exc:
        logger.error("%s", exc)
        return 1

    if not image_paths:
        logger.error("No images found in %s", args.source)
        return 1

    failures = 0
    with model:
        for image_path in tqdm(image_paths, desc="Reading", disable=len(image_paths) == 1):
            try:
                result, image = read_image_file(image_path, model, detection_config, args.roi)
            except (MeterReadingError, ValueError, OSError) as exc:
                logger.error("Detection failed for %s: %s", image_path.name, exc)
                failures += 1
                continue

            if result.has_reading:
                logger.info("%s: %s", image_path.name, result.reading)
            else:
                logger.info("%s: no meter reading detected", image_path.name)

            if args.json:
                payload = {"image": str(image_path), **result.to_dict(detection_config.class_names)}
                print(json.dumps(payload))

            if args.annotate:
                annotated = draw_detections(image, result.detections, detection_config.class_names)
                try:
                    save_image(annotated, get_annotated_path(args.annotate, image_path))
                    save_result_json(
                        result,
                        get_result_path(args.annotate, image_path),
                        detection_config.class_names,
                    )
                except OSError as exc:
                    logger.error("Saving results failed for %s: %s", image_path.name, exc)
                    failures += 1

    logger.info("Read %d images, %d failed", len(image_paths), failures)
    return 1 if failures else 0

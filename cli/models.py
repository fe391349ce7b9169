"""Model catalog CLI commands."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import config
from runtime import load_catalog

logger = logging.getLogger(__name__)


def add_models_subparser(subparsers: argparse._SubParsersAction) -> None:
    models_parser = subparsers.add_parser(
        "models",
        help="Inspect available detection models",
    )
    models_subparsers = models_parser.add_subparsers(
        dest="models_command",
        help="Models command",
    )

    models_list = models_subparsers.add_parser(
        "list",
        help="List models in the models directory",
    )
    models_list.add_argument(
        "--models-dir",
        type=Path,
        default=config.MODELS_DIR,
        help="Directory holding models and models.json",
    )
    models_list.set_defaults(_cmd=cmd_models_list)

    models_parser.set_defaults(_models_parser=models_parser)


def cmd_models_list(args: argparse.Namespace) -> int:
    try:
        catalog = load_catalog(args.models_dir)
    except ValueError as exc:
        logger.error("%s", exc)
        return 1

    if not catalog:
        logger.info("No models found in %s", args.models_dir)
        return 0

    logger.info("%-30s %-30s %-8s %s", "File", "Name", "Version", "Description")
    logger.info("%s", "-" * 90)
    for info in catalog:
        logger.info(
            "%-30s %-30s %-8s %s",
            info.file_name[:30],
            info.display_name[:30],
            info.version,
            info.description,
        )
    return 0

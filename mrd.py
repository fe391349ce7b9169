#!/usr/bin/env python3
"""
Unified CLI for the Meter Reading Detector.

Usage:
    mrd read <path>                    # Read a meter image (or a directory of images)
    mrd read <path> --roi 100,50,400,120 --annotate out/
    mrd read <path> --model-path model.onnx --json
    mrd models list                    # List models and their metadata
"""

import argparse
import logging
import sys

from logging_utils import configure_logging, add_logging_args
from cli.read import add_read_subparser
from cli.models import add_models_subparser

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mrd",
        description="Meter Reading Detector - read utility meter digits from photos",
    )
    add_logging_args(parser)
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    add_read_subparser(subparsers)
    add_models_subparser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, args.verbose, args.quiet)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "models" and args.models_command is None:
        args._models_parser.print_help()
        return 1

    cmd = getattr(args, "_cmd", None)
    if cmd is None:
        parser.print_help()
        return 1
    return cmd(args)


if __name__ == "__main__":
    sys.exit(main())

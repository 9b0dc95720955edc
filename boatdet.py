#!/usr/bin/env python3
"""
Unified CLI for the boat detector.

Usage:
    boatdet build-dataset <image_dir> <annotation_dir>  # Build BOATS / NONBOATS patches
    boatdet train <positive_dir> <negative_dir>          # Train vocabulary + SVM
    boatdet detect <test_dir> <annotation_dir> <nms>     # Detect and evaluate
"""

import argparse
import logging
import sys

from logging_utils import configure_logging, add_logging_args
from cli.dataset import add_dataset_subparser
from cli.train import add_train_subparser
from cli.detect import add_detect_subparser

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="boatdet",
        description="Boat detector - bag-of-words + SVM over region proposals",
    )
    add_logging_args(parser)
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    add_dataset_subparser(subparsers)
    add_train_subparser(subparsers)
    add_detect_subparser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, args.verbose, args.quiet, args.log_file)

    cmd = getattr(args, "_cmd", None)
    if args.command is None or cmd is None:
        parser.print_help()
        return 1
    return cmd(args)


if __name__ == "__main__":
    sys.exit(main())

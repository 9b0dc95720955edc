"""Detection CLI parsing and control flow."""

from __future__ import annotations

import argparse
import logging

import config
from errors import FileAccessError
from pipeline import DetectionConfig, DetectionPipeline, run_detection

logger = logging.getLogger(__name__)


def add_detect_subparser(subparsers: argparse._SubParsersAction) -> None:
    detect_parser = subparsers.add_parser(
        "detect",
        help="Detect boats in test images and evaluate against annotations",
    )
    detect_parser.add_argument("test_dir", help="Directory with test images")
    detect_parser.add_argument("annotation_dir", help="Directory with the test annotations")
    detect_parser.add_argument(
        "nms_threshold",
        type=float,
        help="IoU threshold for non-maximum suppression, e.g. 0.3",
    )
    detect_parser.add_argument(
        "--vocabulary",
        default=config.VOCABULARY_PATH,
        help=f"Trained vocabulary (default: {config.VOCABULARY_PATH})",
    )
    detect_parser.add_argument(
        "--model",
        default=config.MODEL_PATH,
        help=f"Trained SVM (default: {config.MODEL_PATH})",
    )
    detect_parser.add_argument(
        "--output-dir",
        help="Write annotated result images to this directory",
    )
    detect_parser.add_argument(
        "--show",
        action="store_true",
        help="Show each annotated result and wait for a key press",
    )
    detect_parser.set_defaults(_cmd=cmd_detect)


def cmd_detect(args: argparse.Namespace) -> int:
    from classifier import load_detector_backends
    from detection import SelectiveSearchProposer

    try:
        extractor, classifier = load_detector_backends(args.vocabulary, args.model)
        pipeline = DetectionPipeline(
            proposer=SelectiveSearchProposer(),
            extractor=extractor,
            classifier=classifier,
            config=DetectionConfig(nms_threshold=args.nms_threshold),
        )
        stats = run_detection(
            args.test_dir,
            args.annotation_dir,
            pipeline,
            output_dir=args.output_dir,
            show=args.show,
        )
    except (FileAccessError, ValueError, RuntimeError) as exc:
        logger.error("%s", exc)
        return 1

    logger.info("%s", "=" * 50)
    logger.info("Detection Complete!")
    logger.info("%s", "=" * 50)
    logger.info("Images found:      %s", stats.images_found)
    logger.info("Images processed:  %s", stats.images_processed)
    logger.info("Images skipped:    %s", len(stats.skipped))
    logger.info("Ground truth:      %s", stats.ground_truth)
    logger.info("Matched:           %s", stats.matched)
    logger.info("Undetected:        %s", stats.undetected)
    logger.info("False positives:   %s", stats.false_positives)
    logger.info("Mean IoU:          %.4f", stats.mean_iou)
    for name, reason in stats.skipped:
        logger.info("  skipped %s: %s", name, reason)
    return 0

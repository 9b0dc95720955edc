"""Dataset preparation CLI parsing and control flow."""

from __future__ import annotations

import argparse
import logging

import config
from errors import FileAccessError
from prepare import DatasetBuilder, NegativeMiningPolicy

logger = logging.getLogger(__name__)


def add_dataset_subparser(subparsers: argparse._SubParsersAction) -> None:
    dataset_parser = subparsers.add_parser(
        "build-dataset",
        help="Build positive and negative training patches from annotated images",
    )
    dataset_parser.add_argument(
        "image_dir",
        help="Directory with the images used to build positive samples",
    )
    dataset_parser.add_argument(
        "annotation_dir",
        help="Directory with the annotation files (<image name>.txt)",
    )
    dataset_parser.add_argument(
        "--positive-dir",
        default=config.POSITIVE_PATCHES_DIR,
        help=f"Output directory for boat patches (default: {config.POSITIVE_PATCHES_DIR})",
    )
    dataset_parser.add_argument(
        "--negative-dir",
        default=config.NEGATIVE_PATCHES_DIR,
        help=f"Output directory for non-boat patches (default: {config.NEGATIVE_PATCHES_DIR})",
    )
    dataset_parser.add_argument(
        "--stride",
        type=int,
        default=config.NEGATIVE_IMAGE_STRIDE,
        help=f"Mine negatives from every N-th image (default: {config.NEGATIVE_IMAGE_STRIDE})",
    )
    dataset_parser.add_argument(
        "--negatives-per-image",
        type=int,
        default=config.NEGATIVES_PER_IMAGE,
        help=f"Maximum negatives per mined image (default: {config.NEGATIVES_PER_IMAGE})",
    )
    dataset_parser.add_argument(
        "--max-proposals",
        type=int,
        default=config.MAX_PROPOSALS,
        help=f"Proposal cap per image (default: {config.MAX_PROPOSALS})",
    )
    dataset_parser.set_defaults(_cmd=cmd_build_dataset)


def cmd_build_dataset(args: argparse.Namespace) -> int:
    from detection import SelectiveSearchProposer

    try:
        policy = NegativeMiningPolicy(
            image_stride=args.stride,
            negatives_per_image=args.negatives_per_image,
            max_proposals=args.max_proposals,
        )
        builder = DatasetBuilder(proposer=SelectiveSearchProposer(), policy=policy)
        stats = builder.run(
            args.image_dir,
            args.annotation_dir,
            args.positive_dir,
            args.negative_dir,
        )
    except (FileAccessError, ValueError, RuntimeError) as exc:
        logger.error("%s", exc)
        return 1

    logger.info("%s", "=" * 50)
    logger.info("Dataset Complete!")
    logger.info("%s", "=" * 50)
    logger.info("Annotations found:   %s", stats.annotations_found)
    logger.info("Images processed:    %s", stats.images_processed)
    logger.info("Positive patches:    %s -> %s", stats.positives_written, args.positive_dir)
    logger.info("Negative images:     %s", stats.negative_images_processed)
    logger.info("Negative patches:    %s -> %s", stats.negatives_written, args.negative_dir)
    logger.info("Skipped:             %s", len(stats.skipped))
    for name, reason in stats.skipped:
        logger.info("  %s: %s", name, reason)
    return 0

"""Training CLI parsing and control flow."""

from __future__ import annotations

import argparse
import logging

import cv2

import config
from errors import FileAccessError
from training import TrainingConfig, train

logger = logging.getLogger(__name__)


def add_train_subparser(subparsers: argparse._SubParsersAction) -> None:
    train_parser = subparsers.add_parser(
        "train",
        help="Train the visual vocabulary and the boat SVM from saved patches",
    )
    train_parser.add_argument("positive_dir", help="Directory with boat patches")
    train_parser.add_argument("negative_dir", help="Directory with non-boat patches")
    train_parser.add_argument(
        "--vocabulary",
        default=config.VOCABULARY_PATH,
        help=f"Where to write the vocabulary (default: {config.VOCABULARY_PATH})",
    )
    train_parser.add_argument(
        "--model",
        default=config.MODEL_PATH,
        help=f"Where to write the SVM (default: {config.MODEL_PATH})",
    )
    train_parser.add_argument(
        "--words",
        type=int,
        default=config.VOCABULARY_SIZE,
        help=f"Number of visual words (default: {config.VOCABULARY_SIZE})",
    )
    train_parser.set_defaults(_cmd=cmd_train)


def cmd_train(args: argparse.Namespace) -> int:
    training_config = TrainingConfig(
        n_words=args.words,
        vocabulary_path=args.vocabulary,
        model_path=args.model,
    )
    try:
        stats = train(args.positive_dir, args.negative_dir, training_config)
    except (FileAccessError, ValueError, cv2.error) as exc:
        logger.error("%s", exc)
        return 1

    logger.info("%s", "=" * 50)
    logger.info("Training done!")
    logger.info("%s", "=" * 50)
    logger.info("Positive patches:        %s", stats.positives_loaded)
    logger.info("Negative patches:        %s", stats.negatives_loaded)
    logger.info("Without SIFT keypoints:  %s", stats.without_descriptors)
    logger.info("Unreadable patches:      %s", len(stats.unreadable))
    logger.info("Visual words:            %s", stats.vocabulary_size)
    logger.info("Training samples:        %s", stats.training_samples)
    return 0

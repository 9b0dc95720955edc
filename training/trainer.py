"""
Classifier training: visual vocabulary + RBF SVM.

1. SIFT descriptors are computed for every positive and negative patch;
   patches without keypoints are left out.
2. All descriptors are clustered into the visual vocabulary.
3. Each patch becomes a normalized bag-of-words histogram over that
   vocabulary, labeled boat (1) or not-boat (0).
4. An RBF C-SVC is trained on the histograms with k-fold grid search.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import cv2
import numpy as np
from tqdm import tqdm

import config
from classifier import SvmPatchClassifier, bow_histogram, build_vocabulary, compute_descriptors, save_vocabulary
from classifier.vocabulary import create_sift
from errors import FileAccessError
from sources import scan_files

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrainingConfig:
    """Training parameters and artifact locations."""

    n_words: int = config.VOCABULARY_SIZE
    kfold: int = config.SVM_KFOLD
    vocabulary_path: str = config.VOCABULARY_PATH
    model_path: str = config.MODEL_PATH

    def validate(self) -> None:
        if self.n_words < 2:
            raise ValueError(f"n_words must be at least 2, got {self.n_words}")
        if self.kfold < 2:
            raise ValueError(f"kfold must be at least 2, got {self.kfold}")


@dataclass
class TrainingStats:
    """Summary of a training run."""

    positives_loaded: int = 0
    negatives_loaded: int = 0
    without_descriptors: int = 0
    unreadable: list[str] = field(default_factory=list)
    vocabulary_size: int = 0
    training_samples: int = 0


def load_patches(directory: str | Path, stats: TrainingStats) -> list[np.ndarray]:
    """Load every saved patch in a directory as grayscale.

    Raises:
        FileAccessError: If the directory holds no patches.
    """
    files = scan_files(directory, config.PATCH_PATTERNS).raise_for_failure()
    patches = []
    for path in files:
        patch = cv2.imread(str(path), cv2.IMREAD_GRAYSCALE)
        if patch is None:
            logger.warning("Could not read patch %s", path)
            stats.unreadable.append(str(path))
            continue
        patches.append(patch)
    return patches


def describe_patches(patches: list[np.ndarray], desc: str, stats: TrainingStats) -> list[np.ndarray]:
    """SIFT descriptors for each patch that has keypoints."""
    sift = create_sift()
    described = []
    for patch in tqdm(patches, desc=desc):
        descriptors = compute_descriptors(patch, sift)
        if descriptors is None:
            stats.without_descriptors += 1
            continue
        described.append(descriptors)
    return described


def build_training_set(
    positive: list[np.ndarray],
    negative: list[np.ndarray],
    vocabulary: np.ndarray,
) -> tuple[np.ndarray, np.ndarray]:
    """Stack bag-of-words histograms and their labels."""
    matcher = cv2.FlannBasedMatcher()
    rows = []
    labels = []
    for descriptor_sets, label in (
        (positive, config.POSITIVE_LABEL),
        (negative, config.NEGATIVE_LABEL),
    ):
        for descriptors in descriptor_sets:
            rows.append(bow_histogram(descriptors, vocabulary, matcher))
            labels.append(label)
    return np.vstack(rows).astype(np.float32), np.array(labels, dtype=np.int32)


def train(
    positive_dir: str | Path,
    negative_dir: str | Path,
    training_config: TrainingConfig | None = None,
) -> TrainingStats:
    """Train the vocabulary and SVM and write both artifacts.

    Raises:
        FileAccessError: If a patch directory is empty or unreadable.
        ValueError: If there is not enough data to train.
    """
    if training_config is None:
        training_config = TrainingConfig()
    training_config.validate()
    stats = TrainingStats()

    logger.info("Loading positive patches from %s...", positive_dir)
    positive_patches = load_patches(positive_dir, stats)
    stats.positives_loaded = len(positive_patches)
    logger.info("Loading negative patches from %s...", negative_dir)
    negative_patches = load_patches(negative_dir, stats)
    stats.negatives_loaded = len(negative_patches)
    logger.info(
        "Loaded %d positive and %d negative patches",
        stats.positives_loaded,
        stats.negatives_loaded,
    )

    positive = describe_patches(positive_patches, "SIFT positives", stats)
    negative = describe_patches(negative_patches, "SIFT negatives", stats)
    if not positive or not negative:
        raise ValueError(
            "Both classes need at least one patch with keypoints "
            f"(positives: {len(positive)}, negatives: {len(negative)})"
        )

    vocabulary = build_vocabulary(positive + negative, training_config.n_words)
    stats.vocabulary_size = len(vocabulary)
    save_vocabulary(vocabulary, training_config.vocabulary_path)
    logger.info("Vocabulary saved to %s", training_config.vocabulary_path)

    samples, labels = build_training_set(positive, negative, vocabulary)
    stats.training_samples = len(samples)

    logger.info("Training the SVM on %d samples...", len(samples))
    classifier = SvmPatchClassifier.train(samples, labels, kfold=training_config.kfold)
    try:
        classifier.save(training_config.model_path)
    except cv2.error as exc:
        raise FileAccessError(f"Cannot write model to {training_config.model_path}: {exc}") from exc
    logger.info("Model saved to %s", training_config.model_path)
    return stats

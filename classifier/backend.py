"""
Feature extractor and classifier interfaces and local implementations.

The detection core only depends on the two Protocols below; the SIFT +
bag-of-words extractor and the OpenCV SVM are the implementations the CLI
wires in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Protocol

import cv2
import numpy as np

import config
from errors import FileAccessError
from .vocabulary import bow_histogram, compute_descriptors, create_sift, load_vocabulary

logger = logging.getLogger(__name__)


class FeatureExtractor(Protocol):
    """Interface for patch descriptor extraction."""

    def compute(self, patch: np.ndarray) -> np.ndarray | None:
        """Return a descriptor for a normalized patch, or None if it has none."""


class PatchClassifier(Protocol):
    """Interface for boat / not-boat classification."""

    def predict(self, descriptor: np.ndarray) -> bool:
        """Return True if the descriptor is classified as a boat."""


@dataclass
class BowFeatureExtractor:
    """Bag-of-visual-words descriptor built on SIFT keypoints."""

    vocabulary: np.ndarray
    _sift: object = field(default=None, init=False, repr=False)
    _matcher: object = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.vocabulary = self.vocabulary.astype(np.float32, copy=False)
        self._sift = create_sift()
        self._matcher = cv2.FlannBasedMatcher()

    @property
    def n_words(self) -> int:
        return len(self.vocabulary)

    def compute(self, patch: np.ndarray) -> np.ndarray | None:
        descriptors = compute_descriptors(patch, self._sift)
        if descriptors is None:
            return None
        return bow_histogram(descriptors, self.vocabulary, self._matcher)


@dataclass
class SvmPatchClassifier:
    """Wrapper around a trained ``cv2.ml.SVM``."""

    model: object

    @classmethod
    def load(cls, path: str | Path) -> SvmPatchClassifier:
        """Load a model written by `save()`.

        Raises:
            FileAccessError: If the file is missing or cannot be parsed.
        """
        if not Path(path).is_file():
            raise FileAccessError(f"Model file not found: {path}")
        try:
            model = cv2.ml.SVM_load(str(path))
        except cv2.error as exc:
            raise FileAccessError(f"Could not load SVM from {path}: {exc}") from exc
        if model is None or not model.isTrained():
            raise FileAccessError(f"{path} does not contain a trained SVM")
        return cls(model=model)

    @classmethod
    def train(
        cls,
        samples: np.ndarray,
        labels: np.ndarray,
        kfold: int = config.SVM_KFOLD,
    ) -> SvmPatchClassifier:
        """Train an RBF C-SVC, choosing C and gamma by k-fold grid search.

        Args:
            samples: float32 array, one descriptor per row.
            labels: int labels (``config.POSITIVE_LABEL`` / ``NEGATIVE_LABEL``).
            kfold: Number of cross-validation folds.
        """
        svm = cv2.ml.SVM_create()
        svm.setType(cv2.ml.SVM_C_SVC)
        svm.setKernel(cv2.ml.SVM_RBF)
        svm.setTermCriteria(
            (cv2.TERM_CRITERIA_MAX_ITER + cv2.TERM_CRITERIA_EPS, config.SVM_MAX_ITER, config.SVM_EPSILON)
        )
        svm.trainAuto(
            samples.astype(np.float32, copy=False),
            cv2.ml.ROW_SAMPLE,
            labels.astype(np.int32, copy=False).reshape(-1, 1),
            kFold=kfold,
        )
        return cls(model=svm)

    def save(self, path: str | Path) -> None:
        self.model.save(str(path))

    def predict(self, descriptor: np.ndarray) -> bool:
        sample = descriptor.astype(np.float32, copy=False).reshape(1, -1)
        _, result = self.model.predict(sample)
        return int(result[0][0]) == config.POSITIVE_LABEL


def load_detector_backends(
    vocabulary_path: str | Path = config.VOCABULARY_PATH,
    model_path: str | Path = config.MODEL_PATH,
) -> tuple[BowFeatureExtractor, SvmPatchClassifier]:
    """Load the trained vocabulary and SVM used at detection time."""
    vocabulary = load_vocabulary(vocabulary_path)
    classifier = SvmPatchClassifier.load(model_path)
    logger.info("Loaded vocabulary of %d words and SVM from %s", len(vocabulary), model_path)
    return BowFeatureExtractor(vocabulary=vocabulary), classifier

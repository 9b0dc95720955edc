"""
Visual vocabulary: SIFT descriptors, k-means codewords and bag-of-words histograms.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

import cv2
import numpy as np

from config import (
    KMEANS_ATTEMPTS,
    KMEANS_EPSILON,
    KMEANS_MAX_ITER,
    VOCABULARY_KEY,
    VOCABULARY_SIZE,
)
from errors import FileAccessError

logger = logging.getLogger(__name__)


def create_sift():
    return cv2.SIFT_create()


def compute_descriptors(patch: np.ndarray, sift=None) -> np.ndarray | None:
    """Detect SIFT keypoints in a patch and return their descriptors.

    Returns:
        float32 array of shape (n_keypoints, 128), or None if the patch has
        no keypoints.
    """
    if sift is None:
        sift = create_sift()
    _, descriptors = sift.detectAndCompute(patch, None)
    if descriptors is None or len(descriptors) == 0:
        return None
    return descriptors.astype(np.float32, copy=False)


def build_vocabulary(
    descriptor_sets: Iterable[np.ndarray],
    n_words: int = VOCABULARY_SIZE,
) -> np.ndarray:
    """Cluster SIFT descriptors into ``n_words`` visual words.

    Args:
        descriptor_sets: Per-patch descriptor arrays.
        n_words: Number of k-means clusters.

    Returns:
        Vocabulary as float32 array of shape (n_words, 128).

    Raises:
        ValueError: If there are fewer descriptors than words.
    """
    trainer = cv2.BOWKMeansTrainer(
        n_words,
        (cv2.TERM_CRITERIA_COUNT + cv2.TERM_CRITERIA_EPS, KMEANS_MAX_ITER, KMEANS_EPSILON),
        KMEANS_ATTEMPTS,
        cv2.KMEANS_PP_CENTERS,
    )
    total = 0
    for descriptors in descriptor_sets:
        trainer.add(descriptors.astype(np.float32, copy=False))
        total += len(descriptors)

    if total < n_words:
        raise ValueError(
            f"Need at least {n_words} descriptors to build the vocabulary, got {total}"
        )

    logger.info("Clustering %d descriptors into %d visual words...", total, n_words)
    return trainer.cluster()


def bow_histogram(descriptors: np.ndarray, vocabulary: np.ndarray, matcher=None) -> np.ndarray:
    """Describe a patch as a normalized histogram of its nearest visual words.

    Bin ``i`` holds the fraction of the patch's descriptors whose nearest
    codeword is word ``i``.

    Returns:
        float32 array of shape (1, n_words).
    """
    if matcher is None:
        matcher = cv2.FlannBasedMatcher()
    matches = matcher.match(descriptors.astype(np.float32, copy=False), vocabulary)
    words = np.array([m.trainIdx for m in matches], dtype=np.int64)
    histogram = np.bincount(words, minlength=len(vocabulary)).astype(np.float32)
    histogram /= max(len(descriptors), 1)
    return histogram.reshape(1, -1)


def save_vocabulary(vocabulary: np.ndarray, path: str | Path) -> None:
    fs = cv2.FileStorage(str(path), cv2.FILE_STORAGE_WRITE)
    if not fs.isOpened():
        raise FileAccessError(f"Cannot write vocabulary to {path}")
    fs.write(VOCABULARY_KEY, vocabulary)
    fs.release()


def load_vocabulary(path: str | Path) -> np.ndarray:
    """Load a vocabulary written by `save_vocabulary()`.

    Raises:
        FileAccessError: If the file is missing or holds no vocabulary.
    """
    if not Path(path).is_file():
        raise FileAccessError(f"Vocabulary file not found: {path}")
    fs = cv2.FileStorage(str(path), cv2.FILE_STORAGE_READ)
    try:
        node = fs.getNode(VOCABULARY_KEY)
        vocabulary = None if node.empty() else node.mat()
    finally:
        fs.release()
    if vocabulary is None or vocabulary.size == 0:
        raise FileAccessError(f"No '{VOCABULARY_KEY}' entry in {path}")
    return vocabulary.astype(np.float32, copy=False)

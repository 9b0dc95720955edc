"""
Patch description and classification.

This package provides swappable interfaces for the feature extractor and the
classifier, plus the local SIFT bag-of-words extractor and OpenCV SVM.
"""

from .backend import (
    FeatureExtractor,
    PatchClassifier,
    BowFeatureExtractor,
    SvmPatchClassifier,
    load_detector_backends,
)
from .vocabulary import (
    compute_descriptors,
    build_vocabulary,
    bow_histogram,
    save_vocabulary,
    load_vocabulary,
)

__all__ = [
    "FeatureExtractor",
    "PatchClassifier",
    "BowFeatureExtractor",
    "SvmPatchClassifier",
    "load_detector_backends",
    "compute_descriptors",
    "build_vocabulary",
    "bow_histogram",
    "save_vocabulary",
    "load_vocabulary",
]

"""Training of the bag-of-words vocabulary and the patch SVM."""

from .trainer import TrainingConfig, TrainingStats, build_training_set, describe_patches, load_patches, train

__all__ = [
    "TrainingConfig",
    "TrainingStats",
    "build_training_set",
    "describe_patches",
    "load_patches",
    "train",
]

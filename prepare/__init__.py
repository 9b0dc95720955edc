"""
Training dataset preparation.

Builds positive patches from ground truth boxes and negative patches from
region proposals that miss every boat.
"""

from .builder import AnnotatedImage, BuildStats, DatasetBuilder
from .mining import NegativeMiningPolicy, is_negative, mine_negatives

__all__ = [
    "AnnotatedImage",
    "BuildStats",
    "DatasetBuilder",
    "NegativeMiningPolicy",
    "is_negative",
    "mine_negatives",
]

"""
Type definitions for the detection module.

This module defines the core data structures used throughout the detection pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from geometry import Rectangle

# Ground truth for one image: immutable, in annotation file order
GroundTruth = tuple[Rectangle, ...]


@dataclass
class Patch:
    """A crop of a source image named by a rectangle.

    Attributes:
        image: Pixel data (BGR crop, or grayscale once normalized).
        rect: The rectangle the crop was taken from.
        index: Position of ``rect`` in the list it came from, so that a
            classified patch can be traced back to its proposal.
    """

    image: np.ndarray = field(repr=False)
    rect: Rectangle
    index: int

    def with_image(self, image: np.ndarray) -> Patch:
        """Return a copy of this patch carrying different pixel data."""
        return Patch(image=image, rect=self.rect, index=self.index)


@dataclass(frozen=True)
class BestMatch:
    """The prediction that overlaps a ground truth box the most.

    Attributes:
        iou: IoU between the prediction and the ground truth box.
        index: Position of the prediction in the scanned sequence.
    """

    iou: float
    index: int


@dataclass(frozen=True)
class MatchedBox:
    """A ground truth box paired with the prediction that detected it."""

    ground_truth_index: int
    ground_truth: Rectangle
    prediction: Rectangle
    iou: float


@dataclass
class ImageEvaluation:
    """Per-image comparison of predictions against ground truth.

    Attributes:
        matched: Ground truth boxes that found a prediction, in gt order.
        undetected: Indices of ground truth boxes with no overlapping prediction.
        unmatched: Predictions never consumed by a match (false positives).
    """

    matched: list[MatchedBox] = field(default_factory=list)
    undetected: list[int] = field(default_factory=list)
    unmatched: list[Rectangle] = field(default_factory=list)

    @property
    def ground_truth_count(self) -> int:
        return len(self.matched) + len(self.undetected)

    @property
    def mean_iou(self) -> float:
        if not self.matched:
            return 0.0
        return sum(m.iou for m in self.matched) / len(self.matched)

"""
Matching of predictions against ground truth.

Each ground truth box claims the remaining prediction it overlaps most.
A claimed prediction leaves the pool, so it cannot detect a second boat.
"""

from __future__ import annotations

import logging
from typing import Sequence

from geometry import Rectangle, iou

from .types import BestMatch, ImageEvaluation, MatchedBox

logger = logging.getLogger(__name__)


def best_match(predictions: Sequence[Rectangle], ground_truth: Rectangle) -> tuple[float, int]:
    """Return ``(max_iou, index)`` of the prediction overlapping ``ground_truth`` most.

    Ties keep the earliest prediction. With no predictions, or none
    overlapping, the result is ``(0.0, 0)``; callers must check that
    ``predictions`` is non-empty before using the index. Prefer
    `find_best_match()`, which returns None in that case.
    """
    max_iou = 0.0
    max_index = 0
    for i, prediction in enumerate(predictions):
        value = iou(ground_truth, prediction)
        if value > max_iou:
            max_iou = value
            max_index = i
    return max_iou, max_index


def find_best_match(
    predictions: Sequence[Rectangle],
    ground_truth: Rectangle,
) -> BestMatch | None:
    """Like `best_match()`, but None when no prediction overlaps at all."""
    if not predictions:
        return None
    max_iou, index = best_match(predictions, ground_truth)
    if max_iou <= 0.0:
        return None
    return BestMatch(iou=max_iou, index=index)


def evaluate_image(
    predictions: Sequence[Rectangle],
    ground_truth: Sequence[Rectangle],
) -> ImageEvaluation:
    """Pair each ground truth box with its best remaining prediction.

    Ground truth boxes are visited in order. A box with any overlapping
    prediction is matched and that prediction is removed from the pool;
    otherwise the box is undetected. Predictions left in the pool are
    reported as unmatched.

    The caller's ``predictions`` sequence is not modified.
    """
    pool = list(predictions)
    evaluation = ImageEvaluation()

    for gt_index, gt_box in enumerate(ground_truth):
        match = find_best_match(pool, gt_box)
        if match is None:
            evaluation.undetected.append(gt_index)
            continue
        prediction = pool.pop(match.index)
        evaluation.matched.append(
            MatchedBox(
                ground_truth_index=gt_index,
                ground_truth=gt_box,
                prediction=prediction,
                iou=match.iou,
            )
        )
        logger.debug("Ground truth %d matched with IoU %.3f", gt_index, match.iou)

    evaluation.unmatched = pool
    return evaluation

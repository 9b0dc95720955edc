"""
Non-maximum suppression without confidence scores.

The classifier only answers boat / not-boat, so there is no score to rank
boxes by. The y-coordinate of each box's bottom edge stands in for it: the
box reaching lowest in the image is picked first.
"""

from __future__ import annotations

import logging
from typing import Sequence

from geometry import Rectangle, iou

logger = logging.getLogger(__name__)


def suppress(candidates: Sequence[Rectangle], threshold: float) -> list[Rectangle]:
    """Greedy non-maximum suppression ranked by bottom y.

    Algorithm:
    1. Order candidate indices ascending by bottom y. The sort is stable,
       so equal bottoms keep insertion order.
    2. Pop the last index (greatest bottom y; the latest inserted on ties)
       and keep its box.
    3. Drop every remaining candidate whose IoU with the kept box is
       strictly greater than ``threshold``.
    4. Repeat until no candidates remain.

    Args:
        candidates: Boxes classified positive for one image.
        threshold: IoU above which a box is suppressed. Boxes at exactly
            ``threshold`` are kept.

    Returns:
        Kept boxes in pick order (largest bottom y first). Each is one of
        the input objects, never a copy.
    """
    if not candidates:
        return []

    order = sorted(range(len(candidates)), key=lambda i: candidates[i].bottom)
    kept: list[Rectangle] = []

    while order:
        keep = candidates[order.pop()]
        kept.append(keep)
        # Decide all removals against `keep` before rebuilding the list
        suppressed = {i for i in order if iou(keep, candidates[i]) > threshold}
        if suppressed:
            order = [i for i in order if i not in suppressed]

    logger.debug("NMS kept %d of %d boxes (threshold=%.2f)", len(kept), len(candidates), threshold)
    return kept

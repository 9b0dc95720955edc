"""
Region proposals for candidate boat areas.

Proposals come from an external method (selective search by default) and
are trimmed by `filter_regions()` to a bounded list of regions large enough
to be worth classifying.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Protocol

import cv2
import numpy as np

from config import MAX_PROPOSALS, MIN_PROPOSAL_AREA, SELECTIVE_SEARCH_MODE
from errors import EmptyProposalSet
from geometry import Rectangle

logger = logging.getLogger(__name__)


class RegionProposer(Protocol):
    """Interface for region proposal methods."""

    def propose(self, image: np.ndarray) -> list[Rectangle]:
        """Return candidate regions for a BGR image, unordered and unscored."""


def filter_regions(
    regions: Iterable[Rectangle],
    max_count: int,
    min_area: int = MIN_PROPOSAL_AREA,
) -> list[Rectangle]:
    """Keep up to ``max_count`` regions whose area exceeds ``min_area``.

    Regions are scanned in input order. Regions that are too small are
    skipped and do not count towards the quota.

    Args:
        regions: Candidate regions in proposal order.
        max_count: Maximum number of regions to return.
        min_area: Regions need an area strictly greater than this.

    Returns:
        Qualifying regions, in input order.
    """
    kept: list[Rectangle] = []
    if max_count <= 0:
        return kept
    for region in regions:
        if region.area > min_area:
            kept.append(region)
            if len(kept) >= max_count:
                break
    return kept


def propose_regions(
    image: np.ndarray,
    proposer: RegionProposer,
    max_count: int = MAX_PROPOSALS,
    min_area: int = MIN_PROPOSAL_AREA,
) -> list[Rectangle]:
    """Run a proposer on an image and filter its output.

    Raises:
        EmptyProposalSet: If no proposal survives filtering.
    """
    raw = proposer.propose(image)
    proposals = filter_regions(raw, max_count=max_count, min_area=min_area)
    logger.debug("Proposals: %d raw, %d kept", len(raw), len(proposals))
    if not proposals:
        raise EmptyProposalSet(f"No proposals with area > {min_area} among {len(raw)} regions")
    return proposals


@dataclass
class SelectiveSearchProposer:
    """Region proposer using OpenCV's selective search segmentation.

    Requires the contrib build of OpenCV (``cv2.ximgproc``).

    Attributes:
        mode: "fast" or "quality" selective search strategy.
    """

    mode: str = SELECTIVE_SEARCH_MODE

    def __post_init__(self) -> None:
        if self.mode not in ("fast", "quality"):
            raise ValueError(f"mode must be 'fast' or 'quality', got {self.mode!r}")
        if not hasattr(cv2, "ximgproc"):
            raise RuntimeError(
                "cv2.ximgproc is unavailable; install opencv-contrib-python"
            )

    def propose(self, image: np.ndarray) -> list[Rectangle]:
        segmentation = cv2.ximgproc.segmentation.createSelectiveSearchSegmentation()
        segmentation.setBaseImage(image)
        if self.mode == "fast":
            segmentation.switchToSelectiveSearchFast()
        else:
            segmentation.switchToSelectiveSearchQuality()
        rects = segmentation.process()
        return [
            Rectangle(x=int(x), y=int(y), width=int(w), height=int(h))
            for (x, y, w, h) in rects
        ]

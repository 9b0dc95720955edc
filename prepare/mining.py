"""
Negative patch mining policy.

Negatives are proposals that do not touch any ground truth box at all.
They are mined from a fixed subset of the annotated images and capped per
image to keep the dataset balanced.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from config import MAX_PROPOSALS, MIN_PROPOSAL_AREA, NEGATIVE_IMAGE_STRIDE, NEGATIVES_PER_IMAGE
from geometry import Rectangle, iou


@dataclass(frozen=True)
class NegativeMiningPolicy:
    """Parameters of negative mining.

    Attributes:
        image_stride: Mine negatives from every ``image_stride``-th image.
        negatives_per_image: Stop after this many negatives per image.
        max_proposals: Proposal cap passed to the region filter.
        min_proposal_area: Proposals need an area strictly above this.
    """

    image_stride: int = NEGATIVE_IMAGE_STRIDE
    negatives_per_image: int = NEGATIVES_PER_IMAGE
    max_proposals: int = MAX_PROPOSALS
    min_proposal_area: int = MIN_PROPOSAL_AREA

    def validate(self) -> None:
        """Raises ValueError if any parameter is out of range."""
        if self.image_stride < 1:
            raise ValueError(f"image_stride must be at least 1, got {self.image_stride}")
        if self.negatives_per_image < 0:
            raise ValueError(
                f"negatives_per_image must be non-negative, got {self.negatives_per_image}"
            )
        if self.max_proposals < 1:
            raise ValueError(f"max_proposals must be positive, got {self.max_proposals}")
        if self.min_proposal_area < 0:
            raise ValueError(
                f"min_proposal_area must be non-negative, got {self.min_proposal_area}"
            )

    def selects_image(self, position: int) -> bool:
        """Whether the image at ``position`` in annotation order is mined."""
        return position % self.image_stride == 0


def is_negative(proposal: Rectangle, ground_truth: Sequence[Rectangle]) -> bool:
    """True if the proposal has zero IoU with every ground truth box."""
    return all(iou(proposal, gt_box) == 0 for gt_box in ground_truth)


def mine_negatives(
    proposals: Sequence[Rectangle],
    ground_truth: Sequence[Rectangle],
    max_negatives: int = NEGATIVES_PER_IMAGE,
) -> list[Rectangle]:
    """Pick the first ``max_negatives`` proposals that miss all ground truth.

    Args:
        proposals: Filtered proposals, in proposal order.
        ground_truth: Boat boxes of the same image.
        max_negatives: Cap on accepted negatives.

    Returns:
        Accepted proposals in proposal order.
    """
    negatives: list[Rectangle] = []
    for proposal in proposals:
        if len(negatives) >= max_negatives:
            break
        if is_negative(proposal, ground_truth):
            negatives.append(proposal)
    return negatives

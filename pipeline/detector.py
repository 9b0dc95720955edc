"""
Per-image boat detection.

Pipeline: propose -> filter -> crop + normalize -> describe -> classify ->
suppress -> evaluate. Every step runs synchronously on one image; nothing
is shared between images.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from classifier import FeatureExtractor, PatchClassifier
from config import DEFAULT_NMS_THRESHOLD, MAX_PROPOSALS, MIN_PROPOSAL_AREA
from detection import (
    ImageEvaluation,
    RegionProposer,
    evaluate_image,
    extract_patches,
    normalize_patches,
    propose_regions,
    suppress,
)
from errors import EmptyDescriptor, EmptyProposalSet
from geometry import Rectangle
from preprocessing import PatchNormalizeConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectionConfig:
    """Detection parameters.

    Attributes:
        nms_threshold: IoU above which non-maximum suppression drops a box.
        max_proposals: Proposal cap per image.
        min_proposal_area: Proposals need an area strictly above this.
    """

    nms_threshold: float = DEFAULT_NMS_THRESHOLD
    max_proposals: int = MAX_PROPOSALS
    min_proposal_area: int = MIN_PROPOSAL_AREA

    def validate(self) -> None:
        if not 0.0 <= self.nms_threshold <= 1.0:
            raise ValueError(f"nms_threshold must be in [0, 1], got {self.nms_threshold}")
        if self.max_proposals < 1:
            raise ValueError(f"max_proposals must be positive, got {self.max_proposals}")
        if self.min_proposal_area < 0:
            raise ValueError(
                f"min_proposal_area must be non-negative, got {self.min_proposal_area}"
            )


@dataclass
class ImageResult:
    """Everything the pipeline produced for one image.

    Attributes:
        name: Image name.
        proposals: Filtered proposals that were classified.
        predictions: Proposals classified as boats, before suppression.
        detections: Boxes kept by non-maximum suppression.
        evaluation: Detections compared against ground truth.
        without_descriptor: Patches left out because they had no keypoints.
    """

    name: str
    proposals: list[Rectangle] = field(default_factory=list)
    predictions: list[Rectangle] = field(default_factory=list)
    detections: list[Rectangle] = field(default_factory=list)
    evaluation: ImageEvaluation = field(default_factory=ImageEvaluation)
    without_descriptor: int = 0


@dataclass
class DetectionPipeline:
    """Detects boats in one image at a time with pluggable collaborators."""

    proposer: RegionProposer
    extractor: FeatureExtractor
    classifier: PatchClassifier
    config: DetectionConfig = field(default_factory=DetectionConfig)
    normalize_config: PatchNormalizeConfig = field(default_factory=PatchNormalizeConfig)

    def __post_init__(self) -> None:
        self.config.validate()
        self.normalize_config.validate()

    def propose(self, image: np.ndarray) -> list[Rectangle]:
        return propose_regions(
            image,
            self.proposer,
            max_count=self.config.max_proposals,
            min_area=self.config.min_proposal_area,
        )

    def classify(
        self,
        image: np.ndarray,
        proposals: Sequence[Rectangle],
    ) -> tuple[list[Rectangle], int]:
        """Return the proposals classified as boats and the number of patches
        that had no descriptor."""
        patches = normalize_patches(extract_patches(image, proposals), self.normalize_config)
        positives: list[Rectangle] = []
        without_descriptor = 0
        for patch in patches:
            try:
                descriptor = self.extractor.compute(patch.image)
            except EmptyDescriptor:
                descriptor = None
            if descriptor is None:
                without_descriptor += 1
                continue
            if self.classifier.predict(descriptor):
                positives.append(proposals[patch.index])
        return positives, without_descriptor

    def process(
        self,
        image: np.ndarray,
        ground_truth: Sequence[Rectangle] = (),
        name: str = "",
    ) -> ImageResult:
        """Run detection and evaluation on one image."""
        result = ImageResult(name=name)
        try:
            result.proposals = self.propose(image)
        except EmptyProposalSet as exc:
            logger.warning("%s: %s", name or "image", exc)
            result.evaluation = evaluate_image([], ground_truth)
            return result

        logger.info("Classifying %d proposals...", len(result.proposals))
        result.predictions, result.without_descriptor = self.classify(image, result.proposals)
        result.detections = suppress(result.predictions, self.config.nms_threshold)
        result.evaluation = evaluate_image(result.detections, ground_truth)
        logger.debug(
            "%s: %d positive patches, %d after suppression, %d without descriptor",
            name,
            len(result.predictions),
            len(result.detections),
            result.without_descriptor,
        )
        return result

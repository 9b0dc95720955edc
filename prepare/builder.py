"""Dataset preparation: positive and negative patch generation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

import numpy as np
from tqdm import tqdm

from config import ANNOTATION_PATTERNS, IMAGE_PATTERNS, PATCH_EXTENSION
from detection import (
    GroundTruth,
    RegionProposer,
    extract_patches,
    load_ground_truth,
    normalize_patches,
    propose_regions,
    save_patches,
)
from errors import EmptyProposalSet, FileAccessError
from geometry import Rectangle
from preprocessing import PatchNormalizeConfig
from sources import ensure_output_dir, find_image, image_name, load_image, scan_files

from .mining import NegativeMiningPolicy, mine_negatives

logger = logging.getLogger(__name__)


def _warn_if_not_empty(directory: Path) -> None:
    """Patches from an earlier run are not removed and will be trained on."""
    existing = sum(1 for _ in directory.glob(f"*{PATCH_EXTENSION}"))
    if existing:
        logger.warning(
            "%s already contains %d patch(es); stale patches from earlier runs are kept",
            directory,
            existing,
        )


@dataclass
class AnnotatedImage:
    """An annotation file paired with its image."""

    name: str
    annotation_path: Path
    image_path: Path | None
    ground_truth: GroundTruth


@dataclass
class BuildStats:
    """Summary of a dataset build."""

    annotations_found: int = 0
    images_processed: int = 0
    positives_written: int = 0
    negative_images_processed: int = 0
    negatives_written: int = 0
    skipped: list[tuple[str, str]] = field(default_factory=list)

    def skip(self, name: str, reason: str) -> None:
        logger.warning("Skipping %s: %s", name, reason)
        self.skipped.append((name, reason))


@dataclass
class DatasetBuilder:
    """Builds the positive / negative patch dataset from annotated images.

    Positives are the ground truth boxes of every image, cropped verbatim.
    Negatives are proposals with zero overlap with all ground truth, mined
    from every ``policy.image_stride``-th image.
    """

    proposer: RegionProposer
    policy: NegativeMiningPolicy = field(default_factory=NegativeMiningPolicy)
    normalize_config: PatchNormalizeConfig = field(default_factory=PatchNormalizeConfig)

    def __post_init__(self) -> None:
        self.policy.validate()
        self.normalize_config.validate()

    def positive_patches(self, image: np.ndarray, ground_truth: Sequence[Rectangle]):
        """Normalized crops of every ground truth box."""
        return normalize_patches(extract_patches(image, ground_truth), self.normalize_config)

    def negative_rects(self, image: np.ndarray, ground_truth: Sequence[Rectangle]) -> list[Rectangle]:
        """Proposals of ``image`` accepted as negatives."""
        try:
            proposals = propose_regions(
                image,
                self.proposer,
                max_count=self.policy.max_proposals,
                min_area=self.policy.min_proposal_area,
            )
        except EmptyProposalSet as exc:
            logger.info("No negatives: %s", exc)
            return []
        return mine_negatives(proposals, ground_truth, self.policy.negatives_per_image)

    def negative_patches(self, image: np.ndarray, ground_truth: Sequence[Rectangle]):
        rects = self.negative_rects(image, ground_truth)
        return normalize_patches(extract_patches(image, rects), self.normalize_config)

    def collect(self, image_dir: str | Path, annotation_dir: str | Path) -> list[AnnotatedImage]:
        """Pair every annotation file with its image and parse its ground truth.

        Raises:
            FileAccessError: If the annotation directory yields no files.
        """
        annotation_files = scan_files(annotation_dir, ANNOTATION_PATTERNS).raise_for_failure()
        entries = []
        for path in annotation_files:
            name = image_name(path)
            entries.append(
                AnnotatedImage(
                    name=name,
                    annotation_path=path,
                    image_path=find_image(name, image_dir, IMAGE_PATTERNS),
                    ground_truth=load_ground_truth(path),
                )
            )
        return entries

    def run(
        self,
        image_dir: str | Path,
        annotation_dir: str | Path,
        positive_dir: str | Path,
        negative_dir: str | Path,
    ) -> BuildStats:
        """Generate and save positive and negative patches.

        Failures on one image are logged and the image is skipped. Only an
        unreadable annotation directory or uncreatable output directory
        aborts the build.

        Raises:
            FileAccessError: On fatal input/output directory problems.
        """
        if not Path(image_dir).is_dir():
            raise FileAccessError(f"{image_dir} is not a readable directory")
        entries = self.collect(image_dir, annotation_dir)
        positive_out = ensure_output_dir(positive_dir)
        negative_out = ensure_output_dir(negative_dir)
        for out_dir in (positive_out, negative_out):
            _warn_if_not_empty(out_dir)

        stats = BuildStats(annotations_found=len(entries))
        logger.info("Generating positive examples from %d annotated images...", len(entries))
        failed: set[str] = set()

        for entry in tqdm(entries, desc="Positives"):
            if entry.image_path is None:
                stats.skip(entry.name, f"no image found in {image_dir}")
                continue
            try:
                image = load_image(entry.image_path)
                patches = self.positive_patches(image, entry.ground_truth)
                written = save_patches(patches, entry.name, positive_out)
            except Exception as exc:
                logger.exception("Error generating positives for %s", entry.name)
                stats.skip(entry.name, str(exc))
                failed.add(entry.name)
                continue
            stats.images_processed += 1
            stats.positives_written += len(written)

        logger.info(
            "Generating negative examples from every %d image(s)...",
            self.policy.image_stride,
        )
        mined = [e for i, e in enumerate(entries) if self.policy.selects_image(i)]

        for entry in tqdm(mined, desc="Negatives"):
            if entry.image_path is None or entry.name in failed:
                continue
            try:
                image = load_image(entry.image_path)
                patches = self.negative_patches(image, entry.ground_truth)
                written = save_patches(patches, entry.name, negative_out)
            except Exception as exc:
                logger.exception("Error generating negatives for %s", entry.name)
                stats.skip(entry.name, f"negatives: {exc}")
                continue
            stats.negative_images_processed += 1
            stats.negatives_written += len(written)

        return stats

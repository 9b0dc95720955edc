"""Batch detection over a directory of test images."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from tqdm import tqdm

from config import IMAGE_PATTERNS
from detection import load_ground_truth
from errors import FileAccessError
from sources import ensure_output_dir, find_annotation, image_name, load_image, scan_files
from visualization import render_for_display, save_rendering, show_rendering

from .detector import DetectionPipeline, ImageResult

logger = logging.getLogger(__name__)


@dataclass
class DetectionStats:
    """Aggregate match statistics over a detection run."""

    images_found: int = 0
    images_processed: int = 0
    ground_truth: int = 0
    matched: int = 0
    undetected: int = 0
    false_positives: int = 0
    iou_sum: float = 0.0
    skipped: list[tuple[str, str]] = field(default_factory=list)

    @property
    def mean_iou(self) -> float:
        return self.iou_sum / self.matched if self.matched else 0.0

    def add(self, result: ImageResult) -> None:
        evaluation = result.evaluation
        self.images_processed += 1
        self.ground_truth += evaluation.ground_truth_count
        self.matched += len(evaluation.matched)
        self.undetected += len(evaluation.undetected)
        self.false_positives += len(evaluation.unmatched)
        self.iou_sum += sum(m.iou for m in evaluation.matched)


def run_detection(
    test_dir: str | Path,
    annotation_dir: str | Path,
    pipeline: DetectionPipeline,
    output_dir: str | Path | None = None,
    show: bool = False,
) -> DetectionStats:
    """Detect boats in every test image and score them against ground truth.

    Each image is paired with ``<annotation_dir>/<name>.txt``; images
    without annotation are evaluated against empty ground truth. Errors on
    one image are logged and the image is skipped.

    Raises:
        FileAccessError: If the test or annotation directory is unusable,
            or the output directory cannot be created.
    """
    image_files = scan_files(test_dir, IMAGE_PATTERNS).raise_for_failure()
    if not Path(annotation_dir).is_dir():
        raise FileAccessError(f"{annotation_dir} is not a readable directory")
    out_dir = ensure_output_dir(output_dir) if output_dir is not None else None

    stats = DetectionStats(images_found=len(image_files))
    logger.info("Test images successfully found: %d", len(image_files))

    for path in tqdm(image_files, desc="Detecting"):
        name = image_name(path)
        logger.info("Processing image %s", path)
        try:
            image = load_image(path)
            annotation_path = find_annotation(path, annotation_dir)
            if annotation_path is None:
                logger.warning("No annotation for %s, evaluating against empty ground truth", name)
                ground_truth = ()
            else:
                ground_truth = load_ground_truth(annotation_path)

            result = pipeline.process(image, ground_truth, name=name)

            for match in result.evaluation.matched:
                logger.info("%s: ground truth %d IoU %.6f", name, match.ground_truth_index, match.iou)
            if result.evaluation.undetected:
                logger.info("%s: %d boat(s) undetected", name, len(result.evaluation.undetected))

            if out_dir is not None or show:
                rendering = render_for_display(image, result.evaluation)
                if out_dir is not None:
                    save_rendering(rendering, out_dir / path.name)
                if show:
                    show_rendering(rendering)
        except Exception as exc:
            logger.exception("Error processing image %s", name)
            stats.skipped.append((name, str(exc)))
            continue

        stats.add(result)

    return stats

"""
Patch extraction, normalization and persistence.

Patches are crops of a source image named by rectangles. Saved patches are
named ``<image_name>_<i>.png`` where ``i`` is the patch's position in the
saved sequence.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

import cv2
import numpy as np

from config import PATCH_EXTENSION
from errors import FileAccessError
from geometry import Rectangle
from preprocessing import PatchNormalizeConfig, build_pipeline

from .types import Patch

logger = logging.getLogger(__name__)


def extract_patch(image: np.ndarray, rect: Rectangle, index: int = 0) -> Patch | None:
    """Crop one rectangle out of an image.

    The rectangle is clipped to the image bounds first.

    Returns:
        The patch, or None if nothing of the rectangle lies inside the image.
    """
    img_height, img_width = image.shape[:2]
    clipped = rect.clip(img_width, img_height)
    if clipped.area == 0:
        return None
    if clipped != rect:
        logger.debug("Clipped %s to %s for %dx%d image", rect, clipped, img_width, img_height)
    crop = image[clipped.y:clipped.bottom, clipped.x:clipped.right].copy()
    return Patch(image=crop, rect=rect, index=index)


def extract_patches(image: np.ndarray, rects: Sequence[Rectangle]) -> list[Patch]:
    """Crop every rectangle out of an image.

    Each patch remembers the index of its rectangle in ``rects``. Rectangles
    entirely outside the image produce no patch.
    """
    patches: list[Patch] = []
    for index, rect in enumerate(rects):
        patch = extract_patch(image, rect, index)
        if patch is None:
            logger.debug("Rectangle %d (%s) lies outside the image, skipped", index, rect)
            continue
        patches.append(patch)
    return patches


def normalize_patches(
    patches: Sequence[Patch],
    config: PatchNormalizeConfig | None = None,
) -> list[Patch]:
    """Apply grayscale + CLAHE normalization to every patch."""
    if config is None:
        config = PatchNormalizeConfig()
    config.validate()
    pipeline = build_pipeline(config)
    return [patch.with_image(pipeline.run(patch.image)) for patch in patches]


def patch_filename(image_name: str, index: int) -> str:
    return f"{image_name}_{index}{PATCH_EXTENSION}"


def save_patches(
    patches: Sequence[Patch],
    image_name: str,
    output_dir: str | Path,
) -> list[Path]:
    """Write patches to ``output_dir`` as ``<image_name>_<i>.png``.

    All patches are encoded before anything is written. If a write fails,
    files already written for this call are removed so that no partial set
    is left behind.

    Returns:
        Paths of the written files, in patch order.

    Raises:
        FileAccessError: If encoding or writing fails.
    """
    out_dir = Path(output_dir)
    encoded: list[tuple[Path, bytes]] = []
    for i, patch in enumerate(patches):
        ok, buffer = cv2.imencode(PATCH_EXTENSION, patch.image)
        if not ok:
            raise FileAccessError(f"Could not encode patch {i} of {image_name}")
        encoded.append((out_dir / patch_filename(image_name, i), buffer.tobytes()))

    written: list[Path] = []
    try:
        for path, data in encoded:
            path.write_bytes(data)
            written.append(path)
    except OSError as exc:
        for path in written:
            path.unlink(missing_ok=True)
        raise FileAccessError(f"Failed writing patches for {image_name}: {exc}") from exc

    return written

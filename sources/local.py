"""
Local directory file scanning.

Functions for finding images, annotations and patches in local directories
and for loading images from disk.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

import cv2
import numpy as np

from config import ANNOTATION_EXTENSION
from errors import FileAccessError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanResult:
    """Outcome of scanning one directory for a set of glob patterns.

    Attributes:
        ok: True if at least one file matched.
        files: Sorted matching paths (empty on failure).
        reason: Why the scan failed (None on success).
    """

    ok: bool
    files: list[Path] = field(default_factory=list)
    reason: str | None = None

    def raise_for_failure(self) -> list[Path]:
        """Return the files, or raise FileAccessError if the scan failed."""
        if not self.ok:
            raise FileAccessError(self.reason)
        return self.files


def scan_files(directory: str | Path, patterns: Sequence[str]) -> ScanResult:
    """Find files in a directory matching any of the given glob patterns.

    Each pattern is tried exactly once; the scan fails when the directory
    cannot be read or when no pattern matched anything.

    Args:
        directory: Directory to scan (not recursive).
        patterns: Glob patterns such as ``("*.png", "*.jpg")``.

    Returns:
        ScanResult with sorted, de-duplicated matches.
    """
    dir_path = Path(directory)
    if not dir_path.is_dir():
        return ScanResult(ok=False, reason=f"{directory} is not a readable directory")

    matches: set[Path] = set()
    try:
        for pattern in patterns:
            matches.update(p for p in dir_path.glob(pattern) if p.is_file())
    except OSError as exc:
        return ScanResult(ok=False, reason=f"Failed to read {directory}: {exc}")

    if not matches:
        return ScanResult(
            ok=False,
            reason=f"No files matching {', '.join(patterns)} in {directory}",
        )
    return ScanResult(ok=True, files=sorted(matches))


def image_name(path: str | Path) -> str:
    """Return the bare image name (e.g. "image0001" for "../image0001.png")."""
    return Path(path).stem


def load_image(path: str | Path) -> np.ndarray:
    """Read a color image (BGR) from disk.

    Raises:
        FileAccessError: If the file is missing or cannot be decoded.
    """
    image = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if image is None:
        raise FileAccessError(f"Could not read image {path}")
    return image


def find_annotation(image_path: str | Path, annotation_dir: str | Path) -> Path | None:
    """Return the annotation file paired with an image, if it exists."""
    candidate = Path(annotation_dir) / f"{image_name(image_path)}{ANNOTATION_EXTENSION}"
    if candidate.is_file():
        return candidate
    return None


def find_image(name: str, image_dir: str | Path, patterns: Sequence[str]) -> Path | None:
    """Return the first image in ``image_dir`` named ``name`` with an allowed extension."""
    dir_path = Path(image_dir)
    for pattern in patterns:
        suffix = pattern.lstrip("*")
        candidate = dir_path / f"{name}{suffix}"
        if candidate.is_file():
            return candidate
    return None


def ensure_output_dir(path: str | Path) -> Path:
    """Create an output directory if needed.

    Raises:
        FileAccessError: If the directory cannot be created.
    """
    dir_path = Path(path)
    try:
        dir_path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FileAccessError(f"Cannot create output directory {path}: {exc}") from exc
    logger.debug("Output directory ready: %s", dir_path)
    return dir_path

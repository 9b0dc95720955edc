"""Test doubles for the proposal, feature extraction and classifier collaborators."""

from dataclasses import dataclass, field
from pathlib import Path

import cv2
import numpy as np

from errors import EmptyDescriptor
from geometry import Rectangle


@dataclass
class FixedProposer:
    """Region proposer returning a fixed list of rectangles."""

    regions: list[Rectangle]
    calls: int = 0

    def propose(self, image: np.ndarray) -> list[Rectangle]:
        self.calls += 1
        return list(self.regions)


@dataclass
class MeanExtractor:
    """Descriptor = mean brightness; patches darker than ``empty_below`` have none."""

    empty_below: float = -1.0
    seen: list[tuple[int, ...]] = field(default_factory=list)

    def compute(self, patch: np.ndarray):
        self.seen.append(patch.shape)
        mean = float(patch.mean())
        if mean < self.empty_below:
            return None
        return np.array([[mean]], dtype=np.float32)


@dataclass
class KeypointlessExtractor:
    """Extractor that finds no keypoints in any patch."""

    calls: int = 0

    def compute(self, patch: np.ndarray):
        self.calls += 1
        raise EmptyDescriptor(f"No keypoints in {patch.shape} patch")


@dataclass
class BrightClassifier:
    """Classifies a patch as a boat when its mean brightness exceeds ``threshold``."""

    threshold: float = 127.0

    def predict(self, descriptor: np.ndarray) -> bool:
        return float(descriptor[0][0]) > self.threshold


def make_scene() -> np.ndarray:
    """100x200 black BGR image with a white 40x40 square at (20, 30)."""
    image = np.zeros((100, 200, 3), dtype=np.uint8)
    image[30:70, 20:60] = 255
    return image


def write_image(path: Path, image: np.ndarray) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    assert cv2.imwrite(str(path), image)
    return path

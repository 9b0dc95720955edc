"""
Preprocessing step classes with a common interface.

Each step is a frozen dataclass that implements the PreprocessStep interface.
Steps are pure: they take an input and return a new output without mutating
the original array.

Usage:
    from preprocessing.steps import GrayscaleStep, CLAHEStep, Pipeline

    pipeline = Pipeline(steps=[GrayscaleStep(), CLAHEStep(clip_limit=40.0)])
    normalized = pipeline.run(patch)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

import cv2
import numpy as np

from .normalization import to_grayscale


class PreprocessStep(ABC):
    """Base class for preprocessing steps."""

    @abstractmethod
    def apply(self, img: np.ndarray) -> np.ndarray:
        """Apply this step to an image and return a new array."""


@dataclass(frozen=True)
class GrayscaleStep(PreprocessStep):
    """Convert a BGR image to 8-bit grayscale."""

    def apply(self, img: np.ndarray) -> np.ndarray:
        return to_grayscale(img)


@dataclass(frozen=True)
class CLAHEStep(PreprocessStep):
    """Apply Contrast Limited Adaptive Histogram Equalization.

    Local equalization evens out lighting across a patch so that descriptors
    computed on it depend less on exposure. Requires 8-bit grayscale input.

    Attributes:
        clip_limit: Threshold for contrast limiting.
        tile_size: Size of grid for histogram equalization.
    """

    clip_limit: float = 40.0
    tile_size: tuple[int, int] = (8, 8)

    def apply(self, img: np.ndarray) -> np.ndarray:
        if img.ndim != 2:
            raise ValueError(
                f"CLAHEStep requires grayscale input (2D array), "
                f"got {img.ndim}D array with shape {img.shape}"
            )
        clahe = cv2.createCLAHE(clipLimit=self.clip_limit, tileGridSize=self.tile_size)
        return clahe.apply(img)


@dataclass
class Pipeline:
    """A sequence of preprocessing steps applied in order."""

    steps: list[PreprocessStep]

    def run(self, img: np.ndarray) -> np.ndarray:
        current = img
        for step in self.steps:
            current = step.apply(current)
        return current

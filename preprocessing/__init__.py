"""
Image preprocessing module for patch normalization.

Every patch fed to the feature extractor, whether for training or for
detection, goes through the same normalization: grayscale conversion
followed by CLAHE contrast equalization.

Key components:
- config: PatchNormalizeConfig dataclass parameterizing the steps
- pipeline: normalize_patch() and build_pipeline()
- steps: PreprocessStep interface and concrete steps
- normalization: to_grayscale(), resize_to()
"""

from .config import PatchNormalizeConfig
from .pipeline import normalize_patch, build_pipeline
from .normalization import to_grayscale, resize_to
from .steps import PreprocessStep, GrayscaleStep, CLAHEStep, Pipeline

__all__ = [
    "PatchNormalizeConfig",
    "normalize_patch",
    "build_pipeline",
    "to_grayscale",
    "resize_to",
    "PreprocessStep",
    "GrayscaleStep",
    "CLAHEStep",
    "Pipeline",
]

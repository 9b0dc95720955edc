"""
Patch normalization pipeline.

Pipeline: Grayscale -> CLAHE (if enabled).
"""

import numpy as np

from .config import PatchNormalizeConfig
from .steps import Pipeline, GrayscaleStep, CLAHEStep, PreprocessStep


def build_pipeline(config: PatchNormalizeConfig) -> Pipeline:
    """Build the patch normalization Pipeline from a config."""
    steps: list[PreprocessStep] = [GrayscaleStep()]

    if config.clahe_enabled:
        steps.append(
            CLAHEStep(
                clip_limit=config.clahe_clip_limit,
                tile_size=config.clahe_tile_size,
            )
        )

    return Pipeline(steps=steps)


def normalize_patch(
    patch: np.ndarray,
    config: PatchNormalizeConfig | None = None,
) -> np.ndarray:
    """Convert a patch to grayscale and equalize its contrast.

    Args:
        patch: BGR or grayscale patch.
        config: Normalization settings. If None, uses defaults.

    Returns:
        Normalized grayscale patch (new array).
    """
    if config is None:
        config = PatchNormalizeConfig()
    config.validate()
    return build_pipeline(config).run(patch)

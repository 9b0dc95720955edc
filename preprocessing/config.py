"""
Configuration for patch normalization.

Positive, negative and test patches must all be normalized with the same
settings, so every stage builds its pipeline from a PatchNormalizeConfig.
Patches are always normalized to 8-bit grayscale, the only depth CLAHE and
SIFT accept.
"""

from dataclasses import dataclass

from config import CLAHE_CLIP_LIMIT, CLAHE_TILE_SIZE


@dataclass(frozen=True)
class PatchNormalizeConfig:
    """Settings for the grayscale + CLAHE patch normalization.

    Attributes:
        clahe_enabled: Whether to apply CLAHE after grayscale conversion.
        clahe_clip_limit: Contrast limit for CLAHE.
        clahe_tile_size: Tile grid size for CLAHE.
    """

    clahe_enabled: bool = True
    clahe_clip_limit: float = CLAHE_CLIP_LIMIT
    clahe_tile_size: tuple[int, int] = CLAHE_TILE_SIZE

    def validate(self) -> None:
        """Validate configuration parameters.

        Raises:
            ValueError: If any parameter is invalid.
        """
        if self.clahe_clip_limit <= 0:
            raise ValueError(
                f"clahe_clip_limit must be positive, got {self.clahe_clip_limit}"
            )

        if (
            not isinstance(self.clahe_tile_size, tuple)
            or len(self.clahe_tile_size) != 2
            or any(size <= 0 for size in self.clahe_tile_size)
        ):
            raise ValueError(
                "clahe_tile_size must be a tuple of two positive integers, "
                f"got {self.clahe_tile_size}"
            )

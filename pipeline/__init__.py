"""
Detection pipeline: per-image detection and batch runs with evaluation.
"""

from .detector import DetectionConfig, DetectionPipeline, ImageResult
from .runner import DetectionStats, run_detection

__all__ = [
    "DetectionConfig",
    "DetectionPipeline",
    "ImageResult",
    "DetectionStats",
    "run_detection",
]

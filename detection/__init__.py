"""
Boat detection core.

Pure functions over rectangles, independent of the feature extractor and
classifier that are plugged in around them.

Key components:
- types: Core data structures (Patch, BestMatch, MatchedBox, ImageEvaluation)
- annotations: Ground truth parsing from ``label:xmin;xmax;ymin;ymax`` files
- regions: Region proposals and area/quota filtering
- patches: Cropping, normalization and persistence of patches
- suppression: Score-free non-maximum suppression
- matching: Best-match evaluation of predictions against ground truth
"""

from .types import GroundTruth, Patch, BestMatch, MatchedBox, ImageEvaluation
from .annotations import parse_annotations, parse_annotation_line, parse_corners, load_ground_truth
from .regions import RegionProposer, SelectiveSearchProposer, filter_regions, propose_regions
from .patches import extract_patch, extract_patches, normalize_patches, save_patches, patch_filename
from .suppression import suppress
from .matching import best_match, find_best_match, evaluate_image

__all__ = [
    "GroundTruth",
    "Patch",
    "BestMatch",
    "MatchedBox",
    "ImageEvaluation",
    "parse_annotations",
    "parse_annotation_line",
    "parse_corners",
    "load_ground_truth",
    "RegionProposer",
    "SelectiveSearchProposer",
    "filter_regions",
    "propose_regions",
    "extract_patch",
    "extract_patches",
    "normalize_patches",
    "save_patches",
    "patch_filename",
    "suppress",
    "best_match",
    "find_best_match",
    "evaluate_image",
]

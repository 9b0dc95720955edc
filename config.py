"""Central configuration for boat detection.

All tunable parameters are defined here with descriptive names.
Stage-level dataclasses take their defaults from these values.
"""

# =============================================================================
# ANNOTATIONS
# =============================================================================

# Only records with exactly this label become ground truth
GROUND_TRUTH_LABEL = "boat"

# Separator between the label and the corner list, and between corners
ANNOTATION_LABEL_SEPARATOR = ":"
ANNOTATION_CORNER_SEPARATOR = ";"

# =============================================================================
# FILE DISCOVERY
# =============================================================================

IMAGE_PATTERNS = ("*.png", "*.jpg")
ANNOTATION_PATTERNS = ("*.txt",)
PATCH_PATTERNS = ("*.png",)

# Extension used when pairing an annotation file with its image
ANNOTATION_EXTENSION = ".txt"
PATCH_EXTENSION = ".png"

# =============================================================================
# REGION PROPOSALS
# =============================================================================

# Maximum number of proposals kept per image after area filtering
MAX_PROPOSALS = 2000

# Proposals must have an area strictly greater than this (pixels)
MIN_PROPOSAL_AREA = 1000

# Selective search strategy: "fast" or "quality"
SELECTIVE_SEARCH_MODE = "fast"

# =============================================================================
# PATCH NORMALIZATION
# =============================================================================

CLAHE_CLIP_LIMIT = 40.0
CLAHE_TILE_SIZE = (8, 8)

# =============================================================================
# DATASET PREPARATION
# =============================================================================

# Negatives are mined from every N-th annotated image
NEGATIVE_IMAGE_STRIDE = 2

# Maximum negatives accepted per processed image
NEGATIVES_PER_IMAGE = 4

POSITIVE_PATCHES_DIR = "BOATS"
NEGATIVE_PATCHES_DIR = "NONBOATS"

# =============================================================================
# TRAINING
# =============================================================================

# Number of visual words (k-means clusters)
VOCABULARY_SIZE = 300
KMEANS_MAX_ITER = 100
KMEANS_EPSILON = 0.01
KMEANS_ATTEMPTS = 1

SVM_MAX_ITER = 10000
SVM_EPSILON = 1e-6
SVM_KFOLD = 10

POSITIVE_LABEL = 1
NEGATIVE_LABEL = 0

VOCABULARY_PATH = "vocabulary.yml"
VOCABULARY_KEY = "vocabulary"
MODEL_PATH = "svm.yml"

# =============================================================================
# DETECTION
# =============================================================================

# IoU above which a box suppresses another during non-maximum suppression
DEFAULT_NMS_THRESHOLD = 0.3

# =============================================================================
# VISUALIZATION
# =============================================================================

DISPLAY_SIZE = (1000, 600)  # (width, height)
MATCH_COLOR = (50, 205, 50)  # BGR
UNMATCHED_COLOR = (0, 0, 255)  # BGR
MATCH_THICKNESS = 2
UNMATCHED_THICKNESS = 1
LABEL_FONT_SCALE = 0.7
LABEL_OFFSET_ABOVE = 7
LABEL_OFFSET_BELOW = 21

"""
Ground truth annotation parsing.

Each line of an annotation file looks like ``label:xmin;xmax;ymin;ymax``
(a trailing ``;`` is tolerated). Only lines labeled exactly ``boat`` become
ground truth; ``hiddenboat`` and every other label are ignored.
"""

from __future__ import annotations

import logging
from pathlib import Path

from config import (
    ANNOTATION_CORNER_SEPARATOR,
    ANNOTATION_LABEL_SEPARATOR,
    GROUND_TRUTH_LABEL,
)
from errors import MalformedAnnotationLine
from geometry import Rectangle

from .types import GroundTruth

logger = logging.getLogger(__name__)


def parse_corners(corner_text: str, line_number: int | None = None) -> Rectangle:
    """Parse ``xmin;xmax;ymin;ymax`` into a Rectangle.

    Raises:
        MalformedAnnotationLine: If there are not exactly four integer
            corners, or if the corners describe a negative size.
    """
    tokens = [t.strip() for t in corner_text.split(ANNOTATION_CORNER_SEPARATOR)]
    # A trailing separator leaves an empty last token
    while tokens and tokens[-1] == "":
        tokens.pop()

    if len(tokens) != 4:
        raise MalformedAnnotationLine(
            corner_text, f"expected 4 corners, got {len(tokens)}", line_number
        )

    try:
        x_min, x_max, y_min, y_max = (int(t) for t in tokens)
    except ValueError:
        raise MalformedAnnotationLine(corner_text, "non-numeric corner", line_number) from None

    if x_max < x_min or y_max < y_min:
        raise MalformedAnnotationLine(corner_text, "inverted corners", line_number)

    return Rectangle.from_corners(x_min, x_max, y_min, y_max)


def parse_annotation_line(line: str, line_number: int | None = None) -> Rectangle | None:
    """Parse one annotation line.

    Returns:
        The ground truth rectangle, or None if the line is not a boat.

    Raises:
        MalformedAnnotationLine: If a boat line has an unusable corner list.
    """
    label, _, remainder = line.strip().partition(ANNOTATION_LABEL_SEPARATOR)
    if label != GROUND_TRUTH_LABEL:
        return None
    return parse_corners(remainder, line_number)


def parse_annotations(text: str) -> list[Rectangle]:
    """Parse the text of an annotation file into ground truth rectangles.

    Malformed boat lines are logged and skipped; the rest of the file is
    still parsed. Output preserves file order.
    """
    rects: list[Rectangle] = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        try:
            rect = parse_annotation_line(line, line_number)
        except MalformedAnnotationLine as exc:
            logger.warning("Skipping malformed annotation %s", exc)
            continue
        if rect is not None:
            rects.append(rect)
    return rects


def load_ground_truth(path: str | Path) -> GroundTruth:
    """Read and parse an annotation file.

    An unreadable file is logged and yields empty ground truth.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read annotation file %s: %s", path, exc)
        return ()
    return tuple(parse_annotations(text))

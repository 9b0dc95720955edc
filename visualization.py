"""Drawing of detection results on images."""

from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np

from config import (
    DISPLAY_SIZE,
    LABEL_FONT_SCALE,
    LABEL_OFFSET_ABOVE,
    LABEL_OFFSET_BELOW,
    MATCH_COLOR,
    MATCH_THICKNESS,
    UNMATCHED_COLOR,
    UNMATCHED_THICKNESS,
)
from detection import ImageEvaluation
from errors import FileAccessError
from geometry import Rectangle
from preprocessing import resize_to


def iou_label_origin(rect: Rectangle) -> tuple[int, int]:
    """Where to write a box's IoU: just above it, or inside it near the top
    edge when there is no room above."""
    y = rect.y - LABEL_OFFSET_ABOVE
    if y < 0:
        y = rect.y + LABEL_OFFSET_BELOW
    return rect.x, y


def draw_evaluation(image: np.ndarray, evaluation: ImageEvaluation) -> np.ndarray:
    """Draw matched detections in green with their IoU and the rest in red.

    Args:
        image: BGR image (not modified).
        evaluation: Result of evaluating the image's detections.

    Returns:
        Annotated copy of the image.
    """
    canvas = image.copy()
    if canvas.ndim == 2:
        canvas = cv2.cvtColor(canvas, cv2.COLOR_GRAY2BGR)

    for match in evaluation.matched:
        rect = match.prediction
        x1, y1, x2, y2 = rect.to_rect()
        cv2.rectangle(canvas, (x1, y1), (x2, y2), MATCH_COLOR, MATCH_THICKNESS)
        cv2.putText(
            canvas,
            f"{match.iou:.6f}",
            iou_label_origin(rect),
            cv2.FONT_HERSHEY_SIMPLEX,
            LABEL_FONT_SCALE,
            MATCH_COLOR,
            MATCH_THICKNESS,
        )

    for rect in evaluation.unmatched:
        x1, y1, x2, y2 = rect.to_rect()
        cv2.rectangle(canvas, (x1, y1), (x2, y2), UNMATCHED_COLOR, UNMATCHED_THICKNESS)

    return canvas


def render_for_display(image: np.ndarray, evaluation: ImageEvaluation) -> np.ndarray:
    """Annotated image resized to the display size."""
    return resize_to(draw_evaluation(image, evaluation), DISPLAY_SIZE)


def save_rendering(rendering: np.ndarray, output_path: Path) -> None:
    """Write a rendered image.

    Raises:
        FileAccessError: If the image cannot be written.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(output_path), rendering):
        raise FileAccessError(f"Could not write {output_path}")


def show_rendering(rendering: np.ndarray, window: str = "Test image") -> None:
    """Show a rendered image and wait for a key press."""
    cv2.imshow(window, rendering)
    cv2.waitKey(0)

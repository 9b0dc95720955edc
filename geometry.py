"""Shared geometry utilities for axis-aligned pixel rectangles."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned rectangle in integer pixel coordinates.

    ``(x, y)`` is the top-left corner. The bottom-right corner
    ``(x + width, y + height)`` is exclusive, as in OpenCV.
    """

    x: int
    y: int
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Rectangle size must be non-negative, got {self.width}x{self.height}"
            )

    @classmethod
    def from_corners(cls, x_min: int, x_max: int, y_min: int, y_max: int) -> Rectangle:
        """Build a rectangle from its corner coordinates."""
        return cls(x=x_min, y=y_min, width=x_max - x_min, height=y_max - y_min)

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def to_rect(self) -> tuple[int, int, int, int]:
        """Return (x1, y1, x2, y2) tuple."""
        return (self.x, self.y, self.right, self.bottom)

    def clip(self, img_width: int, img_height: int) -> Rectangle:
        """Clip to image bounds; the result may have zero area."""
        x1 = min(max(0, self.x), img_width)
        y1 = min(max(0, self.y), img_height)
        x2 = min(max(0, self.right), img_width)
        y2 = min(max(0, self.bottom), img_height)
        return Rectangle(x=x1, y=y1, width=max(0, x2 - x1), height=max(0, y2 - y1))


def intersection(rect_a: Rectangle, rect_b: Rectangle) -> Rectangle:
    """Return the overlap of two rectangles (zero-sized when disjoint)."""
    x1 = max(rect_a.x, rect_b.x)
    y1 = max(rect_a.y, rect_b.y)
    x2 = min(rect_a.right, rect_b.right)
    y2 = min(rect_a.bottom, rect_b.bottom)
    if x2 <= x1 or y2 <= y1:
        return Rectangle(x=0, y=0, width=0, height=0)
    return Rectangle(x=x1, y=y1, width=x2 - x1, height=y2 - y1)


def iou(rect_a: Rectangle, rect_b: Rectangle) -> float:
    """Compute intersection-over-union between two rectangles.

    IoU = overlap / (area_a + area_b - overlap). Degenerate inputs whose
    union is empty return 0.0.

    Args:
        rect_a: First rectangle.
        rect_b: Second rectangle.

    Returns:
        IoU value in [0, 1].
    """
    inter_area = intersection(rect_a, rect_b).area
    denom = rect_a.area + rect_b.area - inter_area
    if denom <= 0:
        return 0.0
    return inter_area / denom

"""
Image normalization functions for preprocessing.

All functions are pure: they take an input and return a new output without
mutating the original array. Color images are assumed to be BGR, as read by
``cv2.imread``.
"""

import numpy as np
import cv2


def _validate_image(img) -> None:
    if not isinstance(img, np.ndarray):
        raise TypeError(f"Expected numpy.ndarray, got {type(img).__name__}")

    if img.ndim < 2 or img.ndim > 3:
        raise ValueError(
            f"Image must be 2D or 3D array, got {img.ndim}D array with shape {img.shape}"
        )

    if img.size == 0:
        raise ValueError("Image array is empty")


def to_grayscale(img: np.ndarray) -> np.ndarray:
    """Convert a BGR, BGRA or grayscale image to 8-bit grayscale.

    Args:
        img: Input image (2D, or 3D with 1, 3 or 4 channels).

    Returns:
        Grayscale image as 2D uint8 array. Values outside 0-255 are clipped.

    Raises:
        ValueError: If input is not a valid image array.
        TypeError: If img is not a numpy array.

    Examples:
        >>> bgr = np.zeros((100, 200, 3), dtype=np.uint8)
        >>> to_grayscale(bgr).shape
        (100, 200)
    """
    _validate_image(img)

    if img.ndim == 2:
        result = img.copy()
    else:
        channels = img.shape[2]
        if channels == 1:
            result = img[:, :, 0].copy()
        elif channels == 3:
            result = cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)
        elif channels == 4:
            result = cv2.cvtColor(img, cv2.COLOR_BGRA2GRAY)
        else:
            raise ValueError(
                f"Unsupported number of channels: {channels}. "
                "Expected 1, 3 (BGR), or 4 (BGRA)."
            )

    if result.dtype != np.uint8:
        result = np.clip(result, 0, 255).astype(np.uint8)

    return result


def resize_to(
    img: np.ndarray,
    size: tuple[int, int],
    interpolation: int = cv2.INTER_LINEAR,
) -> np.ndarray:
    """Resize an image to an exact (width, height), ignoring aspect ratio.

    Raises:
        ValueError: If either dimension is not positive.
        TypeError: If img is not a numpy array.
    """
    _validate_image(img)
    width, height = size
    if width <= 0 or height <= 0:
        raise ValueError(f"size must be positive, got {size}")
    if img.shape[1] == width and img.shape[0] == height:
        return img.copy()
    return cv2.resize(img, (width, height), interpolation=interpolation)

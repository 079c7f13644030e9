"""Sobel gradient-magnitude edge detection."""

import numpy as np
import cv2

from .buffer import PixelBuffer
from .errors import DegenerateInput

# Kernels as applied by cv2.Sobel with ksize=3
SOBEL_X = np.array([[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]], dtype=np.float64)
SOBEL_Y = np.array([[-1, -2, -1], [0, 0, 0], [1, 2, 1]], dtype=np.float64)


class EdgeDetector:
    """Produces a per-pixel gradient magnitude map from a pixel buffer."""

    def __init__(self, strict: bool = False):
        """
        Initialize edge detector.

        Args:
            strict: Raise DegenerateInput for buffers without an interior
                pixel instead of returning an all-zero map
        """
        self.strict = strict

    def detect(self, buffer: PixelBuffer) -> np.ndarray:
        """
        Compute the edge map for a buffer.

        Grayscale is the unweighted channel average. Border rows and columns
        have no full 3x3 neighborhood and are left at 0, as is the whole map
        for buffers narrower or shorter than 3 pixels.

        Args:
            buffer: Source pixels

        Returns:
            float64 array of shape (height, width), all values >= 0

        Raises:
            DegenerateInput: In strict mode, when width or height is below 3
        """
        edges = np.zeros((buffer.height, buffer.width), dtype=np.float64)
        if buffer.is_degenerate:
            if self.strict:
                raise DegenerateInput(
                    f"{buffer.width}x{buffer.height} buffer has no 3x3 neighborhood"
                )
            return edges

        gray = np.ascontiguousarray(buffer.brightness())
        gx = cv2.Sobel(gray, cv2.CV_64F, 1, 0, ksize=3)
        gy = cv2.Sobel(gray, cv2.CV_64F, 0, 1, ksize=3)

        edges[1:-1, 1:-1] = np.hypot(gx[1:-1, 1:-1], gy[1:-1, 1:-1])
        return edges

    @staticmethod
    def fraction_above(edges: np.ndarray, threshold: float) -> float:
        """Fraction of all pixels whose edge magnitude exceeds threshold."""
        if edges.size == 0:
            return 0.0
        return float(np.count_nonzero(edges > threshold)) / edges.size


def detect_edges(buffer: PixelBuffer) -> np.ndarray:
    """Shortcut for ``EdgeDetector().detect(buffer)``."""
    return EdgeDetector().detect(buffer)

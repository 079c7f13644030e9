"""Decoded RGBA pixel buffer handed to every analysis stage."""

from dataclasses import dataclass
from typing import Tuple

import numpy as np
from PIL import Image

from .errors import InvalidBuffer

# Smallest dimension with at least one interior pixel for a 3x3 kernel
MIN_CONVOLUTION_SIZE = 3


@dataclass(frozen=True)
class PixelBuffer:
    """Interleaved RGBA samples plus dimensions.

    The samples are held as immutable ``bytes``; ``pixels`` exposes a
    read-only ``(height, width, 4)`` uint8 view without copying.
    """
    width: int
    height: int
    samples: bytes

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise InvalidBuffer(
                f"Buffer dimensions must be positive, got {self.width}x{self.height}"
            )
        expected = self.width * self.height * 4
        if len(self.samples) != expected:
            raise InvalidBuffer(
                f"Expected {expected} samples for {self.width}x{self.height} RGBA, "
                f"got {len(self.samples)}"
            )

    @classmethod
    def from_array(cls, array: np.ndarray) -> 'PixelBuffer':
        """
        Build a buffer from a numpy image array.

        Args:
            array: uint8 array shaped (H, W), (H, W, 3) or (H, W, 4)

        Returns:
            PixelBuffer with opaque alpha added where missing
        """
        array = np.asarray(array)
        if array.ndim == 2:
            array = np.stack([array] * 3, axis=-1)
        if array.ndim != 3 or array.shape[2] not in (3, 4):
            raise InvalidBuffer(f"Unsupported array shape {array.shape}")

        height, width = array.shape[:2]
        if array.shape[2] == 3:
            alpha = np.full((height, width, 1), 255, dtype=np.uint8)
            array = np.concatenate([array.astype(np.uint8), alpha], axis=-1)

        return cls(width=width, height=height,
                   samples=np.ascontiguousarray(array, dtype=np.uint8).tobytes())

    @classmethod
    def from_image(cls, image: Image.Image, max_size: int = 0) -> 'PixelBuffer':
        """
        Build a buffer from a decoded Pillow image.

        Args:
            image: PIL Image in any mode
            max_size: Downscale so the longest side is at most this many
                pixels (0 keeps the original resolution)

        Returns:
            PixelBuffer at analysis resolution
        """
        if image.mode != 'RGBA':
            image = image.convert('RGBA')

        if max_size and max(image.size) > max_size:
            image = image.copy()
            image.thumbnail((max_size, max_size), Image.LANCZOS)

        width, height = image.size
        return cls(width=width, height=height, samples=image.tobytes())

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def is_degenerate(self) -> bool:
        """True when no pixel has a full 3x3 neighborhood."""
        return self.width < MIN_CONVOLUTION_SIZE or self.height < MIN_CONVOLUTION_SIZE

    @property
    def pixels(self) -> np.ndarray:
        """Read-only (H, W, 4) uint8 view of the samples."""
        return np.frombuffer(self.samples, dtype=np.uint8).reshape(
            self.height, self.width, 4
        )

    def rgb(self) -> np.ndarray:
        """(H, W, 3) float64 copy of the color channels."""
        return self.pixels[:, :, :3].astype(np.float64)

    def brightness(self) -> np.ndarray:
        """Unweighted channel average (r+g+b)/3 per pixel, range 0-255."""
        return self.rgb().sum(axis=2) / 3.0

    def luma(self) -> np.ndarray:
        """Perceptual luma 0.299R + 0.587G + 0.114B per pixel, range 0-255."""
        rgb = self.rgb()
        return 0.299 * rgb[:, :, 0] + 0.587 * rgb[:, :, 1] + 0.114 * rgb[:, :, 2]

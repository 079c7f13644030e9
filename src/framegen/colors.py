"""Color statistics: dominant colors, brightness, harmony, and mood."""

from dataclasses import dataclass, asdict
from typing import List

import numpy as np
from scipy.spatial.distance import cdist

from .buffer import PixelBuffer
from . import defaults


@dataclass(frozen=True)
class ColorSample:
    """RGB color."""
    r: int
    g: int
    b: int

    @property
    def hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


@dataclass(frozen=True)
class DominantColor(ColorSample):
    """Quantized color bucket with its sample count."""
    count: int = 0
    share: float = 0.0  # count / sampled pixels

    def to_dict(self) -> dict:
        data = asdict(self)
        data['hex'] = self.hex
        return data


def quantize(channel: np.ndarray, quantum: int = defaults.COLOR_QUANTUM) -> np.ndarray:
    """Round channel values down to the nearest multiple of quantum."""
    return (np.asarray(channel, dtype=np.int64) // quantum) * quantum


class ColorAnalyzer:
    """Computes color-based image statistics directly from the buffer."""

    def __init__(
        self,
        dominant_stride: int = defaults.DOMINANT_COLOR_STRIDE,
        harmony_stride: int = defaults.HARMONY_SAMPLE_STRIDE,
        harmony_max_samples: int = defaults.HARMONY_MAX_SAMPLES,
        harmony_block_rows: int = defaults.HARMONY_BLOCK_ROWS
    ):
        """
        Initialize color analyzer.

        Args:
            dominant_stride: Sample every Nth pixel for dominant colors
            harmony_stride: Sample every Nth pixel for harmony
            harmony_max_samples: Widen the harmony stride beyond this many
                samples (0, the default, keeps the exact stride)
            harmony_block_rows: Distinct colors per distance block, bounding
                memory to roughly this many rows times the color count
        """
        self.dominant_stride = dominant_stride
        self.harmony_stride = harmony_stride
        self.harmony_max_samples = harmony_max_samples
        self.harmony_block_rows = harmony_block_rows

    def dominant_colors(
        self,
        buffer: PixelBuffer,
        count: int = defaults.DOMINANT_COLOR_COUNT
    ) -> List[DominantColor]:
        """
        Histogram quantized colors of every Nth pixel.

        Args:
            buffer: Source pixels
            count: Number of colors to return

        Returns:
            Most frequent buckets first; equal counts keep first-seen order
        """
        flat = buffer.pixels.reshape(-1, 4)[::self.dominant_stride, :3]
        quantized = quantize(flat)

        buckets, first_index, counts = np.unique(
            quantized, axis=0, return_index=True, return_counts=True
        )
        order = np.lexsort((first_index, -counts))[:count]

        total = len(quantized)
        return [
            DominantColor(
                r=int(buckets[i][0]),
                g=int(buckets[i][1]),
                b=int(buckets[i][2]),
                count=int(counts[i]),
                share=float(counts[i] / total),
            )
            for i in order
        ]

    def brightness(self, buffer: PixelBuffer) -> float:
        """Mean perceptual luma over every pixel, normalized to [0, 1]."""
        return float(buffer.luma().mean()) / 255

    def color_harmony(self, buffer: PixelBuffer) -> float:
        """
        Fraction of sampled color pairs that are near-identical or complementary.

        Every pair of samples is compared (O(n^2)). Identical samples are
        collapsed into weighted distinct colors and distances are computed
        one block of rows at a time, so memory stays bounded while the
        result is exact. A non-zero harmony_max_samples widens the stride
        when the sample count would exceed it.

        Returns:
            Harmony score in [0, 1]; 1.0 when fewer than two samples exist
        """
        flat = buffer.pixels.reshape(-1, 4)[:, :3]
        stride = self.harmony_stride
        if self.harmony_max_samples and len(flat) > stride * self.harmony_max_samples:
            stride = int(np.ceil(len(flat) / self.harmony_max_samples))

        samples = flat[::stride]
        n = len(samples)
        if n < 2:
            return 1.0

        colors, counts = np.unique(samples, axis=0, return_counts=True)
        colors = colors.astype(np.float64)
        counts = counts.astype(np.float64)

        # Pairs of identical samples are at distance 0
        harmonious = float((counts * (counts - 1) / 2).sum())

        block = self.harmony_block_rows
        for start in range(0, len(colors), block):
            rows = colors[start:start + block]
            distances = cdist(rows, colors[start:])
            # Column j pairs with row i only when j > i, so each pair counts once
            upper = np.triu(np.ones(distances.shape, dtype=bool), k=1)
            matches = upper & (
                (distances < defaults.HARMONY_SIMILAR_DISTANCE) |
                (distances > defaults.HARMONY_COMPLEMENTARY_DISTANCE)
            )
            harmonious += float(counts[start:start + block] @ (matches @ counts[start:]))

        return min(1.0, harmonious / (n * (n - 1) / 2))

    def mood(self, buffer: PixelBuffer) -> float:
        """Warm/cool balance: 1 - |warm ratio - cool ratio|."""
        pixels = buffer.pixels
        r = pixels[:, :, 0]
        g = pixels[:, :, 1]
        b = pixels[:, :, 2]

        warm = np.count_nonzero((r > g) & (r > b))
        cool = np.count_nonzero((b > r) & (b > g))
        total = buffer.pixel_count
        return 1.0 - abs(warm / total - cool / total)

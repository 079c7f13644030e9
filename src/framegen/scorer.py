"""Composition rule scoring for a whole frame or a candidate crop."""

import math
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, List, Optional

import numpy as np

from .buffer import PixelBuffer
from .colors import ColorAnalyzer
from .edges import EdgeDetector
from .regions import Region
from . import defaults


class CompositionRule(Enum):
    """Classical composition guidelines scored by CompositionScorer."""
    RULE_OF_THIRDS = 'rule_of_thirds'
    GOLDEN_RATIO = 'golden_ratio'
    SYMMETRY = 'symmetry'
    LEADING_LINES = 'leading_lines'
    BALANCE = 'balance'
    DEPTH = 'depth'


@dataclass(frozen=True)
class CompositionScore:
    """Per-rule scores in [0, 1]."""
    rule_of_thirds: float
    golden_ratio: float
    symmetry: float
    leading_lines: float
    balance: float
    depth: float

    @property
    def overall(self) -> float:
        """Unweighted mean of the six rules."""
        return (
            self.rule_of_thirds + self.golden_ratio + self.symmetry +
            self.leading_lines + self.balance + self.depth
        ) / len(CompositionRule)

    def get(self, rule: CompositionRule) -> float:
        return getattr(self, rule.value)

    def to_dict(self) -> Dict[str, float]:
        data = asdict(self)
        data['overall'] = self.overall
        return data


@dataclass(frozen=True)
class LeadingLine:
    """Hough line candidate: angle in degrees, distance in pixels."""
    angle: int
    distance: int
    votes: int


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


class CompositionScorer:
    """Scores composition rules against a buffer and an optional crop."""

    def __init__(self, edge_detector: Optional[EdgeDetector] = None):
        self.edge_detector = edge_detector or EdgeDetector()

    def score(
        self,
        buffer: PixelBuffer,
        crop: Optional[Region] = None,
        edges: Optional[np.ndarray] = None
    ) -> CompositionScore:
        """
        Score all six rules.

        Args:
            buffer: Source pixels
            crop: Candidate crop in normalized coordinates, or None for the
                whole frame (crop-dependent rules then score a neutral 0.5)
            edges: Precomputed edge map, detected from buffer if None

        Returns:
            CompositionScore
        """
        if edges is None:
            edges = self.edge_detector.detect(buffer)

        scores = {
            rule.value: self.evaluate(rule, buffer, crop, edges)
            for rule in CompositionRule
        }
        return CompositionScore(**scores)

    def evaluate(
        self,
        rule: CompositionRule,
        buffer: PixelBuffer,
        crop: Optional[Region] = None,
        edges: Optional[np.ndarray] = None
    ) -> float:
        """Score a single rule."""
        if rule is CompositionRule.RULE_OF_THIRDS:
            return self.rule_of_thirds(buffer, crop)
        if rule is CompositionRule.GOLDEN_RATIO:
            return self.golden_ratio(buffer, crop)
        if rule is CompositionRule.SYMMETRY:
            return self.symmetry(buffer)
        if rule is CompositionRule.LEADING_LINES:
            return self.leading_lines(buffer, edges)
        if rule is CompositionRule.BALANCE:
            return self.balance(buffer)
        if rule is CompositionRule.DEPTH:
            return self.depth(buffer)
        raise ValueError(f"Unknown composition rule: {rule!r}")

    def rule_of_thirds(self, buffer: PixelBuffer, crop: Optional[Region] = None) -> float:
        """Proximity of the crop center to the nearest thirds intersection."""
        if crop is None:
            return 0.5

        width, height = buffer.width, buffer.height
        crop_x, crop_y, crop_w, crop_h = crop.to_pixels(width, height)
        center_x = crop_x + crop_w / 2
        center_y = crop_y + crop_h / 2

        falloff = min(width, height) / 4
        best = 0.0
        for ix in (width / 3, 2 * width / 3):
            for iy in (height / 3, 2 * height / 3):
                distance = math.hypot(center_x - ix, center_y - iy)
                best = max(best, 1 - distance / falloff)
        return _clamp(best)

    def golden_ratio(self, buffer: PixelBuffer, crop: Optional[Region] = None) -> float:
        """Closeness of the crop's pixel aspect ratio to 1.618."""
        if crop is None:
            return 0.5

        aspect = crop.aspect(buffer.width, buffer.height)
        if aspect <= 0:
            return 0.0
        ratio = defaults.GOLDEN_RATIO
        return _clamp(1 - abs(aspect - ratio) / ratio)

    def symmetry(self, buffer: PixelBuffer) -> float:
        """Left/right mirror similarity of per-pixel luma."""
        luma = buffer.luma()
        half = (buffer.width + 1) // 2  # columns x < width / 2
        left = luma[:, :half]
        right = luma[:, ::-1][:, :half]
        return _clamp(np.mean(1 - np.abs(left - right) / 255))

    def detect_leading_lines(
        self,
        buffer: PixelBuffer,
        edges: Optional[np.ndarray] = None
    ) -> List[LeadingLine]:
        """
        Hough-style line vote over strong edge pixels.

        Edge pixels above INTEREST_EDGE_THRESHOLD are sampled on a stride-2
        grid. For every angle step and every distance step up to the image
        diagonal, a pixel votes when it lies within HOUGH_LINE_TOLERANCE of
        the line ``x*cos(a) + y*sin(a) = d``.

        Returns:
            Up to HOUGH_MAX_LINES lines with at least HOUGH_MIN_VOTES votes,
            strongest first (ties in angle-then-distance order)
        """
        if edges is None:
            edges = self.edge_detector.detect(buffer)

        stride = defaults.HOUGH_SAMPLE_STRIDE
        sampled = edges[::stride, ::stride]
        rows, cols = np.nonzero(sampled > defaults.INTEREST_EDGE_THRESHOLD)
        if len(rows) == 0:
            return []
        xs = cols * stride
        ys = rows * stride

        step = defaults.HOUGH_DISTANCE_STEP
        tolerance = defaults.HOUGH_LINE_TOLERANCE
        diagonal = math.hypot(buffer.width, buffer.height)
        n_distances = int(math.ceil(diagonal / step))

        lines = []
        for angle in range(0, 180, defaults.HOUGH_ANGLE_STEP):
            theta = math.radians(angle)
            rho = xs * math.cos(theta) + ys * math.sin(theta)

            # Distance bins are 2*tolerance apart, so each pixel can only be
            # within tolerance of its nearest bin
            nearest = np.rint(rho / step)
            close = np.abs(rho - nearest * step) < tolerance
            bins = nearest[close].astype(np.int64)
            bins = bins[(bins >= 0) & (bins < n_distances)]
            votes = np.bincount(bins, minlength=n_distances)

            for index in np.nonzero(votes >= defaults.HOUGH_MIN_VOTES)[0]:
                lines.append(LeadingLine(
                    angle=angle,
                    distance=int(index) * step,
                    votes=int(votes[index]),
                ))

        lines.sort(key=lambda line: line.votes, reverse=True)
        return lines[:defaults.HOUGH_MAX_LINES]

    def leading_lines(
        self,
        buffer: PixelBuffer,
        edges: Optional[np.ndarray] = None
    ) -> float:
        """Strength of the best leading line, saturating at 100 votes."""
        lines = self.detect_leading_lines(buffer, edges)
        if not lines:
            return 0.0
        return _clamp(lines[0].votes / defaults.HOUGH_FULL_SCORE_VOTES)

    def balance(self, buffer: PixelBuffer) -> float:
        """Evenness of visual weight (summed luma) across quadrants."""
        luma = buffer.luma()
        half_h = buffer.height // 2
        half_w = buffer.width // 2
        weights = [
            luma[:half_h, :half_w].sum(),
            luma[:half_h, half_w:].sum(),
            luma[half_h:, :half_w].sum(),
            luma[half_h:, half_w:].sum(),
        ]

        total = sum(weights)
        if total <= 0:
            return 1.0
        return _clamp(sum(1 - abs(w / total - 0.25) for w in weights) / 4)

    def depth(self, buffer: PixelBuffer) -> float:
        """Fraction of pixels with channel-difference contrast above threshold."""
        pixels = buffer.pixels.astype(np.int16)
        r = pixels[:, :, 0]
        g = pixels[:, :, 1]
        b = pixels[:, :, 2]
        contrast = np.abs(r - g) + np.abs(g - b) + np.abs(b - r)
        return float(np.count_nonzero(contrast > defaults.DEPTH_CONTRAST_THRESHOLD)) / buffer.pixel_count

    def technical_score(
        self,
        buffer: PixelBuffer,
        edges: Optional[np.ndarray] = None
    ) -> float:
        """
        Weighted sharpness, exposure, and noise.

        sharpness: fraction of edge values above SHARPNESS_EDGE_THRESHOLD
        exposure: mean brightness, best at mid-gray
        noise: standard deviation of brightness
        """
        if edges is None:
            edges = self.edge_detector.detect(buffer)

        brightness = buffer.brightness()
        sharpness = EdgeDetector.fraction_above(edges, defaults.SHARPNESS_EDGE_THRESHOLD)
        exposure = float(brightness.mean()) / 255
        noise = float(brightness.std()) / 255

        return _clamp(
            sharpness * 0.4 +
            (1 - abs(exposure - 0.5) * 2) * 0.4 +
            (1 - noise) * 0.2
        )

    def visual_interest(
        self,
        buffer: PixelBuffer,
        edges: Optional[np.ndarray] = None
    ) -> float:
        if edges is None:
            edges = self.edge_detector.detect(buffer)
        interesting = EdgeDetector.fraction_above(edges, defaults.INTEREST_EDGE_THRESHOLD)
        return _clamp(interesting / defaults.VISUAL_INTEREST_TARGET)

    def artistic_score(
        self,
        buffer: PixelBuffer,
        edges: Optional[np.ndarray] = None,
        color_analyzer: Optional[ColorAnalyzer] = None
    ) -> float:
        """Weighted color harmony, mood, and visual interest."""
        colors = color_analyzer or ColorAnalyzer()
        return _clamp(
            colors.color_harmony(buffer) * 0.4 +
            colors.mood(buffer) * 0.3 +
            self.visual_interest(buffer, edges) * 0.3
        )

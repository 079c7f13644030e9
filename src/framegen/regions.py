"""Regions of interest and heuristic subject detection."""

from dataclasses import dataclass, asdict
from typing import List, Optional, Tuple

import numpy as np
import cv2

from .buffer import PixelBuffer
from .edges import EdgeDetector
from . import defaults


@dataclass(frozen=True)
class Region:
    """Rectangle in normalized image coordinates (fractions of width/height)."""
    x: float
    y: float
    width: float
    height: float
    score: float = 0.0

    @property
    def center(self) -> Tuple[float, float]:
        """Get center point of the region (normalized)."""
        return (self.x + self.width / 2, self.y + self.height / 2)

    def aspect(self, image_width: int = 1, image_height: int = 1) -> float:
        """Pixel aspect ratio (width / height) when laid over an image."""
        pixel_height = self.height * image_height
        if pixel_height <= 0:
            return 0.0
        return (self.width * image_width) / pixel_height

    def to_pixels(self, image_width: int, image_height: int) -> Tuple[float, float, float, float]:
        """Scale to (x, y, width, height) in pixels of the given image size."""
        return (
            self.x * image_width,
            self.y * image_height,
            self.width * image_width,
            self.height * image_height,
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class SubjectCluster:
    """Group of skin-tone sample points."""
    center: Tuple[float, float]  # x, y in pixels
    bounds: Tuple[int, int, int, int]  # min_x, min_y, max_x, max_y in pixels
    confidence: float
    point_count: int = 1
    kind: str = 'face'

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class SubjectAnalysis:
    """Subject clusters plus the focus and composition summary around them."""
    subjects: List[SubjectCluster]
    focus_score: float
    symmetry: float
    balance: float
    leading_lines: float

    @property
    def composition_score(self) -> float:
        return (self.symmetry + self.balance + self.leading_lines) / 3

    def to_dict(self) -> dict:
        return {
            'subjects': [s.to_dict() for s in self.subjects],
            'focus_score': self.focus_score,
            'composition': {
                'symmetry': self.symmetry,
                'balance': self.balance,
                'leading_lines': self.leading_lines,
                'overall': self.composition_score,
            },
        }


def skin_tone_score(r, g, b):
    """
    Classify samples as skin tone in YCrCb space.

    Works on scalars or numpy arrays. The classifier is binary: accepted
    samples score SKIN_TONE_ACCEPT, everything else SKIN_TONE_REJECT.
    """
    r = np.asarray(r, dtype=np.float64)
    g = np.asarray(g, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)

    y = 0.299 * r + 0.587 * g + 0.114 * b
    cr = 0.713 * (r - y) + 128
    cb = 0.564 * (b - y) + 128

    is_skin = (
        (y >= 80) & (y <= 250) &
        (cr >= 133) & (cr <= 173) &
        (cb >= 77) & (cb <= 127)
    )
    return np.where(is_skin, defaults.SKIN_TONE_ACCEPT, defaults.SKIN_TONE_REJECT)


def group_points(
    xs: np.ndarray,
    ys: np.ndarray,
    scores: np.ndarray,
    max_distance: float
) -> List[SubjectCluster]:
    """
    Greedily group sample points into clusters.

    Points are visited in the given order; each unvisited point seeds a new
    cluster and absorbs every other unvisited point within ``max_distance``
    of the seed itself. Membership is decided against the seed only, so a
    point joins the earliest seed it is near even if a later cluster would be
    closer. The result depends on input order.

    Args:
        xs, ys: Point coordinates in pixels
        scores: Per-point confidence
        max_distance: Grouping radius in pixels (inclusive)

    Returns:
        Clusters in seed order
    """
    xs = np.asarray(xs, dtype=np.float64)
    ys = np.asarray(ys, dtype=np.float64)
    scores = np.asarray(scores, dtype=np.float64)
    visited = np.zeros(len(xs), dtype=bool)
    clusters = []

    for i in range(len(xs)):
        if visited[i]:
            continue

        distances = np.hypot(xs - xs[i], ys - ys[i])
        members = ~visited & (distances <= max_distance)
        visited |= members

        member_x = xs[members]
        member_y = ys[members]
        bounds = (
            int(member_x.min()), int(member_y.min()),
            int(member_x.max()), int(member_y.max())
        )
        clusters.append(SubjectCluster(
            center=((bounds[0] + bounds[2]) / 2, (bounds[1] + bounds[3]) / 2),
            bounds=bounds,
            confidence=float(scores[members].mean()),
            point_count=int(np.count_nonzero(members)),
        ))

    return clusters


class RegionAnalyzer:
    """Finds visually significant regions from an edge map."""

    def __init__(
        self,
        density_threshold: float = defaults.ROI_DENSITY_THRESHOLD,
        max_regions: int = defaults.ROI_MAX_REGIONS,
        sample_stride: int = defaults.SUBJECT_SAMPLE_STRIDE,
        group_radius: float = defaults.SUBJECT_GROUP_RADIUS,
        edge_detector: Optional[EdgeDetector] = None
    ):
        """
        Initialize region analyzer.

        Args:
            density_threshold: Minimum mean edge magnitude for an ROI window
            max_regions: Number of ROIs to keep
            sample_stride: Pixel stride (both axes) for skin-tone sampling
            group_radius: Subject grouping radius in pixels
            edge_detector: Edge detector used when no edge map is supplied
        """
        self.density_threshold = density_threshold
        self.max_regions = max_regions
        self.sample_stride = sample_stride
        self.group_radius = group_radius
        self.edge_detector = edge_detector or EdgeDetector()

    def find_regions_of_interest(
        self,
        buffer: PixelBuffer,
        edges: Optional[np.ndarray] = None
    ) -> List[Region]:
        """
        Slide a square window over the edge map and keep dense windows.

        The window side is a quarter of the shorter image side and moves by
        half its size, so neighbouring windows overlap by 50%.

        Args:
            buffer: Source pixels (for dimensions)
            edges: Precomputed edge map, detected from buffer if None

        Returns:
            Up to max_regions Regions, densest first
        """
        if edges is None:
            edges = self.edge_detector.detect(buffer)

        width, height = buffer.width, buffer.height
        window = min(width, height) // 4
        if window == 0:
            return []
        step = max(1, window // 2)

        # Summed-area table: window sums in O(1)
        integral = cv2.integral(np.ascontiguousarray(edges), sdepth=cv2.CV_64F)
        area = float(window * window)

        rois = []
        for y in range(0, height - window, step):
            for x in range(0, width - window, step):
                edge_sum = (
                    integral[y + window, x + window]
                    - integral[y, x + window]
                    - integral[y + window, x]
                    + integral[y, x]
                )
                density = edge_sum / area
                if density > self.density_threshold:
                    rois.append(Region(
                        x=x / width,
                        y=y / height,
                        width=window / width,
                        height=window / height,
                        score=float(density),
                    ))

        rois.sort(key=lambda r: r.score, reverse=True)
        return rois[:self.max_regions]

    def detect_subjects(self, buffer: PixelBuffer) -> List[SubjectCluster]:
        """
        Find skin-tone subject clusters.

        Args:
            buffer: Source pixels

        Returns:
            Clusters in scan order of their seed point
        """
        stride = self.sample_stride
        sampled = buffer.pixels[::stride, ::stride]
        scores = skin_tone_score(sampled[:, :, 0], sampled[:, :, 1], sampled[:, :, 2])

        # Row-major nonzero order is the scan order of the sampling grid
        rows, cols = np.nonzero(scores > defaults.SKIN_TONE_THRESHOLD)
        if len(rows) == 0:
            return []

        return group_points(
            cols * stride,
            rows * stride,
            scores[rows, cols],
            self.group_radius
        )

    def analyze_subjects(
        self,
        buffer: PixelBuffer,
        edges: Optional[np.ndarray] = None
    ) -> SubjectAnalysis:
        """
        Detect subjects and summarize focus and whole-frame composition.

        Args:
            buffer: Source pixels
            edges: Precomputed edge map, detected from buffer if None

        Returns:
            SubjectAnalysis
        """
        from .scorer import CompositionScorer

        if edges is None:
            edges = self.edge_detector.detect(buffer)

        scorer = CompositionScorer(edge_detector=self.edge_detector)
        return SubjectAnalysis(
            subjects=self.detect_subjects(buffer),
            focus_score=EdgeDetector.fraction_above(edges, defaults.SHARPNESS_EDGE_THRESHOLD),
            symmetry=scorer.symmetry(buffer),
            balance=scorer.balance(buffer),
            leading_lines=scorer.leading_lines(buffer, edges),
        )

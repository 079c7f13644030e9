"""Composition guide points and guide-proximity crop scoring."""

import math
from dataclasses import dataclass
from typing import List, Optional

from .regions import Region
from . import defaults

FIBONACCI = [1, 1, 2, 3, 5, 8, 13, 21, 34, 55, 89, 144]
GOLDEN_SPIRAL_GROWTH = 0.306349
GOLDEN_SPIRAL_STEP = 0.1


@dataclass(frozen=True)
class GuidePoint:
    """Guide point in the same units as the width/height it was built from."""
    x: float
    y: float
    kind: str


def fibonacci_grid(width: float, height: float) -> List[GuidePoint]:
    """Points at fib[i] / fib[-1] of each dimension, skipping the leading 1."""
    largest = FIBONACCI[-1]
    return [
        GuidePoint(x=fib / largest * width, y=fib / largest * height, kind='fibonacci')
        for fib in FIBONACCI[1:]
    ]


def rule_of_thirds_points(width: float, height: float) -> List[GuidePoint]:
    return [
        GuidePoint(x=width / 3, y=height / 3, kind='thirds'),
        GuidePoint(x=2 * width / 3, y=height / 3, kind='thirds'),
        GuidePoint(x=width / 3, y=2 * height / 3, kind='thirds'),
        GuidePoint(x=2 * width / 3, y=2 * height / 3, kind='thirds'),
    ]


def golden_spiral(width: float, height: float) -> List[GuidePoint]:
    """
    Sample a logarithmic spiral around the frame center.

    The radius starts at half the shorter side and grows by
    exp(0.306349 * angle) over two turns; points outside the frame are
    dropped.
    """
    center_x = width / 2
    center_y = height / 2
    max_radius = min(width, height) / 2

    points = []
    steps = int(math.ceil(4 * math.pi / GOLDEN_SPIRAL_STEP))
    for i in range(steps):
        angle = i * GOLDEN_SPIRAL_STEP
        radius = max_radius * math.exp(GOLDEN_SPIRAL_GROWTH * angle)
        x = center_x + radius * math.cos(angle)
        y = center_y + radius * math.sin(angle)
        if 0 <= x <= width and 0 <= y <= height:
            points.append(GuidePoint(x=x, y=y, kind='spiral'))
    return points


def guide_score(crop: Optional[Region], points: List[GuidePoint]) -> float:
    """
    Score a crop (0-100) by how close its center sits to guide points.

    Crop and points must share units. Each point within half the crop's
    shorter side adds up to 25; an aspect ratio within 0.1 of the golden
    ratio adds 20.
    """
    if crop is None or not points:
        return 0.0

    center_x, center_y = crop.center
    max_distance = min(crop.width, crop.height) / 2

    score = 0.0
    for point in points:
        distance = math.hypot(center_x - point.x, center_y - point.y)
        if distance < max_distance:
            score += (1 - distance / max_distance) * 25

    if abs(crop.aspect() - defaults.GOLDEN_RATIO) < 0.1:
        score += 20

    return min(100.0, score)
